import pytest
from pydantic import ValidationError

from quote_engine.core.errors import IndexOutOfRange, VersionConflict
from quote_engine.quote import mutations as m
from quote_engine.schemas.quote import Item, MasterItem, Quote, Supplier


def _one_detail_quote() -> Quote:
    q = m.add_group(Quote(), "촬영")
    q = m.add_item(q, 0, "인력")
    return m.add_detail(q, 0, 0)


def test_add_group_defaults():
    q = m.add_group(m.add_group(Quote(), "A"), "B")
    assert [g.name for g in q.groups] == ["A", "B"]
    assert [g.sort_order for g in q.groups] == [0, 1]
    assert all(g.include_in_fee and g.items == () for g in q.groups)


def test_add_item_copies_group_fee_flag():
    q = m.add_group(Quote(), "실비")
    q = m.update_group(q, 0, {"include_in_fee": False})
    q = m.add_item(q, 0, "대관")
    assert q.groups[0].items[0].include_in_fee is False
    assert q.groups[0].items[0].sort_order == 0

    # Flipping the group later does not touch existing items.
    q = m.update_group(q, 0, {"include_in_fee": True})
    assert q.groups[0].items[0].include_in_fee is False
    q = m.update_item(q, 0, 0, {"include_in_fee": True})
    assert q.groups[0].items[0].include_in_fee is True


def test_add_detail_blank_defaults():
    d = _one_detail_quote().groups[0].items[0].details[0]
    assert (d.quantity, d.days, d.unit, d.unit_price, d.is_service, d.cost_price) == (1, 1, "개", 0, False, 0)
    assert d.name == "" and d.description == ""


def test_add_detail_from_master_snapshot():
    q = m.add_item(m.add_group(Quote(), "후반"), 0, "편집")
    master = MasterItem(name="영상 편집", description=None, default_unit="일", default_unit_price=350000)
    q = m.add_detail_from_master(q, 0, 0, master)
    d = q.groups[0].items[0].details[0]
    assert d.name == "영상 편집"
    assert d.description == ""
    assert d.unit == "일"
    assert d.unit_price == 350000
    assert (d.quantity, d.days, d.cost_price) == (1, 1, 0)
    assert d.is_service is True


@pytest.mark.parametrize(
    "name, explicit, expected",
    [
        ("모션그래픽 제작", None, True),
        ("영상 편집", None, True),
        ("카메라 패키지", None, False),
        ("모션그래픽 제작", False, False),
        ("카메라 패키지", True, True),
    ],
)
def test_is_service_inference(name, explicit, expected):
    assert m.detail_from_master(MasterItem(name=name, is_service=explicit)).is_service is expected


def test_catalog_changes_do_not_reach_inserted_details():
    catalog = {"m1": MasterItem(id="m1", name="촬영감독", default_unit_price=600000)}
    q = m.add_item(m.add_group(Quote(), "촬영"), 0, "인력")
    q = m.add_detail_from_master(q, 0, 0, catalog["m1"])
    catalog["m1"] = catalog["m1"].model_copy(update={"name": "촬영감독 (수정)", "default_unit_price": 1})
    d = q.groups[0].items[0].details[0]
    assert d.name == "촬영감독"
    assert d.unit_price == 600000


def test_mutations_do_not_touch_their_input():
    q0 = Quote()
    q1 = m.add_group(q0, "A")
    q2 = m.add_item(q1, 0, "i")
    q3 = m.add_detail(q2, 0, 0)
    q4 = m.update_detail(q3, 0, 0, 0, {"unit_price": 5000})
    assert q0.groups == ()
    assert q1.groups[0].items == ()
    assert q2.groups[0].items[0].details == ()
    assert q3.groups[0].items[0].details[0].unit_price == 0
    assert q4.groups[0].items[0].details[0].unit_price == 5000
    assert q4.groups is not q3.groups
    assert q4.groups[0].items is not q3.groups[0].items


def test_untouched_groups_are_shared():
    q = m.add_group(m.add_group(Quote(), "A"), "B")
    q2 = m.update_group(q, 1, {"name": "B2"})
    assert q2.groups[0] is q.groups[0]
    assert q2.groups[1].name == "B2"


def test_shared_subtrees_are_read_only():
    q = m.add_item(m.add_group(m.add_group(Quote(), "A"), "B"), 0, "i")
    q2 = m.update_group(q, 1, {"name": "B2"})
    shared = q2.groups[0]
    assert shared is q.groups[0]
    assert isinstance(shared.items, tuple)
    with pytest.raises(AttributeError):
        shared.items.append(Item(name="extra"))
    with pytest.raises(ValidationError):
        shared.items = ()
    assert [i.name for i in q.groups[0].items] == ["i"]


def test_list_input_is_stored_as_tuples():
    q = Quote(groups=[{"name": "g", "items": [{"name": "i", "details": [{"name": "d"}]}]}])
    assert isinstance(q.groups, tuple)
    assert isinstance(q.groups[0].items[0].details, tuple)


def test_update_is_shallow_merge():
    q = _one_detail_quote()
    q = m.update_detail(q, 0, 0, 0, {"name": "감독", "unit_price": 800000})
    q = m.update_detail(q, 0, 0, 0, {"days": 2})
    d = q.groups[0].items[0].details[0]
    assert (d.name, d.unit_price, d.days) == ("감독", 800000, 2)


def test_update_coerces_invalid_numbers():
    q = m.update_detail(
        _one_detail_quote(), 0, 0, 0, {"quantity": "abc", "days": None, "unit_price": float("nan"), "cost_price": -5}
    )
    d = q.groups[0].items[0].details[0]
    assert (d.quantity, d.days, d.unit_price, d.cost_price) == (1.0, 1.0, 0, 0)


def test_remove_keeps_sibling_sort_order():
    q = Quote()
    for name in "ABC":
        q = m.add_group(q, name)
    q = m.remove_group(q, 0)
    assert [(g.name, g.sort_order) for g in q.groups] == [("B", 1), ("C", 2)]
    # New groups take the current length, even if that repeats a hint.
    q = m.add_group(q, "D")
    assert q.groups[-1].sort_order == 2


def test_remove_item_and_detail():
    q = _one_detail_quote()
    q = m.add_detail(q, 0, 0)
    q = m.update_detail(q, 0, 0, 1, {"name": "second"})
    q = m.remove_detail(q, 0, 0, 0)
    assert [d.name for d in q.groups[0].items[0].details] == ["second"]
    q = m.remove_item(q, 0, 0)
    assert q.groups[0].items == ()


@pytest.mark.parametrize(
    "op",
    [
        lambda q: m.update_group(q, 3, {"name": "x"}),
        lambda q: m.remove_group(q, -1),
        lambda q: m.add_item(q, 9),
        lambda q: m.update_item(q, 0, 4, {"name": "x"}),
        lambda q: m.remove_item(q, 0, 1),
        lambda q: m.add_detail(q, 0, 2),
        lambda q: m.add_detail_from_master(q, 1, 0, MasterItem(name="x")),
        lambda q: m.update_detail(q, 0, 0, 5, {"name": "x"}),
        lambda q: m.remove_detail(q, 0, 0, -1),
    ],
)
def test_out_of_range_is_a_no_op(op):
    q = _one_detail_quote()
    assert op(q) is q


def test_strict_mode_raises():
    q = _one_detail_quote()
    with pytest.raises(IndexOutOfRange) as exc:
        m.update_item(q, 0, 3, {"name": "x"}, strict=True)
    assert exc.value.level == "item"
    assert exc.value.index == 3
    with pytest.raises(IndexOutOfRange):
        m.remove_detail(q, 0, 0, 1, strict=True)


def test_assign_supplier_snapshots_name():
    q = m.assign_supplier(_one_detail_quote(), 0, 0, 0, Supplier(id="s1", name="한빛 렌탈"))
    d = q.groups[0].items[0].details[0]
    assert (d.supplier_id, d.supplier_name_snapshot) == ("s1", "한빛 렌탈")
    q = m.assign_supplier(q, 0, 0, 0, None)
    d = q.groups[0].items[0].details[0]
    assert (d.supplier_id, d.supplier_name_snapshot) == (None, "")


def test_update_quote_fields():
    q = m.update_quote(Quote(), {"project_title": "런칭 영상", "vat_type": "inclusive", "agency_fee_rate": 1.5})
    assert q.project_title == "런칭 영상"
    assert q.vat_type == "inclusive"
    assert q.agency_fee_rate == 1.0


def test_update_quote_version_only_moves_forward():
    q = Quote(version=5)
    with pytest.raises(VersionConflict) as exc:
        m.update_quote(q, {"version": 2})
    assert (exc.value.expected, exc.value.actual) == (2, 5)
    assert m.update_quote(q, {"version": 6}).version == 6
    assert m.update_quote(q, {"project_title": "x"}).version == 5
