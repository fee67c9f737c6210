"""Canned group trees and their application to a quote."""

from __future__ import annotations

import logging
from typing import Iterable, Iterator, Mapping

from pydantic import ValidationError

from quote_engine.core.errors import InvalidTemplate, TemplateNotFound
from quote_engine.quote.mutations import infer_is_service
from quote_engine.schemas.quote import DEFAULT_UNIT, Detail, Group, Item, Quote
from quote_engine.schemas.template import (
    QuoteTemplate,
    TemplateDetail,
    TemplateGroup,
    TemplateItem,
    TemplateSummary,
)

logger = logging.getLogger(__name__)


class TemplateCatalog(Mapping[str, QuoteTemplate]):
    """Read-only mapping of template id to template, validated on construction."""

    def __init__(self, templates: Iterable[QuoteTemplate | dict] = ()) -> None:
        self._templates: dict[str, QuoteTemplate] = {}
        for raw in templates:
            try:
                tpl = raw if isinstance(raw, QuoteTemplate) else QuoteTemplate.model_validate(raw)
            except ValidationError as e:
                raise InvalidTemplate(str(e)) from e
            if tpl.id in self._templates:
                raise InvalidTemplate(f"Duplicate template id: {tpl.id!r}")
            self._templates[tpl.id] = tpl

    def __getitem__(self, template_id: str) -> QuoteTemplate:
        return self._templates[template_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._templates)

    def __len__(self) -> int:
        return len(self._templates)

    def summaries(self, *, active_only: bool = True) -> list[TemplateSummary]:
        return [
            TemplateSummary(
                id=t.id,
                name=t.name,
                category=t.category,
                description=t.description,
                group_count=len(t.groups),
            )
            for t in self._templates.values()
            if t.is_active or not active_only
        ]


def _detail_from_template(detail: TemplateDetail) -> Detail:
    return Detail(
        name=detail.name,
        description="",
        quantity=detail.quantity,
        days=detail.days or 1,
        unit=DEFAULT_UNIT,
        unit_price=detail.unit_price,
        # Templates carry no service flag; infer it the same way catalog snapshots do
        # instead of forcing False, so preset editing/production lines count as services.
        is_service=infer_is_service(detail.name),
        cost_price=0,
        supplier_name_snapshot="",
    )


def groups_from_template(template: QuoteTemplate) -> tuple[Group, ...]:
    return tuple(
        Group(
            name=group.name,
            sort_order=gi,
            include_in_fee=group.include_in_fee,
            items=[
                Item(
                    name=item.name,
                    sort_order=ii,
                    include_in_fee=item.include_in_fee,
                    details=[_detail_from_template(d) for d in item.details],
                )
                for ii, item in enumerate(group.items)
            ],
        )
        for gi, group in enumerate(template.groups)
    )


def apply_template(quote: Quote, template_id: str, catalog: Mapping[str, QuoteTemplate]) -> Quote:
    """Replace every group of ``quote`` with the tree of ``template_id``.

    Existing groups are discarded, not merged.
    """
    if template_id not in catalog:
        raise TemplateNotFound(template_id)
    template = catalog[template_id]
    logger.info("applying template %s (%d groups)", template.id, len(template.groups))
    return quote.model_copy(
        update={
            "groups": groups_from_template(template),
            "project_title": f"{template.name} 프로젝트",
            "template_id": template.id,
        }
    )


def template_from_quote(
    quote: Quote,
    *,
    template_id: str,
    name: str,
    category: str = "",
    description: str | None = None,
) -> QuoteTemplate:
    """Capture the group tree of ``quote`` as a reusable template.

    Only names, fee flags, quantities, days and unit prices are kept.
    """
    try:
        return QuoteTemplate(
            id=template_id,
            name=name.strip(),
            category=category,
            description=(description or "").strip() or None,
            groups=[
                TemplateGroup(
                    name=g.name,
                    include_in_fee=g.include_in_fee,
                    items=[
                        TemplateItem(
                            name=i.name,
                            include_in_fee=i.include_in_fee,
                            details=[
                                TemplateDetail(
                                    name=d.name,
                                    quantity=d.quantity,
                                    days=d.days,
                                    unit_price=d.unit_price,
                                )
                                for d in i.details
                            ],
                        )
                        for i in g.items
                    ],
                )
                for g in quote.groups
            ],
        )
    except ValidationError as e:
        raise InvalidTemplate(str(e)) from e


DEFAULT_TEMPLATES = TemplateCatalog(
    [
        {
            "id": "promo-video",
            "name": "홍보 영상",
            "category": "video",
            "description": "Single promotional video, pre-production to delivery.",
            "groups": [
                {
                    "name": "기획",
                    "include_in_fee": True,
                    "items": [
                        {
                            "name": "기획 및 구성",
                            "include_in_fee": True,
                            "details": [
                                {"name": "콘셉트 기획", "quantity": 1, "days": 1, "unit_price": 500000},
                                {"name": "스토리보드 제작", "quantity": 1, "days": 2, "unit_price": 300000},
                            ],
                        }
                    ],
                },
                {
                    "name": "촬영",
                    "include_in_fee": True,
                    "items": [
                        {
                            "name": "촬영 인력",
                            "include_in_fee": True,
                            "details": [
                                {"name": "감독", "quantity": 1, "days": 1, "unit_price": 800000},
                                {"name": "촬영감독", "quantity": 1, "days": 1, "unit_price": 600000},
                            ],
                        },
                        {
                            "name": "장비",
                            "include_in_fee": True,
                            "details": [
                                {"name": "카메라 패키지", "quantity": 1, "days": 1, "unit_price": 400000},
                            ],
                        },
                    ],
                },
                {
                    "name": "후반 작업",
                    "include_in_fee": True,
                    "items": [
                        {
                            "name": "편집",
                            "include_in_fee": True,
                            "details": [
                                {"name": "영상 편집", "quantity": 1, "days": 3, "unit_price": 350000},
                                {"name": "모션그래픽 제작", "quantity": 1, "days": 2, "unit_price": 400000},
                            ],
                        }
                    ],
                },
            ],
        },
        {
            "id": "event-live",
            "name": "행사 중계",
            "category": "event",
            "description": "Live event coverage; venue costs pass through without fee.",
            "groups": [
                {
                    "name": "중계 운영",
                    "include_in_fee": True,
                    "items": [
                        {
                            "name": "중계 인력",
                            "include_in_fee": True,
                            "details": [
                                {"name": "PD", "quantity": 1, "days": 1, "unit_price": 700000},
                                {"name": "카메라 오퍼레이터", "quantity": 3, "days": 1, "unit_price": 400000},
                            ],
                        }
                    ],
                },
                {
                    "name": "대관 및 실비",
                    "include_in_fee": False,
                    "items": [
                        {
                            "name": "대관",
                            "include_in_fee": False,
                            "details": [
                                {"name": "행사장 대관", "quantity": 1, "days": 1, "unit_price": 2000000},
                            ],
                        }
                    ],
                },
            ],
        },
        {
            "id": "edit-only",
            "name": "편집 전용",
            "category": "post",
            "description": "Editing of client-supplied footage.",
            "groups": [
                {
                    "name": "편집",
                    "include_in_fee": True,
                    "items": [
                        {
                            "name": "컷 편집",
                            "include_in_fee": True,
                            "details": [
                                {"name": "영상 편집", "quantity": 1, "days": 2, "unit_price": 350000},
                                {"name": "자막 제작", "quantity": 1, "days": 1, "unit_price": 150000},
                            ],
                        }
                    ],
                }
            ],
        },
    ]
)
