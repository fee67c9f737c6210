"""Master item catalog lookups (read-only for the quote engine)."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from quote_engine.db.models import MasterItem
from quote_engine.schemas.quote import MasterItem as MasterItemDTO


def _like_pattern(text: str) -> str:
    # Search text is literal; LIKE wildcards in it must not match.
    escaped = text.lower().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def list_master_items(
    db: Session,
    *,
    search: str | None = None,
    category: str | None = None,
    active_only: bool = True,
) -> list[MasterItemDTO]:
    q = db.query(MasterItem)
    if active_only:
        q = q.filter(MasterItem.is_active.is_(True))
    if category:
        q = q.filter(MasterItem.category == category)
    if search:
        q = q.filter(func.lower(MasterItem.name).like(_like_pattern(search), escape="\\"))
    rows = q.order_by(MasterItem.category.asc(), MasterItem.name.asc()).all()
    return [MasterItemDTO.model_validate(r) for r in rows]


def get_master_item(db: Session, master_item_id: str) -> Optional[MasterItemDTO]:
    row = db.query(MasterItem).filter(MasterItem.id == master_item_id).one_or_none()
    return MasterItemDTO.model_validate(row) if row else None
