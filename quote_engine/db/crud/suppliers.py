"""Supplier lookups: the engine only keeps id + name snapshots."""

from __future__ import annotations

from typing import Optional

from sqlalchemy.orm import Session

from quote_engine.db.models import Supplier
from quote_engine.schemas.quote import Supplier as SupplierDTO


def list_suppliers(db: Session, *, active_only: bool = True) -> list[SupplierDTO]:
    q = db.query(Supplier)
    if active_only:
        q = q.filter(Supplier.is_active.is_(True))
    return [SupplierDTO.model_validate(s) for s in q.order_by(Supplier.name.asc()).all()]


def get_supplier(db: Session, supplier_id: str) -> Optional[SupplierDTO]:
    s = db.query(Supplier).filter(Supplier.id == supplier_id).one_or_none()
    return SupplierDTO.model_validate(s) if s else None
