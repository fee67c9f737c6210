from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from quote_engine.core.security import api_key_auth
from quote_engine.db.crud.master_items import list_master_items
from quote_engine.db.crud.suppliers import list_suppliers
from quote_engine.db.session import get_db
from quote_engine.schemas.quote import MasterItem, Supplier

router = APIRouter(dependencies=[Depends(api_key_auth)])


@router.get("/master-items", response_model=list[MasterItem])
def get_master_items(
    search: Optional[str] = Query(default=None, description="Filter by item name (case-insensitive)"),
    category: Optional[str] = Query(default=None, description="Exact category match"),
    db: Session = Depends(get_db),
) -> list[MasterItem]:
    return list_master_items(db, search=search, category=category)


@router.get("/suppliers", response_model=list[Supplier])
def get_suppliers(db: Session = Depends(get_db)) -> list[Supplier]:
    return list_suppliers(db)
