"""Dev seed script: create the catalog tables and insert a handful of master
items and suppliers so the catalog endpoints have something to return.

Usage:
  python scripts/seed_catalog.py

Requirements:
  - DATABASE_URL configured (e.g., via .env); defaults to a local SQLite file
"""

from __future__ import annotations

from quote_engine.db.base import Base
from quote_engine.db.models import MasterItem, Supplier
from quote_engine.db.session import SessionLocal, engine


MASTER_ITEMS = [
    {"name": "영상 편집", "category": "post", "default_unit": "일", "default_unit_price": 350000},
    {"name": "모션그래픽 제작", "category": "post", "default_unit": "일", "default_unit_price": 400000},
    {"name": "촬영감독", "category": "crew", "default_unit": "일", "default_unit_price": 600000},
    {"name": "카메라 패키지", "category": "equipment", "default_unit": "세트", "default_unit_price": 400000},
    {
        "name": "드론 촬영",
        "category": "crew",
        "description": "Pilot and drone, licensed operation",
        "default_unit": "일",
        "default_unit_price": 900000,
        "is_service": True,
    },
]

SUPPLIERS = [
    {"name": "한빛 렌탈", "contact_person": "김하늘", "phone": "02-000-0000"},
    {"name": "스튜디오 온", "email": "contact@studio-on.example"},
]


def seed(db) -> dict[str, int]:
    Base.metadata.create_all(bind=engine)
    for row in MASTER_ITEMS:
        db.add(MasterItem(**row))
    for row in SUPPLIERS:
        db.add(Supplier(**row))
    db.commit()
    return {"master_items": len(MASTER_ITEMS), "suppliers": len(SUPPLIERS)}


def main() -> None:
    db = SessionLocal()
    try:
        print(seed(db))
    finally:
        db.close()


if __name__ == "__main__":
    main()
