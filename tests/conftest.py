from __future__ import annotations

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from quote_engine.core.config import get_settings
from quote_engine.db import models  # noqa: F401  (registers tables on Base)
from quote_engine.db.base import Base
from quote_engine.quote.mutations import add_detail, add_group, add_item, update_detail, update_group
from quote_engine.schemas.quote import Quote


@pytest.fixture()
def db_session():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def api_headers():
    return {"X-API-Key": get_settings().API_KEY}


def build_quote(*groups, **quote_fields) -> Quote:
    """Build a quote from (name, include_in_fee, [detail patch, ...]) tuples, one item per group."""
    q = Quote(**quote_fields)
    for gi, (name, include_in_fee, details) in enumerate(groups):
        q = add_group(q, name)
        q = update_group(q, gi, {"include_in_fee": include_in_fee})
        q = add_item(q, gi, f"{name} item")
        for di, patch in enumerate(details):
            q = add_detail(q, gi, 0)
            q = update_detail(q, gi, 0, di, patch)
    return q


@pytest.fixture()
def quote_builder():
    return build_quote
