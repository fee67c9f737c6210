from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException

from quote_engine.core.errors import InvalidQuoteRecord
from quote_engine.core.security import api_key_auth
from quote_engine.quote.calculator import calculate
from quote_engine.quote.records import import_quote
from quote_engine.schemas.quote import Quote, QuoteCalculation

router = APIRouter(dependencies=[Depends(api_key_auth)])


@router.post("/calculate", response_model=QuoteCalculation)
def calculate_quote(quote: Quote) -> QuoteCalculation:
    """Stateless recalculation of a full quote tree."""
    return calculate(quote)


@router.post("/validate", response_model=Quote)
def validate_quote(record: dict[str, Any] = Body(...)) -> Quote:
    try:
        return import_quote(record)
    except InvalidQuoteRecord as e:
        raise HTTPException(status_code=422, detail=e.errors)
