from fastapi import APIRouter, Depends, HTTPException

from quote_engine.core.errors import TemplateNotFound
from quote_engine.core.security import api_key_auth
from quote_engine.quote.templates import DEFAULT_TEMPLATES, apply_template
from quote_engine.schemas.quote import Quote
from quote_engine.schemas.template import TemplateSummary

router = APIRouter(dependencies=[Depends(api_key_auth)])


@router.get("", response_model=list[TemplateSummary])
def list_templates() -> list[TemplateSummary]:
    return DEFAULT_TEMPLATES.summaries()


@router.post("/{template_id}/apply", response_model=Quote)
def apply_quote_template(template_id: str, quote: Quote) -> Quote:
    try:
        return apply_template(quote, template_id, DEFAULT_TEMPLATES)
    except TemplateNotFound:
        raise HTTPException(status_code=404, detail="Template not found")
