from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class TemplateDetail(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    quantity: float = Field(gt=0)
    days: float = Field(default=1, gt=0)
    unit_price: int = Field(ge=0)


class TemplateItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    include_in_fee: bool = True
    details: tuple[TemplateDetail, ...] = Field(min_length=1)


class TemplateGroup(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    include_in_fee: bool = True
    items: tuple[TemplateItem, ...] = Field(min_length=1)


class QuoteTemplate(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str = Field(min_length=1, max_length=255)
    category: str = ""
    description: str | None = None
    is_active: bool = True
    groups: tuple[TemplateGroup, ...] = Field(min_length=1)


class TemplateSummary(BaseModel):
    id: str
    name: str
    category: str
    description: str | None = None
    group_count: int
