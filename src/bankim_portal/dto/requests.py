"""Request DTOs sent to the backend or accepted by the operator API."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class TranslationUpdateRequest(BaseModel):
    """Request DTO for updating one translation of a content item."""

    content_value: str = Field(..., description="New localized value", min_length=1)


class FormulaData(BaseModel):
    """Calculator formula parameters.

    The backend speaks camelCase for this resource.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    min_term: str
    max_term: str
    financing_percentage: str
    bank_interest_rate: str
    base_interest_rate: str
    variable_interest_rate: str
    interest_change_period: str
    inflation_index: str
    id: int | None = None
    created_at: str | None = None
    updated_at: str | None = None


class MainPageActionUpdate(BaseModel):
    """Partial update of a main page action; unset fields are left alone."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    action_number: int | None = None
    title: str | None = None
    title_ru: str | None = None
    title_he: str | None = None
    title_en: str | None = None
    action_type: str | None = None
    status: Literal["published", "draft", "archived"] | None = None
    created_by: str | None = None


class MainPageActionCreate(BaseModel):
    """New main page action. Identifier and timestamps are assigned by the backend."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    action_number: int = Field(..., ge=1)
    title: str
    title_ru: str = ""
    title_he: str = ""
    title_en: str = ""
    action_type: str = "Дропдаун"
    status: Literal["published", "draft", "archived"] = "draft"
    created_by: str = "content-manager"
    last_modified: datetime | None = None
