"""Pydantic models for consultation API request bodies."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from hairstyle_studio.domain.hair import HairCondition


class _Request(BaseModel):
    # Required fields are checked by the services so that a missing value is
    # reported in the standard error envelope.
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )


class GenerateStyleRequest(_Request):
    """Body of a style generation request."""

    session_id: str | None = None
    customer_photo_urls: dict[str, str | None] | None = None
    style_photo_url: str | None = None
    hair_condition: HairCondition | None = None


class StyleChangesRequest(_Request):
    """Body of a style-change analysis request."""

    session_id: str | None = None
    customer_photo_url: str | None = None
    selected_style_image_url: str | None = None
    hair_condition: HairCondition | None = None


class FeasibilityRequest(_Request):
    """Body of a feasibility analysis request."""

    session_id: str | None = None
    customer_photo_urls: dict[str, str | None] | None = None
    selected_style_image_url: str | None = None
    hair_condition: HairCondition | None = None
