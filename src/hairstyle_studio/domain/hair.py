"""Hair condition models supplied by the salon intake form."""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class ChemicalHistory(BaseModel):
    """Past chemical treatments on the customer's hair."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        coerce_numbers_to_str=True,
    )

    henna: bool = False
    box_dye: bool = False
    relaxer: bool = False
    bleach: str | None = None

    @field_validator("henna", "box_dye", "relaxer", mode="before")
    @classmethod
    def _coerce_flag(cls, value: object) -> object:
        if value is None or value == "":
            return False
        return value

    @field_validator("bleach", mode="before")
    @classmethod
    def _coerce_bleach(cls, value: object) -> object:
        # The intake form sends either a free-text description or a checkbox.
        if isinstance(value, bool):
            return "Yes" if value else None
        if isinstance(value, str) and not value.strip():
            return None
        return value


class HairCondition(BaseModel):
    """Customer hair condition; ``None`` fields mean "not specified"."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        coerce_numbers_to_str=True,
    )

    curl_pattern: str | None = None
    strand_texture: str | None = None
    density: str | None = None
    scalp_condition: str | None = None
    chemical_history: ChemicalHistory = Field(default_factory=ChemicalHistory)

    @field_validator(
        "curl_pattern", "strand_texture", "density", "scalp_condition", mode="before"
    )
    @classmethod
    def _blank_to_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("chemical_history", mode="before")
    @classmethod
    def _missing_history(cls, value: object) -> object:
        return {} if value is None else value
