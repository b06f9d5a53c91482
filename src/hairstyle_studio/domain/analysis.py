"""Structured records recovered from model analysis replies."""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

HAIRCUT_PROCEDURE = "컷"


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )


class StyleChange(_CamelModel):
    """One bilingual before/after change between two hairstyles."""

    category: str
    category_en: str = ""
    from_: str = Field(alias="from")
    from_en: str = ""
    to: str
    to_en: str = ""


class RequiredProcedure(_CamelModel):
    """Salon procedure needed to reach the target style."""

    name: str
    name_en: str = ""
    korean_name: str = ""
    reason: str = ""
    reason_en: str = ""
    estimated_cost: str = ""
    required: bool = True


class StyleChangeAnalysis(_CamelModel):
    """Style changes between a current and a target photo."""

    style_changes: list[StyleChange]
    required_procedures: list[RequiredProcedure] = Field(default_factory=list)


class FeasibilityRecord(_CamelModel):
    """Feasibility of a target style for the customer's hair."""

    score: int = Field(ge=0, le=100)
    is_feasible: bool
    estimated_cost: str
    required_procedures: list[str]
    warnings: list[str] = Field(default_factory=list)

    @field_validator("score", mode="before")
    @classmethod
    def _round_score(cls, value: object) -> object:
        if isinstance(value, float):
            return round(value)
        return value


class TechnicalSpecs(_CamelModel):
    """Stylist-facing procedure sheet.

    The values are illustrative placeholders shown to the stylist; they are
    not derived from the photos or from the model's answer. Only
    ``additional_services`` is replaced by the feasibility analysis.
    """

    side_length: str = "12mm 소프트 투블럭"
    top_length: str = "8-10cm 레이어드컷"
    down_perm: bool = True
    additional_services: list[str] = Field(
        default_factory=lambda: ["볼륨매직 필요"]
    )
    fringe: str = "시스루 뱅 스타일"
    color: str = "내추럴 블랙 유지"


STATIC_TECHNICAL_SPECS = TechnicalSpecs()


def _placeholder_change(category: str, category_en: str) -> StyleChange:
    return StyleChange(
        category=category,
        category_en=category_en,
        from_="분석 중",
        from_en="Analyzing...",
        to="분석 중",
        to_en="Analyzing...",
    )


class AnalysisDefaults(_CamelModel):
    """Records returned when a model answer cannot be recovered."""

    style_changes: StyleChangeAnalysis = Field(
        default_factory=lambda: StyleChangeAnalysis(
            style_changes=[
                _placeholder_change("길이", "Length"),
                _placeholder_change("텍스처", "Texture"),
                _placeholder_change("볼륨", "Volume"),
            ],
            required_procedures=[],
        )
    )
    feasibility: FeasibilityRecord = Field(
        default_factory=lambda: FeasibilityRecord(
            score=75,
            is_feasible=True,
            estimated_cost="150,000원",
            required_procedures=["컷", "펌", "볼륨매직"],
            warnings=["모발 상태에 따라 결과가 달라질 수 있습니다"],
        )
    )
