"""Instruction text sent to the model service."""

from hairstyle_studio.domain.hair import HairCondition

NOT_SPECIFIED_EN = "Not specified"
NOT_SPECIFIED_KO = "미지정"


def _yes_no(flag: bool) -> str:
    return "Yes" if flag else "No"


def _ko_flag(flag: bool, present: str = "있음") -> str:
    return present if flag else "없음"


def generation_prompt(condition: HairCondition) -> str:
    """Build the hairstyle transplant instruction for the image model."""
    history = condition.chemical_history
    return f"""Apply the hairstyle from the second image to the first image.

First image: Customer photo - keep face, skin, and body exactly as shown.
Second image: Reference hairstyle - extract ONLY the hairstyle (hair shape, length, texture, color, styling).

Requirements:
- Extract and apply ONLY the hairstyle from the reference image
- Keep customer's face, facial features, skin tone, and body completely unchanged
- Match the hairstyle to customer's head size and face shape naturally
- Generate a single high-quality, photorealistic output image

Customer hair condition for realistic application:
- Curl pattern: {condition.curl_pattern or NOT_SPECIFIED_EN}
- Strand texture: {condition.strand_texture or NOT_SPECIFIED_EN}
- Density: {condition.density or NOT_SPECIFIED_EN}
- Scalp condition: {condition.scalp_condition or NOT_SPECIFIED_EN}
- Chemical history: Henna({_yes_no(history.henna)}), Box dye({_yes_no(history.box_dye)}), Relaxer({_yes_no(history.relaxer)}), Bleach({history.bleach or "None"})"""  # noqa: E501


def _condition_block_ko(condition: HairCondition, *, annotate: bool) -> str:
    history = condition.chemical_history
    henna = _ko_flag(history.henna, "있음 (⚠️ 펌/염색 안 먹힘)" if annotate else "있음")
    box_dye = _ko_flag(history.box_dye, "있음 (얼룩 가능)" if annotate else "있음")
    relaxer = _ko_flag(
        history.relaxer, "있음 (강력한 약품 사용 이력)" if annotate else "있음"
    )
    return f"""고객 모발 상태:
- 곱슬 패턴: {condition.curl_pattern or NOT_SPECIFIED_KO}
- 모발 굵기: {condition.strand_texture or NOT_SPECIFIED_KO}
- 밀도: {condition.density or NOT_SPECIFIED_KO}
- 두피 상태: {condition.scalp_condition or NOT_SPECIFIED_KO}
- 시술 이력:
  * 헤나: {henna}
  * 박스 염색: {box_dye}
  * 릴랙서: {relaxer}
  * 탈색: {history.bleach or "없음"}"""


_STYLE_CHANGES_SCHEMA = """{
  "styleChanges": [
    {
      "category": "길이",
      "categoryEn": "Length",
      "from": "현재 상태 (예: 짧음 5cm)",
      "fromEn": "Current state (e.g., Short 5cm)",
      "to": "목표 상태 (예: 중간 8-10cm)",
      "toEn": "Target state (e.g., Medium 8-10cm)"
    },
    {
      "category": "텍스처",
      "categoryEn": "Texture",
      "from": "현재 상태 (예: 웨이브)",
      "fromEn": "Current state (e.g., Wavy)",
      "to": "목표 상태 (예: 스트레이트)",
      "toEn": "Target state (e.g., Straight)"
    },
    {
      "category": "볼륨",
      "categoryEn": "Volume",
      "from": "현재 상태",
      "fromEn": "Current state",
      "to": "목표 상태",
      "toEn": "Target state"
    }
  ],
  "requiredProcedures": [
    {
      "name": "매직 스트레이트",
      "nameEn": "Magic Straightening",
      "koreanName": "매직 스트레이트",
      "reason": "자연스러운 웨이브 모발에서 스트레이트 텍스처를 얻기 위해",
      "reasonEn": "To achieve straight texture from naturally wavy hair",
      "estimatedCost": "₩80,000-120,000",
      "required": true
    }
  ]
}"""

_FEASIBILITY_SCHEMA = """{
  "score": 0-100,
  "isFeasible": true/false,
  "estimatedCost": "예상 비용",
  "requiredProcedures": ["필요한 시술 목록"],
  "warnings": ["주의사항 목록"]
}"""


def style_changes_prompt(condition: HairCondition) -> str:
    """Build the before/after comparison instruction."""
    return f"""다음 두 이미지를 비교하여 헤어스타일의 변경사항을 상세히 분석해주세요.

첫 번째 이미지: 고객의 현재 헤어스타일
두 번째 이미지: 목표 헤어스타일 (AI 합성 결과)

{_condition_block_ko(condition, annotate=False)}

다음 형식으로 JSON 응답을 제공해주세요 (한국어와 영어 모두 포함).
카테고리는 길이, 텍스처, 볼륨, 컬러, 스타일링 중에서 선택하세요:
{_STYLE_CHANGES_SCHEMA}

중요: 실제 이미지를 분석하여 정확한 변경사항을 파악하세요. 최소 3개 이상의 변경사항을 포함하세요."""  # noqa: E501


def feasibility_prompt(condition: HairCondition) -> str:
    """Build the feasibility assessment instruction."""
    return f"""다음 정보를 바탕으로 헤어스타일의 실현 가능성을 분석해주세요.

첫 번째 이미지: 고객의 현재 헤어스타일
두 번째 이미지: 목표 헤어스타일 (AI 합성 결과)

{_condition_block_ko(condition, annotate=True)}

두 이미지를 비교하여 다음 형식으로 JSON 응답을 제공해주세요:
{_FEASIBILITY_SCHEMA}"""
