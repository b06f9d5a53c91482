"""Tests for the consultation HTTP API."""

import asyncio
import json
from urllib.parse import urlsplit

from fastapi.testclient import TestClient

from hairstyle_studio.api.app import create_app
from hairstyle_studio.containers import AppContainer
from hairstyle_studio.services.generation import ReplyPart
from tests.conftest import (
    CUSTOMER_PNG,
    STYLE_JPEG,
    FakeAnalysisClient,
    FakeGenerationClient,
)

HAIR_CONDITION = {
    "curlPattern": "straight",
    "strandTexture": "thick",
    "density": "high",
    "scalpCondition": "normal",
    "chemicalHistory": {"henna": False, "boxDye": True, "relaxer": False},
}


def _upload_customer(client: TestClient, session_id: str = "s-1") -> dict:
    response = client.post(
        "/api/upload/customer",
        data={
            "sessionId": session_id,
            "userInfo": json.dumps({"name": "Kim", "age": 31}),
            "hairCondition": json.dumps(HAIR_CONDITION),
        },
        files={"front": ("front.png", CUSTOMER_PNG, "image/png")},
    )
    assert response.status_code == 200
    return response.json()


def _upload_style(client: TestClient, session_id: str = "s-1") -> dict:
    response = client.post(
        "/api/upload/style",
        data={"sessionId": session_id},
        files={
            "photo1": ("style.jpg", STYLE_JPEG, "image/jpeg"),
            "photo3": ("other.jpg", STYLE_JPEG, "image/jpeg"),
        },
    )
    assert response.status_code == 200
    return response.json()


def test_health(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    assert client.get("/health").json() == {"status": "ok"}


def test_upload_customer_stores_photos_and_session(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    data = _upload_customer(client)

    assert data["success"] is True
    assert data["sessionId"] == "s-1"
    front_url = data["photoUrls"]["front"]
    assert front_url.startswith("http://localhost:3000/uploads/front-")
    assert front_url.endswith(".png")
    served = client.get(urlsplit(front_url).path)
    assert served.status_code == 200
    assert served.content == CUSTOMER_PNG

    record = asyncio.run(container.session_store.get("s-1"))
    assert record is not None
    assert record.user_info == {"name": "Kim", "age": 31}
    assert record.hair_condition is not None
    assert record.hair_condition.chemical_history.box_dye is True


def test_upload_style_keeps_customer_data(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    _upload_customer(client)
    data = _upload_style(client)

    assert sorted(data["stylePhotoUrls"]) == ["photo1", "photo3"]
    record = asyncio.run(container.session_store.get("s-1"))
    assert record is not None
    assert record.user_info == {"name": "Kim", "age": 31}
    assert sorted(record.style_photo_urls) == ["photo1", "photo3"]


def test_upload_requires_session_id(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/api/upload/style",
        files={"photo1": ("style.jpg", STYLE_JPEG, "image/jpeg")},
    )

    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "sessionId is required"}


def test_upload_rejects_oversized_file(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/api/upload/customer",
        data={"sessionId": "s-1"},
        files={"front": ("front.png", b"x" * 2048, "image/png")},
    )

    assert response.status_code == 400
    assert response.json()["success"] is False


def test_upload_rejects_malformed_json_field(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/api/upload/customer",
        data={"sessionId": "s-1", "hairCondition": "{not json"},
    )

    assert response.status_code == 400
    assert "hairCondition" in response.json()["message"]


def test_generate_style_end_to_end(
    container: AppContainer, generation_client: FakeGenerationClient
) -> None:
    client = TestClient(create_app(container))
    customer = _upload_customer(client)
    style = _upload_style(client)

    response = client.post(
        "/api/generate/style",
        json={
            "sessionId": "s-1",
            "customerPhotoUrls": {"front": customer["photoUrls"]["front"], "side": None},
            "stylePhotoUrl": style["stylePhotoUrls"]["photo1"],
            "hairCondition": HAIR_CONDITION,
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["outcome"] == "success"
    assert data["generatedImageUrl"].startswith("http://localhost:3000/uploads/generated-")
    assert data["styleName"] == "스타일 1 적용 결과"
    assert data["technicalSpecs"] == {
        "sideLength": "12mm 소프트 투블럭",
        "topLength": "8-10cm 레이어드컷",
        "downPerm": True,
        "additionalServices": ["볼륨매직 필요"],
        "fringe": "시스루 뱅 스타일",
        "color": "내추럴 블랙 유지",
    }
    assert len(generation_client.calls) == 1


def test_generate_style_degraded_is_still_success(
    container: AppContainer, generation_client: FakeGenerationClient
) -> None:
    client = TestClient(create_app(container))
    customer = _upload_customer(client)
    style = _upload_style(client)
    generation_client.parts = [ReplyPart(text="No image today.")]

    response = client.post(
        "/api/generate/style",
        json={
            "sessionId": "s-1",
            "customerPhotoUrls": {"front": customer["photoUrls"]["front"]},
            "stylePhotoUrl": style["stylePhotoUrls"]["photo1"],
            "hairCondition": {},
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert data["outcome"] == "degraded"
    assert data["generatedImageUrl"] == customer["photoUrls"]["front"]


def test_generate_style_missing_session_id_skips_model(
    container: AppContainer, generation_client: FakeGenerationClient
) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/api/generate/style",
        json={
            "stylePhotoUrl": "http://localhost:3000/uploads/photo1.jpg",
            "hairCondition": HAIR_CONDITION,
        },
    )

    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Missing required fields"}
    assert generation_client.calls == []


def test_generate_style_malformed_inline_image_is_client_error(
    container: AppContainer, generation_client: FakeGenerationClient
) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/api/generate/style",
        json={
            "sessionId": "s-1",
            "stylePhotoUrl": "data:image/jpeg;base64,@@@",
            "hairCondition": HAIR_CONDITION,
        },
    )

    assert response.status_code == 400
    assert response.json()["success"] is False
    assert generation_client.calls == []


def test_invalid_body_returns_envelope(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/api/generate/style",
        content="not json",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Invalid request body"}


def test_analyze_feasibility_endpoint(
    container: AppContainer, analysis_client: FakeAnalysisClient
) -> None:
    client = TestClient(create_app(container))
    customer = _upload_customer(client)
    style = _upload_style(client)
    analysis_client.reply = (
        'here is the result: {"score":82,"isFeasible":true,'
        '"estimatedCost":"100,000원","requiredProcedures":["컷","펌"],"warnings":[]}'
    )

    response = client.post(
        "/api/analyze/feasibility",
        json={
            "sessionId": "s-1",
            "customerPhotoUrls": {"front": customer["photoUrls"]["front"]},
            "selectedStyleImageUrl": style["stylePhotoUrls"]["photo1"],
            "hairCondition": HAIR_CONDITION,
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert data["feasibility"] == {
        "score": 82,
        "isFeasible": True,
        "estimatedCost": "100,000원",
        "requiredProcedures": ["컷", "펌"],
        "warnings": [],
    }
    assert data["technicalSpecs"]["additionalServices"] == ["펌"]
    assert data["outcome"] == "success"


def test_analyze_style_changes_endpoint_fallback(
    container: AppContainer, analysis_client: FakeAnalysisClient
) -> None:
    client = TestClient(create_app(container))
    customer = _upload_customer(client)
    style = _upload_style(client)
    analysis_client.reply = "I cannot determine this."

    response = client.post(
        "/api/analyze/style-changes",
        json={
            "sessionId": "s-1",
            "customerPhotoUrl": customer["photoUrls"]["front"],
            "selectedStyleImageUrl": style["stylePhotoUrls"]["photo1"],
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["outcome"] == "degraded"
    assert data["requiredProcedures"] == []
    assert data["styleChanges"][0] == {
        "category": "길이",
        "categoryEn": "Length",
        "from": "분석 중",
        "fromEn": "Analyzing...",
        "to": "분석 중",
        "toEn": "Analyzing...",
    }


def test_analyze_style_changes_requires_photos(
    container: AppContainer, analysis_client: FakeAnalysisClient
) -> None:
    client = TestClient(create_app(container))

    response = client.post("/api/analyze/style-changes", json={"sessionId": "s-1"})

    assert response.status_code == 400
    assert analysis_client.calls == []


def test_partial_customer_uploads_keep_stored_photos(
    container: AppContainer,
) -> None:
    client = TestClient(create_app(container))
    first = _upload_customer(client)

    info_only = client.post(
        "/api/upload/customer",
        data={"sessionId": "s-1", "userInfo": json.dumps({"name": "Lee"})},
    )
    side_only = client.post(
        "/api/upload/customer",
        data={"sessionId": "s-1"},
        files={"side": ("side.png", CUSTOMER_PNG, "image/png")},
    )

    assert info_only.status_code == 200
    assert info_only.json()["photoUrls"] == {}
    assert side_only.status_code == 200
    record = asyncio.run(container.session_store.get("s-1"))
    assert record is not None
    assert record.user_info == {"name": "Lee"}
    assert record.customer_photo_urls["front"] == first["photoUrls"]["front"]
    assert record.customer_photo_urls["side"] == side_only.json()["photoUrls"]["side"]
    assert record.hair_condition is not None


def test_generate_style_accepts_numeric_hair_condition(
    container: AppContainer, generation_client: FakeGenerationClient
) -> None:
    client = TestClient(create_app(container))
    customer = _upload_customer(client)
    style = _upload_style(client)

    response = client.post(
        "/api/generate/style",
        json={
            "sessionId": "s-1",
            "customerPhotoUrls": {"front": customer["photoUrls"]["front"]},
            "stylePhotoUrl": style["stylePhotoUrls"]["photo1"],
            "hairCondition": {"curlPattern": 3},
        },
    )

    assert response.status_code == 200
    assert response.json()["outcome"] == "success"
    instruction, _ = generation_client.calls[0]
    assert "Curl pattern: 3" in instruction
