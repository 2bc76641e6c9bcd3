# app/services/test_openai_service.py
"""
OpenAIService 품종 식별 / 보조 분석 테스트 (실제 네트워크 호출 없음)

사용법: python -m pytest app/services/test_openai_service.py -v
"""

import json
import pytest

from app.core.exceptions import (
    ConfigurationError, RateLimitError, AuthError, ProcessingError, NetworkError
)
from app.models.image_ref import LocalFile, RemoteUrl
from app.services.openai_service import OpenAIService, is_api_key_configured
from app.services.prompts import BREED_RESPONSE_FORMAT, IDENTIFICATION_SYSTEM_PROMPT


@pytest.fixture
def service(fake_openai_client):
    return OpenAIService(client=fake_openai_client, api_key="sk-test-key")


@pytest.fixture
def jpeg():
    return LocalFile(data=b"\xff\xd8\xff" + b"0" * 2048, content_type="image/jpeg", filename="gir.jpg")


@pytest.mark.parametrize("api_key", [None, "", "   ", "your-openai-api-key-here"])
def test_missing_or_placeholder_key_blocks_call(fake_openai_client, jpeg, api_key):
    """키가 없거나 placeholder면 네트워크 호출 전에 ConfigurationError"""
    service = OpenAIService(client=fake_openai_client, api_key=api_key)

    with pytest.raises(ConfigurationError):
        service.identify_breed(jpeg)
    with pytest.raises(ConfigurationError):
        service.analyze_image(jpeg, "health")

    assert fake_openai_client.completions.calls == []
    assert not is_api_key_configured(api_key)

def test_identify_breed_returns_prediction(service, jpeg):
    prediction = service.identify_breed(jpeg)

    assert prediction.breed_name == "Gir"
    assert prediction.confidence == 0.92
    assert prediction.breed_info.origin == "Gujarat, India"
    assert prediction.breed_info.primary_use == "Milk production"
    assert prediction.breed_info.milk_yield is None
    assert prediction.analysis_notes.startswith("Characteristic")
    assert prediction.id and prediction.timestamp > 0
    # 업로드 파일은 기록에 남길 URL이 없음
    assert prediction.image_url is None

def test_identification_request_shape(service, fake_openai_client, jpeg):
    """시스템 프롬프트, 사용자 메시지(텍스트 + 이미지), JSON 스키마 응답 형식 확인"""
    service.identify_breed(jpeg)

    request = fake_openai_client.completions.calls[0]
    assert request["model"] == "gpt-4o"
    assert request["response_format"] == BREED_RESPONSE_FORMAT
    system, user = request["messages"]
    assert system == {"role": "system", "content": IDENTIFICATION_SYSTEM_PROMPT}
    assert "Murrah Buffalo" in system["content"]
    text_part, image_part = user["content"]
    assert text_part["type"] == "text"
    assert image_part["image_url"]["url"].startswith("data:image/jpeg;base64,")

    schema = request["response_format"]["json_schema"]["schema"]
    assert schema["required"] == ["breedName", "confidence", "breedInfo", "analysisNotes"]
    assert schema["properties"]["breedInfo"]["required"] == ["origin", "type", "characteristics", "primaryUse"]

def test_remote_url_is_sent_and_kept(service, fake_openai_client):
    image = RemoteUrl(url="https://example.com/gir.jpg")
    prediction = service.identify_breed(image)

    image_part = fake_openai_client.completions.calls[0]["messages"][1]["content"][1]
    assert image_part["image_url"]["url"] == "https://example.com/gir.jpg"
    assert prediction.image_url == "https://example.com/gir.jpg"

def test_image_reference_released_on_success_and_failure(service, fake_openai_client, jpeg, make_vendor_error):
    """성공/실패 모든 경로에서 전송용 이미지 참조가 해제됨"""
    seen_during_call = []

    def observe(kwargs):
        seen_during_call.append(jpeg.is_acquired)
        return make_vendor_error(429)

    fake_openai_client.completions.outcomes = [observe]
    with pytest.raises(RateLimitError):
        service.identify_breed(jpeg)
    assert seen_during_call == [True]
    assert not jpeg.is_acquired

    service.identify_breed(jpeg)
    assert not jpeg.is_acquired

def test_vendor_errors_are_mapped(service, fake_openai_client, jpeg, make_vendor_error):
    fake_openai_client.completions.outcomes = [make_vendor_error(401), make_vendor_error(None)]

    with pytest.raises(AuthError):
        service.identify_breed(jpeg)
    with pytest.raises(NetworkError):
        service.identify_breed(jpeg)

def test_retry_after_rate_limit_reissues_identical_request(service, fake_openai_client, jpeg, make_vendor_error):
    """같은 이미지로 재시도하면 동일한 요청이 다시 전송됨"""
    fake_openai_client.completions.outcomes = [make_vendor_error(429)]

    with pytest.raises(RateLimitError):
        service.identify_breed(jpeg)
    prediction = service.identify_breed(jpeg)

    first, second = fake_openai_client.completions.calls
    assert first == second
    assert prediction.breed_name == "Gir"

@pytest.mark.parametrize("content", [
    "not json at all",
    "",
    json.dumps({"breedName": "Gir"}),
    json.dumps({"breedName": "Gir", "confidence": 1.7, "breedInfo": {
        "origin": "x", "type": "y", "characteristics": "z", "primaryUse": "w"}}),
])
def test_unparseable_or_schema_violating_response_is_processing_error(service, fake_openai_client, jpeg, content):
    fake_openai_client.completions.outcomes = [content]

    with pytest.raises(ProcessingError):
        service.identify_breed(jpeg)
    assert not jpeg.is_acquired

def test_optional_fields_and_alternatives_are_parsed(service, fake_openai_client, jpeg, gir_payload):
    gir_payload["breedInfo"]["averageWeight"] = "385-400 kg"
    gir_payload["breedInfo"]["milkYield"] = "1,590 kg per lactation"
    gir_payload["alternativePossibilities"] = [
        {"breedName": "Sahiwal", "confidence": 0.05},
        {"breedName": "Red Sindhi", "confidence": 0.12},
    ]
    fake_openai_client.completions.outcomes = [json.dumps(gir_payload)]

    prediction = service.identify_breed(jpeg)

    assert prediction.breed_info.average_weight == "385-400 kg"
    assert prediction.breed_info.milk_yield == "1,590 kg per lactation"
    # 공급자가 준 순서를 그대로 보관 (정렬은 표시 단계에서)
    assert [alt.breed_name for alt in prediction.alternative_possibilities] == ["Sahiwal", "Red Sindhi"]

def test_prediction_ids_are_unique(service, jpeg):
    ids = {service.identify_breed(jpeg).id for _ in range(3)}
    assert len(ids) == 3

def test_analyze_image_uses_free_text_request(service, fake_openai_client):
    fake_openai_client.completions.outcomes = ["Body condition score 3/5, healthy coat."]
    image = RemoteUrl(url="https://example.com/cow.jpg")

    result = service.analyze_image(image, "health")

    request = fake_openai_client.completions.calls[0]
    assert "response_format" not in request
    assert request["max_tokens"] == 1000
    assert "veterinary expert" in request["messages"][0]["content"]
    assert request["messages"][1]["content"][0]["text"] == "Please analyze this image with focus on: health"
    assert result == {
        "analysis": "Body condition score 3/5, healthy coat.",
        "analysisType": "health",
        "imageUrl": "https://example.com/cow.jpg",
    }

def test_analyze_image_unknown_type_falls_back_to_breed_prompt(service, fake_openai_client, jpeg):
    fake_openai_client.completions.outcomes = ["Looks like a Gir."]

    result = service.analyze_image(jpeg, "horoscope")

    assert "breed identification specialist" in fake_openai_client.completions.calls[0]["messages"][0]["content"]
    assert result["imageUrl"] is None
    assert not jpeg.is_acquired
