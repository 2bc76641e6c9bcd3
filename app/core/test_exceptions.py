# app/core/test_exceptions.py
"""
외부 API 오류 -> 사용자용 오류 종류 변환 테스트

사용법: python -m pytest app/core/test_exceptions.py -v
"""

import pytest
from app.core.exceptions import (
    map_vendor_error, AuthError, RateLimitError, BadRequestError, NetworkError,
    ProcessingError, UploadError, BreedIdentificationError
)

@pytest.mark.parametrize("status, expected_class, expected_kind", [
    (401, AuthError, "auth"),
    (429, RateLimitError, "rate_limit"),
    (400, BadRequestError, "bad_request"),
])
def test_status_codes_map_to_error_kinds(make_vendor_error, status, expected_class, expected_kind):
    """HTTP 상태 코드별 변환 테스트"""
    mapped = map_vendor_error(make_vendor_error(status))
    assert isinstance(mapped, expected_class)
    assert mapped.kind == expected_kind
    assert mapped.retryable is True

def test_connection_error_maps_to_network(make_vendor_error):
    """전송 계층 실패는 NetworkError"""
    mapped = map_vendor_error(make_vendor_error(None))
    assert isinstance(mapped, NetworkError)

def test_message_mentioning_network_maps_to_network():
    """메시지에 'network'가 포함되면 NetworkError"""
    mapped = map_vendor_error(RuntimeError("A network failure occurred while fetching"))
    assert isinstance(mapped, NetworkError)
    assert mapped.message == "Network error. Please check your internet connection and try again."

def test_other_errors_map_to_processing_with_vendor_message(make_vendor_error):
    """그 밖의 오류는 외부 API 메시지를 담은 ProcessingError"""
    mapped = map_vendor_error(make_vendor_error(500, "The server had an error while processing your request."))
    assert isinstance(mapped, ProcessingError)
    assert mapped.kind == "processing"
    assert mapped.message == "The server had an error while processing your request."

def test_processing_error_without_message_uses_default():
    mapped = map_vendor_error(ValueError())
    assert isinstance(mapped, ProcessingError)
    assert mapped.message == "Failed to identify breed. Please try again with a clearer image."

def test_existing_domain_error_is_returned_unchanged():
    original = UploadError("bad file")
    assert map_vendor_error(original) is original

def test_to_dict_contains_message_and_kind():
    payload = RateLimitError().to_dict()
    assert payload == {
        "error_code": "RATE_LIMITED",
        "kind": "rate_limit",
        "message": "OpenAI API rate limit exceeded. Please try again later.",
        "retryable": True,
    }
    assert issubclass(RateLimitError, BreedIdentificationError)
