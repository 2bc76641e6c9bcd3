# app/core/exceptions.py
"""
품종 식별 흐름에서 발생하는 오류 종류를 정의합니다.

모든 오류는 사용자에게 보여줄 메시지(message)와 기계가 읽을 수 있는 종류(kind)를 함께 가지며,
app/__init__.py의 전역 에러 핸들러가 이를 JSON 응답으로 변환합니다.
"""
import logging

import openai

logger = logging.getLogger(__name__)


class BreedIdentificationError(Exception):
    """품종 식별 관련 오류의 기반 클래스."""
    kind = 'processing'
    error_code = 'PROCESSING_FAILED'
    status_code = 502
    default_message = 'Failed to identify breed. Please try again with a clearer image.'

    def __init__(self, message=None, retryable=True):
        self.message = message or self.default_message
        self.retryable = retryable
        super().__init__(self.message)

    def to_dict(self):
        return {
            "error_code": self.error_code,
            "kind": self.kind,
            "message": self.message,
            "retryable": self.retryable,
        }


class UploadError(BreedIdentificationError):
    """파일 크기 또는 MIME 타입 문제. 외부 API까지 도달하지 않습니다."""
    kind = 'upload'
    error_code = 'INVALID_UPLOAD'
    status_code = 400
    default_message = 'Please select a valid image file (JPG, PNG, WEBP).'


class ConfigurationError(BreedIdentificationError):
    """API 키가 없거나 placeholder 값인 경우. 네트워크 호출 전에 감지됩니다."""
    kind = 'configuration'
    error_code = 'CONFIGURATION_ERROR'
    status_code = 503
    default_message = (
        'OpenAI API key is not configured. Please set your OPENAI_API_KEY in the '
        'environment variables to use AI-powered breed identification.'
    )


class AuthError(BreedIdentificationError):
    kind = 'auth'
    error_code = 'AUTH_FAILED'
    status_code = 502
    default_message = 'OpenAI API key is invalid. Please check your configuration.'


class RateLimitError(BreedIdentificationError):
    kind = 'rate_limit'
    error_code = 'RATE_LIMITED'
    status_code = 429
    default_message = 'OpenAI API rate limit exceeded. Please try again later.'


class BadRequestError(BreedIdentificationError):
    kind = 'bad_request'
    error_code = 'BAD_REQUEST'
    status_code = 422
    default_message = (
        'Invalid request to OpenAI API. The image may be too large or in an unsupported format.'
    )


class NetworkError(BreedIdentificationError):
    kind = 'network'
    error_code = 'NETWORK_ERROR'
    status_code = 503
    default_message = 'Network error. Please check your internet connection and try again.'


class ProcessingError(BreedIdentificationError):
    """그 밖의 모든 실패. 스키마 위반 또는 파싱할 수 없는 응답을 포함합니다."""


class IdentificationInProgressError(BreedIdentificationError):
    """이미 진행 중인 식별 요청이 있을 때 새 요청을 거부합니다."""
    kind = 'busy'
    error_code = 'IDENTIFICATION_IN_PROGRESS'
    status_code = 409
    default_message = 'An identification is already in progress. Please wait for it to finish.'


class HistoryPersistenceError(BreedIdentificationError):
    """예측 기록 저장 실패 (예: 저장 공간 초과). 메모리 상태는 변경되지 않습니다."""
    kind = 'history'
    error_code = 'HISTORY_SAVE_FAILED'
    status_code = 500
    default_message = 'Failed to save prediction history.'


def map_vendor_error(error: Exception) -> BreedIdentificationError:
    """
    OpenAI SDK(또는 전송 계층)에서 발생한 예외를 사용자용 오류 종류로 변환합니다.

    :param error: 외부 API 호출 중 발생한 예외
    :return: 대응되는 BreedIdentificationError 인스턴스
    """
    if isinstance(error, BreedIdentificationError):
        return error

    status = getattr(error, 'status_code', None)
    if status is None:
        status = getattr(error, 'status', None)
    vendor_message = getattr(error, 'message', None) or str(error)

    if status == 401:
        return AuthError()
    if status == 429:
        return RateLimitError()
    if status == 400:
        return BadRequestError()
    if isinstance(error, openai.APIConnectionError) or 'network' in vendor_message.lower():
        return NetworkError()

    logger.warning(f"분류되지 않은 외부 API 오류 ({type(error).__name__}): {vendor_message}")
    return ProcessingError(vendor_message or None)
