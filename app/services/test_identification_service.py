# app/services/test_identification_service.py
"""
업로드 검증 -> 예측 -> 기록 저장 흐름 테스트

사용법: python -m pytest app/services/test_identification_service.py -v
"""

import random
import threading
import pytest

from app.core.exceptions import (
    UploadError, RateLimitError, ProcessingError, IdentificationInProgressError
)
from app.models.image_ref import LocalFile, RemoteUrl
from app.services.history_backends import JsonFileHistoryBackend
from app.services.history_store import HistoryStore
from app.services.identification_service import (
    IdentificationService, validate_upload, MAX_UPLOAD_BYTES
)
from app.services.mock_service import MockBreedService, MOCK_BREEDS
from app.services.openai_service import OpenAIService


class FailingWriteBackend(JsonFileHistoryBackend):
    def write(self, payload: str) -> None:
        raise OSError("quota exceeded")


@pytest.fixture
def history(tmp_path):
    store = HistoryStore(JsonFileHistoryBackend(str(tmp_path / "history.json")))
    store.load()
    return store


@pytest.fixture
def predictor(fake_openai_client):
    return OpenAIService(client=fake_openai_client, api_key="sk-test-key")


@pytest.fixture
def service(predictor, history):
    return IdentificationService(predictor, history)


def jpeg(size: int = 2 * 1024 * 1024) -> LocalFile:
    return LocalFile(data=b"0" * size, content_type="image/jpeg", filename="cow.jpg")


def test_validate_upload_accepts_images_up_to_limit():
    validate_upload("image/jpeg", MAX_UPLOAD_BYTES)
    validate_upload("image/webp", 1)

@pytest.mark.parametrize("content_type", ["application/pdf", "text/plain", "", None, "video/mp4"])
def test_validate_upload_rejects_non_images(content_type):
    with pytest.raises(UploadError) as exc_info:
        validate_upload(content_type, 1024)
    assert exc_info.value.kind == "upload"

def test_validate_upload_rejects_oversized_files():
    with pytest.raises(UploadError) as exc_info:
        validate_upload("image/jpeg", MAX_UPLOAD_BYTES + 1)
    assert "smaller than 10MB" in exc_info.value.message

def test_validate_upload_rejects_empty_file():
    with pytest.raises(UploadError):
        validate_upload("image/png", 0)

def test_oversized_upload_never_reaches_vendor(service, fake_openai_client):
    with pytest.raises(UploadError):
        service.identify(jpeg(MAX_UPLOAD_BYTES + 1))
    assert fake_openai_client.completions.calls == []

def test_non_image_upload_never_reaches_vendor(service, fake_openai_client):
    with pytest.raises(UploadError):
        service.identify(LocalFile(data=b"%PDF-1.4", content_type="application/pdf"))
    assert fake_openai_client.completions.calls == []

def test_identify_records_prediction_at_head_of_history(service, history):
    result = service.identify(jpeg())

    assert result.history_saved is True
    assert result.prediction.breed_name == "Gir"
    assert history.list()[0] == result.prediction

def test_failed_identification_is_not_recorded(service, history, fake_openai_client, make_vendor_error):
    fake_openai_client.completions.outcomes = [make_vendor_error(429)]

    with pytest.raises(RateLimitError):
        service.identify(jpeg())
    assert history.list() == []

def test_retry_reuses_the_last_image(service, fake_openai_client, make_vendor_error):
    """RateLimitError 후 재시도하면 같은 이미지로 같은 요청을 보냄"""
    image = jpeg()
    fake_openai_client.completions.outcomes = [make_vendor_error(429)]

    with pytest.raises(RateLimitError):
        service.identify(image)
    assert service.last_image is image

    result = service.retry()

    first, second = fake_openai_client.completions.calls
    assert first == second
    assert result.prediction.breed_name == "Gir"

def test_retry_without_previous_image_fails(service):
    with pytest.raises(UploadError):
        service.retry()

def test_reset_forgets_last_image(service):
    service.identify(jpeg())
    service.reset()
    assert service.last_image is None

def test_history_save_failure_still_returns_result(predictor, tmp_path):
    history = HistoryStore(FailingWriteBackend(str(tmp_path / "history.json")))
    history.load()
    service = IdentificationService(predictor, history)

    result = service.identify(jpeg())

    assert result.prediction.breed_name == "Gir"
    assert result.history_saved is False
    assert history.list() == []

def test_concurrent_identification_is_rejected(history, fake_openai_client):
    """진행 중인 식별이 있으면 새 요청은 거부됨"""
    started = threading.Event()
    release = threading.Event()
    default_content = fake_openai_client.completions.default_content

    def slow_response(kwargs):
        started.set()
        release.wait(timeout=5)
        return default_content

    fake_openai_client.completions.outcomes = [slow_response]
    service = IdentificationService(OpenAIService(client=fake_openai_client, api_key="sk-test-key"), history)

    results = []
    worker = threading.Thread(target=lambda: results.append(service.identify(jpeg())))
    worker.start()
    assert started.wait(timeout=5)

    assert service.is_busy
    with pytest.raises(IdentificationInProgressError):
        service.identify(RemoteUrl(url="https://example.com/other.jpg"))

    release.set()
    worker.join(timeout=5)
    assert len(results) == 1
    assert not service.is_busy
    assert len(history.list()) == 1

def test_analyze_validates_upload_and_skips_history(service, history, fake_openai_client):
    fake_openai_client.completions.outcomes = ["Healthy animal."]

    result = service.analyze(jpeg(), "condition")

    assert result["analysis"] == "Healthy animal."
    assert history.list() == []
    with pytest.raises(UploadError):
        service.analyze(LocalFile(data=b"text", content_type="text/plain"), "health")


class FixedRandom(random.Random):
    """첫 random() 값을 고정하여 성공/실패 경로를 결정하는 난수 생성기"""

    def __init__(self, first_value):
        super().__init__(42)
        self.first_value = first_value
        self.used = False

    def random(self):
        if not self.used:
            self.used = True
            return self.first_value
        return super().random()


def test_mock_predictor_returns_known_breed(history):
    service = IdentificationService(MockBreedService(delay_seconds=0, rng=FixedRandom(0.5)), history)

    result = service.identify(jpeg())

    assert result.prediction.breed_name in {breed["breedName"] for breed in MOCK_BREEDS}
    assert history.list()[0] == result.prediction

def test_mock_predictor_can_fail(history):
    service = IdentificationService(MockBreedService(delay_seconds=0, rng=FixedRandom(0.05)), history)

    with pytest.raises(ProcessingError) as exc_info:
        service.identify(jpeg())
    assert exc_info.value.message == "Unable to identify breed. Please try with a clearer image."
