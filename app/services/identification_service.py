# app/services/identification_service.py
import logging
import threading
from dataclasses import dataclass
from typing import Optional, Dict, Any

from app.core.exceptions import (
    UploadError, HistoryPersistenceError, IdentificationInProgressError
)
from app.models.image_ref import ImageRef, LocalFile
from app.models.prediction import Prediction
from app.services.history_store import HistoryStore

logger = logging.getLogger(__name__)

MAX_UPLOAD_BYTES = 10 * 1024 * 1024


def validate_upload(content_type: Optional[str], size: int, max_bytes: int = MAX_UPLOAD_BYTES) -> None:
    """
    업로드 파일을 검증합니다. 외부 API를 호출하기 전에 실행되는 순수 검사입니다.

    :param content_type: 클라이언트가 선언한 MIME 타입
    :param size: 파일 크기 (bytes)
    :param max_bytes: 허용되는 최대 크기
    :raises UploadError: 크기 초과 또는 이미지가 아닌 타입
    """
    if size > max_bytes:
        limit_mb = max_bytes // (1024 * 1024)
        raise UploadError(f'File size too large. Please choose an image smaller than {limit_mb}MB.')
    if size == 0:
        raise UploadError('The selected file is empty. Please choose another image.')
    if not content_type or not content_type.startswith('image/'):
        raise UploadError('Please select a valid image file (JPG, PNG, WEBP).')


@dataclass
class IdentificationResult:
    prediction: Prediction
    history_saved: bool = True


class IdentificationService:
    """
    업로드 검증 → 품종 예측 → 기록 저장으로 이어지는 식별 흐름을 담당합니다.

    동시에 하나의 식별 요청만 처리하며, 진행 중에 들어온 요청은 거부합니다.
    마지막으로 제출된 이미지를 보관하여 실패 후 같은 요청을 재시도할 수 있게 합니다.
    """

    def __init__(self, predictor, history_store: HistoryStore, max_upload_bytes: int = MAX_UPLOAD_BYTES):
        self.predictor = predictor
        self.history_store = history_store
        self.max_upload_bytes = max_upload_bytes
        self._in_flight = threading.Lock()
        self._last_image: Optional[ImageRef] = None

    @property
    def last_image(self) -> Optional[ImageRef]:
        return self._last_image

    @property
    def is_busy(self) -> bool:
        return self._in_flight.locked()

    def validate(self, image: ImageRef) -> None:
        if isinstance(image, LocalFile):
            validate_upload(image.content_type, image.size, self.max_upload_bytes)

    def identify(self, image: ImageRef) -> IdentificationResult:
        """
        이미지의 품종을 식별하고 결과를 기록에 추가합니다.

        :raises UploadError: 업로드 검증 실패 (외부 호출 없음)
        :raises IdentificationInProgressError: 다른 식별 요청이 진행 중
        :raises BreedIdentificationError: 예측기에서 발생한 오류
        """
        self.validate(image)

        if not self._in_flight.acquire(blocking=False):
            raise IdentificationInProgressError()
        try:
            self._last_image = image
            prediction = self.predictor.identify_breed(image)
        finally:
            self._in_flight.release()

        history_saved = True
        try:
            self.history_store.record(prediction)
        except HistoryPersistenceError as e:
            # 식별 자체는 성공했으므로 결과는 돌려주고 저장 실패만 알립니다.
            logger.warning(f"식별 결과를 기록에 저장하지 못했습니다 (id: {prediction.id}): {e}")
            history_saved = False

        return IdentificationResult(prediction=prediction, history_saved=history_saved)

    def retry(self) -> IdentificationResult:
        """마지막으로 제출된 이미지로 같은 식별 요청을 다시 보냅니다."""
        if self._last_image is None:
            raise UploadError('There is no image to retry. Please upload an image.')
        logger.info("마지막 이미지로 품종 식별을 재시도합니다.")
        return self.identify(self._last_image)

    def analyze(self, image: ImageRef, analysis_type: str) -> Dict[str, Any]:
        """건강/체형 등 보조 분석을 수행합니다. 기록에는 남기지 않습니다."""
        self.validate(image)
        return self.predictor.analyze_image(image, analysis_type)

    def reset(self) -> None:
        """'새 식별' 시작 시 재시도용 이미지를 비웁니다."""
        self._last_image = None
