# app/services/history_store.py
import json
import logging
import threading
from typing import List, Optional
from marshmallow import ValidationError

from app.core.exceptions import HistoryPersistenceError
from app.models.prediction import Prediction
from app.schemas.prediction_schema import PredictionRecordSchema

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 10


class HistoryStore:
    """
    최근 예측 기록(최신순, 최대 capacity건)을 관리하는 저장소.

    - load(): 시작 시 저장된 기록을 읽습니다. 없거나 손상된 경우 빈 목록으로 시작합니다.
    - record(): 맨 앞에 추가하고 오래된 기록을 잘라낸 뒤 전체 목록을 저장합니다.
    - clear(): 목록을 비우고 저장된 항목을 삭제합니다.
    - select(): ID로 조회합니다. 순서나 내용은 변경하지 않습니다.

    쓰기 전에 저장소를 다시 읽어(read-before-write) 다른 워커가 남긴 기록을 보존합니다.
    """

    def __init__(self, backend, capacity: int = DEFAULT_CAPACITY):
        if capacity < 1:
            raise ValueError("capacity는 1 이상이어야 합니다.")
        self.backend = backend
        self.capacity = capacity
        self._lock = threading.Lock()
        self._predictions: List[Prediction] = []

    def load(self) -> List[Prediction]:
        """저장된 기록을 읽어 메모리 상태를 초기화합니다. 예외를 던지지 않습니다."""
        with self._lock:
            persisted = self._read_persisted()
            self._predictions = persisted if persisted is not None else []
            logger.info(f"예측 기록 로드 완료: {len(self._predictions)}건 ({self.backend.describe()})")
            return list(self._predictions)

    def record(self, prediction: Prediction) -> List[Prediction]:
        """
        새 예측을 맨 앞에 추가하고 저장합니다.

        :raises HistoryPersistenceError: 저장 실패 시. 이 경우 메모리 상태는 호출 전과 같습니다.
        """
        with self._lock:
            persisted = self._read_persisted()
            base = persisted if persisted is not None else self._predictions

            updated = [prediction] + [p for p in base if p.id != prediction.id]
            updated = updated[:self.capacity]

            try:
                self.backend.write(self._serialize(updated))
            except Exception as e:
                logger.error(f"예측 기록 저장 실패 ({self.backend.describe()}): {e}", exc_info=True)
                raise HistoryPersistenceError() from e

            self._predictions = updated
            return list(updated)

    def clear(self) -> None:
        """모든 기록을 지우고 저장된 항목을 삭제합니다."""
        with self._lock:
            try:
                self.backend.remove()
            except Exception as e:
                logger.error(f"예측 기록 삭제 실패 ({self.backend.describe()}): {e}", exc_info=True)
                raise HistoryPersistenceError('Failed to clear prediction history.') from e
            self._predictions = []
            logger.info("예측 기록이 초기화되었습니다.")

    def select(self, prediction_id: str) -> Optional[Prediction]:
        for prediction in self._predictions:
            if prediction.id == prediction_id:
                return prediction
        return None

    def list(self) -> List[Prediction]:
        return list(self._predictions)

    def __len__(self) -> int:
        return len(self._predictions)

    def _read_persisted(self) -> Optional[List[Prediction]]:
        """
        저장된 기록을 읽습니다.
        항목이 없으면 빈 목록, 읽을 수 없거나 손상되었으면 None을 반환합니다.
        """
        try:
            raw = self.backend.read()
        except Exception as e:
            logger.warning(f"예측 기록을 읽을 수 없습니다 ({self.backend.describe()}): {e}")
            return None

        if raw is None:
            return []

        try:
            data = json.loads(raw)
            if not isinstance(data, list):
                raise ValueError("기록 데이터는 목록이어야 합니다.")
            records = PredictionRecordSchema(many=True).load(data)
        except ValueError as e:
            logger.warning(f"손상된 예측 기록을 무시합니다 ({self.backend.describe()}): {e}")
            return None
        except ValidationError as err:
            logger.warning(f"형식이 맞지 않는 예측 기록을 무시합니다 ({self.backend.describe()}): {err.messages}")
            return None

        return [Prediction.from_payload(record) for record in records][:self.capacity]

    @staticmethod
    def _serialize(predictions: List[Prediction]) -> str:
        return json.dumps([p.to_dict() for p in predictions], ensure_ascii=False)
