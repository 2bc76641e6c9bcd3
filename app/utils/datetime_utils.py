# app/utils/datetime_utils.py
"""
예측 기록의 시간 처리를 위한 유틸리티 모듈

- 예측 기록의 timestamp는 Unix epoch 기준 밀리초 정수로 저장합니다.
- 응답에는 사람이 읽을 수 있는 ISO 포맷(UTC, 'Z' 접미사)을 함께 제공합니다.
- 예측 ID는 생성 시각(밀리초)에서 파생되며, 같은 프로세스 안에서는 항상 증가합니다.
"""

import logging
import threading
from datetime import datetime, timezone
from typing import Union, Any

logger = logging.getLogger(__name__)

_id_lock = threading.Lock()
_last_id_ms = 0

class DateTimeUtils:
    """시간 처리를 위한 중앙화된 유틸리티 클래스"""

    @staticmethod
    def now() -> datetime:
        """현재 시간을 UTC timezone-aware datetime으로 반환"""
        return datetime.now(timezone.utc)

    @staticmethod
    def now_millis() -> int:
        """현재 시간을 Unix timestamp (밀리초)로 반환"""
        return DateTimeUtils.to_timestamp_ms(DateTimeUtils.now())

    @staticmethod
    def to_iso_string(dt: datetime) -> str:
        """datetime 객체를 ISO 포맷 문자열로 변환 (UTC, 'Z' 접미사)"""
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        else:
            dt = dt.astimezone(timezone.utc)
        return dt.isoformat().replace('+00:00', 'Z')

    @staticmethod
    def from_timestamp_ms(timestamp_ms: int) -> datetime:
        """
        Unix timestamp (밀리초)를 UTC datetime 객체로 변환

        Args:
            timestamp_ms: Unix timestamp in milliseconds

        Returns:
            UTC timezone-aware datetime 객체
        """
        try:
            if isinstance(timestamp_ms, bool) or not isinstance(timestamp_ms, (int, float)):
                raise ValueError("timestamp_ms는 숫자여야 합니다")
            return datetime.fromtimestamp(timestamp_ms / 1000.0, tz=timezone.utc)

        except Exception as e:
            logger.error(f"timestamp_ms 변환 실패: {timestamp_ms} - {e}")
            raise ValueError(f"잘못된 timestamp 형식입니다: {timestamp_ms}")

    @staticmethod
    def to_timestamp_ms(dt: Union[datetime, Any]) -> int:
        """datetime 객체를 Unix timestamp (밀리초)로 변환"""
        if isinstance(dt, datetime) and dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        if not hasattr(dt, 'timestamp'):
            raise ValueError(f"datetime 객체여야 합니다: {type(dt)}")
        return int(dt.timestamp() * 1000)

    @staticmethod
    def next_prediction_id(timestamp_ms: int) -> str:
        """
        생성 시각(밀리초)으로부터 예측 ID를 만듭니다.
        같은 밀리초에 두 건이 생성되면 마지막 ID + 1을 사용하여 중복을 막습니다.
        """
        global _last_id_ms
        with _id_lock:
            candidate = max(int(timestamp_ms), _last_id_ms + 1)
            _last_id_ms = candidate
        return str(candidate)


# 편의를 위한 글로벌 함수들
def millis_to_iso(timestamp_ms: int) -> str:
    """밀리초 timestamp를 ISO 문자열로 변환"""
    return DateTimeUtils.to_iso_string(DateTimeUtils.from_timestamp_ms(timestamp_ms))
