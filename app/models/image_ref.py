# app/models/image_ref.py
"""
식별 대상 이미지 참조.

ImageRef = LocalFile(bytes) | RemoteUrl(str)

외부 API가 요구하는 전송 표현(URL)으로의 변환은 transport() 한 곳에서만 일어나며,
with 블록을 벗어나는 모든 경로(성공, 오류, 취소)에서 전송용 참조가 해제됩니다.
ImageRef 자체는 해제 후에도 남아 있으므로 같은 이미지로 재시도할 수 있습니다.
"""
import base64
from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator, Optional


class ImageRef(ABC):
    """이미지 참조의 공통 인터페이스."""

    _transport_url: Optional[str] = None

    @property
    def is_acquired(self) -> bool:
        """전송용 참조가 현재 살아 있는지 여부."""
        return self._transport_url is not None

    @property
    def display_url(self) -> Optional[str]:
        """기록에 남길 수 있는 URL. 업로드된 파일은 None."""
        return None

    @abstractmethod
    def _build_transport_url(self) -> str:
        """외부 API에 보낼 이미지 URL을 만듭니다."""

    @contextmanager
    def transport(self) -> Iterator[str]:
        """외부 API 전송용 URL을 획득하고 블록 종료 시 반드시 해제합니다."""
        self._transport_url = self._build_transport_url()
        try:
            yield self._transport_url
        finally:
            self._transport_url = None


@dataclass(eq=False)
class LocalFile(ImageRef):
    """사용자가 업로드한 이미지 바이트."""
    data: bytes
    content_type: str
    filename: Optional[str] = None
    _transport_url: Optional[str] = field(default=None, init=False, repr=False)

    @property
    def size(self) -> int:
        return len(self.data)

    def _build_transport_url(self) -> str:
        encoded = base64.b64encode(self.data).decode('ascii')
        return f"data:{self.content_type};base64,{encoded}"


@dataclass(eq=False)
class RemoteUrl(ImageRef):
    """외부에서 접근 가능한 이미지 URL."""
    url: str
    _transport_url: Optional[str] = field(default=None, init=False, repr=False)

    @property
    def display_url(self) -> Optional[str]:
        return self.url

    def _build_transport_url(self) -> str:
        return self.url
