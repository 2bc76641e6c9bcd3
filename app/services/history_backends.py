# app/services/history_backends.py
"""
예측 기록을 보관하는 '하나의 이름 붙은 항목'의 저장 방식.

모든 백엔드는 직렬화된 문자열 하나를 읽고(read), 쓰고(write), 지우는(remove) 세 가지 동작만 제공합니다.
"""
import logging
import os
import tempfile
from typing import Optional

logger = logging.getLogger(__name__)


class JsonFileHistoryBackend:
    """로컬 JSON 파일 하나에 기록을 저장합니다."""

    def __init__(self, path: str):
        self.path = path

    def read(self) -> Optional[str]:
        if not os.path.exists(self.path):
            return None
        with open(self.path, 'r', encoding='utf-8') as f:
            return f.read()

    def write(self, payload: str) -> None:
        """임시 파일에 쓴 뒤 교체하여, 쓰기 도중 실패해도 기존 파일이 깨지지 않게 합니다."""
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix='.history-', suffix='.tmp')
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                f.write(payload)
            os.replace(tmp_path, self.path)
        except Exception:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    def remove(self) -> None:
        if os.path.exists(self.path):
            os.remove(self.path)

    def describe(self) -> str:
        return f"file:{self.path}"


class FirestoreHistoryBackend:
    """
    Firestore 문서 하나에 직렬화된 기록을 저장합니다.
    문서 구조: {'payload': '<JSON 문자열>'}
    """

    def __init__(self, db, collection: str, key: str):
        self.doc_ref = db.collection(collection).document(key)
        self.collection = collection
        self.key = key

    def read(self) -> Optional[str]:
        doc = self.doc_ref.get()
        if not doc.exists:
            return None
        return (doc.to_dict() or {}).get('payload')

    def write(self, payload: str) -> None:
        self.doc_ref.set({'payload': payload})
        logger.info(f"Firestore 기록 저장 성공 (Collection: {self.collection}, Doc ID: {self.key})")

    def remove(self) -> None:
        self.doc_ref.delete()

    def describe(self) -> str:
        return f"firestore:{self.collection}/{self.key}"
