# conftest.py
"""
공용 pytest fixture

- 실제 OpenAI 호출 대신 요청 인자를 기록하는 가짜 클라이언트를 사용합니다.
- 예측 기록은 테스트마다 임시 디렉터리의 JSON 파일에 저장합니다.
"""
import json
from types import SimpleNamespace

import httpx
import openai
import pytest

from app import create_app

GIR_PAYLOAD = {
    "breedName": "Gir",
    "confidence": 0.92,
    "breedInfo": {
        "origin": "Gujarat, India",
        "type": "Dairy Cattle",
        "characteristics": "Domed forehead, long pendulous ears and a gentle temperament.",
        "primaryUse": "Milk production",
    },
    "analysisNotes": "Characteristic convex forehead and curved horns.",
}


class FakeCompletions:
    """
    client.chat.completions 대체 객체.
    outcomes에 넣은 순서대로 응답 문자열을 반환하거나 예외를 발생시킵니다.
    callable을 넣으면 요청 인자로 호출한 결과를 사용합니다.
    """

    def __init__(self, default_content=None):
        self.calls = []
        self.outcomes = []
        self.default_content = default_content

    def create(self, **kwargs):
        self.calls.append(kwargs)
        outcome = self.outcomes.pop(0) if self.outcomes else self.default_content
        if callable(outcome):
            outcome = outcome(kwargs)
        if isinstance(outcome, Exception):
            raise outcome
        message = SimpleNamespace(content=outcome, refusal=None)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeOpenAIClient:
    def __init__(self, default_content=None):
        self.completions = FakeCompletions(default_content)
        self.chat = SimpleNamespace(completions=self.completions)


def _make_vendor_error(status=None, message="Vendor error"):
    """OpenAI SDK가 실제로 던지는 예외 객체를 만듭니다. status가 None이면 연결 오류입니다."""
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    if status is None:
        return openai.APIConnectionError(request=request)
    error_classes = {
        400: openai.BadRequestError,
        401: openai.AuthenticationError,
        429: openai.RateLimitError,
        500: openai.InternalServerError,
    }
    error_class = error_classes.get(status, openai.APIStatusError)
    return error_class(message, response=httpx.Response(status, request=request), body=None)


@pytest.fixture
def gir_payload():
    return json.loads(json.dumps(GIR_PAYLOAD))


@pytest.fixture
def make_vendor_error():
    return _make_vendor_error


@pytest.fixture
def fake_openai_client():
    return FakeOpenAIClient(default_content=json.dumps(GIR_PAYLOAD))


@pytest.fixture
def history_path(tmp_path):
    return tmp_path / "recentPredictions.json"


@pytest.fixture
def app(fake_openai_client, history_path):
    app = create_app('testing', config_overrides={
        'OPENAI_API_KEY': 'sk-test-key',
        'HISTORY_FILE_PATH': str(history_path),
    })
    app.services['predictor'].client = fake_openai_client
    return app


@pytest.fixture
def client(app):
    return app.test_client()
