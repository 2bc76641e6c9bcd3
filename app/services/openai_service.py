# app/services/openai_service.py
import json
import logging
import time
from typing import Optional, Dict, Any
from flask import Flask
from marshmallow import ValidationError
from openai import OpenAI

from app.core.config import OPENAI_API_KEY_PLACEHOLDER
from app.core.exceptions import (
    BreedIdentificationError, ConfigurationError, ProcessingError, map_vendor_error
)
from app.models.image_ref import ImageRef
from app.models.prediction import Prediction
from app.schemas.prediction_schema import BreedPredictionPayloadSchema
from app.services.prompts import (
    IDENTIFICATION_SYSTEM_PROMPT, IDENTIFICATION_USER_PROMPT, BREED_RESPONSE_FORMAT,
    DEFAULT_ANALYSIS_TYPE, analysis_system_prompt
)
from app.utils.datetime_utils import DateTimeUtils


def is_api_key_configured(api_key: Optional[str]) -> bool:
    """키가 비어 있지 않고 placeholder 값도 아닌지 확인합니다."""
    return bool(api_key and api_key.strip() and api_key.strip() != OPENAI_API_KEY_PLACEHOLDER)


class OpenAIService:
    """
    OpenAI 비전 API 연동을 담당하는 서비스 클래스.
    소 / 물소 이미지의 품종 식별과 보조(건강, 체형) 분석 기능을 제공합니다.
    """

    def __init__(self, client=None, api_key: Optional[str] = None, model: str = 'gpt-4o',
                 timeout: float = 60.0, analysis_max_tokens: int = 1000):
        """
        실제 OpenAI 클라이언트는 init_app 이후 첫 호출 시점에 생성됩니다.
        테스트에서는 client를 직접 주입할 수 있습니다.
        """
        self.client = client
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.analysis_max_tokens = analysis_max_tokens

    def init_app(self, app: Flask):
        """
        Flask 앱 초기화 과정에서 호출되어 OpenAI 설정을 읽습니다.
        키가 없어도 앱은 기동되며, 식별 요청 시점에 ConfigurationError가 발생합니다.

        :param app: Flask 애플리케이션 객체
        """
        self.api_key = app.config.get('OPENAI_API_KEY')
        self.model = app.config.get('OPENAI_MODEL', self.model)
        self.timeout = app.config.get('OPENAI_TIMEOUT', self.timeout)
        self.analysis_max_tokens = app.config.get('ANALYSIS_MAX_TOKENS', self.analysis_max_tokens)

        if is_api_key_configured(self.api_key):
            logging.info(f"OpenAIService: OpenAI API 서비스가 초기화되었습니다. (model: {self.model})")
        else:
            logging.warning("OpenAIService: OPENAI_API_KEY가 설정되지 않았습니다. 품종 식별 요청은 거부됩니다.")

    @property
    def is_configured(self) -> bool:
        return is_api_key_configured(self.api_key)

    def _ensure_client(self):
        """키를 확인하고 클라이언트를 반환합니다. 네트워크 호출 전에 반드시 거쳐야 합니다."""
        if not self.is_configured:
            raise ConfigurationError()
        if self.client is None:
            self.client = OpenAI(api_key=self.api_key, timeout=self.timeout)
        return self.client

    def build_identification_request(self, image_url: str) -> Dict[str, Any]:
        """
        품종 식별용 chat completion 요청 인자를 구성합니다.
        같은 이미지 URL이면 항상 같은 요청이 만들어집니다 (재시도 시 동일한 요청 보장).

        :param image_url: 전송용 이미지 URL (data URL 또는 원격 URL)
        :return: client.chat.completions.create에 전달할 키워드 인자
        """
        return {
            "model": self.model,
            "messages": [
                {"role": "system", "content": IDENTIFICATION_SYSTEM_PROMPT},
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": IDENTIFICATION_USER_PROMPT},
                        {"type": "image_url", "image_url": {"url": image_url}},
                    ],
                },
            ],
            "response_format": BREED_RESPONSE_FORMAT,
        }

    def build_analysis_request(self, image_url: str, analysis_type: str) -> Dict[str, Any]:
        """보조 분석 요청 인자. 응답 스키마 없이 자유 텍스트를 받습니다."""
        return {
            "model": self.model,
            "messages": [
                {"role": "system", "content": analysis_system_prompt(analysis_type)},
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": f"Please analyze this image with focus on: {analysis_type}"},
                        {"type": "image_url", "image_url": {"url": image_url}},
                    ],
                },
            ],
            "max_tokens": self.analysis_max_tokens,
        }

    def identify_breed(self, image: ImageRef) -> Prediction:
        """
        이미지의 품종을 식별합니다.

        :param image: 업로드 파일(LocalFile) 또는 원격 URL(RemoteUrl)
        :return: id와 timestamp가 부여된 Prediction
        :raises BreedIdentificationError: 설정/인증/요청/네트워크/처리 오류
        """
        client = self._ensure_client()
        started = time.perf_counter()

        try:
            with image.transport() as image_url:
                response = client.chat.completions.create(**self.build_identification_request(image_url))
        except BreedIdentificationError:
            raise
        except Exception as e:
            logging.error(f"OpenAI 품종 식별 호출 실패: {e}", exc_info=True)
            raise map_vendor_error(e) from e

        prediction = self._parse_prediction(response, image)
        logging.info(
            f"품종 식별 완료 | breed={prediction.breed_name} "
            f"confidence={prediction.confidence:.2f} "
            f"latency={time.perf_counter() - started:.3f}s"
        )
        return prediction

    def _parse_prediction(self, response, image: ImageRef) -> Prediction:
        """API 응답 본문(JSON)을 검증하여 Prediction으로 변환합니다."""
        try:
            message = response.choices[0].message
        except (AttributeError, IndexError, TypeError) as e:
            raise ProcessingError() from e

        refusal = getattr(message, 'refusal', None)
        if refusal:
            logging.warning(f"모델이 식별을 거부했습니다: {refusal}")
            raise ProcessingError(refusal)

        try:
            payload = BreedPredictionPayloadSchema().load(json.loads(message.content or ''))
        except json.JSONDecodeError as e:
            logging.error(f"비전 API 응답을 JSON으로 파싱할 수 없습니다: {e}")
            raise ProcessingError() from e
        except ValidationError as err:
            logging.error(f"비전 API 응답이 스키마와 맞지 않습니다: {err.messages}")
            raise ProcessingError() from err

        timestamp = DateTimeUtils.now_millis()
        return Prediction.from_payload(
            payload,
            id=DateTimeUtils.next_prediction_id(timestamp),
            timestamp=timestamp,
            image_url=image.display_url,
        )

    def analyze_image(self, image: ImageRef, analysis_type: str = DEFAULT_ANALYSIS_TYPE) -> Dict[str, Any]:
        """
        특정 관점(breed, health, condition)으로 이미지를 분석한 자유 텍스트를 반환합니다.

        :param image: 분석할 이미지
        :param analysis_type: 분석 관점. 알 수 없는 값은 'breed' 프롬프트를 사용합니다.
        :return: 분석 결과 딕셔너리
        """
        client = self._ensure_client()

        try:
            with image.transport() as image_url:
                response = client.chat.completions.create(**self.build_analysis_request(image_url, analysis_type))
        except BreedIdentificationError:
            raise
        except Exception as e:
            logging.error(f"OpenAI 이미지 분석 실패 ({analysis_type}): {e}", exc_info=True)
            raise map_vendor_error(e) from e

        try:
            analysis = response.choices[0].message.content
        except (AttributeError, IndexError, TypeError) as e:
            raise ProcessingError() from e

        return {
            "analysis": analysis,
            "analysisType": analysis_type,
            "imageUrl": image.display_url,
        }
