# app/services/mock_service.py
"""
데모/오프라인용 품종 예측기.

BREED_PREDICTOR=mock 설정 시 OpenAIService 대신 사용되며, API 키가 필요 없습니다.
미리 정의된 4개 품종 중 하나를 지연 후 반환하고, 10% 확률로 실패합니다.
"""
import logging
import random
import time
from typing import Dict, Any, Optional

from app.core.exceptions import ProcessingError
from app.models.image_ref import ImageRef
from app.models.prediction import Prediction, BreedInfo
from app.utils.datetime_utils import DateTimeUtils

MOCK_BREEDS = [
    {
        "breedName": "Gir",
        "confidence": 0.92,
        "breedInfo": {
            "origin": "Gujarat, India",
            "type": "Dairy Cattle",
            "characteristics": (
                "The Gir breed is known for its distinctive appearance with a domed forehead, long pendulous ears, "
                "and a dewlap that extends from the chin to the navel.\n"
                "They have a gentle temperament and are well-adapted to hot climates."
            ),
            "primaryUse": "Milk production and draught work",
            "averageWeight": "385-400 kg",
            "milkYield": "1,590 kg per lactation",
        },
    },
    {
        "breedName": "Sahiwal",
        "confidence": 0.87,
        "breedInfo": {
            "origin": "Punjab, Pakistan/India",
            "type": "Dairy Cattle",
            "characteristics": (
                "Sahiwal cattle are reddish brown in color with white markings on the face and legs.\n"
                "They are known for their heat tolerance and good milk production capacity."
            ),
            "primaryUse": "Milk production",
            "averageWeight": "300-400 kg",
            "milkYield": "2,270 kg per lactation",
        },
    },
    {
        "breedName": "Red Sindhi",
        "confidence": 0.78,
        "breedInfo": {
            "origin": "Sindh, Pakistan",
            "type": "Dairy Cattle",
            "characteristics": (
                "Red Sindhi cattle are deep red in color with white markings.\n"
                "They are compact, well-built animals with good heat tolerance and disease resistance."
            ),
            "primaryUse": "Milk production",
            "averageWeight": "300-350 kg",
            "milkYield": "1,800 kg per lactation",
        },
    },
    {
        "breedName": "Murrah Buffalo",
        "confidence": 0.95,
        "breedInfo": {
            "origin": "Haryana, India",
            "type": "Water Buffalo",
            "characteristics": (
                "Murrah buffaloes are jet black in color with tightly curled horns.\n"
                "They are the best dairy buffalo breed in India with excellent milk production."
            ),
            "primaryUse": "Milk production",
            "averageWeight": "450-550 kg",
            "milkYield": "3,000-4,000 kg per lactation",
        },
    },
]

FAILURE_RATE = 0.1


class MockBreedService:
    """OpenAIService와 같은 인터페이스(identify_breed, analyze_image)를 가진 가짜 예측기."""

    is_configured = True

    def __init__(self, delay_seconds: float = 2.0, rng: Optional[random.Random] = None):
        self.delay_seconds = delay_seconds
        self.rng = rng or random.Random()

    def init_app(self, app):
        self.delay_seconds = app.config.get('MOCK_DELAY_SECONDS', self.delay_seconds)
        logging.info(f"MockBreedService: 데모 예측기가 활성화되었습니다. (delay: {self.delay_seconds}s)")

    def _simulate_latency(self):
        if self.delay_seconds > 0:
            # 2초 + 최대 2초의 무작위 지연
            time.sleep(self.delay_seconds + self.rng.random() * self.delay_seconds)

    def identify_breed(self, image: ImageRef) -> Prediction:
        with image.transport():
            self._simulate_latency()
            if self.rng.random() < FAILURE_RATE:
                raise ProcessingError('Unable to identify breed. Please try with a clearer image.')
            selected = self.rng.choice(MOCK_BREEDS)

        info = selected["breedInfo"]
        timestamp = DateTimeUtils.now_millis()
        return Prediction(
            id=DateTimeUtils.next_prediction_id(timestamp),
            breed_name=selected["breedName"],
            confidence=selected["confidence"],
            breed_info=BreedInfo(
                origin=info["origin"],
                type=info["type"],
                characteristics=info["characteristics"],
                primary_use=info["primaryUse"],
                average_weight=info.get("averageWeight"),
                milk_yield=info.get("milkYield"),
            ),
            timestamp=timestamp,
            image_url=image.display_url,
        )

    def analyze_image(self, image: ImageRef, analysis_type: str = 'breed') -> Dict[str, Any]:
        with image.transport():
            self._simulate_latency()
        return {
            "analysis": f"(demo) No {analysis_type} analysis is available without an OpenAI API key.",
            "analysisType": analysis_type,
            "imageUrl": image.display_url,
        }
