# app/models/prediction.py
from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any

@dataclass
class BreedInfo:
    """품종 메타데이터. origin/type/characteristics/primary_use는 항상 존재합니다."""
    origin: str
    type: str
    characteristics: str
    primary_use: str
    average_weight: Optional[str] = None
    milk_yield: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'origin': self.origin,
            'type': self.type,
            'characteristics': self.characteristics,
            'primaryUse': self.primary_use,
        }
        if self.average_weight is not None:
            data['averageWeight'] = self.average_weight
        if self.milk_yield is not None:
            data['milkYield'] = self.milk_yield
        return data

@dataclass
class AlternativePossibility:
    breed_name: str
    confidence: float

@dataclass
class Prediction:
    """
    품종 예측 결과 한 건. 기록(history)에 저장되고 UI에 표시되는 단위입니다.
    직렬화 시 필드 이름은 UI가 기대하는 camelCase를 사용합니다.
    """
    id: str
    breed_name: str
    confidence: float
    breed_info: BreedInfo
    timestamp: int  # Unix epoch 기준 밀리초
    analysis_notes: Optional[str] = None
    alternative_possibilities: List[AlternativePossibility] = field(default_factory=list)
    image_url: Optional[str] = None  # 원격 URL만 보관. 업로드된 바이트는 저장하지 않습니다.

    @classmethod
    def from_payload(cls, payload: Dict[str, Any], **overrides) -> "Prediction":
        """
        marshmallow 스키마(BreedPredictionPayloadSchema, PredictionRecordSchema)로
        검증을 마친 딕셔너리로부터 인스턴스를 생성합니다.

        :param payload: schema.load() 결과 (snake_case 키)
        :param overrides: payload에 없는 값(id, timestamp, image_url) 지정
        """
        values = {**payload, **overrides}
        return cls(
            id=values['id'],
            breed_name=values['breed_name'],
            confidence=values['confidence'],
            breed_info=BreedInfo(**values['breed_info']),
            timestamp=values['timestamp'],
            analysis_notes=values.get('analysis_notes'),
            alternative_possibilities=[
                AlternativePossibility(**alt) for alt in values.get('alternative_possibilities', [])
            ],
            image_url=values.get('image_url'),
        )

    def to_dict(self) -> Dict[str, Any]:
        """저장소에 기록할 camelCase 딕셔너리로 변환합니다."""
        return {
            'id': self.id,
            'breedName': self.breed_name,
            'confidence': self.confidence,
            'breedInfo': self.breed_info.to_dict(),
            'analysisNotes': self.analysis_notes,
            'alternativePossibilities': [
                {'breedName': alt.breed_name, 'confidence': alt.confidence}
                for alt in self.alternative_possibilities
            ],
            'timestamp': self.timestamp,
            'imageUrl': self.image_url,
        }
