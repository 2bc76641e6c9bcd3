# app/api/identification/schemas.py
from marshmallow import Schema, fields, validate

from app.services.prompts import ANALYSIS_SYSTEM_PROMPTS, DEFAULT_ANALYSIS_TYPE
from app.utils.datetime_utils import millis_to_iso

class ImageUrlRequestSchema(Schema):
    """
    POST /api/identify/ (JSON)
    파일 대신 외부에서 접근 가능한 이미지 URL로 식별을 요청할 때 사용합니다.
    """
    image_url = fields.Url(
        required=True,
        schemes={'http', 'https'},
        data_key='imageUrl',
        error_messages={"required": "이미지 파일(image) 또는 이미지 URL(imageUrl)이 필요합니다."}
    )

class AnalysisRequestSchema(Schema):
    """POST /api/identify/analysis 요청의 분석 종류 및 (선택) 이미지 URL."""
    analysis_type = fields.Str(
        load_default=DEFAULT_ANALYSIS_TYPE,
        validate=validate.OneOf(list(ANALYSIS_SYSTEM_PROMPTS)),
        data_key='analysisType'
    )
    image_url = fields.Url(schemes={'http', 'https'}, data_key='imageUrl')

class AlternativeResponseSchema(Schema):
    breed_name = fields.Str(data_key='breedName')
    confidence = fields.Float()

class BreedInfoResponseSchema(Schema):
    origin = fields.Str()
    type = fields.Str()
    characteristics = fields.Str()
    primary_use = fields.Str(data_key='primaryUse')
    average_weight = fields.Str(allow_none=True, data_key='averageWeight')
    milk_yield = fields.Str(allow_none=True, data_key='milkYield')

class PredictionResponseSchema(Schema):
    """
    예측 결과 응답 스키마. 화면 표시용 confidencePercent와 createdAt을 함께 내려줍니다.
    대체 후보(alternativePossibilities)는 신뢰도 내림차순으로 정렬합니다.
    """
    id = fields.Str()
    breed_name = fields.Str(data_key='breedName')
    confidence = fields.Float()
    confidence_percent = fields.Method('get_confidence_percent', data_key='confidencePercent')
    breed_info = fields.Nested(BreedInfoResponseSchema, data_key='breedInfo')
    analysis_notes = fields.Str(allow_none=True, data_key='analysisNotes')
    alternative_possibilities = fields.Method('get_alternatives', data_key='alternativePossibilities')
    timestamp = fields.Int()
    created_at = fields.Method('get_created_at', data_key='createdAt')
    image_url = fields.Str(allow_none=True, data_key='imageUrl')

    def get_confidence_percent(self, obj):
        return round(obj.confidence * 100)

    def get_alternatives(self, obj):
        ranked = sorted(obj.alternative_possibilities, key=lambda alt: alt.confidence, reverse=True)
        return AlternativeResponseSchema(many=True).dump(ranked)

    def get_created_at(self, obj):
        return millis_to_iso(obj.timestamp)

class IdentificationResponseSchema(Schema):
    """품종 식별 응답. 기록 저장에 실패해도 식별 결과는 반환됩니다."""
    prediction = fields.Nested(PredictionResponseSchema, required=True)
    history_saved = fields.Bool(required=True, data_key='historySaved')

class AnalysisResponseSchema(Schema):
    analysis = fields.Str(allow_none=True)
    analysis_type = fields.Str(attribute='analysisType', data_key='analysisType')
    image_url = fields.Str(allow_none=True, attribute='imageUrl', data_key='imageUrl')
