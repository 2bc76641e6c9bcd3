# app/api/history/schemas.py
from marshmallow import Schema, fields, validate

from app.api.identification.schemas import PredictionResponseSchema

class HistoryListSchema(Schema):
    """
    최근 예측 기록 목록 응답을 위한 스키마 (최신순)
    """
    predictions = fields.List(fields.Nested(PredictionResponseSchema), required=True)
    total_count = fields.Int(required=True, validate=validate.Range(min=0))
    capacity = fields.Int(required=True)
