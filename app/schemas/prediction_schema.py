from marshmallow import Schema, fields, validate, EXCLUDE

class BreedInfoSchema(Schema):
    """비전 API가 돌려준 breedInfo 객체 검증용 스키마."""
    class Meta:
        unknown = EXCLUDE

    origin = fields.Str(required=True)
    type = fields.Str(required=True)
    characteristics = fields.Str(required=True)
    primary_use = fields.Str(required=True, data_key='primaryUse')
    average_weight = fields.Str(load_default=None, allow_none=True, data_key='averageWeight')
    milk_yield = fields.Str(load_default=None, allow_none=True, data_key='milkYield')

class AlternativePossibilitySchema(Schema):
    class Meta:
        unknown = EXCLUDE

    breed_name = fields.Str(required=True, validate=validate.Length(min=1), data_key='breedName')
    confidence = fields.Float(required=True, validate=validate.Range(min=0, max=1))

class BreedPredictionPayloadSchema(Schema):
    """
    비전 API 응답(JSON 문자열을 파싱한 결과)의 유효성 검증 스키마.
    응답 포맷 계약과 같은 필드를 요구하며, 위반 시 ValidationError가 발생합니다.
    """
    class Meta:
        unknown = EXCLUDE

    breed_name = fields.Str(required=True, validate=validate.Length(min=1), data_key='breedName')
    confidence = fields.Float(required=True, validate=validate.Range(min=0, max=1))
    breed_info = fields.Nested(BreedInfoSchema, required=True, data_key='breedInfo')
    analysis_notes = fields.Str(load_default=None, allow_none=True, data_key='analysisNotes')
    alternative_possibilities = fields.List(
        fields.Nested(AlternativePossibilitySchema),
        load_default=list,
        data_key='alternativePossibilities'
    )

# datetime이 표현할 수 있는 마지막 시각 (9999-12-31T23:59:59.999Z)
MAX_TIMESTAMP_MS = 253402300799999

class PredictionRecordSchema(BreedPredictionPayloadSchema):
    """
    저장소에 보관된 예측 기록 한 건의 검증 스키마.
    비전 API 응답 필드에 기록 전용 필드(id, timestamp, imageUrl)를 더합니다.
    """
    id = fields.Str(required=True, validate=validate.Length(min=1))
    timestamp = fields.Int(required=True, strict=True, validate=validate.Range(min=0, max=MAX_TIMESTAMP_MS))
    image_url = fields.Str(load_default=None, allow_none=True, data_key='imageUrl')
