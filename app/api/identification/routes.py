# app/api/identification/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app

from app.core.exceptions import UploadError
from app.models.image_ref import LocalFile, RemoteUrl
from .schemas import (
    ImageUrlRequestSchema, AnalysisRequestSchema,
    IdentificationResponseSchema, AnalysisResponseSchema
)

logger = logging.getLogger(__name__)

identification_bp = Blueprint('identification_bp', __name__)


def _read_uploaded_image():
    """
    multipart 요청의 'image' 파일을 LocalFile로 읽습니다.
    한도 + 1 바이트까지만 읽어, 크기 초과 여부는 검증 단계에서 판단합니다.
    """
    upload = request.files.get('image')
    if upload is None:
        return None
    max_bytes = current_app.config['MAX_UPLOAD_BYTES']
    data = upload.stream.read(max_bytes + 1)
    return LocalFile(data=data, content_type=upload.mimetype, filename=upload.filename)


def _json_body() -> dict:
    payload = request.get_json(silent=True)
    if not payload:
        raise UploadError('Please select an image to upload.')
    return payload


@identification_bp.route('/', methods=['POST'])
def identify_breed():
    """
    업로드한 이미지(또는 이미지 URL)의 품종을 식별합니다.

    Body:
        - multipart/form-data: image (file, required)
        - application/json: {"imageUrl": "https://..."}
    """
    service = current_app.services['identification']

    image = _read_uploaded_image()
    if image is None:
        data = ImageUrlRequestSchema().load(_json_body())
        image = RemoteUrl(url=data['image_url'])

    result = service.identify(image)
    return jsonify(IdentificationResponseSchema().dump(result)), 200


@identification_bp.route('/retry', methods=['POST'])
def retry_identification():
    """마지막으로 제출한 이미지로 식별을 다시 요청합니다."""
    service = current_app.services['identification']
    result = service.retry()
    return jsonify(IdentificationResponseSchema().dump(result)), 200


@identification_bp.route('/reset', methods=['POST'])
def reset_identification():
    """새 식별을 시작합니다. 재시도용으로 보관 중인 이미지를 비웁니다."""
    current_app.services['identification'].reset()
    return jsonify({"message": "Ready for a new identification."}), 200


@identification_bp.route('/analysis', methods=['POST'])
def analyze_image():
    """
    이미지에 대한 보조 분석(breed, health, condition)을 요청합니다.

    Body:
        - multipart/form-data: image (file), analysisType (str, optional)
        - application/json: {"imageUrl": "https://...", "analysisType": "health"}
    """
    service = current_app.services['identification']

    image = _read_uploaded_image()
    if image is not None:
        data = AnalysisRequestSchema().load({k: v for k, v in request.form.items() if k == 'analysisType'})
    else:
        data = AnalysisRequestSchema().load(_json_body())
        if not data.get('image_url'):
            raise UploadError('Please select an image to upload.')
        image = RemoteUrl(url=data['image_url'])

    result = service.analyze(image, data['analysis_type'])
    logger.info(f"보조 분석 완료: {data['analysis_type']}")
    return jsonify(AnalysisResponseSchema().dump(result)), 200
