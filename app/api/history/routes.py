# app/api/history/routes.py
import logging
from flask import Blueprint, jsonify, current_app

from app.api.identification.schemas import PredictionResponseSchema
from .schemas import HistoryListSchema

logger = logging.getLogger(__name__)

history_bp = Blueprint('history_bp', __name__)


def _history_payload(store):
    predictions = store.list()
    return {
        'predictions': predictions,
        'total_count': len(predictions),
        'capacity': store.capacity,
    }


@history_bp.route('/', methods=['GET'])
def get_recent_predictions():
    """최근 예측 기록을 최신순으로 조회합니다."""
    store = current_app.services['history']
    return jsonify(HistoryListSchema().dump(_history_payload(store))), 200


@history_bp.route('/<string:prediction_id>', methods=['GET'])
def get_prediction(prediction_id: str):
    """
    기록에서 특정 예측 결과를 다시 조회합니다. 기록의 순서는 바뀌지 않습니다.

    Path Parameters:
        - prediction_id (str): 예측 ID
    """
    store = current_app.services['history']
    prediction = store.select(prediction_id)
    if prediction is None:
        return jsonify({
            "error_code": "PREDICTION_NOT_FOUND",
            "message": f"Prediction not found: {prediction_id}"
        }), 404
    return jsonify(PredictionResponseSchema().dump(prediction)), 200


@history_bp.route('/', methods=['DELETE'])
def clear_history():
    """모든 예측 기록을 삭제합니다."""
    store = current_app.services['history']
    store.clear()
    logger.info("사용자 요청으로 예측 기록을 삭제했습니다.")
    return jsonify(HistoryListSchema().dump(_history_payload(store))), 200
