# app/api/about/routes.py
from flask import Blueprint, request, jsonify

from .content import get_about_content, TECHNOLOGY_FEATURES, DEFAULT_LANGUAGE

about_bp = Blueprint('about_bp', __name__)

@about_bp.route('/', methods=['GET'])
def get_about():
    """
    소개 섹션 콘텐츠를 조회합니다.

    Query Parameters:
        - lang (str, optional): 'en' 또는 'hi' (기본값: en)
    """
    language = request.args.get('lang', DEFAULT_LANGUAGE).strip().lower()
    return jsonify(get_about_content(language)), 200

@about_bp.route('/technology', methods=['GET'])
def get_technology_features():
    """식별 화면에 표시되는 비전 기술 소개 카드를 조회합니다."""
    return jsonify({'features': TECHNOLOGY_FEATURES}), 200
