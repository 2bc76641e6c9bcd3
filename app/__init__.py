# app/__init__.py

# =====================================================================================
# 1. 환경 변수 로드 (가장 먼저 실행)
# =====================================================================================
from dotenv import load_dotenv
load_dotenv()

# =====================================================================================
# 2. 모듈 임포트 (Module Imports)
# =====================================================================================
import os
import logging
from flask import Flask, jsonify
from marshmallow import ValidationError
from werkzeug.exceptions import HTTPException, RequestEntityTooLarge
import firebase_admin
from firebase_admin import credentials, firestore

# - 설정
from app.core.config import config_by_name
from app.core.exceptions import BreedIdentificationError, UploadError

# - API 블루프린트
from app.api.identification.routes import identification_bp
from app.api.history.routes import history_bp
from app.api.about.routes import about_bp

# - 서비스 모듈
from app.services import openai_service as openai_service_module
from app.services.mock_service import MockBreedService
from app.services.history_backends import JsonFileHistoryBackend, FirestoreHistoryBackend
from app.services.history_store import HistoryStore
from app.services.identification_service import IdentificationService


def _build_history_backend(app: Flask):
    """HISTORY_BACKEND 설정에 따라 예측 기록 저장 방식을 선택합니다."""
    backend_name = app.config['HISTORY_BACKEND']

    if backend_name == 'firestore':
        if not firebase_admin._apps:
            cred_path = app.config['FIREBASE_CREDENTIALS_PATH']
            if not cred_path or not os.path.exists(cred_path):
                raise FileNotFoundError(f"Firebase 인증 파일을 찾을 수 없습니다: {cred_path}")
            firebase_admin.initialize_app(credentials.Certificate(cred_path))
        return FirestoreHistoryBackend(
            firestore.client(),
            collection=app.config['HISTORY_COLLECTION'],
            key=app.config['HISTORY_KEY']
        )

    if backend_name == 'file':
        path = app.config.get('HISTORY_FILE_PATH') or os.path.join(
            app.instance_path, f"{app.config['HISTORY_KEY']}.json"
        )
        return JsonFileHistoryBackend(path)

    raise ValueError(f"'{backend_name}'은(는) 지원하지 않는 HISTORY_BACKEND 입니다. ('file' 또는 'firestore')")


def create_app(config_name: str = None, config_overrides: dict = None):
    """
    Flask 애플리케이션 팩토리 함수.

    :param config_name: 'development', 'testing', 'production' (기본값: FLASK_ENV)
    :param config_overrides: 설정 클래스 값을 덮어쓸 딕셔너리 (테스트용)
    """
    # =====================================================================================
    # 3. Flask 앱 생성 및 기본 설정
    # =====================================================================================
    config_name = config_name or os.getenv('FLASK_ENV', 'development')

    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])
    if config_overrides:
        app.config.update(config_overrides)
    app.json.ensure_ascii = False

    # =====================================================================================
    # 4. 서비스 인스턴스 생성 및 'app.services'에 저장 (의존성 주입)
    # =====================================================================================
    app.services = {}

    # 4-1. 품종 예측기 (OpenAI 또는 데모용 mock)
    predictor_name = app.config['BREED_PREDICTOR']
    if predictor_name == 'mock':
        predictor = MockBreedService()
    elif predictor_name == 'openai':
        predictor = openai_service_module.OpenAIService()
    else:
        raise ValueError(f"'{predictor_name}'은(는) 지원하지 않는 BREED_PREDICTOR 입니다. ('openai' 또는 'mock')")
    predictor.init_app(app)
    app.services['predictor'] = predictor

    # 4-2. 예측 기록 저장소 (시작 시 한 번 로드)
    try:
        history_store = HistoryStore(
            _build_history_backend(app),
            capacity=app.config['HISTORY_CAPACITY']
        )
        history_store.load()
        app.services['history'] = history_store
        logging.info("History store initialized successfully")
    except Exception as e:
        logging.error(f"Failed to initialize history store: {e}")
        raise

    # 4-3. 다른 서비스를 주입받는 식별 흐름 서비스
    app.services['identification'] = IdentificationService(
        predictor=app.services['predictor'],
        history_store=app.services['history'],
        max_upload_bytes=app.config['MAX_UPLOAD_BYTES']
    )

    # =====================================================================================
    # 5. 블루프린트 등록
    # =====================================================================================
    app.register_blueprint(identification_bp, url_prefix='/api/identify')
    app.register_blueprint(history_bp, url_prefix='/api/history')
    app.register_blueprint(about_bp, url_prefix='/api/about')

    @app.route('/api/health', methods=['GET'])
    def health_check():
        return jsonify({
            "status": "ok",
            "predictor": predictor_name,
            "predictor_configured": app.services['predictor'].is_configured,
            "history_backend": app.config['HISTORY_BACKEND'],
        }), 200

    # =====================================================================================
    # 6. 전역 에러 핸들러 설정
    # =====================================================================================
    @app.errorhandler(BreedIdentificationError)
    def handle_breed_identification_error(err):
        logging.warning(f"품종 식별 요청 실패 ({err.kind}): {err.message}")
        return jsonify(err.to_dict()), err.status_code

    @app.errorhandler(ValidationError)
    def handle_marshmallow_validation(err):
        response = {"error_code": "VALIDATION_ERROR", "details": err.messages}
        return jsonify(response), 400

    @app.errorhandler(RequestEntityTooLarge)
    def handle_request_too_large(err):
        limit_mb = app.config['MAX_UPLOAD_BYTES'] // (1024 * 1024)
        upload_error = UploadError(f'File size too large. Please choose an image smaller than {limit_mb}MB.')
        return jsonify(upload_error.to_dict()), 413

    @app.errorhandler(HTTPException)
    def handle_http_exception(err):
        response = {"error_code": err.name.upper().replace(' ', '_'), "message": err.description}
        return jsonify(response), err.code

    @app.errorhandler(Exception)
    def handle_generic_exception(err):
        # 다른 핸들러에서 처리되지 않은 모든 예외를 여기서 처리
        logging.error(f"An unhandled exception occurred: {err}", exc_info=True)
        response = {"error_code": "INTERNAL_SERVER_ERROR", "message": "An unexpected server error occurred."}
        return jsonify(response), 500

    # =====================================================================================
    # 7. 로깅 및 앱 반환
    # =====================================================================================
    if not app.debug:
        logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]')

    logging.info(f"Flask app created for '{config_name}' environment.")

    return app
