# app/core/config.py

import os # 'os' 모듈: 환경 변수를 읽기 위해 사용합니다.

# .env.example 에 들어있는 기본값. 이 값이 그대로 남아 있으면 키가 설정되지 않은 것으로 간주합니다.
OPENAI_API_KEY_PLACEHOLDER = 'your-openai-api-key-here'

class Config:
    """모든 환경 설정의 기반이 되는 공통 설정 클래스입니다."""
    # 외부 비전 API 인증 키. 없거나 placeholder 값이면 모든 식별 요청이 ConfigurationError로 차단됩니다.
    OPENAI_API_KEY = os.getenv('OPENAI_API_KEY')
    OPENAI_MODEL = os.getenv('OPENAI_MODEL', 'gpt-4o')
    OPENAI_TIMEOUT = float(os.getenv('OPENAI_TIMEOUT', 60))
    # 건강/상태 등 보조 분석 호출의 최대 출력 토큰 수
    ANALYSIS_MAX_TOKENS = int(os.getenv('ANALYSIS_MAX_TOKENS', 1000))

    # 업로드 이미지 최대 크기 (10 MiB)
    MAX_UPLOAD_BYTES = 10 * 1024 * 1024
    # Flask 요청 본문 한도. 10~16 MiB 구간은 업로드 검증기가 UploadError로 응답합니다.
    MAX_CONTENT_LENGTH = 16 * 1024 * 1024

    # 'openai' 또는 'mock' (데모용 예측기)
    BREED_PREDICTOR = os.getenv('BREED_PREDICTOR', 'openai')
    MOCK_DELAY_SECONDS = float(os.getenv('MOCK_DELAY_SECONDS', 2.0))

    # 최근 예측 기록 저장소 설정
    HISTORY_BACKEND = os.getenv('HISTORY_BACKEND', 'file')  # 'file' 또는 'firestore'
    # 지정하지 않으면 Flask instance 폴더의 {HISTORY_KEY}.json을 사용합니다.
    HISTORY_FILE_PATH = os.getenv('HISTORY_FILE_PATH')
    HISTORY_KEY = os.getenv('HISTORY_KEY', 'recentPredictions')
    HISTORY_COLLECTION = os.getenv('HISTORY_COLLECTION', 'breed_history')
    HISTORY_CAPACITY = 10

    FIREBASE_CREDENTIALS_PATH = os.getenv('FIREBASE_CREDENTIALS_PATH')

class DevelopmentConfig(Config):
    """개발 환경을 위한 설정 클래스입니다."""
    DEBUG = True

class TestingConfig(Config):
    """테스트 환경을 위한 설정 클래스입니다."""
    TESTING = True
    DEBUG = False
    # 테스트에서는 실제 키를 절대 사용하지 않습니다. 필요한 테스트만 config_overrides로 주입합니다.
    OPENAI_API_KEY = None
    OPENAI_MODEL = 'gpt-4o'
    BREED_PREDICTOR = 'openai'
    MOCK_DELAY_SECONDS = 0.0
    HISTORY_BACKEND = 'file'
    HISTORY_FILE_PATH = None
    HISTORY_KEY = 'recentPredictions'

class ProductionConfig(Config):
    """운영 환경을 위한 설정 클래스입니다."""
    DEBUG = False

# config_by_name: FLASK_ENV 값과 설정 클래스를 매핑하는 딕셔너리입니다.
# app/__init__.py의 create_app 함수에서 사용됩니다.
config_by_name = dict(
    development=DevelopmentConfig,
    testing=TestingConfig,
    production=ProductionConfig
)
