# social_feed/core/config.py

import os # 환경 변수를 읽기 위해 사용합니다.

class Config:
    """모든 환경 설정의 기반이 되는 공통 설정 클래스입니다."""
    # JWT 서명 키. 인증 제공자가 발급한 토큰을 검증하는 데 사용됩니다.
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY')

    FIREBASE_STORAGE_BUCKET = os.getenv('FIREBASE_STORAGE_BUCKET')

    # 게시글 이미지 조회용 서명 URL 유효 기간 (일). 기본값은 약 100년입니다.
    POST_IMAGE_URL_EXPIRY_DAYS = int(os.getenv('POST_IMAGE_URL_EXPIRY_DAYS', 36500))
    # 클라이언트 직접 업로드용 URL 유효 기간 (분)
    UPLOAD_URL_EXPIRY_MINUTES = int(os.getenv('UPLOAD_URL_EXPIRY_MINUTES', 15))

    POST_TEXT_MAX_LENGTH = int(os.getenv('POST_TEXT_MAX_LENGTH', 3000))
    COMMENT_TEXT_MAX_LENGTH = int(os.getenv('COMMENT_TEXT_MAX_LENGTH', 1000))

class DevelopmentConfig(Config):
    """개발 환경을 위한 설정 클래스입니다."""
    DEBUG = True
    FIREBASE_CREDENTIALS_PATH = os.getenv('DEV_FIREBASE_CREDENTIALS_PATH')

class TestingConfig(Config):
    """테스트 환경을 위한 설정 클래스입니다."""
    TESTING = True
    DEBUG = False
    FIREBASE_CREDENTIALS_PATH = os.getenv('TEST_FIREBASE_CREDENTIALS_PATH')
    # 테스트에서는 토큰을 직접 발급하므로 고정 키를 사용합니다.
    JWT_SECRET_KEY = os.getenv('TEST_JWT_SECRET_KEY', 'test-secret-key-with-enough-length-for-hs256')
    FIREBASE_STORAGE_BUCKET = os.getenv('FIREBASE_STORAGE_BUCKET', 'test-bucket')

class ProductionConfig(Config):
    """운영 환경을 위한 설정 클래스입니다."""
    DEBUG = False
    FIREBASE_CREDENTIALS_PATH = os.getenv('PROD_FIREBASE_CREDENTIALS_PATH')

# FLASK_ENV 값에 따라 create_app 에서 적절한 설정 클래스를 선택합니다.
config_by_name = dict(
    development=DevelopmentConfig,
    testing=TestingConfig,
    production=ProductionConfig
)
