# social_feed/__init__.py

# =====================================================================================
# 1. 환경 변수 로드 (가장 먼저 실행)
# =====================================================================================
from dotenv import load_dotenv
load_dotenv()

# =====================================================================================
# 2. 모듈 임포트 (Module Imports)
# =====================================================================================
import os
import atexit
import logging
from flask import Flask, jsonify
from marshmallow import ValidationError
from werkzeug.exceptions import HTTPException
from flask_jwt_extended import JWTManager
import firebase_admin
from firebase_admin import credentials, firestore

# - 설정
from social_feed.core.config import config_by_name
from social_feed.core import exceptions

# - API 블루프린트
from social_feed.api.posts.routes import posts_bp
from social_feed.api.comments.routes import comments_bp
from social_feed.api.uploads.routes import uploads_bp

# - 서비스 모듈
from social_feed.services.storage_service import StorageService
from social_feed.services.identity_service import IdentityService
from social_feed.api.comments.services import CommentService
from social_feed.api.posts.services import PostService
from social_feed.api.posts.workflows import PostCreationWorkflow

def _init_firestore(app: Flask):
    """Firebase 앱을 초기화하고 Firestore 클라이언트를 한 번만 생성합니다."""
    if not firebase_admin._apps:
        cred_path = app.config.get('FIREBASE_CREDENTIALS_PATH')
        if not cred_path or not os.path.exists(cred_path):
            raise FileNotFoundError(f"Firebase 인증 파일을 찾을 수 없습니다: {cred_path}")
        cred = credentials.Certificate(cred_path)
        firebase_admin.initialize_app(cred, {
            'storageBucket': app.config['FIREBASE_STORAGE_BUCKET']
        })

    db = firestore.client()
    # 프로세스 종료 시 연결을 정리합니다.
    atexit.register(db.close)
    return db

def create_app(config_name=None, db=None, storage_bucket=None):
    """
    Flask 애플리케이션 팩토리 함수.

    :param config_name: 'development' / 'testing' / 'production' (기본값: FLASK_ENV)
    :param db: 미리 만든 Firestore 클라이언트. 없으면 Firebase 설정으로 새로 생성합니다.
    :param storage_bucket: 미리 만든 Storage 버킷. 없으면 FIREBASE_STORAGE_BUCKET 으로 생성합니다.
    """
    # =====================================================================================
    # 3. Flask 앱 생성 및 기본 설정
    # =====================================================================================
    config_name = config_name or os.getenv('FLASK_ENV', 'development')

    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])
    app.json.ensure_ascii = False

    # =====================================================================================
    # 4. 확장 기능 및 외부 서비스 초기화
    # =====================================================================================
    JWTManager(app)

    if db is None:
        db = _init_firestore(app)

    # =====================================================================================
    # 5. 서비스 인스턴스 생성 및 'app.services'에 저장 (의존성 주입)
    # =====================================================================================
    app.services = {}

    try:
        storage_instance = StorageService(bucket=storage_bucket)
        storage_instance.init_app(app)
        app.services['storage'] = storage_instance
        logging.info("Storage service initialized successfully")
    except Exception as e:
        logging.error(f"Failed to initialize storage service: {e}")
        raise

    app.services['identity'] = IdentityService()
    app.services['comments'] = CommentService(db=db)
    app.services['posts'] = PostService(
        db=db,
        comment_service=app.services['comments'],
        storage_service=app.services['storage']
    )
    app.services['post_creation'] = PostCreationWorkflow(
        post_service=app.services['posts'],
        storage_service=app.services['storage'],
        max_text_length=app.config['POST_TEXT_MAX_LENGTH']
    )

    # =====================================================================================
    # 6. 블루프린트 등록
    # =====================================================================================
    app.register_blueprint(posts_bp, url_prefix='/api/posts')
    app.register_blueprint(comments_bp, url_prefix='/api/posts')
    app.register_blueprint(uploads_bp, url_prefix='/api/uploads')

    # =====================================================================================
    # 7. 전역 에러 핸들러 설정
    # =====================================================================================
    @app.errorhandler(ValidationError)
    def handle_marshmallow_validation(err):
        response = {"error_code": "VALIDATION_ERROR", "details": err.messages}
        return jsonify(response), 400

    @app.errorhandler(exceptions.NotFoundError)
    def handle_not_found(err):
        return jsonify({"error_code": "RESOURCE_NOT_FOUND", "message": str(err)}), 404

    @app.errorhandler(exceptions.AuthenticationError)
    def handle_unauthenticated(err):
        return jsonify({"error_code": "UNAUTHORIZED", "message": str(err)}), 401

    @app.errorhandler(Exception)
    def handle_generic_exception(err):
        # 라우팅 404/405 등 HTTP 예외는 그대로 돌려보냅니다.
        if isinstance(err, HTTPException):
            return err
        logging.error(f"An unhandled exception occurred: {err}", exc_info=True)
        response = {"error_code": "INTERNAL_SERVER_ERROR", "message": "서버 내부에서 예상치 못한 오류가 발생했습니다."}
        return jsonify(response), 500

    # =====================================================================================
    # 8. 로깅 및 앱 반환
    # =====================================================================================
    if not app.debug:
        logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]')

    logging.info(f"Flask app created for '{config_name}' environment.")

    return app
