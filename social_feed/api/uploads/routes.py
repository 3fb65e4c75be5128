# social_feed/api/uploads/routes.py

import logging
from flask import request, jsonify, Blueprint, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity
from marshmallow import Schema, fields, ValidationError

# 이 블루프린트에 속한 API는 '/api/uploads' 접두사를 갖습니다.
uploads_bp = Blueprint('uploads', __name__)

class UploadUrlRequestSchema(Schema):
    """업로드 URL 발급 요청 스키마"""
    filename = fields.Str(required=True, error_messages={"required": "파일명은 필수입니다."})
    content_type = fields.Str(required=True, error_messages={"required": "content_type은 필수입니다."})


@uploads_bp.route('/url', methods=['POST'])
@jwt_required()
def get_upload_url():
    """
    게시글 이미지를 클라이언트가 직접 업로드할 수 있는 Pre-signed URL을 발급합니다.
    발급된 URL은 하나의 경로에 대한 쓰기 권한만 가지며 짧은 시간 동안만 유효합니다.
    """
    user_id = get_jwt_identity()
    storage_service = current_app.services['storage']

    try:
        data = UploadUrlRequestSchema().load(request.get_json(silent=True) or {})
    except ValidationError as err:
        logging.warning(f"URL 발급 요청 실패 (잘못된 파라미터): {err.messages}")
        return jsonify({"error_code": "INVALID_PARAMETERS", "details": err.messages}), 400

    try:
        url_info = storage_service.generate_upload_url(user_id, data['filename'], data['content_type'])
        return jsonify(url_info), 200
    except Exception as e:
        logging.error(f"Pre-signed URL 생성 중 서버 오류 발생: {e}", exc_info=True)
        return jsonify({"error_code": "URL_GENERATION_FAILED", "message": "URL 생성 중 서버 오류가 발생했습니다."}), 500
