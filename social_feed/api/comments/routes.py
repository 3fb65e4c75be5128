# social_feed/api/comments/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required
from marshmallow import ValidationError

from social_feed.api.comments.schemas import CommentCreateSchema, CommentResponseSchema
from social_feed.core import exceptions


comments_bp = Blueprint('comments_bp', __name__)

@comments_bp.route('/<string:post_id>/comments', methods=['POST'])
@jwt_required()
def create_comment(post_id: str):
    """
    특정 게시글에 새로운 댓글을 작성합니다.
    - 성공 시, 생성된 댓글 정보를 201 Created 상태 코드와 함께 반환합니다.
    """
    post_service = current_app.services['posts']
    identity = current_app.services['identity'].current_user()
    try:
        data = CommentCreateSchema().load(request.get_json(silent=True) or {})
        max_length = current_app.config['COMMENT_TEXT_MAX_LENGTH']
        if len(data['text']) > max_length:
            raise ValidationError({"text": [f"댓글은 {max_length}자 이하여야 합니다."]})

        new_comment = post_service.comment(post_id, identity.to_snapshot(), data['text'])
        return jsonify(CommentResponseSchema().dump(new_comment)), 201
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except exceptions.ValidationError as e:
        return jsonify({"error_code": "VALIDATION_ERROR", "message": str(e)}), 400
    except exceptions.NotFoundError as e:
        return jsonify({"error_code": "POST_NOT_FOUND", "message": str(e)}), 404
    except exceptions.StorageError as e:
        logging.error(f"댓글 생성 중 오류 발생 (post_id: {post_id}): {e}", exc_info=True)
        return jsonify({"error_code": "COMMENT_CREATION_FAILED", "message": "댓글 생성 중 오류가 발생했습니다."}), 500

@comments_bp.route('/<string:post_id>/comments', methods=['GET'])
def get_comments(post_id: str):
    """특정 게시글의 댓글 목록을 최신순으로 조회합니다."""
    post_service = current_app.services['posts']
    try:
        comments = post_service.get_comments(post_id)
        return jsonify({"comments": CommentResponseSchema(many=True).dump(comments)}), 200
    except exceptions.NotFoundError as e:
        return jsonify({"error_code": "POST_NOT_FOUND", "message": str(e)}), 404
