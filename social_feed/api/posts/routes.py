# social_feed/api/posts/routes.py
import logging
from flask import Blueprint, request, jsonify, Response, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity

from social_feed.api.posts.schemas import PostResponseSchema, LikesResponseSchema
from social_feed.api.posts.workflows import ImagePayload
from social_feed.core.exceptions import (
    AuthenticationError, CreationError, NotFoundError, StorageError, ValidationError
)


posts_bp = Blueprint('posts_bp', __name__)


def _image_from_request():
    """multipart 요청의 'image' 파일을 ImagePayload 로 변환합니다. 파일이 없으면 None."""
    image_file = request.files.get('image')
    if image_file is None:
        return None
    return ImagePayload(
        data=image_file.read(),
        filename=image_file.filename or '',
        content_type=image_file.mimetype or 'application/octet-stream'
    )


@posts_bp.route('/', methods=['POST'])
@jwt_required(optional=True) # 인증 여부는 워크플로에서 확인합니다.
def create_post():
    """
    새로운 게시글을 생성합니다.
    - 폼 필드 'postInput' 에 본문을, 선택적으로 'image' 파일을 전달합니다.
    - 성공 시, 생성된 게시글 정보를 201 Created 상태 코드와 함께 반환합니다.
    """
    workflow = current_app.services['post_creation']
    identity = current_app.services['identity'].current_user()
    text = request.form.get('postInput')

    try:
        new_post = workflow.create_post(identity, text, _image_from_request())
        return jsonify(PostResponseSchema().dump(new_post)), 201
    except AuthenticationError as e:
        return jsonify({"error_code": "UNAUTHORIZED", "message": str(e)}), 401
    except ValidationError as e:
        return jsonify({"error_code": "VALIDATION_ERROR", "message": str(e)}), 400
    except CreationError as e:
        return jsonify({"error_code": "POST_CREATION_FAILED", "message": str(e)}), 500


@posts_bp.route('/', methods=['GET'])
def get_posts():
    """전체 게시글 피드를 최신순으로 조회합니다. 각 게시글의 댓글도 최신순으로 포함됩니다."""
    post_service = current_app.services['posts']
    try:
        posts = post_service.list_all()
        return jsonify({"posts": PostResponseSchema(many=True).dump(posts)}), 200
    except StorageError as e:
        logging.error(f"게시글 목록 조회 중 오류 발생: {e}", exc_info=True)
        return jsonify({"error_code": "INTERNAL_SERVER_ERROR", "message": "게시물 목록 조회 중 오류가 발생했습니다."}), 500


@posts_bp.route('/<string:post_id>', methods=['GET'])
def get_post(post_id: str):
    """특정 게시글의 상세 정보를 조회합니다."""
    post_service = current_app.services['posts']
    try:
        post = post_service.get_post(post_id)
        return jsonify(PostResponseSchema().dump(post)), 200
    except NotFoundError as e:
        return jsonify({"error_code": "POST_NOT_FOUND", "message": str(e)}), 404


@posts_bp.route('/<string:post_id>', methods=['DELETE'])
@jwt_required()
def delete_post(post_id: str):
    """
    특정 게시글을 삭제합니다. (작성자 본인만 가능)
    - 게시글의 댓글도 함께 삭제됩니다.
    """
    post_service = current_app.services['posts']
    user_id = get_jwt_identity()
    try:
        post = post_service.get_post(post_id)
        if post.get('user', {}).get('user_id') != user_id:
            raise PermissionError("게시글을 삭제할 권한이 없습니다.")
        post_service.remove(post_id)
        return Response(status=204) # 성공 시 내용 없이 204 No Content 반환
    except PermissionError as e:
        return jsonify({"error_code": "FORBIDDEN", "message": str(e)}), 403
    except NotFoundError as e:
        return jsonify({"error_code": "POST_NOT_FOUND", "message": str(e)}), 404


@posts_bp.route('/<string:post_id>/like', methods=['POST'])
@jwt_required()
def like_post(post_id: str):
    """게시글에 좋아요를 누릅니다. 여러 번 눌러도 한 번만 반영됩니다."""
    post_service = current_app.services['posts']
    user_id = get_jwt_identity()
    try:
        post_service.like(post_id, user_id)
        post = post_service.get_post(post_id)
        return jsonify(LikesResponseSchema().dump(post)), 200
    except NotFoundError as e:
        return jsonify({"error_code": "POST_NOT_FOUND", "message": str(e)}), 404
    except StorageError as e:
        return jsonify({"error_code": "LIKE_FAILED", "message": str(e)}), 500


@posts_bp.route('/<string:post_id>/unlike', methods=['POST'])
@jwt_required()
def unlike_post(post_id: str):
    """게시글 좋아요를 취소합니다."""
    post_service = current_app.services['posts']
    user_id = get_jwt_identity()
    try:
        post_service.unlike(post_id, user_id)
        post = post_service.get_post(post_id)
        return jsonify(LikesResponseSchema().dump(post)), 200
    except NotFoundError as e:
        return jsonify({"error_code": "POST_NOT_FOUND", "message": str(e)}), 404
    except StorageError as e:
        return jsonify({"error_code": "UNLIKE_FAILED", "message": str(e)}), 500
