# social_feed/api/posts/schemas.py
from marshmallow import Schema, fields

from social_feed.api.comments.schemas import CommentResponseSchema, UserSnapshotSchema

# --- API 응답 스키마 ---
# 게시글 작성은 multipart 폼(postInput + image)으로 받으며, 검증은 PostCreationWorkflow 가 담당합니다.

class PostResponseSchema(Schema):
    """게시글 정보 응답을 위한 최종 JSON 형식을 정의합니다."""
    post_id = fields.Str(required=True)
    user = fields.Nested(UserSnapshotSchema, required=True)
    text = fields.Str(required=True)
    image_url = fields.Str(allow_none=True)
    likes = fields.List(fields.Str(), dump_default=list)
    comments = fields.List(fields.Nested(CommentResponseSchema), dump_default=list)
    created_at = fields.DateTime(required=True)
    updated_at = fields.DateTime(required=True)

class LikesResponseSchema(Schema):
    """좋아요/좋아요 취소 후의 상태 응답."""
    post_id = fields.Str(required=True)
    likes = fields.List(fields.Str(), required=True)
