# social_feed/api/comments/schemas.py
from marshmallow import Schema, fields, validate

class UserSnapshotSchema(Schema):
    """게시글/댓글 응답에 포함될 작성자 정보 스키마."""
    user_id = fields.Str(required=True)
    user_image = fields.Str(required=True)
    first_name = fields.Str(required=True)
    last_name = fields.Str(allow_none=True)

class CommentCreateSchema(Schema):
    """
    POST /api/posts/{post_id}/comments
    댓글 생성을 요청할 때의 데이터 형식을 정의하고 유효성을 검사합니다.
    최대 길이(COMMENT_TEXT_MAX_LENGTH)는 라우트에서 앱 설정값으로 확인합니다.
    """
    text = fields.Str(required=True, validate=validate.Length(min=1, error="댓글 내용은 비어 있을 수 없습니다."))

class CommentResponseSchema(Schema):
    """댓글 정보 응답을 위한 최종 JSON 형식을 정의합니다."""
    comment_id = fields.Str(required=True)
    post_id = fields.Str(required=True)
    user = fields.Nested(UserSnapshotSchema, required=True)
    text = fields.Str(required=True)
    created_at = fields.DateTime(required=True)
    updated_at = fields.DateTime(required=True)
