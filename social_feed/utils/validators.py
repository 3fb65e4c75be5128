# social_feed/utils/validators.py
from typing import Optional

from social_feed.core.exceptions import ValidationError
from social_feed.models.user import UserSnapshot


def require_text(text: Optional[str], field_name: str = "text") -> str:
    """공백만 있거나 비어 있는 본문을 거부합니다. 통과하면 원문을 그대로 반환합니다."""
    if text is None or not str(text).strip():
        raise ValidationError(f"{field_name}은(는) 비어 있을 수 없습니다.")
    return text


def require_user(user: Optional[UserSnapshot]) -> UserSnapshot:
    """작성자 스냅샷의 필수 필드(user_id, user_image, first_name)를 확인합니다."""
    if user is None:
        raise ValidationError("작성자 정보가 필요합니다.")
    missing = user.missing_fields()
    if missing:
        raise ValidationError(f"작성자 정보에 필수 필드가 없습니다: {', '.join(missing)}")
    return user
