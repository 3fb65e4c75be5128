# social_feed/services/identity_service.py
import logging
from dataclasses import dataclass
from typing import Optional
from flask_jwt_extended import verify_jwt_in_request, get_jwt_identity, get_jwt

from social_feed.models.user import UserSnapshot

@dataclass
class Identity:
    """인증 제공자가 확인해 준 현재 요청의 사용자 정보."""
    id: str
    image_url: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None

    def to_snapshot(self) -> UserSnapshot:
        """게시글/댓글에 저장할 작성자 스냅샷을 만듭니다. 이름이 없으면 빈 문자열로 채웁니다."""
        return UserSnapshot(
            user_id=self.id,
            user_image=self.image_url,
            first_name=self.first_name or "",
            last_name=self.last_name or "",
        )


class IdentityService:
    """
    요청에 포함된 JWT에서 사용자 정보를 꺼내는 서비스.
    토큰의 'sub' 가 사용자 ID이며, 프로필 정보는 추가 클레임으로 전달됩니다.
    """
    IMAGE_CLAIM = "image_url"
    FIRST_NAME_CLAIM = "first_name"
    LAST_NAME_CLAIM = "last_name"

    def current_user(self) -> Optional[Identity]:
        """
        현재 요청의 인증된 사용자를 반환합니다. 토큰이 없으면 None 을 반환합니다.
        (만료/위조된 토큰은 flask_jwt_extended 가 예외를 발생시킵니다.)
        """
        verify_jwt_in_request(optional=True)
        user_id = get_jwt_identity()
        if not user_id:
            return None

        claims = get_jwt()
        identity = Identity(
            id=user_id,
            image_url=claims.get(self.IMAGE_CLAIM, ""),
            first_name=claims.get(self.FIRST_NAME_CLAIM),
            last_name=claims.get(self.LAST_NAME_CLAIM),
        )
        logging.debug(f"인증된 사용자 확인 (user_id: {user_id})")
        return identity
