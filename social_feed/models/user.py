# social_feed/models/user.py
from dataclasses import dataclass
from typing import Optional

@dataclass
class UserSnapshot:
    """
    게시글/댓글 문서 내부에 저장될 작성자 정보.
    작성 시점의 값을 복사해 두며, 이후 프로필이 바뀌어도 갱신하지 않습니다.
    """
    user_id: str
    user_image: str
    first_name: str = ""
    last_name: Optional[str] = None

    def missing_fields(self) -> list:
        """필수 필드 중 비어 있는 항목의 이름을 반환합니다. (first_name 은 빈 문자열 허용)"""
        missing = []
        if not self.user_id:
            missing.append("user_id")
        if not self.user_image:
            missing.append("user_image")
        if self.first_name is None:
            missing.append("first_name")
        return missing
