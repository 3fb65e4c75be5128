# social_feed/models/comment.py
from dataclasses import dataclass, field
from datetime import datetime

from social_feed.models.user import UserSnapshot
from social_feed.utils.datetime_utils import DateTimeUtils

@dataclass
class Comment:
    """
    Firestore 'comments' 컬렉션의 문서 구조를 정의하는 데이터클래스.
    생성 후에는 수정하지 않습니다.
    """
    comment_id: str
    post_id: str
    user: UserSnapshot
    text: str
    created_at: datetime = field(default_factory=DateTimeUtils.now)
    updated_at: datetime = field(default_factory=DateTimeUtils.now)
