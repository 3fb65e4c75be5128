# social_feed/models/post.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, List

from social_feed.models.user import UserSnapshot
from social_feed.utils.datetime_utils import DateTimeUtils

@dataclass
class Post:
    """
    Firestore 'posts' 컬렉션의 문서 구조를 정의하는 데이터클래스.
    댓글은 'comments' 컬렉션에 따로 저장되고, 여기에는 생성 순서대로 ID만 보관합니다.
    """
    post_id: str
    user: UserSnapshot
    text: str
    image_url: Optional[str] = None
    image_path: Optional[str] = None # Storage 객체 경로 (삭제 시 사용)
    likes: List[str] = field(default_factory=list)
    comment_ids: List[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=DateTimeUtils.now)
    updated_at: datetime = field(default_factory=DateTimeUtils.now)
