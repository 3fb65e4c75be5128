# social_feed/api/comments/services.py

import logging
from dataclasses import asdict
from typing import Dict, Any, List, Tuple
from google.api_core.exceptions import GoogleAPICallError

from social_feed.core.exceptions import StorageError
from social_feed.models.comment import Comment
from social_feed.models.user import UserSnapshot
from social_feed.utils.datetime_utils import DateTimeUtils
from social_feed.utils.validators import require_text, require_user

class CommentService:
    """
    'comments' 컬렉션의 개별 댓글 문서를 다루는 서비스 클래스.
    댓글은 게시글의 comment_ids 와 함께 한 번에 기록되어야 하므로,
    실제 쓰기는 PostService 의 write batch 안에서 이루어집니다.
    """
    def __init__(self, db):
        """앱 팩토리에서 생성된 Firestore 클라이언트를 주입받습니다."""
        self.db = db
        self.comments_ref = self.db.collection('comments')

    def build(self, post_id: str, user: UserSnapshot, text: str) -> Tuple[Any, Comment]:
        """
        새 댓글의 문서 참조와 데이터 객체를 준비합니다. (아직 저장하지 않음)
        - 본문이 비어 있거나 작성자 정보가 부족하면 ValidationError 를 발생시킵니다.
        """
        require_text(text, "댓글 내용")
        require_user(user)

        comment_ref = self.comments_ref.document()
        now = DateTimeUtils.now()
        comment = Comment(
            comment_id=comment_ref.id,
            post_id=post_id,
            user=user,
            text=text,
            created_at=now,
            updated_at=now
        )
        return comment_ref, comment

    def to_document(self, comment: Comment) -> Dict[str, Any]:
        return DateTimeUtils.for_firestore(asdict(comment))

    def get_many(self, comment_ids: List[str]) -> List[Dict[str, Any]]:
        """
        댓글 ID 목록을 실제 댓글 데이터로 변환하여 최신순으로 반환합니다.
        이미 삭제된 댓글 ID 는 건너뜁니다.
        """
        if not comment_ids:
            return []

        refs = [self.comments_ref.document(comment_id) for comment_id in comment_ids]
        try:
            snapshots = list(self.db.get_all(refs))
        except GoogleAPICallError as e:
            logging.error(f"댓글 조회 실패 (count: {len(comment_ids)}): {e}", exc_info=True)
            raise StorageError("댓글을 불러오지 못했습니다.") from e

        order = {comment_id: i for i, comment_id in enumerate(comment_ids)}
        comments = [DateTimeUtils.from_firestore(snap.to_dict()) for snap in snapshots if snap.exists]
        # 같은 시각이면 comment_ids 에서 뒤에 있는(나중에 추가된) 댓글이 먼저
        comments.sort(key=lambda c: (c['created_at'], order.get(c['comment_id'], -1)), reverse=True)
        return comments

    def delete_for_post(self, batch, post_id: str) -> int:
        """게시글에 딸린 모든 댓글의 삭제를 주어진 batch 에 추가하고, 그 개수를 반환합니다."""
        docs = self.comments_ref.where('post_id', '==', post_id).stream()
        count = 0
        for doc in docs:
            batch.delete(doc.reference)
            count += 1
        return count
