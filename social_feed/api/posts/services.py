# social_feed/api/posts/services.py
import logging
from dataclasses import asdict
from typing import Optional, Dict, Any, List
from firebase_admin import firestore
from google.api_core.exceptions import GoogleAPICallError, NotFound

from social_feed.api.comments.services import CommentService
from social_feed.core.exceptions import NotFoundError, StorageError
from social_feed.models.post import Post
from social_feed.models.user import UserSnapshot
from social_feed.services.storage_service import StorageService
from social_feed.utils.datetime_utils import DateTimeUtils
from social_feed.utils.validators import require_text, require_user

class PostService:
    """
    게시글 애그리거트(게시글 + 좋아요 + 댓글 참조)를 담당하는 서비스 클래스.
    모든 DB 상호작용과 핵심 로직을 포함합니다.

    - 좋아요는 Firestore 의 ArrayUnion/ArrayRemove 로 집합처럼 관리합니다.
    - 댓글 생성과 comment_ids 추가는 하나의 write batch 로 원자적으로 기록합니다.
    - 저장소 오류는 로그를 남긴 뒤 StorageError 로 변환하여 호출자에게 전달합니다.
    """
    def __init__(self, db, comment_service: CommentService, storage_service: Optional[StorageService] = None):
        self.db = db
        self.posts_ref = self.db.collection('posts')
        self.comment_service = comment_service
        self.storage_service = storage_service

    def create(self, user: UserSnapshot, text: str, image_url: Optional[str] = None,
               image_path: Optional[str] = None) -> Dict[str, Any]:
        """새로운 게시글을 생성하고 Firestore에 저장합니다."""
        require_text(text, "게시글 내용")
        require_user(user)

        post_ref = self.posts_ref.document()
        now = DateTimeUtils.now()
        new_post = Post(
            post_id=post_ref.id, user=user, text=text,
            image_url=image_url, image_path=image_path,
            created_at=now, updated_at=now
        )

        try:
            post_ref.set(DateTimeUtils.for_firestore(asdict(new_post)))
        except GoogleAPICallError as e:
            logging.error(f"게시글 생성 실패 (user_id: {user.user_id}): {e}", exc_info=True)
            raise StorageError("게시글을 저장하지 못했습니다.") from e

        logging.info(f"게시글 생성 완료 (post_id: {post_ref.id}, user_id: {user.user_id})")
        post_data = asdict(new_post)
        post_data['comments'] = []
        return post_data

    def like(self, post_id: str, user_id: str) -> None:
        """게시글에 좋아요를 추가합니다. 이미 누른 경우에도 오류 없이 그대로 둡니다."""
        self._update_post(post_id, {'likes': firestore.ArrayUnion([user_id])}, "좋아요")

    def unlike(self, post_id: str, user_id: str) -> None:
        """게시글 좋아요를 취소합니다. 누르지 않은 경우에는 아무 변화도 없습니다."""
        self._update_post(post_id, {'likes': firestore.ArrayRemove([user_id])}, "좋아요 취소")

    def _update_post(self, post_id: str, changes: Dict[str, Any], action: str) -> None:
        changes['updated_at'] = DateTimeUtils.now()
        try:
            # update() 는 문서가 없으면 NotFound 를 발생시키므로 존재 확인을 겸합니다.
            self.posts_ref.document(post_id).update(changes)
        except NotFound as e:
            raise NotFoundError(f"게시글을 찾을 수 없습니다: {post_id}") from e
        except GoogleAPICallError as e:
            logging.error(f"게시글 {action} 처리 실패 (post_id: {post_id}): {e}", exc_info=True)
            raise StorageError(f"{action} 처리 중 오류가 발생했습니다.") from e

    def comment(self, post_id: str, user: UserSnapshot, text: str) -> Dict[str, Any]:
        """
        게시글에 댓글을 작성합니다.
        댓글 문서 생성과 게시글의 comment_ids 추가가 함께 반영되거나, 둘 다 반영되지 않습니다.
        """
        comment_ref, new_comment = self.comment_service.build(post_id, user, text)

        batch = self.db.batch()
        batch.set(comment_ref, self.comment_service.to_document(new_comment))
        batch.update(self.posts_ref.document(post_id), {
            'comment_ids': firestore.ArrayUnion([new_comment.comment_id]),
            'updated_at': new_comment.created_at
        })

        try:
            batch.commit()
        except NotFound as e:
            raise NotFoundError(f"댓글을 작성할 게시글이 존재하지 않습니다: {post_id}") from e
        except GoogleAPICallError as e:
            logging.error(f"댓글 작성 실패 (post_id: {post_id}): {e}", exc_info=True)
            raise StorageError("댓글을 저장하지 못했습니다.") from e

        logging.info(f"댓글 작성 완료 (post_id: {post_id}, comment_id: {new_comment.comment_id})")
        return asdict(new_comment)

    def get_comments(self, post_id: str) -> List[Dict[str, Any]]:
        """게시글의 댓글 전체를 최신순으로 조회합니다."""
        post_data = self._get_post_data(post_id)
        return self.comment_service.get_many(post_data.get('comment_ids', []))

    def get_post(self, post_id: str) -> Dict[str, Any]:
        """게시글 하나를 댓글과 함께 조회합니다."""
        post_data = self._get_post_data(post_id)
        post_data['comments'] = self.comment_service.get_many(post_data.get('comment_ids', []))
        return post_data

    def _get_post_data(self, post_id: str) -> Dict[str, Any]:
        try:
            doc = self.posts_ref.document(post_id).get()
        except GoogleAPICallError as e:
            logging.error(f"게시글 조회 실패 (post_id: {post_id}): {e}", exc_info=True)
            raise StorageError("게시글을 불러오지 못했습니다.") from e
        if not doc.exists:
            raise NotFoundError(f"게시글을 찾을 수 없습니다: {post_id}")
        return DateTimeUtils.from_firestore(doc.to_dict())

    def remove(self, post_id: str) -> None:
        """
        게시글과 그 댓글들을 함께 삭제합니다.
        Storage 이미지 정리는 레코드 삭제 이후에 수행하며, 실패해도 삭제 자체는 유지됩니다.
        """
        post_data = self._get_post_data(post_id)

        try:
            batch = self.db.batch()
            removed_comments = self.comment_service.delete_for_post(batch, post_id)
            batch.delete(self.posts_ref.document(post_id))
            batch.commit()
        except GoogleAPICallError as e:
            logging.error(f"게시글 삭제 실패 (post_id: {post_id}): {e}", exc_info=True)
            raise StorageError("게시글을 삭제하지 못했습니다.") from e

        logging.info(f"게시글 삭제 완료 (post_id: {post_id}, 삭제된 댓글: {removed_comments})")

        image_path = post_data.get('image_path')
        if image_path and self.storage_service:
            try:
                self.storage_service.delete_file(image_path)
            except Exception as e:
                logging.error(f"Storage 이미지 삭제 실패 (path: {image_path}): {e}", exc_info=True)

    def list_all(self) -> List[Dict[str, Any]]:
        """모든 게시글을 최신순으로, 각 게시글의 댓글도 최신순으로 채워서 반환합니다."""
        query = self.posts_ref.order_by("created_at", direction=firestore.Query.DESCENDING)
        try:
            posts = [DateTimeUtils.from_firestore(doc.to_dict()) for doc in query.stream()]
        except GoogleAPICallError as e:
            logging.error(f"게시글 목록 조회 실패: {e}", exc_info=True)
            raise StorageError("게시글 목록을 불러오지 못했습니다.") from e

        # 모든 게시글의 댓글을 한 번에 조회한 뒤 게시글별로 나눕니다.
        all_comment_ids = [cid for post in posts for cid in post.get('comment_ids', [])]
        comments_by_id = {c['comment_id']: c for c in self.comment_service.get_many(all_comment_ids)}

        for post in posts:
            # 같은 시각의 댓글은 나중에 추가된 것(comment_ids 뒤쪽)이 먼저 옵니다.
            resolved = [(comments_by_id[cid], i) for i, cid in enumerate(post.get('comment_ids', [])) if cid in comments_by_id]
            resolved.sort(key=lambda pair: (pair[0]['created_at'], pair[1]), reverse=True)
            post['comments'] = [comment for comment, _ in resolved]
        return posts
