# social_feed/api/posts/workflows.py
import logging
from dataclasses import dataclass
from typing import Optional, Dict, Any

from social_feed.api.posts.services import PostService
from social_feed.core.exceptions import AuthenticationError, CreationError, ValidationError
from social_feed.services.identity_service import Identity
from social_feed.services.storage_service import StorageService
from social_feed.utils.validators import require_text

@dataclass
class ImagePayload:
    """요청에 첨부된 이미지 파일."""
    data: bytes
    filename: str
    content_type: str

    @property
    def size(self) -> int:
        return len(self.data)


class PostCreationWorkflow:
    """
    게시글 작성 흐름(인증 확인 → 입력 검증 → 이미지 업로드 → 저장)을 담당합니다.
    재시도나 중복 방지 키는 없으므로, 같은 입력으로 두 번 호출하면 게시글이 두 개 생깁니다.
    """
    def __init__(self, post_service: PostService, storage_service: StorageService,
                 max_text_length: Optional[int] = None):
        self.post_service = post_service
        self.storage_service = storage_service
        self.max_text_length = max_text_length

    def create_post(self, identity: Optional[Identity], text: Optional[str],
                    image: Optional[ImagePayload] = None) -> Dict[str, Any]:
        if identity is None:
            raise AuthenticationError("인증되지 않은 사용자입니다.")
        require_text(text, "게시글 내용")
        if self.max_text_length is not None and len(text) > self.max_text_length:
            raise ValidationError(f"게시글은 {self.max_text_length}자 이하여야 합니다.")

        user = identity.to_snapshot()
        try:
            if image is not None and image.size > 0:
                # 1. 이미지를 Storage 에 업로드
                uploaded = self.storage_service.upload_post_image(
                    identity.id, image.data, image.filename, image.content_type
                )
                # 2. 이미지 URL 과 함께 게시글 저장
                # DB 저장이 실패해도 이미 올라간 이미지는 정리하지 않습니다.
                return self.post_service.create(
                    user, text, image_url=uploaded['url'], image_path=uploaded['file_path']
                )
            return self.post_service.create(user, text)
        except Exception as e:
            logging.error(f"게시글 생성 실패 (user_id: {identity.id}): {e}", exc_info=True)
            raise CreationError("게시글 생성에 실패했습니다.") from e
