# social_feed/core/exceptions.py
"""
서비스 계층에서 발생시키는 도메인 예외 모음.
라우트는 이 예외들을 HTTP 응답 코드로 변환합니다.
"""


class FeedError(Exception):
    """모든 도메인 예외의 기반 클래스."""


class ValidationError(FeedError):
    """입력값이 비어 있거나 필수 필드가 누락된 경우."""


class AuthenticationError(FeedError):
    """인증된 사용자 정보가 없는 경우."""


class NotFoundError(FeedError):
    """참조한 게시글 또는 댓글이 존재하지 않는 경우."""


class CreationError(FeedError):
    """게시글 생성 과정(업로드/저장)에서 하위 작업이 실패한 경우."""


class StorageError(FeedError):
    """Firestore 등 저장소 호출이 실패한 경우."""
