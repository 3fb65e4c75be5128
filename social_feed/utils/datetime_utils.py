# social_feed/utils/datetime_utils.py
"""
프로젝트 전체에서 일관된 시간 처리를 위한 유틸리티 모듈

- 모든 timestamp 는 UTC timezone-aware datetime 으로 통일합니다.
- Firestore 저장/조회 시의 변환을 한 곳에서 처리합니다.
"""

from datetime import datetime, timezone
from typing import Any


class DateTimeUtils:
    """시간/날짜 처리를 위한 중앙화된 유틸리티 클래스"""

    @staticmethod
    def now() -> datetime:
        """현재 시간을 UTC timezone-aware datetime으로 반환"""
        return datetime.now(timezone.utc)

    @staticmethod
    def for_firestore(obj: Any) -> Any:
        """
        Firestore 저장을 위해 객체의 datetime 필드를 UTC 로 변환

        변환 규칙:
        - timezone-naive datetime -> timezone-aware datetime (UTC)
        - 다른 timezone 의 datetime -> UTC
        - dict/list 내부 재귀적 변환
        """
        return DateTimeUtils._to_utc(obj)

    @staticmethod
    def from_firestore(obj: Any) -> Any:
        """
        Firestore에서 읽은 데이터의 datetime 필드를 UTC timezone-aware 로 정규화

        Firestore 는 DatetimeWithNanoseconds(datetime 하위 클래스)를 돌려주므로
        일반 datetime 과 같은 규칙으로 처리됩니다.
        """
        return DateTimeUtils._to_utc(obj)

    @staticmethod
    def _to_utc(obj: Any) -> Any:
        if isinstance(obj, datetime):
            if obj.tzinfo is None:
                return obj.replace(tzinfo=timezone.utc)
            return obj.astimezone(timezone.utc)

        elif isinstance(obj, dict):
            return {k: DateTimeUtils._to_utc(v) for k, v in obj.items()}

        elif isinstance(obj, list):
            return [DateTimeUtils._to_utc(item) for item in obj]

        return obj
