# social_feed/conftest.py
"""
테스트 공용 fixture

- FakeFirestore: 서비스가 사용하는 Firestore API 일부(문서 CRUD, where/order_by 쿼리,
  get_all, write batch, ArrayUnion/ArrayRemove)를 메모리에서 흉내 냅니다.
- FakeBucket: Firebase Storage 버킷의 업로드/서명 URL/삭제를 흉내 냅니다.
"""

import copy
import uuid
from datetime import datetime, timedelta, timezone

import pytest
from firebase_admin import firestore
from flask_jwt_extended import create_access_token
from google.api_core.exceptions import NotFound, ServiceUnavailable

from social_feed import create_app
from social_feed.api.comments.services import CommentService
from social_feed.api.posts.services import PostService
from social_feed.api.posts.workflows import PostCreationWorkflow
from social_feed.models.user import UserSnapshot
from social_feed.services.identity_service import Identity
from social_feed.services.storage_service import StorageService
from social_feed.utils.datetime_utils import DateTimeUtils


# --- Firestore 대역 ---

class FakeSnapshot:
    def __init__(self, reference, data):
        self.reference = reference
        self.id = reference.id
        self._data = copy.deepcopy(data)

    @property
    def exists(self):
        return self._data is not None

    def to_dict(self):
        return copy.deepcopy(self._data)


def _apply_changes(current, changes):
    updated = copy.deepcopy(current)
    for key, value in changes.items():
        if isinstance(value, firestore.ArrayUnion):
            items = list(updated.get(key) or [])
            for item in value.values:
                if item not in items:
                    items.append(item)
            updated[key] = items
        elif isinstance(value, firestore.ArrayRemove):
            updated[key] = [item for item in (updated.get(key) or []) if item not in value.values]
        else:
            updated[key] = copy.deepcopy(value)
    return updated


class FakeDocumentReference:
    def __init__(self, db, collection_name, doc_id):
        self._db = db
        self._collection_name = collection_name
        self.id = doc_id

    @property
    def _docs(self):
        return self._db.data.setdefault(self._collection_name, {})

    def get(self):
        self._db.check('get')
        return FakeSnapshot(self, self._docs.get(self.id))

    def set(self, data):
        self._db.check('set')
        self._docs[self.id] = copy.deepcopy(data)

    def update(self, changes):
        self._db.check('update')
        if self.id not in self._docs:
            raise NotFound(f"No document to update: {self._collection_name}/{self.id}")
        self._docs[self.id] = _apply_changes(self._docs[self.id], changes)

    def delete(self):
        self._db.check('delete')
        self._docs.pop(self.id, None)


class FakeQuery:
    def __init__(self, collection, filters=(), orders=()):
        self._collection = collection
        self._filters = list(filters)
        self._orders = list(orders)

    def where(self, field, op, value):
        assert op == '==', "FakeQuery 는 '==' 조건만 지원합니다."
        return FakeQuery(self._collection, self._filters + [(field, value)], self._orders)

    def order_by(self, field, direction=firestore.Query.ASCENDING):
        return FakeQuery(self._collection, self._filters, self._orders + [(field, direction)])

    def stream(self):
        self._collection._db.check('stream')
        docs = self._collection._db.data.setdefault(self._collection.name, {})
        rows = [(doc_id, data) for doc_id, data in docs.items()
                if all(data.get(field) == value for field, value in self._filters)]
        for field, direction in reversed(self._orders):
            rows.sort(key=lambda row: row[1].get(field), reverse=direction == firestore.Query.DESCENDING)
        for doc_id, data in rows:
            yield FakeSnapshot(self._collection.document(doc_id), data)


class FakeCollectionReference(FakeQuery):
    def __init__(self, db, name):
        self._db = db
        self.name = name
        super().__init__(self)

    def document(self, doc_id=None):
        return FakeDocumentReference(self._db, self.name, doc_id or uuid.uuid4().hex[:20])


class FakeWriteBatch:
    def __init__(self, db):
        self._db = db
        self._ops = []

    def set(self, ref, data):
        self._ops.append(('set', ref, data))

    def update(self, ref, changes):
        self._ops.append(('update', ref, changes))

    def delete(self, ref):
        self._ops.append(('delete', ref, None))

    def commit(self):
        self._db.check('commit')
        # 전부 반영되거나 하나도 반영되지 않아야 하므로, 먼저 검증한 뒤 적용합니다.
        pending = {}
        for op, ref, _ in self._ops:
            key = (ref._collection_name, ref.id)
            exists = pending.get(key, ref.id in ref._docs)
            if op == 'update' and not exists:
                raise NotFound(f"No document to update: {ref._collection_name}/{ref.id}")
            pending[key] = op != 'delete'

        for op, ref, payload in self._ops:
            if op == 'set':
                ref._docs[ref.id] = copy.deepcopy(payload)
            elif op == 'update':
                ref._docs[ref.id] = _apply_changes(ref._docs[ref.id], payload)
            else:
                ref._docs.pop(ref.id, None)
        self._db.commits += 1


class FakeFirestore:
    def __init__(self):
        self.data = {}
        self.failing_ops = set()
        self.commits = 0
        self.closed = False

    def check(self, op):
        if op in self.failing_ops:
            raise ServiceUnavailable(f"Firestore unavailable during {op}")

    def collection(self, name):
        return FakeCollectionReference(self, name)

    def batch(self):
        return FakeWriteBatch(self)

    def get_all(self, refs):
        self.check('get_all')
        for ref in refs:
            yield FakeSnapshot(ref, ref._docs.get(ref.id))

    def close(self):
        self.closed = True


# --- Storage 대역 ---

class FakeBlob:
    def __init__(self, bucket, name):
        self.bucket = bucket
        self.name = name

    def upload_from_string(self, data, content_type=None):
        if self.bucket.fail_uploads:
            raise ServiceUnavailable("Storage unavailable")
        self.bucket.files[self.name] = (data, content_type)

    def generate_signed_url(self, version, expiration, method, content_type=None):
        self.bucket.signed.append((self.name, version, expiration, method, content_type))
        return f"https://storage.test/{self.bucket.name}/{self.name}?method={method}"

    def exists(self):
        return self.name in self.bucket.files

    def delete(self):
        del self.bucket.files[self.name]


class FakeBucket:
    def __init__(self, name="test-bucket"):
        self.name = name
        self.files = {}
        self.signed = []
        self.fail_uploads = False

    def blob(self, name):
        return FakeBlob(self, name)


# --- fixtures ---

@pytest.fixture(autouse=True)
def clock(monkeypatch):
    """호출할 때마다 1초씩 증가하는 시계. 생성 순서와 created_at 순서가 항상 일치합니다."""
    state = {"now": datetime(2024, 1, 1, tzinfo=timezone.utc)}

    def tick():
        state["now"] += timedelta(seconds=1)
        return state["now"]

    monkeypatch.setattr(DateTimeUtils, "now", staticmethod(tick))
    return state


@pytest.fixture
def db():
    return FakeFirestore()


@pytest.fixture
def bucket():
    return FakeBucket()


@pytest.fixture
def storage_service(bucket):
    return StorageService(bucket=bucket)


@pytest.fixture
def comment_service(db):
    return CommentService(db=db)


@pytest.fixture
def post_service(db, comment_service, storage_service):
    return PostService(db=db, comment_service=comment_service, storage_service=storage_service)


@pytest.fixture
def workflow(post_service, storage_service):
    return PostCreationWorkflow(post_service=post_service, storage_service=storage_service)


@pytest.fixture
def author():
    return UserSnapshot(user_id="u1", user_image="img", first_name="A", last_name="B")


@pytest.fixture
def identity():
    return Identity(id="u1", image_url="img", first_name="A", last_name="B")


@pytest.fixture
def app(db, bucket):
    app = create_app('testing', db=db, storage_bucket=bucket)
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_headers(app):
    """사용자 ID 와 프로필 클레임으로 Authorization 헤더를 만드는 함수를 반환합니다."""
    def make(user_id="u1", image_url="img", first_name="A", last_name="B"):
        with app.app_context():
            token = create_access_token(
                identity=user_id,
                additional_claims={
                    "image_url": image_url,
                    "first_name": first_name,
                    "last_name": last_name,
                },
            )
        return {"Authorization": f"Bearer {token}"}
    return make
