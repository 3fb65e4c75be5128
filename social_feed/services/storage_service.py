# social_feed/services/storage_service.py
import uuid
import logging
from datetime import timedelta
from flask import Flask
from firebase_admin import storage

class StorageService:
    """
    Firebase Storage 관련 로직을 담당하는 서비스 클래스입니다.
    게시글 이미지 업로드, 직접 업로드용 Pre-signed URL 생성, 파일 삭제 기능을 제공합니다.
    """
    POST_IMAGE_FOLDER = "posts"

    def __init__(self, bucket=None):
        """
        실제 버킷 객체는 init_app 메서드를 통해 주입됩니다.
        (테스트에서는 버킷을 직접 전달할 수 있습니다.)
        """
        self.bucket = bucket
        self.image_url_expiry = timedelta(days=36500)
        self.upload_url_expiry = timedelta(minutes=15)

    def init_app(self, app: Flask):
        """
        Flask 앱 초기화 과정에서 호출되어 Storage 버킷과 URL 유효 기간을 설정합니다.

        :param app: Flask 애플리케이션 객체
        """
        self.image_url_expiry = timedelta(days=app.config.get('POST_IMAGE_URL_EXPIRY_DAYS', 36500))
        self.upload_url_expiry = timedelta(minutes=app.config.get('UPLOAD_URL_EXPIRY_MINUTES', 15))

        if self.bucket is not None:
            return

        bucket_name = app.config.get('FIREBASE_STORAGE_BUCKET')
        if not bucket_name:
            raise ValueError("FIREBASE_STORAGE_BUCKET 설정이 .env 또는 설정 파일에 필요합니다.")

        self.bucket = storage.bucket(bucket_name)
        logging.info("StorageService: Firebase Storage 서비스가 성공적으로 초기화되었습니다.")

    def _require_bucket(self):
        if not self.bucket:
            raise RuntimeError("StorageService가 초기화되지 않았습니다. init_app을 먼저 호출해주세요.")

    def _new_blob_name(self, user_id: str, filename: str) -> str:
        extension = filename.rsplit('.', 1)[-1].lower() if filename and '.' in filename else 'bin'
        return f"{self.POST_IMAGE_FOLDER}/{user_id}/{uuid.uuid4()}.{extension}"

    def upload_post_image(self, user_id: str, data: bytes, filename: str, content_type: str) -> dict:
        """
        게시글 이미지를 서버에서 직접 업로드하고, 오래 유지되는 조회용 URL을 반환합니다.

        :param user_id: 업로드하는 사용자 ID
        :param data: 이미지 바이너리
        :param filename: 원본 파일명 (확장자 파악에 사용)
        :param content_type: MIME 타입 (예: "image/jpeg")
        :return: {"file_path": 저장 경로, "url": 조회용 서명 URL}
        """
        self._require_bucket()

        destination_blob_name = self._new_blob_name(user_id, filename)
        blob = self.bucket.blob(destination_blob_name)
        blob.upload_from_string(data, content_type=content_type)

        # v4 서명은 최대 7일이므로, 장기 URL은 v2 서명을 사용합니다.
        url = blob.generate_signed_url(
            version="v2",
            expiration=self.image_url_expiry,
            method="GET"
        )
        logging.info(f"게시글 이미지 업로드 완료 (path: {destination_blob_name}, size: {len(data)})")
        return {"file_path": destination_blob_name, "url": url}

    def generate_upload_url(self, user_id: str, filename: str, content_type: str) -> dict:
        """
        클라이언트가 서버를 거치지 않고 게시글 이미지를 올릴 수 있는 Pre-signed URL을 생성합니다.
        URL은 해당 경로 하나에 대한 PUT 권한만 가지며, 짧은 시간 동안만 유효합니다.

        :return: 업로드 URL과 서버에서 사용할 파일 경로가 담긴 딕셔너리
        """
        self._require_bucket()

        destination_blob_name = self._new_blob_name(user_id, filename)
        blob = self.bucket.blob(destination_blob_name)

        upload_url = blob.generate_signed_url(
            version="v4",
            expiration=self.upload_url_expiry,
            method="PUT",
            content_type=content_type
        )

        return {
            "upload_url": upload_url,
            "file_path": destination_blob_name
        }

    def delete_file(self, file_path: str) -> bool:
        """
        지정된 파일이 존재하면 삭제합니다.

        :return: 실제로 삭제했는지 여부
        """
        self._require_bucket()

        blob = self.bucket.blob(file_path)
        if not blob.exists():
            logging.warning(f"삭제할 파일이 이미 없습니다: {file_path}")
            return False
        blob.delete()
        return True
