# app/services/storage.py

import os
import uuid
import logging
from abc import ABC, abstractmethod
from typing import Optional

from firebase_admin import storage as firebase_storage
from supabase import create_client, Client
from storage3.exceptions import StorageApiError

from app import config

logger = logging.getLogger(__name__)


class ImageNotFoundError(LookupError):
    pass


class InvalidImageIdError(ValueError):
    pass


def new_image_id(filename: Optional[str]) -> str:
    """Generates a unique id that keeps the upload's file extension."""
    ext = ""
    if filename and "." in filename:
        ext = "." + filename.rsplit(".", 1)[-1].lower()
    return f"{uuid.uuid4()}{ext}"


def validate_image_id(image_id: str) -> str:
    if (
        not image_id
        or image_id.startswith(".")
        or "/" in image_id
        or "\\" in image_id
    ):
        raise InvalidImageIdError(f"Invalid image id: {image_id!r}")
    return image_id


class ImageStorage(ABC):
    """Where uploaded photographs live between upload and analysis."""

    @abstractmethod
    def save(self, data: bytes, filename: Optional[str], content_type: Optional[str]) -> str:
        ...

    @abstractmethod
    def read(self, image_id: str) -> bytes:
        ...

    @abstractmethod
    def delete(self, image_id: str) -> None:
        ...


class LocalImageStorage(ImageStorage):
    def __init__(self, directory: str):
        self.directory = directory
        # Create the uploads directory if it doesn't exist
        os.makedirs(self.directory, exist_ok=True)

    def _path(self, image_id: str) -> str:
        return os.path.join(self.directory, validate_image_id(image_id))

    def save(self, data, filename, content_type):
        image_id = new_image_id(filename)
        with open(self._path(image_id), "wb") as f:
            f.write(data)
        logger.info(f"Image saved: {image_id}")
        return image_id

    def read(self, image_id):
        try:
            with open(self._path(image_id), "rb") as f:
                return f.read()
        except FileNotFoundError as e:
            raise ImageNotFoundError(image_id) from e

    def delete(self, image_id):
        try:
            os.remove(self._path(image_id))
        except FileNotFoundError as e:
            raise ImageNotFoundError(image_id) from e
        logger.info(f"Image deleted: {image_id}")


class FirebaseImageStorage(ImageStorage):
    def __init__(self, bucket_name: Optional[str] = None):
        config.initialize_firebase()
        self.bucket = firebase_storage.bucket(bucket_name)

    def save(self, data, filename, content_type):
        image_id = new_image_id(filename)
        blob = self.bucket.blob(image_id)
        blob.upload_from_string(data, content_type=content_type)
        logger.info(f"Image uploaded to Firebase: {image_id}")
        return image_id

    def read(self, image_id):
        blob = self.bucket.blob(validate_image_id(image_id))
        if not blob.exists():
            raise ImageNotFoundError(image_id)
        return blob.download_as_bytes()

    def delete(self, image_id):
        blob = self.bucket.blob(validate_image_id(image_id))
        if not blob.exists():
            raise ImageNotFoundError(image_id)
        blob.delete()
        logger.info(f"Image deleted from Firebase: {image_id}")


class SupabaseImageStorage(ImageStorage):
    def __init__(self, url: Optional[str], key: Optional[str], bucket: Optional[str]):
        if not url or not key or not bucket:
            raise RuntimeError("SUPABASE_URL, SUPABASE_KEY or SUPABASE_BUCKET is missing in .env file")
        self.client: Client = create_client(url, key)
        self.bucket = bucket

    def save(self, data, filename, content_type):
        image_id = new_image_id(filename)
        self.client.storage.from_(self.bucket).upload(
            path=image_id,
            file=data,
            file_options={"content-type": content_type or "application/octet-stream"}
        )
        logger.info(f"Image uploaded to Supabase: {image_id}")
        return image_id

    def read(self, image_id):
        try:
            return self.client.storage.from_(self.bucket).download(validate_image_id(image_id))
        except StorageApiError as e:
            raise ImageNotFoundError(image_id) from e

    def delete(self, image_id):
        removed = self.client.storage.from_(self.bucket).remove([validate_image_id(image_id)])
        if not removed:
            raise ImageNotFoundError(image_id)
        logger.info(f"Image deleted from Supabase: {image_id}")


def create_storage(backend: str = config.STORAGE_BACKEND) -> ImageStorage:
    """Builds the storage backend named by STORAGE_BACKEND."""
    if backend == "local":
        return LocalImageStorage(config.UPLOAD_DIR)
    if backend == "firebase":
        return FirebaseImageStorage(config.FIREBASE_STORAGE_BUCKET)
    if backend == "supabase":
        return SupabaseImageStorage(config.SUPABASE_URL, config.SUPABASE_KEY, config.SUPABASE_BUCKET)
    raise ValueError(f"Unknown storage backend: {backend!r}")
