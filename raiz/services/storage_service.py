# raiz/services/storage_service.py
"""Bucketed object storage for uploaded images.

By default objects live on disk under ``UPLOAD_FOLDER/<bucket>/<name>`` and
are served back through the ``uploads.serve`` route. When ``S3_BUCKET`` is
configured they are written to that S3 bucket instead, under the key
``<bucket>/<name>``, and ``public_url`` returns the object URL. Names are
generated here, never taken from the client.
"""

from __future__ import annotations

import os
import time
import uuid
import logging

import boto3
from botocore.client import Config
from botocore.exceptions import BotoCoreError, ClientError
from flask import current_app, url_for
from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

logger = logging.getLogger(__name__)

AVATARS_BUCKET = 'avatars'
PROJECT_IMAGES_BUCKET = 'project_images'
BUCKETS = (AVATARS_BUCKET, PROJECT_IMAGES_BUCKET)

S3_EXTENSION_KEY = 'raiz_s3'


class StorageError(Exception):
    """Raised when an upload is rejected or cannot be written."""
    pass


def s3_resource():
    """The app's boto3 S3 resource, created on first use."""
    resource = current_app.extensions.get(S3_EXTENSION_KEY)
    if resource is None:
        resource = boto3.resource(
            's3',
            region_name=current_app.config.get('AWS_REGION'),
            aws_access_key_id=current_app.config.get('AWS_ACCESS_KEY_ID'),
            aws_secret_access_key=current_app.config.get('AWS_SECRET_ACCESS_KEY'),
            config=Config(signature_version='s3v4'),
        )
        current_app.extensions[S3_EXTENSION_KEY] = resource
    return resource


class StorageService:

    @staticmethod
    def uses_s3() -> bool:
        return bool(current_app.config.get('S3_BUCKET'))

    @staticmethod
    def bucket_path(bucket: str) -> str:
        if bucket not in BUCKETS:
            raise StorageError(f"Unknown bucket: {bucket}")
        return os.path.join(current_app.config['UPLOAD_FOLDER'], bucket)

    @staticmethod
    def s3_key(bucket: str, name: str) -> str:
        if bucket not in BUCKETS:
            raise StorageError(f"Unknown bucket: {bucket}")
        return f"{bucket}/{name}"

    @staticmethod
    def extension_of(filename: str) -> str:
        safe = secure_filename(filename or '')
        if '.' not in safe:
            return ''
        return safe.rsplit('.', 1)[1].lower()

    @staticmethod
    def is_allowed(filename: str) -> bool:
        ext = StorageService.extension_of(filename)
        return bool(ext) and ext in current_app.config['ALLOWED_IMAGE_EXTENSIONS']

    @staticmethod
    def object_name(bucket: str, ext: str, owner_id: int | None = None) -> str:
        token = uuid.uuid4().hex
        if bucket == AVATARS_BUCKET and owner_id is not None:
            return f"{owner_id}-{token}.{ext}"
        return f"{int(time.time() * 1000)}-{token}.{ext}"

    @staticmethod
    def _save_to_disk(bucket: str, name: str, file: FileStorage) -> None:
        directory = StorageService.bucket_path(bucket)
        try:
            os.makedirs(directory, exist_ok=True)
            file.save(os.path.join(directory, name))
        except OSError as e:
            logger.error(f"Failed to store {name} in bucket {bucket}: {e}")
            raise StorageError("Could not store the uploaded file.") from e

    @staticmethod
    def _put_to_s3(bucket: str, name: str, file: FileStorage) -> None:
        key = StorageService.s3_key(bucket, name)
        try:
            s3_resource().Bucket(current_app.config['S3_BUCKET']).put_object(
                Key=key,
                Body=file.stream,
                ACL='public-read',
                ContentType=file.mimetype or 'application/octet-stream',
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to upload {key} to S3: {e}")
            raise StorageError("Could not store the uploaded file.") from e

    @staticmethod
    def upload(bucket: str, file: FileStorage, owner_id: int | None = None) -> str:
        """Store *file* in *bucket* and return the generated object name.

        Objects are never overwritten; every upload gets a fresh name.
        """
        if file is None or not file.filename:
            raise StorageError("No file was provided.")
        if not StorageService.is_allowed(file.filename):
            allowed = ', '.join(sorted(current_app.config['ALLOWED_IMAGE_EXTENSIONS']))
            raise StorageError(f"Unsupported image type. Allowed: {allowed}.")

        ext = StorageService.extension_of(file.filename)
        name = StorageService.object_name(bucket, ext, owner_id)
        if StorageService.uses_s3():
            StorageService._put_to_s3(bucket, name, file)
        else:
            StorageService._save_to_disk(bucket, name, file)

        logger.info(f"Stored object {bucket}/{name}")
        return name

    @staticmethod
    def public_url(bucket: str, name: str) -> str:
        if StorageService.uses_s3():
            config = current_app.config
            return (f"https://{config['S3_BUCKET']}.s3.{config['AWS_REGION']}.amazonaws.com/"
                    f"{StorageService.s3_key(bucket, name)}")
        return url_for('uploads.serve', bucket=bucket, name=name)

    @staticmethod
    def upload_public(bucket: str, file: FileStorage, owner_id: int | None = None) -> str:
        """Upload and return the public URL in one step."""
        return StorageService.public_url(bucket, StorageService.upload(bucket, file, owner_id))
