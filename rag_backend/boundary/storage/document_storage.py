"""
Raw document storage.

Stores uploaded files and hands the ingestion pipeline a local path to read.
The local backend serves development and tests; the S3 backend serves
deployments. Blocking I/O runs in the threadpool.

Dependencies: boto3, fastapi.concurrency
System role: Raw file storage boundary for upload and ingestion
"""

import logging
import os
import shutil
import tempfile
import uuid
from pathlib import Path
from typing import Protocol, runtime_checkable

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from fastapi.concurrency import run_in_threadpool

from rag_backend.configs.storage import StorageSettings
from rag_backend.core.exceptions import UpstreamFailureError

logger = logging.getLogger(__name__)

TEMP_PREFIX = "doc_pipeline_"


def build_storage_key(owner_id: str, file_name: str) -> str:
    """Key layout: {owner_id}/{uuid}/{file_name}."""
    safe_name = Path(file_name).name or "document"
    return f"{owner_id}/{uuid.uuid4()}/{safe_name}"


@runtime_checkable
class DocumentStorage(Protocol):
    """Operations on raw uploaded files."""

    async def save(self, key: str, data: bytes, content_type: str | None = None) -> None: ...

    async def download(self, key: str) -> str: ...

    async def release(self, path: str) -> None: ...

    async def delete(self, key: str) -> None: ...


class LocalDocumentStorage:
    """Filesystem storage rooted at one directory."""

    def __init__(self, root_dir: str) -> None:
        self._root = Path(root_dir)

    def _path_for(self, key: str) -> Path:
        path = (self._root / key).resolve()
        if self._root.resolve() not in path.parents:
            raise UpstreamFailureError("storage", f"Key escapes storage root: {key}")
        return path

    async def save(self, key: str, data: bytes, content_type: str | None = None) -> None:
        path = self._path_for(key)
        try:
            await run_in_threadpool(self._write, path, data)
        except OSError as e:
            raise UpstreamFailureError(
                "storage_save", f"Failed to write {key}: {e}", details={"key": key}
            ) from e

    @staticmethod
    def _write(path: Path, data: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)

    async def download(self, key: str) -> str:
        """
        Copy the stored file into a fresh temp directory.

        Returns:
            str: Local path the caller releases when done
        """
        source = self._path_for(key)
        if not source.is_file():
            raise UpstreamFailureError(
                "storage_download", f"File not found in storage: {key}", details={"key": key}
            )
        temp_dir = tempfile.mkdtemp(prefix=TEMP_PREFIX)
        target = os.path.join(temp_dir, source.name)
        try:
            await run_in_threadpool(shutil.copyfile, source, target)
        except OSError as e:
            shutil.rmtree(temp_dir, ignore_errors=True)
            raise UpstreamFailureError(
                "storage_download", f"Failed to read {key}: {e}", details={"key": key}
            ) from e
        return target

    async def release(self, path: str) -> None:
        await run_in_threadpool(_remove_temp_dir, path)

    async def delete(self, key: str) -> None:
        path = self._path_for(key)
        try:
            await run_in_threadpool(path.unlink, True)
        except OSError as e:
            raise UpstreamFailureError(
                "storage_delete", f"Failed to delete {key}: {e}", details={"key": key}
            ) from e


class S3DocumentStorage:
    """S3 bucket storage for raw documents."""

    def __init__(self, bucket: str, region: str = "us-east-1", client=None) -> None:
        """
        Args:
            bucket: S3 bucket name for document storage
            region: AWS region for the bucket
            client: Optional preconfigured boto3 S3 client
        """
        self._bucket = bucket
        self._region = region
        self._s3_client = client or boto3.client("s3", region_name=region)

    async def save(self, key: str, data: bytes, content_type: str | None = None) -> None:
        try:
            await run_in_threadpool(
                self._s3_client.put_object,
                Bucket=self._bucket,
                Key=key,
                Body=data,
                ContentType=content_type or "application/octet-stream",
            )
        except (ClientError, BotoCoreError) as e:
            raise UpstreamFailureError(
                "storage_save",
                f"Failed to upload to S3: {e}",
                details={"bucket": self._bucket, "key": key},
            ) from e

    async def download(self, key: str) -> str:
        """
        Download an object to a temp directory.

        Returns:
            str: Local file path

        Raises:
            UpstreamFailureError: When the object is missing or the download fails
        """
        file_name = Path(key).name
        if not file_name:
            raise UpstreamFailureError("storage_download", f"Invalid S3 key: {key}")

        temp_dir = tempfile.mkdtemp(prefix=TEMP_PREFIX)
        local_path = os.path.join(temp_dir, file_name)
        try:
            await run_in_threadpool(
                self._s3_client.download_file,
                Bucket=self._bucket,
                Key=key,
                Filename=local_path,
            )
        except ClientError as e:
            shutil.rmtree(temp_dir, ignore_errors=True)
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            if error_code in ("404", "NoSuchKey"):
                message = f"File not found in S3: {key}"
            else:
                message = f"Failed to download from S3: {e}"
            raise UpstreamFailureError(
                "storage_download", message, details={"bucket": self._bucket, "key": key}
            ) from e
        except BotoCoreError as e:
            shutil.rmtree(temp_dir, ignore_errors=True)
            raise UpstreamFailureError(
                "storage_download",
                f"Failed to download from S3: {e}",
                details={"bucket": self._bucket, "key": key},
            ) from e
        return local_path

    async def release(self, path: str) -> None:
        await run_in_threadpool(_remove_temp_dir, path)

    async def delete(self, key: str) -> None:
        try:
            await run_in_threadpool(
                self._s3_client.delete_object, Bucket=self._bucket, Key=key
            )
        except (ClientError, BotoCoreError) as e:
            raise UpstreamFailureError(
                "storage_delete",
                f"Failed to delete from S3: {e}",
                details={"bucket": self._bucket, "key": key},
            ) from e


def _remove_temp_dir(path: str) -> None:
    """Delete the temp directory a download created, never anything else."""
    parent = os.path.dirname(path)
    if os.path.basename(parent).startswith(TEMP_PREFIX):
        shutil.rmtree(parent, ignore_errors=True)
    else:
        logger.warning(f"{__name__}:release - Refusing to remove non-temp path {path}")


def create_document_storage(settings: StorageSettings) -> DocumentStorage:
    """Build the storage backend selected by settings."""
    if settings.backend == "s3":
        logger.info(f"{__name__}:create_document_storage - Using S3 bucket {settings.s3_bucket}")
        return S3DocumentStorage(settings.s3_bucket, settings.s3_region)
    logger.info(f"{__name__}:create_document_storage - Using local root {settings.local_root}")
    return LocalDocumentStorage(settings.local_root)
