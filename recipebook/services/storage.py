"""Blob storage for recipe thumbnails and step media.

Two backends share the ``BlobStore`` interface:

- ``LocalBlobStore`` writes files under ``MEDIA_ROOT`` (development, tests)
- ``S3BlobStore`` puts objects into an S3-compatible bucket

Whether an upload is a video is decided from the file's leading bytes, never
from its name. The declared content type is only consulted when no known
container signature matches.
"""

import io
import logging
import mimetypes
import os
import uuid
from dataclasses import dataclass, field
from pathlib import Path

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from recipebook.config import get_settings

logger = logging.getLogger(__name__)

# ISO-BMFF brands that are still images (HEIF/AVIF) rather than video
_ISO_BMFF_IMAGE_BRANDS = {b"heic", b"heix", b"hevc", b"hevx", b"mif1", b"msf1", b"avif", b"avis"}

_IMAGE_SIGNATURES = (
    b"\xff\xd8\xff",  # JPEG
    b"\x89PNG\r\n\x1a\n",
    b"GIF87a",
    b"GIF89a",
    b"BM",
    b"II*\x00",  # TIFF little-endian
    b"MM\x00*",  # TIFF big-endian
)

_MPEG_TS_PACKET = 188


class StorageError(Exception):
    """Raised when the blob store cannot persist an upload."""


@dataclass
class MediaFile:
    """An uploaded file held in memory."""

    filename: str
    content_type: str | None
    data: bytes = field(repr=False)

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def extension(self) -> str:
        return os.path.splitext(self.filename)[1].lower()


def detect_video(data: bytes) -> bool | None:
    """Classify content by container signature.

    Returns True for video, False for image, None when nothing matched.
    """
    head = data[:64]

    if len(head) >= 12 and head[4:8] == b"ftyp":
        return head[8:12] not in _ISO_BMFF_IMAGE_BRANDS
    if head.startswith(b"\x1a\x45\xdf\xa3"):  # Matroska / WebM
        return True
    if head[:4] == b"RIFF":
        if head[8:12] == b"AVI ":
            return True
        if head[8:12] == b"WEBP":
            return False
    if head.startswith(b"FLV\x01"):
        return True
    if head.startswith((b"\x00\x00\x01\xba", b"\x00\x00\x01\xb3")):  # MPEG program stream
        return True
    if head.startswith(b"\x30\x26\xb2\x75\x8e\x66\xcf\x11"):  # ASF / WMV
        return True
    # GIF also starts with 0x47, so image signatures win over the TS sync byte
    if head.startswith(_IMAGE_SIGNATURES):
        return False
    if len(data) > _MPEG_TS_PACKET and data[0] == 0x47 and data[_MPEG_TS_PACKET] == 0x47:
        return True
    return None


class BlobStore:
    """Base class for blob storage backends."""

    def classify(self, file: MediaFile) -> bool:
        """Return True if the file is a video."""
        detected = detect_video(file.data)
        if detected is not None:
            return detected
        return (file.content_type or "").lower().startswith("video/")

    def upload(self, file: MediaFile, is_video: bool, folder_path: str) -> str:
        """Store a file under folder_path and return its public URL."""
        kind = "videos" if is_video else "images"
        key = f"{folder_path.strip('/')}/{kind}/{uuid.uuid4().hex}{file.extension}"
        content_type = (
            file.content_type
            or mimetypes.guess_type(file.filename)[0]
            or "application/octet-stream"
        )
        url = self.put_bytes(key, file.data, content_type)
        logger.info(f"Uploaded {file.filename} ({file.size} bytes) to {url}")
        return url

    def put_bytes(self, key: str, data: bytes, content_type: str) -> str:
        raise NotImplementedError


class LocalBlobStore(BlobStore):
    """Stores blobs on local disk and serves them under a URL prefix."""

    def __init__(self, root: str | Path, public_base_url: str):
        self.root = Path(root)
        self.public_base_url = public_base_url.rstrip("/")

    def put_bytes(self, key: str, data: bytes, content_type: str) -> str:
        if ".." in key:
            raise StorageError(f"Invalid storage key: {key}")

        file_path = self.root / key
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(file_path, "wb") as f:
                f.write(data)
        except OSError as e:
            raise StorageError(f"Failed to write {file_path}: {e}") from e

        return f"{self.public_base_url}/{key}"


class S3BlobStore(BlobStore):
    """Stores blobs in an S3-compatible bucket (MinIO, R2, S3)."""

    def __init__(
        self,
        endpoint_url: str,
        region_name: str,
        access_key_id: str,
        secret_access_key: str,
        bucket: str,
        public_base_url: str,
        client=None,
    ):
        self.bucket = bucket
        self.public_base_url = public_base_url.rstrip("/")
        self.s3 = client or boto3.client(
            service_name="s3",
            endpoint_url=endpoint_url,
            aws_access_key_id=access_key_id,
            aws_secret_access_key=secret_access_key,
            region_name=region_name,
        )

    def put_bytes(self, key: str, data: bytes, content_type: str) -> str:
        try:
            self.s3.put_object(
                Bucket=self.bucket, Key=key, Body=io.BytesIO(data), ContentType=content_type
            )
        except (BotoCoreError, ClientError) as e:
            raise StorageError(f"Failed to upload {key}: {e}") from e
        return f"{self.public_base_url}/{key}"


def get_blob_store() -> BlobStore:
    """Build the blob store configured by STORAGE_BACKEND."""
    settings = get_settings()
    if settings.storage_backend == "s3":
        return S3BlobStore(
            endpoint_url=settings.object_store_endpoint,
            region_name=settings.object_store_region,
            access_key_id=settings.object_store_access_key_id,
            secret_access_key=settings.object_store_secret_access_key,
            bucket=settings.object_store_bucket,
            public_base_url=settings.object_public_base_url,
        )
    return LocalBlobStore(settings.media_root, settings.media_public_base_url)
