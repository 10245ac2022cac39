"""Blob store tests."""

from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError
from conftest import JPEG, MP4, PNG

from recipebook.services.storage import (
    LocalBlobStore,
    MediaFile,
    S3BlobStore,
    StorageError,
    detect_video,
)


@pytest.mark.parametrize(
    "data,expected",
    [
        (MP4, True),
        (b"\x00\x00\x00\x1cftypqt  " + b"\x00" * 16, True),
        (b"\x00\x00\x00\x18ftypheic" + b"\x00" * 16, False),
        (b"\x1a\x45\xdf\xa3" + b"\x00" * 16, True),
        (b"RIFF\x00\x00\x00\x00AVI LIST", True),
        (b"RIFF\x00\x00\x00\x00WEBPVP8 ", False),
        (b"\x00\x00\x01\xba" + b"\x00" * 16, True),
        (JPEG, False),
        (PNG, False),
        (b"GIF89a" + b"\x00" * 8, False),
        (b"hello world", None),
    ],
)
def test_detect_video(data, expected):
    assert detect_video(data) is expected


def test_detect_mpeg_transport_stream():
    data = bytearray(400)
    data[0] = 0x47
    data[188] = 0x47
    assert detect_video(bytes(data)) is True


def test_gif_with_sync_byte_at_packet_offset_is_image(blob_store):
    data = bytearray(b"GIF89a" + b"\x01" * 300)
    data[188] = 0x47

    assert detect_video(bytes(data)) is False
    assert blob_store.classify(MediaFile("anim.gif", "image/gif", bytes(data))) is False


def test_classify_ignores_misleading_name_and_type(blob_store):
    disguised = MediaFile("holiday.jpg", "image/jpeg", MP4)
    assert blob_store.classify(disguised) is True

    renamed = MediaFile("clip.mp4", "video/mp4", JPEG)
    assert blob_store.classify(renamed) is False


def test_classify_falls_back_to_content_type(blob_store):
    assert blob_store.classify(MediaFile("x.bin", "video/x-custom", b"????")) is True
    assert blob_store.classify(MediaFile("x.bin", None, b"????")) is False


def test_upload_key_layout(blob_store):
    url = blob_store.upload(MediaFile("a.JPG", "image/jpeg", JPEG), False, "recipes/7/steps/2")
    key = url.removeprefix("memory://")
    assert key.startswith("recipes/7/steps/2/images/")
    assert key.endswith(".jpg")
    assert blob_store.objects[key] == JPEG

    url = blob_store.upload(MediaFile("b.mp4", "video/mp4", MP4), True, "recipes/7")
    assert url.startswith("memory://recipes/7/videos/")


def test_local_blob_store_writes_file(tmp_path):
    store = LocalBlobStore(tmp_path, "/media/")
    url = store.upload(MediaFile("a.png", "image/png", PNG), False, "recipes/1")

    assert url.startswith("/media/recipes/1/images/")
    stored = tmp_path / url.removeprefix("/media/")
    assert stored.read_bytes() == PNG


def test_local_blob_store_rejects_traversal(tmp_path):
    store = LocalBlobStore(tmp_path, "/media")
    with pytest.raises(StorageError):
        store.put_bytes("../escape.png", PNG, "image/png")


def test_s3_blob_store_puts_object():
    client = MagicMock()
    store = S3BlobStore(
        endpoint_url="http://minio:9000",
        region_name="auto",
        access_key_id="key",
        secret_access_key="secret",
        bucket="media",
        public_base_url="https://cdn.example.com/",
        client=client,
    )

    url = store.upload(MediaFile("v.mp4", "video/mp4", MP4), True, "recipes/3/steps/1")

    assert url.startswith("https://cdn.example.com/recipes/3/steps/1/videos/")
    kwargs = client.put_object.call_args.kwargs
    assert kwargs["Bucket"] == "media"
    assert kwargs["ContentType"] == "video/mp4"
    assert kwargs["Key"] == url.removeprefix("https://cdn.example.com/")


def test_s3_blob_store_wraps_client_errors():
    client = MagicMock()
    client.put_object.side_effect = ClientError(
        {"Error": {"Code": "AccessDenied", "Message": "denied"}}, "PutObject"
    )
    store = S3BlobStore("http://minio:9000", "auto", "k", "s", "media", "https://cdn", client=client)

    with pytest.raises(StorageError):
        store.upload(MediaFile("a.jpg", "image/jpeg", JPEG), False, "recipes/1")
