"""Pytest configuration and fixtures."""

import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from recipebook.database import Base, get_db
from recipebook.main import app
from recipebook.models.user import User
from recipebook.schemas.recipe import RecipeForm, StepForm
from recipebook.services.auth import create_access_token
from recipebook.services.storage import BlobStore, MediaFile, StorageError, get_blob_store

JPEG = b"\xff\xd8\xff\xe0\x00\x10JFIF\x00" + b"\x00" * 32
PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32
MP4 = b"\x00\x00\x00\x18ftypmp42\x00\x00\x00\x00mp42isom" + b"\x00" * 32


class AuthHeaders(dict):
    """Dict subclass that also stores user_id."""

    def __init__(self, *args, user_id: int | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.user_id = user_id


class InMemoryBlobStore(BlobStore):
    """Blob store that keeps uploads in a dict.

    Filenames listed in ``fail_on`` raise StorageError on upload.
    """

    def __init__(self, fail_on: set[str] | None = None):
        self.objects: dict[str, bytes] = {}
        self.fail_on = set(fail_on or ())

    def upload(self, file: MediaFile, is_video: bool, folder_path: str) -> str:
        if file.filename in self.fail_on:
            raise StorageError(f"Upload of {file.filename} refused")
        return super().upload(file, is_video, folder_path)

    def put_bytes(self, key: str, data: bytes, content_type: str) -> str:
        self.objects[key] = data
        return f"memory://{key}"


# Use test database - PostgreSQL in Docker, SQLite locally
if os.getenv("DATABASE_URL"):
    SQLALCHEMY_DATABASE_URL = os.getenv("DATABASE_URL").replace("/recipebook", "/recipebook_test")
else:
    SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

connect_args = {"check_same_thread": False} if "sqlite" in SQLALCHEMY_DATABASE_URL else {}
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args=connect_args)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    if "postgresql" in SQLALCHEMY_DATABASE_URL:
        from sqlalchemy_utils import create_database, database_exists

        if not database_exists(SQLALCHEMY_DATABASE_URL):
            create_database(SQLALCHEMY_DATABASE_URL)

    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture(scope="function", autouse=True)
def db():
    """Create a fresh database session for each test with cleanup."""
    session = TestingSessionLocal()

    yield session

    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.close()


@pytest.fixture
def blob_store():
    """In-memory blob store shared by services and the API."""
    return InMemoryBlobStore()


@pytest.fixture(scope="function")
def client(db, blob_store):
    """Create a test client with database and blob store overrides."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_blob_store] = lambda: blob_store
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    """Factory for persisted users."""
    counter = {"n": 0}

    def _make_user(name: str = "Người dùng", email: str | None = None) -> User:
        counter["n"] += 1
        user = User(email=email or f"user{counter['n']}@example.com", name=name)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def user(make_user):
    return make_user("Đầu bếp", "chef@example.com")


@pytest.fixture
def other_user(make_user):
    return make_user("Khách", "guest@example.com")


def headers_for(user: User) -> AuthHeaders:
    token = create_access_token(user.id, user.email)
    return AuthHeaders({"Authorization": f"Bearer {token}"}, user_id=user.id)


@pytest.fixture
def auth_headers(user):
    """Bearer headers for the recipe owner."""
    return headers_for(user)


@pytest.fixture
def other_headers(other_user):
    """Bearer headers for a second user."""
    return headers_for(other_user)


def make_form(**overrides) -> RecipeForm:
    """A valid recipe form; keyword arguments replace fields."""
    values = {
        "name": "Phở bò",
        "description": "Phở bò Hà Nội",
        "cook_time": 120,
        "level": "trung bình",
        "ingredients": ["Bánh phở", "Thịt bò", "Hành"],
        "recipe_types": ["Món chính"],
        "steps": [
            StepForm(instruction="Ninh xương"),
            StepForm(instruction="Trần bánh phở"),
        ],
    }
    values.update(overrides)
    return RecipeForm(**values)


def image_file(name: str = "photo.jpg", data: bytes = JPEG) -> MediaFile:
    return MediaFile(filename=name, content_type="image/jpeg", data=data)


def video_file(name: str = "clip.mp4", data: bytes = MP4) -> MediaFile:
    return MediaFile(filename=name, content_type="video/mp4", data=data)
