"""FastAPI dependencies for identity, database and services."""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from recipebook.database import get_db
from recipebook.models.user import User
from recipebook.services.auth import decode_access_token, user_from_claims
from recipebook.services.recipe_editor import RecipeEditor
from recipebook.services.recipe_reader import RecipeReader
from recipebook.services.recipe_writer import RecipeWriter
from recipebook.services.social_service import SocialService
from recipebook.services.storage import BlobStore, get_blob_store

# Missing credentials are not an error here: each operation decides whether it
# needs an acting user and raises Unauthenticated itself.
security = HTTPBearer(auto_error=False)


def get_optional_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
) -> User | None:
    """Get the user behind the bearer token, or None."""
    if credentials is None:
        return None
    payload = decode_access_token(credentials.credentials)
    if payload is None:
        return None
    return user_from_claims(db, payload)


def get_actor_id(
    user: Annotated[User | None, Depends(get_optional_user)],
) -> int | None:
    """Acting user id passed into core operations."""
    return user.id if user else None


def get_recipe_writer(
    db: Annotated[Session, Depends(get_db)],
    blob_store: Annotated[BlobStore, Depends(get_blob_store)],
) -> RecipeWriter:
    """Get recipe writer with dependencies."""
    return RecipeWriter(db, blob_store)


def get_recipe_editor(
    db: Annotated[Session, Depends(get_db)],
    blob_store: Annotated[BlobStore, Depends(get_blob_store)],
) -> RecipeEditor:
    """Get recipe editor with dependencies."""
    return RecipeEditor(db, blob_store)


def get_recipe_reader(
    db: Annotated[Session, Depends(get_db)],
) -> RecipeReader:
    """Get recipe reader with dependencies."""
    return RecipeReader(db)


def get_social_service(
    db: Annotated[Session, Depends(get_db)],
) -> SocialService:
    """Get social service with dependencies."""
    return SocialService(db)
