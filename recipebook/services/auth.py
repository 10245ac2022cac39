"""Bearer token handling.

Tokens are issued by the account service; this service only verifies them
and maps their claims to a user row.
"""

from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt
from sqlalchemy.orm import Session

from recipebook.config import get_settings
from recipebook.models.user import User

settings = get_settings()


def create_access_token(user_id: int, email: str) -> str:
    """Create a JWT access token (used by tests and the seed script)."""
    expire = datetime.now(UTC) + timedelta(minutes=settings.jwt_expiration_minutes)
    to_encode = {
        "sub": str(user_id),
        "email": email,
        "exp": expire,
    }
    encoded_jwt = jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)
    return encoded_jwt


def decode_access_token(token: str) -> dict | None:
    """Decode and validate a JWT token."""
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
        return payload
    except JWTError:
        return None


def get_user_by_email(db: Session, email: str) -> User | None:
    """Get a user by email."""
    return db.query(User).filter(User.email == email).first()


def user_from_claims(db: Session, payload: dict) -> User | None:
    """Resolve the acting user: ``sub`` is the user id, ``email`` the fallback."""
    user_id = payload.get("sub")
    if user_id is not None:
        try:
            return db.query(User).filter(User.id == int(user_id)).first()
        except (TypeError, ValueError):
            return None

    email = payload.get("email")
    if email:
        return get_user_by_email(db, email)
    return None
