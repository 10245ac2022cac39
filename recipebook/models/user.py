"""User model."""

from sqlalchemy import Column, Integer, String

from recipebook.database import Base
from recipebook.models.mixins import CreatedAtMixin


class User(Base, CreatedAtMixin):
    """User model for authorship and social links."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=True)
    avatar_img = Column(String(1024), nullable=True)
