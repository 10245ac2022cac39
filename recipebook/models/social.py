"""Social link models: likes, notebook saves, comments, shares, reports, follows."""

from sqlalchemy import Column, ForeignKey, Integer, String, Text, UniqueConstraint

from recipebook.database import Base
from recipebook.models.enums import ReportStatus
from recipebook.models.mixins import CreatedAtMixin


class Like(Base, CreatedAtMixin):
    """A user's like on a recipe."""

    __tablename__ = "likes"
    __table_args__ = (UniqueConstraint("user_id", "recipe_id", name="uq_like_user_recipe"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    recipe_id = Column(Integer, ForeignKey("recipes.id"), nullable=False, index=True)


class NotebookEntry(Base, CreatedAtMixin):
    """A recipe saved into a user's notebook."""

    __tablename__ = "notebooks"
    __table_args__ = (UniqueConstraint("user_id", "recipe_id", name="uq_notebook_user_recipe"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    recipe_id = Column(Integer, ForeignKey("recipes.id"), nullable=False, index=True)


class Comment(Base, CreatedAtMixin):
    """A comment on a recipe."""

    __tablename__ = "comments"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    recipe_id = Column(Integer, ForeignKey("recipes.id"), nullable=False, index=True)
    body = Column(Text, nullable=False)


class Share(Base, CreatedAtMixin):
    """A user sharing a recipe. Counted once per user."""

    __tablename__ = "shares"
    __table_args__ = (UniqueConstraint("user_id", "recipe_id", name="uq_share_user_recipe"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    recipe_id = Column(Integer, ForeignKey("recipes.id"), nullable=False, index=True)


class Report(Base, CreatedAtMixin):
    """A user's moderation report on a recipe."""

    __tablename__ = "reports"
    __table_args__ = (UniqueConstraint("user_id", "recipe_id", name="uq_report_user_recipe"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    recipe_id = Column(Integer, ForeignKey("recipes.id"), nullable=False, index=True)
    body = Column(Text, nullable=False)
    status = Column(String(50), nullable=False, default=ReportStatus.PENDING.value)


class Follow(Base, CreatedAtMixin):
    """follower_id follows following_id."""

    __tablename__ = "follows"
    __table_args__ = (
        UniqueConstraint("follower_id", "following_id", name="uq_follow_pair"),
    )

    id = Column(Integer, primary_key=True, index=True)
    follower_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    following_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
