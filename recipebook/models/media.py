"""Media and RecipeStepMedia models."""

from sqlalchemy import CheckConstraint, Column, ForeignKey, Integer, String

from recipebook.database import Base


class Media(Base):
    """An uploaded image or video. Exactly one URL column is set."""

    __tablename__ = "media"
    __table_args__ = (
        CheckConstraint(
            "(media_img IS NULL) <> (media_video IS NULL)",
            name="ck_media_exactly_one_url",
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    media_img = Column(String(1024), nullable=True, index=True)
    media_video = Column(String(1024), nullable=True, index=True)

    @property
    def url(self) -> str | None:
        return self.media_img or self.media_video

    @property
    def is_video(self) -> bool:
        return self.media_video is not None


class RecipeStepMedia(Base):
    """Attaches a media row to a recipe step at a display position."""

    __tablename__ = "recipe_step_media"

    recipe_id = Column(Integer, ForeignKey("recipes.id"), primary_key=True)
    step = Column(Integer, primary_key=True)
    display_order = Column(Integer, primary_key=True)  # 1-based, dense per step
    media_id = Column(Integer, ForeignKey("media.id"), nullable=False)
