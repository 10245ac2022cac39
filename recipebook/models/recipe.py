"""Recipe and RecipeStep models."""

from sqlalchemy import Column, ForeignKey, Integer, String, Text

from recipebook.database import Base
from recipebook.models.mixins import CreatedAtMixin


class Recipe(Base, CreatedAtMixin):
    """Recipe published by a user."""

    __tablename__ = "recipes"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    thumbnail_img = Column(String(1024), nullable=True)  # null until the first upload succeeds
    cook_time = Column(Integer, nullable=True)  # minutes, 1-1440
    level = Column(String(50), nullable=True)  # see RecipeLevel
    step_number = Column(Integer, nullable=False, default=1)


class RecipeStep(Base):
    """A numbered instruction within a recipe.

    Step numbers are 1-based and dense per recipe.
    """

    __tablename__ = "recipe_steps"

    recipe_id = Column(Integer, ForeignKey("recipes.id"), primary_key=True)
    step = Column(Integer, primary_key=True)
    instruction = Column(Text, nullable=False, default="")
