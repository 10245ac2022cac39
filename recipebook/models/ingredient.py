"""IngredientMaster and RecipeIngredient models."""

from sqlalchemy import Column, ForeignKey, Integer, String, UniqueConstraint

from recipebook.database import Base
from recipebook.models.mixins import CreatedAtMixin


class IngredientMaster(Base, CreatedAtMixin):
    """Shared ingredient name, reused by every recipe that mentions it."""

    __tablename__ = "ingredient_masters"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    normalized_name = Column(String(255), nullable=False, unique=True, index=True)


class RecipeIngredient(Base, CreatedAtMixin):
    """Link between a recipe and an ingredient master row."""

    __tablename__ = "recipe_ingredients"
    __table_args__ = (
        UniqueConstraint("recipe_id", "ingredient_id", name="uq_recipe_ingredient"),
    )

    id = Column(Integer, primary_key=True, index=True)
    recipe_id = Column(Integer, ForeignKey("recipes.id"), nullable=False, index=True)
    ingredient_id = Column(Integer, ForeignKey("ingredient_masters.id"), nullable=False)
