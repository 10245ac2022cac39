"""RecipeType and RecipeRecipeType models."""

from sqlalchemy import Column, ForeignKey, Integer, String, UniqueConstraint

from recipebook.database import Base
from recipebook.models.mixins import CreatedAtMixin


class RecipeType(Base, CreatedAtMixin):
    """Shared classification label (e.g. "Món chính")."""

    __tablename__ = "recipe_types"

    id = Column(Integer, primary_key=True, index=True)
    content = Column(String(255), nullable=False)
    normalized_content = Column(String(255), nullable=False, unique=True, index=True)


class RecipeRecipeType(Base, CreatedAtMixin):
    """Link between a recipe and a type label."""

    __tablename__ = "recipe_recipe_types"
    __table_args__ = (
        UniqueConstraint("recipe_id", "recipe_type_id", name="uq_recipe_recipe_type"),
    )

    id = Column(Integer, primary_key=True, index=True)
    recipe_id = Column(Integer, ForeignKey("recipes.id"), nullable=False, index=True)
    recipe_type_id = Column(Integer, ForeignKey("recipe_types.id"), nullable=False)
