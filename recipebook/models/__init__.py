"""SQLAlchemy models."""

from recipebook.models.ingredient import IngredientMaster, RecipeIngredient
from recipebook.models.media import Media, RecipeStepMedia
from recipebook.models.recipe import Recipe, RecipeStep
from recipebook.models.recipe_type import RecipeRecipeType, RecipeType
from recipebook.models.social import Comment, Follow, Like, NotebookEntry, Report, Share
from recipebook.models.user import User

__all__ = [
    "User",
    "Recipe",
    "RecipeStep",
    "IngredientMaster",
    "RecipeIngredient",
    "RecipeType",
    "RecipeRecipeType",
    "Media",
    "RecipeStepMedia",
    "Like",
    "NotebookEntry",
    "Comment",
    "Share",
    "Report",
    "Follow",
]
