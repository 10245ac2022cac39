"""Pydantic schemas for API requests and responses."""

from recipebook.schemas.recipe import (
    RecipeDetail,
    RecipeEditForm,
    RecipeForm,
    RecipeSuggestions,
    RecipeWriteResult,
    StepForm,
)
from recipebook.schemas.social import CommentCreate, ReportCreate

__all__ = [
    "RecipeForm",
    "StepForm",
    "RecipeWriteResult",
    "RecipeDetail",
    "RecipeEditForm",
    "RecipeSuggestions",
    "CommentCreate",
    "ReportCreate",
]
