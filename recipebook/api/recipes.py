"""Recipe API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from recipebook.api.dependencies import (
    get_actor_id,
    get_recipe_editor,
    get_recipe_reader,
    get_recipe_writer,
    get_social_service,
)
from recipebook.api.forms import get_recipe_form
from recipebook.schemas.recipe import (
    RecipeDetail,
    RecipeEditForm,
    RecipeForm,
    RecipeSuggestions,
    RecipeWriteResult,
)
from recipebook.schemas.social import (
    CommentCreate,
    CommentResponse,
    DeleteResponse,
    LikeToggleResponse,
    ReportCreate,
    ReportResponse,
    SaveToggleResponse,
    ShareResponse,
)
from recipebook.services.recipe_editor import RecipeEditor
from recipebook.services.recipe_reader import RecipeReader
from recipebook.services.recipe_writer import RecipeWriter
from recipebook.services.social_service import SocialService

router = APIRouter(prefix="/api/v1/recipes", tags=["recipes"])

ActorId = Annotated[int | None, Depends(get_actor_id)]


# --- Static routes first (before /{recipe_id}) ---


@router.get("/suggestions", response_model=RecipeSuggestions)
async def get_suggestions(
    reader: Annotated[RecipeReader, Depends(get_recipe_reader)],
):
    """Known ingredient names and recipe types for the add/edit forms."""
    return reader.suggestions()


@router.post("", response_model=RecipeWriteResult, status_code=status.HTTP_201_CREATED)
async def create_recipe(
    form: Annotated[RecipeForm, Depends(get_recipe_form)],
    actor_id: ActorId,
    writer: Annotated[RecipeWriter, Depends(get_recipe_writer)],
):
    """Create a recipe with its ingredients, types, steps and media."""
    return writer.create(actor_id, form)


# --- Single recipe ---


@router.get("/{recipe_id}", response_model=RecipeDetail)
async def get_recipe(
    recipe_id: int,
    actor_id: ActorId,
    reader: Annotated[RecipeReader, Depends(get_recipe_reader)],
):
    """Get a recipe with everything its detail page shows."""
    return reader.detail(recipe_id, viewer_id=actor_id)


@router.get("/{recipe_id}/edit", response_model=RecipeEditForm)
async def get_recipe_edit_form(
    recipe_id: int,
    actor_id: ActorId,
    reader: Annotated[RecipeReader, Depends(get_recipe_reader)],
):
    """Get the current values of a recipe for its owner's edit form."""
    return reader.edit_form(recipe_id, actor_id)


@router.put("/{recipe_id}", response_model=RecipeWriteResult)
async def update_recipe(
    recipe_id: int,
    form: Annotated[RecipeForm, Depends(get_recipe_form)],
    actor_id: ActorId,
    editor: Annotated[RecipeEditor, Depends(get_recipe_editor)],
):
    """Replace a recipe's fields, ingredients, types and steps."""
    return editor.edit(recipe_id, actor_id, form)


@router.delete("/{recipe_id}", response_model=DeleteResponse)
async def delete_recipe(
    recipe_id: int,
    actor_id: ActorId,
    editor: Annotated[RecipeEditor, Depends(get_recipe_editor)],
):
    """Delete a recipe and its dependent rows."""
    editor.delete(recipe_id, actor_id)
    return DeleteResponse()


# --- Interactions ---


@router.post("/{recipe_id}/like", response_model=LikeToggleResponse)
async def toggle_like(
    recipe_id: int,
    actor_id: ActorId,
    social: Annotated[SocialService, Depends(get_social_service)],
):
    """Like or unlike a recipe."""
    return social.toggle_like(actor_id, recipe_id)


@router.post("/{recipe_id}/save", response_model=SaveToggleResponse)
async def toggle_save(
    recipe_id: int,
    actor_id: ActorId,
    social: Annotated[SocialService, Depends(get_social_service)],
):
    """Save a recipe to, or remove it from, the user's notebook."""
    return social.toggle_save(actor_id, recipe_id)


@router.post("/{recipe_id}/share", response_model=ShareResponse)
async def share_recipe(
    recipe_id: int,
    actor_id: ActorId,
    social: Annotated[SocialService, Depends(get_social_service)],
):
    """Record that the user shared a recipe."""
    return social.record_share(actor_id, recipe_id)


@router.post("/{recipe_id}/comments", response_model=CommentResponse)
async def add_comment(
    recipe_id: int,
    comment: CommentCreate,
    actor_id: ActorId,
    social: Annotated[SocialService, Depends(get_social_service)],
):
    """Comment on a recipe."""
    return social.add_comment(actor_id, recipe_id, comment.body)


@router.post("/{recipe_id}/report", response_model=ReportResponse)
async def report_recipe(
    recipe_id: int,
    report: ReportCreate,
    actor_id: ActorId,
    social: Annotated[SocialService, Depends(get_social_service)],
):
    """Report a recipe to moderators."""
    return social.report(actor_id, recipe_id, report.reason)
