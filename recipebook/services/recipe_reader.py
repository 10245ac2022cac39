"""Read models for the recipe detail page, the edit form and autocompletion."""

import logging
from collections import defaultdict
from collections.abc import Callable
from typing import TypeVar

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from recipebook.errors import NotFound, PersistenceFailure, Unauthenticated
from recipebook.models.ingredient import IngredientMaster, RecipeIngredient
from recipebook.models.media import Media, RecipeStepMedia
from recipebook.models.recipe import Recipe, RecipeStep
from recipebook.models.recipe_type import RecipeRecipeType, RecipeType
from recipebook.models.social import Comment, Follow, Like, NotebookEntry, Share
from recipebook.models.user import User
from recipebook.schemas.recipe import (
    AuthorSummary,
    CommentRead,
    EditStepRead,
    IngredientRead,
    RecipeDetail,
    RecipeEditForm,
    RecipeSuggestions,
    StepMediaRead,
    StepRead,
    ViewerFlags,
)
from recipebook.services.recipe_editor import get_owned_recipe
from recipebook.services.resolver import normalize_name

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RecipeReader:
    """Assembles recipe read models.

    Only the recipe row itself is required. Every other part of the detail
    view (ingredients, steps, counts, comments, viewer flags) falls back to
    an empty value when its query fails, so the page still renders.
    """

    def __init__(self, db: Session):
        self.db = db

    def detail(self, recipe_id: int, viewer_id: int | None = None) -> RecipeDetail:
        try:
            recipe = self.db.query(Recipe).filter(Recipe.id == recipe_id).first()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceFailure(str(e)) from e
        if recipe is None:
            raise NotFound()

        author = self._degrade("author", recipe_id, lambda: self._author(recipe.user_id), None)
        comments = self._degrade("comments", recipe_id, lambda: self._comments(recipe_id), [])

        return RecipeDetail(
            id=recipe.id,
            user_id=recipe.user_id,
            name=recipe.name,
            description=recipe.description,
            thumbnail_img=recipe.thumbnail_img,
            cook_time=recipe.cook_time,
            level=recipe.level,
            step_number=recipe.step_number,
            created_at=recipe.created_at,
            author=author,
            ingredients=self._degrade(
                "ingredients", recipe_id, lambda: self._ingredients(recipe_id), []
            ),
            types=self._degrade("types", recipe_id, lambda: self._type_labels(recipe_id), []),
            steps=self._degrade("steps", recipe_id, lambda: self._steps(recipe_id), []),
            like_count=self._degrade("like count", recipe_id, lambda: self._count(Like, recipe_id), 0),
            comment_count=len(comments),
            share_count=self._degrade(
                "share count", recipe_id, lambda: self._count(Share, recipe_id), 0
            ),
            comments=comments,
            current_user_id=viewer_id,
            viewer=self._degrade(
                "viewer flags", recipe_id, lambda: self._viewer_flags(recipe, viewer_id), ViewerFlags()
            ),
        )

    def edit_form(self, recipe_id: int, actor_id: int | None) -> RecipeEditForm:
        """Current values of a recipe, for the owner's edit form."""
        if not actor_id:
            raise Unauthenticated()
        recipe = get_owned_recipe(self.db, recipe_id, actor_id)

        step_media = self._step_media(recipe_id)
        steps = (
            self.db.query(RecipeStep)
            .filter(RecipeStep.recipe_id == recipe_id)
            .order_by(RecipeStep.step)
            .all()
        )
        return RecipeEditForm(
            id=recipe.id,
            name=recipe.name,
            description=recipe.description,
            cook_time=recipe.cook_time or 0,
            level=recipe.level or "",
            thumbnail_img=recipe.thumbnail_img,
            ingredients=[i.name for i in self._ingredients(recipe_id)],
            recipe_types=self._type_labels(recipe_id),
            steps=[
                EditStepRead(
                    step=s.step,
                    instruction=s.instruction,
                    existing_media_urls=[m.url for m in step_media.get(s.step, [])],
                )
                for s in steps
            ],
        )

    def suggestions(self) -> RecipeSuggestions:
        """Known ingredient names and type labels for autocompletion."""
        return RecipeSuggestions(
            ingredients=self._degrade(
                "ingredient suggestions", None, lambda: self._labels(IngredientMaster.name), []
            ),
            recipe_types=self._degrade(
                "type suggestions", None, lambda: self._labels(RecipeType.content), []
            ),
        )

    def _degrade(self, what: str, recipe_id: int | None, fetch: Callable[[], T], default: T) -> T:
        try:
            return fetch()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.warning(f"Recipe {recipe_id}: could not load {what}, showing empty: {e}")
            return default

    def _author(self, user_id: int) -> AuthorSummary | None:
        user = self.db.query(User).filter(User.id == user_id).first()
        return AuthorSummary.model_validate(user) if user else None

    def _ingredients(self, recipe_id: int) -> list[IngredientRead]:
        ids = [
            ingredient_id
            for (ingredient_id,) in self.db.query(RecipeIngredient.ingredient_id)
            .filter(RecipeIngredient.recipe_id == recipe_id)
            .order_by(RecipeIngredient.id)
            .all()
        ]
        if not ids:
            return []
        masters = {
            m.id: m
            for m in self.db.query(IngredientMaster).filter(IngredientMaster.id.in_(ids)).all()
        }
        return [IngredientRead.model_validate(masters[i]) for i in ids if i in masters]

    def _type_labels(self, recipe_id: int) -> list[str]:
        ids = [
            type_id
            for (type_id,) in self.db.query(RecipeRecipeType.recipe_type_id)
            .filter(RecipeRecipeType.recipe_id == recipe_id)
            .order_by(RecipeRecipeType.id)
            .all()
        ]
        if not ids:
            return []
        labels = {
            t.id: t.content for t in self.db.query(RecipeType).filter(RecipeType.id.in_(ids)).all()
        }
        return [labels[i] for i in ids if i in labels]

    def _step_media(self, recipe_id: int) -> dict[int, list[StepMediaRead]]:
        """All media of a recipe, grouped by step and in display order."""
        links = (
            self.db.query(RecipeStepMedia)
            .filter(RecipeStepMedia.recipe_id == recipe_id)
            .order_by(RecipeStepMedia.step, RecipeStepMedia.display_order)
            .all()
        )
        if not links:
            return {}
        media_ids = {link.media_id for link in links}
        media = {m.id: m for m in self.db.query(Media).filter(Media.id.in_(media_ids)).all()}

        by_step: dict[int, list[StepMediaRead]] = defaultdict(list)
        for link in links:
            row = media.get(link.media_id)
            if row is None or row.url is None:
                continue
            by_step[link.step].append(
                StepMediaRead(
                    media_id=row.id,
                    display_order=link.display_order,
                    url=row.url,
                    is_video=row.is_video,
                )
            )
        return by_step

    def _steps(self, recipe_id: int) -> list[StepRead]:
        steps = (
            self.db.query(RecipeStep)
            .filter(RecipeStep.recipe_id == recipe_id)
            .order_by(RecipeStep.step)
            .all()
        )
        step_media = self._degrade("step media", recipe_id, lambda: self._step_media(recipe_id), {})
        return [
            StepRead(step=s.step, instruction=s.instruction, media=step_media.get(s.step, []))
            for s in steps
        ]

    def _count(self, model, recipe_id: int) -> int:
        return self.db.query(func.count(model.id)).filter(model.recipe_id == recipe_id).scalar() or 0

    def _comments(self, recipe_id: int) -> list[CommentRead]:
        comments = (
            self.db.query(Comment)
            .filter(Comment.recipe_id == recipe_id)
            .order_by(Comment.created_at.desc(), Comment.id.desc())
            .all()
        )
        if not comments:
            return []
        author_ids = {c.user_id for c in comments}
        authors = {u.id: u for u in self.db.query(User).filter(User.id.in_(author_ids)).all()}
        return [
            CommentRead(
                id=c.id,
                body=c.body,
                created_at=c.created_at,
                author=AuthorSummary.model_validate(authors[c.user_id])
                if c.user_id in authors
                else None,
            )
            for c in comments
        ]

    def _viewer_flags(self, recipe: Recipe, viewer_id: int | None) -> ViewerFlags:
        if not viewer_id:
            return ViewerFlags()

        def exists(model, **key) -> bool:
            return self.db.query(model.id).filter_by(**key).first() is not None

        return ViewerFlags(
            is_liked=exists(Like, user_id=viewer_id, recipe_id=recipe.id),
            is_saved=exists(NotebookEntry, user_id=viewer_id, recipe_id=recipe.id),
            is_following=exists(Follow, follower_id=viewer_id, following_id=recipe.user_id),
            is_own_recipe=recipe.user_id == viewer_id,
        )

    def _labels(self, column) -> list[str]:
        seen: dict[str, str] = {}
        for (value,) in self.db.query(column).all():
            label = (value or "").strip()
            if label:
                seen.setdefault(normalize_name(label), label)
        return sorted(seen.values(), key=normalize_name)
