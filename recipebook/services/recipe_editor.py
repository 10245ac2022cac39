"""Recipe editing and deletion."""

import logging
from dataclasses import dataclass, field

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from recipebook.errors import (
    Forbidden,
    NotFound,
    PartialMediaFailure,
    PersistenceFailure,
    Unauthenticated,
    ValidationFailure,
)
from recipebook.models.ingredient import RecipeIngredient
from recipebook.models.media import Media, RecipeStepMedia
from recipebook.models.recipe import Recipe, RecipeStep
from recipebook.models.recipe_type import RecipeRecipeType
from recipebook.models.social import Comment, Like, NotebookEntry, Report, Share
from recipebook.schemas.recipe import RecipeForm, RecipeWriteResult
from recipebook.services.resolver import LookupOrCreateResolver
from recipebook.services.row_store import RowStore
from recipebook.services.step_media import recipe_folder, upload_step_media
from recipebook.services.storage import BlobStore, StorageError
from recipebook.services.validation import validate_recipe_form

logger = logging.getLogger(__name__)


@dataclass
class PreparedEdit:
    """Everything an edit needs that can fail before existing rows are touched."""

    thumbnail_img: str | None
    ingredient_ids: list[int] = field(default_factory=list)
    type_ids: list[int] = field(default_factory=list)
    # URL -> media id for every media row currently linked to the recipe
    linked_media: dict[str, int] = field(default_factory=dict)


def get_owned_recipe(db: Session, recipe_id: int, actor_id: int) -> Recipe:
    """Load a recipe the actor is allowed to change."""
    recipe = db.query(Recipe).filter(Recipe.id == recipe_id).first()
    if recipe is None:
        raise NotFound()
    if recipe.user_id != actor_id:
        logger.warning(f"User {actor_id} tried to modify recipe {recipe_id} owned by {recipe.user_id}")
        raise Forbidden()
    return recipe


class RecipeEditor:
    """Edits and deletes recipe aggregates.

    An edit runs in four phases: validate the form, check existence and
    ownership, prepare everything that can fail (thumbnail upload, ingredient
    and type resolution), and only then replace the dependent rows. A failure
    before the last phase leaves the recipe exactly as it was. A failure
    during the last phase is not rolled back.
    """

    def __init__(
        self,
        db: Session,
        blob_store: BlobStore,
        resolver: LookupOrCreateResolver | None = None,
    ):
        self.db = db
        self.rows = RowStore(db)
        self.blob_store = blob_store
        self.resolver = resolver or LookupOrCreateResolver(self.rows)

    def edit(self, recipe_id: int, actor_id: int | None, form: RecipeForm) -> RecipeWriteResult:
        """Replace a recipe's fields, ingredients, types and steps."""
        if not actor_id:
            raise Unauthenticated()

        logger.info(f"Editing recipe {recipe_id} by user {actor_id}")

        errors = validate_recipe_form(form, for_edit=True)
        if errors:
            logger.warning(f"Edit recipe {recipe_id} validation failed: {', '.join(errors)}")
            raise ValidationFailure(errors, form.echo())

        recipe = get_owned_recipe(self.db, recipe_id, actor_id)

        try:
            prepared = self._prepare(recipe, form)
        except PersistenceFailure as e:
            logger.exception(
                f"Preparation for recipe {recipe_id} failed, nothing changed: {e.reason}"
            )
            raise PersistenceFailure(f"Lỗi khi chuẩn bị dữ liệu: {e.reason}") from e
        except (StorageError, SQLAlchemyError, ValueError) as e:
            self.db.rollback()
            logger.exception(f"Preparation for recipe {recipe_id} failed, nothing changed: {e}")
            raise PersistenceFailure(f"Lỗi khi chuẩn bị dữ liệu: {e}") from e

        logger.info(f"Recipe {recipe_id} prepared, replacing dependent rows")
        return self._commit(recipe, form, prepared)

    def delete(self, recipe_id: int, actor_id: int | None) -> None:
        """Delete a recipe and every row that exists only for it.

        Ingredient and type master rows are shared and stay. Media rows keep
        their URLs so uploaded files remain referenced.
        """
        if not actor_id:
            raise Unauthenticated()

        recipe = get_owned_recipe(self.db, recipe_id, actor_id)

        for model in (
            Like,
            Comment,
            Share,
            NotebookEntry,
            Report,
            RecipeRecipeType,
            RecipeStepMedia,
            RecipeStep,
            RecipeIngredient,
        ):
            count = self.rows.delete(self.db.query(model).filter(model.recipe_id == recipe_id))
            logger.debug(f"Deleted {count} {model.__tablename__} rows for recipe {recipe_id}")

        self.rows.delete_row(recipe)
        logger.info(f"Recipe {recipe_id} deleted by user {actor_id}")

    def _prepare(self, recipe: Recipe, form: RecipeForm) -> PreparedEdit:
        thumbnail_img = recipe.thumbnail_img
        if form.thumbnail_image is not None:
            thumbnail_img = self.blob_store.upload(
                form.thumbnail_image, is_video=False, folder_path=recipe_folder(recipe.id)
            )
            logger.info(f"New thumbnail for recipe {recipe.id}: {thumbnail_img}")

        return PreparedEdit(
            thumbnail_img=thumbnail_img,
            ingredient_ids=self.resolver.resolve_ingredients(form.ingredients),
            type_ids=self.resolver.resolve_types(form.recipe_types),
            linked_media=self._linked_media(recipe.id),
        )

    def _linked_media(self, recipe_id: int) -> dict[str, int]:
        """Media that may be retained: only rows already linked to this recipe."""
        media = self.rows.all(
            self.db.query(Media)
            .join(RecipeStepMedia, RecipeStepMedia.media_id == Media.id)
            .filter(RecipeStepMedia.recipe_id == recipe_id)
        )
        return {m.url: m.id for m in media}

    def _commit(self, recipe: Recipe, form: RecipeForm, prepared: PreparedEdit) -> RecipeWriteResult:
        recipe_id = recipe.id
        self.rows.update(
            recipe,
            name=form.name.strip(),
            description=form.description,
            cook_time=form.cook_time,
            level=form.level.strip(),
            step_number=max(1, len(form.steps)),
            thumbnail_img=prepared.thumbnail_img,
        )

        self.rows.delete(self.db.query(RecipeIngredient).filter(RecipeIngredient.recipe_id == recipe_id))
        self.rows.delete(self.db.query(RecipeRecipeType).filter(RecipeRecipeType.recipe_id == recipe_id))
        old_steps = self.rows.all(
            self.db.query(RecipeStep.step).filter(RecipeStep.recipe_id == recipe_id)
        )
        for (step_number,) in old_steps:
            self.rows.delete(
                self.db.query(RecipeStepMedia).filter(
                    RecipeStepMedia.recipe_id == recipe_id, RecipeStepMedia.step == step_number
                )
            )
            self.rows.delete(
                self.db.query(RecipeStep).filter(
                    RecipeStep.recipe_id == recipe_id, RecipeStep.step == step_number
                )
            )

        for ingredient_id in prepared.ingredient_ids:
            self.rows.insert_if_absent(
                RecipeIngredient(recipe_id=recipe_id, ingredient_id=ingredient_id),
                recipe_id=recipe_id,
                ingredient_id=ingredient_id,
            )
        for type_id in prepared.type_ids:
            self.rows.insert_if_absent(
                RecipeRecipeType(recipe_id=recipe_id, recipe_type_id=type_id),
                recipe_id=recipe_id,
                recipe_type_id=type_id,
            )

        skipped: list[PartialMediaFailure] = []
        for number, step in enumerate(form.steps, start=1):
            self.rows.insert_if_absent(
                RecipeStep(recipe_id=recipe_id, step=number, instruction=step.instruction.strip()),
                recipe_id=recipe_id,
                step=number,
            )
            next_order, failures = self._relink_existing(
                recipe_id, number, step.existing_media_urls, prepared.linked_media
            )
            skipped.extend(failures)
            _, failures = upload_step_media(
                self.rows, self.blob_store, recipe_id, number, step.files(), first_order=next_order
            )
            skipped.extend(failures)

        logger.info(f"Recipe {recipe_id} updated ({len(skipped)} media skipped)")
        return RecipeWriteResult(recipe_id=recipe_id, skipped_media=[str(f) for f in skipped])

    def _relink_existing(
        self, recipe_id: int, step_number: int, urls: list[str], linked_media: dict[str, int]
    ) -> tuple[int, list[PartialMediaFailure]]:
        """Link previously uploaded media back to a step, in the submitted order.

        URLs not linked to this recipe before the edit are skipped.
        """
        order = 1
        failures: list[PartialMediaFailure] = []
        for url in urls:
            if not url:
                continue
            media_id = linked_media.get(url)
            if media_id is None:
                logger.warning(f"Recipe {recipe_id} step {step_number}: {url} is not media of this recipe")
                continue
            try:
                self.rows.insert(
                    RecipeStepMedia(
                        recipe_id=recipe_id, step=step_number, media_id=media_id, display_order=order
                    )
                )
            except PersistenceFailure as e:
                failure = PartialMediaFailure(url, step_number, e.reason)
                logger.warning(f"Skipping media {failure}")
                failures.append(failure)
                continue
            order += 1
        return order, failures

