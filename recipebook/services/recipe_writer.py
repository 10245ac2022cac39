"""Recipe creation: the recipe row and everything that hangs off it."""

import logging

from sqlalchemy.orm import Session

from recipebook.errors import PersistenceFailure, Unauthenticated, ValidationFailure
from recipebook.models.ingredient import RecipeIngredient
from recipebook.models.recipe import Recipe, RecipeStep
from recipebook.models.recipe_type import RecipeRecipeType
from recipebook.schemas.recipe import RecipeForm, RecipeWriteResult
from recipebook.services.resolver import LookupOrCreateResolver, dedupe_names
from recipebook.services.row_store import RowStore
from recipebook.services.step_media import recipe_folder, upload_step_media
from recipebook.services.storage import BlobStore, MediaFile, StorageError
from recipebook.services.validation import validate_recipe_form

logger = logging.getLogger(__name__)


class RecipeWriter:
    """Creates a recipe aggregate.

    Writes happen in a fixed order because each depends on ids produced by
    the one before: recipe row, thumbnail, ingredient links, type links, then
    steps with their media. Failed media files are skipped; any other store
    failure aborts the create and leaves already-written rows in place.
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

    def create(self, actor_id: int | None, form: RecipeForm) -> RecipeWriteResult:
        """Create a recipe owned by actor_id and return its id."""
        if not actor_id:
            logger.error("Create recipe rejected: no acting user")
            raise Unauthenticated()

        errors = validate_recipe_form(form)
        if errors:
            logger.warning(f"Create recipe validation failed: {', '.join(errors)}")
            raise ValidationFailure(errors, form.echo())

        logger.info(
            f"Creating recipe '{form.name}' for user {actor_id}: cook_time={form.cook_time}, "
            f"level={form.level}, steps={len(form.steps)}"
        )
        try:
            return self._create(actor_id, form)
        except PersistenceFailure as e:
            logger.exception(f"Create recipe '{form.name}' aborted: {e.reason}")
            raise

    def _create(self, actor_id: int, form: RecipeForm) -> RecipeWriteResult:
        recipe = self.rows.insert(
            Recipe(
                user_id=actor_id,
                name=form.name.strip(),
                description=form.description,
                thumbnail_img=None,
                cook_time=form.cook_time,
                level=form.level.strip(),
                step_number=max(1, len(form.steps)),
            )
        )
        if recipe.id is None:
            raise PersistenceFailure("Không thể tạo công thức - không nhận được ID")
        recipe_id = recipe.id
        logger.info(f"Recipe created with id {recipe_id}")

        if form.main_media is not None:
            self._attach_thumbnail(recipe, form.main_media)

        for name in dedupe_names(form.ingredients):
            ingredient_id = self.resolver.resolve_ingredient(name)
            self.rows.insert_if_absent(
                RecipeIngredient(recipe_id=recipe_id, ingredient_id=ingredient_id),
                recipe_id=recipe_id,
                ingredient_id=ingredient_id,
            )

        for label in dedupe_names(form.recipe_types):
            type_id = self.resolver.resolve_type(label)
            self.rows.insert_if_absent(
                RecipeRecipeType(recipe_id=recipe_id, recipe_type_id=type_id),
                recipe_id=recipe_id,
                recipe_type_id=type_id,
            )

        skipped = []
        for number, step in enumerate(form.steps, start=1):
            self.rows.insert_if_absent(
                RecipeStep(recipe_id=recipe_id, step=number, instruction=step.instruction or ""),
                recipe_id=recipe_id,
                step=number,
            )
            _, failures = upload_step_media(
                self.rows, self.blob_store, recipe_id, number, step.files()
            )
            skipped.extend(failures)

        logger.info(f"Recipe {recipe_id} created ({len(skipped)} media skipped)")
        return RecipeWriteResult(recipe_id=recipe_id, skipped_media=[str(f) for f in skipped])

    def _attach_thumbnail(self, recipe: Recipe, file: MediaFile) -> None:
        is_video = self.blob_store.classify(file)
        try:
            url = self.blob_store.upload(
                file, is_video=is_video, folder_path=recipe_folder(recipe.id)
            )
        except StorageError as e:
            raise PersistenceFailure(str(e)) from e

        try:
            self.rows.update(recipe, thumbnail_img=url)
        except PersistenceFailure as e:
            # The upload is durable; the recipe just shows without a thumbnail.
            logger.error(f"Recipe {recipe.id}: thumbnail {url} uploaded but not saved: {e.reason}")
