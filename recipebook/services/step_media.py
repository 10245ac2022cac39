"""Uploading and linking media files for recipe steps and thumbnails."""

import logging

from recipebook.errors import PartialMediaFailure, PersistenceFailure
from recipebook.models.media import Media, RecipeStepMedia
from recipebook.services.row_store import RowStore
from recipebook.services.storage import BlobStore, MediaFile, StorageError

logger = logging.getLogger(__name__)


def recipe_folder(recipe_id: int) -> str:
    return f"recipes/{recipe_id}"


def step_folder(recipe_id: int, step_number: int) -> str:
    return f"recipes/{recipe_id}/steps/{step_number}"


def upload_step_media(
    rows: RowStore,
    blob_store: BlobStore,
    recipe_id: int,
    step_number: int,
    files: list[MediaFile],
    first_order: int = 1,
) -> tuple[int, list[PartialMediaFailure]]:
    """Upload files for a step and link them in submission order.

    A file that fails to upload or link is skipped; display orders stay dense
    over the files that made it. Returns the next free display order and the
    skipped files.
    """
    order = first_order
    failures: list[PartialMediaFailure] = []

    for index, file in enumerate(files, start=1):
        logger.info(
            f"Recipe {recipe_id} step {step_number} media [{index}] {file.filename} "
            f"({file.size} bytes)"
        )
        try:
            is_video = blob_store.classify(file)
            url = blob_store.upload(
                file, is_video=is_video, folder_path=step_folder(recipe_id, step_number)
            )
            media = rows.insert(
                Media(media_img=None if is_video else url, media_video=url if is_video else None)
            )
            rows.insert(
                RecipeStepMedia(
                    recipe_id=recipe_id,
                    step=step_number,
                    media_id=media.id,
                    display_order=order,
                )
            )
        except StorageError as e:
            failures.append(_skip(file, step_number, str(e)))
            continue
        except PersistenceFailure as e:
            failures.append(_skip(file, step_number, e.reason))
            continue

        logger.info(f"  linked media {media.id} as {'video' if is_video else 'image'} #{order}")
        order += 1

    return order, failures


def _skip(file: MediaFile, step_number: int, reason: str) -> PartialMediaFailure:
    failure = PartialMediaFailure(file.filename, step_number, reason)
    logger.warning(f"Skipping media {failure}")
    return failure
