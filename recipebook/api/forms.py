"""Parsing of multipart recipe submissions into ``RecipeForm``."""

import logging
import re

from fastapi import Request
from pydantic import ValidationError
from starlette.datastructures import FormData, UploadFile

from recipebook.errors import ValidationFailure
from recipebook.schemas.recipe import RecipeForm, StepForm
from recipebook.services.storage import MediaFile

logger = logging.getLogger(__name__)

STEP_FIELD = re.compile(r"^steps\[(\d+)\]\[(\w+)\]$")


async def _read_file(value) -> MediaFile | None:
    """Read an upload into memory; empty parts (no file chosen) are None."""
    if not isinstance(value, UploadFile) or not value.filename:
        return None
    data = await value.read()
    if not data:
        return None
    return MediaFile(filename=value.filename, content_type=value.content_type, data=data)


async def _read_files(values: list) -> list[MediaFile]:
    files = []
    for value in values:
        file = await _read_file(value)
        if file is not None:
            files.append(file)
    return files


def _text(form: FormData, key: str) -> str:
    value = form.get(key)
    return value if isinstance(value, str) else ""


def _texts(form: FormData, key: str) -> list[str]:
    return [v for v in form.getlist(key) if isinstance(v, str)]


def _cook_time(raw: str) -> int:
    # Anything non-numeric fails the range rule with its usual message.
    try:
        return int(raw.strip())
    except ValueError:
        return 0


async def build_recipe_form(form: FormData) -> RecipeForm:
    """Map submitted multipart fields onto a RecipeForm."""
    step_fields: dict[int, dict[str, list]] = {}
    for key, value in form.multi_items():
        match = STEP_FIELD.match(key)
        if match is None:
            continue
        index, field = int(match.group(1)), match.group(2)
        step_fields.setdefault(index, {}).setdefault(field, []).append(value)

    steps = []
    for index in sorted(step_fields):
        fields = step_fields[index]
        instruction = next((v for v in fields.get("instruction", []) if isinstance(v, str)), "")
        image = None
        for value in fields.get("image", []):
            image = await _read_file(value)
            if image is not None:
                break
        steps.append(
            StepForm(
                instruction=instruction,
                media=await _read_files(fields.get("media", [])),
                image=image,
                existing_media_urls=[
                    v for v in fields.get("existing_media_urls", []) if isinstance(v, str) and v
                ],
            )
        )

    values = {
        "name": _text(form, "name"),
        "description": _text(form, "description") or None,
        "cook_time": _cook_time(_text(form, "cook_time")),
        "level": _text(form, "level"),
        "ingredients": _texts(form, "ingredients"),
        "recipe_types": _texts(form, "recipe_types"),
        "steps": steps,
        "main_media": await _read_file(form.get("main_media")),
        "thumbnail_image": await _read_file(form.get("thumbnail_image")),
    }
    try:
        return RecipeForm(**values)
    except ValidationError as e:
        errors = [f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()]
        logger.warning(f"Rejected malformed recipe form: {errors}")
        echo = {k: v for k, v in values.items() if k not in ("steps", "main_media", "thumbnail_image")}
        raise ValidationFailure(errors, echo) from e


async def get_recipe_form(request: Request) -> RecipeForm:
    """Dependency: parse the request's multipart body."""
    async with request.form() as form:
        return await build_recipe_form(form)
