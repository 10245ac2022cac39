"""Business-rule validation for submitted recipe forms.

All rules run and every violation is returned, so the caller can show the
whole list on the form at once.
"""

from recipebook.config import get_settings
from recipebook.models.enums import RecipeLevel
from recipebook.schemas.recipe import RecipeForm

MIN_COOK_TIME = 1
MAX_COOK_TIME = 1440

THUMBNAIL_EXTENSIONS = (".jpg", ".jpeg", ".png", ".gif", ".webp")


def _mib(limit: int) -> int:
    return limit // (1024 * 1024)


def validate_recipe_form(form: RecipeForm, for_edit: bool = False) -> list[str]:
    """Return every violation message for a submitted form (empty when valid).

    Creating a recipe only checks the fields themselves; editing also requires
    at least one ingredient, type and described step, and checks the
    replacement thumbnail.
    """
    settings = get_settings()
    errors: list[str] = []

    if not form.name or not form.name.strip():
        errors.append("Tên công thức không được để trống")

    if for_edit:
        if not any(i and i.strip() for i in form.ingredients):
            errors.append("Phải có ít nhất 1 nguyên liệu")
        if not any(t and t.strip() for t in form.recipe_types):
            errors.append("Phải chọn ít nhất 1 phân loại")
        if not form.steps:
            errors.append("Phải có ít nhất 1 bước thực hiện")
        else:
            for index, step in enumerate(form.steps, start=1):
                if not step.instruction or not step.instruction.strip():
                    errors.append(f"Bước {index}: Vui lòng nhập mô tả")

    if form.cook_time < MIN_COOK_TIME or form.cook_time > MAX_COOK_TIME:
        errors.append(f"Thời gian nấu phải từ {MIN_COOK_TIME}-{MAX_COOK_TIME} phút")

    if not RecipeLevel.is_valid(form.level):
        errors.append("Độ khó không hợp lệ")

    if for_edit and form.thumbnail_image is not None:
        thumbnail = form.thumbnail_image
        if thumbnail.size > settings.max_thumbnail_bytes:
            errors.append(
                f"Ảnh thumbnail không được vượt quá {_mib(settings.max_thumbnail_bytes)}MB"
            )
        if thumbnail.extension not in THUMBNAIL_EXTENSIONS:
            allowed = ", ".join(ext.lstrip(".") for ext in THUMBNAIL_EXTENSIONS)
            errors.append(f"Ảnh thumbnail chỉ chấp nhận định dạng: {allowed}")

    media_limit = settings.max_step_media_bytes
    if not for_edit and form.main_media is not None and form.main_media.size > media_limit:
        errors.append(f"File {form.main_media.filename} vượt quá {_mib(media_limit)}MB")

    for step in form.steps:
        for file in step.files():
            if file.size > media_limit:
                errors.append(f"File {file.filename} vượt quá {_mib(media_limit)}MB")

    return errors
