"""Recipe form validation tests."""

from conftest import image_file, make_form

from recipebook.schemas.recipe import StepForm
from recipebook.services.storage import MediaFile
from recipebook.services.validation import validate_recipe_form

MB = 1024 * 1024


def test_valid_form_has_no_errors():
    assert validate_recipe_form(make_form()) == []
    assert validate_recipe_form(make_form(), for_edit=True) == []


def test_blank_name():
    errors = validate_recipe_form(make_form(name="   "))
    assert errors == ["Tên công thức không được để trống"]


def test_cook_time_bounds():
    assert validate_recipe_form(make_form(cook_time=1)) == []
    assert validate_recipe_form(make_form(cook_time=1440)) == []
    assert validate_recipe_form(make_form(cook_time=0)) == ["Thời gian nấu phải từ 1-1440 phút"]
    assert validate_recipe_form(make_form(cook_time=1441)) == [
        "Thời gian nấu phải từ 1-1440 phút"
    ]


def test_level_must_be_known():
    assert validate_recipe_form(make_form(level="dễ")) == []
    assert validate_recipe_form(make_form(level=" Khó ")) == []
    assert validate_recipe_form(make_form(level="siêu khó")) == ["Độ khó không hợp lệ"]
    assert validate_recipe_form(make_form(level="")) == ["Độ khó không hợp lệ"]
    assert validate_recipe_form(make_form(level="easy")) == ["Độ khó không hợp lệ"]


def test_create_allows_empty_lists():
    form = make_form(ingredients=[], recipe_types=[], steps=[])
    assert validate_recipe_form(form) == []


def test_edit_requires_ingredients_types_and_steps():
    form = make_form(ingredients=[" "], recipe_types=[], steps=[])
    errors = validate_recipe_form(form, for_edit=True)
    assert "Phải có ít nhất 1 nguyên liệu" in errors
    assert "Phải chọn ít nhất 1 phân loại" in errors
    assert "Phải có ít nhất 1 bước thực hiện" in errors


def test_edit_requires_every_step_described():
    form = make_form(steps=[StepForm(instruction="Sơ chế"), StepForm(instruction="  ")])
    assert validate_recipe_form(form, for_edit=True) == ["Bước 2: Vui lòng nhập mô tả"]


def test_all_violations_reported_together():
    form = make_form(name="", cook_time=5000, level="?", ingredients=[], steps=[])
    errors = validate_recipe_form(form, for_edit=True)
    assert len(errors) == 5


def test_edit_thumbnail_size_and_extension():
    big = MediaFile("big.png", "image/png", b"\x89PNG" + b"\x00" * (10 * MB))
    errors = validate_recipe_form(make_form(thumbnail_image=big), for_edit=True)
    assert errors == ["Ảnh thumbnail không được vượt quá 10MB"]

    bmp = image_file("photo.bmp")
    errors = validate_recipe_form(make_form(thumbnail_image=bmp), for_edit=True)
    assert errors == ["Ảnh thumbnail chỉ chấp nhận định dạng: jpg, jpeg, png, gif, webp"]

    ok = image_file("photo.WEBP")
    assert validate_recipe_form(make_form(thumbnail_image=ok), for_edit=True) == []


def test_step_media_over_limit():
    huge = MediaFile("huge.mp4", "video/mp4", b"\x00" * (50 * MB + 1))
    form = make_form(steps=[StepForm(instruction="Quay video", media=[huge])])
    assert validate_recipe_form(form) == ["File huge.mp4 vượt quá 50MB"]


def test_step_media_exactly_at_limit_is_allowed():
    edge = MediaFile("edge.mp4", "video/mp4", b"\x00" * (50 * MB))
    form = make_form(steps=[StepForm(instruction="Quay video", media=[edge])])
    assert validate_recipe_form(form) == []


def test_create_main_media_over_limit():
    huge = MediaFile("main.mp4", "video/mp4", b"\x00" * (50 * MB + 1))
    assert validate_recipe_form(make_form(main_media=huge)) == ["File main.mp4 vượt quá 50MB"]
