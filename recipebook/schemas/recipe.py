"""Recipe schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from recipebook.services.storage import MediaFile

# --- Submitted forms ---


class StepForm(BaseModel):
    """One submitted step with its attached files."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    instruction: str = ""
    media: list[MediaFile] = []
    image: MediaFile | None = None  # legacy single-file field
    existing_media_urls: list[str] = []

    def files(self) -> list[MediaFile]:
        """Files to upload: the multi-file field wins, the legacy field is the fallback."""
        if self.media:
            return list(self.media)
        if self.image is not None:
            return [self.image]
        return []


class RecipeForm(BaseModel):
    """A full recipe aggregate as submitted for create or edit."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str = Field("", max_length=255)
    description: str | None = Field(None, max_length=5000)
    cook_time: int
    level: str = ""
    ingredients: list[str] = []
    recipe_types: list[str] = []
    steps: list[StepForm] = []
    main_media: MediaFile | None = None  # create: thumbnail source, image or video
    thumbnail_image: MediaFile | None = None  # edit: replacement thumbnail

    def echo(self) -> dict[str, Any]:
        """Submitted values without file payloads, for re-rendering a rejected form."""
        return {
            "name": self.name,
            "description": self.description,
            "cook_time": self.cook_time,
            "level": self.level,
            "ingredients": list(self.ingredients),
            "recipe_types": list(self.recipe_types),
            "steps": [
                {
                    "instruction": step.instruction,
                    "media": [f.filename for f in step.files()],
                    "existing_media_urls": list(step.existing_media_urls),
                }
                for step in self.steps
            ],
        }


class RecipeWriteResult(BaseModel):
    """Outcome of a create or edit."""

    recipe_id: int
    skipped_media: list[str] = []


# --- Detail read model ---


class AuthorSummary(BaseModel):
    """Public user info shown next to recipes and comments."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str | None
    avatar_img: str | None = None


class IngredientRead(BaseModel):
    """Ingredient master row."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


class StepMediaRead(BaseModel):
    """One media item attached to a step."""

    media_id: int
    display_order: int
    url: str
    is_video: bool


class StepRead(BaseModel):
    """A step with its media in display order."""

    step: int
    instruction: str
    media: list[StepMediaRead] = []


class CommentRead(BaseModel):
    """A comment with its author."""

    id: int
    body: str
    created_at: datetime
    author: AuthorSummary | None


class ViewerFlags(BaseModel):
    """Relationship between the viewer and the recipe."""

    is_liked: bool = False
    is_saved: bool = False
    is_following: bool = False
    is_own_recipe: bool = False


class RecipeDetail(BaseModel):
    """Everything the recipe detail page shows."""

    id: int
    user_id: int
    name: str
    description: str | None
    thumbnail_img: str | None
    cook_time: int | None
    level: str | None
    step_number: int
    created_at: datetime
    author: AuthorSummary | None
    ingredients: list[IngredientRead] = []
    types: list[str] = []
    steps: list[StepRead] = []
    like_count: int = 0
    comment_count: int = 0
    share_count: int = 0
    comments: list[CommentRead] = []
    current_user_id: int | None = None
    viewer: ViewerFlags = ViewerFlags()


# --- Edit form ---


class EditStepRead(BaseModel):
    """A step as loaded into the edit form."""

    step: int
    instruction: str
    existing_media_urls: list[str] = []


class RecipeEditForm(BaseModel):
    """Current values of a recipe for its edit form."""

    id: int
    name: str
    description: str | None
    cook_time: int
    level: str
    thumbnail_img: str | None
    ingredients: list[str] = []
    recipe_types: list[str] = []
    steps: list[EditStepRead] = []


class RecipeSuggestions(BaseModel):
    """Autocomplete values for the add/edit forms."""

    ingredients: list[str] = []
    recipe_types: list[str] = []
