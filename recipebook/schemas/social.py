"""Social interaction schemas."""

from pydantic import BaseModel, Field


class CommentCreate(BaseModel):
    """Add a comment to a recipe."""

    body: str = Field(..., max_length=5000)


class ReportCreate(BaseModel):
    """Report a recipe to moderators."""

    reason: str | None = Field(None, max_length=2000)


class LikeToggleResponse(BaseModel):
    success: bool = True
    is_liked: bool
    like_count: int


class SaveToggleResponse(BaseModel):
    success: bool = True
    is_saved: bool


class FollowToggleResponse(BaseModel):
    success: bool = True
    is_following: bool
    follower_count: int


class ShareResponse(BaseModel):
    success: bool = True
    share_count: int


class CommentResponse(BaseModel):
    success: bool = True
    comment_id: int
    comment_count: int


class ReportResponse(BaseModel):
    success: bool
    message: str


class DeleteResponse(BaseModel):
    success: bool = True
    message: str = "Xóa công thức thành công"
