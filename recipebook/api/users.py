"""User API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends

from recipebook.api.dependencies import get_actor_id, get_social_service
from recipebook.schemas.social import FollowToggleResponse
from recipebook.services.social_service import SocialService

router = APIRouter(prefix="/api/v1/users", tags=["users"])


@router.post("/{user_id}/follow", response_model=FollowToggleResponse)
async def toggle_follow(
    user_id: int,
    actor_id: Annotated[int | None, Depends(get_actor_id)],
    social: Annotated[SocialService, Depends(get_social_service)],
):
    """Follow or unfollow a user."""
    return social.toggle_follow(actor_id, user_id)
