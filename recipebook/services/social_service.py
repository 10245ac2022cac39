"""Likes, notebook saves, follows, shares, comments and reports."""

import logging

from sqlalchemy import func
from sqlalchemy.orm import Session

from recipebook.errors import DuplicateRow, NotFound, Unauthenticated, ValidationFailure
from recipebook.models.enums import ReportStatus
from recipebook.models.recipe import Recipe
from recipebook.models.social import Comment, Follow, Like, NotebookEntry, Report, Share
from recipebook.models.user import User
from recipebook.schemas.social import (
    CommentResponse,
    FollowToggleResponse,
    LikeToggleResponse,
    ReportResponse,
    SaveToggleResponse,
    ShareResponse,
)
from recipebook.services.row_store import RowStore

logger = logging.getLogger(__name__)

DEFAULT_REPORT_REASON = "Không có lý do cụ thể"


class SocialService:
    """Service for a user's interactions with recipes and other users."""

    def __init__(self, db: Session):
        self.db = db
        self.rows = RowStore(db)

    def toggle_like(self, actor_id: int | None, recipe_id: int) -> LikeToggleResponse:
        self._require(actor_id, recipe_id)
        is_liked = self._toggle(Like, user_id=actor_id, recipe_id=recipe_id)
        like_count = self._count(Like, Like.recipe_id == recipe_id)
        logger.info(f"User {actor_id} {'liked' if is_liked else 'unliked'} recipe {recipe_id}")
        return LikeToggleResponse(is_liked=is_liked, like_count=like_count)

    def toggle_save(self, actor_id: int | None, recipe_id: int) -> SaveToggleResponse:
        self._require(actor_id, recipe_id)
        is_saved = self._toggle(NotebookEntry, user_id=actor_id, recipe_id=recipe_id)
        logger.info(f"User {actor_id} {'saved' if is_saved else 'unsaved'} recipe {recipe_id}")
        return SaveToggleResponse(is_saved=is_saved)

    def toggle_follow(self, actor_id: int | None, target_user_id: int) -> FollowToggleResponse:
        if not actor_id:
            raise Unauthenticated()
        if actor_id == target_user_id:
            raise ValidationFailure(["Bạn không thể theo dõi chính mình"])
        if self.db.query(User.id).filter(User.id == target_user_id).first() is None:
            raise NotFound("Không tìm thấy người dùng")

        is_following = self._toggle(Follow, follower_id=actor_id, following_id=target_user_id)
        follower_count = self._count(Follow, Follow.following_id == target_user_id)
        return FollowToggleResponse(is_following=is_following, follower_count=follower_count)

    def record_share(self, actor_id: int | None, recipe_id: int) -> ShareResponse:
        """Count a share; sharing the same recipe again does not add to the count."""
        self._require(actor_id, recipe_id)
        self.rows.insert_if_absent(
            Share(user_id=actor_id, recipe_id=recipe_id), user_id=actor_id, recipe_id=recipe_id
        )
        return ShareResponse(share_count=self._count(Share, Share.recipe_id == recipe_id))

    def add_comment(self, actor_id: int | None, recipe_id: int, body: str) -> CommentResponse:
        self._require(actor_id, recipe_id)
        text = (body or "").strip()
        if not text:
            raise ValidationFailure(["Nội dung bình luận không được để trống"], {"body": body})

        comment = self.rows.insert(Comment(user_id=actor_id, recipe_id=recipe_id, body=text))
        return CommentResponse(
            comment_id=comment.id,
            comment_count=self._count(Comment, Comment.recipe_id == recipe_id),
        )

    def report(self, actor_id: int | None, recipe_id: int, reason: str | None) -> ReportResponse:
        self._require(actor_id, recipe_id)
        existing = (
            self.db.query(Report)
            .filter(Report.user_id == actor_id, Report.recipe_id == recipe_id)
            .first()
        )
        if existing is not None:
            return ReportResponse(success=False, message="Bạn đã báo cáo công thức này rồi")

        body = (reason or "").strip() or DEFAULT_REPORT_REASON
        try:
            self.rows.insert(
                Report(
                    user_id=actor_id,
                    recipe_id=recipe_id,
                    body=body,
                    status=ReportStatus.PENDING.value,
                )
            )
        except DuplicateRow:
            return ReportResponse(success=False, message="Bạn đã báo cáo công thức này rồi")

        logger.info(f"User {actor_id} reported recipe {recipe_id}")
        return ReportResponse(
            success=True, message="Cảm ơn bạn đã báo cáo. Chúng tôi sẽ xem xét sớm nhất!"
        )

    def _require(self, actor_id: int | None, recipe_id: int) -> None:
        if not actor_id:
            raise Unauthenticated()
        if self.db.query(Recipe.id).filter(Recipe.id == recipe_id).first() is None:
            raise NotFound()

    def _toggle(self, model, **key) -> bool:
        """Flip a link row; returns True if it exists afterwards."""
        query = self.db.query(model).filter_by(**key)
        if query.first() is not None:
            self.rows.delete(query)
            return False
        self.rows.insert_if_absent(model(**key), **key)
        return True

    def _count(self, model, criterion) -> int:
        return self.db.query(func.count(model.id)).filter(criterion).scalar() or 0
