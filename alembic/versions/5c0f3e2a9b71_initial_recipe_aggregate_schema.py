"""initial recipe aggregate schema

Revision ID: 5c0f3e2a9b71
Revises:
Create Date: 2026-10-18

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "5c0f3e2a9b71"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at",
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=sa.func.now(),
    )


def _user_recipe_link(table: str, constraint: str, *extra: sa.Column) -> None:
    op.create_table(
        table,
        sa.Column("id", sa.Integer(), primary_key=True, index=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False, index=True),
        sa.Column(
            "recipe_id", sa.Integer(), sa.ForeignKey("recipes.id"), nullable=False, index=True
        ),
        *extra,
        _created_at(),
        sa.UniqueConstraint("user_id", "recipe_id", name=constraint),
    )


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, index=True),
        sa.Column("email", sa.String(255), nullable=False, unique=True, index=True),
        sa.Column("name", sa.String(255), nullable=True),
        sa.Column("avatar_img", sa.String(1024), nullable=True),
        _created_at(),
    )

    op.create_table(
        "recipes",
        sa.Column("id", sa.Integer(), primary_key=True, index=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False, index=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("thumbnail_img", sa.String(1024), nullable=True),
        sa.Column("cook_time", sa.Integer(), nullable=True),
        sa.Column("level", sa.String(50), nullable=True),
        sa.Column("step_number", sa.Integer(), nullable=False, server_default="1"),
        _created_at(),
    )

    # Shared master rows, unique on their normalized (trimmed, case-folded) name
    op.create_table(
        "ingredient_masters",
        sa.Column("id", sa.Integer(), primary_key=True, index=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("normalized_name", sa.String(255), nullable=False, unique=True, index=True),
        _created_at(),
    )
    op.create_table(
        "recipe_types",
        sa.Column("id", sa.Integer(), primary_key=True, index=True),
        sa.Column("content", sa.String(255), nullable=False),
        sa.Column("normalized_content", sa.String(255), nullable=False, unique=True, index=True),
        _created_at(),
    )

    op.create_table(
        "recipe_ingredients",
        sa.Column("id", sa.Integer(), primary_key=True, index=True),
        sa.Column(
            "recipe_id", sa.Integer(), sa.ForeignKey("recipes.id"), nullable=False, index=True
        ),
        sa.Column(
            "ingredient_id", sa.Integer(), sa.ForeignKey("ingredient_masters.id"), nullable=False
        ),
        _created_at(),
        sa.UniqueConstraint("recipe_id", "ingredient_id", name="uq_recipe_ingredient"),
    )
    op.create_table(
        "recipe_recipe_types",
        sa.Column("id", sa.Integer(), primary_key=True, index=True),
        sa.Column(
            "recipe_id", sa.Integer(), sa.ForeignKey("recipes.id"), nullable=False, index=True
        ),
        sa.Column(
            "recipe_type_id", sa.Integer(), sa.ForeignKey("recipe_types.id"), nullable=False
        ),
        _created_at(),
        sa.UniqueConstraint("recipe_id", "recipe_type_id", name="uq_recipe_recipe_type"),
    )

    op.create_table(
        "recipe_steps",
        sa.Column("recipe_id", sa.Integer(), sa.ForeignKey("recipes.id"), primary_key=True),
        sa.Column("step", sa.Integer(), primary_key=True),
        sa.Column("instruction", sa.Text(), nullable=False, server_default=""),
    )

    op.create_table(
        "media",
        sa.Column("id", sa.Integer(), primary_key=True, index=True),
        sa.Column("media_img", sa.String(1024), nullable=True, index=True),
        sa.Column("media_video", sa.String(1024), nullable=True, index=True),
        sa.CheckConstraint(
            "(media_img IS NULL) <> (media_video IS NULL)", name="ck_media_exactly_one_url"
        ),
    )
    op.create_table(
        "recipe_step_media",
        sa.Column("recipe_id", sa.Integer(), sa.ForeignKey("recipes.id"), primary_key=True),
        sa.Column("step", sa.Integer(), primary_key=True),
        sa.Column("display_order", sa.Integer(), primary_key=True),
        sa.Column("media_id", sa.Integer(), sa.ForeignKey("media.id"), nullable=False),
    )

    _user_recipe_link("likes", "uq_like_user_recipe")
    _user_recipe_link("notebooks", "uq_notebook_user_recipe")
    _user_recipe_link("shares", "uq_share_user_recipe")
    _user_recipe_link(
        "reports",
        "uq_report_user_recipe",
        sa.Column("body", sa.Text(), nullable=False),
        sa.Column("status", sa.String(50), nullable=False, server_default="Đang xử lý"),
    )

    op.create_table(
        "comments",
        sa.Column("id", sa.Integer(), primary_key=True, index=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False, index=True),
        sa.Column(
            "recipe_id", sa.Integer(), sa.ForeignKey("recipes.id"), nullable=False, index=True
        ),
        sa.Column("body", sa.Text(), nullable=False),
        _created_at(),
    )

    op.create_table(
        "follows",
        sa.Column("id", sa.Integer(), primary_key=True, index=True),
        sa.Column(
            "follower_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False, index=True
        ),
        sa.Column(
            "following_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False, index=True
        ),
        _created_at(),
        sa.UniqueConstraint("follower_id", "following_id", name="uq_follow_pair"),
    )


def downgrade() -> None:
    for table in (
        "follows",
        "comments",
        "reports",
        "shares",
        "notebooks",
        "likes",
        "recipe_step_media",
        "media",
        "recipe_steps",
        "recipe_recipe_types",
        "recipe_ingredients",
        "recipe_types",
        "ingredient_masters",
        "recipes",
        "users",
    ):
        op.drop_table(table)
