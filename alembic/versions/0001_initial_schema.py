"""initial marketplace schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19 00:00:00

"""
from alembic import op
import sqlalchemy as sa


revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None

PROJECT_STATUSES = ("draft", "submitted", "in_progress", "in_revision", "completed", "cancelled")


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "user",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("email_verified", sa.Boolean(), nullable=False),
        sa.Column("name", sa.String(255), nullable=True),
        sa.Column("image", sa.String(512), nullable=True),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_user_email", "user", ["email"], unique=True)

    op.create_table(
        "session",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("user_id", sa.String(64), sa.ForeignKey("user.id", ondelete="CASCADE"), nullable=False),
        sa.Column("token", sa.String(64), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("ip_address", sa.String(128), nullable=True),
        sa.Column("user_agent", sa.String(512), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_session_token", "session", ["token"], unique=True)
    op.create_index("idx_session_user_expires", "session", ["user_id", "expires_at"])

    op.create_table(
        "verification",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("identifier", sa.String(64), nullable=False),
        sa.Column("value", sa.String(255), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("identifier", "value", name="uq_verification_identifier_value"),
    )
    op.create_index("idx_verification_expires_at", "verification", ["expires_at"])

    op.create_table(
        "profiles",
        sa.Column("id", sa.String(64), sa.ForeignKey("user.id", ondelete="CASCADE"), primary_key=True),
        sa.Column(
            "role",
            sa.Enum("creator", "editor", native_enum=False, create_constraint=True, length=16, name="profile_role"),
            nullable=False,
        ),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("skillset", sa.JSON(), nullable=True),
        sa.Column("portfolio_urls", sa.JSON(), nullable=True),
        sa.Column("preferences", sa.JSON(), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "projects",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("creator_id", sa.String(64), sa.ForeignKey("user.id", ondelete="CASCADE"), nullable=False),
        sa.Column("editor_id", sa.String(64), sa.ForeignKey("user.id", ondelete="SET NULL"), nullable=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("raw_footage_url", sa.String(1024), nullable=True),
        sa.Column("editing_instructions", sa.Text(), nullable=True),
        sa.Column(
            "reel_type",
            sa.Enum("instagram", "youtube_shorts", "tiktok", native_enum=False, create_constraint=True, length=32, name="reel_type"),
            nullable=False,
        ),
        sa.Column(
            "pricing_tier",
            sa.Enum("basic", "pro", "premium", "custom", native_enum=False, create_constraint=True, length=32, name="pricing_tier"),
            nullable=False,
        ),
        sa.Column("custom_price", sa.Numeric(10, 2), nullable=True),
        sa.Column("ai_brief", sa.Text(), nullable=True),
        sa.Column(
            "status",
            sa.Enum(*PROJECT_STATUSES, native_enum=False, create_constraint=True, length=32, name="project_status"),
            nullable=False,
        ),
        *_timestamps(),
        sa.CheckConstraint(
            "(pricing_tier = 'custom') = (custom_price IS NOT NULL)",
            name="ck_projects_custom_price",
        ),
    )
    op.create_index("idx_projects_creator_id_updated_at", "projects", ["creator_id", sa.text("updated_at DESC")])
    op.create_index("idx_projects_editor_id_updated_at", "projects", ["editor_id", sa.text("updated_at DESC")])
    op.create_index("idx_projects_status_editor", "projects", ["status", "editor_id"])

    op.create_table(
        "project_versions",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("project_id", sa.String(64), sa.ForeignKey("projects.id", ondelete="CASCADE"), nullable=False),
        sa.Column("version_number", sa.Integer(), nullable=False),
        sa.Column("video_url", sa.String(1024), nullable=False),
        sa.Column("editor_notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("project_id", "version_number", name="uq_project_versions_number"),
        sa.CheckConstraint("version_number > 0", name="ck_project_versions_positive"),
    )

    op.create_table(
        "comments",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("project_id", sa.String(64), sa.ForeignKey("projects.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", sa.String(64), sa.ForeignKey("user.id", ondelete="CASCADE"), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("timestamp", sa.Float(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("idx_comments_project_id_created_at", "comments", ["project_id", "created_at"])

    op.create_table(
        "editor_ratings",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("project_id", sa.String(64), sa.ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, unique=True),
        sa.Column("editor_id", sa.String(64), sa.ForeignKey("user.id", ondelete="CASCADE"), nullable=False),
        sa.Column("rating", sa.Integer(), nullable=False),
        sa.Column("review", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("rating BETWEEN 1 AND 5", name="ck_editor_ratings_range"),
    )
    op.create_index("ix_editor_ratings_editor_id", "editor_ratings", ["editor_id"])


def downgrade() -> None:
    op.drop_table("editor_ratings")
    op.drop_table("comments")
    op.drop_table("project_versions")
    op.drop_table("projects")
    op.drop_table("profiles")
    op.drop_table("verification")
    op.drop_table("session")
    op.drop_table("user")
