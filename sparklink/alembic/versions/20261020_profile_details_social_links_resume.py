"""Profile details, social links and resume storage.

Adds account contact fields and the profile picture to users, replaces the
profile headline with a tagline, adds background image and resume columns
to profiles, and creates the ordered social_links table.

Revision ID: 2b3c4d5e6f70
Revises: 1a2b3c4d5e6f
Create Date: 2026-10-20
"""

from alembic import op
import sqlalchemy as sa
import advanced_alchemy.types

revision = "2b3c4d5e6f70"
down_revision = "1a2b3c4d5e6f"
branch_labels = None
depends_on = None


def upgrade() -> None:
    with op.batch_alter_table("users") as batch_op:
        batch_op.add_column(sa.Column("country", sa.String(length=100), nullable=True))
        batch_op.add_column(sa.Column("phone", sa.String(length=40), nullable=True))
        batch_op.add_column(sa.Column("profile_picture_url", sa.String(length=1024), nullable=True))
        batch_op.add_column(sa.Column("profile_picture_key", sa.String(length=1024), nullable=True))

    with op.batch_alter_table("profiles") as batch_op:
        batch_op.alter_column("headline", new_column_name="tagline")
        batch_op.add_column(sa.Column("country_flag", sa.String(length=16), nullable=True))
        batch_op.add_column(sa.Column("background_image_url", sa.String(length=1024), nullable=True))
        batch_op.add_column(sa.Column("background_image_key", sa.String(length=1024), nullable=True))
        batch_op.add_column(sa.Column("resume_url", sa.String(length=1024), nullable=True))
        batch_op.add_column(sa.Column("resume_key", sa.String(length=1024), nullable=True))
        batch_op.add_column(sa.Column("resume_file_name", sa.String(length=255), nullable=True))
        batch_op.add_column(
            sa.Column("resume_uploaded_at", advanced_alchemy.types.DateTimeUTC(timezone=True), nullable=True)
        )
        batch_op.add_column(
            sa.Column("allow_resume_download", sa.Boolean(), nullable=False, server_default=sa.true())
        )

    op.create_table(
        "social_links",
        sa.Column("profile_id", advanced_alchemy.types.GUID(length=16), nullable=False),
        sa.Column("platform", sa.String(length=30), nullable=False),
        sa.Column("url", sa.String(length=1024), nullable=False),
        sa.Column("order", sa.Integer(), nullable=False),
        sa.Column("id", advanced_alchemy.types.GUID(length=16), nullable=False),
        sa.Column("sa_orm_sentinel", sa.Integer(), nullable=True),
        sa.Column("created_at", advanced_alchemy.types.DateTimeUTC(timezone=True), nullable=False),
        sa.Column("updated_at", advanced_alchemy.types.DateTimeUTC(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ["profile_id"], ["profiles.id"], name=op.f("fk_social_links_profile_id_profiles"), ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_social_links")),
    )
    op.create_index(op.f("ix_social_links_profile_id"), "social_links", ["profile_id"])
    op.create_index(op.f("ix_social_links_order"), "social_links", ["order"])


def downgrade() -> None:
    op.drop_table("social_links")

    with op.batch_alter_table("profiles") as batch_op:
        batch_op.drop_column("allow_resume_download")
        batch_op.drop_column("resume_uploaded_at")
        batch_op.drop_column("resume_file_name")
        batch_op.drop_column("resume_key")
        batch_op.drop_column("resume_url")
        batch_op.drop_column("background_image_key")
        batch_op.drop_column("background_image_url")
        batch_op.drop_column("country_flag")
        batch_op.alter_column("tagline", new_column_name="headline")

    with op.batch_alter_table("users") as batch_op:
        batch_op.drop_column("profile_picture_key")
        batch_op.drop_column("profile_picture_url")
        batch_op.drop_column("phone")
        batch_op.drop_column("country")
