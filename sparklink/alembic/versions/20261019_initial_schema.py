"""initial schema

Revision ID: 1a2b3c4d5e6f
Revises:
Create Date: 2026-10-19 09:00:00.000000

Users, profiles, pages and gallery items. Pages and gallery items carry a
dense per-profile ``order`` column.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
import advanced_alchemy.types


# revision identifiers, used by Alembic.
revision: str = '1a2b3c4d5e6f'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _audit_columns() -> list[sa.Column]:
    return [
        sa.Column('id', advanced_alchemy.types.GUID(length=16), nullable=False),
        sa.Column('sa_orm_sentinel', sa.Integer(), nullable=True),
        sa.Column('created_at', advanced_alchemy.types.DateTimeUTC(timezone=True), nullable=False),
        sa.Column('updated_at', advanced_alchemy.types.DateTimeUTC(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('username', sa.String(length=50), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=True),
        sa.Column('last_name', sa.String(length=100), nullable=True),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('subscription', sa.String(length=20), nullable=False, server_default='STARTER'),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *_audit_columns(),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_users')),
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)
    op.create_index(op.f('ix_users_username'), 'users', ['username'], unique=True)

    op.create_table(
        'profiles',
        sa.Column('user_id', advanced_alchemy.types.GUID(length=16), nullable=False),
        sa.Column('headline', sa.String(length=255), nullable=True),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('template_id', sa.String(length=50), nullable=False),
        sa.Column('color_scheme', sa.JSON(), nullable=True),
        sa.Column('is_published', sa.Boolean(), nullable=False),
        sa.Column('show_powered_by', sa.Boolean(), nullable=False),
        *_audit_columns(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name=op.f('fk_profiles_user_id_users'), ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_profiles')),
    )
    op.create_index(op.f('ix_profiles_user_id'), 'profiles', ['user_id'], unique=True)

    op.create_table(
        'pages',
        sa.Column('profile_id', advanced_alchemy.types.GUID(length=16), nullable=False),
        sa.Column('type', sa.String(length=20), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('slug', sa.String(length=100), nullable=False),
        sa.Column('content', sa.JSON(), nullable=False),
        sa.Column('is_published', sa.Boolean(), nullable=False),
        sa.Column('is_password_protected', sa.Boolean(), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=True),
        sa.Column('order', sa.Integer(), nullable=False),
        *_audit_columns(),
        sa.ForeignKeyConstraint(['profile_id'], ['profiles.id'], name=op.f('fk_pages_profile_id_profiles'), ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_pages')),
        sa.UniqueConstraint('profile_id', 'slug', name='uq_pages_profile_slug'),
    )
    op.create_index(op.f('ix_pages_profile_id'), 'pages', ['profile_id'])
    op.create_index(op.f('ix_pages_order'), 'pages', ['order'])

    op.create_table(
        'gallery_items',
        sa.Column('profile_id', advanced_alchemy.types.GUID(length=16), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('image_url', sa.String(length=1024), nullable=False),
        sa.Column('storage_key', sa.String(length=1024), nullable=False),
        sa.Column('category', sa.String(length=100), nullable=True),
        sa.Column('tags', sa.JSON(), nullable=False),
        sa.Column('is_visible', sa.Boolean(), nullable=False),
        sa.Column('order', sa.Integer(), nullable=False),
        *_audit_columns(),
        sa.ForeignKeyConstraint(['profile_id'], ['profiles.id'], name=op.f('fk_gallery_items_profile_id_profiles'), ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_gallery_items')),
    )
    op.create_index(op.f('ix_gallery_items_profile_id'), 'gallery_items', ['profile_id'])
    op.create_index(op.f('ix_gallery_items_category'), 'gallery_items', ['category'])
    op.create_index(op.f('ix_gallery_items_order'), 'gallery_items', ['order'])


def downgrade() -> None:
    op.drop_table('gallery_items')
    op.drop_table('pages')
    op.drop_table('profiles')
    op.drop_table('users')
