"""create library tables

Revision ID: 4c1e7a9d2b30
Revises:
Create Date: 2026-10-18 09:12:44.201311

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4c1e7a9d2b30'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'videos',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('title', sa.String(length=500), nullable=False),
        sa.Column('url', sa.Text(), nullable=False),
        sa.Column('duration', sa.String(length=16), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_videos_id', 'videos', ['id'])
    op.create_index('idx_videos_created_id', 'videos', ['created_at', 'id'])

    op.create_table(
        'tag_categories',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('display_order', sa.Integer(), nullable=False, server_default='0'),
    )
    op.create_index('ix_tag_categories_id', 'tag_categories', ['id'])
    op.create_index('ix_tag_categories_name', 'tag_categories', ['name'], unique=True)
    op.create_index('ix_tag_categories_display_order', 'tag_categories', ['display_order'])

    op.create_table(
        'tags',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column(
            'category_id',
            sa.Integer(),
            sa.ForeignKey('tag_categories.id', ondelete='SET NULL'),
            nullable=True,
        ),
    )
    op.create_index('ix_tags_id', 'tags', ['id'])
    op.create_index('ix_tags_name', 'tags', ['name'], unique=True)
    op.create_index('ix_tags_category_id', 'tags', ['category_id'])

    op.create_table(
        'video_tags',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column(
            'video_id',
            sa.Integer(),
            sa.ForeignKey('videos.id', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column(
            'tag_id',
            sa.Integer(),
            sa.ForeignKey('tags.id', ondelete='CASCADE'),
            nullable=False,
        ),
    )
    op.create_index('ix_video_tags_id', 'video_tags', ['id'])
    op.create_index('ix_video_tags_video_id', 'video_tags', ['video_id'])
    op.create_index('ix_video_tags_tag_id', 'video_tags', ['tag_id'])
    op.create_index('idx_video_tag', 'video_tags', ['video_id', 'tag_id'], unique=True)
    op.create_index('idx_tag_video', 'video_tags', ['tag_id', 'video_id'])

    op.create_table(
        'admin_sessions',
        sa.Column('id', sa.String(length=64), primary_key=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('expires_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_admin_sessions_expires_at', 'admin_sessions', ['expires_at'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('admin_sessions')
    op.drop_table('video_tags')
    op.drop_table('tags')
    op.drop_table('tag_categories')
    op.drop_table('videos')
