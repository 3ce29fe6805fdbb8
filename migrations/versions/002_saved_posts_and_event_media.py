# migrations/versions/002_saved_posts_and_event_media.py

"""Saved posts, event tags and images

Revision ID: 002
Revises: 001
Create Date: 2024-02-01 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision = '002'
down_revision = '001'
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table('saved_posts',
                    sa.Column('id', sa.String(), nullable=False),
                    sa.Column('user_id', sa.String(), nullable=False),
                    sa.Column('post_id', sa.String(), nullable=False),
                    sa.Column('created_at', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
                    sa.Column('updated_at', sa.DateTime(), nullable=True),
                    sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
                    sa.ForeignKeyConstraint(['post_id'], ['posts.id'], ondelete='CASCADE'),
                    sa.PrimaryKeyConstraint('id'),
                    sa.UniqueConstraint('user_id', 'post_id', name='uq_saved_post_user_post')
                    )
    op.create_index(op.f('ix_saved_posts_user_id'), 'saved_posts', ['user_id'])
    op.create_index(op.f('ix_saved_posts_post_id'), 'saved_posts', ['post_id'])
    op.create_index(op.f('ix_saved_posts_created_at'), 'saved_posts', ['created_at'])

    op.add_column('events', sa.Column('images', sa.JSON(), server_default='[]', nullable=False))
    op.add_column('events', sa.Column('tags', sa.JSON(), server_default='[]', nullable=False))


def downgrade() -> None:
    op.drop_column('events', 'tags')
    op.drop_column('events', 'images')
    op.drop_table('saved_posts')
