# migrations/versions/001_initial_migration.py

"""Initial migration with all tables

Revision ID: 001
Revises:
Create Date: 2024-01-01 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    ]


def upgrade() -> None:
    # Users
    op.create_table('users',
                    sa.Column('id', sa.String(), nullable=False),
                    sa.Column('name', sa.String(length=100), nullable=False),
                    sa.Column('email', sa.String(length=255), nullable=False),
                    sa.Column('password_hash', sa.String(), nullable=True),
                    sa.Column('google_id', sa.String(), nullable=True),
                    sa.Column('facebook_id', sa.String(), nullable=True),
                    sa.Column('avatar', sa.String(), nullable=True),
                    sa.Column('cover_photo', sa.String(), nullable=True),
                    sa.Column('bio', sa.Text(), nullable=True),
                    sa.Column('location', sa.String(), nullable=True),
                    sa.Column('website', sa.String(), nullable=True),
                    sa.Column('work', sa.String(), nullable=True),
                    sa.Column('education', sa.String(), nullable=True),
                    sa.Column('date_of_birth', sa.Date(), nullable=True),
                    sa.Column('gender', sa.String(), nullable=True),
                    sa.Column('profile_visibility', sa.String(), server_default='public', nullable=False),
                    sa.Column('friend_list_visibility', sa.String(), server_default='friends', nullable=False),
                    sa.Column('post_visibility', sa.String(), server_default='friends', nullable=False),
                    sa.Column('is_online', sa.Boolean(), server_default='false', nullable=False),
                    sa.Column('last_seen', sa.DateTime(), nullable=True),
                    sa.Column('is_verified', sa.Boolean(), server_default='false', nullable=False),
                    sa.Column('is_active', sa.Boolean(), server_default='true', nullable=False),
                    *_timestamps(),
                    sa.PrimaryKeyConstraint('id'),
                    sa.UniqueConstraint('google_id'),
                    sa.UniqueConstraint('facebook_id'),
                    sa.CheckConstraint(
                        'password_hash IS NOT NULL OR google_id IS NOT NULL OR facebook_id IS NOT NULL',
                        name='ck_users_credentials',
                    )
                    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)
    op.create_index(op.f('ix_users_name'), 'users', ['name'])
    op.create_index(op.f('ix_users_is_online'), 'users', ['is_online'])
    op.create_index(op.f('ix_users_created_at'), 'users', ['created_at'])

    # Friend requests, friendships, blocks
    op.create_table('friend_requests',
                    sa.Column('id', sa.String(), nullable=False),
                    sa.Column('sender_id', sa.String(), nullable=False),
                    sa.Column('receiver_id', sa.String(), nullable=False),
                    sa.Column('message', sa.Text(), nullable=True),
                    sa.Column('status', sa.String(), server_default='pending', nullable=False),
                    sa.Column('responded_at', sa.DateTime(), nullable=True),
                    *_timestamps(),
                    sa.ForeignKeyConstraint(['sender_id'], ['users.id'], ondelete='CASCADE'),
                    sa.ForeignKeyConstraint(['receiver_id'], ['users.id'], ondelete='CASCADE'),
                    sa.PrimaryKeyConstraint('id'),
                    sa.UniqueConstraint('sender_id', 'receiver_id', name='uq_friend_request_pair')
                    )
    op.create_index('ix_friend_requests_receiver_status', 'friend_requests', ['receiver_id', 'status'])
    op.create_index('ix_friend_requests_sender_status', 'friend_requests', ['sender_id', 'status'])
    op.create_index(op.f('ix_friend_requests_created_at'), 'friend_requests', ['created_at'])

    op.create_table('friendships',
                    sa.Column('id', sa.String(), nullable=False),
                    sa.Column('user_id', sa.String(), nullable=False),
                    sa.Column('friend_id', sa.String(), nullable=False),
                    *_timestamps(),
                    sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
                    sa.ForeignKeyConstraint(['friend_id'], ['users.id'], ondelete='CASCADE'),
                    sa.PrimaryKeyConstraint('id'),
                    sa.UniqueConstraint('user_id', 'friend_id', name='uq_friend_pair')
                    )
    op.create_index(op.f('ix_friendships_user_id'), 'friendships', ['user_id'])
    op.create_index(op.f('ix_friendships_friend_id'), 'friendships', ['friend_id'])
    op.create_index(op.f('ix_friendships_created_at'), 'friendships', ['created_at'])

    op.create_table('user_blocks',
                    sa.Column('id', sa.String(), nullable=False),
                    sa.Column('blocker_id', sa.String(), nullable=False),
                    sa.Column('blocked_id', sa.String(), nullable=False),
                    *_timestamps(),
                    sa.ForeignKeyConstraint(['blocker_id'], ['users.id'], ondelete='CASCADE'),
                    sa.ForeignKeyConstraint(['blocked_id'], ['users.id'], ondelete='CASCADE'),
                    sa.PrimaryKeyConstraint('id'),
                    sa.UniqueConstraint('blocker_id', 'blocked_id', name='uq_blocked_pair')
                    )
    op.create_index(op.f('ix_user_blocks_blocker_id'), 'user_blocks', ['blocker_id'])
    op.create_index(op.f('ix_user_blocks_blocked_id'), 'user_blocks', ['blocked_id'])
    op.create_index(op.f('ix_user_blocks_created_at'), 'user_blocks', ['created_at'])

    # Notifications
    op.create_table('notifications',
                    sa.Column('id', sa.String(), nullable=False),
                    sa.Column('recipient_id', sa.String(), nullable=False),
                    sa.Column('sender_id', sa.String(), nullable=False),
                    sa.Column('type', sa.String(), nullable=False),
                    sa.Column('message', sa.Text(), nullable=False),
                    sa.Column('related_post_id', sa.String(), nullable=True),
                    sa.Column('related_comment_id', sa.String(), nullable=True),
                    sa.Column('related_group_id', sa.String(), nullable=True),
                    sa.Column('is_read', sa.Boolean(), server_default='false', nullable=False),
                    sa.Column('read_at', sa.DateTime(), nullable=True),
                    *_timestamps(),
                    sa.ForeignKeyConstraint(['recipient_id'], ['users.id'], ondelete='CASCADE'),
                    sa.ForeignKeyConstraint(['sender_id'], ['users.id'], ondelete='CASCADE'),
                    sa.PrimaryKeyConstraint('id')
                    )
    op.create_index('ix_notifications_recipient_read', 'notifications', ['recipient_id', 'is_read'])
    op.create_index(op.f('ix_notifications_created_at'), 'notifications', ['created_at'])

    # Reactions on posts and comments
    op.create_table('reactions',
                    sa.Column('id', sa.String(), nullable=False),
                    sa.Column('user_id', sa.String(), nullable=False),
                    sa.Column('target_type', sa.String(), nullable=False),
                    sa.Column('target_id', sa.String(), nullable=False),
                    sa.Column('type', sa.String(), nullable=False),
                    *_timestamps(),
                    sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
                    sa.PrimaryKeyConstraint('id'),
                    sa.UniqueConstraint('user_id', 'target_id', 'target_type', name='uq_reaction_user_target')
                    )
    op.create_index('ix_reactions_target', 'reactions', ['target_type', 'target_id'])
    op.create_index(op.f('ix_reactions_created_at'), 'reactions', ['created_at'])

    # Groups
    op.create_table('groups',
                    sa.Column('id', sa.String(), nullable=False),
                    sa.Column('name', sa.String(length=100), nullable=False),
                    sa.Column('description', sa.Text(), nullable=True),
                    sa.Column('type', sa.String(), server_default='group', nullable=False),
                    sa.Column('category', sa.String(), server_default='other', nullable=False),
                    sa.Column('privacy', sa.String(), server_default='public', nullable=False),
                    sa.Column('avatar', sa.String(), nullable=True),
                    sa.Column('cover_photo', sa.String(), nullable=True),
                    sa.Column('admin_id', sa.String(), nullable=False),
                    sa.Column('rules', sa.JSON(), server_default='[]', nullable=False),
                    sa.Column('tags', sa.JSON(), server_default='[]', nullable=False),
                    sa.Column('location', sa.String(), nullable=True),
                    sa.Column('website', sa.String(), nullable=True),
                    sa.Column('is_active', sa.Boolean(), server_default='true', nullable=False),
                    *_timestamps(),
                    sa.ForeignKeyConstraint(['admin_id'], ['users.id'], ondelete='CASCADE'),
                    sa.PrimaryKeyConstraint('id')
                    )
    op.create_index(op.f('ix_groups_name'), 'groups', ['name'])
    op.create_index(op.f('ix_groups_category'), 'groups', ['category'])
    op.create_index(op.f('ix_groups_is_active'), 'groups', ['is_active'])
    op.create_index(op.f('ix_groups_created_at'), 'groups', ['created_at'])

    op.create_table('group_members',
                    sa.Column('id', sa.String(), nullable=False),
                    sa.Column('group_id', sa.String(), nullable=False),
                    sa.Column('user_id', sa.String(), nullable=False),
                    sa.Column('role', sa.String(), server_default='member', nullable=False),
                    *_timestamps(),
                    sa.ForeignKeyConstraint(['group_id'], ['groups.id'], ondelete='CASCADE'),
                    sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
                    sa.PrimaryKeyConstraint('id'),
                    sa.UniqueConstraint('group_id', 'user_id', name='uq_group_member')
                    )
    op.create_index(op.f('ix_group_members_group_id'), 'group_members', ['group_id'])
    op.create_index(op.f('ix_group_members_user_id'), 'group_members', ['user_id'])
    op.create_index(op.f('ix_group_members_created_at'), 'group_members', ['created_at'])

    op.create_table('group_join_requests',
                    sa.Column('id', sa.String(), nullable=False),
                    sa.Column('group_id', sa.String(), nullable=False),
                    sa.Column('user_id', sa.String(), nullable=False),
                    sa.Column('message', sa.Text(), nullable=True),
                    *_timestamps(),
                    sa.ForeignKeyConstraint(['group_id'], ['groups.id'], ondelete='CASCADE'),
                    sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
                    sa.PrimaryKeyConstraint('id'),
                    sa.UniqueConstraint('group_id', 'user_id', name='uq_group_join_request')
                    )
    op.create_index(op.f('ix_group_join_requests_group_id'), 'group_join_requests', ['group_id'])
    op.create_index(op.f('ix_group_join_requests_created_at'), 'group_join_requests', ['created_at'])

    # Posts and comments
    op.create_table('posts',
                    sa.Column('id', sa.String(), nullable=False),
                    sa.Column('author_id', sa.String(), nullable=False),
                    sa.Column('content', sa.Text(), nullable=True),
                    sa.Column('images', sa.JSON(), server_default='[]', nullable=False),
                    sa.Column('type', sa.String(), server_default='text', nullable=False),
                    sa.Column('visibility', sa.String(), server_default='friends', nullable=False),
                    sa.Column('tags', sa.JSON(), server_default='[]', nullable=False),
                    sa.Column('location', sa.String(), nullable=True),
                    sa.Column('shared_post_id', sa.String(), nullable=True),
                    sa.Column('group_id', sa.String(), nullable=True),
                    sa.Column('comments_count', sa.Integer(), server_default='0', nullable=False),
                    sa.Column('shares_count', sa.Integer(), server_default='0', nullable=False),
                    sa.Column('is_edited', sa.Boolean(), server_default='false', nullable=False),
                    sa.Column('edited_at', sa.DateTime(), nullable=True),
                    *_timestamps(),
                    sa.ForeignKeyConstraint(['author_id'], ['users.id'], ondelete='CASCADE'),
                    sa.ForeignKeyConstraint(['shared_post_id'], ['posts.id'], ondelete='SET NULL'),
                    sa.ForeignKeyConstraint(['group_id'], ['groups.id'], ondelete='CASCADE'),
                    sa.PrimaryKeyConstraint('id')
                    )
    op.create_index('ix_posts_author_created', 'posts', ['author_id', 'created_at'])
    op.create_index('ix_posts_visibility_created', 'posts', ['visibility', 'created_at'])
    op.create_index(op.f('ix_posts_shared_post_id'), 'posts', ['shared_post_id'])
    op.create_index(op.f('ix_posts_group_id'), 'posts', ['group_id'])
    op.create_index(op.f('ix_posts_created_at'), 'posts', ['created_at'])

    op.create_table('comments',
                    sa.Column('id', sa.String(), nullable=False),
                    sa.Column('author_id', sa.String(), nullable=False),
                    sa.Column('post_id', sa.String(), nullable=False),
                    sa.Column('content', sa.Text(), nullable=True),
                    sa.Column('image', sa.String(), nullable=True),
                    sa.Column('parent_comment_id', sa.String(), nullable=True),
                    sa.Column('is_edited', sa.Boolean(), server_default='false', nullable=False),
                    sa.Column('edited_at', sa.DateTime(), nullable=True),
                    *_timestamps(),
                    sa.ForeignKeyConstraint(['author_id'], ['users.id'], ondelete='CASCADE'),
                    sa.ForeignKeyConstraint(['post_id'], ['posts.id'], ondelete='CASCADE'),
                    sa.ForeignKeyConstraint(['parent_comment_id'], ['comments.id'], ondelete='CASCADE'),
                    sa.PrimaryKeyConstraint('id')
                    )
    op.create_index('ix_comments_post_parent', 'comments', ['post_id', 'parent_comment_id'])
    op.create_index(op.f('ix_comments_parent_comment_id'), 'comments', ['parent_comment_id'])
    op.create_index(op.f('ix_comments_created_at'), 'comments', ['created_at'])

    # Direct messages
    op.create_table('messages',
                    sa.Column('id', sa.String(), nullable=False),
                    sa.Column('sender_id', sa.String(), nullable=False),
                    sa.Column('receiver_id', sa.String(), nullable=False),
                    sa.Column('content', sa.Text(), nullable=True),
                    sa.Column('type', sa.String(), server_default='text', nullable=False),
                    sa.Column('image', sa.String(), nullable=True),
                    sa.Column('reply_to_id', sa.String(), nullable=True),
                    sa.Column('is_read', sa.Boolean(), server_default='false', nullable=False),
                    sa.Column('read_at', sa.DateTime(), nullable=True),
                    sa.Column('is_edited', sa.Boolean(), server_default='false', nullable=False),
                    sa.Column('edited_at', sa.DateTime(), nullable=True),
                    *_timestamps(),
                    sa.ForeignKeyConstraint(['sender_id'], ['users.id'], ondelete='CASCADE'),
                    sa.ForeignKeyConstraint(['receiver_id'], ['users.id'], ondelete='CASCADE'),
                    sa.ForeignKeyConstraint(['reply_to_id'], ['messages.id'], ondelete='SET NULL'),
                    sa.PrimaryKeyConstraint('id')
                    )
    op.create_index('ix_messages_pair_created', 'messages', ['sender_id', 'receiver_id', 'created_at'])
    op.create_index('ix_messages_receiver_read', 'messages', ['receiver_id', 'is_read'])
    op.create_index(op.f('ix_messages_created_at'), 'messages', ['created_at'])

    # Events
    op.create_table('events',
                    sa.Column('id', sa.String(), nullable=False),
                    sa.Column('organizer_id', sa.String(), nullable=False),
                    sa.Column('title', sa.String(length=200), nullable=False),
                    sa.Column('description', sa.Text(), nullable=True),
                    sa.Column('starts_at', sa.DateTime(), nullable=False),
                    sa.Column('location', sa.String(), nullable=True),
                    sa.Column('category', sa.String(), server_default='other', nullable=False),
                    sa.Column('image', sa.String(), nullable=True),
                    sa.Column('max_attendees', sa.Integer(), nullable=True),
                    sa.Column('price', sa.Float(), server_default='0', nullable=False),
                    *_timestamps(),
                    sa.ForeignKeyConstraint(['organizer_id'], ['users.id'], ondelete='CASCADE'),
                    sa.PrimaryKeyConstraint('id')
                    )
    op.create_index(op.f('ix_events_organizer_id'), 'events', ['organizer_id'])
    op.create_index(op.f('ix_events_starts_at'), 'events', ['starts_at'])
    op.create_index(op.f('ix_events_category'), 'events', ['category'])
    op.create_index(op.f('ix_events_created_at'), 'events', ['created_at'])

    op.create_table('event_attendees',
                    sa.Column('id', sa.String(), nullable=False),
                    sa.Column('event_id', sa.String(), nullable=False),
                    sa.Column('user_id', sa.String(), nullable=False),
                    *_timestamps(),
                    sa.ForeignKeyConstraint(['event_id'], ['events.id'], ondelete='CASCADE'),
                    sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
                    sa.PrimaryKeyConstraint('id'),
                    sa.UniqueConstraint('event_id', 'user_id', name='uq_event_attendee')
                    )
    op.create_index(op.f('ix_event_attendees_event_id'), 'event_attendees', ['event_id'])
    op.create_index(op.f('ix_event_attendees_user_id'), 'event_attendees', ['user_id'])
    op.create_index(op.f('ix_event_attendees_created_at'), 'event_attendees', ['created_at'])

    # Marketplace
    op.create_table('listings',
                    sa.Column('id', sa.String(), nullable=False),
                    sa.Column('seller_id', sa.String(), nullable=False),
                    sa.Column('title', sa.String(length=200), nullable=False),
                    sa.Column('description', sa.Text(), nullable=True),
                    sa.Column('price', sa.Float(), nullable=False),
                    sa.Column('category', sa.String(), server_default='other', nullable=False),
                    sa.Column('condition', sa.String(), server_default='good', nullable=False),
                    sa.Column('images', sa.JSON(), server_default='[]', nullable=False),
                    sa.Column('location', sa.String(), nullable=True),
                    sa.Column('status', sa.String(), server_default='active', nullable=False),
                    sa.Column('views', sa.Integer(), server_default='0', nullable=False),
                    *_timestamps(),
                    sa.ForeignKeyConstraint(['seller_id'], ['users.id'], ondelete='CASCADE'),
                    sa.PrimaryKeyConstraint('id')
                    )
    op.create_index(op.f('ix_listings_seller_id'), 'listings', ['seller_id'])
    op.create_index(op.f('ix_listings_price'), 'listings', ['price'])
    op.create_index(op.f('ix_listings_category'), 'listings', ['category'])
    op.create_index(op.f('ix_listings_status'), 'listings', ['status'])
    op.create_index(op.f('ix_listings_created_at'), 'listings', ['created_at'])


def downgrade() -> None:
    op.drop_table('listings')
    op.drop_table('event_attendees')
    op.drop_table('events')
    op.drop_table('messages')
    op.drop_table('comments')
    op.drop_table('posts')
    op.drop_table('group_join_requests')
    op.drop_table('group_members')
    op.drop_table('groups')
    op.drop_table('reactions')
    op.drop_table('notifications')
    op.drop_table('user_blocks')
    op.drop_table('friendships')
    op.drop_table('friend_requests')
    op.drop_table('users')
