"""initial forum schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19
"""
from __future__ import annotations
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001_initial'
down_revision = None
branch_labels = None
depends_on = None

NOW = sa.text('CURRENT_TIMESTAMP')


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('username', sa.String(length=64), nullable=False, unique=True),
        sa.Column('email', sa.String(length=255), nullable=False, unique=True),
        sa.Column('group_id', sa.Integer(), nullable=False, server_default='10'),
        sa.Column('token', sa.String(length=64), nullable=True, unique=True),
        sa.Column('thread_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=NOW),
    )
    op.create_index('ix_users_username', 'users', ['username'])
    op.create_index('ix_users_email', 'users', ['email'])
    op.create_index('ix_users_group_id', 'users', ['group_id'])

    op.create_table(
        'groups',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=64), nullable=False, unique=True),
    )
    op.create_table(
        'group_permissions',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('group_id', sa.Integer(), nullable=False),
        sa.Column('permission', sa.String(length=128), nullable=False),
        sa.UniqueConstraint('group_id', 'permission', name='uq_group_permissions_group_id_permission'),
    )
    op.create_index('ix_group_permissions_group_id', 'group_permissions', ['group_id'])
    op.create_index('ix_group_permissions_permission', 'group_permissions', ['permission'])

    op.create_table(
        'categories',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=64), nullable=False, unique=True),
        sa.Column('description', sa.Text(), nullable=False, server_default=''),
        sa.Column('sort', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('thread_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=NOW),
    )

    op.create_table(
        'threads',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('last_posted_user_id', sa.Integer(), nullable=True),
        sa.Column('category_id', sa.Integer(), sa.ForeignKey('categories.id'), nullable=True),
        sa.Column('first_post_id', sa.Integer(), nullable=True),
        sa.Column('type', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('is_approved', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_sticky', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_essence', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_draft', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('disable_post', sa.Boolean(), nullable=True),
        sa.Column('title', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('content_for_indexes', sa.Text(), nullable=False, server_default=''),
        sa.Column('post_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('view_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('deleted_user_id', sa.Integer(), nullable=True),
        sa.Column('posted_at', sa.DateTime(), nullable=False, server_default=NOW),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=NOW),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=NOW),
        sa.Column('modified_at', sa.DateTime(), nullable=True, server_default=NOW),
        sa.Column('deleted_at', sa.DateTime(), nullable=True),
    )
    for column in ('category_id', 'user_id', 'deleted_user_id', 'is_sticky', 'posted_at', 'created_at', 'modified_at'):
        op.create_index(f'ix_threads_{column}', 'threads', [column])
    for column in ('is_sticky', 'posted_at', 'created_at', 'modified_at'):
        op.create_index(f'ix_threads_category_id_{column}', 'threads', ['category_id', column])

    op.create_table(
        'posts',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('thread_id', sa.Integer(), sa.ForeignKey('threads.id'), nullable=False),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('content', sa.Text(), nullable=False, server_default=''),
        sa.Column('is_first', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('like_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('reply_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=NOW),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=NOW),
        sa.Column('deleted_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_posts_thread_id_is_first', 'posts', ['thread_id', 'is_first'])
    op.create_index('ix_posts_thread_id_user_id', 'posts', ['thread_id', 'user_id'])

    op.create_table(
        'post_likes',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('post_id', sa.Integer(), sa.ForeignKey('posts.id'), nullable=False),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=NOW),
        sa.UniqueConstraint('post_id', 'user_id', name='uq_post_likes_post_id_user_id'),
    )
    op.create_index('ix_post_likes_post_id', 'post_likes', ['post_id'])
    op.create_index('ix_post_likes_user_id', 'post_likes', ['user_id'])


def downgrade() -> None:
    op.drop_table('post_likes')
    op.drop_table('posts')
    op.drop_table('threads')
    op.drop_table('categories')
    op.drop_table('group_permissions')
    op.drop_table('groups')
    op.drop_table('users')
