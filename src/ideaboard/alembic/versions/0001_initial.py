"""initial: users and ideas

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19
"""
from __future__ import annotations
from alembic import op
import sqlalchemy as sa
import uuid

# revision identifiers, used by Alembic.
revision = '0001_initial'
down_revision = None
branch_labels = None
depends_on = None

content_type = sa.Enum('BLOG', 'VIDEO', 'SOCIAL', name='contenttype')
engagement = sa.Enum('HIGH', 'MEDIUM', 'LOW', name='engagement')
idea_status = sa.Enum('DRAFT', 'IN_PROGRESS', 'PUBLISHED', 'ARCHIVED', name='ideastatus')


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4),
        sa.Column('email', sa.String(length=255), nullable=False, unique=True),
        sa.Column('name', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('role', sa.String(length=32), nullable=False, server_default='user'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP')),
    )
    op.create_index('ix_users_email', 'users', ['email'])

    op.create_table(
        'idea',
        sa.Column('id', sa.Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4),
        sa.Column('owner_id', sa.Uuid(as_uuid=True), sa.ForeignKey('users.id', ondelete='CASCADE', name='fk_idea_owner_id_users'), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('content_type', content_type, nullable=False, server_default='BLOG'),
        sa.Column('keywords', sa.JSON(), nullable=False),
        sa.Column('keywords_text', sa.Text(), nullable=False, server_default=''),
        sa.Column('target_audience', sa.String(length=255), nullable=False, server_default='general audience'),
        sa.Column('estimated_engagement', engagement, nullable=False, server_default='MEDIUM'),
        sa.Column('tone', sa.String(length=100), nullable=True),
        sa.Column('industry', sa.String(length=255), nullable=True),
        sa.Column('status', idea_status, nullable=False, server_default='DRAFT'),
        sa.Column('is_saved', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_scheduled', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('scheduled_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('notes', sa.Text(), nullable=False, server_default=''),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
    )
    op.create_index('ix_idea_owner_id', 'idea', ['owner_id'])
    op.create_index('ix_idea_status', 'idea', ['status'])
    op.create_index('ix_idea_is_saved', 'idea', ['is_saved'])
    op.create_index('ix_idea_is_scheduled', 'idea', ['is_scheduled'])
    op.create_index('ix_idea_scheduled_date', 'idea', ['scheduled_date'])
    op.create_index('ix_idea_created_at', 'idea', ['created_at'])


def downgrade() -> None:
    for name in ('ix_idea_created_at', 'ix_idea_scheduled_date', 'ix_idea_is_scheduled',
                 'ix_idea_is_saved', 'ix_idea_status', 'ix_idea_owner_id'):
        op.drop_index(name, table_name='idea')
    op.drop_table('idea')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
    bind = op.get_bind()
    for enum in (idea_status, engagement, content_type):
        enum.drop(bind, checkfirst=True)
