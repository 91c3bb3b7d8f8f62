"""Create seeding dashboard tables

This migration adds:
1. projects table
2. influencers table (JSON workflow documents)
3. message_templates table
4. notifications table

Revision ID: create_seeding_tables_001
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa

# revision identifiers
revision = 'create_seeding_tables_001'
down_revision = None
branch_labels = None
depends_on = None


INFLUENCER_STATUSES = (
    'Discovery', 'Contacted', 'Negotiating', 'Approved', 'Contracted',
    'Shipped', 'Content Live', 'Payment Pending', 'Paid',
)


def upgrade():
    # 1. Projects
    op.create_table('projects',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('brand', sa.String(255)),
        sa.Column('status', sa.Enum('Active', 'Completed', 'Draft', name='projectstatus'), server_default='Active'),
        sa.Column('budget', sa.Float, server_default='0'),
        sa.Column('spent', sa.Float, server_default='0'),
        sa.Column('description', sa.Text),
        sa.Column('start_date', sa.String(10)),
        sa.Column('managers', sa.JSON),
        sa.Column('created_at', sa.DateTime, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime, server_default=sa.func.now()),
    )

    # 2. Influencers
    op.create_table('influencers',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('project_id', sa.String(36), sa.ForeignKey('projects.id', ondelete='SET NULL'), nullable=True),
        sa.Column('handle', sa.String(100), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255)),
        sa.Column('country', sa.String(50)),
        sa.Column('categories', sa.JSON),
        sa.Column('follower_count', sa.Integer, server_default='0'),
        sa.Column('status', sa.Enum(*INFLUENCER_STATUSES, name='influencerstatus'), server_default='Discovery'),
        sa.Column('contract', sa.JSON, nullable=False),
        sa.Column('logistics', sa.JSON, nullable=False),
        sa.Column('content', sa.JSON, nullable=False),
        sa.Column('history', sa.JSON),
        sa.Column('metrics', sa.JSON),
        sa.Column('payment_record', sa.JSON),
        sa.Column('notes', sa.Text),
        sa.Column('version', sa.Integer, nullable=False, server_default='1'),
        sa.Column('created_at', sa.DateTime, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime, server_default=sa.func.now()),
    )
    op.create_index('ix_influencers_project_id', 'influencers', ['project_id'])
    op.create_index('ix_influencers_handle', 'influencers', ['handle'])
    op.create_index('ix_influencers_status', 'influencers', ['status'])

    # 3. Outreach macros
    op.create_table('message_templates',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('key', sa.String(100), unique=True),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('subject', sa.String(255)),
        sa.Column('body', sa.Text),
        sa.Column('created_at', sa.DateTime, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime, server_default=sa.func.now()),
    )

    # 4. Notifications
    op.create_table('notifications',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('influencer_id', sa.String(36), sa.ForeignKey('influencers.id', ondelete='CASCADE'), nullable=True),
        sa.Column('type', sa.String(50), nullable=False),
        sa.Column('level', sa.String(20), server_default='info'),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('message', sa.Text),
        sa.Column('data', sa.JSON),
        sa.Column('read', sa.Boolean, server_default=sa.false()),
        sa.Column('read_at', sa.DateTime),
        sa.Column('created_at', sa.DateTime, server_default=sa.func.now()),
    )
    op.create_index('ix_notifications_influencer_id', 'notifications', ['influencer_id'])


def downgrade():
    op.drop_index('ix_notifications_influencer_id', table_name='notifications')
    op.drop_table('notifications')
    op.drop_table('message_templates')
    op.drop_index('ix_influencers_status', table_name='influencers')
    op.drop_index('ix_influencers_handle', table_name='influencers')
    op.drop_index('ix_influencers_project_id', table_name='influencers')
    op.drop_table('influencers')
    op.drop_table('projects')
    sa.Enum(name='influencerstatus').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='projectstatus').drop(op.get_bind(), checkfirst=True)
