# alembic/versions/0001_initial.py

"""Initial calendar tables

Revision ID: 0001_initial
Revises:
Create Date: 2025-06-01 09:00:00.000000
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create users, labels, events, recurring events and label time buckets."""
    op.create_table(
        'users',
        sa.Column('id', sa.String(length=64), primary_key=True, comment="Internal User ID"),
        sa.Column('name', sa.String(length=128), nullable=True, comment="User display name"),
        sa.Column('timezone', sa.String(length=64), nullable=False, server_default='UTC', comment="IANA timezone"),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_users_id', 'users', ['id'])

    op.create_table(
        'labels',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.String(length=64), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(length=128), nullable=False),
        sa.UniqueConstraint('user_id', 'name', name='uq_label_user_name'),
    )
    op.create_index('ix_labels_id', 'labels', ['id'])
    op.create_index('ix_labels_user_id', 'labels', ['user_id'])

    op.create_table(
        'events',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.String(length=64), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('label_id', sa.Integer(), sa.ForeignKey('labels.id', ondelete='SET NULL'), nullable=True),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('start_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('end_time', sa.DateTime(timezone=True), nullable=True),
        sa.Column('is_completed', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('unconfirmed', sa.Boolean(), nullable=False, server_default=sa.false()),
    )
    op.create_index('ix_events_id', 'events', ['id'])
    op.create_index('ix_events_user_id', 'events', ['user_id'])
    op.create_index('ix_events_label_id', 'events', ['label_id'])
    op.create_index('ix_events_user_start', 'events', ['user_id', 'start_time'])
    op.create_index('ix_events_label_completed_start', 'events', ['label_id', 'is_completed', 'start_time'])

    op.create_table(
        'recurring_events',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.String(length=64), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('label_id', sa.Integer(), sa.ForeignKey('labels.id', ondelete='SET NULL'), nullable=True),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=True),
        sa.Column('recurrence_rule', sa.String(length=128), nullable=False, comment="Encoded rule, e.g. WEEKLY:MONDAY"),
        sa.Column('recurrence_summary', sa.String(length=512), nullable=True),
        sa.Column('skip_days', sa.JSON(), nullable=False),
        sa.Column('unconfirmed', sa.Boolean(), nullable=False, server_default=sa.false()),
    )
    op.create_index('ix_recurring_events_id', 'recurring_events', ['id'])
    op.create_index('ix_recurring_events_user_id', 'recurring_events', ['user_id'])
    op.create_index('ix_recurring_events_user_dates', 'recurring_events', ['user_id', 'start_date', 'end_date'])

    op.create_table(
        'label_time_buckets',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.String(length=64), nullable=False),
        sa.Column('label_id', sa.Integer(), nullable=False),
        sa.Column('label_name', sa.String(length=128), nullable=False),
        sa.Column(
            'bucket_type',
            sa.Enum('DAY', 'WEEK', 'MONTH', name='time_bucket_type', native_enum=False),
            nullable=False,
        ),
        sa.Column('bucket_year', sa.Integer(), nullable=False),
        sa.Column('bucket_value', sa.Integer(), nullable=False),
        sa.Column('duration_minutes', sa.Integer(), nullable=False, server_default='0'),
        sa.UniqueConstraint(
            'user_id', 'label_id', 'bucket_type', 'bucket_year', 'bucket_value',
            name='uq_label_time_bucket',
        ),
    )
    op.create_index('ix_label_time_buckets_id', 'label_time_buckets', ['id'])
    op.create_index('ix_label_time_buckets_user_id', 'label_time_buckets', ['user_id'])
    op.create_index('ix_label_time_buckets_label_id', 'label_time_buckets', ['label_id'])


def downgrade() -> None:
    """Drop the calendar schema in reverse creation order."""
    op.drop_table('label_time_buckets')
    op.drop_table('recurring_events')
    op.drop_table('events')
    op.drop_table('labels')
    op.drop_table('users')
