"""Progression tables

Revision ID: 001
Revises: 
Create Date: 2026-10-18 00:00:01

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    # Create collectors table
    op.create_table(
        'collectors',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('display_name', sa.String(100), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )

    # Create collection_cards table
    op.create_table(
        'collection_cards',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('collector_id', sa.Integer(), nullable=False),
        sa.Column('card_id', sa.String(50), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('variant', sa.String(30), nullable=False, server_default='normal'),
        *_timestamps(),
        sa.ForeignKeyConstraint(['collector_id'], ['collectors.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('collector_id', 'card_id', 'variant', name='uq_collection_card_variant'),
        sa.CheckConstraint('quantity >= 1', name='ck_collection_cards_quantity'),
    )
    op.create_index('ix_collection_cards_collector_id', 'collection_cards', ['collector_id'], unique=False)
    op.create_index('ix_collection_cards_card_id', 'collection_cards', ['card_id'], unique=False)

    # Create cached_cards table
    op.create_table(
        'cached_cards',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('card_id', sa.String(50), nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('types', sa.JSON(), nullable=True),
        sa.Column('set_id', sa.String(30), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_cached_cards_card_id', 'cached_cards', ['card_id'], unique=True)
    op.create_index('ix_cached_cards_set_id', 'cached_cards', ['set_id'], unique=False)

    # Create cached_sets table
    op.create_table(
        'cached_sets',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('set_id', sa.String(30), nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('total_cards', sa.Integer(), nullable=False, server_default='0'),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_cached_sets_set_id', 'cached_sets', ['set_id'], unique=True)

    # Create awarded_badges table
    op.create_table(
        'awarded_badges',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('collector_id', sa.Integer(), nullable=False),
        sa.Column('badge_key', sa.String(80), nullable=False),
        sa.Column('category', sa.String(30), nullable=False),
        sa.Column('earned_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('context_data', sa.JSON(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['collector_id'], ['collectors.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('collector_id', 'badge_key', name='uq_awarded_badge_collector_key'),
    )
    op.create_index('ix_awarded_badges_collector_id', 'awarded_badges', ['collector_id'], unique=False)
    op.create_index('ix_awarded_badges_category', 'awarded_badges', ['category'], unique=False)

    # Create activity_logs table
    op.create_table(
        'activity_logs',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('collector_id', sa.Integer(), nullable=False),
        sa.Column('action', sa.String(30), nullable=False),
        sa.Column('occurred_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('extra_data', sa.JSON(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['collector_id'], ['collectors.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(
        'ix_activity_logs_collector_action_time',
        'activity_logs',
        ['collector_id', 'action', 'occurred_at'],
        unique=False,
    )

    # Create grace_day_usages table
    op.create_table(
        'grace_day_usages',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('collector_id', sa.Integer(), nullable=False),
        sa.Column('used_on', sa.Date(), nullable=False),
        sa.Column('protected_date', sa.Date(), nullable=False),
        sa.Column('iso_year', sa.Integer(), nullable=False),
        sa.Column('week_number', sa.Integer(), nullable=False),
        sa.Column('streak_length_at_use', sa.Integer(), nullable=False, server_default='0'),
        *_timestamps(),
        sa.ForeignKeyConstraint(['collector_id'], ['collectors.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('collector_id', 'protected_date', name='uq_grace_day_collector_date'),
    )
    op.create_index(
        'ix_grace_day_usages_collector_week',
        'grace_day_usages',
        ['collector_id', 'iso_year', 'week_number'],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index('ix_grace_day_usages_collector_week', table_name='grace_day_usages')
    op.drop_table('grace_day_usages')
    op.drop_index('ix_activity_logs_collector_action_time', table_name='activity_logs')
    op.drop_table('activity_logs')
    op.drop_index('ix_awarded_badges_category', table_name='awarded_badges')
    op.drop_index('ix_awarded_badges_collector_id', table_name='awarded_badges')
    op.drop_table('awarded_badges')
    op.drop_index('ix_cached_sets_set_id', table_name='cached_sets')
    op.drop_table('cached_sets')
    op.drop_index('ix_cached_cards_set_id', table_name='cached_cards')
    op.drop_index('ix_cached_cards_card_id', table_name='cached_cards')
    op.drop_table('cached_cards')
    op.drop_index('ix_collection_cards_card_id', table_name='collection_cards')
    op.drop_index('ix_collection_cards_collector_id', table_name='collection_cards')
    op.drop_table('collection_cards')
    op.drop_table('collectors')
