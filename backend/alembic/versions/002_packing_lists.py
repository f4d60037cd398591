"""Packing lists: categories and items per trip

Revision ID: 002_packing
Revises: 001_initial
Create Date: 2026-10-19
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = '002_packing'
down_revision: Union[str, None] = '001_initial'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table('packing_categories',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('trip_id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('display_order', sa.Integer(), nullable=True, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.ForeignKeyConstraint(['trip_id'], ['trips.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_packing_categories_trip_id', 'packing_categories', ['trip_id'])

    op.create_table('packing_items',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('category_id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('is_packed', sa.Boolean(), nullable=True, server_default=sa.false()),
        sa.Column('priority', sa.String(length=20), nullable=True, server_default='normal'),
        sa.Column('display_order', sa.Integer(), nullable=True, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.ForeignKeyConstraint(['category_id'], ['packing_categories.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_packing_items_category_id', 'packing_items', ['category_id'])


def downgrade() -> None:
    op.drop_index('ix_packing_items_category_id', table_name='packing_items')
    op.drop_table('packing_items')
    op.drop_index('ix_packing_categories_trip_id', table_name='packing_categories')
    op.drop_table('packing_categories')
