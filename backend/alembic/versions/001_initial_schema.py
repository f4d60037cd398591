"""Initial schema: trips, planning modules, forecasts and actuals

Revision ID: 001_initial
Revises:
Create Date: 2026-10-19
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps(updated: bool = True) -> list[sa.Column]:
    cols = [sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True)]
    if updated:
        cols.append(sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True))
    return cols


def upgrade() -> None:
    # --- Trips and travelers ---
    op.create_table('trips',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('destination_city', sa.String(length=100), nullable=True),
        sa.Column('destination_country', sa.String(length=100), nullable=True),
        sa.Column('start_date', sa.Date(), nullable=True),
        sa.Column('end_date', sa.Date(), nullable=True),
        sa.Column('currency', sa.String(length=3), nullable=True, server_default='USD'),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_table('trip_travelers',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('trip_id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=150), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('relation', sa.String(length=50), nullable=True),
        sa.Column('is_primary', sa.Boolean(), nullable=True, server_default=sa.false()),
        sa.Column('is_cost_sharer', sa.Boolean(), nullable=True, server_default=sa.true()),
        sa.Column('currency', sa.String(length=3), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=True, server_default=sa.true()),
        *_timestamps(updated=False),
        sa.ForeignKeyConstraint(['trip_id'], ['trips.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )

    # --- Flights ---
    op.create_table('flight_options',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('trip_id', sa.Uuid(), nullable=False),
        sa.Column('flight_type', sa.String(length=20), nullable=True, server_default='one_way'),
        sa.Column('unit_fare', sa.Numeric(12, 2), nullable=True),
        sa.Column('return_fare', sa.Numeric(12, 2), nullable=True),
        sa.Column('currency_code', sa.String(length=3), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=True, server_default='draft'),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['trip_id'], ['trips.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_flight_options_trip_id', 'flight_options', ['trip_id'])
    op.create_table('flight_legs',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('flight_option_id', sa.Uuid(), nullable=False),
        sa.Column('direction', sa.String(length=20), nullable=True, server_default='outbound'),
        sa.Column('leg_order', sa.Integer(), nullable=False),
        sa.Column('departure_airport', sa.String(length=10), nullable=False),
        sa.Column('arrival_airport', sa.String(length=10), nullable=False),
        sa.Column('departure_date', sa.Date(), nullable=False),
        sa.Column('departure_time', sa.Time(), nullable=True),
        sa.Column('arrival_date', sa.Date(), nullable=False),
        sa.Column('arrival_time', sa.Time(), nullable=True),
        sa.Column('airline', sa.String(length=100), nullable=True),
        sa.Column('flight_number', sa.String(length=20), nullable=True),
        sa.Column('stops_count', sa.Integer(), nullable=True, server_default='0'),
        sa.Column('duration_minutes', sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(['flight_option_id'], ['flight_options.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_table('flight_option_travelers',
        sa.Column('flight_option_id', sa.Uuid(), nullable=False),
        sa.Column('traveler_id', sa.Uuid(), nullable=False),
        sa.ForeignKeyConstraint(['flight_option_id'], ['flight_options.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['traveler_id'], ['trip_travelers.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('flight_option_id', 'traveler_id'),
    )

    # --- Accommodations ---
    op.create_table('accommodation_options',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('trip_id', sa.Uuid(), nullable=False),
        sa.Column('type_name', sa.String(length=50), nullable=True),
        sa.Column('name', sa.String(length=255), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('location', sa.String(length=255), nullable=True),
        sa.Column('check_in_date', sa.Date(), nullable=True),
        sa.Column('check_in_time', sa.Time(), nullable=True),
        sa.Column('check_out_date', sa.Date(), nullable=True),
        sa.Column('check_out_time', sa.Time(), nullable=True),
        sa.Column('num_rooms', sa.Integer(), nullable=True, server_default='1'),
        sa.Column('price_per_night', sa.Numeric(12, 2), nullable=True),
        sa.Column('total_price', sa.Numeric(12, 2), nullable=True),
        sa.Column('currency_code', sa.String(length=3), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=True, server_default='draft'),
        sa.Column('booking_reference', sa.String(length=100), nullable=True),
        sa.Column('booking_source', sa.String(length=100), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['trip_id'], ['trips.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_accommodation_options_trip_id', 'accommodation_options', ['trip_id'])
    op.create_table('accommodation_option_travelers',
        sa.Column('accommodation_option_id', sa.Uuid(), nullable=False),
        sa.Column('traveler_id', sa.Uuid(), nullable=False),
        sa.ForeignKeyConstraint(['accommodation_option_id'], ['accommodation_options.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['traveler_id'], ['trip_travelers.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('accommodation_option_id', 'traveler_id'),
    )

    # --- Itinerary ---
    op.create_table('itinerary_days',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('trip_id', sa.Uuid(), nullable=False),
        sa.Column('day_number', sa.Integer(), nullable=False),
        sa.Column('day_date', sa.Date(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        *_timestamps(updated=False),
        sa.ForeignKeyConstraint(['trip_id'], ['trips.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_itinerary_days_trip_id', 'itinerary_days', ['trip_id'])
    op.create_table('itinerary_categories',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('day_id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('cost', sa.Numeric(12, 2), nullable=True),
        sa.Column('currency_code', sa.String(length=3), nullable=True),
        sa.Column('cost_type', sa.String(length=20), nullable=True, server_default='total'),
        sa.Column('headcount', sa.Integer(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=True, server_default=sa.true()),
        sa.Column('is_expanded', sa.Boolean(), nullable=True, server_default=sa.true()),
        sa.Column('display_order', sa.Integer(), nullable=True, server_default='0'),
        *_timestamps(updated=False),
        sa.ForeignKeyConstraint(['day_id'], ['itinerary_days.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_table('itinerary_activities',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('category_id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('start_time', sa.Time(), nullable=True),
        sa.Column('end_time', sa.Time(), nullable=True),
        sa.Column('duration_minutes', sa.Integer(), nullable=True),
        sa.Column('cost', sa.Numeric(12, 2), nullable=True),
        sa.Column('currency_code', sa.String(length=3), nullable=True),
        sa.Column('cost_type', sa.String(length=20), nullable=True, server_default='total'),
        sa.Column('headcount', sa.Integer(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('display_order', sa.Integer(), nullable=True, server_default='0'),
        sa.Column('is_completed', sa.Boolean(), nullable=True, server_default=sa.false()),
        *_timestamps(updated=False),
        sa.ForeignKeyConstraint(['category_id'], ['itinerary_categories.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )

    # --- Ad-hoc expenses ---
    op.create_table('adhoc_expenses',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('trip_id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('currency_code', sa.String(length=3), nullable=True),
        sa.Column('expense_date', sa.Date(), nullable=True),
        sa.Column('category', sa.String(length=50), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=True, server_default=sa.true()),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['trip_id'], ['trips.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_adhoc_expenses_trip_id', 'adhoc_expenses', ['trip_id'])

    # --- Forecast snapshot, expenses and actuals ---
    op.create_table('cost_forecasts',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('trip_id', sa.Uuid(), nullable=False),
        sa.Column('base_currency', sa.String(length=3), nullable=False),
        sa.Column('total_cost', sa.Numeric(14, 2), nullable=False),
        sa.Column('status_filter', sa.JSON(), nullable=False),
        sa.Column('report', sa.JSON(), nullable=False),
        sa.Column('generated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['trip_id'], ['trips.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('trip_id'),
    )
    op.create_table('expenses',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('trip_id', sa.Uuid(), nullable=False),
        sa.Column('module', sa.String(length=20), nullable=False),
        sa.Column('source_id', sa.Uuid(), nullable=True),
        sa.Column('description', sa.String(length=255), nullable=False),
        sa.Column('original_amount', sa.Numeric(14, 2), nullable=False),
        sa.Column('original_currency', sa.String(length=3), nullable=False),
        sa.Column('exchange_rate', sa.Numeric(18, 8), nullable=True, server_default='1'),
        sa.Column('estimated_amount', sa.Numeric(14, 2), nullable=False),
        sa.Column('currency', sa.String(length=3), nullable=False),
        *_timestamps(updated=False),
        sa.ForeignKeyConstraint(['trip_id'], ['trips.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_expenses_trip_id', 'expenses', ['trip_id'])
    op.create_table('expense_splits',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('expense_id', sa.Uuid(), nullable=False),
        sa.Column('traveler_id', sa.Uuid(), nullable=False),
        sa.Column('estimated_split_amount', sa.Numeric(14, 2), nullable=False),
        sa.ForeignKeyConstraint(['expense_id'], ['expenses.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['traveler_id'], ['trip_travelers.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_expense_splits_expense_id', 'expense_splits', ['expense_id'])
    op.create_table('expense_actuals',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('expense_id', sa.Uuid(), nullable=False),
        sa.Column('traveler_id', sa.Uuid(), nullable=False),
        sa.Column('installment_number', sa.Integer(), nullable=True, server_default='1'),
        sa.Column('actual_amount', sa.Numeric(14, 2), nullable=False),
        sa.Column('actual_date', sa.Date(), nullable=True),
        sa.Column('paid_by_traveler_id', sa.Uuid(), nullable=True),
        sa.Column('payment_method_key', sa.String(length=100), nullable=True),
        sa.Column('receipt_url', sa.Text(), nullable=True),
        sa.Column('actual_notes', sa.Text(), nullable=True),
        *_timestamps(updated=False),
        sa.ForeignKeyConstraint(['expense_id'], ['expenses.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['traveler_id'], ['trip_travelers.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['paid_by_traveler_id'], ['trip_travelers.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_expense_actuals_expense_id', 'expense_actuals', ['expense_id'])


def downgrade() -> None:
    op.drop_table('expense_actuals')
    op.drop_table('expense_splits')
    op.drop_table('expenses')
    op.drop_table('cost_forecasts')
    op.drop_table('adhoc_expenses')
    op.drop_table('itinerary_activities')
    op.drop_table('itinerary_categories')
    op.drop_table('itinerary_days')
    op.drop_table('accommodation_option_travelers')
    op.drop_table('accommodation_options')
    op.drop_table('flight_option_travelers')
    op.drop_table('flight_legs')
    op.drop_table('flight_options')
    op.drop_table('trip_travelers')
    op.drop_table('trips')
