"""Initial schema: tools, reservations, reservation_events

Revision ID: 001_initial
Revises:
Create Date: 2026-10-17 09:30:00

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001_initial'
down_revision = None
branch_labels = None
depends_on = None

RESERVATION_STATUSES = ('PENDING', 'CONFIRMED', 'ACTIVE', 'COMPLETED', 'CANCELLED', 'DECLINED')
RESERVATION_ACTIONS = ('CREATE', 'APPROVE', 'DECLINE', 'CANCEL', 'PICKUP', 'RETURN')


def upgrade():
    # Create tools table (mirror of the tool directory)
    op.create_table(
        'tools',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('owner_id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=True),
        sa.Column('status', sa.Enum('AVAILABLE', 'UNAVAILABLE', 'ARCHIVED', name='toolstatus'), nullable=False),
        sa.Column('advance_notice_days', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('max_loan_days', sa.Integer(), nullable=False, server_default='7'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_tools_owner_id', 'tools', ['owner_id'])

    # Create reservations table
    op.create_table(
        'reservations',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('tool_id', sa.String(length=36), nullable=False),
        sa.Column('borrower_id', sa.String(length=36), nullable=False),
        sa.Column('status', sa.Enum(*RESERVATION_STATUSES, name='reservationstatus'), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('note', sa.Text(), nullable=True),
        sa.Column('owner_note', sa.Text(), nullable=True),
        sa.Column('pickup_confirmed_at', sa.DateTime(), nullable=True),
        sa.Column('return_confirmed_at', sa.DateTime(), nullable=True),
        sa.Column('early_pickup', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.ForeignKeyConstraint(['tool_id'], ['tools.id']),
        sa.PrimaryKeyConstraint('id')
    )

    # Create indexes for reservations
    op.create_index('ix_reservations_tool_id', 'reservations', ['tool_id'])
    op.create_index('ix_reservations_borrower_id', 'reservations', ['borrower_id'])
    op.create_index('ix_reservations_status', 'reservations', ['status'])
    op.create_index('ix_reservations_tool_dates', 'reservations', ['tool_id', 'start_date', 'end_date'])

    # Create reservation_events table
    op.create_table(
        'reservation_events',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('reservation_id', sa.String(length=36), nullable=False),
        sa.Column('action', sa.Enum(*RESERVATION_ACTIONS, name='reservationaction'), nullable=False),
        sa.Column('actor_id', sa.String(length=36), nullable=False),
        sa.Column('from_status', sa.Enum(*RESERVATION_STATUSES, name='reservationstatus'), nullable=True),
        sa.Column('to_status', sa.Enum(*RESERVATION_STATUSES, name='reservationstatus'), nullable=False),
        sa.Column('note', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.ForeignKeyConstraint(['reservation_id'], ['reservations.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_reservation_events_reservation_id', 'reservation_events', ['reservation_id'])


def downgrade():
    # Drop tables in reverse order (respecting foreign keys)
    op.drop_index('ix_reservation_events_reservation_id', table_name='reservation_events')
    op.drop_table('reservation_events')

    op.drop_index('ix_reservations_tool_dates', table_name='reservations')
    op.drop_index('ix_reservations_status', table_name='reservations')
    op.drop_index('ix_reservations_borrower_id', table_name='reservations')
    op.drop_index('ix_reservations_tool_id', table_name='reservations')
    op.drop_table('reservations')

    op.drop_index('ix_tools_owner_id', table_name='tools')
    op.drop_table('tools')

    # Drop enums
    sa.Enum(name='reservationaction').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='reservationstatus').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='toolstatus').drop(op.get_bind(), checkfirst=True)
