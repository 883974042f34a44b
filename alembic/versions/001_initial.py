"""initial schema: businesses, users, appointment types, appointments

Revision ID: 001
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'businesses',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('slug', sa.String(), nullable=False),
        sa.Column('owner_phone', sa.String(), nullable=True),
        sa.Column('timezone', sa.String(), nullable=False, server_default='UTC'),
        sa.Column('is_active', sa.Boolean(), nullable=True, server_default='true'),
        # Working hours
        sa.Column('start_hour', sa.Integer(), nullable=False, server_default='9'),
        sa.Column('end_hour', sa.Integer(), nullable=False, server_default='17'),
        sa.Column('working_days', sa.JSON(), nullable=False),
        sa.Column('slot_interval', sa.Integer(), nullable=False, server_default='30'),
        sa.Column('break_enabled', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('break_start_hour', sa.Integer(), nullable=False, server_default='12'),
        sa.Column('break_start_minute', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('break_end_hour', sa.Integer(), nullable=False, server_default='13'),
        sa.Column('break_end_minute', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('min_gap_minutes', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('day_schedules', sa.JSON(), nullable=True),
        # Cancellation policy
        sa.Column('cancellation_enabled', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('cancellation_hours_before', sa.Integer(), nullable=False, server_default='24'),
        sa.Column('sms_notifications_enabled', sa.Boolean(), nullable=True, server_default='true'),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_businesses_slug', 'businesses', ['slug'], unique=True)

    op.create_table(
        'users',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('business_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('businesses.id'), nullable=False),
        sa.Column('full_name', sa.String(), nullable=True),
        sa.Column('role', sa.String(), nullable=False, server_default='business_owner'),
        sa.Column('is_active', sa.Boolean(), nullable=True, server_default='true'),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_business_id', 'users', ['business_id'])

    op.create_table(
        'appointment_types',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('business_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('businesses.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('duration_minutes', sa.Integer(), nullable=False, server_default='60'),
        sa.Column('price', sa.Numeric(10, 2), nullable=False, server_default='0'),
        sa.Column('color', sa.String(), nullable=False, server_default='#667eea'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_appointment_types_business_id', 'appointment_types', ['business_id'])
    op.create_index('ix_appointment_types_is_active', 'appointment_types', ['is_active'])

    op.create_table(
        'appointments',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('business_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('businesses.id', ondelete='CASCADE'), nullable=False),
        sa.Column('staff_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('appointment_type_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('appointment_types.id', ondelete='SET NULL'), nullable=True),
        sa.Column('customer_name', sa.String(), nullable=False),
        sa.Column('customer_phone', sa.String(), nullable=True),
        sa.Column('customer_email', sa.String(), nullable=True),
        sa.Column('service', sa.String(), nullable=False),
        sa.Column('price', sa.Numeric(10, 2), nullable=False, server_default='0'),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('appointment_date', sa.Date(), nullable=False),
        sa.Column('start_time', sa.String(5), nullable=False),
        sa.Column('end_time', sa.String(5), nullable=False),
        sa.Column('duration_minutes', sa.Integer(), nullable=False),
        sa.Column(
            'status',
            sa.Enum('pending', 'confirmed', 'completed', 'cancelled', 'no_show', 'blocked', name='appointmentstatus'),
            nullable=False,
        ),
        sa.Column('is_recurring', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('recurrence_group_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_appointments_business_id', 'appointments', ['business_id'])
    op.create_index('ix_appointments_staff_id', 'appointments', ['staff_id'])
    op.create_index('ix_appointments_appointment_date', 'appointments', ['appointment_date'])
    op.create_index('ix_appointments_status', 'appointments', ['status'])
    op.create_index('ix_appointments_recurrence_group_id', 'appointments', ['recurrence_group_id'])
    op.create_index(
        'uq_appointments_active_slot',
        'appointments',
        ['business_id', 'staff_id', 'appointment_date', 'start_time'],
        unique=True,
        postgresql_where=sa.text("status <> 'cancelled'"),
    )


def downgrade() -> None:
    op.drop_index('uq_appointments_active_slot', table_name='appointments')
    op.drop_table('appointments')
    op.execute('DROP TYPE appointmentstatus')
    op.drop_table('appointment_types')
    op.drop_table('users')
    op.drop_table('businesses')
