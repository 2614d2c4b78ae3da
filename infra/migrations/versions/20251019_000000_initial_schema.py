"""Initial schema: users, doctors, schedules, slots, appointments, audit log

Revision ID: initial_schema
Revises:
Create Date: 2025-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'initial_schema'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table('users',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('email', sa.String(320), nullable=False),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('requested_username', sa.String(30), nullable=True),
        sa.Column('is_active', sa.Boolean(), server_default=sa.text('true'), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint('email', name='uq_users_email'),
        sa.CheckConstraint('email = lower(email)', name='ck_users_email_lowercase'),
    )
    op.create_index('ix_users_email', 'users', ['email'])

    op.create_table('doctors',
        sa.Column('id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('email', sa.String(320), nullable=False),
        sa.Column('username', sa.String(30), nullable=False),
        sa.Column('full_name', sa.String(120), nullable=True),
        sa.Column('specialty', sa.String(120), nullable=True),
        sa.Column('phone', sa.String(32), nullable=True),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('tier', sa.String(10), server_default='free', nullable=False),
        sa.Column('subscription_start', sa.Date(), nullable=True),
        sa.Column('subscription_end', sa.Date(), nullable=True),
        sa.Column('profile_completed', sa.Boolean(), server_default=sa.text('false'), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint('username', name='uq_doctors_username'),
        sa.CheckConstraint("tier IN ('free', 'basic', 'pro')", name='ck_doctors_tier_valid'),
    )

    op.create_table('audit_logs',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('action', sa.String(120), nullable=False),
        sa.Column('details', sa.Text(), nullable=True),
        sa.Column('timestamp', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_audit_logs_timestamp', 'audit_logs', ['timestamp'])

    op.create_table('recurring_schedules',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('doctor_id', sa.Uuid(), sa.ForeignKey('doctors.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('weekdays', sa.JSON(), nullable=False),  # Sunday=0 .. Saturday=6
        sa.Column('start_time', sa.String(5), nullable=False),
        sa.Column('end_time', sa.String(5), nullable=False),
        sa.Column('interval_minutes', sa.Integer(), nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default=sa.text('true'), nullable=False),
        *_timestamps(),
        sa.CheckConstraint('start_time < end_time', name='ck_schedule_time_order'),
        sa.CheckConstraint('interval_minutes IN (5, 10, 15, 20, 25, 30)', name='ck_schedule_interval_valid'),
    )
    op.create_index('ix_schedule_doctor_active', 'recurring_schedules', ['doctor_id', 'is_active'])

    op.create_table('time_slots',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('doctor_id', sa.Uuid(), sa.ForeignKey('doctors.id', ondelete='CASCADE'), nullable=False),
        sa.Column('slot_date', sa.Date(), nullable=False),
        sa.Column('start_time', sa.String(5), nullable=False),
        sa.Column('end_time', sa.String(5), nullable=False),
        sa.Column('duration_minutes', sa.Integer(), nullable=False),
        sa.Column('is_available', sa.Boolean(), server_default=sa.text('true'), nullable=False),
        sa.Column('is_booked', sa.Boolean(), server_default=sa.text('false'), nullable=False),
        *_timestamps(),
        sa.CheckConstraint('start_time < end_time', name='ck_slot_time_order'),
        sa.CheckConstraint('duration_minutes > 0', name='ck_slot_duration_positive'),
        sa.UniqueConstraint('doctor_id', 'slot_date', 'start_time', name='uq_slot_doctor_day_start'),
    )
    op.create_index('ix_slot_doctor_date_booked', 'time_slots', ['doctor_id', 'slot_date', 'is_booked'])

    op.create_table('appointments',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('slot_id', sa.Uuid(), sa.ForeignKey('time_slots.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('doctor_id', sa.Uuid(), sa.ForeignKey('doctors.id', ondelete='CASCADE'), nullable=False),
        sa.Column('patient_name', sa.String(120), nullable=False),
        sa.Column('patient_phone', sa.String(32), nullable=False),
        sa.Column('patient_email', sa.String(320), nullable=True),
        sa.Column('patient_notes', sa.Text(), nullable=True),
        sa.Column('appointment_date', sa.Date(), nullable=False),
        sa.Column('appointment_time', sa.String(5), nullable=False),
        sa.Column('status', sa.String(20), server_default='confirmed', nullable=False),
        sa.Column('doctor_notes', sa.Text(), nullable=True),
        *_timestamps(),
        # one appointment per slot
        sa.UniqueConstraint('slot_id', name='uq_appt_slot'),
        sa.CheckConstraint(
            "status IN ('confirmed', 'cancelled', 'completed', 'no_show')",
            name='ck_appt_status_valid',
        ),
    )
    op.create_index('ix_appt_doctor_date', 'appointments', ['doctor_id', 'appointment_date'])
    op.create_index('ix_appt_doctor_created', 'appointments', ['doctor_id', 'created_at'])


def downgrade() -> None:
    op.drop_index('ix_appt_doctor_created', table_name='appointments')
    op.drop_index('ix_appt_doctor_date', table_name='appointments')
    op.drop_table('appointments')

    op.drop_index('ix_slot_doctor_date_booked', table_name='time_slots')
    op.drop_table('time_slots')

    op.drop_index('ix_schedule_doctor_active', table_name='recurring_schedules')
    op.drop_table('recurring_schedules')

    op.drop_index('ix_audit_logs_timestamp', table_name='audit_logs')
    op.drop_table('audit_logs')

    op.drop_table('doctors')

    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
