"""create businesses, staff, services, shift templates, roster and slots

Revision ID: create_slot_tables
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'create_slot_tables'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


shift_type = sa.Enum('regular', 'overtime', 'holiday', 'leave', name='shift_type')
roster_status = sa.Enum('scheduled', 'working', 'completed', 'leave', 'sick', 'absent', name='roster_status')
slot_status = sa.Enum('available', 'booked', 'blocked', name='slot_status')
proficiency_level = sa.Enum('trainee', 'junior', 'senior', 'expert', name='proficiency_level')


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'businesses',
        sa.Column('business_id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('industry', sa.String(), nullable=True),
        sa.Column('timezone', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    op.create_table(
        'staff',
        sa.Column('staff_id', sa.Uuid(), primary_key=True),
        sa.Column('business_id', sa.Uuid(), sa.ForeignKey('businesses.business_id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=True),
        sa.Column('specialization', sa.String(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_staff_business_id', 'staff', ['business_id'])

    op.create_table(
        'services',
        sa.Column('service_id', sa.Uuid(), primary_key=True),
        sa.Column('business_id', sa.Uuid(), sa.ForeignKey('businesses.business_id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('duration', sa.Integer(), nullable=False),
        sa.Column('price', sa.Numeric(10, 2), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint('duration > 0', name='ck_services_duration_positive'),
    )
    op.create_index('ix_services_business_id', 'services', ['business_id'])

    op.create_table(
        'staff_services',
        sa.Column('staff_id', sa.Uuid(), sa.ForeignKey('staff.staff_id', ondelete='CASCADE'), primary_key=True),
        sa.Column('service_id', sa.Uuid(), sa.ForeignKey('services.service_id', ondelete='CASCADE'), primary_key=True),
        sa.Column('proficiency_level', proficiency_level, nullable=False),
    )

    op.create_table(
        'shift_templates',
        sa.Column('shift_template_id', sa.Uuid(), primary_key=True),
        sa.Column('business_id', sa.Uuid(), sa.ForeignKey('businesses.business_id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('start_time', sa.Time(), nullable=False),
        sa.Column('end_time', sa.Time(), nullable=False),
        sa.Column('breaks', sa.JSON(), nullable=False),
        sa.Column('days_of_week', sa.JSON(), nullable=False),
        sa.Column('color', sa.Text(), nullable=False),
        sa.Column('type', shift_type, nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_shift_templates_business_id', 'shift_templates', ['business_id'])

    op.create_table(
        'roster_shifts',
        sa.Column('roster_shift_id', sa.Uuid(), primary_key=True),
        sa.Column('business_id', sa.Uuid(), sa.ForeignKey('businesses.business_id', ondelete='CASCADE'), nullable=False),
        sa.Column('staff_id', sa.Uuid(), sa.ForeignKey('staff.staff_id', ondelete='CASCADE'), nullable=False),
        sa.Column(
            'shift_template_id',
            sa.Uuid(),
            sa.ForeignKey('shift_templates.shift_template_id', ondelete='RESTRICT'),
            nullable=False,
        ),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('status', roster_status, nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint('staff_id', 'date', name='uq_roster_shifts_staff_date'),
    )
    op.create_index('ix_roster_shifts_business_id', 'roster_shifts', ['business_id'])

    op.create_table(
        'slots',
        sa.Column('slot_id', sa.Uuid(), primary_key=True),
        sa.Column('business_id', sa.Uuid(), sa.ForeignKey('businesses.business_id', ondelete='CASCADE'), nullable=False),
        sa.Column('staff_id', sa.Uuid(), sa.ForeignKey('staff.staff_id', ondelete='CASCADE'), nullable=False),
        sa.Column('service_id', sa.Uuid(), sa.ForeignKey('services.service_id', ondelete='CASCADE'), nullable=False),
        sa.Column(
            'roster_shift_id',
            sa.Uuid(),
            sa.ForeignKey('roster_shifts.roster_shift_id', ondelete='SET NULL'),
            nullable=True,
        ),
        sa.Column('start_time', sa.DateTime(), nullable=False),
        sa.Column('end_time', sa.DateTime(), nullable=False),
        sa.Column('generated_for', sa.Date(), nullable=False),
        sa.Column('status', slot_status, nullable=False),
        sa.Column('is_manual', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint('staff_id', 'service_id', 'start_time', name='uq_slots_staff_service_start'),
    )
    op.create_index('ix_slots_business_start', 'slots', ['business_id', 'start_time'])
    op.create_index('ix_slots_staff_start', 'slots', ['staff_id', 'start_time'])

    op.create_table(
        'slot_conflicts',
        sa.Column('slot_id', sa.Uuid(), sa.ForeignKey('slots.slot_id', ondelete='CASCADE'), primary_key=True),
        sa.Column(
            'conflicting_slot_id',
            sa.Uuid(),
            sa.ForeignKey('slots.slot_id', ondelete='CASCADE'),
            primary_key=True,
        ),
    )

    # Two booked slots of one staff member may never overlap. PostgreSQL only:
    # needs btree_gist for the uuid equality part of the exclusion constraint.
    if op.get_bind().dialect.name == 'postgresql':
        op.execute('CREATE EXTENSION IF NOT EXISTS btree_gist')
        op.execute(
            """
            ALTER TABLE slots
            ADD CONSTRAINT ex_slots_staff_booked_overlap
            EXCLUDE USING gist (
              staff_id WITH =,
              tsrange(start_time, end_time) WITH &&
            )
            WHERE (status = 'booked')
            """
        )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('slot_conflicts')
    op.drop_index('ix_slots_staff_start', table_name='slots')
    op.drop_index('ix_slots_business_start', table_name='slots')
    op.drop_table('slots')
    op.drop_index('ix_roster_shifts_business_id', table_name='roster_shifts')
    op.drop_table('roster_shifts')
    op.drop_index('ix_shift_templates_business_id', table_name='shift_templates')
    op.drop_table('shift_templates')
    op.drop_table('staff_services')
    op.drop_index('ix_services_business_id', table_name='services')
    op.drop_table('services')
    op.drop_index('ix_staff_business_id', table_name='staff')
    op.drop_table('staff')
    op.drop_table('businesses')

    bind = op.get_bind()
    for enum_type in (slot_status, roster_status, shift_type, proficiency_level):
        enum_type.drop(bind, checkfirst=True)
