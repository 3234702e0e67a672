"""initial schema: schools, campaigns, students, tours, outreach

Revision ID: 3c9f1e2a7b10
Revises:
Create Date: 2026-01-12 10:02:41.118204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3c9f1e2a7b10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps(updated: bool = True) -> list[sa.Column]:
    cols = [sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False)]
    if updated:
        cols.append(sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False))
    return cols


def upgrade() -> None:
    op.create_table(
        'schools',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('city', sa.String(length=120), nullable=True),
        sa.Column('state', sa.String(length=60), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_schools_name', 'schools', ['name'])

    op.create_table(
        'campaigns',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        'uq_campaigns_single_active', 'campaigns', ['is_active'], unique=True,
        sqlite_where=sa.text('is_active = 1'),
        postgresql_where=sa.text('is_active'),
    )

    op.create_table(
        'students',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('first_name', sa.String(length=120), nullable=False),
        sa.Column('last_name', sa.String(length=120), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('phone', sa.String(length=32), nullable=True),
        sa.Column(
            'area_of_interest',
            sa.Enum('COSMETOLOGY', 'BARBER', 'NAIL_TECHNICIAN', name='area_of_interest', native_enum=False, length=32),
            nullable=False,
        ),
        sa.Column('consent', sa.Boolean(), nullable=True),
        sa.Column('contacted', sa.Boolean(), nullable=False),
        sa.Column('contacted_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('visit_completed', sa.Boolean(), nullable=False),
        sa.Column('visit_completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('school_id', sa.Integer(), nullable=False),
        sa.Column('campaign_id', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['school_id'], ['schools.id']),
        sa.ForeignKeyConstraint(['campaign_id'], ['campaigns.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_students_email', 'students', ['email'])
    op.create_index('ix_students_phone', 'students', ['phone'])
    op.create_index('ix_students_school_id', 'students', ['school_id'])
    op.create_index('ix_students_campaign_id', 'students', ['campaign_id'])

    op.create_table(
        'tour_visits',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('student_id', sa.Integer(), nullable=False),
        sa.Column('starts_at', sa.DateTime(), nullable=False),
        sa.Column(
            'status',
            sa.Enum('SCHEDULED', 'COMPLETED', 'CANCELED', 'NO_SHOW', name='tour_status', native_enum=False, length=20),
            nullable=False,
        ),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['student_id'], ['students.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_tour_visits_student_id', 'tour_visits', ['student_id'])
    op.create_index('ix_tour_visits_starts_at', 'tour_visits', ['starts_at'])
    op.create_index(
        'uq_tour_visits_live_slot', 'tour_visits', ['starts_at'], unique=True,
        sqlite_where=sa.text("status != 'CANCELED'"),
        postgresql_where=sa.text("status != 'CANCELED'"),
    )

    op.create_table(
        'outreach_messages',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('student_id', sa.Integer(), nullable=False),
        sa.Column('campaign_id', sa.Integer(), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        *_timestamps(updated=False),
        sa.ForeignKeyConstraint(['student_id'], ['students.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['campaign_id'], ['campaigns.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_outreach_messages_student_id', 'outreach_messages', ['student_id'])
    op.create_index('ix_outreach_messages_campaign_id', 'outreach_messages', ['campaign_id'])

    op.create_table(
        'outreach_logs',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('student_id', sa.Integer(), nullable=False),
        sa.Column('message_id', sa.Integer(), nullable=False),
        sa.Column('status', sa.Enum('SENT', 'FAILED', name='outreach_status', native_enum=False, length=10), nullable=False),
        sa.Column('error', sa.Text(), nullable=True),
        *_timestamps(updated=False),
        sa.ForeignKeyConstraint(['student_id'], ['students.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['message_id'], ['outreach_messages.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_outreach_logs_student_id', 'outreach_logs', ['student_id'])
    op.create_index('ix_outreach_logs_message_id', 'outreach_logs', ['message_id'])


def downgrade() -> None:
    op.drop_table('outreach_logs')
    op.drop_table('outreach_messages')
    op.drop_index('uq_tour_visits_live_slot', table_name='tour_visits')
    op.drop_table('tour_visits')
    op.drop_table('students')
    op.drop_index('uq_campaigns_single_active', table_name='campaigns')
    op.drop_table('campaigns')
    op.drop_table('schools')
