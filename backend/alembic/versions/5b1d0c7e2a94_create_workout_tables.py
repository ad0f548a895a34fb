"""create exercises, workouts, workout logs and their children

Revision ID: 5b1d0c7e2a94
Revises:
Create Date: 2026-10-19 10:12:31.402117

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# define the enum types once so we can create/drop them explicitly
workout_log_status = postgresql.ENUM('in_progress', 'paused', 'completed', name='workout_log_status', create_type=False)
set_status = postgresql.ENUM('pending', 'completed', 'skipped', name='set_status', create_type=False)


# revision identifiers, used by Alembic.
revision: str = '5b1d0c7e2a94'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _stamps():
    return [
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True, index=True),
    ]


def upgrade() -> None:
    bind = op.get_bind()
    workout_log_status.create(bind, checkfirst=True)
    set_status.create(bind, checkfirst=True)

    op.create_table(
        'exercises',
        *_stamps(),
        sa.Column('name', sa.String(length=255), nullable=False, index=True),
    )

    op.create_table(
        'workouts',
        *_stamps(),
        sa.Column('user_id', sa.Uuid(), nullable=False, index=True),
        sa.Column('name', sa.String(length=255), nullable=False),
    )

    op.create_table(
        'workout_logs',
        *_stamps(),
        sa.Column('user_id', sa.Uuid(), nullable=False, index=True),
        sa.Column('workout_id', sa.Uuid(), sa.ForeignKey('workouts.id', ondelete='SET NULL'), nullable=True, index=True),
        sa.Column('started_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('finished_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('status', workout_log_status, nullable=False, server_default='in_progress', index=True),
        sa.Column('total_active_duration_seconds', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('total_pause_duration_seconds', sa.Integer(), nullable=False, server_default='0'),
    )

    op.create_table(
        'exercise_instances',
        *_stamps(),
        sa.Column('exercise_id', sa.Uuid(), sa.ForeignKey('exercises.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('workout_log_id', sa.Uuid(), sa.ForeignKey('workout_logs.id', ondelete='SET NULL'), nullable=True, index=True),
    )

    op.create_table(
        'workout_exercises',
        *_stamps(),
        sa.Column('workout_id', sa.Uuid(), sa.ForeignKey('workouts.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('exercise_id', sa.Uuid(), sa.ForeignKey('exercises.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('exercise_instance_id', sa.Uuid(), sa.ForeignKey('exercise_instances.id', ondelete='SET NULL'), nullable=True, index=True),
        sa.Column('workout_order', sa.Integer(), nullable=True),
        sa.Column('sets', sa.Integer(), nullable=True),
        sa.Column('weight', sa.Numeric(8, 2), nullable=True),
        sa.Column('reps', sa.Integer(), nullable=True),
    )

    op.create_table(
        'exercise_sets',
        *_stamps(),
        sa.Column('workout_log_id', sa.Uuid(), sa.ForeignKey('workout_logs.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('exercise_id', sa.Uuid(), sa.ForeignKey('exercises.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('exercise_instance_id', sa.Uuid(), sa.ForeignKey('exercise_instances.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('set_number', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('weight', sa.Numeric(8, 2), nullable=True),
        sa.Column('reps', sa.Integer(), nullable=True),
        sa.Column('finished_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('status', set_status, nullable=False, server_default='pending', index=True),
    )


def downgrade() -> None:
    # children first
    op.drop_table('exercise_sets')
    op.drop_table('workout_exercises')
    op.drop_table('exercise_instances')
    op.drop_table('workout_logs')
    op.drop_table('workouts')
    op.drop_table('exercises')

    bind = op.get_bind()
    set_status.drop(bind, checkfirst=True)
    workout_log_status.drop(bind, checkfirst=True)
