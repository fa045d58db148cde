"""workout sessions, routines, exercises and sets

Revision ID: 4b1f0c9e2a7d
Revises:
Create Date: 2025-07-02 17:40:12.118204

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# define the enum type once so we can create/drop it explicitly
workout_status = postgresql.ENUM('active', 'completed', 'cancelled', name='workout_status', create_type=False)


# revision identifiers, used by Alembic.
revision: str = '4b1f0c9e2a7d'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # 1) enum type
    workout_status.create(op.get_bind(), checkfirst=True)

    # 2) exercise library (global rows have no user_id)
    op.create_table(
        'exercises',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('muscle_group', sa.String(length=60), nullable=False),
        sa.Column('equipment', sa.String(length=60), nullable=True),
        sa.Column('instructions', sa.Text(), nullable=True),
        sa.Column('user_id', sa.String(length=64), nullable=True, index=True),
        sa.Column('is_custom', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
    )

    # 3) routines and their ordered exercises
    op.create_table(
        'workout_routines',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.String(length=64), nullable=False, index=True),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
    )
    op.create_table(
        'routine_exercises',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('routine_id', sa.Integer(), sa.ForeignKey('workout_routines.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('exercise_id', sa.Integer(), sa.ForeignKey('exercises.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('order_index', sa.Integer(), nullable=False),
        sa.Column('target_sets', sa.Integer(), nullable=False, server_default='3'),
        sa.Column('target_reps', sa.Integer(), nullable=True),
        sa.Column('target_weight', sa.Numeric(6, 1), nullable=True),
        sa.Column('rest_seconds', sa.Integer(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.UniqueConstraint('routine_id', 'order_index', name='uq_routine_exercise_order'),
        sa.CheckConstraint('target_sets >= 1', name='ck_routine_exercise_target_sets'),
        sa.CheckConstraint('rest_seconds IS NULL OR rest_seconds >= 0', name='ck_routine_exercise_rest'),
    )

    # 4) workout sessions
    op.create_table(
        'workout_sessions',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.String(length=64), nullable=False, index=True),
        sa.Column('routine_id', sa.Integer(), sa.ForeignKey('workout_routines.id', ondelete='SET NULL'), nullable=True, index=True),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('date', sa.Date(), nullable=False, index=True),
        sa.Column('status', workout_status, nullable=False, server_default='active'),
        sa.Column('duration_minutes', sa.Integer(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
    )

    # 5) logged sets
    op.create_table(
        'exercise_sets',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('workout_session_id', sa.Integer(), sa.ForeignKey('workout_sessions.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('exercise_id', sa.Integer(), sa.ForeignKey('exercises.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('set_number', sa.Integer(), nullable=False),
        sa.Column('weight', sa.Numeric(6, 1), nullable=True),
        sa.Column('reps', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.UniqueConstraint('workout_session_id', 'exercise_id', 'set_number', name='uq_exercise_set_number'),
    )


def downgrade() -> None:
    op.drop_table('exercise_sets')
    op.drop_table('workout_sessions')
    op.drop_table('routine_exercises')
    op.drop_table('workout_routines')
    op.drop_table('exercises')
    workout_status.drop(op.get_bind(), checkfirst=True)
