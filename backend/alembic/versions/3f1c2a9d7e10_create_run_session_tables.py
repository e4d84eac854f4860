"""create run_sessions, location_points, data_points

Revision ID: 3f1c2a9d7e10
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c2a9d7e10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'run_sessions',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('start_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('end_time', sa.DateTime(timezone=True), nullable=True),
        sa.Column('total_steps', sa.Integer(), nullable=False),
        sa.Column('total_distance_km', sa.Float(), nullable=False),
        sa.Column('average_speed_kmh', sa.Float(), nullable=False),
        sa.Column('duration_seconds', sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_run_sessions_id', 'run_sessions', ['id'])
    op.create_index('ix_run_sessions_start_time', 'run_sessions', ['start_time'])

    op.create_table(
        'location_points',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('session_id', sa.String(36), nullable=False),
        sa.Column('latitude', sa.Float(), nullable=False),
        sa.Column('longitude', sa.Float(), nullable=False),
        sa.Column('timestamp', sa.DateTime(timezone=True), nullable=False),
        sa.Column('speed_mps', sa.Float(), nullable=True),
        sa.ForeignKeyConstraint(['session_id'], ['run_sessions.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_location_points_id', 'location_points', ['id'])
    op.create_index('ix_location_points_session_id', 'location_points', ['session_id'])

    op.create_table(
        'data_points',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('session_id', sa.String(36), nullable=False),
        sa.Column('timestamp', sa.DateTime(timezone=True), nullable=False),
        sa.Column('steps', sa.Integer(), nullable=False),
        sa.Column('speed_kmh', sa.Float(), nullable=False),
        sa.Column('distance_km', sa.Float(), nullable=False),
        sa.ForeignKeyConstraint(['session_id'], ['run_sessions.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_data_points_id', 'data_points', ['id'])
    op.create_index('ix_data_points_session_id', 'data_points', ['session_id'])


def downgrade() -> None:
    op.drop_index('ix_data_points_session_id', table_name='data_points')
    op.drop_index('ix_data_points_id', table_name='data_points')
    op.drop_table('data_points')
    op.drop_index('ix_location_points_session_id', table_name='location_points')
    op.drop_index('ix_location_points_id', table_name='location_points')
    op.drop_table('location_points')
    op.drop_index('ix_run_sessions_start_time', table_name='run_sessions')
    op.drop_index('ix_run_sessions_id', table_name='run_sessions')
    op.drop_table('run_sessions')
