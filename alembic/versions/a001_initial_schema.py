"""Initial schema creation

Revision ID: a001
Revises:
Create Date: 2025-01-15

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = 'a001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Create initial database schema."""

    # Create projects table
    op.create_table(
        'projects',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('edit_cutoff_day', sa.Integer(), nullable=False, server_default='5'),
        sa.Column('edit_cutoff_next_month', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )

    # Create shift_types table
    op.create_table(
        'shift_types',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('code', sa.String(50), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('start_time', sa.String(5), nullable=True),
        sa.Column('end_time', sa.String(5), nullable=True),
        sa.Column('color', sa.String(20), nullable=True),
        sa.Column('is_work_shift', sa.Boolean(), nullable=False),
        sa.Column('is_system_default', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('code')
    )
    op.create_index('ix_shift_types_code', 'shift_types', ['code'])

    # Create staff table
    op.create_table(
        'staff',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('project_id', sa.String(36), nullable=False),
        sa.Column('code', sa.String(50), nullable=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('position', sa.String(255), nullable=False),
        sa.Column('wage_per_day', sa.Numeric(10, 2), nullable=False),
        sa.Column('staff_type', sa.Enum('REGULAR', 'SPARE', name='stafftype'), nullable=False),
        sa.Column('default_shift', sa.String(50), nullable=False),
        sa.Column('weekly_off_day', sa.Integer(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('display_order', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['project_id'], ['projects.id'])
    )
    op.create_index('ix_staff_project_id', 'staff', ['project_id'])
    op.create_index('ix_staff_is_active', 'staff', ['is_active'])

    # Create rosters table
    op.create_table(
        'rosters',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('project_id', sa.String(36), nullable=False),
        sa.Column('year', sa.Integer(), nullable=False),
        sa.Column('month', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['project_id'], ['projects.id']),
        sa.UniqueConstraint('project_id', 'year', 'month', name='uq_roster_project_period')
    )
    op.create_index('ix_rosters_project_id', 'rosters', ['project_id'])

    # Create roster_entries table
    op.create_table(
        'roster_entries',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('roster_id', sa.String(36), nullable=False),
        sa.Column('staff_id', sa.String(36), nullable=False),
        sa.Column('day', sa.Integer(), nullable=False),
        sa.Column('shift_code', sa.String(50), nullable=False),
        sa.Column('notes', sa.String(1000), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['roster_id'], ['rosters.id']),
        sa.ForeignKeyConstraint(['staff_id'], ['staff.id']),
        sa.UniqueConstraint('roster_id', 'staff_id', 'day', name='uq_roster_staff_day')
    )
    op.create_index('ix_roster_entries_roster_id', 'roster_entries', ['roster_id'])
    op.create_index('ix_roster_entries_staff_id', 'roster_entries', ['staff_id'])


def downgrade() -> None:
    """Drop all tables."""
    op.drop_table('roster_entries')
    op.drop_table('rosters')
    op.drop_table('staff')
    op.drop_table('shift_types')
    op.drop_table('projects')
