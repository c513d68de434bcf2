"""initial schema: colleges, registrants, events, registrations

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '0001_initial'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'colleges',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('college_id', sa.String(length=50), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_colleges_college_id', 'colleges', ['college_id'], unique=True)

    op.create_table(
        'registrants',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('registrant_id', sa.String(length=100), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('phone_encrypted', sa.String(length=500), nullable=True),
        sa.Column('role', sa.String(length=20), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('college_id', sa.Integer(), sa.ForeignKey('colleges.id'), nullable=True),
        sa.Column('contingent_code', sa.String(length=50), nullable=True),
        sa.Column('password_hash', sa.String(length=256), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.UniqueConstraint('contingent_code'),
    )
    op.create_index('ix_registrants_registrant_id', 'registrants', ['registrant_id'], unique=True)
    op.create_index('ix_registrants_email', 'registrants', ['email'], unique=True)
    op.create_index('ix_registrants_status', 'registrants', ['status'], unique=False)

    op.create_table(
        'events',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('event_id', sa.String(length=50), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('min_team_size', sa.Integer(), nullable=False),
        sa.Column('max_team_size', sa.Integer(), nullable=False),
        sa.Column('college_limit', sa.Integer(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint('min_team_size >= 1', name='ck_event_min_team_size'),
        sa.CheckConstraint('max_team_size >= min_team_size', name='ck_event_team_size_bounds'),
    )
    op.create_index('ix_events_event_id', 'events', ['event_id'], unique=True)

    op.create_table(
        'registrations',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('registration_id', sa.String(length=50), nullable=False),
        sa.Column('event_id', sa.Integer(), sa.ForeignKey('events.id'), nullable=False),
        sa.Column('registrant_id', sa.Integer(), sa.ForeignKey('registrants.id'), nullable=False),
        sa.Column('college_id', sa.Integer(), sa.ForeignKey('colleges.id'), nullable=False),
        sa.Column('team_size', sa.Integer(), nullable=False),
        sa.Column('team_members', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.UniqueConstraint('event_id', 'registrant_id', name='unique_registration_per_event'),
    )
    op.create_index('ix_registrations_registration_id', 'registrations', ['registration_id'], unique=True)
    # Capacity counts filter on (event_id, college_id)
    op.create_index('ix_registrations_event_college', 'registrations', ['event_id', 'college_id'], unique=False)


def downgrade():
    op.drop_index('ix_registrations_event_college', table_name='registrations')
    op.drop_index('ix_registrations_registration_id', table_name='registrations')
    op.drop_table('registrations')
    op.drop_index('ix_events_event_id', table_name='events')
    op.drop_table('events')
    op.drop_index('ix_registrants_status', table_name='registrants')
    op.drop_index('ix_registrants_email', table_name='registrants')
    op.drop_index('ix_registrants_registrant_id', table_name='registrants')
    op.drop_table('registrants')
    op.drop_index('ix_colleges_college_id', table_name='colleges')
    op.drop_table('colleges')
