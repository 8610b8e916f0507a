"""Create pets and events tables

Revision ID: 0001_initial
Revises:
Create Date: 2024-06-01 00:00:00.000000
"""
from alembic import op
import sqlalchemy as sa

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'pets',
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('owner_id', sa.String(64), nullable=False),
        sa.Column('name', sa.String(128), nullable=True),
        sa.Column('breed', sa.String(128), nullable=True),
        sa.Column('date_of_birth', sa.Date(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_pets_id', 'pets', ['id'])
    op.create_index('ix_pets_owner_id', 'pets', ['owner_id'])

    op.create_table(
        'events',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('owner_id', sa.String(64), nullable=False),
        sa.Column('pet_id', sa.String(64), sa.ForeignKey('pets.id', ondelete='CASCADE'), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('due_date', sa.Date(), nullable=False),
        sa.Column('event_type', sa.String(32), nullable=True),
        sa.Column('source', sa.String(64), nullable=True),
        sa.Column('priority', sa.String(16), nullable=True),
        sa.Column('status', sa.String(16), nullable=False, server_default='pending'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint('pet_id', 'source', 'due_date', name='uq_events_pet_source_due_date'),
    )
    op.create_index('ix_events_id', 'events', ['id'])
    op.create_index('ix_events_owner_id', 'events', ['owner_id'])
    op.create_index('ix_events_pet_id', 'events', ['pet_id'])
    op.create_index('ix_events_status', 'events', ['status'])
    op.create_index('ix_events_pet_id_source', 'events', ['pet_id', 'source'])


def downgrade():
    op.drop_table('events')
    op.drop_table('pets')
