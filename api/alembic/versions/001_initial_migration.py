"""Initial migration: review scheduling and practice session tables

Revision ID: initial
Revises: 
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa
import sqlmodel

# revision identifiers, used by Alembic.
revision = 'initial'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Create review_item table
    op.create_table(
        'review_item',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('owner_id', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('item_type', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('content_id', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('repetition_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('easiness_factor', sa.Float(), nullable=False, server_default='2.5'),
        sa.Column('interval_days', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('next_review_date', sa.Date(), nullable=False),
        sa.Column('last_reviewed_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_review_item_owner_id'), 'review_item', ['owner_id'], unique=False)
    op.create_index(op.f('ix_review_item_content_id'), 'review_item', ['content_id'], unique=False)
    op.create_index(op.f('ix_review_item_next_review_date'), 'review_item', ['next_review_date'], unique=False)

    # Create review_log table
    op.create_table(
        'review_log',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('review_item_id', sa.Integer(), nullable=False),
        sa.Column('owner_id', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('quality', sa.Integer(), nullable=False),
        sa.Column('interval_days', sa.Integer(), nullable=False),
        sa.Column('easiness_factor', sa.Float(), nullable=False),
        sa.Column('reviewed_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['review_item_id'], ['review_item.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_review_log_review_item_id'), 'review_log', ['review_item_id'], unique=False)
    op.create_index(op.f('ix_review_log_owner_id'), 'review_log', ['owner_id'], unique=False)

    # Create practice_session table
    op.create_table(
        'practice_session',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('session_code', sqlmodel.sql.sqltypes.AutoString(length=6), nullable=False),
        sa.Column('host_user_id', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('session_name', sqlmodel.sql.sqltypes.AutoString(length=120), nullable=True),
        sa.Column('session_type', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('document_id', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('max_participants', sa.Integer(), nullable=False, server_default='10'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('ended_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_practice_session_session_code'), 'practice_session', ['session_code'], unique=False)
    op.create_index(op.f('ix_practice_session_host_user_id'), 'practice_session', ['host_user_id'], unique=False)
    # Codes are unique among active sessions only
    op.create_index(
        'uq_practice_session_active_code',
        'practice_session',
        ['session_code'],
        unique=True,
        postgresql_where=sa.text('is_active'),
        sqlite_where=sa.text('is_active'),
    )

    # Create practice_participant table
    op.create_table(
        'practice_participant',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('session_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('display_name', sqlmodel.sql.sqltypes.AutoString(length=80), nullable=False),
        sa.Column('score', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('joined_at', sa.DateTime(), nullable=False),
        sa.Column('last_active_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['session_id'], ['practice_session.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('session_id', 'user_id', name='uq_practice_participant_session_user')
    )
    op.create_index(op.f('ix_practice_participant_session_id'), 'practice_participant', ['session_id'], unique=False)
    op.create_index(op.f('ix_practice_participant_user_id'), 'practice_participant', ['user_id'], unique=False)

    # Create practice_session_response table
    op.create_table(
        'practice_session_response',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('session_id', sa.Integer(), nullable=False),
        sa.Column('participant_id', sa.Integer(), nullable=False),
        sa.Column('item_id', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('item_type', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('quality', sa.Integer(), nullable=True),
        sa.Column('score_delta', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('response_time_ms', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('answered_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['session_id'], ['practice_session.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_practice_session_response_session_id'), 'practice_session_response', ['session_id'], unique=False)
    op.create_index(op.f('ix_practice_session_response_participant_id'), 'practice_session_response', ['participant_id'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_practice_session_response_participant_id'), table_name='practice_session_response')
    op.drop_index(op.f('ix_practice_session_response_session_id'), table_name='practice_session_response')
    op.drop_table('practice_session_response')
    op.drop_index(op.f('ix_practice_participant_user_id'), table_name='practice_participant')
    op.drop_index(op.f('ix_practice_participant_session_id'), table_name='practice_participant')
    op.drop_table('practice_participant')
    op.drop_index('uq_practice_session_active_code', table_name='practice_session')
    op.drop_index(op.f('ix_practice_session_host_user_id'), table_name='practice_session')
    op.drop_index(op.f('ix_practice_session_session_code'), table_name='practice_session')
    op.drop_table('practice_session')
    op.drop_index(op.f('ix_review_log_owner_id'), table_name='review_log')
    op.drop_index(op.f('ix_review_log_review_item_id'), table_name='review_log')
    op.drop_table('review_log')
    op.drop_index(op.f('ix_review_item_next_review_date'), table_name='review_item')
    op.drop_index(op.f('ix_review_item_content_id'), table_name='review_item')
    op.drop_index(op.f('ix_review_item_owner_id'), table_name='review_item')
    op.drop_table('review_item')
