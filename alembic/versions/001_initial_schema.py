"""initial_schema_scan_results_and_waitlist

Revision ID: 001
Revises: 
Create Date: 2026-01-12 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    # Create scan_results table
    op.create_table(
        'scan_results',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('session_id', sa.String(), nullable=False),
        sa.Column('website_url', sa.String(), nullable=False),
        sa.Column('client_ip', sa.String(), nullable=False),
        sa.Column('user_id', sa.String(), nullable=True),
        sa.Column('http_status', sa.Integer(), nullable=False),
        sa.Column('scan_duration_ms', sa.Integer(), nullable=False),
        sa.Column('findings', sa.JSON(), nullable=False),
        sa.Column('summary', sa.JSON(), nullable=False),
        sa.Column('page_results', sa.JSON(), nullable=False),
        sa.Column('pages_scanned', sa.Integer(), nullable=False),
        sa.Column('pdf_results', sa.JSON(), nullable=False),
        sa.Column('vendor_warnings', sa.JSON(), nullable=False),
        sa.Column('overall_score', sa.Integer(), nullable=True),
        sa.Column('email', sa.String(), nullable=True),
        sa.Column('email_captured_at', sa.DateTime(), nullable=True),
        sa.Column('report_sent_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_scan_results_id'), 'scan_results', ['id'], unique=False)
    op.create_index(op.f('ix_scan_results_session_id'), 'scan_results', ['session_id'], unique=True)
    op.create_index(op.f('ix_scan_results_website_url'), 'scan_results', ['website_url'], unique=False)
    op.create_index(op.f('ix_scan_results_client_ip'), 'scan_results', ['client_ip'], unique=False)
    op.create_index(op.f('ix_scan_results_user_id'), 'scan_results', ['user_id'], unique=False)
    op.create_index(op.f('ix_scan_results_email'), 'scan_results', ['email'], unique=False)
    op.create_index(op.f('ix_scan_results_created_at'), 'scan_results', ['created_at'], unique=False)

    # Create waitlist table
    op.create_table(
        'waitlist',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('website_url', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_waitlist_id'), 'waitlist', ['id'], unique=False)
    op.create_index(op.f('ix_waitlist_email'), 'waitlist', ['email'], unique=True)
    op.create_index(op.f('ix_waitlist_created_at'), 'waitlist', ['created_at'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index(op.f('ix_waitlist_created_at'), table_name='waitlist')
    op.drop_index(op.f('ix_waitlist_email'), table_name='waitlist')
    op.drop_index(op.f('ix_waitlist_id'), table_name='waitlist')
    op.drop_table('waitlist')

    op.drop_index(op.f('ix_scan_results_created_at'), table_name='scan_results')
    op.drop_index(op.f('ix_scan_results_email'), table_name='scan_results')
    op.drop_index(op.f('ix_scan_results_user_id'), table_name='scan_results')
    op.drop_index(op.f('ix_scan_results_client_ip'), table_name='scan_results')
    op.drop_index(op.f('ix_scan_results_website_url'), table_name='scan_results')
    op.drop_index(op.f('ix_scan_results_session_id'), table_name='scan_results')
    op.drop_index(op.f('ix_scan_results_id'), table_name='scan_results')
    op.drop_table('scan_results')
