"""
Initial migration - Create disaster_reports table

Revision ID: 001_initial
Create Date: 2026-10-17
"""

from alembic import op
import sqlalchemy as sa

# Revision identifiers
revision = '001_initial'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Create the reports table."""
    op.create_table(
        'disaster_reports',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('reference_id', sa.String(40), nullable=False, unique=True),
        sa.Column('type', sa.String(100), nullable=False),
        sa.Column('severity', sa.String(20), nullable=False),
        sa.Column('state', sa.String(100), server_default='Unknown'),
        sa.Column('district', sa.String(100), server_default='Unknown'),
        sa.Column('location', sa.Text(), server_default=''),
        sa.Column('latitude', sa.Float()),
        sa.Column('longitude', sa.Float()),
        sa.Column('description', sa.Text(), server_default=''),
        sa.Column('victim_message', sa.Text()),
        sa.Column('reporter_contact', sa.String(50)),
        sa.Column('people_affected', sa.String(50)),
        sa.Column('source', sa.String(10), nullable=False, server_default='web'),
        sa.Column('image_verified', sa.Boolean(), server_default=sa.false()),
        sa.Column('status', sa.String(20), nullable=False, server_default='active'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )

    op.create_index('idx_report_status_created', 'disaster_reports', ['status', 'created_at'])
    op.create_index('idx_report_severity', 'disaster_reports', ['severity'])


def downgrade() -> None:
    """Drop the reports table."""
    op.drop_index('idx_report_severity', table_name='disaster_reports')
    op.drop_index('idx_report_status_created', table_name='disaster_reports')
    op.drop_table('disaster_reports')
