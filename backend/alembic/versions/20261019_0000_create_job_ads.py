"""create_job_ads_table

Revision ID: 20261019_0000
Revises: 
Create Date: 2026-10-19 00:00:00.000000+00:00

"""
from alembic import op
import sqlalchemy as sa


revision = '20261019_0000'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'job_ads',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('external_id', sa.String(), nullable=False),
        sa.Column('slug', sa.String(), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('company', sa.String(), nullable=False),
        sa.Column('company_url', sa.String(), nullable=True),
        sa.Column('company_email', sa.String(), nullable=True),
        sa.Column('location', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('how_to_apply', sa.Text(), nullable=False),
        sa.Column('perks', sa.Text(), nullable=True),
        sa.Column('interview_process', sa.Text(), nullable=True),
        sa.Column('salary_min', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('salary_max', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('salary_currency', sa.String(), nullable=False, server_default='$'),
        sa.Column('salary_period', sa.String(), nullable=False, server_default='year'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('approved_at', sa.DateTime(), nullable=True),
        sa.Column('expired', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('ad_tier', sa.String(), nullable=False, server_default='BASIC'),
        sa.Column('last_week_clickouts', sa.Integer(), nullable=False, server_default='0'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('external_id'),
        sa.UniqueConstraint('slug'),
    )
    op.create_index('idx_job_ads_visibility', 'job_ads', ['approved_at', 'expired'], unique=False)
    op.create_index('idx_job_ads_tier', 'job_ads', ['ad_tier', 'approved_at'], unique=False)
    op.create_index('idx_job_ads_created_at', 'job_ads', ['created_at'], unique=False)


def downgrade() -> None:
    op.drop_index('idx_job_ads_created_at', table_name='job_ads')
    op.drop_index('idx_job_ads_tier', table_name='job_ads')
    op.drop_index('idx_job_ads_visibility', table_name='job_ads')
    op.drop_table('job_ads')
