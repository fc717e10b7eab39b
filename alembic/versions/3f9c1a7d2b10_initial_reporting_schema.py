"""initial_reporting_schema

Revision ID: 3f9c1a7d2b10
Revises:
Create Date: 2026-10-18 09:12:31.402118

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f9c1a7d2b10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema: job inputs, report configurations, shares and access log."""
    op.create_table('jobs',
    sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
    sa.Column('user_id', sa.String(length=64), nullable=False),
    sa.Column('company', sa.String(length=255), nullable=True),
    sa.Column('title', sa.String(length=255), nullable=True),
    sa.Column('status', sa.String(length=50), nullable=False),
    sa.Column('industry', sa.String(length=100), nullable=True),
    sa.Column('location', sa.String(length=255), nullable=True),
    sa.Column('source', sa.String(length=100), nullable=True),
    sa.Column('applied_date', sa.DateTime(), nullable=True),
    sa.Column('is_archived', sa.Boolean(), nullable=False),
    sa.Column('is_ghosted', sa.Boolean(), nullable=False),
    sa.Column('needs_follow_up', sa.Boolean(), nullable=False),
    sa.Column('created_at', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_jobs_user_id'), 'jobs', ['user_id'], unique=False)
    op.create_index(op.f('ix_jobs_created_at'), 'jobs', ['created_at'], unique=False)
    op.create_index('ix_jobs_user_created', 'jobs', ['user_id', 'created_at'], unique=False)

    op.create_table('application_statuses',
    sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
    sa.Column('user_id', sa.String(length=64), nullable=False),
    sa.Column('job_id', sa.Integer(), nullable=False),
    sa.Column('status', sa.String(length=50), nullable=False),
    sa.Column('status_date', sa.DateTime(), nullable=True),
    sa.Column('created_at', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_application_statuses_user_id'), 'application_statuses', ['user_id'], unique=False)
    op.create_index(op.f('ix_application_statuses_job_id'), 'application_statuses', ['job_id'], unique=False)

    op.create_table('interviews',
    sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
    sa.Column('user_id', sa.String(length=64), nullable=False),
    sa.Column('job_id', sa.Integer(), nullable=True),
    sa.Column('interview_type', sa.String(length=50), nullable=True),
    sa.Column('interview_date', sa.DateTime(), nullable=True),
    sa.Column('created_at', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_interviews_user_id'), 'interviews', ['user_id'], unique=False)
    op.create_index(op.f('ix_interviews_job_id'), 'interviews', ['job_id'], unique=False)
    op.create_index(op.f('ix_interviews_interview_date'), 'interviews', ['interview_date'], unique=False)

    op.create_table('report_configurations',
    sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
    sa.Column('user_id', sa.String(length=64), nullable=False),
    sa.Column('name', sa.String(length=200), nullable=False),
    sa.Column('description', sa.Text(), nullable=True),
    sa.Column('is_template', sa.Boolean(), nullable=False),
    sa.Column('is_public', sa.Boolean(), nullable=False),
    sa.Column('template_category', sa.String(length=50), nullable=True),
    sa.Column('date_range', sa.JSON(), nullable=False),
    sa.Column('metrics', sa.JSON(), nullable=False),
    sa.Column('filters', sa.JSON(), nullable=False),
    sa.Column('visualizations', sa.JSON(), nullable=False),
    sa.Column('include_ai_insights', sa.Boolean(), nullable=False),
    sa.Column('insights_focus', sa.JSON(), nullable=False),
    sa.Column('last_generated', sa.DateTime(), nullable=True),
    sa.Column('generation_count', sa.Integer(), nullable=False),
    sa.Column('created_at', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
    sa.Column('updated_at', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_report_configurations_user_id'), 'report_configurations', ['user_id'], unique=False)
    op.create_index(op.f('ix_report_configurations_created_at'), 'report_configurations', ['created_at'], unique=False)
    op.create_index('ix_report_configurations_templates', 'report_configurations', ['user_id', 'is_template', 'is_public'], unique=False)

    op.create_table('shared_reports',
    sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
    sa.Column('token', sa.String(length=64), nullable=False),
    sa.Column('report_config_id', sa.Integer(), nullable=False),
    sa.Column('user_id', sa.String(length=64), nullable=False),
    sa.Column('report_name', sa.String(length=200), nullable=False),
    sa.Column('report_snapshot', sa.JSON(), nullable=False),
    sa.Column('expiration_date', sa.DateTime(), nullable=False),
    sa.Column('is_active', sa.Boolean(), nullable=False),
    sa.Column('password_hash', sa.String(length=255), nullable=True),
    sa.Column('allowed_emails', sa.JSON(), nullable=True),
    sa.Column('share_message', sa.Text(), nullable=True),
    sa.Column('shared_with', sa.JSON(), nullable=True),
    sa.Column('view_count', sa.Integer(), nullable=False),
    sa.Column('last_accessed_at', sa.DateTime(), nullable=True),
    sa.Column('created_at', sa.DateTime(), server_default=sa.text('now()'), nullable=False),
    sa.PrimaryKeyConstraint('id'),
    sa.UniqueConstraint('token')
    )
    op.create_index(op.f('ix_shared_reports_report_config_id'), 'shared_reports', ['report_config_id'], unique=False)
    op.create_index(op.f('ix_shared_reports_user_id'), 'shared_reports', ['user_id'], unique=False)
    op.create_index(op.f('ix_shared_reports_created_at'), 'shared_reports', ['created_at'], unique=False)
    op.create_index('ix_shared_reports_user_created', 'shared_reports', ['user_id', 'created_at'], unique=False)

    op.create_table('shared_report_access_logs',
    sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
    sa.Column('shared_report_id', sa.Integer(), nullable=False),
    sa.Column('accessed_at', sa.DateTime(), nullable=False),
    sa.Column('ip_address', sa.String(length=64), nullable=True),
    sa.Column('user_agent', sa.String(length=512), nullable=True),
    sa.Column('email', sa.String(length=255), nullable=True),
    sa.ForeignKeyConstraint(['shared_report_id'], ['shared_reports.id'], ),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_shared_report_access_logs_shared_report_id'), 'shared_report_access_logs', ['shared_report_id'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index(op.f('ix_shared_report_access_logs_shared_report_id'), table_name='shared_report_access_logs')
    op.drop_table('shared_report_access_logs')
    op.drop_index('ix_shared_reports_user_created', table_name='shared_reports')
    op.drop_index(op.f('ix_shared_reports_created_at'), table_name='shared_reports')
    op.drop_index(op.f('ix_shared_reports_user_id'), table_name='shared_reports')
    op.drop_index(op.f('ix_shared_reports_report_config_id'), table_name='shared_reports')
    op.drop_table('shared_reports')
    op.drop_index('ix_report_configurations_templates', table_name='report_configurations')
    op.drop_index(op.f('ix_report_configurations_created_at'), table_name='report_configurations')
    op.drop_index(op.f('ix_report_configurations_user_id'), table_name='report_configurations')
    op.drop_table('report_configurations')
    op.drop_index(op.f('ix_interviews_interview_date'), table_name='interviews')
    op.drop_index(op.f('ix_interviews_job_id'), table_name='interviews')
    op.drop_index(op.f('ix_interviews_user_id'), table_name='interviews')
    op.drop_table('interviews')
    op.drop_index(op.f('ix_application_statuses_job_id'), table_name='application_statuses')
    op.drop_index(op.f('ix_application_statuses_user_id'), table_name='application_statuses')
    op.drop_table('application_statuses')
    op.drop_index('ix_jobs_user_created', table_name='jobs')
    op.drop_index(op.f('ix_jobs_created_at'), table_name='jobs')
    op.drop_index(op.f('ix_jobs_user_id'), table_name='jobs')
    op.drop_table('jobs')
