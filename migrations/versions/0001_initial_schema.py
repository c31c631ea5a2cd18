"""Initial SureCRM schema: agents, clients, pipeline, policies, meetings,
documents, tags, backoffice settings and the audit trail.

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19 09:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '0001_initial_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _uuid():
    return postgresql.UUID(as_uuid=True)


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True, server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True, server_default=sa.text('now()')),
    ]


def upgrade() -> None:
    # 1) Agents
    op.create_table(
        'users',
        sa.Column('id', _uuid(), nullable=False, primary_key=True),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('full_name', sa.String(), nullable=True),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('company', sa.String(), nullable=True),
        sa.Column('role', sa.String(20), nullable=False, server_default='agent'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('last_login_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("role in ('agent','team_admin','system_admin')", name='ck_users_role'),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    # 2) Sales pipeline
    op.create_table(
        'pipeline_stages',
        sa.Column('id', _uuid(), nullable=False, primary_key=True),
        sa.Column('agent_id', _uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('sort_order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('color', sa.String(7), nullable=False, server_default='#64748b'),
        sa.Column('is_default', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True, server_default=sa.text('now()')),
    )
    op.create_index('ix_pipeline_stages_agent_id_sort_order', 'pipeline_stages', ['agent_id', 'sort_order'])

    # 3) Clients
    op.create_table(
        'clients',
        sa.Column('id', _uuid(), nullable=False, primary_key=True),
        sa.Column('agent_id', _uuid(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('full_name', sa.String(200), nullable=False),
        sa.Column('email', sa.String(), nullable=True),
        sa.Column('phone', sa.String(50), nullable=False),
        sa.Column('telecom_provider', sa.String(50), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('occupation', sa.String(100), nullable=True),
        sa.Column('has_driving_license', sa.Boolean(), nullable=True),
        sa.Column('height', sa.Integer(), nullable=True),
        sa.Column('weight', sa.Integer(), nullable=True),
        sa.Column('importance', sa.String(10), nullable=False, server_default='medium'),
        sa.Column(
            'current_stage_id', _uuid(), sa.ForeignKey('pipeline_stages.id', ondelete='SET NULL'), nullable=True
        ),
        sa.Column('referred_by_id', _uuid(), sa.ForeignKey('clients.id', ondelete='SET NULL'), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('custom_fields', postgresql.JSONB(), nullable=True),
        sa.Column('privacy_level', sa.String(20), nullable=False, server_default='private'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        *_timestamps(),
        sa.CheckConstraint("importance in ('high','medium','low')", name='ck_clients_importance'),
        sa.CheckConstraint(
            "privacy_level in ('public','restricted','private','confidential')",
            name='ck_clients_privacy_level',
        ),
        sa.CheckConstraint("height IS NULL OR height > 0", name='ck_clients_height_positive'),
        sa.CheckConstraint("weight IS NULL OR weight > 0", name='ck_clients_weight_positive'),
    )
    op.create_index('ix_clients_agent_id_is_active', 'clients', ['agent_id', 'is_active'])
    op.create_index('ix_clients_agent_id_phone', 'clients', ['agent_id', 'phone'])
    op.create_index('ix_clients_referred_by_id', 'clients', ['referred_by_id'])

    op.create_table(
        'client_stage_history',
        sa.Column('id', _uuid(), nullable=False, primary_key=True),
        sa.Column('client_id', _uuid(), sa.ForeignKey('clients.id', ondelete='CASCADE'), nullable=False),
        sa.Column('agent_id', _uuid(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('from_stage_id', _uuid(), sa.ForeignKey('pipeline_stages.id', ondelete='SET NULL'), nullable=True),
        sa.Column('to_stage_id', _uuid(), sa.ForeignKey('pipeline_stages.id', ondelete='SET NULL'), nullable=True),
        sa.Column('reason', sa.Text(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('changed_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
    )
    op.create_index(
        'ix_client_stage_history_client_id_changed_at', 'client_stage_history', ['client_id', 'changed_at']
    )

    # 4) Insurance policies
    op.create_table(
        'insurance_policies',
        sa.Column('id', _uuid(), nullable=False, primary_key=True),
        sa.Column('client_id', _uuid(), sa.ForeignKey('clients.id', ondelete='CASCADE'), nullable=False),
        sa.Column('agent_id', _uuid(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('insurance_type', sa.String(20), nullable=False),
        sa.Column('product_name', sa.String(200), nullable=False),
        sa.Column('insurance_company', sa.String(200), nullable=False),
        sa.Column('policy_number', sa.String(100), nullable=True),
        sa.Column('contractor_name', sa.String(200), nullable=True),
        sa.Column('insured_name', sa.String(200), nullable=True),
        sa.Column('beneficiary_name', sa.String(200), nullable=True),
        sa.Column('contract_date', sa.Date(), nullable=True),
        sa.Column('effective_date', sa.Date(), nullable=True),
        sa.Column('expiration_date', sa.Date(), nullable=True),
        sa.Column('monthly_premium', sa.Numeric(12, 2), nullable=True),
        sa.Column('coverage_amount', sa.Numeric(15, 2), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='active'),
        sa.Column('details', postgresql.JSONB(), nullable=True),
        sa.Column('privacy_level', sa.String(20), nullable=False, server_default='private'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        *_timestamps(),
        sa.CheckConstraint(
            "insurance_type in ('life','health','auto','prenatal','property','other')",
            name='ck_insurance_policies_type',
        ),
        sa.CheckConstraint(
            "status in ('draft','active','cancelled','expired','suspended')",
            name='ck_insurance_policies_status',
        ),
    )
    op.create_index('ix_insurance_policies_client_id', 'insurance_policies', ['client_id'])

    # 5) Meetings
    op.create_table(
        'meetings',
        sa.Column('id', _uuid(), nullable=False, primary_key=True),
        sa.Column('client_id', _uuid(), sa.ForeignKey('clients.id', ondelete='CASCADE'), nullable=False),
        sa.Column('agent_id', _uuid(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('start_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('end_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('location', sa.String(300), nullable=True),
        sa.Column('meeting_type', sa.String(30), nullable=False, server_default='first_consultation'),
        sa.Column('status', sa.String(20), nullable=False, server_default='scheduled'),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint('end_time > start_time', name='ck_meetings_end_after_start'),
        sa.CheckConstraint(
            "meeting_type in ('first_consultation','product_explanation','contract_review','follow_up','other')",
            name='ck_meetings_type',
        ),
        sa.CheckConstraint(
            "status in ('scheduled','completed','cancelled','rescheduled')",
            name='ck_meetings_status',
        ),
    )
    op.create_index('ix_meetings_client_id_start_time', 'meetings', ['client_id', 'start_time'])
    op.create_index('ix_meetings_agent_id_start_time', 'meetings', ['agent_id', 'start_time'])

    # 6) Documents
    op.create_table(
        'documents',
        sa.Column('id', _uuid(), nullable=False, primary_key=True),
        sa.Column('client_id', _uuid(), sa.ForeignKey('clients.id', ondelete='CASCADE'), nullable=False),
        sa.Column(
            'insurance_policy_id', _uuid(), sa.ForeignKey('insurance_policies.id', ondelete='SET NULL'), nullable=True
        ),
        sa.Column('agent_id', _uuid(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('document_type', sa.String(40), nullable=False, server_default='other'),
        sa.Column('file_name', sa.String(300), nullable=False),
        sa.Column('file_path', sa.Text(), nullable=False),
        sa.Column('mime_type', sa.String(100), nullable=True),
        sa.Column('size', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('privacy_level', sa.String(20), nullable=False, server_default='private'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        *_timestamps(),
        sa.CheckConstraint('size >= 0', name='ck_documents_size_non_negative'),
    )
    op.create_index('ix_documents_client_id', 'documents', ['client_id'])

    # 7) Tags
    op.create_table(
        'tags',
        sa.Column('id', _uuid(), nullable=False, primary_key=True),
        sa.Column('agent_id', _uuid(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('name', sa.String(50), nullable=False),
        sa.Column('color', sa.String(7), nullable=False, server_default='#3b82f6'),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('privacy_level', sa.String(20), nullable=False, server_default='public'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        *_timestamps(),
    )
    op.create_index('ix_tags_agent_id_is_active', 'tags', ['agent_id', 'is_active'])

    op.create_table(
        'tag_assignments',
        sa.Column('id', _uuid(), nullable=False, primary_key=True),
        sa.Column('client_id', _uuid(), sa.ForeignKey('clients.id', ondelete='CASCADE'), nullable=False),
        sa.Column('tag_id', _uuid(), sa.ForeignKey('tags.id', ondelete='CASCADE'), nullable=False),
        sa.Column('assigned_by', _uuid(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('assigned_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.UniqueConstraint('client_id', 'tag_id', name='uq_tag_assignments_client_tag'),
    )

    # 8) Backoffice
    op.create_table(
        'admin_settings',
        sa.Column('id', _uuid(), nullable=False, primary_key=True),
        sa.Column('key', sa.String(100), nullable=False),
        sa.Column('value', postgresql.JSONB(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('updated_by_id', _uuid(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint('key', name='uq_admin_settings_key'),
    )
    op.create_table(
        'admin_stats_cache',
        sa.Column('id', _uuid(), nullable=False, primary_key=True),
        sa.Column('stat_type', sa.String(50), nullable=False),
        sa.Column('stat_data', postgresql.JSONB(), nullable=False),
        sa.Column('calculated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint('stat_type', name='uq_admin_stats_cache_stat_type'),
    )

    # 9) Audit trail
    op.create_table(
        'audit_logs',
        sa.Column('id', _uuid(), nullable=False, primary_key=True),
        sa.Column('actor_user_id', _uuid(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('action_type', sa.Text(), nullable=False),
        sa.Column('target_type', sa.Text(), nullable=True),
        sa.Column('target_id', _uuid(), nullable=True),
        sa.Column('status', sa.Text(), nullable=False),
        sa.Column('access_type', sa.String(20), nullable=True),
        sa.Column('accessed_fields', postgresql.JSONB(), nullable=True),
        sa.Column('privacy_level', sa.String(20), nullable=True),
        sa.Column('ip_address', sa.String(64), nullable=True),
        sa.Column('user_agent', sa.Text(), nullable=True),
        sa.Column('old_values', postgresql.JSONB(), nullable=True),
        sa.Column('new_values', postgresql.JSONB(), nullable=True),
        sa.Column('reason', sa.Text(), nullable=True),
        sa.Column('metadata', postgresql.JSONB(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
    )
    op.create_index('ix_audit_logs_actor_user_id_created_at', 'audit_logs', ['actor_user_id', 'created_at'])
    op.create_index('ix_audit_logs_target_type_target_id', 'audit_logs', ['target_type', 'target_id'])
    op.create_index('ix_audit_logs_action_type', 'audit_logs', ['action_type'])


def downgrade() -> None:
    op.drop_index('ix_audit_logs_action_type', table_name='audit_logs')
    op.drop_index('ix_audit_logs_target_type_target_id', table_name='audit_logs')
    op.drop_index('ix_audit_logs_actor_user_id_created_at', table_name='audit_logs')
    op.drop_table('audit_logs')
    op.drop_table('admin_stats_cache')
    op.drop_table('admin_settings')
    op.drop_table('tag_assignments')
    op.drop_index('ix_tags_agent_id_is_active', table_name='tags')
    op.drop_table('tags')
    op.drop_index('ix_documents_client_id', table_name='documents')
    op.drop_table('documents')
    op.drop_index('ix_meetings_agent_id_start_time', table_name='meetings')
    op.drop_index('ix_meetings_client_id_start_time', table_name='meetings')
    op.drop_table('meetings')
    op.drop_index('ix_insurance_policies_client_id', table_name='insurance_policies')
    op.drop_table('insurance_policies')
    op.drop_index('ix_client_stage_history_client_id_changed_at', table_name='client_stage_history')
    op.drop_table('client_stage_history')
    op.drop_index('ix_clients_referred_by_id', table_name='clients')
    op.drop_index('ix_clients_agent_id_phone', table_name='clients')
    op.drop_index('ix_clients_agent_id_is_active', table_name='clients')
    op.drop_table('clients')
    op.drop_index('ix_pipeline_stages_agent_id_sort_order', table_name='pipeline_stages')
    op.drop_table('pipeline_stages')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
