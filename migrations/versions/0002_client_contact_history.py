"""Client contact history: logged calls, messages and visits per client.

Revision ID: 0002_client_contact_history
Revises: 0001_initial_schema
Create Date: 2026-10-20 10:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '0002_client_contact_history'
down_revision: Union[str, None] = '0001_initial_schema'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'client_contact_history',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False, primary_key=True),
        sa.Column(
            'client_id',
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey('clients.id', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column('agent_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('contact_method', sa.String(20), nullable=False),
        sa.Column('subject', sa.String(200), nullable=True),
        sa.Column('content', sa.Text(), nullable=True),
        sa.Column('duration', sa.Integer(), nullable=True),
        sa.Column('outcome', sa.Text(), nullable=True),
        sa.Column('next_action', sa.Text(), nullable=True),
        sa.Column('next_action_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('contacted_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.Column('privacy_level', sa.String(20), nullable=False, server_default='restricted'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True, server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True, server_default=sa.text('now()')),
        sa.CheckConstraint(
            "contact_method in ('phone','email','kakao','sms','in_person','video_call')",
            name='ck_client_contact_history_method',
        ),
        sa.CheckConstraint('duration IS NULL OR duration >= 0', name='ck_client_contact_history_duration'),
    )
    op.create_index(
        'ix_client_contact_history_client_id_contacted_at',
        'client_contact_history',
        ['client_id', 'contacted_at'],
    )


def downgrade() -> None:
    op.drop_index('ix_client_contact_history_client_id_contacted_at', table_name='client_contact_history')
    op.drop_table('client_contact_history')
