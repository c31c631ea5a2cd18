"""
CRUD facade for ORM models.

Delegates to the per-aggregate repository modules so API handlers and the
audit helpers import a single module.
"""
import uuid
from datetime import datetime
from typing import Any, Dict, Iterable, Optional

from sqlalchemy.orm import Session

from . import schemas
from .repositories import users as repo_users
from .repositories import pipeline as repo_pipeline
from .repositories import clients as repo_clients
from .repositories import insurance as repo_insurance
from .repositories import meetings as repo_meetings
from .repositories import documents as repo_documents
from .repositories import contact_history as repo_contacts
from .repositories import tags as repo_tags
from .repositories import admin as repo_admin
from .repositories import audits as repo_audits


# Users
def get_user(db: Session, user_id: uuid.UUID):
    return repo_users.get_user(db, user_id)


def get_users(db: Session, *, search: Optional[str] = None, skip: int = 0, limit: int = 100):
    return repo_users.get_users(db, search=search, skip=skip, limit=limit)


def set_user_active(db: Session, user_id: uuid.UUID, is_active: bool):
    return repo_users.set_user_active(db, user_id, is_active)


def count_users(db: Session, *, active_only: bool = False) -> int:
    return repo_users.count_users(db, active_only=active_only)


def count_users_by_role(db: Session) -> dict:
    return repo_users.count_users_by_role(db)


# Pipeline stages
def get_pipeline_stages(db: Session, agent_id: uuid.UUID):
    return repo_pipeline.get_stages(db, agent_id)


def get_pipeline_stage(db: Session, stage_id: uuid.UUID):
    return repo_pipeline.get_stage(db, stage_id)


def get_first_pipeline_stage(db: Session, agent_id: uuid.UUID):
    return repo_pipeline.get_first_stage(db, agent_id)


def create_pipeline_stage(db: Session, agent_id: uuid.UUID, stage: schemas.PipelineStageCreate):
    return repo_pipeline.create_stage(db, agent_id, stage)


def change_client_stage(db: Session, client, *, to_stage_id: uuid.UUID, agent_id: uuid.UUID,
                        reason: Optional[str] = None, notes: Optional[str] = None):
    return repo_pipeline.change_client_stage(
        db, client, to_stage_id=to_stage_id, agent_id=agent_id, reason=reason, notes=notes
    )


def get_client_stage_history(db: Session, client_id: uuid.UUID):
    return repo_pipeline.get_stage_history(db, client_id)


# Clients
def get_client(db: Session, client_id: uuid.UUID):
    return repo_clients.get_client(db, client_id)


def get_active_client(db: Session, client_id: uuid.UUID):
    return repo_clients.get_active_client(db, client_id)


def get_active_client_by_phone(db: Session, agent_id: uuid.UUID, phone: str, *,
                               exclude_id: Optional[uuid.UUID] = None):
    return repo_clients.get_active_client_by_phone(db, agent_id, phone, exclude_id=exclude_id)


def get_clients(db: Session, **filters):
    return repo_clients.get_clients(db, **filters)


def create_client(db: Session, agent_id: uuid.UUID, client: schemas.ClientCreate):
    return repo_clients.create_client(db, agent_id, client)


def update_client(db: Session, client_id: uuid.UUID, changes: Dict[str, Any]):
    return repo_clients.update_client(db, client_id, changes)


def soft_delete_client(db: Session, client_id: uuid.UUID, reason: Optional[str] = None):
    return repo_clients.soft_delete_client(db, client_id, reason)


def get_referrals(db: Session, client_id: uuid.UUID):
    return repo_clients.get_referrals(db, client_id)


def get_client_stats(db: Session, agent_id: uuid.UUID):
    return repo_clients.get_client_stats(db, agent_id)


def count_clients(db: Session, *, active_only: bool = False) -> int:
    return repo_clients.count_clients(db, active_only=active_only)


# Insurance policies
def get_insurance_policy(db: Session, policy_id: uuid.UUID):
    return repo_insurance.get_policy(db, policy_id)


def get_client_insurance_policies(db: Session, client_id: uuid.UUID, *, active_status_only: bool = False):
    return repo_insurance.get_client_policies(db, client_id, active_status_only=active_status_only)


def create_insurance_policy(db: Session, *, client_id: uuid.UUID, agent_id: uuid.UUID,
                            policy: schemas.InsurancePolicyCreate):
    return repo_insurance.create_policy(db, client_id=client_id, agent_id=agent_id, policy=policy)


def update_insurance_policy(db: Session, policy_id: uuid.UUID, policy: schemas.InsurancePolicyUpdate):
    return repo_insurance.update_policy(db, policy_id, policy)


def delete_insurance_policy(db: Session, policy_id: uuid.UUID):
    return repo_insurance.soft_delete_policy(db, policy_id)


# Meetings
def get_meeting(db: Session, meeting_id: uuid.UUID):
    return repo_meetings.get_meeting(db, meeting_id)


def get_client_meetings(db: Session, client_id: uuid.UUID, *, upcoming_only: bool = False,
                        now: Optional[datetime] = None, limit: Optional[int] = None):
    return repo_meetings.get_client_meetings(db, client_id, upcoming_only=upcoming_only, now=now, limit=limit)


def create_meeting(db: Session, *, client_id: uuid.UUID, agent_id: uuid.UUID, meeting: schemas.MeetingCreate):
    return repo_meetings.create_meeting(db, client_id=client_id, agent_id=agent_id, meeting=meeting)


def update_meeting(db: Session, meeting_id: uuid.UUID, meeting: schemas.MeetingUpdate):
    return repo_meetings.update_meeting(db, meeting_id, meeting)


def delete_meeting(db: Session, meeting_id: uuid.UUID):
    return repo_meetings.delete_meeting(db, meeting_id)


# Documents
def get_document(db: Session, document_id: uuid.UUID):
    return repo_documents.get_document(db, document_id)


def get_client_documents(db: Session, client_id: uuid.UUID):
    return repo_documents.get_client_documents(db, client_id)


def create_document(db: Session, *, client_id: uuid.UUID, agent_id: uuid.UUID, document: schemas.DocumentCreate):
    return repo_documents.create_document(db, client_id=client_id, agent_id=agent_id, document=document)


def update_document(db: Session, document_id: uuid.UUID, document: schemas.DocumentUpdate):
    return repo_documents.update_document(db, document_id, document)


def delete_document(db: Session, document_id: uuid.UUID):
    return repo_documents.soft_delete_document(db, document_id)


# Contact history
def get_contact(db: Session, contact_id: uuid.UUID):
    return repo_contacts.get_contact(db, contact_id)


def get_client_contacts(db: Session, client_id: uuid.UUID, *, limit: Optional[int] = None):
    return repo_contacts.get_client_contacts(db, client_id, limit=limit)


def create_contact(db: Session, *, client_id: uuid.UUID, agent_id: uuid.UUID,
                   contact: schemas.ContactHistoryCreate):
    return repo_contacts.create_contact(db, client_id=client_id, agent_id=agent_id, contact=contact)


def update_contact(db: Session, contact_id: uuid.UUID, contact: schemas.ContactHistoryUpdate):
    return repo_contacts.update_contact(db, contact_id, contact)


def delete_contact(db: Session, contact_id: uuid.UUID):
    return repo_contacts.delete_contact(db, contact_id)


# Tags
def get_tag(db: Session, tag_id: uuid.UUID):
    return repo_tags.get_tag(db, tag_id)


def get_active_tag_by_name(db: Session, agent_id: uuid.UUID, name: str, *, exclude_id: Optional[uuid.UUID] = None):
    return repo_tags.get_active_tag_by_name(db, agent_id, name, exclude_id=exclude_id)


def get_tags(db: Session, agent_id: uuid.UUID):
    return repo_tags.get_tags(db, agent_id)


def get_tag_usage_counts(db: Session, tag_ids: Iterable[uuid.UUID]):
    return repo_tags.get_tag_usage_counts(db, tag_ids)


def create_tag(db: Session, agent_id: uuid.UUID, tag: schemas.TagCreate):
    return repo_tags.create_tag(db, agent_id, tag)


def update_tag(db: Session, tag_id: uuid.UUID, tag: schemas.TagUpdate):
    return repo_tags.update_tag(db, tag_id, tag)


def delete_tag(db: Session, tag_id: uuid.UUID):
    return repo_tags.delete_tag(db, tag_id)


def get_tag_assignment(db: Session, client_id: uuid.UUID, tag_id: uuid.UUID):
    return repo_tags.get_assignment(db, client_id, tag_id)


def assign_tag(db: Session, *, client_id: uuid.UUID, tag_id: uuid.UUID, assigned_by: Optional[uuid.UUID] = None):
    return repo_tags.assign_tag(db, client_id=client_id, tag_id=tag_id, assigned_by=assigned_by)


def unassign_tag(db: Session, client_id: uuid.UUID, tag_id: uuid.UUID):
    return repo_tags.unassign_tag(db, client_id, tag_id)


def get_client_tags(db: Session, client_id: uuid.UUID):
    return repo_tags.get_client_tags(db, client_id)


def get_tags_for_clients(db: Session, client_ids: Iterable[uuid.UUID]):
    return repo_tags.get_tags_for_clients(db, client_ids)


# Backoffice settings and stats cache
def get_admin_settings(db: Session):
    return repo_admin.get_settings(db)


def get_admin_setting(db: Session, setting_id: uuid.UUID):
    return repo_admin.get_setting(db, setting_id)


def get_admin_setting_by_key(db: Session, key: str):
    return repo_admin.get_setting_by_key(db, key)


def create_admin_setting(db: Session, *, key: str, value: Any, description: Optional[str] = None,
                         updated_by_id: Optional[uuid.UUID] = None):
    return repo_admin.create_setting(db, key=key, value=value, description=description, updated_by_id=updated_by_id)


def update_admin_setting(db: Session, setting_id: uuid.UUID, *, value: Any, description: Optional[str] = None,
                         updated_by_id: Optional[uuid.UUID] = None):
    return repo_admin.update_setting(
        db, setting_id, value=value, description=description, updated_by_id=updated_by_id
    )


def get_admin_stats_cache(db: Session, stat_type: str):
    return repo_admin.get_stats_cache(db, stat_type)


def upsert_admin_stats_cache(db: Session, *, stat_type: str, stat_data: Dict[str, Any], expires_at: datetime):
    return repo_admin.upsert_stats_cache(db, stat_type=stat_type, stat_data=stat_data, expires_at=expires_at)


# CRUD for AuditLog (facade delegates to repository)
def create_audit_log(db: Session, audit_log: schemas.AuditLogCreate, *, actor_user_id: Optional[uuid.UUID]):
    return repo_audits.create_audit_log(db, audit_log, actor_user_id)


def get_audit_logs(
    db: Session,
    *,
    user_id: Optional[uuid.UUID] = None,
    action_type: Optional[str] = None,
    target_type: Optional[str] = None,
    target_id: Optional[uuid.UUID] = None,
    status: Optional[str] = None,
    skip: int = 0,
    limit: int = 100,
):
    return repo_audits.get_audit_logs(
        db,
        user_id=user_id,
        action_type=action_type,
        target_type=target_type,
        target_id=target_id,
        status=status,
        skip=skip,
        limit=limit,
    )


def search_audit_logs(db: Session, *, search: Optional[str] = None, action: Optional[str] = None, limit: int = 50):
    return repo_audits.search_audit_logs(db, search=search, action=action, limit=limit)


def get_audit_log_stats(db: Session, *, now: Optional[datetime] = None):
    return repo_audits.get_audit_log_stats(db, now=now)
