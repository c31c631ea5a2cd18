"""
Domain-split Pydantic schemas.

Re-exports every request/response model under `surecrm.db.schemas`.
"""

from .users import UserBase, UserCreate, User
from .pipeline import PipelineStageCreate, PipelineStage, StageChange, ClientStageHistory
from .insurance import (
    InsuranceType,
    PolicyStatus,
    InsurancePolicyBase,
    InsurancePolicyCreate,
    InsurancePolicyUpdate,
    InsurancePolicy,
)
from .meetings import MeetingType, MeetingStatus, MeetingBase, MeetingCreate, MeetingUpdate, Meeting
from .documents import DocumentType, DocumentCreate, DocumentUpdate, Document
from .contact_history import (
    ContactMethod,
    ContactHistoryBase,
    ContactHistoryCreate,
    ContactHistoryUpdate,
    ContactHistory,
)
from .clients import (
    Importance,
    ClientBase,
    ClientCreate,
    ClientUpdate,
    Client,
    ClientSummary,
    TagBadge,
    ClientListItem,
    ClientDetail,
    PaginatedClients,
    ClientStats,
)
from .tags import TagCreate, TagUpdate, Tag, TagAssignment
from .admin import AdminSetting, AdminStats, AuditLogStats
from .audits import AuditLogBase, AuditLogCreate, AuditLog

__all__ = [
    # users
    "UserBase",
    "UserCreate",
    "User",
    # pipeline
    "PipelineStageCreate",
    "PipelineStage",
    "StageChange",
    "ClientStageHistory",
    # clients
    "Importance",
    "ClientBase",
    "ClientCreate",
    "ClientUpdate",
    "Client",
    "ClientSummary",
    "TagBadge",
    "ClientListItem",
    "ClientDetail",
    "PaginatedClients",
    "ClientStats",
    # insurance
    "InsuranceType",
    "PolicyStatus",
    "InsurancePolicyBase",
    "InsurancePolicyCreate",
    "InsurancePolicyUpdate",
    "InsurancePolicy",
    # meetings
    "MeetingType",
    "MeetingStatus",
    "MeetingBase",
    "MeetingCreate",
    "MeetingUpdate",
    "Meeting",
    # documents
    "DocumentType",
    "DocumentCreate",
    "DocumentUpdate",
    "Document",
    # contact history
    "ContactMethod",
    "ContactHistoryBase",
    "ContactHistoryCreate",
    "ContactHistoryUpdate",
    "ContactHistory",
    # tags
    "TagCreate",
    "TagUpdate",
    "Tag",
    "TagAssignment",
    # backoffice
    "AdminSetting",
    "AdminStats",
    "AuditLogStats",
    # audits
    "AuditLogBase",
    "AuditLogCreate",
    "AuditLog",
]
