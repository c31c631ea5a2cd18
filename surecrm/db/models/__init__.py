"""
Domain-split SQLAlchemy models.

Exposes `Base`, `now_utc` and all ORM classes from one import path.
"""

from .base import Base, now_utc, as_utc  # re-export

from .users import User
from .pipeline import PipelineStage, ClientStageHistory, DEFAULT_STAGES
from .clients import Client
from .insurance import InsurancePolicy
from .meetings import Meeting
from .documents import Document
from .contact_history import ContactHistory
from .tags import Tag, TagAssignment
from .admin import AdminSetting, AdminStatsCache
from .audit import AuditLog

__all__ = [
    # base
    "Base",
    "now_utc",
    "as_utc",
    # agents
    "User",
    # pipeline
    "PipelineStage",
    "ClientStageHistory",
    "DEFAULT_STAGES",
    # clients and related records
    "Client",
    "InsurancePolicy",
    "Meeting",
    "Document",
    "ContactHistory",
    "Tag",
    "TagAssignment",
    # backoffice
    "AdminSetting",
    "AdminStatsCache",
    "AuditLog",
]
