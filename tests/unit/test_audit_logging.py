import uuid

from surecrm import audit
from surecrm.audit import AccessType, AuditAction, AuditStatus
from surecrm.db import crud, models
from surecrm.utils.feature_flags import refresh_feature_flag_cache


def test_log_data_access_persists_row(db_session, agent):
    client_id = uuid.uuid4()
    row = audit.log_data_access(
        db_session,
        actor_user_id=agent.id,
        client_id=client_id,
        access_type=AccessType.VIEW,
        action=AuditAction.CLIENT_VIEW,
        accessed_fields=["full_name", "phone"],
        privacy_level="private",
        ip_address="10.0.0.1",
        user_agent="pytest",
        metadata={"show_confidential": False},
    )
    assert row is not None
    assert row.action_type == "client_view"
    assert row.status == "success"
    assert row.access_type == "view"
    assert row.target_type == "client"
    assert row.target_id == client_id
    assert row.accessed_fields == ["full_name", "phone"]
    assert row.get_metadata() == {"show_confidential": False}


def test_log_change_collects_changed_fields(db_session, agent):
    target = uuid.uuid4()
    row = audit.log_change(
        db_session,
        actor_user_id=agent.id,
        target_type="client",
        target_id=target,
        action=AuditAction.CLIENT_UPDATE,
        old_values={"phone": "010-1111-2222"},
        new_values={"phone": "010-3333-4444", "referred_by_id": target},
    )
    assert row.accessed_fields == ["phone", "referred_by_id"]
    assert row.access_type == "edit"
    # UUIDs are stored JSON-encoded
    assert row.new_values["referred_by_id"] == str(target)


def test_admin_action_status_follows_prefix(db_session, agent):
    denied = audit.log_admin_action(
        db_session, actor_user_id=agent.id, action=AuditAction.UNAUTHORIZED_MODIFY_SETTINGS
    )
    failed = audit.log_admin_action(
        db_session, actor_user_id=agent.id, action=AuditAction.ERROR_CREATE_SETTING, table_name="admin_settings"
    )
    ok = audit.log_admin_action(db_session, actor_user_id=agent.id, action="VIEW_ADMIN_DASHBOARD")
    assert denied.status == AuditStatus.DENIED.value
    assert denied.target_type == "admin"
    assert failed.status == AuditStatus.FAILURE.value
    assert failed.target_type == "admin_settings"
    assert ok.status == AuditStatus.SUCCESS.value


def test_audit_logging_can_be_disabled(db_session, agent, monkeypatch):
    monkeypatch.setenv("FEATURE_AUDIT_LOGGING_ENABLED", "false")
    refresh_feature_flag_cache()
    result = audit.log_change(
        db_session,
        actor_user_id=agent.id,
        target_type="tag",
        target_id=None,
        action=AuditAction.TAG_CREATE,
    )
    assert result is None
    assert db_session.query(models.AuditLog).count() == 0


def test_audit_failures_do_not_propagate(db_session, agent, monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("database unavailable")

    monkeypatch.setattr(crud, "create_audit_log", boom)
    result = audit.log_data_access(
        db_session,
        actor_user_id=agent.id,
        client_id=None,
        access_type=AccessType.VIEW,
        action=AuditAction.CLIENT_LIST,
    )
    assert result is None


def test_audit_log_stats_counts(db_session, agent):
    audit.log_admin_action(db_session, actor_user_id=agent.id, action=AuditAction.ERROR_ADMIN_USERS)
    audit.log_admin_action(db_session, actor_user_id=agent.id, action=AuditAction.UNAUTHORIZED_MODIFY_USER)
    audit.log_admin_action(db_session, actor_user_id=None, action=AuditAction.VIEW_ADMIN_USERS)
    stats = crud.get_audit_log_stats(db_session)
    assert stats["total"] == 3
    assert stats["today"] == 3
    assert stats["errors"] == 1
    assert stats["unauthorized"] == 1
    assert stats["unique_actors"] == 1


def test_search_audit_logs_matches_action_and_target(db_session, agent):
    audit.log_admin_action(db_session, actor_user_id=agent.id, action=AuditAction.VIEW_ADMIN_SETTINGS,
                           table_name="admin_settings")
    audit.log_change(db_session, actor_user_id=agent.id, target_type="tag", target_id=None,
                     action=AuditAction.TAG_CREATE)
    by_target = crud.search_audit_logs(db_session, search="admin_settings")
    assert [r.action_type for r in by_target] == ["VIEW_ADMIN_SETTINGS"]
    by_action = crud.search_audit_logs(db_session, action="tag_")
    assert [r.action_type for r in by_action] == ["tag_create"]


def test_backoffice_search_treats_wildcards_literally(db_session, agent):
    audit.log_admin_action(db_session, actor_user_id=agent.id, action=AuditAction.VIEW_ADMIN_USERS, table_name="users")
    assert len(crud.search_audit_logs(db_session, search="admin")) == 1
    assert crud.search_audit_logs(db_session, search="%") == []
    assert crud.search_audit_logs(db_session, action="VIEW_ADMIN%") == []
