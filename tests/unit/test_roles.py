import pytest

from surecrm.utils.roles import (
    ADMIN_ROLES,
    ROLE_AGENT,
    ROLE_SYSTEM_ADMIN,
    ROLE_TEAM_ADMIN,
    get_allowed_roles,
    get_role_permissions,
    role_can_access_backoffice,
    role_can_read_all_clients,
    validate_role,
)


def test_agent_permissions():
    perms = get_role_permissions(ROLE_AGENT)
    assert perms["can_manage_own_clients"] is True
    assert perms["can_read_all_clients"] is False
    assert perms["can_access_backoffice"] is False


def test_system_admin_reads_everything():
    assert role_can_read_all_clients(ROLE_SYSTEM_ADMIN)
    assert role_can_access_backoffice(ROLE_SYSTEM_ADMIN)
    assert ADMIN_ROLES == frozenset({ROLE_SYSTEM_ADMIN})


def test_team_admin_has_no_backoffice():
    assert not role_can_access_backoffice(ROLE_TEAM_ADMIN)
    assert not role_can_read_all_clients(ROLE_TEAM_ADMIN)


def test_returned_permissions_are_copies():
    perms = get_role_permissions(ROLE_AGENT)
    perms["can_read_all_clients"] = True
    assert get_role_permissions(ROLE_AGENT)["can_read_all_clients"] is False


def test_unknown_role_is_rejected():
    with pytest.raises(ValueError, match="Unknown role"):
        get_role_permissions("owner")
    with pytest.raises(ValueError, match="Invalid role"):
        validate_role("owner")
    assert get_allowed_roles() == {ROLE_AGENT, ROLE_TEAM_ADMIN, ROLE_SYSTEM_ADMIN}
