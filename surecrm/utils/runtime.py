"""Runtime environment helpers for the development impersonation mode."""

import os
from typing import Optional, Set, Tuple
from urllib.parse import urlparse

_LOCAL_HOSTS: Set[str] = {"localhost", "127.0.0.1", "::1"}

DEV_USER_EMAIL = "dev@localhost"
DEV_USER_NAME = "Development Agent"


def _hostname_of(url_value: str) -> Optional[str]:
    if not url_value or not url_value.strip():
        return None
    url_value = url_value.strip()
    candidate = url_value if "://" in url_value else f"http://{url_value}"
    return urlparse(candidate).hostname


def allowed_dev_hosts() -> Set[str]:
    """Hosts on which DEV_MODE may be switched on."""
    allowed = set(_LOCAL_HOSTS)
    extra = os.getenv("DEV_MODE_ALLOWED_HOSTS", "")
    allowed.update(h.strip().lower() for h in extra.split(",") if h.strip())
    return allowed


def dev_mode_requested() -> bool:
    return os.getenv("DEV_MODE", "false").strip().lower() == "true"


def dev_mode_active() -> bool:
    """Return True when DEV_MODE is on and allowed for this deployment.

    DEV_MODE signs every request in as ``dev@localhost``. It is refused when
    APP_BASE_URL points anywhere but a local (or whitelisted) host, so a
    staging or production deployment cannot silently impersonate an agent.
    """
    if not dev_mode_requested():
        return False

    hostname = _hostname_of(os.getenv("APP_BASE_URL", ""))
    allowed = allowed_dev_hosts()
    if hostname:
        if hostname.lower() not in allowed:
            raise RuntimeError(
                "DEV_MODE=true is not permitted when APP_BASE_URL points to "
                f"'{hostname}'. Allowed hosts: {sorted(allowed)}"
            )
        return True

    if os.getenv("ALLOW_DEV_MODE", "false").lower() != "true" and not os.getenv("PYTEST_CURRENT_TEST"):
        raise RuntimeError(
            "DEV_MODE=true requires APP_BASE_URL to be set to a localhost URL "
            "or ALLOW_DEV_MODE=true for non-local execution."
        )
    return True


def dev_identity() -> Tuple[str, str]:
    """(display name, email) used for requests while dev mode is active."""
    return DEV_USER_NAME, DEV_USER_EMAIL
