"""Feature flag helpers for runtime configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, Literal, TypedDict, cast


FeatureFlagKey = Literal[
    "audit_logging_enabled",
    "backoffice_enabled",
    "data_masking_enabled",
]


class FeatureFlagValues(TypedDict):
    audit_logging_enabled: bool
    backoffice_enabled: bool
    data_masking_enabled: bool


@dataclass(frozen=True)
class FeatureFlagDefinition:
    env_var: str
    default: bool


_FEATURE_FLAG_DEFINITIONS: Dict[FeatureFlagKey, FeatureFlagDefinition] = {
    "audit_logging_enabled": FeatureFlagDefinition("FEATURE_AUDIT_LOGGING_ENABLED", True),
    "backoffice_enabled": FeatureFlagDefinition("FEATURE_BACKOFFICE_ENABLED", True),
    "data_masking_enabled": FeatureFlagDefinition("FEATURE_DATA_MASKING_ENABLED", True),
}


def _normalize_bool(value: str | None, default: bool = True) -> bool:
    """Return normalized boolean from environment-style value."""
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"", "0", "false", "no", "off"}:
        return False
    if normalized in {"1", "true", "yes", "on"}:
        return True
    return default


@lru_cache(maxsize=None)
def get_feature_flags() -> FeatureFlagValues:
    """Return the cached feature flag state sourced from the environment."""
    values: Dict[FeatureFlagKey, bool] = {}
    for key, definition in _FEATURE_FLAG_DEFINITIONS.items():
        values[key] = _normalize_bool(os.getenv(definition.env_var), default=definition.default)
    return cast(FeatureFlagValues, values)


def is_feature_enabled(flag: FeatureFlagKey) -> bool:
    return get_feature_flags()[flag]


def audit_logging_enabled() -> bool:
    """Toggle for writing audit rows on data access and admin actions."""
    return is_feature_enabled("audit_logging_enabled")


def backoffice_enabled() -> bool:
    """Toggle for the /admin backoffice pages."""
    return is_feature_enabled("backoffice_enabled")


def data_masking_enabled() -> bool:
    """Toggle for privacy-level masking of client display fields."""
    return is_feature_enabled("data_masking_enabled")


def refresh_feature_flag_cache() -> None:
    """Invalidate cached feature flag values (useful for tests)."""
    get_feature_flags.cache_clear()
