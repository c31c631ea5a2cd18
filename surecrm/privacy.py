"""
Privacy-level masking helpers.

Client-facing records carry a privacy level. Display values are masked
according to that level unless the viewer has switched on "show
confidential". All helpers are pure and side-effect free apart from reading
the masking feature flag.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from surecrm.utils.feature_flags import data_masking_enabled


class PrivacyLevel(str, Enum):
    PUBLIC = "public"
    RESTRICTED = "restricted"
    PRIVATE = "private"
    CONFIDENTIAL = "confidential"


# Ordered from least to most sensitive.
PRIVACY_LEVEL_ORDER: List[str] = [lvl.value for lvl in PrivacyLevel]

CONFIDENTIAL_PLACEHOLDER = "***"


def _level_value(level: PrivacyLevel | str | None) -> Optional[str]:
    if level is None:
        return None
    if isinstance(level, PrivacyLevel):
        return level.value
    return str(level).strip().lower()


def mask_value(
    value: Optional[str],
    level: PrivacyLevel | str | None,
    show_confidential: bool = False,
) -> Optional[str]:
    """Return the display value of ``value`` for the given privacy level.

    - ``show_confidential`` or a public level leaves the value untouched
    - confidential values collapse to ``***``
    - restricted values longer than four characters keep their first and
      last two characters around ``***``
    - anything else (private, short restricted values, unknown levels) is
      returned unchanged
    """
    if value is None:
        return None
    if show_confidential or not data_masking_enabled():
        return value
    lvl = _level_value(level)
    if lvl == PrivacyLevel.PUBLIC.value:
        return value
    if lvl == PrivacyLevel.CONFIDENTIAL.value:
        return CONFIDENTIAL_PLACEHOLDER
    if lvl == PrivacyLevel.RESTRICTED.value and len(value) > 4:
        return f"{value[:2]}***{value[-2:]}"
    return value


def has_access(resource_level: PrivacyLevel | str, viewer_level: PrivacyLevel | str) -> bool:
    """True when ``viewer_level`` is at least as privileged as ``resource_level``."""
    resource = _level_value(resource_level)
    viewer = _level_value(viewer_level)
    if resource not in PRIVACY_LEVEL_ORDER or viewer not in PRIVACY_LEVEL_ORDER:
        return False
    return PRIVACY_LEVEL_ORDER.index(resource) <= PRIVACY_LEVEL_ORDER.index(viewer)


def mask_email(value: Optional[str]) -> Optional[str]:
    if not value or "@" not in value:
        return value
    local, domain = value.split("@", 1)
    if len(local) > 3:
        return f"{local[:3]}***@{domain}"
    return value


def mask_phone(value: Optional[str]) -> Optional[str]:
    if not value:
        return value
    if len(value) > 7:
        return f"{value[:3]}-****-{value[-4:]}"
    return value


def mask_record(
    data: Mapping[str, Any],
    fields: Sequence[str],
    level: PrivacyLevel | str | None,
    show_confidential: bool = False,
) -> Dict[str, Any]:
    """Copy ``data`` with the listed string fields masked for ``level``."""
    masked = dict(data)
    for field in fields:
        current = masked.get(field)
        if isinstance(current, str):
            masked[field] = mask_value(current, level, show_confidential)
    return masked


def filter_visible(items: Iterable[Any], show_confidential: bool = False) -> List[Any]:
    """Drop items the viewer may not see; confidential ones need the toggle.

    Items may be mappings or objects exposing ``privacy_level``; a missing
    level counts as public.
    """
    viewer_level = PrivacyLevel.CONFIDENTIAL if show_confidential else PrivacyLevel.PRIVATE
    result = []
    for item in items:
        if isinstance(item, Mapping):
            level = item.get("privacy_level")
        else:
            level = getattr(item, "privacy_level", None)
        if has_access(level or PrivacyLevel.PUBLIC, viewer_level):
            result.append(item)
    return result


__all__ = [
    "PrivacyLevel",
    "PRIVACY_LEVEL_ORDER",
    "mask_value",
    "has_access",
    "mask_email",
    "mask_phone",
    "mask_record",
    "filter_visible",
]
