import pytest

from surecrm.privacy import (
    PrivacyLevel,
    filter_visible,
    has_access,
    mask_email,
    mask_phone,
    mask_record,
    mask_value,
)
from surecrm.utils.feature_flags import refresh_feature_flag_cache


def test_public_values_are_untouched():
    assert mask_value("Kim Minsu", PrivacyLevel.PUBLIC) == "Kim Minsu"


def test_confidential_values_collapse():
    assert mask_value("Kim Minsu", "confidential") == "***"


def test_restricted_values_keep_edges():
    assert mask_value("010-1234-5678", PrivacyLevel.RESTRICTED) == "01***78"


def test_short_restricted_values_are_untouched():
    assert mask_value("abcd", PrivacyLevel.RESTRICTED) == "abcd"


def test_private_values_are_untouched():
    assert mask_value("Kim Minsu", PrivacyLevel.PRIVATE) == "Kim Minsu"


def test_show_confidential_disables_masking():
    assert mask_value("secret", PrivacyLevel.CONFIDENTIAL, show_confidential=True) == "secret"


def test_none_stays_none():
    assert mask_value(None, PrivacyLevel.CONFIDENTIAL) is None


def test_masking_flag_off_disables_masking(monkeypatch):
    monkeypatch.setenv("FEATURE_DATA_MASKING_ENABLED", "false")
    refresh_feature_flag_cache()
    assert mask_value("secret", PrivacyLevel.CONFIDENTIAL) == "secret"


@pytest.mark.parametrize(
    "resource,viewer,expected",
    [
        ("public", "public", True),
        ("private", "restricted", False),
        ("restricted", "confidential", True),
        ("confidential", "private", False),
        ("unknown", "confidential", False),
    ],
)
def test_has_access_follows_level_order(resource, viewer, expected):
    assert has_access(resource, viewer) is expected


def test_mask_email_and_phone():
    assert mask_email("minsu.kim@example.com") == "min***@example.com"
    assert mask_email("abc@example.com") == "abc@example.com"
    assert mask_phone("010-1234-5678") == "010-****-5678"
    assert mask_phone("1234567") == "1234567"


def test_mask_record_returns_masked_copy():
    data = {"full_name": "Kim Minsu", "phone": "010-1234-5678", "height": 180}
    masked = mask_record(data, ["full_name", "phone", "height"], "confidential")
    assert masked == {"full_name": "***", "phone": "***", "height": 180}
    assert data["full_name"] == "Kim Minsu"


def test_filter_visible_drops_confidential_items():
    class Item:
        def __init__(self, level):
            self.privacy_level = level

    items = [{"privacy_level": "public"}, {"privacy_level": "confidential"}, Item("confidential"), Item("private")]
    visible = filter_visible(items)
    assert len(visible) == 2
    assert filter_visible(items, show_confidential=True) == items
