import pytest

from surecrm.utils.feature_flags import (
    FeatureFlagKey,
    get_feature_flags,
    is_feature_enabled,
    refresh_feature_flag_cache,
)

_ENV_FLAG_MAPPING = {
    "FEATURE_AUDIT_LOGGING_ENABLED": "audit_logging_enabled",
    "FEATURE_BACKOFFICE_ENABLED": "backoffice_enabled",
    "FEATURE_DATA_MASKING_ENABLED": "data_masking_enabled",
}


@pytest.fixture(autouse=True)
def reset_flags(monkeypatch):
    """Clear env + cached values for each test to avoid cross-contamination."""
    for env_name in _ENV_FLAG_MAPPING:
        monkeypatch.delenv(env_name, raising=False)
    refresh_feature_flag_cache()
    yield
    refresh_feature_flag_cache()


def test_get_feature_flags_defaults_true():
    flags = get_feature_flags()
    assert flags == {
        "audit_logging_enabled": True,
        "backoffice_enabled": True,
        "data_masking_enabled": True,
    }


@pytest.mark.parametrize(
    "env_name,flag_key",
    list(_ENV_FLAG_MAPPING.items()),
)
def test_individual_flag_disabled_via_env(monkeypatch, env_name: str, flag_key: FeatureFlagKey):
    monkeypatch.setenv(env_name, "false")
    refresh_feature_flag_cache()

    flags = get_feature_flags()
    assert flags[flag_key] is False
    assert is_feature_enabled(flag_key) is False


def test_unrecognized_value_keeps_default(monkeypatch):
    monkeypatch.setenv("FEATURE_BACKOFFICE_ENABLED", "maybe")
    refresh_feature_flag_cache()
    assert is_feature_enabled("backoffice_enabled") is True


def test_cache_requires_refresh(monkeypatch):
    assert is_feature_enabled("audit_logging_enabled") is True
    monkeypatch.setenv("FEATURE_AUDIT_LOGGING_ENABLED", "0")
    assert is_feature_enabled("audit_logging_enabled") is True
    refresh_feature_flag_cache()
    assert is_feature_enabled("audit_logging_enabled") is False
