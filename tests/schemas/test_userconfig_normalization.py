import pytest

from airmonitor.schemas import CLIConfig, ParamConfig, resolve_config
from airmonitor.schemas.user import UserConfig

pytestmark = [pytest.mark.unit, pytest.mark.schemas]


def test_uppercase_keys_are_handled():
    raw = {
        "BASE_URL": "file:///tmp/archive",
        "PROVIDER": "WRCC",
        "RETRIES": 5,
        "TIMEOUT_SEC": 10,
        "COLUMN_SET": "Minimal",
        "DROP_EMPTY_DAYS": True,
        "VALUE_DIGITS": 2,
        "LOG_LEVEL": "debug",
    }

    user = UserConfig.model_validate(raw)

    assert user.base_url == "file:///tmp/archive"
    assert user.provider == "wrcc"
    assert user.retries == 5
    assert isinstance(user.timeout_sec, float) and user.timeout_sec == 10.0
    assert user.column_set == "minimal"
    assert user.drop_empty_days is True
    assert user.value_digits == 2
    assert user.log_level == "DEBUG"


def test_uppercase_keys_reach_internal_config():
    config = resolve_config(ParamConfig(), {"COLUMN_SET": "all", "DROP_EMPTY_DAYS": True})

    assert config.metadata.column_set == "all"
    assert config.trim.drop_empty_days is True


def test_unknown_keys_are_ignored():
    raw = {"PROVIDER": "airnow", "UNKNOWN_LEGACY": 12345}
    user = UserConfig.model_validate(raw)

    assert user.provider == "airnow"
    # Unknown key should not become an attribute nor raise
    assert not hasattr(user, "UNKNOWN_LEGACY")


def test_empty_user_config_has_no_overrides():
    assert UserConfig().to_internal_overrides() == {}


def test_cli_overrides_only_set_fields():
    cli = CLIConfig(drop_empty_days=True)

    assert cli.to_internal_overrides() == {"trim": {"drop_empty_days": True}}
