import logging

import pytest

from sops_precommit.cli import build_parser
from sops_precommit.config import env_key, load_settings, parse_bool, parse_log_level
from sops_precommit.errors import ConfigError


def settings_for(argv, environ):
    return load_settings(build_parser().parse_args(argv), environ)


def test_env_key():
    assert env_key("log-level") == "SOPS_PRE_COMMIT_LOG_LEVEL"
    assert env_key("sops-binary") == "SOPS_PRE_COMMIT_SOPS_BINARY"


@pytest.mark.parametrize(
    "name, level",
    [
        ("trace", logging.DEBUG),
        ("debug", logging.DEBUG),
        ("INFO", logging.INFO),
        ("warn", logging.WARNING),
        ("warning", logging.WARNING),
        ("error", logging.ERROR),
        ("fatal", logging.CRITICAL),
        ("panic", logging.CRITICAL),
    ],
)
def test_parse_log_level(name, level):
    assert parse_log_level(name) == level


def test_parse_log_level_unknown():
    with pytest.raises(ConfigError):
        parse_log_level("chatty")


def test_parse_bool():
    assert parse_bool("silent", "Yes") is True
    assert parse_bool("silent", "0") is False
    with pytest.raises(ConfigError, match="SOPS_PRE_COMMIT_SILENT"):
        parse_bool("silent", "maybe")


def test_defaults():
    settings = settings_for([], {})
    assert settings.log_level == logging.INFO
    assert settings.allow_empty is False
    assert settings.config_root == "."
    assert settings.sops_binary == "sops"
    assert settings.silent is False
    assert settings.color is True


def test_environment_fills_unset_options():
    environ = {
        "SOPS_PRE_COMMIT_LOG_LEVEL": "debug",
        "SOPS_PRE_COMMIT_ALLOW_EMPTY": "true",
        "SOPS_PRE_COMMIT_CONFIG_ROOT": "deploy",
        "SOPS_PRE_COMMIT_SOPS_BINARY": "/opt/sops",
        "SOPS_PRE_COMMIT_NO_COLOR": "1",
    }
    settings = settings_for([], environ)
    assert settings.log_level == logging.DEBUG
    assert settings.allow_empty is True
    assert settings.config_root == "deploy"
    assert settings.sops_binary == "/opt/sops"
    assert settings.color is False


def test_flags_win_over_environment():
    environ = {"SOPS_PRE_COMMIT_LOG_LEVEL": "debug", "SOPS_PRE_COMMIT_SOPS_BINARY": "/opt/sops"}
    settings = settings_for(["--log-level", "error", "--sops-binary", "sops3"], environ)
    assert settings.log_level == logging.ERROR
    assert settings.sops_binary == "sops3"


def test_bad_environment_level():
    with pytest.raises(ConfigError):
        settings_for([], {"SOPS_PRE_COMMIT_LOG_LEVEL": "loud"})
