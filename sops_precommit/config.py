"""
Global configuration and environment handling.

This module is responsible for:
- Defining global constants and defaults
- Binding command-line options to SOPS_PRE_COMMIT_* environment variables
- Providing normalized, ready-to-use settings

Nothing in this file should depend on:
- the filesystem
- the sops config structure
- rule evaluation

Precedence is always: explicit flag, then environment, then default.
"""

from __future__ import annotations

import argparse
import logging
import os
from dataclasses import dataclass
from typing import Dict, Final, Mapping, Optional

from .errors import ConfigError

# ---------------------------------------------------------------------------
# Tool versioning
# ---------------------------------------------------------------------------

TOOL_VERSION: Final[str] = "0.1.0"

# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

SOPS_CONFIG_FILE: Final[str] = ".sops.yaml"
MAX_CONFIG_DEPTH: Final[int] = 100

DEFAULT_LOG_LEVEL: Final[str] = "info"
DEFAULT_SOPS_BINARY: Final[str] = "sops"
DEFAULT_CONFIG_ROOT: Final[str] = "."

# ---------------------------------------------------------------------------
# Environment variable names
# ---------------------------------------------------------------------------

ENV_PREFIX: Final[str] = "SOPS_PRE_COMMIT"

LOG_LEVELS: Final[Dict[str, int]] = {
    "trace": logging.DEBUG,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "fatal": logging.CRITICAL,
    "critical": logging.CRITICAL,
    "panic": logging.CRITICAL,
}

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def env_key(option: str) -> str:
    """Return the environment variable bound to a command-line option.

    >>> env_key("log-level")
    'SOPS_PRE_COMMIT_LOG_LEVEL'
    """
    return f"{ENV_PREFIX}_{option.replace('-', '_').upper()}"


def parse_log_level(name: str) -> int:
    """
    Map a textual level name to a logging level.

    Raises:
        ConfigError: if the name is not a known level
    """

    try:
        return LOG_LEVELS[name.strip().lower()]
    except KeyError:
        raise ConfigError(f"not a valid log level: {name!r}") from None


def parse_bool(option: str, value: str) -> bool:
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ConfigError(f"invalid boolean for {env_key(option)}: {value!r}")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Settings:
    log_level: int
    allow_empty: bool
    config_root: str
    sops_binary: str
    silent: bool
    color: bool


def _string_option(
    option: str,
    flag_value: Optional[str],
    environ: Mapping[str, str],
    default: str,
) -> str:
    if flag_value is not None:
        return flag_value
    return environ.get(env_key(option), default)


def _bool_option(
    option: str,
    flag_value: Optional[bool],
    environ: Mapping[str, str],
) -> bool:
    if flag_value:
        return True
    raw = environ.get(env_key(option))
    if raw is None:
        return False
    return parse_bool(option, raw)


def load_settings(
    args: argparse.Namespace,
    environ: Optional[Mapping[str, str]] = None,
) -> Settings:
    """
    Resolve parsed arguments against the environment.

    Boolean flags can only switch a feature on from the command line, so an
    unset flag defers to the environment.

    Raises:
        ConfigError: on an unknown log level or malformed boolean

    Returns:
        Settings
    """

    environ = os.environ if environ is None else environ

    level_name = _string_option("log-level", args.log_level, environ, DEFAULT_LOG_LEVEL)

    return Settings(
        log_level=parse_log_level(level_name),
        allow_empty=_bool_option("allow-empty", args.allow_empty, environ),
        config_root=_string_option("config-root", args.config_root, environ, DEFAULT_CONFIG_ROOT),
        sops_binary=_string_option("sops-binary", args.sops_binary, environ, DEFAULT_SOPS_BINARY),
        silent=_bool_option("silent", args.silent, environ),
        color=not _bool_option("no-color", args.no_color, environ),
    )
