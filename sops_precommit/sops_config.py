"""
sops config discovery and loading.

This module answers one question:
    "Which creation rules does this repository declare?"

Responsibilities:
- Locate the .sops.yaml file by walking up from a root directory
- Load and validate the creation_rules section
- Expose a clean Python representation

This module does NOT:
- Match files
- Decrypt data
- Parse key groups or any other part of the config sops itself consumes
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from .config import MAX_CONFIG_DEPTH, SOPS_CONFIG_FILE
from .errors import ConfigLookupError, RuleMatchError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Data models
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ConfigLookup:
    path: Optional[Path] = None

    @property
    def found(self) -> bool:
        return self.path is not None

    def __str__(self) -> str:
        return str(self.path) if self.path is not None else ""


@dataclass
class CreationRule:
    path_regex: str = ""
    # Everything else in the rule (keys, encrypted_regex, ...) is sops' business.
    extra: Dict[str, Any] = field(default_factory=dict)


@dataclass
class SopsConfig:
    path: Path
    # None when the file declares no creation_rules at all.
    creation_rules: Optional[List[CreationRule]]

    @property
    def directory(self) -> Path:
        return Path(os.path.abspath(self.path.parent))


# ---------------------------------------------------------------------------
# Discovery
# ---------------------------------------------------------------------------


def find_config_file(root: Union[str, Path] = ".") -> ConfigLookup:
    """
    Look for .sops.yaml in root and then in each parent directory.

    The search gives up after MAX_CONFIG_DEPTH levels. The returned path is
    relative to root the same way the search walked it (root/../.sops.yaml).

    Raises:
        ConfigLookupError: if root is not a readable directory

    Returns:
        ConfigLookup, with path=None when no config exists
    """

    root = Path(root)
    if not root.is_dir():
        raise ConfigLookupError(f"config search root is not a directory: {root}")

    candidate_dir = root
    for _ in range(MAX_CONFIG_DEPTH):
        candidate = candidate_dir / SOPS_CONFIG_FILE
        try:
            if candidate.is_file():
                logger.debug("Found sops config at %s", candidate)
                return ConfigLookup(candidate)
        except OSError as e:
            raise ConfigLookupError(f"failed to stat {candidate}: {e}") from e
        candidate_dir = candidate_dir / ".."

    logger.warning("No sops config found in repo, testing all files.")
    return ConfigLookup()


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


def load_sops_config(path: Union[str, Path]) -> SopsConfig:
    """
    Load the creation rules from a sops config file.

    Raises:
        RuleMatchError: if the file cannot be read or is malformed

    Returns:
        SopsConfig
    """

    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh)
    except OSError as e:
        raise RuleMatchError(f"error loading config: {e}") from e
    except yaml.YAMLError as e:
        raise RuleMatchError(f"error loading config: invalid YAML in {path}: {e}") from e

    return _from_dict(path, raw)


def _from_dict(path: Path, data: Any) -> SopsConfig:
    if data is None:
        return SopsConfig(path=path, creation_rules=None)

    if not isinstance(data, dict):
        raise RuleMatchError(f"error loading config: {path} is not a mapping")

    rules_raw = data.get("creation_rules")
    if rules_raw is None:
        return SopsConfig(path=path, creation_rules=None)

    if not isinstance(rules_raw, list):
        raise RuleMatchError(f"error loading config: creation_rules in {path} must be a list")

    rules: List[CreationRule] = []
    for idx, rule in enumerate(rules_raw):
        if not isinstance(rule, dict):
            raise RuleMatchError(f"error loading config: creation rule #{idx} in {path} is not a mapping")

        path_regex = rule.get("path_regex")
        if path_regex is None:
            path_regex = ""
        elif not isinstance(path_regex, str):
            raise RuleMatchError(f"error loading config: path_regex of creation rule #{idx} must be a string")

        rules.append(
            CreationRule(
                path_regex=path_regex,
                extra={k: v for k, v in rule.items() if k != "path_regex"},
            )
        )

    return SopsConfig(path=path, creation_rules=rules)
