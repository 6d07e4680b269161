"""
Creation rule evaluation and change set filtering.

Given a file path and the loaded creation rules, this module decides
whether sops expects the file to be encrypted.

Rules DO NOT perform actions. They only return decisions.
"""

from __future__ import annotations

import enum
import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Pattern, Protocol, Sequence, Union

from .errors import RuleMatchError
from .sops_config import SopsConfig
from .utils import file_exists

logger = logging.getLogger(__name__)


class MatchStatus(enum.Enum):
    MATCHED = "matched"
    NO_MATCH = "no_match"
    NO_RULES = "no_rules"


@dataclass(frozen=True)
class RuleMatch:
    status: MatchStatus
    rule_index: Optional[int] = None

    @property
    def matched(self) -> bool:
        return self.status is MatchStatus.MATCHED


class RuleEngine:
    def __init__(self, config: SopsConfig):
        self.config = config
        self._compiled: Dict[int, Pattern[str]] = {}

    def pattern(self, idx: int) -> Pattern[str]:
        """Compile the path_regex of rule idx on first use."""
        if idx not in self._compiled:
            try:
                self._compiled[idx] = re.compile(self.config.creation_rules[idx].path_regex)
            except re.error as e:
                raise RuleMatchError(
                    f"can not compile regexp of creation rule #{idx}: {e}"
                ) from e
        return self._compiled[idx]

    def relative_path(self, path: Union[str, Path]) -> str:
        """Strip the absolute config directory from path, as sops does."""
        path_str = str(path)
        prefix = str(self.config.directory) + os.sep
        if path_str.startswith(prefix):
            return path_str[len(prefix):]
        return path_str

    def evaluate(self, path: Union[str, Path]) -> RuleMatch:
        if self.config.creation_rules is None:
            return RuleMatch(MatchStatus.NO_RULES)

        path_str = self.relative_path(path)

        for idx, rule in enumerate(self.config.creation_rules):
            # First match wins; later regexes are never compiled.
            if not rule.path_regex or self.pattern(idx).search(path_str):
                return RuleMatch(MatchStatus.MATCHED, rule_index=idx)

        return RuleMatch(MatchStatus.NO_MATCH)


class SopsRules(Protocol):
    def has_conf(self) -> bool:
        ...

    def is_file_match_creation_rule(self, path: str) -> bool:
        ...


def get_filtered_files(sops: SopsRules, files: Sequence[str]) -> List[str]:
    """
    Keep the files of the change set that sops expects to be encrypted.

    Without a config every file is kept. With one, deleted files are skipped
    and the first matcher error aborts the pass.

    Raises:
        RuleMatchError: propagated from the matcher
    """

    if not sops.has_conf():
        return list(files)

    filtered: List[str] = []
    for path in files:
        if not file_exists(path):
            logger.info("Secret: %s was deleted in this changeset", path)
            continue

        if sops.is_file_match_creation_rule(path):
            filtered.append(path)

    return filtered
