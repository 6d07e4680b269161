"""
sops-backed implementation of the rule matcher and decryption ports.
"""

from __future__ import annotations

import logging
from typing import Optional, Union
from pathlib import Path

from .config import DEFAULT_SOPS_BINARY
from .decrypt import run_sops_decrypt
from .rules import MatchStatus, RuleEngine, RuleMatch
from .sops_config import load_sops_config

logger = logging.getLogger(__name__)


class SopsClient:
    def __init__(
        self,
        conf_path: Optional[Union[str, Path]] = None,
        binary: str = DEFAULT_SOPS_BINARY,
    ):
        self.conf_path = str(conf_path) if conf_path else ""
        self.binary = binary

        # Lazy-loaded
        self._engine: Optional[RuleEngine] = None

    @property
    def engine(self) -> RuleEngine:
        """Load the creation rules on first use."""
        if self._engine is None:
            self._engine = RuleEngine(load_sops_config(self.conf_path))
        return self._engine

    def has_conf(self) -> bool:
        return self.conf_path != ""

    def match(self, path: str) -> RuleMatch:
        return self.engine.evaluate(path)

    def is_file_match_creation_rule(self, path: str) -> bool:
        result = self.match(path)
        if result.status is MatchStatus.NO_MATCH:
            logger.debug(
                "File: %s doesn't match any sops config creation_rule regex. Skipping.",
                path,
            )
        elif result.status is MatchStatus.NO_RULES:
            logger.debug("Config %s declares no creation rules, skipping %s", self.conf_path, path)
        return result.matched

    def file(self, path: str, ext: str) -> bytes:
        return run_sops_decrypt(path, ext, binary=self.binary)
