"""
Shared utility helpers.

This module contains small, reusable helpers that do not belong
to rule evaluation or decryption orchestration.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Union


# ---------------------------------------------------------------------------
# Filesystem helpers
# ---------------------------------------------------------------------------


def file_exists(path: Union[str, Path]) -> bool:
    """Return True for an existing regular file; directories do not count."""
    return os.path.isfile(path)


# ---------------------------------------------------------------------------
# String helpers
# ---------------------------------------------------------------------------


def trim_quotes(value: str) -> str:
    """Remove one pair of wrapping double quotes, if present."""
    if len(value) >= 2 and value[0] == '"' and value[-1] == '"':
        return value[1:-1]
    return value


# ---------------------------------------------------------------------------
# sops format helpers
# ---------------------------------------------------------------------------

_FORMATS_BY_EXTENSION: Dict[str, str] = {
    ".yaml": "yaml",
    ".yml": "yaml",
    ".json": "json",
    ".env": "dotenv",
    ".ini": "ini",
}


def format_for_extension(ext: str) -> str:
    """Return the sops store format for a file extension (".yaml" -> "yaml")."""
    return _FORMATS_BY_EXTENSION.get(ext.lower(), "binary")


def file_extension(path: str) -> str:
    """
    Return the suffix from the last dot of the final path element.

    Unlike os.path.splitext, a leading dot counts, so ".env" -> ".env".
    """

    name = os.path.basename(path)
    idx = name.rfind(".")
    return name[idx:] if idx >= 0 else ""
