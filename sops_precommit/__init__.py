"""
sops pre-commit hook

A pre-commit enforcement tool that checks every file sops expects to be
encrypted (per the repository's .sops.yaml creation rules) can actually
be decrypted before it is committed.
"""

__version__ = "0.1.0"

from .client import SopsClient
from .decrypt import ValidationReport, decrypt_files
from .errors import (
    ConfigLookupError,
    DecryptError,
    InputError,
    NoFilesError,
    RuleMatchError,
    SopsPrecommitError,
    ValidationFailed,
)
from .file_lister import collect_files, parse_stdin
from .rules import MatchStatus, RuleEngine, RuleMatch, get_filtered_files
from .sops_config import ConfigLookup, find_config_file, load_sops_config

__all__ = [
    "SopsClient",
    "ValidationReport",
    "decrypt_files",
    "ConfigLookupError",
    "DecryptError",
    "InputError",
    "NoFilesError",
    "RuleMatchError",
    "SopsPrecommitError",
    "ValidationFailed",
    "collect_files",
    "parse_stdin",
    "MatchStatus",
    "RuleEngine",
    "RuleMatch",
    "get_filtered_files",
    "ConfigLookup",
    "find_config_file",
    "load_sops_config",
]
