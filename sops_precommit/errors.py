"""
Error types raised by the hook.

Setup, lookup and matching errors abort the run as soon as they are raised.
Decryption errors are collected per file and surfaced once, at the end,
as a single ValidationFailed.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .decrypt import ValidationReport


class SopsPrecommitError(RuntimeError):
    """Base class for every error the hook reports."""


class InputError(SopsPrecommitError):
    """No usable file list could be read."""


class NoFilesError(InputError):
    """The change set is empty."""


class ConfigError(SopsPrecommitError):
    """An option or environment value could not be understood."""


class ConfigLookupError(SopsPrecommitError):
    """Searching for the sops config failed for a reason other than absence."""


class RuleMatchError(SopsPrecommitError):
    """The creation rules could not be evaluated for a file."""


class DecryptError(SopsPrecommitError):
    """A single file failed to decrypt."""

    def __init__(self, path: str, message: str):
        super().__init__(message)
        self.path = path


class ValidationFailed(SopsPrecommitError):
    """At least one file in the change set failed to decrypt."""

    def __init__(self, message: str, report: Optional["ValidationReport"] = None):
        super().__init__(message)
        self.report = report
