"""
Decryption checks over the filtered change set.

This module runs sops against each file and records whether it could be
decrypted. Decrypted content is discarded; only the outcome matters.

Unlike filtering, this stage never stops early: every file is tried and a
single ValidationFailed is raised at the end if any of them failed.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass, field
from typing import List, Protocol, Sequence

from .config import DEFAULT_SOPS_BINARY
from .errors import DecryptError, ValidationFailed
from .utils import file_extension, format_for_extension

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Outcomes
# ---------------------------------------------------------------------------


@dataclass
class ValidationOutcome:
    path: str
    ok: bool
    message: str = ""


@dataclass
class ValidationReport:
    outcomes: List[ValidationOutcome] = field(default_factory=list)

    @property
    def failed(self) -> List[ValidationOutcome]:
        return [o for o in self.outcomes if not o.ok]

    @property
    def succeeded(self) -> List[ValidationOutcome]:
        return [o for o in self.outcomes if o.ok]

    @property
    def ok(self) -> bool:
        return not self.failed


# ---------------------------------------------------------------------------
# sops invocation
# ---------------------------------------------------------------------------


class Decryption(Protocol):
    def file(self, path: str, ext: str) -> bytes:
        ...


def run_sops_decrypt(path: str, ext: str, binary: str = DEFAULT_SOPS_BINARY) -> bytes:
    """
    Decrypt a file with the sops binary and return the plaintext.

    Raises:
        DecryptError: if sops is missing or exits non-zero
    """

    fmt = format_for_extension(ext)
    cmd = [binary, "--decrypt", "--input-type", fmt, "--output-type", fmt, "--", path]
    logger.debug("Running: %s", " ".join(cmd))

    try:
        result = subprocess.run(cmd, capture_output=True, check=False)
    except OSError as e:
        raise DecryptError(path, f"failed to run {binary}: {e}") from e

    if result.returncode != 0:
        stderr = result.stderr.decode("utf-8", errors="replace").strip()
        raise DecryptError(path, stderr or f"{binary} exited with status {result.returncode}")

    return result.stdout


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def decrypt_files(d: Decryption, files: Sequence[str]) -> ValidationReport:
    """
    Try to decrypt every file and report the result.

    Raises:
        ValidationFailed: if at least one file failed, after all were tried

    Returns:
        ValidationReport
    """

    report = ValidationReport()

    for path in files:
        try:
            d.file(path, file_extension(path))
        except DecryptError as e:
            logger.error("Error decrypting %s: %s", path, e)
            report.outcomes.append(ValidationOutcome(path, ok=False, message=str(e)))
            continue

        logger.info("File: %s encryption validated", path)
        report.outcomes.append(ValidationOutcome(path, ok=True))

    if not report.ok:
        raise ValidationFailed("failed to validate encryption", report=report)

    return report
