"""
Change set collection.

This module is responsible for:
- taking file paths from command-line arguments
- reading a newline-delimited file list piped on stdin

This module does NOT:
- look at the files themselves
- load the sops config
"""

from __future__ import annotations

import logging
import os
from typing import List, Optional, Sequence, TextIO

from .errors import InputError, NoFilesError
from .utils import trim_quotes

logger = logging.getLogger(__name__)


def parse_stdin(stream: TextIO) -> List[str]:
    """
    Read one candidate path per line from a piped stream.

    Blank lines are dropped and a single pair of wrapping double quotes
    is removed from each entry.

    Raises:
        InputError: if the stream is a terminal or nothing was piped
    """

    if stream.isatty():
        raise InputError("no input or input device")

    # Read raw bytes when possible; file names need not be valid UTF-8.
    buffer = getattr(stream, "buffer", None)
    data = os.fsdecode(buffer.read()) if buffer is not None else stream.read()
    if not data:
        raise InputError("no input or input device")

    files: List[str] = []
    for line in data.split("\n"):
        if line.endswith("\r"):
            line = line[:-1]
        if line:
            files.append(trim_quotes(line))
    return files


def collect_files(
    args: Sequence[str],
    stream: Optional[TextIO] = None,
    allow_empty: bool = False,
) -> List[str]:
    """
    Return the change set, from arguments when given, otherwise from stdin.

    Raises:
        InputError: if stdin is unusable
        NoFilesError: if the change set is empty and allow_empty is off
    """

    if args:
        files = list(args)
    else:
        if stream is None:
            raise InputError("no input or input device")
        logger.debug("No file arguments, reading change set from stdin")
        files = parse_stdin(stream)

    if not files and not allow_empty:
        raise NoFilesError(f"no files: {files}")

    return files
