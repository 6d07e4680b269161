"""
Command-line interface for the sops pre-commit hook.

This module orchestrates all other components:
- collect the change set
- locate the sops config
- filter the change set by creation rules
- decrypt every remaining file
"""

from __future__ import annotations

import sys
import argparse
import logging
from typing import List, Mapping, Optional, TextIO

from .config import (
    DEFAULT_LOG_LEVEL,
    DEFAULT_CONFIG_ROOT,
    DEFAULT_SOPS_BINARY,
    TOOL_VERSION,
    Settings,
    env_key,
    load_settings,
)
from .client import SopsClient
from .decrypt import decrypt_files
from .errors import SopsPrecommitError
from .file_lister import collect_files
from .rules import get_filtered_files
from .sops_config import find_config_file

logger = logging.getLogger("sops_precommit")


# ---------------------------------------------------------------------------
# Color output helpers
# ---------------------------------------------------------------------------


class Colors:
    """ANSI color codes for terminal output."""
    RED = "\033[91m"
    YELLOW = "\033[93m"
    BLUE = "\033[94m"
    CYAN = "\033[96m"
    RESET = "\033[0m"
    BOLD = "\033[1m"


def colored(text: str, color: str) -> str:
    """Return colored text for terminal output."""
    return f"{color}{text}{Colors.RESET}"


class ColorFormatter(logging.Formatter):
    """Prefix each record with a level marker, colored when enabled."""

    STYLES = {
        logging.DEBUG: ("→", Colors.BLUE),
        logging.INFO: ("ℹ", Colors.CYAN),
        logging.WARNING: ("⚠ Warning:", Colors.YELLOW),
        logging.ERROR: ("✗ Error:", Colors.RED),
        logging.CRITICAL: ("✗ Fatal:", Colors.RED + Colors.BOLD),
    }

    def __init__(self, color: bool = True):
        super().__init__("%(message)s")
        self.color = color

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        marker, color = self.STYLES.get(record.levelno, ("", ""))
        line = f"{marker} {message}" if marker else message
        return colored(line, color) if self.color and color else line


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------


def configure_logging(settings: Settings, stream: Optional[TextIO] = None) -> None:
    """Attach a single stderr handler to the package logger."""
    stream = stream if stream is not None else sys.stderr

    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    color = settings.color and hasattr(stream, "isatty") and stream.isatty()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(ColorFormatter(color=color))
    logger.addHandler(handler)
    logger.propagate = False

    logger.setLevel(logging.ERROR if settings.silent else settings.log_level)


# ---------------------------------------------------------------------------
# Run
# ---------------------------------------------------------------------------


def run(
    settings: Settings,
    files_args: List[str],
    stdin: Optional[TextIO] = None,
) -> int:
    """
    Validate encryption of the change set.

    Raises:
        SopsPrecommitError: on any setup failure or if validation failed
    """

    logger.debug("debug logging enabled")

    files = collect_files(files_args, stdin, allow_empty=settings.allow_empty)
    if not files:
        logger.info("No files in the change set, nothing to validate")
        return 0

    lookup = find_config_file(settings.config_root)
    sops = SopsClient(lookup.path, binary=settings.sops_binary)

    filtered = get_filtered_files(sops, files)
    logger.debug("%d of %d file(s) expected to be encrypted", len(filtered), len(files))

    decrypt_files(sops, filtered)
    return 0


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="sops-precommit",
        description="Check that files sops expects to be encrypted can be decrypted",
        epilog=(
            "Every option can also be set through the environment, e.g. "
            f"{env_key('log-level')}=debug."
        ),
    )

    parser.add_argument(
        "files",
        nargs="*",
        help="Files in the change set (read from stdin when omitted)",
    )
    # Defaults are applied in load_settings so the environment can fill gaps.
    parser.add_argument(
        "--log-level",
        default=None,
        help=f"Configure log level (default: {DEFAULT_LOG_LEVEL})",
    )
    parser.add_argument(
        "--allow-empty",
        action="store_true",
        default=None,
        help="Treat an empty change set as success",
    )
    parser.add_argument(
        "--config-root",
        default=None,
        help=f"Directory to start searching for .sops.yaml (default: {DEFAULT_CONFIG_ROOT})",
    )
    parser.add_argument(
        "--sops-binary",
        default=None,
        help=f"sops executable to decrypt with (default: {DEFAULT_SOPS_BINARY})",
    )
    parser.add_argument(
        "-q", "--silent",
        action="store_true",
        default=None,
        help="Suppress output",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        default=None,
        help="Disable colored output",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {TOOL_VERSION}",
    )

    return parser


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


def main(
    argv: Optional[List[str]] = None,
    stdin: Optional[TextIO] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_settings(args, environ)
    except SopsPrecommitError as e:
        message = f"✗ Error: {e}"
        if not args.no_color and sys.stderr.isatty():
            message = colored(message, Colors.RED)
        print(message, file=sys.stderr)
        return 1

    configure_logging(settings)

    try:
        return run(settings, args.files, stdin if stdin is not None else sys.stdin)
    except KeyboardInterrupt:
        logger.error("Interrupted")
        return 130
    except SopsPrecommitError as e:
        logger.error("%s", e)
        return 1
    except Exception as e:
        logger.error("Unexpected error: %s", e)
        logger.debug("Traceback:", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
