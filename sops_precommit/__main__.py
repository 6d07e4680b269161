"""
Main entry point for running the hook as a module.

Usage:
    git diff --cached --name-only | python -m sops_precommit
    python -m sops_precommit secrets/a.yaml secrets/b.json
"""

from .cli import main
import sys

if __name__ == "__main__":
    sys.exit(main())
