import logging
import os
import stat
import sys
import textwrap
from pathlib import Path

import pytest

# Stand-in for the sops binary: succeeds only for files carrying sops metadata.
FAKE_SOPS = """\
#!/bin/sh
prev=""
last=""
for arg; do prev=$last; last=$arg; done
case "$last" in
    -*)
        if [ "$prev" != "--" ]; then
            echo "unknown flag $last" >&2
            exit 2
        fi
        ;;
esac
if grep -q -e '^sops:' -- "$last"; then
    cat -- "$last"
    exit 0
fi
echo "sops metadata not found" >&2
exit 1
"""

ENCRYPTED_YAML = textwrap.dedent(
    """\
    password: ENC[AES256_GCM,data:abc,iv:def,tag:ghi,type:str]
    sops:
        version: 3.8.1
    """
)

PLAINTEXT_YAML = "password: hunter2\n"


@pytest.fixture(autouse=True)
def reset_package_logger():
    yield
    logger = logging.getLogger("sops_precommit")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def fake_sops(tmp_path: Path) -> str:
    if sys.platform.startswith("win"):
        pytest.skip("fake sops binary is a POSIX shell script")
    path = tmp_path / "bin" / "sops"
    path.parent.mkdir()
    path.write_text(FAKE_SOPS)
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return str(path)


@pytest.fixture
def write_sops_config():
    def _write(directory: Path, content: str) -> Path:
        path = directory / ".sops.yaml"
        path.write_text(textwrap.dedent(content))
        return path

    return _write


@pytest.fixture
def repo(tmp_path: Path, monkeypatch) -> Path:
    root = tmp_path / "repo"
    root.mkdir()
    monkeypatch.chdir(root)
    return root


def touch(path: Path, content: str = "") -> str:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    return os.fspath(path)
