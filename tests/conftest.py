import stat
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
if SRC.exists():
    sys.path.insert(0, str(SRC))

# Register shared Hypothesis profiles for deterministic CI runs and fast local loops.
from tests.util import hypothesis_profiles  # noqa: E402,F401  pylint: disable=unused-import

FAKE_TIMER = """#!/bin/sh
# Stand-in for /usr/bin/time: skip flags, run the wrapped shell, report fixed timings.
while [ "$#" -gt 0 ] && [ "$1" != "sh" ]; do
  shift
done
"$@"
status=$?
printf '        1.50 real\\n        1.20 user\\n        0.30 sys\\n' >&2
printf 'maximum resident set size 1024\\n' >&2
exit $status
"""


@pytest.fixture
def fake_timer(tmp_path: Path) -> Path:
    """Executable that mimics the timing utility's stderr report."""

    path = tmp_path / "fake_time"
    path.write_text(FAKE_TIMER, encoding="utf-8")
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep developer defaults files and env overrides out of the tests."""

    for key in ("PKGBENCH_CONFIG", "PKGBENCH_TIME_BINARY", "PKGBENCH_VERBOSE", "PKGBENCH_TIMEOUT"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)


def pytest_configure(config: pytest.Config) -> None:
    """Ensure custom marks remain registered even when pyproject isn't picked up."""
    config.addinivalue_line("markers", "subprocess: tests that spawn real child processes")


