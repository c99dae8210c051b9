from __future__ import annotations

import sys
from typing import cast

import pytest

from pkgbench._safe_subprocess import STDOUT, SubprocessError, format_command, safe_run


def test_safe_run_timeout() -> None:
    with pytest.raises(SubprocessError, match="timed out"):
        safe_run([sys.executable, "-c", "import time; time.sleep(2)"], timeout=0.1)


def test_safe_run_success() -> None:
    result = safe_run([sys.executable, "-c", "print('ok')"])
    assert result.returncode == 0
    assert "ok" in (result.stdout or "")


def test_safe_run_merges_env() -> None:
    result = safe_run(
        [sys.executable, "-c", "import os; print(os.getenv('SAFE_SUBPROC_FLAG'))"],
        env={"SAFE_SUBPROC_FLAG": "demo"},
    )
    assert (result.stdout or "").strip() == "demo"


def test_safe_run_returns_failure_without_check() -> None:
    result = safe_run([sys.executable, "-c", "import sys; sys.exit(3)"])
    assert result.returncode == 3


def test_safe_run_raises_on_failure_with_check() -> None:
    with pytest.raises(SubprocessError) as excinfo:
        safe_run([sys.executable, "-c", "import sys; sys.exit(3)"], check=True)
    assert "exit 3" in str(excinfo.value)


def test_safe_run_combines_streams() -> None:
    result = safe_run(
        [sys.executable, "-c", "import sys; print('out'); print('err', file=sys.stderr)"],
        stderr=STDOUT,
    )
    assert "out" in result.stdout
    assert "err" in result.stdout
    assert result.stderr is None


def test_safe_run_validates_args_sequence() -> None:
    with pytest.raises(ValueError):
        safe_run(())
    with pytest.raises(ValueError):
        safe_run(["echo", cast(str, 123)])


def test_safe_run_missing_executable() -> None:
    with pytest.raises(SubprocessError, match="Failed to spawn"):
        safe_run(["__nonexistent_executable__"])


def test_format_command_quotes_parts() -> None:
    assert format_command(["sh", "-c", "app 10 > /dev/null"]) == "sh -c 'app 10 > /dev/null'"
