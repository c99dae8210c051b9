from __future__ import annotations

from pathlib import Path

import pytest

from tools.check_subprocess_safety import find_violations, main

ROOT = Path(__file__).resolve().parents[1]


def test_repository_is_clean(capsys: pytest.CaptureFixture[str]) -> None:
    assert main([str(ROOT)]) == 0
    assert "passed" in capsys.readouterr().out


def test_direct_spawn_is_flagged(tmp_path: Path) -> None:
    pkg = tmp_path / "src" / "demo"
    pkg.mkdir(parents=True)
    (pkg / "bad.py").write_text(
        "import subprocess\nsubprocess.run('ls', shell=True)\n", encoding="utf-8"
    )
    violations = find_violations(tmp_path)
    assert violations == [("src/demo/bad.py", ["shell=True", "direct-spawn"])]
    assert main([str(tmp_path)]) == 2
