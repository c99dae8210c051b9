from __future__ import annotations

import argparse
from pathlib import Path

import pytest

from pkgbench.config import (
    OPTIONS_FILE,
    BenchSettings,
    TimerSettings,
    load_settings,
    merge_cli,
    resolve_config_path,
)
from pkgbench.contracts.error import BadInputError


def _ns(**kwargs: object) -> argparse.Namespace:
    base = {
        "cmd": None,
        "repetitions": None,
        "verbose": None,
        "timeout": None,
        "time_binary": None,
    }
    base.update(kwargs)
    return argparse.Namespace(**base)


def test_defaults_without_file(tmp_path: Path) -> None:
    settings = load_settings(None, cwd=tmp_path)
    assert settings == BenchSettings()
    assert settings.timer.binary == "/usr/bin/time"
    assert settings.timer.flags(False) == ("-p",)
    assert settings.timer.flags(True) == ("-l", "-p")
    assert settings.timeout is None


def test_defaults_file_in_cwd(tmp_path: Path) -> None:
    (tmp_path / OPTIONS_FILE).write_text(
        """
cmd = "packaged-app"
repetitions = [1, 10, "100"]
verbose = true

[timer]
binary = "/usr/local/bin/gtime"
verbose_flags = "-v"
""",
        encoding="utf-8",
    )
    settings = load_settings(None, cwd=tmp_path)
    assert settings.cmd == "packaged-app"
    assert settings.repetitions == ("1", "10", "100")
    assert settings.verbose is True
    assert settings.timer.binary == "/usr/local/bin/gtime"
    assert settings.timer.verbose_flags == ("-v",)
    assert settings.timer.terse_flags == ("-p",)


def test_trivial_repetition_string(tmp_path: Path) -> None:
    path = tmp_path / "bench.toml"
    path.write_text('repetitions = "I"\n', encoding="utf-8")
    assert load_settings(str(path)).repetitions == ("I",)


def test_explicit_config_must_exist(tmp_path: Path) -> None:
    with pytest.raises(BadInputError, match="not found"):
        load_settings(str(tmp_path / "missing.toml"))


def test_config_env_var(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = tmp_path / "elsewhere.toml"
    path.write_text('first = "a"\nsecond = "b"\n', encoding="utf-8")
    monkeypatch.setenv("PKGBENCH_CONFIG", str(path))
    assert resolve_config_path(None) == (path, True)
    settings = load_settings()
    assert (settings.first, settings.second) == ("a", "b")


@pytest.mark.parametrize(
    "body",
    [
        "repetitions = true\n",
        "verbose = 'sometimes'\n",
        "timeout = -1\n",
        "colour = 'blue'\n",
        "timer = 3\n",
        "[timer]\nflavour = 'gnu'\n",
        "[timer]\nbinary = ''\n",
        "not toml at all [\n",
    ],
)
def test_invalid_files_raise(tmp_path: Path, body: str) -> None:
    path = tmp_path / "bad.toml"
    path.write_text(body, encoding="utf-8")
    with pytest.raises(BadInputError):
        load_settings(str(path))


def test_env_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("PKGBENCH_TIME_BINARY", "/bin/fake-time")
    monkeypatch.setenv("PKGBENCH_VERBOSE", "yes")
    monkeypatch.setenv("PKGBENCH_TIMEOUT", "30")
    settings = load_settings(None, cwd=tmp_path)
    assert settings.timer.binary == "/bin/fake-time"
    assert settings.verbose is True
    assert settings.timeout == 30.0


def test_bad_env_override(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("PKGBENCH_TIMEOUT", "soon")
    with pytest.raises(BadInputError, match="PKGBENCH_TIMEOUT"):
        load_settings(None, cwd=tmp_path)


def test_explicit_flags_win_over_file() -> None:
    settings = BenchSettings(
        cmd="from-file", repetitions=("5",), verbose=True, timer=TimerSettings(shell="bash")
    )
    merged = merge_cli(settings, _ns(cmd="from-flag", repetitions=["1", "2"], time_binary="/t"))
    assert merged.cmd == "from-flag"
    assert merged.repetitions == ("1", "2")
    # Omitted flags keep the file's values.
    assert merged.verbose is True
    assert merged.timer.binary == "/t"
    assert merged.timer.shell == "bash"


def test_settings_are_immutable() -> None:
    settings = BenchSettings()
    with pytest.raises(AttributeError):
        settings.verbose = True  # type: ignore[misc]
