from __future__ import annotations

import io

import pytest

from pkgbench.timing.prober import probe_command

pytestmark = pytest.mark.subprocess


def test_probe_success_prints_ok() -> None:
    out = io.StringIO()
    assert probe_command("echo", out=out) is True
    text = out.getvalue()
    assert text.startswith("Testing validity of 'sh -c \"echo 1\"' command ... ")
    assert text.rstrip().endswith("ok")


def test_probe_failure_prints_combined_output() -> None:
    out = io.StringIO()
    command = "echo to-stdout; echo to-stderr >&2; exit 7; :"
    assert probe_command(command, out=out) is False
    text = out.getvalue()
    assert "failure" in text
    assert "exit 7" in text
    assert "to-stdout" in text
    assert "to-stderr" in text


def test_probe_passes_repetition_one() -> None:
    out = io.StringIO()
    assert probe_command('f() { [ "$1" = 1 ]; }; f', out=out) is True
