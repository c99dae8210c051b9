"""Typed settings loader for pkgbench.

Defaults come from ``.pkgbench.toml`` in the invocation directory (or the file
named by ``--config`` / ``PKGBENCH_CONFIG``), then environment overrides, then
explicit command-line flags, which always win.
"""

from __future__ import annotations

import argparse
import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from .contracts.error import BadInputError

OPTIONS_FILE = ".pkgbench.toml"
CONFIG_ENV = "PKGBENCH_CONFIG"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class TimerSettings:
    binary: str = "/usr/bin/time"
    terse_flags: tuple[str, ...] = ("-p",)
    verbose_flags: tuple[str, ...] = ("-l", "-p")
    shell: str = "sh"

    def flags(self, verbose: bool) -> tuple[str, ...]:
        return self.verbose_flags if verbose else self.terse_flags

    def validate(self) -> None:
        if not self.binary:
            raise BadInputError("timer.binary must not be empty")
        if not self.shell:
            raise BadInputError("timer.shell must not be empty")


@dataclass(frozen=True)
class BenchSettings:
    repetitions: tuple[str, ...] | None = None
    verbose: bool = False
    timeout: float | None = None
    cmd: str | None = None
    first: str | None = None
    second: str | None = None
    timer: TimerSettings = field(default_factory=TimerSettings)

    def validate(self) -> None:
        if self.timeout is not None and self.timeout <= 0:
            raise BadInputError("timeout must be > 0 when set")
        self.timer.validate()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> BenchSettings:
        known = {"repetitions", "verbose", "timeout", "cmd", "first", "second", "timer"}
        unknown = sorted(set(data) - known)
        if unknown:
            raise BadInputError(f"Unknown config keys: {', '.join(unknown)}")

        kwargs: dict[str, Any] = {}
        if "repetitions" in data:
            kwargs["repetitions"] = _coerce_repetitions(data["repetitions"])
        if "verbose" in data:
            kwargs["verbose"] = _coerce_bool("verbose", data["verbose"])
        if "timeout" in data:
            kwargs["timeout"] = _coerce_timeout("timeout", data["timeout"])
        for key in ("cmd", "first", "second"):
            if key in data:
                value = data[key]
                if not isinstance(value, str):
                    raise BadInputError(f"{key} must be a string")
                kwargs[key] = value

        timer_data = data.get("timer", {})
        if not isinstance(timer_data, dict):
            raise BadInputError("[timer] section must be a table")
        kwargs["timer"] = _timer_from_dict(timer_data)
        return cls(**kwargs)

    @classmethod
    def load(cls, path: Path | None, *, required: bool = False) -> BenchSettings:
        if path is None or (not required and not path.exists()):
            settings = cls()
        else:
            try:
                data = tomllib.loads(path.read_text(encoding="utf-8"))
            except FileNotFoundError as exc:
                raise BadInputError(f"Config file not found: {path}") from exc
            except tomllib.TOMLDecodeError as exc:
                raise BadInputError(f"Invalid TOML in {path}: {exc}") from exc
            settings = cls.from_dict(data)
        settings = settings.with_env_overrides(os.environ)
        settings.validate()
        return settings

    def with_env_overrides(self, env: Mapping[str, str]) -> BenchSettings:
        updated = self
        raw_binary = env.get("PKGBENCH_TIME_BINARY")
        if raw_binary:
            updated = replace(updated, timer=replace(updated.timer, binary=raw_binary))
        raw_verbose = env.get("PKGBENCH_VERBOSE")
        if raw_verbose is not None:
            updated = replace(updated, verbose=_coerce_bool("PKGBENCH_VERBOSE", raw_verbose))
        raw_timeout = env.get("PKGBENCH_TIMEOUT")
        if raw_timeout is not None:
            updated = replace(updated, timeout=_coerce_timeout("PKGBENCH_TIMEOUT", raw_timeout))
        return updated


def _coerce_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in _TRUE:
            return True
        if normalized in _FALSE:
            return False
    raise BadInputError(f"{name} must be boolean, got {value!r}")


def _coerce_timeout(name: str, value: Any) -> float | None:
    if isinstance(value, str) and value.strip().lower() in {"", "none", "off"}:
        return None
    if isinstance(value, bool):
        raise BadInputError(f"{name} must be a number of seconds")
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise BadInputError(f"{name} must be a number of seconds, got {value!r}") from exc


def _coerce_repetitions(value: Any) -> tuple[str, ...]:
    if isinstance(value, str | int) and not isinstance(value, bool):
        return (str(value),)
    if isinstance(value, list) and all(
        isinstance(item, str | int) and not isinstance(item, bool) for item in value
    ):
        return tuple(str(item) for item in value)
    raise BadInputError("repetitions must be a list of integers or the string 'I'")


def _coerce_flags(name: str, value: Any) -> tuple[str, ...]:
    if isinstance(value, str):
        return tuple(value.split())
    if isinstance(value, list) and all(isinstance(item, str) for item in value):
        return tuple(value)
    raise BadInputError(f"timer.{name} must be a list of strings")


def _timer_from_dict(data: Mapping[str, Any]) -> TimerSettings:
    known = {"binary", "terse_flags", "verbose_flags", "shell"}
    unknown = sorted(set(data) - known)
    if unknown:
        raise BadInputError(f"Unknown [timer] keys: {', '.join(unknown)}")
    kwargs: dict[str, Any] = {}
    for key in ("binary", "shell"):
        if key in data:
            if not isinstance(data[key], str):
                raise BadInputError(f"timer.{key} must be a string")
            kwargs[key] = data[key]
    for key in ("terse_flags", "verbose_flags"):
        if key in data:
            kwargs[key] = _coerce_flags(key, data[key])
    return TimerSettings(**kwargs)


def resolve_config_path(explicit: str | None, cwd: Path | None = None) -> tuple[Path, bool]:
    """Return the config path to load and whether it must exist."""

    chosen = explicit or os.getenv(CONFIG_ENV)
    if chosen:
        return Path(chosen).expanduser(), True
    return (cwd or Path.cwd()) / OPTIONS_FILE, False


def load_settings(explicit: str | None = None, cwd: Path | None = None) -> BenchSettings:
    path, required = resolve_config_path(explicit, cwd)
    return BenchSettings.load(path, required=required)


def merge_cli(settings: BenchSettings, args: argparse.Namespace) -> BenchSettings:
    """Overlay flags the user actually passed (non-``None``) onto ``settings``."""

    overrides: dict[str, Any] = {}
    for key in ("cmd", "first", "second"):
        value = getattr(args, key, None)
        if value is not None:
            overrides[key] = value
    repetitions = getattr(args, "repetitions", None)
    if repetitions is not None:
        overrides["repetitions"] = tuple(str(item) for item in repetitions)
    verbose = getattr(args, "verbose", None)
    if verbose is not None:
        overrides["verbose"] = bool(verbose)
    timeout = getattr(args, "timeout", None)
    if timeout is not None:
        overrides["timeout"] = timeout
    time_binary = getattr(args, "time_binary", None)
    if time_binary is not None:
        overrides["timer"] = replace(settings.timer, binary=time_binary)
    merged = replace(settings, **overrides)
    merged.validate()
    return merged


__all__ = [
    "BenchSettings",
    "CONFIG_ENV",
    "OPTIONS_FILE",
    "TimerSettings",
    "load_settings",
    "merge_cli",
    "resolve_config_path",
]
