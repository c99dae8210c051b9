"""Safe wrappers for standard-library subprocess functions."""

from __future__ import annotations

import logging
import os
import shlex
import subprocess  # noqa: S404  # nosec B404 - subprocess usage governed via validation helpers
from collections.abc import Mapping, MutableMapping, Sequence

logger = logging.getLogger(__name__)

PIPE = subprocess.PIPE
STDOUT = subprocess.STDOUT
DEVNULL = subprocess.DEVNULL


class SubprocessError(RuntimeError):
    """Raised when a subprocess call times out or exits with a failure status."""


def _merge_env(env: Mapping[str, str] | None) -> MutableMapping[str, str] | None:
    if env is None:
        return None
    merged: dict[str, str] = dict(os.environ)
    merged.update(env)
    return merged


def _validate_args(args: Sequence[str]) -> list[str]:
    if not isinstance(args, list | tuple) or not args:
        raise ValueError("args must be a non-empty sequence of strings")
    if not all(isinstance(arg, str) for arg in args):
        raise ValueError("all subprocess arguments must be strings")
    return list(args)


def format_command(args: Sequence[str]) -> str:
    return " ".join(shlex.quote(part) for part in args)


def safe_run(
    args: Sequence[str],
    *,
    cwd: str | None = None,
    timeout: float | None = None,
    stdout: int | None = PIPE,
    stderr: int | None = PIPE,
    check: bool = False,
    env: Mapping[str, str] | None = None,
) -> subprocess.CompletedProcess[str]:
    """Run a subprocess to completion and return its captured text streams.

    ``timeout`` of ``None`` waits for the child indefinitely. Pass ``stderr=STDOUT``
    to capture both streams combined in ``stdout``.
    """

    command = _validate_args(args)
    cmd_repr = format_command(command)
    logger.debug("Executing command: %s (timeout=%s)", cmd_repr, timeout)
    try:
        completed = subprocess.run(  # noqa: S603  # nosec B603 - command validated via _validate_args
            command,
            cwd=cwd,
            env=_merge_env(env),
            stdout=stdout,
            stderr=stderr,
            text=True,
            timeout=timeout,
            check=check,
        )
    except subprocess.TimeoutExpired as exc:
        logger.warning("Command timed out after %.1fs: %s", timeout, cmd_repr)
        raise SubprocessError(f"Command timed out after {timeout:.1f}s: {cmd_repr}") from exc
    except subprocess.CalledProcessError as exc:
        logger.warning(
            "Command failed (exit %s): %s\nstdout:\n%s\nstderr:\n%s",
            exc.returncode,
            cmd_repr,
            exc.stdout or "",
            exc.stderr or "",
        )
        raise SubprocessError(
            f"Command failed (exit {exc.returncode}): {cmd_repr}\n"
            f"stdout:\n{exc.stdout or ''}\n"
            f"stderr:\n{exc.stderr or ''}"
        ) from exc
    except OSError as exc:
        logger.error("Failed to spawn process %s: %s", cmd_repr, exc)
        raise SubprocessError(f"Failed to spawn {cmd_repr}: {exc}") from exc

    if completed.returncode != 0:
        logger.warning("Command exited with code %s: %s", completed.returncode, cmd_repr)
    else:
        logger.debug("Command succeeded: %s", cmd_repr)
    return completed


__all__ = [
    "DEVNULL",
    "PIPE",
    "STDOUT",
    "SubprocessError",
    "format_command",
    "safe_run",
]
