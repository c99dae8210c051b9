"""Run a shell command under the timing utility."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from pkgbench._safe_subprocess import PIPE, SubprocessError, format_command, safe_run
from pkgbench.bench.repetitions import Repetition
from pkgbench.config import TimerSettings
from pkgbench.contracts.error import MeasurementFailure

logger = logging.getLogger(__name__)

NULL_SINK = "/dev/null"


@dataclass(frozen=True, slots=True)
class CommandOutcome:
    """Captured streams and exit status of one timed invocation."""

    argv: tuple[str, ...]
    stdout: str
    stderr: str
    returncode: int

    @property
    def success(self) -> bool:
        return self.returncode == 0

    @property
    def command_repr(self) -> str:
        return format_command(self.argv)


def build_command_line(command: str, repetition: Repetition) -> str:
    """Return the shell line for one sample; the command's stdout is discarded."""

    line = command if repetition.is_trivial else f"{command} {repetition.count}"
    return f"{line} > {NULL_SINK}"


def timed_argv(
    command: str, repetition: Repetition, *, timer: TimerSettings, verbose: bool
) -> tuple[str, ...]:
    return (
        timer.binary,
        *timer.flags(verbose),
        timer.shell,
        "-c",
        build_command_line(command, repetition),
    )


def run_timed(
    command: str,
    repetition: Repetition,
    *,
    timer: TimerSettings,
    verbose: bool = False,
    timeout: float | None = None,
) -> CommandOutcome:
    argv = timed_argv(command, repetition, timer=timer, verbose=verbose)
    logger.debug("Timing %r with %s repetitions", command, repetition)
    try:
        completed = safe_run(list(argv), stdout=PIPE, stderr=PIPE, timeout=timeout)
    except SubprocessError as exc:
        raise MeasurementFailure(str(exc), hint=f"is {timer.binary} installed?") from exc
    return CommandOutcome(
        argv=argv,
        stdout=completed.stdout or "",
        stderr=completed.stderr or "",
        returncode=completed.returncode,
    )


__all__ = ["CommandOutcome", "NULL_SINK", "build_command_line", "run_timed", "timed_argv"]
