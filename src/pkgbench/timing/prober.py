"""Single-run smoke test executed before a sweep."""

from __future__ import annotations

import logging
import sys
from typing import TextIO

from pkgbench._safe_subprocess import PIPE, STDOUT, SubprocessError, safe_run

logger = logging.getLogger(__name__)


def probe_command(
    command: str,
    *,
    shell: str = "sh",
    timeout: float | None = None,
    out: TextIO | None = None,
) -> bool:
    """Run ``<command> 1`` once, untimed, and report whether it succeeded."""

    stream = out if out is not None else sys.stdout
    line = f"{command} 1"
    print(f"Testing validity of '{shell} -c \"{line}\"' command ... ", end="", file=stream)
    stream.flush()

    try:
        completed = safe_run([shell, "-c", line], stdout=PIPE, stderr=STDOUT, timeout=timeout)
    except SubprocessError as exc:
        print("failure", file=stream)
        print(f"Command {shell} -c \"{line}\" failed: {exc}", file=stream)
        return False

    if completed.returncode == 0:
        print("ok", file=stream)
        return True

    print("failure", file=stream)
    print(f"Command {shell} -c \"{line}\" failed: exit {completed.returncode}", file=stream)
    print("Output:", file=stream)
    print(completed.stdout or "", file=stream)
    logger.warning("Probe of %r failed with exit %s", command, completed.returncode)
    return False


__all__ = ["probe_command"]
