#!/usr/bin/env python3
"""Fail-fast guard against unsafe subprocess patterns.

Benchmarked commands are always handed to ``sh -c`` as a single argument by
``pkgbench._safe_subprocess``; nothing else may spawn processes directly.
"""

from __future__ import annotations

import re
import sys
from pathlib import Path

ROOTS = ("src", "scripts")
ALLOW_FILES = {
    "src/pkgbench/_safe_subprocess.py",
}
PATTERN_SHELL_TRUE = re.compile(r"shell\s*=\s*True", re.IGNORECASE)
PATTERN_DIRECT_SPAWN = re.compile(
    r"\b(?:subprocess\.(?:run|Popen|call|check_call|check_output)|os\.system|os\.popen)\s*\("
)


def _check_file(path: Path, rel: str) -> list[str]:
    try:
        text = path.read_text(encoding="utf-8", errors="ignore")
    except OSError:
        return []
    hits: list[str] = []
    if PATTERN_SHELL_TRUE.search(text):
        hits.append("shell=True")
    if rel not in ALLOW_FILES and PATTERN_DIRECT_SPAWN.search(text):
        hits.append("direct-spawn")
    return hits


def find_violations(root: Path) -> list[tuple[str, list[str]]]:
    failures: list[tuple[str, list[str]]] = []
    for top in ROOTS:
        top_path = root / top
        if not top_path.exists():
            continue
        for file_path in sorted(top_path.rglob("*.py")):
            rel = file_path.relative_to(root).as_posix()
            issues = _check_file(file_path, rel)
            if issues:
                failures.append((rel, issues))
    return failures


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    root = Path(args[0]) if args else Path.cwd()
    failures = find_violations(root)
    if failures:
        print("Unsafe subprocess usage detected:")
        for rel, issues in failures:
            print(f"  - {rel}: {', '.join(issues)}")
        print("Use pkgbench._safe_subprocess.safe_run and avoid shell=True.")
        return 2
    print("Subprocess safety checks passed.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
