#!/usr/bin/env python3
"""Trivial benchmark target: ``sample_workload.py N`` loops N times.

Usage with pkgbench::

    pkgbench measure --cmd "python scripts/sample_workload.py" -r 1 10 100
"""

from __future__ import annotations

import sys


def main(argv: list[str]) -> int:
    print("Hello! This is the pkgbench sample workload.")
    if not argv:
        print("No arguments given")
        return 1
    try:
        count = int(argv[0])
    except ValueError:
        count = 0
    if count < 1:
        print("Argument must be a positive integer")
        return 1
    for i in range(count):
        print(f"Hello, world number {i}!")
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
