"""Benchmark harness for packaged applications driven by the system timer."""

from . import bench, contracts, report, timing

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "bench",
    "contracts",
    "report",
    "timing",
]
