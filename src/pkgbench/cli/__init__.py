"""pkgbench command-line interface."""

from .app import build_parser, configure_logging, console_main, emit_success, main
from .commands import CLIContext, build_report, register_subcommands, write_report

__all__ = [
    "CLIContext",
    "build_parser",
    "build_report",
    "configure_logging",
    "console_main",
    "emit_success",
    "main",
    "register_subcommands",
    "write_report",
]
