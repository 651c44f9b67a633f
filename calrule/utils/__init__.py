"""Utility functions and helpers package."""

from .logging import apply_command_line_overrides, get_log_level, setup_logging

__all__ = [
    "apply_command_line_overrides",
    "get_log_level",
    "setup_logging",
]
