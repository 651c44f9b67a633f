"""Logging configuration and setup utilities."""

import logging
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any, Union

if TYPE_CHECKING:
    from ..config.settings import CalRuleSettings

ROOT_LOGGER_NAME = "calrule"

# Between DEBUG(10) and INFO(20); selectable with --log-level VERBOSE
VERBOSE = 15
logging.addLevelName(VERBOSE, "VERBOSE")

THIRD_PARTY_LOGGERS = ("dateutil", "pydantic", "yaml")


def get_log_level(level_name: str) -> int:
    """Get numeric log level from a case-insensitive name, VERBOSE included.

    Raises:
        AttributeError: If level name is not recognized
    """
    name = level_name.upper()
    if name == "VERBOSE":
        return VERBOSE
    level = getattr(logging, name)
    if not isinstance(level, int):
        raise AttributeError(f"Unknown log level: {name}")
    return level


class AutoColoredFormatter(logging.Formatter):
    """Console formatter coloring the level name when stderr is a color terminal."""

    LEVEL_COLORS = {
        "DEBUG": "35",
        "VERBOSE": "32",
        "INFO": "34",
        "WARNING": "33",
        "ERROR": "31",
        "CRITICAL": "31;1",
    }

    def __init__(self, *args: Any, enable_colors: bool = True, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.color_mode = self._detect_color_support() if enable_colors else "none"

    @staticmethod
    def _detect_color_support() -> str:
        """Return "truecolor", "basic" or "none" for the attached stderr."""
        isatty = getattr(sys.stderr, "isatty", None)
        if isatty is None or not isatty():
            return "none"

        term = os.environ.get("TERM", "").lower()
        if term == "dumb":
            return "none"
        if os.environ.get("COLORTERM", "").lower() in ("truecolor", "24bit") or "256color" in term:
            return "truecolor"
        return "basic" if "color" in term else "none"

    def _escape(self, level_name: str) -> str:
        code = self.LEVEL_COLORS[level_name]
        if self.color_mode == "truecolor" and code[0] == "3":
            # bright variant of the same color
            code = "9" + code[1:]
        return f"\033[{code}m"

    def format(self, record: logging.LogRecord) -> str:
        formatted = super().format(record)
        level_name = record.levelname
        if self.color_mode == "none" or level_name not in self.LEVEL_COLORS:
            return formatted
        colored = f"{self._escape(level_name)}{level_name}\033[0m"
        return formatted.replace(level_name, colored, 1)


class TimestampedFileHandler(logging.FileHandler):
    """File handler writing one ``<prefix>_<timestamp>.log`` per run, keeping the newest few."""

    def __init__(
        self, log_dir: Union[str, Path], prefix: str = "calrule", max_files: int = 5
    ) -> None:
        self.log_dir = Path(log_dir)
        self.prefix = prefix
        self.max_files = max_files

        self.log_dir.mkdir(parents=True, exist_ok=True)
        run_stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        super().__init__(str(self.log_dir / f"{prefix}_{run_stamp}.log"), encoding="utf-8")

        self.cleanup_old_files()

    def cleanup_old_files(self) -> None:
        """Delete all but the ``max_files`` most recently modified run logs."""
        runs = sorted(
            self.log_dir.glob(f"{self.prefix}_*.log"),
            key=lambda path: path.stat().st_mtime,
            reverse=True,
        )
        for stale in runs[self.max_files :]:
            try:
                stale.unlink()
            except OSError:
                pass  # another process may hold or have removed it


def setup_logging(settings: "CalRuleSettings") -> logging.Logger:
    """Set up the calrule logger from settings.

    Args:
        settings: Settings whose ``logging`` section configures the handlers

    Returns:
        Configured ``calrule`` logger
    """
    log_settings = settings.logging

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(logging.DEBUG)  # handlers filter
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)

    if log_settings.console_enabled:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(get_log_level(log_settings.console_level))
        console_handler.setFormatter(
            AutoColoredFormatter(
                "%(asctime)s - %(levelname)s - %(message)s",
                datefmt="%H:%M:%S",
                enable_colors=log_settings.console_colors,
            )
        )
        logger.addHandler(console_handler)

    if log_settings.file_enabled:
        file_handler = TimestampedFileHandler(
            log_dir=settings.log_dir,
            prefix=log_settings.file_prefix,
            max_files=log_settings.max_log_files,
        )
        file_handler.setLevel(get_log_level(log_settings.file_level))
        location = " - %(funcName)s:%(lineno)d" if log_settings.include_function_names else ""
        file_handler.setFormatter(
            logging.Formatter(
                f"%(asctime)s - %(name)s - %(levelname)s{location} - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(file_handler)
        logger.info(f"Logging to file: {file_handler.baseFilename}")

    third_party_level = get_log_level(log_settings.third_party_level)
    for name in THIRD_PARTY_LOGGERS:
        logging.getLogger(name).setLevel(third_party_level)

    return logger


def apply_command_line_overrides(settings: "CalRuleSettings", args: Any) -> "CalRuleSettings":
    """Apply command-line argument overrides to logging settings.

    Priority: Command-line > Environment > YAML > Defaults. Modifies the
    settings in place and returns them.
    """
    if getattr(args, "log_level", None):
        settings.logging.console_level = args.log_level
        settings.logging.file_level = args.log_level

    if getattr(args, "verbose", False):
        settings.logging.console_level = "VERBOSE"
        settings.logging.file_level = "VERBOSE"

    if getattr(args, "quiet", False):
        settings.logging.console_level = "ERROR"

    if getattr(args, "log_dir", None):
        settings.logging.file_enabled = True
        settings.logging.file_directory = args.log_dir

    if getattr(args, "no_log_colors", False):
        settings.logging.console_colors = False

    return settings
