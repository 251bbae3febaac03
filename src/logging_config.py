"""
Logging Configuration for Gridiron Sim

The engine modules only create module loggers (logging.getLogger(__name__)) and
never configure handlers themselves. Applications and scripts call one of the
setup functions here once at startup:

- Rotating file handlers so long simulation batches cannot fill the disk
- A colored console handler
- Per-package level control for the engine (game loop vs. play engine)

Usage Example:
    from logging_config import setup_logging, setup_engine_logging

    setup_logging(level="INFO", log_dir="logs")
    setup_engine_logging(level="DEBUG")   # drive results and 4th-down calls

Log Files Created:
- logs/gridiron_sim.log: Main log (INFO+): game start/end, overtime
- logs/gridiron_sim_debug.log: Debug log (DEBUG+): drives, play calls, fallbacks
- logs/gridiron_sim_error.log: Error log (ERROR+)

Each file rotates at 10MB with 5 backups.
"""

import logging
import logging.handlers
import os
from pathlib import Path
from typing import Optional


LOG_FILE_PREFIX = "gridiron_sim"

DETAILED_FORMAT = (
    "%(asctime)s - %(name)s - %(levelname)s - "
    "[%(filename)s:%(lineno)d] - %(funcName)s() - %(message)s"
)
SIMPLE_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
CONSOLE_FORMAT = "%(levelname)s - %(name)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Top-level packages/modules making up the game loop and the play engine
ENGINE_LOGGERS = ("game_management", "shared", "team_management")
PLAY_ENGINE_LOGGERS = ("play_engine", "plays", "penalties")


class ColoredFormatter(logging.Formatter):
    """Console formatter that wraps the level name in an ANSI color"""

    COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
    }
    RESET = '\033[0m'

    def format(self, record):
        color = self.COLORS.get(record.levelname)
        if color is None:
            return super().format(record)
        # format a copy so file handlers never see the escape codes
        colored = logging.makeLogRecord(record.__dict__)
        colored.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(colored)


def _level(level: str) -> int:
    value = logging.getLevelName(level.upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return value


def _rotating_handler(log_dir: str, suffix: str, level: int, log_format: str,
                      max_bytes: int, backup_count: int) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=os.path.join(log_dir, f"{LOG_FILE_PREFIX}{suffix}.log"),
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding='utf-8'
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(log_format, datefmt=DATE_FORMAT))
    return handler


def setup_logging(
    level: str = "INFO",
    log_dir: str = "logs",
    enable_console: bool = True,
    enable_file: bool = True,
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5,
    format_style: str = "detailed"
) -> None:
    """
    Configure the root logger for an application run.

    Call once at startup; calling again replaces the previous handlers.

    Args:
        level: Minimum level for the root logger and the console
        log_dir: Directory for the rotating log files
        enable_console: Log to stderr
        enable_file: Write the main, debug and error log files
        max_bytes: Size at which a log file rotates
        backup_count: Rotated files kept per log
        format_style: "detailed" or "simple" for the main log

    Raises:
        ValueError: If level is not a logging level name
    """
    root_level = _level(level)
    root_logger = logging.getLogger()
    root_logger.setLevel(root_level)
    root_logger.handlers.clear()

    if enable_console:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(root_level)
        console_handler.setFormatter(ColoredFormatter(CONSOLE_FORMAT, datefmt=DATE_FORMAT))
        root_logger.addHandler(console_handler)

    if enable_file:
        Path(log_dir).mkdir(parents=True, exist_ok=True)
        main_format = DETAILED_FORMAT if format_style == "detailed" else SIMPLE_FORMAT
        root_logger.addHandler(_rotating_handler(log_dir, "", logging.INFO, main_format,
                                                 max_bytes, backup_count))
        root_logger.addHandler(_rotating_handler(log_dir, "_debug", logging.DEBUG, DETAILED_FORMAT,
                                                 max_bytes, backup_count))
        root_logger.addHandler(_rotating_handler(log_dir, "_error", logging.ERROR, DETAILED_FORMAT,
                                                 max_bytes, backup_count))

    root_logger.info("Logging initialized - Level: %s, Console: %s, File: %s",
                     level, enable_console, enable_file)


def get_logger(name: str) -> logging.Logger:
    """Logger for a module (pass __name__)"""
    return logging.getLogger(name)


def log_exception(
    logger: logging.Logger,
    exception: Exception,
    context: Optional[dict] = None,
    level: str = "ERROR"
) -> None:
    """
    Log an exception with its traceback and a key=value context suffix.

    Example:
        >>> try:
        ...     simulate_game(home, away, seed=7)
        ... except RuleConfigError as e:
        ...     log_exception(logger, e, context={"seed": 7, "home": home.team_id})
    """
    context_str = ""
    if context:
        context_str = " [" + ", ".join(f"{k}={v}" for k, v in context.items()) + "]"

    logger.log(_level(level), "Exception occurred%s: %s: %s",
               context_str, type(exception).__name__, exception, exc_info=True)


def configure_module_logger(
    module_name: str,
    level: Optional[str] = None,
    propagate: bool = True
) -> logging.Logger:
    """
    Set the level of one package or module logger.

    Args:
        module_name: Logger name, e.g. "game_management.play_caller"
        level: Level for this logger (None inherits from the parent)
        propagate: Pass records on to the root handlers
    """
    logger = logging.getLogger(module_name)
    if level:
        logger.setLevel(_level(level))
    logger.propagate = propagate
    return logger


class LogContext:
    """
    Temporarily change a logger's level inside a with-block.

    Example:
        >>> with LogContext(get_logger("game_management"), "DEBUG"):
        ...     simulate_game(home, away, seed=42)
    """

    def __init__(self, logger: logging.Logger, level: str):
        self.logger = logger
        self.new_level = _level(level)
        self.original_level = logger.level

    def __enter__(self):
        self.logger.setLevel(self.new_level)
        return self.logger

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.logger.setLevel(self.original_level)


# ==================== Engine presets ====================

def setup_engine_logging(level: str = "INFO") -> None:
    """
    Level for the game loop, shared helpers and roster code.

    DEBUG shows drive results, fourth-down decisions and starter fallbacks.
    """
    for name in ENGINE_LOGGERS:
        configure_module_logger(name, level=level)


def setup_play_engine_logging(level: str = "WARNING") -> None:
    """
    Level for the per-play micro-simulator and penalty model.

    These log once per snap at DEBUG, so the default keeps them quiet.
    """
    for name in PLAY_ENGINE_LOGGERS:
        configure_module_logger(name, level=level)


# ==================== Quick setup presets ====================

def setup_production_logging(log_dir: str = "logs") -> None:
    """INFO to files only, simple format"""
    setup_logging(
        level="INFO",
        log_dir=log_dir,
        enable_console=False,
        enable_file=True,
        format_style="simple"
    )


def setup_development_logging(log_dir: str = "logs") -> None:
    """DEBUG to the colored console and to files, detailed format"""
    setup_logging(
        level="DEBUG",
        log_dir=log_dir,
        enable_console=True,
        enable_file=True,
        format_style="detailed"
    )
    setup_play_engine_logging("INFO")


def setup_testing_logging() -> None:
    """WARNING to the console only, so test output stays readable"""
    setup_logging(
        level="WARNING",
        enable_console=True,
        enable_file=False,
        format_style="simple"
    )
