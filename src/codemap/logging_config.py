"""loguru setup shared by the CLI, the MCP server and the engine."""

import os
import sys

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
)

_logging_configured = False


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").lower() in ("1", "true", "yes")


def setup_logging(level="INFO", suppress_console=None, enable_file_logging=None):
    """
    Install codemap's loguru sinks. Later calls are no-ops until reset_logging().

    Args:
        level: Minimum level for the stderr sink
        suppress_console: Drop the stderr sink; defaults to CODEMAP_MACHINE_MODE
        enable_file_logging: Add a rotating sink under .codemap/logs/;
            defaults to CODEMAP_FILE_LOGGING
    """
    global _logging_configured

    if _logging_configured:
        return
    _logging_configured = True

    logger.remove()

    if suppress_console is None:
        suppress_console = _env_flag("CODEMAP_MACHINE_MODE")
    if enable_file_logging is None:
        enable_file_logging = _env_flag("CODEMAP_FILE_LOGGING")

    if not suppress_console:
        logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT, colorize=True)

    if enable_file_logging:
        from codemap.paths import get_paths

        paths = get_paths()
        paths.ensure_dirs()
        logger.add(
            paths.logs_dir / "codemap.log",
            level="INFO",
            rotation="10 MB",
            retention="1 day",
            compression="gz",
            catch=True,
        )


def reset_logging():
    """Let the next setup_logging() call replace the installed sinks."""
    global _logging_configured
    _logging_configured = False


# Machine mode is read from the environment at import time
setup_logging()
