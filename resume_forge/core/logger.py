import os
import sys
from pathlib import Path

from loguru import logger

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)


def _load_env_file(env_file: Path | None = None) -> None:
    """Export KEY=VALUE pairs from a .env file without overriding the existing environment."""
    env_file = env_file or Path.cwd() / ".env"
    if not env_file.exists():
        return
    for raw_line in env_file.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, value = line.partition("=")
        key = key.removeprefix("export ").strip()
        os.environ.setdefault(key, value.strip().strip("\"'"))


def _configure_logger() -> None:
    """Send logs to stderr, and to a rotating file when LOG_FILE is set."""
    _load_env_file()

    log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
    log_file = os.environ.get("LOG_FILE")

    logger.remove()
    logger.add(sys.stderr, level=log_level, format=LOG_FORMAT, colorize=True, backtrace=True, diagnose=True)
    if log_file:
        logger.add(log_file, level=log_level, format=LOG_FORMAT, colorize=False, rotation="10 MB", retention=5)


# Configure logger on import
_configure_logger()
