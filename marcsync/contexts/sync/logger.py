"""
Sync context logger.

Provides logging interface for the sync context with automatic [sync] prefix.
All sync modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path

from loguru import logger

from marcsync.utils.logger import setup_logger as _setup_logger
from marcsync.utils.text_processing import truncate_display

CONTEXT_PREFIX = "[sync]"


def setup_sync_logger(log_dir: Path, command: str = "show") -> Path:
    """
    Setup logger for sync context.

    Args:
        log_dir: Directory for this session
        command: CLI command name for provenance

    Returns:
        Path to log file
    """
    return _setup_logger(
        context_name="sync",
        log_dir=log_dir,
        extra_provenance={"Command": command},
    )


# Wrapper functions with automatic [sync] prefix


def _log_info(message: str) -> None:
    """Log info message with [sync] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [sync] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [sync] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [sync] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [sync] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level sync-specific logging helpers


def log_transition(edited_name: str, failed_names: list) -> None:
    """Log the outcome of one transition at debug level."""
    if failed_names:
        _log_debug(f"Transition from {edited_name}: failed slots {', '.join(failed_names)}")
    else:
        _log_debug(f"Transition from {edited_name}: all slots consistent")


def log_slot_failure(target_name: str, kind: str, message: str) -> None:
    """Log a single slot failure; only the first line of the message is kept."""
    first_line = message.splitlines()[0] if message else ""
    _log_warning(f"{target_name} slot failed ({kind}): {truncate_display(first_line, 120)}")
