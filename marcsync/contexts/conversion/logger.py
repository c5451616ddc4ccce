"""
Conversion context logger.

Provides logging interface for the conversion context with automatic [convert] prefix.
All conversion modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path

from loguru import logger

from marcsync.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[convert]"


def setup_conversion_logger(log_dir: Path, command: str = "convert") -> Path:
    """
    Setup logger for conversion context.

    Args:
        log_dir: Directory for this conversion session
        command: CLI command name for provenance ("convert", "format", "roundtrip")

    Returns:
        Path to log file
    """
    return _setup_logger(
        context_name="convert",
        log_dir=log_dir,
        extra_provenance={"Command": command},
    )


# Wrapper functions with automatic [convert] prefix


def _log_info(message: str) -> None:
    """Log info message with [convert] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [convert] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [convert] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [convert] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [convert] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level conversion-specific logging helpers


def log_conversion_start(input_path: Path, source_name: str, target_name: str, log_file: Path) -> None:
    """Log start of a file conversion with context."""
    _log_info(f"Converting {input_path.name} from {source_name} to {target_name}")
    _log_info(f"Log file: {log_file}")


def log_conversion_result(result, elapsed_time: float) -> None:
    """
    Log a file conversion result.

    Args:
        result: ConversionResult from convert_file()
        elapsed_time: Time taken in seconds
    """
    if result.success:
        _log_success(f"Conversion succeeded ({elapsed_time:.2f}s)")
        if result.output_path:
            _log_info(f"  Output: {result.output_path}")
    else:
        _log_error(f"Conversion failed ({elapsed_time:.2f}s)")
        _log_error(f"  Error: {result.error}")


def log_roundtrip_result(source_name: str, report: dict) -> None:
    """
    Log a pivot roundtrip report.

    Args:
        source_name: Display name of the source format
        report: Dict returned by validate_roundtrip()
    """
    if report["error"]:
        _log_error(f"{source_name} roundtrip errored out: {report['error']}")
        return

    for target_name, target in report["targets"].items():
        if target["success"]:
            _log_success(f"{source_name} -> {target_name} -> JSON: consistent")
        else:
            _log_warning(f"{source_name} -> {target_name} -> JSON: {target['error'] or 'values differ'}")
