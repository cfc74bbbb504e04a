"""
Configuration and error handling utilities for synthcore.

Copyright (c) 2026 R. Dunbar Poor and synthcore contributors

MIT License
"""

import math
from enum import Enum
from typing import Type, Optional

from synthcore.exceptions import InvalidConfigurationError
from synthcore.logger import get_logger

logger = get_logger(__name__)


class ErrorMode(Enum):
    """
    Error handling mode for synthcore operations.
    
    STRICT: All errors raise exceptions (default, fail-fast)
    LENIENT: Non-fatal errors become warnings, execution continues
    """
    STRICT = "strict"
    LENIENT = "lenient"


# Module-level default error mode
DEFAULT_ERROR_MODE: ErrorMode = ErrorMode.STRICT

# Global sample rate, unset until set_sample_rate() is called
_SAMPLE_RATE: Optional[float] = None


def set_error_mode(mode: ErrorMode) -> None:
    """
    Set the default error mode for all synthcore operations.
    
    Args:
        mode: The error mode to use
    """
    global DEFAULT_ERROR_MODE
    DEFAULT_ERROR_MODE = mode


def get_error_mode() -> ErrorMode:
    """
    Get the current default error mode.
    
    Returns:
        The current error mode
    """
    return DEFAULT_ERROR_MODE


def _check_sample_rate(rate: float) -> None:
    if not (math.isfinite(rate) and rate > 0):
        handle_error(
            f"sample_rate must be a finite value > 0, got {rate}",
            fatal=True,
            exception_class=InvalidConfigurationError,
        )


def set_sample_rate(rate: float) -> None:
    """
    Set the global sample rate used when a sample rate is not passed explicitly.

    Args:
        rate: Sample rate in Hz (finite, > 0)

    Raises:
        InvalidConfigurationError: If rate is not finite and positive
    """
    global _SAMPLE_RATE
    _check_sample_rate(rate)
    _SAMPLE_RATE = rate


def get_sample_rate() -> Optional[float]:
    """Return the global sample rate, or None if it has not been set."""
    return _SAMPLE_RATE


def resolve_sample_rate(sample_rate: Optional[float] = None) -> float:
    """
    Return `sample_rate` if given, else the global sample rate.

    Raises:
        InvalidConfigurationError: If neither is available or the rate is not
            finite and positive
    """
    if sample_rate is None:
        sample_rate = _SAMPLE_RATE
    if sample_rate is None:
        handle_error(
            "Global sample_rate is required but not set. "
            "Call synthcore.set_sample_rate(rate) or pass sample_rate.",
            fatal=True,
            exception_class=InvalidConfigurationError,
        )
    _check_sample_rate(sample_rate)
    return sample_rate


def handle_error(
    message: str,
    fatal: bool = False,
    error_mode: Optional[ErrorMode] = None,
    exception_class: Type[Exception] = RuntimeError,
) -> bool:
    """
    Raise or warn about a bad value, depending on the error mode.

    Fatal problems (values that would put NaN or infinity into a generator's
    output) raise in every mode. Anything else raises under STRICT; under
    LENIENT it is logged as a warning and the caller gets True back, its cue
    to repair the value and carry on.

    Args:
        message: What was wrong, naming the offending parameter
        fatal: Raise even in LENIENT mode
        error_mode: Mode to use instead of the module default
        exception_class: Exception raised (default: RuntimeError; generator
            configuration uses InvalidConfigurationError)

    Returns:
        True when the error was downgraded to a warning

    Raises:
        exception_class: Under STRICT, or whenever fatal=True

    Example:
        # STRICT raises; LENIENT warns and the caller clamps
        if not 0.0 <= decay_level <= 1.0:
            if handle_error("decay_level must be in [0, 1]",
                            exception_class=InvalidConfigurationError):
                decay_level = min(max(decay_level, 0.0), 1.0)

        # A zero-length segment cannot be repaired, so it always raises
        if attack_duration < 1:
            handle_error("attack_duration must be >= 1 samples", fatal=True,
                         exception_class=InvalidConfigurationError)
    """
    mode = error_mode if error_mode is not None else DEFAULT_ERROR_MODE
    if not fatal and mode == ErrorMode.LENIENT:
        logger.warning(message)
        return True
    raise exception_class(message)
