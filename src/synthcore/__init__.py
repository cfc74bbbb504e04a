"""
synthcore - per-sample envelope and band-limited oscillator generators.

Copyright (c) 2026 R. Dunbar Poor, Andy Milburn and synthcore contributors

MIT License
"""

from synthcore.config import (
    ErrorMode,
    set_error_mode,
    get_error_mode,
    handle_error,
    set_sample_rate,
    get_sample_rate,
)
from synthcore.exceptions import InvalidConfigurationError
from synthcore.snippet import Snippet
from synthcore.adsr import AdsrConfig, AdsrState, EnvelopeGenerator
from synthcore.blosc import BandLimitedOscillator, BLOscMode, poly_blep
from synthcore.conversions import (
    pitch_to_freq,
    samples_to_seconds,
    seconds_to_samples,
)
from synthcore.logger import set_global_logging, get_logger

__version__ = "0.1.0"

__all__ = [
    # Configuration
    "ErrorMode",
    "set_error_mode",
    "get_error_mode",
    "handle_error",
    "set_sample_rate",
    "get_sample_rate",
    "InvalidConfigurationError",
    # Core classes
    "Snippet",
    "EnvelopeGenerator",
    "BandLimitedOscillator",
    # Enums and configuration types
    "AdsrConfig",
    "AdsrState",
    "BLOscMode",
    # Functions
    "poly_blep",
    "pitch_to_freq",
    "samples_to_seconds",
    "seconds_to_samples",
    # Logging utilities
    "set_global_logging",
    "get_logger",
    # Version
    "__version__",
]
