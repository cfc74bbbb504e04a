"""
Conversion utility functions.

All functions are vectorized and work with numpy arrays or scalars.

Copyright (c) 2026 R. Dunbar Poor, Andy Milburn and synthcore contributors

MIT License
"""

import numpy as np
from numpy.typing import ArrayLike


def pitch_to_freq(
    pitch: ArrayLike,
    reference_pitch: float = 69.0,
    reference_freq: float = 440.0,
) -> np.ndarray:
    """
    Convert pitch number to frequency in Hz (12-tone equal temperament).
    
    Args:
        pitch: Pitch number(s). Can be fractional. A4 = 69, Middle C (C4) = 60
        reference_pitch: Reference pitch number (default: 69.0 for A4)
        reference_freq: Reference frequency in Hz (default: 440.0)
    
    Returns:
        Frequency in Hz
    
    Example:
        >>> pitch_to_freq(69)
        440.0
        >>> pitch_to_freq(60)
        261.6255653...
    """
    pitch = np.asarray(pitch, dtype=np.float64)
    return reference_freq * np.power(2.0, (pitch - reference_pitch) / 12.0)


def samples_to_seconds(samples: ArrayLike, sample_rate: float) -> np.ndarray:
    """
    Convert sample count to seconds.
    
    Args:
        samples: Number of samples
        sample_rate: Sample rate in Hz
    
    Returns:
        Duration in seconds
    
    Example:
        >>> samples_to_seconds(44100, 44100)
        1.0
        >>> samples_to_seconds(22050, 44100)
        0.5
    """
    samples = np.asarray(samples, dtype=np.float64)
    return samples / sample_rate


def seconds_to_samples(seconds: ArrayLike, sample_rate: float) -> np.ndarray:
    """
    Convert seconds to sample count.
    
    Args:
        seconds: Duration in seconds
        sample_rate: Sample rate in Hz
    
    Returns:
        Number of samples (float, caller may want to round)
    
    Example:
        >>> seconds_to_samples(1.0, 44100)
        44100.0
        >>> seconds_to_samples(0.5, 44100)
        22050.0
    """
    seconds = np.asarray(seconds, dtype=np.float64)
    return seconds * sample_rate
