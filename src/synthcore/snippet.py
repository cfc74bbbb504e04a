"""
Snippet class for containing blocks of generated samples.

Copyright (c) 2026 R. Dunbar Poor, Andy Milburn and synthcore contributors

MIT License
"""

from __future__ import annotations
import numpy as np
from numpy.typing import NDArray


class Snippet:
    """
    A thin wrapper around a numpy array of samples pulled from a generator.
    
    Data layout: shape (samples, channels). Generators in synthcore are
    mono, so blocks they render have shape (N, 1).
    
    Samples are floating point values: envelope blocks lie in [0.0, 1.0],
    oscillator blocks approximately in [-1.0, 1.0].
    """
    
    def __init__(self, start: int, data: NDArray[np.floating]):
        """
        Create a Snippet.
        
        Args:
            start: Sample index of the first sample in this block
            data: Numpy array of shape (samples,) or (samples, channels)
        
        Raises:
            ValueError: If data is neither 1D nor 2D
        """
        if data.ndim == 1:
            data = data.reshape(-1, 1)
        elif data.ndim != 2:
            raise ValueError(f"data must be 1D or 2D, got {data.ndim}D")
        
        if data.dtype != np.float32:
            data = data.astype(np.float32, copy=False)

        # Zero-length snippets are allowed (duration=0)
        self._start = start
        self._data = data
    
    @property
    def start(self) -> int:
        """Starting sample index of this snippet."""
        return self._start
    
    @property
    def end(self) -> int:
        """Ending sample index (exclusive) of this snippet."""
        return self._start + self._data.shape[0]
    
    @property
    def duration(self) -> int:
        """Number of samples in this snippet."""
        return self._data.shape[0]
    
    @property
    def channels(self) -> int:
        """Number of channels."""
        return self._data.shape[1]
    
    @property
    def data(self) -> NDArray[np.floating]:
        """
        The underlying numpy array of shape (samples, channels).
        
        Note: Returns the actual array, not a copy. Treat as immutable.
        """
        return self._data
    
    def __repr__(self) -> str:
        return (
            f"Snippet(start={self._start}, duration={self.duration}, "
            f"channels={self.channels})"
        )
    
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Snippet):
            return NotImplemented
        return (
            self._start == other._start
            and self._data.shape == other._data.shape
            and np.allclose(self._data, other._data)
        )
