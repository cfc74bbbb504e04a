"""
BandLimitedOscillator - polyBLEP anti-aliased oscillator, one sample per call.

Waveforms:
- sine: plain sin(2*pi*t), nothing to correct
- saw: naive ramp 2t - 1 with a polyBLEP residual at the wrap
- square: +1 / -1 with polyBLEP residuals at t=0 and t=0.5
- triangle: the corrected square run through a leaky integrator (one-pole
  lowpass with coefficient dt), then doubled

Output is not clamped; the polyBLEP residual may overshoot [-1, 1] slightly
next to a discontinuity.

Copyright (c) 2026 R. Dunbar Poor and synthcore contributors

MIT License
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Optional, Union

import numpy as np
from numpy.typing import ArrayLike

from synthcore.config import handle_error, resolve_sample_rate
from synthcore.exceptions import InvalidConfigurationError
from synthcore.snippet import Snippet


class BLOscMode(Enum):
    """Oscillator waveform."""
    SINE = "sine"
    SAW = "saw"
    SQUARE = "square"
    TRIANGLE = "triangle"


def poly_blep(t: float, dt: float) -> float:
    """
    2nd-order polyBLEP residual for a unit step at phase 0.

    t: phase in [0, 1)
    dt: phase increment per sample

    Non-zero only within dt of the discontinuity: just after it (t < dt)
    and just before the wrap (t > 1 - dt).
    """
    if t < dt:
        t /= dt
        return t + t - t * t - 1.0
    elif t > 1.0 - dt:
        t = (t - 1.0) / dt
        return t * t + t + t + 1.0
    return 0.0


def _wrap(t: float) -> float:
    """Fold a phase into [0, 1)."""
    t %= 1.0
    # rounds up to 1.0 for tiny negative t
    if t >= 1.0:
        t -= 1.0
    return t


class BandLimitedOscillator:
    """
    Continuous-phase oscillator with polyBLEP discontinuity correction.

    Args:
        mode: Waveform, a BLOscMode or one of "sine", "saw", "square",
              "triangle" (default: sine)

    Example:
        osc = BandLimitedOscillator(BLOscMode.SAW)
        samples = [osc.generate(440.0, 0.0, 44100.0) for _ in range(64)]
    """

    def __init__(self, mode: Union[BLOscMode, str] = BLOscMode.SINE):
        try:
            self._mode = BLOscMode(mode.lower() if isinstance(mode, str) else mode)
        except ValueError:
            handle_error(
                f"mode must be one of {[m.value for m in BLOscMode]}, got {mode!r}",
                fatal=True,
                exception_class=InvalidConfigurationError,
            )

        self._phase: float = 0.0        # [0, 1)
        self._last_output: float = 0.0  # triangle integrator state

    @property
    def mode(self) -> BLOscMode:
        return self._mode

    @property
    def phase(self) -> float:
        """Phase accumulator, always in [0, 1)."""
        return self._phase

    def reset(self) -> None:
        self._phase = 0.0
        self._last_output = 0.0

    def generate(self, frequency: float, phase_offset: float, sample_rate: float) -> float:
        """
        Produce one sample and advance the phase by |frequency| / sample_rate.

        Args:
            frequency: Frequency in Hz (sign is ignored)
            phase_offset: Offset in cycles added to the phase for this
                          sample only; any value, including negative or > 1
            sample_rate: Sample rate in Hz (> 0)

        Raises:
            InvalidConfigurationError: If sample_rate is not a finite value
                > 0 (always), or frequency / phase_offset is not finite
                (STRICT mode; LENIENT mode treats them as 0)
        """
        if not (math.isfinite(sample_rate) and sample_rate > 0):
            handle_error(
                f"sample_rate must be a finite value > 0, got {sample_rate}",
                fatal=True,
                exception_class=InvalidConfigurationError,
            )
        if not math.isfinite(frequency):
            if handle_error(
                f"frequency must be finite, got {frequency}",
                exception_class=InvalidConfigurationError,
            ):
                frequency = 0.0
        if not math.isfinite(phase_offset):
            if handle_error(
                f"phase_offset must be finite, got {phase_offset}",
                exception_class=InvalidConfigurationError,
            ):
                phase_offset = 0.0

        dt = abs(frequency) / sample_rate
        t = _wrap(self._phase + phase_offset)
        mode = self._mode

        if mode == BLOscMode.SINE:
            v = math.sin(2.0 * math.pi * t)
        elif mode == BLOscMode.SAW:
            v = 2.0 * t - 1.0
            v -= poly_blep(t, dt)
        else:
            # Square, also the triangle's input
            v = 1.0 if t < 0.5 else -1.0
            v += poly_blep(t, dt)
            v -= poly_blep(math.fmod(t + 0.5, 1.0), dt)

            if mode == BLOscMode.TRIANGLE:
                v = dt * v + (1.0 - dt) * self._last_output
                self._last_output = v
                v *= 2.0

        self._phase = _wrap(self._phase + dt)
        return v

    def render(
        self,
        frequency: Union[float, ArrayLike],
        duration: int,
        phase_offset: Union[float, ArrayLike] = 0.0,
        sample_rate: Optional[float] = None,
        start: int = 0,
    ) -> Snippet:
        """
        Pull `duration` successive generate() samples into a mono block.

        Args:
            frequency: Frequency in Hz, or per-sample frequencies (length duration)
            duration: Number of samples (>= 0)
            phase_offset: Phase offset in cycles, or per-sample offsets
            sample_rate: Sample rate in Hz (default: global sample rate)
            start: Sample index stamped on the returned Snippet

        Raises:
            InvalidConfigurationError: On a missing/invalid sample rate or a
                per-sample array whose length is not duration
        """
        if duration < 0:
            raise ValueError(f"duration must be >= 0, got {duration}")
        sr = resolve_sample_rate(sample_rate)
        freq = self._per_sample(frequency, duration, "frequency")
        offset = self._per_sample(phase_offset, duration, "phase_offset")

        out = np.empty(duration, dtype=np.float32)
        for i in range(duration):
            out[i] = self.generate(float(freq[i]), float(offset[i]), sr)
        return Snippet(start, out)

    @staticmethod
    def _per_sample(values: Union[float, ArrayLike], duration: int, name: str) -> np.ndarray:
        arr = np.asarray(values, dtype=np.float64)
        if arr.ndim == 0:
            return np.full(duration, float(arr), dtype=np.float64)
        arr = arr.reshape(-1)
        if arr.shape[0] != duration:
            handle_error(
                f"{name} must be a scalar or have {duration} values, got {arr.shape[0]}",
                fatal=True,
                exception_class=InvalidConfigurationError,
            )
        return arr

    def __repr__(self) -> str:
        return f"BandLimitedOscillator(mode={self._mode.value!r})"
