"""
EnvelopeGenerator - sample-by-sample ADSR envelope with shaped segments.

The envelope is a five-state machine (IDLE, ATTACK, DECAY, SUSTAIN, RELEASE)
advanced one sample per step() call. Each segment ramps from the amplitude
the previous segment ended on, so there are no jumps between segments, on
retrigger, or on early release.

Segment curves are `ramp ** shape`: shape 1 is linear, shape < 1 rises fast
then flattens (convex), shape > 1 starts slow (concave).

Copyright (c) 2026 R. Dunbar Poor, Andy Milburn and synthcore contributors

MIT License
"""

from __future__ import annotations

import dataclasses
import math
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional

import numpy as np
from numpy.typing import ArrayLike

from synthcore.config import handle_error, resolve_sample_rate
from synthcore.conversions import seconds_to_samples
from synthcore.exceptions import InvalidConfigurationError
from synthcore.logger import get_logger
from synthcore.snippet import Snippet

logger = get_logger(__name__)


class AdsrState(IntEnum):
    """Envelope lifecycle states, in cycle order."""
    IDLE = 0
    ATTACK = 1
    DECAY = 2
    SUSTAIN = 3
    RELEASE = 4


# Where each state goes when its segment runs out.
_NEXT_STATE = {
    AdsrState.IDLE: AdsrState.IDLE,
    AdsrState.ATTACK: AdsrState.DECAY,
    AdsrState.DECAY: AdsrState.SUSTAIN,
    AdsrState.SUSTAIN: AdsrState.RELEASE,
    AdsrState.RELEASE: AdsrState.IDLE,
}


@dataclass(frozen=True)
class AdsrConfig:
    """
    Envelope shape and timing. Durations are in samples.

    When `gated` is True the envelope holds in SUSTAIN until gate(False) and
    `sustain_duration` is not used. When False, SUSTAIN lasts
    `sustain_duration` samples and RELEASE follows automatically.
    """
    gated: bool = False
    attack_duration: int = 1
    attack_shape: float = 1.0
    decay_duration: int = 1
    decay_shape: float = 1.0
    decay_level: float = 1.0
    sustain_duration: int = 0
    release_duration: int = 1
    release_shape: float = 1.0

    def validated(self) -> AdsrConfig:
        """
        Return a checked copy of this configuration.

        Anything that would put NaN into the output is always fatal: segment
        durations that divide by zero, non-finite durations, shapes and
        decay_level. Fractional durations, non-positive shapes and an out of
        range decay_level go through handle_error(); in LENIENT mode
        durations are rounded to whole samples and decay_level is clamped
        into [0, 1].

        Raises:
            InvalidConfigurationError: On a bad value (always for the fatal
                cases above, in STRICT mode for the rest)
        """
        durations = {}
        for name, minimum in (
            ("attack_duration", 1),
            ("decay_duration", 1),
            ("sustain_duration", 0),
            ("release_duration", 1),
        ):
            value = getattr(self, name)
            if not (math.isfinite(value) and value >= minimum):
                handle_error(
                    f"{name} must be >= {minimum} samples, got {value}",
                    fatal=True,
                    exception_class=InvalidConfigurationError,
                )
            if value != int(value):
                handle_error(
                    f"{name} must be a whole number of samples, got {value}",
                    exception_class=InvalidConfigurationError,
                )
            durations[name] = max(minimum, int(round(value)))

        shapes = {}
        for name in ("attack_shape", "decay_shape", "release_shape"):
            value = float(getattr(self, name))
            if not math.isfinite(value):
                handle_error(
                    f"{name} must be finite, got {value}",
                    fatal=True,
                    exception_class=InvalidConfigurationError,
                )
            if value <= 0.0:
                handle_error(
                    f"{name} must be > 0, got {value}",
                    exception_class=InvalidConfigurationError,
                )
            shapes[name] = value

        decay_level = float(self.decay_level)
        if math.isnan(decay_level):
            handle_error(
                "decay_level must be a number in [0, 1], got nan",
                fatal=True,
                exception_class=InvalidConfigurationError,
            )
        if not 0.0 <= decay_level <= 1.0:
            if handle_error(
                f"decay_level must be in [0, 1], got {decay_level}",
                exception_class=InvalidConfigurationError,
            ):
                decay_level = min(max(decay_level, 0.0), 1.0)

        return dataclasses.replace(
            self,
            gated=bool(self.gated),
            decay_level=decay_level,
            **durations,
            **shapes,
        )


@dataclass
class _Segment:
    remaining: int = 0       # samples left in this segment
    delta: float = 0.0       # amplitude change over the whole segment
    increment: float = 0.0   # ramp advance per sample (1 / duration)
    shape: float = 1.0       # curve exponent
    ramp: float = 0.0        # 0..1 position within the segment


class EnvelopeGenerator:
    """
    ADSR envelope generator producing one amplitude in [0, 1] per step().

    Semantics:
      - gate(True) (re)starts ATTACK from the current amplitude toward 1.0,
        whatever the current state.
      - ATTACK -> DECAY (toward decay_level) -> SUSTAIN -> RELEASE (toward 0)
        -> IDLE, each segment lasting its configured number of samples.
      - gate(False) jumps to RELEASE from the current amplitude, but only for
        a gated envelope in ATTACK, DECAY or SUSTAIN. Anywhere else it is
        ignored.
      - Once a cycle completes the envelope sits in IDLE at exactly 0.0.

    Args:
        gated: Hold SUSTAIN until gate(False) instead of timing it out
        attack_duration: Attack length in samples (>= 1)
        attack_shape: Attack curve exponent (> 0)
        decay_duration: Decay length in samples (>= 1)
        decay_shape: Decay curve exponent (> 0)
        decay_level: Amplitude reached at the end of decay, in [0, 1]
        sustain_duration: Sustain length in samples when not gated (>= 0)
        release_duration: Release length in samples (>= 1)
        release_shape: Release curve exponent (> 0)

    Example:
        env = EnvelopeGenerator(gated=False, attack_duration=10, attack_shape=0.5,
                                decay_duration=6, decay_shape=0.8, decay_level=0.4,
                                sustain_duration=30, release_duration=30,
                                release_shape=0.8)
        env.gate(True)
        values = [env.step() for _ in range(120)]
    """

    def __init__(
        self,
        gated: bool = False,
        attack_duration: int = 1,
        attack_shape: float = 1.0,
        decay_duration: int = 1,
        decay_shape: float = 1.0,
        decay_level: float = 1.0,
        sustain_duration: int = 0,
        release_duration: int = 1,
        release_shape: float = 1.0,
    ):
        self._config = AdsrConfig(
            gated=gated,
            attack_duration=attack_duration,
            attack_shape=attack_shape,
            decay_duration=decay_duration,
            decay_shape=decay_shape,
            decay_level=decay_level,
            sustain_duration=sustain_duration,
            release_duration=release_duration,
            release_shape=release_shape,
        ).validated()
        self.reset()

    @classmethod
    def from_seconds(
        cls,
        gated: bool = False,
        attack_time: float = 0.01,
        attack_shape: float = 1.0,
        decay_time: float = 0.1,
        decay_shape: float = 1.0,
        decay_level: float = 1.0,
        sustain_time: float = 0.0,
        release_time: float = 0.1,
        release_shape: float = 1.0,
        sample_rate: Optional[float] = None,
    ) -> EnvelopeGenerator:
        """
        Build an envelope with segment times given in seconds.

        Times are rounded to whole samples at `sample_rate` (default: the
        global sample rate). Attack, decay and release last at least one
        sample.
        """
        sr = resolve_sample_rate(sample_rate)

        def samps(seconds: float, minimum: int) -> int:
            return max(minimum, int(round(float(seconds_to_samples(seconds, sr)))))

        return cls(
            gated=gated,
            attack_duration=samps(attack_time, 1),
            attack_shape=attack_shape,
            decay_duration=samps(decay_time, 1),
            decay_shape=decay_shape,
            decay_level=decay_level,
            sustain_duration=samps(sustain_time, 0),
            release_duration=samps(release_time, 1),
            release_shape=release_shape,
        )

    @property
    def config(self) -> AdsrConfig:
        """Current (validated) configuration."""
        return self._config

    @property
    def state(self) -> AdsrState:
        return self._state

    @property
    def amplitude(self) -> float:
        """Last emitted amplitude."""
        return self._output

    @property
    def is_idle(self) -> bool:
        return self._state == AdsrState.IDLE

    def configure(self, **changes) -> None:
        """
        Replace configuration fields, e.g. configure(attack_duration=20).

        The new values are validated like constructor arguments and apply
        from the next segment on; a segment already running keeps its length
        and curve.

        Raises:
            TypeError: On an unknown field name
            InvalidConfigurationError: On an invalid value
        """
        self._config = dataclasses.replace(self._config, **changes).validated()

    def reset(self) -> None:
        """Return to IDLE at amplitude 0."""
        self._state = AdsrState.IDLE
        self._segment = _Segment()
        self._amplitude = 0.0   # base amplitude of the running segment
        self._output = 0.0      # last emitted amplitude
        self._prev_gate = False

    def gate(self, on: bool) -> None:
        """
        Gate the envelope on (start ATTACK) or off (start RELEASE).
        """
        if on:
            logger.debug(f"gate on at amplitude {self._output}")
            self._amplitude = self._output
            self._transition(AdsrState.ATTACK)
        elif self._config.gated and AdsrState.IDLE < self._state < AdsrState.RELEASE:
            logger.debug(f"gate off at amplitude {self._output}")
            self._amplitude = self._output
            self._transition(AdsrState.RELEASE)

    def step(self) -> float:
        """
        Advance one sample and return the amplitude, in [0, 1].
        """
        if self._state == AdsrState.IDLE or (
            self._state == AdsrState.SUSTAIN and self._config.gated
        ):
            return self._amplitude

        seg = self._segment
        seg.ramp += seg.increment
        seg.remaining -= 1

        output = self._amplitude + seg.delta * seg.ramp ** seg.shape
        if output < 0.0:
            output = 0.0
        elif output > 1.0:
            output = 1.0
        self._output = output

        if seg.remaining <= 0:
            # The next segment starts where this one ended
            self._amplitude = output
            self._transition(_NEXT_STATE[self._state])

        return output

    def render(self, duration: int, start: int = 0) -> Snippet:
        """
        Pull `duration` successive step() values into a mono block.

        Args:
            duration: Number of samples (>= 0)
            start: Sample index stamped on the returned Snippet
        """
        if duration < 0:
            raise ValueError(f"duration must be >= 0, got {duration}")
        out = np.empty(duration, dtype=np.float32)
        for i in range(duration):
            out[i] = self.step()
        return Snippet(start, out)

    def render_gate(self, gate: ArrayLike, start: int = 0) -> Snippet:
        """
        Render one sample per gate value, gating on rising and off on falling edges.

        The last gate value is remembered between calls, so an edge that falls
        on a block boundary is still seen.

        Args:
            gate: 1D sequence of gate values, exactly 0 or 1
            start: Sample index stamped on the returned Snippet

        Raises:
            ValueError: If gate holds values other than 0 and 1 (STRICT mode;
                LENIENT mode thresholds at 0.5)
        """
        values = np.asarray(gate, dtype=np.float64).reshape(-1)
        ok = np.logical_or(values == 0.0, values == 1.0)
        if not np.all(ok):
            bad = values[~ok]
            handle_error(
                "gate values must be exactly 0 or 1 "
                f"(found min={float(np.min(bad))}, max={float(np.max(bad))})",
                exception_class=ValueError,
            )
        high = values >= 0.5

        out = np.empty(len(high), dtype=np.float32)
        prev = self._prev_gate
        for i, cur in enumerate(high):
            if cur and not prev:
                self.gate(True)
            elif prev and not cur:
                self.gate(False)
            prev = bool(cur)
            out[i] = self.step()
        self._prev_gate = prev
        return Snippet(start, out)

    def _transition(self, new_state: AdsrState) -> None:
        cfg = self._config
        logger.debug(f"{self._state.name.lower()} => {new_state.name.lower()}")
        self._state = new_state

        if new_state == AdsrState.ATTACK:
            self._segment = _Segment(
                remaining=cfg.attack_duration,
                delta=1.0 - self._amplitude,
                increment=1.0 / cfg.attack_duration,
                shape=cfg.attack_shape,
            )
        elif new_state == AdsrState.DECAY:
            self._segment = _Segment(
                remaining=cfg.decay_duration,
                delta=-(self._amplitude - cfg.decay_level),
                increment=1.0 / cfg.decay_duration,
                shape=cfg.decay_shape,
            )
        elif new_state == AdsrState.SUSTAIN:
            # Flat hold; the countdown only matters when not gated
            self._segment = _Segment(remaining=cfg.sustain_duration)
        elif new_state == AdsrState.RELEASE:
            self._segment = _Segment(
                remaining=cfg.release_duration,
                delta=-self._amplitude,
                increment=1.0 / cfg.release_duration,
                shape=cfg.release_shape,
            )
        elif new_state == AdsrState.IDLE:
            self._segment = _Segment()
            self._amplitude = 0.0
            self._output = 0.0
        else:
            raise RuntimeError(f"Unknown ADSR state: {new_state}")

    def __repr__(self) -> str:
        cfg = self._config
        return (
            f"EnvelopeGenerator(gated={cfg.gated}, "
            f"attack={cfg.attack_duration}/{cfg.attack_shape}, "
            f"decay={cfg.decay_duration}/{cfg.decay_shape}, "
            f"decay_level={cfg.decay_level}, sustain={cfg.sustain_duration}, "
            f"release={cfg.release_duration}/{cfg.release_shape}, "
            f"state={self._state.name})"
        )
