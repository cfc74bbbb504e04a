"""
Tests for BandLimitedOscillator and poly_blep.

Copyright (c) 2026 R. Dunbar Poor and synthcore contributors

MIT License
"""

import math

import numpy as np
import pytest

from synthcore import (
    BandLimitedOscillator,
    BLOscMode,
    ErrorMode,
    InvalidConfigurationError,
    poly_blep,
    set_error_mode,
)

SR = 44100.0


def run(mode, n, frequency=5000.0, phase_offset=0.0, sample_rate=SR):
    osc = BandLimitedOscillator(mode)
    return [osc.generate(frequency, phase_offset, sample_rate) for _ in range(n)]


def naive(mode, t):
    if mode == BLOscMode.SAW:
        return 2.0 * t - 1.0
    return 1.0 if t < 0.5 else -1.0


class TestPolyBlep:

    def test_zero_outside_window(self):
        assert poly_blep(0.5, 0.1) == 0.0
        assert poly_blep(0.1, 0.1) == 0.0
        assert poly_blep(0.9, 0.1) == 0.0

    def test_just_after_edge(self):
        assert poly_blep(0.0, 0.1) == pytest.approx(-1.0)
        assert poly_blep(0.05, 0.1) == pytest.approx(-0.25)

    def test_just_before_edge(self):
        assert poly_blep(0.95, 0.1) == pytest.approx(0.25)
        assert poly_blep(0.999999, 0.1) == pytest.approx(1.0, abs=1e-4)

    def test_zero_increment(self):
        assert poly_blep(0.0, 0.0) == 0.0
        assert poly_blep(0.75, 0.0) == 0.0


class TestBandLimitedOscillatorBasics:

    def test_default_mode_is_sine(self):
        osc = BandLimitedOscillator()
        assert osc.mode == BLOscMode.SINE
        assert osc.phase == 0.0

    @pytest.mark.parametrize("name,mode", [
        ("sine", BLOscMode.SINE),
        ("saw", BLOscMode.SAW),
        ("Square", BLOscMode.SQUARE),
        ("TRIANGLE", BLOscMode.TRIANGLE),
    ])
    def test_mode_from_string(self, name, mode):
        assert BandLimitedOscillator(name).mode == mode

    def test_invalid_mode_raises(self):
        with pytest.raises(InvalidConfigurationError):
            BandLimitedOscillator("pulse")

    def test_invalid_mode_fatal_in_lenient(self):
        set_error_mode(ErrorMode.LENIENT)
        with pytest.raises(InvalidConfigurationError):
            BandLimitedOscillator(3)

    @pytest.mark.parametrize("rate", [0.0, -44100.0])
    def test_non_positive_sample_rate_raises(self, rate):
        osc = BandLimitedOscillator(BLOscMode.SAW)
        with pytest.raises(InvalidConfigurationError, match="sample_rate"):
            osc.generate(440.0, 0.0, rate)

    def test_repr(self):
        assert repr(BandLimitedOscillator("saw")) == "BandLimitedOscillator(mode='saw')"


class TestBandLimitedOscillatorPhase:

    @pytest.mark.parametrize("mode", list(BLOscMode))
    @pytest.mark.parametrize("frequency", [0.0, 440.0, -440.0, 22050.0, 50000.0])
    @pytest.mark.parametrize("phase_offset", [-3.7, -1e-17, 0.0, 0.25, 5.5])
    def test_phase_stays_in_unit_interval(self, mode, frequency, phase_offset):
        osc = BandLimitedOscillator(mode)
        for _ in range(200):
            osc.generate(frequency, phase_offset, SR)
            assert 0.0 <= osc.phase < 1.0

    @pytest.mark.parametrize("rate", [float("nan"), float("inf")])
    def test_non_finite_sample_rate_always_fatal(self, rate):
        set_error_mode(ErrorMode.LENIENT)
        osc = BandLimitedOscillator(BLOscMode.SINE)
        with pytest.raises(InvalidConfigurationError, match="sample_rate"):
            osc.generate(440.0, 0.0, rate)
        assert osc.phase == 0.0
        assert math.isfinite(osc.generate(440.0, 0.0, SR))

    @pytest.mark.parametrize("frequency", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_frequency_strict(self, frequency):
        osc = BandLimitedOscillator(BLOscMode.SAW)
        osc.generate(441.0, 0.0, SR)
        with pytest.raises(InvalidConfigurationError, match="frequency"):
            osc.generate(frequency, 0.0, SR)
        assert osc.phase == pytest.approx(0.01)

    @pytest.mark.parametrize("mode", list(BLOscMode))
    def test_non_finite_inputs_lenient_keep_phase(self, mode):
        set_error_mode(ErrorMode.LENIENT)
        osc = BandLimitedOscillator(mode)
        osc.generate(441.0, 0.0, SR)
        value = osc.generate(float("inf"), float("nan"), SR)
        assert math.isfinite(value)
        assert osc.phase == pytest.approx(0.01)
        for _ in range(50):
            assert math.isfinite(osc.generate(441.0, 0.0, SR))
            assert 0.0 <= osc.phase < 1.0

    def test_phase_advances_by_increment_not_offset(self):
        osc = BandLimitedOscillator(BLOscMode.SINE)
        osc.generate(441.0, 0.3, SR)
        assert osc.phase == pytest.approx(0.01)

    def test_negative_frequency_matches_positive(self):
        assert run(BLOscMode.SAW, 50, frequency=-1000.0) == run(BLOscMode.SAW, 50, frequency=1000.0)

    def test_reset(self):
        osc = BandLimitedOscillator(BLOscMode.TRIANGLE)
        first = [osc.generate(300.0, 0.0, SR) for _ in range(20)]
        osc.reset()
        assert osc.phase == 0.0
        again = [osc.generate(300.0, 0.0, SR) for _ in range(20)]
        assert again == first


class TestBandLimitedOscillatorSine:

    def test_periodicity(self):
        # 441 Hz at 44100 Hz: exactly 100 samples per cycle
        values = run(BLOscMode.SINE, 201, frequency=441.0)
        assert values[100] == pytest.approx(values[0], abs=1e-9)
        assert values[200] == pytest.approx(values[0], abs=1e-9)
        assert values[25] == pytest.approx(1.0, abs=1e-9)

    def test_phase_offset_quarter_cycle(self):
        values = run(BLOscMode.SINE, 1, frequency=441.0, phase_offset=0.25)
        assert values[0] == pytest.approx(1.0)

    def test_phase_offset_wraps(self):
        a = run(BLOscMode.SINE, 10, frequency=441.0, phase_offset=0.25)
        b = run(BLOscMode.SINE, 10, frequency=441.0, phase_offset=-2.75)
        np.testing.assert_allclose(a, b, atol=1e-9)

    def test_bounded(self):
        values = np.array(run(BLOscMode.SINE, 1000, frequency=1234.5))
        assert np.all(np.abs(values) <= 1.0)


class TestBandLimitedOscillatorBlep:
    """5000 Hz at 44100 Hz: dt = 1/8.82, the wrap falls between samples 8 and 9."""

    def test_saw_reference_values(self):
        values = run(BLOscMode.SAW, 10)
        assert values[0] == pytest.approx(0.0, abs=1e-12)
        assert values[1] == pytest.approx(2.0 * 5000.0 / SR - 1.0, abs=1e-9)
        assert values[8] == pytest.approx(0.7816589569, abs=1e-9)
        assert values[9] == pytest.approx(-0.2867836735, abs=1e-9)

    def test_square_reference_values(self):
        values = run(BLOscMode.SQUARE, 10)
        assert values[0] == pytest.approx(0.0, abs=1e-12)
        assert values[2] == pytest.approx(1.0)
        assert values[4] == pytest.approx(0.6519, abs=1e-9)
        assert values[5] == pytest.approx(-0.8319, abs=1e-9)
        assert values[7] == pytest.approx(-1.0)
        assert values[8] == pytest.approx(-0.9676, abs=1e-9)
        assert values[9] == pytest.approx(0.3276, abs=1e-9)

    @pytest.mark.parametrize("mode", [BLOscMode.SAW, BLOscMode.SQUARE])
    def test_corrected_jump_smaller_than_naive(self, mode):
        dt = 5000.0 / SR
        values = run(mode, 10)
        t8 = 8 * dt
        t9 = 9 * dt - 1.0
        naive_jump = abs(naive(mode, t9) - naive(mode, t8))
        corrected_jump = abs(values[9] - values[8])
        assert corrected_jump < naive_jump

    def test_square_falling_edge_corrected(self):
        dt = 5000.0 / SR
        values = run(BLOscMode.SQUARE, 10)
        naive_jump = abs(naive(BLOscMode.SQUARE, 5 * dt) - naive(BLOscMode.SQUARE, 4 * dt))
        assert abs(values[5] - values[4]) < naive_jump

    def test_saw_plateau_far_from_wrap(self):
        # 100 Hz: dt = 1/441, sample 220 sits mid-cycle
        values = run(BLOscMode.SAW, 300, frequency=100.0)
        t = 220.0 / 441.0
        assert values[220] == pytest.approx(2.0 * t - 1.0, abs=1e-9)

    @pytest.mark.parametrize("mode", [BLOscMode.SAW, BLOscMode.SQUARE])
    def test_approximately_bounded(self, mode):
        values = np.array(run(mode, 2000, frequency=3000.0))
        assert np.all(np.isfinite(values))
        assert np.all(np.abs(values) <= 1.5)


class TestBandLimitedOscillatorTriangle:

    def test_first_sample_is_integrated_square(self):
        dt = 100.0 / SR
        values = run(BLOscMode.TRIANGLE, 3, frequency=100.0)
        # square at t=0 is 0.0 after correction, integrator starts at 0
        assert values[0] == pytest.approx(0.0, abs=1e-12)
        assert values[1] == pytest.approx(2.0 * dt * 1.0, abs=1e-12)

    def test_bounded_and_symmetric(self):
        values = np.array(run(BLOscMode.TRIANGLE, 44100, frequency=100.0))
        assert np.all(np.abs(values) < 1.0)
        settled = values[22050:]
        assert settled.max() == pytest.approx(-settled.min(), rel=0.05)

    def test_triangle_state_persists_between_calls(self):
        osc = BandLimitedOscillator(BLOscMode.TRIANGLE)
        a = osc.generate(100.0, 0.0, SR)
        b = osc.generate(100.0, 0.0, SR)
        c = osc.generate(100.0, 0.0, SR)
        assert a < b < c


class TestBandLimitedOscillatorRender:

    def test_render_matches_generate(self):
        osc_a = BandLimitedOscillator(BLOscMode.SQUARE)
        osc_b = BandLimitedOscillator(BLOscMode.SQUARE)
        snip = osc_a.render(5000.0, 64, start=128)
        expected = np.array([osc_b.generate(5000.0, 0.0, SR) for _ in range(64)],
                            dtype=np.float32)
        assert snip.start == 128
        assert snip.duration == 64
        assert snip.channels == 1
        np.testing.assert_array_equal(snip.data[:, 0], expected)

    def test_render_per_sample_frequency(self):
        freqs = np.linspace(100.0, 2000.0, 128)
        osc_a = BandLimitedOscillator(BLOscMode.SAW)
        osc_b = BandLimitedOscillator(BLOscMode.SAW)
        snip = osc_a.render(freqs, 128, sample_rate=48000.0)
        expected = np.array([osc_b.generate(f, 0.0, 48000.0) for f in freqs],
                            dtype=np.float32)
        np.testing.assert_array_equal(snip.data[:, 0], expected)

    def test_render_chunks_are_contiguous(self):
        osc_full = BandLimitedOscillator(BLOscMode.TRIANGLE)
        full = osc_full.render(440.0, 200).data[:, 0]
        osc_chunk = BandLimitedOscillator(BLOscMode.TRIANGLE)
        y1 = osc_chunk.render(440.0, 80).data[:, 0]
        y2 = osc_chunk.render(440.0, 120, start=80).data[:, 0]
        np.testing.assert_array_equal(np.concatenate([y1, y2]), full)

    def test_render_per_sample_phase_offset(self):
        osc = BandLimitedOscillator(BLOscMode.SINE)
        offsets = np.full(4, 0.25)
        out = osc.render(0.0, 4, phase_offset=offsets).data[:, 0]
        np.testing.assert_allclose(out, 1.0, atol=1e-6)

    def test_render_wrong_length_raises(self):
        osc = BandLimitedOscillator(BLOscMode.SAW)
        with pytest.raises(InvalidConfigurationError, match="frequency"):
            osc.render(np.ones(10) * 440.0, 20)

    def test_render_negative_duration_raises(self):
        with pytest.raises(ValueError):
            BandLimitedOscillator().render(440.0, -1)

    def test_render_invalid_sample_rate(self):
        with pytest.raises(InvalidConfigurationError):
            BandLimitedOscillator().render(440.0, 4, sample_rate=0.0)
