"""
Example 01: Enveloped Saw - an ADSR shaping a band-limited oscillator

Pulls one envelope value and one oscillator sample per step and multiplies
them, the way a single synth voice would. Prints a coarse amplitude trace.

Copyright (c) 2026 R. Dunbar Poor, Andy Milburn and synthcore contributors
MIT License
"""

import numpy as np

import synthcore as sc
sc.set_sample_rate(44100)

from synthcore import (
    BandLimitedOscillator,
    BLOscMode,
    EnvelopeGenerator,
    pitch_to_freq,
)

# Configuration
SAMPLE_RATE = 44100
A3 = 57  # 220 Hz

print("=== synthcore Example 01: Enveloped Saw ===", flush=True)

env = EnvelopeGenerator.from_seconds(
    gated=True,
    attack_time=0.010,
    attack_shape=0.5,
    decay_time=0.200,
    decay_shape=0.8,
    decay_level=0.4,
    release_time=0.300,
    release_shape=0.8,
)
osc = BandLimitedOscillator(BLOscMode.SAW)
freq = float(pitch_to_freq(A3))

# Gate high for half a second, then low for half a second
gate = np.concatenate([np.ones(SAMPLE_RATE // 2), np.zeros(SAMPLE_RATE // 2)])
amp = env.render_gate(gate).data[:, 0]
saw = osc.render(freq, len(gate)).data[:, 0]
voice = amp * saw

block = SAMPLE_RATE // 20
for i in range(0, len(voice), block):
    peak = float(np.max(np.abs(voice[i:i + block])))
    print(f"  {i / SAMPLE_RATE:5.2f}s  {'#' * int(peak * 40):<40}  {peak:.3f}", flush=True)
