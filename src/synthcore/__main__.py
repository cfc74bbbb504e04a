"""
Entry point for running synthcore as a module

    python -m synthcore adsr --steps 120
    python -m synthcore osc --mode square --frequency 5000 --steps 10

Copyright (c) 2026 R. Dunbar Poor, Andy Milburn and synthcore contributors

MIT License
"""

import argparse
from typing import Optional, Sequence

from synthcore import __version__
from synthcore.adsr import EnvelopeGenerator
from synthcore.blosc import BandLimitedOscillator, BLOscMode
from synthcore.conversions import pitch_to_freq
from synthcore.logger import set_global_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="synthcore",
        description="Pull samples from a synthcore generator and log them.",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (default: INFO)",
    )
    sub = parser.add_subparsers(dest="command")

    adsr = sub.add_parser("adsr", help="Step the reference ADSR envelope")
    adsr.add_argument("--steps", type=int, default=120, help="Samples to pull (default: 120)")

    osc = sub.add_parser("osc", help="Run a band-limited oscillator")
    osc.add_argument(
        "--mode",
        choices=[m.value for m in BLOscMode],
        default=BLOscMode.SAW.value,
        help="Waveform (default: saw)",
    )
    pitch = osc.add_mutually_exclusive_group()
    pitch.add_argument("--frequency", type=float, default=None, help="Frequency in Hz")
    pitch.add_argument("--pitch", type=float, default=None, help="Pitch number (A4 = 69)")
    osc.add_argument("--phase-offset", type=float, default=0.0, help="Phase offset in cycles")
    osc.add_argument("--sample-rate", type=float, default=44100.0, help="Sample rate in Hz")
    osc.add_argument("--steps", type=int, default=64, help="Samples to pull (default: 64)")
    return parser


def run_adsr(steps: int, logger) -> list[float]:
    adsr = EnvelopeGenerator(
        gated=False,
        attack_duration=10,
        attack_shape=0.5,
        decay_duration=6,
        decay_shape=0.8,
        decay_level=0.4,
        sustain_duration=30,
        release_duration=30,
        release_shape=0.8,
    )
    adsr.gate(True)

    values = []
    for i in range(steps):
        value = adsr.step()
        logger.info(f"i = {i} - currentValue {value}")
        values.append(value)
    return values


def run_osc(args: argparse.Namespace, logger) -> list[float]:
    if args.frequency is not None:
        frequency = args.frequency
    elif args.pitch is not None:
        frequency = float(pitch_to_freq(args.pitch))
    else:
        frequency = 440.0

    osc = BandLimitedOscillator(args.mode)
    values = []
    for i in range(args.steps):
        value = osc.generate(frequency, args.phase_offset, args.sample_rate)
        logger.info(f"i = {i} - currentValue {value}")
        values.append(value)
    return values


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point"""
    args = build_parser().parse_args(argv)

    logger = set_global_logging(level=args.log_level)
    logger.info(f"synthcore v{__version__} starting...")

    if args.command == "osc":
        run_osc(args, logger)
    else:
        run_adsr(getattr(args, "steps", 120), logger)

    logger.info("Application completed successfully")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
