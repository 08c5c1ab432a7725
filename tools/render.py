#!/usr/bin/env python3
"""
Command-line renderer and analyzer.

Usage:
    python tools/render.py <subcommand> [options]

Subcommands:
    one-shot                  Render a single 808 to WAV
    analyze <wav>             Print pitch / envelope features of a sample
    resynth <wav>             Analyze a sample and render an 808 tuned to it

Options (one-shot):
    --params <json>           ParameterSet fields as a JSON file
    --seed <int>              Fixed seed (default: time-based)
    --descriptor tok=amt      Descriptor token with intensity, repeatable
    --bit-depth <16|24|32>    Export bit depth (default: BOOM808_BIT_DEPTH or 24)
    --output <path>           Output WAV path
"""
import sys
import os
import json
import time
import hashlib
import argparse
import logging

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from boom808.core.io import AudioIO
from boom808.core.types import RenderedAudio
from boom808.instruments.kick808 import Kick808Engine
from boom808.analysis.features import FeatureExtractor
from boom808.analysis.resynth import ResynthKnobs, params_from_analysis
from boom808.params.descriptors import apply_descriptors
from boom808.params.engine_params import EXPORT_BIT_DEPTH, LOG_LEVEL, SUPPORTED_BIT_DEPTHS

logger = logging.getLogger("boom808")


def _fingerprint(audio: RenderedAudio) -> dict:
    """SHA256 of the raw samples plus peak/RMS, for comparing renders."""
    data = audio.samples
    rms = float((data.astype("float64") ** 2).mean() ** 0.5) if data.size else 0.0
    return {
        "sha256": hashlib.sha256(data.tobytes()).hexdigest(),
        "peak": audio.peak,
        "rms": rms,
    }


def _parse_descriptors(items) -> dict:
    selections = {}
    for item in items or []:
        token, _, amount = item.partition("=")
        try:
            selections[token.strip()] = float(amount) if amount else 1.0
        except ValueError:
            logger.warning("Ignoring descriptor %r (intensity is not a number)", item)
    return selections


def _write(audio: RenderedAudio, path: str, bit_depth: int) -> int:
    if not AudioIO.save_wav(audio, audio.sample_rate, path, bit_depth=bit_depth):
        print(f"Failed to write {path}", file=sys.stderr)
        return 1
    fp = _fingerprint(audio)
    print(f"Output: {path}")
    print(f"Fingerprint SHA256: {fp['sha256'][:16]}...")
    print(f"Peak: {fp['peak']:.4f}, RMS: {fp['rms']:.4f}")
    return 0


def cmd_one_shot(args) -> int:
    """Render a single one-shot."""
    if args.params:
        with open(args.params, "r") as f:
            params = json.load(f)
    else:
        params = {}
    params["seed"] = args.seed if args.seed is not None else params.get("seed", time.time_ns())

    resolved = apply_descriptors(params, _parse_descriptors(args.descriptor))
    audio = Kick808Engine().render(resolved)

    print(f"\n=== Render Complete ===")
    print(f"Seed: {resolved.seed}")
    print(f"Samples: {audio.num_samples} x {audio.num_channels} @ {audio.sample_rate:g} Hz")
    return _write(audio, args.output or f"808_{resolved.seed}.wav", args.bit_depth)


def cmd_analyze(args) -> int:
    samples, sample_rate = AudioIO.load_mono(args.wav)
    result = FeatureExtractor().analyze(samples, sample_rate)
    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
        return 0
    if result.is_pitched:
        print(f"Pitch: {result.dominant_frequency_hz:.2f} Hz ({result.note_name})")
    else:
        print("Pitch: undetermined")
    print(f"RMS: {result.rms:.4f}  A: {result.attack_time_seconds:.3f}s  R: {result.release_time_seconds:.3f}s")
    return 0


def cmd_resynth(args) -> int:
    samples, sample_rate = AudioIO.load_mono(args.wav)
    analysis = FeatureExtractor().analyze(samples, sample_rate)
    params = params_from_analysis(analysis, ResynthKnobs(), seed=args.seed)
    audio = Kick808Engine().render(params)
    print(f"Tune: {params.tune_semitones:+.2f} st  Seed: {params.seed}")
    return _write(audio, args.output or "resynth.wav", args.bit_depth)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Render and analyze 808s")
    sub = parser.add_subparsers(dest="command", required=True)

    p_one = sub.add_parser("one-shot", help="Render a single 808")
    p_one.add_argument("--params", help="JSON file with ParameterSet fields")
    p_one.add_argument("--seed", type=int, default=None)
    p_one.add_argument("--descriptor", action="append", metavar="TOKEN=INTENSITY")
    p_one.add_argument("--bit-depth", type=int, choices=SUPPORTED_BIT_DEPTHS, default=EXPORT_BIT_DEPTH)
    p_one.add_argument("--output")
    p_one.set_defaults(func=cmd_one_shot)

    p_an = sub.add_parser("analyze", help="Analyze a sample")
    p_an.add_argument("wav")
    p_an.add_argument("--json", action="store_true")
    p_an.set_defaults(func=cmd_analyze)

    p_rs = sub.add_parser("resynth", help="Render an 808 tuned to a sample")
    p_rs.add_argument("wav")
    p_rs.add_argument("--seed", type=int, default=None)
    p_rs.add_argument("--bit-depth", type=int, choices=SUPPORTED_BIT_DEPTHS, default=EXPORT_BIT_DEPTH)
    p_rs.add_argument("--output")
    p_rs.set_defaults(func=cmd_resynth)

    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, LOG_LEVEL, logging.INFO))
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
