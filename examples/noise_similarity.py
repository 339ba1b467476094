#!/usr/bin/env python3
"""Example: How similarity degrades as noise is mixed in.

Fingerprints a reference clip, then scores noisy copies of it against the
reference in both directions. The score is not symmetric, so both are shown.

    python examples/noise_similarity.py
    python examples/noise_similarity.py --audio path/to/clip.wav
"""

import argparse

import numpy as np

from soundprint import calculate_similarity, fingerprint_audio
from soundprint.audio import load_wav


def mix_noise(audio: np.ndarray, level: float) -> np.ndarray:
    """Add white noise at ``level`` times the clip's peak amplitude."""
    peak = float(np.max(np.abs(audio))) or 1.0
    return audio + np.random.uniform(-1.0, 1.0, len(audio)) * peak * level


def main():
    parser = argparse.ArgumentParser(description="Similarity under noise")
    parser.add_argument("--audio", "-a", help="Path to a .wav file (default: synthetic chord)")
    args = parser.parse_args()

    if args.audio:
        audio, sample_rate = load_wav(args.audio)
    else:
        sample_rate = 44100
        t = np.arange(sample_rate * 2) / sample_rate
        audio = 0.3 * (np.sin(2 * np.pi * 220 * t) + np.sin(2 * np.pi * 880 * t))

    reference = fingerprint_audio(audio, sample_rate)
    print(f"Reference: {len(reference.split('|')) if reference else 0} peaks\n")

    for level in [0.0, 0.1, 0.2, 0.3, 0.5, 1.0]:
        noisy = fingerprint_audio(mix_noise(audio, level), sample_rate)
        forward = calculate_similarity(noisy, reference)
        backward = calculate_similarity(reference, noisy)
        print(f"  {level * 100:3.0f}% noise: query->ref {forward:.2f}  ref->query {backward:.2f}")


if __name__ == "__main__":
    main()
