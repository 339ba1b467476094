#!/usr/bin/env python3
"""Example: Fingerprint audio without any files.

This example shows how to feed synthetic samples directly to the library,
useful for:
- Audio decoded by your own code
- Custom audio sources
- Testing and simulation
"""

import numpy as np

from soundprint import Soundprint, extract_audio_features, generate_fingerprint


def generate_tone(frequency: float, duration: float, sample_rate: int) -> np.ndarray:
    """Generate a synthetic tone."""
    t = np.linspace(0, duration, int(sample_rate * duration), dtype=np.float32)
    # Sine wave with envelope
    envelope = np.minimum(1.0, np.minimum(t / 0.01, (duration - t) / 0.01))
    return np.sin(2 * np.pi * frequency * t) * 0.5 * envelope


def generate_silence(duration: float, sample_rate: int) -> np.ndarray:
    """Generate silence."""
    return np.zeros(int(sample_rate * duration), dtype=np.float32)


def main():
    sample_rate = 44100

    # Two-note doorbell: 660Hz then 520Hz
    doorbell = np.concatenate(
        [
            generate_tone(660, 0.4, sample_rate),
            generate_silence(0.1, sample_rate),
            generate_tone(520, 0.6, sample_rate),
        ]
    )
    # A kettle whistle
    kettle = generate_tone(3200, 1.5, sample_rate)

    features = extract_audio_features(doorbell, sample_rate)
    fingerprint = generate_fingerprint(features)
    print(f"Doorbell: {len(features)} peaks")
    print(f"  {fingerprint[:72]}...")

    engine = Soundprint()
    engine.save("Doorbell", doorbell, sample_rate)
    engine.save("Kettle", kettle, sample_rate)

    # Identify a noisy re-recording of the doorbell
    noisy = doorbell + np.random.normal(0, 0.02, len(doorbell))
    matches = engine.identify(noisy, sample_rate)

    print(f"\nMatches: {len(matches)}")
    for match in matches:
        print(f"  {match}")


if __name__ == "__main__":
    main()
