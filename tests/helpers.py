"""Synthetic signal helpers shared by the tests."""

import numpy as np

SAMPLE_RATE = 44100
CHUNK_SIZE = 2048


def bin_frequency(
    index: int, sample_rate: int = SAMPLE_RATE, chunk_size: int = CHUNK_SIZE
) -> float:
    """Frequency of FFT bin ``index`` (a tone here completes whole cycles per chunk)."""
    return index * sample_rate / chunk_size


def generate_tone(
    frequency: float, n_samples: int, amplitude: float = 0.8, sample_rate: int = SAMPLE_RATE
) -> np.ndarray:
    """Generate a pure sine wave."""
    t = np.arange(n_samples) / sample_rate
    return (np.sin(2 * np.pi * frequency * t) * amplitude).astype(np.float32)


def generate_silence(n_samples: int) -> np.ndarray:
    """Generate silence."""
    return np.zeros(n_samples, dtype=np.float32)


def chunks(count: int) -> int:
    """Number of samples in ``count`` whole analysis chunks."""
    return count * CHUNK_SIZE
