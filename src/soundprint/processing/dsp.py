"""Digital Signal Processing (DSP) layer for audio analysis."""

import logging
from typing import List, Sequence, Union

import numpy as np

from soundprint.models import SpectralFrame

logger = logging.getLogger(__name__)

Samples = Union[np.ndarray, Sequence[float]]


def db_to_amplitude(db: Union[float, np.ndarray]) -> Union[float, np.ndarray]:
    """Convert dB magnitude to linear amplitude (10 ** (dB / 20))."""
    return np.power(10.0, np.asarray(db) / 20.0)


def as_samples(samples: Samples) -> np.ndarray:
    """Validate a mono sample buffer and return it as a float64 copy.

    Raises:
        ValueError: If the buffer is not a 1-D sequence of numbers.
    """
    try:
        array = np.array(samples, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Audio samples must be numeric: {e}") from e

    if array.ndim != 1:
        raise ValueError(f"Audio samples must be a mono 1-D buffer, got shape {array.shape}")
    return array


class SpectrumAnalyzer:
    """Splits a sample buffer into chunks and computes dB spectra.

    Each chunk is Blackman-windowed, transformed with a real FFT and
    converted to dB with the magnitude scaled by 1/N, matching the layout of a
    browser analyser node: bin ``i`` covers ``i * sample_rate / chunk_size`` Hz
    for ``i`` in ``0..chunk_size/2``.
    """

    def __init__(self, sample_rate: int, chunk_size: int = 2048, min_decibels: float = -240.0):
        """Initialize the spectrum analyzer.

        Args:
            sample_rate: Audio sample rate in Hz
            chunk_size: Number of samples per chunk (the FFT size)
            min_decibels: Floor for silent bins
        """
        if sample_rate <= 0:
            raise ValueError(f"sample_rate must be positive, got {sample_rate}")
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")

        self.sample_rate = sample_rate
        self.chunk_size = chunk_size
        self.min_decibels = min_decibels
        self.bin_frequencies = np.arange(chunk_size // 2 + 1) * (sample_rate / chunk_size)
        self.window = np.blackman(chunk_size)
        self._min_magnitude = 10.0 ** (min_decibels / 20.0)

    def _magnitudes(self, chunk: np.ndarray) -> np.ndarray:
        # Zero-pad partial chunks
        if len(chunk) < self.chunk_size:
            chunk = np.pad(chunk, (0, self.chunk_size - len(chunk)))

        windowed = chunk * self.window
        return np.abs(np.fft.rfft(windowed)) / self.chunk_size

    def _to_db(self, magnitudes: np.ndarray) -> np.ndarray:
        return 20.0 * np.log10(np.maximum(magnitudes, self._min_magnitude))

    def analyze(self, chunk: Samples) -> np.ndarray:
        """Return dB magnitudes for bins 0..chunk_size/2 of a single chunk.

        Args:
            chunk: Up to chunk_size float samples. Shorter chunks are zero-padded.

        Returns:
            Array of chunk_size // 2 + 1 dB values
        """
        return self._to_db(self._magnitudes(as_samples(chunk)[: self.chunk_size]))

    def frames(self, samples: Samples) -> List[SpectralFrame]:
        """Analyze a buffer as consecutive non-overlapping chunks.

        A trailing partial chunk is analyzed as well, so any non-empty buffer
        yields at least one frame.

        Args:
            samples: Mono float samples

        Returns:
            SpectralFrames in chunk order, each stamped with its start time
        """
        audio = as_samples(samples)
        frames: List[SpectralFrame] = []

        for offset in range(0, len(audio), self.chunk_size):
            chunk = audio[offset : offset + self.chunk_size]
            frames.append(
                SpectralFrame(
                    magnitudes_db=self._to_db(self._magnitudes(chunk)),
                    time=offset / self.sample_rate,
                )
            )

        logger.debug(f"Analyzed {len(audio)} samples into {len(frames)} frame(s)")
        return frames

    def average(self, samples: Samples) -> SpectralFrame:
        """Analyze the whole buffer as a single frame at time 0.

        The linear magnitudes of every chunk are averaged before the dB
        conversion. An empty buffer yields a silent frame.
        """
        audio = as_samples(samples)
        n_bins = self.chunk_size // 2 + 1

        if len(audio) == 0:
            return SpectralFrame(magnitudes_db=np.full(n_bins, self.min_decibels), time=0.0)

        total = np.zeros(n_bins)
        count = 0
        for offset in range(0, len(audio), self.chunk_size):
            total += self._magnitudes(audio[offset : offset + self.chunk_size])
            count += 1

        return SpectralFrame(magnitudes_db=self._to_db(total / count), time=0.0)
