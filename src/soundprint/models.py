"""Data models shared by the fingerprinting pipeline."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, List, Optional, Tuple

import numpy as np

# (amplitude, frequency, time) as read back from a fingerprint string
FeatureTriple = Tuple[float, float, float]


@dataclass
class Range:
    """A numeric range (min, max)."""

    min: float
    max: float

    def contains(self, value: float) -> bool:
        """Check if value falls within this range."""
        return self.min <= value <= self.max

    def __repr__(self) -> str:
        return f"Range({self.min}, {self.max})"


@dataclass
class FrequencyBand(Range):
    """A named frequency range used to spread peaks across the spectrum."""

    name: str = ""

    @property
    def key(self) -> str:
        return f"{self.min:g}-{self.max:g}"

    def __repr__(self) -> str:
        return f"FrequencyBand('{self.name}', {self.min}, {self.max})"


@dataclass
class Peak:
    """A spectral peak selected for the fingerprint.

    Attributes:
        amplitude: Linear amplitude derived from the dB magnitude
        frequency: Bin frequency in Hz
        time: Start time of the analyzed chunk in seconds
    """

    amplitude: float
    frequency: float
    time: float


@dataclass
class SpectralFrame:
    """dB magnitudes for bins 0..N/2 of one analyzed chunk."""

    magnitudes_db: np.ndarray
    time: float

    def __len__(self) -> int:
        return len(self.magnitudes_db)


@dataclass
class AudioFeatures:
    """Index-aligned peak amplitudes, frequencies and timestamps.

    Index ``i`` across the three lists describes one peak.
    """

    peaks: List[float] = field(default_factory=list)
    frequencies: List[float] = field(default_factory=list)
    timestamps: List[float] = field(default_factory=list)

    @classmethod
    def from_peaks(cls, peaks: Iterable[Peak]) -> "AudioFeatures":
        features = cls()
        for peak in peaks:
            features.append(peak)
        return features

    def append(self, peak: Peak) -> None:
        self.peaks.append(float(peak.amplitude))
        self.frequencies.append(float(peak.frequency))
        self.timestamps.append(float(peak.time))

    def extend(self, peaks: Iterable[Peak]) -> None:
        for peak in peaks:
            self.append(peak)

    def to_peaks(self) -> List[Peak]:
        return [
            Peak(amplitude=a, frequency=f, time=t)
            for a, f, t in zip(self.peaks, self.frequencies, self.timestamps)
        ]

    def __len__(self) -> int:
        return len(self.peaks)


@dataclass
class FingerprintRecord:
    """A stored fingerprint.

    Attributes:
        id: Identifier assigned by the store
        name: Human readable label for the clip
        fingerprint: Encoded fingerprint string
        duration: Clip length in whole seconds
    """

    id: int
    name: str
    fingerprint: str
    duration: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __repr__(self) -> str:
        return f"FingerprintRecord({self.id}, '{self.name}', {self.duration}s)"


@dataclass
class AudioMatch:
    """A stored record scored against a query fingerprint."""

    id: int
    name: str
    duration: int
    similarity: float

    def __str__(self) -> str:
        return f"{self.name} ({self.duration}s) {self.similarity * 100:.0f}% match"
