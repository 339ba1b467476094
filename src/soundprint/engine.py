"""Main Soundprint class - ties extraction, storage and matching together."""

import logging
import math
from typing import Iterable, List, Optional

from .codec import generate_fingerprint
from .config import FingerprintConfig, MatchingConfig
from .extractor import clip_duration, extract_audio_features
from .models import AudioFeatures, AudioMatch, FingerprintRecord
from .processing.dsp import Samples
from .similarity import calculate_similarity
from .store import FingerprintStore, MemoryFingerprintStore

logger = logging.getLogger(__name__)


def identify_fingerprint(
    query: str,
    records: Iterable[FingerprintRecord],
    min_similarity: float = 0.7,
    config: Optional[MatchingConfig] = None,
) -> List[AudioMatch]:
    """Score a query fingerprint against stored records.

    Args:
        query: Fingerprint of the clip to identify (scored as the first argument)
        records: Stored records to compare against
        min_similarity: Records scoring below this are dropped
        config: Matching tolerances

    Returns:
        Matches sorted by descending similarity
    """
    matches = [
        AudioMatch(
            id=record.id,
            name=record.name,
            duration=record.duration,
            similarity=calculate_similarity(query, record.fingerprint, config),
        )
        for record in records
    ]
    matches = [m for m in matches if m.similarity >= min_similarity]
    matches.sort(key=lambda m: m.similarity, reverse=True)
    return matches


class Soundprint:
    """Fingerprints clips, saves them and identifies new clips against the store.

    Example:
        >>> from soundprint import Soundprint
        >>> from soundprint.audio import load_wav
        >>>
        >>> sp = Soundprint()
        >>> samples, rate = load_wav("doorbell.wav")
        >>> sp.save("Doorbell", samples, rate)
        >>> sp.identify(*load_wav("unknown.wav"))
    """

    def __init__(
        self,
        store: Optional[FingerprintStore] = None,
        fingerprint_config: Optional[FingerprintConfig] = None,
        matching_config: Optional[MatchingConfig] = None,
    ):
        """Initialize the engine.

        Args:
            store: Where fingerprints are saved (in-memory if None)
            fingerprint_config: Extraction parameters
            matching_config: Matching tolerances and default thresholds
        """
        self.store = store if store is not None else MemoryFingerprintStore()
        self.fingerprint_config = fingerprint_config or FingerprintConfig()
        self.matching_config = matching_config or MatchingConfig()

    def extract(self, samples: Samples, sample_rate: int) -> AudioFeatures:
        return extract_audio_features(samples, sample_rate, self.fingerprint_config)

    def fingerprint(self, samples: Samples, sample_rate: int) -> str:
        """Fingerprint a mono sample buffer."""
        return generate_fingerprint(self.extract(samples, sample_rate))

    def save(self, name: str, samples: Samples, sample_rate: int) -> FingerprintRecord:
        """Fingerprint a clip and store it under name."""
        fingerprint = self.fingerprint(samples, sample_rate)
        # Whole seconds, halves rounded up
        duration = math.floor(clip_duration(samples, sample_rate) + 0.5)
        return self.save_fingerprint(name, fingerprint, duration)

    def save_fingerprint(self, name: str, fingerprint: str, duration: int) -> FingerprintRecord:
        """Store an already computed fingerprint.

        Raises:
            ValueError: If name is empty or only whitespace
        """
        name = name.strip()
        if not name:
            raise ValueError("A fingerprint needs a non-empty name")
        if not fingerprint:
            logger.warning(f"Saving '{name}' with an empty fingerprint")
        return self.store.insert(name, fingerprint, duration)

    def identify(
        self, samples: Samples, sample_rate: int, min_similarity: Optional[float] = None
    ) -> List[AudioMatch]:
        """Identify a clip against every stored fingerprint.

        Args:
            samples: Mono float samples
            sample_rate: Sample rate in Hz
            min_similarity: Defaults to matching_config.identify_min_similarity

        Returns:
            Matches sorted by descending similarity
        """
        if min_similarity is None:
            min_similarity = self.matching_config.identify_min_similarity
        return self.identify_fingerprint(self.fingerprint(samples, sample_rate), min_similarity)

    def identify_fingerprint(
        self, fingerprint: str, min_similarity: Optional[float] = None
    ) -> List[AudioMatch]:
        """Identify a fingerprint string against every stored fingerprint.

        min_similarity defaults to matching_config.save_min_similarity.
        """
        if min_similarity is None:
            min_similarity = self.matching_config.save_min_similarity

        records = self.store.all()
        matches = identify_fingerprint(fingerprint, records, min_similarity, self.matching_config)
        logger.info(
            f"Compared against {len(records)} record(s): {len(matches)} match(es) "
            f">= {min_similarity:.2f}"
        )
        return matches

    def compare(self, fingerprint1: str, fingerprint2: str) -> float:
        """Score fingerprint1 against fingerprint2 (not symmetric)."""
        return calculate_similarity(fingerprint1, fingerprint2, self.matching_config)

    def records(self) -> List[FingerprintRecord]:
        return self.store.all()
