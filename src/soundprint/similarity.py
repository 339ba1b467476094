"""Tolerance-based similarity between two fingerprints."""

import logging
from typing import Optional, Sequence

from .codec import parse_fingerprint
from .config import MatchingConfig
from .models import FeatureTriple

logger = logging.getLogger(__name__)

# Score returned when both sides have no features
EMPTY_SIMILARITY = 0.0


def pair_similarity(
    a: FeatureTriple, b: FeatureTriple, config: Optional[MatchingConfig] = None
) -> float:
    """Combined amplitude/frequency/time closeness of two peaks.

    Each component is ``1 - difference / tolerance`` (amplitude tolerance is
    1.0) and the result is their mean. It can go negative for distant peaks.
    """
    config = config or MatchingConfig()
    peak_sim = 1 - abs(a[0] - b[0])
    freq_sim = 1 - abs(a[1] - b[1]) / config.frequency_tolerance
    time_sim = 1 - abs(a[2] - b[2]) / config.time_tolerance
    return (peak_sim + freq_sim + time_sim) / 3


def score_features(
    a: Sequence[FeatureTriple],
    b: Sequence[FeatureTriple],
    config: Optional[MatchingConfig] = None,
) -> float:
    """Fraction of peaks in ``a`` with a close counterpart in ``b``.

    For every peak of ``a`` the peaks of ``b`` are scanned in order and the
    first one scoring above ``match_threshold`` counts as its match. The count
    is divided by the size of the larger list, so ``score_features(a, b)``
    and ``score_features(b, a)`` differ when the lists differ in length.

    Args:
        a: Query peaks
        b: Reference peaks
        config: Matching tolerances

    Returns:
        Score in [0, 1]; EMPTY_SIMILARITY when both lists are empty
    """
    config = config or MatchingConfig()
    total = max(len(a), len(b))
    if total == 0:
        return EMPTY_SIMILARITY

    matches = 0
    for feature_a in a:
        for feature_b in b:
            if pair_similarity(feature_a, feature_b, config) > config.match_threshold:
                matches += 1
                break

    return matches / total


def calculate_similarity(
    fingerprint1: str, fingerprint2: str, config: Optional[MatchingConfig] = None
) -> float:
    """Decode two fingerprint strings and score the first against the second."""
    features1 = parse_fingerprint(fingerprint1)
    features2 = parse_fingerprint(fingerprint2)
    score = score_features(features1, features2, config)
    logger.debug(f"Similarity {score:.3f} ({len(features1)} vs {len(features2)} peaks)")
    return score
