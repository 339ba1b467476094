"""Soundprint - compact audio fingerprints for short clips.

Extracts band- and time-distributed spectral peaks from a mono clip, encodes
them as a fingerprint string and scores two fingerprints against each other.

Usage:
    from soundprint import extract_audio_features, generate_fingerprint, calculate_similarity

    features = extract_audio_features(samples, sample_rate=44100)
    fingerprint = generate_fingerprint(features)
    score = calculate_similarity(fingerprint, stored_fingerprint)
"""

__version__ = "1.0.0"

# Core exports
from soundprint.models import AudioFeatures, AudioMatch, FingerprintRecord, FrequencyBand, Peak
from soundprint.config import FingerprintConfig, GlobalConfig, MatchingConfig
from soundprint.processing.dsp import SpectrumAnalyzer
from soundprint.processing.peaks import PeakExtractor
from soundprint.extractor import extract_audio_features, fingerprint_audio
from soundprint.codec import generate_fingerprint, parse_fingerprint
from soundprint.similarity import EMPTY_SIMILARITY, calculate_similarity, score_features
from soundprint.store import FingerprintStore, MemoryFingerprintStore, SQLiteFingerprintStore
from soundprint.engine import Soundprint, identify_fingerprint

__all__ = [
    # Version
    "__version__",
    # Pipeline
    "SpectrumAnalyzer",
    "PeakExtractor",
    "extract_audio_features",
    "fingerprint_audio",
    "generate_fingerprint",
    "parse_fingerprint",
    "calculate_similarity",
    "score_features",
    "EMPTY_SIMILARITY",
    # Configuration
    "FingerprintConfig",
    "MatchingConfig",
    "GlobalConfig",
    # Models
    "AudioFeatures",
    "AudioMatch",
    "FingerprintRecord",
    "FrequencyBand",
    "Peak",
    # Storage and matching
    "FingerprintStore",
    "MemoryFingerprintStore",
    "SQLiteFingerprintStore",
    "Soundprint",
    "identify_fingerprint",
]
