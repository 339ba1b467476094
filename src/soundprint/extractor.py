"""Feature extraction: samples in, index-aligned peak features out."""

import logging
from dataclasses import replace
from typing import Optional

from .codec import generate_fingerprint
from .config import FingerprintConfig
from .models import AudioFeatures
from .processing.dsp import Samples, SpectrumAnalyzer, as_samples
from .processing.peaks import PeakExtractor

logger = logging.getLogger(__name__)


def _config_for_rate(config: Optional[FingerprintConfig], sample_rate: int) -> FingerprintConfig:
    if sample_rate <= 0:
        raise ValueError(f"sample_rate must be positive, got {sample_rate}")
    if config is None:
        return FingerprintConfig.standard(sample_rate)
    if config.sample_rate != sample_rate:
        # Keep bin frequencies consistent with the actual audio
        return replace(config, sample_rate=sample_rate)
    return config


def clip_duration(samples: Samples, sample_rate: int) -> float:
    """Duration of a buffer in seconds."""
    if sample_rate <= 0:
        raise ValueError(f"sample_rate must be positive, got {sample_rate}")
    return len(as_samples(samples)) / sample_rate


def extract_audio_features(
    samples: Samples,
    sample_rate: int = 44100,
    config: Optional[FingerprintConfig] = None,
) -> AudioFeatures:
    """Extract fingerprint peaks from a mono sample buffer.

    The buffer is analyzed chunk by chunk and peaks are selected per band.
    When that yields fewer than ``min_peaks``, a second pass runs on the
    spectrum averaged over the whole buffer with a lowered threshold, and its
    peaks (all at time 0) are appended.

    Args:
        samples: Mono float samples, nominally in [-1, 1]
        sample_rate: Sample rate in Hz
        config: Extraction parameters (defaults to FingerprintConfig())

    Returns:
        AudioFeatures with equal-length peaks/frequencies/timestamps lists

    Raises:
        ValueError: If samples are not a 1-D numeric buffer or sample_rate <= 0
    """
    config = _config_for_rate(config, sample_rate)
    audio = as_samples(samples)

    analyzer = SpectrumAnalyzer(sample_rate, config.chunk_size, config.min_decibels)
    extractor = PeakExtractor(config)

    peaks = extractor.extract(analyzer.frames(audio), config.peak_threshold)
    features = AudioFeatures.from_peaks(peaks)

    if len(features) < config.min_peaks:
        additional = extractor.extract([analyzer.average(audio)], config.fallback_threshold)
        logger.debug(
            f"Only {len(features)} peak(s) found, fallback pass added {len(additional)}"
        )
        features.extend(additional)

    logger.debug(f"Extracted {len(features)} peak(s) from {len(audio) / sample_rate:.2f}s of audio")
    return features


def fingerprint_audio(
    samples: Samples,
    sample_rate: int = 44100,
    config: Optional[FingerprintConfig] = None,
) -> str:
    """Extract features and encode them as a fingerprint string."""
    return generate_fingerprint(extract_audio_features(samples, sample_rate, config))
