"""Spectral analysis and peak selection."""

from soundprint.processing.dsp import SpectrumAnalyzer, db_to_amplitude
from soundprint.processing.peaks import PeakExtractor

__all__ = ["SpectrumAnalyzer", "PeakExtractor", "db_to_amplitude"]
