"""Selects salient spectral peaks, spread over frequency bands and time."""

import logging
import math
from typing import Dict, List, Optional, Sequence

import numpy as np

from soundprint.config import FingerprintConfig
from soundprint.models import FrequencyBand, Peak, SpectralFrame
from soundprint.processing.dsp import db_to_amplitude

logger = logging.getLogger(__name__)


class PeakExtractor:
    """Turns spectral frames into a bounded list of peaks.

    Candidate bins are grouped by frequency band, sorted by amplitude and
    thinned so that each band keeps at most one peak per time window (plus a
    backfill up to ``min_peaks``), capped at ``max_peaks`` per band.
    """

    def __init__(self, config: Optional[FingerprintConfig] = None):
        self.config = config or FingerprintConfig()
        self.bin_frequencies = np.arange(self.config.chunk_size // 2 + 1) * (
            self.config.sample_rate / self.config.chunk_size
        )

        # Bins that fall in at least one band
        freq_range = self.config.frequency_range
        self._band_mask = np.zeros(len(self.bin_frequencies), dtype=bool)
        for band in self.config.bands:
            self._band_mask |= (self.bin_frequencies >= band.min) & (
                self.bin_frequencies <= band.max
            )
        logger.debug(
            f"PeakExtractor: {int(self._band_mask.sum())} bins within "
            f"{freq_range.min:g}-{freq_range.max:g}Hz"
        )

    def band_for(self, frequency: float) -> Optional[FrequencyBand]:
        """Return the first band (in declared order) containing frequency."""
        for band in self.config.bands:
            if band.contains(frequency):
                return band
        return None

    def candidates(self, frames: Sequence[SpectralFrame], threshold: float) -> List[Peak]:
        """Collect in-band bins whose amplitude exceeds threshold.

        Args:
            frames: Spectral frames in time order
            threshold: Linear amplitude a bin must exceed

        Returns:
            Peaks in frame order, then bin order
        """
        peaks: List[Peak] = []

        for frame in frames:
            amplitudes = db_to_amplitude(frame.magnitudes_db)
            n = min(len(amplitudes), len(self.bin_frequencies))
            hits = np.nonzero((amplitudes[:n] > threshold) & self._band_mask[:n])[0]
            for i in hits:
                peaks.append(
                    Peak(
                        amplitude=float(amplitudes[i]),
                        frequency=float(self.bin_frequencies[i]),
                        time=frame.time,
                    )
                )

        return peaks

    def group_by_band(self, peaks: Sequence[Peak]) -> Dict[str, List[Peak]]:
        """Assign peaks to bands, keyed by band key in declared order."""
        grouped: Dict[str, List[Peak]] = {band.key: [] for band in self.config.bands}
        for peak in peaks:
            band = self.band_for(peak.frequency)
            if band is not None:
                grouped[band.key].append(peak)
        return grouped

    def select_with_time_distribution(self, peaks: Sequence[Peak]) -> List[Peak]:
        """Keep the strongest peak of each time window.

        ``peaks`` must already be sorted by amplitude, descending. Each window
        contributes the first of its peaks in that order. If fewer than
        ``min_peaks`` are kept, the strongest remaining peaks are added
        regardless of window. The result is truncated to ``max_peaks``.
        """
        windows: Dict[int, List[Peak]] = {}
        for peak in peaks:
            key = math.floor(peak.time / self.config.time_window)
            windows.setdefault(key, []).append(peak)

        # Windows are visited in ascending time order
        selected = [windows[key][0] for key in sorted(windows)]

        if len(selected) < self.config.min_peaks:
            chosen = {id(p) for p in selected}
            remaining = [p for p in peaks if id(p) not in chosen]
            selected.extend(remaining[: self.config.min_peaks - len(selected)])

        return selected[: self.config.max_peaks]

    def extract(
        self, frames: Sequence[SpectralFrame], threshold: Optional[float] = None
    ) -> List[Peak]:
        """Run candidate search, band grouping and time distribution.

        Args:
            frames: Spectral frames in time order
            threshold: Linear amplitude threshold (defaults to config.peak_threshold)

        Returns:
            Selected peaks, band by band in declared band order
        """
        if threshold is None:
            threshold = self.config.peak_threshold

        grouped = self.group_by_band(self.candidates(frames, threshold))

        result: List[Peak] = []
        for key, band_peaks in grouped.items():
            band_peaks.sort(key=lambda p: p.amplitude, reverse=True)
            selected = self.select_with_time_distribution(band_peaks)
            logger.debug(f"Band {key}Hz: {len(band_peaks)} candidates, {len(selected)} selected")
            result.extend(selected)

        return result
