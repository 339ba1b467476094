import logging
import sys

import numpy as np

from soundprint.config import FingerprintConfig
from soundprint.processing.dsp import SpectrumAnalyzer
from soundprint.processing.peaks import PeakExtractor

logging.basicConfig(level=logging.DEBUG)


def check_dsp(frequency: float = 1000.0, amplitude: float = 0.5):
    config = FingerprintConfig()

    print(f"Checking DSP with N={config.chunk_size}, threshold={config.peak_threshold}")

    analyzer = SpectrumAnalyzer(config.sample_rate, config.chunk_size)
    extractor = PeakExtractor(config)

    # Half a second of sine
    # Amplitude 0.5 -> bin amplitude ~ 0.5 / 2 * 0.42 = 0.105
    t = np.arange(config.sample_rate // 2) / config.sample_rate
    sine = amplitude * np.sin(2 * np.pi * frequency * t)

    frames = analyzer.frames(sine)
    peaks = extractor.extract(frames)

    print(f"{len(frames)} frames, {len(peaks)} peaks")
    for p in peaks[:10]:
        print(f"  Peak: {p.frequency:.1f} Hz, amp {p.amplitude:.3f}, t={p.time:.3f}s")

    if peaks:
        print("✅ Peaks found")
    else:
        print("❌ No peaks above threshold")


if __name__ == "__main__":
    args = [float(a) for a in sys.argv[1:3]]
    check_dsp(*args)
