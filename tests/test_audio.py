"""Tests for WAV loading."""

import numpy as np
import pytest
from scipy.io import wavfile

from helpers import SAMPLE_RATE, generate_tone
from soundprint.audio import load_wav, save_wav, to_float


def test_save_and_load(tmp_path):
    tone = generate_tone(440, 4410, amplitude=0.5)
    path = tmp_path / "tone.wav"
    save_wav(path, tone, SAMPLE_RATE)

    samples, rate = load_wav(path)

    assert rate == SAMPLE_RATE
    assert samples.dtype == np.float32
    np.testing.assert_allclose(samples, tone, atol=1e-3)


def test_stereo_uses_first_channel(tmp_path):
    left = (generate_tone(440, 1000, 0.5) * 32767).astype(np.int16)
    right = np.zeros(1000, dtype=np.int16)
    path = tmp_path / "stereo.wav"
    wavfile.write(str(path), SAMPLE_RATE, np.column_stack([left, right]))

    samples, _ = load_wav(path)

    assert samples.ndim == 1
    np.testing.assert_allclose(samples, left / 32768.0, atol=1e-6)


def test_pcm_normalization():
    assert to_float(np.array([-32768, 0, 16384], dtype=np.int16)).tolist() == [-1.0, 0.0, 0.5]
    assert to_float(np.array([0, 128, 255], dtype=np.uint8))[1] == 0.0
    assert to_float(np.array([-(2**31)], dtype=np.int32))[0] == -1.0


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_wav(tmp_path / "missing.wav")
