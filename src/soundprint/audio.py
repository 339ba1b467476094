"""Audio file loading."""

import logging
from pathlib import Path
from typing import Tuple, Union

import numpy as np
from scipy.io import wavfile

logger = logging.getLogger(__name__)


def to_float(data: np.ndarray) -> np.ndarray:
    """Normalize PCM sample data to float32 in [-1, 1]."""
    if data.dtype == np.uint8:
        return (data.astype(np.float32) - 128.0) / 128.0
    if data.dtype == np.int16:
        return data.astype(np.float32) / 32768.0
    if data.dtype == np.int32:
        return (data.astype(np.float64) / 2147483648.0).astype(np.float32)
    return data.astype(np.float32)


def load_wav(path: Union[str, Path]) -> Tuple[np.ndarray, int]:
    """Load a WAV file as a mono float32 buffer.

    Multi-channel files are reduced to their first channel.

    Args:
        path: Path to the .wav file

    Returns:
        (samples, sample_rate)
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Audio file not found: {path}")

    sample_rate, data = wavfile.read(path)
    if data.ndim > 1:
        logger.debug(f"{path.name}: {data.shape[1]} channels, using channel 0")
        data = data[:, 0]

    samples = to_float(data)
    logger.debug(f"Loaded {path.name}: {len(samples)} samples at {sample_rate}Hz")
    return samples, int(sample_rate)


def save_wav(path: Union[str, Path], samples: np.ndarray, sample_rate: int) -> None:
    """Write a mono float buffer as 16-bit PCM."""
    pcm = (np.clip(samples, -1.0, 1.0) * 32767).astype(np.int16)
    wavfile.write(str(path), sample_rate, pcm)
