"""Fingerprint string encoding and decoding.

A fingerprint is a ``|``-separated list of ``amplitude:frequency:time``
tokens, e.g. ``0.50:440:0.1|0.40:880:0.2``. Amplitudes keep two decimals,
frequencies are rounded to 10 Hz and times to 0.1 s, so the round trip is
lossy.
"""

import logging
import math
from decimal import ROUND_HALF_UP, Decimal
from typing import List, Optional, Sequence

from .models import AudioFeatures, FeatureTriple

logger = logging.getLogger(__name__)

TOKEN_SEPARATOR = "|"
FIELD_SEPARATOR = ":"


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def format_number(value: float) -> str:
    """Shortest text form of a number, without a trailing '.0' for integers."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def format_amplitude(amplitude: float) -> str:
    return str(Decimal(float(amplitude)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def quantize_frequency(frequency: float) -> int:
    """Round to the nearest multiple of 10 Hz."""
    return _round_half_up(frequency / 10) * 10


def quantize_time(time: float) -> float:
    """Round to the nearest 0.1 s."""
    return _round_half_up(time * 10) / 10


def _present(values: Sequence[Optional[float]], index: int) -> Optional[float]:
    if index >= len(values):
        return None
    value = values[index]
    if value is None or not math.isfinite(value):
        return None
    return value


def encode_token(amplitude: float, frequency: float, time: float) -> str:
    return FIELD_SEPARATOR.join(
        [
            format_amplitude(amplitude),
            format_number(quantize_frequency(frequency)),
            format_number(quantize_time(time)),
        ]
    )


def generate_fingerprint(features: AudioFeatures) -> str:
    """Serialize extracted features into a fingerprint string.

    Indices without a finite amplitude, frequency or timestamp are skipped.
    No peaks gives the empty string.

    Args:
        features: Index-aligned amplitudes, frequencies and timestamps

    Returns:
        The fingerprint string
    """
    tokens = []
    skipped = 0
    for i in range(len(features.peaks)):
        amplitude = _present(features.peaks, i)
        frequency = _present(features.frequencies, i)
        time = _present(features.timestamps, i)
        if amplitude is None or frequency is None or time is None:
            skipped += 1
            continue
        tokens.append(encode_token(amplitude, frequency, time))

    if skipped:
        logger.debug(f"Skipped {skipped} incomplete or non-finite peak(s)")
    return TOKEN_SEPARATOR.join(tokens)


def _parse_token(token: str) -> Optional[FeatureTriple]:
    fields = token.split(FIELD_SEPARATOR)
    if len(fields) != 3:
        return None
    try:
        values = [float(f) for f in fields]
    except ValueError:
        return None
    if not all(math.isfinite(v) for v in values):
        return None
    return values[0], values[1], values[2]


def parse_fingerprint(fingerprint: str) -> List[FeatureTriple]:
    """Parse a fingerprint string into (amplitude, frequency, time) triples.

    Malformed tokens are dropped rather than raising.
    """
    if not fingerprint:
        return []

    triples: List[FeatureTriple] = []
    skipped = 0
    for token in fingerprint.split(TOKEN_SEPARATOR):
        triple = _parse_token(token)
        if triple is None:
            skipped += 1
            continue
        triples.append(triple)

    if skipped:
        logger.debug(f"Skipped {skipped} malformed fingerprint token(s)")
    return triples
