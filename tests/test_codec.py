"""Tests for fingerprint encoding and decoding."""

import numpy as np
import pytest

from soundprint.codec import (
    format_amplitude,
    format_number,
    generate_fingerprint,
    parse_fingerprint,
    quantize_frequency,
    quantize_time,
)
from soundprint.models import AudioFeatures


def test_encode_basic():
    features = AudioFeatures(peaks=[0.5, 0.4], frequencies=[440.0, 880.0], timestamps=[0.0, 0.1])
    assert generate_fingerprint(features) == "0.50:440:0|0.40:880:0.1"


def test_encode_rounding():
    features = AudioFeatures(
        peaks=[0.126, 1.234],
        frequencies=[444.9, 445.0],
        timestamps=[0.25, 1.04],
    )
    assert generate_fingerprint(features) == "0.13:440:0.3|1.23:450:1"


@pytest.mark.parametrize(
    "value,expected",
    [(0.125, "0.13"), (0.5, "0.50"), (0.0, "0.00"), (0.994, "0.99"), (2.0, "2.00")],
)
def test_format_amplitude_rounds_half_up(value, expected):
    assert format_amplitude(value) == expected


def test_quantizers():
    assert quantize_frequency(435) == 440
    assert quantize_frequency(434.9) == 430
    assert quantize_frequency(3.0) == 0
    assert quantize_time(0.05) == pytest.approx(0.1)
    assert quantize_time(0.04) == 0.0
    assert format_number(440) == "440"
    assert format_number(0.3) == "0.3"
    assert format_number(2.0) == "2"


def test_encode_skips_indices_without_frequency_or_time():
    features = AudioFeatures(
        peaks=[0.5, 0.4, 0.3],
        frequencies=[440.0, None, 660.0],
        timestamps=[0.0, 0.1],
    )
    assert generate_fingerprint(features) == "0.50:440:0"


def test_encode_skips_non_finite_values():
    features = AudioFeatures(
        peaks=[float("inf"), float("nan"), 0.3, 0.2],
        frequencies=[440.0, 550.0, float("inf"), 660.0],
        timestamps=[0.0, 0.1, 0.2, float("-inf")],
    )
    assert generate_fingerprint(features) == ""

    features = AudioFeatures(
        peaks=[float("inf"), 0.4],
        frequencies=[440.0, 880.0],
        timestamps=[0.0, 0.1],
    )
    assert generate_fingerprint(features) == "0.40:880:0.1"


def test_encode_empty():
    assert generate_fingerprint(AudioFeatures()) == ""


def test_encode_is_deterministic():
    rng = np.random.default_rng(7)
    features = AudioFeatures(
        peaks=list(rng.uniform(0, 1, 50)),
        frequencies=list(rng.uniform(20, 8000, 50)),
        timestamps=list(rng.uniform(0, 5, 50)),
    )
    assert generate_fingerprint(features) == generate_fingerprint(features)


def test_decode_basic():
    assert parse_fingerprint("0.50:440:0.0|0.40:880:0.1") == [(0.5, 440.0, 0.0), (0.4, 880.0, 0.1)]


def test_decode_empty():
    assert parse_fingerprint("") == []


def test_decode_skips_malformed_tokens():
    fingerprint = "0.5:440:0|garbage|1:2|a:b:c|0.4:880:0.1:9||0.3:nan:0|0.2:660:1.5"
    assert parse_fingerprint(fingerprint) == [(0.5, 440.0, 0.0), (0.2, 660.0, 1.5)]


def test_round_trip_within_rounding_tolerance():
    rng = np.random.default_rng(3)
    amplitudes = rng.uniform(0, 2, 100)
    frequencies = rng.uniform(20, 8000, 100)
    times = rng.uniform(0, 10, 100)
    features = AudioFeatures(list(amplitudes), list(frequencies), list(times))

    decoded = parse_fingerprint(generate_fingerprint(features))

    assert len(decoded) == len(features)
    for (amp, freq, time), a, f, t in zip(decoded, amplitudes, frequencies, times):
        assert abs(amp - a) <= 0.005 + 1e-9
        assert abs(freq - f) <= 5 + 1e-9
        assert abs(time - t) <= 0.05 + 1e-9
