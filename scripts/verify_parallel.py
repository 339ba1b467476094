#!/usr/bin/env python3
"""Verify that fingerprinting and scoring can run in parallel.

Fingerprints a set of synthetic clips sequentially and from a thread pool,
then checks that both runs produce byte-identical fingerprints and the same
similarity matrix.

Usage:
    python scripts/verify_parallel.py --workers 8
"""

import argparse
import logging
from concurrent.futures import ThreadPoolExecutor

import numpy as np

from soundprint import calculate_similarity, fingerprint_audio

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("ParallelVerifier")

SAMPLE_RATE = 44100


def make_clips(count: int):
    rng = np.random.default_rng(0)
    clips = []
    for _ in range(count):
        t = np.arange(SAMPLE_RATE) / SAMPLE_RATE
        freqs = rng.uniform(50, 7000, 3)
        clip = sum(0.3 * np.sin(2 * np.pi * f * t) for f in freqs)
        clips.append(clip + rng.normal(0, 0.01, len(t)))
    return clips


def run_test(workers: int, count: int):
    print("=" * 60)
    print("🧪 VERIFYING PARALLEL FINGERPRINTING")
    print("=" * 60)

    clips = make_clips(count)

    sequential = [fingerprint_audio(c, SAMPLE_RATE) for c in clips]
    with ThreadPoolExecutor(max_workers=workers) as pool:
        parallel = list(pool.map(lambda c: fingerprint_audio(c, SAMPLE_RATE), clips))

    same_fingerprints = sequential == parallel
    logger.info(f"{count} clips fingerprinted with {workers} workers")

    pairs = [(a, b) for a in sequential for b in sequential]
    expected = [calculate_similarity(a, b) for a, b in pairs]
    with ThreadPoolExecutor(max_workers=workers) as pool:
        scores = list(pool.map(lambda p: calculate_similarity(*p), pairs))

    same_scores = expected == scores

    print("✅ Fingerprints identical" if same_fingerprints else "❌ Fingerprints differ")
    print("✅ Scores identical" if same_scores else "❌ Scores differ")
    return 0 if same_fingerprints and same_scores else 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Verify parallel fingerprinting")
    parser.add_argument("--workers", type=int, default=4)
    parser.add_argument("--clips", type=int, default=12)
    args = parser.parse_args()
    raise SystemExit(run_test(args.workers, args.clips))
