"""Command line entrypoint for Soundprint."""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

import yaml

from .audio import load_wav
from .config import GlobalConfig, StoreSettings, setup_logging
from .engine import Soundprint
from .store import open_store

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="soundprint", description="Fingerprint short audio clips and identify them."
    )
    parser.add_argument("--config", "-c", type=Path, default=None, help="YAML configuration file")
    parser.add_argument(
        "--db", type=Path, default=None, help="SQLite fingerprint database (overrides config)"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Show debug output")

    sub = parser.add_subparsers(dest="command", required=True)

    save = sub.add_parser("save", help="Fingerprint a clip and store it")
    save.add_argument("audio", type=Path, help="Path to a .wav file")
    save.add_argument("--name", "-n", default=None, help="Label (defaults to the file name)")

    identify = sub.add_parser("identify", help="Find stored clips matching a recording")
    identify.add_argument("audio", type=Path, help="Path to a .wav file")
    identify.add_argument(
        "--min-similarity", type=float, default=None, help="Minimum similarity (default 0.5)"
    )

    compare = sub.add_parser("compare", help="Score two recordings against each other")
    compare.add_argument("audio_a", type=Path)
    compare.add_argument("audio_b", type=Path)

    fingerprint = sub.add_parser("fingerprint", help="Print the fingerprint of a recording")
    fingerprint.add_argument("audio", type=Path)

    sub.add_parser("list", help="List stored fingerprints")

    return parser.parse_args(argv)


def load_config(args: argparse.Namespace) -> GlobalConfig:
    config = GlobalConfig.load(args.config) if args.config else GlobalConfig()
    if args.db is not None:
        config.store = StoreSettings(path=str(args.db))
    if args.verbose:
        config.system.log_level = "DEBUG"
    return config


def run(args: argparse.Namespace, config: GlobalConfig) -> int:
    with open_store(config.store) as store:
        engine = Soundprint(store, config.fingerprint, config.matching)

        if args.command == "save":
            samples, rate = load_wav(args.audio)
            record = engine.save(args.name or args.audio.stem, samples, rate)
            peaks = len(record.fingerprint.split("|")) if record.fingerprint else 0
            print(f"Saved #{record.id} '{record.name}' ({record.duration}s, {peaks} peaks)")

        elif args.command == "identify":
            samples, rate = load_wav(args.audio)
            matches = engine.identify(samples, rate, args.min_similarity)
            if not matches:
                print("No match found")
            for match in matches:
                print(f"#{match.id:<4} {match}")

        elif args.command == "compare":
            fp_a = engine.fingerprint(*load_wav(args.audio_a))
            fp_b = engine.fingerprint(*load_wav(args.audio_b))
            print(f"{args.audio_a.name} -> {args.audio_b.name}: {engine.compare(fp_a, fp_b):.3f}")
            print(f"{args.audio_b.name} -> {args.audio_a.name}: {engine.compare(fp_b, fp_a):.3f}")

        elif args.command == "fingerprint":
            print(engine.fingerprint(*load_wav(args.audio)))

        elif args.command == "list":
            records = engine.records()
            if not records:
                print("No fingerprints stored")
            for record in records:
                print(f"#{record.id:<4} {record.name} ({record.duration}s)")

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    try:
        config = load_config(args)
    except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
        logging.basicConfig(level=logging.INFO, format="%(message)s")
        logger.error(f"Invalid configuration: {e}")
        return 1

    setup_logging(config.system)

    try:
        return run(args, config)
    except (FileNotFoundError, ValueError) as e:
        logger.error(str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
