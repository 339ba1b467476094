"""Configuration for fingerprint extraction and matching.

This module centralizes every tunable constant of the pipeline (thresholds,
band edges, window widths, peak counts, matching tolerances) and supports
loading a unified configuration file in YAML.
"""

import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from .models import FrequencyBand

logger = logging.getLogger(__name__)

DEFAULT_SAMPLE_RATE = 44100
DEFAULT_CHUNK_SIZE = 2048  # FFT size, also the analysis hop
DEFAULT_PEAK_THRESHOLD = 0.05  # linear amplitude
DEFAULT_MIN_PEAKS = 5
DEFAULT_MAX_PEAKS = 200
DEFAULT_TIME_WINDOW = 0.05  # seconds

# Default minimum similarity for the two matching workflows
SAVE_MIN_SIMILARITY = 0.7
IDENTIFY_MIN_SIMILARITY = 0.5


def default_bands() -> List[FrequencyBand]:
    """Return the standard Bass/Mid/High band layout."""
    return [
        FrequencyBand(20, 300, name="bass"),
        FrequencyBand(300, 2000, name="mid"),
        FrequencyBand(2000, 8000, name="high"),
    ]


@dataclass
class FingerprintConfig:
    """Parameters of the extraction pipeline.

    Attributes:
        sample_rate: Expected audio sample rate in Hz.
        chunk_size: FFT size in samples. Chunks do not overlap.
        peak_threshold: Minimum linear amplitude for a bin to become a candidate.
        fallback_threshold_factor: Threshold multiplier for the fallback pass.
        min_peaks: Below this count a band is backfilled and the fallback pass runs.
        max_peaks: Maximum number of peaks kept per band.
        time_window: Width in seconds of the buckets used to spread peaks in time.
        bands: Ordered frequency bands. Bins outside every band are ignored.
        min_decibels: Floor applied to silent bins before the dB conversion.
    """

    sample_rate: int = DEFAULT_SAMPLE_RATE
    chunk_size: int = DEFAULT_CHUNK_SIZE
    peak_threshold: float = DEFAULT_PEAK_THRESHOLD
    fallback_threshold_factor: float = 0.5
    min_peaks: int = DEFAULT_MIN_PEAKS
    max_peaks: int = DEFAULT_MAX_PEAKS
    time_window: float = DEFAULT_TIME_WINDOW
    bands: List[FrequencyBand] = field(default_factory=default_bands)
    min_decibels: float = -240.0

    def __post_init__(self):
        if self.sample_rate <= 0:
            raise ValueError(f"sample_rate must be positive, got {self.sample_rate}")
        if self.chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {self.chunk_size}")
        if self.time_window <= 0:
            raise ValueError(f"time_window must be positive, got {self.time_window}")
        if self.min_peaks < 0 or self.max_peaks < 0:
            raise ValueError("min_peaks and max_peaks must not be negative")
        if self.min_peaks > self.max_peaks:
            raise ValueError(
                f"min_peaks ({self.min_peaks}) cannot exceed max_peaks ({self.max_peaks})"
            )
        if not self.bands:
            raise ValueError("At least one frequency band is required")

    @property
    def fallback_threshold(self) -> float:
        return self.peak_threshold * self.fallback_threshold_factor

    @property
    def frequency_range(self) -> FrequencyBand:
        """The span covered by all bands."""
        return FrequencyBand(
            min(b.min for b in self.bands), max(b.max for b in self.bands), name="all"
        )

    @classmethod
    def standard(cls, sample_rate: int = DEFAULT_SAMPLE_RATE) -> "FingerprintConfig":
        """Standard preset: 2048-point FFT, three bands, 5..200 peaks per band.

        Args:
            sample_rate: Audio sample rate (default 44100).

        Returns:
            FingerprintConfig with standard settings.
        """
        return cls(sample_rate=sample_rate)


@dataclass
class MatchingConfig:
    """Tolerances used when comparing two fingerprints.

    Attributes:
        match_threshold: A peak pair counts as matching above this combined score.
        frequency_tolerance: Frequency difference (Hz) that drives the frequency score to 0.
        time_tolerance: Time difference (s) that drives the time score to 0.
        save_min_similarity: Default minimum similarity for save/compare lookups.
        identify_min_similarity: Default minimum similarity for open identification.
    """

    match_threshold: float = 0.7
    frequency_tolerance: float = 100.0
    time_tolerance: float = 0.5
    save_min_similarity: float = SAVE_MIN_SIMILARITY
    identify_min_similarity: float = IDENTIFY_MIN_SIMILARITY

    def __post_init__(self):
        if self.frequency_tolerance <= 0 or self.time_tolerance <= 0:
            raise ValueError("Matching tolerances must be positive")


@dataclass
class SystemConfig:
    """System-level configuration settings.

    Attributes:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional path to a log file.
    """

    log_level: str = "INFO"
    log_file: Optional[str] = None


@dataclass
class StoreSettings:
    """Fingerprint store settings.

    Attributes:
        path: SQLite database file. None keeps fingerprints in memory.
    """

    path: Optional[str] = None


def _section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    """Return a top-level YAML section, empty when absent."""
    section = data.get(name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ValueError(f"'{name}' section must be a mapping, got {type(section).__name__}")
    return section


def _build(cls, kwargs: Dict[str, Any], name: str):
    # Wrong value types surface as TypeError from __post_init__ comparisons
    try:
        return cls(**kwargs)
    except TypeError as e:
        raise ValueError(f"Invalid '{name}' settings: {e}") from e


def _pick(section: Dict[str, Any], cls, name: str) -> Dict[str, Any]:
    """Keep the keys of a YAML section that map to fields of ``cls``."""
    known = {f.name for f in fields(cls)}
    for key in section:
        if key not in known:
            logger.warning(f"Ignoring unknown '{name}' setting: {key}")
    return {k: v for k, v in section.items() if k in known}


def _parse_bands(raw: Any) -> List[FrequencyBand]:
    if not isinstance(raw, list):
        raise ValueError(f"'bands' must be a list, got {type(raw).__name__}")

    bands = []
    for i, item in enumerate(raw):
        if not isinstance(item, dict) or "min" not in item or "max" not in item:
            raise ValueError(f"Band {i} must be a mapping with 'min' and 'max': {item!r}")
        try:
            low, high = float(item["min"]), float(item["max"])
        except (TypeError, ValueError) as e:
            raise ValueError(f"Band {i} has a non-numeric edge: {item!r}") from e
        bands.append(FrequencyBand(low, high, name=str(item.get("name", ""))))
    return bands


@dataclass
class GlobalConfig:
    """Unified configuration for the entire application.

    Loads system settings, extraction parameters, matching tolerances and
    store settings from a single YAML file or structure.
    """

    system: SystemConfig = field(default_factory=SystemConfig)
    fingerprint: FingerprintConfig = field(default_factory=FingerprintConfig)
    matching: MatchingConfig = field(default_factory=MatchingConfig)
    store: StoreSettings = field(default_factory=StoreSettings)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GlobalConfig":
        """Build a GlobalConfig from an already parsed mapping.

        Raises:
            ValueError: If a section, band or value has the wrong shape or type
        """
        if not isinstance(data, dict):
            raise ValueError(f"Configuration must be a mapping, got {type(data).__name__}")

        sys_data = _pick(_section(data, "system"), SystemConfig, "system")
        if not isinstance(sys_data.get("log_level", ""), str):
            raise ValueError(f"'system.log_level' must be a string: {sys_data['log_level']!r}")
        system_config = SystemConfig(**sys_data)

        fp_data = dict(_section(data, "fingerprint"))
        raw_bands = fp_data.pop("bands", None)
        fp_kwargs = _pick(fp_data, FingerprintConfig, "fingerprint")
        if raw_bands is not None:
            fp_kwargs["bands"] = _parse_bands(raw_bands)
        fingerprint_config = _build(FingerprintConfig, fp_kwargs, "fingerprint")

        match_data = _pick(_section(data, "matching"), MatchingConfig, "matching")
        try:
            match_kwargs = {k: float(v) for k, v in match_data.items()}
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid 'matching' settings: {e}") from e
        matching_config = MatchingConfig(**match_kwargs)

        store_data = _pick(_section(data, "store"), StoreSettings, "store")
        if not isinstance(store_data.get("path", ""), (str, type(None))):
            raise ValueError(f"'store.path' must be a string: {store_data['path']!r}")
        store_settings = StoreSettings(**store_data)

        return cls(
            system=system_config,
            fingerprint=fingerprint_config,
            matching=matching_config,
            store=store_settings,
        )

    @classmethod
    def load(cls, path: Union[str, Path]) -> "GlobalConfig":
        """Load the global configuration from a YAML file.

        The YAML file should have the following structure:
        ```yaml
        system:
          log_level: INFO
        fingerprint:
          chunk_size: 2048
          bands:
            - {name: bass, min: 20, max: 300}
        matching:
          match_threshold: 0.7
        store:
          path: fingerprints.db
        ```

        Args:
            path: Path to the configuration YAML file.

        Returns:
            A GlobalConfig object populated with the settings.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}

        config = cls.from_dict(data)

        # Relative store paths are resolved against the config file
        if config.store.path and not Path(config.store.path).is_absolute():
            config.store.path = str(path.parent / config.store.path)

        return config


def setup_logging(system: SystemConfig) -> None:
    """Configure root logging from the system settings."""
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if system.log_file:
        handlers.append(logging.FileHandler(system.log_file))

    logging.basicConfig(
        level=getattr(logging, system.log_level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%H:%M:%S",
        handlers=handlers,
        force=True,
    )
