"""
Configuration management for fingerprint minutiae matching.

This module provides the thresholds governing extraction and matching as
dataclasses, and utilities for loading them from YAML files.
"""

from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union
import yaml


# Number of pixels considered in each direction for the orientation regression
ORIENTATION_DISTANCE = 16
# Maximum distance (pixels) between two minutiae considered matching
DISTANCE_THRESHOLD = 5
# Number of matching minutiae needed for two fingerprints to match
FOUND_THRESHOLD = 20
# Maximum orientation difference (degrees) between two matching minutiae
ORIENTATION_THRESHOLD = 20
# Rotation offset (degrees) tested in each direction around an alignment
MATCH_ANGLE_OFFSET = 2


@dataclass
class ExtractionConfig:
    """Configuration for skeletonization and minutiae extraction."""
    orientation_distance: int = ORIENTATION_DISTANCE
    max_thinning_iterations: Optional[int] = None

    def __post_init__(self):
        if self.orientation_distance < 0:
            raise ValueError(
                f"orientation_distance must be non-negative, got {self.orientation_distance}"
            )
        if self.max_thinning_iterations is not None and self.max_thinning_iterations < 1:
            raise ValueError(
                f"max_thinning_iterations must be positive, got {self.max_thinning_iterations}"
            )


@dataclass
class MatchingConfig:
    """Configuration for geometric minutiae matching."""
    distance_threshold: float = DISTANCE_THRESHOLD
    orientation_threshold: int = ORIENTATION_THRESHOLD
    found_threshold: int = FOUND_THRESHOLD
    match_angle_offset: int = MATCH_ANGLE_OFFSET
    # Maximum number of alignments tried by match() (None = exhaustive)
    max_trials: Optional[int] = None

    def __post_init__(self):
        for name in ('distance_threshold', 'orientation_threshold',
                     'found_threshold', 'match_angle_offset'):
            value = getattr(self, name)
            if value < 0:
                raise ValueError(f"{name} must be non-negative, got {value}")
        if self.max_trials is not None and self.max_trials < 0:
            raise ValueError(f"max_trials must be non-negative, got {self.max_trials}")


@dataclass
class LoggingConfig:
    """Configuration for logging."""
    level: str = "INFO"
    log_dir: str = "logs"
    file_output: bool = False


@dataclass
class Config:
    """
    Main configuration container.

    Attributes:
        extraction: Skeletonization and extraction settings
        matching: Matching tolerances and thresholds
        logging: Logging configuration
    """
    extraction: ExtractionConfig = field(default_factory=ExtractionConfig)
    matching: MatchingConfig = field(default_factory=MatchingConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return asdict(self)


def load_yaml(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Load a YAML configuration file.

    Args:
        path: Path to the YAML file

    Returns:
        Dictionary containing the configuration

    Raises:
        FileNotFoundError: If the configuration file does not exist
        yaml.YAMLError: If the YAML file is malformed
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    with open(path, 'r') as f:
        return yaml.safe_load(f) or {}


def merge_configs(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Recursively merge two configuration dictionaries.

    The override dictionary values take precedence over base values.

    Args:
        base: Base configuration dictionary
        override: Override configuration dictionary

    Returns:
        Merged configuration dictionary
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = value

    return result


def config_from_dict(config_dict: Dict[str, Any]) -> Config:
    """
    Build a Config from a (possibly partial) dictionary.

    Missing keys fall back to the defaults.

    Raises:
        ValueError: If a section contains unknown keys or invalid values
    """
    sections = {
        'extraction': ExtractionConfig,
        'matching': MatchingConfig,
        'logging': LoggingConfig,
    }

    unknown = set(config_dict) - set(sections)
    if unknown:
        raise ValueError(f"Unknown configuration sections: {sorted(unknown)}")

    built = {}
    for name, cls in sections.items():
        values = config_dict.get(name) or {}
        try:
            built[name] = cls(**values)
        except TypeError as e:
            raise ValueError(f"Invalid '{name}' configuration: {e}") from e

    return Config(**built)


def load_config(
    config_path: Union[str, Path],
    base_config_path: Optional[Union[str, Path]] = None
) -> Config:
    """
    Load configuration from YAML files.

    Optionally merges with a base configuration file.

    Args:
        config_path: Path to the main configuration file
        base_config_path: Optional path to base configuration to merge with

    Returns:
        Config object with loaded settings
    """
    config_dict = load_yaml(config_path)

    if base_config_path is not None:
        base_dict = load_yaml(base_config_path)
        config_dict = merge_configs(base_dict, config_dict)

    return config_from_dict(config_dict)


# Default configuration instance
DEFAULT_CONFIG = Config()
