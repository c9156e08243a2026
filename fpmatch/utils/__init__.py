"""
Utility modules for fingerprint minutiae matching.

`fpmatch.utils.io` and `fpmatch.utils.visualization` depend on the
minutiae package and are imported by their module path.
"""

from .config import (
    Config,
    ExtractionConfig,
    MatchingConfig,
    LoggingConfig,
    load_config,
    load_yaml,
    merge_configs,
    config_from_dict,
    DEFAULT_CONFIG,
    ORIENTATION_DISTANCE,
    DISTANCE_THRESHOLD,
    FOUND_THRESHOLD,
    ORIENTATION_THRESHOLD,
    MATCH_ANGLE_OFFSET,
)
from .logger import setup_logger

__all__ = [
    # Config
    'Config',
    'ExtractionConfig',
    'MatchingConfig',
    'LoggingConfig',
    'load_config',
    'load_yaml',
    'merge_configs',
    'config_from_dict',
    'DEFAULT_CONFIG',
    'ORIENTATION_DISTANCE',
    'DISTANCE_THRESHOLD',
    'FOUND_THRESHOLD',
    'ORIENTATION_THRESHOLD',
    'MATCH_ANGLE_OFFSET',
    # Logger
    'setup_logger',
]
