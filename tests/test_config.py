from pathlib import Path

import pytest
import yaml

from fpmatch.utils.config import (
    DEFAULT_CONFIG,
    Config,
    ExtractionConfig,
    MatchingConfig,
    config_from_dict,
    load_config,
    load_yaml,
    merge_configs,
)

DEFAULT_YAML = Path(__file__).parent.parent / "configs" / "default.yaml"


def write_yaml(path, data):
    path.write_text(yaml.safe_dump(data))
    return path


def test_defaults():
    config = Config()
    assert config.extraction.orientation_distance == 16
    assert config.matching.distance_threshold == 5
    assert config.matching.orientation_threshold == 20
    assert config.matching.found_threshold == 20
    assert config.matching.match_angle_offset == 2
    assert config.matching.max_trials is None


def test_shipped_yaml_matches_defaults():
    assert load_config(DEFAULT_YAML) == DEFAULT_CONFIG


def test_partial_override(tmp_path):
    path = write_yaml(tmp_path / "c.yaml", {'matching': {'found_threshold': 12}})
    config = load_config(path)

    assert config.matching.found_threshold == 12
    assert config.matching.distance_threshold == 5
    assert config.extraction == ExtractionConfig()


def test_base_config_merge(tmp_path):
    base = write_yaml(tmp_path / "base.yaml", {'matching': {'found_threshold': 12, 'match_angle_offset': 4}})
    override = write_yaml(tmp_path / "over.yaml", {'matching': {'found_threshold': 8}})

    config = load_config(override, base_config_path=base)
    assert config.matching.found_threshold == 8
    assert config.matching.match_angle_offset == 4


def test_merge_configs_is_recursive():
    merged = merge_configs({'a': {'x': 1, 'y': 2}, 'b': 1}, {'a': {'y': 3}})
    assert merged == {'a': {'x': 1, 'y': 3}, 'b': 1}


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_yaml(tmp_path / "missing.yaml")


def test_empty_file_gives_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert load_config(path) == Config()


def test_unknown_section_rejected():
    with pytest.raises(ValueError):
        config_from_dict({'matcher': {}})


def test_unknown_key_rejected():
    with pytest.raises(ValueError):
        config_from_dict({'matching': {'radius': 3}})


@pytest.mark.parametrize("kwargs", [
    {'distance_threshold': -1},
    {'found_threshold': -5},
    {'match_angle_offset': -1},
    {'max_trials': -1},
])
def test_invalid_matching_values(kwargs):
    with pytest.raises(ValueError):
        MatchingConfig(**kwargs)


def test_invalid_extraction_values():
    with pytest.raises(ValueError):
        ExtractionConfig(orientation_distance=-1)
    with pytest.raises(ValueError):
        ExtractionConfig(max_thinning_iterations=0)
