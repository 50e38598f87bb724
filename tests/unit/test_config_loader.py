"""Unit tests for the JSON configuration loader."""

import json
from pathlib import Path

from statclust.config.loader import AppConfig, load_config, number_parameter
from statclust.core.errors import ConfigurationError

import pytest


def _raw():
    return {
        'variables': ['x', 'y'],
        'ingestion': {'type': 'csv', 'parameters': {'file_name': 'a.csv'}},
        'clustering': {'method': 'kmeans', 'parameters': {'nb_clusters': 3}},
        'reporting': {'results_folder': 'out'},
    }


def test_load_config_defaults(tmp_path):
    """Optional sections fall back to defaults."""
    path = tmp_path / 'cfg.json'
    path.write_text(json.dumps(_raw()))
    cfg = load_config(path)

    assert isinstance(cfg, AppConfig)
    assert cfg.variables == ['x', 'y']
    assert cfg.clustering.parameters['nb_clusters'] == 3
    assert cfg.reporting.results_folder == Path('out')
    assert cfg.reporting.plots_folder is None
    assert cfg.logging.level == 'INFO'
    assert cfg.standardize == 'none'
    assert cfg.label_field is None


def test_missing_section_rejected(tmp_path):
    """A config without clustering section is a configuration error."""
    raw = _raw()
    del raw['clustering']
    path = tmp_path / 'cfg.json'
    path.write_text(json.dumps(raw))
    with pytest.raises(ConfigurationError):
        load_config(path)


def test_sample_config_file(package_directory):
    """The shipped sample configuration loads."""
    cfg = load_config(package_directory / 'statclust' / 'config' / 'sample_config_file.json')
    assert cfg.clustering.method == 'hierarchical'
    assert cfg.clustering.parameters['solution']['type'] == 'range'
    assert cfg.label_field == 'name'


def test_optional_fields(tmp_path):
    """Standardization direction and the final centers file are optional."""
    raw = _raw()
    path = tmp_path / 'cfg.json'
    path.write_text(json.dumps(raw))
    cfg = load_config(path)
    assert cfg.standardize_by == 'variable'
    assert cfg.reporting.final_centers_file is None

    raw['standardize_by'] = 'case'
    raw['reporting']['final_centers_file'] = 'out/centers.csv'
    path.write_text(json.dumps(raw))
    cfg = load_config(path)
    assert cfg.standardize_by == 'case'
    assert cfg.reporting.final_centers_file == Path('out/centers.csv')


def test_number_parameter():
    """Numbers may be written as strings; anything else is a configuration error."""
    assert number_parameter({'k': '3'}, 'k') == 3
    assert number_parameter({'k': 3.0}, 'k') == 3
    assert number_parameter({'c': '0.02'}, 'c', float) == pytest.approx(0.02)
    assert number_parameter({}, 'k', int, 10) == 10
    assert number_parameter({'k': None}, 'k', int, 10) == 10
    for bad in ({'k': 'three'}, {'k': 2.5}, {'k': [2]}, {'k': True}):
        with pytest.raises(ConfigurationError):
            number_parameter(bad, 'k')
