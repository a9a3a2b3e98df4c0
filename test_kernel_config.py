#!/usr/bin/env python3
"""
Tests for the JSON configuration layer.
"""

import json
from pathlib import Path

import pytest

from kernel_config import DEFAULT_CONFIG, load_config, save_config


def test_missing_file_gives_defaults(tmp_path):
    config = load_config(str(tmp_path / "absent.json"))
    assert config == DEFAULT_CONFIG
    config['demo']['node_count'] = 99
    assert DEFAULT_CONFIG['demo']['node_count'] == 5


def test_partial_file_is_merged(tmp_path):
    path = tmp_path / "kernel_config.json"
    path.write_text(json.dumps({"precision_bits": 256, "demo": {"grid_size": 50}, "notes": "x"}))
    config = load_config(str(path))
    assert config['precision_bits'] == 256
    assert config['demo']['grid_size'] == 50
    assert config['demo']['node_count'] == 5
    assert config['logging']['level'] == "INFO"
    assert config['notes'] == "x"


def test_save_round_trip(tmp_path):
    path = str(tmp_path / "kernel_config.json")
    config = load_config(path)
    config['use_arbitrary_precision'] = True
    save_config(config, path)
    assert load_config(path) == config


@pytest.mark.parametrize("bits", [1, "165", 12.5, True])
def test_invalid_precision_rejected(tmp_path, bits):
    path = tmp_path / "kernel_config.json"
    path.write_text(json.dumps({"precision_bits": bits}))
    with pytest.raises(ValueError):
        load_config(str(path))


def test_invalid_band_edges_rejected(tmp_path):
    path = tmp_path / "kernel_config.json"
    path.write_text(json.dumps({"demo": {"passband_edge": 0.6, "stopband_edge": 0.5}}))
    with pytest.raises(ValueError):
        load_config(str(path))


def test_shipped_config_loads():
    config = load_config(str(Path(__file__).resolve().parent / "kernel_config.json"))
    assert config == DEFAULT_CONFIG
