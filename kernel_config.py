#!/usr/bin/env python3
"""
Configuration for the reference kernel tools.
Settings live in kernel_config.json; missing keys fall back to the defaults.
"""

import copy
import json
import os

CONFIG_FILE = "kernel_config.json"

DEFAULT_CONFIG = {
    "precision_bits": 165,
    "use_arbitrary_precision": False,
    "logging": {
        "level": "INFO",
        "log_dir": "logs",
    },
    "demo": {
        "node_count": 5,
        "grid_size": 200,
        "passband_edge": 0.3,
        "stopband_edge": 0.5,
    },
}


def _merge(defaults, overrides):
    merged = copy.deepcopy(defaults)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def validate_config(config):
    """Raise ValueError on settings the kernel cannot use."""
    bits = config["precision_bits"]
    if isinstance(bits, bool) or not isinstance(bits, int) or bits < 2:
        raise ValueError(f"precision_bits must be an integer >= 2, got {bits!r}")
    demo = config["demo"]
    if not 0 < demo["passband_edge"] < demo["stopband_edge"] < 1:
        raise ValueError("demo band edges must satisfy 0 < passband_edge < stopband_edge < 1")
    if demo["node_count"] < 2:
        raise ValueError("demo node_count must be at least 2")
    return config


def load_config(config_file=CONFIG_FILE):
    """Load the configuration, filling in defaults for anything missing."""
    if not os.path.exists(config_file):
        return copy.deepcopy(DEFAULT_CONFIG)
    with open(config_file, 'r') as f:
        return validate_config(_merge(DEFAULT_CONFIG, json.load(f)))


def save_config(config, config_file=CONFIG_FILE):
    """Save the configuration."""
    validate_config(config)
    with open(config_file, 'w') as f:
        json.dump(config, f, indent=2)
