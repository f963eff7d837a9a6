"""
Configuration Management
========================
Loads YAML config files with environment variable expansion and path resolution.

Usage:
    from hazardcast.config import load_config
    cfg = load_config()                            # defaults + configs/default.yaml
    cfg = load_config("configs/my_run.yaml")       # loads with overrides

    # Access values
    cfg['paths']['fire_csv']
    cfg['sampling']['local_fraction']
"""

import copy
import os
import re
import yaml
from pathlib import Path

# Project root: directory containing hazardcast/
PROJECT_ROOT = Path(__file__).resolve().parent.parent

# Single source of default values; configs/default.yaml (site paths) and any
# override are merged on top.
DEFAULTS = {
    "paths": {
        "fire_csv": "data/firedata.csv",
        "pollution_csv": "data/pollution_2000_2023_with_coords.csv",
        "output_dir": "outputs",
    },
    "sampling": {
        "negative_ratio": 1.0,
        "local_fraction": 0.4,
        "global_fraction": 0.3,
        "local_radius_deg": 0.5,
        "local_doy_window": 15,
        "cell_size_deg": 1.0,
        "local_attempt_multiplier": 5,
        "global_attempt_multiplier": 10,
        "never_attempt_multiplier": 10,
    },
    "encoding": {
        "year_min": 1990,
        "year_max": 2030,
    },
    "training": {
        "train_ratio": 0.8,
        "seed": 42,
        "fire": {
            "epochs": 50,
            "batch_size": 1024,
            "lr": 1e-3,
            "class_loss_weight": 1.0,
            "size_loss_weight": 0.1,
        },
        "pollution": {
            "epochs": 100,
            "batch_size": 256,
            "lr": 1e-3,
            "patience": 5,
            "dropout": 0.2,
        },
    },
}

_cached_config = None
_cached_path = None


def _expand_env_vars(value):
    """Expand ${ENV_VAR} references in string values."""
    if not isinstance(value, str):
        return value

    def replacer(match):
        var_name = match.group(1)
        return os.environ.get(var_name, "")

    return re.sub(r'\$\{(\w+)\}', replacer, value)


def _expand_recursive(obj):
    """Recursively expand environment variables in a config dict."""
    if isinstance(obj, dict):
        return {k: _expand_recursive(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_expand_recursive(item) for item in obj]
    elif isinstance(obj, str):
        return _expand_env_vars(obj)
    return obj


def _deep_merge(base, override):
    """Deep merge override dict into base dict."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _read_yaml(path):
    with open(path, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f) or {}


def load_config(config_path=None):
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to YAML config file. If None, loads configs/default.yaml.
                     If a non-default path is given, it's merged on top of defaults.

    Returns:
        dict: Configuration dictionary with env vars expanded.
    """
    global _cached_config, _cached_path

    if config_path is not None and _cached_path == config_path and _cached_config is not None:
        return copy.deepcopy(_cached_config)

    config = copy.deepcopy(DEFAULTS)

    default_path = PROJECT_ROOT / "configs" / "default.yaml"
    if default_path.exists():
        config = _deep_merge(config, _read_yaml(default_path))

    # Load overrides if specified
    if config_path is not None:
        override_path = Path(config_path)
        if not override_path.is_absolute():
            override_path = PROJECT_ROOT / override_path
        if not override_path.exists():
            raise FileNotFoundError(f"Config file not found: {override_path}")
        if str(override_path) != str(default_path):
            config = _deep_merge(config, _read_yaml(override_path))

    config = _expand_recursive(config)

    _cached_config = config
    _cached_path = config_path

    return copy.deepcopy(config)


def get_path(config, key):
    """
    Get a path from config, resolving relative paths against project root.

    Args:
        config: Config dict from load_config()
        key: Key in config['paths'], e.g. 'fire_csv'

    Returns:
        str: Resolved absolute path
    """
    path_str = config['paths'][key]
    path = Path(path_str)
    if not path.is_absolute():
        path = PROJECT_ROOT / path
    return str(path)


def add_config_argument(parser):
    """Add --config argument to an argparse parser."""
    parser.add_argument(
        "--config", type=str, default=None,
        help="Path to YAML config file (default: configs/default.yaml)"
    )
