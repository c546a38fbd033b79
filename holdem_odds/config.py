"""
config.py

Loads config.yaml (repo root by default) over built-in defaults.
HOLDEM_ODDS_CONFIG in the environment or a .env file points at another file.
"""
import os
import copy
from typing import Optional

import yaml
from dotenv import load_dotenv

load_dotenv()

DEFAULT_CONFIG = {
    'simulation': {
        'trials': 10_000,
        'batch_size': 500,
        'max_opponents': 6,
        'max_opponent_examples': 10,
        'seed': None,
    },
    'analyzer': {
        'max_workers': 2,
    },
    'logging': {
        'level': 'INFO',
        'log_to_file': False,
        'log_dir': 'logs',
    },
}


def _merge(base: dict, override: dict) -> dict:
    merged = copy.deepcopy(base)
    for key, value in (override or {}).items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(path: Optional[str] = None) -> dict:
    """
    Read a YAML config file and merge it over DEFAULT_CONFIG.

    A missing file is not an error; the defaults are returned. Single values can
    be overridden with HOLDEM_ODDS_TRIALS and HOLDEM_ODDS_LOG_LEVEL.
    """
    if path is None:
        path = os.getenv(
            'HOLDEM_ODDS_CONFIG',
            os.path.join(os.path.dirname(__file__), '..', 'config.yaml')
        )

    loaded = {}
    if os.path.exists(path):
        with open(path, 'r', encoding='utf-8') as f:
            loaded = yaml.safe_load(f) or {}

    config = _merge(DEFAULT_CONFIG, loaded)

    trials = os.getenv('HOLDEM_ODDS_TRIALS')
    if trials:
        config['simulation']['trials'] = int(trials)
    log_level = os.getenv('HOLDEM_ODDS_LOG_LEVEL')
    if log_level:
        config['logging']['level'] = log_level.upper()
    return config


config = load_config()
