"""
Configuration loading.

Settings come from a YAML file merged over built-in defaults. The file path
is taken from the caller, then the ROUTINE_ENGINE_CONFIG environment
variable, then ``config.yaml`` in the working directory.
"""

import copy
import logging
import os

import yaml


logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "ROUTINE_ENGINE_CONFIG"
DEFAULT_CONFIG_FILE = "config.yaml"

DEFAULT_CONFIG = {
    "catalog_path": None,
    "equipment_aliases": {},
    "analysis": {
        "focus_muscle_group": "biceps",
        "preferred_equipment": "dumbbells",
    },
    "improver": {
        "compound_rest_floor_seconds": 90,
    },
    "similarity": {
        "default_limit": 5,
    },
}


def _merge(base, override):
    merged = copy.deepcopy(base)
    for key, value in (override or {}).items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def resolve_config_path(path=None):
    return path or os.getenv(CONFIG_ENV_VAR) or DEFAULT_CONFIG_FILE


def load_config(path=None):
    """
    Load settings, falling back to defaults.

    A missing file silently yields the defaults; an unreadable or malformed
    one yields the defaults with a warning.
    """
    config_path = resolve_config_path(path)
    if not os.path.exists(config_path):
        logger.debug("No config file at %s, using defaults", config_path)
        return copy.deepcopy(DEFAULT_CONFIG)

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            loaded = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Could not read config %s (%s), using defaults", config_path, e)
        return copy.deepcopy(DEFAULT_CONFIG)

    if not isinstance(loaded, dict):
        logger.warning("Config %s is not a mapping, using defaults", config_path)
        return copy.deepcopy(DEFAULT_CONFIG)

    return _merge(DEFAULT_CONFIG, loaded)
