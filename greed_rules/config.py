#!/usr/bin/env python3
"""
Settings for parsing and caching the rules document, read from YAML.

Example rules.yaml:

    cache_path: data/class_cache.json
    next_origin_after_human: Dwarf
    log_level: INFO
"""

from dataclasses import dataclass, fields
from pathlib import Path

import yaml


@dataclass
class RulesConfig:
    cache_path: str = 'data/class_cache.json'
    next_origin_after_human: str = 'Dwarf'
    log_level: str = 'INFO'


def load_config(path=None) -> RulesConfig:
    """Load a RulesConfig from a YAML file; no path gives the defaults."""
    if path is None:
        return RulesConfig()

    path = Path(path)
    with open(path, 'r', encoding='utf-8') as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Error parsing config {path}: {e}") from e

    if data is None:
        return RulesConfig()
    if not isinstance(data, dict):
        raise ValueError(f"Config {path} must be a mapping, got {type(data).__name__}")

    known = {f.name for f in fields(RulesConfig)}
    unknown = sorted(str(key) for key in set(data) - known)
    if unknown:
        raise ValueError(f"Unknown keys in config {path}: {', '.join(unknown)}")

    settings = {key: value for key, value in data.items() if value is not None}
    for key, value in settings.items():
        if not isinstance(value, str):
            raise ValueError(f"Config {path}: {key} must be a string, got {type(value).__name__}")
    return RulesConfig(**settings)
