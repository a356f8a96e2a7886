"""Configuration files for the manufacturing line.

``default.yaml`` ships with the package and holds every section
``LineConfig`` reads. Other files only need the keys they change and are
layered over it with ``load_layered``.
"""

import copy
from pathlib import Path
from typing import Iterable, Optional, Union

import yaml

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent / "default.yaml"

PathLike = Union[str, Path]


def load_config(config_path: Optional[PathLike] = None) -> dict:
    """Load one configuration file.

    Args:
        config_path: YAML file to read (the packaged defaults if omitted)

    Returns:
        Configuration dictionary, empty for an empty file

    Raises:
        ValueError: If the document is not a mapping of sections
    """
    path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH
    with open(path, 'r') as f:
        config = yaml.safe_load(f)

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ValueError(f"{path} must hold a mapping of sections, got {type(config).__name__}")
    return config


def merge_configs(base_config: dict, override_config: dict) -> dict:
    """Merge two configuration dictionaries without modifying either.

    Nested dictionaries are merged recursively; any other value in
    ``override_config`` replaces the base value.

    Args:
        base_config: Base configuration
        override_config: Override configuration

    Returns:
        Merged configuration
    """
    merged = copy.deepcopy(base_config)
    for key, value in override_config.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = merge_configs(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def load_layered(config_path: Optional[PathLike] = None,
                 overrides: Iterable[PathLike] = ()) -> dict:
    """Load a base file and merge each override file over it, in order."""
    config = load_config(config_path)
    for override_path in overrides:
        config = merge_configs(config, load_config(override_path))
    return config
