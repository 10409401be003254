"""Configuration file loading.

A YAML file can override the header defaults of new indexes and the
duplicate policy::

    header:
      url: https://cpan.example.com/modules/02packages.details.txt
      intended_for: Our private CPAN
    index:
      allow_packages_only_once: false

The file comes from the ``path`` argument, else from the
PACKAGEDETAILS_CONFIG environment variable. With neither, defaults apply.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional

import yaml

from packagedetails.constants import Constants
from packagedetails.index import IndexConfig

logger = logging.getLogger(__name__)

_HEADER_ATTRIBUTES = ("file", "url", "description", "columns", "intended_for", "written_by")


def _load_yaml(config_path: str) -> Dict[str, Any]:
    if not os.path.isfile(config_path):
        logger.warning("Config file not found: %s", config_path)
        return {}
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.error("Failed to load config %s: %s", config_path, e)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring config %s: top level is not a mapping", config_path)
        return {}
    return data


def load_config(path: Optional[str] = None) -> IndexConfig:
    """Build an IndexConfig from defaults plus an optional YAML file."""
    config_path = path or os.environ.get(Constants.ENV_CONFIG)
    config = IndexConfig()
    if not config_path:
        return config

    data = _load_yaml(config_path)
    header = data.get("header") or {}
    if not isinstance(header, dict):
        logger.warning("Ignoring 'header' in %s: not a mapping", config_path)
        header = {}
    for key, value in header.items():
        name = str(key).strip().lower().replace("-", "_")
        if name in _HEADER_ATTRIBUTES:
            setattr(config, name, str(value))
        else:
            config.extra_fields[name] = str(value)

    index_section = data.get("index") or {}
    if isinstance(index_section, dict) and "allow_packages_only_once" in index_section:
        config.allow_packages_only_once = bool(index_section["allow_packages_only_once"])

    logger.info("Loaded config from: %s", config_path)
    return config
