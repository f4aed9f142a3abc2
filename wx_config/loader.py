"""
Utility helpers to locate and read the platform's YAML files.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Optional

import yaml

CONFIG_DIR = Path(__file__).resolve().parent

PLATFORM_CONFIG_ENV = "WX_PLATFORM_CONFIG"
BRAND_CATALOG_ENV = "WX_BRAND_CATALOG"


def read_yaml(path: Path) -> Dict:
    with path.open("r", encoding="utf-8") as handle:
        return yaml.safe_load(handle) or {}


def resolve_config_path(
    explicit: Optional[str],
    env_var: str,
    default_name: str,
) -> Path:
    """
    Pick the file to load: explicit argument, then environment variable,
    then the copy shipped in this package.
    """
    candidate = explicit or os.getenv(env_var)
    if candidate:
        path = Path(candidate)
        if not path.exists():
            raise FileNotFoundError(f"Config file '{path}' not found.")
        return path
    return CONFIG_DIR / default_name


__all__ = [
    "BRAND_CATALOG_ENV",
    "CONFIG_DIR",
    "PLATFORM_CONFIG_ENV",
    "read_yaml",
    "resolve_config_path",
]
