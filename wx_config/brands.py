"""
Demo brand catalog.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, Mapping, Optional, Tuple

from .loader import BRAND_CATALOG_ENV, read_yaml, resolve_config_path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BrandLocation:
    city: str
    lat: float
    lng: float


@dataclass(frozen=True)
class Brand:
    key: str
    name: str
    description: str
    location: BrandLocation
    home_state: str
    categories: Mapping[str, Tuple[str, ...]]
    monthly_revenue: float = 0.0
    avg_order_value: float = 0.0
    conversion_rate: float = 0.0

    def products_for(self, category: str) -> Tuple[str, ...]:
        return self.categories.get(category, ())


def _parse_brand(key: str, raw: Mapping) -> Brand:
    loc = raw["location"]
    return Brand(
        key=key,
        name=raw["name"],
        description=raw.get("description", ""),
        location=BrandLocation(city=loc["city"], lat=float(loc["lat"]), lng=float(loc["lng"])),
        home_state=raw["home_state"],
        categories={cat: tuple(items) for cat, items in raw["categories"].items()},
        monthly_revenue=float(raw.get("monthly_revenue", 0.0)),
        avg_order_value=float(raw.get("avg_order_value", 0.0)),
        conversion_rate=float(raw.get("conversion_rate", 0.0)),
    )


@lru_cache
def load_brand_catalog(path: Optional[str] = None) -> Dict[str, Brand]:
    catalog_path = resolve_config_path(path, BRAND_CATALOG_ENV, "brands.yaml")
    raw = read_yaml(catalog_path)
    brands = {key: _parse_brand(key, params) for key, params in raw["brands"].items()}
    logger.info(f"Loaded {len(brands)} brands from {catalog_path}")
    return brands


def get_brand(key: str, path: Optional[str] = None) -> Brand:
    brands = load_brand_catalog(path)
    if key not in brands:
        raise KeyError(f"Brand '{key}' not found.")
    return brands[key]


__all__ = ["Brand", "BrandLocation", "get_brand", "load_brand_catalog"]
