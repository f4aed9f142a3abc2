from .brands import Brand, BrandLocation, get_brand, load_brand_catalog
from .loader import CONFIG_DIR
from .settings import (
    AutomationConfig,
    PlatformConfig,
    RecommendationConfig,
    SafetyConfig,
    ScoringConfig,
    StagingConfig,
    load_platform_config,
    parse_platform_config,
)

__all__ = [
    "AutomationConfig",
    "Brand",
    "BrandLocation",
    "CONFIG_DIR",
    "PlatformConfig",
    "RecommendationConfig",
    "SafetyConfig",
    "ScoringConfig",
    "StagingConfig",
    "get_brand",
    "load_brand_catalog",
    "load_platform_config",
    "parse_platform_config",
]
