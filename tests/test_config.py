"""
Tests for YAML-backed platform config and the brand catalog.
"""

import pytest
import yaml

from wx_config import (
    CONFIG_DIR,
    PlatformConfig,
    ScoringConfig,
    get_brand,
    load_brand_catalog,
    load_platform_config,
    parse_platform_config,
)
from wx_config.loader import BRAND_CATALOG_ENV, PLATFORM_CONFIG_ENV


class TestPlatformConfig:
    def test_packaged_file_matches_defaults(self):
        assert load_platform_config() == PlatformConfig()

    def test_is_cached(self):
        assert load_platform_config() is load_platform_config()

    def test_partial_sections_keep_defaults(self):
        config = parse_platform_config({"automation": {"confidence_threshold": 0.5}})
        assert config.automation.confidence_threshold == 0.5
        assert config.automation.audit_capacity == 100
        assert config.scoring.ridge_lambda == 5.0

    def test_unknown_key(self):
        with pytest.raises(ValueError, match="ScoringConfig"):
            parse_platform_config({"scoring": {"ridge_lambda": 1.0, "lamda": 2.0}})

    def test_every_scoring_key_is_a_live_field(self):
        # the learner-level alpha is an argument default, not a tunable
        with pytest.raises(ValueError, match="ucb_alpha"):
            parse_platform_config({"scoring": {"ucb_alpha": 1.2}})
        packaged = yaml.safe_load((CONFIG_DIR / "platform.yaml").read_text())
        assert set(packaged["scoring"]) == set(vars(ScoringConfig()))

    def test_unknown_section(self):
        with pytest.raises(ValueError):
            parse_platform_config({"dashboard": {}})

    def test_env_override(self, tmp_path, monkeypatch):
        path = tmp_path / "platform.yaml"
        path.write_text(yaml.safe_dump({"staging": {"max_daily": 0.25}}))
        monkeypatch.setenv(PLATFORM_CONFIG_ENV, str(path))
        load_platform_config.cache_clear()
        assert load_platform_config().staging.max_daily == 0.25

    def test_explicit_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_platform_config(str(tmp_path / "nope.yaml"))


class TestBrandCatalog:
    def test_demo_brands(self):
        assert set(load_brand_catalog()) == {"norsari", "patagonia", "kingsford", "canopy"}

    def test_canopy(self, canopy):
        assert canopy.name == "Canopy"
        assert canopy.home_state == "NY"
        assert canopy.location.lat == pytest.approx(40.7128)
        assert list(canopy.categories) == ["winter", "summer", "indoor", "wellness"]
        assert "Large Room Humidifier" in canopy.products_for("winter")
        assert canopy.products_for("garden") == ()

    def test_unknown_brand(self):
        with pytest.raises(KeyError):
            get_brand("acme")

    def test_env_override(self, tmp_path, monkeypatch):
        path = tmp_path / "brands.yaml"
        path.write_text(
            yaml.safe_dump(
                {
                    "brands": {
                        "acme": {
                            "name": "Acme",
                            "location": {"city": "Denver, CO", "lat": 39.7, "lng": -105.0},
                            "home_state": "CO",
                            "categories": {"rain": ["Umbrellas"]},
                        }
                    }
                }
            )
        )
        monkeypatch.setenv(BRAND_CATALOG_ENV, str(path))
        load_brand_catalog.cache_clear()
        brand = get_brand("acme")
        assert brand.products_for("rain") == ("Umbrellas",)
        assert brand.monthly_revenue == 0.0
