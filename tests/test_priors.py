"""
Tests for the category-profile network priors and the prior/online blend.
"""

import numpy as np
import pytest

from wx_config import ScoringConfig
from wx_scoring.features import FEATURE_INDEX, FEATURE_NAMES
from wx_scoring.priors import (
    CategoryProfile,
    blend_prior_and_online,
    get_prior,
    profile_for_category,
)


class TestProfileMatching:
    @pytest.mark.parametrize(
        "category,profile",
        [
            ("winter", CategoryProfile.HUMIDITY),
            ("Indoor Air", CategoryProfile.HUMIDITY),
            ("Humidifiers", CategoryProfile.HUMIDITY),
            ("summer", CategoryProfile.WARM_WEATHER),
            ("Outdoor Gear", CategoryProfile.WARM_WEATHER),
            ("Rain Jackets", CategoryProfile.PRECIPITATION),
            ("wellness", CategoryProfile.NEUTRAL),
            ("", CategoryProfile.NEUTRAL),
        ],
    )
    def test_profile(self, category, profile):
        assert profile_for_category(category) is profile

    def test_first_tag_wins(self):
        # "indoor" is checked before "rain"
        assert profile_for_category("indoor rain gear") is CategoryProfile.HUMIDITY


class TestGetPrior:
    def test_humidity_prior(self):
        prior = get_prior("winter", "desert")
        assert prior.mu.shape == (len(FEATURE_NAMES),)
        assert prior.mu[FEATURE_INDEX["VPD(kPa)"]] == pytest.approx(0.35)
        assert prior.mu[FEATURE_INDEX["RH_Anom"]] == pytest.approx(-0.12)
        assert prior.mu[FEATURE_INDEX["Dryness01"]] == pytest.approx(0.25)
        assert prior.pool_size == 7
        assert prior.sigma == pytest.approx(0.45)

    def test_cold_humid_nudge(self):
        base = get_prior("winter", "desert")
        nudged = get_prior("winter", "humid_continental")
        diff = nudged.mu - base.mu
        assert diff[FEATURE_INDEX["HDD"]] == pytest.approx(0.05)
        assert diff[FEATURE_INDEX["TempF"]] == pytest.approx(0.04)
        assert np.count_nonzero(diff) == 2

    def test_warm_humid_nudge(self):
        prior = get_prior("summer", "humid_subtropical")
        assert prior.mu[FEATURE_INDEX["VPD(kPa)"]] == pytest.approx(0.12 + 0.05)
        assert prior.mu[FEATURE_INDEX["RH_Anom"]] == pytest.approx(-0.05)

    def test_neutral_prior(self):
        prior = get_prior("wellness", "semi_arid")
        assert not prior.mu.any()
        assert prior.pool_size == 3

    def test_pool_sizes(self):
        assert get_prior("summer", "desert").pool_size == 6
        assert get_prior("rain", "desert").pool_size == 5

    def test_fresh_arrays(self):
        a = get_prior("winter", "desert")
        a.mu[0] = 99.0
        assert get_prior("winter", "desert").mu[0] == 0.0


class TestBlend:
    def test_no_online_estimate(self):
        prior = get_prior("winter", "desert")
        blend = blend_prior_and_online(prior, None)
        assert blend.prior_only
        assert blend.confidence == pytest.approx(0.6)
        np.testing.assert_array_equal(blend.theta, prior.mu)

    def test_thin_pool_ignores_online(self):
        prior = get_prior("wellness", "desert")
        blend = blend_prior_and_online(prior, np.ones(len(FEATURE_NAMES)))
        assert blend.prior_only
        assert blend.confidence == pytest.approx(0.6)

    def test_even_blend(self):
        prior = get_prior("winter", "desert")
        online = np.ones(len(FEATURE_NAMES))
        blend = blend_prior_and_online(prior, online)
        assert not blend.prior_only
        assert blend.confidence == pytest.approx(0.75)
        np.testing.assert_allclose(blend.theta, 0.5 * prior.mu + 0.5 * online)

    def test_prior_only_never_more_confident(self):
        prior = get_prior("rain", "desert")
        only = blend_prior_and_online(prior, None)
        mixed = blend_prior_and_online(prior, np.zeros(len(FEATURE_NAMES)))
        assert only.confidence <= mixed.confidence

    def test_configurable_weights(self):
        config = ScoringConfig(prior_weight=0.8, min_prior_pool=8)
        prior = get_prior("winter", "desert")
        assert blend_prior_and_online(prior, np.ones(21), config).prior_only
        config = ScoringConfig(prior_weight=0.8, min_prior_pool=2)
        blend = blend_prior_and_online(prior, np.ones(21), config)
        np.testing.assert_allclose(blend.theta, 0.8 * prior.mu + 0.2)
