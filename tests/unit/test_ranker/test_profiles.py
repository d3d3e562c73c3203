"""Unit tests for weight profiles and the profile catalog."""

import math

import pytest

from matchrank.errors import ConfigurationError
from matchrank.ranker import ProfileCatalog, WeightProfile

from tests.helpers.factories import FEED_WEIGHTS, JOB_WEIGHTS, make_profile


class TestWeightProfileValidation:
    """Tests for profile construction rules."""

    def test_valid_profiles(self) -> None:
        assert make_profile(weights=FEED_WEIGHTS).factors == tuple(sorted(FEED_WEIGHTS))
        assert len(make_profile(weights=JOB_WEIGHTS).weights) == 7

    def test_sum_within_tolerance(self) -> None:
        WeightProfile("thirds", {"engagement": 1 / 3, "quality": 1 / 3, "relationship": 1 / 3})

    def test_sum_off_by_more_than_tolerance(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            WeightProfile("short", {"engagement": 0.5, "quality": 0.4})
        assert "short" in str(exc_info.value)
        assert exc_info.value.errors[0]["loc"] == "weights"

    def test_never_renormalizes(self) -> None:
        """Weights summing to 2.0 are rejected rather than scaled down."""
        with pytest.raises(ConfigurationError):
            WeightProfile("double", {"engagement": 1.0, "quality": 1.0})

    def test_negative_weight(self) -> None:
        with pytest.raises(ConfigurationError, match="neg"):
            WeightProfile("neg", {"engagement": 1.2, "quality": -0.2})

    @pytest.mark.parametrize("bad", [math.inf, math.nan])
    def test_non_finite_weight(self, bad: float) -> None:
        with pytest.raises(ConfigurationError):
            WeightProfile("nonfinite", {"engagement": bad})

    def test_boolean_weight(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            WeightProfile("flag", {"engagement": True})  # type: ignore[dict-item]
        assert exc_info.value.errors == [
            {"loc": "weights.engagement", "msg": "weight must be a number"}
        ]

    def test_unknown_factor(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            WeightProfile("unknown", {"charisma": 1.0})
        assert exc_info.value.errors[0]["loc"] == "weights.charisma"

    def test_empty_profile(self) -> None:
        with pytest.raises(ConfigurationError):
            WeightProfile("empty", {})

    def test_custom_known_factors(self) -> None:
        profile = WeightProfile("custom", {"constant": 1.0}, known_factors={"constant"})
        assert profile.factors == ("constant",)

    def test_weights_are_read_only(self) -> None:
        source = dict(FEED_WEIGHTS)
        profile = make_profile(weights=source)
        source["engagement"] = 0.9
        assert profile.weights["engagement"] == 0.25
        with pytest.raises(TypeError):
            profile.weights["engagement"] = 0.5  # type: ignore[index]


class TestProfileCatalog:
    """Tests for profile lookup."""

    def test_get(self) -> None:
        catalog = ProfileCatalog([make_profile("feed"), make_profile("job", JOB_WEIGHTS)])
        assert catalog.get("job").profile_id == "job"
        assert "feed" in catalog
        assert catalog.profile_ids == ["feed", "job"]
        assert len(catalog) == 2

    def test_unknown_id(self) -> None:
        with pytest.raises(ConfigurationError, match="nope"):
            ProfileCatalog().get("nope")

    def test_duplicate_id(self) -> None:
        with pytest.raises(ConfigurationError, match="Duplicate"):
            ProfileCatalog([make_profile("feed"), make_profile("feed")])
