"""Unit tests for pre-apply matching."""

from datetime import datetime

import pytest

from matchrank.data_model import JobCandidate, PostCandidate, ViewerContext
from matchrank.errors import ConfigurationError
from matchrank.pre_apply import PreApplyMatcher
from matchrank.ranker import Scorer, WeightProfile
from matchrank.signals import DEFAULT_REGISTRY, ScoringContext

from tests.helpers.factories import make_job, make_viewer
from tests.helpers.time import FIXED_NOW


PRE_APPLY = WeightProfile(
    "pre_apply_v1",
    {
        "skill_match": 0.4,
        "experience_match": 0.2,
        "location_match": 0.2,
        "industry_match": 0.1,
        "salary_match": 0.1,
    },
)


@pytest.fixture
def job() -> JobCandidate:
    return make_job(
        required_skills=["Python", "SQL"],
        experience_level="mid",
        location="Sydney NSW",
        industry="technology",
        salary_min=90000,
        salary_max=120000,
    )


@pytest.fixture
def viewers() -> list[ViewerContext]:
    return [
        # skill 0.5, exp 1.0, location 0.3, industry 0.7, salary 0.8 -> 0.61
        make_viewer(
            "v-partial",
            skills=["python"],
            experience_years=3,
            location="Melbourne VIC",
            industry_preferences=["software"],
            salary_min=100000,
        ),
        # skill 1.0, exp 0.9, location 0.8, industry 1.0, salary 0.5 -> 0.89
        make_viewer(
            "v-good",
            skills=["python", "sql"],
            experience_years=7,
            location="Parramatta NSW",
            industry_preferences=["technology"],
        ),
        make_viewer(
            "v-strong",
            skills=["python", "sql"],
            experience_years=3,
            location="Sydney NSW",
            industry_preferences=["technology"],
            salary_min=80000,
        ),
    ]


class TestPreApplyMatcher:
    """Tests for PreApplyMatcher."""

    def test_matches_above_threshold(
        self, job: JobCandidate, viewers: list[ViewerContext]
    ) -> None:
        matches = PreApplyMatcher().match(job, viewers, PRE_APPLY, now=FIXED_NOW)

        assert [m.viewer_id for m in matches] == ["v-strong", "v-good"]
        assert matches[0].score == pytest.approx(1.0)
        assert matches[1].score == pytest.approx(0.89)
        assert set(matches[1].breakdown) == set(PRE_APPLY.weights)

    def test_lower_threshold(self, job: JobCandidate, viewers: list[ViewerContext]) -> None:
        matches = PreApplyMatcher().match(job, viewers, PRE_APPLY, min_score=0.5, now=FIXED_NOW)
        assert [m.viewer_id for m in matches] == ["v-strong", "v-good", "v-partial"]
        assert matches[2].score == pytest.approx(0.61)

    def test_limit(self, job: JobCandidate, viewers: list[ViewerContext]) -> None:
        matches = PreApplyMatcher().match(job, viewers, PRE_APPLY, now=FIXED_NOW, limit=1)
        assert [m.viewer_id for m in matches] == ["v-strong"]

    def test_ties_broken_by_viewer_id(self, job: JobCandidate) -> None:
        twins = [make_viewer("v-b"), make_viewer("v-a")]
        matches = PreApplyMatcher().match(job, twins, PRE_APPLY, min_score=0.0, now=FIXED_NOW)
        assert [m.viewer_id for m in matches] == ["v-a", "v-b"]

    def test_no_viewers(self, job: JobCandidate) -> None:
        assert PreApplyMatcher().match(job, [], PRE_APPLY, now=FIXED_NOW) == []

    @pytest.mark.parametrize("bad", [-0.1, 1.5])
    def test_threshold_out_of_range(self, job: JobCandidate, bad: float) -> None:
        with pytest.raises(ValueError, match="min_score"):
            PreApplyMatcher().match(job, [make_viewer()], PRE_APPLY, min_score=bad)

    def test_naive_now_rejected(self, job: JobCandidate) -> None:
        with pytest.raises(ValueError, match="timezone-aware"):
            PreApplyMatcher().match(job, [make_viewer()], PRE_APPLY, now=datetime(2026, 1, 1))

    def test_unregistered_factor(self, job: JobCandidate) -> None:
        profile = WeightProfile("odd", {"commute": 1.0}, known_factors={"commute"})
        with pytest.raises(ConfigurationError, match="unregistered"):
            PreApplyMatcher().match(job, [make_viewer()], profile)

    def test_unscorable_job_matches_nobody(
        self, job: JobCandidate, viewers: list[ViewerContext]
    ) -> None:
        def broken(
            candidate: JobCandidate | PostCandidate, viewer: ViewerContext, ctx: ScoringContext
        ) -> float:
            raise KeyError("required_skills")

        scorer = Scorer(registry=DEFAULT_REGISTRY.with_signal("skill_match", broken))
        matches = PreApplyMatcher(scorer=scorer).match(job, viewers, PRE_APPLY, now=FIXED_NOW)
        assert matches == []
