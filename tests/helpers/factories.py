"""Record factories for tests."""

from datetime import datetime
from typing import Any

from matchrank.data_model import EngagementCounts, JobCandidate, PostCandidate, ViewerContext
from matchrank.ranker import ScoredCandidate, WeightProfile

from tests.helpers.time import FIXED_NOW


FEED_WEIGHTS = {
    "recency_decay": 0.30,
    "engagement": 0.25,
    "relationship": 0.20,
    "quality": 0.15,
    "cultural_relevance": 0.10,
}

JOB_WEIGHTS = {
    "skill_match": 0.30,
    "experience_match": 0.15,
    "location_match": 0.15,
    "industry_match": 0.10,
    "salary_match": 0.15,
    "affinity": 0.05,
    "recency_step": 0.10,
}


def make_job(
    candidate_id: str = "job-1",
    author_id: str = "employer-1",
    created_at: datetime = FIXED_NOW,
    **fields: Any,
) -> JobCandidate:
    """Create a test JobCandidate."""
    return JobCandidate(
        candidate_id=candidate_id,
        author_id=author_id,
        created_at=created_at,
        **fields,
    )


def make_post(
    candidate_id: str = "post-1",
    author_id: str = "author-1",
    created_at: datetime = FIXED_NOW,
    likes: int = 0,
    comments: int = 0,
    shares: int = 0,
    saves: int = 0,
    **fields: Any,
) -> PostCandidate:
    """Create a test PostCandidate."""
    return PostCandidate(
        candidate_id=candidate_id,
        author_id=author_id,
        created_at=created_at,
        engagement=EngagementCounts(likes=likes, comments=comments, shares=shares, saves=saves),
        **fields,
    )


def make_viewer(viewer_id: str = "viewer-1", **fields: Any) -> ViewerContext:
    """Create a test ViewerContext."""
    return ViewerContext(viewer_id=viewer_id, **fields)


def make_profile(
    profile_id: str = "test_profile",
    weights: dict[str, float] | None = None,
) -> WeightProfile:
    """Create a test WeightProfile (feed weights by default)."""
    return WeightProfile(profile_id=profile_id, weights=weights or FEED_WEIGHTS)


def make_scored(
    candidate_id: str,
    author_id: str,
    score: float,
    created_at: datetime = FIXED_NOW,
) -> ScoredCandidate:
    """Create a ScoredCandidate with a fixed score."""
    return ScoredCandidate(
        candidate=make_post(candidate_id=candidate_id, author_id=author_id, created_at=created_at),
        score=score,
    )
