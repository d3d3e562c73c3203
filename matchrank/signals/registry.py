"""Registry mapping factor names to signal calculators.

Each registered factor is an adapter ``(candidate, viewer, context) -> float``
that pulls the inputs a calculator needs off the records. Adding a factor
means registering one adapter; the scorer never changes.
"""

from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType

from matchrank.data_model import JobCandidate, PostCandidate, ViewerContext
from matchrank.signals.constants import NEUTRAL_SCORE
from matchrank.signals.job import (
    affinity_match,
    experience_match,
    industry_match,
    location_match,
    salary_match,
    skill_match,
)
from matchrank.signals.recency import recency_decay, recency_step
from matchrank.signals.social import (
    cultural_relevance,
    engagement_score,
    quality_score,
    relationship_score,
    resolve_trust_tier,
    weighted_engagement,
)
from matchrank.signals.tuning import SignalTuning


@dataclass(frozen=True)
class ScoringContext:
    """Per-pass values shared by all factor adapters.

    Attributes:
        now: Reference time for recency calculators.
        tuning: Calculator tuning constants.
    """

    now: datetime
    tuning: SignalTuning = field(default_factory=SignalTuning)


SignalFn = Callable[[JobCandidate | PostCandidate, ViewerContext, ScoringContext], float]


def _job_only(
    fn: Callable[[JobCandidate, ViewerContext, ScoringContext], float],
) -> SignalFn:
    def adapter(
        candidate: JobCandidate | PostCandidate,
        viewer: ViewerContext,
        ctx: ScoringContext,
    ) -> float:
        if not isinstance(candidate, JobCandidate):
            return NEUTRAL_SCORE
        return fn(candidate, viewer, ctx)

    adapter.__name__ = fn.__name__
    adapter.__doc__ = fn.__doc__
    return adapter


@_job_only
def _skill(job: JobCandidate, viewer: ViewerContext, ctx: ScoringContext) -> float:
    return skill_match(viewer.skills, job.required_skills, ctx.tuning.partial_skill_credit)


@_job_only
def _experience(job: JobCandidate, viewer: ViewerContext, ctx: ScoringContext) -> float:
    return experience_match(
        viewer.experience_years,
        job.experience_level,
        under_penalty=ctx.tuning.under_experience_penalty,
        over_penalty=ctx.tuning.over_experience_penalty,
        over_floor=ctx.tuning.over_qualification_floor,
    )


@_job_only
def _location(job: JobCandidate, viewer: ViewerContext, ctx: ScoringContext) -> float:
    return location_match(viewer.location, job.location, job.remote_ok, viewer.wants_remote)


@_job_only
def _industry(job: JobCandidate, viewer: ViewerContext, ctx: ScoringContext) -> float:
    return industry_match(viewer.industry_preferences, job.industry)


@_job_only
def _affinity(job: JobCandidate, viewer: ViewerContext, ctx: ScoringContext) -> float:
    return affinity_match(viewer.affinity_opt_in, job.employer_attributes)


@_job_only
def _salary(job: JobCandidate, viewer: ViewerContext, ctx: ScoringContext) -> float:
    return salary_match(
        viewer.salary_min,
        job.salary_min,
        job.salary_max,
        lower_ratio=ctx.tuning.salary_lower_bound_ratio,
        upper_ratio=ctx.tuning.salary_upper_bound_ratio,
        gap_penalty=ctx.tuning.salary_gap_penalty,
    )


def _recency_step(
    candidate: JobCandidate | PostCandidate,
    viewer: ViewerContext,
    ctx: ScoringContext,
) -> float:
    return recency_step(candidate.created_at, ctx.now)


def _recency_decay(
    candidate: JobCandidate | PostCandidate,
    viewer: ViewerContext,
    ctx: ScoringContext,
) -> float:
    return recency_decay(candidate.created_at, ctx.now, ctx.tuning.recency_half_life_hours)


def _engagement(
    candidate: JobCandidate | PostCandidate,
    viewer: ViewerContext,
    ctx: ScoringContext,
) -> float:
    counts = candidate.engagement
    reactions = candidate.reactions if isinstance(candidate, PostCandidate) else None
    total = weighted_engagement(
        likes=counts.likes,
        comments=counts.comments,
        shares=counts.shares,
        saves=counts.saves,
        reactions=reactions,
    )
    return engagement_score(total, ctx.tuning.engagement_reference_ceiling)


def _relationship(
    candidate: JobCandidate | PostCandidate,
    viewer: ViewerContext,
    ctx: ScoringContext,
) -> float:
    return relationship_score(
        viewer.viewer_id, candidate.author_id, viewer.connections, viewer.following
    )


def _quality(
    candidate: JobCandidate | PostCandidate,
    viewer: ViewerContext,
    ctx: ScoringContext,
) -> float:
    if not isinstance(candidate, PostCandidate):
        return quality_score(resolve_trust_tier(None))
    tier = resolve_trust_tier(
        candidate.author_trust_tier,
        is_elder=candidate.author_is_elder,
        is_mentor=candidate.author_is_mentor,
        is_verified=candidate.author_is_verified,
    )
    return quality_score(tier, candidate.author_followers)


def _cultural(
    candidate: JobCandidate | PostCandidate,
    viewer: ViewerContext,
    ctx: ScoringContext,
) -> float:
    if not isinstance(candidate, PostCandidate):
        return 0.0
    return cultural_relevance(candidate.content)


class SignalRegistry(Mapping[str, SignalFn]):
    """Read-only mapping of factor name to adapter."""

    def __init__(self, signals: Mapping[str, SignalFn]) -> None:
        self._signals = MappingProxyType(dict(signals))

    def __getitem__(self, name: str) -> SignalFn:
        return self._signals[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._signals)

    def __len__(self) -> int:
        return len(self._signals)

    def with_signal(self, name: str, fn: SignalFn) -> "SignalRegistry":
        """Return a new registry with ``name`` added or replaced."""
        return SignalRegistry({**self._signals, name: fn})


DEFAULT_REGISTRY = SignalRegistry(
    {
        "skill_match": _skill,
        "experience_match": _experience,
        "location_match": _location,
        "industry_match": _industry,
        "affinity": _affinity,
        "salary_match": _salary,
        "recency_step": _recency_step,
        "recency_decay": _recency_decay,
        "engagement": _engagement,
        "relationship": _relationship,
        "quality": _quality,
        "cultural_relevance": _cultural,
    }
)

FACTOR_NAMES: frozenset[str] = frozenset(DEFAULT_REGISTRY)
