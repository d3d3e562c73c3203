"""Signal calculators for ranking social feed content."""

import math
from collections.abc import Collection, Mapping

from matchrank.signals.constants import (
    CULTURAL_KEYWORDS,
    CULTURAL_KEYWORDS_FOR_MAX,
    DEFAULT_ENGAGEMENT_CEILING,
    DEFAULT_REACTION_WEIGHT,
    DEFAULT_TRUST_TIER,
    ENGAGEMENT_WEIGHTS,
    FOLLOWER_BOOST_DIVISOR,
    RELATIONSHIP_BASE_SCORE,
    RELATIONSHIP_CONNECTION_SCORE,
    RELATIONSHIP_FOLLOWING_SCORE,
    RELATIONSHIP_SELF_SCORE,
    TRUST_MULTIPLIERS,
    TRUST_SCALE,
)
from matchrank.signals.job import clamp, normalize_text


def weighted_engagement(
    likes: int = 0,
    comments: int = 0,
    shares: int = 0,
    saves: int = 0,
    reactions: Mapping[str, int] | None = None,
) -> float:
    """Sum interaction counts under ENGAGEMENT_WEIGHTS.

    When a per-type reaction breakdown is available it replaces the plain
    like count; unknown reaction types weigh DEFAULT_REACTION_WEIGHT.
    """
    if reactions:
        reaction_total = sum(
            max(0, count) * ENGAGEMENT_WEIGHTS.get(kind.lower(), DEFAULT_REACTION_WEIGHT)
            for kind, count in reactions.items()
        )
    else:
        reaction_total = max(0, likes) * ENGAGEMENT_WEIGHTS["like"]

    return (
        reaction_total
        + max(0, comments) * ENGAGEMENT_WEIGHTS["comment"]
        + max(0, shares) * ENGAGEMENT_WEIGHTS["share"]
        + max(0, saves) * ENGAGEMENT_WEIGHTS["save"]
    )


def engagement_score(
    weighted_total: float,
    reference_ceiling: float = DEFAULT_ENGAGEMENT_CEILING,
) -> float:
    """Normalize weighted engagement on a log scale.

    score = log10(total + 1) / log10(reference_ceiling), clamped to 1, so a
    viral item cannot dominate linearly.
    """
    if weighted_total <= 0:
        return 0.0
    return clamp(math.log10(weighted_total + 1) / math.log10(reference_ceiling))


def relationship_score(
    viewer_id: str,
    author_id: str,
    connections: Collection[str],
    following: Collection[str],
) -> float:
    """Score the viewer's relationship to the content author.

    Own content scores highest, then direct connections, then followed
    authors; everyone else gets RELATIONSHIP_BASE_SCORE.
    """
    if author_id == viewer_id:
        return RELATIONSHIP_SELF_SCORE
    if author_id in connections:
        return RELATIONSHIP_CONNECTION_SCORE
    if author_id in following:
        return RELATIONSHIP_FOLLOWING_SCORE
    return RELATIONSHIP_BASE_SCORE


def resolve_trust_tier(
    declared_tier: str | None,
    is_elder: bool = False,
    is_mentor: bool = False,
    is_verified: bool = False,
) -> str:
    """Resolve the effective trust tier; status flags outrank the declared tier."""
    if is_elder:
        return "elder"
    if is_mentor:
        return "mentor"
    if is_verified:
        return "verified"
    tier = normalize_text(declared_tier)
    return tier if tier in TRUST_MULTIPLIERS else DEFAULT_TRUST_TIER


def quality_score(trust_tier: str, followers: int = 0) -> float:
    """Combine the trust tier multiplier with a follower-count boost.

    score = min(1, multiplier * TRUST_SCALE + log10(followers + 1) / 10)
    """
    multiplier = TRUST_MULTIPLIERS.get(trust_tier, TRUST_MULTIPLIERS[DEFAULT_TRUST_TIER])
    follower_boost = math.log10(max(0, followers) + 1) / FOLLOWER_BOOST_DIVISOR
    return clamp(multiplier * TRUST_SCALE + follower_boost)


def cultural_relevance(content: str | None) -> float:
    """Share of cultural keywords present, saturating at three hits."""
    text = normalize_text(content)
    if not text:
        return 0.0
    hits = sum(1 for keyword in CULTURAL_KEYWORDS if keyword in text)
    return clamp(hits / CULTURAL_KEYWORDS_FOR_MAX)
