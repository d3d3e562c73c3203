"""Randomized checks that every calculator stays within [0, 1]."""

import random
import string
from datetime import timedelta

import pytest

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
    weighted_engagement,
)

from tests.helpers.time import FIXED_NOW


_WORDS = [
    "python", "sql", "nsw", "sydney", "remote", "australia", "healthcare",
    "software", "community", "elder", "senior", "wa", "", "  ", "Country",
]
_LEVELS = [None, "", "entry", "junior", "mid", "senior", "lead", "principal", "executive", "x"]
_ATTRIBUTES = ["indigenous_owned", "rap_certified", "mentorship_program", "cultural_leave", "x"]
_TIERS = [None, "elder", "mentor", "verified", "trusted", "normal", "new", "bogus"]


def _maybe_none(rng: random.Random, value: object) -> object:
    return None if rng.random() < 0.2 else value


def _words(rng: random.Random, n: int) -> list[str]:
    return [rng.choice(_WORDS) for _ in range(rng.randint(0, n))]


def _noise(rng: random.Random) -> str:
    return "".join(rng.choice(string.ascii_letters + " ,") for _ in range(rng.randint(0, 20)))


@pytest.mark.parametrize("seed", range(20))
def test_all_calculators_bounded(seed: int) -> None:
    """Every calculator returns a value in [0, 1] for arbitrary input."""
    rng = random.Random(seed)
    for _ in range(50):
        salary_a = rng.uniform(0, 300_000)
        salary_b = rng.uniform(0, 300_000)
        age = timedelta(hours=rng.uniform(-100, 24 * 500))
        values = [
            skill_match(_words(rng, 6), _words(rng, 6), rng.random()),
            experience_match(
                _maybe_none(rng, rng.uniform(0, 60)),
                rng.choice(_LEVELS),
                under_penalty=rng.random(),
                over_penalty=rng.random(),
                over_floor=rng.random(),
            ),
            location_match(
                _maybe_none(rng, " ".join(_words(rng, 3)) or _noise(rng)),
                _maybe_none(rng, " ".join(_words(rng, 3)) or _noise(rng)),
                remote_ok=rng.random() < 0.5,
                wants_remote=rng.random() < 0.5,
            ),
            industry_match(_words(rng, 3), _maybe_none(rng, rng.choice(_WORDS))),
            affinity_match(rng.random() < 0.5, rng.sample(_ATTRIBUTES, rng.randint(0, 5))),
            salary_match(
                _maybe_none(rng, rng.uniform(0, 400_000)),
                _maybe_none(rng, salary_a),
                _maybe_none(rng, salary_b),
                gap_penalty=rng.uniform(0, 10),
            ),
            recency_step(FIXED_NOW - age, FIXED_NOW),
            recency_decay(FIXED_NOW - age, FIXED_NOW, rng.uniform(0.1, 100)),
            engagement_score(
                weighted_engagement(
                    likes=rng.randint(0, 10_000),
                    comments=rng.randint(0, 1_000),
                    shares=rng.randint(0, 1_000),
                    saves=rng.randint(0, 1_000),
                )
            ),
            relationship_score("v", rng.choice(["v", "a", "b"]), {"a"}, {"b"}),
            quality_score(rng.choice(_TIERS) or "normal", rng.randint(0, 10_000_000)),
            cultural_relevance(" ".join(_words(rng, 10))),
        ]
        for value in values:
            assert 0.0 <= value <= 1.0
