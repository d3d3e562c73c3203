"""Constants for the signal calculators.

Every tuning value used by a calculator lives here under a name so it can
be overridden through ``SignalTuning`` configuration rather than edited
inline.
"""

# Neutral value returned when an input is missing on either side
NEUTRAL_SCORE: float = 0.5

# Skill match: credit for a substring (partial) match relative to an exact one
PARTIAL_SKILL_CREDIT: float = 0.5

# Experience level -> (min_years, max_years)
EXPERIENCE_LEVEL_RANGES: dict[str, tuple[float, float]] = {
    "entry": (0, 2),
    "junior": (0, 3),
    "mid": (2, 5),
    "senior": (5, 10),
    "lead": (7, 15),
    "principal": (10, 20),
    "executive": (10, 30),
}
UNKNOWN_LEVEL_RANGE: tuple[float, float] = (0, 100)

# Penalty per missing year below the level minimum
UNDER_EXPERIENCE_PENALTY_PER_YEAR: float = 0.2
# Penalty per extra year above the level maximum
OVER_EXPERIENCE_PENALTY_PER_YEAR: float = 0.05
# Over-qualification never scores below this floor
OVER_QUALIFICATION_FLOOR: float = 0.7

# Location outcomes
LOCATION_EXACT_SCORE: float = 1.0
LOCATION_REGION_SCORE: float = 0.8
LOCATION_COUNTRY_SCORE: float = 0.5
LOCATION_REMOTE_FALLBACK_SCORE: float = 0.7
LOCATION_MISMATCH_SCORE: float = 0.3

# Region codes in matching order, with full names that also count as a mention
REGION_TOKENS: tuple[str, ...] = ("nsw", "vic", "qld", "wa", "sa", "tas", "nt", "act")
REGION_NAMES: dict[str, tuple[str, ...]] = {
    "nsw": ("new south wales",),
    "vic": ("victoria",),
    "qld": ("queensland",),
    "wa": ("western australia",),
    "sa": ("south australia",),
    "tas": ("tasmania",),
    "nt": ("northern territory",),
    "act": ("australian capital territory",),
}
COUNTRY_TOKENS: tuple[str, ...] = ("australia", "new zealand")
REMOTE_TOKENS: tuple[str, ...] = ("remote",)

# Industry outcomes
INDUSTRY_EXACT_SCORE: float = 1.0
INDUSTRY_RELATED_SCORE: float = 0.7
INDUSTRY_MISMATCH_SCORE: float = 0.3

RELATED_INDUSTRIES: dict[str, tuple[str, ...]] = {
    "technology": ("software", "it", "digital", "tech", "engineering"),
    "healthcare": ("health", "medical", "nursing", "aged care", "disability"),
    "construction": ("building", "trades", "mining", "infrastructure"),
    "education": ("training", "teaching", "academic", "childcare"),
    "government": ("public sector", "defense", "community services"),
    "hospitality": ("tourism", "food", "events", "accommodation"),
    "finance": ("banking", "accounting", "insurance"),
    "retail": ("sales", "customer service", "e-commerce"),
}

# Affinity: returned when the viewer has not opted in to an identity signal
AFFINITY_NOT_OPTED_IN_SCORE: float = 0.7
AFFINITY_BASE_SCORE: float = 0.5
AFFINITY_ATTRIBUTE_BONUSES: dict[str, float] = {
    "indigenous_owned": 0.2,
    "rap_certified": 0.15,
    "mentorship_program": 0.15,
    "cultural_leave": 0.1,
    "community_partnership": 0.1,
}

# Salary band derivation when only one bound is published
SALARY_LOWER_BOUND_RATIO: float = 0.7
SALARY_UPPER_BOUND_RATIO: float = 1.3
SALARY_WITHIN_BAND_SCORE: float = 0.8
SALARY_GAP_PENALTY: float = 2.0

# Recency step function: (max_age_days, score), checked in order
RECENCY_STEPS: tuple[tuple[float, float], ...] = (
    (1, 1.0),
    (7, 0.9),
    (14, 0.7),
    (30, 0.5),
    (60, 0.3),
)
RECENCY_FLOOR: float = 0.1

# Recency decay half-life for social content
DEFAULT_HALF_LIFE_HOURS: float = 6.0

# Engagement weights per interaction type
ENGAGEMENT_WEIGHTS: dict[str, float] = {
    "like": 1,
    "love": 2,
    "support": 2,
    "celebrate": 2,
    "comment": 3,
    "share": 5,
    "save": 4,
}
DEFAULT_REACTION_WEIGHT: float = 1
DEFAULT_ENGAGEMENT_CEILING: float = 100

# Relationship strength
RELATIONSHIP_SELF_SCORE: float = 1.0
RELATIONSHIP_CONNECTION_SCORE: float = 0.85
RELATIONSHIP_FOLLOWING_SCORE: float = 0.7
RELATIONSHIP_BASE_SCORE: float = 0.3

# Author trust tier multipliers
TRUST_MULTIPLIERS: dict[str, float] = {
    "elder": 1.2,
    "mentor": 1.1,
    "verified": 1.0,
    "trusted": 0.95,
    "normal": 0.8,
    "new": 0.7,
}
DEFAULT_TRUST_TIER: str = "normal"
TRUST_SCALE: float = 0.8
FOLLOWER_BOOST_DIVISOR: float = 10

# Cultural relevance keywords for community content
CULTURAL_KEYWORDS: tuple[str, ...] = (
    "country",
    "culture",
    "community",
    "dreaming",
    "elder",
    "family",
    "kinship",
    "land",
    "language",
    "mob",
    "nation",
    "spirit",
    "story",
    "traditional",
    "yarning",
    "aboriginal",
    "torres strait",
    "indigenous",
    "first nations",
    "welcome to country",
    "acknowledgement",
    "naidoc",
    "reconciliation",
)
CULTURAL_KEYWORDS_FOR_MAX: int = 3
