"""Signal calculators for matching job postings to a viewer profile.

Each calculator is a total function: it returns a value in [0, 1] for any
input, and a documented neutral value when data is missing on either side.
"""

import re
from collections.abc import Iterable
from functools import lru_cache

from matchrank.signals.constants import (
    AFFINITY_ATTRIBUTE_BONUSES,
    AFFINITY_BASE_SCORE,
    AFFINITY_NOT_OPTED_IN_SCORE,
    COUNTRY_TOKENS,
    EXPERIENCE_LEVEL_RANGES,
    INDUSTRY_EXACT_SCORE,
    INDUSTRY_MISMATCH_SCORE,
    INDUSTRY_RELATED_SCORE,
    LOCATION_COUNTRY_SCORE,
    LOCATION_EXACT_SCORE,
    LOCATION_MISMATCH_SCORE,
    LOCATION_REGION_SCORE,
    LOCATION_REMOTE_FALLBACK_SCORE,
    NEUTRAL_SCORE,
    OVER_EXPERIENCE_PENALTY_PER_YEAR,
    OVER_QUALIFICATION_FLOOR,
    PARTIAL_SKILL_CREDIT,
    REGION_NAMES,
    REGION_TOKENS,
    RELATED_INDUSTRIES,
    REMOTE_TOKENS,
    SALARY_GAP_PENALTY,
    SALARY_LOWER_BOUND_RATIO,
    SALARY_UPPER_BOUND_RATIO,
    SALARY_WITHIN_BAND_SCORE,
    UNDER_EXPERIENCE_PENALTY_PER_YEAR,
    UNKNOWN_LEVEL_RANGE,
)


_WHITESPACE = re.compile(r"\s+")


def clamp(value: float) -> float:
    """Clamp a value into [0, 1]."""
    return max(0.0, min(1.0, value))


def normalize_text(value: str | None) -> str:
    """Lower-case, trim, and collapse whitespace.

    Args:
        value: Raw text or None.

    Returns:
        Normalized text (empty string for None).
    """
    if not value:
        return ""
    return _WHITESPACE.sub(" ", value.strip().lower())


def normalize_skills(skills: Iterable[str]) -> list[str]:
    """Normalize a skill list, dropping blanks and duplicates.

    Order of first appearance is preserved.
    """
    seen: dict[str, None] = {}
    for skill in skills:
        normalized = normalize_text(skill)
        if normalized:
            seen.setdefault(normalized, None)
    return list(seen)


@lru_cache(maxsize=256)
def _phrase_pattern(phrase: str) -> re.Pattern[str]:
    # Region codes like "wa" or "sa" need word guards to avoid "hawaii" or "usa"
    return re.compile(rf"\b{re.escape(phrase)}\b")


def _mentions(text: str, phrase: str) -> bool:
    return bool(_phrase_pattern(phrase).search(text))


def skill_match(
    viewer_skills: Iterable[str],
    required_skills: Iterable[str],
    partial_credit: float = PARTIAL_SKILL_CREDIT,
) -> float:
    """Score overlap between viewer skills and a job's required skills.

    Score = (exact + partial_credit * partial) / len(required), clamped to 1.
    A partial match is a viewer skill that is a substring of the required
    skill or vice versa.

    Args:
        viewer_skills: Skills held by the viewer.
        required_skills: Skills the job requires.
        partial_credit: Credit given to a partial match.

    Returns:
        Skill score in [0, 1]; NEUTRAL_SCORE when either list is empty.
    """
    required = normalize_skills(required_skills)
    viewer = normalize_skills(viewer_skills)
    if not required or not viewer:
        return NEUTRAL_SCORE

    viewer_set = set(viewer)
    exact = 0
    partial = 0
    for skill in required:
        if skill in viewer_set:
            exact += 1
        elif any(have in skill or skill in have for have in viewer):
            partial += 1

    return clamp((exact + partial_credit * partial) / len(required))


def experience_range(level: str | None) -> tuple[float, float]:
    """Map a declared job level to its (min, max) year range.

    Unknown levels map to UNKNOWN_LEVEL_RANGE.
    """
    return EXPERIENCE_LEVEL_RANGES.get(normalize_text(level), UNKNOWN_LEVEL_RANGE)


def experience_match(
    experience_years: float | None,
    level: str | None,
    under_penalty: float = UNDER_EXPERIENCE_PENALTY_PER_YEAR,
    over_penalty: float = OVER_EXPERIENCE_PENALTY_PER_YEAR,
    over_floor: float = OVER_QUALIFICATION_FLOOR,
) -> float:
    """Score how well the viewer's experience fits the job level.

    Args:
        experience_years: Viewer's years of experience.
        level: Job level (entry, junior, mid, senior, lead, principal, executive).
        under_penalty: Penalty per year below the range minimum.
        over_penalty: Penalty per year above the range maximum.
        over_floor: Lowest score an over-qualified viewer can get.

    Returns:
        Experience score in [0, 1]; NEUTRAL_SCORE when level or years are missing.
    """
    if experience_years is None or not normalize_text(level):
        return NEUTRAL_SCORE

    years = max(0.0, float(experience_years))
    low, high = experience_range(level)

    if years < low:
        return clamp(1 - under_penalty * (low - years))
    if years > high:
        return clamp(max(over_floor, 1 - over_penalty * (years - high)))
    return 1.0


def _regions(location: str) -> set[str]:
    found: set[str] = set()
    for code in REGION_TOKENS:
        if _mentions(location, code) or any(
            _mentions(location, name) for name in REGION_NAMES.get(code, ())
        ):
            found.add(code)
    return found


def location_match(
    viewer_location: str | None,
    job_location: str | None,
    remote_ok: bool = False,
    wants_remote: bool = False,
) -> float:
    """Score location fit between viewer and job.

    Checks, in order: remote on both sides, missing data, exact match,
    shared region, shared country, remote fallback, mismatch.

    Args:
        viewer_location: Where the viewer is based.
        job_location: Where the job is based.
        remote_ok: Whether the job can be done remotely.
        wants_remote: Whether the viewer wants remote work.

    Returns:
        Location score in [0, 1].
    """
    viewer = normalize_text(viewer_location)
    job = normalize_text(job_location)
    job_remote = remote_ok or any(_mentions(job, token) for token in REMOTE_TOKENS)

    if job_remote and wants_remote:
        return 1.0
    if not viewer or not job:
        return NEUTRAL_SCORE
    if viewer == job:
        return LOCATION_EXACT_SCORE

    viewer_regions = _regions(viewer)
    if viewer_regions:
        job_regions = _regions(job)
        for code in REGION_TOKENS:
            if code in viewer_regions and code in job_regions:
                return LOCATION_REGION_SCORE

    for country in COUNTRY_TOKENS:
        if _mentions(viewer, country) and _mentions(job, country):
            return LOCATION_COUNTRY_SCORE

    if job_remote:
        return LOCATION_REMOTE_FALLBACK_SCORE
    return LOCATION_MISMATCH_SCORE


def _industry_groups(industry: str) -> set[str]:
    return {
        group
        for group, related in RELATED_INDUSTRIES.items()
        if _mentions(industry, group) or any(_mentions(industry, term) for term in related)
    }


def industry_match(preferences: Iterable[str], industry: str | None) -> float:
    """Score a job's industry against the viewer's preferred industries.

    Args:
        preferences: Industries the viewer prefers.
        industry: The job's industry or category.

    Returns:
        1.0 for an exact match, INDUSTRY_RELATED_SCORE for a related one,
        INDUSTRY_MISMATCH_SCORE otherwise; NEUTRAL_SCORE when data is missing.
    """
    wanted = normalize_skills(preferences)
    job_industry = normalize_text(industry)
    if not wanted or not job_industry:
        return NEUTRAL_SCORE

    if job_industry in wanted:
        return INDUSTRY_EXACT_SCORE

    job_groups = _industry_groups(job_industry)
    if job_groups and any(job_groups & _industry_groups(pref) for pref in wanted):
        return INDUSTRY_RELATED_SCORE

    return INDUSTRY_MISMATCH_SCORE


def affinity_match(opted_in: bool, employer_attributes: Iterable[str]) -> float:
    """Score cultural/community fit for viewers who opted in.

    Viewers who have not opted in get a fixed neutral score so the factor
    never penalizes them.

    Args:
        opted_in: Whether the viewer opted in to an identity signal.
        employer_attributes: Community attributes the employer holds.

    Returns:
        Affinity score in [0, 1].
    """
    if not opted_in:
        return AFFINITY_NOT_OPTED_IN_SCORE

    attributes = set(normalize_skills(employer_attributes))
    bonus = sum(
        weight
        for attribute, weight in AFFINITY_ATTRIBUTE_BONUSES.items()
        if attribute in attributes
    )
    return clamp(AFFINITY_BASE_SCORE + bonus)


def salary_band(
    salary_min: float | None,
    salary_max: float | None,
    lower_ratio: float = SALARY_LOWER_BOUND_RATIO,
    upper_ratio: float = SALARY_UPPER_BOUND_RATIO,
) -> tuple[float, float] | None:
    """Derive a (min, max) salary band from the published bounds.

    When only the maximum is published, min = max * lower_ratio. When only
    the minimum is published, max = min * upper_ratio. Reversed bounds are
    reordered.

    Returns:
        The band, or None when no bound is published.
    """
    if salary_min is None:
        if salary_max is None:
            return None
        high = float(salary_max)
        return (high * lower_ratio, high)
    if salary_max is None:
        low = float(salary_min)
        return (low, low * upper_ratio)
    low, high = float(salary_min), float(salary_max)
    return (low, high) if low <= high else (high, low)


def salary_match(
    viewer_min: float | None,
    salary_min: float | None,
    salary_max: float | None,
    lower_ratio: float = SALARY_LOWER_BOUND_RATIO,
    upper_ratio: float = SALARY_UPPER_BOUND_RATIO,
    gap_penalty: float = SALARY_GAP_PENALTY,
) -> float:
    """Score the job's salary band against the viewer's salary floor.

    Args:
        viewer_min: The lowest salary the viewer will accept.
        salary_min: Published band minimum.
        salary_max: Published band maximum.
        lower_ratio: Ratio deriving a missing band minimum.
        upper_ratio: Ratio deriving a missing band maximum.
        gap_penalty: Penalty slope applied to the relative gap above the band.

    Returns:
        1.0 when the floor is at or below the band minimum,
        SALARY_WITHIN_BAND_SCORE when within the band, a linear penalty above;
        NEUTRAL_SCORE when data is missing.
    """
    if viewer_min is None:
        return NEUTRAL_SCORE
    band = salary_band(salary_min, salary_max, lower_ratio, upper_ratio)
    if band is None:
        return NEUTRAL_SCORE

    floor = float(viewer_min)
    low, high = band
    if floor <= low:
        return 1.0
    if floor <= high:
        return SALARY_WITHIN_BAND_SCORE

    gap_ratio = (floor - high) / floor
    return clamp(1 - gap_penalty * gap_ratio)
