"""Overridable tuning constants for the signal calculators."""

from typing import Annotated

from pydantic import Field

from matchrank.data_model import StrictBaseModel
from matchrank.signals.constants import (
    DEFAULT_ENGAGEMENT_CEILING,
    DEFAULT_HALF_LIFE_HOURS,
    OVER_EXPERIENCE_PENALTY_PER_YEAR,
    OVER_QUALIFICATION_FLOOR,
    PARTIAL_SKILL_CREDIT,
    SALARY_GAP_PENALTY,
    SALARY_LOWER_BOUND_RATIO,
    SALARY_UPPER_BOUND_RATIO,
    UNDER_EXPERIENCE_PENALTY_PER_YEAR,
)


class SignalTuning(StrictBaseModel):
    """Tuning values passed to calculators at scoring time.

    Attributes:
        partial_skill_credit: Credit for a substring skill match.
        under_experience_penalty: Penalty per year below the level minimum.
        over_experience_penalty: Penalty per year above the level maximum.
        over_qualification_floor: Lowest score for an over-qualified viewer.
        salary_lower_bound_ratio: Derives a missing band minimum from the maximum.
        salary_upper_bound_ratio: Derives a missing band maximum from the minimum.
        salary_gap_penalty: Slope of the penalty when the viewer floor exceeds the band.
        recency_half_life_hours: Half-life of the continuous recency decay.
        engagement_reference_ceiling: Weighted engagement that maps to 1.0.
    """

    partial_skill_credit: Annotated[float, Field(ge=0.0, le=1.0)] = PARTIAL_SKILL_CREDIT
    under_experience_penalty: Annotated[float, Field(ge=0.0, le=1.0)] = (
        UNDER_EXPERIENCE_PENALTY_PER_YEAR
    )
    over_experience_penalty: Annotated[float, Field(ge=0.0, le=1.0)] = (
        OVER_EXPERIENCE_PENALTY_PER_YEAR
    )
    over_qualification_floor: Annotated[float, Field(ge=0.0, le=1.0)] = (
        OVER_QUALIFICATION_FLOOR
    )
    salary_lower_bound_ratio: Annotated[float, Field(gt=0.0, le=1.0)] = (
        SALARY_LOWER_BOUND_RATIO
    )
    salary_upper_bound_ratio: Annotated[float, Field(ge=1.0, le=10.0)] = (
        SALARY_UPPER_BOUND_RATIO
    )
    salary_gap_penalty: Annotated[float, Field(ge=0.0, le=100.0)] = SALARY_GAP_PENALTY
    recency_half_life_hours: Annotated[float, Field(gt=0.0, le=24.0 * 365)] = (
        DEFAULT_HALF_LIFE_HOURS
    )
    engagement_reference_ceiling: Annotated[float, Field(gt=1.0)] = (
        DEFAULT_ENGAGEMENT_CEILING
    )
