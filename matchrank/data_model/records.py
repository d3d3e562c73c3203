"""Input records consumed by the ranking core.

Candidates are a tagged variant on ``kind``: each variant declares exactly
the fields its calculators read. Records are immutable snapshots for the
duration of one ranking pass.
"""

from collections.abc import Mapping
from typing import Annotated, Literal

from pydantic import AwareDatetime, Field, TypeAdapter, ValidationError

from matchrank.data_model.base import StrictBaseModel
from matchrank.errors import CandidateDataError


class EngagementCounts(StrictBaseModel):
    """Interaction counters for a candidate."""

    likes: Annotated[int, Field(ge=0)] = 0
    comments: Annotated[int, Field(ge=0)] = 0
    shares: Annotated[int, Field(ge=0)] = 0
    saves: Annotated[int, Field(ge=0)] = 0
    views: Annotated[int, Field(ge=0)] = 0


class CandidateBase(StrictBaseModel):
    """Fields shared by every candidate.

    Attributes:
        candidate_id: Unique identifier.
        author_id: Author, owner, or employer identifier.
        created_at: Creation timestamp (timezone-aware).
        engagement: Interaction counters.
    """

    candidate_id: Annotated[str, Field(min_length=1)]
    author_id: Annotated[str, Field(min_length=1)]
    created_at: AwareDatetime
    engagement: EngagementCounts = Field(default_factory=EngagementCounts)


class JobCandidate(CandidateBase):
    """A job posting being matched against a viewer.

    Attributes:
        required_skills: Skills the role requires.
        experience_level: Declared level (entry ... executive).
        location: Where the role is based.
        remote_ok: Whether the role can be done remotely.
        salary_min: Published band minimum.
        salary_max: Published band maximum.
        employment_type: Full-time, part-time, contract, etc.
        industry: Industry or category.
        employer_attributes: Community attributes held by the employer.
    """

    kind: Literal["job"] = "job"
    required_skills: list[str] = Field(default_factory=list)
    experience_level: str | None = None
    location: str | None = None
    remote_ok: bool = False
    salary_min: Annotated[float, Field(ge=0)] | None = None
    salary_max: Annotated[float, Field(ge=0)] | None = None
    employment_type: str | None = None
    industry: str | None = None
    employer_attributes: list[str] = Field(default_factory=list)


class PostCandidate(CandidateBase):
    """A social feed post being ranked for a viewer.

    Attributes:
        content: Post text.
        author_trust_tier: Declared author trust tier.
        author_followers: Author follower count.
        author_is_verified: Author verification flag.
        author_is_mentor: Author mentor flag.
        author_is_elder: Author community elder flag.
        reactions: Reaction counts per type, when available.
    """

    kind: Literal["post"] = "post"
    content: str = ""
    author_trust_tier: str | None = None
    author_followers: Annotated[int, Field(ge=0)] = 0
    author_is_verified: bool = False
    author_is_mentor: bool = False
    author_is_elder: bool = False
    reactions: dict[str, Annotated[int, Field(ge=0)]] | None = None


Candidate = Annotated[JobCandidate | PostCandidate, Field(discriminator="kind")]

_CANDIDATE_ADAPTER: TypeAdapter[JobCandidate | PostCandidate] = TypeAdapter(Candidate)


class ViewerContext(StrictBaseModel):
    """The acting user, the other half of every scoring calculation.

    Attributes:
        viewer_id: Viewer identifier.
        skills: Skills the viewer holds.
        experience_years: Years of experience.
        location: Where the viewer is based.
        wants_remote: Whether the viewer wants remote work.
        salary_min: Lowest acceptable salary.
        industry_preferences: Preferred industries.
        affinity_opt_in: Whether the viewer opted in to identity-based matching.
        connections: Direct connection identifiers.
        following: Followed author identifiers.
    """

    viewer_id: Annotated[str, Field(min_length=1)]
    skills: list[str] = Field(default_factory=list)
    experience_years: Annotated[float, Field(ge=0)] | None = None
    location: str | None = None
    wants_remote: bool = False
    salary_min: Annotated[float, Field(ge=0)] | None = None
    industry_preferences: list[str] = Field(default_factory=list)
    affinity_opt_in: bool = False
    connections: frozenset[str] = frozenset()
    following: frozenset[str] = frozenset()


def parse_candidate(data: Mapping[str, object]) -> JobCandidate | PostCandidate:
    """Validate a raw candidate record.

    Args:
        data: Raw record with a ``kind`` discriminator.

    Returns:
        The typed candidate.

    Raises:
        CandidateDataError: If the record is malformed.
    """
    try:
        return _CANDIDATE_ADAPTER.validate_python(data)
    except ValidationError as e:
        candidate_id = data.get("candidate_id")
        raise CandidateDataError(
            str(candidate_id) if candidate_id is not None else None,
            f"{e.error_count()} validation errors",
        ) from e

