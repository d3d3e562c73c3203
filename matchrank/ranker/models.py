"""Data models for the ranker."""

from dataclasses import dataclass
from typing import Annotated

from pydantic import Field

from matchrank.data_model import Candidate, StrictBaseModel


class ScoredCandidate(StrictBaseModel):
    """A candidate with its aggregate score and per-factor breakdown.

    Derived per request; never the source of truth.

    Attributes:
        candidate: The scored candidate.
        score: Aggregate score in [0, 1].
        breakdown: Factor name to weighted contribution.
        signals: Factor name to raw calculator value.
    """

    candidate: Candidate
    score: Annotated[float, Field(ge=0.0, le=1.0)]
    breakdown: dict[str, float] = Field(default_factory=dict)
    signals: dict[str, float] = Field(default_factory=dict)

    @property
    def candidate_id(self) -> str:
        return self.candidate.candidate_id

    @property
    def author_id(self) -> str:
        return self.candidate.author_id


class RankedPage(StrictBaseModel):
    """One page of a ranked, diversified candidate sequence.

    Attributes:
        items: Scored candidates in rank order.
        next_cursor: Opaque cursor for the following page, if any.
        has_more: Whether more items follow this page.
        total: Length of the full diversified sequence.
        profile_id: Weight profile used for scoring.
        excluded_ids: Candidates excluded because they could not be scored.
        checksum: SHA-256 of the ordered (id, score) pairs of this page.
    """

    items: list[ScoredCandidate] = Field(default_factory=list)
    next_cursor: str | None = None
    has_more: bool = False
    total: Annotated[int, Field(ge=0)] = 0
    profile_id: str
    excluded_ids: list[str] = Field(default_factory=list)
    checksum: str = ""

    @property
    def candidate_ids(self) -> list[str]:
        return [item.candidate_id for item in self.items]


@dataclass(frozen=True)
class DroppedEntry:
    """Record of a candidate dropped by the diversity cap.

    Attributes:
        candidate_id: ID of the dropped candidate.
        author_id: Author whose run could not be broken.
        score: Score at time of drop.
        drop_reason: Why the candidate was dropped.
    """

    candidate_id: str
    author_id: str
    score: float
    drop_reason: str
