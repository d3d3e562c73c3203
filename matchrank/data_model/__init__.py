"""Shared data model primitives and input records."""

from matchrank.data_model.base import StrictBaseModel
from matchrank.data_model.records import (
    Candidate,
    EngagementCounts,
    JobCandidate,
    PostCandidate,
    ViewerContext,
    parse_candidate,
)


__all__ = [
    "Candidate",
    "EngagementCounts",
    "JobCandidate",
    "PostCandidate",
    "StrictBaseModel",
    "ViewerContext",
    "parse_candidate",
]
