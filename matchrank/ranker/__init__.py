"""Ranker module for scoring, ordering, and paging candidates."""

from matchrank.ranker.diversity import DEFAULT_DIVERSITY_CAP, DiversityFilter
from matchrank.ranker.metrics import RankerMetrics
from matchrank.ranker.models import DroppedEntry, RankedPage, ScoredCandidate
from matchrank.ranker.pagination import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    decode_cursor,
    encode_cursor,
)
from matchrank.ranker.profiles import ProfileCatalog, WeightProfile
from matchrank.ranker.ranker import Ranker
from matchrank.ranker.scorer import Scorer


__all__ = [
    "DEFAULT_DIVERSITY_CAP",
    "DEFAULT_PAGE_SIZE",
    "MAX_PAGE_SIZE",
    "DiversityFilter",
    "DroppedEntry",
    "ProfileCatalog",
    "RankedPage",
    "Ranker",
    "RankerMetrics",
    "ScoredCandidate",
    "Scorer",
    "WeightProfile",
    "decode_cursor",
    "encode_cursor",
]
