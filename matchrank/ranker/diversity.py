"""Deterministic ordering and the per-author diversity cap."""

import structlog

from matchrank.ranker.models import DroppedEntry, ScoredCandidate


logger = structlog.get_logger()

DEFAULT_DIVERSITY_CAP: int = 2


def rank_sort_key(scored: ScoredCandidate) -> tuple[float, float, str]:
    """Sort key: score desc, created_at desc, candidate_id asc."""
    return (
        -scored.score,
        -scored.candidate.created_at.timestamp(),
        scored.candidate_id,
    )


def sort_scored(scored: list[ScoredCandidate]) -> list[ScoredCandidate]:
    """Sort scored candidates into a total, deterministic rank order."""
    return sorted(scored, key=rank_sort_key)


class DiversityFilter:
    """Limits consecutive items from the same author.

    A single greedy pass over the whole sorted sequence: whenever the last
    ``max_consecutive`` placed items share an author, the highest-ranked
    remaining item from a different author is pulled forward. When only
    that author's items remain, they are dropped.
    """

    def __init__(self, max_consecutive: int = DEFAULT_DIVERSITY_CAP) -> None:
        """Initialize the filter.

        Args:
            max_consecutive: Longest allowed run of one author (K >= 1).

        Raises:
            ValueError: If max_consecutive is below 1.
        """
        if max_consecutive < 1:
            msg = f"max_consecutive must be >= 1, got {max_consecutive}"
            raise ValueError(msg)
        self._max_consecutive = max_consecutive
        self._log = logger.bind(component="ranker", subcomponent="diversity")
        self._dropped: list[DroppedEntry] = []

    @property
    def max_consecutive(self) -> int:
        return self._max_consecutive

    @property
    def dropped_entries(self) -> list[DroppedEntry]:
        """Entries dropped by the last call to apply."""
        return self._dropped

    def apply(self, scored: list[ScoredCandidate]) -> list[ScoredCandidate]:
        """Sort and diversify a scored sequence.

        Args:
            scored: Scored candidates in any order.

        Returns:
            The diversified sequence; dropped items are in dropped_entries.
        """
        self._dropped = []
        remaining = sort_scored(scored)
        result: list[ScoredCandidate] = []
        k = self._max_consecutive

        while remaining:
            blocked = self._blocked_author(result, k)
            if blocked is None:
                result.append(remaining.pop(0))
                continue

            idx = next(
                (i for i, s in enumerate(remaining) if s.author_id != blocked),
                None,
            )
            if idx is None:
                for s in remaining:
                    self._record_drop(s, f"max_consecutive_per_author ({k})")
                break
            result.append(remaining.pop(idx))

        if self._dropped:
            self._log.info(
                "diversity_cap_applied",
                input_count=len(scored),
                kept_count=len(result),
                dropped_count=len(self._dropped),
                max_consecutive=k,
            )
        return result

    @staticmethod
    def _blocked_author(placed: list[ScoredCandidate], k: int) -> str | None:
        if len(placed) < k:
            return None
        tail_authors = {s.author_id for s in placed[-k:]}
        if len(tail_authors) == 1:
            return tail_authors.pop()
        return None

    def _record_drop(self, scored: ScoredCandidate, reason: str) -> None:
        self._dropped.append(
            DroppedEntry(
                candidate_id=scored.candidate_id,
                author_id=scored.author_id,
                score=scored.score,
                drop_reason=reason,
            )
        )
