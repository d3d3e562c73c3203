"""Ranker orchestrator: score, sort, diversify, paginate."""

import hashlib
import json
import time
from collections.abc import Iterable
from concurrent.futures import Executor
from datetime import UTC, datetime

import structlog

from matchrank.data_model import JobCandidate, PostCandidate, ViewerContext
from matchrank.errors import CandidateDataError
from matchrank.ranker.diversity import DEFAULT_DIVERSITY_CAP, DiversityFilter
from matchrank.ranker.metrics import RankerMetrics
from matchrank.ranker.models import RankedPage, ScoredCandidate
from matchrank.ranker.pagination import decode_cursor, paginate, validate_page_size
from matchrank.ranker.profiles import WeightProfile
from matchrank.ranker.scorer import Scorer


logger = structlog.get_logger()


class Ranker:
    """Turns a candidate set into one page of a ranked, diversified sequence.

    Flow:
        candidates -> scored (bad data excluded) -> sorted -> diversity cap
        -> page

    Output is a pure function of (candidates, viewer, profile, now): the
    same inputs always produce byte-identical pages.
    """

    def __init__(
        self,
        scorer: Scorer | None = None,
        diversity_cap: int = DEFAULT_DIVERSITY_CAP,
        metrics: RankerMetrics | None = None,
        executor: Executor | None = None,
    ) -> None:
        """Initialize the ranker.

        Args:
            scorer: Scorer used for every candidate.
            diversity_cap: Longest allowed run of one author (K >= 1).
            metrics: Metrics instance for this ranker.
            executor: Optional executor used to score candidates in parallel.

        Raises:
            ValueError: If diversity_cap is below 1.
        """
        if diversity_cap < 1:
            msg = f"diversity_cap must be >= 1, got {diversity_cap}"
            raise ValueError(msg)
        self._scorer = scorer or Scorer()
        self._diversity_cap = diversity_cap
        self._metrics = metrics or RankerMetrics()
        self._executor = executor
        self._log = logger.bind(component="ranker")

    @property
    def metrics(self) -> RankerMetrics:
        return self._metrics

    def rank(
        self,
        candidates: Iterable[JobCandidate | PostCandidate],
        viewer: ViewerContext,
        profile: WeightProfile,
        page_size: int,
        cursor: str | None = None,
        now: datetime | None = None,
        diversity_cap: int | None = None,
    ) -> RankedPage:
        """Rank candidates and return one page.

        Args:
            candidates: Candidate set, in any order.
            viewer: Viewer context.
            profile: Weight profile.
            page_size: Items per page.
            cursor: Cursor from a previous page, or None for the first page.
            now: Reference time; defaults to the current UTC time.
            diversity_cap: Per-call override of the diversity cap.

        Returns:
            RankedPage for the requested slice.

        Raises:
            PaginationError: If the cursor or page size is invalid.
            ConfigurationError: If the profile names an unregistered factor.
            ValueError: If now is a naive datetime.
        """
        validate_page_size(page_size)
        decode_cursor(cursor)
        self._scorer.check_profile(profile)
        if now is not None and now.tzinfo is None:
            msg = "now must be timezone-aware"
            raise ValueError(msg)

        now = now or datetime.now(UTC)
        pool = list(candidates)
        log = self._log.bind(viewer_id=viewer.viewer_id, profile_id=profile.profile_id)
        log.debug("ranking_started", candidates_in=len(pool))

        start_score = time.perf_counter()
        scored, excluded_ids = self._score_all(pool, viewer, profile, now, log)
        self._metrics.record_scoring_duration((time.perf_counter() - start_score) * 1000)
        for s in scored:
            self._metrics.record_score(s.score)

        start_div = time.perf_counter()
        diversity = DiversityFilter(
            diversity_cap if diversity_cap is not None else self._diversity_cap
        )
        ordered = diversity.apply(scored)
        self._metrics.record_diversity_duration((time.perf_counter() - start_div) * 1000)
        self._metrics.record_drops(len(diversity.dropped_entries))
        self._metrics.record_pass(len(pool), len(ordered))

        page = paginate(ordered, page_size, cursor)

        result = RankedPage(
            items=page.items,
            next_cursor=page.next_cursor,
            has_more=page.has_more,
            total=page.total,
            profile_id=profile.profile_id,
            excluded_ids=excluded_ids,
            checksum=compute_checksum(page.items),
        )

        log.info(
            "ranking_complete",
            candidates_in=len(pool),
            excluded_total=len(excluded_ids),
            dropped_total=len(diversity.dropped_entries),
            total=page.total,
            offset=page.offset,
            page_items=len(page.items),
            has_more=page.has_more,
        )
        return result

    def _score_all(
        self,
        pool: list[JobCandidate | PostCandidate],
        viewer: ViewerContext,
        profile: WeightProfile,
        now: datetime,
        log: structlog.stdlib.BoundLogger,
    ) -> tuple[list[ScoredCandidate], list[str]]:
        def score_one(
            candidate: JobCandidate | PostCandidate,
        ) -> ScoredCandidate | CandidateDataError:
            try:
                return self._scorer.score(candidate, viewer, profile, now)
            except CandidateDataError as e:
                return e

        if self._executor is not None:
            outcomes = list(self._executor.map(score_one, pool))
        else:
            outcomes = [score_one(c) for c in pool]

        scored: list[ScoredCandidate] = []
        excluded_ids: list[str] = []
        for outcome in outcomes:
            if isinstance(outcome, CandidateDataError):
                log.warning("candidate_excluded", **outcome.to_dict())
                self._metrics.record_exclusion(outcome.factor)
                excluded_ids.append(str(outcome.candidate_id))
            else:
                scored.append(outcome)
        return scored, excluded_ids


def compute_checksum(items: list[ScoredCandidate]) -> str:
    """Compute SHA-256 checksum of the ordered (id, score) pairs.

    Args:
        items: Scored candidates in output order.

    Returns:
        SHA-256 hex digest.
    """
    data = [[item.candidate_id, item.score] for item in items]
    json_str = json.dumps(data, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(json_str.encode("utf-8")).hexdigest()
