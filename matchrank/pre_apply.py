"""Pre-apply matching: score one new job against many viewers.

The inverse of a recommendation request. When a job is published, every
viewer who opted in to pre-apply alerts is scored against it and those
above a threshold are returned for notification.
"""

from collections.abc import Iterable
from datetime import UTC, datetime

import structlog

from matchrank.data_model import JobCandidate, StrictBaseModel, ViewerContext
from matchrank.errors import CandidateDataError
from matchrank.ranker import ScoredCandidate, Scorer, WeightProfile


logger = structlog.get_logger()

DEFAULT_MIN_SCORE: float = 0.7


class PreApplyMatch(StrictBaseModel):
    """A viewer who matched a job.

    Attributes:
        viewer_id: Matched viewer.
        score: Aggregate match score.
        breakdown: Factor name to weighted contribution.
    """

    viewer_id: str
    score: float
    breakdown: dict[str, float]


class PreApplyMatcher:
    """Finds viewers that match a newly published job."""

    def __init__(self, scorer: Scorer | None = None) -> None:
        self._scorer = scorer or Scorer()
        self._log = logger.bind(component="pre_apply")

    def match(
        self,
        job: JobCandidate,
        viewers: Iterable[ViewerContext],
        profile: WeightProfile,
        min_score: float = DEFAULT_MIN_SCORE,
        now: datetime | None = None,
        limit: int | None = None,
    ) -> list[PreApplyMatch]:
        """Score a job against each viewer and keep the strong matches.

        Args:
            job: The newly published job.
            viewers: Viewers who opted in to pre-apply alerts.
            profile: Weight profile for job matching.
            min_score: Inclusive score threshold.
            now: Reference time; defaults to the current UTC time.
            limit: Maximum number of matches to return.

        Returns:
            Matches ordered by score descending, then viewer id.

        Raises:
            ConfigurationError: If the profile names an unregistered factor.
            ValueError: If min_score is out of range or now is naive.
        """
        if not 0.0 <= min_score <= 1.0:
            msg = f"min_score must be within [0, 1], got {min_score}"
            raise ValueError(msg)
        if now is not None and now.tzinfo is None:
            msg = "now must be timezone-aware"
            raise ValueError(msg)

        self._scorer.check_profile(profile)
        now = now or datetime.now(UTC)
        log = self._log.bind(candidate_id=job.candidate_id, profile_id=profile.profile_id)

        matches: list[PreApplyMatch] = []
        scored_count = 0
        for viewer in viewers:
            try:
                scored: ScoredCandidate = self._scorer.score(job, viewer, profile, now)
            except CandidateDataError as e:
                # The job itself is bad; no viewer will score it
                log.warning("pre_apply_job_unscorable", **e.to_dict())
                return []
            scored_count += 1
            if scored.score >= min_score:
                matches.append(
                    PreApplyMatch(
                        viewer_id=viewer.viewer_id,
                        score=scored.score,
                        breakdown=scored.breakdown,
                    )
                )

        matches.sort(key=lambda m: (-m.score, m.viewer_id))
        if limit is not None:
            matches = matches[:limit]

        log.info(
            "pre_apply_matching_complete",
            viewers_scored=scored_count,
            matches=len(matches),
            min_score=min_score,
        )
        return matches
