"""Weighted multi-factor scoring engine."""

import math
from datetime import datetime

import structlog

from matchrank.data_model import JobCandidate, PostCandidate, ViewerContext
from matchrank.errors import CandidateDataError, ConfigurationError
from matchrank.ranker.models import ScoredCandidate
from matchrank.ranker.profiles import WeightProfile
from matchrank.signals import DEFAULT_REGISTRY, ScoringContext, SignalRegistry, SignalTuning


logger = structlog.get_logger()


class Scorer:
    """Computes a weighted aggregate score for one candidate.

    Scoring formula:
        score = clamp(sum(weight[f] * signal[f](candidate, viewer) for f in profile))

    Each factor named by the profile is computed exactly once. The scorer is
    deterministic: the reference time is passed in, never read from a clock.
    """

    def __init__(
        self,
        tuning: SignalTuning | None = None,
        registry: SignalRegistry | None = None,
    ) -> None:
        """Initialize the scorer.

        Args:
            tuning: Calculator tuning constants.
            registry: Factor name to adapter mapping.
        """
        self._tuning = tuning or SignalTuning()
        self._registry = registry if registry is not None else DEFAULT_REGISTRY
        self._log = logger.bind(component="ranker", subcomponent="scorer")

    @property
    def tuning(self) -> SignalTuning:
        return self._tuning

    def check_profile(self, profile: WeightProfile) -> None:
        """Verify the registry knows every factor the profile names.

        Raises:
            ConfigurationError: If the profile names an unregistered factor.
        """
        missing = sorted(set(profile.weights) - set(self._registry))
        if missing:
            raise ConfigurationError(
                f"Weight profile '{profile.profile_id}' names unregistered factors",
                errors=[{"loc": f"weights.{name}", "msg": "unknown factor"} for name in missing],
            )

    def score(
        self,
        candidate: JobCandidate | PostCandidate,
        viewer: ViewerContext,
        profile: WeightProfile,
        now: datetime,
    ) -> ScoredCandidate:
        """Score a single candidate.

        Args:
            candidate: Candidate to score.
            viewer: Viewer context.
            profile: Weight profile.
            now: Reference time for recency factors.

        Returns:
            ScoredCandidate with aggregate score, breakdown, and raw signals.

        Raises:
            ConfigurationError: If the profile names an unregistered factor.
            CandidateDataError: If any calculator fails on this candidate.
        """
        self.check_profile(profile)
        ctx = ScoringContext(now=now, tuning=self._tuning)
        candidate_id = getattr(candidate, "candidate_id", None)

        signals: dict[str, float] = {}
        breakdown: dict[str, float] = {}
        for factor in profile.factors:
            try:
                value = float(self._registry[factor](candidate, viewer, ctx))
            except Exception as e:  # noqa: BLE001
                raise CandidateDataError(candidate_id, str(e), factor=factor) from e
            if not math.isfinite(value):
                raise CandidateDataError(
                    candidate_id, f"signal is not finite ({value})", factor=factor
                )
            value = max(0.0, min(1.0, value))
            signals[factor] = value
            breakdown[factor] = profile.weights[factor] * value

        total = max(0.0, min(1.0, math.fsum(breakdown.values())))

        return ScoredCandidate(
            candidate=candidate,
            score=total,
            breakdown=breakdown,
            signals=signals,
        )
