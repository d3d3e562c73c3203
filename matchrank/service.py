"""Ranking service facade.

Wires the candidate source, viewer context provider, ranker and cache
together per use case and applies the cache invalidation contract when
candidates or viewer contexts change.
"""

from collections.abc import Iterable, Sequence
from datetime import datetime
from typing import Protocol

import structlog

from matchrank.cache import RankingCache
from matchrank.config import EffectiveConfig, ResolvedUseCase
from matchrank.data_model import JobCandidate, PostCandidate, ViewerContext
from matchrank.ranker import ProfileCatalog, RankedPage, Ranker


logger = structlog.get_logger()


class CandidateSource(Protocol):
    """Supplies the candidate set for a viewer and use case."""

    def fetch(
        self, viewer: ViewerContext, use_case: str
    ) -> Sequence[JobCandidate | PostCandidate]:
        """Return candidates to rank for this viewer."""
        ...


class ViewerContextProvider(Protocol):
    """Builds a viewer context from the system of record."""

    def build(self, viewer_id: str) -> ViewerContext | None:
        """Return the viewer's context, or None when the viewer is unknown."""
        ...


class StaticCandidateSource:
    """Candidate source over a fixed in-memory candidate list."""

    def __init__(self, candidates: Iterable[JobCandidate | PostCandidate]) -> None:
        self._candidates = list(candidates)

    def fetch(
        self, viewer: ViewerContext, use_case: str
    ) -> Sequence[JobCandidate | PostCandidate]:
        return list(self._candidates)


class StaticContextProvider:
    """Context provider over a fixed set of viewer contexts."""

    def __init__(self, viewers: Iterable[ViewerContext]) -> None:
        self._viewers = {viewer.viewer_id: viewer for viewer in viewers}

    def build(self, viewer_id: str) -> ViewerContext | None:
        return self._viewers.get(viewer_id)


class RankingService:
    """Entry point for ranking requests and change notifications."""

    def __init__(
        self,
        ranker: Ranker,
        cache: RankingCache,
        config: EffectiveConfig,
        context_provider: ViewerContextProvider,
        candidate_source: CandidateSource,
        catalog: ProfileCatalog | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            ranker: Ranker used for every request.
            cache: Ranking cache (may be disabled).
            config: Effective ranking configuration.
            context_provider: Builds viewer contexts.
            candidate_source: Supplies candidates.
            catalog: Weight profiles; built from config when omitted.

        Raises:
            ConfigurationError: If a configured profile is invalid.
        """
        self._ranker = ranker
        self._cache = cache
        self._config = config
        self._context_provider = context_provider
        self._candidate_source = candidate_source
        self._catalog = catalog or config.build_catalog()
        self._log = logger.bind(component="service")

    @property
    def catalog(self) -> ProfileCatalog:
        return self._catalog

    def resolve(self, use_case: str, variant: str | None = None) -> ResolvedUseCase:
        """Resolve a use case name (and optional variant) to its settings."""
        return self._config.resolve_use_case(use_case, self._catalog, variant)

    def rank_for_viewer(
        self,
        viewer_id: str,
        use_case: str,
        cursor: str | None = None,
        now: datetime | None = None,
        variant: str | None = None,
    ) -> RankedPage:
        """Return one ranked page for a viewer.

        Args:
            viewer_id: Viewer identifier.
            use_case: Configured use case name.
            cursor: Cursor from a previous page.
            now: Reference time; defaults to the current UTC time.
            variant: Experiment variant of the use case.

        Raises:
            ConfigurationError: If the use case or variant is unknown.
            ContextUnavailableError: If the viewer context cannot be built.
            PaginationError: If the cursor is invalid.
        """
        resolved = self.resolve(use_case, variant)
        viewer = self._cache.get_or_build_context(
            viewer_id, lambda: self._context_provider.build(viewer_id)
        )

        def compute() -> RankedPage:
            candidates = self._candidate_source.fetch(viewer, resolved.name)
            return self._ranker.rank(
                candidates,
                viewer,
                resolved.profile,
                page_size=resolved.page_size,
                cursor=cursor,
                now=now,
                diversity_cap=resolved.diversity_cap,
            )

        page = self._cache.get_or_compute(
            viewer_id,
            cursor,
            resolved.profile.profile_id,
            compute,
            ttl_seconds=resolved.page_ttl_seconds,
            scope=resolved.name,
        )
        self._log.debug(
            "rank_for_viewer_complete",
            viewer_id=viewer_id,
            use_case=resolved.name,
            profile_id=resolved.profile.profile_id,
            variant=resolved.variant,
            items=len(page.items),
        )
        return page

    def on_candidate_created(self, audience_ids: Iterable[str]) -> int:
        """Invalidate cached pages of every viewer who may see a new candidate.

        Returns:
            Number of cache keys removed.
        """
        audience = sorted(set(audience_ids))
        removed = self._cache.invalidate_audience(audience)
        self._log.info(
            "candidate_created_invalidation",
            audience_size=len(audience),
            keys_removed=removed,
        )
        return removed

    def on_viewer_context_changed(self, viewer_id: str) -> int:
        """Invalidate a viewer's cached context and pages.

        Returns:
            Number of cache keys removed.
        """
        removed = self._cache.invalidate_viewer(viewer_id)
        self._log.info(
            "viewer_context_invalidation", viewer_id=viewer_id, keys_removed=removed
        )
        return removed
