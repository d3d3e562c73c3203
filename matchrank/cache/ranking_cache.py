"""Read-through cache for ranked pages and viewer contexts.

Key layout:
    rank:page:{viewer_id}:{profile_id}:{cursor|start}
    rank:page:{viewer_id}:{scope}:{profile_id}:{cursor|start}
    rank:context:{viewer_id}

Key parts are percent-encoded so ids can never collide with the separator
or act as glob wildcards during pattern invalidation.
"""

from collections.abc import Callable, Iterable
from typing import TypeVar
from urllib.parse import quote

import structlog
from pydantic import ValidationError

from matchrank.cache.backends import CacheBackend, CacheMetrics
from matchrank.data_model import ViewerContext
from matchrank.errors import CacheUnavailableError, ContextUnavailableError
from matchrank.ranker.models import RankedPage


logger = structlog.get_logger()

T = TypeVar("T")

DEFAULT_PAGE_TTL_SECONDS: int = 300
DEFAULT_CONTEXT_TTL_SECONDS: int = 600

_PAGE_NAMESPACE = "page"
_CONTEXT_NAMESPACE = "context"


def _part(value: str) -> str:
    return quote(value, safe="")


def page_key(
    viewer_id: str, profile_id: str, cursor: str | None, scope: str | None = None
) -> str:
    """Cache key for one ranked page.

    ``scope`` separates callers that rank with the same profile but a
    different candidate set or page shape, such as two use cases.
    """
    parts = [_part(viewer_id)]
    if scope:
        parts.append(_part(scope))
    parts.append(_part(profile_id))
    parts.append(_part(cursor) if cursor else "start")
    return f"rank:{_PAGE_NAMESPACE}:" + ":".join(parts)


def viewer_pages_pattern(viewer_id: str) -> str:
    """Glob pattern matching every cached page of one viewer."""
    return f"rank:{_PAGE_NAMESPACE}:{_part(viewer_id)}:*"


def context_key(viewer_id: str) -> str:
    """Cache key for a viewer context."""
    return f"rank:{_CONTEXT_NAMESPACE}:{_part(viewer_id)}"


class RankingCache:
    """Read-through cache over a CacheBackend.

    Cache failures never fail a request: a backend error is logged and
    treated as a miss, and an undecodable entry is a miss that is deleted.
    A value is written only after the compute function returns, so a
    failed or cancelled computation leaves nothing behind.
    """

    def __init__(
        self,
        backend: CacheBackend | None,
        page_ttl_seconds: int = DEFAULT_PAGE_TTL_SECONDS,
        context_ttl_seconds: int = DEFAULT_CONTEXT_TTL_SECONDS,
        enabled: bool = True,
        metrics: CacheMetrics | None = None,
    ) -> None:
        """Initialize the cache.

        Args:
            backend: Storage backend; None disables caching.
            page_ttl_seconds: Default TTL for ranked pages.
            context_ttl_seconds: TTL for viewer contexts.
            enabled: When False every call computes directly.
            metrics: Metrics instance for this cache.

        Raises:
            ValueError: If a TTL is not positive.
        """
        if page_ttl_seconds <= 0 or context_ttl_seconds <= 0:
            msg = "cache TTLs must be positive"
            raise ValueError(msg)
        self._backend = backend
        self._page_ttl = page_ttl_seconds
        self._context_ttl = context_ttl_seconds
        self._enabled = enabled and backend is not None
        self._metrics = metrics or CacheMetrics()
        self._log = logger.bind(component="cache", subcomponent="ranking")

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def metrics(self) -> CacheMetrics:
        return self._metrics

    def get_or_compute(
        self,
        viewer_id: str,
        cursor: str | None,
        profile_id: str,
        compute_fn: Callable[[], RankedPage],
        ttl_seconds: int | None = None,
        scope: str | None = None,
    ) -> RankedPage:
        """Return a cached page or compute and store it.

        Args:
            viewer_id: Viewer the page belongs to.
            cursor: Page cursor (None for the first page).
            profile_id: Weight profile used to rank.
            compute_fn: Produces the page on a miss.
            ttl_seconds: Override of the default page TTL.
            scope: Extra key segment, e.g. the use case name.

        Returns:
            The ranked page.
        """
        if not self._enabled:
            return compute_fn()

        key = page_key(viewer_id, profile_id, cursor, scope)
        cached = self._read(key, RankedPage.model_validate_json, _PAGE_NAMESPACE)
        if cached is not None:
            return cached

        page = compute_fn()
        self._write(key, page.model_dump_json(), ttl_seconds or self._page_ttl)
        return page

    def get_or_build_context(
        self,
        viewer_id: str,
        build_fn: Callable[[], ViewerContext | None],
    ) -> ViewerContext:
        """Return a cached viewer context or build and store it.

        Raises:
            ContextUnavailableError: If the context cannot be built.
        """
        key = context_key(viewer_id)
        if self._enabled:
            cached = self._read(key, ViewerContext.model_validate_json, _CONTEXT_NAMESPACE)
            if cached is not None:
                return cached

        try:
            context = build_fn()
        except ContextUnavailableError:
            raise
        except Exception as e:  # noqa: BLE001
            raise ContextUnavailableError(viewer_id, f"Failed to build context ({e})") from e
        if context is None:
            raise ContextUnavailableError(viewer_id)

        if self._enabled:
            self._write(key, context.model_dump_json(), self._context_ttl)
        return context

    def invalidate_pages(self, viewer_id: str) -> int:
        """Drop every cached page of one viewer (candidate set changed)."""
        return self._delete_pattern(viewer_pages_pattern(viewer_id))

    def invalidate_viewer(self, viewer_id: str) -> int:
        """Drop a viewer's context and every cached page (context changed)."""
        removed = self._delete(context_key(viewer_id))
        return removed + self.invalidate_pages(viewer_id)

    def invalidate_audience(self, viewer_ids: Iterable[str]) -> int:
        """Drop cached pages for every viewer in an audience."""
        return sum(self.invalidate_pages(viewer_id) for viewer_id in set(viewer_ids))

    def _read(self, key: str, decode: Callable[[str], T], namespace: str) -> T | None:
        try:
            raw = self._backend.get(key)
        except CacheUnavailableError as e:
            self._metrics.record_error()
            self._metrics.record_miss()
            self._log.warning("cache_backend_error", op="get", key=key, error=str(e))
            return None

        if raw is None:
            self._metrics.record_miss()
            return None

        try:
            value = decode(raw)
        except ValidationError:
            self._metrics.record_decode_error()
            self._metrics.record_miss()
            self._log.warning("cache_entry_undecodable", key=key)
            self._delete(key)
            return None

        self._metrics.record_hit(namespace)
        self._log.debug("cache_hit", key=key)
        return value

    def _write(self, key: str, value: str, ttl_seconds: int) -> None:
        try:
            self._backend.set(key, value, ttl_seconds)
        except CacheUnavailableError as e:
            self._metrics.record_error()
            self._log.warning("cache_backend_error", op="set", key=key, error=str(e))
            return
        self._metrics.record_write()

    def _delete(self, key: str) -> int:
        if not self._enabled:
            return 0
        try:
            self._backend.delete(key)
        except CacheUnavailableError as e:
            self._metrics.record_error()
            self._log.warning("cache_backend_error", op="delete", key=key, error=str(e))
            return 0
        self._metrics.record_invalidations(1)
        return 1

    def _delete_pattern(self, pattern: str) -> int:
        if not self._enabled:
            return 0
        try:
            removed = self._backend.delete_pattern(pattern)
        except CacheUnavailableError as e:
            self._metrics.record_error()
            self._log.warning(
                "cache_backend_error", op="delete_pattern", pattern=pattern, error=str(e)
            )
            return 0
        self._metrics.record_invalidations(removed)
        self._log.debug("cache_invalidated", pattern=pattern, removed=removed)
        return removed
