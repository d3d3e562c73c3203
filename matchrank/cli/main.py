"""CLI commands for the ranking engine."""

import json
import logging
import sys
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any

import click
import structlog

from matchrank.cache import InMemoryCacheBackend, RankingCache, RedisCacheBackend
from matchrank.config import ConfigLoader, EffectiveConfig
from matchrank.data_model import JobCandidate, PostCandidate, ViewerContext, parse_candidate
from matchrank.errors import CandidateDataError, RankingError
from matchrank.observability import (
    bind_request_context,
    clear_request_context,
    configure_logging,
)
from matchrank.ranker import RankedPage, Ranker, Scorer
from matchrank.service import RankingService, StaticCandidateSource, StaticContextProvider
from matchrank.settings import get_settings


logger = structlog.get_logger()


def _load_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"{path}: invalid JSON ({e})") from e


def _load_candidates(path: Path) -> tuple[list[JobCandidate | PostCandidate], list[str]]:
    """Parse a JSON array of candidate records, skipping malformed ones."""
    data = _load_json(path)
    if not isinstance(data, list):
        raise click.BadParameter(f"{path}: expected a JSON array of candidates")

    candidates: list[JobCandidate | PostCandidate] = []
    rejected: list[str] = []
    for record in data:
        if not isinstance(record, dict):
            rejected.append("<non-object>")
            continue
        try:
            candidates.append(parse_candidate(record))
        except CandidateDataError as e:
            logger.warning("candidate_rejected", **e.to_dict())
            rejected.append(str(e.candidate_id))
    return candidates, rejected


def _parse_now(value: str | None) -> datetime | None:
    if value is None:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError as e:
        raise click.BadParameter(f"--now: not an ISO-8601 timestamp: {value}") from e
    if parsed.tzinfo is None:
        raise click.BadParameter("--now must include a timezone offset")
    return parsed


def _build_cache(config: EffectiveConfig, no_cache: bool) -> RankingCache:
    settings = get_settings()
    defaults = config.ranking.defaults
    if no_cache or not settings.cache_enabled:
        backend = None
    elif settings.redis_url:
        backend = RedisCacheBackend.from_url(settings.redis_url)
    else:
        backend = InMemoryCacheBackend()
    return RankingCache(
        backend,
        page_ttl_seconds=defaults.page_ttl_seconds,
        context_ttl_seconds=defaults.context_ttl_seconds,
    )


def _load_config_or_exit(loader: ConfigLoader, config_path: Path) -> EffectiveConfig:
    try:
        return loader.load(config_path)
    except RankingError as e:
        click.echo(f"Configuration validation failed: {e}", err=True)
        for error in loader.validation_errors:
            click.echo(f"  - {error['loc']}: {error['msg']}", err=True)
        sys.exit(1)


@click.group()
@click.version_option(version="0.1.0")
@click.option(
    "--json-logs/--no-json-logs",
    default=None,
    help="Use JSON format for logs (default: from settings).",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging.")
def cli(json_logs: bool | None, verbose: bool) -> None:
    """Matching and ranking engine CLI."""
    settings = get_settings()
    level = logging.DEBUG if verbose else settings.log_level_value
    configure_logging(
        level=level,
        json_format=settings.json_logs if json_logs is None else json_logs,
    )


@cli.command()
@click.argument(
    "config_path",
    required=False,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
def validate(config_path: Path | None) -> None:
    """Validate a ranking configuration file."""
    config_path = config_path or get_settings().config_path
    loader = ConfigLoader()
    effective = _load_config_or_exit(loader, config_path)
    catalog = effective.build_catalog()

    click.echo("Configuration is valid!")
    click.echo(f"  Profiles: {len(catalog)}")
    for profile in catalog:
        click.echo(f"    - {profile.profile_id} (v{profile.version}): {len(profile.weights)} factors")
    click.echo(f"  Use cases: {len(effective.ranking.use_cases)}")
    click.echo(f"  File SHA-256: {effective.file_sha256}")
    click.echo(f"  Checksum: {effective.compute_checksum()}")


@cli.command()
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to ranking.yaml (default: from settings).",
)
@click.option(
    "--candidates",
    "candidates_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="JSON array of candidate records.",
)
@click.option(
    "--viewer",
    "viewer_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="JSON viewer context.",
)
@click.option("--use-case", "use_case", help="Configured use case name.")
@click.option("--variant", help="Experiment variant of the use case.")
@click.option("--profile", "profile_id", help="Rank with this profile directly.")
@click.option("--page-size", type=int, help="Items per page (default: from config).")
@click.option("--cursor", help="Cursor returned by a previous page.")
@click.option("--now", "now_value", help="Reference time (ISO-8601 with offset).")
@click.option("--no-cache", is_flag=True, help="Bypass the ranking cache.")
def rank(  # noqa: PLR0913
    config_path: Path | None,
    candidates_path: Path,
    viewer_path: Path,
    use_case: str | None,
    variant: str | None,
    profile_id: str | None,
    page_size: int | None,
    cursor: str | None,
    now_value: str | None,
    no_cache: bool,
) -> None:
    """Rank candidates for a viewer and print one page as JSON."""
    if bool(use_case) == bool(profile_id):
        raise click.UsageError("Pass exactly one of --use-case or --profile.")

    request_id = str(uuid.uuid4())
    config_path = config_path or get_settings().config_path
    effective = _load_config_or_exit(ConfigLoader(), config_path)
    now = _parse_now(now_value)

    candidates, rejected = _load_candidates(candidates_path)
    try:
        viewer = ViewerContext.model_validate(_load_json(viewer_path))
    except ValueError as e:
        raise click.BadParameter(f"{viewer_path}: invalid viewer context ({e})") from e

    bind_request_context(request_id, viewer.viewer_id)
    try:
        _run_rank(
            effective,
            candidates,
            rejected,
            viewer,
            use_case=use_case,
            variant=variant,
            profile_id=profile_id,
            page_size=page_size,
            cursor=cursor,
            now=now,
            no_cache=no_cache,
        )
    finally:
        clear_request_context()


def _run_rank(  # noqa: PLR0913
    effective: EffectiveConfig,
    candidates: list[JobCandidate | PostCandidate],
    rejected: list[str],
    viewer: ViewerContext,
    use_case: str | None,
    variant: str | None,
    profile_id: str | None,
    page_size: int | None,
    cursor: str | None,
    now: datetime | None,
    no_cache: bool,
) -> None:
    log = logger.bind(component="cli", command="rank")
    log.info(
        "rank_started",
        candidates=len(candidates),
        rejected=len(rejected),
        use_case=use_case,
        profile_id=profile_id,
    )

    ranker = Ranker(
        scorer=Scorer(tuning=effective.ranking.tuning),
        diversity_cap=effective.ranking.defaults.diversity_cap,
    )

    try:
        page = _rank_page(
            effective,
            ranker,
            candidates,
            viewer,
            use_case=use_case,
            variant=variant,
            profile_id=profile_id,
            page_size=page_size,
            cursor=cursor,
            now=now,
            no_cache=no_cache,
        )
    except RankingError as e:
        log.error("rank_failed", **e.to_dict())
        click.echo(f"Ranking failed: {e}", err=True)
        sys.exit(1)

    if rejected:
        page = page.model_copy(update={"excluded_ids": [*rejected, *page.excluded_ids]})
    click.echo(page.model_dump_json(indent=2))


def _rank_page(  # noqa: PLR0913
    effective: EffectiveConfig,
    ranker: Ranker,
    candidates: list[JobCandidate | PostCandidate],
    viewer: ViewerContext,
    use_case: str | None,
    variant: str | None,
    profile_id: str | None,
    page_size: int | None,
    cursor: str | None,
    now: datetime | None,
    no_cache: bool,
) -> RankedPage:
    catalog = effective.build_catalog()
    if profile_id:
        return ranker.rank(
            candidates,
            viewer,
            catalog.get(profile_id),
            page_size=page_size or effective.ranking.defaults.page_size,
            cursor=cursor,
            now=now,
        )

    service = RankingService(
        ranker=ranker,
        cache=_build_cache(effective, no_cache),
        config=effective,
        context_provider=StaticContextProvider([viewer]),
        candidate_source=StaticCandidateSource(candidates),
        catalog=catalog,
    )
    if page_size is not None:
        resolved = service.resolve(use_case or "", variant)
        return ranker.rank(
            candidates,
            viewer,
            resolved.profile,
            page_size=page_size,
            cursor=cursor,
            now=now,
            diversity_cap=resolved.diversity_cap,
        )
    return service.rank_for_viewer(
        viewer.viewer_id, use_case or "", cursor=cursor, now=now, variant=variant
    )


if __name__ == "__main__":
    cli()
