"""Effective ranking configuration and use case resolution."""

import hashlib
import json
from dataclasses import dataclass

from matchrank.config.schemas import RankingConfig, UseCaseConfig
from matchrank.data_model import StrictBaseModel
from matchrank.errors import ConfigurationError
from matchrank.ranker.profiles import ProfileCatalog, WeightProfile


@dataclass(frozen=True)
class ResolvedUseCase:
    """A use case with defaults applied and its profile looked up.

    Attributes:
        name: Use case name.
        profile: Weight profile selected for this request.
        page_size: Items per page.
        diversity_cap: Longest allowed run of one author.
        page_ttl_seconds: TTL of cached pages.
        variant: Experiment variant, if one was selected.
    """

    name: str
    profile: WeightProfile
    page_size: int
    diversity_cap: int
    page_ttl_seconds: int
    variant: str | None = None


class EffectiveConfig(StrictBaseModel):
    """Validated ranking configuration plus provenance.

    Attributes:
        ranking: The validated configuration.
        file_path: Path the configuration was loaded from, if any.
        file_sha256: SHA-256 of the raw file bytes.
    """

    ranking: RankingConfig
    file_path: str | None = None
    file_sha256: str = ""

    def to_normalized_json(self) -> str:
        """Serialize the configuration with stable key ordering."""
        data = self.ranking.model_dump(mode="json")
        return json.dumps(data, sort_keys=True, separators=(",", ":"))

    def compute_checksum(self) -> str:
        """Compute SHA-256 checksum of the normalized configuration."""
        return hashlib.sha256(self.to_normalized_json().encode("utf-8")).hexdigest()

    def build_catalog(self) -> ProfileCatalog:
        """Build weight profiles from the configuration.

        Raises:
            ConfigurationError: If any profile is invalid.
        """
        profiles: list[WeightProfile] = []
        errors: list[dict[str, str]] = []
        for cfg in self.ranking.profiles:
            try:
                profiles.append(
                    WeightProfile(
                        profile_id=cfg.id,
                        weights=cfg.weights,
                        version=cfg.version,
                        description=cfg.description,
                    )
                )
            except ConfigurationError as e:
                errors.extend(
                    {**err, "loc": f"profiles.{cfg.id}.{err['loc']}"} for err in e.errors
                )
        if errors:
            raise ConfigurationError(
                f"{len(errors)} invalid weight profile entries",
                errors=errors,
                file_path=self.file_path,
            )
        return ProfileCatalog(profiles)

    def resolve_use_case(
        self,
        name: str,
        catalog: ProfileCatalog,
        variant: str | None = None,
    ) -> ResolvedUseCase:
        """Apply defaults to a use case and select its profile.

        Args:
            name: Use case name.
            catalog: Catalog built from this configuration.
            variant: Experiment variant; None or "control" selects the default profile.

        Raises:
            ConfigurationError: If the use case or variant is unknown.
        """
        use_case = self.ranking.get_use_case(name)
        if use_case is None:
            raise ConfigurationError(f"Unknown use case '{name}'", file_path=self.file_path)

        profile_id = _variant_profile(use_case, variant, self.file_path)
        defaults = self.ranking.defaults
        return ResolvedUseCase(
            name=use_case.name,
            profile=catalog.get(profile_id),
            page_size=use_case.page_size or defaults.page_size,
            diversity_cap=use_case.diversity_cap or defaults.diversity_cap,
            page_ttl_seconds=use_case.page_ttl_seconds or defaults.page_ttl_seconds,
            variant=variant if profile_id != use_case.profile else None,
        )


def _variant_profile(use_case: UseCaseConfig, variant: str | None, file_path: str | None) -> str:
    if variant is None or variant == "control":
        return use_case.profile
    try:
        return use_case.variants[variant]
    except KeyError:
        raise ConfigurationError(
            f"Unknown variant '{variant}' for use case '{use_case.name}'",
            file_path=file_path,
        ) from None
