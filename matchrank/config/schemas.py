"""Ranking configuration schema."""

from typing import Annotated

from pydantic import Field, model_validator

from matchrank.data_model import StrictBaseModel
from matchrank.ranker.diversity import DEFAULT_DIVERSITY_CAP
from matchrank.ranker.pagination import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from matchrank.signals import SignalTuning


class RankingDefaults(StrictBaseModel):
    """Defaults applied to every use case unless overridden.

    Attributes:
        diversity_cap: Longest allowed run of one author.
        page_size: Items per page.
        page_ttl_seconds: TTL of cached ranked pages.
        context_ttl_seconds: TTL of cached viewer contexts.
    """

    diversity_cap: Annotated[int, Field(ge=1, le=50)] = DEFAULT_DIVERSITY_CAP
    page_size: Annotated[int, Field(ge=1, le=MAX_PAGE_SIZE)] = DEFAULT_PAGE_SIZE
    page_ttl_seconds: Annotated[int, Field(ge=1, le=86400)] = 300
    context_ttl_seconds: Annotated[int, Field(ge=1, le=86400)] = 600


class WeightProfileConfig(StrictBaseModel):
    """A weight profile as declared in YAML.

    Weight validation (known factors, sum to 1.0) happens when the profile
    is built, so the error names the profile.

    Attributes:
        id: Profile identifier.
        version: Profile version.
        description: Human-readable description.
        weights: Factor name to weight.
    """

    id: Annotated[str, Field(min_length=1, max_length=100)]
    version: Annotated[str, Field(min_length=1)] = "1"
    description: str = ""
    weights: Annotated[dict[str, Annotated[float, Field(strict=True)]], Field(min_length=1)]


class UseCaseConfig(StrictBaseModel):
    """A named ranking use case.

    Attributes:
        name: Use case name (e.g. social_feed).
        profile: Default profile id.
        page_size: Page size override.
        diversity_cap: Diversity cap override.
        page_ttl_seconds: Page TTL override.
        variants: Experiment variant name to profile id.
    """

    name: Annotated[str, Field(min_length=1, max_length=100)]
    profile: Annotated[str, Field(min_length=1)]
    page_size: Annotated[int, Field(ge=1, le=MAX_PAGE_SIZE)] | None = None
    diversity_cap: Annotated[int, Field(ge=1, le=50)] | None = None
    page_ttl_seconds: Annotated[int, Field(ge=1, le=86400)] | None = None
    variants: dict[str, str] = Field(default_factory=dict)

    @property
    def profile_ids(self) -> list[str]:
        """Every profile this use case can select."""
        return [self.profile, *self.variants.values()]


class RankingConfig(StrictBaseModel):
    """Root ranking configuration.

    Attributes:
        version: Configuration format version.
        defaults: Use case defaults.
        tuning: Signal calculator tuning.
        profiles: Weight profiles.
        use_cases: Named use cases.
    """

    version: Annotated[int, Field(ge=1)] = 1
    defaults: RankingDefaults = Field(default_factory=RankingDefaults)
    tuning: SignalTuning = Field(default_factory=SignalTuning)
    profiles: list[WeightProfileConfig] = Field(default_factory=list)
    use_cases: list[UseCaseConfig] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_references(self) -> "RankingConfig":
        """Ensure ids are unique and use cases reference known profiles."""
        profile_ids = [p.id for p in self.profiles]
        duplicates = sorted({pid for pid in profile_ids if profile_ids.count(pid) > 1})
        if duplicates:
            msg = f"Duplicate profile ids: {duplicates}"
            raise ValueError(msg)

        names = [u.name for u in self.use_cases]
        duplicate_names = sorted({n for n in names if names.count(n) > 1})
        if duplicate_names:
            msg = f"Duplicate use case names: {duplicate_names}"
            raise ValueError(msg)

        known = set(profile_ids)
        for use_case in self.use_cases:
            missing = [pid for pid in use_case.profile_ids if pid not in known]
            if missing:
                msg = f"Use case '{use_case.name}' references unknown profiles: {missing}"
                raise ValueError(msg)
        return self

    def get_use_case(self, name: str) -> UseCaseConfig | None:
        return next((u for u in self.use_cases if u.name == name), None)
