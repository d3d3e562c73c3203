"""Weight profiles and the profile catalog."""

import math
from collections.abc import Collection, Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from matchrank.errors import ConfigurationError
from matchrank.signals import FACTOR_NAMES


# Weights must sum to 1.0 within this tolerance
WEIGHT_SUM_TOLERANCE: float = 1e-6


@dataclass(frozen=True)
class WeightProfile:
    """Named, immutable mapping of factor name to weight.

    Construction validates the weights and never renormalizes them: a
    profile whose weights do not sum to 1.0 is rejected.

    Attributes:
        profile_id: Profile identifier.
        weights: Factor name to weight.
        version: Profile version, for experiments.
        description: Human-readable description.
        known_factors: Factor names the profile may reference.
    """

    profile_id: str
    weights: Mapping[str, float]
    version: str = "1"
    description: str = ""
    known_factors: Collection[str] = field(
        default=FACTOR_NAMES, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        errors = _validate_weights(self.weights, self.known_factors)
        if errors:
            raise ConfigurationError(
                f"Invalid weight profile '{self.profile_id}'",
                errors=errors,
            )
        object.__setattr__(self, "weights", MappingProxyType(dict(self.weights)))

    @property
    def factors(self) -> tuple[str, ...]:
        """Factor names in a stable (sorted) order."""
        return tuple(sorted(self.weights))


def _validate_weights(
    weights: Mapping[str, float], known_factors: Collection[str]
) -> list[dict[str, str]]:
    errors: list[dict[str, str]] = []
    if not weights:
        errors.append({"loc": "weights", "msg": "profile has no factors"})
        return errors

    for name, weight in weights.items():
        if name not in known_factors:
            errors.append({"loc": f"weights.{name}", "msg": "unknown factor"})
        if isinstance(weight, bool) or not isinstance(weight, int | float):
            errors.append({"loc": f"weights.{name}", "msg": "weight must be a number"})
        elif not math.isfinite(weight):
            errors.append({"loc": f"weights.{name}", "msg": "weight must be finite"})
        elif weight < 0:
            errors.append({"loc": f"weights.{name}", "msg": "weight must be >= 0"})

    if not errors:
        total = math.fsum(weights.values())
        if abs(total - 1.0) > WEIGHT_SUM_TOLERANCE:
            errors.append(
                {"loc": "weights", "msg": f"weights sum to {total:.6f}, expected 1.0"}
            )
    return errors


class ProfileCatalog:
    """Lookup of weight profiles by id."""

    def __init__(self, profiles: Iterable[WeightProfile] = ()) -> None:
        self._profiles: dict[str, WeightProfile] = {}
        for profile in profiles:
            if profile.profile_id in self._profiles:
                raise ConfigurationError(
                    f"Duplicate weight profile '{profile.profile_id}'"
                )
            self._profiles[profile.profile_id] = profile

    def get(self, profile_id: str) -> WeightProfile:
        """Return the profile with the given id.

        Raises:
            ConfigurationError: If no such profile exists.
        """
        try:
            return self._profiles[profile_id]
        except KeyError:
            raise ConfigurationError(f"Unknown weight profile '{profile_id}'") from None

    def __contains__(self, profile_id: object) -> bool:
        return profile_id in self._profiles

    def __iter__(self) -> Iterator[WeightProfile]:
        return iter(self._profiles.values())

    def __len__(self) -> int:
        return len(self._profiles)

    @property
    def profile_ids(self) -> list[str]:
        return sorted(self._profiles)
