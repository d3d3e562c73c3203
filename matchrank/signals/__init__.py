"""Signal calculators and the factor registry."""

from matchrank.signals.registry import (
    DEFAULT_REGISTRY,
    FACTOR_NAMES,
    ScoringContext,
    SignalFn,
    SignalRegistry,
)
from matchrank.signals.tuning import SignalTuning


__all__ = [
    "DEFAULT_REGISTRY",
    "FACTOR_NAMES",
    "ScoringContext",
    "SignalFn",
    "SignalRegistry",
    "SignalTuning",
]
