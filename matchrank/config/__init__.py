"""Ranking configuration loading and validation."""

from matchrank.config.effective import EffectiveConfig, ResolvedUseCase
from matchrank.config.loader import ConfigLoader, load_ranking_config
from matchrank.config.schemas import (
    RankingConfig,
    RankingDefaults,
    UseCaseConfig,
    WeightProfileConfig,
)


__all__ = [
    "ConfigLoader",
    "EffectiveConfig",
    "RankingConfig",
    "RankingDefaults",
    "ResolvedUseCase",
    "UseCaseConfig",
    "WeightProfileConfig",
    "load_ranking_config",
]
