"""Ranking configuration loader with validation."""

import hashlib
import time
from pathlib import Path
from typing import Any

import structlog
import yaml
from pydantic import ValidationError

from matchrank.config.effective import EffectiveConfig
from matchrank.config.schemas import RankingConfig
from matchrank.errors import ConfigurationError


logger = structlog.get_logger()


class ConfigLoader:
    """Loads and validates the ranking configuration file.

    Every failure (missing file, YAML syntax, schema, invalid weights) is
    raised as ConfigurationError at load time, never mid-request.
    """

    def __init__(self) -> None:
        self._validation_errors: list[dict[str, str]] = []
        self._validation_duration_ms: float = 0
        self._log = logger.bind(component="config")

    @property
    def validation_errors(self) -> list[dict[str, str]]:
        """Get validation errors from the last load."""
        return self._validation_errors.copy()

    @property
    def validation_duration_ms(self) -> float:
        return self._validation_duration_ms

    def _compute_checksum(self, content: bytes) -> str:
        """Compute SHA-256 checksum of content."""
        return hashlib.sha256(content).hexdigest()

    def _load_yaml_file(self, file_path: Path) -> tuple[dict[str, Any], str]:
        """Load a YAML file and compute its checksum.

        Raises:
            FileNotFoundError: If file does not exist.
            yaml.YAMLError: If YAML parsing fails.
        """
        content_bytes = file_path.read_bytes()
        checksum = self._compute_checksum(content_bytes)
        parsed = yaml.safe_load(content_bytes.decode("utf-8")) or {}
        if not isinstance(parsed, dict):
            msg = f"top-level YAML value must be a mapping, got {type(parsed).__name__}"
            raise yaml.YAMLError(msg)
        return parsed, checksum

    def load(self, config_path: Path) -> EffectiveConfig:
        """Load and validate a ranking configuration file.

        Args:
            config_path: Path to ranking.yaml.

        Returns:
            EffectiveConfig whose profiles have all been checked.

        Raises:
            ConfigurationError: If loading or validation fails.
        """
        start_time = time.perf_counter()
        self._validation_errors = []
        file_path = str(config_path)
        log = self._log.bind(file_path=file_path)

        try:
            log.info("loading_config_file")
            data, checksum = self._load_yaml_file(config_path)
            ranking = RankingConfig.model_validate(data)
            effective = EffectiveConfig(
                ranking=ranking, file_path=file_path, file_sha256=checksum
            )
            catalog = effective.build_catalog()

        except FileNotFoundError as e:
            self._fail(log, "config_file_not_found", "file", str(e), "file_not_found")
            raise ConfigurationError(
                f"Configuration file not found: {file_path}",
                errors=self.validation_errors,
                file_path=file_path,
            ) from e

        except yaml.YAMLError as e:
            self._fail(log, "config_yaml_parse_error", "yaml", str(e), "yaml_parse_error")
            raise ConfigurationError(
                f"Invalid YAML in {file_path}",
                errors=self.validation_errors,
                file_path=file_path,
            ) from e

        except ValidationError as e:
            for err in e.errors():
                self._validation_errors.append(
                    {
                        "loc": ".".join(str(loc) for loc in err["loc"]),
                        "msg": err["msg"],
                        "type": err["type"],
                    }
                )
            log.error(
                "config_validation_failed",
                validation_error_count=len(self._validation_errors),
                errors=self._validation_errors,
            )
            raise ConfigurationError(
                f"Validation failed for {file_path}: {len(self._validation_errors)} errors",
                errors=self.validation_errors,
                file_path=file_path,
            ) from e

        except ConfigurationError as e:
            self._validation_errors.extend(e.errors)
            log.error(
                "config_validation_failed",
                validation_error_count=len(self._validation_errors),
                errors=self._validation_errors,
            )
            raise

        self._validation_duration_ms = (time.perf_counter() - start_time) * 1000
        log.info(
            "config_ready",
            file_sha256=checksum,
            profile_count=len(catalog),
            use_case_count=len(ranking.use_cases),
            config_validation_duration_ms=self._validation_duration_ms,
        )
        return effective

    def _fail(
        self,
        log: structlog.stdlib.BoundLogger,
        event: str,
        loc: str,
        msg: str,
        error_type: str,
    ) -> None:
        self._validation_errors.append({"loc": loc, "msg": msg, "type": error_type})
        log.error(event, error=msg)


def load_ranking_config(config_path: Path) -> EffectiveConfig:
    """Load a ranking configuration file.

    Raises:
        ConfigurationError: If loading or validation fails.
    """
    return ConfigLoader().load(config_path)
