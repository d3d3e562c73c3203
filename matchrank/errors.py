"""Domain exceptions for the matching and ranking engine.

The hierarchy separates failures that are fatal at load time (bad
configuration) from failures that are recovered locally (a single malformed
candidate, an unavailable cache backend) and failures that must reach the
caller (a viewer context that cannot be built).
"""


class RankingError(Exception):
    """Base exception for all ranking engine errors."""

    def to_dict(self) -> dict[str, object]:
        """Convert error to dictionary for logging.

        Returns:
            Dictionary representation of the error.
        """
        return {"error_class": type(self).__name__, "message": str(self)}


class ConfigurationError(RankingError):
    """Raised when a weight profile or ranking configuration is invalid.

    Raised at profile-load time and never returned mid-request.
    """

    def __init__(
        self,
        message: str,
        errors: list[dict[str, str]] | None = None,
        file_path: str | None = None,
    ) -> None:
        """Initialize the configuration error.

        Args:
            message: Human-readable error message.
            errors: Structured validation error details.
            file_path: Path of the configuration file, if any.
        """
        self.errors = errors or []
        self.file_path = file_path
        super().__init__(message)

    def to_dict(self) -> dict[str, object]:
        """Convert error to dictionary for logging.

        Returns:
            Dictionary representation of the error.
        """
        data = super().to_dict()
        data["errors"] = self.errors
        data["file_path"] = self.file_path
        return data


class CandidateDataError(RankingError):
    """Raised when a single candidate cannot be scored.

    The ranker excludes the candidate and keeps going.
    """

    def __init__(
        self,
        candidate_id: str | None,
        message: str,
        factor: str | None = None,
    ) -> None:
        """Initialize the candidate data error.

        Args:
            candidate_id: Identifier of the malformed candidate.
            message: Human-readable error message.
            factor: Signal factor that failed, if known.
        """
        self.candidate_id = candidate_id
        self.factor = factor
        detail = f" (factor={factor})" if factor else ""
        super().__init__(f"Candidate {candidate_id}{detail}: {message}")

    def to_dict(self) -> dict[str, object]:
        """Convert error to dictionary for logging.

        Returns:
            Dictionary representation of the error.
        """
        data = super().to_dict()
        data["candidate_id"] = self.candidate_id
        data["factor"] = self.factor
        return data


class ContextUnavailableError(RankingError):
    """Raised when the viewer context cannot be built.

    Ranking cannot proceed without a context, so this reaches the caller.
    """

    def __init__(self, viewer_id: str, message: str = "Viewer context unavailable") -> None:
        """Initialize the error.

        Args:
            viewer_id: The viewer whose context could not be built.
            message: Human-readable error message.
        """
        self.viewer_id = viewer_id
        super().__init__(f"{message}: {viewer_id}")


class CacheUnavailableError(RankingError):
    """Raised by cache backends when the backing store fails.

    The ranking cache always treats this as a cache miss.
    """


class PaginationError(RankingError):
    """Raised when a cursor or page size supplied by the caller is invalid."""
