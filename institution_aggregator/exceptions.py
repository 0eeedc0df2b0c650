"""
Custom exceptions for the institution aggregator.

Error philosophy:
  - SourceFetchError   → SOFT FAIL: recorded as a SourceError, the run continues
                         with the next source.
  - ConfigurationError → FAIL HARD: bad environment values stop startup.

Structural problems in a fetched document (missing table, header rows, empty
names) are not errors at all; the Extractor just yields fewer records.
"""

from typing import Optional

from .schemas import SourceError


class AggregatorError(Exception):
    """Base exception for all aggregator errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


# --- SOFT FAIL: isolated to one source ---

class SourceFetchError(AggregatorError):
    """
    Raised by the Fetcher when a source cannot be retrieved.

    Covers both transport failures (DNS, connection reset, timeout) and
    non-success HTTP statuses.  The Orchestrator catches it and turns it into
    a SourceError entry; it never escapes an aggregation run.
    """

    def __init__(
        self,
        message: str,
        source: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[dict] = None
    ):
        super().__init__(message, details)
        self.source = source
        self.status_code = status_code  # None for transport failures

    def to_source_error(self, source: Optional[str] = None) -> SourceError:
        """Convert to the SourceError record reported to callers."""
        return SourceError(source=source or self.source or "", error=self.message)


# --- FAIL HARD: stops startup ---

class ConfigurationError(AggregatorError):
    """Raised when an environment setting cannot be parsed."""

    def __init__(self, message: str, setting: str, details: Optional[dict] = None):
        super().__init__(message, details)
        self.setting = setting
