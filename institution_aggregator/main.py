"""
Main entry point for the institution aggregator.

Wires the Fetcher, Extractor and SourceOrchestrator together for the two
source families and turns each run into its endpoint payload.
"""

from contextlib import contextmanager
from typing import Iterable, Iterator, Optional

from .config import Settings, get_settings
from .extractor import Extractor
from .fetcher import Fetcher
from .orchestrator import DocumentFetcher, SourceOrchestrator
from .schemas import AggregationResult, DirectoryListing, RankingListing, SourceDescriptor
from .sources import DIRECTORY_SOURCE_URL, RANKING_CATEGORIES, directory_sources, ranking_sources
from .logger import get_module_logger, setup_logger

logger = get_module_logger("main")


class InstitutionAggregator:
    """
    Facade over the aggregation pipeline.

    Each call builds a fresh orchestrator run, so concurrent calls never
    share merge state.  Without an injected fetcher each run also gets its
    own Fetcher, closed when the run ends, so no cookies or pooled
    connections carry over between requests.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        fetcher: Optional[DocumentFetcher] = None,
        extractor: Optional[Extractor] = None,
        max_workers: Optional[int] = None
    ):
        self.settings = settings or get_settings()
        self.fetcher = fetcher
        self.extractor = extractor or Extractor()
        self.max_workers = max_workers or self.settings.max_workers

    @contextmanager
    def _fetcher(self) -> Iterator[DocumentFetcher]:
        if self.fetcher is not None:
            yield self.fetcher
            return

        with Fetcher(user_agent=self.settings.user_agent,
                     timeout=self.settings.timeout) as fetcher:
            yield fetcher

    def _run(self, sources: list[SourceDescriptor]) -> AggregationResult:
        with self._fetcher() as fetcher:
            orchestrator = SourceOrchestrator(fetcher, self.extractor,
                                              max_workers=self.max_workers)
            return orchestrator.run(sources)

    def aggregate_directory(self) -> DirectoryListing:
        """Aggregate the single-page school directory."""
        result = self._run(directory_sources())
        return DirectoryListing.from_result(DIRECTORY_SOURCE_URL, result)

    def aggregate_rankings(
        self,
        year: Optional[str] = None,
        categories: Iterable[str] = RANKING_CATEGORIES
    ) -> RankingListing:
        """Aggregate every ranking category for one year."""
        year = year or self.settings.default_year
        result = self._run(ranking_sources(year, categories))
        return RankingListing.from_result(year, result)


def configure_logging(settings: Optional[Settings] = None, level: Optional[int] = None) -> None:
    """Apply the configured log level and optional log file."""
    settings = settings or get_settings()
    setup_logger(level=level if level is not None else settings.log_level,
                 log_file=settings.log_file)


def aggregate_directory() -> DirectoryListing:
    """Convenience function for the directory family."""
    return InstitutionAggregator().aggregate_directory()


def aggregate_rankings(year: Optional[str] = None) -> RankingListing:
    """Convenience function for the ranking family."""
    return InstitutionAggregator().aggregate_rankings(year)
