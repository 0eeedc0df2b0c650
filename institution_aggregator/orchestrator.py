"""
Source orchestrator: fetch → extract → merge for an ordered source list.

A failing source is recorded as a SourceError and contributes no records;
it never aborts the run.  A run where every source fails is still a normal
result (total 0, one error per source).

Fetches may run concurrently (max_workers > 1), but outcomes are always
folded into the MergeEngine in source-list order, so the first-wins rules
give the same answer as a sequential run.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Optional, Protocol

from .exceptions import SourceFetchError
from .extractor import Extractor
from .merge import assemble_result, merge_candidates
from .schemas import AggregationResult, ExtractionResult, SourceDescriptor, SourceError
from .logger import get_module_logger

logger = get_module_logger("orchestrator")


class DocumentFetcher(Protocol):
    """Anything that turns a URL into document text or raises SourceFetchError."""

    def fetch(self, url: str) -> str:
        ...


class SourceOutcome:
    """What one source produced: an extraction or an error, never both."""

    __slots__ = ("source", "extraction", "error")

    def __init__(self, source: SourceDescriptor,
                 extraction: Optional[ExtractionResult] = None,
                 error: Optional[SourceError] = None):
        self.source = source
        self.extraction = extraction
        self.error = error


class SourceOrchestrator:
    """Runs the aggregation pipeline over an ordered list of sources."""

    def __init__(
        self,
        fetcher: DocumentFetcher,
        extractor: Optional[Extractor] = None,
        max_workers: int = 1
    ):
        self.fetcher = fetcher
        self.extractor = extractor or Extractor()
        self.max_workers = max(1, max_workers)

    def run(self, sources: list[SourceDescriptor]) -> AggregationResult:
        """
        Aggregate all sources into one deduplicated result.

        Args:
            sources: Source descriptors in priority order

        Returns:
            AggregationResult; per-source failures are in .errors
        """
        logger.info(f"Aggregating {len(sources)} sources")

        outcomes = self._collect(sources)

        # Each run owns its error list and engine
        errors = [o.error for o in outcomes if o.error is not None]
        extractions = [o.extraction for o in outcomes if o.error is None]

        # Fold candidate batches in source-list order
        engine = merge_candidates(e.candidates for e in extractions)
        skipped = sum(e.skipped_rows for e in extractions)

        result = assemble_result(engine, errors, skipped_rows=skipped)
        logger.info(f"Aggregation complete: {result.total} entries, "
                    f"{len(result.errors)}/{len(sources)} sources failed")
        return result

    def _collect(self, sources: list[SourceDescriptor]) -> list[SourceOutcome]:
        """Process every source; the returned list is in source-list order."""
        if self.max_workers == 1 or len(sources) <= 1:
            return [self._process(source) for source in sources]

        workers = min(self.max_workers, len(sources))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            # map() yields in submission order regardless of completion order
            return list(executor.map(self._process, sources))

    def _process(self, source: SourceDescriptor) -> SourceOutcome:
        """Fetch and extract one source."""
        try:
            html = self.fetcher.fetch(source.url)
        except SourceFetchError as e:
            logger.warning(f"Source '{source.identifier}' failed: {e.message}")
            return SourceOutcome(source, error=e.to_source_error(source.identifier))

        extraction = self.extractor.extract(html, source.locator, source.origin)
        logger.info(f"Source '{source.identifier}': {len(extraction.candidates)} candidates")
        return SourceOutcome(source, extraction=extraction)
