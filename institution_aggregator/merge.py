"""
Deduplication of candidate records across rows and sources.

Two candidates are the same institution when their names normalize to the
same key (case-insensitive, whitespace-collapsed).  The first name seen for
a key is kept; the website is the first non-empty one seen.  Both rules
depend on arrival order, so callers must feed candidates in a fixed order:
source-list order first, then row order within a source.
"""

import re
from typing import Iterable, Optional

from .schemas import AggregationResult, CandidateRecord, MergedEntry, SourceError
from .logger import get_module_logger

logger = get_module_logger("merge")

_WHITESPACE = re.compile(r"\s+")


def normalize_key(name: str) -> str:
    """Canonical deduplication key for a display name."""
    return _WHITESPACE.sub(" ", name.lower()).strip()


class MergeEngine:
    """Folds candidate records into one MergedEntry per canonical key."""

    def __init__(self):
        # dict keeps insertion order: first-seen key order is the output order
        self._entries: dict[str, MergedEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name: str) -> bool:
        return normalize_key(name) in self._entries

    def add(self, candidate: CandidateRecord) -> bool:
        """
        Merge one candidate.

        Returns True if a new entry was created.
        """
        key = normalize_key(candidate.name)
        if not key:
            return False

        existing = self._entries.get(key)
        if existing is None:
            self._entries[key] = MergedEntry(name=candidate.name, website=candidate.website)
            return True

        # Name never changes; website only fills a gap
        if not existing.website and candidate.website:
            existing.website = candidate.website
        return False

    def extend(self, candidates: Iterable[CandidateRecord]) -> int:
        """Merge candidates in order. Returns the number of new entries."""
        return sum(1 for candidate in candidates if self.add(candidate))

    def entries(self) -> list[MergedEntry]:
        return list(self._entries.values())


def merge_candidates(
    batches: Iterable[Iterable[CandidateRecord]],
    engine: Optional[MergeEngine] = None
) -> MergeEngine:
    """
    Reduce ordered candidate batches (one per source) into a MergeEngine.

    Batches are consumed in the order given; pass them in source-list order
    for a reproducible result.
    """
    if engine is None:
        engine = MergeEngine()
    for batch in batches:
        engine.extend(batch)
    return engine


def assemble_result(
    engine: MergeEngine,
    errors: Iterable[SourceError],
    skipped_rows: int = 0
) -> AggregationResult:
    """Build the AggregationResult from the final merge state."""
    items = [entry.model_copy() for entry in engine.entries()]
    result = AggregationResult(
        total=len(items),
        items=items,
        errors=list(errors),
        skipped_rows=skipped_rows,
    )
    logger.debug(f"Assembled {result.total} entries, {len(result.errors)} errors")
    return result
