"""
Pydantic schemas defining the contracts between pipeline stages.

Data flow through the pipeline:
  SourceDescriptor → Fetcher → document text
  document text + TableLocator → Extractor → CandidateRecord list
  CandidateRecord stream → MergeEngine → MergedEntry map
  MergedEntry map + SourceError list → AggregationResult
  AggregationResult → DirectoryListing / RankingListing (endpoint payloads)

Every model is created and discarded within one aggregation run; nothing
here is persisted.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


# --- Locator strategy ---

class LocatorMode(Enum):
    """How the Extractor finds table bodies in a document."""
    ALL_TABLES = "all_tables"      # every <table>…</table> on the page, two-cell rows
    NAMED_TABLE = "named_table"    # one <table id="…">, rows with three or more cells


class TableLocator(BaseModel):
    """Tagged strategy value handed to the Extractor."""
    mode: LocatorMode
    table_id: Optional[str] = None  # only meaningful for NAMED_TABLE

    @classmethod
    def all_tables(cls) -> "TableLocator":
        return cls(mode=LocatorMode.ALL_TABLES)

    @classmethod
    def named(cls, table_id: str) -> "TableLocator":
        return cls(mode=LocatorMode.NAMED_TABLE, table_id=table_id)


class SourceDescriptor(BaseModel):
    """One external document fetched independently of the others."""
    identifier: str      # reported back in SourceError.source
    url: str
    origin: str          # scheme + host used to resolve root-relative links
    locator: TableLocator


# --- Records ---

class CandidateRecord(BaseModel):
    """One unverified name/website pair extracted from one table row."""
    name: str
    website: str = ""


class ExtractionResult(BaseModel):
    """Output from the Extractor for one document."""
    candidates: list[CandidateRecord] = Field(default_factory=list)
    skipped_rows: int = 0          # rows dropped for empty or header-like names
    used_fallback: bool = False    # named table missing, whole document scanned


class MergedEntry(BaseModel):
    """The deduplicated record for one canonical key."""
    name: str
    website: str = ""


class SourceError(BaseModel):
    """A source that failed to fetch or returned a non-success status."""
    source: str
    error: str


class AggregationResult(BaseModel):
    """Output of one aggregation run, recomputed on every invocation."""
    total: int = 0
    items: list[MergedEntry] = Field(default_factory=list)
    errors: list[SourceError] = Field(default_factory=list)
    # Rows dropped for empty or header-like names; diagnostic only, not in the
    # endpoint payloads.
    skipped_rows: int = 0


# --- Endpoint payloads ---

class DirectoryListing(BaseModel):
    """Response body of the single-source directory endpoint."""
    source: str
    total: int
    items: list[MergedEntry]
    errors: list[SourceError]

    @classmethod
    def from_result(cls, source: str, result: AggregationResult) -> "DirectoryListing":
        return cls(source=source, total=result.total, items=result.items, errors=result.errors)


class CategoryError(BaseModel):
    """Per-category failure as reported by the ranking endpoint."""
    category: str
    error: str


class RankingListing(BaseModel):
    """Response body of the multi-category ranking endpoint."""
    year: str
    total: int
    items: list[MergedEntry]
    errors: list[CategoryError]

    @classmethod
    def from_result(cls, year: str, result: AggregationResult) -> "RankingListing":
        # Ranking sources use their category token as identifier
        errors = [CategoryError(category=e.source, error=e.error) for e in result.errors]
        return cls(year=year, total=result.total, items=result.items, errors=errors)
