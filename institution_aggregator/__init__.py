"""
Institution Aggregator

Pulls ranked-institution listings from external HTML pages, extracts table
rows, deduplicates them across sources and reports per-source failures.
- Extractor: Regex table/row location, anchor and URL parsing
- MergeEngine: Canonical-key deduplication, first-wins merge
- SourceOrchestrator: Per-source fetch with isolated failures

Public API surface:
  Pipeline classes: Fetcher, Extractor, MergeEngine, SourceOrchestrator
  Facade:           InstitutionAggregator
  Data models:      CandidateRecord, MergedEntry, SourceError, AggregationResult,
                    SourceDescriptor, TableLocator, LocatorMode
  Error types:      SourceFetchError (per source), ConfigurationError (startup)
"""

# --- Pipeline stage classes ---
from .fetcher import Fetcher
from .extractor import Extractor
from .merge import MergeEngine, normalize_key
from .orchestrator import SourceOrchestrator
from .main import InstitutionAggregator

# --- Data models ---
from .schemas import (
    CandidateRecord,
    MergedEntry,
    SourceError,
    AggregationResult,
    SourceDescriptor,
    TableLocator,
    LocatorMode,
)

# --- Exceptions ---
from .exceptions import SourceFetchError, ConfigurationError

__version__ = "1.0.0"
__all__ = [
    "Fetcher",
    "Extractor",
    "MergeEngine",
    "normalize_key",
    "SourceOrchestrator",
    "InstitutionAggregator",
    "CandidateRecord",
    "MergedEntry",
    "SourceError",
    "AggregationResult",
    "SourceDescriptor",
    "TableLocator",
    "LocatorMode",
    "SourceFetchError",
    "ConfigurationError",
]
