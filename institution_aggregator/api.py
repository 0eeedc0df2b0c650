"""
FastAPI endpoints for the aggregation pipeline.

Both aggregation endpoints answer 200 with a well-formed body even when
every upstream source failed; failures are listed in "errors".
"""

from typing import Optional

from fastapi import Depends, FastAPI, Query, Response

from .main import InstitutionAggregator, configure_logging
from .schemas import DirectoryListing, RankingListing
from .logger import get_module_logger

logger = get_module_logger("api")

configure_logging()

app = FastAPI(
    title="Institution Aggregator",
    version="1.0.0"
)

NO_STORE = "no-store"

_aggregator: Optional[InstitutionAggregator] = None


def get_aggregator() -> InstitutionAggregator:
    """Shared aggregator (its HTTP session is reused across requests)."""
    global _aggregator
    if _aggregator is None:
        _aggregator = InstitutionAggregator()
    return _aggregator


@app.get("/api/health")
def health_check():
    """Health check endpoint."""
    return {"status": "ok"}


@app.get("/api/careers360/schools", response_model=DirectoryListing)
def list_directory_schools(
    response: Response,
    aggregator: InstitutionAggregator = Depends(get_aggregator)
):
    """Schools from every table of the directory page."""
    response.headers["Cache-Control"] = NO_STORE
    return aggregator.aggregate_directory()


@app.get("/api/nirf/colleges", response_model=RankingListing)
def list_ranked_colleges(
    response: Response,
    year: Optional[str] = Query(default=None, description="Ranking year, e.g. 2024"),
    aggregator: InstitutionAggregator = Depends(get_aggregator)
):
    """Institutions from every ranking category for one year."""
    response.headers["Cache-Control"] = NO_STORE
    listing = aggregator.aggregate_rankings(year or None)
    logger.info(f"Ranking aggregation for {listing.year}: {listing.total} entries")
    return listing
