"""
Static source tables.

These are configuration data, not control flow: the builders below turn
them into ordered SourceDescriptor lists, and tests pass their own lists
straight to the orchestrator.
"""

from typing import Iterable

from .schemas import SourceDescriptor, TableLocator

# --- Single-page school directory (all-tables mode) ---

DIRECTORY_SOURCE_URL = "https://school.careers360.com/articles/top-schools-in-india"
DIRECTORY_ORIGIN = "https://school.careers360.com"

# --- Multi-category national ranking (named-table mode) ---

RANKING_URL_TEMPLATE = "https://www.nirfindia.org/Rankings/{year}/{category}RankingALL.html"
RANKING_ORIGIN = "https://www.nirfindia.org"
RANKING_TABLE_ID = "tblAllInstitutes"
DEFAULT_RANKING_YEAR = "2024"

RANKING_CATEGORIES = (
    "Overall",
    "University",
    "College",
    "Research",
    "Engineering",
    "Management",
    "Pharmacy",
    "Medical",
    "Dental",
    "Law",
    "Architecture",
    "Agriculture",
    "Innovation",
    "OPENUNIVERSITY",
    "SKILLUNIVERSITY",
    "STATEPUBLICUNIVERSITY",
)


def directory_sources() -> list[SourceDescriptor]:
    """The directory family: one page, every table on it."""
    return [
        SourceDescriptor(
            identifier=DIRECTORY_SOURCE_URL,
            url=DIRECTORY_SOURCE_URL,
            origin=DIRECTORY_ORIGIN,
            locator=TableLocator.all_tables(),
        )
    ]


def ranking_sources(
    year: str,
    categories: Iterable[str] = RANKING_CATEGORIES,
    template: str = RANKING_URL_TEMPLATE
) -> list[SourceDescriptor]:
    """One source per category for the given year, in category order."""
    locator = TableLocator.named(RANKING_TABLE_ID)
    return [
        SourceDescriptor(
            identifier=category,
            url=template.format(year=year, category=category),
            origin=RANKING_ORIGIN,
            locator=locator,
        )
        for category in categories
    ]
