"""
Rule-based record extractor for ranking and directory tables.

Pipeline position: between the Fetcher and the MergeEngine.
Input:  document text + TableLocator + the source's origin
Output: ExtractionResult with one CandidateRecord per usable table row

Upstream pages are heterogeneous and often broken, so the extractor never
raises on markup: a missing table, a header row or an empty cell simply
yields fewer records.
"""

import re
from typing import Iterable, Iterator, Optional

from .markup import clean_text, parse_fragment
from .schemas import CandidateRecord, ExtractionResult, LocatorMode, TableLocator
from .logger import get_module_logger

logger = get_module_logger("extractor")

# Header rows that some pages render with <td> instead of <th>
DEFAULT_HEADER_LABELS = (
    "school name",
    "institute name",
    "institution name",
    "name of the institute",
    "college name",
    "name",
)

# First match wins, non-overlapping, in document order
TABLE_PATTERN = re.compile(r"<table\b[^>]*>(.*?)</table>", re.IGNORECASE | re.DOTALL)
ROW_PATTERN = re.compile(r"<tr\b[^>]*>(.*?)</tr>", re.IGNORECASE | re.DOTALL)
CELL_PATTERN = re.compile(r"<td\b[^>]*>(.*?)</td>", re.IGNORECASE | re.DOTALL)
ANCHOR_PATTERN = re.compile(r"<a\b([^>]*)>(.*?)</a>", re.IGNORECASE | re.DOTALL)

# Bare URLs in cell markup; a full http(s) URL beats a www. host
HTTP_URL_PATTERN = re.compile(r"https?://[^\s\"'<]+", re.IGNORECASE)
WWW_URL_PATTERN = re.compile(r"\bwww\.[^\s\"'<]+", re.IGNORECASE)


def normalize_url(value: str, origin: str = "") -> str:
    """
    Make a link target absolute.

    "http(s)://…" is kept as is, "/path" is resolved against the source
    origin, anything else non-empty gets an "https://" prefix.
    """
    value = value.strip()
    if not value:
        return ""
    lowered = value.lower()
    if lowered.startswith("http://") or lowered.startswith("https://"):
        return value
    if value.startswith("//"):
        return f"https:{value}"
    if value.startswith("/"):
        return f"{origin.rstrip('/')}{value}"
    return f"https://{value}"


def find_url(raw_html: str) -> str:
    """First http(s):// or www. substring in raw markup, or ""."""
    match = HTTP_URL_PATTERN.search(raw_html) or WWW_URL_PATTERN.search(raw_html)
    return match.group(0) if match else ""


def _named_table_pattern(table_id: str) -> re.Pattern:
    # The id must end at a quote, whitespace or the tag end so that
    # "tblAll" does not match id="tblAllInstitutes".
    return re.compile(
        rf"<table\b[^>]*\bid\s*=\s*[\"']?{re.escape(table_id)}(?=[\"'\s>])[^>]*>(.*?)</table>",
        re.IGNORECASE | re.DOTALL,
    )


class Extractor:
    """Extracts candidate name/website records from HTML tables."""

    def __init__(self, header_labels: Optional[Iterable[str]] = None):
        labels = DEFAULT_HEADER_LABELS if header_labels is None else header_labels
        self.header_labels = frozenset(clean_text(label).lower() for label in labels)

    def extract(self, html: str, locator: TableLocator, origin: str = "") -> ExtractionResult:
        """
        Extract candidate records from a document.

        Args:
            html: Document text
            locator: Which tables to read and which row shape to accept
            origin: Scheme + host for resolving root-relative links

        Returns:
            ExtractionResult with candidates in document order
        """
        bodies, used_fallback = self._locate_tables(html, locator)
        if used_fallback:
            logger.debug(f"Table '{locator.table_id}' not found, scanning whole document")

        candidates = []
        skipped = 0

        for body in bodies:
            for cells in self._iter_rows(body, locator.mode):
                candidate = self._build_candidate(cells, locator.mode, origin)
                if candidate is None:
                    skipped += 1
                    continue
                candidates.append(candidate)

        if skipped:
            logger.debug(f"Skipped {skipped} rows with empty or header names")

        return ExtractionResult(candidates=candidates, skipped_rows=skipped,
                                used_fallback=used_fallback)

    def _locate_tables(self, html: str, locator: TableLocator) -> tuple[list[str], bool]:
        """Return the table bodies to scan and whether the fallback was used."""
        if locator.mode is LocatorMode.ALL_TABLES:
            return [m.group(0) for m in TABLE_PATTERN.finditer(html)], False

        match = _named_table_pattern(locator.table_id or "").search(html)
        if match:
            return [match.group(1)], False

        # Degraded but non-fatal: treat the entire document as the table
        return [html], True

    def _iter_rows(self, table_html: str, mode: LocatorMode) -> Iterator[list[str]]:
        """Yield the raw cell markup of every row with the expected shape."""
        for row in ROW_PATTERN.finditer(table_html):
            cells = CELL_PATTERN.findall(row.group(1))
            if mode is LocatorMode.ALL_TABLES:
                if len(cells) != 2:
                    continue
            elif len(cells) < 3:
                continue
            yield cells

    def _build_candidate(self, cells: list[str], mode: LocatorMode,
                         origin: str) -> Optional[CandidateRecord]:
        """Turn one row into a CandidateRecord, or None if it must be dropped."""
        name_cell = cells[0]
        name_markup, href = self._split_anchor(name_cell)

        name = clean_text(name_markup)
        if not name or name.lower() in self.header_labels:
            return None

        if href is not None:
            website = normalize_url(href, origin)
        elif mode is LocatorMode.NAMED_TABLE:
            # No anchor link: look for a bare URL in the name cell, then the rest
            website = ""
            for cell in cells:
                found = find_url(cell)
                if found:
                    website = normalize_url(found, origin)
                    break
        else:
            website = ""

        return CandidateRecord(name=name, website=website)

    def _split_anchor(self, cell_html: str) -> tuple[str, Optional[str]]:
        """
        Return (name markup, link target) for a cell.

        With an <a href> inside, the anchor's raw inner markup is the name
        and its href the link target; otherwise the whole cell is the name
        and the target is None.  An empty href also gives None.

        The inner markup is cut out of the raw cell so it goes through the
        same clean_text() as a plain cell; only the opening tag is parsed,
        to read the attribute value.
        """
        for match in ANCHOR_PATTERN.finditer(cell_html):
            anchor = parse_fragment(f"<a{match.group(1)}></a>").find("a")
            if anchor is None or not anchor.has_attr("href"):
                continue
            href = (anchor.get("href") or "").strip()
            return match.group(2), href or None
        return cell_html, None


def extract(html: str, locator: TableLocator, origin: str = "") -> ExtractionResult:
    """Convenience function to extract candidates from a document."""
    return Extractor().extract(html, locator, origin)
