"""Shared fixtures: a fake fetcher and small upstream documents."""

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from institution_aggregator.exceptions import SourceFetchError


class FakeFetcher:
    """Serves canned documents by URL; unknown URLs fail like a 404."""

    def __init__(self, pages=None):
        self.pages = dict(pages or {})
        self.requested = []

    def fetch(self, url):
        self.requested.append(url)
        page = self.pages.get(url)
        if page is None:
            raise SourceFetchError("HTTP 404", source=url, status_code=404)
        if isinstance(page, Exception):
            raise page
        return page


def two_cell_table(*rows):
    body = "".join(f"<tr><td>{name}</td><td>{other}</td></tr>" for name, other in rows)
    return f"<html><body><table>{body}</table></body></html>"


def ranking_table(*rows, table_id="tblAllInstitutes"):
    body = "".join(
        f"<tr><td>{name}</td><td>{city}</td><td>{state}</td></tr>" for name, city, state in rows
    )
    return (
        "<html><body>"
        f"<table id=\"{table_id}\" class=\"table\"><thead><tr><th>Name</th></tr></thead>"
        f"<tbody>{body}</tbody></table>"
        "</body></html>"
    )


@pytest.fixture
def fake_fetcher():
    return FakeFetcher()
