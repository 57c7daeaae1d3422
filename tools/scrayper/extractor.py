"""Row extraction: turns a :class:`ListingPage` into :class:`RowRecord` items."""

from __future__ import annotations

from collections.abc import Iterator

from bs4 import BeautifulSoup, Tag

from .models import ListingPage, RowRecord

DEFAULT_ROW_SELECTOR = "table.prettytable tr.class1"

# Column positions in the malc0de table.
DATE_COL = 0
HOST_COL = 1
IP_COL = 2
COUNTRY_COL = 3
HASH_COL = 6


def _cell_text(cells: list[Tag], idx: int, *, anchor: bool = False) -> str:
    if idx >= len(cells):
        return ""
    node: Tag | None = cells[idx]
    if anchor:
        node = node.find("a")
        if node is None:
            return ""
    return node.get_text().strip()


def extract_rows(page: ListingPage, selector: str = DEFAULT_ROW_SELECTOR) -> Iterator[RowRecord]:
    """Yield one :class:`RowRecord` per row matching *selector*, in document order.

    Every call re-parses the page, so the result can be iterated again by
    calling this function again.  Rows with missing cells are still yielded
    with empty fields; deciding what to do with them is up to the caller.
    """
    soup = BeautifulSoup(page.html, "html.parser")
    for position, row in enumerate(soup.select(selector), start=1):
        cells = row.find_all("td")
        yield RowRecord(
            host=_cell_text(cells, HOST_COL),
            file_hash=_cell_text(cells, HASH_COL, anchor=True),
            date=_cell_text(cells, DATE_COL),
            ip=_cell_text(cells, IP_COL),
            country=_cell_text(cells, COUNTRY_COL),
            page=page.index,
            position=position,
        )
