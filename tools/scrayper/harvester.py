"""Core harvesting logic – orchestrates listing → download → storage."""

from __future__ import annotations

import logging

from .client import ListingClient
from .config import HarvesterConfig
from .errors import RowParseAnomaly, StorageWriteError
from .extractor import extract_rows
from .models import ListingPage, NetworkError, NotFound, RowRecord, StoredSample
from .session import RunSession
from .storage import SampleStore, check_file_hash

logger = logging.getLogger("scrayper.core")

BANNER = "####################################"


class Harvester:
    """Orchestrates the full listing → specimen storage pipeline."""

    def __init__(self, cfg: HarvesterConfig | None = None, *, session: RunSession | None = None) -> None:
        self.cfg = cfg or HarvesterConfig()
        self.session = session
        self.client = ListingClient(self.cfg.listing)
        self.store = SampleStore(self.cfg.storage)
        # Stats
        self.stats = {"pages": 0, "rows": 0, "stored": 0, "not_found": 0, "errors": 0, "skipped": 0}

    # ── per-row ──────────────────────────────────────────────────

    def process_row(self, row: RowRecord) -> StoredSample | None:
        """Fetch and store one row.

        Returns the stored sample, or None when the row was skipped.  Only a
        StorageWriteError under the ``abort`` policy escapes.
        """
        self.stats["rows"] += 1
        try:
            if not row.host:
                raise RowParseAnomaly(f"row {row.page}:{row.position} has no host")
            check_file_hash(row.file_hash)
        except RowParseAnomaly as exc:
            logger.warning("[NG] Skipping row %d on page %d: %s", row.position, row.page, exc)
            self.stats["skipped"] += 1
            return None

        outcome = self.client.fetch_sample(row)
        if isinstance(outcome, NetworkError):
            logger.error("[NG] %s", outcome.cause)
            self.stats["errors"] += 1
            return None
        if isinstance(outcome, NotFound):
            logger.info("[SKIP] %s not found", outcome.url)
            self.stats["not_found"] += 1
            return None

        try:
            stored = self.store.place(row.file_hash, outcome.content)
        except StorageWriteError as exc:
            if self.cfg.storage.on_error == "abort":
                raise
            logger.error("[NG] %s", exc)
            self.stats["errors"] += 1
            return None
        self.stats["stored"] += 1
        return stored

    # ── per-page ─────────────────────────────────────────────────

    def harvest_page(self, page: ListingPage) -> int:
        """Process every row of one listing page; returns the number stored."""
        stored = 0
        for row in extract_rows(page, self.cfg.listing.row_selector):
            if self.process_row(row) is not None:
                stored += 1
        self.stats["pages"] += 1
        logger.debug("Page %d done: %d samples stored", page.index, stored)
        return stored

    def harvest(self) -> int:
        """Walk the configured page range.

        A ListingFetchError on any page ends the run.  Returns the number of
        samples stored.
        """
        lo, hi = self.session.page_range if self.session else (self.cfg.listing.min_page, self.cfg.listing.max_page)
        logger.info(BANNER)
        logger.info("Brought to you by %s", self.cfg.listing.source_name)
        logger.info(BANNER)
        if self.session is not None and self.session.db is not None:
            logger.info("Database %s", "connected" if self.session.db_available else "unavailable")

        total = 0
        for page in self.client.iter_pages(lo, hi):
            total += self.harvest_page(page)
        logger.info("Harvest complete: %d samples stored from pages %d-%d", total, lo, hi)
        return total

    # ── lifecycle ────────────────────────────────────────────────

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> Harvester:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()
