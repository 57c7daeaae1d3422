"""malc0de HTTP client – listing pages and sample downloads."""

from __future__ import annotations

import time
import logging
from collections.abc import Iterator

import httpx

from .config import ListingConfig
from .errors import ListingFetchError, SampleNetworkError
from .models import FetchOutcome, ListingPage, NetworkError, NotFound, RowRecord, Success

logger = logging.getLogger("scrayper.client")


def sample_url(host: str) -> str:
    """Build the download URL for a listed host."""
    if host.startswith(("http://", "https://")):
        return host
    return "http://" + host


class ListingClient:
    """Thin wrapper around the listing site and the hosts it lists.

    No retries: a listing failure is raised, a sample failure is reported
    as a :data:`FetchOutcome`.
    """

    def __init__(self, cfg: ListingConfig | None = None) -> None:
        self.cfg = cfg or ListingConfig()
        self._last_request: float = 0.0
        self._client = httpx.Client(
            timeout=self.cfg.timeout,
            headers={"User-Agent": "scrayper/1.0"},
            follow_redirects=True,
        )

    # ── politeness ───────────────────────────────────────────────
    def _throttle(self) -> None:
        if self.cfg.request_delay <= 0:
            return
        elapsed = time.monotonic() - self._last_request
        if elapsed < self.cfg.request_delay:
            time.sleep(self.cfg.request_delay - elapsed)
        self._last_request = time.monotonic()

    # ── listing ──────────────────────────────────────────────────

    def fetch_page(self, page_index: int) -> ListingPage:
        """Fetch one listing page.  Anything but a 200 raises ListingFetchError."""
        self._throttle()
        try:
            resp = self._client.get(self.cfg.base_url, params={"page": page_index})
        except (httpx.RequestError, httpx.InvalidURL) as exc:
            raise ListingFetchError(self.cfg.base_url, str(exc)) from exc
        url = str(resp.url)
        if resp.status_code != 200:
            raise ListingFetchError(
                url, f"status code error: {resp.status_code} {resp.reason_phrase}", resp.status_code
            )
        logger.debug("Fetched listing page %d (%d bytes)", page_index, len(resp.content))
        return ListingPage(index=page_index, url=url, html=resp.text)

    def iter_pages(self, min_page: int | None = None, max_page: int | None = None) -> Iterator[ListingPage]:
        """Fetch every page in the inclusive range, lowest index first."""
        lo = self.cfg.min_page if min_page is None else min_page
        hi = self.cfg.max_page if max_page is None else max_page
        for idx in range(lo, hi + 1):
            yield self.fetch_page(idx)

    # ── samples ──────────────────────────────────────────────────

    def fetch_sample(self, row: RowRecord) -> FetchOutcome:
        """Download the sample a row points to and classify the result."""
        url = sample_url(row.host)
        logger.info("Download malware from %s", url)
        self._throttle()
        try:
            resp = self._client.get(url)
        except (httpx.RequestError, httpx.InvalidURL) as exc:
            return NetworkError(url=url, cause=exc)
        logger.info("[%d %s]", resp.status_code, resp.reason_phrase)

        if resp.status_code == 404:
            return NotFound(url=url)
        if not resp.is_success:
            if self.cfg.strict_status:
                return NetworkError(
                    url=url,
                    cause=SampleNetworkError(f"unexpected status {resp.status_code} from {url}"),
                )
            logger.warning("Keeping body of %s despite status %d", url, resp.status_code)
        return Success(url=url, status_code=resp.status_code, reason=resp.reason_phrase, content=resp.content)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> ListingClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()
