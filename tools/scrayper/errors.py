"""Error taxonomy for a harvest run.

Fatal conditions (``ListingFetchError``, and ``StorageWriteError`` under the
default policy) propagate out of :meth:`Harvester.harvest`.  Row-level
conditions are caught inside :meth:`Harvester.process_row`.
"""

from __future__ import annotations


class HarvestError(Exception):
    """Base class for all harvester errors."""


class ListingFetchError(HarvestError):
    """A listing page could not be fetched (transport error or non-200)."""

    def __init__(self, url: str, reason: str, status_code: int | None = None) -> None:
        super().__init__(f"listing fetch failed for {url}: {reason}")
        self.url = url
        self.status_code = status_code


class RowParseAnomaly(HarvestError):
    """A listing row cannot be turned into a download (empty host, unsafe hash...)."""


class SampleNetworkError(HarvestError):
    """A sample host could not be reached or answered with an unusable status."""


class StorageWriteError(HarvestError):
    """Writing or publishing a sample file failed."""

    def __init__(self, path: str, cause: BaseException) -> None:
        super().__init__(f"could not store {path}: {cause}")
        self.path = path
        self.cause = cause


class PersistenceUnavailable(HarvestError):
    """The database could not be opened or did not answer a ping."""
