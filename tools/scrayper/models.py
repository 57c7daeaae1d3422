"""Value types passed between the pipeline stages."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Union


@dataclass(frozen=True)
class ListingPage:
    """One fetched page of the listing table."""

    index: int
    url: str
    html: str


@dataclass(frozen=True)
class RowRecord:
    """One table row: where the sample lives and what to call it."""

    host: str
    file_hash: str
    date: str = ""
    ip: str = ""
    country: str = ""
    page: int = 0
    position: int = 0


@dataclass(frozen=True)
class Success:
    url: str
    status_code: int
    reason: str
    content: bytes


@dataclass(frozen=True)
class NotFound:
    url: str
    status_code: int = 404


@dataclass(frozen=True)
class NetworkError:
    url: str
    cause: BaseException


FetchOutcome = Union[Success, NotFound, NetworkError]


@dataclass(frozen=True)
class StoredSample:
    file_hash: str
    path: Path
    size: int
