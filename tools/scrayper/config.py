"""Configuration and environment settings for the harvester."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from psycopg.conninfo import make_conninfo

ON_STORAGE_ERROR = ("abort", "skip")


@dataclass(frozen=True)
class DatabaseConfig:
    host: str = "127.0.0.1"
    port: int = 5432
    dbname: str = "rucef"
    user: str = "rucef"
    password: str = ""
    sslmode: str = "disable"

    @property
    def dsn(self) -> str:
        return make_conninfo(
            host=self.host,
            port=self.port,
            user=self.user,
            password=self.password,
            dbname=self.dbname,
            sslmode=self.sslmode,
        )

    @classmethod
    def from_env(cls) -> DatabaseConfig:
        return cls(
            host=os.getenv("DB_HOST", "127.0.0.1"),
            port=int(os.getenv("DB_PORT", "5432")),
            dbname=os.getenv("DB_NAME", "rucef"),
            user=os.getenv("DB_USER", "rucef"),
            password=os.getenv("DB_PASSWORD", ""),
            sslmode=os.getenv("DB_SSLMODE", "disable"),
        )


@dataclass(frozen=True)
class ListingConfig:
    """malc0de listing configuration.  Page bounds are inclusive."""
    source_name: str = "malc0de"
    base_url: str = "http://malc0de.com/database/"
    min_page: int = 1
    max_page: int = 3
    row_selector: str = "table.prettytable tr.class1"
    timeout: float | None = 30.0  # None waits forever
    request_delay: float = 0.0  # seconds between requests
    strict_status: bool = False

    @classmethod
    def from_env(cls) -> ListingConfig:
        return cls(
            base_url=os.getenv("SCRAYPER_LISTING_URL", "http://malc0de.com/database/"),
            min_page=int(os.getenv("SCRAYPER_MIN_PAGE", "1")),
            max_page=int(os.getenv("SCRAYPER_MAX_PAGE", "3")),
        )


@dataclass(frozen=True)
class StorageConfig:
    root: Path = Path("../specimen_storage")
    category: str = "malcode"
    scratch_dir: Path = Path(".")
    on_error: str = "abort"

    @property
    def target_dir(self) -> Path:
        return self.root / self.category

    @classmethod
    def from_env(cls) -> StorageConfig:
        return cls(
            root=Path(os.getenv("SCRAYPER_STORAGE_ROOT", "../specimen_storage")),
            category=os.getenv("SCRAYPER_CATEGORY", "malcode"),
            scratch_dir=Path(os.getenv("SCRAYPER_SCRATCH_DIR", ".")),
        )


@dataclass(frozen=True)
class LogConfig:
    log_dir: Path = Path("./logs")
    to_file: bool = True
    filename_format: str = "%Y-%m-%d_%H:%M:%S.log"

    @classmethod
    def from_env(cls) -> LogConfig:
        return cls(log_dir=Path(os.getenv("SCRAYPER_LOG_DIR", "./logs")))


@dataclass
class HarvesterConfig:
    db: DatabaseConfig = field(default_factory=DatabaseConfig.from_env)
    listing: ListingConfig = field(default_factory=ListingConfig.from_env)
    storage: StorageConfig = field(default_factory=StorageConfig.from_env)
    log: LogConfig = field(default_factory=LogConfig.from_env)
    use_db: bool = True
    require_db: bool = False

    def __post_init__(self) -> None:
        if self.listing.min_page > self.listing.max_page:
            raise ValueError(
                f"min_page ({self.listing.min_page}) is greater than max_page ({self.listing.max_page})"
            )
        if self.storage.on_error not in ON_STORAGE_ERROR:
            raise ValueError(f"on_error must be one of {ON_STORAGE_ERROR}, got {self.storage.on_error!r}")
