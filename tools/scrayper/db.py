"""Database handle – opened and pinged once per run, never written to."""

from __future__ import annotations

import logging

import psycopg

from .config import DatabaseConfig
from .errors import PersistenceUnavailable

logger = logging.getLogger("scrayper.db")


class Database:
    """Postgres liveness handle for the harvester."""

    def __init__(self, cfg: DatabaseConfig | None = None) -> None:
        self.cfg = cfg or DatabaseConfig.from_env()
        self._conn: psycopg.Connection | None = None

    @property
    def is_open(self) -> bool:
        return self._conn is not None and not self._conn.closed

    def open(self) -> None:
        """Connect and ping.  Raises PersistenceUnavailable on either failure."""
        try:
            self._conn = psycopg.connect(self.cfg.dsn, autocommit=True)
        except psycopg.Error as exc:
            raise PersistenceUnavailable(f"failure on connect to {self.cfg.host}:{self.cfg.port}: {exc}") from exc
        self.ping()
        logger.debug("Connected to %s:%d/%s", self.cfg.host, self.cfg.port, self.cfg.dbname)

    def ping(self) -> None:
        if self._conn is None or self._conn.closed:
            raise PersistenceUnavailable("failure on ping: connection is not open")
        try:
            self._conn.execute("SELECT 1").fetchone()
        except psycopg.Error as exc:
            raise PersistenceUnavailable(f"failure on ping: {exc}") from exc

    def close(self) -> None:
        if self._conn and not self._conn.closed:
            self._conn.close()
        self._conn = None

    def __enter__(self) -> Database:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()
