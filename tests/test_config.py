"""Tests for configuration objects."""

from __future__ import annotations

import pytest
from psycopg.conninfo import conninfo_to_dict

from scrayper.config import DatabaseConfig, HarvesterConfig, ListingConfig, StorageConfig


class TestDatabaseDsn:
    def test_empty_password_keeps_dbname(self) -> None:
        params = conninfo_to_dict(DatabaseConfig(password="", dbname="specimens").dsn)
        assert params["dbname"] == "specimens"
        assert params["user"] == "rucef"
        assert params.get("password", "") == ""

    @pytest.mark.parametrize("password", ["two words", "it's", "back\\slash"])
    def test_awkward_passwords_round_trip(self, password: str) -> None:
        params = conninfo_to_dict(DatabaseConfig(password=password, sslmode="require").dsn)
        assert params["password"] == password
        assert params["sslmode"] == "require"
        assert params["dbname"] == "rucef"

    def test_host_and_port(self) -> None:
        params = conninfo_to_dict(DatabaseConfig(host="db.internal", port=6543).dsn)
        assert params["host"] == "db.internal"
        assert str(params["port"]) == "6543"


class TestHarvesterConfig:
    def test_inverted_page_range_is_rejected(self) -> None:
        with pytest.raises(ValueError, match="min_page"):
            HarvesterConfig(listing=ListingConfig(min_page=3, max_page=1))

    def test_unknown_storage_policy_is_rejected(self) -> None:
        with pytest.raises(ValueError, match="on_error"):
            HarvesterConfig(listing=ListingConfig(), storage=StorageConfig(on_error="retry"))
