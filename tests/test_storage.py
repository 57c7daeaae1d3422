"""Tests for the two-phase sample store."""

from __future__ import annotations

from pathlib import Path

import pytest

from scrayper.config import StorageConfig
from scrayper.errors import RowParseAnomaly, StorageWriteError
from scrayper.storage import SampleStore, check_file_hash


@pytest.fixture
def store(tmp_path: Path) -> SampleStore:
    (tmp_path / "root" / "malcode").mkdir(parents=True)
    (tmp_path / "scratch").mkdir()
    return SampleStore(StorageConfig(root=tmp_path / "root", scratch_dir=tmp_path / "scratch"))


class TestCheckFileHash:
    @pytest.mark.parametrize("name", ["", ".", "..", "a/b", "..\\evil", "nul\x00byte"])
    def test_rejects_unsafe_names(self, name: str) -> None:
        with pytest.raises(RowParseAnomaly):
            check_file_hash(name)

    def test_accepts_md5(self) -> None:
        assert check_file_hash("d41d8cd98f00b204e9800998ecf8427e") == "d41d8cd98f00b204e9800998ecf8427e"


class TestPlace:
    def test_publishes_under_category(self, store: SampleStore, tmp_path: Path) -> None:
        sample = store.place("abc123", b"MZ payload")
        expected = tmp_path / "root" / "malcode" / "abc123"
        assert sample.path == expected
        assert sample.size == len(b"MZ payload")
        assert expected.read_bytes() == b"MZ payload"
        assert not (tmp_path / "scratch" / "abc123").exists()

    def test_same_bytes_twice_is_idempotent(self, store: SampleStore) -> None:
        first = store.place("abc123", b"same")
        second = store.place("abc123", b"same")
        assert first == second
        assert second.path.read_bytes() == b"same"

    def test_last_write_wins(self, store: SampleStore) -> None:
        store.place("abc123", b"a much longer first body")
        sample = store.place("abc123", b"short")
        assert sample.path.read_bytes() == b"short"

    def test_missing_target_dir_fails_and_cleans_scratch(self, tmp_path: Path) -> None:
        (tmp_path / "scratch").mkdir()
        store = SampleStore(StorageConfig(root=tmp_path / "nowhere", scratch_dir=tmp_path / "scratch"))
        with pytest.raises(StorageWriteError) as info:
            store.place("abc123", b"data")
        assert info.value.path == str(tmp_path / "nowhere" / "malcode" / "abc123")
        assert not (tmp_path / "scratch" / "abc123").exists()
        assert not (tmp_path / "nowhere").exists()

    def test_unwritable_scratch_fails(self, tmp_path: Path) -> None:
        (tmp_path / "root" / "malcode").mkdir(parents=True)
        store = SampleStore(StorageConfig(root=tmp_path / "root", scratch_dir=tmp_path / "missing-scratch"))
        with pytest.raises(StorageWriteError):
            store.place("abc123", b"data")

    def test_unsafe_name_never_touches_disk(self, store: SampleStore, tmp_path: Path) -> None:
        with pytest.raises(RowParseAnomaly):
            store.place("../escape", b"data")
        assert not (tmp_path / "root" / "escape").exists()
