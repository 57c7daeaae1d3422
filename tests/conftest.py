"""Shared fixtures: a fake listing site and a sandboxed harvester config."""

from __future__ import annotations

from pathlib import Path

import pytest

from scrayper.config import DatabaseConfig, HarvesterConfig, ListingConfig, LogConfig, StorageConfig

BASE_URL = "http://listing.test/database/"

_HEADER = (
    '<tr class="class0"><th>Date</th><th>Domain</th><th>IP</th><th>CC</th>'
    "<th>ASN</th><th>Autonomous System Name</th><th>Click Md5 for VirusTotal Report</th></tr>"
)


def listing_row(host: str, file_hash: str, *, date: str = "2019-01-01", ip: str = "10.0.0.1", cc: str = "US") -> str:
    return (
        f'<tr class="class1"><td>{date}</td><td>{host}</td><td>{ip}</td><td>{cc}</td>'
        f'<td>64500</td><td>EXAMPLE-AS</td><td><a href="/report?{file_hash}">{file_hash}</a></td></tr>'
    )


def listing_html(*rows: str) -> str:
    return (
        "<html><body><font><center>"
        f'<table class="prettytable"><tbody>{_HEADER}{"".join(rows)}</tbody></table>'
        "</center></font></body></html>"
    )


@pytest.fixture
def make_cfg(tmp_path: Path):
    """Build a HarvesterConfig rooted in tmp_path, with the category dir in place."""

    def _make(*, min_page: int = 1, max_page: int = 1, on_error: str = "abort", create_target: bool = True, **listing) -> HarvesterConfig:
        root = tmp_path / "specimen_storage"
        if create_target:
            (root / "malcode").mkdir(parents=True, exist_ok=True)
        scratch = tmp_path / "work"
        scratch.mkdir(exist_ok=True)
        return HarvesterConfig(
            db=DatabaseConfig(),
            listing=ListingConfig(base_url=BASE_URL, min_page=min_page, max_page=max_page, **listing),
            storage=StorageConfig(root=root, category="malcode", scratch_dir=scratch, on_error=on_error),
            log=LogConfig(log_dir=tmp_path / "logs"),
            use_db=False,
        )

    return _make
