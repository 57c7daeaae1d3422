"""CLI entry-point for the specimen harvester."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .config import DatabaseConfig, HarvesterConfig, ListingConfig, LogConfig, StorageConfig, ON_STORAGE_ERROR
from .errors import HarvestError, PersistenceUnavailable
from .harvester import Harvester
from .session import RunSession

console = Console()


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, console=console)],
    )
    # Suppress noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("psycopg").setLevel(logging.WARNING)


def _print_stats(stats: dict) -> None:
    table = Table(title="Harvest Summary", show_header=True, header_style="bold cyan")
    table.add_column("Metric", style="bold")
    table.add_column("Count", justify="right")
    for key, val in stats.items():
        table.add_row(key.replace("_", " ").capitalize(), str(val))
    console.print(table)


@click.group()
@click.option("--db-host", envvar="DB_HOST", default="127.0.0.1", help="PostgreSQL host")
@click.option("--db-port", envvar="DB_PORT", default=5432, type=int, help="PostgreSQL port")
@click.option("--db-name", envvar="DB_NAME", default="rucef", help="PostgreSQL database name")
@click.option("--db-user", envvar="DB_USER", default="rucef", help="PostgreSQL user")
@click.option("--db-password", envvar="DB_PASSWORD", default="", help="PostgreSQL password")
@click.option("--db-sslmode", envvar="DB_SSLMODE", default="disable", help="PostgreSQL sslmode")
@click.option("--listing-url", envvar="SCRAYPER_LISTING_URL", default="http://malc0de.com/database/", help="Listing base URL")
@click.option("--timeout", default=30.0, type=float, help="HTTP timeout in seconds (0 = wait forever)")
@click.option("--delay", default=0.0, type=float, help="Seconds to wait between requests")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, **kwargs: object) -> None:
    """scrayper – Harvest malware specimens from malc0de.

    Walks the malc0de listing, downloads every listed sample and files it
    under the specimen storage tree by its hash.
    """
    _setup_logging(bool(kwargs.pop("verbose")))
    ctx.ensure_object(dict)
    ctx.obj["db_cfg"] = DatabaseConfig(
        host=kwargs["db_host"],  # type: ignore[arg-type]
        port=kwargs["db_port"],  # type: ignore[arg-type]
        dbname=kwargs["db_name"],  # type: ignore[arg-type]
        user=kwargs["db_user"],  # type: ignore[arg-type]
        password=kwargs["db_password"],  # type: ignore[arg-type]
        sslmode=kwargs["db_sslmode"],  # type: ignore[arg-type]
    )
    timeout = float(kwargs["timeout"])  # type: ignore[arg-type]
    ctx.obj["listing"] = {
        "base_url": kwargs["listing_url"],
        "timeout": timeout if timeout > 0 else None,
        "request_delay": kwargs["delay"],
    }


# ─── Commands ────────────────────────────────────────────────────


@cli.command()
@click.option("--min-page", envvar="SCRAYPER_MIN_PAGE", default=1, type=int, help="First listing page")
@click.option("--max-page", envvar="SCRAYPER_MAX_PAGE", default=3, type=int, help="Last listing page (inclusive)")
@click.option("--storage-root", envvar="SCRAYPER_STORAGE_ROOT", default="../specimen_storage", type=click.Path(path_type=Path), help="Specimen storage root")
@click.option("--category", envvar="SCRAYPER_CATEGORY", default="malcode", help="Sub-directory of the storage root")
@click.option("--scratch-dir", envvar="SCRAYPER_SCRATCH_DIR", default=".", type=click.Path(path_type=Path), help="Where downloads are written before publishing")
@click.option("--log-dir", envvar="SCRAYPER_LOG_DIR", default="./logs", type=click.Path(path_type=Path), help="Where the run log ends up")
@click.option("--no-log-file", is_flag=True, help="Log to the console only")
@click.option("--on-storage-error", type=click.Choice(ON_STORAGE_ERROR), default="abort", help="Abort the run or skip the row when a sample cannot be stored")
@click.option("--strict-status", is_flag=True, help="Treat non-2xx sample responses (other than 404) as errors")
@click.option("--no-db", is_flag=True, help="Do not open the database")
@click.option("--require-db", is_flag=True, help="Abort if the database is unreachable")
@click.option("--stats", "show_stats", is_flag=True, help="Print a summary table at the end")
@click.pass_context
def harvest(
    ctx: click.Context,
    min_page: int,
    max_page: int,
    storage_root: Path,
    category: str,
    scratch_dir: Path,
    log_dir: Path,
    no_log_file: bool,
    on_storage_error: str,
    strict_status: bool,
    no_db: bool,
    require_db: bool,
    show_stats: bool,
) -> None:
    """Harvest samples from a range of listing pages.

    Example: scrayper harvest --min-page 1 --max-page 5
    """
    try:
        cfg = HarvesterConfig(
            db=ctx.obj["db_cfg"],
            listing=ListingConfig(min_page=min_page, max_page=max_page, strict_status=strict_status, **ctx.obj["listing"]),
            storage=StorageConfig(root=storage_root, category=category, scratch_dir=scratch_dir, on_error=on_storage_error),
            log=LogConfig(log_dir=log_dir, to_file=not no_log_file),
            use_db=not no_db,
            require_db=require_db,
        )
    except ValueError as exc:
        raise click.BadParameter(str(exc)) from exc

    try:
        with RunSession(cfg) as session, Harvester(cfg, session=session) as h:
            h.harvest()
    except HarvestError as exc:
        console.print(f"[red]✗[/red] {escape(str(exc))}")
        sys.exit(1)
    if show_stats:
        _print_stats(h.stats)


@cli.command()
@click.option("--page", default=1, type=int, help="Listing page to show")
@click.option("--limit", default=30, type=int, help="Number of rows to show")
@click.pass_context
def preview(ctx: click.Context, page: int, limit: int) -> None:
    """Preview a listing page without downloading anything.

    Example: scrayper preview --page 2 --limit 10
    """
    from .client import ListingClient, sample_url
    from .extractor import extract_rows

    with ListingClient(ListingConfig(**ctx.obj["listing"])) as client:
        try:
            listing = client.fetch_page(page)
        except HarvestError as exc:
            console.print(f"[red]✗[/red] {escape(str(exc))}")
            sys.exit(1)
        table = Table(title=f"Listing page {page}", show_header=True, header_style="bold cyan")
        table.add_column("#", style="bold", justify="right")
        table.add_column("Date")
        table.add_column("URL", max_width=50)
        table.add_column("IP")
        table.add_column("CC", justify="center")
        table.add_column("File hash")
        for row in extract_rows(listing):
            if row.position > limit:
                break
            table.add_row(str(row.position), row.date, sample_url(row.host), row.ip, row.country, row.file_hash)
        console.print(table)


@cli.command(name="ping-db")
@click.pass_context
def ping_db(ctx: click.Context) -> None:
    """Check that the database is reachable."""
    from .db import Database

    db_cfg: DatabaseConfig = ctx.obj["db_cfg"]
    with Database(db_cfg) as db:
        try:
            db.open()
        except PersistenceUnavailable as exc:
            console.print(f"[red]✗[/red] {escape(str(exc))}")
            sys.exit(1)
    console.print(f"[green]✓[/green] Database {db_cfg.dbname} on {db_cfg.host}:{db_cfg.port} is reachable")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
