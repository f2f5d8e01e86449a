"""CLI entry point for the season over/under scraper."""
import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table
from rich.logging import RichHandler

from .config import DB_PATH, FINISHED_STATUS, SEASON_WEEKS, load_config
from .database import (
    get_connection,
    init_database,
    get_match_records,
    get_week_stats,
    clear_matches,
    SqliteSink,
)
from .export_json import export_data
from .export_training_data import export_records_csv, export_records_parquet
from .models import OVER, UNDER, PENDING, SCHEDULED, NO_BETTING_DATA, RESULTS
from .scraper import SeasonScraper

console = Console()

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(message)s",
    handlers=[RichHandler(console=console, rich_tracebacks=True)]
)
logger = logging.getLogger(__name__)

RESULT_COLORS = {
    OVER: "green",
    UNDER: "red",
    PENDING: "magenta",
    NO_BETTING_DATA: "yellow",
    SCHEDULED: "dim",
}


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def cli(debug):
    """EuroLeague Over/Under Season Scraper CLI."""
    if debug:
        logging.getLogger().setLevel(logging.DEBUG)


@cli.command()
def init():
    """Initialize the database."""
    console.print("[bold]Initializing database...[/bold]")
    conn = get_connection()
    init_database(conn)
    conn.close()
    console.print(f"[green]Database initialized at {DB_PATH}[/green]")


@cli.command()
@click.option("--no-headless", is_flag=True, help="Show browser window")
@click.option("--dry-run", is_flag=True, help="Scrape without saving to the database")
@click.option("--weeks", "-w", type=click.IntRange(1, SEASON_WEEKS), default=None,
              help="Number of weeks to scrape from week 1")
def scrape(no_headless, dry_run, weeks):
    """Scrape every week of the season."""
    config = load_config(
        headless=False if no_headless else None,
        dry_run=True if dry_run else None,
        weeks=weeks,
    )

    conn = None
    sink = None
    if config.dry_run:
        console.print("[yellow]Dry run: records will not be saved.[/yellow]")
    else:
        conn = get_connection(config.db_path)
        sink = SqliteSink(conn)

    console.print(f"[bold]Scraping {config.weeks} weeks...[/bold]")
    scraper = SeasonScraper(config, sink)
    try:
        week_stats = scraper.run()
    except Exception as e:
        console.print(f"[red]Error: could not run the scraper: {e}[/red]")
        sys.exit(1)
    finally:
        if conn is not None:
            conn.close()

    table = Table(title="Scrape Summary")
    table.add_column("Week", justify="right", style="cyan")
    table.add_column("Matches", justify="right")
    table.add_column("Finished", justify="right")
    table.add_column("Scheduled", justify="right")
    table.add_column("Saved", justify="right", style="green")
    table.add_column("Errors", justify="right", style="red")
    table.add_column("Label", justify="center")

    for stats in week_stats:
        table.add_row(
            str(stats["week"]),
            str(stats["matches"]),
            str(stats["finished"]),
            str(stats["scheduled"]),
            str(stats["saved"]),
            str(stats["errors"]),
            "ok" if stats["confirmed"] else "[yellow]unconfirmed[/yellow]",
        )

    console.print(table)

    if scraper.aborted:
        console.print(f"[red]Scrape stopped early: {scraper.aborted}[/red]")
        sys.exit(1)
    console.print("\n[bold green]Scraping complete![/bold green]")


@cli.command("show-results")
@click.option("--week", "-w", type=int, default=None, help="Only show this week")
@click.option("--team", "-t", default=None, help="Only show matches of this team")
@click.option("--limit", "-n", default=50, help="Number of records to show")
@click.option("--result", "-r", type=click.Choice(RESULTS), default=None, help="Only show this result")
def show_results(week, team, limit, result):
    """Show stored match records."""
    conn = get_connection()
    init_database(conn)
    records = get_match_records(conn, week=week, team=team, limit=limit, result=result)
    conn.close()

    if not records:
        console.print("[yellow]No records found. Run scrape first.[/yellow]")
        return

    table = Table(title="Matches")
    table.add_column("Week", justify="right")
    table.add_column("Date")
    table.add_column("Home Team", style="cyan")
    table.add_column("Away Team", style="cyan")
    table.add_column("Score", justify="center")
    table.add_column("Limit", justify="right")
    table.add_column("Over", justify="right")
    table.add_column("Result", justify="center")

    for record in records:
        color = RESULT_COLORS.get(record.result, "white")
        score = f"{record.score_home}-{record.score_away}" if record.status == FINISHED_STATUS else "-"
        table.add_row(
            str(record.week),
            record.date or "-",
            record.home_team[:24],
            record.away_team[:24],
            score,
            str(record.limit),
            str(record.over_payout),
            f"[{color}]{record.result}[/{color}]",
        )

    console.print(table)


@cli.command("week-stats")
def week_stats():
    """Show stored record counts per week."""
    conn = get_connection()
    init_database(conn)
    stats = get_week_stats(conn)
    conn.close()

    if not stats:
        console.print("[yellow]No statistics available yet.[/yellow]")
        return

    table = Table(title="Records by Week")
    table.add_column("Week", justify="right", style="cyan")
    table.add_column("Matches", justify="right")
    table.add_column("Over", justify="right", style="green")
    table.add_column("Under", justify="right", style="red")
    table.add_column("No Data", justify="right", style="yellow")
    table.add_column("Scheduled", justify="right")

    for row in stats:
        table.add_row(
            str(row["week"]),
            str(row["matches"]),
            str(row["overs"]),
            str(row["unders"]),
            str(row["no_data"]),
            str(row["scheduled"]),
        )

    console.print(table)


@cli.command("clear-db")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
def clear_db(yes):
    """Delete all stored match records."""
    if not DB_PATH.exists():
        console.print(f"[red]Error: no database at {DB_PATH}. Nothing to clear.[/red]")
        sys.exit(1)

    if not yes:
        click.confirm("Delete all stored matches?", abort=True)

    conn = get_connection()
    init_database(conn)
    removed = clear_matches(conn)
    conn.close()
    console.print(f"[green]Cleared {removed} matches.[/green]")


@cli.command("export-json")
@click.option("--output", "-o", type=click.Path(dir_okay=False), default=None, help="Output file")
def export_json_cmd(output):
    """Export stored records to JSON."""
    conn = get_connection()
    init_database(conn)
    path = export_data(conn, Path(output) if output else None)
    conn.close()
    console.print(f"[green]Exported records to {path}[/green]")


@cli.command("export-csv")
@click.option("--parquet", is_flag=True, help="Also write a Parquet file")
def export_csv_cmd(parquet):
    """Export stored records to CSV (and Parquet)."""
    conn = get_connection()
    init_database(conn)
    paths = [export_records_csv(conn)]
    if parquet:
        paths.append(export_records_parquet(conn))
    conn.close()

    for path in paths:
        console.print(f"[green]Exported records to {path}[/green]")


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
