#!/usr/bin/env python3
"""
Index migration runner for MongoDB.

Creates the indexes the customers collection relies on: unique customer IDs
and email addresses that are unique across all customers.

Usage:
    python run_migrations.py             # Create missing indexes
    python run_migrations.py --status    # Show declared vs existing indexes
    python run_migrations.py --dry-run   # Show what would be created

Configuration:
    MONGO_URI and MONGO_DB_NAME are read from the environment or .env.
"""

import argparse
import asyncio
import sys

from rich.console import Console
from rich.table import Table

from modules.customers.repository import COLLECTION_NAME, INDEXES, CustomerRepository
from shared.config import get_settings
from shared.database import close_clients, get_database
from shared.exceptions import ConfigurationError, StorageError

console = Console()


def declared_index_names() -> list[str]:
    return [index.document["name"] for index in INDEXES]


async def show_status(repository: CustomerRepository) -> None:
    """Show which declared indexes exist."""
    existing = set(await repository.index_names())

    table = Table(title=f"Indexes on '{COLLECTION_NAME}'")
    table.add_column("Index", style="cyan")
    table.add_column("Status")

    for name in declared_index_names():
        status = "[green]Present[/green]" if name in existing else "[yellow]Missing[/yellow]"
        table.add_row(name, status)
    for name in sorted(existing - set(declared_index_names())):
        table.add_row(name, "[dim]Unmanaged[/dim]")

    console.print(table)


async def run(args: argparse.Namespace) -> None:
    repository = CustomerRepository(get_database()[COLLECTION_NAME])
    try:
        if args.status:
            await show_status(repository)
            return

        existing = set(await repository.index_names())
        pending = [name for name in declared_index_names() if name not in existing]
        if not pending:
            console.print("[green]All indexes are up to date![/green]")
            return

        console.print(f"Found {len(pending)} missing index(es):")
        for name in pending:
            console.print(f"  - {name}")
        console.print()

        if args.dry_run:
            return

        created = await repository.ensure_indexes()
        for name in created:
            if name in pending:
                console.print(f"[green]✓[/green] {name} created")
        console.print()
        console.print("[green]All indexes created successfully![/green]")
    finally:
        await close_clients()


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Create MongoDB indexes for the customers collection",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python run_migrations.py           Create missing indexes
  python run_migrations.py --status  Show index status
  python run_migrations.py --dry-run Show what would be created
        """,
    )
    parser.add_argument(
        "--status",
        action="store_true",
        help="Show index status without creating anything",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show which indexes would be created without creating them",
    )
    args = parser.parse_args()

    console.print("[bold]Identa Index Migrations[/bold]")
    console.print()

    try:
        get_settings()
    except ConfigurationError as e:
        console.print(f"[red]Error:[/red] {e.message}")
        for key in e.missing:
            console.print(f"  missing: {key}")
        for key in e.invalid:
            console.print(f"  invalid: {key}")
        sys.exit(1)

    try:
        asyncio.run(run(args))
    except StorageError as e:
        console.print(f"[red]✗[/red] {e.message}")
        sys.exit(1)


if __name__ == "__main__":
    main()
