#!/usr/bin/env python3
"""
Seed the credential store with the demo customers and employees.

Only useful against a persistent store; the in-memory store is seeded at
startup with SEED_DEMO_USERS=true instead.

Usage:
    uv run python seed_users.py              # Seed the configured store
    uv run python seed_users.py --list       # Show the demo credentials only
"""

import argparse
import sys

from rich.console import Console
from rich.table import Table

from api.dependencies import ServiceContainer
from modules.auth.seed import DEMO_USERS, seed_users
from shared.config import get_settings
from shared.exceptions import PortalError

console = Console()


def show_credentials():
    """Print the demo logins."""
    table = Table(title="Demo Users")
    table.add_column("Role", style="cyan")
    table.add_column("Username")
    table.add_column("Account Number")
    table.add_column("Password", style="yellow")

    for user in DEMO_USERS:
        table.add_row(user.role.value, user.username, user.account_number, user.password)

    console.print(table)


def main():
    parser = argparse.ArgumentParser(description="Seed demo users")
    parser.add_argument("--list", action="store_true", help="Only list the demo credentials")
    args = parser.parse_args()

    if args.list:
        show_credentials()
        return

    settings = get_settings()
    if settings.credential_store == "memory":
        console.print("[yellow]Warning:[/yellow] CREDENTIAL_STORE=memory; seeded users vanish on exit.")

    container = ServiceContainer(settings)
    try:
        created = seed_users(container.credential_store, container.password_hasher)
    except (PortalError, RuntimeError) as e:
        console.print(f"[red]Seeding failed:[/red] {e}")
        sys.exit(1)

    console.print(f"[green]Created {len(created)} of {len(DEMO_USERS)} demo users[/green]")
    show_credentials()


if __name__ == "__main__":
    main()
