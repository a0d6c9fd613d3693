"""Sortie CLI entry points.
This module exposes commands for mission import and schema migration.
It maps argparse commands onto SDK calls.
"""

from __future__ import annotations

import argparse
from dataclasses import replace
from pathlib import Path
from typing import Any, Sequence

from cli.import_command import add_import_command, run_import_command
from cli.migrate_command import (
    add_migrate_command,
    add_validate_command,
    run_migrate_command,
    run_validate_command,
)
from core.config import SortieConfig
from core.errors import SortieSeedError
from store.mission_sdk import SortieClient


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="sortie", description="Sortie mission import CLI")
    parser.add_argument("--data-root", help="Override SORTIE_DATA_ROOT for this command")
    subparsers = parser.add_subparsers(dest="command", required=True)
    add_import_command(subparsers)
    add_migrate_command(subparsers)
    add_validate_command(subparsers)
    _add_list_command(subparsers)
    _add_seed_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the Sortie CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    client = _build_client(args.data_root)
    if args.command == "import":
        return run_import_command(client, args)
    if args.command == "migrate":
        return run_migrate_command(client, args)
    if args.command == "validate":
        return run_validate_command(client, args)
    if args.command == "list":
        return _run_list_command(client)
    if args.command == "seed":
        return _run_seed_command(client)
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_client(data_root: str | None) -> SortieClient:
    """Build SDK client with optional data-root override.

    Args:
        data_root: Optional override path.

    Returns:
        Configured SDK client.
    """
    config = SortieConfig.from_env()
    if data_root:
        config = replace(config, data_root=Path(data_root).expanduser().resolve())
    return SortieClient(config)


def _run_list_command(client: SortieClient) -> int:
    """Handle list command."""
    for mission in client.missions():
        print(f"{mission.mission_id}\t{mission.name}\t{mission.created_at.isoformat()}")
    return 0


def _run_seed_command(client: SortieClient) -> int:
    """Handle seed command."""
    try:
        result = client.seed_defaults()
    except SortieSeedError as error:
        print(f"seed_error={error}")
        return 1
    print(f"seeded={0 if result is None else result.successful_import_count}")
    return 0


def _add_list_command(subparsers: Any) -> None:
    """Register list subcommand."""
    subparsers.add_parser("list", help="List stored missions")


def _add_seed_command(subparsers: Any) -> None:
    """Register seed subcommand."""
    subparsers.add_parser("seed", help="Import the default mission into an empty store")
