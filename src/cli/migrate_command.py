"""Migrate and validate command wiring for Sortie CLI."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from core.errors import SortieImportFileError, SortieMigrationError
from store.mission_sdk import SortieClient


def add_migrate_command(subparsers: Any) -> None:
    """Register migrate subcommand."""
    parser = subparsers.add_parser(
        "migrate",
        help="Upgrade one mission file to the latest schema without storing it",
    )
    parser.add_argument("file", help="Local .metis or .cesar file")
    parser.add_argument("--output", help="Optional path for the migrated JSON document")


def add_validate_command(subparsers: Any) -> None:
    """Register validate subcommand."""
    parser = subparsers.add_parser(
        "validate",
        help="Migrate one mission file and check its structural integrity",
    )
    parser.add_argument("file", help="Local .metis or .cesar file")


def run_migrate_command(client: SortieClient, args: argparse.Namespace) -> int:
    """Execute a dry-run migration and print or write the result."""
    try:
        preview = client.migrate_file(args.file)
    except (SortieImportFileError, SortieMigrationError) as error:
        print(f"migrate_error={error}")
        return 1
    rendered = json.dumps(preview.document, indent=2)
    if args.output:
        output_path = Path(args.output).expanduser().resolve()
        output_path.write_text(rendered + "\n", encoding="utf-8")
        print(f"output_path={output_path}")
    else:
        print(rendered)
    applied = ",".join(str(generation) for generation in preview.applied_generations)
    print(f"source_generation={preview.source_generation}", file=sys.stderr)
    print(f"applied_generations={applied or '-'}", file=sys.stderr)
    return 0


def run_validate_command(client: SortieClient, args: argparse.Namespace) -> int:
    """Execute structural validation and print the verdict."""
    try:
        validation = client.validate_file(args.file)
    except (SortieImportFileError, SortieMigrationError) as error:
        print(f"validate_error={error}")
        return 1
    if validation.ok:
        print("valid=true")
        return 0
    print("valid=false")
    print(validation.error)
    return 1
