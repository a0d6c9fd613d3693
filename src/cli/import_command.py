"""Import command wiring for Sortie CLI."""

from __future__ import annotations

import argparse
import json
from typing import Any

from core.errors import SortieIngestError, SortieManifestError
from core.types import ImportOptions, ImportResult
from store.mission_sdk import SortieClient


def add_import_command(subparsers: Any) -> None:
    """Register import subcommand."""
    parser = subparsers.add_parser(
        "import",
        help="Import .metis/.cesar files from local paths or S3 prefixes",
    )
    parser.add_argument(
        "sources",
        nargs="*",
        help="Mission files, directories, or s3://bucket/prefix",
    )
    parser.add_argument("--manifest", help="YAML manifest describing the import batch")
    parser.add_argument("--created-by", help="User id credited with the imported missions")
    parser.add_argument("--created-by-username", help="Username credited with the missions")


def run_import_command(client: SortieClient, args: argparse.Namespace) -> int:
    """Execute an import batch and print its JSON result."""
    if bool(args.manifest) == bool(args.sources):
        print("import_error=Provide either source paths or --manifest, not both or neither.")
        return 2
    try:
        if args.manifest:
            result = client.import_manifest(args.manifest)
        else:
            options = ImportOptions(
                created_by=args.created_by,
                created_by_username=args.created_by_username,
            )
            result = client.import_files(args.sources, options)
    except (SortieIngestError, SortieManifestError) as error:
        print(f"import_error={error}")
        return 1
    print(render_import_result(result))
    return 0 if result.failed_import_count == 0 else 1


def render_import_result(result: ImportResult) -> str:
    """Render a batch result as indented JSON."""
    return json.dumps(result.to_payload(), indent=2)
