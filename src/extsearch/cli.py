"""CLI entry point for the extensions search provider."""

import argparse
import logging
import sys
from pathlib import Path

from .config import load_config
from .models import RegistryError
from .provider import ExtensionsSearchProvider
from .ranker import split_terms
from .registry import load_snapshot, scan_installed

HELP_EPILOG = """\
Query syntax:
  eq//           List all installed extensions (complete list, uncapped)
  eq// blur      Search extensions matching 'blur' (complete list)
  blur           Global search, capped to max_results
  #blur          Same as 'eq// blur' when '#' is a custom prefix

Examples:
  extsearch eq//                        Complete list from installed extensions
  extsearch --snapshot ext.json vit     Search a saved registry snapshot
  extsearch --enabled a@x,b@y eq//      Mark extensions enabled, in activation order
  extsearch --keywords                  Show active search prefixes
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Search installed shell extensions",
        prog="extsearch",
        epilog=HELP_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "terms",
        nargs="*",
        help="Query terms, the first may carry a search prefix (one quoted string works too)",
    )
    parser.add_argument(
        "--snapshot", "-s",
        metavar="FILE",
        type=Path,
        help="JSON registry snapshot instead of installed extensions",
    )
    parser.add_argument(
        "--enabled", "-e",
        metavar="UUIDS",
        default="",
        help="Comma separated enabled uuids in activation order",
    )
    parser.add_argument(
        "--shell-version",
        metavar="VERSION",
        help="Mark extensions not supporting VERSION as incompatible",
    )
    parser.add_argument(
        "--config", "-c",
        metavar="FILE",
        type=Path,
        help="Config file (default: ./.extsearchrc or ~/.config/extsearch/config.toml)",
    )
    parser.add_argument(
        "--max-results", "-n",
        type=int,
        metavar="N",
        help="Cap for unprefixed queries (overrides config)",
    )
    parser.add_argument(
        "--details",
        action="store_true",
        help="Print version and status columns",
    )
    parser.add_argument(
        "--keywords",
        action="store_true",
        help="List active search prefixes",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Debug logging",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    terms = split_terms(" ".join(args.terms))

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    config = load_config(Path.cwd(), path=args.config)

    if args.snapshot:
        def registry():
            return load_snapshot(args.snapshot)
    else:
        enabled = [u for u in args.enabled.split(",") if u]

        def registry():
            return scan_installed(enabled, args.shell_version)

    provider = ExtensionsSearchProvider(registry, config)

    if args.keywords:
        for keyword in provider.keywords:
            print(keyword)
        return 0

    try:
        ids = provider.get_initial_result_set(terms)
    except (RegistryError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    ids = provider.filter_results(ids, args.max_results)
    if not ids:
        print("No extensions found", file=sys.stderr)
        return 1

    for meta in provider.get_result_metas(ids):
        if args.details:
            print(f"{meta.id}\t{meta.name}\t{meta.version}\t{meta.status}")
        else:
            print(f"{meta.id}\t{meta.name}")

    if not provider.list_all and terms:
        print(f"More: extsearch {provider.launch_search_query(terms)}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
