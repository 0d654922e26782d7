"""Command line entry point: ``search-gwas update|trait|az-trait``."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from collections.abc import Sequence

from search_gwas.config import SearchGwasSettings
from search_gwas.errors import SearchGwasError
from search_gwas.pipeline import refresh
from search_gwas.query import find_trait, parse_genes, query, query_az
from search_gwas.storage import ArchiveStore, CacheLayout

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _default_log_level() -> str:
    level = os.environ.get("SEARCH_GWAS_LOG", "WARNING").strip().upper()
    if level == "WARN":
        return "WARNING"
    return level if level in LOG_LEVELS else "WARNING"


def _add_query_flags(parser: argparse.ArgumentParser, *, pubmed_links: bool) -> None:
    parser.add_argument(
        "-g",
        "--gene",
        action="append",
        default=[],
        help="Gene(s) to query; repeat the flag or pass a comma-separated list.",
    )
    parser.add_argument(
        "-a",
        "--with-associations",
        action="store_true",
        help="Show full association data.",
    )
    if pubmed_links:
        parser.add_argument(
            "-l",
            "--with-pubmed-links",
            action="store_true",
            help="Show PubMed links instead of IDs.",
        )
    parser.add_argument("-c", "--csv", action="store_true", help="Replace tables with CSV output.")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="search-gwas",
        description="Query a local snapshot of the GWAS Catalog by EFO trait.",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=_default_log_level(),
        help="Logging level (default: $SEARCH_GWAS_LOG or WARNING).",
    )
    parser.add_argument(
        "--cache-dir",
        default=None,
        help="Snapshot directory (default: $SEARCH_GWAS_DIR or the user data directory).",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Network timeout in seconds (default: $SEARCH_GWAS_TIMEOUT or 120).",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    update = subparsers.add_parser(
        "update",
        help="Download the latest GWAS and EFO data if available.",
    )
    update.add_argument(
        "-f",
        "--force",
        action="count",
        default=0,
        help="Check for updates even if checked recently; pass twice to redownload the data.",
    )
    update.add_argument(
        "-r",
        "--reprocess",
        action="store_true",
        help="Reprocess the previously downloaded raw files.",
    )
    update.set_defaults(handler=_run_update)

    trait = subparsers.add_parser("trait", help="Query the GWAS catalog for an EFO trait.")
    trait.add_argument("label", help="The EFO label or exact synonym to query.")
    _add_query_flags(trait, pubmed_links=True)
    trait.set_defaults(handler=_run_trait)

    az_trait = subparsers.add_parser(
        "az-trait",
        help="Query the AstraZeneca PheWAS catalog for a trait.",
    )
    az_trait.add_argument("trait", help="The trait name to query.")
    _add_query_flags(az_trait, pubmed_links=False)
    az_trait.set_defaults(handler=_run_az_trait)

    return parser


def _run_update(args: argparse.Namespace, settings: SearchGwasSettings) -> int:
    force_level = 2 if args.reprocess else min(args.force, 2)
    refresh(
        settings.cache_dir,
        use_local_raw_files=args.reprocess,
        force_level=force_level,
        settings=settings,
    )
    print("Up to date!")
    return 0


def _run_trait(args: argparse.Namespace, settings: SearchGwasSettings) -> int:
    refresh(settings.cache_dir, settings=settings)

    label = args.label.strip()
    store = ArchiveStore(CacheLayout(settings.cache_dir))
    node = find_trait(store.load_trait_nodes(), label)
    if node is None:
        print(f'"{label}" is not a valid EFO label', file=sys.stderr)
        return 1

    query(
        node,
        parse_genes(args.gene),
        store.load_associations(),
        args.with_associations,
        args.with_pubmed_links,
        args.csv,
        threshold=settings.significance_threshold,
    )
    return 0


def _run_az_trait(args: argparse.Namespace, settings: SearchGwasSettings) -> int:
    query_az(
        args.trait.strip().lower(),
        parse_genes(args.gene),
        args.with_associations,
        args.csv,
        az_dir=settings.az_dir,
        threshold=settings.significance_threshold,
    )
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )

    try:
        settings = SearchGwasSettings.from_env(
            cache_dir=args.cache_dir,
            request_timeout=args.timeout,
        )
        return args.handler(args, settings)
    except SearchGwasError as exc:
        print(f"search-gwas: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
