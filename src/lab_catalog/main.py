"""Command line interface for Lab Catalog."""
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Dict, List, Sequence

from .catalog_client import CatalogClient
from .catalog_service import CatalogService
from .config import Settings
from .filters import EXTRA_CONTAMINANTS_KEY, LIST_FACETS, FilterState
from .models import Product
from .repository import ReportRepository
from .sorting import SortState
from .sync import CatalogSync
from .utils import titleize


def build_services() -> tuple[CatalogSync, CatalogService]:
    settings = Settings.load()
    client = CatalogClient(settings)
    repository = ReportRepository(settings.db_path)
    return CatalogSync(client, repository), CatalogService(repository)


def build_offline_service(db_path: str | None) -> CatalogService:
    if db_path:
        return CatalogService(ReportRepository(db_path))
    try:
        settings = Settings.load()
    except ValueError:
        return CatalogService(ReportRepository())
    return CatalogService(ReportRepository(settings.db_path))


def parse_filter_args(pairs: Sequence[str], price=None, price_per_serving=None) -> FilterState:
    """Turn ``facet=value`` pairs into a filter state.

    Facets that are not built in are treated as contaminants found in the
    data, e.g. ``"epa oxidation=pass"``.
    """

    mapping: Dict[str, object] = {}
    extra: Dict[str, List[str]] = {}
    for pair in pairs:
        facet, sep, value = pair.partition("=")
        if not sep or not facet.strip() or not value.strip():
            raise ValueError(f"Filters must look like facet=value, got {pair!r}")
        facet, value = facet.strip(), value.strip()
        if facet in LIST_FACETS:
            mapping.setdefault(facet, []).append(value)
        else:
            extra.setdefault(facet, []).append(value)
    if extra:
        mapping[EXTRA_CONTAMINANTS_KEY] = extra
    if price:
        mapping["price"] = price
    if price_per_serving:
        mapping["price_per_serving"] = price_per_serving
    return FilterState.from_mapping(mapping)


def format_product(product: Product) -> str:
    return (
        f"{product.product_id}: {product.product_name} ({product.company}) "
        f"verdict={product.verdict or 'n/a'}, price={product.display_price() or 'n/a'}, "
        f"per serving={product.display_price_per_serving() or 'n/a'}"
    )


def cmd_sync(args: argparse.Namespace) -> None:
    sync, _ = build_services()
    products = sync.sync(args.category)
    print(f"Synced {len(products)} reports")


def cmd_browse(args: argparse.Namespace) -> None:
    service = build_offline_service(args.db)
    try:
        filters = parse_filter_args(args.filter or [], args.price, args.price_per_serving)
        sort = SortState.parse(args.sort) if args.sort else None
    except ValueError as exc:
        raise SystemExit(str(exc))

    result = service.browse(args.category, filters, sort)
    print(f"Showing {result.shown} of {result.total} products ({result.active_filters} active filters)")
    for product in result.products[: args.limit]:
        print(format_product(product))
    if args.export:
        service.export_to_csv(result.products, args.export)
        print(f"Exported product list to {args.export}")


def cmd_search(args: argparse.Namespace) -> None:
    service = build_offline_service(args.db)
    products = service.search(args.query)
    print(f"Found {len(products)} products")
    for product in products[: args.limit]:
        print(format_product(product))


def cmd_show(args: argparse.Namespace) -> None:
    if args.refresh:
        sync, _ = build_services()
        product = sync.get_product(args.product_id, refresh=True)
    else:
        product = build_offline_service(args.db).get_product(args.product_id)
    if not product:
        raise SystemExit(f"Unable to locate report for product {args.product_id}")
    print(format_product(product))
    for section in ("basic_tests", "contaminant_tests", "review"):
        entries = getattr(product.results, section) or {}
        for name, entry in entries.items():
            print(f"  [{titleize(section)}] {titleize(name)}: {entry.verdict or 'n/a'}")


def cmd_facets(args: argparse.Namespace) -> None:
    service = build_offline_service(args.db)
    result = service.browse(args.category)
    facets = result.facets
    print(f"Facets for {args.category}:")
    print(f"  verdict: {'yes' if facets.has_verdict else 'no'}")
    print(f"  nutrients: {', '.join(facets.nutrients) or '-'}")
    print(f"  contaminants: {', '.join(result.contaminants) or '-'}")
    print(f"  subjective: {', '.join(facets.subjective) or '-'}")
    print(f"  food filters: {'yes' if facets.has_food_filters else 'no'}")
    print(f"  sort fields: {', '.join(facets.sorting_fields) or '-'}")


def cmd_dashboard(args: argparse.Namespace) -> None:
    import subprocess

    script_path = Path(__file__).resolve().parent / "dashboard.py"
    subprocess.run(["streamlit", "run", str(script_path)], check=False)


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Browse lab-tested product reports")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--db", help="Path to the local report cache")
    subparsers = parser.add_subparsers(dest="command", required=True)

    sync_parser = subparsers.add_parser("sync", help="Fetch completed reports into the local cache")
    sync_parser.add_argument("--category", help="Only sync this category")
    sync_parser.set_defaults(func=cmd_sync)

    browse_parser = subparsers.add_parser("browse", help="Filter and sort cached reports")
    browse_parser.add_argument("category", nargs="?", default="all", help="Category name or slug")
    browse_parser.add_argument(
        "--filter",
        action="append",
        metavar="FACET=VALUE",
        help="Accept VALUE for FACET, e.g. protein_per_serving=22-25g (repeatable)",
    )
    browse_parser.add_argument("--price", nargs=2, type=float, metavar=("MIN", "MAX"))
    browse_parser.add_argument(
        "--price-per-serving", nargs=2, type=float, metavar=("MIN", "MAX")
    )
    browse_parser.add_argument("--sort", help="Sort field, optionally with :asc or :desc")
    browse_parser.add_argument("--limit", type=int, default=20)
    browse_parser.add_argument("--export", help="Export results to CSV at this path")
    browse_parser.set_defaults(func=cmd_browse)

    search_parser = subparsers.add_parser("search", help="Substring search over cached reports")
    search_parser.add_argument("query")
    search_parser.add_argument("--limit", type=int, default=20)
    search_parser.set_defaults(func=cmd_search)

    show_parser = subparsers.add_parser("show", help="Show a single report")
    show_parser.add_argument("product_id")
    show_parser.add_argument("--refresh", action="store_true", help="Fetch the report again first")
    show_parser.set_defaults(func=cmd_show)

    facets_parser = subparsers.add_parser("facets", help="List the filters offered for a category")
    facets_parser.add_argument("category")
    facets_parser.set_defaults(func=cmd_facets)

    dashboard_parser = subparsers.add_parser("dashboard", help="Launch the Streamlit dashboard")
    dashboard_parser.set_defaults(func=cmd_dashboard)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = create_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    args.func(args)


if __name__ == "__main__":
    main()
