#!/usr/bin/env python3
"""
Recipe Matcher server launcher.

Usage:
    python run_server.py [options] RECIPE_SOURCES RECIPE_TABLE [RECIPE_TABLE ...]

Options:
    --debug                   - Debug logging and Access-Control-Allow-Origin: *
    --host HOST               - Server host (default: 0.0.0.0)
    --port PORT               - Server port (default: 8080)
    --tls-cert-file FILE      - TLS certificate file for HTTPS
    --tls-key-file FILE       - TLS key file for HTTPS
    --http-origin ORIGIN      - Origin for the Access-Control-Allow-Origin header
    --conversion-table-csv F  - Conversion table in CSV format
    --conversion-table-ini F  - Conversion table in INI format
    --unit-alias-table F      - Unit alias table in INI format
    --product-alias-map F     - Product alias map in INI format

Examples:
    python run_server.py sources.csv recipes.csv
    python run_server.py --conversion-table-csv units.csv --port 8443 \\
        --tls-cert-file cert.pem --tls-key-file key.pem sources.csv recipes.csv
"""

import argparse
import logging
import os
import sys
from typing import List, Optional

import config
from error_utils import CatalogIntegrityError, ConfigurationError
from recipe_catalog import RecipeCatalog
from recipe_suggestions import RecipeSuggestionService
from table_loaders import (
    ConversionContextBuilder,
    load_conversion_table_csv,
    load_conversion_table_ini,
    load_product_alias_map,
    load_recipe_sources,
    load_recipe_table,
    load_unit_alias_table,
)

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Recipe Matcher server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )

    parser.add_argument("--debug", action="store_true", help="Enable debug mode")
    parser.add_argument("--host", help="Server host")
    parser.add_argument("--port", type=int, help="Server port")
    parser.add_argument("--tls-cert-file", help="TLS certificate file for HTTPS")
    parser.add_argument("--tls-key-file", help="TLS key file for HTTPS")
    parser.add_argument(
        "--http-origin", help="Origin for the Access-Control-Allow-Origin header"
    )

    parser.add_argument("--conversion-table-csv", help="Conversion table (CSV)")
    parser.add_argument("--conversion-table-ini", help="Conversion table (INI)")
    parser.add_argument("--unit-alias-table", help="Unit alias table (INI)")
    parser.add_argument("--product-alias-map", help="Product alias map (INI)")

    parser.add_argument("recipe_sources", help="Recipe source CSV file")
    parser.add_argument("recipe_tables", nargs="+", help="Recipe CSV files")
    return parser


def apply_arguments(args: argparse.Namespace) -> None:
    """Export command-line options so config getters see them."""
    if args.debug:
        os.environ["RECIPE_MATCHER_DEBUG"] = "true"
    if args.host:
        os.environ["RECIPE_MATCHER_HOST"] = args.host
    if args.port is not None:
        os.environ["RECIPE_MATCHER_PORT"] = str(args.port)
    if args.tls_cert_file:
        os.environ["RECIPE_MATCHER_TLS_CERT_FILE"] = args.tls_cert_file
    if args.tls_key_file:
        os.environ["RECIPE_MATCHER_TLS_KEY_FILE"] = args.tls_key_file
    if args.http_origin:
        os.environ["RECIPE_MATCHER_HTTP_ORIGIN"] = args.http_origin


def load_service(args: argparse.Namespace) -> RecipeSuggestionService:
    """
    Load every table named on the command line and build the service.

    Raises:
        CatalogIntegrityError: If any table is unreadable or inconsistent
    """
    builder = ConversionContextBuilder()
    if args.conversion_table_csv:
        load_conversion_table_csv(args.conversion_table_csv, builder)
    if args.conversion_table_ini:
        load_conversion_table_ini(args.conversion_table_ini, builder)
    if args.unit_alias_table:
        load_unit_alias_table(args.unit_alias_table, builder)
    if args.product_alias_map:
        load_product_alias_map(args.product_alias_map, builder)
    context = builder.build()

    sources = load_recipe_sources(args.recipe_sources)
    recipe_table = load_recipe_table(args.recipe_tables)
    catalog = RecipeCatalog.build(
        recipe_table, sources, context, builder.build_product_units()
    )
    return RecipeSuggestionService(catalog, context)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.port is not None and not 1 <= args.port <= 65535:
        parser.error(f"invalid port: {args.port}")
    apply_arguments(args)

    server_config = config.get_server_config()
    logging.basicConfig(level=getattr(logging, server_config["log_level"], logging.INFO))

    try:
        issues = config.validate_config(server_config)
        if issues:
            raise ConfigurationError("; ".join(issues))
        service = load_service(args)
    except (ConfigurationError, CatalogIntegrityError) as e:
        logger.error(f"Cannot start server: {e}")
        return 1

    # Import after the catalog is loaded
    import uvicorn
    from recipe_server import create_app

    app = create_app(service, http_origin=server_config["http_origin"])

    scheme = "https" if config.uses_tls(server_config) else "http"
    print("Starting Recipe Matcher server:")
    print(f"  Address: {scheme}://{server_config['host']}:{server_config['port']}")
    print(f"  Recipes: {len(service.catalog)}")
    print(f"  Products: {len(service.catalog.products)}")
    print()

    ssl_options = {}
    if config.uses_tls(server_config):
        ssl_options = {
            "ssl_certfile": server_config["tls_cert_file"],
            "ssl_keyfile": server_config["tls_key_file"],
        }

    try:
        uvicorn.run(
            app,
            host=server_config["host"],
            port=server_config["port"],
            log_level=server_config["log_level"].lower(),
            **ssl_options,
        )
    except KeyboardInterrupt:
        print("\nServer stopped by user")
    return 0


if __name__ == "__main__":
    sys.exit(main())
