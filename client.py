#!/usr/bin/env python3
"""
Command-line client for a running Recipe Matcher server.

Usage:
    python client.py [--url URL] products
    python client.py [--url URL] units PRODUCT
    python client.py [--url URL] suggest [--servings N] "NAME=QUANTITY UNIT" ...

Examples:
    python client.py products
    python client.py units flour
    python client.py suggest --servings 2 "flour=500 g" "sugar=1 cup"
"""

import argparse
import json
import sys
from typing import Any, Dict, List, Optional

import requests

from error_utils import ValidationError, safe_float_conversion

DEFAULT_URL = "http://localhost:8080"


class RecipeMatcherClient:
    """Thin wrapper around the server's JSON endpoints."""

    def __init__(self, base_url: str = DEFAULT_URL, timeout: float = 30.0):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def list_products(self) -> List[str]:
        response = self.session.get(self._url("/products"), timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    def list_units(self, product: str) -> List[str]:
        response = self.session.post(
            self._url("/units"), json={"product": product}, timeout=self.timeout
        )
        response.raise_for_status()
        return response.json()

    def suggest_recipes(
        self, available_products: Dict[str, Dict[str, Any]], servings: int = 1
    ) -> List[List[Dict[str, str]]]:
        """
        Ask for every maximal recipe combination the stock can cover.

        Args:
            available_products: product name -> {"quantity": float, "unit": str}
            servings: Serving multiplier

        Returns:
            List[List[Dict[str, str]]]: Combinations of {"name", "source"}
        """
        payload = {
            "numberOfServings": servings,
            "availableProducts": available_products,
        }
        response = self.session.post(
            self._url("/recipes"), json=payload, timeout=self.timeout
        )
        response.raise_for_status()
        return response.json()


def parse_stock_entry(text: str) -> tuple:
    """
    Parse "flour=500 g" into ("flour", {"quantity": 500.0, "unit": "g"}).

    Raises:
        ValidationError: If the entry is malformed
    """
    name, sep, amount = text.partition("=")
    parts = amount.strip().split(None, 1)
    if not sep or not name.strip() or len(parts) != 2:
        raise ValidationError(f"Expected NAME=QUANTITY UNIT, got {text!r}")

    quantity = safe_float_conversion(parts[0], default=None, min_val=0)
    if quantity is None:
        raise ValidationError(f"Invalid quantity in {text!r}")
    return name.strip(), {"quantity": quantity, "unit": parts[1].strip()}


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Recipe Matcher client",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--url", default=DEFAULT_URL, help="Server base URL")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("products", help="List known products")

    units_parser = subparsers.add_parser("units", help="List units for a product")
    units_parser.add_argument("product")

    suggest_parser = subparsers.add_parser("suggest", help="Suggest recipes")
    suggest_parser.add_argument("--servings", type=int, default=1)
    suggest_parser.add_argument("stock", nargs="+", help='Entries like "flour=500 g"')

    args = parser.parse_args(argv)
    client = RecipeMatcherClient(args.url)

    try:
        if args.command == "products":
            result = client.list_products()
        elif args.command == "units":
            result = client.list_units(args.product)
        else:
            stock = dict(parse_stock_entry(entry) for entry in args.stock)
            result = client.suggest_recipes(stock, args.servings)
    except ValidationError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1
    except requests.RequestException as e:
        print(f"❌ Request failed: {e}", file=sys.stderr)
        return 1

    print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
