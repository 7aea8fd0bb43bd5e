"""
Per-request recipe suggestion service.

Normalizes the caller's stock, runs the feasibility search against the shared
catalog, keeps the maximal combinations and attaches each recipe's source.
Nothing here writes to the catalog or the conversion context.
"""

import logging
import math
from typing import Any, Dict, List, Mapping

from error_utils import ValidationError, safe_float_conversion, validate_required_params
from maximal_sets import reduce_to_maximal, sorted_name_sets
from measurements import Measurement, Product
from recipe_catalog import RecipeCatalog
from recipe_matcher import RecipeMatcher, effective_servings
from unit_conversion import ConversionContext

logger = logging.getLogger(__name__)


def _stock_measurement(name: str, value: Any) -> Measurement:
    if isinstance(value, Measurement):
        quantity, unit = value.quantity, value.unit
    elif isinstance(value, Mapping):
        quantity, unit = value.get("quantity"), value.get("unit")
    else:
        raise ValidationError(f"Invalid stock entry for {name}: {value!r}")

    validate_required_params(unit=unit)
    converted = safe_float_conversion(quantity, default=None)
    if converted is None:
        raise ValidationError(f"Invalid quantity for {name}: {quantity!r}")
    if not math.isfinite(converted):
        raise ValidationError(f"Quantity for {name} must be a finite number")
    if converted < 0:
        raise ValidationError(f"Quantity for {name} cannot be negative")
    return Measurement(converted, str(unit))


class RecipeSuggestionService:
    """Answers "which recipe combinations fit this stock" for one catalog."""

    def __init__(self, catalog: RecipeCatalog, context: ConversionContext):
        self.catalog = catalog
        self.context = context
        self.matcher = RecipeMatcher(catalog, context.densities)

    def normalize_stock(self, available_products: Mapping[str, Any]) -> Dict[str, Product]:
        """
        Build a private, normalized copy of the caller's stock.

        Args:
            available_products: product name -> {"quantity", "unit"} or Measurement

        Returns:
            Dict[str, Product]: canonical product name -> normalized Product

        Raises:
            ValidationError: If an entry is malformed, or two entries for the
                same product end up in different units
        """
        stock: Dict[str, Product] = {}
        for name, value in available_products.items():
            validate_required_params(product=name)
            product = self.context.normalize(Product(name, _stock_measurement(name, value)))

            existing = stock.get(product.name)
            if existing is not None:
                if existing.unit != product.unit:
                    raise ValidationError(
                        f"Stock lists {product.name} in both "
                        f"{existing.unit!r} and {product.unit!r}"
                    )
                product = existing.with_measurement(
                    existing.quantity + product.quantity, product.unit
                )
            stock[product.name] = product
        return stock

    def matching_recipe_sets(
        self, available_products: Mapping[str, Any], servings: int = 1
    ) -> List[List[str]]:
        """Maximal feasible recipe combinations as sorted name lists."""
        stock = self.normalize_stock(available_products)
        servings = effective_servings(servings)

        feasible = self.matcher.find_feasible_masks(stock, servings)
        maximal = reduce_to_maximal(feasible)
        name_sets = sorted_name_sets(maximal, self.catalog.recipe_names)

        logger.info(
            f"{len(feasible)} feasible and {len(name_sets)} maximal recipe sets "
            f"for {len(stock)} products and {servings} servings"
        )
        for name_set in name_sets:
            logger.debug(", ".join(name_set))
        return name_sets

    def suggest(
        self, available_products: Mapping[str, Any], servings: int = 1
    ) -> List[List[Dict[str, str]]]:
        """
        Maximal recipe combinations annotated with each recipe's source.

        Raises:
            CatalogIntegrityError: If a suggested recipe has no source
        """
        return [
            [{"name": name, "source": self.catalog.source_for(name)} for name in name_set]
            for name_set in self.matching_recipe_sets(available_products, servings)
        ]
