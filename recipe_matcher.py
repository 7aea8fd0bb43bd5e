"""
Feasibility search over recipe combinations.

Every non-empty combination of catalog recipes is encoded as a bitmask over
the catalog's recipe indices and checked against its own copy of the stock.
A combination is feasible when all of its requirements can be taken from the
stock without any quantity going negative.

Unit mismatches that no density can bridge make the whole combination
infeasible; the offending ingredient is never skipped.
"""

import logging
from typing import Dict, Iterator, List, Mapping, Optional

from constants import LARGE_CATALOG_WARNING_SIZE, TO_TASTE_UNIT
from measurements import Density, Product
from recipe_catalog import RecipeCatalog

logger = logging.getLogger(__name__)


def effective_servings(servings: Optional[int]) -> int:
    """Serving multiplier; anything below 2 means no scaling."""
    if servings is None or servings <= 1:
        return 1
    return int(servings)


def convert_required_quantity(
    requirement: Product, stock_unit: str, density: Optional[Density], quantity: float
) -> Optional[float]:
    """
    Express a required quantity in the stock's unit.

    Returns:
        Optional[float]: The converted quantity, or None if the units are
            incomparable
    """
    if requirement.unit == stock_unit:
        return quantity
    if density is None or not density.quantity > 0:
        return None
    if requirement.unit == density.volume_unit and stock_unit == density.mass_unit:
        return quantity * density.quantity
    if requirement.unit == density.mass_unit and stock_unit == density.volume_unit:
        return quantity / density.quantity
    return None


class RecipeMatcher:
    """Finds every recipe combination a stock snapshot can cover."""

    def __init__(self, catalog: RecipeCatalog, densities: Mapping[str, Density]):
        self.catalog = catalog
        self.densities = densities
        if len(catalog) > LARGE_CATALOG_WARNING_SIZE:
            logger.warning(
                f"Catalog has {len(catalog)} recipes; "
                f"searching {2 ** len(catalog) - 1} combinations per request"
            )

    def iter_masks(self) -> Iterator[int]:
        """All non-empty recipe combinations."""
        return iter(range(1, 1 << len(self.catalog)))

    def is_feasible(
        self, mask: int, stock: Mapping[str, Product], servings: int = 1
    ) -> bool:
        """
        Check one combination against a private copy of ``stock``.

        Args:
            mask: Recipe combination as a bitmask over catalog indices
            stock: Normalized stock, canonical product name -> Product
            servings: Serving multiplier applied to every requirement

        Returns:
            bool: True if every requirement of every recipe can be met
        """
        servings = effective_servings(servings)
        remaining: Dict[str, float] = {
            name: product.quantity for name, product in stock.items()
        }
        requirements_by_index = self.catalog.requirements_by_index

        index = 0
        while mask:
            if mask & 1:
                for requirement in requirements_by_index[index]:
                    stock_entry = stock.get(requirement.name)
                    if stock_entry is None:
                        return False
                    if requirement.unit == TO_TASTE_UNIT:
                        continue

                    needed = convert_required_quantity(
                        requirement,
                        stock_entry.unit,
                        self.densities.get(requirement.name),
                        requirement.quantity * servings,
                    )
                    if needed is None:
                        logger.debug(
                            f'measurement units "{stock_entry.unit}" (from product list) '
                            f'and "{requirement.unit}" (from recipe) are incomparable '
                            f"for {requirement.name}"
                        )
                        return False

                    remaining[requirement.name] -= needed
                    if remaining[requirement.name] < 0:
                        return False
            mask >>= 1
            index += 1

        return True

    def find_feasible_masks(
        self, stock: Mapping[str, Product], servings: int = 1
    ) -> List[int]:
        """Every non-empty feasible combination, in ascending mask order."""
        return [mask for mask in self.iter_masks() if self.is_feasible(mask, stock, servings)]
