"""
Immutable recipe catalog.

Requirements are normalized through the ConversionContext once, when the
catalog is built, and exposed through read-only views afterwards. Every
recipe gets a fixed bit index so that recipe combinations can be handled as
integer bitmasks by the matcher.
"""

import logging
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from constants import TO_TASTE_UNIT
from error_utils import CatalogIntegrityError
from measurements import Product
from unit_conversion import ConversionContext

logger = logging.getLogger(__name__)


def _merge_requirement(recipe_name: str, existing: Product, new: Product) -> Product:
    """Combine two requirements that normalized to the same product."""
    if existing.unit == new.unit:
        return existing.with_measurement(existing.quantity + new.quantity, new.unit)
    if existing.unit == TO_TASTE_UNIT:
        return new
    if new.unit == TO_TASTE_UNIT:
        return existing
    raise CatalogIntegrityError(
        f"Recipe {recipe_name!r} needs {existing.name} in both "
        f"{existing.unit!r} and {new.unit!r}"
    )


def normalize_requirements(
    recipe_name: str, ingredients: Iterable[Product], context: ConversionContext
) -> Dict[str, Product]:
    """Normalize a recipe's ingredients and key them by canonical name."""
    requirements: Dict[str, Product] = {}
    for ingredient in ingredients:
        normalized = context.normalize(ingredient)
        existing = requirements.get(normalized.name)
        if existing is not None:
            normalized = _merge_requirement(recipe_name, existing, normalized)
        requirements[normalized.name] = normalized
    return requirements


class RecipeCatalog:
    """
    Read-only view of all recipes, their sources and the known products.

    Use RecipeCatalog.build() to construct one from loaded tables.
    """

    def __init__(
        self,
        recipes: Mapping[str, Mapping[str, Product]],
        sources: Mapping[str, str],
        products: Iterable[str] = (),
        product_units: Optional[Mapping[str, List[str]]] = None,
        context: Optional[ConversionContext] = None,
    ):
        names = tuple(sorted(recipes))
        self._recipes = MappingProxyType(
            {name: MappingProxyType(dict(recipes[name])) for name in names}
        )
        self._sources = MappingProxyType(dict(sources))
        self._names = names
        self._index = MappingProxyType({name: i for i, name in enumerate(names)})
        self._requirements = tuple(tuple(self._recipes[name].values()) for name in names)
        self._products = tuple(sorted(set(products)))
        self._product_units = MappingProxyType(
            {k: tuple(sorted(v)) for k, v in (product_units or {}).items()}
        )
        self._context = context

    @classmethod
    def build(
        cls,
        recipe_table: Mapping[str, Iterable[Product]],
        recipe_sources: Mapping[str, str],
        context: ConversionContext,
        product_units: Optional[Mapping[str, List[str]]] = None,
    ) -> "RecipeCatalog":
        """
        Normalize raw recipe tables into a catalog.

        Raises:
            CatalogIntegrityError: If a recipe has no source, or the same
                product is required in incompatible units by one recipe
        """
        missing = sorted(name for name in recipe_table if name not in recipe_sources)
        if missing:
            raise CatalogIntegrityError(f"Recipes without source: {', '.join(missing)}")

        recipes = {}
        products = set()
        for name, ingredients in recipe_table.items():
            ingredients = list(ingredients)
            products.update(ingredient.name for ingredient in ingredients)
            recipes[name] = normalize_requirements(name, ingredients, context)

        catalog = cls(recipes, recipe_sources, products, product_units, context)
        logger.info(
            f"Built recipe catalog with {len(catalog)} recipes "
            f"and {len(catalog.products)} products"
        )
        return catalog

    def __len__(self) -> int:
        return len(self._names)

    def __contains__(self, name: object) -> bool:
        return name in self._index

    @property
    def recipe_names(self) -> Tuple[str, ...]:
        """Recipe names in bit index order."""
        return self._names

    @property
    def requirements_by_index(self) -> Tuple[Tuple[Product, ...], ...]:
        return self._requirements

    @property
    def products(self) -> Tuple[str, ...]:
        """Sorted product names as written in the recipe tables."""
        return self._products

    @property
    def sources(self) -> Mapping[str, str]:
        return self._sources

    def recipe(self, name: str) -> Mapping[str, Product]:
        try:
            return self._recipes[name]
        except KeyError:
            raise KeyError(f"Unknown recipe: {name}") from None

    def source_for(self, name: str) -> str:
        try:
            return self._sources[name]
        except KeyError:
            raise CatalogIntegrityError(f"Recipe not found in sources: {name}") from None

    def units_for(self, product: str) -> List[str]:
        """Units a product can be given in, or [] for unknown products."""
        units = self._product_units.get(product)
        if units is None and self._context is not None:
            units = self._product_units.get(self._context.canonical_product_name(product))
        return list(units or ())

    def index_of(self, name: str) -> int:
        return self._index[name]

    def mask_for_names(self, names: Iterable[str]) -> int:
        mask = 0
        for name in names:
            mask |= 1 << self.index_of(name)
        return mask

    def names_for_mask(self, mask: int) -> List[str]:
        return [name for i, name in enumerate(self._names) if mask >> i & 1]
