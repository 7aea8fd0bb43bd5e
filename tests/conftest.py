"""
Shared fixtures for recipe matcher tests.
"""

import os
import sys
from pathlib import Path

import pytest

# Add project root to path for all tests
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from measurements import Density, Measurement, Product
from recipe_catalog import RecipeCatalog
from unit_conversion import ConversionContext


def product(name, quantity, unit):
    return Product(name, Measurement(quantity, unit))


def make_catalog(recipes, context=None, sources=None, product_units=None):
    """Build a catalog from {recipe: [(name, quantity, unit), ...]}."""
    context = context or ConversionContext()
    table = {
        recipe: [product(*ingredient) for ingredient in ingredients]
        for recipe, ingredients in recipes.items()
    }
    if sources is None:
        sources = {recipe: f"{recipe} source" for recipe in recipes}
    return RecipeCatalog.build(table, sources, context, product_units)


@pytest.fixture
def baking_context():
    """Context with base volume conversions, a flour override and aliases."""
    return ConversionContext(
        conversion_table={"cup": {"flour": Measurement(120, "g")}},
        base_conversions={
            "cup": Measurement(240, "ml"),
            "tablespoon": Measurement(15, "ml"),
            "kg": Measurement(1000, "g"),
        },
        unit_aliases={"pinch": {"sea salt": "to taste"}},
        base_unit_aliases={"tbsp": "tablespoon", "cups": "cup"},
        product_aliases={"plain flour": "flour", "sea salt": "salt"},
        densities={"flour": Density(0.5, "g", "ml")},
    )


@pytest.fixture
def clean_env():
    """Clean RECIPE_MATCHER_* environment variables before and after tests."""
    original_env = {
        key: value
        for key, value in os.environ.items()
        if key.startswith("RECIPE_MATCHER_")
    }
    for var in original_env:
        del os.environ[var]

    yield

    for var in [key for key in os.environ if key.startswith("RECIPE_MATCHER_")]:
        del os.environ[var]
    os.environ.update(original_env)
