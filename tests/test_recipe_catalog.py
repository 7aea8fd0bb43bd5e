"""Tests for building and reading the recipe catalog."""

import pytest

from conftest import make_catalog, product
from error_utils import CatalogIntegrityError
from recipe_catalog import RecipeCatalog


class TestRecipeCatalogBuild:
    def test_requirements_are_normalized(self, baking_context):
        catalog = make_catalog(
            {"bread": [("plain flour", 2, "cups"), ("milk", 1, "cup")]},
            context=baking_context,
        )

        assert dict(catalog.recipe("bread")) == {
            "flour": product("flour", 240, "g"),
            "milk": product("milk", 240, "ml"),
        }

    def test_aliased_duplicates_are_merged(self, baking_context):
        catalog = make_catalog(
            {"bread": [("plain flour", 1, "cup"), ("flour", 60, "g")]},
            context=baking_context,
        )
        assert catalog.recipe("bread")["flour"] == product("flour", 180, "g")

    def test_to_taste_duplicate_yields_to_measured(self, baking_context):
        catalog = make_catalog(
            {"soup": [("sea salt", 1, "pinch"), ("salt", 5, "g")]},
            context=baking_context,
        )
        assert catalog.recipe("soup")["salt"] == product("salt", 5, "g")

    def test_conflicting_duplicate_units_are_fatal(self, baking_context):
        with pytest.raises(CatalogIntegrityError):
            make_catalog(
                {"bread": [("flour", 1, "cup"), ("flour", 10, "ml")]},
                context=baking_context,
            )

    def test_recipe_without_source_is_fatal(self):
        with pytest.raises(CatalogIntegrityError, match="cake"):
            make_catalog({"cake": [("flour", 300, "g")]}, sources={})

    def test_products_are_raw_names_sorted(self, baking_context):
        catalog = make_catalog(
            {
                "bread": [("plain flour", 1, "cup"), ("milk", 1, "cup")],
                "cake": [("flour", 300, "g"), ("eggs", 2, "piece")],
            },
            context=baking_context,
        )
        assert catalog.products == ("eggs", "flour", "milk", "plain flour")


class TestRecipeCatalogAccess:
    @pytest.fixture
    def catalog(self, baking_context):
        return make_catalog(
            {
                "pancakes": [("flour", 100, "g")],
                "cake": [("flour", 300, "g"), ("sugar", 200, "g")],
                "cookies": [("flour", 200, "g")],
            },
            context=baking_context,
            product_units={"flour": ["cup", "g", "ml"]},
        )

    def test_names_are_indexed_in_sorted_order(self, catalog):
        assert catalog.recipe_names == ("cake", "cookies", "pancakes")
        assert catalog.index_of("pancakes") == 2
        assert len(catalog) == 3
        assert "cake" in catalog
        assert "pie" not in catalog

    def test_masks_round_trip_names(self, catalog):
        mask = catalog.mask_for_names(["pancakes", "cake"])
        assert mask == 0b101
        assert catalog.names_for_mask(mask) == ["cake", "pancakes"]

    def test_requirements_by_index_follow_names(self, catalog):
        assert catalog.requirements_by_index[1] == (product("flour", 200, "g"),)

    def test_source_lookup(self, catalog):
        assert catalog.source_for("cake") == "cake source"
        with pytest.raises(CatalogIntegrityError):
            catalog.source_for("pie")

    def test_unknown_recipe(self, catalog):
        with pytest.raises(KeyError):
            catalog.recipe("pie")

    def test_units_for_resolves_product_alias(self, catalog):
        assert catalog.units_for("flour") == ["cup", "g", "ml"]
        assert catalog.units_for("plain flour") == ["cup", "g", "ml"]
        assert catalog.units_for("saffron") == []

    def test_catalog_cannot_be_mutated(self, catalog):
        with pytest.raises(TypeError):
            catalog.recipe("cake")["flour"] = product("flour", 1, "g")
        with pytest.raises(TypeError):
            catalog.sources["cake"] = "elsewhere"

    def test_constructor_copies_inputs(self):
        recipes = {"cake": {"flour": product("flour", 300, "g")}}
        catalog = RecipeCatalog(recipes, {"cake": "book"})

        recipes["cake"]["flour"] = product("flour", 1, "g")
        assert catalog.recipe("cake")["flour"] == product("flour", 300, "g")
