"""
Loaders for the tabular and keyed files the catalog is built from.

Conversion tables come as CSV (one column per culinary unit, one row per
product) or INI (one section per unit). Alias tables and the product alias
map are INI files whose [DEFAULT] section holds the product-independent
entries. Recipes and their sources are CSV files with a header line.

Any file that cannot be read or parsed raises CatalogIntegrityError (or its
ConversionTableFormatError subclass); the server refuses to start on these.
"""

import configparser
import csv
import logging
import re
from typing import Dict, Iterable, List, Optional, Set

from constants import (
    INI_DEFAULT_SECTION,
    NOT_APPLICABLE_FIELD,
    RECIPE_INGREDIENT_COLUMN,
    RECIPE_NAME_COLUMN,
    RECIPE_QUANTITY_COLUMN,
    RECIPE_UNIT_COLUMN,
    SOURCE_CITATION_COLUMN,
    SOURCE_RECIPE_NAME_COLUMN,
    UNIT_DESCRIPTION_PATTERN,
)
from error_utils import CatalogIntegrityError, ConversionTableFormatError
from measurements import Density, Measurement, Product, parse_measurement
from unit_conversion import ConversionContext, DensityAccumulator

logger = logging.getLogger(__name__)

unit_description_re = re.compile(UNIT_DESCRIPTION_PATTERN)


class ConversionContextBuilder:
    """Mutable accumulator for everything the loaders read before startup."""

    def __init__(self):
        self.conversion_table: Dict[str, Dict[str, Measurement]] = {}
        self.base_conversions: Dict[str, Measurement] = {}
        self.unit_aliases: Dict[str, Dict[str, str]] = {}
        self.base_unit_aliases: Dict[str, str] = {}
        self.product_aliases: Dict[str, str] = {}
        self.densities: Dict[str, Density] = {}
        self.product_units: Dict[str, Set[str]] = {}

    def add_conversion(self, unit: str, product: str, measurement: Measurement):
        self.conversion_table.setdefault(unit, {})[product] = measurement
        units = self.product_units.setdefault(product, set())
        units.add(unit)
        units.add(measurement.unit)

    def build(self) -> ConversionContext:
        return ConversionContext(
            conversion_table=self.conversion_table,
            base_conversions=self.base_conversions,
            unit_aliases=self.unit_aliases,
            base_unit_aliases=self.base_unit_aliases,
            product_aliases=self.product_aliases,
            densities=self.densities,
        )

    def build_product_units(self) -> Dict[str, List[str]]:
        """
        Units each product can be given in.

        Every product with conversion entries can also be given in every
        reference unit the base conversions lead to.
        """
        reference_units = {m.unit for m in self.base_conversions.values()}
        return {
            product: sorted(units | reference_units) if units else []
            for product, units in self.product_units.items()
        }


def _open_text(path: str):
    try:
        return open(path, newline="", encoding="utf-8")
    except OSError as e:
        raise CatalogIntegrityError(f"Cannot open {path}: {e}") from e


def _read_ini(path: str) -> Dict[str, Dict[str, str]]:
    """
    Read an INI file into section -> key -> value.

    [DEFAULT] is returned as an ordinary section instead of being merged into
    the others, key case is preserved and keys before the first section
    header belong to [DEFAULT].
    """
    with _open_text(path) as f:
        text = f.read()

    def parse(source: str) -> configparser.ConfigParser:
        parser = configparser.ConfigParser(
            delimiters=("=",), interpolation=None, default_section=""
        )
        parser.optionxform = str
        parser.read_string(source, source=path)
        return parser

    try:
        try:
            parser = parse(text)
        except configparser.MissingSectionHeaderError:
            parser = parse(f"[{INI_DEFAULT_SECTION}]\n{text}")
    except configparser.Error as e:
        raise ConversionTableFormatError(f"Invalid INI file {path}: {e}") from e

    return {section: dict(parser[section]) for section in parser.sections()}


def parse_unit_description(description: str) -> tuple:
    """
    Split a conversion table header such as "cup (240 ml)".

    Returns:
        tuple: (unit, Measurement of one unit in its reference unit)

    Raises:
        ConversionTableFormatError: If the description does not match
    """
    match = unit_description_re.fullmatch(description.strip())
    if not match:
        raise ConversionTableFormatError(
            f"Invalid format of culinary unit description: {description!r}"
        )
    unit, quantity, base_unit = match.groups()
    return unit, Measurement(float(quantity), base_unit.strip())


def load_conversion_table_csv(path: str, builder: ConversionContextBuilder) -> None:
    """
    Load a CSV conversion table and derive product densities from it.

    The header row names the culinary units with their reference size; each
    following row gives, per unit, how much of the product one unit holds.
    """
    with _open_text(path) as f:
        reader = csv.reader(f)
        try:
            header = next(reader)
        except StopIteration:
            raise ConversionTableFormatError(f"Empty conversion table: {path}")

        units = []
        for description in header[1:]:
            unit, base = parse_unit_description(description)
            builder.base_conversions[unit] = base
            units.append(unit)

        rows = 0
        for record in reader:
            if not record:
                continue
            product = record[0].strip()
            cells = record[1:]
            if len(cells) > len(units):
                raise ConversionTableFormatError(
                    f"{path}:{reader.line_num}: more cells than units for {product}"
                )

            builder.product_units.setdefault(product, set())
            accumulator = DensityAccumulator()
            for unit, cell in zip(units, cells):
                cell = cell.strip()
                if not cell or cell == NOT_APPLICABLE_FIELD:
                    continue
                measurement = parse_measurement(cell)
                builder.add_conversion(unit, product, measurement)
                accumulator.add(measurement, builder.base_conversions.get(unit))

            density = accumulator.density()
            if density is None:
                logger.debug(f"No density samples for {product} in {path}")
            else:
                builder.densities[product] = density
            rows += 1

    logger.info(f"Loaded {len(units)} units and {rows} products from {path}")


def load_conversion_table_ini(path: str, builder: ConversionContextBuilder) -> None:
    """Load base conversions from [DEFAULT] and per-unit product conversions."""
    sections = _read_ini(path)
    if INI_DEFAULT_SECTION not in sections:
        raise ConversionTableFormatError(f"Missing [{INI_DEFAULT_SECTION}] in {path}")

    for unit, value in sections[INI_DEFAULT_SECTION].items():
        builder.base_conversions[unit] = parse_measurement(value)

    for unit, entries in sections.items():
        if unit == INI_DEFAULT_SECTION:
            continue
        for product, value in entries.items():
            builder.add_conversion(unit, product, parse_measurement(value))

    logger.info(f"Loaded conversion table with {len(sections)} sections from {path}")


def load_unit_alias_table(path: str, builder: ConversionContextBuilder) -> None:
    """Load unit aliases: [DEFAULT] unit = alias, [unit] product = alias."""
    sections = _read_ini(path)
    if INI_DEFAULT_SECTION not in sections:
        raise ConversionTableFormatError(f"Missing [{INI_DEFAULT_SECTION}] in {path}")

    builder.base_unit_aliases.update(sections[INI_DEFAULT_SECTION])
    for unit, aliases in sections.items():
        if unit != INI_DEFAULT_SECTION:
            builder.unit_aliases.setdefault(unit, {}).update(aliases)

    logger.info(f"Loaded unit aliases for {len(sections)} sections from {path}")


def load_product_alias_map(path: str, builder: ConversionContextBuilder) -> None:
    """Load product aliases from the [DEFAULT] section: product = canonical."""
    sections = _read_ini(path)
    if INI_DEFAULT_SECTION not in sections:
        raise ConversionTableFormatError(f"Missing [{INI_DEFAULT_SECTION}] in {path}")

    builder.product_aliases.update(sections[INI_DEFAULT_SECTION])
    logger.info(f"Loaded {len(builder.product_aliases)} product aliases from {path}")


def _data_rows(path: str, min_columns: int) -> Iterable[List[str]]:
    with _open_text(path) as f:
        reader = csv.reader(f)
        next(reader, None)
        for record in reader:
            if not record:
                continue
            if len(record) < min_columns:
                raise CatalogIntegrityError(
                    f"{path}:{reader.line_num}: expected at least {min_columns} columns"
                )
            yield record


def load_recipe_sources(path: str) -> Dict[str, str]:
    """Read recipe name -> source citation."""
    sources = {}
    for record in _data_rows(path, SOURCE_CITATION_COLUMN + 1):
        sources[record[SOURCE_RECIPE_NAME_COLUMN]] = record[SOURCE_CITATION_COLUMN]

    logger.info(f"Loaded {len(sources)} recipe sources from {path}")
    return sources


def _parse_recipe_quantity(value: str, path: str) -> float:
    value = value.strip()
    if value == NOT_APPLICABLE_FIELD:
        return 0.0
    try:
        return float(value)
    except ValueError:
        raise CatalogIntegrityError(
            f"Invalid ingredient quantity {value!r} in {path}"
        ) from None


def load_recipe_table(
    paths: Iterable[str], recipes: Optional[Dict[str, List[Product]]] = None
) -> Dict[str, List[Product]]:
    """
    Read recipe name -> raw ingredient requirements from one or more files.

    Requirements are returned as written; normalization happens when the
    catalog is built.
    """
    recipes = {} if recipes is None else recipes
    for path in paths:
        count = 0
        for record in _data_rows(path, RECIPE_NAME_COLUMN + 1):
            quantity = _parse_recipe_quantity(record[RECIPE_QUANTITY_COLUMN], path)
            ingredient = Product(
                record[RECIPE_INGREDIENT_COLUMN].strip(),
                Measurement(quantity, record[RECIPE_UNIT_COLUMN].strip()),
            )
            recipes.setdefault(record[RECIPE_NAME_COLUMN], []).append(ingredient)
            count += 1
        logger.info(f"Loaded {count} ingredient rows from {path}")

    return recipes
