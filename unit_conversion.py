"""
Unit normalization for recipe requirements and stock entries.

The ConversionContext is built once at startup and only read afterwards. The
same ``normalize`` call is applied to catalog ingredients at load time and to
caller stock at request time, so both sides end up in comparable units.
"""

import math
from types import MappingProxyType
from typing import Mapping, Optional

from measurements import Density, Measurement, Product


def _freeze_table(table: Mapping[str, Mapping]) -> Mapping[str, Mapping]:
    return MappingProxyType(
        {key: MappingProxyType(dict(inner)) for key, inner in table.items()}
    )


class ConversionContext:
    """
    Conversion tables, alias tables and densities.

    Args:
        conversion_table: unit -> product -> measurement of one unit
        base_conversions: unit -> measurement of one unit, any product
        unit_aliases: unit -> product -> alias unit
        base_unit_aliases: unit -> alias unit, any product
        product_aliases: product -> canonical product
        densities: canonical product -> density
    """

    def __init__(
        self,
        conversion_table: Optional[Mapping[str, Mapping[str, Measurement]]] = None,
        base_conversions: Optional[Mapping[str, Measurement]] = None,
        unit_aliases: Optional[Mapping[str, Mapping[str, str]]] = None,
        base_unit_aliases: Optional[Mapping[str, str]] = None,
        product_aliases: Optional[Mapping[str, str]] = None,
        densities: Optional[Mapping[str, Density]] = None,
    ):
        self.conversion_table = _freeze_table(conversion_table or {})
        self.base_conversions = MappingProxyType(dict(base_conversions or {}))
        self.unit_aliases = _freeze_table(unit_aliases or {})
        self.base_unit_aliases = MappingProxyType(dict(base_unit_aliases or {}))
        self.product_aliases = MappingProxyType(dict(product_aliases or {}))
        self.densities = MappingProxyType(dict(densities or {}))

    def resolve_unit_alias(self, unit: str, product_name: str) -> str:
        """Return the alias of ``unit`` for the product, or the unit itself."""
        alias = self.unit_aliases.get(unit, {}).get(product_name)
        if alias is None:
            alias = self.base_unit_aliases.get(unit)
        return alias if alias is not None else unit

    def canonical_product_name(self, name: str) -> str:
        return self.product_aliases.get(name, name)

    def conversion_for(self, unit: str, product_name: str) -> Optional[Measurement]:
        """Product-specific conversion of one ``unit``, else the base conversion."""
        conversion = self.conversion_table.get(unit, {}).get(product_name)
        if conversion is None:
            conversion = self.base_conversions.get(unit)
        return conversion

    def density_for(self, product_name: str) -> Optional[Density]:
        return self.densities.get(product_name)

    def normalize(self, product: Product) -> Product:
        """
        Return ``product`` with canonical name, reference unit and rescaled
        quantity.

        The unit alias is looked up with the name as given; the conversion is
        looked up with the canonical name. Products without a conversion keep
        their unit.
        """
        unit = self.resolve_unit_alias(product.unit, product.name)
        name = self.canonical_product_name(product.name)
        quantity = product.quantity

        conversion = self.conversion_for(unit, name)
        if conversion is not None:
            quantity *= conversion.quantity
            unit = conversion.unit

        return Product(name, Measurement(quantity, unit))


class DensityAccumulator:
    """
    Collects mass/volume samples for one conversion table row.

    The first cell whose unit differs from its column's reference unit fixes
    the mass unit and the reference volume unit. Every cell on the same axis
    pair adds one sample, normalized to one reference volume unit.

    The volume unit is the column's reference unit (e.g. ml), not the column
    label (e.g. cup), so the ratio matches quantities after normalization.
    """

    def __init__(self):
        self.mass_unit: Optional[str] = None
        self.volume_unit: Optional[str] = None
        self.total = 0.0
        self.count = 0

    def add(self, measurement: Measurement, column_base: Optional[Measurement]):
        if column_base is None or not column_base.quantity:
            return
        if measurement.unit == column_base.unit:
            return

        if self.mass_unit is None:
            self.mass_unit = measurement.unit
            self.volume_unit = column_base.unit

        if measurement.unit == self.mass_unit and column_base.unit == self.volume_unit:
            self.total += measurement.quantity / column_base.quantity
            self.count += 1

    def density(self) -> Optional[Density]:
        """Mean of the samples, or None when no usable ratio was found."""
        if self.count == 0:
            return None
        ratio = self.total / self.count
        if not math.isfinite(ratio) or ratio <= 0:
            return None
        return Density(ratio, self.mass_unit, self.volume_unit)
