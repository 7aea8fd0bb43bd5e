"""
Value types shared by the conversion context, the recipe catalog and the
feasibility search.

All types are frozen so that catalog data can be shared between concurrent
requests without copying.
"""

from dataclasses import dataclass, replace

from error_utils import ConversionTableFormatError


@dataclass(frozen=True)
class Measurement:
    """An amount expressed in a named unit, e.g. 120 g."""

    quantity: float
    unit: str


@dataclass(frozen=True)
class Product:
    """A named substance with an amount: a recipe requirement or a stock entry."""

    name: str
    measurement: Measurement

    @property
    def quantity(self) -> float:
        return self.measurement.quantity

    @property
    def unit(self) -> str:
        return self.measurement.unit

    def renamed(self, name: str) -> "Product":
        return replace(self, name=name)

    def with_measurement(self, quantity: float, unit: str) -> "Product":
        return replace(self, measurement=Measurement(quantity, unit))


@dataclass(frozen=True)
class Density:
    """
    Mass per volume ratio for one product.

    ``quantity`` is the number of ``mass_unit`` per one ``volume_unit``.
    """

    quantity: float
    mass_unit: str
    volume_unit: str


def parse_measurement(text: str) -> Measurement:
    """
    Parse a "<quantity> <unit>" cell such as "120 g" or "1 to taste".

    Raises:
        ConversionTableFormatError: If the cell has no unit or a bad quantity
    """
    parts = text.strip().split(None, 1)
    if len(parts) != 2:
        raise ConversionTableFormatError(f"Invalid measurement: {text!r}")

    quantity_str, unit = parts
    try:
        quantity = float(quantity_str)
    except ValueError:
        raise ConversionTableFormatError(
            f"Invalid quantity in measurement: {text!r}"
        ) from None

    return Measurement(quantity, unit.strip())
