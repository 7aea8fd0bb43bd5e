"""
Common error types and conversion helpers for the recipe matcher.
"""

from typing import Optional, Any


def validate_required_params(**params) -> None:
    """
    Validate that required parameters are not None or empty.

    Args:
        **params: Named parameters to validate

    Raises:
        ValidationError: If any parameter is None or empty string
    """
    for name, value in params.items():
        if value is None:
            raise ValidationError(f"Parameter '{name}' is required")
        if isinstance(value, str) and not value.strip():
            raise ValidationError(f"Parameter '{name}' cannot be empty")


def safe_int_conversion(
    value: Any,
    default: int = 0,
    min_val: Optional[int] = None,
    max_val: Optional[int] = None,
) -> int:
    """
    Safely convert a value to integer with bounds checking.

    Args:
        value: Value to convert
        default: Default value if conversion fails
        min_val: Minimum allowed value
        max_val: Maximum allowed value

    Returns:
        int: Converted and validated integer
    """
    try:
        result = int(value)

        if min_val is not None and result < min_val:
            return default
        if max_val is not None and result > max_val:
            return default

        return result
    except (ValueError, TypeError):
        return default


def safe_float_conversion(
    value: Any,
    default: Optional[float] = 0.0,
    min_val: Optional[float] = None,
    max_val: Optional[float] = None,
) -> Optional[float]:
    """
    Safely convert a value to float with bounds checking.

    Args:
        value: Value to convert
        default: Default value if conversion fails
        min_val: Minimum allowed value
        max_val: Maximum allowed value

    Returns:
        float: Converted and validated float
    """
    try:
        result = float(value)

        if min_val is not None and result < min_val:
            return default
        if max_val is not None and result > max_val:
            return default

        return result
    except (ValueError, TypeError):
        return default


class CatalogIntegrityError(Exception):
    """Raised when the recipe catalog or its tables are inconsistent."""

    pass


class ConversionTableFormatError(CatalogIntegrityError):
    """Raised when a conversion table cell or header cannot be parsed."""

    pass


class ConfigurationError(Exception):
    """Raised when configuration is invalid."""

    pass


class ValidationError(Exception):
    """Raised when input validation fails."""

    pass
