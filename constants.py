"""
Application constants for the recipe matcher.
Centralized location for all constant values used throughout the application.
"""

# Units
# A requirement in this unit never limits feasibility.
TO_TASTE_UNIT = "to taste"

# Table files
NOT_APPLICABLE_FIELD = "-"
INI_DEFAULT_SECTION = "DEFAULT"

# Conversion table CSV header cells look like "cup (240 ml)"
UNIT_DESCRIPTION_PATTERN = r"(.+?)\s*\((\d+(?:\.\d+)?)\s*(.+)\)"

# Recipe table CSV columns
RECIPE_INGREDIENT_COLUMN = 0
RECIPE_QUANTITY_COLUMN = 1
RECIPE_UNIT_COLUMN = 2
RECIPE_NAME_COLUMN = 3

# Recipe source CSV columns
SOURCE_RECIPE_NAME_COLUMN = 0
SOURCE_CITATION_COLUMN = 4

# Search limits
LARGE_CATALOG_WARNING_SIZE = 20

# Default Values
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8080
DEFAULT_NUMBER_OF_SERVINGS = 1
DEFAULT_LOG_LEVEL = "INFO"
DEBUG_HTTP_ORIGIN = "*"
