"""
DDD Catalog - Data

JSON input and output for the catalog builder.
"""
from ddd_catalog.data.loaders import load_occurrences, parse_occurrences, save_result

__all__ = ["load_occurrences", "parse_occurrences", "save_result"]
