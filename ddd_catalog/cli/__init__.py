"""
DDD Catalog - Command Line Interface
"""
from ddd_catalog.cli.main import app, main

__all__ = ["app", "main"]
