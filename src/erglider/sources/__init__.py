"""Metadata sources for running read-only catalog queries.

This module provides a plugin system for the backends that execute catalog
queries (e.g., the mysql command-line client) and return raw tab-delimited
output.

Example:
    >>> from erglider.sources import get_source, list_sources
    >>> print(list_sources())
    ['mysql', 'snapshot']
    >>> source = get_source("snapshot")
    >>> source.configure({"directory": "./catalog_dump"})
"""

from erglider.sources.base import MetadataSource, SourceError
from erglider.sources.registry import (
    clear_registry,
    get_source,
    list_sources,
    register_source,
)

__all__ = [
    "MetadataSource",
    "SourceError",
    "get_source",
    "list_sources",
    "register_source",
    "clear_registry",
]
