"""Base classes for metadata sources.

This module defines the abstract interface for metadata source providers and
the exception class for source-related errors.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from erglider.global_models import MetadataStage


class SourceError(Exception):
    """Exception raised when a metadata query cannot be completed."""

    pass


class MetadataSource(ABC):
    """Abstract base class for metadata sources.

    A metadata source runs one read-only catalog query at a time and returns
    the raw result as tab-delimited text with a header row. Sources are
    discovered via entry points and selected by name.

    Example:
        >>> class StaticSource(MetadataSource):
        ...     @property
        ...     def name(self) -> str:
        ...         return "static"
        ...
        ...     def run_query(self, sql: str, stage: MetadataStage) -> str:
        ...         return "TABLE_NAME\\nusers"
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the source name used in configuration and CLI options."""
        pass

    @abstractmethod
    def run_query(self, sql: str, stage: MetadataStage) -> str:
        """Run a read-only catalog query.

        Args:
            sql: The query text. All values in it are already escaped.
            stage: The pipeline stage this query belongs to.

        Returns:
            Tab-delimited text with a header row. Empty or header-only text
            means no rows matched and is not an error.

        Raises:
            SourceError: If the query fails or times out.
        """
        pass

    def configure(self, config: Optional[Dict[str, Any]] = None) -> None:
        """Configure the source with provider-specific settings.

        Called after instantiation with the matching section from
        erglider.toml merged with CLI overrides.

        Args:
            config: Provider-specific configuration dictionary.

        Raises:
            SourceError: If required configuration is missing or invalid.
        """
        pass
