"""Metadata source registry with plugin discovery via entry points.

Built-in sources (mysql, snapshot) are declared as entry points in the
package metadata; third-party packages can add their own under the same
group.
"""

from importlib.metadata import entry_points
from typing import Dict, List, Type

from erglider.sources.base import MetadataSource, SourceError

ENTRY_POINT_GROUP = "erglider.sources"

_source_cache: Dict[str, Type[MetadataSource]] = {}
_discovery_done: bool = False


def _discover_sources() -> None:
    """Load sources registered in the 'erglider.sources' entry point group."""
    global _discovery_done

    if _discovery_done:
        return

    for ep in entry_points(group=ENTRY_POINT_GROUP):
        try:
            source_class = ep.load()
        except Exception:
            # Skip sources that fail to load
            continue
        if isinstance(source_class, type) and issubclass(source_class, MetadataSource):
            _source_cache.setdefault(ep.name, source_class)

    _discovery_done = True


def get_source(name: str) -> MetadataSource:
    """Get a new metadata source instance by name.

    Args:
        name: The name of the source (e.g., "mysql").

    Returns:
        An unconfigured instance of the requested source.

    Raises:
        SourceError: If no source is registered under that name.
    """
    _discover_sources()

    if name not in _source_cache:
        available = ", ".join(sorted(_source_cache.keys()))
        raise SourceError(
            f"Unknown source '{name}'. Available sources: {available or 'none'}."
        )

    return _source_cache[name]()


def list_sources() -> List[str]:
    """List all available source names, sorted."""
    _discover_sources()
    return sorted(_source_cache.keys())


def register_source(name: str, source_class: Type[MetadataSource]) -> None:
    """Register a source programmatically.

    Useful for tests and for sources that are not installed via entry points.

    Raises:
        ValueError: If source_class is not a subclass of MetadataSource.
    """
    if not isinstance(source_class, type) or not issubclass(
        source_class, MetadataSource
    ):
        raise ValueError(f"{source_class} must be a subclass of MetadataSource")

    _source_cache[name] = source_class


def clear_registry() -> None:
    """Clear the source registry so the next lookup rediscovers entry points."""
    global _discovery_done
    _source_cache.clear()
    _discovery_done = False
