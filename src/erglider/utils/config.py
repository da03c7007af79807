"""Configuration management for ER Glider.

Loads configuration from erglider.toml in the current working directory.
"""

import tomllib
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ValidationError
from rich.console import Console

console = Console(stderr=True)

CONFIG_FILE_NAME = "erglider.toml"


class MysqlSourceConfig(BaseModel):
    """Configuration for the MySQL command-line source.

    All fields are optional - they can also be set via environment variables
    (MYSQL_HOST, MYSQL_PORT, MYSQL_USER, MYSQL_PASSWORD, XAMPP_DIR).
    """

    host: Optional[str] = None
    port: Optional[int] = None
    user: Optional[str] = None
    password: Optional[str] = None
    executable: Optional[str] = None
    timeout: Optional[float] = None


class SnapshotSourceConfig(BaseModel):
    """Configuration for the snapshot directory source."""

    directory: Optional[str] = None


class SourceConfig(BaseModel):
    """Configuration for metadata sources.

    Contains source-specific configuration under sub-keys.
    """

    mysql: Optional[MysqlSourceConfig] = None
    snapshot: Optional[SnapshotSourceConfig] = None

    def for_source(self, name: str) -> Dict[str, Any]:
        """Return the settings for one source as a plain dict without unset values."""
        section = getattr(self, name, None)
        if not isinstance(section, BaseModel):
            return {}
        return section.model_dump(exclude_none=True)


class ConfigSettings(BaseModel):
    """Configuration settings for ER Glider.

    All fields are optional. None values indicate the setting was not
    specified in the config file.
    """

    source_type: Optional[str] = None
    source: Optional[SourceConfig] = None
    output_format: Optional[str] = None
    show_columns: Optional[bool] = None
    show_types: Optional[bool] = None
    tables: Optional[List[str]] = None


def find_config_file(start_path: Optional[Path] = None) -> Optional[Path]:
    """Return the erglider.toml in ``start_path`` (default: cwd), or None."""
    directory = start_path or Path.cwd()
    candidate = directory / CONFIG_FILE_NAME
    return candidate if candidate.is_file() else None


def _fallback(message: str) -> ConfigSettings:
    console.print(f"[yellow]Warning:[/yellow] {message}")
    console.print("[yellow]Using default settings[/yellow]")
    return ConfigSettings()


def load_config(config_path: Optional[Path] = None) -> ConfigSettings:
    """Read the ``[erglider]`` table of erglider.toml into ConfigSettings.

    Without an explicit path the working directory is searched. A missing
    file yields empty settings. A file that cannot be read, parsed or
    validated yields empty settings plus a warning on stderr, so a broken
    config never stops a diagram run. Keys the model does not know are
    ignored.

    Args:
        config_path: Config file to read instead of searching the cwd.

    Returns:
        ConfigSettings; fields absent from the file are None.
    """
    if config_path is None:
        config_path = find_config_file()
    if config_path is None:
        return ConfigSettings()

    try:
        with open(config_path, "rb") as f:
            section = tomllib.load(f).get("erglider", {})
    except tomllib.TOMLDecodeError as e:
        return _fallback(f"Failed to parse {config_path}: {e}")
    except OSError as e:
        return _fallback(f"Could not read {config_path}: {e}")

    try:
        return ConfigSettings.model_validate(section)
    except ValidationError as e:
        return _fallback(f"Invalid configuration in {config_path}: {e}")
