"""Snapshot directory source.

Serves catalog output captured earlier (for example with
``mysql --batch -e "SELECT ..." > tables.tsv``) from one file per stage:
``tables.tsv``, ``columns.tsv``, ``foreign_keys.tsv`` and so on.
"""

from pathlib import Path
from typing import Any, Dict, Optional

from erglider.global_models import MetadataStage
from erglider.sources.base import MetadataSource, SourceError

SNAPSHOT_SUFFIX = ".tsv"


class SnapshotSource(MetadataSource):
    """Metadata source that reads pre-captured query output from disk.

    The SQL text is ignored; each stage maps to ``<directory>/<stage>.tsv``.
    A missing stage file is treated as an empty result.

    Configuration:
        - directory (required): Folder holding the .tsv files
    """

    def __init__(self) -> None:
        self._directory: Optional[Path] = None

    @property
    def name(self) -> str:
        return "snapshot"

    def configure(self, config: Optional[Dict[str, Any]] = None) -> None:
        """Set the snapshot directory.

        Raises:
            SourceError: If no directory is given or it does not exist.
        """
        config = config or {}
        directory = config.get("directory")
        if not directory:
            raise SourceError(
                "Snapshot directory is required. Set erglider.source.snapshot.directory "
                "in erglider.toml or pass --snapshot-dir."
            )

        path = Path(directory)
        if not path.is_dir():
            raise SourceError(f"Snapshot directory not found: {path}")
        self._directory = path

    def stage_path(self, stage: MetadataStage) -> Path:
        """Return the file that holds output for a stage."""
        if self._directory is None:
            raise SourceError("Snapshot source not configured. Call configure() first.")
        return self._directory / f"{stage.value}{SNAPSHOT_SUFFIX}"

    def run_query(self, sql: str, stage: MetadataStage) -> str:
        path = self.stage_path(stage)
        if not path.exists():
            return ""
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise SourceError(f"Could not read snapshot file {path}: {e}") from e
