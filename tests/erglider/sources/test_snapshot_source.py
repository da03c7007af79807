"""Tests for the snapshot directory source."""

import pytest

from erglider.global_models import MetadataStage
from erglider.sources.base import SourceError
from erglider.sources.snapshot import SnapshotSource


class TestSnapshotConfigure:
    """Tests for SnapshotSource.configure."""

    def test_directory_required(self):
        """Test that a missing directory setting is an error."""
        with pytest.raises(SourceError, match="Snapshot directory is required"):
            SnapshotSource().configure({})

    def test_directory_must_exist(self, tmp_path):
        """Test that a missing directory is an error."""
        with pytest.raises(SourceError, match="not found"):
            SnapshotSource().configure({"directory": str(tmp_path / "missing")})

    def test_unconfigured_query(self):
        """Test that querying before configure() fails."""
        with pytest.raises(SourceError, match="not configured"):
            SnapshotSource().run_query("SELECT 1", MetadataStage.TABLES)


class TestSnapshotRunQuery:
    """Tests for SnapshotSource.run_query."""

    def test_reads_stage_file(self, tmp_path):
        """Test that each stage reads its own file."""
        (tmp_path / "tables.tsv").write_text("TABLE_NAME\nusers\n", encoding="utf-8")
        (tmp_path / "foreign_keys.tsv").write_text("TABLE_NAME\n", encoding="utf-8")

        source = SnapshotSource()
        source.configure({"directory": str(tmp_path)})

        assert source.run_query("ignored", MetadataStage.TABLES) == "TABLE_NAME\nusers\n"
        assert source.run_query("ignored", MetadataStage.FOREIGN_KEYS) == "TABLE_NAME\n"

    def test_missing_stage_file_is_empty(self, tmp_path):
        """Test that a missing stage file is an empty result."""
        source = SnapshotSource()
        source.configure({"directory": str(tmp_path)})
        assert source.run_query("ignored", MetadataStage.COLUMNS) == ""

    def test_stage_path(self, tmp_path):
        """Test the stage file naming."""
        source = SnapshotSource()
        source.configure({"directory": str(tmp_path)})
        assert source.stage_path(MetadataStage.TABLE_STATS) == tmp_path / "table_stats.tsv"

    def test_undecodable_file(self, tmp_path):
        """Test that a non-UTF-8 file is a source error."""
        (tmp_path / "tables.tsv").write_bytes(b"\xff\xfe\xfa")
        source = SnapshotSource()
        source.configure({"directory": str(tmp_path)})
        with pytest.raises(SourceError, match="Could not read snapshot file"):
            source.run_query("ignored", MetadataStage.TABLES)
