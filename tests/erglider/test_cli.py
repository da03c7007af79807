"""Tests for CLI commands."""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from erglider.cli import app

runner = CliRunner()

TABLES_TSV = "TABLE_NAME\nUsers\nOrders\n"

COLUMNS_TSV = (
    "TABLE_NAME\tCOLUMN_NAME\tCOLUMN_TYPE\tIS_NULLABLE\tCOLUMN_KEY\n"
    "Users\tid\tint(11)\tNO\tPRI\n"
    "Users\temail\tvarchar(255)\tYES\t\n"
    "Orders\tid\tint(11)\tNO\tPRI\n"
    "Orders\tuser_id\tint(11)\tNO\tMUL\n"
)

FOREIGN_KEYS_TSV = (
    "TABLE_NAME\tCOLUMN_NAME\tREFERENCED_TABLE_NAME\tREFERENCED_COLUMN_NAME\n"
    "Orders\tuser_id\tUsers\tid\n"
)


@pytest.fixture
def snapshot_dir(tmp_path: Path) -> Path:
    """Create a snapshot directory for a two-table schema."""
    directory = tmp_path / "catalog"
    directory.mkdir()
    (directory / "tables.tsv").write_text(TABLES_TSV, encoding="utf-8")
    (directory / "columns.tsv").write_text(COLUMNS_TSV, encoding="utf-8")
    (directory / "foreign_keys.tsv").write_text(FOREIGN_KEYS_TSV, encoding="utf-8")
    (directory / "schema.tsv").write_text(
        "database_name\tcharset_name\tcollation_name\n"
        "shop\tutf8mb4\tutf8mb4_unicode_ci\n",
        encoding="utf-8",
    )
    (directory / "summary.tsv").write_text(
        "table_count\testimated_rows\ttotal_size_mb\n2\t150\t0.08\n",
        encoding="utf-8",
    )
    (directory / "table_stats.tsv").write_text(
        "TABLE_NAME\tENGINE\tTABLE_ROWS\tsize_mb\tCREATE_TIME\tUPDATE_TIME\n"
        "Orders\tInnoDB\t30\t0.03\tNULL\tNULL\n"
        "Users\tInnoDB\t120\t0.05\tNULL\tNULL\n",
        encoding="utf-8",
    )
    return directory


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path: Path, monkeypatch):
    """Run every command from an empty directory so no erglider.toml is picked up."""
    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    return workdir


class TestDiagramCommand:
    """Tests for the diagram command."""

    def test_diagram_basic(self, snapshot_dir):
        """Test a diagram from a snapshot directory."""
        result = runner.invoke(
            app, ["diagram", "shop", "--snapshot-dir", str(snapshot_dir)]
        )

        assert result.exit_code == 0
        assert "%% database: shop" in result.stdout
        assert "erDiagram" in result.stdout
        assert "        int11 id PK" in result.stdout
        assert "        int11 user_id FK" in result.stdout
        assert '    Users ||--o{ Orders : "user_id"' in result.stdout

    def test_diagram_database_whitespace_trimmed(self, snapshot_dir):
        """Test that surrounding whitespace in the database name is ignored."""
        result = runner.invoke(
            app, ["diagram", " shop ", "--snapshot-dir", str(snapshot_dir)]
        )

        assert result.exit_code == 0
        assert "%% database: shop" in result.stdout

    def test_diagram_no_show_columns(self, snapshot_dir):
        """Test that --no-show-columns drops attribute blocks."""
        result = runner.invoke(
            app,
            ["diagram", "shop", "--snapshot-dir", str(snapshot_dir), "--no-show-columns"],
        )

        assert result.exit_code == 0
        assert "Users {" not in result.stdout
        assert '    Users ||--o{ Orders : "user_id"' in result.stdout

    def test_diagram_no_show_types(self, snapshot_dir):
        """Test that --no-show-types uses the generic token."""
        result = runner.invoke(
            app,
            ["diagram", "shop", "--snapshot-dir", str(snapshot_dir), "--no-show-types"],
        )

        assert result.exit_code == 0
        assert "        string email" in result.stdout
        assert "varchar255" not in result.stdout

    def test_diagram_markdown(self, snapshot_dir):
        """Test markdown output."""
        result = runner.invoke(
            app,
            ["diagram", "shop", "--snapshot-dir", str(snapshot_dir), "-f", "markdown"],
        )

        assert result.exit_code == 0
        assert "```mermaid" in result.stdout

    def test_diagram_json_to_file(self, snapshot_dir, tmp_path):
        """Test JSON output written to a file."""
        output_file = tmp_path / "schema.json"
        result = runner.invoke(
            app,
            [
                "diagram",
                "shop",
                "--snapshot-dir",
                str(snapshot_dir),
                "-f",
                "json",
                "-o",
                str(output_file),
            ],
        )

        assert result.exit_code == 0
        assert "Success" in result.stdout
        data = json.loads(output_file.read_text(encoding="utf-8"))
        assert data["tables"] == ["Users", "Orders"]
        assert data["relationship_count"] == 1

    def test_diagram_table_filter(self, snapshot_dir, tmp_path):
        """Test that --tables limits the diagram and keeps the dangling edge."""
        output_file = tmp_path / "orders.mmd"
        result = runner.invoke(
            app,
            [
                "diagram",
                "shop",
                "--snapshot-dir",
                str(snapshot_dir),
                "--tables",
                "Orders",
                "-o",
                str(output_file),
            ],
        )

        assert result.exit_code == 0
        content = output_file.read_text(encoding="utf-8")
        assert "    Orders {" in content
        assert "    Users {" not in content
        assert '    Users ||--o{ Orders : "user_id"' in content

    def test_diagram_invalid_output_format(self, snapshot_dir):
        """Test that an unknown format fails before any query."""
        result = runner.invoke(
            app,
            ["diagram", "shop", "--snapshot-dir", str(snapshot_dir), "-f", "svg"],
        )

        assert result.exit_code == 1
        assert "Invalid output format" in result.output

    def test_diagram_invalid_database(self, snapshot_dir):
        """Test that a hyphenated database name gets a suggestion."""
        result = runner.invoke(
            app, ["diagram", "my-shop", "--snapshot-dir", str(snapshot_dir)]
        )

        assert result.exit_code == 1
        assert "Invalid database" in result.output
        assert "my_shop" in result.output

    def test_diagram_invalid_table(self, snapshot_dir):
        """Test that an invalid --tables entry is rejected."""
        result = runner.invoke(
            app,
            [
                "diagram",
                "shop",
                "--snapshot-dir",
                str(snapshot_dir),
                "--tables",
                "Users,drop table",
            ],
        )

        assert result.exit_code == 1
        assert "Invalid tables" in result.output

    def test_diagram_unmatched_filter(self, snapshot_dir):
        """Test that a filter matching nothing is reported."""
        result = runner.invoke(
            app,
            ["diagram", "shop", "--snapshot-dir", str(snapshot_dir), "--tables", "ghost"],
        )

        assert result.exit_code == 1
        assert "No tables found" in result.output

    def test_diagram_missing_snapshot_dir(self, tmp_path):
        """Test that a missing snapshot directory is reported."""
        result = runner.invoke(
            app, ["diagram", "shop", "--snapshot-dir", str(tmp_path / "missing")]
        )

        assert result.exit_code == 1
        assert "Snapshot directory not found" in result.output

    def test_diagram_unknown_source(self):
        """Test that an unknown source name is reported."""
        result = runner.invoke(app, ["diagram", "shop", "--source", "oracle"])

        assert result.exit_code == 1
        assert "Unknown source" in result.output

    def test_diagram_from_config(self, snapshot_dir, isolated_cwd):
        """Test that erglider.toml supplies source and options."""
        (isolated_cwd / "erglider.toml").write_text(
            f"""
[erglider]
source_type = "snapshot"
output_format = "markdown"
show_types = false

[erglider.source.snapshot]
directory = "{snapshot_dir.as_posix()}"
""",
            encoding="utf-8",
        )

        result = runner.invoke(app, ["diagram", "shop"])

        assert result.exit_code == 0
        assert "```mermaid" in result.stdout
        assert "        string id PK" in result.stdout

    def test_cli_overrides_config(self, snapshot_dir, isolated_cwd):
        """Test that CLI options win over erglider.toml."""
        (isolated_cwd / "erglider.toml").write_text(
            f"""
[erglider]
source_type = "snapshot"
output_format = "markdown"
show_types = false

[erglider.source.snapshot]
directory = "{snapshot_dir.as_posix()}"
""",
            encoding="utf-8",
        )

        result = runner.invoke(
            app, ["diagram", "shop", "-f", "mermaid", "--show-types"]
        )

        assert result.exit_code == 0
        assert "```mermaid" not in result.stdout
        assert "        int11 id PK" in result.stdout


class TestInspectCommand:
    """Tests for the inspect command."""

    def test_inspect_text(self, snapshot_dir):
        """Test the text report."""
        result = runner.invoke(
            app, ["inspect", "shop", "--snapshot-dir", str(snapshot_dir)]
        )

        assert result.exit_code == 0
        assert "utf8mb4_unicode_ci" in result.stdout
        assert "Users" in result.stdout
        assert "InnoDB" in result.stdout

    def test_inspect_json(self, snapshot_dir):
        """Test the JSON report."""
        result = runner.invoke(
            app, ["inspect", "shop", "--snapshot-dir", str(snapshot_dir), "-f", "json"]
        )

        assert result.exit_code == 0
        assert '"charset": "utf8mb4"' in result.stdout
        assert '"table_count": 2' in result.stdout

    def test_inspect_database_whitespace_trimmed(self, snapshot_dir):
        """Test that a padded database name is accepted."""
        result = runner.invoke(
            app, ["inspect", "  shop", "--snapshot-dir", str(snapshot_dir), "-f", "json"]
        )

        assert result.exit_code == 0
        assert '"database": "shop"' in result.stdout

    def test_inspect_missing_database(self, tmp_path):
        """Test a database with no catalog rows."""
        empty = tmp_path / "empty"
        empty.mkdir()
        result = runner.invoke(app, ["inspect", "ghost", "--snapshot-dir", str(empty)])

        assert result.exit_code == 0
        assert "No schema metadata found" in result.stdout

    def test_inspect_invalid_format(self, snapshot_dir):
        """Test that an unknown format is rejected."""
        result = runner.invoke(
            app, ["inspect", "shop", "--snapshot-dir", str(snapshot_dir), "-f", "xml"]
        )

        assert result.exit_code == 1
        assert "Invalid output format" in result.output


class TestRelatedCommand:
    """Tests for the related command."""

    def test_related_parents(self, snapshot_dir):
        """Test the tables a child references."""
        result = runner.invoke(
            app,
            ["related", "shop", "--table", "Orders", "--snapshot-dir", str(snapshot_dir)],
        )

        assert result.exit_code == 0
        assert "Users" in result.stdout
        assert "Total: 1 table(s)" in result.stdout

    def test_related_children_json(self, snapshot_dir):
        """Test the tables referencing a parent, as JSON."""
        result = runner.invoke(
            app,
            [
                "related",
                "shop",
                "--table",
                "users",
                "--direction",
                "children",
                "-f",
                "json",
                "--snapshot-dir",
                str(snapshot_dir),
            ],
        )

        assert result.exit_code == 0
        assert '"direction": "children"' in result.stdout
        assert '"name": "Orders"' in result.stdout

    def test_related_database_whitespace_trimmed(self, snapshot_dir):
        """Test that a padded database name is accepted."""
        result = runner.invoke(
            app,
            ["related", "shop ", "--table", "Orders", "--snapshot-dir", str(snapshot_dir)],
        )

        assert result.exit_code == 0
        assert "Users" in result.stdout

    def test_related_none(self, snapshot_dir):
        """Test a table with no parents."""
        result = runner.invoke(
            app,
            ["related", "shop", "--table", "Users", "--snapshot-dir", str(snapshot_dir)],
        )

        assert result.exit_code == 0
        assert "No referenced tables found" in result.stdout

    def test_related_unknown_table(self, snapshot_dir):
        """Test that an unknown table is reported."""
        result = runner.invoke(
            app,
            ["related", "shop", "--table", "ghost", "--snapshot-dir", str(snapshot_dir)],
        )

        assert result.exit_code == 1
        assert "not found" in result.output
        assert "Available" in result.output

    def test_related_invalid_direction(self, snapshot_dir):
        """Test that an unknown direction is rejected."""
        result = runner.invoke(
            app,
            [
                "related",
                "shop",
                "--table",
                "Users",
                "--direction",
                "sideways",
                "--snapshot-dir",
                str(snapshot_dir),
            ],
        )

        assert result.exit_code == 1
        assert "Invalid direction" in result.output


class TestSourcesCommand:
    """Tests for the sources command."""

    def test_sources_lists_builtins(self):
        """Test that built-in sources are listed."""
        result = runner.invoke(app, ["sources"])

        assert result.exit_code == 0
        assert "mysql" in result.stdout
        assert "snapshot" in result.stdout
