"""Tests for the metadata source registry."""

import pytest

from erglider.global_models import MetadataStage
from erglider.sources.base import MetadataSource, SourceError
from erglider.sources.mysql import MysqlCliSource
from erglider.sources.registry import (
    clear_registry,
    get_source,
    list_sources,
    register_source,
)
from erglider.sources.snapshot import SnapshotSource


class EchoSource(MetadataSource):
    @property
    def name(self) -> str:
        return "echo"

    def run_query(self, sql: str, stage: MetadataStage) -> str:
        return sql


class TestMetadataSourceBase:
    """Tests for the MetadataSource ABC."""

    def test_cannot_instantiate_abstract(self):
        """Test that the base class cannot be instantiated."""
        with pytest.raises(TypeError):
            MetadataSource()  # type: ignore[abstract]

    def test_configure_default_is_noop(self):
        """Test that configure() is optional for subclasses."""
        source = EchoSource()
        source.configure({"anything": 1})
        assert source.run_query("SELECT 1", MetadataStage.TABLES) == "SELECT 1"


class TestGetSource:
    """Tests for get_source."""

    def test_unknown_source_raises_error(self):
        """Test that an unknown source raises SourceError."""
        with pytest.raises(SourceError) as exc_info:
            get_source("oracle")
        assert "unknown source" in str(exc_info.value).lower()
        assert "available" in str(exc_info.value).lower()

    def test_returns_new_instance_each_call(self):
        """Test that get_source returns a new instance each call."""
        register_source("echo_instance", EchoSource)
        try:
            assert get_source("echo_instance") is not get_source("echo_instance")
        finally:
            clear_registry()

    def test_builtin_sources_discovered(self):
        """Test that the built-in sources come from entry points."""
        assert isinstance(get_source("mysql"), MysqlCliSource)
        assert isinstance(get_source("snapshot"), SnapshotSource)


class TestListSources:
    """Tests for list_sources."""

    def test_list_is_sorted(self):
        """Test that the list is sorted."""
        sources = list_sources()
        assert sources == sorted(sources)

    def test_builtins_listed(self):
        """Test that built-in sources are listed."""
        sources = list_sources()
        assert "mysql" in sources
        assert "snapshot" in sources


class TestRegisterSource:
    """Tests for register_source."""

    def test_register_and_list(self):
        """Test that a registered source is listed and retrievable."""
        register_source("echo", EchoSource)
        try:
            assert "echo" in list_sources()
            assert get_source("echo").name == "echo"
        finally:
            clear_registry()

    def test_register_invalid_class(self):
        """Test that registering a non-source class raises ValueError."""
        with pytest.raises(ValueError):
            register_source("bad", str)  # type: ignore[arg-type]

    def test_clear_registry_rediscovers(self):
        """Test that clearing drops programmatic registrations only."""
        register_source("echo_cleared", EchoSource)
        clear_registry()
        sources = list_sources()
        assert "echo_cleared" not in sources
        assert "mysql" in sources
