"""Tests for the three standard property sources."""

import os
from unittest.mock import patch

import pytest

from konfig import system
from konfig.converters import TypeTag, converter_for
from konfig.errors import ConversionError, PropertiesFormatError
from konfig.models import SourceKind
from konfig.sources import (
    ApplicationPropertiesSource,
    EnvironmentSource,
    PropertySource,
    SystemPropertiesSource,
)


class DictSource(PropertySource):
    def __init__(self, values):
        self._values = dict(values)

    @property
    def kind(self) -> SourceKind:
        return SourceKind.APP_PROPERTIES

    def has_key(self, key: str) -> bool:
        return key in self._values

    def raw_value(self, key: str) -> str | None:
        return self._values.get(key)

    def all_entries(self) -> dict[str, str]:
        return dict(self._values)


class TestPropertySourceBase:
    def test_get_value_converts(self):
        source = DictSource({"port": "8080"})
        assert source.get_value("port", converter_for(TypeTag.INTEGER)) == 8080
        assert source.get_value("missing", converter_for(TypeTag.INTEGER)) is None

    def test_get_value_propagates_conversion_errors(self):
        source = DictSource({"port": "eighty"})
        with pytest.raises(ConversionError):
            source.get_value("port", converter_for(TypeTag.INTEGER))

    def test_metadata(self):
        meta = DictSource({"a": "1"}).metadata()
        assert meta.source == SourceKind.APP_PROPERTIES
        assert meta.values == {"a": "1"}


class TestSystemPropertiesSource:
    def test_reflects_runtime_changes(self):
        """Test that values set after construction are visible."""
        source = SystemPropertiesSource()
        assert not source.has_key("late.key")

        system.set_property("late.key", "value")
        assert source.has_key("late.key")
        assert source.raw_value("late.key") == "value"
        assert source.all_entries() == {"late.key": "value"}

        system.clear_property("late.key")
        assert source.raw_value("late.key") is None

    def test_kind(self):
        assert SystemPropertiesSource().kind == SourceKind.SYSTEM_PROPERTIES


class TestEnvironmentSource:
    def test_explicit_mapping(self):
        source = EnvironmentSource({"HOME_DIR": "/home/app", "EMPTY": ""})
        assert source.kind == SourceKind.ENV_PROPERTIES
        assert source.raw_value("HOME_DIR") == "/home/app"
        assert source.has_key("EMPTY")
        assert source.raw_value("EMPTY") == ""
        assert not source.has_key("MISSING")
        assert source.raw_value("MISSING") is None

    def test_captured_at_construction(self):
        """Test that later changes to os.environ are not seen."""
        with patch.dict(os.environ, {"KONFIG_TEST_VAR": "before"}):
            source = EnvironmentSource()
            os.environ["KONFIG_TEST_VAR"] = "after"
            os.environ["KONFIG_TEST_NEW"] = "new"
            assert source.raw_value("KONFIG_TEST_VAR") == "before"
            assert not source.has_key("KONFIG_TEST_NEW")

    def test_keys_match_literally(self):
        """Test that a dotted key does not match its upper-case underscore form."""
        source = EnvironmentSource({"APP_DB_URL": "jdbc:x", "app.mode": "dotted"})
        assert not source.has_key("app.db-url")
        assert source.raw_value("app.db.url") is None
        assert source.raw_value("app.mode") == "dotted"
        assert not source.has_key("APP_MODE")
        assert source.all_entries() == {"APP_DB_URL": "jdbc:x", "app.mode": "dotted"}


class TestApplicationPropertiesSource:
    def test_loads_application_properties(self, tmp_path, write_properties):
        write_properties("application.properties", "app.name=demo\napp.port=8080\n")
        source = ApplicationPropertiesSource(tmp_path)

        assert source.kind == SourceKind.APP_PROPERTIES
        assert source.raw_value("app.name") == "demo"
        assert source.has_key("app.port")
        assert source.loaded_files == (tmp_path / "application.properties",)

    def test_missing_files_give_empty_source(self, tmp_path):
        """Test that a service without bundled properties still works."""
        source = ApplicationPropertiesSource(tmp_path / "nowhere", profiles=["prod-gcp"])
        assert source.all_entries() == {}
        assert source.loaded_files == ()
        assert not source.has_key("anything")

    def test_profiles_override_in_order(self, tmp_path, write_properties):
        write_properties("application.properties", "a=base\nb=base\nc=base\n")
        write_properties("application-dev-gcp.properties", "b=cluster\nc=cluster\n")
        write_properties("application-dev-gcp-team.properties", "c=namespace\n")

        source = ApplicationPropertiesSource(tmp_path, ["dev-gcp", "dev-gcp-team"])
        assert source.all_entries() == {"a": "base", "b": "cluster", "c": "namespace"}
        assert len(source.loaded_files) == 3

    def test_profile_without_base_file(self, tmp_path, write_properties):
        write_properties("application-local.properties", "only=local\n")
        source = ApplicationPropertiesSource(tmp_path, ["local"])
        assert source.raw_value("only") == "local"

    def test_loaded_once(self, tmp_path, write_properties):
        """Test that later file changes are not picked up."""
        path = write_properties("application.properties", "a=1\n")
        source = ApplicationPropertiesSource(tmp_path)
        path.write_text("a=2\n", encoding="utf-8")
        assert source.raw_value("a") == "1"

    def test_resource_dir_from_environment(self, tmp_path, write_properties):
        write_properties("application.properties", "from.env.dir=yes\n")
        with patch.dict(os.environ, {"KONFIG_RESOURCE_DIR": str(tmp_path)}):
            source = ApplicationPropertiesSource()
        assert source.resource_dir == tmp_path
        assert source.raw_value("from.env.dir") == "yes"

    def test_resource_dir_from_given_mapping(self, tmp_path, write_properties):
        write_properties("application.properties", "from.mapping=yes\n")
        with patch.dict(os.environ, {"KONFIG_RESOURCE_DIR": str(tmp_path / "elsewhere")}):
            source = ApplicationPropertiesSource(environ={"KONFIG_RESOURCE_DIR": str(tmp_path)})
        assert source.resource_dir == tmp_path
        assert source.raw_value("from.mapping") == "yes"

    def test_malformed_file_fails_at_construction(self, tmp_path, write_properties):
        write_properties("application.properties", "bad=\\uXYZW\n")
        with pytest.raises(PropertiesFormatError):
            ApplicationPropertiesSource(tmp_path)

    def test_all_entries_is_a_copy(self, tmp_path, write_properties):
        write_properties("application.properties", "a=1\n")
        source = ApplicationPropertiesSource(tmp_path)
        source.all_entries()["a"] = "changed"
        assert source.raw_value("a") == "1"
