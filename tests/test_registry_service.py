"""
Unit tests for the registry catalog service.
"""

import logging

import pytest

from design_mcp.catalog import Component, Registry, RegistryService

from conftest import write_file


@pytest.fixture
def service(tmp_path, registry_config) -> RegistryService:
    return RegistryService([registry_config], workspace_root=tmp_path)


class TestConstructor:
    def test_initializes_registries_from_config(self, service):
        registries = service.get_all_registries()

        assert len(registries) == 1
        assert registries[0].name == "TestRegistry"
        assert registries[0].install_command == "npm install test-registry"
        assert registries[0].use_cases == ["Testing"]
        assert registries[0].components == []

    def test_warns_when_no_registries(self, tmp_path, caplog):
        with caplog.at_level(logging.WARNING):
            service = RegistryService([], workspace_root=tmp_path)

        assert service.get_all_registries() == []
        assert "No registries found in configuration." in caplog.text

    def test_none_config(self):
        assert RegistryService(None).get_all_registries() == []

    def test_discovers_components(self, demo_service):
        registry = demo_service.get_registry_by_name("Demo")
        assert [c.name for c in registry.components] == ["Button"]

    def test_catalog_is_not_refreshed(self, demo_workspace, demo_service):
        write_file(demo_workspace / "src" / "components" / "ui" / "Card" / "readme.md", "# Card")

        assert demo_service.get_component_by_name("Demo", "Card") is None


class TestLookups:
    def test_get_registry_by_name(self, service):
        registry = service.get_registry_by_name("TestRegistry")
        assert registry is not None
        assert registry.name == "TestRegistry"

    def test_get_registry_by_name_missing(self, service):
        assert service.get_registry_by_name("NonExistent") is None

    def test_get_registry_by_name_first_match(self, service):
        service.add_registry(Registry(name="TestRegistry", description="second"))
        assert service.get_registry_by_name("TestRegistry").description == "A test registry"

    def test_get_components_by_registry_name(self, demo_service):
        components = demo_service.get_components_by_registry_name("Demo")
        assert [c.name for c in components] == ["Button"]

    def test_get_components_for_missing_registry(self, service):
        assert service.get_components_by_registry_name("NonExistent") == []

    def test_get_component_by_name(self, demo_service):
        component = demo_service.get_component_by_name("Demo", "Button")
        assert component is not None
        assert len(component.doc_file_paths) == 1

    def test_get_component_misses_are_logged_separately(self, demo_service, caplog):
        with caplog.at_level(logging.WARNING):
            assert demo_service.get_component_by_name("Nope", "Button") is None
            assert demo_service.get_component_by_name("Demo", "Nope") is None

        assert "Registry not found: Nope" in caplog.text
        assert "Component not found: Nope in registry: Demo" in caplog.text

    def test_empty_component_is_not_found(self, demo_service):
        assert demo_service.get_component_by_name("Demo", "Empty") is None


class TestMutations:
    def test_add_registry(self, service):
        service.add_registry(Registry(name="NewRegistry", description="A new registry"))

        assert len(service.get_all_registries()) == 2
        assert service.get_registry_by_name("NewRegistry").description == "A new registry"

    def test_update_registry(self, service):
        service.update_registry("TestRegistry", Registry(name="TestRegistry", description="Updated description"))

        assert service.get_registry_by_name("TestRegistry").description == "Updated description"
        assert len(service.get_all_registries()) == 1

    def test_update_missing_registry_is_noop(self, service):
        before = list(service.get_all_registries())
        service.update_registry("NonExistent", Registry(name="NonExistent"))

        assert service.get_all_registries() == before
        assert service.get_registry_by_name("NonExistent") is None

    def test_delete_registry(self, service):
        service.delete_registry("TestRegistry")
        assert service.get_all_registries() == []

    def test_delete_missing_registry_is_noop(self, service):
        service.delete_registry("NonExistent")
        assert len(service.get_all_registries()) == 1

    def test_added_components_are_queryable(self, service):
        service.add_registry(Registry(
            name="Manual",
            components=[Component(name="Badge", doc_file_paths=["/tmp/badge.md"])],
        ))

        assert service.get_component_by_name("Manual", "Badge").doc_file_paths == ["/tmp/badge.md"]


class TestGetFileContent:
    def test_reads_file(self, service, tmp_path):
        path = write_file(tmp_path / "file.md", "file content")
        assert service.get_file_content(path) == "file content"
        assert service.get_file_content(str(path)) == "file content"

    def test_missing_file(self, service, caplog):
        with caplog.at_level(logging.WARNING):
            assert service.get_file_content("/path/to/nonexistent.md") == ""
        assert "File not found" in caplog.text

    def test_directory_path(self, service, tmp_path):
        assert service.get_file_content(tmp_path) == ""

    def test_undecodable_file(self, service, tmp_path):
        path = tmp_path / "binary.md"
        path.write_bytes(b"\xff\xfe\x00\x80")
        assert service.get_file_content(path) == ""

    def test_reads_current_disk_state(self, service, tmp_path):
        path = write_file(tmp_path / "live.md", "v1")
        assert service.get_file_content(path) == "v1"
        path.write_text("v2", encoding="utf-8")
        assert service.get_file_content(path) == "v2"
