"""Tests for ConfigService."""

from pathlib import Path

import pytest

from taskflow.services import ConfigService


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """Create a temporary project directory."""
    project = tmp_path / "project"
    project.mkdir()
    return project


def write_config(project_dir: Path, content: str) -> None:
    (project_dir / "taskflow.yml").write_text(content)


class TestConfigServiceLoading:
    """Tests for ConfigService file loading."""

    def test_default_on_missing_file(self, project_dir: Path):
        """Missing taskflow.yml returns default config."""
        service = ConfigService(project_dir)
        config = service.get_config()

        assert config.api.url == "http://localhost:5001"
        assert config.dashboard.page_size == 10
        assert not service.has_config_error

    def test_load_valid_config(self, project_dir: Path):
        write_config(
            project_dir,
            """
version: 1
api:
  url: https://tasks.example.com/
  timeout: 5
  refresh_delay: 0.25
dashboard:
  page_size: 25
  sort_by: dueDate
  sort_order: asc
  priority: P1
  status: in-progress
""",
        )

        service = ConfigService(project_dir)
        config = service.get_config()

        assert config.api.url == "https://tasks.example.com"
        assert config.api.timeout == 5
        assert config.api.refresh_delay == 0.25
        assert config.dashboard.page_size == 25
        assert config.dashboard.initial_filters().status == "in-progress"
        assert not service.has_config_error

    def test_partial_config_keeps_defaults(self, project_dir: Path):
        write_config(project_dir, "dashboard:\n  page_size: 50\n")

        config = ConfigService(project_dir).get_config()

        assert config.dashboard.page_size == 50
        assert config.api.url == "http://localhost:5001"

    def test_invalid_yaml_falls_back(self, project_dir: Path):
        write_config(project_dir, "api: [unclosed\n")

        service = ConfigService(project_dir)
        config = service.get_config()

        assert config.dashboard.page_size == 10
        assert service.has_config_error
        assert "Invalid YAML" in service.config_error

    def test_invalid_values_fall_back(self, project_dir: Path):
        write_config(project_dir, "dashboard:\n  page_size: 0\n")

        service = ConfigService(project_dir)
        config = service.get_config()

        assert config.dashboard.page_size == 10
        assert service.has_config_error

    def test_bad_url_falls_back(self, project_dir: Path):
        write_config(project_dir, "api:\n  url: localhost:5001\n")

        service = ConfigService(project_dir)
        service.get_config()

        assert service.has_config_error

    def test_empty_file_falls_back(self, project_dir: Path):
        write_config(project_dir, "")

        service = ConfigService(project_dir)
        service.get_config()

        assert service.config_error == "taskflow.yml is empty"

    def test_non_mapping_falls_back(self, project_dir: Path):
        write_config(project_dir, "- just\n- a list\n")

        service = ConfigService(project_dir)
        service.get_config()

        assert service.has_config_error


class TestConfigServiceCaching:
    """Tests for caching and reload."""

    def test_config_is_cached(self, project_dir: Path):
        service = ConfigService(project_dir)

        assert service.get_config() is service.get_config()

    def test_reload_picks_up_changes(self, project_dir: Path):
        service = ConfigService(project_dir)
        assert service.get_config().dashboard.page_size == 10

        write_config(project_dir, "dashboard:\n  page_size: 30\n")
        service.reload()

        assert service.get_config().dashboard.page_size == 30

    def test_reload_clears_error(self, project_dir: Path):
        write_config(project_dir, "")
        service = ConfigService(project_dir)
        service.get_config()
        assert service.has_config_error

        (project_dir / "taskflow.yml").unlink()
        service.reload()
        service.get_config()

        assert not service.has_config_error
