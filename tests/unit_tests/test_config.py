from pathlib import Path

import pytest
from pydantic import ValidationError

from medialibrary.config import (
    DEFAULT_MAX_FILE_SIZE,
    DiskConfig,
    MediaLibraryConfig,
    TelemetryConfig,
    import_string,
)
from medialibrary.models import MediaRecord
from medialibrary.responsive_images import GenerateResponsiveImagesJob


class TestMediaLibraryConfig:
    """Tests for MediaLibraryConfig construction and validation."""

    def test_defaults(self) -> None:
        config = MediaLibraryConfig()
        assert config.max_file_size == DEFAULT_MAX_FILE_SIZE
        assert config.disk_name == "local"
        assert config.queue_name is None
        assert config.media_model_class() is MediaRecord
        assert config.responsive_images_job_class() is GenerateResponsiveImagesJob
        assert config.telemetry.enabled is False

    def test_aliases(self) -> None:
        config = MediaLibraryConfig.model_validate(
            {
                "MAX_FILE_SIZE": 500,
                "DISK_NAME": "media",
                "QUEUE_NAME": "images",
                "DISKS": {"media": {"root": "/srv/media"}},
            }
        )
        assert config.max_file_size == 500
        assert config.queue_name == "images"
        assert config.disks["media"] == DiskConfig(driver="local", root="/srv/media")
        assert config.has_disk("media")
        assert not config.has_disk("other")

    def test_default_disk_must_be_registered(self) -> None:
        with pytest.raises(ValidationError, match="not one of the configured disks"):
            MediaLibraryConfig.model_validate(
                {"DISK_NAME": "missing", "DISKS": {"local": {"root": "/tmp"}}}
            )

    def test_max_file_size_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            MediaLibraryConfig.model_validate({"MAX_FILE_SIZE": 0})

    def test_frozen(self) -> None:
        config = MediaLibraryConfig()
        with pytest.raises(ValidationError):
            config.disk_name = "other"  # type: ignore[misc]


class TestParseYaml:
    def test_parse_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "medialibrary.yml"
        path.write_text(
            "MAX_FILE_SIZE: 2048\n"
            "DISK_NAME: public\n"
            "DISKS:\n"
            "  public:\n"
            "    driver: local\n"
            "    root: /srv/public\n"
            "TELEMETRY:\n"
            "  enabled: false\n"
        )
        config = MediaLibraryConfig.parse_yaml(str(path))
        assert config.max_file_size == 2048
        assert config.disks["public"].root == "/srv/public"

    def test_empty_yaml_gives_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yml"
        path.write_text("")
        assert MediaLibraryConfig.parse_yaml(str(path)).disk_name == "local"

    def test_missing_file_exits(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit):
            MediaLibraryConfig.parse_yaml(str(tmp_path / "nope.yml"))
        assert "Config file not found" in capsys.readouterr().err


class TestTelemetryConfig:
    @pytest.mark.parametrize("endpoint", ["ftp://collector", "localhost:4317", "http://"])
    def test_invalid_endpoint(self, endpoint: str) -> None:
        with pytest.raises(ValidationError, match="Invalid endpoint"):
            TelemetryConfig(enabled=True, endpoint=endpoint)

    def test_valid_endpoint(self) -> None:
        config = TelemetryConfig(enabled=True, endpoint="http://localhost:4317")
        assert config.endpoint == "http://localhost:4317"


class TestImportString:
    def test_imports_attribute(self) -> None:
        assert import_string("medialibrary.models.MediaRecord") is MediaRecord

    @pytest.mark.parametrize("path", ["MediaRecord", "medialibrary.models.Nope"])
    def test_invalid_paths(self, path: str) -> None:
        with pytest.raises(ImportError):
            import_string(path)
