"""Configuration module for the media library.

This module defines the configuration models and the YAML parsing logic.
Configuration is an explicit value object handed to ``MediaLibrary``; nothing
in the package reads global settings.
"""

import importlib
import sys
import typing as t

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024


class StrictBaseModel(BaseModel):
    """Base model with immutable (frozen) configuration."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class DiskConfig(StrictBaseModel):
    """Configuration for a single storage disk.

    Attributes:
        driver: Storage driver name. Only ``local`` ships with the library;
            other drivers must be registered on the ``DiskManager``.
        root: Root directory for the ``local`` driver.
    """

    driver: str = Field(default="local", alias="driver")
    root: t.Optional[str] = Field(default=None, alias="root")


class TelemetryConfig(StrictBaseModel):
    """OpenTelemetry configuration for attach tracing.

    Attributes:
        enabled: Enable or disable telemetry tracing
        endpoint: OTLP endpoint URL (e.g., http://localhost:4317)
        console_export: Export traces to console for debugging
        timeout: Timeout in seconds for exporter (default: 10)
        service_name: Service name reported on the trace resource
    """

    enabled: bool = Field(default=False, alias="enabled")
    endpoint: t.Optional[str] = Field(default=None, alias="endpoint")
    console_export: bool = Field(default=False, alias="console_export")
    timeout: int = Field(default=10, alias="timeout", gt=0)
    service_name: str = Field(default="medialibrary", alias="service_name")

    @field_validator("endpoint")
    @classmethod
    def validate_endpoint(cls, v: t.Optional[str]) -> t.Optional[str]:
        """Validate endpoint URL format."""
        if v is None:
            return v

        from urllib.parse import urlparse

        parsed = urlparse(v)
        if parsed.scheme not in ("http", "https") or not parsed.hostname:
            raise ValueError(f"Invalid endpoint: '{v}'. Must be http(s)://host[:port]")

        return v


class MediaLibraryConfig(StrictBaseModel):
    """Main media library configuration.

    Attributes:
        max_file_size: Largest accepted file in bytes
        disk_name: Disk used when neither the caller nor the collection picks one
        cloud_disk: Disk used by ``to_media_collection_on_cloud_disk``
        disks: Registry of valid disk names
        media_model: Dotted path of the media record class to instantiate
        responsive_images_job: Dotted path of the responsive images job class
        queue_name: Optional queue responsive image jobs are routed to
        telemetry: OpenTelemetry configuration
    """

    max_file_size: int = Field(default=DEFAULT_MAX_FILE_SIZE, alias="MAX_FILE_SIZE", gt=0)
    disk_name: str = Field(default="local", alias="DISK_NAME")
    cloud_disk: t.Optional[str] = Field(default=None, alias="CLOUD_DISK")
    disks: dict[str, DiskConfig] = Field(default_factory=dict, alias="DISKS")
    media_model: str = Field(default="medialibrary.models.MediaRecord", alias="MEDIA_MODEL")
    responsive_images_job: str = Field(
        default="medialibrary.responsive_images.GenerateResponsiveImagesJob",
        alias="RESPONSIVE_IMAGES_JOB",
    )
    queue_name: t.Optional[str] = Field(default=None, alias="QUEUE_NAME")
    telemetry: TelemetryConfig = Field(default_factory=TelemetryConfig, alias="TELEMETRY")

    @model_validator(mode="after")
    def validate_default_disk(self) -> "MediaLibraryConfig":
        """Default disk must be registered when a registry is given."""
        if self.disks and self.disk_name not in self.disks:
            raise ValueError(
                f"Default disk '{self.disk_name}' is not one of the configured disks: "
                f"{sorted(self.disks)}"
            )
        return self

    def has_disk(self, disk_name: str) -> bool:
        """Check whether ``disk_name`` is a registered disk."""
        return disk_name in self.disks

    def media_model_class(self) -> type:
        return import_string(self.media_model)

    def responsive_images_job_class(self) -> type:
        return import_string(self.responsive_images_job)

    @classmethod
    def parse_yaml(cls, path: str) -> "MediaLibraryConfig":
        """Parse configuration from YAML file.

        Args:
            path: Path to YAML configuration file

        Returns:
            Validated MediaLibraryConfig instance

        Raises:
            SystemExit: If config file is not found
        """
        try:
            with open(path, "r") as f:
                return cls.model_validate(yaml.safe_load(f) or {})
        except FileNotFoundError:
            print(f"Config file not found: {path}", file=sys.stderr)
            raise SystemExit(1)


def import_string(dotted_path: str) -> t.Any:
    """Import a class or attribute from a ``package.module.Name`` path."""
    module_name, _, attribute = dotted_path.rpartition(".")
    if not module_name:
        raise ImportError(f"'{dotted_path}' is not a dotted module path")
    module = importlib.import_module(module_name)
    try:
        return getattr(module, attribute)
    except AttributeError as e:
        raise ImportError(f"Module '{module_name}' has no attribute '{attribute}'") from e
