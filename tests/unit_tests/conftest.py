from pathlib import Path

import pytest

from medialibrary.config import MediaLibraryConfig
from medialibrary.media_library import MediaLibrary
from medialibrary.storage import DiskManager
from tests.unit_tests.fakes import (
    PNG_BYTES,
    FakeTemporaryUploadStore,
    MemoryDisk,
    RecordingDispatcher,
)


@pytest.fixture
def config(tmp_path: Path) -> MediaLibraryConfig:
    """Config with two local disks and one in-memory 'remote' disk."""
    return MediaLibraryConfig.model_validate(
        {
            "MAX_FILE_SIZE": 1024,
            "DISK_NAME": "local",
            "CLOUD_DISK": "remote",
            "DISKS": {
                "local": {"driver": "local", "root": str(tmp_path / "storage" / "local")},
                "public": {"driver": "local", "root": str(tmp_path / "storage" / "public")},
                "remote": {"driver": "memory"},
            },
        }
    )


@pytest.fixture
def disks(config: MediaLibraryConfig) -> DiskManager:
    manager = DiskManager(config)
    manager.register_driver("memory", MemoryDisk)
    return manager


@pytest.fixture
def remote_disk(disks: DiskManager) -> MemoryDisk:
    disk = disks.disk("remote")
    assert isinstance(disk, MemoryDisk)
    return disk


@pytest.fixture
def dispatcher() -> RecordingDispatcher:
    return RecordingDispatcher()


@pytest.fixture
def temporary_uploads() -> FakeTemporaryUploadStore:
    return FakeTemporaryUploadStore()


@pytest.fixture
def library(
    config: MediaLibraryConfig,
    disks: DiskManager,
    dispatcher: RecordingDispatcher,
    temporary_uploads: FakeTemporaryUploadStore,
) -> MediaLibrary:
    return MediaLibrary(config, dispatcher, disks=disks, temporary_uploads=temporary_uploads)


@pytest.fixture
def uploads(tmp_path: Path) -> Path:
    directory = tmp_path / "uploads"
    directory.mkdir()
    return directory


@pytest.fixture
def png_file(uploads: Path) -> Path:
    path = uploads / "my photo#1.png"
    path.write_bytes(PNG_BYTES)
    return path
