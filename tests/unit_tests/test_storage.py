"""Tests for disks and the filesystem writing media onto them."""

from pathlib import Path

import pytest

from medialibrary.config import DiskConfig, MediaLibraryConfig
from medialibrary.exceptions import DiskDoesNotExist
from medialibrary.models import MediaRecord
from medialibrary.sources import RemoteRef
from medialibrary.storage import DiskManager, Filesystem, LocalDisk
from tests.unit_tests.fakes import PNG_BYTES, MemoryDisk


@pytest.fixture
def local_disk(tmp_path: Path) -> LocalDisk:
    return LocalDisk("local", tmp_path / "root")


class TestLocalDisk:
    def test_put_file_creates_directories(self, local_disk: LocalDisk, tmp_path: Path):
        source = tmp_path / "source.png"
        source.write_bytes(PNG_BYTES)

        local_disk.put_file(str(source), "12/photo.png")

        assert local_disk.exists("12/photo.png")
        assert local_disk.size("12/photo.png") == len(PNG_BYTES)
        assert local_disk.read("12/photo.png") == PNG_BYTES
        assert local_disk.mime_type("12/photo.png") == "image/png"

    def test_delete_is_idempotent(self, local_disk: LocalDisk, tmp_path: Path):
        source = tmp_path / "a.txt"
        source.write_text("a")
        local_disk.put_file(str(source), "a.txt")

        local_disk.delete("a.txt")
        local_disk.delete("a.txt")

        assert not local_disk.exists("a.txt")

    @pytest.mark.parametrize("path", ["../outside.txt", "1/../../outside.txt"])
    def test_paths_cannot_escape_root(self, local_disk: LocalDisk, path: str):
        with pytest.raises(ValueError, match="escapes the root"):
            local_disk.path(path)

    def test_copy_from_local_disk(self, local_disk: LocalDisk, tmp_path: Path):
        other = LocalDisk("other", tmp_path / "other")
        source = tmp_path / "doc.txt"
        source.write_text("hello")
        other.put_file(str(source), "inbox/doc.txt")

        local_disk.copy_from(other, "inbox/doc.txt", "5/doc.txt")

        assert local_disk.read("5/doc.txt") == b"hello"
        assert other.exists("inbox/doc.txt")

    def test_copy_from_other_backend(self, local_disk: LocalDisk):
        remote = MemoryDisk("remote")
        remote.write("inbox/logo.png", PNG_BYTES, "image/png")

        local_disk.copy_from(remote, "inbox/logo.png", "7/logo.png")

        assert local_disk.read("7/logo.png") == PNG_BYTES


class TestDiskManager:
    def test_builds_configured_disks_once(self, config: MediaLibraryConfig):
        manager = DiskManager(config)
        disk = manager.disk("local")
        assert isinstance(disk, LocalDisk)
        assert manager.disk("local") is disk

    def test_unknown_disk(self, config: MediaLibraryConfig):
        with pytest.raises(DiskDoesNotExist, match="no filesystem disk named `tape`"):
            DiskManager(config).disk("tape")

    def test_unsupported_driver(self, config: MediaLibraryConfig):
        with pytest.raises(ValueError, match="Unsupported driver 'memory'"):
            DiskManager(config).disk("remote")

    def test_registered_driver(self, config: MediaLibraryConfig):
        created = []

        def factory(name: str, disk_config: DiskConfig) -> MemoryDisk:
            created.append((name, disk_config.driver))
            return MemoryDisk(name)

        manager = DiskManager(config)
        manager.register_driver("memory", factory)

        assert isinstance(manager.disk("remote"), MemoryDisk)
        assert created == [("remote", "memory")]

    def test_local_driver_needs_root(self):
        config = MediaLibraryConfig(DISK_NAME="local", DISKS={"local": {"driver": "local"}})
        with pytest.raises(ValueError, match="requires a root directory"):
            DiskManager(config).disk("local")

    def test_set_disk(self, config: MediaLibraryConfig):
        manager = DiskManager(config)
        replacement = MemoryDisk("local")
        manager.set_disk(replacement)
        assert manager.disk("local") is replacement


class TestFilesystem:
    def test_add_stores_under_record_id(self, disks: DiskManager, tmp_path: Path):
        source = tmp_path / "upload.png"
        source.write_bytes(PNG_BYTES)
        record = MediaRecord(id=42, disk="remote", file_name="photo.png")

        Filesystem(disks).add(str(source), record, "photo.png")

        remote = disks.disk("remote")
        assert remote.read("42/photo.png") == PNG_BYTES
        assert record.get_path() == "42/photo.png"

    def test_add_remote(self, disks: DiskManager, remote_disk: MemoryDisk):
        remote_disk.write("inbox/a.pdf", b"%PDF-1.7", "application/pdf")
        record = MediaRecord(id=3, disk="local", file_name="a.pdf")

        Filesystem(disks).add_remote(RemoteRef("remote", "inbox/a.pdf"), record, "a.pdf")

        assert disks.disk("local").read("3/a.pdf") == b"%PDF-1.7"
        assert remote_disk.exists("inbox/a.pdf")

    def test_record_headers_override_default_headers(
        self, disks: DiskManager, remote_disk: MemoryDisk, tmp_path: Path
    ):
        source = tmp_path / "a.txt"
        source.write_text("a")
        record = MediaRecord(id=1, disk="remote", file_name="a.txt")
        record.set_custom_headers({"ACL": "private"})

        filesystem = Filesystem(disks)
        filesystem.add_custom_remote_headers({"ACL": "public-read", "Cache-Control": "no-cache"})
        filesystem.add(str(source), record, "a.txt")

        assert remote_disk.headers["1/a.txt"] == {"ACL": "private", "Cache-Control": "no-cache"}
