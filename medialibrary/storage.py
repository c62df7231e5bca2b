"""Storage disks and the filesystem that copies media onto them.

A ``Disk`` is a named storage backend. ``LocalDisk`` stores files under a root
directory; other drivers (object stores, network shares) subclass ``Disk`` and
are registered on the ``DiskManager``.

``Filesystem`` writes a media record's original bytes to ``record.disk`` under
``{record.id}/{file_name}``.
"""

from __future__ import annotations

import logging
import os
import shutil
from abc import ABC, abstractmethod
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

from typing_extensions import override

from medialibrary.config import DiskConfig, MediaLibraryConfig
from medialibrary.exceptions import DiskDoesNotExist
from medialibrary.mime import detect_mime_type

if TYPE_CHECKING:
    from medialibrary.models import MediaRecord
    from medialibrary.sources import RemoteRef

logger = logging.getLogger(__name__)


class Disk(ABC):
    """Abstract storage backend addressed by relative paths."""

    name: str

    @abstractmethod
    def exists(self, path: str) -> bool:
        pass

    @abstractmethod
    def size(self, path: str) -> int:
        pass

    @abstractmethod
    def mime_type(self, path: str) -> str:
        pass

    @abstractmethod
    def read(self, path: str) -> bytes:
        pass

    @abstractmethod
    def delete(self, path: str) -> None:
        pass

    @abstractmethod
    def put_file(self, local_path: str, path: str, headers: dict[str, str] | None = None) -> None:
        """Copy a local file to ``path`` on this disk."""
        pass

    @abstractmethod
    def copy_from(
        self, source: Disk, source_path: str, path: str, headers: dict[str, str] | None = None
    ) -> None:
        """Copy ``source_path`` on another disk to ``path`` on this disk."""
        pass


class LocalDisk(Disk):
    """Disk storing files in a directory on the local filesystem.

    Headers are accepted for interface compatibility and ignored.
    """

    def __init__(self, name: str, root: str | os.PathLike[str]):
        self.name = name
        self.root = Path(root)

    def path(self, path: str) -> Path:
        full_path = (self.root / path).resolve()
        if not full_path.is_relative_to(self.root.resolve()):
            raise ValueError(f"Path '{path}' escapes the root of disk '{self.name}'")
        return full_path

    @override
    def exists(self, path: str) -> bool:
        return self.path(path).is_file()

    @override
    def size(self, path: str) -> int:
        return self.path(path).stat().st_size

    @override
    def mime_type(self, path: str) -> str:
        return detect_mime_type(self.path(path))

    @override
    def read(self, path: str) -> bytes:
        return self.path(path).read_bytes()

    @override
    def delete(self, path: str) -> None:
        self.path(path).unlink(missing_ok=True)

    @override
    def put_file(self, local_path: str, path: str, headers: dict[str, str] | None = None) -> None:
        destination = self.path(path)
        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(local_path, destination)

    @override
    def copy_from(
        self, source: Disk, source_path: str, path: str, headers: dict[str, str] | None = None
    ) -> None:
        if isinstance(source, LocalDisk):
            self.put_file(str(source.path(source_path)), path, headers)
            return

        destination = self.path(path)
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_bytes(source.read(source_path))


DiskFactory = Callable[[str, DiskConfig], Disk]


def _local_disk(name: str, config: DiskConfig) -> Disk:
    if not config.root:
        raise ValueError(f"Local disk '{name}' requires a root directory")
    return LocalDisk(name, config.root)


class DiskManager:
    """Registry of disk instances, built lazily from configuration."""

    def __init__(self, config: MediaLibraryConfig):
        self.config = config
        self._disks: dict[str, Disk] = {}
        self._drivers: dict[str, DiskFactory] = {"local": _local_disk}

    def register_driver(self, driver: str, factory: DiskFactory) -> None:
        self._drivers[driver] = factory

    def set_disk(self, disk: Disk) -> None:
        """Use an already constructed disk for ``disk.name``."""
        self._disks[disk.name] = disk

    def disk(self, name: str) -> Disk:
        """Return the disk named ``name``.

        Raises:
            DiskDoesNotExist: If the name is not configured.
        """
        if name in self._disks:
            return self._disks[name]

        if not self.config.has_disk(name):
            raise DiskDoesNotExist.create(name)

        disk_config = self.config.disks[name]
        factory = self._drivers.get(disk_config.driver)
        if factory is None:
            raise ValueError(f"Unsupported driver '{disk_config.driver}' for disk '{name}'")

        disk = factory(name, disk_config)
        self._disks[name] = disk
        return disk


class Filesystem:
    """Copies original media files onto their disks."""

    def __init__(self, disks: DiskManager):
        self.disks = disks
        self.custom_remote_headers: dict[str, str] = {}

    def add_custom_remote_headers(self, headers: dict[str, str]) -> None:
        """Send ``headers`` with every file this filesystem stores.

        Headers set on a record take precedence.
        """
        self.custom_remote_headers = dict(headers)

    def _headers_for(self, record: MediaRecord) -> dict[str, str]:
        return {**self.custom_remote_headers, **record.get_custom_headers()}

    def add(self, location: str, record: MediaRecord, file_name: str) -> None:
        """Copy a local file to the record's disk."""
        destination = f"{record.id}/{file_name}"
        self.disks.disk(record.disk).put_file(location, destination, self._headers_for(record))
        logger.debug("Stored '%s' as '%s' on disk '%s'", location, destination, record.disk)

    def add_remote(self, remote: RemoteRef, record: MediaRecord, file_name: str) -> None:
        """Copy a file from another disk to the record's disk."""
        destination = f"{record.id}/{file_name}"
        source_disk = self.disks.disk(remote.disk)
        self.disks.disk(record.disk).copy_from(
            source_disk, remote.key, destination, self._headers_for(record)
        )
        logger.debug(
            "Copied '%s' from disk '%s' to '%s' on disk '%s'",
            remote.key,
            remote.disk,
            destination,
            record.disk,
        )
