"""Disk name resolution.

Originals disk precedence: explicit override, then the collection's disk,
then the configured default. Conversions disk precedence: explicit override,
then the collection's conversions disk, then the originals disk. Every
resolved name must be a registered disk.
"""

from __future__ import annotations

from typing import Any

from medialibrary.config import MediaLibraryConfig
from medialibrary.exceptions import DiskDoesNotExist
from medialibrary.media_collections import get_media_collection


class DiskResolver:
    def __init__(self, config: MediaLibraryConfig, owner: Any):
        self.config = config
        self.owner = owner

    def _ensure_exists(self, disk_name: str) -> str:
        if not self.config.has_disk(disk_name):
            raise DiskDoesNotExist.create(disk_name)
        return disk_name

    def resolve_disk(self, explicit_override: str, collection_name: str) -> str:
        """Pick the disk for original files.

        Raises:
            DiskDoesNotExist: If the chosen disk is not registered.
        """
        if explicit_override:
            return self._ensure_exists(explicit_override)

        collection = get_media_collection(self.owner, collection_name)
        if collection is not None and collection.disk_name:
            return self._ensure_exists(collection.disk_name)

        return self._ensure_exists(self.config.disk_name)

    def resolve_conversions_disk(
        self, explicit_override: str, originals_disk: str, collection_name: str
    ) -> str:
        """Pick the disk for derived files.

        Raises:
            DiskDoesNotExist: If the chosen disk is not registered.
        """
        if explicit_override:
            return self._ensure_exists(explicit_override)

        collection = get_media_collection(self.owner, collection_name)
        if collection is not None and collection.conversions_disk_name:
            return self._ensure_exists(collection.conversions_disk_name)

        return self._ensure_exists(originals_disk)
