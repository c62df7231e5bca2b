"""Construction of unsaved media records from local and remote files."""

from __future__ import annotations

import logging
import os
from typing import Any

from medialibrary.config import MediaLibraryConfig
from medialibrary.disks import DiskResolver
from medialibrary.exceptions import FileDoesNotExist, FileIsTooBig
from medialibrary.mime import detect_mime_type
from medialibrary.models import MediaRecord
from medialibrary.sources import RemoteRef, SourceContext
from medialibrary.storage import DiskManager

logger = logging.getLogger(__name__)


class MediaRecordBuilder:
    """Builds the in-memory media record for one attach call.

    Args:
        config: Library configuration (size limit, media model).
        disks: Disk manager used to inspect remote files.
        owner: Owning entity, used to look up collection disks.
    """

    def __init__(self, config: MediaLibraryConfig, disks: DiskManager, owner: Any):
        self.config = config
        self.disks = disks
        self.disk_resolver = DiskResolver(config, owner)

    def build_local(
        self, context: SourceContext, collection_name: str, disk_name: str = ""
    ) -> MediaRecord:
        """Build a record for a local or uploaded file.

        Raises:
            FileDoesNotExist: If the location is not an existing regular file.
            FileIsTooBig: If the file exceeds the configured maximum size.
            DiskDoesNotExist: If a resolved disk is not registered.
        """
        path = context.location
        if not os.path.isfile(path):
            raise FileDoesNotExist.create(path)

        size = os.path.getsize(path)
        if size > self.config.max_file_size:
            raise FileIsTooBig.create(path, size, self.config.max_file_size)

        return self._fill(
            context,
            collection_name,
            disk_name,
            mime_type=detect_mime_type(path),
            size=size,
        )

    def build_remote(
        self, context: SourceContext, collection_name: str, disk_name: str = ""
    ) -> MediaRecord:
        """Build a record for a file that lives on another disk.

        Raises:
            FileDoesNotExist: If the remote disk does not have the key.
            FileIsTooBig: If the remote size exceeds the configured maximum size.
            DiskDoesNotExist: If a resolved disk or the source disk is not registered.
        """
        assert isinstance(context.source, RemoteRef)
        storage = self.disks.disk(context.source.disk)
        key = context.location

        if not storage.exists(key):
            raise FileDoesNotExist.create(key)

        size = storage.size(key)
        if size > self.config.max_file_size:
            raise FileIsTooBig.create(key, size, self.config.max_file_size)

        return self._fill(
            context,
            collection_name,
            disk_name,
            mime_type=storage.mime_type(key),
            size=size,
        )

    def _fill(
        self,
        context: SourceContext,
        collection_name: str,
        disk_name: str,
        mime_type: str,
        size: int,
    ) -> MediaRecord:
        media_class = self.config.media_model_class()
        media: MediaRecord = media_class()

        media.name = context.media_name

        # Stored back on the context so the bytes land under the same name.
        context.file_name = context.file_name_sanitizer(context.file_name)
        media.file_name = context.file_name

        media.disk = self.disk_resolver.resolve_disk(disk_name, collection_name)
        media.conversions_disk = self.disk_resolver.resolve_conversions_disk(
            context.conversions_disk_name, media.disk, collection_name
        )
        media.collection_name = collection_name

        media.mime_type = mime_type
        media.size = size
        media.custom_properties = dict(context.custom_properties)
        media.responsive_images = {}
        media.manipulations = dict(context.manipulations)

        if context.custom_headers:
            media.set_custom_headers(context.custom_headers)

        media.fill(context.properties)

        logger.debug(
            "Built media '%s' for collection '%s' on disk '%s'",
            media.file_name,
            collection_name,
            media.disk,
        )
        return media
