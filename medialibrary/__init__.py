"""Attach files to an owner's media collections.

Example:
    >>> from medialibrary import MediaLibrary, MediaLibraryConfig, RemoteRef
    >>> config = MediaLibraryConfig.parse_yaml("medialibrary.yml")
    >>> library = MediaLibrary(config, dispatcher)
    >>> library.add_media(post, "/tmp/cover.png").to_media_collection("cover")
    >>> library.add_media(post, RemoteRef("s3", "uploads/a.pdf")).to_media_collection()
"""

from medialibrary.config import DiskConfig, MediaLibraryConfig, TelemetryConfig
from medialibrary.exceptions import (
    DiskDoesNotExist,
    FileCannotBeAdded,
    FileDoesNotExist,
    FileIsTooBig,
    FileUnacceptableForCollection,
    MediaLibraryError,
    TemporaryUploadDoesNotBelongToCurrentSession,
    UnknownType,
)
from medialibrary.file_adder import FileAdder
from medialibrary.media_collections import MediaCollection, PendingFile
from medialibrary.media_library import MediaLibrary
from medialibrary.models import MediaRecord
from medialibrary.owner import HasMedia, InteractsWithMedia
from medialibrary.responsive_images import GenerateResponsiveImagesJob, JobDispatcher
from medialibrary.sources import LocalPath, RemoteRef, TemporaryRef, UploadedHandle
from medialibrary.storage import Disk, DiskManager, LocalDisk

__all__ = [
    "Disk",
    "DiskConfig",
    "DiskDoesNotExist",
    "DiskManager",
    "FileAdder",
    "FileCannotBeAdded",
    "FileDoesNotExist",
    "FileIsTooBig",
    "FileUnacceptableForCollection",
    "GenerateResponsiveImagesJob",
    "HasMedia",
    "InteractsWithMedia",
    "JobDispatcher",
    "LocalDisk",
    "LocalPath",
    "MediaCollection",
    "MediaLibrary",
    "MediaLibraryConfig",
    "MediaLibraryError",
    "MediaRecord",
    "PendingFile",
    "RemoteRef",
    "TemporaryRef",
    "TemporaryUploadDoesNotBelongToCurrentSession",
    "UnknownType",
    "UploadedHandle",
]
