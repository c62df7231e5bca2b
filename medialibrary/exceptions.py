"""Errors raised while adding a file to a media collection.

Every error here is terminal for the attach call that raised it. Nothing is
retried and nothing already done (a persisted record, copied bytes) is rolled
back.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import humanize

if TYPE_CHECKING:
    from medialibrary.media_collections import MediaCollection, PendingFile


class MediaLibraryError(Exception):
    """Base class for all media library errors."""


class FileCannotBeAdded(MediaLibraryError):
    """Base class for errors that stop a file from being attached."""


class UnknownType(FileCannotBeAdded):
    """Raised when the given source is not a supported file reference."""

    @classmethod
    def create(cls, source: Any = None) -> UnknownType:
        return cls(f"Only strings, paths, uploaded files, remote and temporary references "
                   f"can be attached, got {type(source).__name__}")


class FileDoesNotExist(FileCannotBeAdded):
    """Raised when a local file or remote key does not exist.

    Attributes:
        path: Local path or remote key that was looked up.
    """

    def __init__(self, message: str, path: str) -> None:
        self.path = path
        super().__init__(message)

    @classmethod
    def create(cls, path: str) -> FileDoesNotExist:
        return cls(f"File `{path}` does not exist", path)


class FileIsTooBig(FileCannotBeAdded):
    """Raised when a file exceeds the configured maximum size.

    Attributes:
        path: Local path or remote key of the file.
        size: Actual size in bytes.
        max_size: Configured maximum in bytes.
    """

    def __init__(self, message: str, path: str, size: int, max_size: int) -> None:
        self.path = path
        self.size = size
        self.max_size = max_size
        super().__init__(message)

    @classmethod
    def create(cls, path: str, size: int, max_size: int) -> FileIsTooBig:
        message = (
            f"File `{path}` has a size of {humanize.naturalsize(size, binary=True)} "
            f"which is greater than the maximum allowed "
            f"{humanize.naturalsize(max_size, binary=True)}"
        )
        return cls(message, path, size, max_size)


class DiskDoesNotExist(FileCannotBeAdded):
    """Raised when a resolved disk name is not a registered disk."""

    def __init__(self, message: str, disk_name: str) -> None:
        self.disk_name = disk_name
        super().__init__(message)

    @classmethod
    def create(cls, disk_name: str) -> DiskDoesNotExist:
        return cls(f"There is no filesystem disk named `{disk_name}`", disk_name)


class FileUnacceptableForCollection(FileCannotBeAdded):
    """Raised when a collection refuses a file.

    Attributes:
        file: The pending file that was evaluated.
        collection: The collection definition that rejected it.
        owner: The owning entity the file was being attached to.
    """

    def __init__(
        self, message: str, file: PendingFile, collection: MediaCollection, owner: Any
    ) -> None:
        self.file = file
        self.collection = collection
        self.owner = owner
        super().__init__(message)

    @classmethod
    def create(
        cls, file: PendingFile, collection: MediaCollection, owner: Any
    ) -> FileUnacceptableForCollection:
        message = (
            f"The file with properties `{file.describe()}` was not accepted "
            f"into the collection named `{collection.name}` of model "
            f"`{type(owner).__name__}` with id `{getattr(owner, 'id', None)}`"
        )
        return cls(message, file, collection, owner)


class TemporaryUploadDoesNotBelongToCurrentSession(FileCannotBeAdded):
    """Raised when a temporary upload was created in another session."""

    @classmethod
    def create(cls) -> TemporaryUploadDoesNotBelongToCurrentSession:
        return cls("The temporary upload does not belong to the current session.")
