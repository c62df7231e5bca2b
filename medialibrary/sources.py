"""File source variants and their normalization.

A file can be attached from one of four places:

- ``LocalPath``: a file on the local filesystem.
- ``RemoteRef``: a key on a registered storage disk.
- ``UploadedHandle``: a file uploaded by a client and parked in a temp path.
- ``TemporaryRef``: a temporary upload that finalizes its own storage.

``resolve()`` turns any of them into a ``ResolvedSource``. Plain strings and
``os.PathLike`` objects are treated as local paths.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import PurePath
from typing import Any, Optional, Union

from medialibrary.exceptions import UnknownType

FileNameSanitizer = Callable[[str], str]


class SourceKind(Enum):
    """Where a resolved source lives."""

    LOCAL = "local"
    REMOTE = "remote"
    UPLOADED = "uploaded"
    TEMPORARY = "temporary"


@dataclass(frozen=True)
class LocalPath:
    path: str


@dataclass(frozen=True)
class RemoteRef:
    """A file stored under ``key`` on the storage disk named ``disk``.

    Attributes:
        disk: Name of the disk holding the file.
        key: Path of the file on that disk.
        display_name: Human readable media name.
        file_name: File name to store the media under. Defaults to the
            basename of ``key``.
    """

    disk: str
    key: str
    display_name: str = ""
    file_name: str | None = None

    def get_file_name(self) -> str:
        if self.file_name:
            return self.file_name
        return PurePath(self.key).name

    def get_name(self) -> str:
        if self.display_name:
            return self.display_name
        return PurePath(self.get_file_name()).stem


@dataclass(frozen=True)
class UploadedHandle:
    """A client upload stored at ``temp_path`` under a server-chosen name."""

    temp_path: str
    original_name: str


@dataclass(frozen=True)
class TemporaryRef:
    id: str


Source = Union[LocalPath, RemoteRef, UploadedHandle, TemporaryRef]


@dataclass(frozen=True)
class ResolvedSource:
    """Canonical description of a source.

    Attributes:
        location: Local path or remote key the bytes are read from.
        file_name: File name before sanitizing.
        media_name: Human readable name for the media record.
        kind: Which source variant this came from.
    """

    location: str
    file_name: str
    media_name: str
    kind: SourceKind


def default_sanitizer(file_name: str) -> str:
    """Replace characters that are unsafe in stored file names with ``-``."""
    for character in ("#", "/", "\\", " "):
        file_name = file_name.replace(character, "-")
    return file_name


def as_source(file: object) -> Source:
    """Coerce strings and path-like objects to ``LocalPath``."""
    if isinstance(file, (LocalPath, RemoteRef, UploadedHandle, TemporaryRef)):
        return file
    if isinstance(file, str):
        return LocalPath(file)
    if isinstance(file, os.PathLike):
        return LocalPath(os.fspath(file))
    raise UnknownType.create(file)


def resolve(source: object) -> ResolvedSource:
    """Normalize any supported source into a ``ResolvedSource``.

    Raises:
        UnknownType: If ``source`` is not a supported variant.
    """
    source = as_source(source)

    if isinstance(source, LocalPath):
        path = PurePath(source.path)
        return ResolvedSource(source.path, path.name, path.stem, SourceKind.LOCAL)

    if isinstance(source, RemoteRef):
        return ResolvedSource(
            source.key, source.get_file_name(), source.get_name(), SourceKind.REMOTE
        )

    if isinstance(source, UploadedHandle):
        return ResolvedSource(
            source.temp_path,
            source.original_name,
            PurePath(source.original_name).stem,
            SourceKind.UPLOADED,
        )

    # Temporary uploads finalize their own storage, there is nothing to read here.
    return ResolvedSource("", "", "", SourceKind.TEMPORARY)


@dataclass
class SourceContext:
    """Everything an attach call knows about its file besides the record.

    Built by ``FileAdder`` and carried alongside the record, including while
    the record waits for its owner to be persisted.
    """

    source: Source
    resolved: ResolvedSource
    file_name: str
    media_name: str
    preserve_original: bool = False
    custom_properties: dict[str, Any] = field(default_factory=dict)
    manipulations: dict[str, Any] = field(default_factory=dict)
    properties: dict[str, Any] = field(default_factory=dict)
    custom_headers: dict[str, str] = field(default_factory=dict)
    conversions_disk_name: str = ""
    generate_responsive_images: bool = False
    file_name_sanitizer: FileNameSanitizer = default_sanitizer
    session_id: Optional[str] = None

    @classmethod
    def for_source(cls, file: object) -> SourceContext:
        source = as_source(file)
        resolved = resolve(source)
        return cls(
            source=source,
            resolved=resolved,
            file_name=resolved.file_name,
            media_name=resolved.media_name,
        )

    @property
    def kind(self) -> SourceKind:
        return self.resolved.kind

    @property
    def location(self) -> str:
        return self.resolved.location
