"""Fluent API for adding one file to an owner's media collection.

Example:
    >>> media = (
    ...     library.add_media(post, "/tmp/Holiday Photo.jpg")
    ...     .using_name("Holiday")
    ...     .with_custom_properties({"photographer": "Sam"})
    ...     .to_media_collection("gallery")
    ... )
    >>> media.file_name
    'Holiday-Photo.jpg'
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import deprecation

from medialibrary.builder import MediaRecordBuilder
from medialibrary.config import MediaLibraryConfig
from medialibrary.exceptions import DiskDoesNotExist, UnknownType
from medialibrary.models import MediaRecord
from medialibrary.orchestrator import AttachmentOrchestrator
from medialibrary.sources import (
    FileNameSanitizer,
    ResolvedSource,
    Source,
    SourceContext,
    SourceKind,
    as_source,
    default_sanitizer,
    resolve,
)
from medialibrary.storage import DiskManager

logger = logging.getLogger(__name__)

_RENAMED_SETTER_MSG = "Use the using_* variant instead."


class FileAdder:
    """Collects the options of one attach call and runs it."""

    def __init__(
        self,
        config: MediaLibraryConfig,
        disks: DiskManager,
        orchestrator: AttachmentOrchestrator,
    ) -> None:
        self.config = config
        self.disks = disks
        self.orchestrator = orchestrator

        self.subject: Any = None
        self.file: Optional[Source] = None
        self.resolved: Optional[ResolvedSource] = None
        self.preserve_original = False
        self.properties: dict[str, Any] = {}
        self.custom_properties: dict[str, Any] = {}
        self.manipulations: dict[str, Any] = {}
        self.file_name = ""
        self.media_name = ""
        self.conversions_disk_name = ""
        self.file_name_sanitizer: FileNameSanitizer = default_sanitizer
        self.generate_responsive_images = False
        self.custom_headers: dict[str, str] = {}
        self.session_id: Optional[str] = None

    def set_subject(self, subject: Any) -> FileAdder:
        self.subject = subject
        return self

    def set_file(self, file: object) -> FileAdder:
        """Set the file to attach.

        Raises:
            UnknownType: If ``file`` is not a supported source.
        """
        self.file = as_source(file)
        self.resolved = resolve(self.file)

        if self.resolved.kind is not SourceKind.TEMPORARY:
            self.file_name = self.resolved.file_name
            self.media_name = self.resolved.media_name

        return self

    def preserving_original(self) -> FileAdder:
        self.preserve_original = True
        return self

    def using_name(self, name: str) -> FileAdder:
        self.media_name = name
        return self

    @deprecation.deprecated(deprecated_in="1.0.0", removed_in="2.0.0", details=_RENAMED_SETTER_MSG)
    def set_name(self, name: str) -> FileAdder:
        return self.using_name(name)

    def using_file_name(self, file_name: str) -> FileAdder:
        self.file_name = file_name
        return self

    @deprecation.deprecated(deprecated_in="1.0.0", removed_in="2.0.0", details=_RENAMED_SETTER_MSG)
    def set_file_name(self, file_name: str) -> FileAdder:
        return self.using_file_name(file_name)

    def with_custom_properties(self, custom_properties: dict[str, Any]) -> FileAdder:
        self.custom_properties = custom_properties
        return self

    def storing_conversions_on_disk(self, disk_name: str) -> FileAdder:
        self.conversions_disk_name = disk_name
        return self

    def with_manipulations(self, manipulations: dict[str, Any]) -> FileAdder:
        self.manipulations = manipulations
        return self

    def with_properties(self, properties: dict[str, Any]) -> FileAdder:
        """Set attributes merged onto the record after it is built."""
        self.properties = properties
        return self

    def with_attributes(self, properties: dict[str, Any]) -> FileAdder:
        return self.with_properties(properties)

    def with_responsive_images(self) -> FileAdder:
        self.generate_responsive_images = True
        return self

    def add_custom_headers(self, custom_remote_headers: dict[str, str]) -> FileAdder:
        self.custom_headers = custom_remote_headers
        return self

    def sanitizing_file_name(self, file_name_sanitizer: FileNameSanitizer) -> FileAdder:
        self.file_name_sanitizer = file_name_sanitizer
        return self

    def for_session(self, session_id: str) -> FileAdder:
        """Only accept temporary uploads created in ``session_id``."""
        self.session_id = session_id
        return self

    def to_media_collection_on_cloud_disk(self, collection_name: str = "default") -> MediaRecord:
        if not self.config.cloud_disk:
            raise DiskDoesNotExist.create("cloud")
        return self.to_media_collection(collection_name, self.config.cloud_disk)

    def to_media_collection(
        self, collection_name: str = "default", disk_name: str = ""
    ) -> MediaRecord:
        """Attach the file to ``collection_name`` on the subject.

        Args:
            collection_name: Target collection.
            disk_name: Disk override for the original file.

        Returns:
            The media record. It has no id yet when the subject is not persisted.
        """
        context = self._context()

        if context.kind is SourceKind.REMOTE:
            return self.to_media_collection_from_remote(collection_name, disk_name)

        if context.kind is SourceKind.TEMPORARY:
            return self.orchestrator.attach_temporary_upload(
                self.subject, context, collection_name, disk_name
            )

        media = self._builder().build_local(context, collection_name, disk_name)
        self._sync_from(context)
        return self.orchestrator.attach(self.subject, media, context)

    def to_media_collection_from_remote(
        self, collection_name: str = "default", disk_name: str = ""
    ) -> MediaRecord:
        context = self._context()
        if context.kind is not SourceKind.REMOTE:
            raise UnknownType.create(self.file)

        media = self._builder().build_remote(context, collection_name, disk_name)
        self._sync_from(context)
        return self.orchestrator.attach(self.subject, media, context)

    def _builder(self) -> MediaRecordBuilder:
        return MediaRecordBuilder(self.config, self.disks, self.subject)

    def _sync_from(self, context: SourceContext) -> None:
        self.file_name = context.file_name

    def _context(self) -> SourceContext:
        if self.file is None or self.resolved is None:
            raise UnknownType.create(None)
        if self.subject is None:
            raise ValueError("A subject must be set before adding media to a collection")

        return SourceContext(
            source=self.file,
            resolved=self.resolved,
            file_name=self.file_name,
            media_name=self.media_name,
            preserve_original=self.preserve_original,
            custom_properties=dict(self.custom_properties),
            manipulations=dict(self.manipulations),
            properties=dict(self.properties),
            custom_headers=dict(self.custom_headers),
            conversions_disk_name=self.conversions_disk_name,
            generate_responsive_images=self.generate_responsive_images,
            file_name_sanitizer=self.file_name_sanitizer,
            session_id=self.session_id,
        )
