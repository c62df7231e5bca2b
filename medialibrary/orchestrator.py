"""Attachment orchestration.

An attach call moves a built record through these steps:

1. validate it against its collection,
2. persist it on the owner,
3. copy the bytes to the record's disk,
4. delete the original unless asked to preserve it,
5. dispatch responsive image generation when enabled,
6. evict the oldest media beyond the collection size limit.

The steps are not transactional. A failure stops the call where it happened
and nothing done before it is undone. Deleting the original is the exception:
it is best effort, so a failed delete is logged and the later steps still run.

Owners that are not persisted yet cannot hold media. Their records wait in
``PendingAttachments`` until ``owner_persisted`` is called, then replay in the
order they were submitted.
"""

from __future__ import annotations

import contextlib
import logging
import os
from collections.abc import Callable, Iterator
from typing import TYPE_CHECKING, Any, Optional

from medialibrary.exceptions import FileDoesNotExist, MediaLibraryError
from medialibrary.media_collections import (
    get_media_collection,
    guard_against_disallowed_file_additions,
    should_auto_enable_responsive_images,
)
from medialibrary.models import MediaRecord
from medialibrary.responsive_images import ResponsiveImageTrigger
from medialibrary.sources import RemoteRef, SourceContext, SourceKind
from medialibrary.storage import DiskManager, Filesystem
from medialibrary.temporary_upload import TemporaryUploadStore, ensure_belongs_to_session

if TYPE_CHECKING:
    from opentelemetry.trace import Tracer

logger = logging.getLogger(__name__)

ProcessMediaItem = Callable[[Any, MediaRecord, SourceContext], None]


class PendingAttachments:
    """Records waiting for their owner to be persisted, keyed by owner identity."""

    def __init__(self) -> None:
        self._pending: dict[int, tuple[Any, list[tuple[MediaRecord, SourceContext]]]] = {}

    def defer(self, owner: Any, media: MediaRecord, context: SourceContext) -> None:
        key = id(owner)
        if key not in self._pending:
            self._pending[key] = (owner, [])
            logger.debug("Waiting for %s to be persisted before attaching media", owner)
        self._pending[key][1].append((media, context))

    def count(self, owner: Any) -> int:
        entry = self._pending.get(id(owner))
        if entry is None or entry[0] is not owner:
            return 0
        return len(entry[1])

    def discard(self, owner: Any) -> int:
        """Drop every pending record of ``owner`` without attaching it.

        Returns:
            Number of records dropped.
        """
        entry = self._pending.get(id(owner))
        if entry is None or entry[0] is not owner:
            return 0
        del self._pending[id(owner)]
        return len(entry[1])

    def flush(self, owner: Any, process: ProcessMediaItem) -> int:
        """Replay every pending record of ``owner`` in submission order.

        If replaying a record raises, the records after it stay queued and the
        error propagates.

        Returns:
            Number of records replayed.
        """
        key = id(owner)
        entry = self._pending.get(key)
        if entry is None or entry[0] is not owner:
            return 0

        queue = entry[1]
        replayed = 0
        while queue:
            media, context = queue.pop(0)
            process(owner, media, context)
            replayed += 1

        del self._pending[key]
        return replayed


class AttachmentOrchestrator:
    """Runs attach calls from a built record to finalized storage.

    Args:
        disks: Disk manager, used to delete remote originals.
        filesystem: Copies original bytes to managed disks.
        trigger: Responsive image job dispatch.
        pending: Queue of records waiting for their owners.
        temporary_uploads: Lookup for temporary uploads, optional.
        tracer: OpenTelemetry tracer, optional.
    """

    def __init__(
        self,
        disks: DiskManager,
        filesystem: Filesystem,
        trigger: ResponsiveImageTrigger,
        pending: Optional[PendingAttachments] = None,
        temporary_uploads: Optional[TemporaryUploadStore] = None,
        tracer: Optional[Tracer] = None,
    ) -> None:
        self.disks = disks
        self.filesystem = filesystem
        self.trigger = trigger
        self.pending = pending if pending is not None else PendingAttachments()
        self.temporary_uploads = temporary_uploads
        self.tracer = tracer

    def attach(self, owner: Any, media: MediaRecord, context: SourceContext) -> MediaRecord:
        """Attach ``media`` to ``owner``, deferring until the owner exists."""
        if not owner.exists:
            self.pending.defer(owner, media, context)
            return media

        self.process_media_item(owner, media, context)
        return media

    def owner_persisted(self, owner: Any) -> int:
        """Notify that ``owner`` was persisted and replay its pending media.

        Returns:
            Number of media items attached.
        """
        if not owner.exists:
            logger.warning("owner_persisted called for %s which does not exist yet", owner)
            return 0
        return self.pending.flush(owner, self.process_media_item)

    def process_media_item(self, owner: Any, media: MediaRecord, context: SourceContext) -> None:
        with self._span("medialibrary.process_media_item", media):
            guard_against_disallowed_file_additions(media, owner)

            if should_auto_enable_responsive_images(owner, media.collection_name):
                context.generate_responsive_images = True

            owner.save_media(media)

            try:
                self._store(media, context)
            except Exception:
                logger.error(
                    "Media %s was saved but storing its file '%s' on disk '%s' failed",
                    media.id,
                    context.file_name,
                    media.disk,
                )
                raise

            if not context.preserve_original:
                self._delete_original(context)

            if context.generate_responsive_images and self.trigger.can_convert(media):
                self.trigger.dispatch_for(media)

            self._enforce_collection_size_limit(owner, media.collection_name)

    def attach_temporary_upload(
        self, owner: Any, context: SourceContext, collection_name: str, disk_name: str
    ) -> MediaRecord:
        """Let a temporary upload move itself into ``owner``'s collection.

        Raises:
            FileDoesNotExist: If the upload cannot be found.
            TemporaryUploadDoesNotBelongToCurrentSession: On a session mismatch.
        """
        if self.temporary_uploads is None:
            raise MediaLibraryError("No temporary upload store is configured")

        upload_id = context.source.id  # type: ignore[union-attr]
        try:
            upload = self.temporary_uploads.find(upload_id)
        except KeyError as e:
            raise FileDoesNotExist.create(f"temporary upload {upload_id}") from e

        ensure_belongs_to_session(upload, context.session_id)

        return upload.move_media(owner, collection_name, disk_name)

    def _store(self, media: MediaRecord, context: SourceContext) -> None:
        if context.kind is SourceKind.REMOTE:
            assert isinstance(context.source, RemoteRef)
            self.filesystem.add_remote(context.source, media, context.file_name)
        else:
            self.filesystem.add(context.location, media, context.file_name)

    def _delete_original(self, context: SourceContext) -> None:
        """Remove the source file. Failures are logged and do not stop the attach."""
        if context.kind is SourceKind.REMOTE:
            assert isinstance(context.source, RemoteRef)
            disk_name = context.source.disk
        else:
            disk_name = "local filesystem"

        try:
            if context.kind is SourceKind.REMOTE:
                self.disks.disk(disk_name).delete(context.location)
            else:
                with contextlib.suppress(FileNotFoundError):
                    os.unlink(context.location)
        except OSError as e:
            logger.warning(
                "Could not delete original '%s' on %s: %s", context.location, disk_name, e
            )
            return

        logger.debug("Deleted original '%s' on %s", context.location, disk_name)

    def _enforce_collection_size_limit(self, owner: Any, collection_name: str) -> None:
        collection = get_media_collection(owner, collection_name)
        if collection is None or not collection.collection_size_limit:
            return

        limit = collection.collection_size_limit
        collection_media = list(owner.get_media(collection_name))
        if len(collection_media) <= limit:
            return

        keep = collection_media[-limit:]
        owner.clear_media_collection_except(collection_name, keep)
        logger.info(
            "Evicted %d media from collection '%s' to keep the newest %d",
            len(collection_media) - limit,
            collection_name,
            limit,
        )

    @contextlib.contextmanager
    def _span(self, name: str, media: MediaRecord) -> Iterator[None]:
        if self.tracer is None:
            yield
            return

        with self.tracer.start_as_current_span(name) as span:
            span.set_attribute("medialibrary.collection", media.collection_name)
            span.set_attribute("medialibrary.file_name", media.file_name)
            span.set_attribute("medialibrary.disk", media.disk)
            yield
