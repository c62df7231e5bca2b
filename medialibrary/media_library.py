"""Media library entry point."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional

from medialibrary.config import MediaLibraryConfig
from medialibrary.file_adder import FileAdder
from medialibrary.orchestrator import AttachmentOrchestrator, PendingAttachments
from medialibrary.responsive_images import JobDispatcher, ResponsiveImageTrigger
from medialibrary.storage import DiskManager, Filesystem
from medialibrary.telemetry import setup_telemetry
from medialibrary.temporary_upload import TemporaryUploadStore

if TYPE_CHECKING:
    from opentelemetry.trace import Tracer

logger = logging.getLogger(__name__)


class MediaLibrary:
    """Wires configuration, disks and collaborators together.

    Args:
        config: Library configuration.
        dispatcher: Queue backend for responsive image jobs.
        disks: Disk manager. Built from ``config`` when omitted.
        temporary_uploads: Lookup for temporary uploads, optional.
        tracer: OpenTelemetry tracer. Set up from ``config.telemetry`` when omitted.

    Example:
        >>> library = MediaLibrary(config, dispatcher)
        >>> library.add_media(post, "/tmp/cover.png").to_media_collection("cover")
        >>> # once an unsaved owner has been saved by the ORM:
        >>> library.owner_persisted(post)
    """

    def __init__(
        self,
        config: MediaLibraryConfig,
        dispatcher: JobDispatcher,
        disks: Optional[DiskManager] = None,
        temporary_uploads: Optional[TemporaryUploadStore] = None,
        tracer: Optional[Tracer] = None,
    ) -> None:
        self.config = config
        self.disks = disks if disks is not None else DiskManager(config)
        self.pending = PendingAttachments()
        self.trigger = ResponsiveImageTrigger(
            dispatcher,
            job_class=config.responsive_images_job_class(),
            queue_name=config.queue_name,
        )
        if tracer is None:
            tracer = setup_telemetry(config.telemetry)
        self.orchestrator = AttachmentOrchestrator(
            self.disks,
            Filesystem(self.disks),
            self.trigger,
            pending=self.pending,
            temporary_uploads=temporary_uploads,
            tracer=tracer,
        )

    def add_media(self, owner: Any, file: object) -> FileAdder:
        """Start adding ``file`` to ``owner``.

        Raises:
            UnknownType: If ``file`` is not a supported source.
        """
        return (
            FileAdder(self.config, self.disks, self.orchestrator)
            .set_subject(owner)
            .set_file(file)
        )

    def owner_persisted(self, owner: Any) -> int:
        """Attach media that was added to ``owner`` before it was persisted."""
        replayed = self.orchestrator.owner_persisted(owner)
        if replayed:
            logger.info("Attached %d pending media item(s) to %s", replayed, owner)
        return replayed

    def pending_count(self, owner: Any) -> int:
        return self.pending.count(owner)

    def discard_pending(self, owner: Any) -> int:
        """Forget media queued for ``owner``, e.g. when an unsaved owner is abandoned."""
        dropped = self.pending.discard(owner)
        if dropped:
            logger.info("Discarded %d pending media item(s) of %s", dropped, owner)
        return dropped
