"""Responsive image job dispatch.

The library does not resize images. It decides whether a record can be
converted and hands a job to a ``JobDispatcher`` (a Celery/RQ adapter, or a
synchronous runner in tests).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional, Protocol

if TYPE_CHECKING:
    from medialibrary.models import MediaRecord

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS: frozenset[str] = frozenset({"png", "jpg", "jpeg", "gif", "webp"})
SUPPORTED_MIME_TYPES: frozenset[str] = frozenset(
    {"image/png", "image/jpeg", "image/gif", "image/webp"}
)


class ImageGenerator:
    """Decides whether a record is an image responsive variants can be made of."""

    def can_convert(self, media: MediaRecord) -> bool:
        if media.extension not in SUPPORTED_EXTENSIONS:
            return False
        return media.mime_type in SUPPORTED_MIME_TYPES


class GenerateResponsiveImagesJob:
    """Job asking a worker to generate responsive variants of ``media``."""

    def __init__(self, media: MediaRecord):
        self.media = media
        self.queue: Optional[str] = None

    def on_queue(self, queue: str) -> GenerateResponsiveImagesJob:
        self.queue = queue
        return self

    def __repr__(self) -> str:
        return f"{type(self).__name__}(media_id={self.media.id!r}, queue={self.queue!r})"


class JobDispatcher(Protocol):
    """Protocol for queueing backends.

    Example:
        class CeleryDispatcher:
            def dispatch(self, job) -> None:
                generate_responsive_images.apply_async(
                    args=[job.media.id], queue=job.queue
                )
    """

    def dispatch(self, job: GenerateResponsiveImagesJob) -> None: ...


class ResponsiveImageTrigger:
    """Builds and dispatches responsive image jobs for finalized records."""

    def __init__(
        self,
        dispatcher: JobDispatcher,
        job_class: type[GenerateResponsiveImagesJob] = GenerateResponsiveImagesJob,
        queue_name: Optional[str] = None,
        generator: Optional[ImageGenerator] = None,
    ) -> None:
        self.dispatcher = dispatcher
        self.job_class = job_class
        self.queue_name = queue_name
        self.generator = generator or ImageGenerator()

    def can_convert(self, media: MediaRecord) -> bool:
        return self.generator.can_convert(media)

    def dispatch_for(self, media: MediaRecord) -> GenerateResponsiveImagesJob:
        job = self.job_class(media)

        if self.queue_name:
            job.on_queue(self.queue_name)

        self.dispatcher.dispatch(job)
        logger.debug("Dispatched %r", job)
        return job
