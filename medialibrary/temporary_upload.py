"""Temporary uploads.

A temporary upload is a file a client uploaded before the owner it belongs to
was known. It moves itself into an owner's collection, so the attach
pipeline only looks it up, checks the session and delegates.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional, Protocol

from medialibrary.exceptions import TemporaryUploadDoesNotBelongToCurrentSession

if TYPE_CHECKING:
    from medialibrary.models import MediaRecord

logger = logging.getLogger(__name__)


class TemporaryUpload(Protocol):
    session_id: Optional[str]

    def move_media(self, owner: Any, collection_name: str, disk_name: str) -> MediaRecord:
        """Attach this upload to ``owner`` and finalize its storage."""
        ...


class TemporaryUploadStore(Protocol):
    def find(self, upload_id: str) -> TemporaryUpload:
        """Return the temporary upload with ``upload_id``.

        Raises:
            KeyError: If there is no such upload.
        """
        ...


def ensure_belongs_to_session(upload: TemporaryUpload, session_id: Optional[str]) -> None:
    """Check that ``upload`` was created in ``session_id``.

    No check is done when ``session_id`` is None.

    Raises:
        TemporaryUploadDoesNotBelongToCurrentSession: On a session mismatch.
    """
    if session_id is None:
        return

    if upload.session_id != session_id:
        logger.warning(
            "Temporary upload from session '%s' used in session '%s'",
            upload.session_id,
            session_id,
        )
        raise TemporaryUploadDoesNotBelongToCurrentSession.create()
