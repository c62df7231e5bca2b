"""Content based mime type detection for local files.

Magic byte detection is done with puremagic. Text based formats have no
reliable signature, so when puremagic cannot identify a file the extension is
used instead, and ``application/octet-stream`` when that fails too.

Example:
    >>> from medialibrary.mime import detect_mime_type
    >>> detect_mime_type("/tmp/photo.png")
    'image/png'
"""

from __future__ import annotations

import logging
import mimetypes
import os

import puremagic

logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "application/octet-stream"

# Maps alternative mime types puremagic may return to their common form
MIME_TYPE_EQUIVALENCES: dict[str, str] = {
    "image/x-ms-bmp": "image/bmp",
    "application/x-gzip": "application/gzip",
    "application/x-zip-compressed": "application/zip",
    "image/jpg": "image/jpeg",
    "image/pjpeg": "image/jpeg",
}


def normalize_mime_type(mime_type: str) -> str:
    return MIME_TYPE_EQUIVALENCES.get(mime_type, mime_type)


def detect_mime_type(path: str | os.PathLike[str]) -> str:
    """Detect the mime type of a local file from its contents.

    Args:
        path: Path of an existing regular file.

    Returns:
        The detected mime type.
    """
    if os.path.getsize(path) > 0:
        try:
            detected = puremagic.magic_file(path)
        except puremagic.PureError:
            detected = []

        for match in detected:
            if match.mime_type:
                return normalize_mime_type(match.mime_type)

    guessed_type, _ = mimetypes.guess_type(os.fspath(path))
    if guessed_type:
        logger.debug(
            "Could not identify content of '%s', using extension based type '%s'",
            path,
            guessed_type,
        )
        return normalize_mime_type(guessed_type)

    return DEFAULT_MIME_TYPE
