"""Media collection definitions and the rules they enforce on new files."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Optional

from medialibrary.exceptions import FileUnacceptableForCollection

if TYPE_CHECKING:
    from medialibrary.models import MediaRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PendingFile:
    """The view of a new file that acceptance predicates receive."""

    name: str
    file_name: str
    mime_type: str
    size: int

    @classmethod
    def from_media(cls, media: MediaRecord) -> PendingFile:
        return cls(
            name=media.name,
            file_name=media.file_name,
            mime_type=media.mime_type,
            size=media.size,
        )

    def describe(self) -> str:
        return (
            f"name: {self.name}, fileName: {self.file_name}, "
            f"mimeType: {self.mime_type}, size: {self.size}"
        )


AcceptsFile = Callable[[PendingFile, Any], bool]


def _accept_everything(file: PendingFile, owner: Any) -> bool:
    return True


@dataclass
class MediaCollection:
    """Rules for a named group of media on an owner.

    Attributes:
        name: Collection name.
        disk_name: Disk for originals, empty to use the default.
        conversions_disk_name: Disk for derived files, empty to use the originals disk.
        accepts_file_callback: Predicate deciding whether a file may be added.
        accepts_mime_types_list: Allowed mime types, empty for no restriction.
        collection_size_limit: Number of newest items to keep, None for unlimited.
        generate_responsive_images: Whether new images get responsive variants.

    Example:
        >>> MediaCollection.create("avatar").single_file().accepts_mime_types(["image/png"])
    """

    name: str
    disk_name: str = ""
    conversions_disk_name: str = ""
    accepts_file_callback: AcceptsFile = field(default=_accept_everything, repr=False)
    accepts_mime_types_list: frozenset[str] = frozenset()
    collection_size_limit: Optional[int] = None
    generate_responsive_images: bool = False

    @classmethod
    def create(cls, name: str) -> MediaCollection:
        return cls(name=name)

    def use_disk(self, disk_name: str) -> MediaCollection:
        self.disk_name = disk_name
        return self

    def store_conversions_on_disk(self, conversions_disk_name: str) -> MediaCollection:
        self.conversions_disk_name = conversions_disk_name
        return self

    def accepts_file(self, callback: AcceptsFile) -> MediaCollection:
        self.accepts_file_callback = callback
        return self

    def accepts_mime_types(self, mime_types: Iterable[str]) -> MediaCollection:
        self.accepts_mime_types_list = frozenset(mime_types)
        return self

    def single_file(self) -> MediaCollection:
        return self.only_keep_latest(1)

    def only_keep_latest(self, maximum_number_of_items: int) -> MediaCollection:
        if maximum_number_of_items < 1:
            raise ValueError(
                f"Collection '{self.name}' must keep at least one item, "
                f"got {maximum_number_of_items}"
            )
        self.collection_size_limit = maximum_number_of_items
        return self

    def with_responsive_images(self) -> MediaCollection:
        self.generate_responsive_images = True
        return self

    def accepts(self, file: PendingFile, owner: Any) -> bool:
        return bool(self.accepts_file_callback(file, owner))


def get_media_collection(owner: Any, collection_name: str) -> Optional[MediaCollection]:
    """Find the collection named ``collection_name`` on ``owner``.

    Collections are (re)registered on every lookup. Registration is
    idempotent so this only ever yields one definition per name.
    """
    owner.register_media_collections()

    return next(
        (
            collection
            for collection in owner.media_collections
            if collection.name == collection_name
        ),
        None,
    )


def guard_against_disallowed_file_additions(media: MediaRecord, owner: Any) -> None:
    """Check that the record's collection accepts it.

    A collection that is not defined on the owner accepts everything.

    Raises:
        FileUnacceptableForCollection: If the acceptance predicate or the
            mime type allowlist rejects the file.
    """
    collection = get_media_collection(owner, media.collection_name)
    if collection is None:
        return

    file = PendingFile.from_media(media)

    if not collection.accepts(file, owner):
        logger.info(
            "Collection '%s' rejected '%s' through its acceptance callback",
            collection.name,
            file.file_name,
        )
        raise FileUnacceptableForCollection.create(file, collection, owner)

    allowed = collection.accepts_mime_types_list
    if allowed and file.mime_type not in allowed:
        logger.info(
            "Collection '%s' rejected '%s' with mime type '%s'",
            collection.name,
            file.file_name,
            file.mime_type,
        )
        raise FileUnacceptableForCollection.create(file, collection, owner)


def should_auto_enable_responsive_images(owner: Any, collection_name: str) -> bool:
    collection = get_media_collection(owner, collection_name)
    return bool(collection and collection.generate_responsive_images)
