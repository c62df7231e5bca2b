"""Owning entity contract.

The media library never talks to an ORM directly. Owners implement
``HasMedia``: they persist records, return fresh views of a collection and
delete the records eviction asks them to drop. ``InteractsWithMedia`` supplies
the collection-definition half of that contract.

Example:
    class Post(InteractsWithMedia, MyOrmModel):
        def define_media_collections(self) -> None:
            self.add_media_collection("cover").single_file()

        def save_media(self, media): ...
        def get_media(self, collection_name): ...
        def clear_media_collection_except(self, collection_name, keep): ...
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Optional, Protocol, runtime_checkable

from medialibrary.media_collections import MediaCollection

if TYPE_CHECKING:
    from medialibrary.models import MediaRecord


@runtime_checkable
class HasMedia(Protocol):
    """Protocol for entities that own media."""

    @property
    def exists(self) -> bool:
        """Whether the owner has been persisted."""
        ...

    @property
    def media_collections(self) -> list[MediaCollection]: ...

    def register_media_collections(self) -> None:
        """Register collection definitions. Must be idempotent."""
        ...

    def save_media(self, media: MediaRecord) -> None:
        """Persist ``media`` under this owner, assigning its id."""
        ...

    def get_media(self, collection_name: str) -> Sequence[MediaRecord]:
        """Return a fresh read of a collection, oldest first."""
        ...

    def clear_media_collection_except(
        self, collection_name: str, keep: Sequence[MediaRecord]
    ) -> None:
        """Delete every record in the collection that is not in ``keep``."""
        ...


class InteractsWithMedia:
    """Mixin implementing idempotent media collection registration.

    Subclasses override ``define_media_collections`` and call
    ``add_media_collection`` from it.
    """

    _media_collections: Optional[dict[str, MediaCollection]] = None

    def define_media_collections(self) -> None:
        pass

    def add_media_collection(self, name: str) -> MediaCollection:
        """Define the collection ``name``, replacing an earlier definition."""
        if self._media_collections is None:
            self._media_collections = {}
        collection = MediaCollection.create(name)
        self._media_collections[name] = collection
        return collection

    def register_media_collections(self) -> None:
        self._media_collections = {}
        self.define_media_collections()

    @property
    def media_collections(self) -> list[MediaCollection]:
        if self._media_collections is None:
            return []
        return list(self._media_collections.values())
