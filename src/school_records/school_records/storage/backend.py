from __future__ import annotations

from typing import Any, ContextManager, Optional, Protocol, Sequence


class StorageBackend(Protocol):
    """Durable home of every collection.

    Note: EntityStore depends on this interface, not on a concrete medium.
    Implementations must raise PersistenceError for unreadable/corrupt data.
    """

    def read(self, collection: str) -> Optional[list[dict[str, Any]]]:
        """Return the stored records, or None when the collection was never written."""

        raise NotImplementedError

    def write(self, collection: str, records: Sequence[dict[str, Any]]) -> None:
        raise NotImplementedError

    def remove(self, collection: str) -> None:
        raise NotImplementedError

    def collections(self) -> list[str]:
        raise NotImplementedError

    def lock(self, collection: str) -> ContextManager[None]:
        """Exclusive hold on one collection, shared by every store on this medium.

        Held around each read-modify-write cycle, so stores in other threads or
        processes that use the same medium cannot interleave with it.
        """

        raise NotImplementedError
