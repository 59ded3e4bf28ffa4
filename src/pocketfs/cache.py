"""Per-path cache of directory listings.

There is no TTL and no optimistic patching: whatever is cached was returned
by the agent at some point. Every mutation calls ``invalidate()`` on the
affected directories and the next ``read()`` goes back to the server.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from pocketfs.client import FileSystemClient
from pocketfs.models import FileSystemItem

logger = logging.getLogger(__name__)

# Cache key for the drives list; never collides with a real path.
DRIVES = "<drives>"


def parse_listing(raw: Any) -> list[FileSystemItem]:
    """Turn a listing response into items, degrading to [] on odd payloads."""
    if not isinstance(raw, list):
        if raw is not None:
            logger.warning("Listing response is not a list (%s), ignoring", type(raw).__name__)
        return []

    items: list[FileSystemItem] = []
    for entry in raw:
        try:
            items.append(FileSystemItem.model_validate(entry))
        except ValidationError as e:
            logger.warning("Skipping malformed listing entry %r: %s", entry, e)
    return items


class ListingCache:
    """Maps a path (``""`` for the root picker, ``DRIVES`` for drives) to items."""

    def __init__(self, client: FileSystemClient):
        self._client = client
        self._entries: dict[str, list[FileSystemItem]] = {}
        self._stale: set[str] = set()

    def get(self, path: str) -> list[FileSystemItem] | None:
        """Last fetched items for ``path``, even if invalidated since."""
        return self._entries.get(path)

    def is_fresh(self, path: str) -> bool:
        return path in self._entries and path not in self._stale

    async def fetch(self, path: str) -> list[FileSystemItem]:
        """Fetch ``path`` from the agent and replace the cached entry.

        On failure the previous entry is kept and the error propagates to the
        caller for display. No retry.
        """
        try:
            if path == DRIVES:
                raw = await self._client.list_drives()
            else:
                raw = await self._client.list_directory(path)
        except Exception as e:
            logger.warning("Listing %r failed: %s", path or "<root>", e)
            raise

        items = parse_listing(raw)
        self._entries[path] = items
        self._stale.discard(path)
        logger.debug("Listed %r: %d item(s)", path or "<root>", len(items))
        return items

    async def read(self, path: str) -> list[FileSystemItem]:
        """Cached items if fresh, otherwise a fetch."""
        if self.is_fresh(path):
            return self._entries[path]
        return await self.fetch(path)

    def invalidate(self, *paths: str) -> None:
        for path in paths:
            self._stale.add(path)

    def invalidate_all(self) -> None:
        self._stale.update(self._entries)

    def clear(self) -> None:
        self._entries.clear()
        self._stale.clear()
