"""Copy/cut/paste staging for remote items."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from pocketfs.bulk import BulkOperationCoordinator
from pocketfs.client import ValidationFailed
from pocketfs.models import ClipboardOperation, ClipboardPayload

logger = logging.getLogger(__name__)


class ClipboardController:
    """Holds at most one payload: ``empty`` or ``holding(items, operation)``.

    A copy payload survives any number of pastes. A cut payload is cleared
    after its move succeeds and kept if the move fails, so the user can retry.
    """

    def __init__(self, bulk: BulkOperationCoordinator):
        self._bulk = bulk
        self._payload: ClipboardPayload | None = None

    @property
    def payload(self) -> ClipboardPayload | None:
        return self._payload

    @property
    def is_empty(self) -> bool:
        return self._payload is None

    def copy(self, paths: Iterable[str]) -> ClipboardPayload | None:
        return self._hold(paths, ClipboardOperation.COPY)

    def cut(self, paths: Iterable[str]) -> ClipboardPayload | None:
        return self._hold(paths, ClipboardOperation.CUT)

    def clear(self) -> None:
        self._payload = None

    def _hold(self, paths: Iterable[str], operation: ClipboardOperation) -> ClipboardPayload | None:
        items = tuple(paths)
        if not items:
            return None
        self._payload = ClipboardPayload(items=items, operation=operation)
        logger.debug("Clipboard holds %d item(s) for %s", len(items), operation.value)
        return self._payload

    def can_paste(self, destination: str) -> bool:
        return self._payload is not None and bool(destination)

    async def paste(self, destination: str) -> ClipboardPayload:
        """Copy or move the staged items into ``destination``.

        Raises ``ValidationFailed`` without touching anything when the
        clipboard is empty or ``destination`` is the root sentinel; request
        failures propagate with the clipboard intact.
        """
        payload = self._payload
        if payload is None:
            raise ValidationFailed("Clipboard is empty.")
        if not destination:
            raise ValidationFailed("Open a folder before pasting.")

        sources = list(payload.items)
        if payload.operation is ClipboardOperation.COPY:
            await self._bulk.copy_to(sources, destination)
        else:
            await self._bulk.move_to(sources, destination)
            # A newer copy/cut during the request wins.
            if self._payload is payload:
                self._payload = None

        logger.info(
            "Pasted %d item(s) into %s (%s)", len(sources), destination, payload.operation.value
        )
        return payload
