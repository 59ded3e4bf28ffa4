"""Tail a remote text file by re-fetching it on a fixed interval.

Polls GET /fs/content every ``tail_interval`` seconds (2 by default) and
replaces the displayed content wholesale. No diffing.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum

from pocketfs.client import FileSystemClient, FileSystemError
from pocketfs.config import get_settings
from pocketfs.file_kinds import is_image
from pocketfs.models import ImagePreview, TailSession

logger = logging.getLogger(__name__)


class TailState(str, Enum):
    INACTIVE = "inactive"
    ACTIVE = "active"
    PAUSED = "paused"


class TailPoller:
    """At most one tail session; starting a new one supersedes the old one."""

    def __init__(self, client: FileSystemClient, *, interval: float | None = None):
        self._client = client
        self.interval = interval if interval is not None else get_settings().tail_interval
        self._session: TailSession | None = None
        self._task: asyncio.Task | None = None
        self._state = TailState.INACTIVE

    @property
    def state(self) -> TailState:
        return self._state

    @property
    def session(self) -> TailSession | None:
        return self._session

    @property
    def content(self) -> str:
        return self._session.content if self._session else ""

    async def start(self, file_path: str) -> TailSession | ImagePreview:
        """Begin tailing ``file_path``.

        Images are not polled; they get an ``ImagePreview`` pointing at the
        raw endpoint and any running tail is left alone.
        """
        if is_image(file_path):
            return ImagePreview(file_path=file_path, url=self._client.raw_url(file_path))

        await self.stop()
        session = TailSession(file_path=file_path)
        self._session = session
        self._state = TailState.ACTIVE
        logger.info("Tailing %s every %.1fs", file_path, self.interval)

        await self._refresh(session)
        # stop() or another start() may have run while the first fetch was in flight.
        if self._session is session and self._state is TailState.ACTIVE:
            self._spawn(session)
        return session

    def pause(self) -> None:
        """Stop ticking but keep the session and its last content."""
        if self._state is not TailState.ACTIVE:
            return
        self._cancel_task()
        self._state = TailState.PAUSED
        if self._session:
            self._session.is_active = False

    def resume(self) -> None:
        if self._state is not TailState.PAUSED or self._session is None:
            return
        self._state = TailState.ACTIVE
        self._session.is_active = True
        self._spawn(self._session)

    async def stop(self) -> None:
        """Clear content, return to inactive and make sure no tick fires again."""
        task = self._cancel_task()
        if task is not None:
            try:
                await task
            except asyncio.CancelledError:
                pass
            except Exception:
                # Reported by _on_task_done.
                pass
        if self._session is not None:
            self._session.content = ""
            self._session.is_active = False
            logger.debug("Stopped tailing %s", self._session.file_path)
        self._session = None
        self._state = TailState.INACTIVE

    def _spawn(self, session: TailSession) -> None:
        self._task = asyncio.create_task(self._poll_loop(session))
        self._task.add_done_callback(lambda task: self._on_task_done(task, session))

    def _on_task_done(self, task: asyncio.Task, session: TailSession) -> None:
        """Log a poll loop that died and leave the session paused."""
        if task.cancelled():
            return
        error = task.exception()
        if error is None:
            return
        logger.error("Tail of %s stopped: %s", session.file_path, error, exc_info=error)
        if self._task is task:
            self._task = None
            self._state = TailState.PAUSED
            session.is_active = False

    def _cancel_task(self) -> asyncio.Task | None:
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
        return task

    async def _poll_loop(self, session: TailSession) -> None:
        while True:
            await asyncio.sleep(self.interval)
            await self._refresh(session)

    async def _refresh(self, session: TailSession) -> None:
        try:
            content = await self._client.read_content(session.file_path)
        except FileSystemError as e:
            logger.warning("Failed to refresh tail of %s: %s", session.file_path, e)
            return
        if self._session is session:
            session.content = content
