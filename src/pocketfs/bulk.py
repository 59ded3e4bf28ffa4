"""Bulk operations against the remote agent.

Created: 2026-03-03

Each public coroutine turns one user-level intent (delete the selection,
zip it, download it, ...) into one or more agent calls, then clears the
selection and invalidates every listing the change can have touched.

Failure policy:
- Request failures raise ``ApiError``, local disk failures ``LocalFileError``;
  the caller turns either into one message.
- Validation problems raise ``ValidationFailed`` before any request.
- Batches made of N independent calls return a ``BulkSummary`` instead of
  raising, so partial failure is reported as counts.
- Cleanup of the temporary zip behind a folder download is best-effort and
  never surfaces.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable, Sequence
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, TypeVar

from pocketfs.cache import ListingCache
from pocketfs.client import FileSystemClient, FileSystemError, LocalFileError, ValidationFailed
from pocketfs.config import get_settings
from pocketfs.file_kinds import is_zip
from pocketfs.models import BulkJobResult, BulkSummary, FileSystemItem
from pocketfs.paths import ensure_trailing_slash, join_path, name_of, parent_of
from pocketfs.selection import SelectionStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

Confirm = Callable[[str, str], Awaitable[bool]]


def _today() -> str:
    return datetime.now(UTC).strftime("%Y-%m-%d")


async def run_sequential(
    items: Iterable[T],
    action: Callable[[T], Awaitable[Any]],
    *,
    stop_on_failure: bool = False,
) -> BulkSummary:
    """Run ``action`` for each item, one at a time, and tally the outcomes.

    An ``action`` may return its own ``BulkJobResult``; anything else counts
    as success. A ``FileSystemError`` becomes a failed result (exit code -1).
    """
    summary = BulkSummary()
    for item in items:
        try:
            result = await action(item)
        except FileSystemError as e:
            summary.results.append(BulkJobResult.failure(f"{item}: {e}"))
            if stop_on_failure:
                break
            continue
        if isinstance(result, BulkJobResult):
            summary.results.append(result)
            if stop_on_failure and not result.succeeded:
                break
        else:
            summary.results.append(BulkJobResult.ok(str(item)))
    return summary


def _require(paths: Iterable[str]) -> list[str]:
    paths = list(paths)
    if not paths:
        raise ValidationFailed("No items selected.")
    return paths


class BulkOperationCoordinator:
    """Sequences multi-item operations and keeps the listing cache honest."""

    def __init__(
        self,
        client: FileSystemClient,
        cache: ListingCache,
        selection: SelectionStore,
        *,
        downloads_dir: Path | None = None,
        cleanup_delay: float | None = None,
    ):
        settings = get_settings()
        self._client = client
        self._cache = cache
        self._selection = selection
        self._downloads_dir = downloads_dir
        self.cleanup_delay = (
            cleanup_delay if cleanup_delay is not None else settings.download_cleanup_delay
        )
        self._cleanup_tasks: set[asyncio.Task] = set()

    @property
    def downloads_dir(self) -> Path:
        if self._downloads_dir is None:
            self._downloads_dir = get_settings().resolved_downloads_dir()
        try:
            self._downloads_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise LocalFileError(f"Downloads folder is not usable: {e}") from e
        return self._downloads_dir

    # -- destructive --

    async def bulk_delete(self, paths: Iterable[str], current_dir: str, *, confirm: Confirm) -> int:
        """Delete ``paths`` in one request after confirmation.

        Returns the number of items deleted (0 when the user declined).
        The batch succeeds or fails as a whole.
        """
        paths = _require(paths)
        if not await confirm(
            "Delete Items", f"Are you sure you want to delete {len(paths)} item(s)?"
        ):
            return 0

        logger.info("Bulk delete of %d item(s)", len(paths))
        await self._client.bulk_delete(paths)
        self._selection.clear()
        self._cache.invalidate(current_dir, *{parent_of(p) for p in paths})
        return len(paths)

    async def delete_each(self, paths: Iterable[str], current_dir: str) -> BulkSummary:
        """Delete items one request at a time; a failure does not stop the rest."""
        paths = _require(paths)
        summary = await run_sequential(paths, self._client.delete)
        self._selection.discard(p for p, r in zip(paths, summary.results) if r.succeeded)
        self._cache.invalidate(current_dir, *{parent_of(p) for p in paths})
        return summary

    # -- archives --

    async def zip(
        self,
        paths: Iterable[str],
        current_dir: str,
        archive_name: str | None = None,
        *,
        clear_selection: bool = True,
    ) -> str:
        """Zip ``paths`` into ``archive_name`` next to them. Returns the zip path."""
        paths = _require(paths)
        default = f"{name_of(paths[0])}.zip" if len(paths) == 1 else "archive.zip"
        name = (archive_name if archive_name is not None else default).strip()
        if not name:
            raise ValidationFailed("Zip file name is required.")

        base = current_dir or parent_of(paths[0])
        zip_path = join_path(base, name)
        logger.info("Zipping %d item(s) into %s", len(paths), zip_path)
        await self._client.bulk_zip(paths, zip_path)

        if clear_selection:
            self._selection.clear()
        self._cache.invalidate(ensure_trailing_slash(base))
        return zip_path

    async def unzip(self, zip_path: str, current_dir: str) -> str:
        """Extract ``zip_path`` into the open directory (or next to the zip)."""
        if not is_zip(zip_path):
            raise ValidationFailed(f"{name_of(zip_path)} is not a zip archive.")
        destination = current_dir or parent_of(zip_path)
        await self._client.unzip(zip_path, destination)
        self._cache.invalidate(ensure_trailing_slash(destination))
        return destination

    # -- copy / move --

    async def copy_to(self, paths: Iterable[str], destination: str) -> None:
        """Copy ``paths`` into ``destination``; only the destination changes."""
        paths = _require(paths)
        if not destination:
            raise ValidationFailed("Open a folder to copy into.")
        await self._client.bulk_copy(paths, destination)
        self._selection.clear()
        self._cache.invalidate(destination)

    async def move_to(self, paths: Iterable[str], destination: str) -> None:
        """Move ``paths`` into ``destination``; the sources' folders change too."""
        paths = _require(paths)
        if not destination:
            raise ValidationFailed("Open a folder to move into.")
        await self._client.bulk_move(paths, destination)
        self._selection.clear()
        self._cache.invalidate(destination, *{parent_of(p) for p in paths})

    # -- transfers --

    async def upload_files(self, files: Sequence[Path], destination: str) -> BulkSummary:
        """Upload local files one by one; stops at the first failure."""
        if not destination:
            raise ValidationFailed("Select a folder before uploading files.")
        if not files:
            return BulkSummary()

        target_dir = ensure_trailing_slash(destination)
        summary = await run_sequential(
            [Path(f) for f in files],
            lambda f: self._client.upload_file(target_dir, f),
            stop_on_failure=True,
        )
        self._cache.invalidate(destination)
        return summary

    async def download_file(self, path: str) -> Path:
        return await self._client.download_file(path, self.downloads_dir / name_of(path))

    async def download_folder(self, item: FileSystemItem, current_dir: str) -> Path:
        """Zip a folder on the agent, download the zip, then delete it later.

        The temporary archive is ``<folder>_<yyyy-mm-dd>.zip`` in the open
        directory (or the folder's parent). Its deletion is scheduled
        whether or not the download succeeded and its failure is ignored.
        """
        archive = f"{item.name}_{_today()}.zip"
        base = current_dir or parent_of(item.full_path)
        zip_path = join_path(base, archive)

        await self._client.bulk_zip([item.full_path], zip_path)
        try:
            return await self._client.download_file(zip_path, self.downloads_dir / archive)
        finally:
            self._schedule_cleanup(zip_path, ensure_trailing_slash(base))

    async def download(
        self,
        paths: Iterable[str],
        listing: Iterable[FileSystemItem],
        current_dir: str,
    ) -> Path:
        """Download the selection.

        One item goes through the single-file or folder path. Several items
        are zipped by the agent and streamed back in one response; whether
        folders in a mixed selection are zipped recursively is up to the agent.
        """
        paths = _require(paths)
        if len(paths) == 1:
            item = next((i for i in listing if i.full_path == paths[0]), None)
            if item is not None and item.is_directory:
                return await self.download_folder(item, current_dir)
            return await self.download_file(paths[0])

        target = self.downloads_dir / f"download_{_today()}.zip"
        path = await self._client.download_bulk(paths, target)
        self._selection.clear()
        return path

    # -- deferred cleanup --

    def _schedule_cleanup(self, zip_path: str, directory: str) -> None:
        task = asyncio.create_task(self._cleanup_later(zip_path, directory))
        self._cleanup_tasks.add(task)
        task.add_done_callback(self._cleanup_tasks.discard)

    async def _cleanup_later(self, zip_path: str, directory: str) -> None:
        await asyncio.sleep(self.cleanup_delay)
        try:
            await self._client.bulk_delete([zip_path])
            self._cache.invalidate(directory)
        except Exception as e:
            logger.debug("Ignoring cleanup failure for %s: %s", zip_path, e)

    @property
    def pending_cleanups(self) -> int:
        return len(self._cleanup_tasks)

    async def drain(self) -> None:
        """Wait for scheduled cleanups to finish."""
        if self._cleanup_tasks:
            await asyncio.gather(*list(self._cleanup_tasks), return_exceptions=True)

    async def cancel_pending(self) -> None:
        for task in list(self._cleanup_tasks):
            task.cancel()
        await self.drain()
