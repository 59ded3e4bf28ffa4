"""FileExplorer - one explorer view over a remote host agent.

Created: 2026-03-04

Wires the listing cache, selection, clipboard, bulk coordinator, tail
poller and layout store together, and is the action boundary: every public
coroutine here catches the core's exceptions and turns them into a single
notice, so nothing escapes to whatever is driving the explorer.

Usage:
    async with FileSystemClient("http://host:7780", auth_token="...") as client:
        explorer = FileExplorer(client, confirm=ask_user)
        await explorer.mount()
        await explorer.navigate("C:\\Logs\\")
        explorer.toggle(explorer.view.files[0])
        await explorer.bulk_download()
        await explorer.close()
"""

from __future__ import annotations

import functools
import inspect
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pocketfs.bulk import BulkOperationCoordinator
from pocketfs.cache import DRIVES, ListingCache
from pocketfs.client import FileSystemClient, FileSystemError, ValidationFailed
from pocketfs.clipboard import ClipboardController
from pocketfs.config import Settings, get_settings
from pocketfs.file_kinds import can_edit, can_tail, detect_language, is_image, is_zip
from pocketfs.layout import LayoutStore, Panel, get_layout_store
from pocketfs.listing import ListingView, build_view, clamp_page
from pocketfs.models import (
    BulkSummary,
    ClipboardPayload,
    FileSystemItem,
    ImagePreview,
    PageConfig,
    SortConfig,
    SortKey,
    TailSession,
)
from pocketfs.notifications import Notifier
from pocketfs.paths import (
    breadcrumbs,
    ensure_trailing_slash,
    join_path,
    name_of,
    normalize,
    parent_of,
    starts_with,
)
from pocketfs.selection import SelectionState, SelectionStore
from pocketfs.tail import TailPoller

logger = logging.getLogger(__name__)

ConfirmCallback = Callable[[str, str], bool | Awaitable[bool]]


def _decline(title: str, message: str) -> bool:
    logger.warning("No confirm callback configured, declining: %s", title)
    return False


def action(label: str):
    """Run an explorer action, converting failures into one notice.

    Validation problems become a warning, request failures an error. The
    wrapped coroutine returns None when it failed.
    """

    def decorator(func):
        @functools.wraps(func)
        async def wrapper(self: FileExplorer, *args, **kwargs):
            try:
                return await func(self, *args, **kwargs)
            except ValidationFailed as e:
                self.notifier.warning(str(e))
            except FileSystemError as e:
                self.notifier.error(f"{label}: {e}")
            return None

        return wrapper

    return decorator


@dataclass
class EditorBuffer:
    path: str
    content: str = ""
    is_new: bool = False
    language: str = "plaintext"

    @classmethod
    def for_path(cls, path: str, content: str = "", is_new: bool = False) -> EditorBuffer:
        return cls(path=path, content=content, is_new=is_new, language=detect_language(path))


class FileExplorer:
    """Explorer state for one remote agent."""

    def __init__(
        self,
        client: FileSystemClient,
        *,
        layout: LayoutStore | None = None,
        notifier: Notifier | None = None,
        confirm: ConfirmCallback | None = None,
        settings: Settings | None = None,
        downloads_dir: Path | None = None,
        tail_interval: float | None = None,
        cleanup_delay: float | None = None,
    ):
        settings = settings or get_settings()
        self.client = client
        self.layout = layout or get_layout_store()
        self.notifier = notifier or Notifier()
        self._confirm = confirm or _decline

        self.cache = ListingCache(client)
        self.selection = SelectionStore()
        self.bulk = BulkOperationCoordinator(
            client,
            self.cache,
            self.selection,
            downloads_dir=downloads_dir,
            cleanup_delay=cleanup_delay,
        )
        self.clipboard = ClipboardController(self.bulk)
        self.tail = TailPoller(client, interval=tail_interval)

        self.home_folder = settings.home_folder
        self.current_path = ""
        self.search_query = ""
        self.sort = SortConfig()
        self.folders_page_index = 0
        self.files_page_index = 0
        self.editor: EditorBuffer | None = None
        self.image_preview: ImagePreview | None = None
        self.listing_error: str | None = None

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def mount(self) -> None:
        """Load layout, fetch drives and open the last (or home) folder."""
        if not self.layout.loaded:
            self.layout.load()
        await self.load_drives()
        await self.navigate(self.layout.last_path or self.home_folder)

    async def close(self) -> None:
        """Cancel timers so nothing updates this explorer afterwards."""
        await self.tail.stop()
        await self.bulk.cancel_pending()
        self.layout.save()

    async def _ask(self, title: str, message: str) -> bool:
        answer = self._confirm(title, message)
        if inspect.isawaitable(answer):
            answer = await answer
        return bool(answer)

    # =========================================================================
    # Listing state
    # =========================================================================

    @property
    def items(self) -> list[FileSystemItem]:
        return self.cache.get(self.current_path) or []

    @property
    def drives(self) -> list[FileSystemItem]:
        return self.cache.get(DRIVES) or []

    @property
    def folders_page(self) -> PageConfig:
        return PageConfig(self.layout.page_size(Panel.FOLDERS), self.folders_page_index)

    @property
    def files_page(self) -> PageConfig:
        return PageConfig(self.layout.page_size(Panel.FILES), self.files_page_index)

    @property
    def view(self) -> ListingView:
        return build_view(
            self.items,
            query=self.search_query,
            sort=self.sort,
            folders_page=self.folders_page,
            files_page=self.files_page,
        )

    @property
    def breadcrumbs(self) -> list[tuple[str, str]]:
        return breadcrumbs(self.current_path)

    @property
    def selected_drive(self) -> FileSystemItem | None:
        return next((d for d in self.drives if starts_with(self.current_path, d.full_path)), None)

    @action("Failed to load drives")
    async def load_drives(self) -> list[FileSystemItem]:
        return await self.cache.fetch(DRIVES)

    async def refresh(self) -> bool:
        """Re-fetch the current folder and drop vanished items from the selection."""
        self.cache.invalidate(self.current_path)
        return await self._reload()

    async def _reload(self) -> bool:
        path = self.current_path
        try:
            items = await self.cache.read(path)
        except FileSystemError as e:
            self.listing_error = str(e)
            self.notifier.error(f"Failed to load {path or 'drives'}: {e}")
            return False
        self.listing_error = None
        self.selection.prune(items)
        self._clamp_pages()
        return True

    def _clamp_pages(self) -> None:
        view = self.view
        self.folders_page_index = clamp_page(self.folders_page, view.total_directories).page_index
        self.files_page_index = clamp_page(self.files_page, view.total_files).page_index

    # =========================================================================
    # Navigation
    # =========================================================================

    async def navigate(self, path: str) -> bool:
        """Open ``path`` (``""`` is the drive picker). Clears the selection."""
        self.current_path = ensure_trailing_slash(normalize(path))
        self.selection.clear()
        self.folders_page_index = 0
        self.files_page_index = 0
        self.layout.set_last_path(self.current_path)
        return await self._reload()

    async def open_directory(self, item: FileSystemItem) -> bool:
        self.close_editor()
        return await self.navigate(item.full_path)

    async def go_home(self) -> bool:
        return await self.navigate(self.home_folder)

    async def go_up(self) -> bool:
        """Go to the parent folder; from a drive or share root, to the drive picker."""
        if not self.current_path:
            return False
        parent = parent_of(self.current_path)
        if parent == self.current_path:
            parent = ""
        return await self.navigate(parent)

    # =========================================================================
    # View configuration
    # =========================================================================

    def set_search(self, query: str) -> None:
        self.search_query = query
        self.folders_page_index = 0
        self.files_page_index = 0

    def sort_by(self, key: SortKey | str) -> SortConfig:
        self.sort = self.sort.toggled(SortKey(key))
        return self.sort

    def set_page(self, panel: Panel | str, page_index: int) -> int:
        view = self.view
        if Panel(panel) is Panel.FOLDERS:
            requested = PageConfig(self.folders_page.page_size, page_index)
            self.folders_page_index = clamp_page(requested, view.total_directories).page_index
            return self.folders_page_index
        requested = PageConfig(self.files_page.page_size, page_index)
        self.files_page_index = clamp_page(requested, view.total_files).page_index
        return self.files_page_index

    def set_page_size(self, panel: Panel | str, size: int) -> int:
        size = self.layout.set_page_size(panel, size)
        if Panel(panel) is Panel.FOLDERS:
            self.folders_page_index = 0
        else:
            self.files_page_index = 0
        return size

    def set_panel_width(self, percent: float) -> float:
        return self.layout.set_panel_width(percent)

    # =========================================================================
    # Selection
    # =========================================================================

    def toggle(self, item: FileSystemItem | str) -> bool:
        return self.selection.toggle(item)

    def select_all(self) -> None:
        """Select every visible row in both panels (hidden rows are left out)."""
        self.selection.select_all(self.view.visible)

    def clear_selection(self) -> None:
        self.selection.clear()

    @property
    def folders_selection_state(self) -> SelectionState:
        return self.selection.state_of(self.view.directories)

    @property
    def files_selection_state(self) -> SelectionState:
        return self.selection.state_of(self.view.files)

    def toggle_panel_selection(self, panel: Panel | str) -> SelectionState:
        """Checkbox in a panel header: select all visible rows, or clear them if all were."""
        view = self.view
        rows = view.directories if Panel(panel) is Panel.FOLDERS else view.files
        if self.selection.state_of(rows) is SelectionState.ALL:
            self.selection.clear_panel(rows)
        else:
            self.selection.select_panel(rows)
        return self.selection.state_of(rows)

    # =========================================================================
    # Clipboard
    # =========================================================================

    def copy(self, paths: Sequence[str] | None = None) -> ClipboardPayload | None:
        return self.clipboard.copy(paths if paths is not None else self.selection.paths)

    def cut(self, paths: Sequence[str] | None = None) -> ClipboardPayload | None:
        return self.clipboard.cut(paths if paths is not None else self.selection.paths)

    @property
    def can_paste(self) -> bool:
        return self.clipboard.can_paste(self.current_path)

    @action("Paste failed")
    async def paste(self) -> ClipboardPayload:
        payload = await self.clipboard.paste(self.current_path)
        await self._reload()
        return payload

    # =========================================================================
    # Bulk operations
    # =========================================================================

    @action("Failed to delete items")
    async def bulk_delete(self) -> int:
        count = await self.bulk.bulk_delete(
            self.selection.paths, self.current_path, confirm=self._ask
        )
        if count:
            await self._reload()
            self.notifier.success(f"{count} item(s) deleted successfully")
        return count

    @action("Failed to zip")
    async def bulk_zip(self, archive_name: str | None = None) -> str:
        zip_path = await self.bulk.zip(self.selection.paths, self.current_path, archive_name)
        await self._reload()
        return zip_path

    @action("Failed to zip")
    async def zip_item(self, item: FileSystemItem, archive_name: str | None = None) -> str:
        zip_path = await self.bulk.zip(
            [item.full_path], self.current_path, archive_name, clear_selection=False
        )
        await self._reload()
        return zip_path

    @action("Failed to unzip")
    async def unzip(self, item: FileSystemItem) -> str:
        destination = await self.bulk.unzip(item.full_path, self.current_path)
        await self._reload()
        return destination

    @action("Download failed")
    async def download_item(self, item: FileSystemItem) -> Path:
        if item.is_directory:
            return await self.bulk.download_folder(item, self.current_path)
        return await self.bulk.download_file(item.full_path)

    @action("Download failed")
    async def bulk_download(self) -> Path:
        return await self.bulk.download(self.selection.paths, self.items, self.current_path)

    @action("Upload failed")
    async def upload(self, files: Sequence[Path]) -> BulkSummary:
        summary = await self.bulk.upload_files(files, self.current_path)
        await self._reload()
        if summary.all_succeeded:
            if summary.results:
                self.notifier.success("Files uploaded successfully")
        else:
            failure = next(r for r in summary.results if not r.succeeded)
            self.notifier.error(f"Upload failed: {failure.message}")
        return summary

    # =========================================================================
    # Single-item operations
    # =========================================================================

    @action("Failed to create folder")
    async def create_folder(self, name: str) -> str:
        name = name.strip()
        if not name:
            raise ValidationFailed("Folder name is required.")
        if not self.current_path:
            raise ValidationFailed("Select a folder before creating a new folder.")
        await self.client.create_directory(self.current_path, name)
        self.cache.invalidate(self.current_path)
        await self._reload()
        self.notifier.success("Folder created successfully")
        return join_path(self.current_path, name)

    @action("Failed to rename")
    async def rename(self, item: FileSystemItem, new_name: str) -> bool:
        new_name = new_name.strip()
        if not new_name or new_name == item.name:
            return False
        await self.client.rename(item.full_path, new_name)
        self.cache.invalidate(self.current_path, parent_of(item.full_path))
        await self._reload()
        self.notifier.success("Item renamed successfully")
        return True

    @action("Failed to delete")
    async def delete_item(self, item: FileSystemItem) -> bool:
        if not await self._ask("Delete Item", f'Are you sure you want to delete "{item.name}"?'):
            return False
        await self.client.delete(item.full_path)
        if self.editor and self.editor.path == item.full_path:
            self.close_editor()
        self.selection.discard([item])
        self.cache.invalidate(self.current_path, parent_of(item.full_path))
        await self._reload()
        self.notifier.success("Item deleted successfully")
        return True

    # -- editor --

    def new_file(self, name: str) -> EditorBuffer | None:
        """Open an empty editor for a file that will be created on save."""
        name = name.strip()
        if not self.current_path:
            self.notifier.warning("Select a folder before creating a new file.")
            return None
        if not name:
            return None
        self.editor = EditorBuffer.for_path(join_path(self.current_path, name), is_new=True)
        return self.editor

    @action("Failed to open file")
    async def open_editor(self, item: FileSystemItem) -> EditorBuffer:
        if item.is_directory or not can_edit(item.full_path):
            raise ValidationFailed(f"{item.name} cannot be edited.")
        content = await self.client.read_content(item.full_path)
        self.editor = EditorBuffer.for_path(item.full_path, content)
        return self.editor

    @action("Failed to save")
    async def save_editor(self) -> bool:
        if self.editor is None:
            return False
        await self.client.write_file(self.editor.path, self.editor.content)
        self.editor.is_new = False
        self.cache.invalidate(parent_of(self.editor.path))
        await self._reload()
        return True

    def close_editor(self) -> None:
        self.editor = None

    # =========================================================================
    # Tail / preview
    # =========================================================================

    async def start_tail(self, path: str) -> TailSession | ImagePreview:
        result = await self.tail.start(path)
        if isinstance(result, ImagePreview):
            self.image_preview = result
        return result

    def pause_tail(self) -> None:
        self.tail.pause()

    def resume_tail(self) -> None:
        self.tail.resume()

    async def stop_tail(self) -> None:
        await self.tail.stop()

    def close_image_preview(self) -> None:
        self.image_preview = None

    # =========================================================================
    # Bookmarks
    # =========================================================================

    @property
    def bookmarks(self) -> list[str]:
        return self.layout.bookmarks

    @property
    def is_bookmarked(self) -> bool:
        return self.layout.is_bookmarked(self.current_path)

    def add_bookmark(self) -> bool:
        return self.layout.add_bookmark(self.current_path)

    def remove_bookmark(self, path: str) -> bool:
        return self.layout.remove_bookmark(path)

    async def open_bookmark(self, path: str) -> bool:
        return await self.navigate(path)

    # =========================================================================
    # Context actions and shortcuts
    # =========================================================================

    @staticmethod
    def actions_for(item: FileSystemItem) -> list[str]:
        """Ordered context-menu actions available for ``item``."""
        actions = ["open"] if item.is_directory else []
        actions += ["download", "zip"]
        if not item.is_directory:
            if can_edit(item.full_path):
                actions.append("edit")
            if is_image(item.full_path):
                actions.append("view")
            elif can_tail(item.full_path):
                actions.append("tail")
        actions += ["copy", "cut"]
        if not item.is_directory and is_zip(name_of(item.full_path)):
            actions.append("unzip")
        actions += ["rename", "delete"]
        return actions

    async def handle_shortcut(self, key: str, *, ctrl: bool = False) -> bool:
        """Dispatch a keyboard shortcut. Returns True if it was handled."""
        if self.editor is not None:
            return False

        key = key.lower() if len(key) == 1 else key
        handlers: dict[tuple[str, bool], Callable[[], Any]] = {
            ("c", True): lambda: self.copy() if self.selection else None,
            ("x", True): lambda: self.cut() if self.selection else None,
            ("v", True): lambda: self.paste() if not self.clipboard.is_empty else None,
            ("Delete", False): lambda: self.bulk_delete() if self.selection else None,
            ("a", True): self.select_all,
            ("Escape", False): self.clear_selection,
            ("F5", False): self.refresh,
            ("r", True): self.refresh,
        }
        handler = handlers.get((key, ctrl))
        if handler is None:
            return False
        result = handler()
        if inspect.isawaitable(result):
            await result
        return True
