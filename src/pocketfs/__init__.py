"""PocketFS - async client for browsing and managing files on a remote host agent.

Created: 2026-03-02

Talks to the agent's JSON file-system API over HTTP and keeps the client
side of an explorer session: listing cache, multi-selection, a copy/cut
clipboard, bulk operations, tailing of text files and persisted layout.

Usage:
    from pocketfs import FileExplorer, FileSystemClient

    async with FileSystemClient("http://host:7780", auth_token="...") as client:
        explorer = FileExplorer(client)
        await explorer.mount()
        await explorer.navigate("C:\\Logs\\")
        for item in explorer.view.files:
            print(item.name, item.size_bytes)
"""

from .bulk import BulkOperationCoordinator, run_sequential
from .cache import ListingCache
from .client import (
    ApiError,
    AuthenticationRequired,
    FileSystemClient,
    FileSystemError,
    LocalFileError,
    ValidationFailed,
)
from .clipboard import ClipboardController
from .config import Settings, get_settings
from .explorer import EditorBuffer, FileExplorer
from .file_kinds import FileCategory, classify
from .layout import LayoutStore, Panel, get_layout_store
from .logging_setup import setup_logging
from .models import (
    BulkJobResult,
    BulkSummary,
    ClipboardOperation,
    ClipboardPayload,
    FileSystemItem,
    ImagePreview,
    PageConfig,
    SortConfig,
    SortDirection,
    SortKey,
    TailSession,
)
from .notifications import Notice, NoticeLevel, Notifier
from .selection import SelectionState, SelectionStore
from .tail import TailPoller, TailState

__version__ = "0.3.0"

__all__ = [
    "ApiError",
    "AuthenticationRequired",
    "BulkJobResult",
    "BulkOperationCoordinator",
    "BulkSummary",
    "ClipboardController",
    "ClipboardOperation",
    "ClipboardPayload",
    "EditorBuffer",
    "FileCategory",
    "FileExplorer",
    "FileSystemClient",
    "FileSystemError",
    "FileSystemItem",
    "ImagePreview",
    "LayoutStore",
    "ListingCache",
    "LocalFileError",
    "Notice",
    "NoticeLevel",
    "Notifier",
    "PageConfig",
    "Panel",
    "SelectionState",
    "SelectionStore",
    "Settings",
    "SortConfig",
    "SortDirection",
    "SortKey",
    "TailPoller",
    "TailSession",
    "TailState",
    "ValidationFailed",
    "classify",
    "get_layout_store",
    "get_settings",
    "run_sequential",
    "setup_logging",
]
