"""
LayoutStore - JSON persistence for explorer layout and bookmarks.

Process-wide state: last visited path, bookmarks, split-panel width and the
per-panel page sizes. Loaded once when an explorer mounts and written
synchronously on every change. Any key that is missing or unreadable falls
back to its default without affecting the others.

File schema (~/.pocketfs/layout.json):
{
    "lastPath": "C:\\Data\\",
    "bookmarks": ["C:\\Logs\\"],
    "leftPanelWidth": 33,
    "foldersPageSize": 50,
    "filesPageSize": 50,
    "updated_at": "ISO timestamp"
}
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path
from typing import Any

from pocketfs.config import get_settings
from pocketfs.listing import PAGE_SIZES

logger = logging.getLogger(__name__)

MIN_PANEL_WIDTH = 20.0
MAX_PANEL_WIDTH = 70.0
DEFAULT_PANEL_WIDTH = 33.0


class Panel(str, Enum):
    FOLDERS = "folders"
    FILES = "files"


@dataclass
class LayoutState:
    last_path: str = ""
    bookmarks: list[str] = field(default_factory=list)
    left_panel_width: float = DEFAULT_PANEL_WIDTH
    folders_page_size: int = 50
    files_page_size: int = 50


def _clamp_width(value: float) -> float:
    return min(max(float(value), MIN_PANEL_WIDTH), MAX_PANEL_WIDTH)


class LayoutStore:
    """File-backed layout state with explicit ``load()`` / ``save()``."""

    def __init__(self, path: Path | None = None, *, default_page_size: int | None = None):
        settings = get_settings()
        self.path = path or settings.resolved_layout_file()
        size = default_page_size if default_page_size is not None else settings.default_page_size
        self.default_page_size = size if size in PAGE_SIZES else 50
        self.state = self._defaults()
        self.loaded = False

    def _defaults(self) -> LayoutState:
        return LayoutState(
            folders_page_size=self.default_page_size,
            files_page_size=self.default_page_size,
        )

    # -- lifecycle --

    def load(self) -> LayoutState:
        """Read the file, keeping defaults for anything absent or invalid."""
        state = self._defaults()
        data = self._read()

        last_path = data.get("lastPath")
        if isinstance(last_path, str):
            state.last_path = last_path

        bookmarks = data.get("bookmarks")
        if isinstance(bookmarks, list):
            state.bookmarks = list(dict.fromkeys(b for b in bookmarks if isinstance(b, str) and b))

        width = data.get("leftPanelWidth")
        if isinstance(width, int | float) and not isinstance(width, bool):
            state.left_panel_width = _clamp_width(width)

        for key, attr in (
            ("foldersPageSize", "folders_page_size"),
            ("filesPageSize", "files_page_size"),
        ):
            value = data.get(key)
            if value in PAGE_SIZES and not isinstance(value, bool):
                setattr(state, attr, int(value))

        self.state = state
        self.loaded = True
        logger.debug("Loaded layout from %s (%d bookmark(s))", self.path, len(state.bookmarks))
        return state

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable layout file %s: %s", self.path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def save(self) -> None:
        """Write the current state atomically (temp file + rename)."""
        data = {
            "lastPath": self.state.last_path,
            "bookmarks": self.state.bookmarks,
            "leftPanelWidth": self.state.left_panel_width,
            "foldersPageSize": self.state.folders_page_size,
            "filesPageSize": self.state.files_page_size,
            "updated_at": datetime.now(tz=UTC).isoformat(),
        }
        temp_path = self.path.with_suffix(".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            temp_path.replace(self.path)
        except OSError as e:
            logger.error("Error saving layout to %s: %s", self.path, e)
            if temp_path.exists():
                temp_path.unlink()

    # -- last path --

    @property
    def last_path(self) -> str:
        return self.state.last_path

    def set_last_path(self, path: str) -> None:
        # The root sentinel is never remembered.
        if not path or path == self.state.last_path:
            return
        self.state.last_path = path
        self.save()

    # -- bookmarks --

    @property
    def bookmarks(self) -> list[str]:
        return list(self.state.bookmarks)

    def is_bookmarked(self, path: str) -> bool:
        return bool(path) and path in self.state.bookmarks

    def add_bookmark(self, path: str) -> bool:
        """Add ``path``. Returns False if it was empty or already bookmarked."""
        if not path or path in self.state.bookmarks:
            return False
        self.state.bookmarks.append(path)
        self.save()
        return True

    def remove_bookmark(self, path: str) -> bool:
        if path not in self.state.bookmarks:
            return False
        self.state.bookmarks = [b for b in self.state.bookmarks if b != path]
        self.save()
        return True

    # -- panels --

    @property
    def left_panel_width(self) -> float:
        return self.state.left_panel_width

    def set_panel_width(self, percent: float) -> float:
        self.state.left_panel_width = _clamp_width(percent)
        self.save()
        return self.state.left_panel_width

    def page_size(self, panel: Panel | str) -> int:
        if Panel(panel) is Panel.FOLDERS:
            return self.state.folders_page_size
        return self.state.files_page_size

    def set_page_size(self, panel: Panel | str, size: int) -> int:
        if size not in PAGE_SIZES:
            size = self.default_page_size
        if Panel(panel) is Panel.FOLDERS:
            self.state.folders_page_size = size
        else:
            self.state.files_page_size = size
        self.save()
        return size


_store: LayoutStore | None = None


def get_layout_store() -> LayoutStore:
    """Get the process-wide layout store (loaded on first access)."""
    global _store
    if _store is None:
        _store = LayoutStore()
        _store.load()
    return _store


def reset_layout_store() -> None:
    """Forget the process-wide store (for tests)."""
    global _store
    _store = None
