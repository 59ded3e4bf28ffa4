"""Multi-item selection within the current listing."""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum

from pocketfs.models import FileSystemItem


class SelectionState(str, Enum):
    """Tri-state checkbox value for a group of rows."""

    NONE = "none"
    PARTIAL = "partial"
    ALL = "all"


def _paths(items: Iterable[FileSystemItem | str]) -> list[str]:
    return [i if isinstance(i, str) else i.full_path for i in items]


class SelectionStore:
    """Set of selected ``full_path`` values.

    Insertion order is kept so bulk requests list paths in the order the user
    picked them. Files and folders are treated alike.
    """

    def __init__(self) -> None:
        self._selected: dict[str, None] = {}

    def __len__(self) -> int:
        return len(self._selected)

    def __contains__(self, path: object) -> bool:
        return path in self._selected

    def __bool__(self) -> bool:
        return bool(self._selected)

    @property
    def paths(self) -> list[str]:
        return list(self._selected)

    def toggle(self, item: FileSystemItem | str) -> bool:
        """Flip membership of ``item``. Returns True if it is now selected."""
        (path,) = _paths([item])
        if path in self._selected:
            del self._selected[path]
            return False
        self._selected[path] = None
        return True

    def select_all(self, visible: Iterable[FileSystemItem | str]) -> None:
        """Replace the selection with exactly the visible rows."""
        self._selected = dict.fromkeys(_paths(visible))

    def select_panel(self, visible: Iterable[FileSystemItem | str]) -> None:
        """Add one panel's visible rows, leaving the other panel's selection alone."""
        for path in _paths(visible):
            self._selected.setdefault(path, None)

    def clear_panel(self, visible: Iterable[FileSystemItem | str]) -> None:
        self.discard(visible)

    def discard(self, items: Iterable[FileSystemItem | str]) -> None:
        for path in _paths(items):
            self._selected.pop(path, None)

    def clear(self) -> None:
        self._selected.clear()

    def prune(self, existing: Iterable[FileSystemItem | str]) -> int:
        """Drop selected paths that are no longer listed. Returns how many went."""
        keep = set(_paths(existing))
        removed = [p for p in self._selected if p not in keep]
        for path in removed:
            del self._selected[path]
        return len(removed)

    def state_of(self, group: Iterable[FileSystemItem | str]) -> SelectionState:
        members = _paths(group)
        if not members:
            return SelectionState.NONE
        count = sum(1 for p in members if p in self._selected)
        if count == 0:
            return SelectionState.NONE
        if count == len(members):
            return SelectionState.ALL
        return SelectionState.PARTIAL
