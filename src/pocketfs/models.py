"""Data models for the remote file explorer.

Created: 2026-03-02

Wire models (what the remote agent sends back) are pydantic models that
accept the agent's camelCase JSON as well as snake_case keyword arguments.
Client-side state is plain dataclasses.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from pocketfs.file_kinds import FileCategory, classify

# ============================================================================
# Wire models
# ============================================================================


class FileSystemItem(BaseModel):
    """A file or directory as listed by the remote agent.

    Identity is ``full_path``. Items are never patched client-side; a refresh
    replaces the whole listing.
    """

    model_config = {"populate_by_name": True, "frozen": True}

    name: str
    full_path: str = Field(alias="fullPath")
    is_directory: bool = Field(default=False, alias="isDirectory")
    size_bytes: int = Field(default=0, alias="sizeBytes")
    modified_at: datetime | None = Field(default=None, alias="modifiedAt")

    @property
    def category(self) -> FileCategory | None:
        """File kind, or None for directories."""
        if self.is_directory:
            return None
        return classify(self.full_path)

    @property
    def modified_timestamp(self) -> float:
        return self.modified_at.timestamp() if self.modified_at else 0.0


class BulkJobResult(BaseModel):
    """Outcome of one item in a batch."""

    model_config = {"populate_by_name": True}

    succeeded: bool
    exit_code: int = Field(default=0, alias="exitCode")
    message: str = ""

    @classmethod
    def ok(cls, message: str = "") -> BulkJobResult:
        return cls(succeeded=True, exit_code=0, message=message)

    @classmethod
    def failure(cls, message: str) -> BulkJobResult:
        return cls(succeeded=False, exit_code=-1, message=message)


# ============================================================================
# Client-side state
# ============================================================================


@dataclass
class BulkSummary:
    """Aggregated outcome of a batch. Failures are data, not exceptions."""

    results: list[BulkJobResult] = field(default_factory=list)

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.results if r.succeeded)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if not r.succeeded)

    @property
    def all_succeeded(self) -> bool:
        return self.failed == 0

    def describe(self, noun: str = "item") -> str:
        if self.failed == 0:
            return f"{self.succeeded} {noun}(s) succeeded"
        return f"{self.succeeded} succeeded, {self.failed} failed"


class ClipboardOperation(str, Enum):
    COPY = "copy"
    CUT = "cut"


@dataclass(frozen=True)
class ClipboardPayload:
    """Items staged for a paste. Independent of the OS clipboard."""

    items: tuple[str, ...]
    operation: ClipboardOperation


class SortKey(str, Enum):
    NAME = "name"
    SIZE = "size"
    DATE = "date"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class SortConfig:
    key: SortKey = SortKey.NAME
    direction: SortDirection = SortDirection.ASC

    def toggled(self, key: SortKey) -> SortConfig:
        """Clicking the active ascending column flips it; anything else sorts ascending."""
        if self.key == key and self.direction == SortDirection.ASC:
            return SortConfig(key, SortDirection.DESC)
        return SortConfig(key, SortDirection.ASC)


@dataclass(frozen=True)
class PageConfig:
    """Zero-based page selection. ``page_size == 0`` means "show all"."""

    page_size: int = 50
    page_index: int = 0


@dataclass
class TailSession:
    file_path: str
    content: str = ""
    is_active: bool = True


@dataclass(frozen=True)
class ImagePreview:
    """Non-polling viewer for image files."""

    file_path: str
    url: str
