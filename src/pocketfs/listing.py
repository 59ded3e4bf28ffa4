"""Listing view pipeline: filter -> sort -> paginate.

Pure functions. Filtering and sorting run on the full listing so page
boundaries stay stable when the sort order changes.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from pocketfs.models import FileSystemItem, PageConfig, SortConfig, SortDirection, SortKey

PAGE_SIZES = (25, 50, 100, 0)  # 0 = all


def filter_items(items: Iterable[FileSystemItem], query: str) -> list[FileSystemItem]:
    """Case-insensitive substring match on the item name."""
    if not query:
        return list(items)
    needle = query.casefold()
    return [item for item in items if needle in item.name.casefold()]


def _sort_key(key: SortKey):
    if key is SortKey.SIZE:
        return lambda item: item.size_bytes
    if key is SortKey.DATE:
        return lambda item: item.modified_timestamp
    return lambda item: (item.name.casefold(), item.name)


def sort_items(items: Iterable[FileSystemItem], config: SortConfig) -> list[FileSystemItem]:
    return sorted(
        items,
        key=_sort_key(config.key),
        reverse=config.direction is SortDirection.DESC,
    )


def paginate(items: Sequence[FileSystemItem], page: PageConfig) -> list[FileSystemItem]:
    if page.page_size <= 0:
        return list(items)
    start = page.page_index * page.page_size
    return list(items[start : start + page.page_size])


def page_count(total: int, page_size: int) -> int:
    if page_size <= 0:
        return 1
    return math.ceil(total / page_size)


def clamp_page(page: PageConfig, total: int) -> PageConfig:
    """Pull ``page_index`` back into range after the listing shrank."""
    last = max(page_count(total, page.page_size) - 1, 0)
    if 0 <= page.page_index <= last:
        return page
    return PageConfig(page_size=page.page_size, page_index=min(max(page.page_index, 0), last))


def build_page(
    items: Iterable[FileSystemItem],
    query: str,
    sort: SortConfig,
    page: PageConfig,
) -> tuple[list[FileSystemItem], int]:
    """Run the whole pipeline. Returns the visible rows and the filtered total."""
    ordered = sort_items(filter_items(items, query), sort)
    return paginate(ordered, page), len(ordered)


@dataclass
class ListingView:
    """What the two explorer panels show for one listing."""

    directories: list[FileSystemItem] = field(default_factory=list)
    files: list[FileSystemItem] = field(default_factory=list)
    total_directories: int = 0
    total_files: int = 0

    @property
    def visible(self) -> list[FileSystemItem]:
        return self.directories + self.files


def build_view(
    items: Iterable[FileSystemItem],
    *,
    query: str = "",
    sort: SortConfig | None = None,
    folders_page: PageConfig | None = None,
    files_page: PageConfig | None = None,
) -> ListingView:
    """Split a listing into folder and file panels, each paged on its own."""
    sort = sort or SortConfig()
    items = list(items)
    dirs, total_dirs = build_page(
        [i for i in items if i.is_directory], query, sort, folders_page or PageConfig()
    )
    files, total_files = build_page(
        [i for i in items if not i.is_directory], query, sort, files_page or PageConfig()
    )
    return ListingView(
        directories=dirs,
        files=files,
        total_directories=total_dirs,
        total_files=total_files,
    )
