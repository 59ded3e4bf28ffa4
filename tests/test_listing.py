# Tests for the filter -> sort -> paginate pipeline.
# Created: 2026-03-05

from datetime import UTC, datetime, timedelta

import pytest

from pocketfs.listing import (
    build_page,
    build_view,
    clamp_page,
    filter_items,
    page_count,
    paginate,
    sort_items,
)
from pocketfs.models import FileSystemItem, PageConfig, SortConfig, SortDirection, SortKey
from pocketfs.selection import SelectionState, SelectionStore

BASE = datetime(2026, 1, 1, tzinfo=UTC)


def _file(name, size=0, days=0):
    return FileSystemItem(
        name=name,
        full_path=f"C:\\Data\\{name}",
        size_bytes=size,
        modified_at=BASE + timedelta(days=days),
    )


def _dir(name):
    return FileSystemItem(name=name, full_path=f"C:\\Data\\{name}\\", is_directory=True)


@pytest.fixture
def files():
    return [
        _file("beta.log", size=300, days=2),
        _file("Alpha.txt", size=100, days=3),
        _file("gamma.csv", size=200, days=1),
    ]


class TestFilter:
    def test_case_insensitive_substring(self, files):
        assert [i.name for i in filter_items(files, "ALPHA")] == ["Alpha.txt"]

    def test_empty_query_keeps_everything(self, files):
        assert filter_items(files, "") == files

    def test_no_match(self, files):
        assert filter_items(files, "zzz") == []


class TestSort:
    def test_name_is_case_insensitive(self, files):
        names = [i.name for i in sort_items(files, SortConfig())]
        assert names == ["Alpha.txt", "beta.log", "gamma.csv"]

    def test_size_descending(self, files):
        config = SortConfig(SortKey.SIZE, SortDirection.DESC)
        assert [i.size_bytes for i in sort_items(files, config)] == [300, 200, 100]

    def test_date_ascending(self, files):
        config = SortConfig(SortKey.DATE, SortDirection.ASC)
        assert [i.name for i in sort_items(files, config)] == ["gamma.csv", "beta.log", "Alpha.txt"]

    def test_sort_does_not_mutate_input(self, files):
        before = list(files)
        sort_items(files, SortConfig(SortKey.SIZE))
        assert files == before


class TestPaginate:
    def test_pages(self):
        items = [_file(f"f{i:02}.txt") for i in range(30)]
        page = paginate(items, PageConfig(page_size=25, page_index=1))
        assert [i.name for i in page] == [f"f{i:02}.txt" for i in range(25, 30)]

    def test_size_zero_shows_all(self):
        items = [_file(f"f{i}.txt") for i in range(120)]
        assert len(paginate(items, PageConfig(page_size=0, page_index=3))) == 120

    def test_page_past_end_is_empty(self):
        items = [_file("a.txt")]
        assert paginate(items, PageConfig(page_size=25, page_index=4)) == []

    def test_page_count(self):
        assert page_count(0, 25) == 0
        assert page_count(26, 25) == 2
        assert page_count(500, 0) == 1

    def test_clamp_page(self):
        assert clamp_page(PageConfig(25, 7), 30).page_index == 1
        assert clamp_page(PageConfig(25, 3), 0).page_index == 0
        assert clamp_page(PageConfig(25, -1), 30).page_index == 0
        page = PageConfig(25, 1)
        assert clamp_page(page, 30) is page

    def test_filter_runs_before_pagination(self):
        items = [_file(f"x{i:02}.log") for i in range(30)] + [_file("match.txt")]
        rows, total = build_page(items, "match", SortConfig(), PageConfig(25, 0))
        assert [i.name for i in rows] == ["match.txt"]
        assert total == 1


class TestBuildView:
    def test_splits_folders_and_files(self, files):
        items = files + [_dir("Logs"), _dir("archive")]
        view = build_view(items)
        assert [d.name for d in view.directories] == ["archive", "Logs"]
        assert [f.name for f in view.files] == ["Alpha.txt", "beta.log", "gamma.csv"]
        assert view.total_directories == 2
        assert view.total_files == 3
        assert view.visible == view.directories + view.files

    def test_panels_page_independently(self):
        items = [_dir(f"d{i:02}") for i in range(30)] + [_file(f"f{i:02}") for i in range(10)]
        view = build_view(
            items,
            folders_page=PageConfig(25, 1),
            files_page=PageConfig(25, 0),
        )
        assert len(view.directories) == 5
        assert len(view.files) == 10
        assert view.total_directories == 30

    def test_query_applies_to_both_panels(self, files):
        items = files + [_dir("alpha-dir"), _dir("other")]
        view = build_view(items, query="alpha")
        assert [i.name for i in view.visible] == ["alpha-dir", "Alpha.txt"]


class TestOrderingProperties:
    def test_descending_name_is_exact_reverse(self, files):
        asc = sort_items(files, SortConfig(SortKey.NAME, SortDirection.ASC))
        desc = sort_items(files, SortConfig(SortKey.NAME, SortDirection.DESC))
        assert desc == list(reversed(asc))

    @pytest.mark.parametrize("count, size", [(0, 25), (24, 25), (25, 25), (101, 25), (7, 3)])
    def test_pages_reconstruct_sequence(self, count, size):
        items = sort_items([_file(f"f{i:03}.txt") for i in range(count)], SortConfig())
        pages = [
            paginate(items, PageConfig(page_size=size, page_index=i))
            for i in range(page_count(count, size))
        ]
        assert [item for page in pages for item in page] == items

    def test_folder_panel_fully_selected(self):
        items = [_file("a.txt"), _file("b.txt"), _file("c.txt"), _dir("One"), _dir("Two")]
        view = build_view(items)
        store = SelectionStore()
        for folder in view.directories:
            store.toggle(folder)

        assert store.state_of(view.directories) is SelectionState.ALL
        assert store.state_of(view.files) is SelectionState.NONE
