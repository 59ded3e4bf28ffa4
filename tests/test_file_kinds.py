# Tests for extension-based file classification.
# Created: 2026-03-05

import pytest

from pocketfs.file_kinds import (
    FileCategory,
    can_edit,
    can_tail,
    classify,
    detect_language,
    extension_of,
    icon_for,
    is_image,
    is_zip,
)


class TestClassify:
    @pytest.mark.parametrize(
        "path, category",
        [
            ("C:\\pics\\photo.PNG", FileCategory.IMAGE),
            ("movie.mkv", FileCategory.VIDEO),
            ("song.mp3", FileCategory.AUDIO),
            ("backup.7z", FileCategory.ARCHIVE),
            ("app.py", FileCategory.CODE),
            ("Program.cs", FileCategory.CODE),
            ("notes.txt", FileCategory.TEXT),
            ("service.log", FileCategory.TEXT),
            ("setup.exe", FileCategory.EXECUTABLE),
            ("report.pdf", FileCategory.DOCUMENT),
            ("README", FileCategory.UNKNOWN),
            ("data.bin", FileCategory.UNKNOWN),
        ],
    )
    def test_categories(self, path, category):
        assert classify(path) is category

    def test_dotfile_uses_name_as_extension(self):
        assert extension_of(".gitignore") == "gitignore"
        assert classify("C:\\repo\\.gitignore") is FileCategory.TEXT

    def test_dot_in_folder_name_is_ignored(self):
        assert extension_of("C:\\release.v2\\file") == ""


class TestCapabilities:
    def test_text_and_code_are_editable(self):
        assert can_edit("a.log")
        assert can_edit("a.json")
        assert can_edit("a.ts")

    def test_binary_files_are_not_editable(self):
        assert not can_edit("a.png")
        assert not can_edit("a.exe")
        assert not can_edit("a.zip")

    def test_tail_follows_edit(self):
        assert can_tail("server.log")
        assert not can_tail("server.mp4")

    def test_is_image(self):
        assert is_image("C:\\x\\shot.jpeg")
        assert not is_image("C:\\x\\shot.txt")

    def test_only_zip_is_extractable(self):
        assert is_zip("a.zip")
        assert is_zip("A.ZIP")
        assert not is_zip("a.7z")
        assert not is_zip("a.tar")


class TestLanguageAndIcons:
    def test_known_languages(self):
        assert detect_language("a.ts") == "typescript"
        assert detect_language("a.yml") == "yaml"
        assert detect_language("a.cs") == "csharp"

    def test_unknown_language_is_plaintext(self):
        assert detect_language("a.log") == "plaintext"

    @pytest.mark.parametrize(
        "path, icon",
        [
            ("a.png", "image"),
            ("a.mp4", "video"),
            ("a.flac", "music"),
            ("a.zip", "file-archive"),
            ("a.py", "file-code"),
            ("a.txt", "file-text"),
            ("a.exe", "cog"),
            ("a.xlsx", "file-spreadsheet"),
            ("a.pdf", "file-text"),
            ("a.bin", "file"),
        ],
    )
    def test_icons(self, path, icon):
        assert icon_for(path) == icon

    def test_directory_icon(self):
        assert icon_for("C:\\Data\\archive.zip", is_directory=True) == "folder"
