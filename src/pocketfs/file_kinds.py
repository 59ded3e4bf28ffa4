"""File kind classification by extension.

Every capability check (edit, tail, image preview, unzip) and icon choice is
derived from ``classify()`` so there is exactly one place that knows about
extensions.
"""

from __future__ import annotations

from enum import Enum

from pocketfs.paths import name_of


class FileCategory(str, Enum):
    """Closed set of file kinds the explorer distinguishes."""

    IMAGE = "image"  # previewed via /fs/raw
    VIDEO = "video"  # download only
    AUDIO = "audio"  # download only
    ARCHIVE = "archive"
    CODE = "code"  # editable, tailable
    TEXT = "text"  # editable, tailable
    EXECUTABLE = "executable"  # download only
    DOCUMENT = "document"  # binary office formats
    UNKNOWN = "unknown"


_EXTENSIONS: dict[FileCategory, frozenset[str]] = {
    FileCategory.IMAGE: frozenset(
        {"png", "jpg", "jpeg", "gif", "bmp", "webp", "svg", "ico", "tiff", "tif"}
    ),
    FileCategory.VIDEO: frozenset({"mp4", "webm", "mkv", "avi", "mov", "wmv", "flv", "m4v"}),
    FileCategory.AUDIO: frozenset({"mp3", "wav", "ogg", "flac", "aac", "wma", "m4a"}),
    FileCategory.ARCHIVE: frozenset({"zip", "rar", "7z", "tar", "gz", "bz2", "xz", "tgz"}),
    FileCategory.CODE: frozenset(
        {
            "js", "jsx", "ts", "tsx", "cs", "py", "java", "cpp", "c", "h", "hpp", "go",
            "rs", "rb", "php", "swift", "kt", "scala", "sql", "html", "css", "scss",
            "less", "vue", "svelte",
        }
    ),
    FileCategory.TEXT: frozenset(
        {
            "txt", "md", "log", "json", "xml", "yml", "yaml", "ini", "cfg", "conf", "env",
            "gitignore", "dockerignore", "editorconfig", "csv", "tsv",
        }
    ),
    FileCategory.EXECUTABLE: frozenset(
        {"exe", "msi", "bat", "cmd", "ps1", "sh", "dll", "so", "dylib"}
    ),
    FileCategory.DOCUMENT: frozenset(
        {"pdf", "doc", "docx", "xls", "xlsx", "ppt", "pptx", "odt", "ods", "odp"}
    ),
}

_SPREADSHEETS = frozenset({"xls", "xlsx", "ods", "csv"})

_LANGUAGES = {
    "js": "javascript",
    "jsx": "javascript",
    "ts": "typescript",
    "tsx": "typescript",
    "json": "json",
    "css": "css",
    "html": "html",
    "cs": "csharp",
    "sql": "sql",
    "xml": "xml",
    "md": "markdown",
    "yml": "yaml",
    "yaml": "yaml",
}


def extension_of(path: str) -> str:
    """Lower-cased text after the last dot of the file name ('' if none).

    Dotfiles like ``.gitignore`` yield ``gitignore``.
    """
    name = name_of(path)
    if "." not in name:
        return ""
    return name.rsplit(".", 1)[-1].lower()


def classify(path: str) -> FileCategory:
    ext = extension_of(path)
    for category, extensions in _EXTENSIONS.items():
        if ext in extensions:
            return category
    return FileCategory.UNKNOWN


def is_image(path: str) -> bool:
    return classify(path) is FileCategory.IMAGE


def can_edit(path: str) -> bool:
    return classify(path) in (FileCategory.CODE, FileCategory.TEXT)


def can_tail(path: str) -> bool:
    return classify(path) in (FileCategory.CODE, FileCategory.TEXT)


def is_zip(path: str) -> bool:
    # Only .zip is extractable by the agent; other archives are download-only.
    return extension_of(path) == "zip"


def detect_language(path: str) -> str:
    """Editor syntax mode for ``path``."""
    return _LANGUAGES.get(extension_of(path), "plaintext")


def icon_for(path: str, is_directory: bool = False) -> str:
    """Icon name for a listing row."""
    if is_directory:
        return "folder"
    category = classify(path)
    if category is FileCategory.DOCUMENT and extension_of(path) in _SPREADSHEETS:
        return "file-spreadsheet"
    return {
        FileCategory.IMAGE: "image",
        FileCategory.VIDEO: "video",
        FileCategory.AUDIO: "music",
        FileCategory.ARCHIVE: "file-archive",
        FileCategory.CODE: "file-code",
        FileCategory.TEXT: "file-text",
        FileCategory.EXECUTABLE: "cog",
        FileCategory.DOCUMENT: "file-text",
    }.get(category, "file")
