"""Windows-flavoured path algebra for remote paths.

The remote agent runs on Windows, so paths are drive roots (``C:\\``), UNC
shares (``\\\\host\\share\\``) or paths below either, always with backslash
separators. Directories being navigated into carry a trailing backslash.

The empty string is the "no path" sentinel: it stands for the root picker
(the list of drives) and is never treated as an error.
"""

from __future__ import annotations

SEP = "\\"
UNC_PREFIX = SEP * 2


def normalize(path: str) -> str:
    """Replace forward slashes with backslashes. No legality checks."""
    return path.replace("/", SEP)


def ensure_trailing_slash(path: str) -> str:
    if not path:
        return ""
    normalized = normalize(path)
    return normalized if normalized.endswith(SEP) else normalized + SEP


def is_unc(path: str) -> bool:
    return normalize(path).startswith(UNC_PREFIX)


def parent_of(path: str) -> str:
    """Return the parent directory of ``path`` with a trailing backslash.

    Drive roots and two-segment UNC share roots are their own parent.
    A bare name with no separator has the root sentinel ``""`` as parent.
    """
    if not path:
        return ""
    normalized = normalize(path).rstrip(SEP)

    if normalized.startswith(UNC_PREFIX):
        parts = [p for p in normalized.split(SEP) if p]
        if len(parts) > 2:
            parts.pop()
        return UNC_PREFIX + SEP.join(parts) + SEP

    if normalized.endswith(":"):
        return normalized + SEP

    idx = normalized.rfind(SEP)
    if idx <= 1:
        return normalized[: idx + 1]
    return normalized[:idx] + SEP


def join_path(base: str, name: str) -> str:
    if not base:
        return name
    return ensure_trailing_slash(base) + name


def name_of(path: str) -> str:
    """Last segment of ``path`` (ignoring a trailing separator)."""
    normalized = normalize(path).rstrip(SEP)
    return normalized.rsplit(SEP, 1)[-1]


def is_root(path: str) -> bool:
    """True for the root sentinel, drive roots and UNC share roots."""
    if not path:
        return True
    return parent_of(path) == ensure_trailing_slash(path)


def breadcrumbs(path: str) -> list[tuple[str, str]]:
    """Split ``path`` into ``(segment, path_up_to_segment)`` pairs for a path bar."""
    if not path:
        return []
    normalized = normalize(path)
    prefix = UNC_PREFIX if is_unc(normalized) else ""
    segments = [s for s in normalized.split(SEP) if s]

    crumbs: list[tuple[str, str]] = []
    for i, segment in enumerate(segments):
        crumbs.append((segment, prefix + SEP.join(segments[: i + 1]) + SEP))
    return crumbs


def starts_with(path: str, prefix: str) -> bool:
    """Case-insensitive prefix test, the way Windows compares paths."""
    if not prefix:
        return False
    return normalize(path).casefold().startswith(normalize(prefix).casefold())
