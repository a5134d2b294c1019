"""Source tree walking and site text I/O."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterator, List

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".idea",
    ".vscode",
    "__pycache__",
}

_EXCLUDED_FILES = {
    ".DS_Store",
    "Thumbs.db",
    ".gitkeep",
}

# Site files are decoded as UTF-8, but any other byte must reach the output
# unchanged, and line endings are never translated.
_TEXT_OPTIONS = {"encoding": "utf-8", "errors": "surrogateescape", "newline": ""}


def is_draft(name: str, prefix: str) -> bool:
    """Return True when ``name`` is marked as a draft by ``prefix``."""
    return bool(prefix) and name.startswith(prefix)


def iter_source_files(root: Path) -> Iterator[Path]:
    """Yield regular files below ``root`` in a stable order."""
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(name for name in dirnames if name not in _EXCLUDED_DIRS)
        current_dir = Path(dirpath)
        for filename in sorted(filenames):
            if filename in _EXCLUDED_FILES:
                continue
            path = current_dir / filename
            if path.is_file():
                yield path


def list_entry_dirs(root: Path, *, draft_prefix: str = "", include_drafts: bool = False) -> tuple[List[Path], List[str]]:
    """Return the child directories of a pages/posts root and skipped draft names."""
    entries: List[Path] = []
    drafts: List[str] = []
    for child in sorted(root.iterdir()):
        if not child.is_dir() or child.name in _EXCLUDED_DIRS:
            continue
        if not include_drafts and is_draft(child.name, draft_prefix):
            drafts.append(child.name)
            continue
        entries.append(child)
    return entries, drafts


def read_site_text(path: Path) -> str:
    with open(path, **_TEXT_OPTIONS) as handle:
        return handle.read()


def write_site_text(path: Path, text: str) -> None:
    with open(path, "w", **_TEXT_OPTIONS) as handle:
        handle.write(text)


__all__ = ["is_draft", "iter_source_files", "list_entry_dirs", "read_site_text", "write_site_text"]
