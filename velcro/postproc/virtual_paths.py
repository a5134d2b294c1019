"""Rewrites virtual ``@namespace/...`` references into relative paths."""

from __future__ import annotations

import posixpath
import re
from pathlib import Path
from typing import Iterator, List

from ..logging import get_logger
from ..source_scanner import read_site_text, write_site_text

NAMESPACES = ("assets", "posts", "styles", "scripts", "pages")
RESOLVED_SUFFIXES = frozenset({".html", ".css", ".js"})
INDEX_PAGE = "index"


class VirtualPathResolver:
    """Resolves virtual references against each file's final output location.

    ``@assets``, ``@posts``, ``@styles`` and ``@scripts`` map onto the
    same-named top-level output directories. ``@pages/index`` is flattened into
    the output root, mirroring how the page stage lays out the index page.
    """

    _REFERENCE_PATTERN = re.compile(
        r"(?<![\w.@])@(?P<namespace>" + "|".join(NAMESPACES) + r")/(?P<suffix>[^\s\"'()<>`]*)"
    )

    def __init__(self) -> None:
        self.logger = get_logger("postproc.virtual_paths")

    def resolve_tree(self, output_root: Path) -> List[Path]:
        """Rewrite every HTML, CSS and JS file below ``output_root`` in place.

        Returns the files whose content changed.
        """
        changed: List[Path] = []
        for path in self._iter_candidates(output_root):
            relative_dir = path.parent.relative_to(output_root).as_posix()
            original = read_site_text(path)
            resolved = self.resolve_text(original, relative_dir)
            if resolved != original:
                write_site_text(path, resolved)
                changed.append(path)
                self.logger.debug("Resolved virtual paths in %s", path.relative_to(output_root))
        return changed

    def resolve_text(self, text: str, relative_dir: str) -> str:
        """Resolve references in ``text`` for a file living in ``relative_dir``."""
        if "@" not in text:
            return text
        return self._REFERENCE_PATTERN.sub(
            lambda match: self.resolve_reference(
                match.group("namespace"), match.group("suffix"), relative_dir
            ),
            text,
        )

    def resolve_reference(self, namespace: str, suffix: str, relative_dir: str) -> str:
        target = self._target(namespace, suffix)
        if relative_dir in ("", "."):
            return target
        relative = posixpath.relpath(target, relative_dir)
        if target.endswith("/") and not relative.endswith("/"):
            relative += "/"
        return relative

    @staticmethod
    def _target(namespace: str, suffix: str) -> str:
        """Return the output-root relative path for a virtual reference."""
        if namespace != "pages":
            return f"{namespace}/{suffix}"
        head, _, rest = suffix.partition("/")
        if head in (INDEX_PAGE, ""):
            return rest or "index.html"
        return suffix

    @staticmethod
    def _iter_candidates(output_root: Path) -> Iterator[Path]:
        for path in sorted(output_root.rglob("*")):
            if path.is_file() and path.suffix.lower() in RESOLVED_SUFFIXES:
                yield path


def resolve_virtual_paths(output_root: Path) -> List[Path]:
    """Run the virtual path pass over a finished output tree."""
    return VirtualPathResolver().resolve_tree(output_root)


__all__ = ["NAMESPACES", "VirtualPathResolver", "resolve_virtual_paths"]
