"""Text operations on HTML source.

Documents are treated as semi-structured text rather than parsed. Every regular
expression the composer relies on lives here behind a named operation so the
matching rules can be tested in isolation.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterator, Optional

CONTENT_TARGET = "@content"
COMPONENTS_PREFIX = "@components/"
CONTENT_SENTINEL = f'<!-- include="{CONTENT_TARGET}" -->'

INCLUDE_PATTERN = re.compile(r'<!--\s*include\s*=\s*"(@[^"]+)"\s*-->')


@dataclass(frozen=True)
class Directive:
    """An include marker found in a fragment."""

    target: str
    start: int
    end: int
    text: str

    @property
    def is_content(self) -> bool:
        return self.target == CONTENT_TARGET

    @property
    def component_name(self) -> Optional[str]:
        """Component name for ``@components/NAME[.html]`` targets."""
        if not self.target.startswith(COMPONENTS_PREFIX):
            return None
        name = self.target[len(COMPONENTS_PREFIX):]
        if name.endswith(".html"):
            name = name[: -len(".html")]
        return name


def iter_directives(text: str) -> Iterator[Directive]:
    """Yield include directives in document order."""
    for match in INCLUDE_PATTERN.finditer(text):
        yield Directive(
            target=match.group(1),
            start=match.start(),
            end=match.end(),
            text=match.group(0),
        )


@lru_cache(maxsize=None)
def _region_pattern(tag: str) -> re.Pattern[str]:
    return re.compile(rf"<{tag}(?:\s[^>]*)?>(.*?)</{tag}\s*>", re.IGNORECASE | re.DOTALL)


@lru_cache(maxsize=None)
def _open_pattern(tag: str) -> re.Pattern[str]:
    return re.compile(rf"<{tag}(?:\s[^>]*)?>", re.IGNORECASE)


@lru_cache(maxsize=None)
def _close_pattern(tag: str) -> re.Pattern[str]:
    return re.compile(rf"</{tag}\s*>", re.IGNORECASE)


def extract_region(text: str, tag: str) -> Optional[str]:
    """Return the inner content of the first ``<tag>…</tag>`` region, if any."""
    match = _region_pattern(tag).search(text)
    if match is None:
        return None
    return match.group(1)


def has_open_tag(text: str, tag: str) -> bool:
    return _open_pattern(tag).search(text) is not None


def has_close_tag(text: str, tag: str) -> bool:
    return _close_pattern(tag).search(text) is not None


def insert_before_closing(text: str, tag: str, snippet: str, *, last: bool = False) -> Optional[str]:
    """Insert ``snippet`` immediately before ``</tag>``.

    The first closing tag is used unless ``last`` is set. Returns ``None`` when
    the document has no closing tag for ``tag``.
    """
    matches = list(_close_pattern(tag).finditer(text))
    if not matches:
        return None
    anchor = matches[-1] if last else matches[0]
    return f"{text[:anchor.start()]}{snippet}{text[anchor.start():]}"


def has_sentinel(text: str, target: str = CONTENT_TARGET) -> bool:
    return any(directive.target == target for directive in iter_directives(text))


def replace_sentinel(text: str, replacement: str, target: str = CONTENT_TARGET) -> Optional[str]:
    """Replace the first directive naming ``target`` with ``replacement``.

    Returns ``None`` when no such directive exists.
    """
    for directive in iter_directives(text):
        if directive.target == target:
            return f"{text[:directive.start]}{replacement}{text[directive.end:]}"
    return None


__all__ = [
    "COMPONENTS_PREFIX",
    "CONTENT_SENTINEL",
    "CONTENT_TARGET",
    "Directive",
    "INCLUDE_PATTERN",
    "extract_region",
    "has_close_tag",
    "has_open_tag",
    "has_sentinel",
    "insert_before_closing",
    "iter_directives",
    "replace_sentinel",
]
