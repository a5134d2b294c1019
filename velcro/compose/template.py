"""Merge page and post fragments into the shared base template."""

from __future__ import annotations

from pathlib import Path

from ..config import SiteConfig
from ..logging import get_logger
from ..models import SourceKind
from ..source_scanner import read_site_text
from . import html
from .errors import BaseTemplateError, MissingPlaceholderError


def page_identifier(source: Path, kind_root: Path) -> str:
    """Return the name of the child directory of ``kind_root`` holding ``source``.

    ``posts/hello-world/index.html`` yields ``hello-world``. Files that sit
    directly in ``kind_root`` or outside it have no identifier.
    """
    try:
        relative = source.relative_to(kind_root)
    except ValueError:
        return ""
    if len(relative.parts) < 2:
        return ""
    return relative.parts[0]


class TemplateComposer:
    """Splices fragment ``<head>``/``<body>`` regions into the base template."""

    def __init__(self, config: SiteConfig) -> None:
        self.config = config
        self.logger = get_logger("compose.template")
        self._base_template: str | None = None

    @property
    def base_template(self) -> str:
        if self._base_template is None:
            path = self.config.base_html_path
            try:
                self._base_template = read_site_text(path)
            except OSError as exc:
                raise BaseTemplateError(path, exc.strerror or str(exc)) from exc
        return self._base_template

    def compose(self, text: str, kind: SourceKind, *, source: str = "<fragment>") -> str:
        """Return the merged document for ``text``.

        Fragments outside the pages and posts trees are complete documents and
        are returned unchanged.
        """
        if not kind.uses_base_template:
            return text

        document = self.base_template

        head = html.extract_region(text, "head")
        if head is not None:
            merged = html.insert_before_closing(document, "head", head)
            if merged is None:
                self.logger.warning("Base template has no </head>; page head dropped", extra={"source": source})
            else:
                document = merged

        body = html.extract_region(text, "body")
        if body is None:
            self.logger.warning("No <body> region; page content left empty", extra={"source": source})
            body = ""
            if not html.has_sentinel(document):
                return document
        replaced = html.replace_sentinel(document, body)
        if replaced is None:
            raise MissingPlaceholderError(self.config.base_html_path)
        return replaced


__all__ = ["TemplateComposer", "page_identifier"]
