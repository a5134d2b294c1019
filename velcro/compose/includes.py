"""Recursive expansion of component include directives."""

from __future__ import annotations

from pathlib import Path
from typing import List

from ..logging import get_logger
from ..models import AssetKind, DiscoveredAsset, ExpansionContext
from ..source_scanner import read_site_text
from . import html
from .data_page import DataPageRewriter
from .errors import CircularIncludeError, ComponentReadError


class IncludeResolver:
    """Expands ``@components/NAME`` directives to a fixed point.

    Each component is expanded in the context of the top-level document: its
    own directives are resolved against the components directory, its
    ``data-page`` attributes are rewritten for the document's page, and any
    sibling ``NAME.css``/``NAME.js`` is recorded on the context.
    """

    def __init__(self, components_dir: Path, rewriter: DataPageRewriter | None = None) -> None:
        self.components_dir = components_dir
        self.rewriter = rewriter or DataPageRewriter()
        self.logger = get_logger("compose.includes")

    def expand(self, text: str, context: ExpansionContext) -> str:
        """Return ``text`` with every component directive replaced."""
        parts: List[str] = []
        position = 0
        for directive in html.iter_directives(text):
            parts.append(text[position : directive.start])
            position = directive.end
            name = directive.component_name
            if directive.is_content or name is None:
                parts.append(directive.text)
                continue
            parts.append(self._expand_component(name, context))
        parts.append(text[position:])
        return "".join(parts)

    def component_path(self, name: str) -> Path:
        """Resolve the HTML file for component ``name``."""
        root = self.components_dir.resolve()
        candidate = (root / f"{name}.html").resolve()
        if not name or not candidate.is_relative_to(root):
            raise ComponentReadError(name, "component name resolves outside the components directory")
        return candidate

    def _expand_component(self, name: str, context: ExpansionContext) -> str:
        path = self.component_path(name)
        if path in context.visited:
            raise CircularIncludeError(name, context.stack)

        context.visited.add(path)
        context.stack.append(name)
        try:
            try:
                content = read_site_text(path)
            except OSError as exc:
                raise ComponentReadError(name, exc.strerror or str(exc)) from exc
            self.logger.debug("Expanding component %s", name)
            self._record_assets(name, path, context)
            expanded = self.expand(content, context)
        finally:
            context.stack.pop()
            context.visited.discard(path)

        return self.rewriter.rewrite(expanded, context.page_id)

    def _record_assets(self, name: str, path: Path, context: ExpansionContext) -> None:
        for kind in AssetKind:
            sibling = path.with_suffix(kind.suffix)
            if sibling.is_file():
                context.assets.add(DiscoveredAsset(component=name, kind=kind))


__all__ = ["IncludeResolver"]
