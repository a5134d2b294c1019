"""Injection of component-scoped stylesheet and script references."""

from __future__ import annotations

from typing import Iterable, List

from ..logging import get_logger
from ..models import AssetKind, DiscoveredAsset
from . import html


class AssetInjector:
    """Adds ``<link>``/``<script>`` tags for assets discovered during expansion.

    References use the ``@styles``/``@scripts`` virtual roots and are finalised
    by the path resolution pass.
    """

    LINK_FMT = '<link rel="stylesheet" href="{path}">\n'
    SCRIPT_FMT = '<script src="{path}"></script>\n'

    def __init__(self) -> None:
        self.logger = get_logger("compose.assets")

    def inject(self, text: str, assets: Iterable[DiscoveredAsset], *, source: str = "<document>") -> str:
        ordered = sorted(set(assets))
        if not ordered:
            return text

        stylesheets = [asset for asset in ordered if asset.kind is AssetKind.STYLESHEET]
        scripts = [asset for asset in ordered if asset.kind is AssetKind.SCRIPT]

        if stylesheets:
            block = self._render(self.LINK_FMT, stylesheets)
            injected = html.insert_before_closing(text, "head", block)
            if injected is None:
                self.logger.warning("No </head>; component stylesheets not linked", extra={"source": source})
            else:
                text = injected

        if scripts:
            block = self._render(self.SCRIPT_FMT, scripts)
            injected = html.insert_before_closing(text, "body", block, last=True)
            if injected is None:
                self.logger.warning("No </body>; component scripts not linked", extra={"source": source})
            else:
                text = injected

        return text

    @staticmethod
    def _render(template: str, assets: List[DiscoveredAsset]) -> str:
        return "".join(template.format(path=asset.virtual_path) for asset in assets)


__all__ = ["AssetInjector"]
