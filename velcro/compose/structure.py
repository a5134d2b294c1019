"""Best-effort structural diagnostics for composed documents."""

from __future__ import annotations

from typing import List

from ..logging import get_logger
from ..models import StructuralWarning
from . import html


class StructuralValidator:
    """Reports unbalanced or missing ``<head>``/``<body>`` tags.

    Findings are logged and returned; they never stop a build.
    """

    def __init__(self) -> None:
        self.logger = get_logger("compose.structure")

    def validate(self, text: str, source: str) -> List[StructuralWarning]:
        warnings: List[StructuralWarning] = []
        has_head = html.has_open_tag(text, "head")

        if has_head and not html.has_close_tag(text, "head"):
            warnings.append(StructuralWarning(source, "Unclosed <head> tag detected"))
        if html.has_open_tag(text, "body") and not html.has_close_tag(text, "body"):
            warnings.append(StructuralWarning(source, "Unclosed <body> tag detected"))
        if not has_head:
            warnings.append(StructuralWarning(source, "Missing <head> tag"))

        for warning in warnings:
            self.logger.warning("%s", warning.message, extra={"source": source})
        return warnings


__all__ = ["StructuralValidator"]
