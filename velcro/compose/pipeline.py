"""Per-file composition pipeline."""

from __future__ import annotations

from pathlib import Path

from ..config import SiteConfig
from ..models import CompositionResult, ExpansionContext, SourceKind
from .assets import AssetInjector
from .data_page import DataPageRewriter
from .includes import IncludeResolver
from .structure import StructuralValidator
from .template import TemplateComposer


class DocumentPipeline:
    """Composes, expands, injects and validates one HTML source at a time.

    The pipeline itself is stateless between calls apart from the cached base
    template; expansion state lives on a fresh ``ExpansionContext`` per file.
    """

    def __init__(
        self,
        config: SiteConfig,
        composer: TemplateComposer | None = None,
        resolver: IncludeResolver | None = None,
        rewriter: DataPageRewriter | None = None,
        injector: AssetInjector | None = None,
        validator: StructuralValidator | None = None,
    ) -> None:
        self.config = config
        self.rewriter = rewriter or DataPageRewriter()
        self.composer = composer or TemplateComposer(config)
        self.resolver = resolver or IncludeResolver(config.path_for("components"), self.rewriter)
        self.injector = injector or AssetInjector()
        self.validator = validator or StructuralValidator()

    def run(
        self,
        text: str,
        kind: SourceKind,
        *,
        page_id: str = "",
        source: str = "<document>",
    ) -> CompositionResult:
        merged = self.composer.compose(text, kind, source=source)
        context = ExpansionContext(page_id=page_id)
        expanded = self.resolver.expand(merged, context)
        expanded = self.rewriter.rewrite(expanded, page_id)
        injected = self.injector.inject(expanded, context.assets, source=source)
        warnings = self.validator.validate(injected, source)
        return CompositionResult(
            content=injected,
            assets=tuple(sorted(context.assets)),
            warnings=tuple(warnings),
        )


def compose_document(
    text: str,
    kind: SourceKind,
    config: SiteConfig,
    *,
    page_id: str = "",
    source: Path | str | None = None,
) -> CompositionResult:
    """Run the full composition pipeline over a single source text."""
    label = str(source) if source is not None else "<document>"
    return DocumentPipeline(config).run(text, kind, page_id=page_id, source=label)


__all__ = ["DocumentPipeline", "compose_document"]
