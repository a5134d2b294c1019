"""Template composition and include expansion."""

from .assets import AssetInjector
from .data_page import DataPageRewriter
from .errors import (
    BaseTemplateError,
    BuildError,
    CircularIncludeError,
    ComponentReadError,
    MissingPlaceholderError,
)
from .includes import IncludeResolver
from .pipeline import DocumentPipeline, compose_document
from .structure import StructuralValidator
from .template import TemplateComposer, page_identifier

__all__ = [
    "AssetInjector",
    "BaseTemplateError",
    "BuildError",
    "CircularIncludeError",
    "ComponentReadError",
    "DataPageRewriter",
    "DocumentPipeline",
    "IncludeResolver",
    "MissingPlaceholderError",
    "StructuralValidator",
    "TemplateComposer",
    "compose_document",
    "page_identifier",
]
