"""Core data models shared across velcro components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Set, Tuple


class SourceKind(str, Enum):
    """Which source tree an HTML file was read from."""

    PAGE = "page"
    POST = "post"
    OTHER = "other"

    @property
    def uses_base_template(self) -> bool:
        return self in (SourceKind.PAGE, SourceKind.POST)


class AssetKind(str, Enum):
    """Component-scoped asset flavours and where they are published."""

    STYLESHEET = "stylesheet"
    SCRIPT = "script"

    @property
    def suffix(self) -> str:
        return ".css" if self is AssetKind.STYLESHEET else ".js"

    @property
    def namespace(self) -> str:
        return "styles" if self is AssetKind.STYLESHEET else "scripts"


@dataclass(frozen=True, order=True)
class DiscoveredAsset:
    """A component stylesheet or script found while expanding a document."""

    component: str
    kind: AssetKind

    @property
    def filename(self) -> str:
        return f"{self.component}{self.kind.suffix}"

    @property
    def virtual_path(self) -> str:
        return f"@{self.kind.namespace}/{self.filename}"


@dataclass
class ExpansionContext:
    """Per-document state threaded through recursive include expansion.

    ``visited`` holds the resolved component paths on the current expansion
    stack only; entries are removed when their expansion returns.
    """

    page_id: str = ""
    visited: Set[Path] = field(default_factory=set)
    stack: List[str] = field(default_factory=list)
    assets: Set[DiscoveredAsset] = field(default_factory=set)


@dataclass(frozen=True)
class StructuralWarning:
    """Non-fatal diagnostic about document structure."""

    source: str
    message: str

    def __str__(self) -> str:
        return f"{self.message} ({self.source})"


@dataclass(frozen=True)
class CompositionResult:
    """Output of composing and expanding one source file."""

    content: str
    assets: Tuple[DiscoveredAsset, ...] = ()
    warnings: Tuple[StructuralWarning, ...] = ()


@dataclass
class BuildReport:
    """Summary of everything a build wrote to the output tree."""

    output_dir: Path
    written: List[Path] = field(default_factory=list)
    copied: List[Path] = field(default_factory=list)
    component_assets: List[Path] = field(default_factory=list)
    resolved: List[Path] = field(default_factory=list)
    warnings: List[StructuralWarning] = field(default_factory=list)
    skipped_drafts: List[str] = field(default_factory=list)

    @property
    def file_count(self) -> int:
        return len(self.written) + len(self.copied) + len(self.component_assets)
