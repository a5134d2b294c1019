"""Fatal errors raised while composing a document."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence


class BuildError(RuntimeError):
    """Base class for errors that abort the file currently being built."""

    def __init__(self, message: str, *, source: Path | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.source = source

    def __str__(self) -> str:
        if self.source is not None:
            return f"{self.message} (while building {self.source})"
        return self.message


class CircularIncludeError(BuildError):
    """A component includes itself directly or through other components."""

    def __init__(self, component: str, chain: Sequence[str] = ()) -> None:
        self.component = component
        self.chain = tuple(chain) + (component,)
        rendered = " -> ".join(self.chain)
        super().__init__(f"Circular include detected for component {component!r}: {rendered}")


class ComponentReadError(BuildError):
    """A referenced component file is missing or unreadable."""

    def __init__(self, component: str, reason: str) -> None:
        self.component = component
        super().__init__(f"Failed to read component {component!r}: {reason}")


class MissingPlaceholderError(BuildError):
    """The base template lacks the @content sentinel needed for a body merge."""

    def __init__(self, template: Path) -> None:
        self.template = template
        super().__init__(f"Base template {template} has no @content placeholder")


class BaseTemplateError(BuildError):
    """The base template could not be read."""

    def __init__(self, template: Path, reason: str) -> None:
        self.template = template
        super().__init__(f"Failed to read base template {template}: {reason}")


__all__ = [
    "BaseTemplateError",
    "BuildError",
    "CircularIncludeError",
    "ComponentReadError",
    "MissingPlaceholderError",
]
