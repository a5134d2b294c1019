"""Starter-site scaffolding for ``velcro init``."""

from __future__ import annotations

import re
import shutil
from pathlib import Path
from typing import Dict, List

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from .logging import get_logger
from .source_scanner import iter_source_files

_NAME_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")
_TEMPLATE_SUFFIX = ".j2"


class ScaffoldError(ValueError):
    """Raised when a starter site cannot be created."""


class SiteScaffolder:
    """Renders the bundled starter site into a new directory."""

    def __init__(self, templates_dir: Path | None = None) -> None:
        self.templates_dir = templates_dir or Path(__file__).with_name("templates") / "site"
        self.logger = get_logger("scaffold")
        self._env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=False,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )

    def create(self, name: str, parent: Path) -> Path:
        """Create ``parent/name`` from the starter templates and return it."""
        if not _NAME_PATTERN.match(name):
            raise ScaffoldError(
                "The site name must contain only A-Z, a-z, 0-9, hyphens, and underscores"
            )
        destination = parent / name
        if destination.exists():
            raise FileExistsError(f"A folder named {name} already exists in {parent}")

        context: Dict[str, object] = {"site_name": name}
        written: List[Path] = []
        destination.mkdir(parents=True)
        for template in iter_source_files(self.templates_dir):
            relative = template.relative_to(self.templates_dir)
            target = destination / relative
            target.parent.mkdir(parents=True, exist_ok=True)
            if template.suffix == _TEMPLATE_SUFFIX:
                target = target.with_suffix("")
                rendered = self._env.get_template(relative.as_posix()).render(**context)
                target.write_text(rendered, encoding="utf-8")
            else:
                shutil.copy2(template, target)
            self.logger.debug("Created %s", target.relative_to(destination))
            written.append(target)

        self.logger.info("Created %d file(s) for site %s", len(written), name)
        return destination


__all__ = ["ScaffoldError", "SiteScaffolder"]
