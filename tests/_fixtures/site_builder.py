"""Helper utilities for constructing temporary sites in tests."""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Mapping

from velcro.config import SiteConfig, load_config

BASE_TEMPLATE = """\
<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
</head>
<body>
<!-- include="@content" -->
</body>
</html>
"""


class SiteBuilder:
    """Utility for writing files into a throwaway site and loading its config."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path / "site"
        self.root.mkdir()

    def write(self, files: Mapping[str, str]) -> None:
        """Write `path -> contents` entries into the site."""
        for relative, content in files.items():
            path = self.root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            normalised = textwrap.dedent(content).lstrip("\n")
            path.write_text(normalised, encoding="utf-8")

    def write_base(self, content: str = BASE_TEMPLATE) -> None:
        """Write the base template at its default location."""
        self.write({"src/base.html": content})

    def config(self) -> SiteConfig:
        """Return the site configuration as velcro would load it."""
        return load_config(self.root)

    def output(self, relative: str) -> str:
        """Read a file from the default output directory."""
        return (self.root / "dist" / relative).read_text(encoding="utf-8")

    def path(self) -> Path:
        """Return the site root path."""
        return self.root


__all__ = ["BASE_TEMPLATE", "SiteBuilder"]
