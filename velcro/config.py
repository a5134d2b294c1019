"""Configuration loading for velcro sites (velcro.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from pathlib import Path, PurePosixPath
from typing import Any, Dict, List, Optional

import yaml

CONFIG_FILENAME = "velcro.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass(frozen=True)
class SiteDirs:
    """Source directories, relative to the site root."""

    pages: str = "src/pages"
    posts: str = "src/posts"
    assets: str = "src/assets"
    styles: str = "src/styles"
    scripts: str = "src/scripts"
    components: str = "src/components"


@dataclass(frozen=True)
class SiteConfig:
    """Represents the site descriptor defined in velcro.yml."""

    root: Path
    base_html: str = "src/base.html"
    output_dir: str = "dist"
    draft_prefix: str = "_"
    dirs: SiteDirs = field(default_factory=SiteDirs)

    @property
    def output_path(self) -> Path:
        return self.root / self.output_dir

    @property
    def base_html_path(self) -> Path:
        return self.root / self.base_html

    def path_for(self, name: str) -> Path:
        """Return the absolute source directory registered under ``name``."""
        try:
            relative = getattr(self.dirs, name)
        except AttributeError:
            raise KeyError(f"Unknown source directory: {name}") from None
        return self.root / relative

    def input_paths(self) -> List[Path]:
        """Return the config file, base template and every source directory."""
        paths = [self.root / CONFIG_FILENAME, self.base_html_path]
        paths.extend(self.path_for(item.name) for item in fields(self.dirs))
        return paths


def load_config(config_path: Path) -> SiteConfig:
    """Load configuration from disk."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return SiteConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    defaults = SiteConfig(root=root)
    dirs_data = _as_dict(data.get("dirs"))
    default_dirs = SiteDirs()
    dirs = SiteDirs(
        pages=_as_str(dirs_data.get("pages")) or default_dirs.pages,
        posts=_as_str(dirs_data.get("posts")) or default_dirs.posts,
        assets=_as_str(dirs_data.get("assets")) or default_dirs.assets,
        styles=_as_str(dirs_data.get("styles")) or default_dirs.styles,
        scripts=_as_str(dirs_data.get("scripts")) or default_dirs.scripts,
        components=_as_str(dirs_data.get("components")) or default_dirs.components,
    )

    output_dir = _as_str(data.get("output_dir"))
    if output_dir is None:
        output_dir = defaults.output_dir
    _check_output_dir(output_dir)

    draft_prefix = _as_str(data.get("draft_prefix"))

    return SiteConfig(
        root=root,
        base_html=_as_str(data.get("base_html")) or defaults.base_html,
        output_dir=output_dir.strip().rstrip("/"),
        draft_prefix=defaults.draft_prefix if draft_prefix is None else draft_prefix,
        dirs=dirs,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _check_output_dir(value: str) -> None:
    cleaned = value.strip().rstrip("/")
    if not cleaned or cleaned == ".":
        raise ConfigError("output_dir must name a directory below the site root")
    posix = PurePosixPath(cleaned.replace("\\", "/"))
    if posix.is_absolute() or ".." in posix.parts:
        raise ConfigError(f"output_dir must be relative to the site root: {value}")


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


__all__ = ["CONFIG_FILENAME", "ConfigError", "SiteConfig", "SiteDirs", "load_config"]
