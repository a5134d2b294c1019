"""Build orchestration for velcro sites."""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import Callable, List, Set

from .compose import BuildError, DocumentPipeline, page_identifier
from .config import ConfigError, SiteConfig, load_config
from .logging import get_logger
from .models import BuildReport, DiscoveredAsset, SourceKind
from .postproc import VirtualPathResolver
from .scaffold import SiteScaffolder
from .source_scanner import iter_source_files, list_entry_dirs, read_site_text, write_site_text

STATIC_STAGES = ("assets", "scripts", "styles")


class _BuildRun:
    """Mutable state for a single build; discarded when the build ends."""

    def __init__(self, config: SiteConfig, pipeline: DocumentPipeline, include_drafts: bool) -> None:
        self.config = config
        self.pipeline = pipeline
        self.include_drafts = include_drafts
        self.report = BuildReport(output_dir=config.output_path)
        self.assets: Set[DiscoveredAsset] = set()


class Orchestrator:
    """Runs the build stages in order and emits the output tree.

    Stages: posts, assets, scripts, styles, pages, component assets and
    finally virtual path resolution over everything that was written.
    """

    def __init__(
        self,
        pipeline_factory: Callable[[SiteConfig], DocumentPipeline] | None = None,
        path_resolver: VirtualPathResolver | None = None,
        scaffolder: SiteScaffolder | None = None,
    ) -> None:
        self.pipeline_factory = pipeline_factory or DocumentPipeline
        self.path_resolver = path_resolver or VirtualPathResolver()
        self.scaffolder = scaffolder or SiteScaffolder()
        self.logger = get_logger("orchestrator")

    def run_init(self, name: str, directory: str | Path = ".") -> Path:
        """Create a starter site called ``name`` inside ``directory``."""
        parent = Path(directory).expanduser().resolve()
        self.logger.info("Initializing site %s in %s", name, parent)
        return self.scaffolder.create(name, parent)

    def run_build(self, path: str | Path, *, include_drafts: bool = False, clean: bool = False) -> BuildReport:
        """Build the site rooted at ``path``."""
        site_root = Path(path).expanduser().resolve()
        if not site_root.is_dir():
            raise FileNotFoundError(f"Site path not found: {path}")

        config = load_config(site_root)
        self.logger.info("Starting build for %s", site_root)
        if clean:
            self._clean_output(config)
        config.output_path.mkdir(parents=True, exist_ok=True)

        run = _BuildRun(config, self.pipeline_factory(config), include_drafts)

        self.logger.info("Building posts...")
        self._build_posts(run)
        for stage in STATIC_STAGES:
            self.logger.info("Building %s...", stage)
            self._build_static(run, stage)
        self.logger.info("Building pages...")
        self._build_pages(run)
        self.logger.info("Copying component assets...")
        self._copy_component_assets(run)
        self.logger.info("Resolving virtual paths...")
        run.report.resolved = self.path_resolver.resolve_tree(config.output_path)

        report = run.report
        self.logger.info(
            "Built %d file(s) into %s with %d warning(s)",
            report.file_count,
            config.output_path,
            len(report.warnings),
        )
        return report

    def _build_posts(self, run: _BuildRun) -> None:
        posts_root = run.config.path_for("posts")
        if not posts_root.is_dir():
            self.logger.debug("No posts directory at %s; skipping", posts_root)
            return
        output_root = run.config.output_path / "posts"
        for entry in self._entries(run, posts_root, "posts"):
            self._process_directory(run, entry, output_root / entry.name, SourceKind.POST, posts_root)

    def _build_static(self, run: _BuildRun, name: str) -> None:
        source_root = run.config.path_for(name)
        if not source_root.is_dir():
            self.logger.debug("No %s directory at %s; skipping", name, source_root)
            return
        self._process_directory(run, source_root, run.config.output_path / name, SourceKind.OTHER, source_root)

    def _build_pages(self, run: _BuildRun) -> None:
        pages_root = run.config.path_for("pages")
        if not pages_root.is_dir():
            self.logger.debug("No pages directory at %s; skipping", pages_root)
            return
        for entry in self._entries(run, pages_root, "pages"):
            # The index page is flattened into the output root.
            destination = run.config.output_path
            if entry.name != "index":
                destination = destination / entry.name
            self._process_directory(run, entry, destination, SourceKind.PAGE, pages_root)

    def _entries(self, run: _BuildRun, root: Path, label: str) -> List[Path]:
        entries, drafts = list_entry_dirs(
            root,
            draft_prefix=run.config.draft_prefix,
            include_drafts=run.include_drafts,
        )
        for draft in drafts:
            self.logger.info("Skipping draft %s/%s", label, draft)
            run.report.skipped_drafts.append(f"{label}/{draft}")
        return entries

    def _process_directory(
        self,
        run: _BuildRun,
        source_dir: Path,
        destination: Path,
        kind: SourceKind,
        kind_root: Path,
    ) -> None:
        destination.mkdir(parents=True, exist_ok=True)
        for source in iter_source_files(source_dir):
            target = destination / source.relative_to(source_dir)
            target.parent.mkdir(parents=True, exist_ok=True)
            if source.suffix.lower() == ".html":
                self._process_html(run, source, target, kind, kind_root)
            else:
                shutil.copy2(source, target)
                run.report.copied.append(target)

    def _process_html(
        self,
        run: _BuildRun,
        source: Path,
        target: Path,
        kind: SourceKind,
        kind_root: Path,
    ) -> None:
        label = _relative_label(source, run.config.root)
        page_id = page_identifier(source, kind_root) if kind.uses_base_template else ""
        text = read_site_text(source)
        try:
            result = run.pipeline.run(text, kind, page_id=page_id, source=label)
        except BuildError as exc:
            exc.source = source
            self.logger.error("Build failed: %s", exc.message, extra={"source": label})
            raise
        write_site_text(target, result.content)
        self.logger.debug("Built %s", label)
        run.report.written.append(target)
        run.report.warnings.extend(result.warnings)
        run.assets.update(result.assets)

    def _copy_component_assets(self, run: _BuildRun) -> None:
        components_root = run.config.path_for("components")
        for asset in sorted(run.assets):
            source = components_root / asset.filename
            target = run.config.output_path / asset.kind.namespace / asset.filename
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(source, target)
            self.logger.debug("Copied component %s %s", asset.kind.value, asset.filename)
            run.report.component_assets.append(target)

    def _clean_output(self, config: SiteConfig) -> None:
        output = config.output_path.resolve()
        if output == config.root or not output.is_relative_to(config.root):
            raise ConfigError(f"Refusing to clean output directory outside the site: {output}")
        for path in config.input_paths():
            if path.resolve().is_relative_to(output):
                raise ConfigError(
                    f"Refusing to clean {output}: it contains {_relative_label(path, config.root)}"
                )
        if output.exists():
            self.logger.info("Removing previous output at %s", output)
            shutil.rmtree(output)


def _relative_label(path: Path, root: Path) -> str:
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return str(path)


__all__ = ["Orchestrator"]
