"""Tests for velcro.orchestrator."""

from __future__ import annotations

import re
from pathlib import Path

import pytest

from velcro.compose import CircularIncludeError, ComponentReadError
from velcro.config import ConfigError
from velcro.orchestrator import Orchestrator

BASE = """\
<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<link rel="stylesheet" href="@styles/main.css">
</head>
<body>
<!-- include="@components/nav" -->
<!-- include="@content" -->
</body>
</html>
"""

NAV = (
    '<nav><a href="@pages/index" data-page="index">Home</a>'
    '<a href="@pages/about/index.html" data-page="about">About</a></nav>\n'
)

_VIRTUAL_REFERENCE = re.compile(r"@(assets|posts|styles|scripts|pages)/")


def _write_site(site_builder) -> None:
    site_builder.write_base(BASE)
    site_builder.write(
        {
            "src/components/nav.html": NAV,
            "src/components/nav.css": "nav { background: url(@assets/bg.png); }\n",
            "src/components/nav.js": "console.log('nav');\n",
            "src/components/unused.css": "p {}\n",
            "src/pages/index/index.html": """
                <html>
                <head><title>Home</title></head>
                <body><h1>Home</h1><a href="@posts/hello/index.html">Hello</a></body>
                </html>
            """,
            "src/pages/index/extra.css": "h1 { color: red; }\n",
            "src/pages/about/index.html": """
                <html>
                <head><title>About</title></head>
                <body><h1>About</h1></body>
                </html>
            """,
            "src/posts/hello/index.html": """
                <html>
                <head><title>Hello</title><script src="preload.js"></script></head>
                <body><img src="@assets/logo.png"></body>
                </html>
            """,
            "src/posts/hello/preload.js": 'fetch("@assets/data.json");\n',
            "src/posts/_draft/index.html": "<body><p>wip</p></body>\n",
            "src/assets/logo.png": "png",
            "src/assets/bg.png": "png",
            "src/styles/main.css": "body { background: url(@assets/bg.png); }\n",
            "src/scripts/index.js": "console.log('global');\n",
        }
    )


def test_build_emits_composed_site(site_builder) -> None:
    _write_site(site_builder)

    report = Orchestrator().run_build(site_builder.path())

    index = site_builder.output("index.html")
    assert "<title>Home</title>" in index
    assert '<a href="index.html" class="active">Home</a>' in index
    assert '<a href="about/index.html">About</a>' in index
    assert '<a href="posts/hello/index.html">Hello</a>' in index
    assert '<link rel="stylesheet" href="styles/main.css">' in index
    assert '<link rel="stylesheet" href="styles/nav.css">\n</head>' in index
    assert '<script src="scripts/nav.js"></script>\n</body>' in index

    about = site_builder.output("about/index.html")
    assert '<a href="../index.html">Home</a>' in about
    assert '<a href="index.html" class="active">About</a>' in about
    assert '<link rel="stylesheet" href="../styles/nav.css">' in about

    post = site_builder.output("posts/hello/index.html")
    assert '<img src="../../assets/logo.png">' in post
    assert '<script src="preload.js"></script>' in post
    assert 'class="active"' not in post
    assert site_builder.output("posts/hello/preload.js") == 'fetch("../../assets/data.json");\n'

    assert site_builder.output("extra.css") == "h1 { color: red; }\n"
    assert site_builder.output("styles/main.css") == "body { background: url(../assets/bg.png); }\n"
    assert site_builder.output("styles/nav.css") == "nav { background: url(../assets/bg.png); }\n"
    assert site_builder.output("scripts/nav.js") == "console.log('nav');\n"
    assert site_builder.output("assets/logo.png") == "png"

    output_root = site_builder.path() / "dist"
    assert not (output_root / "styles" / "unused.css").exists()
    assert not (output_root / "posts" / "_draft").exists()
    assert report.skipped_drafts == ["posts/_draft"]
    assert report.output_dir == output_root.resolve()
    assert len(report.component_assets) == 2
    assert report.warnings == []


def test_no_virtual_references_survive(site_builder) -> None:
    _write_site(site_builder)
    Orchestrator().run_build(site_builder.path())

    output_root = site_builder.path() / "dist"
    for path in output_root.rglob("*"):
        if path.suffix in {".html", ".css", ".js"}:
            text = path.read_text(encoding="utf-8")
            assert not _VIRTUAL_REFERENCE.search(text), path
            assert "include=" not in text, path


def test_drafts_are_built_on_request(site_builder) -> None:
    _write_site(site_builder)
    report = Orchestrator().run_build(site_builder.path(), include_drafts=True)
    assert "<p>wip</p>" in site_builder.output("posts/_draft/index.html")
    assert report.skipped_drafts == []


def test_circular_include_aborts_build(site_builder) -> None:
    _write_site(site_builder)
    site_builder.write(
        {
            "src/components/loop.html": '<!-- include="@components/again" -->',
            "src/components/again.html": '<!-- include="@components/loop" -->',
            "src/pages/about/index.html": '<body><!-- include="@components/loop" --></body>',
        }
    )

    with pytest.raises(CircularIncludeError) as excinfo:
        Orchestrator().run_build(site_builder.path())

    assert excinfo.value.source == (site_builder.path() / "src" / "pages" / "about" / "index.html").resolve()
    assert not (site_builder.path() / "dist" / "about" / "index.html").exists()


def test_missing_component_aborts_build(site_builder) -> None:
    _write_site(site_builder)
    site_builder.write({"src/posts/hello/index.html": '<body><!-- include="@components/ghost" --></body>'})

    with pytest.raises(ComponentReadError):
        Orchestrator().run_build(site_builder.path())
    assert not (site_builder.path() / "dist" / "posts" / "hello" / "index.html").exists()


def test_structural_warnings_are_reported(site_builder) -> None:
    _write_site(site_builder)
    site_builder.write({"src/assets/snippet.html": "<p>snippet</p>\n"})

    report = Orchestrator().run_build(site_builder.path())

    assert [warning.message for warning in report.warnings] == ["Missing <head> tag"]
    assert site_builder.output("assets/snippet.html") == "<p>snippet</p>\n"


def test_clean_removes_stale_output(site_builder) -> None:
    _write_site(site_builder)
    stale = site_builder.path() / "dist" / "stale.html"
    stale.parent.mkdir(parents=True)
    stale.write_text("old", encoding="utf-8")

    Orchestrator().run_build(site_builder.path())
    assert stale.exists()

    Orchestrator().run_build(site_builder.path(), clean=True)
    assert not stale.exists()
    assert (site_builder.path() / "dist" / "index.html").exists()


def test_missing_source_directories_are_skipped(site_builder) -> None:
    site_builder.write_base()
    site_builder.write({"src/pages/index/index.html": "<head><title>Only</title></head><body>hi</body>"})

    report = Orchestrator().run_build(site_builder.path())

    assert "<title>Only</title>" in site_builder.output("index.html")
    assert len(report.written) == 1


def test_missing_site_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        Orchestrator().run_build(tmp_path / "nope")


def test_custom_directories_from_config(site_builder) -> None:
    site_builder.write(
        {
            "velcro.yml": """
                base_html: layout.html
                output_dir: public
                dirs:
                  pages: pages
                  components: partials
            """,
            "layout.html": '<head></head><body><!-- include="@components/footer" --><!-- include="@content" --></body>',
            "partials/footer.html": "<footer>f</footer>",
            "pages/index/index.html": "<body><p>x</p></body>",
        }
    )

    report = Orchestrator().run_build(site_builder.path())

    output = (site_builder.path() / "public" / "index.html").read_text(encoding="utf-8")
    assert output == "<head></head><body><footer>f</footer><p>x</p></body>"
    assert report.output_dir == (site_builder.path() / "public").resolve()


def test_non_utf8_bytes_and_line_endings_survive(site_builder) -> None:
    _write_site(site_builder)
    root = site_builder.path()
    (root / "src" / "pages" / "about" / "index.html").write_bytes(
        b"<head><title>Caf\xe9</title></head>\r\n<body><p>caf\xe9</p></body>\r\n"
    )
    (root / "src" / "styles" / "main.css").write_bytes(
        b"/* \xe9 */ body { background: url(@assets/bg.png); }\r\n"
    )

    Orchestrator().run_build(root)

    about = (root / "dist" / "about" / "index.html").read_bytes()
    assert b"<title>Caf\xe9</title>" in about
    assert b"<p>caf\xe9</p>" in about
    assert (root / "dist" / "styles" / "main.css").read_bytes() == (
        b"/* \xe9 */ body { background: url(../assets/bg.png); }\r\n"
    )


@pytest.mark.parametrize("output_dir", ["src", "src/components"])
def test_clean_refuses_to_remove_sources(site_builder, output_dir: str) -> None:
    _write_site(site_builder)
    site_builder.write({"velcro.yml": f"output_dir: {output_dir}\n"})

    with pytest.raises(ConfigError):
        Orchestrator().run_build(site_builder.path(), clean=True)

    assert (site_builder.path() / "src" / "components" / "nav.html").exists()
    assert (site_builder.path() / "src" / "base.html").exists()
