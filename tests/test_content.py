from pathlib import Path

import pytest
from bs4 import BeautifulSoup

from marksite.console import Reporter
from marksite.content import PageBuilder
from marksite.errors import MalformedOption, StylesheetNotFound
from marksite.renderers import MarkdownRenderer, highlight_stylesheet


def make_builder(tmp_path: Path, pretty: bool = False) -> tuple[PageBuilder, Path]:
    root = tmp_path / "src"
    root.mkdir()
    builder = PageBuilder(root, root / "out", pretty=pretty, reporter=Reporter(quiet=True))
    return builder, root


def body_of(html: str) -> str:
    return html.split("<body>\n", 1)[1].rsplit("\n  </body>", 1)[0]


def test_document_without_options(tmp_path):
    builder, root = make_builder(tmp_path)
    text = "# Hello\n\nSome *text* and a [link](/about.html).\n"
    (root / "index.md").write_text(text, encoding="utf-8")

    dest = builder.build(root / "index.md")
    assert dest == root / "out" / "index.html"
    html = dest.read_text(encoding="utf-8")
    assert body_of(html) == MarkdownRenderer().render(text)
    assert "<title>" not in html
    assert "<link" not in html
    assert "katex" not in html
    assert "<style>" not in html
    assert "%%" not in html


def test_title_appears_once_and_is_escaped(tmp_path):
    builder, root = make_builder(tmp_path)
    (root / "a.md").write_text("%%\ntitle = Foo\n%%\n# Foo\n", encoding="utf-8")
    (root / "b.md").write_text("%%\ntitle = Tom & <Jerry>\n%%\nbody\n", encoding="utf-8")

    html = builder.build(root / "a.md").read_text(encoding="utf-8")
    assert html.count("<title>Foo</title>") == 1
    assert "%%" not in body_of(html)

    html = builder.build(root / "b.md").read_text(encoding="utf-8")
    assert "<title>Tom &amp; &lt;Jerry&gt;</title>" in html


def test_stylesheet_link_points_at_compiled_css(tmp_path):
    builder, root = make_builder(tmp_path)
    (root / "docs" / "css").mkdir(parents=True)
    (root / "docs" / "css" / "theme.scss").write_text("a { color: red; }", encoding="utf-8")
    (root / "site.sass").write_text("a\n  color: red\n", encoding="utf-8")
    (root / "docs" / "page.md").write_text(
        "%%\nstyle = css/theme.scss\n%%\ntext\n", encoding="utf-8"
    )
    (root / "docs" / "root.md").write_text("%%\nstyle = /site.sass\n%%\ntext\n", encoding="utf-8")

    html = builder.build(root / "docs" / "page.md").read_text(encoding="utf-8")
    assert '<link rel="stylesheet" href="css/theme.css">' in html

    html = builder.build(root / "docs" / "root.md").read_text(encoding="utf-8")
    assert '<link rel="stylesheet" href="/site.css">' in html


def test_missing_stylesheet_is_fatal(tmp_path):
    builder, root = make_builder(tmp_path)
    (root / "index.md").write_text("%%\nstyle = nope.css\n%%\ntext\n", encoding="utf-8")
    with pytest.raises(StylesheetNotFound) as excinfo:
        builder.build(root / "index.md")
    assert excinfo.value.source_path == root / "index.md"
    assert not (root / "out" / "index.html").exists()


def test_math_support(tmp_path):
    builder, root = make_builder(tmp_path)
    (root / "math.md").write_text(
        "%%\nmath = yes\n%%\nEuler: $e^{i\\pi} + 1 = 0$\n", encoding="utf-8"
    )
    html = builder.build(root / "math.md").read_text(encoding="utf-8")
    head = html.split("</head>", 1)[0]
    assert "katex.min.css" in head
    assert "auto-render.min.js" in head
    assert 'class="math"' in body_of(html)


def test_math_only_enabled_by_yes(tmp_path):
    builder, root = make_builder(tmp_path)
    (root / "math.md").write_text("%%\nmath = no\n%%\nPrice: $5 and $6\n", encoding="utf-8")
    html = builder.build(root / "math.md").read_text(encoding="utf-8")
    assert "katex" not in html
    assert 'class="math"' not in html


def test_code_highlighting_with_theme(tmp_path):
    builder, root = make_builder(tmp_path)
    source = "```python\ndef hello():\n    return 1\n```\n"
    (root / "code.md").write_text(
        "%%\ncode = yes\nhighlight = monokai\n%%\n" + source, encoding="utf-8"
    )
    html = builder.build(root / "code.md").read_text(encoding="utf-8")
    head, body = html.split("</head>", 1)
    assert "<style>" in head
    assert ".highlight" in head
    assert '<div class="highlight">' in body


def test_code_without_yes_highlights_but_adds_no_theme(tmp_path):
    builder, root = make_builder(tmp_path)
    (root / "code.md").write_text(
        "%%\ncode = true\n%%\n```python\nx = 1\n```\n\n```\nplain <b>\n```\n", encoding="utf-8"
    )
    html = builder.build(root / "code.md").read_text(encoding="utf-8")
    assert "<style>" not in html
    assert '<div class="highlight">' in html
    assert "plain &lt;b&gt;" in html


def test_unknown_code_language_falls_back(tmp_path):
    builder, root = make_builder(tmp_path)
    (root / "code.md").write_text(
        "%%\ncode = yes\n%%\n```not-a-language\na < b\n```\n", encoding="utf-8"
    )
    html = builder.build(root / "code.md").read_text(encoding="utf-8")
    assert '<div class="highlight">' not in html
    assert "a &lt; b" in html


def test_unknown_highlight_theme_falls_back_to_default(tmp_path, capsys):
    root = tmp_path / "src"
    root.mkdir()
    builder = PageBuilder(root, root / "out", reporter=Reporter())
    (root / "code.md").write_text(
        "%%\ncode = yes\nhighlight = github\n%%\n```js\nlet x = 1;\n```\n", encoding="utf-8"
    )
    html = builder.build(root / "code.md").read_text(encoding="utf-8")
    head = html.split("</head>", 1)[0]
    assert "<style>" in head
    assert highlight_stylesheet("default") in head
    out = capsys.readouterr().out
    assert "unknown highlight theme, using default: github" in out


def test_head_fragments_in_fixed_order(tmp_path):
    builder, root = make_builder(tmp_path)
    (root / "s.css").write_text("body{}", encoding="utf-8")
    (root / "all.md").write_text(
        "%%\ncode = yes\nmath = yes\nstyle = s.css\ntitle = All\n%%\ntext\n",
        encoding="utf-8",
    )
    html = builder.build(root / "all.md").read_text(encoding="utf-8")
    positions = [
        html.index("<title>All</title>"),
        html.index('href="s.css"'),
        html.index("katex.min.css"),
        html.index("<style>"),
    ]
    assert positions == sorted(positions)


def test_nested_output_directory_created_on_demand(tmp_path, capsys):
    root = tmp_path / "src"
    (root / "guide" / "part").mkdir(parents=True)
    (root / "guide" / "part" / "one.md").write_text("# One", encoding="utf-8")
    builder = PageBuilder(root, root / "out")

    dest = builder.build(root / "guide" / "part" / "one.md")
    assert dest == root / "out" / "guide" / "part" / "one.html"
    out = capsys.readouterr().out
    assert "processing:" in out
    assert "created directory:" in out
    assert "wrote html file" in out

    builder.build(root / "guide" / "part" / "one.md")
    assert "created directory" not in capsys.readouterr().out


def test_malformed_options_carry_source_path(tmp_path):
    builder, root = make_builder(tmp_path)
    (root / "bad.md").write_text("%%\ntitle\n%%\nbody\n", encoding="utf-8")
    with pytest.raises(MalformedOption) as excinfo:
        builder.build(root / "bad.md")
    assert excinfo.value.source_path == root / "bad.md"
    assert excinfo.value.line == 2
    assert str(excinfo.value).startswith(str(root / "bad.md"))


def test_pretty_output(tmp_path):
    builder, root = make_builder(tmp_path, pretty=True)
    (root / "index.md").write_text("%%\ntitle = Home\n%%\n# Hi\n", encoding="utf-8")
    html = builder.build(root / "index.md").read_text(encoding="utf-8")
    soup = BeautifulSoup(html, "html.parser")
    assert soup.title.get_text(strip=True) == "Home"
    assert soup.h1.get_text(strip=True) == "Hi"
    assert "\n" in html


def test_rebuild_overwrites(tmp_path):
    builder, root = make_builder(tmp_path)
    source = root / "index.md"
    source.write_text("first", encoding="utf-8")
    dest = builder.build(source)
    source.write_text("second", encoding="utf-8")
    builder.build(source)
    html = dest.read_text(encoding="utf-8")
    assert "second" in html and "first" not in html
    assert [p.name for p in dest.parent.iterdir()] == ["index.html"]
