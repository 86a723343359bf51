from __future__ import annotations

from typing import Protocol

import markdown
from markupsafe import Markup

from minisnap_core.content.models import RendererKind
from minisnap_core.errors import UnsupportedRenderer

# "extra" minus md_in_html, which only matters when raw HTML is allowed.
MD_EXTENSIONS = [
    "abbr",
    "attr_list",
    "def_list",
    "fenced_code",
    "footnotes",
    "tables",
    "sane_lists",
]


class Renderable(Protocol):
    renderer: RendererKind | str
    raw: str


def _markdown_renderer() -> markdown.Markdown:
    md = markdown.Markdown(extensions=MD_EXTENSIONS, output_format="html")
    # Raw HTML in Markdown source is escaped, not passed through.
    md.preprocessors.deregister("html_block")
    md.inlinePatterns.deregister("html")
    return md


def render_markdown_html(text: str | None) -> str:
    # A fresh converter per call; markdown.Markdown instances keep state.
    return _markdown_renderer().convert(text or "")


def render_html(entry: Renderable) -> Markup:
    """Render an entry (stored or transient) to HTML that templates embed as-is.

    Markdown output never carries raw HTML from the source. HTML entries are
    admin-authored and passed through untouched.
    """

    if entry.renderer == RendererKind.MARKDOWN:
        return Markup(render_markdown_html(entry.raw))
    if entry.renderer == RendererKind.HTML:
        return Markup(entry.raw)
    raise UnsupportedRenderer(str(entry.renderer))
