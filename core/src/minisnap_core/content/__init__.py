from __future__ import annotations

from minisnap_core.content.ids import is_valid_slug, new_slug
from minisnap_core.content.models import Draft, Entry, RendererKind, parse_renderer
from minisnap_core.content.renderer import render_html
from minisnap_core.content.store import EntryStore

__all__ = [
    "Draft",
    "Entry",
    "EntryStore",
    "RendererKind",
    "is_valid_slug",
    "new_slug",
    "parse_renderer",
    "render_html",
]
