"""View models handed to the Jinja templates, one per page."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from markupsafe import Markup

from minisnap_core.content.models import Entry, RendererKind

SUMMARY_LIMIT = 140


def format_time(value: datetime | None) -> str:
    if value is None:
        return ""
    return value.astimezone().strftime("%Y-%m-%d %H:%M")


def summarize(raw: str, limit: int = SUMMARY_LIMIT) -> str:
    """Collapse whitespace and cut to ``limit`` characters, marking truncation."""

    collapsed = " ".join(raw.split())
    if len(collapsed) <= limit:
        return collapsed
    return collapsed[:limit] + "…"


@dataclass(frozen=True)
class LoginView:
    title: str = "Login"
    next_url: str = ""
    error: str | None = None


@dataclass(frozen=True)
class EditorView:
    title: str = "Create New Entry"
    action: str = "/admin"
    content: str = ""
    renderer: RendererKind = RendererKind.MARKDOWN
    description: str = ""
    published_at: str = ""
    updated_at: str = ""
    selected_slug: str = ""
    renderers: tuple[RendererKind, ...] = tuple(RendererKind)

    @classmethod
    def for_entry(cls, entry: Entry | None) -> EditorView:
        if entry is None:
            return cls()
        return cls(
            title=f"Edit {entry.slug}",
            action=f"/{entry.slug}/edit",
            content=entry.raw,
            renderer=entry.renderer,
            description=entry.description,
            published_at=format_time(entry.created_at),
            updated_at=format_time(entry.updated_at),
            selected_slug=entry.slug,
        )


@dataclass(frozen=True)
class SavedView:
    title: str
    view_url: str
    edit_url: str
    published_at: str
    updated_at: str
    was_updated: bool

    @classmethod
    def for_entry(cls, entry: Entry, *, title: str) -> SavedView:
        return cls(
            title=title,
            view_url=f"/{entry.slug}",
            edit_url=f"/{entry.slug}/edit",
            published_at=format_time(entry.created_at),
            updated_at=format_time(entry.updated_at),
            was_updated=entry.was_updated,
        )


@dataclass(frozen=True)
class PreviewView:
    html: Markup
    generated_at: str
    allow_theme_switch: bool
    title: str = "Preview"


@dataclass(frozen=True)
class EntryPageView:
    title: str
    html: Markup
    published_at: str
    updated_at: str
    was_updated: bool
    allow_theme_switch: bool


@dataclass(frozen=True)
class EntryListItem:
    slug: str
    renderer: RendererKind
    description: str
    published_at: str
    updated_at: str
    was_updated: bool

    @classmethod
    def from_entry(cls, entry: Entry) -> EntryListItem:
        description = entry.description.strip() or summarize(entry.raw)
        return cls(
            slug=entry.slug,
            renderer=entry.renderer,
            description=description,
            published_at=format_time(entry.created_at),
            updated_at=format_time(entry.updated_at),
            was_updated=entry.was_updated,
        )


@dataclass(frozen=True)
class LibraryView:
    entries: list[EntryListItem] = field(default_factory=list)
    search_term: str = ""
    total_entries: int = 0
    title: str = "Content Library"

    @property
    def filtered_count(self) -> int:
        return len(self.entries)

    @property
    def has_filter(self) -> bool:
        return bool(self.search_term)


@dataclass(frozen=True)
class ErrorView:
    status_code: int
    message: str
    title: str = "Error"


def matches_search(entry: Entry, term: str) -> bool:
    """Case-insensitive substring match on slug, raw content and description."""

    needle = term.strip().lower()
    if not needle:
        return True
    return (
        needle in entry.slug.lower()
        or needle in entry.raw.lower()
        or needle in entry.description.lower()
    )


def build_library(entries: list[Entry], search_term: str) -> LibraryView:
    term = search_term.strip()
    items = [EntryListItem.from_entry(e) for e in entries if matches_search(e, term)]
    return LibraryView(entries=items, search_term=term, total_entries=len(entries))
