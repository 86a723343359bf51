from __future__ import annotations

from fastapi.testclient import TestClient

from minisnap_core.content.store import EntryStore
from minisnap_core.ui.views import build_library, summarize


def _seed(store: EntryStore, clock) -> dict[str, str]:
    slugs = {}
    slugs["desc"] = store.create("markdown", "plain body", "Alpha release notes").slug
    clock.advance(seconds=1)
    slugs["raw"] = store.create("html", "<p>ALPHA in the body</p>").slug
    clock.advance(seconds=1)
    slugs["other"] = store.create("markdown", "nothing to see", "beta").slug
    return slugs


def test_search_matches_slug_raw_and_description(store: EntryStore, clock) -> None:
    slugs = _seed(store, clock)
    entries = store.list()

    view = build_library(entries, "alpha")
    assert {item.slug for item in view.entries} == {slugs["desc"], slugs["raw"]}
    assert view.filtered_count == 2
    assert view.total_entries == 3
    assert view.has_filter

    by_slug = build_library(entries, slugs["other"].upper())
    assert [item.slug for item in by_slug.entries] == [slugs["other"]]


def test_empty_search_returns_everything(store: EntryStore, clock) -> None:
    _seed(store, clock)

    view = build_library(store.list(), "   ")
    assert view.filtered_count == view.total_entries == 3
    assert not view.has_filter
    assert view.search_term == ""


def test_description_falls_back_to_summary(store: EntryStore, clock) -> None:
    store.create("markdown", "line one\n\n   line   two\t three")

    [item] = build_library(store.list(), "").entries
    assert item.description == "line one line two three"


def test_summarize_truncates_by_character() -> None:
    text = "é" * 150
    summary = summarize(text)
    assert summary == "é" * 140 + "…"

    assert summarize("x" * 140) == "x" * 140
    assert summarize("   ") == ""


def test_library_page(admin_client: TestClient) -> None:
    store = admin_client.app.state.store
    keep = store.create("markdown", "alpha content")
    drop = store.create("markdown", "gamma content")

    r = admin_client.get("/admin/library?q=ALPHA")
    assert r.status_code == 200
    assert f"/{keep.slug}/edit" in r.text
    assert f"/{drop.slug}/edit" not in r.text
    assert "1 of 2 entries" in r.text

    r2 = admin_client.get("/admin/library")
    assert r2.status_code == 200
    assert "2 entries" in r2.text
    assert f"/{drop.slug}/edit" in r2.text
