from __future__ import annotations

from fastapi.testclient import TestClient

from minisnap_core.content.store import EntryStore


def _store(client: TestClient) -> EntryStore:
    return client.app.state.store


def test_editor_renders(admin_client: TestClient) -> None:
    r = admin_client.get("/admin")
    assert r.status_code == 200
    assert "Create New Entry" in r.text
    assert 'action="/admin"' in r.text


def test_create_and_view_entry(admin_client: TestClient) -> None:
    r = admin_client.post(
        "/admin",
        data={"renderer": "markdown", "content": "# Hi\n**bold**", "description": " note "},
    )
    assert r.status_code == 200
    assert "Entry Saved" in r.text

    [entry] = _store(admin_client).list()
    assert entry.description == "note"
    assert f'href="/{entry.slug}"' in r.text
    assert f'href="/{entry.slug}/edit"' in r.text

    # Public page needs no session.
    admin_client.cookies.clear()
    page = admin_client.get(f"/{entry.slug}")
    assert page.status_code == 200
    assert "<h1>Hi</h1>" in page.text
    assert "<strong>bold</strong>" in page.text


def test_html_entry_is_not_escaped(admin_client: TestClient) -> None:
    entry = _store(admin_client).create("html", '<div id="raw">x &amp; y</div>')

    page = admin_client.get(f"/{entry.slug}")
    assert page.status_code == 200
    assert '<div id="raw">x &amp; y</div>' in page.text


def test_create_with_invalid_renderer_is_400(admin_client: TestClient) -> None:
    r = admin_client.post("/admin", data={"renderer": "rst", "content": "x"})
    assert r.status_code == 400
    assert _store(admin_client).list() == []


def test_preview_renders_without_saving(admin_client: TestClient) -> None:
    r = admin_client.post(
        "/admin/preview", data={"renderer": "markdown", "content": "# Test\nThis is **bold**"}
    )
    assert r.status_code == 200
    assert "Preview mode" in r.text
    assert "Content is not saved yet" in r.text
    assert "<strong>bold</strong>" in r.text

    r2 = admin_client.post(
        "/admin/preview",
        data={"renderer": "html", "content": "<h1>Test</h1><p>This is <strong>bold</strong></p>"},
    )
    assert r2.status_code == 200
    assert "<h1>Test</h1><p>This is <strong>bold</strong></p>" in r2.text

    r3 = admin_client.post("/admin/preview", data={"renderer": "invalid", "content": "x"})
    assert r3.status_code == 400

    assert _store(admin_client).list() == []


def test_edit_and_update_entry(admin_client: TestClient) -> None:
    entry = _store(admin_client).create("markdown", "first draft", "desc")

    r = admin_client.get(f"/{entry.slug}/edit")
    assert r.status_code == 200
    assert f"Edit {entry.slug}" in r.text
    assert "first draft" in r.text
    assert f'action="/{entry.slug}/edit"' in r.text

    r2 = admin_client.post(
        f"/{entry.slug}/edit",
        data={"renderer": "html", "content": "<p>second</p>", "description": ""},
    )
    assert r2.status_code == 200
    assert "Entry Updated" in r2.text

    updated = _store(admin_client).get(entry.slug)
    assert updated.raw == "<p>second</p>"
    assert updated.created_at == entry.created_at
    assert updated.updated_at >= entry.created_at


def test_missing_entries_are_404(admin_client: TestClient) -> None:
    assert admin_client.get("/nosuchid").status_code == 404
    assert admin_client.get("/nosuchid/edit").status_code == 404
    r = admin_client.post(
        "/nosuchid/edit", data={"renderer": "markdown", "content": "x"}
    )
    assert r.status_code == 404
    assert admin_client.post("/nosuchid/delete").status_code == 404


def test_delete_entry_redirects_to_library(admin_client: TestClient) -> None:
    entry = _store(admin_client).create("markdown", "doomed")

    r = admin_client.post(f"/{entry.slug}/delete", follow_redirects=False)
    assert r.status_code == 302
    assert r.headers["location"] == "/admin/library"

    assert admin_client.get(f"/{entry.slug}").status_code == 404


def test_storage_failure_is_500(admin_client: TestClient, monkeypatch) -> None:
    from minisnap_core.storage import filesystem

    def _crash(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr(filesystem.os, "replace", _crash)

    r = admin_client.post("/admin", data={"renderer": "markdown", "content": "x"})
    assert r.status_code == 500
    assert "disk full" not in r.text
