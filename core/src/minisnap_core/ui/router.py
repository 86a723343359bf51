from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Any

from fastapi import APIRouter, Depends, Form, Query, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from starlette.responses import Response

from minisnap_core.auth import (
    DEFAULT_NEXT,
    clear_session_cookie,
    current_session,
    get_sessions,
    require_session,
    safe_next,
    set_session_cookie,
    verify_password,
)
from minisnap_core.content.models import Draft, RendererKind, parse_renderer
from minisnap_core.content.renderer import render_html
from minisnap_core.content.store import EntryStore
from minisnap_core.errors import AuthenticationFailure
from minisnap_core.ui.views import (
    EditorView,
    EntryPageView,
    ErrorView,
    LoginView,
    PreviewView,
    SavedView,
    build_library,
    format_time,
)

logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent
TEMPLATES_DIR = BASE_DIR / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

router = APIRouter(tags=["ui"])


def _get_store(request: Request) -> EntryStore:
    return request.app.state.store


def _get_admin_password(request: Request) -> str:
    return request.app.state.config.admin_password


def render_view(
    request: Request, template: str, view: Any, *, status_code: int = 200
) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        template,
        {
            "title": view.title,
            "view": view,
            "authenticated": current_session(request) is not None,
        },
        status_code=status_code,
    )


def render_error(request: Request, status_code: int, message: str) -> HTMLResponse:
    view = ErrorView(status_code=status_code, message=message)
    return render_view(request, "error.html", view, status_code=status_code)


@router.get("/login", response_class=HTMLResponse, response_model=None)
def ui_login(
    request: Request, next_url: str = Query(default="", alias="next")
) -> Response:
    if current_session(request) is not None:
        return RedirectResponse(url=DEFAULT_NEXT, status_code=302)
    return render_view(request, "login.html", LoginView(next_url=next_url))


@router.post("/login", response_model=None)
def ui_login_post(
    request: Request,
    password: str = Form(default=""),
    next_url: str = Form(default="", alias="next"),
) -> Response:
    try:
        verify_password(password, _get_admin_password(request))
    except AuthenticationFailure as exc:
        client = request.client.host if request.client else "-"
        logger.warning("Failed login attempt from %s", client)
        view = LoginView(next_url=next_url, error=exc.message)
        return render_view(request, "login.html", view)

    token, expires = get_sessions(request).create()
    resp = RedirectResponse(url=safe_next(next_url), status_code=302)
    set_session_cookie(resp, token, expires)
    return resp


@router.post("/logout")
def ui_logout(
    request: Request,
    token: str = Depends(require_session),  # noqa: B008
) -> RedirectResponse:
    get_sessions(request).remove(token)
    resp = RedirectResponse(url="/login", status_code=302)
    clear_session_cookie(resp)
    return resp


@router.get("/admin", response_class=HTMLResponse, dependencies=[Depends(require_session)])
def ui_editor(request: Request) -> HTMLResponse:
    return render_view(request, "admin.html", EditorView.for_entry(None))


@router.post("/admin", response_class=HTMLResponse, dependencies=[Depends(require_session)])
def ui_create_entry(
    request: Request,
    renderer: str = Form(default=""),
    content: str = Form(default=""),
    description: str = Form(default=""),
) -> HTMLResponse:
    entry = _get_store(request).create(renderer, content, description)
    return render_view(request, "saved.html", SavedView.for_entry(entry, title="Entry Saved"))


@router.post(
    "/admin/preview", response_class=HTMLResponse, dependencies=[Depends(require_session)]
)
def ui_preview(
    request: Request,
    renderer: str = Form(default=""),
    content: str = Form(default=""),
) -> HTMLResponse:
    kind = parse_renderer(renderer)
    html = render_html(Draft(renderer=kind, raw=content))
    view = PreviewView(
        html=html,
        generated_at=format_time(datetime.now().astimezone()),
        allow_theme_switch=kind == RendererKind.MARKDOWN,
    )
    return render_view(request, "preview.html", view)


@router.get(
    "/admin/library", response_class=HTMLResponse, dependencies=[Depends(require_session)]
)
def ui_library(request: Request, q: str = Query(default="")) -> HTMLResponse:
    view = build_library(_get_store(request).list(), q)
    return render_view(request, "library.html", view)


@router.get("/{slug}/edit", response_class=HTMLResponse, dependencies=[Depends(require_session)])
def ui_edit(request: Request, slug: str) -> HTMLResponse:
    entry = _get_store(request).get(slug)
    return render_view(request, "admin.html", EditorView.for_entry(entry))


@router.post(
    "/{slug}/edit", response_class=HTMLResponse, dependencies=[Depends(require_session)]
)
def ui_update_entry(
    request: Request,
    slug: str,
    renderer: str = Form(default=""),
    content: str = Form(default=""),
    description: str = Form(default=""),
) -> HTMLResponse:
    entry = _get_store(request).update(slug, renderer, content, description)
    return render_view(request, "saved.html", SavedView.for_entry(entry, title="Entry Updated"))


@router.post("/{slug}/delete", dependencies=[Depends(require_session)])
def ui_delete_entry(request: Request, slug: str) -> RedirectResponse:
    _get_store(request).delete(slug)
    return RedirectResponse(url="/admin/library", status_code=302)


@router.get("/{slug}", response_class=HTMLResponse)
def ui_show_entry(request: Request, slug: str) -> HTMLResponse:
    entry = _get_store(request).get(slug)
    view = EntryPageView(
        title=entry.slug,
        html=render_html(entry),
        published_at=format_time(entry.created_at),
        updated_at=format_time(entry.updated_at),
        was_updated=entry.was_updated,
        allow_theme_switch=entry.renderer == RendererKind.MARKDOWN,
    )
    return render_view(request, "entry.html", view)
