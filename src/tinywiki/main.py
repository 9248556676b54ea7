"""TinyWiki FastAPI application."""

import logging
from contextlib import asynccontextmanager
from urllib.parse import parse_qs

import jinja2
from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request
from fastapi.responses import HTMLResponse, PlainTextResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from tinywiki.config import Settings
from tinywiki.core.models import Page, is_valid_title
from tinywiki.core.storage import PageNotFoundError, PageStore

logger = logging.getLogger(__name__)

TEMPLATE_NAMES = ("view.html", "edit.html")

router = APIRouter()


def valid_title(title: str) -> str:
    """Path dependency: reject titles outside the allowed charset with 404."""
    if not is_valid_title(title):
        raise HTTPException(status_code=404, detail="Not Found")
    return title


def get_store(request: Request) -> PageStore:
    return request.app.state.store


# Template context helper
def render(request: Request, name: str, page: Page, **kwargs) -> HTMLResponse:
    """Render a page template."""
    templates: Jinja2Templates = request.app.state.templates
    settings: Settings = request.app.state.settings
    return templates.TemplateResponse(
        request,
        name,
        {"app_title": settings.app_title, "page": page, **kwargs},
    )


@router.api_route(
    "/view/{title:path}", methods=["GET", "HEAD", "POST"], response_class=HTMLResponse
)
async def view_page(
    request: Request,
    title: str = Depends(valid_title),
    store: PageStore = Depends(get_store),
):
    """View a wiki page."""
    try:
        page = await store.load(title)
    except PageNotFoundError:
        # Page doesn't exist - redirect to edit to create it
        return RedirectResponse(url=f"/edit/{title}", status_code=302)

    return render(request, "view.html", page)


@router.api_route(
    "/edit/{title:path}", methods=["GET", "HEAD", "POST"], response_class=HTMLResponse
)
async def edit_page(
    request: Request,
    title: str = Depends(valid_title),
    store: PageStore = Depends(get_store),
):
    """Edit page form."""
    try:
        page = await store.load(title)
        exists = True
    except PageNotFoundError:
        page = Page(title=title)
        exists = False

    return render(request, "edit.html", page, exists=exists)


async def read_body_field(request: Request) -> bytes:
    """Extract the raw bytes of the "body" form field.

    Urlencoded payloads are decoded as latin-1 so every percent-escaped
    byte maps back to itself, whatever the client's encoding was. A
    missing field is an empty body.
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("multipart/form-data"):
        form = await request.form()
        value = form.get("body")
        if value is None:
            return b""
        if isinstance(value, str):
            return value.encode("utf-8")
        return await value.read()

    raw = await request.body()
    fields = parse_qs(raw.decode("latin-1"), keep_blank_values=True, encoding="latin-1")
    return fields.get("body", [""])[0].encode("latin-1")


@router.post("/save/{title:path}")
async def save_page(
    request: Request,
    title: str = Depends(valid_title),
    store: PageStore = Depends(get_store),
):
    """Save page content and redirect to its view."""
    await store.save(title, await read_body_field(request))
    return RedirectResponse(url=f"/view/{title}", status_code=302)


async def storage_error_handler(request: Request, exc: OSError) -> PlainTextResponse:
    logger.error("Storage failure on %s: %s", request.url.path, exc)
    return PlainTextResponse(str(exc), status_code=500)


async def template_error_handler(
    request: Request, exc: jinja2.TemplateError
) -> PlainTextResponse:
    logger.error("Template failure on %s: %s", request.url.path, exc)
    return PlainTextResponse(str(exc), status_code=500)


def load_templates(settings: Settings) -> Jinja2Templates:
    """Load the page templates, raising if any is missing or broken."""
    templates = Jinja2Templates(directory=str(settings.template_dir))
    for name in TEMPLATE_NAMES:
        templates.get_template(name)
    return templates


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the wiki application.

    Templates are loaded here so that a missing or unparsable template
    fails at startup rather than on the first request.
    """
    settings = settings or Settings()
    templates = load_templates(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "Serving pages from %s (templates: %s)",
            settings.data_dir,
            settings.template_dir,
        )
        yield

    app = FastAPI(
        title=settings.app_title,
        debug=settings.debug,
        lifespan=lifespan,
        redirect_slashes=False,
    )
    app.state.settings = settings
    app.state.store = PageStore(settings.data_dir)
    app.state.templates = templates

    app.add_exception_handler(OSError, storage_error_handler)
    # TemplateNotFound is also an OSError; route it to the template handler.
    app.add_exception_handler(jinja2.TemplateNotFound, template_error_handler)
    app.add_exception_handler(jinja2.TemplateError, template_error_handler)
    app.include_router(router)
    return app
