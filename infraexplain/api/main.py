"""FastAPI application serving the InfraExplain page."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path
from uuid import uuid4

import httpx
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse, Response
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from starlette.middleware.sessions import SessionMiddleware

from infraexplain.api.models import HealthResponse
from infraexplain.api.view_manager import view_manager
from infraexplain.config import get_settings
from infraexplain.ui.api_client import APIClient, resolve_base_url
from infraexplain.ui.view import ExplainView, backend_unreachable_message

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

SESSION_KEY = "session_id"
PAGE_KEY = "page_id"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Tear down all views on shutdown."""
    logger.info("Starting InfraExplain UI...")

    yield

    count = await view_manager.discard_all()
    logger.info(f"Tore down {count} views on shutdown")


app = FastAPI(
    title="InfraExplain UI",
    description="Explain Terraform source through an external explanation service",
    version="0.1.0",
    lifespan=lifespan,
)

# Session middleware (must be added before CORS)
# The signed cookie only carries a session ID, never form content
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.session_secret_key or "dev-secret-key-change-in-production",
    max_age=86400,  # 24 hours
    same_site="lax",
    https_only=settings.is_production,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)

# Configure templates and static files
BASE_DIR = Path(__file__).resolve().parent.parent
templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))
app.mount("/static", StaticFiles(directory=str(BASE_DIR / "static")), name="static")
app.state.templates = templates

# Optional httpx transports: views' outbound calls and the /explain relay
app.state.api_transport = None
app.state.backend_transport = None


def _session_id(request: Request) -> str:
    session_id = request.session.get(SESSION_KEY)
    if not session_id:
        session_id = str(uuid4())
        request.session[SESSION_KEY] = session_id
    return session_id


def _view_key(request: Request, page_id: str) -> str:
    """Key a view by page, namespaced by the browser session."""
    return f"{_session_id(request)}:{page_id}"


async def _page_id(request: Request) -> str:
    form_data = await request.form()
    page_id = str(form_data.get(PAGE_KEY, "")).strip()
    if not page_id:
        raise HTTPException(status_code=400, detail="Missing page_id")
    return page_id


async def get_view(request: Request, page_id: str) -> ExplainView:
    """Get the explain view for one open page.

    Each page load gets its own view, so tabs sharing a session cookie
    never share input, results or the loading flag. An unknown page ID
    (for example after idle expiry) starts a fresh view.
    """
    origin = str(request.base_url)

    def build_view() -> ExplainView:
        client = APIClient(
            base_url=resolve_base_url(settings.api_base_url, origin),
            transport=request.app.state.api_transport,
        )
        return ExplainView(client, backend_port=settings.backend_port)

    return await view_manager.get_or_create(_view_key(request, page_id), build_view)


def _view_context(view: ExplainView, page_id: str) -> dict:
    return {"state": view.state, "lines": view.explanation_lines(), "page_id": page_id}


def _render_panel(request: Request, view: ExplainView, page_id: str):
    return templates.TemplateResponse(request, "partials/panel.html", _view_context(view, page_id))


async def _sync_input(request: Request, view: ExplainView) -> None:
    """Apply the submitted field value, as the browser may submit before the input debounce fires."""
    form_data = await request.form()
    # Disabled fields are not submitted, so this is skipped while loading
    if "text_content" in form_data and not view.state.is_loading:
        view.handle_change(str(form_data["text_content"]))


@app.get("/")
async def index(request: Request):
    """Render the main page with a fresh view of its own."""
    page_id = str(uuid4())
    view = await get_view(request, page_id)
    return templates.TemplateResponse(request, "index.html", _view_context(view, page_id))


@app.post("/ui/input")
async def ui_input(request: Request):
    """Handle a change of the editor value.

    Returns:
        Out-of-band Explain button, plus the editor when normalization
        rewrote the value.
    """
    page_id = await _page_id(request)
    view = await get_view(request, page_id)
    if view.state.is_loading:
        return Response(status_code=204)

    form_data = await request.form()
    submitted = str(form_data.get("text_content", ""))
    stored = view.handle_change(submitted)

    context = _view_context(view, page_id)
    context["oob"] = True
    context["replace_editor"] = stored != submitted
    return templates.TemplateResponse(request, "partials/input_update.html", context)


@app.post("/ui/paste")
async def ui_paste(request: Request):
    """Handle a paste the browser suspects is escaped.

    Returns:
        Out-of-band editor and Explain button when the paste was intercepted,
        204 otherwise.
    """
    page_id = await _page_id(request)
    view = await get_view(request, page_id)
    if view.state.is_loading:
        return Response(status_code=204)

    form_data = await request.form()
    clipboard_text = str(form_data.get("clipboard_text", ""))
    if not view.handle_paste(clipboard_text):
        return Response(status_code=204)

    context = _view_context(view, page_id)
    context["oob"] = True
    context["replace_editor"] = True
    return templates.TemplateResponse(request, "partials/input_update.html", context)


@app.post("/ui/explain")
async def ui_explain(request: Request):
    """Submit the editor content and return the updated panel."""
    page_id = await _page_id(request)
    view = await get_view(request, page_id)
    await _sync_input(request, view)
    await view.explain()
    return _render_panel(request, view, page_id)


@app.post("/ui/keydown")
async def ui_keydown(request: Request):
    """Handle a key press in the editor; Ctrl/Cmd+Enter submits."""
    page_id = await _page_id(request)
    view = await get_view(request, page_id)
    await _sync_input(request, view)

    form_data = await request.form()
    handled = await view.handle_key_down(
        key=str(form_data.get("key", "")),
        ctrl=form_data.get("ctrl_key") == "true",
        meta=form_data.get("meta_key") == "true",
    )
    if not handled:
        return Response(status_code=204)
    return _render_panel(request, view, page_id)


@app.post("/ui/clear")
async def ui_clear(request: Request):
    """Clear input, explanation and error."""
    page_id = await _page_id(request)
    view = await get_view(request, page_id)
    view.clear()
    return _render_panel(request, view, page_id)


@app.post("/ui/teardown")
async def ui_teardown(request: Request) -> Response:
    """Tear down the page's view when the page goes away."""
    form_data = await request.form()
    page_id = str(form_data.get(PAGE_KEY, "")).strip()
    session_id = request.session.get(SESSION_KEY)
    if session_id and page_id:
        await view_manager.discard(f"{session_id}:{page_id}")
    return Response(status_code=204)


@app.get("/ui/status")
async def ui_status(request: Request):
    """Render the explanation service status badge."""
    client = APIClient(
        base_url=settings.api_base_url or settings.explain_backend_url,
        transport=request.app.state.api_transport,
    )
    healthy = await client.health_check()
    return templates.TemplateResponse(request, "partials/status.html", {"healthy": healthy})


@app.get("/health")
async def health_check() -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(status="ok")


@app.post("/explain")
async def relay_explain(request: Request) -> Response:
    """Relay a same-origin explanation request to the explanation backend.

    Only the request body and its content type are forwarded; other
    request headers are not. The backend's status, body and content type
    are relayed back unchanged. An unreachable backend yields 502 with a
    plain-text message.
    """
    body = await request.body()
    try:
        async with httpx.AsyncClient(
            timeout=None,
            transport=request.app.state.backend_transport,
        ) as client:
            upstream = await client.post(
                f"{settings.explain_backend_url.rstrip('/')}/explain",
                content=body,
                headers={"Content-Type": request.headers.get("content-type", "application/json")},
            )
    except httpx.TransportError as e:
        logger.warning(f"Explanation backend unreachable ({type(e).__name__})")
        return PlainTextResponse(backend_unreachable_message(settings.backend_port), status_code=502)

    return Response(
        content=upstream.content,
        status_code=upstream.status_code,
        media_type=upstream.headers.get("content-type"),
    )
