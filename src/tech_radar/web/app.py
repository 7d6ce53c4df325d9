"""FastAPI Web application."""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv
from fastapi import Body, Depends, FastAPI, HTTPException, Query, Request, Response, status
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from pydantic import ValidationError

from tech_radar.geometry.layout import LayoutConfig
from tech_radar.radar.models import User
from tech_radar.radar.storage import RadarStorage
from tech_radar.web.auth import DEFAULT_ROUNDS, authenticate
from tech_radar.web.ratelimit import RateLimiter, get_client_ip, rate_limit_headers
from tech_radar.web.schemas import (
    BlipRecord,
    BlipRequest,
    BlipsResponse,
    HealthResponse,
    ImportRequest,
    ImportResponse,
    QuadrantRecord,
    QuadrantUpdate,
    RadarDetail,
    RadarRequest,
    RadarsResponse,
    RadarSummary,
    RegisterRequest,
    RingRecord,
    RingUpdate,
    UserRecord,
)
from tech_radar.web.service import DuplicateEmailError, RadarNotFoundError, RadarService
from tech_radar.web.svg import render_svg, svg_context

load_dotenv()  # loads .env from project root; must run before env vars are consumed

_logger = logging.getLogger(__name__)

VERSION = "0.1.0"

# ---------------------------------------------------------------------------
# App setup
# ---------------------------------------------------------------------------

_HERE = Path(__file__).parent


def _db_path() -> str:
    return os.environ.get("TECH_RADAR_DB", "radar.db")


def _canvas_size() -> float:
    return float(os.environ.get("TECH_RADAR_CANVAS_SIZE", "800"))


@asynccontextmanager
async def _lifespan(_app: FastAPI):
    _logger.info("Tech Radar %s using database %s", VERSION, _db_path())
    yield


app = FastAPI(title="Tech Radar", version=VERSION, lifespan=_lifespan)

app.mount("/static", StaticFiles(directory=str(_HERE / "static")), name="static")
templates = Jinja2Templates(directory=str(_HERE / "templates"))

register_limiter = RateLimiter(
    limit=int(os.environ.get("TECH_RADAR_REGISTER_LIMIT", "5")),
    window_s=float(os.environ.get("TECH_RADAR_REGISTER_WINDOW_S", "60")),
)

_basic = HTTPBasic(realm="tech-radar")


def open_storage() -> RadarStorage:
    return RadarStorage(_db_path())


def _service() -> RadarService:
    return RadarService(
        _db_path(),
        layout_config=LayoutConfig(canvas_size=_canvas_size()),
        bcrypt_rounds=int(os.environ.get("TECH_RADAR_BCRYPT_ROUNDS", str(DEFAULT_ROUNDS))),
    )


def current_user(credentials: HTTPBasicCredentials = Depends(_basic)) -> User:
    """Resolve the HTTP Basic credentials (e-mail, password) to a :class:`User`."""
    storage = open_storage()
    try:
        user = authenticate(storage, credentials.username, credentials.password)
    finally:
        storage.close()
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": 'Basic realm="tech-radar"'},
        )
    return user


@app.exception_handler(RadarNotFoundError)
async def _not_found(_request: Request, exc: RadarNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": str(exc)})


# ---------------------------------------------------------------------------
# Endpoints: health and auth
# ---------------------------------------------------------------------------


@app.get("/")
def index():
    return RedirectResponse(url="/dashboard")


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(status="ok", version=VERSION)


@app.post("/api/auth/register", status_code=201)
def register(request: Request, payload: dict = Body(...)) -> JSONResponse:
    """Create an account.  Rate limited per client address."""
    client = request.client.host if request.client else None
    limit = register_limiter.hit(get_client_ip(request.headers, client))
    headers = rate_limit_headers(limit)
    if not limit.success:
        return JSONResponse(
            status_code=429,
            content={"error": "Too many registration attempts. Please try again later."},
            headers=headers,
        )

    try:
        req = RegisterRequest.model_validate(payload)
    except ValidationError as exc:
        first = exc.errors()[0]
        message = str(first["ctx"]["error"]) if "error" in first.get("ctx", {}) else first["msg"]
        return JSONResponse(status_code=400, content={"error": message}, headers=headers)

    try:
        _service().register(req)
    except DuplicateEmailError as exc:
        return JSONResponse(status_code=409, content={"error": str(exc)}, headers=headers)
    return JSONResponse(status_code=201, content={"success": True}, headers=headers)


@app.get("/api/me", response_model=UserRecord)
def me(user: User = Depends(current_user)) -> UserRecord:
    return UserRecord(id=user.id, name=user.name, email=user.email)


# ---------------------------------------------------------------------------
# Endpoints: radars and their quadrants and rings
# ---------------------------------------------------------------------------


@app.get("/api/radars", response_model=RadarsResponse)
def list_radars(user: User = Depends(current_user)) -> RadarsResponse:
    radars = _service().list_radars(user)
    return RadarsResponse(radars=[RadarSummary.from_model(r) for r in radars])


@app.post("/api/radars", response_model=RadarDetail, status_code=201)
def create_radar(req: RadarRequest, user: User = Depends(current_user)) -> RadarDetail:
    return RadarDetail.from_model(_service().create_radar(user, req))


@app.get("/api/radars/{radar_id}", response_model=RadarDetail)
def get_radar(radar_id: str, user: User = Depends(current_user)) -> RadarDetail:
    return RadarDetail.from_model(_service().get_radar(user, radar_id))


@app.put("/api/radars/{radar_id}", response_model=RadarDetail)
def update_radar(
    radar_id: str, req: RadarRequest, user: User = Depends(current_user)
) -> RadarDetail:
    return RadarDetail.from_model(_service().update_radar(user, radar_id, req))


@app.delete("/api/radars/{radar_id}", status_code=204)
def delete_radar(radar_id: str, user: User = Depends(current_user)) -> Response:
    _service().delete_radar(user, radar_id)
    return Response(status_code=204)


@app.put("/api/quadrants/{quadrant_id}", response_model=QuadrantRecord)
def update_quadrant(
    quadrant_id: str, req: QuadrantUpdate, user: User = Depends(current_user)
) -> QuadrantRecord:
    return QuadrantRecord.from_model(_service().update_quadrant(user, quadrant_id, req))


@app.put("/api/rings/{ring_id}", response_model=RingRecord)
def update_ring(ring_id: str, req: RingUpdate, user: User = Depends(current_user)) -> RingRecord:
    return RingRecord.from_model(_service().update_ring(user, ring_id, req))


# ---------------------------------------------------------------------------
# Endpoints: blips
# ---------------------------------------------------------------------------


@app.get("/api/radars/{radar_id}/blips", response_model=BlipsResponse)
def list_blips(radar_id: str, user: User = Depends(current_user)) -> BlipsResponse:
    blips = _service().list_blips(user, radar_id)
    return BlipsResponse(blips=[BlipRecord.from_model(b) for b in blips])


@app.post("/api/radars/{radar_id}/blips", response_model=BlipRecord, status_code=201)
def create_blip(
    radar_id: str, req: BlipRequest, user: User = Depends(current_user)
) -> BlipRecord:
    try:
        blip = _service().create_blip(user, radar_id, req)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return BlipRecord.from_model(blip)


@app.post("/api/radars/{radar_id}/blips/import", response_model=ImportResponse)
def import_blips(
    radar_id: str, req: ImportRequest, user: User = Depends(current_user)
) -> ImportResponse:
    """Import blips from CSV text; rows with errors are skipped and reported."""
    try:
        return _service().import_csv(user, radar_id, req.csv_text)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@app.get("/api/radars/{radar_id}/blips/{blip_id}", response_model=BlipRecord)
def get_blip(radar_id: str, blip_id: str, user: User = Depends(current_user)) -> BlipRecord:
    return BlipRecord.from_model(_service().get_blip(user, radar_id, blip_id))


@app.put("/api/radars/{radar_id}/blips/{blip_id}", response_model=BlipRecord)
def update_blip(
    radar_id: str, blip_id: str, req: BlipRequest, user: User = Depends(current_user)
) -> BlipRecord:
    try:
        blip = _service().update_blip(user, radar_id, blip_id, req)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return BlipRecord.from_model(blip)


@app.delete("/api/radars/{radar_id}/blips/{blip_id}", status_code=204)
def delete_blip(radar_id: str, blip_id: str, user: User = Depends(current_user)) -> Response:
    _service().delete_blip(user, radar_id, blip_id)
    return Response(status_code=204)


# ---------------------------------------------------------------------------
# Endpoints: sample CSV and rendering
# ---------------------------------------------------------------------------


@app.get("/api/radars/{radar_id}/sample-csv")
def sample_csv(radar_id: str, user: User = Depends(current_user)) -> Response:
    return Response(
        content=_service().sample_csv(user, radar_id),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="radar-blips-sample.csv"'},
    )


@app.get("/api/radars/{radar_id}/layout")
def radar_layout(
    radar_id: str,
    size: float | None = Query(default=None, gt=0, le=4000),
    user: User = Depends(current_user),
) -> dict:
    """Return the computed render model (segments, blip positions, labels)."""
    svc = _service()
    radar = svc.get_radar(user, radar_id)
    return svc.build_layout(radar, size).to_dict()


@app.get("/api/radars/{radar_id}/radar.svg")
def radar_svg(
    radar_id: str,
    size: float | None = Query(default=None, gt=0, le=4000),
    user: User = Depends(current_user),
) -> Response:
    svc = _service()
    radar = svc.get_radar(user, radar_id)
    return Response(content=render_svg(svc.build_layout(radar, size)), media_type="image/svg+xml")


# ---------------------------------------------------------------------------
# Pages
# ---------------------------------------------------------------------------


@app.get("/dashboard", response_class=HTMLResponse)
def dashboard_page(request: Request, user: User = Depends(current_user)) -> HTMLResponse:
    """Render the list of the user's radars."""
    return templates.TemplateResponse(
        request,
        "dashboard.html",
        {"user": user, "radars": _service().list_radars(user)},
    )


@app.get("/radar/{radar_id}", response_class=HTMLResponse)
def radar_page(request: Request, radar_id: str, user: User = Depends(current_user)) -> HTMLResponse:
    """Render the radar chart with its legend."""
    svc = _service()
    radar = svc.get_radar(user, radar_id)
    layout = svc.build_layout(radar)
    return templates.TemplateResponse(
        request,
        "radar.html",
        {"radar": radar, **svg_context(layout)},
    )
