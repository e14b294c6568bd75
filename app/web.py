from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from fastapi.templating import Jinja2Templates

from app.schemas import MonitorState
from models.records import Reading
from services.auth import AuthenticationError, AuthService, build_default_auth
from services.monitor import MonitorEngine, build_default_engine
from settings import get_settings


templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent / "templates"))

SESSION_COOKIE = "aqualiv_session"
CHART_Y_MAX = 15.0
GAUGE_MAX_CELSIUS = 40.0


def get_engine() -> MonitorEngine:
    return build_default_engine()


def get_auth() -> AuthService:
    return build_default_auth()


def chart_points(
    readings: Sequence[Reading],
    width: float = 600.0,
    height: float = 200.0,
    y_max: float = CHART_Y_MAX,
) -> str:
    """SVG polyline ``points`` for salinity values scaled to ``[0, y_max]``."""
    if not readings:
        return ""
    step = width / (len(readings) - 1) if len(readings) > 1 else 0.0
    points = []
    for index, reading in enumerate(readings):
        ratio = min(max(reading.salinity / y_max, 0.0), 1.0)
        points.append(f"{index * step:.1f},{height - ratio * height:.1f}")
    return " ".join(points)


def gauge_percent(temperature: float, maximum: float = GAUGE_MAX_CELSIUS) -> float:
    return round(min(max(temperature / maximum, 0.0), 1.0) * 100, 1)


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url=url, status_code=status.HTTP_303_SEE_OTHER)


def _safe_next(target: Optional[str], default: str) -> str:
    if target and target.startswith("/ui"):
        return target
    return default


def _is_signed_in(request: Request, auth: AuthService) -> bool:
    return auth.is_active(request.cookies.get(SESSION_COOKIE))


router = APIRouter(include_in_schema=False)


def _render_dashboard(request: Request, engine: MonitorEngine, tab: str) -> HTMLResponse:
    snapshot = engine.snapshot()
    sparkline = snapshot.history[-get_settings().sparkline_points:]
    return templates.TemplateResponse(
        request,
        "ui/dashboard.html",
        {
            "state": MonitorState.from_snapshot(snapshot),
            "tab": tab,
            "chart_points": chart_points(snapshot.history),
            "sparkline_points": chart_points(sparkline, width=240.0, height=60.0),
            "chart_y_max": CHART_Y_MAX,
            "gauge_percent": gauge_percent(snapshot.reading.temperature),
            "refresh_seconds": max(int(get_settings().tick_interval), 1),
        },
    )


@router.get("/ui", name="ui_index", response_class=HTMLResponse)
async def ui_index(
    request: Request,
    engine: MonitorEngine = Depends(get_engine),
    auth: AuthService = Depends(get_auth),
) -> Response:
    if not _is_signed_in(request, auth):
        return _redirect("/ui/login")
    return _render_dashboard(request, engine, tab="monitor")


@router.get("/ui/alerts", name="ui_alerts", response_class=HTMLResponse)
async def ui_alerts(
    request: Request,
    engine: MonitorEngine = Depends(get_engine),
    auth: AuthService = Depends(get_auth),
) -> Response:
    if not _is_signed_in(request, auth):
        return _redirect("/ui/login")
    return _render_dashboard(request, engine, tab="alerts")


@router.get("/ui/login", name="ui_login", response_class=HTMLResponse)
async def ui_login(request: Request, mode: str = "login") -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "ui/login.html",
        {"registering": mode == "register", "error": None, "success": None},
    )


@router.post("/ui/login", name="ui_login_submit", response_class=HTMLResponse)
async def ui_login_submit(
    request: Request,
    username: str = Form(""),
    password: str = Form(""),
    auth: AuthService = Depends(get_auth),
) -> Response:
    try:
        token = auth.login(username, password)
    except AuthenticationError as exc:
        return templates.TemplateResponse(
            request,
            "ui/login.html",
            {"registering": False, "error": str(exc), "success": None},
            status_code=status.HTTP_401_UNAUTHORIZED,
        )
    response = _redirect("/ui")
    response.set_cookie(SESSION_COOKIE, token, httponly=True, samesite="lax")
    return response


@router.post("/ui/register", name="ui_register_submit", response_class=HTMLResponse)
async def ui_register_submit(
    request: Request,
    username: str = Form(""),
    password: str = Form(""),
    confirm_password: str = Form(""),
    auth: AuthService = Depends(get_auth),
) -> HTMLResponse:
    try:
        auth.create_account(username, password, confirm_password)
    except AuthenticationError as exc:
        return templates.TemplateResponse(
            request,
            "ui/login.html",
            {"registering": True, "error": str(exc), "success": None},
            status_code=status.HTTP_400_BAD_REQUEST,
        )
    return templates.TemplateResponse(
        request,
        "ui/login.html",
        {
            "registering": False,
            "error": None,
            "success": "Account created successfully! You can now login.",
        },
    )


@router.post("/ui/logout", name="ui_logout")
async def ui_logout(request: Request, auth: AuthService = Depends(get_auth)) -> Response:
    auth.logout(request.cookies.get(SESSION_COOKIE))
    response = _redirect("/ui/login")
    response.delete_cookie(SESSION_COOKIE)
    return response


@router.post("/ui/alerts/phone", name="ui_register_phone")
async def ui_register_phone(
    request: Request,
    phone_number: str = Form(""),
    engine: MonitorEngine = Depends(get_engine),
    auth: AuthService = Depends(get_auth),
) -> Response:
    if not _is_signed_in(request, auth):
        return _redirect("/ui/login")
    engine.register_phone(phone_number)
    return _redirect("/ui/alerts")


@router.post("/ui/alerts/sms", name="ui_toggle_sms")
async def ui_toggle_sms(
    request: Request,
    engine: MonitorEngine = Depends(get_engine),
    auth: AuthService = Depends(get_auth),
) -> Response:
    if not _is_signed_in(request, auth):
        return _redirect("/ui/login")
    engine.toggle_sms()
    return _redirect("/ui/alerts")


@router.post("/ui/alerts/push", name="ui_toggle_push")
async def ui_toggle_push(
    request: Request,
    engine: MonitorEngine = Depends(get_engine),
    auth: AuthService = Depends(get_auth),
) -> Response:
    if not _is_signed_in(request, auth):
        return _redirect("/ui/login")
    engine.toggle_push()
    return _redirect("/ui/alerts")


@router.post("/ui/modal/ack", name="ui_acknowledge")
async def ui_acknowledge(
    request: Request,
    next_url: Optional[str] = Form(None, alias="next"),
    engine: MonitorEngine = Depends(get_engine),
    auth: AuthService = Depends(get_auth),
) -> Response:
    if not _is_signed_in(request, auth):
        return _redirect("/ui/login")
    engine.acknowledge()
    return _redirect(_safe_next(next_url, "/ui"))
