"""HTTP route definitions for the monitor."""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query, status

from app.schemas import (
    AccountRequest,
    AdvisoryAnswer,
    AdvisoryQuestion,
    LoginRequest,
    MonitorState,
    PhoneRegistrationRequest,
    ReadingOut,
    SessionResponse,
    SpeciesCheckRequest,
    SpeciesCompatibility,
)
from services.advisory import AdvisoryClient, build_default_advisory_client
from services.auth import AuthenticationError, AuthService, build_default_auth
from services.monitor import MonitorEngine, build_default_engine

router = APIRouter()


def get_engine() -> MonitorEngine:
    return build_default_engine()


def get_advisory_client() -> AdvisoryClient:
    return build_default_advisory_client()


def get_auth() -> AuthService:
    return build_default_auth()


@router.get(
    "/state",
    response_model=MonitorState,
    summary="Current reading, advisory, history and notification settings.",
)
async def get_state(engine: MonitorEngine = Depends(get_engine)) -> MonitorState:
    return MonitorState.from_snapshot(engine.snapshot())


@router.get(
    "/readings",
    response_model=List[ReadingOut],
    summary="Reading history, oldest first.",
)
async def get_readings(
    count: Optional[int] = Query(default=None, ge=1, description="Only return the last N readings."),
    engine: MonitorEngine = Depends(get_engine),
) -> List[ReadingOut]:
    return [ReadingOut.from_reading(reading) for reading in engine.readings(count)]


# The JSON notification routes serve the CLI and are not tied to a dashboard
# session; the /ui/alerts pages in app/web.py require one.
@router.post(
    "/notifications/phone",
    response_model=MonitorState,
    summary="Register a phone number for SMS alerts.",
)
async def register_phone(
    payload: PhoneRegistrationRequest,
    engine: MonitorEngine = Depends(get_engine),
) -> MonitorState:
    return MonitorState.from_snapshot(engine.register_phone(payload.phone_number))


@router.post(
    "/notifications/sms/toggle",
    response_model=MonitorState,
    summary="Toggle SMS alerts; enabling requires a registered phone.",
)
async def toggle_sms(engine: MonitorEngine = Depends(get_engine)) -> MonitorState:
    return MonitorState.from_snapshot(engine.toggle_sms())


@router.post(
    "/notifications/push/toggle",
    response_model=MonitorState,
    summary="Toggle push notifications.",
)
async def toggle_push(engine: MonitorEngine = Depends(get_engine)) -> MonitorState:
    return MonitorState.from_snapshot(engine.toggle_push())


@router.post(
    "/notifications/modal/acknowledge",
    response_model=MonitorState,
    summary="Dismiss the current alert modal.",
)
async def acknowledge_modal(engine: MonitorEngine = Depends(get_engine)) -> MonitorState:
    return MonitorState.from_snapshot(engine.acknowledge())


@router.post(
    "/advisory/species",
    response_model=SpeciesCompatibility,
    summary="Ask the advisory service whether a species suits current conditions.",
)
async def check_species(
    payload: SpeciesCheckRequest,
    engine: MonitorEngine = Depends(get_engine),
    client: AdvisoryClient = Depends(get_advisory_client),
) -> SpeciesCompatibility:
    return await client.check_species(payload.species, engine.snapshot())


@router.post(
    "/advisory/ask",
    response_model=AdvisoryAnswer,
    summary="Ask the advisory service a free-form question about current conditions.",
)
async def ask_advisory(
    payload: AdvisoryQuestion,
    engine: MonitorEngine = Depends(get_engine),
    client: AdvisoryClient = Depends(get_advisory_client),
) -> AdvisoryAnswer:
    answer = await client.ask(engine.snapshot(), payload.question)
    return AdvisoryAnswer(answer=answer)


@router.post(
    "/auth/register",
    status_code=status.HTTP_201_CREATED,
    summary="Create the local dashboard account.",
)
async def create_account(
    payload: AccountRequest,
    auth: AuthService = Depends(get_auth),
) -> dict[str, str]:
    try:
        auth.create_account(payload.username, payload.password, payload.confirm_password)
    except AuthenticationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    return {"detail": "Account created successfully! You can now login."}


@router.post(
    "/auth/login",
    response_model=SessionResponse,
    summary="Exchange credentials for a session token.",
)
async def login(
    payload: LoginRequest,
    auth: AuthService = Depends(get_auth),
) -> SessionResponse:
    try:
        token = auth.login(payload.username, payload.password)
    except AuthenticationError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(exc),
        ) from exc
    return SessionResponse(token=token)


@router.post(
    "/auth/logout",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Revoke a session token.",
)
async def logout(
    x_session_token: Optional[str] = Header(default=None),
    auth: AuthService = Depends(get_auth),
) -> None:
    auth.logout(x_session_token)


@router.get(
    "/health",
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get(
    "/",
    summary="Root endpoint mirrors health information.",
    status_code=status.HTTP_200_OK,
)
async def root() -> dict[str, str]:
    return {"status": "ok", "detail": "See /ui for the dashboard and /state for raw data."}
