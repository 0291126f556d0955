"""Signup and signin endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from task_tracker_service.config import get_settings
from task_tracker_service.core.state import get_app_state
from task_tracker_service.routers.validation import parse_json_body, validate_credentials
from task_tracker_service.schemas import ErrorResponse, SigninResponse, SignupResponse

router = APIRouter()


@router.post(
    "/auth/signup",
    status_code=201,
    response_model=SignupResponse,
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def signup(request: Request) -> JSONResponse:
    """Register a new user. The response never contains the password."""
    body = await request.body()
    data = parse_json_body(body)
    username, password = validate_credentials(data, get_settings().credentials)

    state = get_app_state()
    if state.account_service is None:
        msg = "AccountService not initialized"
        raise RuntimeError(msg)

    result = state.account_service.signup(username, password)
    return JSONResponse(status_code=201, content=result)


@router.post(
    "/auth/signin",
    response_model=SigninResponse,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}},
)
async def signin(request: Request) -> JSONResponse:
    """Exchange username and password for an access token."""
    body = await request.body()
    data = parse_json_body(body)
    username, password = validate_credentials(data, get_settings().credentials)

    state = get_app_state()
    if state.account_service is None:
        msg = "AccountService not initialized"
        raise RuntimeError(msg)

    result = state.account_service.signin(username, password)
    return JSONResponse(status_code=200, content=result)
