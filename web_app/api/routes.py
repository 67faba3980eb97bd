"""API routes implementation."""

from fastapi import APIRouter, Request, status
from datetime import datetime, timezone

from .schemas import (
    SignupRequest,
    SignupResponse,
    LoginRequest,
    TokenResponse,
    HealthResponse,
    ErrorResponse,
)
from ..dispatch import run_handler, to_response

router = APIRouter()
users_router = APIRouter()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Check if the service and its database are healthy.",
)
async def health_check(request: Request):
    """Health check endpoint for load balancers and monitoring."""
    service = request.app.state.service

    health = await service.health_check()

    return HealthResponse(
        status="healthy" if health["overall"] else "unhealthy",
        database="healthy" if health["database"] else "unhealthy",
        timestamp=datetime.now(timezone.utc),
    )


@users_router.post(
    "/signup",
    response_model=SignupResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid request"},
        409: {"model": ErrorResponse, "description": "Email already registered"},
    },
    summary="Register a user",
)
async def signup(request: Request, body: SignupRequest):
    result = await run_handler(request, "POST", "/users/signup", body=body.model_dump())
    return to_response(result)


@users_router.post(
    "/login",
    response_model=TokenResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid request"},
        401: {"model": ErrorResponse, "description": "Wrong email or password"},
    },
    summary="Log in",
    description="Exchange email and password for a bearer token.",
)
async def login(request: Request, body: LoginRequest):
    result = await run_handler(request, "POST", "/users/login", body=body.model_dump())
    return to_response(result)
