"""Pydantic response models for the API."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict


class HealthResponse(BaseModel):
    """Response model for GET /health."""

    model_config = ConfigDict(extra="forbid")
    status: Literal["ok"]
    uptime_seconds: float
    started_at: str


class ErrorResponse(BaseModel):
    """Standard error response model."""

    model_config = ConfigDict(extra="forbid")
    error: str
    message: str
    details: dict[str, object]


class TaskResponse(BaseModel):
    """Client view of a task. The owner is never included."""

    model_config = ConfigDict(extra="forbid")
    id: str
    title: str
    description: str
    status: Literal["OPEN", "IN_PROGRESS", "DONE"]


class SignupResponse(BaseModel):
    """Response model for POST /auth/signup."""

    model_config = ConfigDict(extra="forbid")
    id: str
    username: str


class SigninResponse(BaseModel):
    """Response model for POST /auth/signin."""

    model_config = ConfigDict(extra="forbid")
    accessToken: str  # noqa: N815
