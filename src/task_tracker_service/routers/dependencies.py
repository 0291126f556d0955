"""FastAPI dependencies shared by routers."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from task_tracker_service.core.state import get_app_state


async def current_owner(request: Request) -> str:
    """
    Run the authorization gate for the request and return the owner id.

    Declared as a route dependency, so it runs before the handler reads
    or validates the body.
    """
    state = get_app_state()
    if state.authorization_gate is None:
        msg = "AuthorizationGate not initialized"
        raise RuntimeError(msg)
    return state.authorization_gate.resolve_owner(request.headers.get("authorization"))


OwnerId = Annotated[str, Depends(current_owner)]
