"""Task endpoints. Every route is behind the authorization gate."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from fastapi import APIRouter, Request, Response
from fastapi.responses import JSONResponse

from task_tracker_service.core.state import get_app_state
from task_tracker_service.routers.dependencies import OwnerId
from task_tracker_service.routers.validation import parse_json_body, validate_new_task
from task_tracker_service.schemas import ErrorResponse, TaskResponse
from task_tracker_service.services.task_lifecycle import parse_status

if TYPE_CHECKING:
    from task_tracker_service.services.task_lifecycle import TaskLifecycleManager

router = APIRouter(responses={401: {"model": ErrorResponse}})

_NOT_FOUND: dict[int | str, dict[str, Any]] = {404: {"model": ErrorResponse}}
_BAD_REQUEST: dict[int | str, dict[str, Any]] = {400: {"model": ErrorResponse}}


def _lifecycle() -> TaskLifecycleManager:
    state = get_app_state()
    if state.task_lifecycle is None:
        msg = "TaskLifecycleManager not initialized"
        raise RuntimeError(msg)
    return state.task_lifecycle


# ---------------------------------------------------------------------------
# POST /tasks: create task
# ---------------------------------------------------------------------------


@router.post("/tasks", status_code=201, response_model=TaskResponse, responses=_BAD_REQUEST)
async def create_task(request: Request, owner_id: OwnerId) -> JSONResponse:
    """Create a task for the caller. Status is always OPEN, whatever the body says."""
    body = await request.body()
    data = parse_json_body(body)
    title, description = validate_new_task(data)

    task = _lifecycle().create_task(owner_id, title, description)
    return JSONResponse(status_code=201, content=task.to_public())


# ---------------------------------------------------------------------------
# GET /tasks: list the caller's tasks with optional filters
# ---------------------------------------------------------------------------


@router.get("/tasks", response_model=list[TaskResponse], responses=_BAD_REQUEST)
async def list_tasks(request: Request, owner_id: OwnerId) -> JSONResponse:
    """List the caller's tasks, optionally filtered by status and/or search term."""
    status_raw = request.query_params.get("status")
    search = request.query_params.get("search")

    status = parse_status(status_raw) if status_raw is not None else None

    state = get_app_state()
    if state.task_query is None:
        msg = "TaskQueryEngine not initialized"
        raise RuntimeError(msg)

    tasks = state.task_query.list_tasks(owner_id, status=status, search=search)
    return JSONResponse(status_code=200, content=[task.to_public() for task in tasks])


# ---------------------------------------------------------------------------
# PATCH /tasks/{task_id}/status
# ---------------------------------------------------------------------------


@router.patch(
    "/tasks/{task_id}/status",
    response_model=TaskResponse,
    responses={**_BAD_REQUEST, **_NOT_FOUND},
)
async def update_task_status(task_id: str, request: Request, owner_id: OwnerId) -> JSONResponse:
    """Move one of the caller's tasks to a new status."""
    body = await request.body()
    data = parse_json_body(body)

    task = _lifecycle().update_status(task_id, owner_id, data.get("status"))
    return JSONResponse(status_code=200, content=task.to_public())


# ---------------------------------------------------------------------------
# GET / DELETE /tasks/{task_id}
# ---------------------------------------------------------------------------


@router.get("/tasks/{task_id}", response_model=TaskResponse, responses=_NOT_FOUND)
async def get_task(task_id: str, owner_id: OwnerId) -> JSONResponse:
    """Get one of the caller's tasks."""
    task = _lifecycle().get_task(task_id, owner_id)
    return JSONResponse(status_code=200, content=task.to_public())


@router.delete("/tasks/{task_id}", responses=_NOT_FOUND)
async def delete_task(task_id: str, owner_id: OwnerId) -> Response:
    """Permanently delete one of the caller's tasks."""
    _lifecycle().delete_task(task_id, owner_id)
    return Response(status_code=200)
