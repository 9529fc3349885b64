"""Task API endpoints."""

from datetime import date
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, HTTPException, Path, Query, Response, status

from farm_payroll.api.dependencies import DbSession
from farm_payroll.api.schemas import (
    EmployeeProductivityResponse,
    ErrorResponse,
    ProductivityResponse,
    TaskCreate,
    TaskListResponse,
    TaskResponse,
    TaskTransitionRequest,
)
from farm_payroll.services.payroll_service import PayrollService
from farm_payroll.services.state_machine import InvalidTransitionError
from farm_payroll.services.task_service import (
    ProductivityReport,
    TaskNotFoundError,
    TaskService,
)

router = APIRouter(prefix="/tasks", tags=["tasks"])


def productivity_response(report: ProductivityReport) -> ProductivityResponse:
    return ProductivityResponse(
        employees=[EmployeeProductivityResponse.model_validate(e) for e in report.employees],
        unmatched=report.unmatched,
        total_completed=report.total_completed,
    )


def _not_found(exc: TaskNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def create_task(db: DbSession, payload: TaskCreate) -> TaskResponse:
    """Assign a new task. Tasks always start PENDING."""
    service = TaskService(db)
    try:
        task = await service.create_task(
            title=payload.title,
            due=payload.due,
            assignee=payload.assignee,
            priority=payload.priority,
            flock_id=payload.flock_id,
            department=payload.department,
        )
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc
    await db.commit()
    return TaskResponse.model_validate(task)


@router.get("", response_model=TaskListResponse)
async def list_tasks(
    db: DbSession,
    status_filter: Annotated[
        str | None, Query(alias="status", pattern=r"^(PENDING|IN_PROGRESS|COMPLETED)$")
    ] = None,
    overdue: bool = False,
    as_of: date | None = None,
) -> TaskListResponse:
    """List tasks; ``overdue=true`` keeps unfinished tasks past their due date."""
    service = TaskService(db)
    if overdue:
        tasks = await service.list_overdue(as_of or date.today())
        if status_filter:
            tasks = [t for t in tasks if t.status == status_filter]
    else:
        tasks = await service.list_tasks(status_filter)
    return TaskListResponse(
        items=[TaskResponse.model_validate(t) for t in tasks],
        total=len(tasks),
    )


@router.get("/productivity", response_model=ProductivityResponse)
async def task_productivity(db: DbSession) -> ProductivityResponse:
    """Completed tasks per employee, matched on assignee name."""
    roster = await PayrollService(db).load_roster()
    report = await TaskService(db).productivity(roster)
    return productivity_response(report)


@router.get(
    "/{task_id}",
    response_model=TaskResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_task(db: DbSession, task_id: Annotated[UUID, Path()]) -> TaskResponse:
    try:
        task = await TaskService(db).get_task(task_id)
    except TaskNotFoundError as exc:
        raise _not_found(exc) from exc
    return TaskResponse.model_validate(task)


@router.post(
    "/{task_id}/transition",
    response_model=TaskResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def transition_task(
    db: DbSession,
    task_id: Annotated[UUID, Path()],
    payload: TaskTransitionRequest,
) -> TaskResponse:
    """Move a task forward. Completed tasks cannot change status."""
    service = TaskService(db)
    try:
        task = await service.transition_task(task_id, payload.status)
    except TaskNotFoundError as exc:
        raise _not_found(exc) from exc
    except InvalidTransitionError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    await db.commit()
    return TaskResponse.model_validate(task)


@router.delete(
    "/{task_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_task(db: DbSession, task_id: Annotated[UUID, Path()]) -> Response:
    """Delete a task in any status."""
    try:
        await TaskService(db).delete_task(task_id)
    except TaskNotFoundError as exc:
        raise _not_found(exc) from exc
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
