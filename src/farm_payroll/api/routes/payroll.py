"""Payroll and ledger API endpoints."""

from dataclasses import asdict
from typing import Annotated

from fastapi import APIRouter, HTTPException, Query, status

from farm_payroll.api.dependencies import Config, DbSession
from farm_payroll.api.routes.tasks import productivity_response
from farm_payroll.api.schemas import (
    PERIOD_PATTERN,
    DashboardResponse,
    ErrorResponse,
    LedgerTransactionListResponse,
    LedgerTransactionResponse,
    PayrollPreviewLineResponse,
    PayrollPreviewResponse,
    PayrollRunListResponse,
    PayrollRunRequest,
    PayrollRunResponse,
    PayrollTotalsResponse,
    ProcessPayrollResponse,
)
from farm_payroll.calculators.types import CompensationValidationError
from farm_payroll.services.dashboard_service import DashboardService
from farm_payroll.services.payroll_service import DuplicatePayrollRunError, PayrollService

router = APIRouter(tags=["payroll"])

Period = Annotated[str, Query(pattern=PERIOD_PATTERN)]
OptionalPeriod = Annotated[str | None, Query(pattern=PERIOD_PATTERN)]


# ============================================================================
# Payroll runs
# ============================================================================


@router.post(
    "/payroll/runs",
    response_model=ProcessPayrollResponse,
    status_code=status.HTTP_200_OK,
    responses={409: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def process_payroll(
    db: DbSession,
    config: Config,
    payload: PayrollRunRequest,
) -> ProcessPayrollResponse:
    """Process payroll for a period.

    Idempotent: employees already paid for the period are skipped, and a run
    that pays nobody reports a no-op outcome instead of success.
    """
    service = PayrollService(db, config)
    try:
        processed = await service.process_payroll(payload.period)
    except CompensationValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(exc),
        ) from exc
    except DuplicatePayrollRunError as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(exc),
        ) from exc

    result = processed.run_result
    return ProcessPayrollResponse(
        period=result.period,
        outcome=result.outcome.value,
        is_noop=result.is_noop,
        processed_count=result.processed_count,
        message=result.message,
        currency=config.currency,
        totals=PayrollTotalsResponse.model_validate(result.totals),
        skipped_employee_ids=result.skipped_employee_ids,
        runs=[PayrollRunResponse.model_validate(run) for run in result.new_runs],
        transactions=[
            LedgerTransactionResponse.model_validate(txn) for txn in processed.transactions
        ],
    )


@router.get(
    "/payroll/preview",
    response_model=PayrollPreviewResponse,
    responses={422: {"model": ErrorResponse}},
)
async def preview_payroll(
    db: DbSession,
    config: Config,
    period: Period,
) -> PayrollPreviewResponse:
    """Show what processing a period would pay, with suggested tax per employee."""
    try:
        preview = await PayrollService(db, config).preview_payroll(period)
    except CompensationValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(exc),
        ) from exc

    result = preview.run_result
    return PayrollPreviewResponse(
        period=result.period,
        outcome=result.outcome.value,
        is_noop=result.is_noop,
        processed_count=result.processed_count,
        message=result.message,
        currency=preview.currency,
        totals=PayrollTotalsResponse.model_validate(result.totals),
        skipped_employee_ids=result.skipped_employee_ids,
        runs=[
            PayrollPreviewLineResponse.model_validate(
                {
                    **asdict(run),
                    "suggested_tax": preview.suggested_tax[run.employee_id],
                    "tax_variance": preview.tax_variance(run.employee_id),
                }
            )
            for run in result.new_runs
        ],
    )


@router.get("/payroll/runs", response_model=PayrollRunListResponse)
async def list_payroll_runs(
    db: DbSession,
    period: OptionalPeriod = None,
) -> PayrollRunListResponse:
    """List persisted payroll runs, optionally for one period."""
    runs = await PayrollService(db).load_runs(period)
    return PayrollRunListResponse(
        items=[PayrollRunResponse.model_validate(run) for run in runs],
        total=len(runs),
    )


@router.get("/payroll/dashboard", response_model=DashboardResponse)
async def payroll_dashboard(db: DbSession, period: Period) -> DashboardResponse:
    """Payroll totals, outstanding liabilities and task productivity."""
    dashboard = await DashboardService(db).build(period)
    return DashboardResponse(
        period=dashboard.period,
        totals=PayrollTotalsResponse.model_validate(dashboard.totals),
        monthly_gross_salary=dashboard.monthly_gross_salary,
        active_headcount=dashboard.active_headcount,
        outstanding_liabilities=dashboard.outstanding_liabilities,
        productivity=productivity_response(dashboard.productivity),
    )


# ============================================================================
# Ledger
# ============================================================================


@router.get("/ledger/transactions", response_model=LedgerTransactionListResponse)
async def list_ledger_transactions(
    db: DbSession,
    period: OptionalPeriod = None,
    status_filter: Annotated[str | None, Query(alias="status")] = None,
) -> LedgerTransactionListResponse:
    """List ledger transactions with optional period/status filters."""
    entries = await PayrollService(db).list_transactions(period, status_filter)
    return LedgerTransactionListResponse(
        items=[LedgerTransactionResponse.model_validate(e) for e in entries],
        total=len(entries),
    )
