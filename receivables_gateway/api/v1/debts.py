"""Debt endpoints - intake, listing, detail, deletion and schedule preview"""

import logging
from datetime import date
from typing import Sequence
from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from receivables_gateway.api.v1.schemas import (
    CreateDebtRequest,
    DebtListResponse,
    DebtResponse,
    InstallmentSchema,
    SchedulePreviewRequest,
    SchedulePreviewResponse,
)
from receivables_gateway.api.dependencies import get_owner_id, get_today
from receivables_gateway.api.errors import to_http_exception
from receivables_gateway.infrastructure.database.session import get_db, transaction
from receivables_gateway.infrastructure.database.repositories import DebtRepository
from receivables_gateway.infrastructure.observability.metrics import debt_created_counter
from receivables_gateway.domain.debts import open_debt
from receivables_gateway.domain.exceptions import DomainException
from receivables_gateway.domain.installments import generate_schedule
from receivables_gateway.domain.models import Debt, Installment
from receivables_gateway.domain.status import (
    derive_debt_status,
    derive_installment_status,
    next_payable_installment,
    remaining_cents,
)

router = APIRouter()


def installment_to_schema(inst: Installment, today: date) -> InstallmentSchema:
    return InstallmentSchema(
        id=inst.id,
        sequence_number=inst.sequence_number,
        due_date=inst.due_date,
        amount_due_cents=inst.amount_due_cents,
        amount_paid_cents=inst.amount_paid_cents,
        remaining_cents=inst.remaining_cents,
        status=derive_installment_status(inst, today),
    )


def debt_to_response(debt: Debt, installments: Sequence[Installment], today: date) -> DebtResponse:
    """Serialize a debt with statuses derived for `today`"""
    next_installment = next_payable_installment(installments, today)
    return DebtResponse(
        debt_id=debt.id,
        name=debt.name,
        scheme=debt.scheme,
        status=derive_debt_status(debt, installments, today),
        principal_cents=debt.principal_cents,
        cumulative_paid_cents=debt.cumulative_paid_cents,
        remaining_cents=remaining_cents(debt, installments),
        recurring_amount_cents=debt.recurring_amount_cents,
        recurring_day_of_month=debt.recurring_day_of_month,
        notes=debt.notes,
        created_at=debt.created_at.isoformat(),
        next_installment_id=next_installment.id if next_installment else None,
        installments=[installment_to_schema(inst, today) for inst in installments],
    )


@router.post("/debts", response_model=DebtResponse, status_code=201)
def create_debt(
    request_body: CreateDebtRequest,
    owner_id: str = Depends(get_owner_id),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
):
    """
    Register a new debt.

    Fixed-schedule debts get their whole installment plan created in the same transaction.
    """
    try:
        debt, installments = open_debt(
            owner_id,
            request_body.name,
            request_body.scheme,
            request_body.principal_cents,
            installment_count=request_body.installment_count,
            first_due_date=request_body.first_due_date,
            recurring_amount_cents=request_body.recurring_amount_cents,
            recurring_day_of_month=request_body.recurring_day_of_month,
            notes=request_body.notes,
        )
    except DomainException as e:
        raise to_http_exception(e)

    with transaction(db):
        DebtRepository(db).create_debt(debt, installments)

    debt_created_counter.labels(scheme=debt.scheme.value).inc()
    logging.info(
        "Debt created",
        extra={"owner_id": owner_id, "debt_id": debt.id, "scheme": debt.scheme.value},
    )

    return debt_to_response(debt, installments, today)


@router.get("/debts", response_model=DebtListResponse)
def list_debts(
    owner_id: str = Depends(get_owner_id),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
):
    """All debts of the owner with statuses derived at read time"""
    repo = DebtRepository(db)
    installments_by_debt = repo.list_installments_for_owner(owner_id)

    debts = [
        debt_to_response(debt, installments_by_debt.get(debt.id, []), today)
        for debt in repo.list_debts(owner_id)
    ]
    return DebtListResponse(owner_id=owner_id, debts=debts)


@router.get("/debts/{debt_id}", response_model=DebtResponse)
def get_debt(
    debt_id: str,
    owner_id: str = Depends(get_owner_id),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
):
    repo = DebtRepository(db)
    debt = repo.get_debt(owner_id, debt_id)
    if not debt:
        raise HTTPException(status_code=404, detail="Debt not found")

    return debt_to_response(debt, repo.list_installments(debt.id), today)


@router.delete("/debts/{debt_id}", status_code=204)
def delete_debt(
    debt_id: str,
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_db),
):
    """Delete a debt along with its installments and payment history"""
    with transaction(db):
        deleted = DebtRepository(db).delete_debt(owner_id, debt_id)

    if not deleted:
        raise HTTPException(status_code=404, detail="Debt not found")

    logging.info("Debt deleted", extra={"owner_id": owner_id, "debt_id": debt_id})
    return Response(status_code=204)


@router.post("/schedule/preview", response_model=SchedulePreviewResponse)
def preview_schedule(request_body: SchedulePreviewRequest, today: date = Depends(get_today)):
    """Compute an installment plan without saving anything"""
    try:
        installments = generate_schedule(
            request_body.principal_cents,
            request_body.installment_count,
            request_body.first_due_date,
        )
    except DomainException as e:
        raise to_http_exception(e)

    return SchedulePreviewResponse(
        total_cents=sum(inst.amount_due_cents for inst in installments),
        installments=[
            installment_to_schema(inst, today).model_copy(update={"id": None}) for inst in installments
        ],
    )
