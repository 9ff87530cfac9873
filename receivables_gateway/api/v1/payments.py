"""Payment endpoints - apply a payment, payment history, rebuild running totals"""

import time
import logging
from dataclasses import asdict
from datetime import date
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from receivables_gateway.api.v1.debts import debt_to_response, installment_to_schema
from receivables_gateway.api.v1.schemas import (
    PaymentHistoryResponse,
    PaymentRequest,
    PaymentResponse,
    PaymentSchema,
    ReceiptSchema,
    ReconcileResponse,
)
from receivables_gateway.api.dependencies import get_owner_id, get_request_id, get_store, get_today
from receivables_gateway.api.errors import to_http_exception
from receivables_gateway.config import settings
from receivables_gateway.infrastructure.database.session import get_db, transaction
from receivables_gateway.infrastructure.database.repositories import LedgerStore
from receivables_gateway.infrastructure.observability.metrics import record_payment_applied, record_payment_rejected
from receivables_gateway.infrastructure.observability.logging import log_payment, log_rejection
from receivables_gateway.domain.exceptions import DomainException
from receivables_gateway.domain.models import Issuer, PaymentRecord, Scheme
from receivables_gateway.domain.payments import record_payment
from receivables_gateway.domain.receipts import build_receipt
from receivables_gateway.domain.reconciliation import reconcile_totals

router = APIRouter()


def payment_to_schema(payment: PaymentRecord, installment_number: int | None = None) -> PaymentSchema:
    return PaymentSchema(
        payment_id=payment.id,
        debt_id=payment.debt_id,
        paid_at=payment.paid_at,
        amount_cents=payment.amount_cents,
        method=payment.method,
        notes=payment.notes,
        installment_id=payment.installment_id,
        installment_number=installment_number,
        recurring_sequence=payment.recurring_sequence,
    )


@router.post("/debts/{debt_id}/payments", response_model=PaymentResponse, status_code=201)
def create_payment(
    debt_id: str,
    request_body: PaymentRequest,
    request: Request,
    owner_id: str = Depends(get_owner_id),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
    store: LedgerStore = Depends(get_store),
):
    """
    Record a payment against a debt.

    Flow:
    1. Lock the debt and load its installments
    2. Validate the payment against the target's remaining balance
    3. Append the payment record, update running totals and installment status
    4. Commit all of it together, or nothing on any failure
    5. Return the post-payment state with receipt data
    """
    start_time = time.time()
    request_id = get_request_id(request)
    scheme = "unknown"

    try:
        with transaction(db):
            outcome = record_payment(
                store,
                owner_id,
                debt_id,
                request_body.amount_cents,
                method=request_body.method,
                notes=request_body.notes,
                installment_id=request_body.installment_id,
                paid_at=request_body.paid_at,
                today=today,
            )
            scheme = outcome.debt.scheme.value
            installments = (
                store.list_installments(outcome.debt.id)
                if outcome.debt.scheme == Scheme.FIXED_SCHEDULE
                else []
            )

    except DomainException as e:
        debt = store.get_debt(owner_id, debt_id)
        if debt is not None:
            scheme = debt.scheme.value
        record_payment_rejected(scheme)
        log_rejection(request_id, owner_id, debt_id, str(e))
        raise to_http_exception(e)

    except SQLAlchemyError as e:
        logging.error(
            "Storage error while recording payment",
            extra={"request_id": request_id, "owner_id": owner_id, "debt_id": debt_id, "error": str(e)},
        )
        raise HTTPException(status_code=500, detail="Storage error")

    issuer = Issuer(
        name=request_body.issuer_name or settings.default_issuer_name,
        office_name=request_body.office_name,
        logo_url=request_body.logo_url,
    )
    receipt = build_receipt(
        outcome.payment,
        outcome.debt,
        outcome.installment,
        issuer=issuer,
        installment_count=len(installments) or None,
        default_logo_url=settings.default_logo_url,
    )

    duration_ms = (time.time() - start_time) * 1000
    installment_number = outcome.installment.sequence_number if outcome.installment else None
    record_payment_applied(scheme, outcome.payment.amount_cents)
    log_payment(
        request_id, owner_id, debt_id, scheme, outcome.payment.amount_cents, installment_number, duration_ms
    )

    return PaymentResponse(
        payment=payment_to_schema(outcome.payment, installment_number),
        debt=debt_to_response(outcome.debt, installments, today),
        installment=installment_to_schema(outcome.installment, today) if outcome.installment else None,
        receipt=ReceiptSchema(**asdict(receipt)),
    )


@router.get("/debts/{debt_id}/payments", response_model=PaymentHistoryResponse)
def get_payment_history(
    debt_id: str,
    owner_id: str = Depends(get_owner_id),
    store: LedgerStore = Depends(get_store),
):
    """Payment log of one debt, newest first"""
    debt = store.get_debt(owner_id, debt_id)
    if not debt:
        raise HTTPException(status_code=404, detail="Debt not found")

    numbers = {inst.id: inst.sequence_number for inst in store.list_installments(debt.id)}
    payments = [
        payment_to_schema(p, numbers.get(p.installment_id)) for p in store.payments.list_payments(debt.id)
    ]
    return PaymentHistoryResponse(debt_id=debt.id, payments=payments)


@router.post("/debts/{debt_id}/reconcile", response_model=ReconcileResponse)
def reconcile_debt(
    debt_id: str,
    request: Request,
    owner_id: str = Depends(get_owner_id),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
    store: LedgerStore = Depends(get_store),
):
    """Rebuild running totals from the payment log"""
    with transaction(db):
        debt = store.get_debt(owner_id, debt_id, for_update=True)
        if not debt:
            raise HTTPException(status_code=404, detail="Debt not found")

        result = reconcile_totals(
            debt, store.list_installments(debt.id), store.payments.list_payments(debt.id), today
        )
        if result.drifted:
            store.save_debt(result.debt)
            for inst in result.installments:
                store.save_installment(inst)
            logging.warning(
                "Running totals drifted from payment log",
                extra={"request_id": get_request_id(request), "owner_id": owner_id, "debt_id": debt.id},
            )

    return ReconcileResponse(
        drifted=result.drifted,
        debt=debt_to_response(result.debt, result.installments, today),
    )
