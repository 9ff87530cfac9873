"""Payment validation and application - core business logic for recording payments"""

import dataclasses
from datetime import date, datetime
from typing import Optional, Sequence
from receivables_gateway.domain.models import (
    Debt,
    DebtStatus,
    Installment,
    InstallmentStatus,
    PaymentOutcome,
    PaymentRecord,
    Scheme,
    new_id,
)
from receivables_gateway.domain.exceptions import (
    InvalidInputError,
    NotFoundError,
    PreconditionError,
    StateConflictError,
)
from receivables_gateway.domain.ports import DebtStore
from receivables_gateway.domain.status import derive_debt_status, derive_installment_status


def _clean_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _format_cents(cents: int) -> str:
    return f"{cents / 100:.2f}"


def validate_payment(
    debt: Debt,
    installments: Sequence[Installment],
    amount_cents: int,
    installment_id: Optional[str],
    today: date,
) -> Optional[Installment]:
    """
    Check a proposed payment against the debt's current balances.

    Rules:
    - Amount must be a positive integer number of cents
    - Fixed schedules need a target installment that is not yet paid, and the
      amount may not exceed that installment's remaining balance (no spill-over)
    - Single payments may not exceed what is left on the debt
    - Recurring debts accept any positive amount

    Returns:
        The target installment for fixed schedules, otherwise None

    Raises:
        InvalidInputError, PreconditionError, NotFoundError, StateConflictError
    """
    if isinstance(amount_cents, bool) or not isinstance(amount_cents, int) or amount_cents <= 0:
        raise InvalidInputError("Payment amount must be a positive number")

    if debt.scheme == Scheme.FIXED_SCHEDULE:
        if not installment_id:
            raise PreconditionError("Select an installment to pay for a fixed-schedule debt")

        target = next((inst for inst in installments if inst.id == installment_id), None)
        if target is None:
            raise NotFoundError(f"Installment {installment_id} not found for debt {debt.id}")

        if derive_installment_status(target, today) == InstallmentStatus.PAID:
            raise StateConflictError(f"Installment {target.sequence_number} is already paid", remaining_cents=0)

        remaining = target.amount_due_cents - target.amount_paid_cents
        if amount_cents > remaining:
            raise StateConflictError(
                f"Payment of {_format_cents(amount_cents)} exceeds the remaining "
                f"{_format_cents(remaining)} for installment {target.sequence_number}",
                remaining_cents=remaining,
            )
        return target

    if installment_id:
        raise InvalidInputError("Installments only apply to fixed-schedule debts")

    if debt.scheme == Scheme.SINGLE:
        remaining = debt.principal_cents - debt.cumulative_paid_cents
        if derive_debt_status(debt, [], today) == DebtStatus.PAID:
            raise StateConflictError("Debt is already paid in full", remaining_cents=max(0, remaining))
        if amount_cents > remaining:
            raise StateConflictError(
                f"Payment of {_format_cents(amount_cents)} exceeds the remaining {_format_cents(remaining)}",
                remaining_cents=remaining,
            )

    # Recurring: reported payments are trusted, no upper bound
    return None


def apply_payment(
    debt: Debt,
    installments: Sequence[Installment],
    amount_cents: int,
    *,
    method: Optional[str] = None,
    notes: Optional[str] = None,
    installment_id: Optional[str] = None,
    prior_payment_count: int = 0,
    paid_at: Optional[datetime] = None,
    today: Optional[date] = None,
) -> PaymentOutcome:
    """
    Validate a payment and compute the resulting state.

    Inputs are not mutated; the outcome carries the new payment record, an
    updated copy of the debt and, for fixed schedules, of the target installment.
    """
    now = datetime.now()
    today = today or now.date()
    target = validate_payment(debt, installments, amount_cents, installment_id, today)

    payment = PaymentRecord(
        id=new_id(),
        debt_id=debt.id,
        owner_id=debt.owner_id,
        paid_at=paid_at or now,
        amount_cents=amount_cents,
        created_at=now,
        method=_clean_text(method),
        notes=_clean_text(notes),
        installment_id=target.id if target else None,
        recurring_sequence=prior_payment_count + 1 if debt.scheme.is_recurring else None,
    )

    updated_debt = dataclasses.replace(debt, cumulative_paid_cents=debt.cumulative_paid_cents + amount_cents)

    updated_installment = None
    if target is not None:
        updated_installment = dataclasses.replace(
            target, amount_paid_cents=target.amount_paid_cents + amount_cents
        )
        updated_installment.status = derive_installment_status(updated_installment, today)

    return PaymentOutcome(payment=payment, debt=updated_debt, installment=updated_installment)


def record_payment(
    store: DebtStore,
    owner_id: str,
    debt_id: str,
    amount_cents: int,
    *,
    method: Optional[str] = None,
    notes: Optional[str] = None,
    installment_id: Optional[str] = None,
    paid_at: Optional[datetime] = None,
    today: Optional[date] = None,
) -> PaymentOutcome:
    """
    Main entry point: load current state, apply the payment and write it back.

    The caller owns the transaction; nothing is committed here, so any
    exception leaves the store's pending changes to be rolled back.
    """
    debt = store.get_debt(owner_id, debt_id, for_update=True)
    if debt is None:
        raise NotFoundError(f"Debt {debt_id} not found")

    installments = store.list_installments(debt.id) if debt.scheme == Scheme.FIXED_SCHEDULE else []
    prior_count = store.count_payments(debt.id) if debt.scheme.is_recurring else 0

    outcome = apply_payment(
        debt,
        installments,
        amount_cents,
        method=method,
        notes=notes,
        installment_id=installment_id,
        prior_payment_count=prior_count,
        paid_at=paid_at,
        today=today,
    )

    store.add_payment(outcome.payment)
    store.save_debt(outcome.debt)
    if outcome.installment is not None:
        store.save_installment(outcome.installment)

    return outcome
