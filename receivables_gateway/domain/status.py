"""Status derivation - pure functions recomputed on every read"""

from datetime import date
from typing import Iterable, Optional, Sequence
from receivables_gateway.domain.models import Debt, DebtStatus, Installment, InstallmentStatus, Scheme


def derive_installment_status(installment: Installment, today: date) -> InstallmentStatus:
    """
    Status of one installment from its cumulative paid amount and due date.

    Only the paid total matters, not how it was split across payments.
    """
    if installment.amount_paid_cents >= installment.amount_due_cents:
        return InstallmentStatus.PAID
    if installment.due_date < today:
        return InstallmentStatus.OVERDUE
    if installment.amount_paid_cents > 0:
        return InstallmentStatus.PARTIALLY_PAID
    return InstallmentStatus.PENDING


def derive_debt_status(debt: Debt, installments: Sequence[Installment], today: date) -> DebtStatus:
    """
    Status of a debt.

    - Recurring debts are open-ended and always ONGOING
    - Fixed schedules follow their installments (falls back to the debt total if none are loaded)
    - Single payments compare paid against the amount owed
    """
    if debt.scheme.is_recurring:
        return DebtStatus.ONGOING

    if debt.scheme == Scheme.FIXED_SCHEDULE:
        if not installments:
            return DebtStatus.PARTIAL if debt.cumulative_paid_cents > 0 else DebtStatus.UNPAID

        statuses = [derive_installment_status(inst, today) for inst in installments]
        if all(s == InstallmentStatus.PAID for s in statuses):
            return DebtStatus.PAID

        some_paid = any(
            s in (InstallmentStatus.PAID, InstallmentStatus.PARTIALLY_PAID) or inst.amount_paid_cents > 0
            for s, inst in zip(statuses, installments)
        )
        return DebtStatus.PARTIAL if some_paid else DebtStatus.UNPAID

    total = debt.principal_cents
    paid = debt.cumulative_paid_cents
    if total <= 0 and paid <= 0:
        return DebtStatus.UNPAID
    if total - paid <= 0:
        return DebtStatus.PAID
    if paid > 0 and total > 0:
        return DebtStatus.PARTIAL
    return DebtStatus.UNPAID


def owed_cents(debt: Debt, installments: Sequence[Installment]) -> int:
    """Amount the debt is expected to bring in (installment sum for fixed schedules)"""
    if debt.scheme == Scheme.FIXED_SCHEDULE:
        return sum(inst.amount_due_cents for inst in installments)
    return debt.principal_cents


def remaining_cents(debt: Debt, installments: Sequence[Installment]) -> int:
    """Outstanding balance, never negative"""
    return max(0, owed_cents(debt, installments) - debt.cumulative_paid_cents)


def next_payable_installment(installments: Iterable[Installment], today: date) -> Optional[Installment]:
    """First installment in sequence order that still accepts payments"""
    for inst in sorted(installments, key=lambda i: i.sequence_number):
        if derive_installment_status(inst, today) != InstallmentStatus.PAID:
            return inst
    return None

