"""Debt intake - validate a new debt and build its installment schedule"""

from datetime import date, datetime
from typing import List, Optional, Tuple
from receivables_gateway.domain.models import Debt, Installment, Scheme, new_id
from receivables_gateway.domain.exceptions import InvalidInputError
from receivables_gateway.domain.installments import generate_schedule


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def open_debt(
    owner_id: str,
    name: str,
    scheme: Scheme,
    principal_cents: Optional[int] = None,
    *,
    installment_count: Optional[int] = None,
    first_due_date: Optional[date] = None,
    recurring_amount_cents: Optional[int] = None,
    recurring_day_of_month: Optional[int] = None,
    notes: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Tuple[Debt, List[Installment]]:
    """
    Create a debt and, for fixed schedules, its full installment plan.

    Per scheme:
    - SINGLE: principal is the amount owed (> 0)
    - FIXED_SCHEDULE: principal is the contract total (> 0), split over installment_count
      monthly installments starting at first_due_date
    - Recurring: principal is an optional upfront amount (>= 0), plus a monthly
      amount (> 0) and an informational day of month (1-31)

    Fields that do not apply to the scheme are ignored.
    """
    clean_name = (name or "").strip()
    if not clean_name:
        raise InvalidInputError("Debtor name is required")

    debt_id = new_id()
    installments: List[Installment] = []
    recurring_amount = None
    recurring_day = None

    if scheme == Scheme.SINGLE:
        if not _is_int(principal_cents) or principal_cents <= 0:
            raise InvalidInputError("Amount owed must be a positive number")

    elif scheme == Scheme.FIXED_SCHEDULE:
        if principal_cents is None or installment_count is None or first_due_date is None:
            raise InvalidInputError("Fixed schedules need a total, an installment count and a first due date")
        installments = generate_schedule(principal_cents, installment_count, first_due_date, debt_id=debt_id)

    else:
        if principal_cents is None:
            principal_cents = 0
        if not _is_int(principal_cents) or principal_cents < 0:
            raise InvalidInputError("Upfront amount must be zero or a positive number")
        if not _is_int(recurring_amount_cents) or recurring_amount_cents <= 0:
            raise InvalidInputError("Recurring amount must be a positive number")
        if not _is_int(recurring_day_of_month) or not 1 <= recurring_day_of_month <= 31:
            raise InvalidInputError("Recurring payment day must be between 1 and 31")
        recurring_amount = recurring_amount_cents
        recurring_day = recurring_day_of_month

    debt = Debt(
        id=debt_id,
        owner_id=owner_id,
        name=clean_name,
        scheme=scheme,
        principal_cents=principal_cents,
        created_at=now or datetime.now(),
        notes=(notes or "").strip() or None,
        recurring_amount_cents=recurring_amount,
        recurring_day_of_month=recurring_day,
    )
    return debt, installments
