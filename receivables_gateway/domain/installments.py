"""Installment schedule generation for fixed-schedule debts"""

from datetime import date
from typing import List
from receivables_gateway.domain.models import Installment, new_id
from receivables_gateway.domain.exceptions import InvalidInputError
from receivables_gateway.utils.date_utils import add_one_month


def generate_schedule(
    principal_cents: int,
    count: int,
    first_due_date: date,
    debt_id: str = "",
) -> List[Installment]:
    """
    Split a contract total into monthly installments.

    Requirements:
    - Base amount is principal / count rounded half-up to the cent, or down when
      rounding up would leave nothing for the last installment
    - Last installment absorbs the rounding remainder so the schedule sums to principal exactly
    - Due dates advance one calendar month at a time from the previous due date,
      clamping to month end (Jan 31 -> Feb 29 -> Mar 29 in 2024)

    Args:
        principal_cents: Contract total to split
        count: Number of installments
        first_due_date: Due date of installment 1
        debt_id: Owning debt, when already known

    Returns:
        List of Installment objects numbered from 1

    Example:
        $1000.00 in 3 → [$333.33, $333.33, $333.34]
        100000 cents / 3 = 33333.33 → base 33333
        Last installment: 100000 - 2 * 33333 = 33334
    """
    if isinstance(principal_cents, bool) or not isinstance(principal_cents, int) or principal_cents <= 0:
        raise InvalidInputError("Principal must be a positive amount")
    if isinstance(count, bool) or not isinstance(count, int) or count <= 0:
        raise InvalidInputError("Installment count must be a positive integer")
    if not isinstance(first_due_date, date):
        raise InvalidInputError("First due date must be a valid date")

    if principal_cents < count:
        raise InvalidInputError(
            f"Cannot split {principal_cents} cents into {count} positive installments"
        )

    # Round half-up: floor((2P + N) / 2N)
    base_amount = (2 * principal_cents + count) // (2 * count)
    last_amount = principal_cents - base_amount * (count - 1)
    if last_amount <= 0:
        # Rounding up starved the last installment (66 over 12); round down instead
        base_amount = principal_cents // count
        last_amount = principal_cents - base_amount * (count - 1)

    due_dates = [first_due_date]
    try:
        for _ in range(count - 1):
            # Anchor on the previous computed date, not the original day
            due_dates.append(add_one_month(due_dates[-1]))
    except (ValueError, OverflowError):
        raise InvalidInputError("Installment due dates fall outside the supported calendar")

    installments = []
    for i, due_date in enumerate(due_dates):
        amount = last_amount if i == count - 1 else base_amount

        installments.append(
            Installment(
                id=new_id(),
                debt_id=debt_id,
                sequence_number=i + 1,
                due_date=due_date,
                amount_due_cents=amount,
            )
        )

    return installments
