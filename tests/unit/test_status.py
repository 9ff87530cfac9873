"""Unit tests for installment and debt status derivation"""

import dataclasses
import pytest
from datetime import date, datetime
from receivables_gateway.domain.models import Debt, DebtStatus, Installment, InstallmentStatus, Scheme
from receivables_gateway.domain.status import (
    derive_debt_status,
    derive_installment_status,
    next_payable_installment,
    remaining_cents,
)

TODAY = date(2024, 3, 10)


def make_installment(seq: int, due: date, amount_due: int = 10000, paid: int = 0) -> Installment:
    return Installment(
        id=f"inst-{seq}",
        debt_id="debt-fixed",
        sequence_number=seq,
        due_date=due,
        amount_due_cents=amount_due,
        amount_paid_cents=paid,
    )


def make_fixed_debt(paid: int = 0, principal: int = 30000) -> Debt:
    return Debt(
        id="debt-fixed",
        owner_id="owner_1",
        name="Fixed Debtor",
        scheme=Scheme.FIXED_SCHEDULE,
        principal_cents=principal,
        created_at=datetime(2024, 1, 1),
        cumulative_paid_cents=paid,
    )


@pytest.mark.parametrize(
    "due,paid,expected",
    [
        (date(2024, 3, 20), 10000, InstallmentStatus.PAID),
        (date(2024, 3, 1), 10000, InstallmentStatus.PAID),
        (date(2024, 3, 9), 0, InstallmentStatus.OVERDUE),
        (date(2024, 3, 9), 5000, InstallmentStatus.OVERDUE),
        (date(2024, 3, 10), 0, InstallmentStatus.PENDING),
        (date(2024, 3, 10), 2500, InstallmentStatus.PARTIALLY_PAID),
        (date(2024, 4, 10), 9999, InstallmentStatus.PARTIALLY_PAID),
        (date(2024, 4, 10), 0, InstallmentStatus.PENDING),
    ],
)
def test_derive_installment_status(due, paid, expected):
    assert derive_installment_status(make_installment(1, due, paid=paid), TODAY) == expected


def test_installment_status_ignores_stale_cache():
    """Stored status is a cache; derivation only looks at amounts and dates"""
    inst = make_installment(1, date(2024, 3, 1), paid=0)
    inst.status = InstallmentStatus.PAID

    assert derive_installment_status(inst, TODAY) == InstallmentStatus.OVERDUE


def test_recurring_debt_is_always_ongoing(recurring_debt):
    paid_a_lot = dataclasses.replace(recurring_debt, cumulative_paid_cents=10_000_000)

    assert derive_debt_status(recurring_debt, [], TODAY) == DebtStatus.ONGOING
    assert derive_debt_status(paid_a_lot, [], TODAY) == DebtStatus.ONGOING


def test_fixed_debt_without_installments_falls_back_to_paid_total():
    assert derive_debt_status(make_fixed_debt(paid=0), [], TODAY) == DebtStatus.UNPAID
    assert derive_debt_status(make_fixed_debt(paid=100), [], TODAY) == DebtStatus.PARTIAL


def test_fixed_debt_status_follows_installments():
    unpaid = [make_installment(i, date(2024, 3 + i, 1)) for i in range(1, 4)]
    assert derive_debt_status(make_fixed_debt(), unpaid, TODAY) == DebtStatus.UNPAID

    one_paid = [make_installment(1, date(2024, 4, 1), paid=10000)] + unpaid[1:]
    assert derive_debt_status(make_fixed_debt(paid=10000), one_paid, TODAY) == DebtStatus.PARTIAL

    all_paid = [make_installment(i, date(2024, 3 + i, 1), paid=10000) for i in range(1, 4)]
    assert derive_debt_status(make_fixed_debt(paid=30000), all_paid, TODAY) == DebtStatus.PAID


def test_fixed_debt_with_overdue_partial_installment_is_partial():
    installments = [make_installment(1, date(2024, 2, 1), paid=500), make_installment(2, date(2024, 4, 1))]

    assert derive_installment_status(installments[0], TODAY) == InstallmentStatus.OVERDUE
    assert derive_debt_status(make_fixed_debt(paid=500, principal=20000), installments, TODAY) == DebtStatus.PARTIAL


def test_single_debt_status(single_debt):
    assert derive_debt_status(single_debt, [], TODAY) == DebtStatus.UNPAID

    partial = dataclasses.replace(single_debt, cumulative_paid_cents=100)
    assert derive_debt_status(partial, [], TODAY) == DebtStatus.PARTIAL

    paid = dataclasses.replace(single_debt, cumulative_paid_cents=50000)
    assert derive_debt_status(paid, [], TODAY) == DebtStatus.PAID


def test_single_debt_with_zero_total_is_unpaid(single_debt):
    zero = dataclasses.replace(single_debt, principal_cents=0)

    assert derive_debt_status(zero, [], TODAY) == DebtStatus.UNPAID


def test_remaining_cents_per_scheme(single_debt, recurring_debt):
    installments = [make_installment(1, date(2024, 4, 1), paid=10000), make_installment(2, date(2024, 5, 1))]

    assert remaining_cents(make_fixed_debt(paid=10000, principal=20000), installments) == 10000
    assert remaining_cents(dataclasses.replace(single_debt, cumulative_paid_cents=20000), []) == 30000
    assert remaining_cents(dataclasses.replace(recurring_debt, cumulative_paid_cents=90000), []) == 0


def test_next_payable_installment():
    installments = [
        make_installment(2, date(2024, 4, 1)),
        make_installment(1, date(2024, 3, 1), paid=10000),
        make_installment(3, date(2024, 5, 1)),
    ]

    assert next_payable_installment(installments, TODAY).sequence_number == 2
    assert next_payable_installment(installments[1:2], TODAY) is None

