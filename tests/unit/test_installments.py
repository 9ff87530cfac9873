"""Unit tests for installment schedule generation"""

import pytest
from datetime import date
from receivables_gateway.domain.installments import generate_schedule
from receivables_gateway.domain.exceptions import InvalidInputError
from receivables_gateway.utils.date_utils import add_one_month


def test_generate_schedule_equal_split():
    """Test schedule with evenly divisible amount"""
    installments = generate_schedule(40000, 4, date(2024, 5, 1))

    assert len(installments) == 4
    assert all(inst.amount_due_cents == 10000 for inst in installments)
    assert sum(inst.amount_due_cents for inst in installments) == 40000


def test_generate_schedule_rounding():
    """Test last installment absorbs remainder"""
    installments = generate_schedule(100000, 3, date(2024, 1, 31))

    assert [inst.amount_due_cents for inst in installments] == [33333, 33333, 33334]
    assert sum(inst.amount_due_cents for inst in installments) == 100000


def test_generate_schedule_rounds_half_up():
    """$2.00 in 3 rounds the base up to $0.67, leaving $0.66 for the last one"""
    installments = generate_schedule(200, 3, date(2024, 1, 1))

    assert [inst.amount_due_cents for inst in installments] == [67, 67, 66]


@pytest.mark.parametrize(
    "principal,count",
    [(1, 1), (999, 7), (100001, 12), (12345678, 36), (50, 50)],
)
def test_generate_schedule_sums_exactly(principal, count):
    """Schedule always sums to the principal and only the last amount may differ"""
    installments = generate_schedule(principal, count, date(2024, 1, 15))

    assert len(installments) == count
    assert sum(inst.amount_due_cents for inst in installments) == principal
    assert len({inst.amount_due_cents for inst in installments[:-1]}) <= 1


def test_generate_schedule_sequence_numbers():
    installments = generate_schedule(30000, 3, date(2024, 1, 15), debt_id="debt-1")

    assert [inst.sequence_number for inst in installments] == [1, 2, 3]
    assert all(inst.debt_id == "debt-1" for inst in installments)
    assert all(inst.amount_paid_cents == 0 for inst in installments)
    assert len({inst.id for inst in installments}) == 3


def test_generate_schedule_month_end_rolls_forward():
    """Jan 31 clamps to Feb 29 in a leap year and Feb 29 becomes the new anchor"""
    installments = generate_schedule(100000, 3, date(2024, 1, 31))

    assert installments[0].due_date == date(2024, 1, 31)
    assert installments[1].due_date == date(2024, 2, 29)
    assert installments[2].due_date == date(2024, 3, 29)


def test_generate_schedule_month_end_non_leap_year():
    installments = generate_schedule(40000, 4, date(2023, 1, 31))

    assert [inst.due_date for inst in installments] == [
        date(2023, 1, 31),
        date(2023, 2, 28),
        date(2023, 3, 28),
        date(2023, 4, 28),
    ]


def test_generate_schedule_crosses_year():
    installments = generate_schedule(30000, 3, date(2024, 11, 15))

    assert [inst.due_date for inst in installments] == [
        date(2024, 11, 15),
        date(2024, 12, 15),
        date(2025, 1, 15),
    ]


@pytest.mark.parametrize(
    "principal,count,first_due",
    [
        (0, 3, date(2024, 1, 1)),
        (-100, 3, date(2024, 1, 1)),
        (10000, 0, date(2024, 1, 1)),
        (10000, -2, date(2024, 1, 1)),
        (10000, 3, None),
        (10000, 3, "2024-01-01"),
    ],
)
def test_generate_schedule_rejects_invalid_input(principal, count, first_due):
    with pytest.raises(InvalidInputError):
        generate_schedule(principal, count, first_due)


def test_generate_schedule_rejects_unsplittable_principal():
    """Two cents cannot become three positive installments"""
    with pytest.raises(InvalidInputError):
        generate_schedule(2, 3, date(2024, 1, 1))


@pytest.mark.parametrize(
    "principal,count,expected_base,expected_last",
    [
        (66, 12, 5, 11),  # Half-up base 6 would leave 0 for the last one
        (14, 8, 1, 7),
        (3, 3, 1, 1),
    ],
)
def test_generate_schedule_rounds_down_when_last_would_be_empty(principal, count, expected_base, expected_last):
    installments = generate_schedule(principal, count, date(2024, 1, 1))

    assert len(installments) == count
    assert sum(inst.amount_due_cents for inst in installments) == principal
    assert all(inst.amount_due_cents == expected_base for inst in installments[:-1])
    assert installments[-1].amount_due_cents == expected_last


def test_generate_schedule_rejects_dates_past_calendar_end():
    with pytest.raises(InvalidInputError):
        generate_schedule(1000, 2, date(9999, 12, 15))


def test_generate_schedule_single_installment_on_last_month():
    installments = generate_schedule(1000, 1, date(9999, 12, 15))

    assert installments[0].due_date == date(9999, 12, 15)


def test_add_one_month_clamps_to_month_end():
    assert add_one_month(date(2024, 1, 31)) == date(2024, 2, 29)
    assert add_one_month(date(2024, 3, 31)) == date(2024, 4, 30)
    assert add_one_month(date(2024, 12, 31)) == date(2025, 1, 31)
    assert add_one_month(date(2024, 6, 15)) == date(2024, 7, 15)
