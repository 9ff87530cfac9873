"""Integration tests for the SQLAlchemy storage layer"""

import pytest
from datetime import date, datetime
from sqlalchemy.orm import Session
from receivables_gateway.domain.debts import open_debt
from receivables_gateway.domain.exceptions import StateConflictError
from receivables_gateway.domain.models import InstallmentStatus, Scheme
from receivables_gateway.domain.payments import record_payment
from receivables_gateway.infrastructure.database.repositories import DebtRepository, LedgerStore
from receivables_gateway.infrastructure.database.session import transaction

TODAY = date(2024, 1, 20)


def create_fixed_debt(db: Session, owner_id: str = "owner_1"):
    debt, installments = open_debt(
        owner_id,
        "Beatriz",
        Scheme.FIXED_SCHEDULE,
        100000,
        installment_count=3,
        first_due_date=date(2024, 1, 31),
        now=datetime(2024, 1, 2, 10, 0),
    )
    with transaction(db):
        DebtRepository(db).create_debt(debt, installments)
    return debt, installments


def test_create_and_load_debt(db: Session):
    debt, installments = create_fixed_debt(db)
    repo = DebtRepository(db)

    loaded = repo.get_debt("owner_1", debt.id)
    assert loaded.name == "Beatriz"
    assert loaded.scheme == Scheme.FIXED_SCHEDULE
    assert loaded.principal_cents == 100000

    stored = repo.list_installments(debt.id)
    assert [inst.sequence_number for inst in stored] == [1, 2, 3]
    assert [inst.due_date for inst in stored] == [date(2024, 1, 31), date(2024, 2, 29), date(2024, 3, 29)]
    assert [inst.amount_due_cents for inst in stored] == [33333, 33333, 33334]


def test_debts_are_scoped_by_owner(db: Session):
    debt, _ = create_fixed_debt(db)
    repo = DebtRepository(db)

    assert repo.get_debt("owner_2", debt.id) is None
    assert repo.list_debts("owner_2") == []
    assert repo.list_installments_for_owner("owner_2") == {}
    assert len(repo.list_installments_for_owner("owner_1")[debt.id]) == 3


def test_malformed_debt_id_is_not_found(db: Session):
    assert DebtRepository(db).get_debt("owner_1", "not-a-uuid") is None


def test_record_payment_persists_all_effects(db: Session):
    debt, installments = create_fixed_debt(db)
    store = LedgerStore(db)

    with transaction(db):
        record_payment(store, "owner_1", debt.id, 33333, installment_id=installments[0].id, today=TODAY)

    assert store.get_debt("owner_1", debt.id).cumulative_paid_cents == 33333
    first = store.list_installments(debt.id)[0]
    assert first.amount_paid_cents == 33333
    assert first.status == InstallmentStatus.PAID
    assert store.count_payments(debt.id) == 1
    assert store.payments.list_payments(debt.id)[0].installment_id == installments[0].id


def test_rejected_payment_rolls_back(db: Session):
    debt, installments = create_fixed_debt(db)
    store = LedgerStore(db)

    with pytest.raises(StateConflictError):
        with transaction(db):
            record_payment(store, "owner_1", debt.id, 40000, installment_id=installments[0].id, today=TODAY)

    assert store.get_debt("owner_1", debt.id).cumulative_paid_cents == 0
    assert store.count_payments(debt.id) == 0


def test_delete_debt_cascades(db: Session):
    debt, installments = create_fixed_debt(db)
    store = LedgerStore(db)
    with transaction(db):
        record_payment(store, "owner_1", debt.id, 100, installment_id=installments[0].id, today=TODAY)

    with transaction(db):
        assert store.debts.delete_debt("owner_1", debt.id) is True

    assert store.get_debt("owner_1", debt.id) is None
    assert store.list_installments(debt.id) == []
    assert store.payments.list_payments_for_owner("owner_1") == []
    assert store.debts.delete_debt("owner_1", debt.id) is False
