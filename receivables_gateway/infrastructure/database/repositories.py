"""Data access layer for debts, installments and payments"""

import uuid
from typing import Dict, List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session
from receivables_gateway.infrastructure.database.models import DebtRow, InstallmentRow, PaymentRow
from receivables_gateway.domain.models import Debt, Installment, InstallmentStatus, PaymentRecord, Scheme


def _as_uuid(value: str) -> Optional[uuid.UUID]:
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None


def _to_debt(row: DebtRow) -> Debt:
    return Debt(
        id=str(row.id),
        owner_id=row.owner_id,
        name=row.name,
        scheme=Scheme(row.scheme),
        principal_cents=row.principal_cents,
        created_at=row.created_at,
        cumulative_paid_cents=row.cumulative_paid_cents,
        notes=row.notes,
        recurring_amount_cents=row.recurring_amount_cents,
        recurring_day_of_month=row.recurring_day_of_month,
    )


def _to_installment(row: InstallmentRow) -> Installment:
    return Installment(
        id=str(row.id),
        debt_id=str(row.debt_id),
        sequence_number=row.sequence_number,
        due_date=row.due_date,
        amount_due_cents=row.amount_due_cents,
        amount_paid_cents=row.amount_paid_cents,
        status=InstallmentStatus(row.status),
    )


def _to_payment(row: PaymentRow) -> PaymentRecord:
    return PaymentRecord(
        id=str(row.id),
        debt_id=str(row.debt_id),
        owner_id=row.owner_id,
        paid_at=row.paid_at,
        amount_cents=row.amount_cents,
        created_at=row.created_at,
        method=row.method,
        notes=row.notes,
        installment_id=str(row.installment_id) if row.installment_id else None,
        recurring_sequence=row.recurring_sequence,
    )


class DebtRepository:
    """Owner-scoped repository for debts and everything they own"""

    def __init__(self, db: Session):
        self.db = db

    def _debt_row(self, owner_id: str, debt_id: str, for_update: bool = False) -> Optional[DebtRow]:
        debt_uuid = _as_uuid(debt_id)
        if debt_uuid is None:
            return None
        query = self.db.query(DebtRow).filter(DebtRow.id == debt_uuid, DebtRow.owner_id == owner_id)
        if for_update:
            # Serializes concurrent payments against the same debt (no-op on SQLite)
            query = query.with_for_update()
        return query.first()

    def create_debt(self, debt: Debt, installments: List[Installment]) -> Debt:
        """Persist a debt together with its schedule"""
        db_debt = DebtRow(
            id=uuid.UUID(debt.id),
            owner_id=debt.owner_id,
            name=debt.name,
            notes=debt.notes,
            scheme=debt.scheme.value,
            principal_cents=debt.principal_cents,
            cumulative_paid_cents=debt.cumulative_paid_cents,
            recurring_amount_cents=debt.recurring_amount_cents,
            recurring_day_of_month=debt.recurring_day_of_month,
            created_at=debt.created_at,
        )
        self.db.add(db_debt)
        self.db.flush()

        for inst in installments:
            self.db.add(
                InstallmentRow(
                    id=uuid.UUID(inst.id),
                    debt_id=db_debt.id,
                    sequence_number=inst.sequence_number,
                    due_date=inst.due_date,
                    amount_due_cents=inst.amount_due_cents,
                    amount_paid_cents=inst.amount_paid_cents,
                    status=inst.status.value,
                )
            )
        self.db.flush()

        return _to_debt(db_debt)

    def get_debt(self, owner_id: str, debt_id: str, for_update: bool = False) -> Optional[Debt]:
        row = self._debt_row(owner_id, debt_id, for_update=for_update)
        return _to_debt(row) if row else None

    def list_debts(self, owner_id: str) -> List[Debt]:
        """All debts of an owner, newest first"""
        rows = (
            self.db.query(DebtRow)
            .filter(DebtRow.owner_id == owner_id)
            .order_by(DebtRow.created_at.desc())
            .all()
        )
        return [_to_debt(row) for row in rows]

    def delete_debt(self, owner_id: str, debt_id: str) -> bool:
        """Delete a debt with its installments and payments"""
        row = self._debt_row(owner_id, debt_id)
        if row is None:
            return False
        self.db.delete(row)
        self.db.flush()
        return True

    def save_debt(self, debt: Debt) -> None:
        """Write back the running paid total"""
        row = self.db.get(DebtRow, uuid.UUID(debt.id))
        row.cumulative_paid_cents = debt.cumulative_paid_cents
        self.db.flush()

    def list_installments(self, debt_id: str) -> List[Installment]:
        rows = (
            self.db.query(InstallmentRow)
            .filter(InstallmentRow.debt_id == uuid.UUID(debt_id))
            .order_by(InstallmentRow.sequence_number)
            .all()
        )
        return [_to_installment(row) for row in rows]

    def list_installments_for_owner(self, owner_id: str) -> Dict[str, List[Installment]]:
        """Installments of every debt an owner has, keyed by debt id"""
        rows = (
            self.db.query(InstallmentRow)
            .join(DebtRow, InstallmentRow.debt_id == DebtRow.id)
            .filter(DebtRow.owner_id == owner_id)
            .order_by(InstallmentRow.debt_id, InstallmentRow.sequence_number)
            .all()
        )
        grouped: Dict[str, List[Installment]] = {}
        for row in rows:
            grouped.setdefault(str(row.debt_id), []).append(_to_installment(row))
        return grouped

    def save_installment(self, installment: Installment) -> None:
        """Write back paid amount and the freshly derived status"""
        row = self.db.get(InstallmentRow, uuid.UUID(installment.id))
        row.amount_paid_cents = installment.amount_paid_cents
        row.status = installment.status.value
        self.db.flush()


class PaymentRepository:
    """Repository for the append-only payment log"""

    def __init__(self, db: Session):
        self.db = db

    def add_payment(self, payment: PaymentRecord) -> None:
        self.db.add(
            PaymentRow(
                id=uuid.UUID(payment.id),
                debt_id=uuid.UUID(payment.debt_id),
                owner_id=payment.owner_id,
                paid_at=payment.paid_at,
                amount_cents=payment.amount_cents,
                method=payment.method,
                notes=payment.notes,
                installment_id=uuid.UUID(payment.installment_id) if payment.installment_id else None,
                recurring_sequence=payment.recurring_sequence,
                created_at=payment.created_at,
            )
        )
        self.db.flush()

    def count_payments(self, debt_id: str) -> int:
        return (
            self.db.query(func.count(PaymentRow.id))
            .filter(PaymentRow.debt_id == uuid.UUID(debt_id))
            .scalar()
        )

    def list_payments(self, debt_id: str) -> List[PaymentRecord]:
        """Payment history for one debt, newest first"""
        rows = (
            self.db.query(PaymentRow)
            .filter(PaymentRow.debt_id == uuid.UUID(debt_id))
            .order_by(PaymentRow.paid_at.desc(), PaymentRow.created_at.desc())
            .all()
        )
        return [_to_payment(row) for row in rows]

    def list_payments_for_owner(self, owner_id: str) -> List[PaymentRecord]:
        rows = self.db.query(PaymentRow).filter(PaymentRow.owner_id == owner_id).all()
        return [_to_payment(row) for row in rows]


class LedgerStore:
    """DebtStore backed by one SQLAlchemy session"""

    def __init__(self, db: Session):
        self.debts = DebtRepository(db)
        self.payments = PaymentRepository(db)

    def get_debt(self, owner_id: str, debt_id: str, for_update: bool = False) -> Optional[Debt]:
        return self.debts.get_debt(owner_id, debt_id, for_update=for_update)

    def list_installments(self, debt_id: str) -> List[Installment]:
        return self.debts.list_installments(debt_id)

    def count_payments(self, debt_id: str) -> int:
        return self.payments.count_payments(debt_id)

    def add_payment(self, payment: PaymentRecord) -> None:
        self.payments.add_payment(payment)

    def save_debt(self, debt: Debt) -> None:
        self.debts.save_debt(debt)

    def save_installment(self, installment: Installment) -> None:
        self.debts.save_installment(installment)
