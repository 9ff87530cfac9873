"""Domain models - pure Python dataclasses representing business entities"""

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import List, Optional


class Scheme(str, Enum):
    """Repayment shape of a debt"""

    SINGLE = "single"
    FIXED_SCHEDULE = "fixed_schedule"
    RECURRING_UNTIL_PROCESS_END = "recurring_until_process_end"
    RECURRING_UNTIL_DECISION = "recurring_until_decision"

    @property
    def is_recurring(self) -> bool:
        return self in (Scheme.RECURRING_UNTIL_PROCESS_END, Scheme.RECURRING_UNTIL_DECISION)


class InstallmentStatus(str, Enum):
    PENDING = "pending"
    PARTIALLY_PAID = "partially_paid"
    PAID = "paid"
    OVERDUE = "overdue"


class DebtStatus(str, Enum):
    UNPAID = "unpaid"
    PARTIAL = "partial"
    PAID = "paid"
    ONGOING = "ongoing"  # Recurring debts never complete


def new_id() -> str:
    return str(uuid.uuid4())


@dataclass
class Debt:
    """Obligation owed to the owner by one debtor"""

    id: str
    owner_id: str
    name: str
    scheme: Scheme
    principal_cents: int  # SINGLE: amount owed, FIXED: contract total, RECURRING: upfront (may be 0)
    created_at: datetime
    cumulative_paid_cents: int = 0
    notes: Optional[str] = None
    recurring_amount_cents: Optional[int] = None
    recurring_day_of_month: Optional[int] = None


@dataclass
class Installment:
    """Single payment in a fixed repayment schedule"""

    id: str
    debt_id: str
    sequence_number: int
    due_date: date
    amount_due_cents: int
    amount_paid_cents: int = 0
    status: InstallmentStatus = InstallmentStatus.PENDING

    @property
    def remaining_cents(self) -> int:
        return max(0, self.amount_due_cents - self.amount_paid_cents)


@dataclass(frozen=True)
class PaymentRecord:
    """Immutable entry in a debt's payment log"""

    id: str
    debt_id: str
    owner_id: str
    paid_at: datetime
    amount_cents: int
    created_at: datetime
    method: Optional[str] = None
    notes: Optional[str] = None
    installment_id: Optional[str] = None
    recurring_sequence: Optional[int] = None


@dataclass
class PaymentOutcome:
    """State changes produced by applying one payment"""

    payment: PaymentRecord
    debt: Debt
    installment: Optional[Installment] = None


@dataclass(frozen=True)
class DailyTotal:
    day: date
    amount_cents: int


@dataclass(frozen=True)
class OutstandingDebt:
    debt_id: str
    name: str
    remaining_cents: int


@dataclass
class PortfolioSummary:
    """Reconciled totals across all of an owner's debts"""

    total_paid_cents: int
    total_owed_cents: int
    total_remaining_cents: int
    immediate_receivable_cents: int
    daily_series: List[DailyTotal] = field(default_factory=list)
    top_outstanding: List[OutstandingDebt] = field(default_factory=list)


@dataclass(frozen=True)
class Issuer:
    """Person or office issuing receipts"""

    name: str
    office_name: Optional[str] = None
    logo_url: Optional[str] = None


@dataclass(frozen=True)
class ReceiptSnapshot:
    """Reconciled view of one completed payment for the presentation layer"""

    receipt_id: str
    debtor_name: str
    paid_at: datetime
    amount_cents: int
    scheme: Scheme
    cumulative_paid_cents: int
    issued_by: str
    method: Optional[str] = None
    debtor_notes: Optional[str] = None
    logo_url: Optional[str] = None

    # SINGLE and FIXED_SCHEDULE
    contract_total_cents: Optional[int] = None
    paid_before_cents: Optional[int] = None
    balance_before_cents: Optional[int] = None
    new_balance_cents: Optional[int] = None

    # FIXED_SCHEDULE
    installment_number: Optional[int] = None
    installment_count: Optional[int] = None

    # Recurring
    upfront_cents: Optional[int] = None
    recurring_amount_cents: Optional[int] = None
    recurring_day_of_month: Optional[int] = None
    recurring_sequence: Optional[int] = None
