"""Storage collaborator interface used by the payment engine"""

from typing import List, Optional, Protocol
from receivables_gateway.domain.models import Debt, Installment, PaymentRecord


class DebtStore(Protocol):
    """Owner-scoped persistence for debts, installments and the payment log.

    Implementations must give read-modify-write isolation per debt between
    get_debt(..., for_update=True) and the writes that follow it.
    """

    def get_debt(self, owner_id: str, debt_id: str, for_update: bool = False) -> Optional[Debt]:
        ...

    def list_installments(self, debt_id: str) -> List[Installment]:
        ...

    def count_payments(self, debt_id: str) -> int:
        ...

    def add_payment(self, payment: PaymentRecord) -> None:
        ...

    def save_debt(self, debt: Debt) -> None:
        ...

    def save_installment(self, installment: Installment) -> None:
        ...
