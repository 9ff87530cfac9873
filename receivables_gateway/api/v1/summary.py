"""GET /v1/summary - Portfolio totals for the owner"""

from datetime import date
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from receivables_gateway.api.v1.schemas import DailyTotalSchema, OutstandingDebtSchema, SummaryResponse
from receivables_gateway.api.dependencies import get_owner_id, get_today
from receivables_gateway.config import settings
from receivables_gateway.infrastructure.database.session import get_db
from receivables_gateway.infrastructure.database.repositories import DebtRepository, PaymentRepository
from receivables_gateway.domain.reconciliation import aggregate

router = APIRouter()


@router.get("/summary", response_model=SummaryResponse)
def get_summary(
    owner_id: str = Depends(get_owner_id),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
):
    """
    Reconciled totals across all debts.

    Returns:
        Paid, owed, remaining and immediately receivable amounts, a zero-filled
        daily payment series and the debts with the largest balances
    """
    debt_repo = DebtRepository(db)
    summary = aggregate(
        debt_repo.list_debts(owner_id),
        debt_repo.list_installments_for_owner(owner_id),
        PaymentRepository(db).list_payments_for_owner(owner_id),
        today,
        immediate_window_days=settings.immediate_window_days,
        trend_days=settings.trend_window_days,
        top_limit=settings.top_outstanding_limit,
    )

    return SummaryResponse(
        owner_id=owner_id,
        total_paid_cents=summary.total_paid_cents,
        total_owed_cents=summary.total_owed_cents,
        total_remaining_cents=summary.total_remaining_cents,
        immediate_receivable_cents=summary.immediate_receivable_cents,
        daily_series=[DailyTotalSchema(day=d.day, amount_cents=d.amount_cents) for d in summary.daily_series],
        top_outstanding=[
            OutstandingDebtSchema(debt_id=o.debt_id, name=o.name, remaining_cents=o.remaining_cents)
            for o in summary.top_outstanding
        ],
    )
