"""Portfolio reconciliation - totals and trend data across an owner's debts"""

import dataclasses
from collections import defaultdict
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Dict, Iterable, List, Mapping, Sequence
from receivables_gateway.domain.models import (
    DailyTotal,
    Debt,
    Installment,
    InstallmentStatus,
    OutstandingDebt,
    PaymentRecord,
    PortfolioSummary,
    Scheme,
)
from receivables_gateway.domain.status import derive_installment_status, owed_cents, remaining_cents
from receivables_gateway.utils.date_utils import generate_date_range


def _immediate_cents(
    debt: Debt, installments: Sequence[Installment], today: date, horizon: date
) -> int:
    """Balance expected now: overdue or due within the horizon for fixed schedules, everything left otherwise"""
    if debt.scheme != Scheme.FIXED_SCHEDULE:
        # No due-date granularity, so the whole remainder is immediate
        return remaining_cents(debt, installments)

    total = 0
    for inst in installments:
        remaining = inst.amount_due_cents - inst.amount_paid_cents
        if remaining <= 0:
            continue
        status = derive_installment_status(inst, today)
        if status == InstallmentStatus.OVERDUE:
            total += remaining
        elif status in (InstallmentStatus.PENDING, InstallmentStatus.PARTIALLY_PAID) and inst.due_date <= horizon:
            total += remaining
    return total


def daily_payment_series(payments: Iterable[PaymentRecord], today: date, days: int = 30) -> List[DailyTotal]:
    """Payment totals per calendar day for the `days` days ending today, zero-filled"""
    if days <= 0:
        return []

    start = today - timedelta(days=days - 1)
    by_day: Dict[date, int] = defaultdict(int)
    for payment in payments:
        day = payment.paid_at.date()
        if start <= day <= today:
            by_day[day] += payment.amount_cents

    return [DailyTotal(day=day, amount_cents=by_day.get(day, 0)) for day in generate_date_range(start, today)]


def aggregate(
    debts: Sequence[Debt],
    installments_by_debt: Mapping[str, Sequence[Installment]],
    payments: Iterable[PaymentRecord],
    today: date,
    immediate_window_days: int = 7,
    trend_days: int = 30,
    top_limit: int = 5,
) -> PortfolioSummary:
    """
    Fold all debts and payments of one owner into portfolio totals.

    Owed basis per scheme:
    - FIXED_SCHEDULE: sum of installment amounts due
    - Recurring: upfront amount only (monthly payments are open-ended)
    - SINGLE: amount owed

    Never raises on well-formed input; empty portfolios yield zeros.
    """
    horizon = today + timedelta(days=immediate_window_days)

    total_paid = 0
    total_owed = 0
    total_remaining = 0
    immediate = 0
    outstanding: List[OutstandingDebt] = []

    for debt in debts:
        installments = installments_by_debt.get(debt.id, [])
        remaining = remaining_cents(debt, installments)

        total_paid += debt.cumulative_paid_cents
        total_owed += owed_cents(debt, installments)
        total_remaining += remaining
        immediate += _immediate_cents(debt, installments, today, horizon)

        if remaining > 0:
            outstanding.append(OutstandingDebt(debt_id=debt.id, name=debt.name, remaining_cents=remaining))

    outstanding.sort(key=lambda o: o.remaining_cents, reverse=True)

    return PortfolioSummary(
        total_paid_cents=total_paid,
        total_owed_cents=total_owed,
        total_remaining_cents=total_remaining,
        immediate_receivable_cents=immediate,
        daily_series=daily_payment_series(payments, today, trend_days),
        top_outstanding=outstanding[:top_limit],
    )


@dataclass
class ReconciledTotals:
    debt: Debt
    installments: List[Installment]
    drifted: bool


def reconcile_totals(
    debt: Debt,
    installments: Sequence[Installment],
    payments: Iterable[PaymentRecord],
    today: date,
) -> ReconciledTotals:
    """
    Rebuild running totals from the payment log, which wins on any discrepancy.

    Returns corrected copies of the debt and installments and whether anything differed.
    """
    own_payments = [p for p in payments if p.debt_id == debt.id]

    paid_by_installment: Dict[str, int] = defaultdict(int)
    for payment in own_payments:
        if payment.installment_id:
            paid_by_installment[payment.installment_id] += payment.amount_cents

    cumulative = sum(p.amount_cents for p in own_payments)
    drifted = cumulative != debt.cumulative_paid_cents
    fixed_debt = dataclasses.replace(debt, cumulative_paid_cents=cumulative)

    fixed_installments = []
    for inst in installments:
        paid = paid_by_installment.get(inst.id, 0)
        fixed = dataclasses.replace(inst, amount_paid_cents=paid)
        fixed.status = derive_installment_status(fixed, today)
        if paid != inst.amount_paid_cents:
            drifted = True
        fixed_installments.append(fixed)

    return ReconciledTotals(debt=fixed_debt, installments=fixed_installments, drifted=drifted)
