"""Receipt snapshot assembly for a completed payment"""

import uuid
from typing import Optional
from receivables_gateway.domain.models import Debt, Installment, Issuer, PaymentRecord, ReceiptSnapshot, Scheme


def generate_receipt_id() -> str:
    return f"REC-{uuid.uuid4().hex[:8].upper()}"


def build_receipt(
    payment: PaymentRecord,
    debt: Debt,
    installment: Optional[Installment] = None,
    *,
    issuer: Issuer,
    installment_count: Optional[int] = None,
    default_logo_url: Optional[str] = None,
) -> ReceiptSnapshot:
    """
    Snapshot of one payment against the debt state after it was applied.

    Balances are scheme-specific: contract total and before/after balances for
    single and fixed-schedule debts, cumulative total and ordinal for recurring ones.
    """
    cumulative = debt.cumulative_paid_cents
    paid_before = cumulative - payment.amount_cents

    fields = dict(
        receipt_id=generate_receipt_id(),
        debtor_name=debt.name,
        paid_at=payment.paid_at,
        amount_cents=payment.amount_cents,
        scheme=debt.scheme,
        cumulative_paid_cents=cumulative,
        issued_by=issuer.office_name or issuer.name,
        method=payment.method,
        debtor_notes=debt.notes,
        logo_url=issuer.logo_url or default_logo_url,
    )

    if debt.scheme.is_recurring:
        fields.update(
            upfront_cents=debt.principal_cents if debt.principal_cents > 0 else None,
            recurring_amount_cents=debt.recurring_amount_cents,
            recurring_day_of_month=debt.recurring_day_of_month,
            recurring_sequence=payment.recurring_sequence,
        )
    else:
        total = debt.principal_cents
        fields.update(
            contract_total_cents=total,
            paid_before_cents=paid_before,
            balance_before_cents=total - paid_before,
            new_balance_cents=total - cumulative,
        )
        if debt.scheme == Scheme.FIXED_SCHEDULE:
            fields.update(
                installment_number=installment.sequence_number if installment else None,
                installment_count=installment_count,
            )

    return ReceiptSnapshot(**fields)
