"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, Field
from datetime import date, datetime
from typing import List, Optional
from receivables_gateway.domain.models import DebtStatus, InstallmentStatus, Scheme

# Fifty years of monthly installments
MAX_INSTALLMENTS = 600


class CreateDebtRequest(BaseModel):
    """Request body for POST /v1/debts"""

    name: str = Field(..., min_length=1, description="Debtor name")
    scheme: Scheme
    principal_cents: Optional[int] = Field(
        None, ge=0, description="Amount owed (single), contract total (fixed) or upfront amount (recurring)"
    )
    installment_count: Optional[int] = Field(None, le=MAX_INSTALLMENTS, description="Fixed schedules only")
    first_due_date: Optional[date] = Field(None, description="Fixed schedules only")
    recurring_amount_cents: Optional[int] = Field(None, description="Recurring only")
    recurring_day_of_month: Optional[int] = Field(None, description="Recurring only, informational")
    notes: Optional[str] = None


class SchedulePreviewRequest(BaseModel):
    """Request body for POST /v1/schedule/preview"""

    principal_cents: int = Field(..., gt=0)
    installment_count: int = Field(..., gt=0, le=MAX_INSTALLMENTS)
    first_due_date: date


class InstallmentSchema(BaseModel):
    """Single installment in a fixed schedule"""

    id: Optional[str] = None
    sequence_number: int
    due_date: date
    amount_due_cents: int
    amount_paid_cents: int = 0
    remaining_cents: int
    status: InstallmentStatus = InstallmentStatus.PENDING


class SchedulePreviewResponse(BaseModel):
    total_cents: int
    installments: List[InstallmentSchema]


class DebtResponse(BaseModel):
    """Debt with derived status and, for fixed schedules, its installments"""

    debt_id: str
    name: str
    scheme: Scheme
    status: DebtStatus
    principal_cents: int
    cumulative_paid_cents: int
    remaining_cents: int
    recurring_amount_cents: Optional[int] = None
    recurring_day_of_month: Optional[int] = None
    notes: Optional[str] = None
    created_at: str
    next_installment_id: Optional[str] = None
    installments: List[InstallmentSchema] = []


class DebtListResponse(BaseModel):
    """Response for GET /v1/debts"""

    owner_id: str
    debts: List[DebtResponse]


class PaymentRequest(BaseModel):
    """Request body for POST /v1/debts/{debt_id}/payments"""

    amount_cents: int = Field(..., gt=0, description="Payment amount in cents")
    method: Optional[str] = Field(None, description="PIX, cash, bank transfer, card...")
    notes: Optional[str] = None
    installment_id: Optional[str] = Field(None, description="Required for fixed-schedule debts")
    paid_at: Optional[datetime] = None

    # Receipt presentation
    issuer_name: Optional[str] = None
    office_name: Optional[str] = None
    logo_url: Optional[str] = None


class PaymentSchema(BaseModel):
    """One entry in the payment log"""

    payment_id: str
    debt_id: str
    paid_at: datetime
    amount_cents: int
    method: Optional[str] = None
    notes: Optional[str] = None
    installment_id: Optional[str] = None
    installment_number: Optional[int] = None
    recurring_sequence: Optional[int] = None


class ReceiptSchema(BaseModel):
    """Receipt data for the presentation layer"""

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
    contract_total_cents: Optional[int] = None
    paid_before_cents: Optional[int] = None
    balance_before_cents: Optional[int] = None
    new_balance_cents: Optional[int] = None
    installment_number: Optional[int] = None
    installment_count: Optional[int] = None
    upfront_cents: Optional[int] = None
    recurring_amount_cents: Optional[int] = None
    recurring_day_of_month: Optional[int] = None
    recurring_sequence: Optional[int] = None


class PaymentResponse(BaseModel):
    """Response for POST /v1/debts/{debt_id}/payments"""

    payment: PaymentSchema
    debt: DebtResponse
    installment: Optional[InstallmentSchema] = None
    receipt: ReceiptSchema


class PaymentHistoryResponse(BaseModel):
    """Response for GET /v1/debts/{debt_id}/payments"""

    debt_id: str
    payments: List[PaymentSchema]


class ReconcileResponse(BaseModel):
    drifted: bool
    debt: DebtResponse


class DailyTotalSchema(BaseModel):
    day: date
    amount_cents: int


class OutstandingDebtSchema(BaseModel):
    debt_id: str
    name: str
    remaining_cents: int


class SummaryResponse(BaseModel):
    """Response for GET /v1/summary"""

    owner_id: str
    total_paid_cents: int
    total_owed_cents: int
    total_remaining_cents: int
    immediate_receivable_cents: int
    daily_series: List[DailyTotalSchema]
    top_outstanding: List[OutstandingDebtSchema]
