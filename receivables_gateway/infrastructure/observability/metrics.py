"""Prometheus metrics for payment volume, rejections and debt intake"""

from prometheus_client import Counter, Histogram

# Payment metrics
payment_counter = Counter(
    "receivables_payment_total",
    "Payments submitted to the engine",
    ["scheme", "outcome"],  # outcome: applied | rejected
)

payment_amount_counter = Counter(
    "receivables_payment_amount_cents_total",
    "Sum of applied payment amounts in cents",
    ["scheme"],
)

# Debt intake
debt_created_counter = Counter(
    "receivables_debt_created_total",
    "Debts opened",
    ["scheme"],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_payment_applied(scheme: str, amount_cents: int) -> None:
    """Record an applied payment and its amount"""
    payment_counter.labels(scheme=scheme, outcome="applied").inc()
    payment_amount_counter.labels(scheme=scheme).inc(amount_cents)


def record_payment_rejected(scheme: str) -> None:
    payment_counter.labels(scheme=scheme, outcome="rejected").inc()
