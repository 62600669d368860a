"""Prometheus metrics for monitoring payments, transactions and report quality"""

from prometheus_client import Counter, Histogram

# Transaction metrics
transactions_created_counter = Counter(
    "boutique_transactions_created_total",
    "Sales and rentals created",
    ["kind"],  # sale | rental
)

# Payment metrics
payments_counter = Counter(
    "boutique_payments_total",
    "Payments recorded against sales and rentals",
    ["kind", "method"],
)

payment_amount_counter = Counter(
    "boutique_payment_amount_cents_total",
    "Sum of recorded payment amounts in cents",
    ["kind"],
)

payment_rejections_counter = Counter(
    "boutique_payment_rejections_total",
    "Payments refused before any write",
    ["reason"],  # invalid_amount | invalid_method | not_found | conflict
)

# Report quality
skipped_rows_counter = Counter(
    "boutique_report_skipped_rows_total",
    "Transactions dropped from reports because their client is unknown",
    ["report"],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_payment(kind: str, method: str, amount_cents: int) -> None:
    """Record a successfully committed payment"""
    payments_counter.labels(kind=kind, method=method).inc()
    payment_amount_counter.labels(kind=kind).inc(amount_cents)
