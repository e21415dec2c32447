"""Prometheus metrics for check-ins, card scans, transfers, finances and notification delivery"""

from prometheus_client import Counter, Histogram

# Attendance metrics
check_in_counter = Counter(
    "parish_check_in_total",
    "Attendance check-ins recorded",
    ["method"],  # card_scan | manual_entry | mobile_app | qr_code
)

card_scan_failures_counter = Counter(
    "parish_card_scan_failures_total",
    "Card scans rejected by the scanner endpoint",
    ["reason"],  # not_found | conflict | invalid
)

# Transfer metrics
transfer_transition_counter = Counter(
    "parish_transfer_transition_total",
    "Transfer request status changes",
    ["status"],  # approved | rejected | completed
)

# Finance metrics
transaction_counter = Counter(
    "parish_transaction_total",
    "Financial transactions recorded",
    ["type"],  # INCOME | EXPENSE | TRANSFER
)

transaction_amount_bucket_counter = Counter(
    "parish_transaction_amount_bucket",
    "Recorded transaction amounts by bucket",
    ["bucket"],  # <$100, $100-$1k, $1k-$10k, $10k+
)

# Notification webhook metrics
notification_latency_histogram = Histogram(
    "notification_latency_seconds",
    "Notification webhook response time",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

notification_failure_counter = Counter(
    "notification_failures_total",
    "Failed notification deliveries",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_transaction(transaction_type: str, amount_cents: int) -> None:
    """Record transaction metrics for giving and spending distribution"""
    transaction_counter.labels(type=transaction_type).inc()

    if amount_cents < 10_000:
        bucket = "<$100"
    elif amount_cents < 100_000:
        bucket = "$100-$1k"
    elif amount_cents < 1_000_000:
        bucket = "$1k-$10k"
    else:
        bucket = "$10k+"

    transaction_amount_bucket_counter.labels(bucket=bucket).inc()
