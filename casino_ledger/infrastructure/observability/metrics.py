"""Prometheus metrics for wagers, lending, trading and notification delivery"""

from prometheus_client import Counter, Histogram

# Wager metrics
wager_counter = Counter(
    "casino_wager_total",
    "Total wagers settled",
    ["game_type", "outcome"],
)

# Lending metrics
loan_origination_counter = Counter(
    "casino_loan_originated_total",
    "Loans originated by type",
    ["loan_type"],
)

loan_repayment_counter = Counter(
    "casino_loan_repayment_total",
    "Loan repayments",
    ["result"],  # partial | paid_off
)

# Trading metrics
trade_counter = Counter(
    "casino_trade_total",
    "Stock trades executed",
    ["side"],  # buy | sell
)

# Failures
rejection_counter = Counter(
    "casino_rejected_operations_total",
    "Operations rejected before any mutation",
    ["operation", "reason"],
)

transient_failure_counter = Counter(
    "casino_transient_failures_total",
    "Operations aborted by storage or oracle unavailability",
    ["operation"],
)

# Notification metrics
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


def record_repayment(paid_off: bool) -> None:
    loan_repayment_counter.labels(result="paid_off" if paid_off else "partial").inc()
