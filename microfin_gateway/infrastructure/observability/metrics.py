"""Prometheus metrics for loan computations, report verdicts and request latency"""

from prometheus_client import Counter, Histogram

# Loan form metrics
loan_computation_counter = Counter(
    "microfin_loan_computation_total",
    "Loan financial computations",
    ["outcome"],  # complete | incomplete | invalid
)

payment_check_counter = Counter(
    "microfin_payment_check_total",
    "Payment validations against balance due",
    ["outcome"],  # accepted | rejected
)

# Accounting report metrics
report_counter = Counter(
    "microfin_report_total",
    "Accounting reports built",
    ["report", "balanced"],  # ledger | trial_balance | balance_sheet | income_statement | journal_entry
)

invalid_argument_counter = Counter(
    "microfin_invalid_argument_total",
    "Requests rejected for contractually malformed input",
    ["endpoint"],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_report(report: str, is_balanced: bool | None = None) -> None:
    """Record a built report; reports without a balance check are labelled n/a"""
    if is_balanced is None:
        balanced = "n/a"
    else:
        balanced = "yes" if is_balanced else "no"

    report_counter.labels(report=report, balanced=balanced).inc()
