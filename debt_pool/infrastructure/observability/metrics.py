"""Prometheus metrics for payments, pool distributions and rejected operations"""

from decimal import Decimal

from prometheus_client import Counter, Histogram

# Payment metrics
payment_counter = Counter(
    "debt_pool_payments_total",
    "Payments applied to debts",
    ["source"],  # direct | pool
)

payment_amount_counter = Counter(
    "debt_pool_payment_amount_total",
    "Sum of payment amounts applied",
    ["source"],
)

# Pool metrics
pool_distribution_counter = Counter(
    "debt_pool_distributions_total",
    "Pool distributions committed",
)

pool_lines_histogram = Histogram(
    "debt_pool_distribution_lines",
    "Allocation lines per committed distribution",
    buckets=[1, 2, 3, 5, 10, 25, 50],
)

# Rejections
rejection_counter = Counter(
    "debt_pool_rejected_operations_total",
    "Operations rejected by validation",
    ["operation", "reason"],
)


def record_payment(amount: Decimal, source: str = "direct") -> None:
    """Record a payment applied to a debt"""
    payment_counter.labels(source=source).inc()
    payment_amount_counter.labels(source=source).inc(float(amount))


def record_pool_distribution(line_count: int, applied_amounts: list) -> None:
    """Record a committed distribution and the pool payments it produced"""
    pool_distribution_counter.inc()
    pool_lines_histogram.observe(line_count)
    for amount in applied_amounts:
        record_payment(amount, source="pool")


def record_rejection(operation: str, error: Exception) -> None:
    """Count a rejected operation by its error type"""
    rejection_counter.labels(operation=operation, reason=type(error).__name__).inc()
