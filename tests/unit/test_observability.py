"""Unit tests for structured logging and metrics helpers"""

import json
import logging
import pytest
from decimal import Decimal
from prometheus_client import REGISTRY
from debt_pool.infrastructure.observability.logging import (
    CustomJsonFormatter,
    log_payment,
    log_pool_distribution,
    setup_logging,
)
from debt_pool.infrastructure.observability.metrics import record_pool_distribution, record_rejection
from debt_pool.domain.exceptions import NotFoundError


@pytest.fixture
def json_logging(capsys):
    """Install the JSON handler on captured stdout for one test, then remove it"""
    root = logging.getLogger()
    level = root.level
    setup_logging("INFO")
    yield
    root.handlers[:] = [h for h in root.handlers if not isinstance(h.formatter, CustomJsonFormatter)]
    root.setLevel(level)


def test_log_payment_is_json(json_logging, capsys):
    log_payment("debt_1", "Aunt May", Decimal("12.50"), Decimal("87.50"))

    record = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
    assert record["message"] == "Payment applied"
    assert record["level"] == "INFO"
    assert record["service"] == "debt-pool"
    assert record["debt_id"] == "debt_1"
    assert record["amount"] == "12.50"
    assert record["balance_after"] == "87.50"


def test_log_pool_distribution_is_json(json_logging, capsys):
    log_pool_distribution("dist_1", Decimal("100.00"), Decimal("99.00"), 3, 2)

    record = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
    assert record["step"] == "pool_distributed"
    assert record["allocated_amount"] == "99.00"
    assert record["applied_count"] == 2


def test_record_pool_distribution_counts_pool_payments():
    before = REGISTRY.get_sample_value("debt_pool_payments_total", {"source": "pool"}) or 0.0
    distributions = REGISTRY.get_sample_value("debt_pool_distributions_total") or 0.0

    record_pool_distribution(3, [Decimal("1.00"), Decimal("2.50")])

    assert REGISTRY.get_sample_value("debt_pool_payments_total", {"source": "pool"}) == before + 2
    assert REGISTRY.get_sample_value("debt_pool_distributions_total") == distributions + 1


def test_record_rejection_labels_error_type():
    labels = {"operation": "lookup", "reason": "NotFoundError"}
    before = REGISTRY.get_sample_value("debt_pool_rejected_operations_total", labels) or 0.0

    record_rejection("lookup", NotFoundError("x"))

    assert REGISTRY.get_sample_value("debt_pool_rejected_operations_total", labels) == before + 1
