"""Pytest fixtures for testing"""

import pytest
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Callable

from debt_pool.config import Settings
from debt_pool.domain.ledger import add_claim, add_debt
from debt_pool.domain.models import Debt, Ledger
from debt_pool.service import LedgerService

BASE_TIME = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_debt() -> Callable[..., Debt]:
    """Factory for debts with a given rate and balance"""
    counter = {"n": 0}

    def _make(
        interest_rate="10",
        balance="100.00",
        amount=None,
        creditor_id="C1",
        debtor_id="D1",
        debt_id=None,
    ) -> Debt:
        counter["n"] += 1
        balance_dec = Decimal(str(balance))
        return Debt(
            id=debt_id or f"debt_{counter['n']}",
            debtor_id=debtor_id,
            creditor_id=creditor_id,
            amount=Decimal(str(amount)) if amount is not None else max(balance_dec, Decimal("0.01")),
            outstanding_balance=balance_dec,
            interest_rate=Decimal(str(interest_rate)),
            note="",
            created_at=BASE_TIME + timedelta(minutes=counter["n"]),
        )

    return _make


@pytest.fixture
def sample_ledger() -> Ledger:
    """Debtor D1 owes three creditors; two creditors filed claims"""
    ledger = Ledger()
    ledger = add_debt(ledger, "D1", "bank", "1000.00", "12.5", "credit card", created_at=BASE_TIME)
    ledger = add_debt(ledger, "D1", "friend", "150.00", "0", "borrowed for rent", created_at=BASE_TIME)
    ledger = add_debt(ledger, "D1", "shop", "80.00", "3", created_at=BASE_TIME)
    ledger = add_debt(ledger, "D2", "bank", "500.00", "8", created_at=BASE_TIME)
    ledger = add_claim(ledger, "bank", "D1", "1000.00", 2, created_at=BASE_TIME)
    ledger = add_claim(ledger, "friend", "D1", "150.00", 9, created_at=BASE_TIME)
    return ledger


@pytest.fixture
def test_settings() -> Settings:
    return Settings(ledger_path="ledger-test.json")


@pytest.fixture
def service(sample_ledger: Ledger, test_settings: Settings) -> LedgerService:
    """Service over the sample ledger"""
    return LedgerService(sample_ledger, settings=test_settings)
