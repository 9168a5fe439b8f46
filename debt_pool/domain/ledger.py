"""Ledger mutations - every function returns a new Ledger and leaves its input untouched"""

from dataclasses import replace
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional, Sequence

from debt_pool.domain.cooperation import (
    DEFAULT_COOPERATION_SCORE,
    MAX_COOPERATION_SCORE,
    MIN_COOPERATION_SCORE,
)
from debt_pool.domain.exceptions import (
    ExceedsBalanceError,
    InvalidAmountError,
    InvalidRecordError,
    NotFoundError,
)
from debt_pool.domain.models import (
    SCHEMA_VERSION,
    AllocationLine,
    Claim,
    Debt,
    Ledger,
    Payment,
    PoolDistribution,
)
from debt_pool.domain.money import ZERO, Number, round2
from debt_pool.utils.date_utils import ensure_utc, generate_id, utc_now

POOL_PAYER_NAME = "Pool distribution"


def _required_text(value: str, label: str) -> str:
    text = (value or "").strip()
    if not text:
        raise InvalidRecordError(f"{label} must not be empty")
    return text


def _positive_amount(value: Number, label: str = "Amount") -> Decimal:
    amount = round2(value)
    if amount <= 0:
        raise InvalidAmountError(f"{label} must be positive, got {value!r}")
    return amount


def _timestamp(value: Optional[datetime]) -> datetime:
    return utc_now() if value is None else ensure_utc(value)


def _floor_balance(balance: Decimal, amount: Decimal) -> Decimal:
    return max(ZERO, round2(balance - amount))


def add_debt(
    ledger: Ledger,
    debtor_id: str,
    creditor_id: str,
    amount: Number,
    interest_rate: Number,
    note: str = "",
    *,
    created_at: Optional[datetime] = None,
) -> Ledger:
    """
    Record a new debt with its full amount outstanding.

    Amount and interest rate are rounded half-up to 2 decimals.

    Raises:
        InvalidRecordError: blank debtor or creditor id
        InvalidAmountError: amount <= 0, interest rate < 0 or non-numeric input
    """
    debtor = _required_text(debtor_id, "Debtor id")
    creditor = _required_text(creditor_id, "Creditor id")
    principal = _positive_amount(amount)

    rate = round2(interest_rate)
    if rate < 0:
        raise InvalidAmountError(f"Interest rate must not be negative, got {interest_rate!r}")

    debt = Debt(
        id=generate_id(),
        debtor_id=debtor,
        creditor_id=creditor,
        amount=principal,
        outstanding_balance=principal,
        interest_rate=rate,
        note=(note or "").strip(),
        created_at=_timestamp(created_at),
    )
    return replace(ledger, debts=ledger.debts + (debt,))


def add_claim(
    ledger: Ledger,
    creditor_id: str,
    debtor_id: str,
    amount: Number,
    cooperation_score: int = DEFAULT_COOPERATION_SCORE,
    note: str = "",
    *,
    created_at: Optional[datetime] = None,
) -> Ledger:
    """
    Record a creditor's claim against a debtor.

    Raises:
        InvalidRecordError: blank ids or a score outside 0-10
        InvalidAmountError: amount <= 0 or non-numeric
    """
    creditor = _required_text(creditor_id, "Creditor id")
    debtor = _required_text(debtor_id, "Debtor id")
    claimed = _positive_amount(amount)

    if isinstance(cooperation_score, bool) or not isinstance(cooperation_score, int):
        raise InvalidRecordError(f"Cooperation score must be an integer, got {cooperation_score!r}")
    if not MIN_COOPERATION_SCORE <= cooperation_score <= MAX_COOPERATION_SCORE:
        raise InvalidRecordError(
            f"Cooperation score must be between {MIN_COOPERATION_SCORE} and "
            f"{MAX_COOPERATION_SCORE}, got {cooperation_score}"
        )

    claim = Claim(
        id=generate_id(),
        creditor_id=creditor,
        debtor_id=debtor,
        amount=claimed,
        note=(note or "").strip(),
        cooperation_score=cooperation_score,
        created_at=_timestamp(created_at),
    )
    return replace(ledger, claims=ledger.claims + (claim,))


def check_payment(debt: Debt, amount: Number) -> Decimal:
    """
    Strict pre-check for interactive intake.

    Returns the rounded amount when it can be applied without overpaying.

    Raises:
        InvalidAmountError: amount <= 0 or non-numeric
        ExceedsBalanceError: amount is larger than the outstanding balance
    """
    payment = _positive_amount(amount)
    if payment > debt.outstanding_balance:
        raise ExceedsBalanceError(
            f"Amount {payment} exceeds outstanding balance {debt.outstanding_balance} of debt {debt.id}"
        )
    return payment


def apply_payment(
    ledger: Ledger,
    debt_id: str,
    amount: Number,
    payer_name: str,
    note: Optional[str] = None,
    *,
    paid_at: Optional[datetime] = None,
) -> Ledger:
    """
    Apply a payment to a debt.

    The payment is recorded with the submitted amount; the balance is reduced by
    it and floored at 0, so an overpayment settles the debt instead of failing.
    Use check_payment() beforehand to reject overpayments.

    Raises:
        NotFoundError: no debt with debt_id
        InvalidAmountError: amount <= 0 or non-numeric
        InvalidRecordError: blank payer name
    """
    debt = ledger.find_debt(debt_id)
    if debt is None:
        raise NotFoundError(f"Debt {debt_id} not found")

    payment_amount = _positive_amount(amount)
    payer = _required_text(payer_name, "Payer name")

    payment = Payment(
        id=generate_id(),
        payer_name=payer,
        amount=payment_amount,
        paid_at=_timestamp(paid_at),
        note=note.strip() if note else None,
    )
    updated = replace(
        debt,
        outstanding_balance=_floor_balance(debt.outstanding_balance, payment_amount),
        payments=debt.payments + (payment,),
    )
    return replace(
        ledger,
        debts=tuple(updated if d.id == debt_id else d for d in ledger.debts),
    )


def apply_pool_distribution(
    ledger: Ledger,
    lines: Sequence[AllocationLine],
    total_amount: Number,
    *,
    payer_name: str = POOL_PAYER_NAME,
    distributed_at: Optional[datetime] = None,
) -> Ledger:
    """
    Commit a pool allocation to the ledger.

    Flow:
    1. For each line, find the debt; skip it when the debt is gone, already settled,
       or the line amount is not positive (the preview may be stale)
    2. Reduce the balance by the line amount, floored at 0
    3. Append a payment from the pool payer noting the weight used
    4. Append one PoolDistribution with the lines and total as submitted

    Raises:
        InvalidAmountError: total_amount <= 0 or non-numeric
    """
    total = _positive_amount(total_amount, "Pool amount")
    timestamp = _timestamp(distributed_at)

    current: Dict[str, Debt] = {d.id: d for d in ledger.debts}
    for line in lines:
        debt = current.get(line.debt_id)
        if debt is None or not debt.is_open or line.amount <= 0:
            continue

        payment = Payment(
            id=generate_id(),
            payer_name=payer_name,
            amount=round2(line.amount),
            paid_at=timestamp,
            note=f"Automatic pool distribution (weight: {line.weight:.2f})",
        )
        current[debt.id] = replace(
            debt,
            outstanding_balance=_floor_balance(debt.outstanding_balance, payment.amount),
            payments=debt.payments + (payment,),
        )

    distribution = PoolDistribution(
        id=generate_id(),
        distributed_at=timestamp,
        total_amount=total,
        lines=tuple(lines),
    )
    return replace(
        ledger,
        debts=tuple(current[d.id] for d in ledger.debts),
        pool_history=ledger.pool_history + (distribution,),
    )


def clear_ledger(schema_version: str = SCHEMA_VERSION) -> Ledger:
    """Empty ledger - the only way history is removed"""
    return Ledger(schema_version=schema_version)


def debts_for_debtor(ledger: Ledger, debtor_id: str) -> List[Debt]:
    """Debts of one debtor, matching the id case-insensitively"""
    wanted = (debtor_id or "").strip().lower()
    if not wanted:
        return []
    return [d for d in ledger.debts if d.debtor_id.strip().lower() == wanted]


def open_debts(ledger: Ledger) -> List[Debt]:
    return [d for d in ledger.debts if d.is_open]


def pool_history_newest_first(ledger: Ledger) -> List[PoolDistribution]:
    return sorted(ledger.pool_history, key=lambda h: h.distributed_at, reverse=True)
