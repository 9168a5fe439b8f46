"""Proportional pool allocation across open debts"""

from decimal import Decimal
from typing import List, Mapping, Sequence

from debt_pool.domain.cooperation import DEFAULT_COOPERATION_SCORE, cooperation_score_for
from debt_pool.domain.exceptions import InvalidAmountError
from debt_pool.domain.models import AllocationLine, Debt
from debt_pool.domain.money import ZERO, Number, round2
from debt_pool.domain.weighting import calculate_weight


def allocate_pool(
    debts: Sequence[Debt],
    cooperation_scores: Mapping[str, float],
    pool_amount: Number,
    default_score: float = DEFAULT_COOPERATION_SCORE,
) -> List[AllocationLine]:
    """
    Split a pool across open debts in proportion to their weights.

    Requirements:
    - Only debts with an outstanding balance take part
    - Each share is rounded half-up to cents, then capped at the debt's balance
    - The rounding/capping remainder is reconciled so the total matches the pool
      whenever the debts can absorb it, and never exceeds it
    - Lines that end up at 0.00 are dropped

    Returns an empty list when no debt is open or the total weight is zero.
    Lines keep the input order of the open debts. Nothing is mutated.

    Example:
        Two equal debts of 100.00, pool 100.00 -> [50.00, 50.00]
        One debt of 40.00 at 5%, pool 1000.00  -> [40.00]
    """
    pool = round2(pool_amount)
    if pool <= 0:
        raise InvalidAmountError(f"Pool amount must be positive, got {pool_amount!r}")

    open_debts = [d for d in debts if d.outstanding_balance > 0]
    if not open_debts:
        return []

    weights = [
        calculate_weight(debt, cooperation_score_for(cooperation_scores, debt.creditor_id, default_score))
        for debt in open_debts
    ]
    # Weights enter decimal arithmetic by their repr so equal weights split exactly
    decimal_weights = [Decimal(repr(weight)) for weight in weights]
    total_weight = sum(decimal_weights, Decimal(0))
    if total_weight == 0:
        return []

    shares: List[Decimal] = []
    for debt, weight in zip(open_debts, decimal_weights):
        tentative = round2(pool * weight / total_weight)
        shares.append(min(tentative, debt.outstanding_balance))

    remainder = round2(pool - sum(shares, ZERO))
    if remainder != 0:
        ceilings = [debt.outstanding_balance for debt in open_debts]
        shares = _reconcile(shares, ceilings, remainder)

    return [
        AllocationLine(
            debt_id=debt.id,
            debtor_id=debt.debtor_id,
            creditor_id=debt.creditor_id,
            amount=share,
            weight=weight,
        )
        for debt, weight, share in zip(open_debts, weights, shares)
        if share > 0
    ]


def _reconcile(shares: List[Decimal], ceilings: List[Decimal], remainder: Decimal) -> List[Decimal]:
    """
    Settle a rounding remainder against the largest shares.

    A positive remainder goes to the largest share first (earliest on ties), up to
    that debt's balance, spilling into the next-largest share when it is full.
    A negative remainder is taken back in the same order, never below zero.
    """
    result = list(shares)
    order = sorted(range(len(result)), key=lambda i: (-result[i], i))

    if remainder > 0:
        for i in order:
            if remainder <= 0:
                break
            take = min(ceilings[i] - result[i], remainder)
            if take > 0:
                result[i] = round2(result[i] + take)
                remainder -= take
    else:
        excess = -remainder
        for i in order:
            if excess <= 0:
                break
            take = min(result[i], excess)
            result[i] = round2(result[i] - take)
            excess -= take

    return result
