"""Repayment order for a debtor's open debts"""

from functools import cmp_to_key
from typing import List, Mapping, Sequence, Tuple

from debt_pool.domain.cooperation import DEFAULT_COOPERATION_SCORE, cooperation_score_for
from debt_pool.domain.models import Debt


def prioritize_debts(
    debts: Sequence[Debt],
    cooperation_scores: Mapping[str, float],
    default_score: float = DEFAULT_COOPERATION_SCORE,
) -> List[Debt]:
    """
    Order open debts by repayment priority, highest first.

    Rules, each only breaking ties of the previous one:
    1. Interest rate, higher first
    2. Outstanding balance, lower first
    3. Creditor cooperation score (default_score when absent), higher first
    4. Input position, earlier first

    Settled debts are left out. The input sequence is not modified.
    """
    candidates: List[Tuple[int, Debt]] = [
        (position, debt) for position, debt in enumerate(debts) if debt.outstanding_balance > 0
    ]

    def compare(left: Tuple[int, Debt], right: Tuple[int, Debt]) -> int:
        left_pos, a = left
        right_pos, b = right

        if a.interest_rate != b.interest_rate:
            return -1 if a.interest_rate > b.interest_rate else 1

        if a.outstanding_balance != b.outstanding_balance:
            return -1 if a.outstanding_balance < b.outstanding_balance else 1

        score_a = cooperation_score_for(cooperation_scores, a.creditor_id, default_score)
        score_b = cooperation_score_for(cooperation_scores, b.creditor_id, default_score)
        if score_a != score_b:
            return -1 if score_a > score_b else 1

        return left_pos - right_pos

    return [debt for _, debt in sorted(candidates, key=cmp_to_key(compare))]
