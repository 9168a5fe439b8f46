"""Aggregate figures over a set of debts"""

from decimal import Decimal
from typing import Sequence

from debt_pool.domain.models import Debt, DebtorStatistics
from debt_pool.domain.money import ZERO, round2


def calculate_statistics(debts: Sequence[Debt]) -> DebtorStatistics:
    """
    Summarize a debtor's position.

    - total_amount / total_outstanding: sums over all debts
    - open_debts: debts with a balance left
    - average_interest_rate: mean rate of open debts only (0 when none are open)
    - total_paid: every payment ever applied, pool payments included
    """
    open_debts = [d for d in debts if d.is_open]

    if open_debts:
        rate_sum = sum((d.interest_rate for d in open_debts), ZERO)
        average_rate = rate_sum / Decimal(len(open_debts))
    else:
        average_rate = ZERO

    return DebtorStatistics(
        total_amount=round2(sum((d.amount for d in debts), ZERO)),
        total_outstanding=round2(sum((d.outstanding_balance for d in debts), ZERO)),
        open_debts=len(open_debts),
        average_interest_rate=round2(average_rate),
        total_paid=round2(sum((d.total_paid for d in debts), ZERO)),
    )
