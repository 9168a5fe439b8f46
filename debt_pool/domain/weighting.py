"""Priority weight of a single debt for pool allocation"""

from debt_pool.domain.models import Debt


def calculate_weight(debt: Debt, cooperation_score: float) -> float:
    """
    Calculate the pool weight of an open debt.

    Formula:
        weight = interest_rate^2 + 1 / outstanding_balance + cooperation_score^1.5

    Terms:
    - interest_rate^2: high-rate debt dominates
    - 1 / outstanding_balance: debts close to payoff get a boost
    - cooperation_score^1.5: cooperative creditors get a sub-linear bonus

    Settled debts (balance <= 0) always weigh exactly 0.0.
    """
    if debt.outstanding_balance <= 0:
        return 0.0

    interest_weight = float(debt.interest_rate) ** 2
    balance_weight = 1 / float(debt.outstanding_balance)
    cooperation_weight = float(cooperation_score) ** 1.5

    return interest_weight + balance_weight + cooperation_weight
