"""Domain models - immutable dataclasses representing ledger records"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional, Tuple

SCHEMA_VERSION = "1.0.0"


@dataclass(frozen=True)
class Payment:
    """Money paid towards a single debt"""

    id: str
    payer_name: str
    amount: Decimal
    paid_at: datetime
    note: Optional[str] = None


@dataclass(frozen=True)
class Debt:
    """Amount a debtor owes a creditor, reduced by applied payments"""

    id: str
    debtor_id: str
    creditor_id: str
    amount: Decimal  # original amount
    outstanding_balance: Decimal
    interest_rate: Decimal  # percent per year
    note: str
    created_at: datetime
    payments: Tuple[Payment, ...] = ()

    @property
    def is_open(self) -> bool:
        return self.outstanding_balance > 0

    @property
    def total_paid(self) -> Decimal:
        return sum((p.amount for p in self.payments), Decimal("0.00"))


@dataclass(frozen=True)
class Claim:
    """Creditor's side of a debt, carrying the cooperation score"""

    id: str
    creditor_id: str
    debtor_id: str
    amount: Decimal
    note: str
    cooperation_score: int  # 0-10
    created_at: datetime


@dataclass(frozen=True)
class AllocationLine:
    """Share of a pool assigned to one debt"""

    debt_id: str
    debtor_id: str
    creditor_id: str
    amount: Decimal
    weight: float


@dataclass(frozen=True)
class PoolDistribution:
    """Historical record of one committed pool distribution"""

    id: str
    distributed_at: datetime
    total_amount: Decimal
    lines: Tuple[AllocationLine, ...] = ()


@dataclass(frozen=True)
class Ledger:
    """Complete snapshot of debts, claims and pool history"""

    debts: Tuple[Debt, ...] = ()
    claims: Tuple[Claim, ...] = ()
    pool_history: Tuple[PoolDistribution, ...] = ()
    schema_version: str = field(default=SCHEMA_VERSION)

    def find_debt(self, debt_id: str) -> Optional[Debt]:
        for debt in self.debts:
            if debt.id == debt_id:
                return debt
        return None


@dataclass(frozen=True)
class DebtorStatistics:
    """Aggregate figures over a debtor's debts"""

    total_amount: Decimal
    total_outstanding: Decimal
    open_debts: int
    average_interest_rate: Decimal
    total_paid: Decimal
