"""Ledger service - the in-process entry point for intake, payments and pool distribution"""

import logging
from contextlib import contextmanager
from decimal import Decimal
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Sequence, Union

from debt_pool.config import Settings, settings as default_settings
from debt_pool.domain.allocation import allocate_pool
from debt_pool.domain.cooperation import DEFAULT_COOPERATION_SCORE, build_cooperation_scores
from debt_pool.domain.exceptions import DegenerateAllocationError, DomainException, NotFoundError
from debt_pool.domain.ledger import (
    add_claim,
    add_debt,
    apply_payment,
    apply_pool_distribution,
    check_payment,
    clear_ledger,
    debts_for_debtor,
    pool_history_newest_first,
)
from debt_pool.domain.models import (
    AllocationLine,
    Claim,
    Debt,
    DebtorStatistics,
    Ledger,
    PoolDistribution,
)
from debt_pool.domain.money import ZERO, Number
from debt_pool.domain.prioritization import prioritize_debts
from debt_pool.domain.statistics import calculate_statistics
from debt_pool.infrastructure.observability.logging import log_payment, log_pool_distribution
from debt_pool.infrastructure.observability.metrics import (
    record_payment,
    record_pool_distribution,
    record_rejection,
)
from debt_pool.infrastructure.storage.document import (
    export_ledger,
    import_ledger,
    read_ledger,
    write_ledger,
)

logger = logging.getLogger(__name__)


class LedgerService:
    """
    Holds the current ledger and runs every operation as load -> transform -> replace.

    The held ledger is swapped only after an operation succeeds, so a rejected
    payment, distribution or import leaves it exactly as it was.
    """

    def __init__(self, ledger: Optional[Ledger] = None, *, settings: Optional[Settings] = None):
        self.settings = settings or default_settings
        self._ledger = ledger if ledger is not None else clear_ledger(self.settings.schema_version)

    @property
    def ledger(self) -> Ledger:
        return self._ledger

    @contextmanager
    def _operation(self, name: str) -> Iterator[None]:
        try:
            yield
        except DomainException as e:
            record_rejection(name, e)
            logger.warning(f"{name} rejected: {e}", extra={"operation": name, "reason": type(e).__name__})
            raise

    # Intake

    def record_debt(
        self,
        debtor_id: str,
        creditor_id: str,
        amount: Number,
        interest_rate: Number,
        note: str = "",
    ) -> Debt:
        with self._operation("record_debt"):
            self._ledger = add_debt(self._ledger, debtor_id, creditor_id, amount, interest_rate, note)
        debt = self._ledger.debts[-1]
        logger.info("Debt recorded", extra={"debt_id": debt.id, "debtor_id": debt.debtor_id})
        return debt

    def record_claim(
        self,
        creditor_id: str,
        debtor_id: str,
        amount: Number,
        cooperation_score: int = DEFAULT_COOPERATION_SCORE,
        note: str = "",
    ) -> Claim:
        with self._operation("record_claim"):
            self._ledger = add_claim(self._ledger, creditor_id, debtor_id, amount, cooperation_score, note)
        claim = self._ledger.claims[-1]
        logger.info("Claim recorded", extra={"claim_id": claim.id, "creditor_id": claim.creditor_id})
        return claim

    # Payments

    def report_payment(
        self,
        debt_id: str,
        amount: Number,
        payer_name: str,
        note: Optional[str] = None,
        *,
        strict: bool = False,
    ) -> Debt:
        """
        Apply a payment and return the updated debt.

        With strict=True an amount above the outstanding balance is rejected with
        ExceedsBalanceError; otherwise the balance is floored at 0.
        """
        with self._operation("report_payment"):
            debt = self._ledger.find_debt(debt_id)
            if debt is None:
                raise NotFoundError(f"Debt {debt_id} not found")
            if strict:
                check_payment(debt, amount)
            self._ledger = apply_payment(self._ledger, debt_id, amount, payer_name, note)

        updated = self._ledger.find_debt(debt_id)
        payment = updated.payments[-1]
        if payment.amount > debt.outstanding_balance:
            logger.warning(
                "Payment exceeds outstanding balance; balance floored at 0",
                extra={"debt_id": debt_id, "amount": str(payment.amount), "balance": str(debt.outstanding_balance)},
            )
        record_payment(payment.amount)
        log_payment(debt_id, payment.payer_name, payment.amount, updated.outstanding_balance)
        return updated

    # Ordering and statistics

    def cooperation_scores(self) -> Dict[str, int]:
        return build_cooperation_scores(self._ledger.claims)

    def prioritize_for_debtor(self, debtor_id: str) -> List[Debt]:
        """Open debts of a debtor in repayment order"""
        return prioritize_debts(
            debts_for_debtor(self._ledger, debtor_id),
            self.cooperation_scores(),
            self.settings.default_cooperation_score,
        )

    def statistics_for_debtor(self, debtor_id: str) -> DebtorStatistics:
        return calculate_statistics(debts_for_debtor(self._ledger, debtor_id))

    # Pool

    def preview_pool(self, pool_amount: Number) -> List[AllocationLine]:
        """Allocation of a pool across all open debts, without committing it"""
        with self._operation("preview_pool"):
            return allocate_pool(
                self._ledger.debts,
                self.cooperation_scores(),
                pool_amount,
                self.settings.default_cooperation_score,
            )

    def commit_pool(self, lines: Sequence[AllocationLine], total_amount: Number) -> PoolDistribution:
        """Apply a previewed allocation and return the stored history record"""
        before = {d.id: len(d.payments) for d in self._ledger.debts}
        with self._operation("commit_pool"):
            self._ledger = apply_pool_distribution(
                self._ledger,
                lines,
                total_amount,
                payer_name=self.settings.pool_payer_name,
            )

        applied: List[Decimal] = []
        for debt in self._ledger.debts:
            applied.extend(p.amount for p in debt.payments[before.get(debt.id, 0):])

        distribution = self._ledger.pool_history[-1]
        if len(applied) < len(lines):
            logger.warning(
                "Pool lines skipped for missing or settled debts",
                extra={"distribution_id": distribution.id, "skipped": len(lines) - len(applied)},
            )

        record_pool_distribution(len(lines), applied)
        log_pool_distribution(
            distribution.id,
            distribution.total_amount,
            sum(applied, ZERO),
            len(lines),
            len(applied),
        )
        return distribution

    def distribute_pool(self, pool_amount: Number) -> PoolDistribution:
        """
        Preview and commit in one step.

        Raises:
            DegenerateAllocationError: no open debt can take part - nothing to distribute
        """
        lines = self.preview_pool(pool_amount)
        if not lines:
            with self._operation("distribute_pool"):
                raise DegenerateAllocationError("No open debts to distribute the pool to")
        return self.commit_pool(lines, pool_amount)

    def pool_history(self) -> List[PoolDistribution]:
        return pool_history_newest_first(self._ledger)

    # Document exchange

    def export_document(self) -> str:
        return export_ledger(self._ledger)

    def import_document(self, text: Union[str, bytes]) -> Ledger:
        """Replace the whole ledger with an imported document"""
        with self._operation("import_document"):
            ledger = import_ledger(text, schema_version=self.settings.schema_version)
        self._ledger = ledger
        logger.info(
            "Ledger imported",
            extra={"debts": len(ledger.debts), "claims": len(ledger.claims), "pool_history": len(ledger.pool_history)},
        )
        return ledger

    def load(self, path: Optional[Union[str, Path]] = None) -> Ledger:
        with self._operation("load"):
            self._ledger = read_ledger(path or self.settings.ledger_path, schema_version=self.settings.schema_version)
        return self._ledger

    def save(self, path: Optional[Union[str, Path]] = None) -> None:
        write_ledger(self._ledger, path or self.settings.ledger_path)

    def reset(self) -> Ledger:
        """Wipe all debts, claims and pool history"""
        self._ledger = clear_ledger(self.settings.schema_version)
        logger.info("Ledger cleared")
        return self._ledger
