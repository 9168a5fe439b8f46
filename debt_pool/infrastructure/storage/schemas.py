"""Pydantic schemas for the persisted ledger document"""

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any, List, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, PlainSerializer, model_validator
from pydantic.alias_generators import to_camel

from debt_pool.domain.exceptions import InvalidAmountError
from debt_pool.domain.models import (
    SCHEMA_VERSION,
    AllocationLine,
    Claim,
    Debt,
    Ledger,
    Payment,
    PoolDistribution,
)
from debt_pool.domain.money import round2
from debt_pool.utils.date_utils import ensure_utc


def _parse_money(value: Any) -> Decimal:
    try:
        return round2(value)
    except InvalidAmountError as e:
        raise ValueError(str(e)) from e


# Accepts JSON numbers or strings, writes strings so cents survive the round trip
Money = Annotated[
    Decimal,
    BeforeValidator(_parse_money),
    PlainSerializer(lambda v: str(v), return_type=str, when_used="json"),
]


class DocumentModel(BaseModel):
    """Base for document records: camelCase on the wire, snake_case in Python"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class PaymentSchema(DocumentModel):
    id: str = Field(..., min_length=1)
    payer_name: str
    amount: Money = Field(..., gt=0)
    paid_at: datetime
    note: Optional[str] = None

    @classmethod
    def from_domain(cls, payment: Payment) -> "PaymentSchema":
        return cls(
            id=payment.id,
            payer_name=payment.payer_name,
            amount=payment.amount,
            paid_at=payment.paid_at,
            note=payment.note,
        )

    def to_domain(self) -> Payment:
        return Payment(
            id=self.id,
            payer_name=self.payer_name,
            amount=self.amount,
            paid_at=ensure_utc(self.paid_at),
            note=self.note,
        )


class DebtSchema(DocumentModel):
    id: str = Field(..., min_length=1)
    debtor_id: str
    creditor_id: str
    amount: Money = Field(..., gt=0)
    outstanding_balance: Money = Field(..., ge=0)
    interest_rate: Money = Field(..., ge=0)
    note: str = ""
    created_at: datetime
    payments: List[PaymentSchema] = Field(default_factory=list)

    @model_validator(mode="after")
    def balance_matches_payments(self) -> "DebtSchema":
        if self.outstanding_balance > self.amount:
            raise ValueError(
                f"outstandingBalance {self.outstanding_balance} exceeds amount {self.amount} for debt {self.id}"
            )
        paid = sum((p.amount for p in self.payments), Decimal("0.00"))
        expected = max(Decimal("0.00"), round2(self.amount - paid))
        if self.outstanding_balance != expected:
            raise ValueError(
                f"outstandingBalance {self.outstanding_balance} of debt {self.id} does not match "
                f"amount {self.amount} less payments {paid} (expected {expected})"
            )
        return self

    @classmethod
    def from_domain(cls, debt: Debt) -> "DebtSchema":
        return cls(
            id=debt.id,
            debtor_id=debt.debtor_id,
            creditor_id=debt.creditor_id,
            amount=debt.amount,
            outstanding_balance=debt.outstanding_balance,
            interest_rate=debt.interest_rate,
            note=debt.note,
            created_at=debt.created_at,
            payments=[PaymentSchema.from_domain(p) for p in debt.payments],
        )

    def to_domain(self) -> Debt:
        return Debt(
            id=self.id,
            debtor_id=self.debtor_id,
            creditor_id=self.creditor_id,
            amount=self.amount,
            outstanding_balance=self.outstanding_balance,
            interest_rate=self.interest_rate,
            note=self.note,
            created_at=ensure_utc(self.created_at),
            payments=tuple(p.to_domain() for p in self.payments),
        )


class ClaimSchema(DocumentModel):
    id: str = Field(..., min_length=1)
    creditor_id: str
    debtor_id: str
    amount: Money = Field(..., gt=0)
    note: str = ""
    cooperation_score: int = Field(..., ge=0, le=10)
    created_at: datetime

    @classmethod
    def from_domain(cls, claim: Claim) -> "ClaimSchema":
        return cls(
            id=claim.id,
            creditor_id=claim.creditor_id,
            debtor_id=claim.debtor_id,
            amount=claim.amount,
            note=claim.note,
            cooperation_score=claim.cooperation_score,
            created_at=claim.created_at,
        )

    def to_domain(self) -> Claim:
        return Claim(
            id=self.id,
            creditor_id=self.creditor_id,
            debtor_id=self.debtor_id,
            amount=self.amount,
            note=self.note,
            cooperation_score=self.cooperation_score,
            created_at=ensure_utc(self.created_at),
        )


class AllocationLineSchema(DocumentModel):
    debt_id: str
    debtor_id: str
    creditor_id: str
    amount: Money = Field(..., ge=0)
    weight: float = Field(..., ge=0)

    @classmethod
    def from_domain(cls, line: AllocationLine) -> "AllocationLineSchema":
        return cls(
            debt_id=line.debt_id,
            debtor_id=line.debtor_id,
            creditor_id=line.creditor_id,
            amount=line.amount,
            weight=line.weight,
        )

    def to_domain(self) -> AllocationLine:
        return AllocationLine(
            debt_id=self.debt_id,
            debtor_id=self.debtor_id,
            creditor_id=self.creditor_id,
            amount=self.amount,
            weight=self.weight,
        )


class PoolDistributionSchema(DocumentModel):
    id: str = Field(..., min_length=1)
    distributed_at: datetime
    total_amount: Money = Field(..., gt=0)
    lines: List[AllocationLineSchema] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, distribution: PoolDistribution) -> "PoolDistributionSchema":
        return cls(
            id=distribution.id,
            distributed_at=distribution.distributed_at,
            total_amount=distribution.total_amount,
            lines=[AllocationLineSchema.from_domain(line) for line in distribution.lines],
        )

    def to_domain(self) -> PoolDistribution:
        return PoolDistribution(
            id=self.id,
            distributed_at=ensure_utc(self.distributed_at),
            total_amount=self.total_amount,
            lines=tuple(line.to_domain() for line in self.lines),
        )


class LedgerDocument(DocumentModel):
    """Top-level exchange document: {debts, claims, poolHistory, schemaVersion}"""

    debts: List[DebtSchema]
    claims: List[ClaimSchema]
    pool_history: List[PoolDistributionSchema]
    schema_version: str = SCHEMA_VERSION

    @model_validator(mode="after")
    def unique_ids(self) -> "LedgerDocument":
        for label, records in (
            ("debt", self.debts),
            ("claim", self.claims),
            ("pool distribution", self.pool_history),
        ):
            seen = set()
            for record in records:
                if record.id in seen:
                    raise ValueError(f"Duplicate {label} id {record.id!r}")
                seen.add(record.id)
        return self

    @classmethod
    def from_domain(cls, ledger: Ledger) -> "LedgerDocument":
        return cls(
            debts=[DebtSchema.from_domain(d) for d in ledger.debts],
            claims=[ClaimSchema.from_domain(c) for c in ledger.claims],
            pool_history=[PoolDistributionSchema.from_domain(h) for h in ledger.pool_history],
            schema_version=ledger.schema_version,
        )

    def to_domain(self) -> Ledger:
        return Ledger(
            debts=tuple(d.to_domain() for d in self.debts),
            claims=tuple(c.to_domain() for c in self.claims),
            pool_history=tuple(h.to_domain() for h in self.pool_history),
            schema_version=self.schema_version,
        )
