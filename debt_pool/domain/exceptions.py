"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidAmountError(DomainException):
    """Monetary input is non-positive, negative where not allowed, or not a number"""

    pass


class ExceedsBalanceError(InvalidAmountError):
    """Payment amount is larger than the debt's outstanding balance"""

    pass


class NotFoundError(DomainException):
    """Referenced debt or claim does not exist in the ledger"""

    pass


class InvalidRecordError(DomainException):
    """Intake record is incomplete (blank identifiers, score out of range)"""

    pass


class InvalidDocumentError(DomainException):
    """Imported ledger document is malformed or misses required collections"""

    pass


class DegenerateAllocationError(DomainException):
    """Pool allocation produced no lines - nothing to distribute"""

    pass
