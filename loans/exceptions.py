"""
Error taxonomy raised by the ledger and the loan service.
"""


class LedgerError(Exception):
    """Base class for loan ledger errors."""


class InvalidInput(LedgerError):
    """Missing, malformed or out-of-range input. Caller-correctable."""


class NotFound(LedgerError):
    """A referenced customer, loan or payment does not exist."""


class Conflict(LedgerError):
    """An entity with the same identifier already exists."""


class InvalidState(LedgerError):
    """Stored data violates a ledger invariant."""
