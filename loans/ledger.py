"""
Loan ledger arithmetic.

Simple (non-compounding) interest over the full term, a fixed monthly
installment, and balances folded from the payment history. Amounts are
plain floats and are never rounded here; display precision is the
caller's concern.
"""
import math
from typing import Iterable, NamedTuple

from .exceptions import InvalidInput, InvalidState


class Schedule(NamedTuple):
    total_payable: float
    monthly_installment: float


class Balance(NamedTuple):
    amount_paid: float
    balance: float
    installments_remaining: int
    is_paid_off: bool


def calculate_total_interest(principal: float, yearly_rate_percent: float, term_years: int) -> float:
    """
    Simple interest over the whole term:
    interest = principal * years * (rate / 100)
    """
    return principal * term_years * (yearly_rate_percent / 100)


def compute_schedule(principal: float, yearly_rate_percent: float, term_years: int) -> Schedule:
    """
    Derive the total payable and the monthly installment (EMI) for a loan.

    total_payable = principal + interest
    monthly_installment = total_payable / (years * 12)
    """
    if principal <= 0:
        raise InvalidInput("Principal must be greater than zero.")
    if term_years <= 0:
        raise InvalidInput("Loan period must be at least one year.")
    if yearly_rate_percent < 0:
        raise InvalidInput("Interest rate cannot be negative.")

    total_interest = calculate_total_interest(principal, yearly_rate_percent, term_years)
    total_payable = principal + total_interest
    monthly_installment = total_payable / (term_years * 12)
    return Schedule(total_payable, monthly_installment)


def compute_balance(total_payable: float, monthly_installment: float, payments: Iterable[float]) -> Balance:
    """
    Fold a payment history into the ledger state of a loan.

    The balance is signed: a negative value means the loan was overpaid.
    Installments remaining are counted against the balance clamped at zero.
    """
    if monthly_installment <= 0:
        raise InvalidState(f"Monthly installment must be positive, got {monthly_installment}.")

    amount_paid = sum(payments, 0.0)
    balance = total_payable - amount_paid
    installments_remaining = math.ceil(max(0.0, balance) / monthly_installment)
    return Balance(amount_paid, balance, installments_remaining, balance <= 0)
