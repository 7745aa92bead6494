"""
Core business logic for the loan ledger.

Every function here takes loosely-typed values (request fields, spreadsheet
cells), coerces and validates them, and raises one of the errors from
``loans.exceptions``. Writes run inside ``transaction.atomic`` so a failed
request leaves the store unchanged.
"""
import logging
import math
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.utils import timezone

from .exceptions import Conflict, InvalidInput, NotFound
from .ledger import compute_balance, compute_schedule
from .models import Customer, Loan, LoanStatus, Payment, PaymentType

logger = logging.getLogger(__name__)

CUSTOMER_ID_MAX_LENGTH = Customer._meta.get_field('customer_id').max_length
CUSTOMER_NAME_MAX_LENGTH = Customer._meta.get_field('name').max_length


@dataclass
class PaymentResult:
    payment_id: uuid.UUID
    loan_id: uuid.UUID
    remaining_balance: float
    installments_remaining: int
    loan_status: str


@dataclass
class LoanLedger:
    loan: Loan
    amount_paid: float
    balance_amount: float
    installments_remaining: int
    transactions: List[Payment] = field(default_factory=list)


@dataclass
class LoanSummary:
    loan_id: uuid.UUID
    principal: float
    total_amount: float
    total_interest: float
    emi_amount: float
    amount_paid: float
    installments_remaining: int
    status: str


@dataclass
class CustomerOverview:
    customer_id: str
    total_loans: int
    loans: List[LoanSummary] = field(default_factory=list)


def _coerce_number(value, field_name: str) -> float:
    """Turn a request or spreadsheet value into a finite float."""
    if value is None or isinstance(value, bool):
        raise InvalidInput(f"{field_name} is required and must be numeric.")
    if isinstance(value, str):
        value = value.strip()
        if not value:
            raise InvalidInput(f"{field_name} is required and must be numeric.")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidInput(f"{field_name} must be numeric, got {value!r}.")
    if not math.isfinite(number):
        raise InvalidInput(f"{field_name} must be a finite number.")
    return number


def _coerce_whole_number(value, field_name: str) -> int:
    number = _coerce_number(value, field_name)
    if not number.is_integer():
        raise InvalidInput(f"{field_name} must be a whole number, got {value!r}.")
    return int(number)


def _coerce_text(value, field_name: str, max_length: Optional[int] = None) -> str:
    if value is None or not str(value).strip():
        raise InvalidInput(f"{field_name} is required.")
    text = str(value).strip()
    if max_length is not None and len(text) > max_length:
        raise InvalidInput(f"{field_name} must be at most {max_length} characters.")
    return text


def _get_customer(customer_id) -> Customer:
    try:
        return Customer.objects.get(customer_id=customer_id)
    except Customer.DoesNotExist:
        raise NotFound(f"Customer with id {customer_id} not found.")


def _get_loan(loan_id, queryset=None) -> Loan:
    if queryset is None:
        queryset = Loan.objects.all()
    try:
        return queryset.get(loan_id=loan_id)
    except (Loan.DoesNotExist, ValidationError, ValueError):
        raise NotFound(f"Loan with id {loan_id} not found.")


def create_customer(customer_id, name) -> Customer:
    """
    Register a customer under a caller-supplied identifier.
    Existing identifiers are never overwritten.
    """
    customer_id = _coerce_text(customer_id, 'customer_id', CUSTOMER_ID_MAX_LENGTH)
    name = _coerce_text(name, 'name', CUSTOMER_NAME_MAX_LENGTH)

    if Customer.objects.filter(customer_id=customer_id).exists():
        raise Conflict(f"Customer with id {customer_id} already exists.")
    try:
        with transaction.atomic():
            customer = Customer.objects.create(customer_id=customer_id, name=name)
    except IntegrityError:
        raise Conflict(f"Customer with id {customer_id} already exists.")

    logger.info(f"Created customer {customer_id}")
    return customer


def list_customers():
    return list(Customer.objects.all())


def get_customer(customer_id) -> Customer:
    return _get_customer(customer_id)


def create_loan(customer_id, principal, term_years, yearly_rate_percent) -> Loan:
    """
    Issue a loan to an existing customer.

    The total payable and monthly EMI are derived once here and stored;
    they are never recomputed afterwards.
    """
    principal = _coerce_number(principal, 'loan_amount')
    term_years = _coerce_whole_number(term_years, 'loan_period_years')
    customer_id = _coerce_text(customer_id, 'customer_id', CUSTOMER_ID_MAX_LENGTH)
    yearly_rate_percent = _coerce_number(yearly_rate_percent, 'interest_rate_yearly')

    customer = _get_customer(customer_id)
    schedule = compute_schedule(principal, yearly_rate_percent, term_years)

    loan = Loan.objects.create(
        customer=customer,
        principal_amount=principal,
        total_amount=schedule.total_payable,
        interest_rate=yearly_rate_percent,
        loan_period_years=term_years,
        monthly_emi=schedule.monthly_installment,
        status=LoanStatus.ACTIVE,
    )
    logger.info(
        f"Created loan {loan.loan_id} for customer {customer.customer_id}: "
        f"total={schedule.total_payable} emi={schedule.monthly_installment}"
    )
    return loan


def record_payment(loan_id, amount, payment_type, payment_date: Optional[datetime] = None) -> PaymentResult:
    """
    Append a payment to a loan and return the recomputed ledger position.

    The loan row is locked for the whole transaction, so concurrent payments
    against the same loan are applied one after the other and the PAID_OFF
    decision always sees every prior payment. Any amount is accepted under
    either payment type; it is not checked against the EMI.
    """
    amount = _coerce_number(amount, 'amount')
    if amount <= 0:
        raise InvalidInput("Payment amount must be greater than zero.")
    if payment_type not in PaymentType.values:
        raise InvalidInput(
            f"Payment type must be one of {', '.join(PaymentType.values)}, got {payment_type!r}."
        )

    with transaction.atomic():
        loan = _get_loan(loan_id, Loan.objects.select_for_update())

        payment = Payment.objects.create(
            loan=loan,
            amount=amount,
            payment_type=payment_type,
            payment_date=payment_date or timezone.now(),
        )

        amounts = Payment.objects.filter(loan=loan).values_list('amount', flat=True)
        balance = compute_balance(loan.total_amount, loan.monthly_emi, amounts)

        if balance.is_paid_off and loan.status != LoanStatus.PAID_OFF:
            Loan.objects.filter(pk=loan.pk, status=LoanStatus.ACTIVE).update(status=LoanStatus.PAID_OFF)
            loan.status = LoanStatus.PAID_OFF
            logger.info(f"Loan {loan.loan_id} paid off (balance {balance.balance})")

    logger.info(
        f"Recorded {payment_type} payment {payment.payment_id} of {amount} on loan {loan.loan_id}"
    )
    return PaymentResult(
        payment_id=payment.payment_id,
        loan_id=loan.loan_id,
        remaining_balance=balance.balance,
        installments_remaining=balance.installments_remaining,
        loan_status=loan.status,
    )


def get_ledger(loan_id) -> LoanLedger:
    """
    Loan details with every payment, oldest first, and the derived balance.
    """
    loan = _get_loan(loan_id, Loan.objects.select_related('customer'))
    payments = list(loan.payments.order_by('payment_date', 'id'))
    balance = compute_balance(loan.total_amount, loan.monthly_emi, (p.amount for p in payments))

    return LoanLedger(
        loan=loan,
        amount_paid=balance.amount_paid,
        balance_amount=balance.balance,
        installments_remaining=balance.installments_remaining,
        transactions=payments,
    )


def get_customer_overview(customer_id) -> CustomerOverview:
    """
    Summaries of every loan held by a customer, in creation order.
    """
    customer = _get_customer(customer_id)
    loans = Loan.objects.filter(customer=customer).order_by('id').prefetch_related('payments')

    summaries = []
    for loan in loans:
        balance = compute_balance(
            loan.total_amount, loan.monthly_emi, (p.amount for p in loan.payments.all())
        )
        summaries.append(LoanSummary(
            loan_id=loan.loan_id,
            principal=loan.principal_amount,
            total_amount=loan.total_amount,
            total_interest=loan.total_interest,
            emi_amount=loan.monthly_emi,
            amount_paid=balance.amount_paid,
            installments_remaining=balance.installments_remaining,
            status=loan.status,
        ))

    return CustomerOverview(
        customer_id=customer.customer_id,
        total_loans=len(summaries),
        loans=summaries,
    )


def reconcile_loan_statuses() -> int:
    """
    Close ACTIVE loans whose payments already cover the total payable.
    Returns the number of loans moved to PAID_OFF.
    """
    closed = 0
    active = Loan.objects.filter(status=LoanStatus.ACTIVE).prefetch_related('payments')
    for loan in active:
        balance = compute_balance(
            loan.total_amount, loan.monthly_emi, (p.amount for p in loan.payments.all())
        )
        if balance.is_paid_off:
            closed += Loan.objects.filter(
                pk=loan.pk, status=LoanStatus.ACTIVE
            ).update(status=LoanStatus.PAID_OFF)
            logger.info(f"Reconciled loan {loan.loan_id} to PAID_OFF")
    return closed
