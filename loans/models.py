import uuid

from django.db import models
from django.utils import timezone


class Customer(models.Model):
    customer_id = models.CharField(max_length=64, primary_key=True)
    name = models.CharField(max_length=200)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'customers'
        ordering = ['created_at', 'customer_id']

    def __str__(self):
        return f"{self.customer_id} - {self.name}"


class LoanStatus(models.TextChoices):
    ACTIVE = 'ACTIVE', 'Active'
    PAID_OFF = 'PAID_OFF', 'Paid off'


class Loan(models.Model):
    loan_id = models.UUIDField(default=uuid.uuid4, unique=True, editable=False)
    customer = models.ForeignKey(Customer, on_delete=models.PROTECT, related_name='loans')
    principal_amount = models.FloatField()
    total_amount = models.FloatField()
    interest_rate = models.FloatField(help_text="Yearly interest rate in percent")
    loan_period_years = models.PositiveIntegerField()
    monthly_emi = models.FloatField()
    status = models.CharField(max_length=10, choices=LoanStatus.choices, default=LoanStatus.ACTIVE)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'loans'
        ordering = ['id']

    def __str__(self):
        return f"Loan {self.loan_id} - Customer {self.customer_id}"

    @property
    def total_interest(self):
        return self.total_amount - self.principal_amount


class PaymentType(models.TextChoices):
    EMI = 'EMI', 'EMI'
    LUMP_SUM = 'LUMP_SUM', 'Lump sum'


class Payment(models.Model):
    payment_id = models.UUIDField(default=uuid.uuid4, unique=True, editable=False)
    loan = models.ForeignKey(Loan, on_delete=models.PROTECT, related_name='payments')
    amount = models.FloatField()
    payment_type = models.CharField(max_length=10, choices=PaymentType.choices)
    payment_date = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'payments'
        # Payments recorded at the same instant keep insertion order.
        ordering = ['payment_date', 'id']

    def __str__(self):
        return f"Payment {self.payment_id} of {self.amount} on Loan {self.loan.loan_id}"
