from rest_framework import serializers

from .models import Customer, PaymentType


class AmountField(serializers.FloatField):
    """FloatField that refuses JSON booleans instead of reading them as 1.0 or 0.0."""

    def to_internal_value(self, data):
        if isinstance(data, bool):
            self.fail('invalid')
        return super().to_internal_value(data)


class CustomerSerializer(serializers.ModelSerializer):
    class Meta:
        model = Customer
        fields = ['customer_id', 'name', 'created_at']


class CreateCustomerRequestSerializer(serializers.Serializer):
    customer_id = serializers.CharField(max_length=64)
    name = serializers.CharField(max_length=200)


class CreateLoanRequestSerializer(serializers.Serializer):
    customer_id = serializers.CharField(max_length=64)
    loan_amount = AmountField()
    loan_period_years = serializers.IntegerField()
    interest_rate_yearly = AmountField()


class CreateLoanResponseSerializer(serializers.Serializer):
    loan_id = serializers.UUIDField()
    customer_id = serializers.CharField()
    total_amount_payable = serializers.FloatField(source='total_amount')
    monthly_emi = serializers.FloatField()


class RecordPaymentRequestSerializer(serializers.Serializer):
    amount = AmountField()
    payment_type = serializers.ChoiceField(choices=PaymentType.choices)
    payment_date = serializers.DateTimeField(required=False)


class PaymentResultSerializer(serializers.Serializer):
    payment_id = serializers.UUIDField()
    loan_id = serializers.UUIDField()
    remaining_balance = serializers.FloatField()
    emis_left = serializers.IntegerField(source='installments_remaining')
    status = serializers.CharField(source='loan_status')

    def to_representation(self, instance):
        data = super().to_representation(instance)
        data['message'] = 'Payment recorded successfully'
        return data


class TransactionSerializer(serializers.Serializer):
    transaction_id = serializers.UUIDField(source='payment_id')
    date = serializers.DateTimeField(source='payment_date')
    amount = serializers.FloatField()
    type = serializers.CharField(source='payment_type')


class LoanLedgerSerializer(serializers.Serializer):
    loan_id = serializers.UUIDField(source='loan.loan_id')
    customer_id = serializers.CharField(source='loan.customer_id')
    principal = serializers.FloatField(source='loan.principal_amount')
    total_amount = serializers.FloatField(source='loan.total_amount')
    interest_rate = serializers.FloatField(source='loan.interest_rate')
    loan_period_years = serializers.IntegerField(source='loan.loan_period_years')
    monthly_emi = serializers.FloatField(source='loan.monthly_emi')
    status = serializers.CharField(source='loan.status')
    created_at = serializers.DateTimeField(source='loan.created_at')
    amount_paid = serializers.FloatField()
    balance_amount = serializers.FloatField()
    emis_left = serializers.IntegerField(source='installments_remaining')
    transactions = TransactionSerializer(many=True)


class LoanSummarySerializer(serializers.Serializer):
    loan_id = serializers.UUIDField()
    principal = serializers.FloatField()
    total_amount = serializers.FloatField()
    total_interest = serializers.FloatField()
    emi_amount = serializers.FloatField()
    amount_paid = serializers.FloatField()
    emis_left = serializers.IntegerField(source='installments_remaining')
    status = serializers.CharField()


class CustomerOverviewSerializer(serializers.Serializer):
    customer_id = serializers.CharField()
    total_loans = serializers.IntegerField()
    loans = LoanSummarySerializer(many=True)
