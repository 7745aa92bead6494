from django.contrib import admin

from .models import Customer, Loan, Payment


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ('customer_id', 'name', 'created_at')
    search_fields = ('customer_id', 'name')


class PaymentInline(admin.TabularInline):
    model = Payment
    extra = 0
    readonly_fields = ('payment_id', 'amount', 'payment_type', 'payment_date')
    can_delete = False


@admin.register(Loan)
class LoanAdmin(admin.ModelAdmin):
    list_display = ('loan_id', 'customer', 'principal_amount', 'total_amount', 'monthly_emi', 'status')
    list_filter = ('status',)
    readonly_fields = ('loan_id', 'total_amount', 'monthly_emi', 'created_at')
    inlines = [PaymentInline]


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ('payment_id', 'loan', 'amount', 'payment_type', 'payment_date')
    list_filter = ('payment_type',)
