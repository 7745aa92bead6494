from django.urls import path

from .views import (
    CreateLoanView,
    CustomerDetailView,
    CustomerListView,
    CustomerOverviewView,
    LoanLedgerView,
    RecordPaymentView,
)

urlpatterns = [
    path('customers', CustomerListView.as_view(), name='customer-list'),
    path('customers/<str:customer_id>', CustomerDetailView.as_view(), name='customer-detail'),
    path('customers/<str:customer_id>/overview', CustomerOverviewView.as_view(), name='customer-overview'),
    path('loans', CreateLoanView.as_view(), name='loan-create'),
    path('loans/<str:loan_id>/payments', RecordPaymentView.as_view(), name='loan-payments'),
    path('loans/<str:loan_id>/ledger', LoanLedgerView.as_view(), name='loan-ledger'),
]
