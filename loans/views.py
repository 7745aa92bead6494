import logging

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from . import services
from .exceptions import Conflict, InvalidInput, InvalidState, LedgerError, NotFound
from .serializers import (
    CreateCustomerRequestSerializer,
    CreateLoanRequestSerializer,
    CreateLoanResponseSerializer,
    CustomerOverviewSerializer,
    CustomerSerializer,
    LoanLedgerSerializer,
    PaymentResultSerializer,
    RecordPaymentRequestSerializer,
)

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    InvalidInput: status.HTTP_400_BAD_REQUEST,
    NotFound: status.HTTP_404_NOT_FOUND,
    Conflict: status.HTTP_409_CONFLICT,
    InvalidState: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

ERROR_SCHEMA = {
    'type': 'object',
    'properties': {'error': {'type': 'string'}},
}


def error_response(exc: LedgerError) -> Response:
    """Map a ledger error to the JSON error body and its HTTP status."""
    if isinstance(exc, InvalidState):
        logger.error(f"Ledger invariant violated: {exc}")
        return Response(
            {'error': 'Internal ledger error.'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )
    return Response(
        {'error': str(exc)},
        status=ERROR_STATUS.get(type(exc), status.HTTP_400_BAD_REQUEST)
    )


class CustomerListView(APIView):
    """
    GET /api/v1/customers
    POST /api/v1/customers
    """
    @extend_schema(responses={200: CustomerSerializer(many=True)})

    def get(self, request):
        customers = services.list_customers()
        return Response(CustomerSerializer(customers, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        request=CreateCustomerRequestSerializer,
        responses={
            201: {
                'type': 'object',
                'properties': {
                    'customer_id': {'type': 'string'},
                    'name': {'type': 'string'},
                    'message': {'type': 'string'},
                }
            },
            400: OpenApiResponse(response=ERROR_SCHEMA),
            409: OpenApiResponse(response=ERROR_SCHEMA),
        }
    )

    def post(self, request):
        serializer = CreateCustomerRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(
                {'error': serializer.errors},
                status=status.HTTP_400_BAD_REQUEST
            )

        data = serializer.validated_data
        try:
            customer = services.create_customer(data['customer_id'], data['name'])
        except LedgerError as exc:
            return error_response(exc)

        return Response(
            {
                'customer_id': customer.customer_id,
                'name': customer.name,
                'message': 'Customer created successfully',
            },
            status=status.HTTP_201_CREATED
        )


class CustomerDetailView(APIView):
    """
    GET /api/v1/customers/<customer_id>
    """
    @extend_schema(responses={200: CustomerSerializer, 404: OpenApiResponse(response=ERROR_SCHEMA)})

    def get(self, request, customer_id):
        try:
            customer = services.get_customer(customer_id)
        except LedgerError as exc:
            return error_response(exc)
        return Response(CustomerSerializer(customer).data, status=status.HTTP_200_OK)


class CustomerOverviewView(APIView):
    """
    GET /api/v1/customers/<customer_id>/overview
    Every loan of a customer with its repayment progress.
    """
    @extend_schema(responses={200: CustomerOverviewSerializer, 404: OpenApiResponse(response=ERROR_SCHEMA)})

    def get(self, request, customer_id):
        try:
            overview = services.get_customer_overview(customer_id)
        except LedgerError as exc:
            return error_response(exc)
        return Response(CustomerOverviewSerializer(overview).data, status=status.HTTP_200_OK)


class CreateLoanView(APIView):
    """
    POST /api/v1/loans
    Issue a new loan and return its total payable and monthly EMI.
    """
    @extend_schema(
        request=CreateLoanRequestSerializer,
        responses={
            201: CreateLoanResponseSerializer,
            400: OpenApiResponse(response=ERROR_SCHEMA),
            404: OpenApiResponse(response=ERROR_SCHEMA),
        }
    )

    def post(self, request):
        serializer = CreateLoanRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(
                {'error': serializer.errors},
                status=status.HTTP_400_BAD_REQUEST
            )

        data = serializer.validated_data
        try:
            loan = services.create_loan(
                data['customer_id'],
                data['loan_amount'],
                data['loan_period_years'],
                data['interest_rate_yearly'],
            )
        except LedgerError as exc:
            return error_response(exc)

        return Response(CreateLoanResponseSerializer(loan).data, status=status.HTTP_201_CREATED)


class RecordPaymentView(APIView):
    """
    POST /api/v1/loans/<loan_id>/payments
    Record an EMI or lump-sum payment against a loan.
    """
    @extend_schema(
        request=RecordPaymentRequestSerializer,
        responses={
            200: PaymentResultSerializer,
            400: OpenApiResponse(response=ERROR_SCHEMA),
            404: OpenApiResponse(response=ERROR_SCHEMA),
        }
    )

    def post(self, request, loan_id):
        serializer = RecordPaymentRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(
                {'error': serializer.errors},
                status=status.HTTP_400_BAD_REQUEST
            )

        data = serializer.validated_data
        try:
            result = services.record_payment(
                loan_id,
                data['amount'],
                data['payment_type'],
                payment_date=data.get('payment_date'),
            )
        except LedgerError as exc:
            return error_response(exc)

        return Response(PaymentResultSerializer(result).data, status=status.HTTP_200_OK)


class LoanLedgerView(APIView):
    """
    GET /api/v1/loans/<loan_id>/ledger
    """
    @extend_schema(responses={200: LoanLedgerSerializer, 404: OpenApiResponse(response=ERROR_SCHEMA)})

    def get(self, request, loan_id):
        try:
            ledger = services.get_ledger(loan_id)
        except LedgerError as exc:
            return error_response(exc)
        return Response(LoanLedgerSerializer(ledger).data, status=status.HTTP_200_OK)
