"""
Unit tests for the loan ledger.
"""
import os
import tempfile
import uuid
from datetime import timedelta
from io import StringIO
from unittest.mock import patch

import openpyxl
from django.core.management import call_command
from django.db import connection
from django.test import SimpleTestCase, TestCase
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from .exceptions import Conflict, InvalidInput, InvalidState, NotFound
from .ledger import calculate_total_interest, compute_balance, compute_schedule
from .models import Customer, Loan, LoanStatus, Payment, PaymentType
from .services import (
    create_customer,
    create_loan,
    get_customer,
    get_customer_overview,
    get_ledger,
    list_customers,
    reconcile_loan_statuses,
    record_payment,
)
from .tasks import ingest_customer_data, ingest_loan_data, reconcile_loans


class TestComputeSchedule(SimpleTestCase):
    def test_standard_loan(self):
        # 120000 at 10% for 2 years: interest 24000, 24 installments
        schedule = compute_schedule(120000, 10, 2)
        self.assertAlmostEqual(schedule.total_payable, 144000.0)
        self.assertAlmostEqual(schedule.monthly_installment, 6000.0)

    def test_zero_interest(self):
        schedule = compute_schedule(120000, 0, 1)
        self.assertEqual(schedule.total_payable, 120000)
        self.assertAlmostEqual(schedule.monthly_installment, 10000.0)

    def test_formula_holds_for_various_terms(self):
        for principal, rate, years in [(1000, 7.5, 1), (250000, 12, 5), (99.99, 3.25, 3), (5e6, 0.5, 30)]:
            schedule = compute_schedule(principal, rate, years)
            expected_total = principal + principal * years * (rate / 100)
            self.assertAlmostEqual(schedule.total_payable, expected_total, places=6)
            self.assertAlmostEqual(schedule.monthly_installment, expected_total / (years * 12), places=6)
            self.assertGreaterEqual(schedule.total_payable, principal)

    def test_total_interest(self):
        self.assertAlmostEqual(calculate_total_interest(120000, 10, 2), 24000.0)

    def test_rejects_non_positive_principal(self):
        with self.assertRaises(InvalidInput):
            compute_schedule(0, 10, 2)
        with self.assertRaises(InvalidInput):
            compute_schedule(-500, 10, 2)

    def test_rejects_zero_term(self):
        with self.assertRaises(InvalidInput):
            compute_schedule(1000, 10, 0)

    def test_rejects_negative_rate(self):
        with self.assertRaises(InvalidInput):
            compute_schedule(1000, -1, 1)


class TestComputeBalance(SimpleTestCase):
    def test_no_payments(self):
        balance = compute_balance(144000, 6000, [])
        self.assertEqual(balance.amount_paid, 0)
        self.assertEqual(balance.balance, 144000)
        self.assertEqual(balance.installments_remaining, 24)
        self.assertFalse(balance.is_paid_off)

    def test_balance_is_total_minus_payments(self):
        payments = [6000, 2500.5, 10000]
        balance = compute_balance(144000, 6000, payments)
        self.assertAlmostEqual(balance.amount_paid, sum(payments))
        self.assertAlmostEqual(balance.balance, 144000 - sum(payments))

    def test_partial_installment_rounds_up(self):
        # 138000 - 2500 leaves 135500, which needs 23 installments of 6000
        balance = compute_balance(144000, 6000, [6000, 2500])
        self.assertEqual(balance.installments_remaining, 23)

    def test_overpayment_reports_negative_balance(self):
        balance = compute_balance(144000, 6000, [150000])
        self.assertEqual(balance.balance, -6000)
        self.assertEqual(balance.installments_remaining, 0)
        self.assertTrue(balance.is_paid_off)

    def test_exact_payoff(self):
        balance = compute_balance(144000, 6000, [144000])
        self.assertEqual(balance.balance, 0)
        self.assertTrue(balance.is_paid_off)

    def test_non_positive_installment_is_invalid_state(self):
        with self.assertRaises(InvalidState):
            compute_balance(144000, 0, [])


class TestCustomerService(TestCase):
    def test_sample_customers_are_seeded(self):
        ids = [c.customer_id for c in list_customers()]
        self.assertIn('cust001', ids)
        self.assertIn('cust002', ids)
        self.assertEqual(get_customer('cust001').name, 'John Doe')

    def test_create_customer(self):
        customer = create_customer('cust100', 'Ada Lovelace')
        self.assertEqual(customer.customer_id, 'cust100')
        self.assertTrue(Customer.objects.filter(customer_id='cust100').exists())

    def test_duplicate_customer_is_conflict(self):
        with self.assertRaises(Conflict):
            create_customer('cust001', 'Somebody Else')
        self.assertEqual(get_customer('cust001').name, 'John Doe')

    def test_blank_fields_are_invalid(self):
        with self.assertRaises(InvalidInput):
            create_customer('', 'Nobody')
        with self.assertRaises(InvalidInput):
            create_customer('cust101', '   ')

    def test_overlong_customer_id_is_invalid(self):
        with self.assertRaises(InvalidInput):
            create_customer('c' * 65, 'Too Long')
        self.assertFalse(Customer.objects.filter(name='Too Long').exists())

    def test_unknown_customer(self):
        with self.assertRaises(NotFound):
            get_customer('missing')


class TestCreateLoan(TestCase):
    def test_create_loan(self):
        loan = create_loan('cust001', 120000, 2, 10)
        self.assertAlmostEqual(loan.total_amount, 144000.0)
        self.assertAlmostEqual(loan.monthly_emi, 6000.0)
        self.assertEqual(loan.status, LoanStatus.ACTIVE)
        self.assertIsInstance(loan.loan_id, uuid.UUID)
        self.assertEqual(Payment.objects.filter(loan=loan).count(), 0)

    def test_coerces_string_fields(self):
        loan = create_loan('cust001', '120000', '2', '10.0')
        self.assertAlmostEqual(loan.total_amount, 144000.0)
        self.assertEqual(loan.loan_period_years, 2)

    def test_zero_principal_is_invalid(self):
        with self.assertRaises(InvalidInput):
            create_loan('cust001', 0, 2, 10)
        self.assertEqual(Loan.objects.count(), 0)

    def test_non_numeric_and_missing_fields(self):
        with self.assertRaises(InvalidInput):
            create_loan('cust001', 'lots', 2, 10)
        with self.assertRaises(InvalidInput):
            create_loan('cust001', 1000, None, 10)
        with self.assertRaises(InvalidInput):
            create_loan('cust001', float('nan'), 2, 10)
        with self.assertRaises(InvalidInput):
            create_loan('cust001', True, 2, 10)

    def test_fractional_term_is_invalid(self):
        with self.assertRaises(InvalidInput):
            create_loan('cust001', 1000, 2.5, 10)

    def test_unknown_customer(self):
        with self.assertRaises(NotFound):
            create_loan('nobody', 1000, 1, 10)

    def test_missing_customer_id_is_invalid(self):
        for customer_id in [None, '', '   ']:
            with self.assertRaises(InvalidInput):
                create_loan(customer_id, 1000, 1, 5)
        self.assertEqual(Loan.objects.count(), 0)

    def test_zero_rate_is_allowed(self):
        loan = create_loan('cust001', 1200, 1, 0)
        self.assertAlmostEqual(loan.total_amount, 1200.0)
        self.assertAlmostEqual(loan.monthly_emi, 100.0)


class TestRecordPayment(TestCase):
    def setUp(self):
        self.loan = create_loan('cust001', 120000, 2, 10)

    def test_emi_payment(self):
        result = record_payment(self.loan.loan_id, 6000, PaymentType.EMI)
        self.assertAlmostEqual(result.remaining_balance, 138000.0)
        self.assertEqual(result.installments_remaining, 23)
        self.assertEqual(result.loan_status, LoanStatus.ACTIVE)
        self.assertTrue(Payment.objects.filter(payment_id=result.payment_id).exists())

    def test_lump_sum_pays_off_loan(self):
        record_payment(self.loan.loan_id, 6000, PaymentType.EMI)
        result = record_payment(self.loan.loan_id, 138000, PaymentType.LUMP_SUM)
        self.assertAlmostEqual(result.remaining_balance, 0.0)
        self.assertEqual(result.installments_remaining, 0)
        self.assertEqual(result.loan_status, LoanStatus.PAID_OFF)
        self.loan.refresh_from_db()
        self.assertEqual(self.loan.status, LoanStatus.PAID_OFF)

    def test_paid_off_never_reverts(self):
        record_payment(self.loan.loan_id, 144000, PaymentType.LUMP_SUM)
        result = record_payment(self.loan.loan_id, 100, PaymentType.EMI)
        self.assertAlmostEqual(result.remaining_balance, -100.0)
        self.assertEqual(result.loan_status, LoanStatus.PAID_OFF)
        self.loan.refresh_from_db()
        self.assertEqual(self.loan.status, LoanStatus.PAID_OFF)

    def test_amount_is_not_tied_to_installment(self):
        result = record_payment(self.loan.loan_id, 1, PaymentType.EMI)
        self.assertAlmostEqual(result.remaining_balance, 143999.0)
        self.assertEqual(result.installments_remaining, 24)

    def test_balance_decreases_with_every_payment(self):
        previous_balance = self.loan.total_amount
        previous_left = 24
        for amount in [6000, 250, 12000, 6000, 0.01]:
            result = record_payment(self.loan.loan_id, amount, PaymentType.EMI)
            self.assertLess(result.remaining_balance, previous_balance)
            self.assertLessEqual(result.installments_remaining, previous_left)
            previous_balance = result.remaining_balance
            previous_left = result.installments_remaining

    def test_unknown_loan(self):
        with self.assertRaises(NotFound):
            record_payment(uuid.uuid4(), 6000, PaymentType.EMI)
        with self.assertRaises(NotFound):
            record_payment('not-a-uuid', 6000, PaymentType.EMI)

    def test_invalid_amount(self):
        for amount in [0, -10, 'abc', None]:
            with self.assertRaises(InvalidInput):
                record_payment(self.loan.loan_id, amount, PaymentType.EMI)
        self.assertEqual(Payment.objects.count(), 0)

    def test_invalid_payment_type(self):
        with self.assertRaises(InvalidInput):
            record_payment(self.loan.loan_id, 6000, 'MONTHLY')

    def test_invalid_state_rolls_back_payment(self):
        Loan.objects.filter(pk=self.loan.pk).update(monthly_emi=0)
        with self.assertRaises(InvalidState):
            record_payment(self.loan.loan_id, 6000, PaymentType.EMI)
        self.assertEqual(Payment.objects.count(), 0)

    def test_payment_and_payoff_run_under_the_loan_lock(self):
        # TestCase already wraps each test in a transaction, so the service's
        # own atomic block shows up as one extra savepoint.
        outer_depth = len(connection.savepoint_ids)
        seen = {}

        def recorder(name, original):
            def wrapper(*args, **kwargs):
                seen[name] = (connection.in_atomic_block, len(connection.savepoint_ids))
                return original(*args, **kwargs)
            return wrapper

        with patch.object(Loan.objects, 'select_for_update',
                          side_effect=recorder('lock', Loan.objects.select_for_update)), \
                patch.object(Payment.objects, 'create',
                             side_effect=recorder('insert', Payment.objects.create)), \
                patch.object(Loan.objects, 'filter',
                             side_effect=recorder('status', Loan.objects.filter)):
            result = record_payment(self.loan.loan_id, 144000, PaymentType.LUMP_SUM)

        self.assertEqual(result.loan_status, LoanStatus.PAID_OFF)
        self.assertEqual(set(seen), {'lock', 'insert', 'status'})
        for name, (in_atomic, depth) in seen.items():
            self.assertTrue(in_atomic, name)
            self.assertEqual(depth, outer_depth + 1, name)


class TestLedger(TestCase):
    def setUp(self):
        self.loan = create_loan('cust001', 120000, 2, 10)

    def test_empty_ledger(self):
        ledger = get_ledger(self.loan.loan_id)
        self.assertEqual(ledger.amount_paid, 0)
        self.assertAlmostEqual(ledger.balance_amount, ledger.loan.total_amount)
        self.assertEqual(ledger.installments_remaining, 24)
        self.assertEqual(ledger.transactions, [])

    def test_ledger_totals(self):
        record_payment(self.loan.loan_id, 6000, PaymentType.EMI)
        record_payment(self.loan.loan_id, 10000, PaymentType.LUMP_SUM)
        ledger = get_ledger(self.loan.loan_id)
        self.assertAlmostEqual(ledger.amount_paid, 16000.0)
        self.assertAlmostEqual(ledger.balance_amount, 128000.0)
        self.assertEqual(ledger.installments_remaining, 22)
        self.assertEqual(len(ledger.transactions), 2)

    def test_transactions_ordered_by_date_then_insertion(self):
        now = timezone.now()
        first = record_payment(self.loan.loan_id, 100, PaymentType.EMI, payment_date=now)
        second = record_payment(self.loan.loan_id, 200, PaymentType.EMI, payment_date=now)
        earlier = record_payment(self.loan.loan_id, 300, PaymentType.LUMP_SUM, payment_date=now - timedelta(days=1))

        ledger = get_ledger(self.loan.loan_id)
        self.assertEqual(
            [p.payment_id for p in ledger.transactions],
            [earlier.payment_id, first.payment_id, second.payment_id],
        )

    def test_repeated_reads_are_identical(self):
        record_payment(self.loan.loan_id, 6000, PaymentType.EMI)
        first = get_ledger(self.loan.loan_id)
        second = get_ledger(self.loan.loan_id)
        self.assertEqual(first.amount_paid, second.amount_paid)
        self.assertEqual(first.balance_amount, second.balance_amount)
        self.assertEqual(first.installments_remaining, second.installments_remaining)
        self.assertEqual(
            [p.payment_id for p in first.transactions],
            [p.payment_id for p in second.transactions],
        )

    def test_unknown_loan(self):
        with self.assertRaises(NotFound):
            get_ledger(uuid.uuid4())


class TestCustomerOverview(TestCase):
    def test_customer_without_loans(self):
        overview = get_customer_overview('cust002')
        self.assertEqual(overview.customer_id, 'cust002')
        self.assertEqual(overview.total_loans, 0)
        self.assertEqual(overview.loans, [])

    def test_overview_summaries(self):
        first = create_loan('cust001', 120000, 2, 10)
        second = create_loan('cust001', 1200, 1, 0)
        record_payment(first.loan_id, 6000, PaymentType.EMI)

        overview = get_customer_overview('cust001')
        self.assertEqual(overview.total_loans, 2)
        self.assertEqual([s.loan_id for s in overview.loans], [first.loan_id, second.loan_id])

        summary = overview.loans[0]
        self.assertAlmostEqual(summary.principal, 120000.0)
        self.assertAlmostEqual(summary.total_amount, 144000.0)
        self.assertAlmostEqual(summary.total_interest, 24000.0)
        self.assertAlmostEqual(summary.emi_amount, 6000.0)
        self.assertAlmostEqual(summary.amount_paid, 6000.0)
        self.assertEqual(summary.installments_remaining, 23)
        self.assertEqual(overview.loans[1].installments_remaining, 12)

    def test_other_customers_loans_are_excluded(self):
        create_loan('cust002', 5000, 1, 5)
        self.assertEqual(get_customer_overview('cust001').total_loans, 0)

    def test_unknown_customer(self):
        with self.assertRaises(NotFound):
            get_customer_overview('missing')


class TestReconcile(TestCase):
    def test_closes_loans_paid_outside_the_service(self):
        loan = create_loan('cust001', 1200, 1, 0)
        untouched = create_loan('cust001', 1200, 1, 0)
        Payment.objects.create(loan=loan, amount=1200, payment_type=PaymentType.LUMP_SUM)
        Payment.objects.create(loan=untouched, amount=100, payment_type=PaymentType.EMI)

        self.assertEqual(reconcile_loan_statuses(), 1)
        loan.refresh_from_db()
        untouched.refresh_from_db()
        self.assertEqual(loan.status, LoanStatus.PAID_OFF)
        self.assertEqual(untouched.status, LoanStatus.ACTIVE)

    def test_task_reports_count(self):
        self.assertEqual(reconcile_loans(), {'closed': 0})


class TestIngestion(TestCase):
    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmpdir.cleanup)

    def _write_workbook(self, name, headers, rows):
        path = os.path.join(self.tmpdir.name, name)
        wb = openpyxl.Workbook()
        ws = wb.active
        ws.append(headers)
        for row in rows:
            ws.append(row)
        wb.save(path)
        return path

    def test_ingest_customers_skips_existing(self):
        path = self._write_workbook(
            'customers.xlsx',
            ['Customer ID', 'Name'],
            [['cust200', 'Grace Hopper'], ['cust001', 'Duplicate'], [None, None]],
        )
        result = ingest_customer_data(path)
        self.assertEqual(result, {'created': 1, 'skipped': 1})
        self.assertEqual(get_customer('cust001').name, 'John Doe')
        self.assertEqual(get_customer('cust200').name, 'Grace Hopper')

    def test_ingest_customers_skips_overlong_id(self):
        path = self._write_workbook(
            'customers.xlsx',
            ['Customer ID', 'Name'],
            [['x' * 80, 'Long Id'], ['cust201', 'Barbara Liskov']],
        )
        result = ingest_customer_data(path)
        self.assertEqual(result, {'created': 1, 'skipped': 1})
        self.assertFalse(Customer.objects.filter(name='Long Id').exists())

    def test_ingest_loans(self):
        path = self._write_workbook(
            'loans.xlsx',
            ['Customer ID', 'Loan Amount', 'Loan Period Years', 'Interest Rate'],
            [['cust001', 120000, 2, 10], ['cust002', 1200, 1, 0], ['ghost', 1000, 1, 5], ['cust001', 0, 1, 5]],
        )
        result = ingest_loan_data(path)
        self.assertEqual(result, {'created': 2, 'skipped': 2})
        loan = Loan.objects.get(customer_id='cust001')
        self.assertAlmostEqual(loan.monthly_emi, 6000.0)

    def test_ingest_command_sync(self):
        customer_file = self._write_workbook('customers.xlsx', ['Customer ID', 'Name'], [['cust300', 'Alan Turing']])
        loan_file = self._write_workbook(
            'loans.xlsx',
            ['Customer ID', 'Loan Amount', 'Loan Period Years', 'Interest Rate'],
            [['cust300', 24000, 2, 0]],
        )
        out = StringIO()
        call_command('ingest_data', customer_file=customer_file, loan_file=loan_file, sync=True, stdout=out)
        self.assertIn('Customer ingestion complete', out.getvalue())
        self.assertEqual(get_customer_overview('cust300').total_loans, 1)

    def test_ingest_command_missing_files(self):
        out = StringIO()
        call_command(
            'ingest_data',
            customer_file=os.path.join(self.tmpdir.name, 'none.xlsx'),
            loan_file=os.path.join(self.tmpdir.name, 'none.xlsx'),
            sync=True,
            stdout=out,
        )
        self.assertIn('file not found', out.getvalue())


class TestCustomerViews(APITestCase):
    def test_list_customers(self):
        response = self.client.get('/api/v1/customers')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('cust001', [c['customer_id'] for c in response.data])

    def test_create_customer(self):
        response = self.client.post('/api/v1/customers', {'customer_id': 'cust400', 'name': 'Edsger'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['customer_id'], 'cust400')

    def test_create_duplicate_customer(self):
        response = self.client.post('/api/v1/customers', {'customer_id': 'cust001', 'name': 'X'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertIn('error', response.data)

    def test_create_customer_missing_fields(self):
        response = self.client.post('/api/v1/customers', {'customer_id': 'cust401'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_customer_detail(self):
        response = self.client.get('/api/v1/customers/cust002')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['name'], 'Jane Smith')

    def test_customer_detail_not_found(self):
        response = self.client.get('/api/v1/customers/missing')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class TestLoanViews(APITestCase):
    def _create_loan(self, **overrides):
        data = {
            'customer_id': 'cust001',
            'loan_amount': 120000,
            'loan_period_years': 2,
            'interest_rate_yearly': 10,
        }
        data.update(overrides)
        return self.client.post('/api/v1/loans', data, format='json')

    def test_create_loan(self):
        response = self._create_loan()
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['customer_id'], 'cust001')
        self.assertAlmostEqual(response.data['total_amount_payable'], 144000.0)
        self.assertAlmostEqual(response.data['monthly_emi'], 6000.0)
        self.assertTrue(Loan.objects.filter(loan_id=response.data['loan_id']).exists())

    def test_create_loan_zero_principal(self):
        response = self._create_loan(loan_amount=0)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('error', response.data)

    def test_create_loan_missing_fields(self):
        response = self.client.post('/api/v1/loans', {'customer_id': 'cust001'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_create_loan_non_numeric(self):
        response = self._create_loan(loan_amount='a lot')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_create_loan_unknown_customer(self):
        response = self._create_loan(customer_id='ghost')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_create_loan_rejects_boolean_amounts(self):
        for overrides in [{'loan_amount': True}, {'interest_rate_yearly': True}, {'loan_amount': False}]:
            response = self._create_loan(**overrides)
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, overrides)
        self.assertEqual(Loan.objects.count(), 0)

    def test_payment_rejects_boolean_amount(self):
        loan_id = self._create_loan().data['loan_id']
        response = self.client.post(
            f'/api/v1/loans/{loan_id}/payments', {'amount': True, 'payment_type': 'EMI'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(Payment.objects.count(), 0)

    def test_payment_flow(self):
        loan_id = self._create_loan().data['loan_id']

        response = self.client.post(
            f'/api/v1/loans/{loan_id}/payments', {'amount': 6000, 'payment_type': 'EMI'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertAlmostEqual(response.data['remaining_balance'], 138000.0)
        self.assertEqual(response.data['emis_left'], 23)
        self.assertEqual(response.data['message'], 'Payment recorded successfully')

        response = self.client.post(
            f'/api/v1/loans/{loan_id}/payments', {'amount': 138000, 'payment_type': 'LUMP_SUM'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertAlmostEqual(response.data['remaining_balance'], 0.0)
        self.assertEqual(response.data['emis_left'], 0)
        self.assertEqual(response.data['status'], 'PAID_OFF')

        ledger = self.client.get(f'/api/v1/loans/{loan_id}/ledger')
        self.assertEqual(ledger.status_code, status.HTTP_200_OK)
        self.assertEqual(ledger.data['status'], 'PAID_OFF')
        self.assertAlmostEqual(ledger.data['amount_paid'], 144000.0)
        self.assertEqual([t['type'] for t in ledger.data['transactions']], ['EMI', 'LUMP_SUM'])

    def test_payment_invalid_type(self):
        loan_id = self._create_loan().data['loan_id']
        response = self.client.post(
            f'/api/v1/loans/{loan_id}/payments', {'amount': 6000, 'payment_type': 'WEEKLY'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_payment_non_positive_amount(self):
        loan_id = self._create_loan().data['loan_id']
        response = self.client.post(
            f'/api/v1/loans/{loan_id}/payments', {'amount': 0, 'payment_type': 'EMI'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_payment_unknown_loan(self):
        response = self.client.post(
            f'/api/v1/loans/{uuid.uuid4()}/payments', {'amount': 6000, 'payment_type': 'EMI'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_empty_ledger(self):
        loan_id = self._create_loan().data['loan_id']
        response = self.client.get(f'/api/v1/loans/{loan_id}/ledger')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['amount_paid'], 0)
        self.assertAlmostEqual(response.data['balance_amount'], response.data['total_amount'])
        self.assertEqual(response.data['emis_left'], 24)
        self.assertEqual(response.data['transactions'], [])

    def test_ledger_not_found(self):
        response = self.client.get('/api/v1/loans/not-a-uuid/ledger')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_corrupted_loan_is_internal_error(self):
        loan_id = self._create_loan().data['loan_id']
        Loan.objects.filter(loan_id=loan_id).update(monthly_emi=0)
        response = self.client.get(f'/api/v1/loans/{loan_id}/ledger')
        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)

    def test_customer_overview(self):
        loan_id = self._create_loan().data['loan_id']
        self.client.post(f'/api/v1/loans/{loan_id}/payments', {'amount': 6000, 'payment_type': 'EMI'}, format='json')

        response = self.client.get('/api/v1/customers/cust001/overview')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total_loans'], 1)
        summary = response.data['loans'][0]
        self.assertEqual(summary['loan_id'], loan_id)
        self.assertAlmostEqual(summary['total_interest'], 24000.0)
        self.assertAlmostEqual(summary['amount_paid'], 6000.0)
        self.assertEqual(summary['emis_left'], 23)

    def test_customer_overview_empty(self):
        response = self.client.get('/api/v1/customers/cust002/overview')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {'customer_id': 'cust002', 'total_loans': 0, 'loans': []})

    def test_customer_overview_not_found(self):
        response = self.client.get('/api/v1/customers/missing/overview')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
