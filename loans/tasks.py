"""
Celery tasks for background data ingestion and ledger maintenance.
"""
import logging

from celery import shared_task

from .exceptions import LedgerError

logger = logging.getLogger(__name__)


def _read_rows(file_path: str):
    """
    Yield each non-empty row of the active sheet as a dict keyed by header.
    """
    import openpyxl

    wb = openpyxl.load_workbook(file_path, read_only=True, data_only=True)
    try:
        ws = wb.active
        rows = ws.iter_rows(values_only=True)
        headers = [str(h).strip() if h is not None else '' for h in next(rows, ())]
        for row in rows:
            if not any(cell is not None and cell != '' for cell in row):
                continue
            yield dict(zip(headers, row))
    finally:
        wb.close()


def _load_rows(task, file_path: str):
    try:
        return list(_read_rows(file_path))
    except OSError as exc:
        logger.error(f"Could not open workbook {file_path}: {exc}")
        raise task.retry(exc=exc, countdown=5)


@shared_task(bind=True, max_retries=3)
def ingest_customer_data(self, file_path: str):
    """
    Ingest customers from an Excel file. Identifiers that already exist are
    skipped, never overwritten.
    """
    from .services import create_customer

    logger.info(f"Starting customer data ingestion from {file_path}")
    created_count = 0
    skipped_count = 0

    for row_data in _load_rows(self, file_path):
        customer_id = row_data.get('Customer ID') or row_data.get('customer_id')
        name = row_data.get('Name') or row_data.get('name')
        try:
            create_customer(customer_id, name)
        except LedgerError as exc:
            logger.warning(f"Skipping customer row {customer_id!r}: {exc}")
            skipped_count += 1
            continue
        created_count += 1

    logger.info(f"Customer ingestion complete: {created_count} created, {skipped_count} skipped")
    return {'created': created_count, 'skipped': skipped_count}


@shared_task(bind=True, max_retries=3)
def ingest_loan_data(self, file_path: str):
    """
    Ingest loans from an Excel file. Each row is issued through the loan
    service, so amounts are validated and derived the same way as API loans.
    """
    from .services import create_loan

    logger.info(f"Starting loan data ingestion from {file_path}")
    created_count = 0
    skipped_count = 0

    for row_data in _load_rows(self, file_path):
        customer_id = row_data.get('Customer ID') or row_data.get('customer_id')
        loan_amount = row_data.get('Loan Amount') or row_data.get('loan_amount')
        loan_period_years = row_data.get('Loan Period Years') or row_data.get('loan_period_years')
        interest_rate = row_data.get('Interest Rate')
        if interest_rate is None:
            interest_rate = row_data.get('interest_rate_yearly')

        try:
            create_loan(customer_id, loan_amount, loan_period_years, interest_rate)
        except LedgerError as exc:
            logger.warning(f"Skipping loan row for customer {customer_id!r}: {exc}")
            skipped_count += 1
            continue
        created_count += 1

    logger.info(f"Loan ingestion complete: {created_count} created, {skipped_count} skipped")
    return {'created': created_count, 'skipped': skipped_count}


@shared_task
def reconcile_loans():
    """
    Periodic job: mark loans whose payments cover the total payable as PAID_OFF.
    """
    from .services import reconcile_loan_statuses

    closed = reconcile_loan_statuses()
    if closed:
        logger.info(f"Reconciliation closed {closed} loan(s)")
    return {'closed': closed}
