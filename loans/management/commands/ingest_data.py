"""
Management command to trigger data ingestion via Celery tasks.
"""
import os
from django.core.management.base import BaseCommand
from loans.tasks import ingest_customer_data, ingest_loan_data


class Command(BaseCommand):
    help = 'Ingest customers and loans from Excel files using background tasks'

    def add_arguments(self, parser):
        parser.add_argument(
            '--customer-file',
            type=str,
            default='data/customers.xlsx',
            help='Path to customer Excel file (columns: Customer ID, Name)'
        )
        parser.add_argument(
            '--loan-file',
            type=str,
            default='data/loans.xlsx',
            help='Path to loan Excel file (columns: Customer ID, Loan Amount, Loan Period Years, Interest Rate)'
        )
        parser.add_argument(
            '--sync',
            action='store_true',
            help='Run synchronously instead of via Celery'
        )

    def handle(self, *args, **options):
        sync = options['sync']
        # Customers first so that loan rows can reference them.
        jobs = [
            ('Customer', options['customer_file'], ingest_customer_data),
            ('Loan', options['loan_file'], ingest_loan_data),
        ]

        for label, file_path, task in jobs:
            if not os.path.exists(file_path):
                self.stdout.write(
                    self.style.WARNING(f'{label} file not found: {file_path}')
                )
                continue

            self.stdout.write(f'Ingesting {label.lower()} data from: {file_path}')
            if sync:
                result = task(file_path)
                self.stdout.write(
                    self.style.SUCCESS(f'{label} ingestion complete: {result}')
                )
            else:
                queued = task.delay(file_path)
                self.stdout.write(
                    self.style.SUCCESS(f'{label} ingestion task queued: {queued.id}')
                )
