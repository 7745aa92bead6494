"""
Celery application for background ingestion and ledger maintenance.
"""
import os

from celery import Celery

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'lending_system.settings')

app = Celery('lending_system')
app.config_from_object('django.conf:settings', namespace='CELERY')
app.autodiscover_tasks()
