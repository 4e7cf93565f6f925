# config/celery.py
"""
Celery application for background work (confirmation emails).

Configuration is read from Django settings under the CELERY_ namespace,
and tasks are discovered from each installed app's tasks.py.
"""
import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

app = Celery("campus")

app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()
