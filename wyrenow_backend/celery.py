import os
from celery import Celery
from celery.schedules import crontab

# set default Django settings
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'wyrenow_backend.settings')

app = Celery('wyrenow_backend')

# Load settings from Django settings, CELERY_ namespace
app.config_from_object('django.conf:settings', namespace='CELERY')

# Auto-discover tasks from all installed apps
app.autodiscover_tasks()

# -------------------------------
# Binary tree integrity audit
# -------------------------------
app.conf.beat_schedule = {
    'audit-binary-tree': {
        'task': 'core.binary.tasks.audit_tree_integrity',
        'schedule': crontab(hour=2, minute=0),  # every day at 02:00
    },
}
