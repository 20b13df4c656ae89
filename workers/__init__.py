# =============================================================================
# workers/ - Celery Background Task Workers
# =============================================================================
# This package contains the Celery configuration and task definitions for
# background notifications (email, SMS).
#
# Components:
# - celery_app.py: Celery application configuration
# - tasks.py: Task definitions
# - config.py: Worker-specific settings
#
# Usage:
#   # Start worker
#   celery -A workers.celery_app worker -Q default,notifications --loglevel=info
#
#   # Submit task (from API)
#   from workers.tasks import notify_payment_confirmed
#   notify_payment_confirmed.delay(task_id)
# =============================================================================

from .celery_app import celery_app
from . import tasks

__all__ = [
    "celery_app",
    "tasks",
]
