# activities/notifications.py
"""
Post-commit side effects of an enrollment.

Only ever invoked from ``transaction.on_commit``; whatever happens here the
enrollment has already been persisted and stays persisted.
"""
import logging

from .tasks import send_enrollment_confirmation_task

logger = logging.getLogger('campus.notifications')


def dispatch_enrollment_confirmation(participation_id):
    """Queue the confirmation email without waiting for it."""
    try:
        send_enrollment_confirmation_task.delay(str(participation_id))
    except Exception:
        logger.exception(f"Failed to queue enrollment confirmation for participation {participation_id}")
