# activities/tasks.py
import logging

from celery import shared_task

from .models import Participation
from .emails import send_enrollment_confirmation

logger = logging.getLogger('campus.notifications')


@shared_task(bind=True, max_retries=3, default_retry_delay=60)
def send_enrollment_confirmation_task(self, participation_id: str):
    """
    Deliver the enrollment confirmation email.

    Runs after the enrollment has committed; nothing here can change
    enrollment state. Delivery failures retry up to max_retries, then give up.
    """
    try:
        participation = Participation.objects.select_related("activity", "user").get(id=participation_id)
    except Participation.DoesNotExist:
        logger.warning(f"Confirmation skipped: participation {participation_id} not found")
        return "participation_not_found"

    # Cancelled before we got to it
    if participation.status != Participation.STATUS_ENROLLED:
        return "not_enrolled"

    try:
        sent = send_enrollment_confirmation(participation)
    except Exception as exc:
        if self.request.retries >= self.max_retries:
            logger.error(
                f"Giving up on enrollment confirmation for participation {participation_id} "
                f"after {self.request.retries} retries: {exc}"
            )
            return "failed"
        logger.warning(
            f"Enrollment confirmation for participation {participation_id} failed, "
            f"retry {self.request.retries + 1}/{self.max_retries}: {exc}"
        )
        raise self.retry(exc=exc)

    if not sent:
        return "no_email"

    logger.info(f"Enrollment confirmation sent for participation {participation_id}")
    return "sent"
