# activities/state_machine.py
"""
Activity lifecycle.

draft → published → completed
  ↑        │
  └────────┤
           └→ cancelled → draft

Enrollment is only open while an activity is published; the enrollment
coordinator checks that on its own, this module only guards edits.
"""
from typing import Tuple
import logging

from .models import Activity

logger = logging.getLogger('campus.activities')


# Valid state transitions: from_status -> list of allowed to_statuses
VALID_TRANSITIONS = {
    Activity.STATUS_DRAFT: [Activity.STATUS_PUBLISHED, Activity.STATUS_CANCELLED],
    Activity.STATUS_PUBLISHED: [Activity.STATUS_DRAFT, Activity.STATUS_CANCELLED, Activity.STATUS_COMPLETED],
    Activity.STATUS_CANCELLED: [Activity.STATUS_DRAFT],
    Activity.STATUS_COMPLETED: [],
}


def can_transition(activity: Activity, new_status: str) -> Tuple[bool, str]:
    """
    Check if an activity can move to a new status.

    Returns (can_transition: bool, reason: str)
    """
    current_status = activity.status

    if new_status == current_status:
        return True, "Same status"

    if new_status not in dict(Activity.STATUS_CHOICES):
        return False, f"Invalid status: {new_status}"

    allowed = VALID_TRANSITIONS.get(current_status, [])

    if new_status not in allowed:
        return False, f"Cannot transition from '{current_status}' to '{new_status}'"

    return True, ""


def log_transition(activity: Activity, old_status: str, actor=None):
    if old_status == activity.status:
        return
    logger.info(
        f"Activity state transition: activity={activity.id}, "
        f"from={old_status}, to={activity.status}, actor={getattr(actor, 'id', 'unknown')}"
    )


def get_allowed_transitions(activity: Activity) -> list:
    return VALID_TRANSITIONS.get(activity.status, [])

