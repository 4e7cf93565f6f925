# activities/emails.py
from django.conf import settings
from django.core.mail import send_mail
from django.utils.html import format_html

from .datetime_utils import format_for_display


def build_my_activities_url():
    return f"{settings.FRONTEND_URL.rstrip('/')}/my-activities"


def send_enrollment_confirmation(participation) -> bool:
    """
    Send the "enrollment confirmed" email for a participation.

    Returns False when the student has no email on file. Delivery errors
    propagate so the caller can decide whether to retry.
    """
    user = participation.user
    activity = participation.activity

    if not getattr(user, "email", None):
        # No email set, nothing to send
        return False

    name = user.get_full_name() or user.username
    when = format_for_display(activity.start_date)
    link = build_my_activities_url()

    subject = f"Enrollment Confirmed - {activity.title}"

    message = (
        f"Hi {name},\n\n"
        f"You have successfully enrolled in:\n"
        f"  {activity.title}\n"
        f"  Date: {when}\n"
        f"  Location: {activity.location}\n\n"
        f"Please arrive 15 minutes before the scheduled time.\n"
        f"View your activities here:\n"
        f"{link}\n\n"
        f"If you didn't enroll for this activity, please contact us immediately.\n\n"
        f"Campus Activities"
    )

    html_message = format_html(
        "<p>Hi <strong>{}</strong>,</p>"
        "<p>You have successfully enrolled in:</p>"
        "<h2>{}</h2>"
        "<p><strong>Date:</strong> {}<br><strong>Location:</strong> {}</p>"
        "<p>Please arrive 15 minutes before the scheduled time.</p>"
        '<p><a href="{}">View My Activities</a></p>'
        "<p><small>If you didn't enroll for this activity, please contact us immediately.</small></p>",
        name,
        activity.title,
        when,
        activity.location,
        link,
    )

    send_mail(
        subject=subject,
        message=message,
        from_email=getattr(settings, "DEFAULT_FROM_EMAIL", None),
        recipient_list=[user.email],
        html_message=html_message,
        fail_silently=False,
    )
    return True
