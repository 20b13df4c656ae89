# =============================================================================
# workers/tasks.py - Celery Task Definitions
# =============================================================================
# Background notification tasks.
#
# Tasks:
# - send_email: Render an HTML template and send it over SMTP
# - notify_payment_confirmed: Tell a brand their task payment went through
#
# Delivery failures are retried; configuration errors are not.
# =============================================================================

import logging
from typing import Any

from celery import shared_task

from lib.notifications import (
    NotificationError,
    load_template,
    render_template,
    send_email as deliver_email,
)
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

RETRY_DELAY_SECONDS = 60
MAX_RETRIES = 3


@shared_task(bind=True, name="workers.tasks.send_email", max_retries=MAX_RETRIES)
def send_email(
    self,
    to: str,
    subject: str,
    template: str,
    context: dict[str, Any],
    from_email: str | None = None,
) -> dict[str, Any]:
    """
    Render templates/email/{template}.html with context and send it.

    Returns:
        Dict with success and the Message-ID
    """
    html = render_template(load_template(template), context)

    try:
        message_id = deliver_email(to, subject, html, from_email=from_email)
    except NotificationError as e:
        if "not configured" in e.message:
            raise
        logger.warning(f"Email to {to} failed, retrying: {e.message}")
        raise self.retry(exc=e, countdown=RETRY_DELAY_SECONDS)

    return {"success": True, "message_id": message_id}


@shared_task(name="workers.tasks.notify_payment_confirmed")
def notify_payment_confirmed(task_id: int) -> dict[str, Any]:
    """
    Email the brand that their payment was received and the task is live.

    Returns:
        Dict with queued (bool) and, when skipped, the reason
    """
    task = SupabaseClient.fetch_task_details(task_id)
    if not task:
        logger.warning(f"Payment confirmation skipped: task {task_id} not found")
        return {"queued": False, "reason": "task_not_found"}

    owner_id = task.get("user_id")
    contacts = SupabaseClient.fetch_contact_details(owner_id) if owner_id else {}
    email = contacts.get("EMAIL")
    if not email:
        logger.warning(f"Payment confirmation skipped: no email for owner of task {task_id}")
        return {"queued": False, "reason": "no_email"}

    profile = SupabaseClient.fetch_profile(owner_id) or {}
    cost = task.get("cost") or {}

    send_email.delay(
        to=email,
        subject="Payment received - your task is live",
        template="payment_confirmed",
        context={
            "name": profile.get("name") or "there",
            "task_title": task.get("title") or f"Task #{task_id}",
            "task_id": task_id,
            "amount": f"{float(cost.get('amount') or 0):,.2f}",
        },
    )
    logger.info(f"Queued payment confirmation email for task {task_id}")
    return {"queued": True}
