"""Synthesized trigger payloads for test runs.

When a run is started without user-supplied trigger data, the trigger step's
outputs are seeded from a sample payload shaped like what the integration
would really deliver, so downstream placeholders such as
``{{outputs.<trigger>.body}}`` resolve to something meaningful.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable

from flowagent.types import WorkflowStep


def _gmail_payload(trigger: WorkflowStep) -> dict[str, Any]:
    return {
        "from": "test-sender@example.com",
        "subject": "Important: Sales Enquiry",
        "body": (
            "Hello, I am interested in your product catalog. "
            "Can you send me more information? Thanks!"
        ),
    }


def _hubspot_payload(trigger: WorkflowStep) -> dict[str, Any]:
    return {
        "contactId": "contact-001",
        "email": "new.contact@example.com",
        "firstName": "Ada",
        "lastName": "Lovelace",
        "company": "Example Corp",
    }


def _calendar_payload(trigger: WorkflowStep) -> dict[str, Any]:
    return {
        "eventId": "event-001",
        "title": "Quarterly planning",
        "startTime": datetime.now(timezone.utc).isoformat(),
        "attendees": "team@example.com",
    }


def _webhook_payload(trigger: WorkflowStep) -> dict[str, Any]:
    return {
        "data": {"message": "This is a test webhook payload"},
        "receivedAt": datetime.now(timezone.utc).isoformat(),
    }


_PAYLOAD_BUILDERS: dict[str, Callable[[WorkflowStep], dict[str, Any]]] = {
    "gmail": _gmail_payload,
    "hubspot": _hubspot_payload,
    "google_calendar": _calendar_payload,
}


def default_trigger_payload(trigger: WorkflowStep) -> dict[str, Any]:
    """Return a sample payload for *trigger*'s integration (webhook shape by default)."""
    builder = _PAYLOAD_BUILDERS.get(trigger.integration_id, _webhook_payload)
    return builder(trigger)
