"""
Tests for log event processing.
"""

from ticketing.core.logging import redact_credentials


def test_credentials_are_masked():
    event = redact_credentials(None, "info", {
        "event": "user_created",
        "user_id": 3,
        "password": "hunter2",
    })
    assert event == {"event": "user_created", "user_id": 3, "password": "***"}


def test_events_without_credentials_pass_through():
    event = {"event": "ticket_reserved", "ticket_id": 9}
    assert redact_credentials(None, "info", dict(event)) == event
