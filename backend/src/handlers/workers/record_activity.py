"""
Record Activity Handler.
Cognito Post Authentication trigger: stamps the worker's lastActiveAt on every sign-in,
which is what the inactivity sweep reads.
"""
from taskdesk.logging import logger, log_event
from taskdesk.workers import record_activity


def handler(event, context):
    """Cognito triggers must hand the event back; a failure here never blocks sign-in."""
    log_event(event)

    try:
        record_activity(event.get('userName'))
    except Exception as e:
        logger.error(f"Could not record activity for {event.get('userName')}: {e}")

    return event
