"""
Send Notification Handler.
POST /notifications
Body: { "message": "...", "recipient": "<username>", "kind": "TASK" | "USER" | "OTHER", "referenceId": "..." }
"""
from taskdesk.errors import TaskDeskError
from taskdesk.logging import logger, log_event
from taskdesk.notifications import send_notification
from taskdesk.utils import error_response, format_response, parse_body


def handler(event, context):
    log_event(event)

    body = parse_body(event)
    try:
        notification = send_notification(
            body.get('message'),
            body.get('recipient'),
            body.get('kind'),
            body.get('referenceId')
        )
    except TaskDeskError as e:
        return error_response(e)
    except Exception as e:
        logger.exception(f"Error sending notification: {e}")
        return format_response(500, {'message': 'Internal Server Error'})

    return format_response(201, notification)
