"""
Mark Notification Read Handler.
POST /notifications/{notificationId}/read
Safe to repeat: an already-read notification stays read.
"""
from taskdesk.errors import TaskDeskError
from taskdesk.logging import logger, log_event
from taskdesk.notifications import mark_read
from taskdesk.utils import error_response, format_response, get_path_param


def handler(event, context):
    log_event(event)

    try:
        notification = mark_read(get_path_param(event, 'notificationId'))
    except TaskDeskError as e:
        return error_response(e)
    except Exception as e:
        logger.exception(f"Error marking notification read: {e}")
        return format_response(500, {'message': 'Internal Server Error'})

    return format_response(200, notification)
