"""
List Notifications Handler.
GET /notifications/unread   unread notifications of the calling worker
GET /notifications?all=true every notification of the calling worker
"""
from taskdesk.auth import get_username
from taskdesk.errors import TaskDeskError
from taskdesk.logging import logger, log_event
from taskdesk.notifications import get_unread, list_notifications
from taskdesk.utils import error_response, format_response, get_query_param


def handler(event, context):
    log_event(event)

    username = get_username(event)
    if not username:
        return format_response(401, {'error': 'Unauthorized'})

    try:
        if get_query_param(event, 'all') == 'true':
            items = list_notifications(username)
        else:
            items = get_unread(username)
    except TaskDeskError as e:
        return error_response(e)
    except Exception as e:
        logger.exception(f"Error listing notifications for {username}: {e}")
        return format_response(500, {'message': 'Internal Server Error'})

    return format_response(200, {'notifications': items, 'count': len(items)})
