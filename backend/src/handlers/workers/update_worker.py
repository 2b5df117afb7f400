"""
Update Worker Handler.
PATCH /workers/{workerId} (admin only)
"""
from taskdesk.auth import is_admin
from taskdesk.errors import TaskDeskError
from taskdesk.logging import logger, log_event
from taskdesk.utils import error_response, format_response, get_path_param, parse_body
from taskdesk.workers import update_worker


def handler(event, context):
    log_event(event)

    if not is_admin(event):
        return format_response(403, {'error': 'Admin access required'})

    try:
        worker = update_worker(get_path_param(event, 'workerId'), parse_body(event))
    except TaskDeskError as e:
        return error_response(e)
    except Exception as e:
        logger.exception(f"Error updating worker: {e}")
        return format_response(500, {'message': 'Internal Server Error'})

    return format_response(200, worker)
