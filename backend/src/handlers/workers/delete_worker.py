"""
Delete Worker Handler.
DELETE /workers/{workerId} (admin only)
The worker's tasks go back to unassigned and their notifications are removed.
"""
from taskdesk.auth import is_admin
from taskdesk.errors import TaskDeskError
from taskdesk.logging import logger, log_event
from taskdesk.utils import error_response, format_response, get_path_param
from taskdesk.workers import delete_worker


def handler(event, context):
    log_event(event)

    if not is_admin(event):
        return format_response(403, {'error': 'Admin access required'})

    worker_id = get_path_param(event, 'workerId')
    try:
        delete_worker(worker_id)
    except TaskDeskError as e:
        return error_response(e)
    except Exception as e:
        logger.exception(f"Error deleting worker: {e}")
        return format_response(500, {'message': 'Internal Server Error'})

    return format_response(200, {'message': 'Worker deleted', 'workerId': worker_id})
