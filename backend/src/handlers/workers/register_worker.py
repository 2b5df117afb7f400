"""
Register Worker Handler.
POST /workers (admin only)
Body: { "username": "...", "role": "EMPLOYEE", "departmentId": "...", "qualification": "MID", ... }
"""
from taskdesk.auth import get_user_sub, is_admin
from taskdesk.errors import TaskDeskError
from taskdesk.logging import logger, log_event
from taskdesk.utils import error_response, format_response, parse_body
from taskdesk.workers import register_worker


def handler(event, context):
    log_event(event)

    if not is_admin(event):
        return format_response(403, {'error': 'Admin access required'})

    try:
        worker = register_worker(parse_body(event), actor_id=get_user_sub(event))
    except TaskDeskError as e:
        return error_response(e)
    except Exception as e:
        logger.exception(f"Error registering worker: {e}")
        return format_response(500, {'message': 'Internal Server Error'})

    return format_response(201, worker)
