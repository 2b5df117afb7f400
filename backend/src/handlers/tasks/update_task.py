"""
Update Task Handler.
PATCH /tasks/{taskId}
Applies the fields present in the body and notifies the department's supervisors.
"""
from taskdesk.errors import TaskDeskError
from taskdesk.logging import logger, log_event
from taskdesk.tasks import update_task
from taskdesk.utils import error_response, format_response, get_path_param, parse_body


def handler(event, context):
    log_event(event)

    try:
        task = update_task(get_path_param(event, 'taskId'), parse_body(event))
    except TaskDeskError as e:
        return error_response(e)
    except Exception as e:
        logger.exception(f"Error updating task: {e}")
        return format_response(500, {'message': 'Internal Server Error'})

    return format_response(200, task)
