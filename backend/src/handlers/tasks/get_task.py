"""
Get Task Handler.
GET /tasks/{taskId}
"""
from taskdesk.errors import TaskDeskError
from taskdesk.logging import logger, log_event
from taskdesk.tasks import get_task
from taskdesk.utils import error_response, format_response, get_path_param


def handler(event, context):
    log_event(event)

    try:
        task = get_task(get_path_param(event, 'taskId'))
    except TaskDeskError as e:
        return error_response(e)
    except Exception as e:
        logger.exception(f"Error fetching task: {e}")
        return format_response(500, {'message': 'Internal Server Error'})

    return format_response(200, task)
