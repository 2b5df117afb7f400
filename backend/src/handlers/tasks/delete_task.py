"""
Delete Task Handler.
DELETE /tasks/{taskId}
"""
from taskdesk.errors import TaskDeskError
from taskdesk.logging import logger, log_event
from taskdesk.tasks import delete_task
from taskdesk.utils import error_response, format_response, get_path_param


def handler(event, context):
    log_event(event)

    task_id = get_path_param(event, 'taskId')
    try:
        delete_task(task_id)
    except TaskDeskError as e:
        return error_response(e)
    except Exception as e:
        logger.exception(f"Error deleting task: {e}")
        return format_response(500, {'message': 'Internal Server Error'})

    return format_response(200, {'message': 'Task deleted', 'taskId': task_id})
