"""
Assign Task Handler.
POST /tasks/{taskId}/assign
Runs automatic assignment for a stored task that is still unassigned,
typically one whose creation answered 422 because nobody qualified at the time.
"""
from taskdesk.assignment import assign_automatically
from taskdesk.errors import TaskDeskError
from taskdesk.logging import logger, log_event
from taskdesk.tasks import get_task
from taskdesk.utils import error_response, format_response, get_path_param


def handler(event, context):
    log_event(event)

    try:
        task = assign_automatically(get_task(get_path_param(event, 'taskId')))
    except TaskDeskError as e:
        return error_response(e)
    except Exception as e:
        logger.exception(f"Error assigning task: {e}")
        return format_response(500, {'message': 'Internal Server Error'})

    return format_response(200, {
        'message': 'Task assigned successfully',
        'taskId': task['taskId'],
        'assignedTo': task['assignedTo']
    })
