"""
List Tasks Handler.
GET /tasks?departmentId=...  or  GET /tasks?assigneeId=...
Without parameters, lists the calling worker's own tasks.
"""
from taskdesk.auth import get_user_sub
from taskdesk.errors import TaskDeskError
from taskdesk.logging import logger, log_event
from taskdesk.tasks import list_tasks_by_assignee, list_tasks_by_department
from taskdesk.utils import error_response, format_response, get_query_param


def handler(event, context):
    log_event(event)

    department_id = get_query_param(event, 'departmentId')
    assignee_id = get_query_param(event, 'assigneeId') or get_user_sub(event)

    try:
        if department_id:
            tasks = list_tasks_by_department(department_id)
        elif assignee_id:
            tasks = list_tasks_by_assignee(assignee_id)
        else:
            return format_response(400, {'error': 'departmentId or assigneeId required'})
    except TaskDeskError as e:
        return error_response(e)
    except Exception as e:
        logger.exception(f"Error listing tasks: {e}")
        return format_response(500, {'message': 'Internal Server Error'})

    return format_response(200, {'tasks': tasks})
