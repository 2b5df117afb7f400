"""
Create Task Handler.
POST /tasks
Creates a task and assigns it, either to the worker named in `assignedTo`
or to the least-loaded qualified employee of the task's department.
"""
from taskdesk.auth import get_user_sub
from taskdesk.errors import TaskDeskError
from taskdesk.logging import logger, log_event
from taskdesk.tasks import create_task
from taskdesk.utils import error_response, format_response, parse_body


def handler(event, context):
    """
    Body: {
        "title": "...", "description": "...", "dueDate": "YYYY-MM-DD",
        "priority": "LOW" | "MEDIUM" | "HIGH",
        "requiredQualification": "JUNIOR" | "MID" | "SENIOR",
        "departmentId": "...", "assignedTo": "<workerId, optional>"
    }

    A 422 response means the task was stored but nobody qualified for it;
    its taskId is in the body so it can be assigned later.
    """
    log_event(event)

    try:
        task = create_task(parse_body(event), actor_id=get_user_sub(event))
    except TaskDeskError as e:
        return error_response(e)
    except Exception as e:
        logger.exception(f"Error creating task: {e}")
        return format_response(500, {'message': 'Internal Server Error'})

    return format_response(201, task)
