"""
Task Comments Handler.
POST /tasks/{taskId}/comments   Body: { "comment": "..." }
GET  /tasks/{taskId}/comments
"""
from taskdesk.errors import TaskDeskError
from taskdesk.logging import logger, log_event
from taskdesk.tasks import add_comment, get_comments
from taskdesk.utils import error_response, format_response, get_path_param, parse_body


def handler(event, context):
    log_event(event)

    task_id = get_path_param(event, 'taskId')
    try:
        if event.get('httpMethod') == 'GET':
            comments = get_comments(task_id)
        else:
            comments = add_comment(task_id, parse_body(event).get('comment')).get('comments', [])
    except TaskDeskError as e:
        return error_response(e)
    except Exception as e:
        logger.exception(f"Error handling comments of task {task_id}: {e}")
        return format_response(500, {'message': 'Internal Server Error'})

    return format_response(200, {'taskId': task_id, 'comments': comments})
