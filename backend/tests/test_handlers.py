"""
Tests for the Lambda handlers: event parsing, error mapping and trigger contracts.
"""
import json
from unittest.mock import patch

from handlers.notifications import list_unread, mark_read
from handlers.sweeps import deadline_reminders, inactivity_check
from handlers.tasks import create_task, update_task
from handlers.workers import record_activity, register_worker
from taskdesk.errors import NoEligibleWorker, NotificationNotFound, TaskNotFound


def api_event(body=None, path=None, claims=None, query=None):
    return {
        'httpMethod': 'POST',
        'body': json.dumps(body) if body is not None else None,
        'pathParameters': path,
        'queryStringParameters': query,
        'requestContext': {'authorizer': {'claims': claims or {}}},
    }


class TestTaskHandlers:
    """Tests for the task handlers."""

    def test_create_passes_acting_worker(self):
        """The caller's Cognito sub is passed explicitly as the actor."""
        with patch('handlers.tasks.create_task.create_task', return_value={'taskId': 'T1'}) as mock_create:
            response = create_task.handler(api_event({'title': 'Deploy'}, claims={'sub': 'W1'}), None)

        assert response['statusCode'] == 201
        mock_create.assert_called_once_with({'title': 'Deploy'}, actor_id='W1')

    def test_create_without_candidates_is_422_with_task_id(self):
        with patch('handlers.tasks.create_task.create_task', side_effect=NoEligibleWorker('T9')):
            response = create_task.handler(api_event({'title': 'Deploy'}), None)

        body = json.loads(response['body'])
        assert response['statusCode'] == 422
        assert body['taskId'] == 'T9'

    def test_unexpected_error_is_500(self):
        with patch('handlers.tasks.create_task.create_task', side_effect=RuntimeError('boom')):
            response = create_task.handler(api_event({'title': 'Deploy'}), None)

        assert response['statusCode'] == 500

    def test_update_missing_task_is_404(self):
        with patch('handlers.tasks.update_task.update_task', side_effect=TaskNotFound('Task not found')):
            response = update_task.handler(api_event({'status': 'DONE'}, path={'taskId': 'T404'}), None)

        assert response['statusCode'] == 404


class TestNotificationHandlers:
    """Tests for the notification handlers."""

    def test_mark_read_missing_is_404(self):
        with patch('handlers.notifications.mark_read.mark_read', side_effect=NotificationNotFound('missing')):
            response = mark_read.handler(api_event(path={'notificationId': 'N404'}), None)

        assert response['statusCode'] == 404

    def test_unread_for_calling_worker(self):
        with patch('handlers.notifications.list_unread.get_unread', return_value=[{'notificationId': 'N1'}]) as mock_unread:
            response = list_unread.handler(api_event(claims={'cognito:username': 'alice'}), None)

        mock_unread.assert_called_once_with('alice')
        assert json.loads(response['body'])['count'] == 1

    def test_unread_requires_identity(self):
        response = list_unread.handler(api_event(), None)

        assert response['statusCode'] == 401


class TestWorkerHandlers:
    """Tests for the worker handlers."""

    def test_register_requires_admin(self):
        with patch('handlers.workers.register_worker.register_worker') as mock_register:
            response = register_worker.handler(api_event({'username': 'bob'}, claims={'cognito:groups': 'employee'}), None)

        assert response['statusCode'] == 403
        mock_register.assert_not_called()

    def test_post_authentication_trigger_returns_event(self):
        """Cognito triggers get their event back even when recording fails."""
        event = {'triggerSource': 'PostAuthentication_Authentication', 'userName': 'alice'}

        with patch('handlers.workers.record_activity.record_activity', side_effect=RuntimeError('down')):
            assert record_activity.handler(event, None) is event


class TestSweepHandlers:
    """Tests for the scheduled handlers."""

    def test_deadline_handler_returns_summary(self):
        summary = {'checked': 4, 'reminded': 2, 'failed': 0}
        with patch('handlers.sweeps.deadline_reminders.run_deadline_sweep', return_value=summary):
            assert deadline_reminders.handler({'source': 'aws.events'}, None) == summary

    def test_inactivity_handler_returns_summary(self):
        summary = {'checked': 10, 'inactive': 1, 'failed': 0}
        with patch('handlers.sweeps.inactivity_check.run_inactivity_sweep', return_value=summary):
            assert inactivity_check.handler({'source': 'aws.events'}, None) == summary
