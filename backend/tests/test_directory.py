"""
Tests for the directory read contract and the DynamoDB helpers beneath it.
"""
import pytest
from unittest.mock import MagicMock, patch

from boto3.dynamodb.conditions import Attr, Key
from botocore.exceptions import ClientError

from taskdesk import directory, dynamo
from taskdesk.config import config
from taskdesk.errors import ConflictError, StorageError, WorkerNotFound


def client_error(code):
    return ClientError({'Error': {'Code': code, 'Message': code}}, 'Operation')


class TestDirectory:
    """Tests for directory queries."""

    def test_supervisors_by_department_and_role(self):
        with patch('taskdesk.dynamo.query', return_value=[]) as mock_query:
            directory.list_supervisors_in_department('D1')

        kwargs = mock_query.call_args.kwargs
        assert mock_query.call_args.args[0] == config.WORKERS_TABLE
        assert kwargs['index_name'] == config.WORKERS_DEPARTMENT_INDEX
        assert kwargs['key_condition'] == Key('departmentId').eq('D1')
        assert kwargs['filter_expression'] == Attr('role').eq('DEPARTMENT_SUPERVISOR')

    def test_employees_by_department_and_role(self):
        with patch('taskdesk.dynamo.query', return_value=[]) as mock_query:
            directory.list_employees_in_department('D1')

        assert mock_query.call_args.kwargs['filter_expression'] == Attr('role').eq('EMPLOYEE')

    def test_admins_by_role_index(self):
        with patch('taskdesk.dynamo.query', return_value=[{'workerId': 'A1'}]) as mock_query:
            assert directory.list_admins() == [{'workerId': 'A1'}]

        assert mock_query.call_args.kwargs['key_condition'] == Key('role').eq('ADMIN')

    def test_assigned_task_count_is_derived(self):
        """The load is counted from the tasks table, not read from the worker."""
        with patch('taskdesk.dynamo.count', return_value=4) as mock_count:
            assert directory.assigned_task_count('W1') == 4

        assert mock_count.call_args.args[0] == config.TASKS_TABLE
        assert mock_count.call_args.kwargs['key_condition'] == Key('assignedTo').eq('W1')

    def test_get_worker_missing(self):
        with patch('taskdesk.dynamo.get_item', return_value=None):
            with pytest.raises(WorkerNotFound):
                directory.get_worker('W404')

    def test_find_worker_by_username(self):
        with patch('taskdesk.dynamo.query', side_effect=[[{'workerId': 'W1'}], []]):
            assert directory.find_worker_by_username('alice')['workerId'] == 'W1'
            assert directory.find_worker_by_username('nobody') is None


class TestDynamoHelpers:
    """Tests for pagination, null stripping and error translation."""

    def test_query_follows_pagination(self):
        table = MagicMock()
        table.query.side_effect = [
            {'Items': [{'id': 1}], 'LastEvaluatedKey': {'id': 1}},
            {'Items': [{'id': 2}]},
        ]

        with patch.object(dynamo, 'dynamodb') as mock_db:
            mock_db.Table.return_value = table
            items = dynamo.query('tasks', index_name='AssigneeIndex', key_condition=Key('assignedTo').eq('W1'))

        assert items == [{'id': 1}, {'id': 2}]
        assert table.query.call_args.kwargs['ExclusiveStartKey'] == {'id': 1}

    def test_count_sums_pages(self):
        table = MagicMock()
        table.query.side_effect = [{'Count': 2, 'LastEvaluatedKey': {'k': 1}}, {'Count': 1}]

        with patch.object(dynamo, 'dynamodb') as mock_db:
            mock_db.Table.return_value = table
            assert dynamo.count('tasks', 'AssigneeIndex', Key('assignedTo').eq('W1')) == 3

        assert table.query.call_args.kwargs['Select'] == 'COUNT'

    def test_put_drops_null_attributes(self):
        table = MagicMock()

        with patch.object(dynamo, 'dynamodb') as mock_db:
            mock_db.Table.return_value = table
            written = dynamo.put_item('tasks', {'taskId': 'T1', 'assignedTo': None})

        assert written == {'taskId': 'T1'}
        assert table.put_item.call_args.kwargs['Item'] == {'taskId': 'T1'}

    @pytest.mark.parametrize('code,expected', [
        ('ConditionalCheckFailedException', ConflictError),
        ('ProvisionedThroughputExceededException', StorageError),
    ])
    def test_client_errors_translated(self, code, expected):
        table = MagicMock()
        table.update_item.side_effect = client_error(code)

        with patch.object(dynamo, 'dynamodb') as mock_db:
            mock_db.Table.return_value = table
            with pytest.raises(expected):
                dynamo.update_item('notifications', {'notificationId': 'N1'}, 'SET #read = :true')
