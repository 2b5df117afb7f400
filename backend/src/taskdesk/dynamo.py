"""
DynamoDB utility functions shared by the task, worker and notification modules.
"""
import boto3
from typing import List, Dict, Any, Optional
from botocore.exceptions import ClientError
from .config import config
from .errors import ConflictError, StorageError
from .logging import logger

dynamodb = boto3.resource('dynamodb', region_name=config.AWS_REGION)


def _storage_error(table_name: str, action: str, error: ClientError) -> StorageError:
    """Translate a botocore error into the task desk error taxonomy."""
    code = error.response.get('Error', {}).get('Code')
    if code in ('ConditionalCheckFailedException', 'TransactionCanceledException'):
        logger.info(f"Conditional {action} on {table_name} rejected")
        return ConflictError(f"Conditional {action} on {table_name} rejected")
    logger.error(f"Error during {action} on {table_name}: {error}")
    return StorageError(f"Storage failure during {action}")


def _without_nulls(item: Dict[str, Any]) -> Dict[str, Any]:
    # Absent attributes keep the sparse GSIs (e.g. assignedTo) valid
    return {k: v for k, v in item.items() if v is not None}


def get_item(table_name: str, key: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Get a single item from DynamoDB, or None if it does not exist."""
    try:
        response = dynamodb.Table(table_name).get_item(Key=key)
        return response.get('Item')
    except ClientError as e:
        raise _storage_error(table_name, 'get', e)


def put_item(
    table_name: str,
    item: Dict[str, Any],
    condition_expression: Optional[str] = None
) -> Dict[str, Any]:
    """
    Write a full item, replacing any existing one with the same key.

    Args:
        table_name: Name of the DynamoDB table
        item: Item to write; None-valued attributes are omitted
        condition_expression: Optional condition the write must satisfy

    Returns:
        The item as written
    """
    item = _without_nulls(item)
    params = {'Item': item}
    if condition_expression:
        params['ConditionExpression'] = condition_expression
    try:
        dynamodb.Table(table_name).put_item(**params)
        return item
    except ClientError as e:
        raise _storage_error(table_name, 'put', e)


def update_item(
    table_name: str,
    key: Dict[str, Any],
    update_expression: str,
    expression_values: Optional[Dict[str, Any]] = None,
    expression_names: Optional[Dict[str, str]] = None,
    condition_expression: Optional[str] = None
) -> Dict[str, Any]:
    """Update an item in DynamoDB and return its new attributes."""
    params = {
        'Key': key,
        'UpdateExpression': update_expression,
        'ReturnValues': 'ALL_NEW'
    }

    if expression_values:
        params['ExpressionAttributeValues'] = expression_values
    if expression_names:
        params['ExpressionAttributeNames'] = expression_names
    if condition_expression:
        params['ConditionExpression'] = condition_expression

    try:
        response = dynamodb.Table(table_name).update_item(**params)
        return response.get('Attributes', {})
    except ClientError as e:
        raise _storage_error(table_name, 'update', e)


def delete_item(
    table_name: str,
    key: Dict[str, Any],
    condition_expression: Optional[str] = None
) -> None:
    """Delete an item from DynamoDB."""
    params = {'Key': key}
    if condition_expression:
        params['ConditionExpression'] = condition_expression
    try:
        dynamodb.Table(table_name).delete_item(**params)
    except ClientError as e:
        raise _storage_error(table_name, 'delete', e)


def query(
    table_name: str,
    index_name: Optional[str] = None,
    key_condition: Optional[Any] = None,
    filter_expression: Optional[Any] = None,
    scan_forward: bool = True
) -> List[Dict[str, Any]]:
    """
    Query DynamoDB table or index, following pagination to the end.

    Args:
        table_name: Name of the DynamoDB table
        index_name: Optional GSI name
        key_condition: Key condition expression
        filter_expression: Optional filter expression
        scan_forward: True for ascending, False for descending

    Returns:
        List of items matching the query
    """
    query_params = {
        'ScanIndexForward': scan_forward
    }

    if index_name:
        query_params['IndexName'] = index_name
    if key_condition is not None:
        query_params['KeyConditionExpression'] = key_condition
    if filter_expression is not None:
        query_params['FilterExpression'] = filter_expression

    return _paginate(table_name, 'query', query_params)


def scan(table_name: str, filter_expression: Optional[Any] = None) -> List[Dict[str, Any]]:
    """Scan a whole table, following pagination to the end."""
    scan_params = {}
    if filter_expression is not None:
        scan_params['FilterExpression'] = filter_expression
    return _paginate(table_name, 'scan', scan_params)


def count(table_name: str, index_name: str, key_condition: Any) -> int:
    """Count the items matching a key condition without fetching them."""
    params = {
        'IndexName': index_name,
        'KeyConditionExpression': key_condition,
        'Select': 'COUNT'
    }
    table = dynamodb.Table(table_name)
    total = 0
    try:
        while True:
            response = table.query(**params)
            total += int(response.get('Count', 0))
            if 'LastEvaluatedKey' not in response:
                return total
            params['ExclusiveStartKey'] = response['LastEvaluatedKey']
    except ClientError as e:
        raise _storage_error(table_name, 'count', e)


def _paginate(table_name: str, operation: str, params: Dict[str, Any]) -> List[Dict[str, Any]]:
    table = dynamodb.Table(table_name)
    call = getattr(table, operation)
    items = []
    try:
        while True:
            response = call(**params)
            items.extend(response.get('Items', []))
            if 'LastEvaluatedKey' not in response:
                return items
            params['ExclusiveStartKey'] = response['LastEvaluatedKey']
    except ClientError as e:
        raise _storage_error(table_name, operation, e)
