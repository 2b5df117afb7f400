"""
SQS publishing for downstream notification delivery (email/push consumers).
"""
import boto3
import json
from typing import Dict, Any
from botocore.exceptions import ClientError
from .config import config
from .logging import logger

sqs = boto3.client('sqs', region_name=config.AWS_REGION)


def send_message(queue_url: str, message_body: Dict[str, Any], group_key: str = None) -> bool:
    """
    Send a single message to an SQS queue.

    Args:
        queue_url: SQS queue URL
        message_body: Message body as dict (will be JSON serialized)
        group_key: Optional value carried as the `recipientId` message attribute,
            so consumers can filter without parsing the body

    Returns:
        True if sent successfully, False otherwise
    """
    params = {
        'QueueUrl': queue_url,
        'MessageBody': json.dumps(message_body, default=str)
    }
    if group_key:
        params['MessageAttributes'] = {
            'recipientId': {'DataType': 'String', 'StringValue': group_key}
        }
    try:
        sqs.send_message(**params)
        logger.debug(f"Message sent to {queue_url}")
        return True
    except ClientError as e:
        logger.error(f"Error sending message to SQS: {e}")
        return False
