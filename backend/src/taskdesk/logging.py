"""
Logging setup shared by every handler and core module.
"""
import logging
import json

from .config import config

logger = logging.getLogger('taskdesk')
logger.setLevel(config.LOG_LEVEL)

if not logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    ))
    logger.addHandler(handler)

# Keys worth logging per trigger type; bodies, headers and claims never are.
_EVENT_KEYS = (
    'httpMethod', 'resource', 'pathParameters', 'queryStringParameters',  # API Gateway
    'source', 'detail-type', 'time',                                       # EventBridge
    'triggerSource', 'userName',                                           # Cognito
)


def log_event(event: dict) -> None:
    """Log the routing-relevant part of an incoming Lambda event."""
    try:
        summary = {k: event[k] for k in _EVENT_KEYS if k in event}
        logger.info(f"Lambda event: {json.dumps(summary, default=str)}")
    except Exception as e:
        logger.warning(f"Could not log event: {e}")
