"""Utility functions for the alarm simulator."""

import logging
import uuid

from alarm_simulator.metrics_collector import structured_logger


def generate_correlation_id():
    """Generate correlation ID for event tracing."""
    return str(uuid.uuid4())


def setup_logging(level='INFO', json_format=False):
    """Setup structured logging."""
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    # basicConfig is a no-op once handlers exist, so apply the level directly
    logging.getLogger().setLevel(getattr(logging, str(level).upper(), logging.INFO))
    if json_format:
        structured_logger.enable_json()
    # Per-request chatter from urllib3 drowns out the event log
    logging.getLogger('urllib3').setLevel(logging.WARNING)
