#!/usr/bin/env python3
"""
Metrics Collector - Prometheus metrics and structured logging
"""

import json
import logging
import uuid
from prometheus_client import Counter, Histogram, Gauge, start_http_server

# Prometheus metrics
ALARM_EVENTS = Counter('alarm_events_total', 'Alarm events posted to the topic', ['status'])
POST_DURATION = Histogram('alarm_post_duration_seconds', 'Topic POST duration')
CONFIGURED_DEVICES = Gauge('alarm_devices', 'Number of simulated alarm devices')


class StructuredLogger:
    """Structured logging with correlation IDs"""

    def __init__(self, name):
        self.logger = logging.getLogger(name)

    def enable_json(self):
        """Emit records from this logger as JSON lines"""
        formatter = logging.Formatter(
            '{"timestamp": "%(asctime)s", "level": "%(levelname)s", '
            '"logger": "%(name)s", "message": %(message)s}'
        )

        handler = logging.StreamHandler()
        handler.setFormatter(formatter)
        self.logger.handlers = [handler]
        self.logger.propagate = False

    def info(self, message, correlation_id=None, **kwargs):
        self._log('info', message, correlation_id, **kwargs)

    def warning(self, message, correlation_id=None, **kwargs):
        self._log('warning', message, correlation_id, **kwargs)

    def error(self, message, correlation_id=None, **kwargs):
        self._log('error', message, correlation_id, **kwargs)

    def _log(self, level, message, correlation_id=None, **kwargs):
        log_data = {
            'message': message,
            'correlation_id': correlation_id or str(uuid.uuid4()),
            **kwargs
        }

        getattr(self.logger, level)(json.dumps(log_data, default=str))


# Global logger instance
structured_logger = StructuredLogger('alarm_simulator.events')


def track_alarm_event(thing_id, correlation_id, status='success', **kwargs):
    """Track one alarm event dispatch"""
    ALARM_EVENTS.labels(status=status).inc()

    log = structured_logger.info if status == 'success' else structured_logger.warning
    log(
        "Alarm event sent" if status == 'success' else "Alarm event not accepted",
        correlation_id=correlation_id,
        thing_id=thing_id,
        status=status,
        **kwargs
    )


def start_monitoring(port):
    """Start the Prometheus metrics endpoint"""
    start_http_server(port)
    structured_logger.info(f"Prometheus metrics server started on port {port}", port=port)
