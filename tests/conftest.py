"""Pytest configuration and shared fixtures."""

import os
import random
import logging
import pytest
from unittest.mock import MagicMock

from alarm_simulator.config import SimulatorConfig
from alarm_simulator.metrics_collector import structured_logger


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch, tmp_path):
    """Keep real Alarm* variables out of the tests and run each in an empty directory."""
    for key in list(os.environ):
        if key.startswith('Alarm') or key in ('LOG_LEVEL', 'LOG_FORMAT', 'ENVIRONMENT'):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def sample_settings():
    """Minimal valid settings."""
    return {
        "AlarmTopicEndpoint": "https://alarms.westeurope-1.eventgrid.azure.net/api/events",
        "AlarmKey": "test-sas-key-ABCD",
        "AlarmImageRoot": "https://images.example.com/alarms",
    }


@pytest.fixture
def sample_config(sample_settings):
    settings = dict(sample_settings, AlarmNumDevices="5", AlarmInterval="0")
    return SimulatorConfig.from_settings(settings)


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def mock_session():
    """requests.Session whose POSTs succeed."""
    session = MagicMock()
    session.headers = {}
    response = MagicMock()
    response.ok = True
    response.status_code = 200
    response.reason = "OK"
    session.post.return_value = response
    return session


@pytest.fixture(autouse=True)
def restore_logging():
    """setup_logging changes the root level and the event logger's handlers."""
    root_level = logging.getLogger().level
    handlers = list(structured_logger.logger.handlers)
    propagate = structured_logger.logger.propagate

    yield

    logging.getLogger().setLevel(root_level)
    structured_logger.logger.handlers = handlers
    structured_logger.logger.propagate = propagate
