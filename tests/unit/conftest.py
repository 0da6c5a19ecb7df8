"""Unit-test fixtures: caplog visibility and per-test correlation state."""

import logging

import pytest

from webbed.bootstrap.logging_setup import LOGGER_NAME
from webbed.domain.correlation_id import clear_correlation_id


@pytest.fixture(autouse=True)
def project_logs_reach_caplog():
    """configure_logging turns propagation off; caplog listens on the root logger."""
    project_logger = logging.getLogger(LOGGER_NAME)
    previous = project_logger.propagate
    project_logger.propagate = True
    yield
    project_logger.propagate = previous


@pytest.fixture(autouse=True)
def fresh_correlation_id():
    clear_correlation_id()
    yield
    clear_correlation_id()
