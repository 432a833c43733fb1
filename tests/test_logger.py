import logging

import pytest

from med_reminder.utils.logger import LOG_FORMAT, configure_logging


@pytest.fixture
def restore_root_handlers():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def test_configure_logging_installs_single_stdout_handler(restore_root_handlers):
    logger = configure_logging(logging.DEBUG)

    root = logging.getLogger()
    assert logger.name == "med_reminder"
    assert root.level == logging.DEBUG
    assert len(root.handlers) == 1
    assert root.handlers[0].formatter._fmt == LOG_FORMAT


def test_configure_logging_quiets_clients_and_routes_uvicorn(restore_root_handlers):
    configure_logging(logging.DEBUG)

    assert logging.getLogger("urllib3").level == logging.WARNING
    assert logging.getLogger("redis").level == logging.WARNING
    access = logging.getLogger("uvicorn.access")
    assert access.propagate is True
    assert access.handlers == []
    assert access.level == logging.INFO
    assert logging.getLogger("uvicorn.error").level == logging.DEBUG
