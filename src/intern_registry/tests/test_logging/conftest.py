import pytest

from intern_registry.core.logging.builder import setup_logging, stop_queue_logging


@pytest.fixture(autouse=True)
def restore_logging(test_settings):
    """
    Tests here install their own handlers (files in tmp_path, captured
    streams). Put the suite-wide configuration back afterwards.
    """
    yield
    stop_queue_logging()
    setup_logging(test_settings)
