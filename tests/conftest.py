import logging

import pytest

from changelog_helper.logging_utils import LOGGER_NAME


@pytest.fixture(autouse=True)
def reset_changelog_logger():
    """Drop handlers and level set on the changelog logger by a test."""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
