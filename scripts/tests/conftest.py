"""
Shared fixtures for md2spec tests.
"""
from pathlib import Path

import pytest

from md2spec.log import logger

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True)
def reset_logger():
    """Drop handlers and level set by configure_logging between tests."""
    yield
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel("NOTSET")


@pytest.fixture
def php_spec_path():
    """Path to the sample PHP Expert spec."""
    return FIXTURES / "ai-agent-php" / "spec.md"


@pytest.fixture
def php_spec_content(php_spec_path):
    """Raw Markdown of the sample PHP Expert spec."""
    return php_spec_path.read_text(encoding="utf-8")
