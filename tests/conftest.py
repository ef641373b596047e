import logging
from logging import NullHandler

import pytest
import pytest_asyncio

from x3270script.backends.mock import MockBackend, MockServer
from x3270script.config import MockConfig
from x3270script.session import AsyncSession, MockSession

ROW_0 = "U F U C(host.example.com) I 2 24 80 0 0 0x0 -"


def pytest_configure(config):
    config.option.log_cli_level = "INFO"
    config.addinivalue_line("markers", "property: property-based tests")


@pytest.fixture
def mock_server():
    """Fixture providing a fresh MockServer."""
    return MockServer()


@pytest.fixture
def mock_session(mock_server):
    """Fixture providing a started synchronous session on the mock emulator."""
    session = MockSession(MockConfig(), mock_server)
    result = session.start()
    assert result.success, result.fail_reason
    yield session
    session.close()


@pytest_asyncio.fixture
async def async_session(mock_server):
    """Fixture providing a started AsyncSession on the mock emulator."""
    config = MockConfig()
    session = AsyncSession(MockBackend(config, mock_server), config)
    result = await session.start()
    assert result.success, result.fail_reason
    yield session
    await session.close()


@pytest.fixture(autouse=True)
def suppress_logging():
    logger = logging.getLogger()
    old_handlers = logger.handlers[:]
    null_handler = NullHandler()
    logger.addHandler(null_handler)
    yield
    try:
        logger.removeHandler(null_handler)
    except ValueError:
        pass
    for h in logger.handlers[:]:
        if h not in old_handlers:
            logger.removeHandler(h)
