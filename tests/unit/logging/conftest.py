import pytest

from mudmonitor.logging.config.logging_config import LoggingConfig
from mudmonitor.logging.models import Entry, LogLevel


@pytest.fixture(autouse=True)
def configure_log_level():
    config = LoggingConfig()
    config.update(log_level="debug")
    yield
    config.update(log_level="error")


@pytest.fixture
def temp_log_directory(tmp_path) -> str:
    return str(tmp_path)


@pytest.fixture
def sample_entry() -> Entry:
    return Entry(
        message="Test log message",
        level=LogLevel.INFO,
    )
