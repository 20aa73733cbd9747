"""
Pytest configuration and fixtures for object-configure tests.
"""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path
from typing import Generator

import pytest

from object_configure.config.settings import get_settings


@pytest.fixture(autouse=True)
def reset_state() -> Generator[None, None, None]:
    """Clear cached settings and package log handlers around each test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()

    package_logger = logging.getLogger("object_configure")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.setLevel(logging.NOTSET)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def yaml_config(temp_dir: Path) -> Path:
    """Create a YAML configuration file with a My__Dummy section."""
    config_file = temp_dir / "app.yaml"
    config_file.write_text(
        "My__Dummy:\n"
        "  timeout: 30\n"
        "  retries: 2\n"
        "  database:\n"
        "    host: db.example.com\n"
        "  logger:\n"
        "    level: debug\n"
        "Other__Class:\n"
        "  timeout: 99\n"
    )
    return config_file


@pytest.fixture
def ini_config(temp_dir: Path) -> Path:
    """Create an INI configuration file with dotted option names."""
    config_file = temp_dir / "local.conf"
    config_file.write_text(
        "[My__Dummy]\n"
        "retries = 3\n"
        "logger.level = info\n"
    )
    return config_file


@pytest.fixture
def json_config(temp_dir: Path) -> Path:
    """Create a JSON configuration file."""
    config_file = temp_dir / "app.json"
    config_file.write_text('{"My__Dummy": {"timeout": 45, "tags": ["a", "b"]}}')
    return config_file


# Markers for test categorization
def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest markers."""
    config.addinivalue_line("markers", "integration: marks integration tests")
    config.addinivalue_line("markers", "syslog: marks tests that open a syslog handler")
