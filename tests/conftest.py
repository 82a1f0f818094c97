"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import logging
import os
from collections.abc import Iterator
from pathlib import Path
from unittest.mock import patch

import pytest


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path) -> Iterator[Path]:
    """Point settings and theme lookups at a temporary directory."""
    config_home = tmp_path / "xdg-config"
    settings_path = config_home / "mini-tmpfiles" / "config.toml"
    with patch.dict(
        os.environ,
        {
            "XDG_CONFIG_HOME": str(config_home),
            "MINI_TMPFILES_CONFIG": str(settings_path),
        },
    ):
        yield settings_path


@pytest.fixture(autouse=True)
def restore_logging() -> Iterator[None]:
    """Undo logging configuration done by CLI invocations."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def sample_config() -> bytes:
    """Sample tmpfiles.d configuration covering the common line types."""
    return b"""# Runtime directory for the demo service
d /run/demo 0755 root root 10d -

f+ /var/log/demo.log 0640 demo adm - -
L /etc/localtime - - - - ../usr/share/zoneinfo/UTC
R! /var/tmp/demo-*
"""


@pytest.fixture
def invalid_config() -> bytes:
    """Configuration with one valid and two invalid lines."""
    return b"""d /run/ok 0755 - - - -
y /run/bad
d relative/path
"""


@pytest.fixture
def config_dir(tmp_path: Path, sample_config: bytes) -> Path:
    """Directory holding a single valid configuration file."""
    directory = tmp_path / "tmpfiles.d"
    directory.mkdir()
    (directory / "demo.conf").write_bytes(sample_config)
    return directory
