"""Shared fixtures."""

from pathlib import Path

import pytest

SAMPLE_CONFIG = """\
Host alpha
    HostName 10.0.0.5
    user root
Host beta
    HostName 10.0.0.6
    user admin
"""


@pytest.fixture
def sample_text() -> str:
    return SAMPLE_CONFIG


@pytest.fixture
def ssh_config(tmp_path: Path) -> Path:
    path = tmp_path / "config"
    path.write_text(SAMPLE_CONFIG)
    return path
