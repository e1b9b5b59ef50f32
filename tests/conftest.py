"""Shared pytest fixtures for the CarMonitor test suite."""
from datetime import date

import pytest

from models import init_data_file

TODAY = date(2025, 3, 12)


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def data_file(tmp_path):
    """A fresh data file seeded with the default reminder types."""
    path = tmp_path / "carmonitor.yaml"
    init_data_file(path)
    return path
