"""Shared pytest configuration and fixtures for tests."""

import sys
import io
from datetime import datetime, timedelta
from pathlib import Path

import pytest

# Fix Windows console encoding
if sys.platform == "win32":
    sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding='utf-8')
    sys.stderr = io.TextIOWrapper(sys.stderr.buffer, encoding='utf-8')

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from todopro.core.models import Task  # noqa: E402


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self, start: datetime):
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> None:
        self.current += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 3, 1, 12, 0, 0))


@pytest.fixture
def make_task():
    """Factory for tasks with sensible defaults; ids count up from 1."""
    counter = {"next": 1}

    def _make(**fields) -> Task:
        if "id" not in fields:
            fields["id"] = str(counter["next"])
            counter["next"] += 1
        fields.setdefault("title", f"Task {fields['id']}")
        fields.setdefault("created_at", "2024-03-01T09:00:00")
        return Task(**fields)

    return _make
