"""
Salary Service Tests - Test Configuration.

Provides fixtures for a record store on a temporary CSV file and a
FastAPI test client serving it.
"""

from pathlib import Path
from typing import Callable, Iterator

import pytest
from fastapi.testclient import TestClient

from salary_service.app import create_app
from salary_service.config import Settings
from salary_service.store import RecordStore


@pytest.fixture
def data_file(tmp_path: Path) -> Path:
    """Path of a not-yet-existing CSV file in a temporary directory."""
    return tmp_path / "salary_entries.csv"


@pytest.fixture
def test_settings(data_file: Path) -> Settings:
    """Settings pointing at the temporary data file."""
    return Settings(DATA_FILE=str(data_file), CURRENCY="NOK", LOG_LEVEL="DEBUG")


@pytest.fixture
def store(data_file: Path) -> RecordStore:
    """Empty record store backed by the temporary data file."""
    return RecordStore(data_file, currency="NOK")


@pytest.fixture
def client(test_settings: Settings, store: RecordStore) -> Iterator[TestClient]:
    """
    Test client for an application serving ``store``.

    Used as a context manager so the lifespan hook loads the data file.
    """
    app = create_app(test_settings, store)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def write_rows(data_file: Path) -> Callable[..., None]:
    """Return a helper writing raw CSV lines to the data file."""

    def _write(*lines: str) -> None:
        data_file.write_text("".join(f"{line}\n" for line in lines), encoding="utf-8")

    return _write
