# tests/conftest.py

from __future__ import annotations

from collections.abc import Iterator

import pytest

from app import App
from storage import Storage


@pytest.fixture()
def storage() -> Iterator[Storage]:
    """In-memory database with the schema in place."""
    s = Storage(":memory:")
    s.ensure_schema()
    yield s
    s.close()


@pytest.fixture()
def app(storage: Storage) -> App:
    return App.load(storage)
