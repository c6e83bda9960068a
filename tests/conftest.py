"""
Pytest configuration and shared fixtures.
"""

import pytest
import json
import requests
from pathlib import Path
from typing import Dict, Any, List

from addressbook.logger import get_logger, reset_logger
from addressbook.lookup import AddressLookupError

INVALID_JSON = object()


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, status_code: int = 200, payload: Any = None):
        self.status_code = status_code
        self._payload = payload

    def json(self):
        if self._payload is INVALID_JSON:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._payload


class FakeSession:
    """Returns (or raises) queued items in order and records every call."""

    def __init__(self, *items):
        self.items = list(items)
        self.calls: List[Dict[str, Any]] = []
        self.closed = False

    def close(self):
        self.closed = True

    def get(self, url, params=None, timeout=None):
        self.calls.append({"url": url, "params": params, "timeout": timeout})
        item = self.items.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


class EncodingSession(FakeSession):
    """Builds the real request URL before answering, as requests.Session.get does."""

    def get(self, url, params=None, timeout=None):
        requests.Request("GET", url, params=params).prepare()
        return super().get(url, params=params, timeout=timeout)


class StubLookup:
    """Lookup double for workflow tests: returns details or raises a lookup error."""

    def __init__(self, details=None, error: str = None):
        self.details = details if details is not None else []
        self.error = error
        self.calls = []

    def get_addresses(self, postcode: str, house_number: str):
        self.calls.append((postcode, house_number))
        if self.error is not None:
            raise AddressLookupError(self.error)
        return self.details


@pytest.fixture(autouse=True)
def quiet_logger(tmp_path):
    """Route the global logger to a temp dir without console output."""
    reset_logger()
    logger = get_logger(log_dir=tmp_path / "logs", enable_console=False)
    yield logger
    reset_logger()


@pytest.fixture
def sample_details() -> List[Dict[str, Any]]:
    """Raw ``details`` entries as returned by the lookup endpoint."""
    return [
        {
            "id": "a1",
            "postcode": "1000AA",
            "street": "Main",
            "city": "Amsterdam",
            "houseNumberAddition": "",
        },
        {
            "id": "a2",
            "postcode": "1000AA",
            "street": "Main",
            "city": "Amsterdam",
            "houseNumberAddition": "B",
        },
    ]


@pytest.fixture
def stored_record() -> Dict[str, Any]:
    return {
        "id": "a1",
        "postcode": "1000AA",
        "street": "Main",
        "city": "Amsterdam",
        "house_number": "1",
        "house_number_addition": "",
        "first_name": "Ada",
        "last_name": "Lovelace",
    }


@pytest.fixture
def populated_book(tmp_path, stored_record) -> Path:
    """Create an address book file with two saved records."""
    path = tmp_path / "book.json"
    second = dict(stored_record, id="b7", street="Canal", first_name="Alan", last_name="Turing")
    path.write_text(json.dumps({"addresses": [stored_record, second]}, indent=2))
    return path
