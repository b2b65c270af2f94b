from __future__ import annotations

import pytest

from roster_management.storage import InMemoryDocumentStore


@pytest.fixture()
def example_config():
    return {
        "staff": ["Brandon", "Ying Xian", "Derlinder", "Fadzlynn"],
        "tasks": ["EFT", "IPT+SKG", "NC", "FSG+WI"],
        "startDate": "2026-01-05",
        "weeks": 1,
    }


@pytest.fixture()
def store():
    return InMemoryDocumentStore()
