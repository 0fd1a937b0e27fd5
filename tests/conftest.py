"""Shared test fixtures for InsightHub tests."""

import sys
from pathlib import Path

import pytest

# Ensure the repository root is importable (pkg/, insighthub_server.py)
sys.path.insert(0, str(Path(__file__).parent.parent))

from pkg.insighthub.store import JsonStore


@pytest.fixture
def data_file(tmp_path):
    return tmp_path / "data.json"


@pytest.fixture
def store(data_file):
    return JsonStore(str(data_file))


@pytest.fixture
def client(data_file, monkeypatch):
    monkeypatch.setenv("INSIGHTHUB_DATA", str(data_file))
    import insighthub_server
    insighthub_server.app.config["TESTING"] = True
    with insighthub_server.app.test_client() as c:
        yield c
