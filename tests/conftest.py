"""Shared fixtures for docstruct tests."""

import sys
from pathlib import Path

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from docstruct.cache import CallCache
from fakes import FakeChatProvider


@pytest.fixture
def cache(tmp_path):
    call_cache = CallCache.open_sync(tmp_path / "doc.docstruct.cache")
    yield call_cache
    call_cache.close()


@pytest.fixture
def fake_chat():
    return FakeChatProvider()
