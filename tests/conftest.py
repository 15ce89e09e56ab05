from __future__ import annotations

import sys
from pathlib import Path

import pytest


def pytest_configure():
    # Ensure project root is on sys.path for absolute imports like 'services.mapping'
    root = Path(__file__).resolve().parents[1]
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))


@pytest.fixture(autouse=True)
def _fresh_settings():
    from config.settings import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class StubLLM:
    """Inference double: returns a canned InferenceResult and records every call."""

    def __init__(self, result):
        self.result = result
        self.calls = []

    def infer(self, **kwargs):
        self.calls.append(kwargs)
        return self.result


@pytest.fixture
def stub_llm():
    return StubLLM
