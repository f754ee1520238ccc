"""Test configuration ensuring local package import when editable install not active.

If users invoke `pytest` outside the project's virtualenv, we still add the project
root to sys.path so `import review_app` works.
"""

from __future__ import annotations

import copy
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from review_app.core.store import DomainStore  # noqa: E402


class MemoryGateway:
    """Dict-backed gateway; ``fail_saves`` simulates an unreachable backend."""

    def __init__(self, data=None):
        self.data = dict(data or {})
        self.fail_saves = False
        self.save_calls = 0

    def load(self, collection):
        value = self.data.get(collection)
        return copy.deepcopy(value)

    def save(self, collection, value):
        self.save_calls += 1
        if self.fail_saves:
            return False
        self.data[collection] = copy.deepcopy(value)
        return True


@pytest.fixture
def gateway():
    return MemoryGateway()


@pytest.fixture
def store(gateway):
    return DomainStore(gateway)
