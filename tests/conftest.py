import sys
from pathlib import Path

import pytest

# Ensure repo root is on sys.path so `import aliyunclient` works under all pytest import modes.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

FIXED_TIMESTAMP = "2017-07-12T02:42:19Z"
FIXED_NONCE = "45e25e9b-0a6f-4070-8c85-2956eda1b466"


@pytest.fixture
def frozen_request_ids(monkeypatch):
    """Pin timestamp and nonce on a client or auth instance."""

    def _freeze(target):
        monkeypatch.setattr(target, "_get_timestamp", lambda: FIXED_TIMESTAMP)
        monkeypatch.setattr(target, "_get_nonce", lambda: FIXED_NONCE)
        return target

    return _freeze
