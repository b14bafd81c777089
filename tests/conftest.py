"""Pytest configuration: handler and layer directories on sys.path."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Dict

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
for _path in (PROJECT_ROOT / "src", PROJECT_ROOT / "layers" / "loop" / "python"):
    if str(_path) not in sys.path:
        sys.path.insert(0, str(_path))


@pytest.fixture
def loop_env(monkeypatch: pytest.MonkeyPatch) -> Dict[str, str]:
    """Minimal valid environment for load_settings()."""
    env = {
        "API_KEY": "loop_test_token_1234",
        "SHIPMENTS_START_DATE": "2024-02-01",
        "SHIPMENTS_END_DATE": "2024-04-30",
    }
    for name in ("LOOP_API_BASE_URL", "HTTP_TIMEOUT", "SHIPMENTS_LIMIT", "ENRICH_MAX_WORKERS", "KMS_KEY_ARN", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    for name, value in env.items():
        monkeypatch.setenv(name, value)
    return env
