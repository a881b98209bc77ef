from __future__ import annotations

import json
from datetime import date
from pathlib import Path
from typing import TYPE_CHECKING, Any

import pytest

from thesisync.config import ResilienceConfig, RetryPolicy

if TYPE_CHECKING:
    from collections.abc import Callable

DATA_DIR = Path(__file__).resolve().parent / "data"


@pytest.fixture(scope="session")
def load_pure_payload() -> Callable[[str], dict[str, Any]]:
    def load(name: str) -> dict[str, Any]:
        path = DATA_DIR / "pure" / f"{name}.json"
        with path.open(encoding="utf-8") as handle:
            return json.load(handle)

    return load


@pytest.fixture
def today() -> date:
    return date(2025, 3, 14)


@pytest.fixture
def fast_resilience() -> ResilienceConfig:
    """No rate limit and zero backoff so retry paths run instantly."""

    return ResilienceConfig(
        name="test",
        base_url="https://pure.example.test/ws/api/524/",
        retry=RetryPolicy(total=2, backoff_factor=0.0, backoff_jitter=0.0),
    )
