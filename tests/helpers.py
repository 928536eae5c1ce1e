"""Test helpers (small, reusable doubles).

Keep this file tiny and purpose-built: it exists to prevent test suites from
growing lots of one-off service classes as coverage expands.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import json
from pathlib import Path
from typing import Any

from cogito.service import Auth, Serializable

DATA_DIR = Path(__file__).parent / "data"


def load_data(name: str) -> Any:
    """Load a JSON fixture from ``tests/data``."""
    return json.loads((DATA_DIR / f"{name}.json").read_text(encoding="utf-8"))


@dataclass
class RecordedCall:
    uri: str
    auth: Auth
    data: Serializable
    response_type: Any


@dataclass
class RecordingService:
    """HttpPost double that replies with a canned payload and records calls."""

    payload: Any
    calls: list[RecordedCall] = field(default_factory=list)
    closed: bool = False

    async def post(
        self,
        uri: str,
        auth: Auth,
        data: Serializable,
        response_type: Any,
    ) -> Any:
        self.calls.append(RecordedCall(uri, auth, data, response_type))
        return response_type.from_payload(self.payload)

    async def aclose(self) -> None:
        self.closed = True


@dataclass
class FailingService:
    """HttpPost double that raises a scripted exception."""

    error: BaseException
    attempts: int = 0

    async def post(
        self,
        uri: str,
        auth: Auth,
        data: Serializable,
        response_type: Any,
    ) -> Any:
        del uri, auth, data, response_type
        self.attempts += 1
        raise self.error
