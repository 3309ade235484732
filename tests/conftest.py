"""Shared pytest fixtures and fakes."""

from __future__ import annotations

import asyncio
import base64
import sys
from pathlib import Path
from types import SimpleNamespace
from typing import Dict, List, Optional, Sequence

import pytest


ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from models.attachment import IntakeFile  # noqa: E402
from models.session_models import GatewayResult  # noqa: E402


PNG_1X1_BYTES = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR42mP8/x8AAwMCAO7+fJ8AAAAASUVORK5CYII="
)


def make_intake_file(
    name: str = "figure.png",
    data: bytes = PNG_1X1_BYTES,
    mime_type: str = "image/png",
    size: Optional[int] = None,
    delay: float = 0.0,
    error: Optional[Exception] = None,
) -> IntakeFile:
    """Build a candidate whose read completes after `delay` seconds or raises `error`."""

    async def read() -> bytes:
        if delay:
            await asyncio.sleep(delay)
        if error is not None:
            raise error
        return data

    return IntakeFile(name=name, size=len(data) if size is None else size, mime_type=mime_type, read=read)


class FakeGateway:
    """Gateway double returning a fixed text or raising a fixed error."""

    def __init__(self, text: str = "### Analysis\nLooks fine.", error: Optional[Exception] = None) -> None:
        self.text = text
        self.error = error
        self.calls: List[Dict] = []

    async def analyze(self, notes: str, images: Sequence[Dict[str, str]]) -> GatewayResult:
        self.calls.append({"notes": notes, "images": list(images)})
        if self.error is not None:
            raise self.error
        return GatewayResult(text=self.text, usage={"input_tokens": 10, "output_tokens": 20}, latency=0.01)


class _FakeResponses:
    def __init__(self, response=None, error: Optional[Exception] = None) -> None:
        self.response = response
        self.error = error
        self.calls: List[Dict] = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.response


class FakeOpenAIClient:
    """Stands in for AsyncOpenAI; only `responses.create` is used."""

    def __init__(self, output_text: str = "### Analysis", error: Optional[Exception] = None) -> None:
        response = SimpleNamespace(
            output_text=output_text,
            output=[],
            usage=SimpleNamespace(input_tokens=120, output_tokens=45),
        )
        self.responses = _FakeResponses(response=response, error=error)


@pytest.fixture
def png_bytes() -> bytes:
    return PNG_1X1_BYTES


@pytest.fixture
def fake_gateway() -> FakeGateway:
    return FakeGateway()
