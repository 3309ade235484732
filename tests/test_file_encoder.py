"""Tests for reading uploads into attachments."""

from __future__ import annotations

import asyncio
import base64

import pytest

from conftest import make_intake_file
from models.errors import IntakeReadError
from services.file_encoder import FileEncoder, split_data_url, to_data_url


def test_encode_builds_data_url_and_payload(png_bytes: bytes) -> None:
    attachment = asyncio.run(FileEncoder().encode(make_intake_file(name="xrd.png", data=png_bytes)))

    assert attachment.filename == "xrd.png"
    assert attachment.mime_type == "image/png"
    assert attachment.preview_url.startswith("data:image/png;base64,")
    assert attachment.base64 == attachment.preview_url.split(",", 1)[1]
    assert attachment.size == len(png_bytes)


def test_stored_payload_decodes_to_original_bytes() -> None:
    raw = bytes(range(256)) * 3
    attachment = asyncio.run(FileEncoder().encode(make_intake_file(data=raw, mime_type="image/jpeg")))

    assert base64.b64decode(attachment.base64) == raw
    assert attachment.mime_type == "image/jpeg"


def test_batch_keeps_selection_order_despite_completion_order() -> None:
    candidates = [
        make_intake_file(name="first.png", data=b"1", delay=0.03),
        make_intake_file(name="second.png", data=b"2", delay=0.01),
        make_intake_file(name="third.png", data=b"3", delay=0.0),
    ]

    attachments = asyncio.run(FileEncoder().encode_batch(candidates))

    assert [a.filename for a in attachments] == ["first.png", "second.png", "third.png"]
    assert [base64.b64decode(a.base64) for a in attachments] == [b"1", b"2", b"3"]


def test_read_failure_fails_the_whole_batch() -> None:
    candidates = [
        make_intake_file(name="good.png"),
        make_intake_file(name="broken.png", error=OSError("disk gone"), delay=0.01),
    ]

    with pytest.raises(IntakeReadError, match="Failed to read file broken.png"):
        asyncio.run(FileEncoder().encode_batch(candidates))


def test_empty_batch_returns_nothing() -> None:
    assert asyncio.run(FileEncoder().encode_batch([])) == []


def test_split_data_url_uses_first_comma() -> None:
    assert split_data_url("data:image/png;base64,AAA,BBB") == "AAA,BBB"
    assert split_data_url(to_data_url(b"x", "image/gif")) == "eA=="
    with pytest.raises(ValueError):
        split_data_url("no-separator")
