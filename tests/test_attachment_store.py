"""Tests for the ordered attachment collection."""

from __future__ import annotations

import pytest

from models.attachment import Attachment
from models.errors import IntakeCountError
from services.attachment_store import AttachmentStore


def _attachment(name: str) -> Attachment:
    return Attachment(filename=name, base64="QQ==", mime_type="image/png")


def test_append_preserves_order_and_skips_empty_batch() -> None:
    store = AttachmentStore()
    store.append([_attachment("a"), _attachment("b")])
    store.append([])
    store.append([_attachment("c")])

    assert [item.filename for item in store] == ["a", "b", "c"]


def test_remove_middle_keeps_relative_order() -> None:
    first, second, third = _attachment("a"), _attachment("b"), _attachment("c")
    store = AttachmentStore()
    store.append([first, second, third])

    removed = store.remove_at(1)

    assert removed is second
    assert list(store) == [first, third]


def test_remove_last_of_three_keeps_first_two_by_identity() -> None:
    items = [_attachment("a"), _attachment("b"), _attachment("c")]
    store = AttachmentStore()
    store.append(items)

    store.remove_at(2)

    assert len(store) == 2
    assert store[0] is items[0]
    assert store[1] is items[1]


def test_second_removal_of_same_index_is_noop() -> None:
    store = AttachmentStore()
    store.append([_attachment("a"), _attachment("b")])

    store.remove_at(1)
    assert store.remove_at(1) is None
    assert [item.filename for item in store] == ["a"]


@pytest.mark.parametrize("index", [-1, 5, 100])
def test_out_of_range_removal_is_ignored(index: int) -> None:
    store = AttachmentStore()
    store.append([_attachment("a")])

    assert store.remove_at(index) is None
    assert len(store) == 1


def test_duplicates_are_kept() -> None:
    store = AttachmentStore()
    store.append([_attachment("same"), _attachment("same")])

    assert len(store) == 2


def test_capacity_is_enforced() -> None:
    store = AttachmentStore(capacity=2)
    store.append([_attachment("a")])

    with pytest.raises(IntakeCountError):
        store.append([_attachment("b"), _attachment("c")])
    assert len(store) == 1


def test_payload_lists_base64_and_mime_in_order() -> None:
    store = AttachmentStore()
    store.append([
        Attachment(filename="a", base64="AA==", mime_type="image/png"),
        Attachment(filename="b", base64="BB==", mime_type="image/jpeg"),
    ])

    assert store.payload() == [
        {"base64": "AA==", "mimeType": "image/png"},
        {"base64": "BB==", "mimeType": "image/jpeg"},
    ]


def test_preview_url_is_rebuilt_from_payload() -> None:
    attachment = Attachment(filename="xrd.jpg", base64="/9j/AA==", mime_type="image/jpeg", size=4)

    assert attachment.preview_url == "data:image/jpeg;base64,/9j/AA=="
    assert attachment.preview_url.split(",", 1)[1] == attachment.base64
    assert "preview_url" not in vars(attachment)
