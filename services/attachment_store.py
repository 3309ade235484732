"""Ordered, capacity-bounded collection of accepted attachments."""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Optional

from models.attachment import Attachment
from models.errors import IntakeCountError
from utils.media_validation import MAX_ATTACHMENTS


class AttachmentStore:
    """Hold attachments in insertion order."""

    def __init__(self, capacity: int = MAX_ATTACHMENTS) -> None:
        self.capacity = capacity
        self._items: List[Attachment] = []

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Attachment]:
        return iter(list(self._items))

    def __getitem__(self, index: int) -> Attachment:
        return self._items[index]

    def append(self, batch: Iterable[Attachment]) -> None:
        """Add a batch to the end, keeping the batch's order."""
        items = list(batch)
        if not items:
            return
        if len(self._items) + len(items) > self.capacity:
            raise IntakeCountError(f"Maximum {self.capacity} files allowed.")
        self._items.extend(items)

    def remove_at(self, index: int) -> Optional[Attachment]:
        """Remove the attachment at `index`; out-of-range indices are ignored."""
        if index < 0 or index >= len(self._items):
            return None
        return self._items.pop(index)

    def payload(self) -> List[Dict[str, str]]:
        """Return the gateway image list in collection order."""
        return [item.to_payload() for item in self._items]
