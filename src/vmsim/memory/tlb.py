"""Translation lookaside buffer — a tiny cache of page → frame mappings.

The TLB is checked before the page table on every access.  It has a
fixed number of slots and every slot always holds *some* mapping: at
creation slot *i* caches page *i* → frame *i*.  A miss never fills an
empty slot — it overwrites the current victim slot.
"""

from collections.abc import Iterator
from dataclasses import dataclass


@dataclass
class TLBEntry:
    """One TLB slot.

    Attributes:
        page: The cached virtual page number.
        frame: The physical frame that page maps to.
        timestamp: LRU recency stamp (0 = never touched).

    """

    page: int
    frame: int
    timestamp: int = 0


class TLB:
    """Fixed-capacity translation cache."""

    def __init__(self, *, capacity: int) -> None:
        """Create a TLB seeded with the identity mapping."""
        self._slots: list[TLBEntry] = [TLBEntry(page=i, frame=i) for i in range(capacity)]

    def lookup(self, virtual_page: int) -> int | None:
        """Return the slot index caching *virtual_page*, or None on a miss."""
        for index, slot in enumerate(self._slots):
            if slot.page == virtual_page:
                return index
        return None

    def install(self, slot: int, *, page: int, frame: int) -> None:
        """Overwrite *slot* with a new mapping."""
        entry = self._slots[slot]
        entry.page = page
        entry.frame = frame

    def mappings(self) -> list[tuple[int, int]]:
        """Return ``(page, frame)`` for each slot, in slot order."""
        return [(slot.page, slot.frame) for slot in self._slots]

    # -- RecencyTable protocol (see replacement.py) ---------------------------

    def stamp(self, key: int, timestamp: int) -> None:
        """Record *timestamp* as the recency of slot *key*."""
        self._slots[key].timestamp = timestamp

    def candidates(self) -> Iterator[tuple[int, int]]:
        """Yield ``(timestamp, slot)`` for every slot."""
        for index, slot in enumerate(self._slots):
            yield slot.timestamp, index

    @property
    def capacity(self) -> int:
        """Return the number of slots."""
        return len(self._slots)

    def __len__(self) -> int:
        """Return the number of slots."""
        return len(self._slots)

    def __getitem__(self, slot: int) -> TLBEntry:
        """Return the entry in *slot*."""
        return self._slots[slot]
