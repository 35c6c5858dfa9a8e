"""Victim selection — which TLB slot or physical frame to reuse next.

Both the TLB and the page table keep a **victim pointer**: the target
of the *next* replacement, computed ahead of time so a miss or fault
never has to search.  How the pointer moves depends on the policy
(Strategy pattern, one selector per table):

    - **Round-robin** — a cyclic cursor.  Each replacement uses the
      current position and then advances it by one, wrapping at the
      table's capacity.  Accesses that replace nothing leave it alone.
    - **LRU** — every access stamps the touched entry with the next
      value of a per-table clock; the victim is the candidate with the
      smallest stamp.  Ties go to the smallest victim id (slot index for
      the TLB, frame id for the page table) so runs are reproducible.

Selectors talk to their table through the small ``RecencyTable``
protocol, so the same two classes serve the TLB and the page table.
"""

from collections.abc import Iterator
from typing import Protocol

from vmsim.config import ReplacementPolicy

# ---------------------------------------------------------------------------
# Protocols
# ---------------------------------------------------------------------------


class RecencyTable(Protocol):
    """What a selector needs from the table it governs."""

    @property
    def capacity(self) -> int:
        """Return the number of victim positions (slots or frames)."""
        ...  # pragma: no cover

    def stamp(self, key: int, timestamp: int) -> None:
        """Record the recency *timestamp* for the entry named by *key*."""
        ...  # pragma: no cover

    def candidates(self) -> Iterator[tuple[int, int]]:
        """Yield ``(timestamp, victim_id)`` for each eligible victim."""
        ...  # pragma: no cover


class VictimSelector(Protocol):
    """Interface shared by the replacement policies."""

    @property
    def victim(self) -> int:
        """Return the precomputed next eviction target."""
        ...  # pragma: no cover

    def touch(self, key: int) -> None:
        """Record an access to *key* that replaced nothing."""
        ...  # pragma: no cover

    def replaced(self, key: int) -> None:
        """Record that the current victim was reused for *key*."""
        ...  # pragma: no cover


# ---------------------------------------------------------------------------
# Round-robin
# ---------------------------------------------------------------------------


class RoundRobinSelector:
    """Cyclic victim pointer — oldest replacement is reused first."""

    def __init__(self, table: RecencyTable) -> None:
        """Create a selector whose first victim is position 0."""
        self._capacity = table.capacity
        self._victim = 0

    @property
    def victim(self) -> int:
        """Return the next position to overwrite."""
        return self._victim

    def touch(self, key: int) -> None:
        """Round-robin ignores plain accesses."""

    def replaced(self, key: int) -> None:
        """Advance the pointer past the position just reused."""
        self._victim = (self._victim + 1) % self._capacity


# ---------------------------------------------------------------------------
# LRU
# ---------------------------------------------------------------------------


class LRUSelector:
    """Least recently used — evict the candidate with the oldest stamp.

    The selector owns the table's logical clock.  Stamps start at zero
    for every entry, so before any access the victim is simply the
    lowest id.
    """

    def __init__(self, table: RecencyTable) -> None:
        """Create a selector over *table* with the clock at zero."""
        self._table = table
        self._clock = 0
        self._victim = 0

    @property
    def victim(self) -> int:
        """Return the candidate with the smallest stamp."""
        return self._victim

    @property
    def clock(self) -> int:
        """Return the last timestamp handed out."""
        return self._clock

    def touch(self, key: int) -> None:
        """Stamp *key* as most recently used and recompute the victim."""
        self._clock += 1
        self._table.stamp(key, self._clock)
        self.recompute()

    def replaced(self, key: int) -> None:
        """A replacement is an access to the new occupant."""
        self.touch(key)

    def recompute(self) -> None:
        """Rescan the table for the global minimum stamp.

        Tuples compare stamp first, then victim id, which gives the
        lowest-id tie-break for free.
        """
        best = min(self._table.candidates(), default=None)
        if best is not None:
            self._victim = best[1]


def make_selector(policy: ReplacementPolicy | int, table: RecencyTable) -> VictimSelector:
    """Return the selector implementing *policy* over *table*."""
    if ReplacementPolicy.parse(policy) is ReplacementPolicy.LRU:
        return LRUSelector(table)
    return RoundRobinSelector(table)
