"""Event log — why the statistics counters ended up where they did.

The counters say *how many* misses, faults and disk writes a run cost;
the event log says *which* access caused each one.  Every entry is
stamped with the sequence number of the access that produced it, so a
single access can be replayed in isolation::

    #3 tlb    miss on page 4, reusing slot 1
    #3 disk   page 4 dirtied by write fault
    #3 pager  evicted page 2 from frame 0
    #3 pager  fault on page 4, loaded into frame 0

Sources are the four parts of the simulator that can cost something:
the TLB, the pager (fault handling and eviction), the disk, and the
simulator itself (creation and teardown).  TLB misses are logged at
DEBUG, everything else at INFO; TLB hits are silent.
"""

from collections import Counter
from dataclasses import dataclass
from enum import IntEnum, StrEnum


class LogLevel(IntEnum):
    """Verbosity of an event; higher is more significant."""

    DEBUG = 0
    INFO = 1


class EventSource(StrEnum):
    """The simulator component an event came from."""

    VM = "vm"
    TLB = "tlb"
    PAGER = "pager"
    DISK = "disk"


@dataclass(frozen=True)
class Event:
    """One thing that happened during a run.

    Attributes:
        access: Sequence number of the access that caused it (0 for
            events outside any access, such as creation).
        source: Which component produced it.
        message: Human-readable description.
        level: DEBUG for routine TLB traffic, INFO otherwise.

    """

    access: int
    source: EventSource
    message: str
    level: LogLevel = LogLevel.INFO

    def __str__(self) -> str:
        """Format as ``#access source message``."""
        return f"#{self.access} {self.source:<6} {self.message}"


class EventLog:
    """Append-only record of one engine's events."""

    def __init__(self) -> None:
        """Create an empty log."""
        self._events: list[Event] = []

    def record(
        self,
        source: EventSource,
        message: str,
        *,
        access: int = 0,
        level: LogLevel = LogLevel.INFO,
    ) -> None:
        """Append an event caused by access number *access*."""
        self._events.append(Event(access=access, source=source, message=message, level=level))

    @property
    def events(self) -> list[Event]:
        """Return every event in the order it happened."""
        return list(self._events)

    def select(
        self,
        *,
        source: EventSource | None = None,
        access: int | None = None,
        min_level: LogLevel = LogLevel.DEBUG,
    ) -> list[Event]:
        """Return the events matching every given criterion.

        Args:
            source: Keep only events from this component.
            access: Keep only events caused by this access number.
            min_level: Drop events below this level.

        """
        return [
            event
            for event in self._events
            if event.level >= min_level
            and (source is None or event.source is source)
            and (access is None or event.access == access)
        ]

    def summary(self) -> dict[EventSource, int]:
        """Return the number of events per source, in source order."""
        counts = Counter(event.source for event in self._events)
        return {source: counts[source] for source in EventSource}

    def __len__(self) -> int:
        """Return the number of events recorded."""
        return len(self._events)
