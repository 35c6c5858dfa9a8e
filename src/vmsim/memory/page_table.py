"""Page table — residency, frame assignment, dirty state per virtual page.

Each virtual page has one entry.  A *resident* entry owns exactly one
physical frame; a non-resident entry owns none (``frame is None``).
The table also keeps a per-entry recency timestamp, used only when the
page table runs the LRU replacement policy.

Sizing:
    The table is *declared* with ``virtual_words // physical_frames``
    entries.  For small page sizes that can be fewer entries than there
    are virtual pages, so entries past the declared size are created on
    first lookup (non-resident, clean).  Every addressable page
    therefore always has an entry.

Frame index:
    Alongside the entries the table keeps the inverse mapping, one slot
    per physical frame holding the resident page (or None).  ``map`` and
    ``unmap`` are the only writers of residency, so the two views never
    disagree.  Anything that asks "who lives in frame f?" or "which
    resident page is least recent?" walks the frames, never the entries,
    and costs O(frames) however large the virtual space is.

At creation the first ``physical_frames`` entries are resident with an
identity assignment: page *i* lives in frame *i*.
"""

from collections.abc import Iterator
from dataclasses import dataclass


@dataclass
class PageTableEntry:
    """State of one virtual page.

    Attributes:
        resident: True while the page occupies a physical frame.
        frame: The frame id while resident, otherwise None.
        timestamp: LRU recency stamp (0 = never touched).
        dirty: True once the page was faulted in by a write and still
            owes a disk write if it is ever read back in.

    """

    resident: bool = False
    frame: int | None = None
    timestamp: int = 0
    dirty: bool = False


class PageTable:
    """Page table entries plus the frame index the engine queries."""

    def __init__(self, *, size: int, physical_frames: int) -> None:
        """Create a page table with identity-mapped resident pages.

        Args:
            size: Declared number of entries.
            physical_frames: Number of frames; entries ``0 .. frames-1``
                start resident in the matching frame.

        """
        self._size = size
        self._physical_frames = physical_frames
        self._entries: list[PageTableEntry] = [PageTableEntry() for _ in range(size)]
        self._frames: list[int | None] = [None] * physical_frames
        for frame in range(physical_frames):
            self.map(frame, frame)

    @property
    def size(self) -> int:
        """Return the declared number of entries."""
        return self._size

    @property
    def physical_frames(self) -> int:
        """Return the number of physical frames the table maps onto."""
        return self._physical_frames

    def entry(self, virtual_page: int) -> PageTableEntry:
        """Return the entry for *virtual_page*, creating it if needed."""
        if virtual_page >= len(self._entries):
            missing = virtual_page + 1 - len(self._entries)
            self._entries.extend(PageTableEntry() for _ in range(missing))
        return self._entries[virtual_page]

    # -- Residency ------------------------------------------------------------

    def map(self, virtual_page: int, frame: int) -> None:
        """Make *virtual_page* resident in *frame*.

        Raises:
            ValueError: If another page already occupies *frame*.

        """
        holder = self._frames[frame]
        if holder is not None and holder != virtual_page:
            msg = f"Frame {frame} already holds page {holder}"
            raise ValueError(msg)
        entry = self.entry(virtual_page)
        if entry.frame is not None and entry.frame != frame:
            self._frames[entry.frame] = None
        entry.resident = True
        entry.frame = frame
        self._frames[frame] = virtual_page

    def unmap(self, virtual_page: int) -> None:
        """Take *virtual_page* out of its frame (no-op if not resident)."""
        entry = self.entry(virtual_page)
        if entry.frame is not None:
            self._frames[entry.frame] = None
        entry.resident = False
        entry.frame = None

    def holder_of(self, frame: int) -> int | None:
        """Return the virtual page currently resident in *frame*, if any."""
        if 0 <= frame < self._physical_frames:
            return self._frames[frame]
        return None

    def resident_pages(self) -> dict[int, int]:
        """Return ``{virtual_page: frame}`` for every resident page."""
        return {page: frame for frame, page in enumerate(self._frames) if page is not None}

    # -- RecencyTable protocol (see replacement.py) ---------------------------

    def stamp(self, key: int, timestamp: int) -> None:
        """Record *timestamp* as the recency of virtual page *key*."""
        self.entry(key).timestamp = timestamp

    def candidates(self) -> Iterator[tuple[int, int]]:
        """Yield ``(timestamp, frame)`` for every occupied frame."""
        for frame, page in enumerate(self._frames):
            if page is not None:
                yield self._entries[page].timestamp, frame

    @property
    def capacity(self) -> int:
        """Return the number of victim positions (physical frames)."""
        return self._physical_frames

    def __len__(self) -> int:
        """Return the number of materialised entries."""
        return len(self._entries)

    def __getitem__(self, virtual_page: int) -> PageTableEntry:
        """Return the entry for *virtual_page*."""
        return self.entry(virtual_page)
