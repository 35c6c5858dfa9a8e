"""Translation engine — TLB, page table, replacement, and accounting.

The engine is the simulated MMU plus the kernel's page fault handler.
Every read or write goes through the same pipeline:

    1. **Split** the address: ``page = address >> offset_bits``.
    2. **TLB lookup.**  A hit costs nothing — only the TLB's recency
       is refreshed (under LRU).  The page table is not consulted.
    3. **TLB miss.**  Count it, and claim the TLB victim slot for the
       new page.
    4. **Page table lookup.**
         - *Resident* (soft miss): copy the frame into the TLB slot and
           refresh the page's recency.
         - *Not resident* (page fault): count it, evict whichever page
           occupies the page table's victim frame, and move the faulting
           page into that frame.
    5. **Touch the backing store** at the raw address.

Disk-write accounting:
    - A fault on a **write** always costs one disk write and marks the
      page dirty.
    - A fault on a **read** costs one disk write only if the page is
      already dirty — pulling a previously written page back in.
    - Evicting a page clears its dirty flag only when the eviction was
      caused by a write fault.

Victim pointers are recomputed after every mutation of the table they
govern, so the *next* miss or fault already knows its target.

The engine never moves data between frames.  Frames are bookkeeping;
values always live at their virtual address in the backing store.
"""

from dataclasses import dataclass
from enum import StrEnum

from vmsim.config import ReplacementPolicy, VMConfig
from vmsim.events import EventLog, EventSource, LogLevel
from vmsim.memory.page_table import PageTable, PageTableEntry
from vmsim.memory.replacement import VictimSelector, make_selector
from vmsim.memory.store import BackingStore, Word
from vmsim.memory.tlb import TLB
from vmsim.stats import Statistics


class AccessOutcome(StrEnum):
    """How an address was resolved."""

    TLB_HIT = "tlb hit"
    TLB_MISS = "tlb miss"
    PAGE_FAULT = "page fault"


@dataclass(frozen=True)
class Translation:
    """Result of resolving one address.

    Attributes:
        address: The virtual address that was accessed.
        page: The virtual page number it belongs to.
        frame: The physical frame the page occupies after the access.
        outcome: Which path through the pipeline was taken.

    """

    address: int
    page: int
    frame: int
    outcome: AccessOutcome


@dataclass
class _Tables:
    """Everything the engine allocates at creation and drops on destroy."""

    store: BackingStore
    page_table: PageTable
    tlb: TLB
    page_selector: VictimSelector
    tlb_selector: VictimSelector


class TranslationEngine:
    """A self-contained virtual memory simulator.

    Each instance owns its configuration, tables, counters, and log;
    any number of engines can run side by side.
    """

    def __init__(self, config: VMConfig) -> None:
        """Validate *config* and allocate every table.

        Raises:
            ConfigError: If the configuration violates an invariant.

        """
        config.validate()
        self._config = config
        self._page_lru = ReplacementPolicy.parse(config.page_policy) is ReplacementPolicy.LRU
        self._offset_bits = config.page_offset_bits
        self._stats = Statistics()
        self._events = EventLog()
        self._accesses = 0

        page_table = PageTable(size=config.page_table_size, physical_frames=config.physical_frames)
        tlb = TLB(capacity=config.tlb_entries)
        self._tables: _Tables | None = _Tables(
            store=BackingStore(config.total_words),
            page_table=page_table,
            tlb=tlb,
            page_selector=make_selector(config.page_policy, page_table),
            tlb_selector=make_selector(config.tlb_policy, tlb),
        )
        self._record(
            EventSource.VM,
            f"created: {config.virtual_pages} pages x {config.page_size} words, "
            f"{config.physical_frames} frames, {config.tlb_entries} TLB entries",
        )

    @classmethod
    def create(cls, config: VMConfig) -> "TranslationEngine":
        """Return a new engine for *config* (raises ConfigError if invalid)."""
        return cls(config)

    # -- Introspection --------------------------------------------------------

    @property
    def config(self) -> VMConfig:
        """Return the configuration this engine was built from."""
        return self._config

    @property
    def events(self) -> EventLog:
        """Return the log of misses, faults, evictions and disk writes."""
        return self._events

    @property
    def counters(self) -> Statistics:
        """Return the live statistics counters."""
        return self._stats

    @property
    def page_table(self) -> PageTable:
        """Return the page table."""
        return self._open().page_table

    @property
    def tlb(self) -> TLB:
        """Return the TLB."""
        return self._open().tlb

    @property
    def page_victim(self) -> int:
        """Return the frame the next page fault will reuse."""
        return self._open().page_selector.victim

    @property
    def tlb_victim(self) -> int:
        """Return the TLB slot the next miss will overwrite."""
        return self._open().tlb_selector.victim

    @property
    def closed(self) -> bool:
        """Return True once ``destroy()`` has been called."""
        return self._tables is None

    def statistics(self) -> tuple[int, int, int]:
        """Return ``(page_faults, tlb_misses, disk_writes)``."""
        return self._stats.as_tuple()

    # -- Translation ----------------------------------------------------------

    def translate(self, address: int, *, write: bool = False) -> Translation:
        """Resolve *address*, updating tables, pointers, and counters.

        This is the single primitive behind every typed read and write.
        It does not touch the backing store.

        Args:
            address: Virtual address to resolve.
            write: True if the access is a store (affects dirty tracking).

        Returns:
            The page, frame, and path taken.

        Raises:
            AddressError: If the address is outside the virtual space.
            RuntimeError: If the engine has been destroyed.

        """
        tables = self._open()
        tables.store.check(address)
        self._accesses += 1
        page = address >> self._offset_bits

        slot = tables.tlb.lookup(page)
        if slot is not None:
            tables.tlb_selector.touch(slot)
            return Translation(address, page, tables.tlb[slot].frame, AccessOutcome.TLB_HIT)

        self._stats.tlb_misses += 1
        slot = tables.tlb_selector.victim
        self._record(EventSource.TLB, f"miss on page {page}, reusing slot {slot}", level=LogLevel.DEBUG)

        entry = tables.page_table.entry(page)
        if entry.resident and entry.frame is not None:
            frame = entry.frame
            outcome = AccessOutcome.TLB_MISS
            tables.page_selector.touch(page)
        else:
            frame = self._fault(tables, page, entry, write=write)
            outcome = AccessOutcome.PAGE_FAULT

        tables.tlb.install(slot, page=page, frame=frame)
        tables.tlb_selector.replaced(slot)
        return Translation(address, page, frame, outcome)

    def _fault(self, tables: _Tables, page: int, entry: PageTableEntry, *, write: bool) -> int:
        """Bring *page* into the victim frame and return that frame."""
        self._stats.page_faults += 1
        if write:
            self._stats.disk_writes += 1
            entry.dirty = True
            self._record(EventSource.DISK, f"page {page} dirtied by write fault")
        elif entry.dirty:
            self._stats.disk_writes += 1
            self._record(EventSource.DISK, f"dirty page {page} read back in")

        frame = tables.page_selector.victim
        holder = tables.page_table.holder_of(frame)
        if holder is not None:
            self._evict(tables, holder, frame, write=write)

        tables.page_table.map(page, frame)
        tables.page_selector.replaced(page)
        self._record(EventSource.PAGER, f"fault on page {page}, loaded into frame {frame}")
        return frame

    def _evict(self, tables: _Tables, page: int, frame: int, *, write: bool) -> None:
        """Take *page* out of *frame*."""
        victim = tables.page_table.entry(page)
        if write:
            victim.dirty = False
        if self._page_lru:
            victim.timestamp = 0
        tables.page_table.unmap(page)
        self._record(EventSource.PAGER, f"evicted page {page} from frame {frame}")

    # -- Data access ----------------------------------------------------------

    def access(self, address: int, value: Word | None = None, *, write: bool = False) -> tuple[Translation, Word]:
        """Translate *address*, then load or store the backing word.

        Args:
            address: Virtual address to access.
            value: The word to store (required when *write* is True).
            write: True for a store, False for a load.

        Returns:
            The translation and the word read or written.

        Raises:
            ValueError: If *write* is True and no value is given.

        """
        if write and value is None:
            msg = "A write needs a value"
            raise ValueError(msg)
        translation = self.translate(address, write=write)
        store = self._open().store
        if value is not None and write:
            store.store(address, value)
            return translation, value
        return translation, store.load(address)

    def read(self, address: int) -> Word:
        """Translate *address* and return the stored word."""
        return self.access(address)[1]

    def write(self, address: int, value: Word) -> None:
        """Translate *address* as a store and overwrite the word."""
        self.access(address, value, write=True)

    def read_int(self, address: int) -> int:
        """Read the word at *address* as an integer."""
        return int(self.read(address))

    def read_float(self, address: int) -> float:
        """Read the word at *address* as a float."""
        return float(self.read(address))

    def write_int(self, address: int, value: int) -> None:
        """Store an integer at *address*."""
        self.write(address, int(value))

    def write_float(self, address: int, value: float) -> None:
        """Store a float at *address*."""
        self.write(address, float(value))

    # -- Teardown -------------------------------------------------------------

    def destroy(self) -> None:
        """Release the tables and backing store.

        Counters and the log stay readable.  Calling ``destroy()`` twice
        is harmless; any further access raises RuntimeError.
        """
        if self._tables is None:
            return
        self._tables = None
        self._record(EventSource.VM, "destroyed")

    def _open(self) -> _Tables:
        if self._tables is None:
            msg = "Translation engine has been destroyed"
            raise RuntimeError(msg)
        return self._tables

    def _record(self, source: EventSource, message: str, *, level: LogLevel = LogLevel.INFO) -> None:
        self._events.record(source, message, access=self._accesses, level=level)
