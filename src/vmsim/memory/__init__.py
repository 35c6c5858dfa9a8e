"""Memory structures — backing store, page table, TLB, and replacement.

Re-exports public symbols so callers can write::

    from vmsim.memory import PageTable, TLB, LRUSelector
"""

from vmsim.memory.page_table import PageTable, PageTableEntry
from vmsim.memory.replacement import (
    LRUSelector,
    RecencyTable,
    RoundRobinSelector,
    VictimSelector,
    make_selector,
)
from vmsim.memory.store import AddressError, BackingStore, Word
from vmsim.memory.tlb import TLB, TLBEntry

__all__ = [
    "TLB",
    "AddressError",
    "BackingStore",
    "LRUSelector",
    "PageTable",
    "PageTableEntry",
    "RecencyTable",
    "RoundRobinSelector",
    "TLBEntry",
    "VictimSelector",
    "Word",
    "make_selector",
]
