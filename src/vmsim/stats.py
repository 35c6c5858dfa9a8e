"""Statistics counters for a simulation run.

Three counters summarise how expensive a sequence of accesses was:

    - **page_faults** — accesses whose page had no resident frame.
    - **tlb_misses** — accesses whose page was not cached in the TLB.
    - **disk_writes** — dirty pages written to, or read back from, disk.

The counters only ever grow; a fresh engine starts them at zero.
"""

from dataclasses import dataclass


@dataclass
class Statistics:
    """Mutable counters owned by a single translation engine."""

    page_faults: int = 0
    tlb_misses: int = 0
    disk_writes: int = 0

    def as_tuple(self) -> tuple[int, int, int]:
        """Return ``(page_faults, tlb_misses, disk_writes)``."""
        return (self.page_faults, self.tlb_misses, self.disk_writes)

    def as_dict(self) -> dict[str, int]:
        """Return the counters keyed by name (for JSON responses)."""
        return {
            "page_faults": self.page_faults,
            "tlb_misses": self.tlb_misses,
            "disk_writes": self.disk_writes,
        }

    def report(self) -> str:
        """Render the classic three-line statistics report."""
        return (
            f"Number of page faults: [{self.page_faults}]\n"
            f"Number of TLB misses: [{self.tlb_misses}]\n"
            f"Number of disk writes: [{self.disk_writes}]"
        )
