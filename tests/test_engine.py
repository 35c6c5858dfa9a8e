"""Tests for the translation engine.

The engine runs every access through the TLB, then the page table,
then (on a fault) the replacement policy — counting TLB misses, page
faults, and disk writes as it goes.  These tests walk small, fully
traced scenarios so each counter and pointer can be checked exactly.
"""

import pytest

from vmsim.config import ConfigError, ConfigErrorKind, ReplacementPolicy, VMConfig
from vmsim.engine import AccessOutcome, TranslationEngine
from vmsim.memory.store import AddressError

RR = ReplacementPolicy.ROUND_ROBIN
LRU = ReplacementPolicy.LRU


def _engine(
    *,
    virtual_pages: int = 4,
    physical_frames: int = 2,
    page_size: int = 1,
    tlb_entries: int = 2,
    page_policy: ReplacementPolicy = RR,
    tlb_policy: ReplacementPolicy = RR,
) -> TranslationEngine:
    """Create an engine with small defaults."""
    return TranslationEngine.create(
        VMConfig(
            virtual_pages=virtual_pages,
            physical_frames=physical_frames,
            page_size=page_size,
            tlb_entries=tlb_entries,
            page_policy=page_policy,
            tlb_policy=tlb_policy,
        )
    )


# -- Cycle 1: Creation ---------------------------------------------------------


class TestCreation:
    """Verify the state of a freshly created engine."""

    @pytest.mark.parametrize(
        ("virtual_pages", "physical_frames", "page_size", "expected"),
        [(16, 4, 8, 32), (4, 2, 1, 2), (64, 8, 16, 128)],
    )
    def test_page_table_size(
        self, virtual_pages: int, physical_frames: int, page_size: int, expected: int
    ) -> None:
        """Declared size is virtual words divided by physical frames."""
        engine = _engine(
            virtual_pages=virtual_pages,
            physical_frames=physical_frames,
            page_size=page_size,
        )
        assert engine.page_table.size == expected

    def test_first_frames_resident(self) -> None:
        """Pages 0..frames-1 are resident with identity frames."""
        frames = 4
        engine = _engine(virtual_pages=16, physical_frames=frames, page_size=8)
        assert engine.page_table.resident_pages() == {i: i for i in range(frames)}
        for vpn in range(frames, engine.page_table.size):
            assert engine.page_table[vpn].resident is False

    def test_tlb_identity_and_zero_state(self) -> None:
        """TLB is identity-seeded; counters and pointers start at zero."""
        engine = _engine(virtual_pages=16, physical_frames=4, tlb_entries=3)
        assert engine.tlb.mappings() == [(0, 0), (1, 1), (2, 2)]
        assert engine.statistics() == (0, 0, 0)
        assert engine.page_victim == 0
        assert engine.tlb_victim == 0

    def test_invalid_config_raises(self) -> None:
        """An invalid configuration never produces an engine."""
        with pytest.raises(ConfigError) as excinfo:
            _engine(virtual_pages=1, physical_frames=2)
        assert excinfo.value.kind is ConfigErrorKind.INVALID_GEOMETRY

    def test_engines_are_independent(self) -> None:
        """Two engines share no state."""
        first = _engine()
        second = _engine()
        first.write(3, 1)
        assert second.statistics() == (0, 0, 0)
        assert second.read(3) == 0


# -- Cycle 2: TLB behaviour ---------------------------------------------------


class TestTLB:
    """Verify hits, misses, and TLB victim movement."""

    def test_seeded_page_is_a_hit(self) -> None:
        """Pages in the identity-seeded TLB hit without a miss."""
        engine = _engine()
        translation = engine.translate(1)
        assert translation.outcome is AccessOutcome.TLB_HIT
        assert translation.frame == 1
        assert engine.statistics() == (0, 0, 0)

    def test_cached_page_is_not_missed_again(self) -> None:
        """After a miss installs a page, the next access to it hits."""
        engine = _engine(virtual_pages=16, physical_frames=4, tlb_entries=2)
        engine.read(5)
        engine.read(5)
        _faults, misses, _writes = engine.statistics()
        assert misses == 1

    def test_round_robin_cycles_slots(self) -> None:
        """With N slots, the (N+1)-th first touch reuses slot 0."""
        engine = _engine(virtual_pages=8, physical_frames=2, tlb_entries=2)
        engine.read(2)
        engine.read(3)
        assert engine.tlb_victim == 0
        engine.read(4)
        assert engine.tlb.mappings() == [(4, 0), (3, 1)]

    def test_hit_does_not_move_round_robin_pointer(self) -> None:
        """Round-robin pointers only move on replacement."""
        engine = _engine()
        engine.read(0)
        engine.read(1)
        assert engine.tlb_victim == 0

    def test_lru_hit_moves_victim(self) -> None:
        """Under LRU a hit makes the other slot the victim."""
        engine = _engine(virtual_pages=8, physical_frames=4, tlb_policy=LRU)
        engine.read(0)
        assert engine.tlb_victim == 1
        engine.read(1)
        assert engine.tlb_victim == 0

    def test_lru_miss_replaces_least_recent_slot(self) -> None:
        """A miss overwrites the least recently used slot."""
        engine = _engine(virtual_pages=8, physical_frames=4, tlb_policy=LRU)
        engine.read(0)
        engine.read(1)
        engine.read(2)
        assert engine.tlb.mappings() == [(2, 2), (1, 1)]
        assert engine.tlb_victim == 1


# -- Cycle 3: Page table behaviour -------------------------------------------


class TestPageTable:
    """Verify soft misses, faults, and page victim movement."""

    def test_soft_miss(self) -> None:
        """A resident page missing from the TLB costs a miss, not a fault."""
        engine = _engine(virtual_pages=8, physical_frames=4, tlb_entries=1)
        translation = engine.translate(2)
        assert translation.outcome is AccessOutcome.TLB_MISS
        expected_frame = 2
        assert translation.frame == expected_frame
        assert engine.statistics() == (0, 1, 0)
        assert engine.tlb.mappings() == [(2, 2)]

    def test_fault_loads_into_victim_frame(self) -> None:
        """A fault evicts the holder of the victim frame."""
        engine = _engine(virtual_pages=8, physical_frames=2, tlb_entries=1)
        translation = engine.translate(4)
        assert translation.outcome is AccessOutcome.PAGE_FAULT
        assert translation.frame == 0
        assert engine.page_table.resident_pages() == {1: 1, 4: 0}
        assert engine.page_table[0].frame is None
        assert engine.tlb.mappings() == [(4, 0)]

    def test_round_robin_page_replacement(self) -> None:
        """Faults reuse frames 0, 1, 0, ... in turn."""
        engine = _engine(virtual_pages=8, physical_frames=2, tlb_entries=1)
        frames = [engine.translate(page).frame for page in (4, 5, 6)]
        assert frames == [0, 1, 0]
        assert engine.page_table.resident_pages() == {5: 1, 6: 0}
        expected_faults = 3
        assert engine.counters.page_faults == expected_faults
        assert engine.page_victim == 1

    def test_resident_hit_leaves_round_robin_pointer(self) -> None:
        """A soft miss does not move a round-robin page pointer."""
        engine = _engine(virtual_pages=8, physical_frames=4, tlb_entries=1)
        engine.read(3)
        assert engine.page_victim == 0

    def test_lru_refreshes_resident_pages(self) -> None:
        """Under LRU a soft miss refreshes recency and moves the victim."""
        engine = _engine(virtual_pages=8, physical_frames=2, tlb_entries=1, page_policy=LRU)
        engine.read(1)  # soft miss: page 1 stamped, frame 0 now oldest
        assert engine.page_victim == 0
        engine.read(0)  # soft miss: page 0 stamped, frame 1 now oldest
        assert engine.page_victim == 1
        engine.read(5)  # fault: evicts page 1 from frame 1
        assert engine.page_table.resident_pages() == {0: 0, 5: 1}
        assert engine.page_table[1].timestamp == 0

    def test_lru_tie_break_is_reproducible(self) -> None:
        """Equal stamps pick the lowest frame id, run after run."""
        results = []
        for _ in range(3):
            engine = _engine(tlb_entries=1, page_policy=LRU)
            engine.write(3, 1)
            results.append(engine.page_table.resident_pages())
        assert results == [{1: 1, 3: 0}] * 3

    def test_page_size_splits_address(self) -> None:
        """The page number is the address shifted by the offset width."""
        engine = _engine(virtual_pages=16, physical_frames=4, page_size=8)
        hit = engine.translate(13)
        assert hit.page == 1
        assert hit.outcome is AccessOutcome.TLB_HIT
        fault = engine.translate(40)
        expected_page = 5
        assert fault.page == expected_page
        assert fault.outcome is AccessOutcome.PAGE_FAULT


# -- Cycle 4: Disk writes and dirty pages ------------------------------------


class TestDiskWrites:
    """Verify dirty tracking and disk write accounting."""

    def test_write_fault_counts_disk_write(self) -> None:
        """Every fault on a write costs a disk write and dirties the page."""
        engine = _engine(tlb_entries=1)
        engine.write(2, 5)
        assert engine.statistics() == (1, 1, 1)
        assert engine.page_table[2].dirty is True

    def test_read_fault_on_clean_page_is_free(self) -> None:
        """Faulting in a clean page on a read costs no disk write."""
        engine = _engine(tlb_entries=1)
        engine.read(2)
        assert engine.statistics() == (1, 1, 0)

    def test_dirty_page_read_back_costs_one_write(self) -> None:
        """Re-reading an evicted dirty page costs exactly one disk write."""
        engine = _engine(physical_frames=1, tlb_entries=1)
        engine.write(2, 5)  # fault, disk write 1
        engine.write(2, 6)  # hit
        engine.write(2, 7)  # hit
        engine.read(3)  # fault on clean page, evicts 2 via a read
        assert engine.page_table[2].dirty is True
        _faults, _misses, writes = engine.statistics()
        assert writes == 1
        engine.read(2)  # fault, dirty page read back in
        assert engine.statistics() == (3, 3, 2)
        engine.read(2)  # hit
        assert engine.statistics() == (3, 3, 2)

    def test_write_fault_eviction_cleans_victim(self) -> None:
        """A write fault clears the evicted page's dirty flag."""
        engine = _engine(physical_frames=1, tlb_entries=1)
        engine.write(2, 1)
        engine.write(3, 1)  # evicts page 2 on the write path
        assert engine.page_table[2].dirty is False
        engine.read(2)
        assert engine.statistics() == (3, 3, 2)


# -- Cycle 5: Data access ----------------------------------------------------


class TestDataAccess:
    """Verify the backing store round trip and the typed entry points."""

    def test_write_then_read(self) -> None:
        """A written value reads back, even after its page was evicted."""
        engine = _engine(virtual_pages=8, physical_frames=2, page_size=4, tlb_entries=1)
        engine.write(5, 77)
        for address in (12, 20, 28):
            engine.read(address)
        expected = 77
        assert engine.read(5) == expected

    def test_typed_entry_points(self) -> None:
        """Integer and float accessors convert the stored word."""
        engine = _engine()
        engine.write_float(3, 2.5)
        expected_float = 2.5
        assert engine.read_float(3) == expected_float
        expected_int = 2
        assert engine.read_int(3) == expected_int
        engine.write_int(2, 7)
        expected_widened = 7.0
        assert engine.read_float(2) == expected_widened
        assert isinstance(engine.read_int(2), int)

    def test_translate_does_not_touch_store(self) -> None:
        """translate updates bookkeeping only."""
        engine = _engine()
        assert engine.translate(2, write=True).outcome is AccessOutcome.PAGE_FAULT
        assert engine.read(2) == 0

    def test_access_returns_translation_and_value(self) -> None:
        """access reports both the path taken and the word."""
        engine = _engine()
        translation, value = engine.access(1, 9, write=True)
        assert translation.outcome is AccessOutcome.TLB_HIT
        expected = 9
        assert value == expected
        assert engine.access(1)[1] == expected

    def test_write_without_value_rejected(self) -> None:
        """A write access must carry a value."""
        engine = _engine()
        with pytest.raises(ValueError, match="needs a value"):
            engine.access(1, write=True)

    @pytest.mark.parametrize("address", [-1, 4, 1000])
    def test_out_of_range_address(self, address: int) -> None:
        """Addresses outside the virtual space raise and count nothing."""
        engine = _engine()
        with pytest.raises(AddressError):
            engine.read(address)
        with pytest.raises(AddressError):
            engine.write(address, 1)
        assert engine.statistics() == (0, 0, 0)


# -- Cycle 6: Scenarios -------------------------------------------------------


class TestScenarios:
    """Whole-trace scenarios on 4 pages, 2 frames, 1-word pages, 2 TLB slots."""

    def test_round_robin_writes(self) -> None:
        """Pages 0 and 1 are seeded; only page 2 faults."""
        engine = _engine()
        engine.write(0, 10)
        engine.write(1, 20)
        engine.write(2, 30)
        faults, misses, writes = engine.statistics()
        assert faults == 1
        assert writes == 1
        # Pages 0 and 1 hit the identity-seeded TLB.
        assert misses == 1
        assert [engine.read(a) for a in range(3)] == [10, 20, 30]

    def test_lru_victim_follows_page_table_recency(self) -> None:
        """TLB hits do not refresh page recency, so page 0 is evicted."""
        engine = _engine(page_policy=LRU, tlb_policy=LRU)
        engine.read(0)
        engine.read(1)
        engine.read(0)
        engine.write(2, 99)
        assert engine.statistics() == (1, 1, 1)
        assert engine.page_table.resident_pages() == {1: 1, 2: 0}

        engine.read(1)
        assert engine.counters.page_faults == 1
        engine.read(0)
        expected_faults = 2
        assert engine.counters.page_faults == expected_faults


# -- Cycle 7: Teardown --------------------------------------------------------


class TestDestroy:
    """Verify teardown."""

    def test_access_after_destroy_raises(self) -> None:
        """A destroyed engine refuses further work."""
        engine = _engine()
        engine.destroy()
        assert engine.closed
        with pytest.raises(RuntimeError, match="destroyed"):
            engine.read(0)
        with pytest.raises(RuntimeError):
            _ = engine.page_table

    def test_statistics_survive_destroy(self) -> None:
        """Counters remain readable for a final report."""
        engine = _engine()
        engine.write(2, 1)
        engine.destroy()
        assert engine.statistics() == (1, 1, 1)

    def test_destroy_twice_is_harmless(self) -> None:
        """A second destroy is a no-op."""
        engine = _engine()
        engine.destroy()
        engine.destroy()
        assert engine.closed
