"""Handle-style API with the classic simulator function names.

Older drivers call free functions on an opaque handle::

    vm = create_vm(16, 4, 8, 2, 0, 1)
    write_int(vm, 5, 42)
    read_int(vm, 5)
    print_statistics(vm)
    cleanup_vm(vm)

These wrappers keep that calling convention while the real work lives
in ``TranslationEngine``.  Unlike the old interface, a bad configuration
raises ``ConfigError`` instead of terminating the process.
"""

from vmsim.config import ReplacementPolicy, VMConfig
from vmsim.engine import TranslationEngine


def create_vm(
    size_vm: int,
    size_pm: int,
    page_size: int,
    size_tlb: int,
    page_repl_alg: ReplacementPolicy | int | str,
    tlb_repl_alg: ReplacementPolicy | int | str,
) -> TranslationEngine:
    """Create a simulator from positional geometry and policy codes.

    Args:
        size_vm: Virtual memory size in pages.
        size_pm: Physical memory size in frames.
        page_size: Words per page (power of two).
        size_tlb: Number of TLB entries.
        page_repl_alg: Page replacement policy (0 = round-robin, 1 = LRU).
        tlb_repl_alg: TLB replacement policy (0 = round-robin, 1 = LRU).

    Raises:
        ConfigError: If any argument violates an invariant.

    """
    config = VMConfig(
        virtual_pages=size_vm,
        physical_frames=size_pm,
        page_size=page_size,
        tlb_entries=size_tlb,
        page_policy=ReplacementPolicy.parse(page_repl_alg),
        tlb_policy=ReplacementPolicy.parse(tlb_repl_alg),
    )
    return TranslationEngine.create(config)


def read_int(handle: TranslationEngine, address: int) -> int:
    """Read an integer through the simulator."""
    return handle.read_int(address)


def read_float(handle: TranslationEngine, address: int) -> float:
    """Read a float through the simulator."""
    return handle.read_float(address)


def write_int(handle: TranslationEngine, address: int, value: int) -> None:
    """Write an integer through the simulator."""
    handle.write_int(address, value)


def write_float(handle: TranslationEngine, address: int, value: float) -> None:
    """Write a float through the simulator."""
    handle.write_float(address, value)


def print_statistics(handle: TranslationEngine) -> None:
    """Print the page fault, TLB miss, and disk write counters."""
    print(handle.counters.report())  # noqa: T201


def cleanup_vm(handle: TranslationEngine) -> None:
    """Release the simulator's tables."""
    handle.destroy()
