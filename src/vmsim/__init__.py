"""vmsim — a TLB and page table virtual memory simulator.

Re-exports public symbols so callers can write::

    from vmsim import TranslationEngine, VMConfig, ReplacementPolicy
"""

from vmsim.config import ConfigError, ConfigErrorKind, ReplacementPolicy, VMConfig
from vmsim.engine import AccessOutcome, Translation, TranslationEngine
from vmsim.memory.store import AddressError
from vmsim.stats import Statistics

__all__ = [
    "AccessOutcome",
    "AddressError",
    "ConfigError",
    "ConfigErrorKind",
    "ReplacementPolicy",
    "Statistics",
    "Translation",
    "TranslationEngine",
    "VMConfig",
]
