"""Simulator configuration — geometry, replacement policies, validation.

A simulated machine is described by six numbers that never change once
the simulator exists:

    - **virtual_pages** — size of the virtual address space, in pages.
    - **physical_frames** — size of physical memory, in frames.
    - **page_size** — words per page (a power of two, so an address can
      be split into page number and offset with a shift).
    - **tlb_entries** — slots in the translation lookaside buffer.
    - **page_policy** / **tlb_policy** — how each table picks a victim.

Address split::

    address = 0b 1011 0110        (page_size = 16 → 4 offset bits)
                 ^^^^ ^^^^
                 page offset

Design choices:
    - **Frozen dataclass** — the geometry is fixed for the lifetime of
      a simulator, so mutation is a bug we want the runtime to catch.
    - **IntEnum for policies** — the classic C interface used ``0`` for
      round-robin and ``1`` for LRU; an IntEnum keeps those codes valid
      while giving them names.
    - **ConfigError carries a kind** — callers can tell a bad geometry
      from a bad policy without parsing messages.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import IntEnum, StrEnum
from typing import Any

# Largest virtual space (in words) the address width can describe.
MAX_VIRTUAL_WORDS = (1 << 30) - 1


class ConfigErrorKind(StrEnum):
    """Categories of configuration failure."""

    INVALID_GEOMETRY = "invalid geometry"
    INVALID_POLICY = "invalid policy"
    UNSUPPORTED_SIZE = "unsupported size"


class ConfigError(Exception):
    """Raised when a simulator configuration violates an invariant.

    Attributes:
        kind: Which family of invariant was broken.

    """

    def __init__(self, message: str, *, kind: ConfigErrorKind) -> None:
        """Create a configuration error of the given kind."""
        super().__init__(message)
        self.kind = kind


class ReplacementPolicy(IntEnum):
    """Victim selection strategy for the TLB or the page table.

    The integer values match the historical ``0`` / ``1`` codes.
    """

    ROUND_ROBIN = 0
    LRU = 1

    @classmethod
    def parse(cls, value: "ReplacementPolicy | int | str") -> "ReplacementPolicy":
        """Convert a policy code or name into a ReplacementPolicy.

        Accepts the enum itself, the integer codes ``0`` / ``1``, their
        string forms, or the names ``rr``, ``round-robin``, ``round_robin``
        and ``lru`` (case-insensitive).

        Raises:
            ConfigError: If the value does not name a known policy.

        """
        if isinstance(value, ReplacementPolicy):
            return value
        if isinstance(value, bool):
            msg = f"Invalid replacement policy: {value!r}"
            raise ConfigError(msg, kind=ConfigErrorKind.INVALID_POLICY)
        if isinstance(value, int):
            try:
                return cls(value)
            except ValueError:
                msg = f"Invalid replacement policy code: {value}"
                raise ConfigError(msg, kind=ConfigErrorKind.INVALID_POLICY) from None
        if isinstance(value, str):
            policy = _POLICY_NAMES.get(value.strip().lower())
            if policy is not None:
                return policy
        msg = f"Invalid replacement policy: {value!r}"
        raise ConfigError(msg, kind=ConfigErrorKind.INVALID_POLICY)


_POLICY_NAMES: dict[str, ReplacementPolicy] = {
    "0": ReplacementPolicy.ROUND_ROBIN,
    "rr": ReplacementPolicy.ROUND_ROBIN,
    "round-robin": ReplacementPolicy.ROUND_ROBIN,
    "round_robin": ReplacementPolicy.ROUND_ROBIN,
    "roundrobin": ReplacementPolicy.ROUND_ROBIN,
    "1": ReplacementPolicy.LRU,
    "lru": ReplacementPolicy.LRU,
}


def _is_power_of_two(n: int) -> bool:
    return n > 0 and n & (n - 1) == 0


@dataclass(frozen=True, kw_only=True)
class VMConfig:
    """Immutable geometry and policy selection for one simulator.

    Construction does not validate; call ``validate()`` (the engine
    does this for you) so that a bad configuration surfaces as a
    ``ConfigError`` rather than a half-built simulator.
    """

    virtual_pages: int
    physical_frames: int
    page_size: int
    tlb_entries: int
    page_policy: ReplacementPolicy
    tlb_policy: ReplacementPolicy

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "VMConfig":
        """Build a configuration from a JSON-style mapping.

        Args:
            data: A mapping with the six configuration keys.  Policies
                may be codes or names (see ``ReplacementPolicy.parse``).

        Raises:
            ConfigError: If a key is missing or a value has the wrong type.

        """
        missing = [name for name in _FIELDS if name not in data]
        if missing:
            msg = f"Missing configuration field(s): {', '.join(missing)}"
            raise ConfigError(msg, kind=ConfigErrorKind.INVALID_GEOMETRY)

        sizes: dict[str, int] = {}
        for name in _SIZE_FIELDS:
            value = data[name]
            if isinstance(value, bool) or not isinstance(value, int):
                msg = f"{name} must be an integer, got {value!r}"
                raise ConfigError(msg, kind=ConfigErrorKind.INVALID_GEOMETRY)
            sizes[name] = value

        return cls(
            **sizes,
            page_policy=ReplacementPolicy.parse(data["page_policy"]),
            tlb_policy=ReplacementPolicy.parse(data["tlb_policy"]),
        )

    @property
    def total_words(self) -> int:
        """Return the number of addressable words (virtual pages x page size)."""
        return self.virtual_pages * self.page_size

    @property
    def page_offset_bits(self) -> int:
        """Return log2(page_size) — the width of the in-page offset."""
        return self.page_size.bit_length() - 1

    @property
    def page_table_size(self) -> int:
        """Return the declared page table size (virtual words / frames)."""
        return self.total_words // self.physical_frames

    def validate(self) -> None:
        """Check every invariant, in the order the classic simulator did.

        The size bound is a flat ``total_words <= MAX_VIRTUAL_WORDS``
        (2^30 - 1).  That is stricter than the classic check, which
        looked at the odd factor and the power-of-two exponent of the
        total separately and so let exact powers of two up to 2^31
        through; here 2^30 words and above are always rejected.

        Raises:
            ConfigError: On the first violated invariant.

        """
        if self.virtual_pages < self.physical_frames:
            msg = "Virtual memory is smaller than physical memory"
            raise ConfigError(msg, kind=ConfigErrorKind.INVALID_GEOMETRY)
        if self.physical_frames < 1:
            msg = "Physical memory must hold at least one frame"
            raise ConfigError(msg, kind=ConfigErrorKind.INVALID_GEOMETRY)
        if not _is_power_of_two(self.page_size):
            msg = f"Page size {self.page_size} is not a power of 2"
            raise ConfigError(msg, kind=ConfigErrorKind.INVALID_GEOMETRY)
        if self.tlb_entries > self.physical_frames:
            msg = "Size of TLB greater than size of physical memory"
            raise ConfigError(msg, kind=ConfigErrorKind.INVALID_GEOMETRY)
        if self.tlb_entries < 1:
            msg = "Size of TLB must be greater than zero"
            raise ConfigError(msg, kind=ConfigErrorKind.INVALID_GEOMETRY)
        for label, policy in (("page table", self.page_policy), ("TLB", self.tlb_policy)):
            try:
                ReplacementPolicy.parse(policy)
            except ConfigError:
                msg = f"Invalid replacement algorithm for {label}: {policy!r}"
                raise ConfigError(msg, kind=ConfigErrorKind.INVALID_POLICY) from None
        if self.total_words > MAX_VIRTUAL_WORDS:
            msg = (
                "Virtual memory size times page size must not exceed "
                f"{MAX_VIRTUAL_WORDS} words (got {self.total_words})"
            )
            raise ConfigError(msg, kind=ConfigErrorKind.UNSUPPORTED_SIZE)


_SIZE_FIELDS = ("virtual_pages", "physical_frames", "page_size", "tlb_entries")
_FIELDS = (*_SIZE_FIELDS, "page_policy", "tlb_policy")
