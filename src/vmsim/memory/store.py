"""Backing store — one value slot per virtual address.

The simulator models *where* a page would live and what it costs to
get it there, not the bytes themselves.  So the store is deliberately
dumb: a flat list indexed by the raw virtual address, untouched by
translation.  A value written to address 7 is read back from address 7
no matter which frame page 0 currently occupies.
"""

Word = int | float


class AddressError(IndexError):
    """Raised when an address falls outside the virtual address space."""


class BackingStore:
    """Flat array of words addressed by virtual address."""

    def __init__(self, size: int) -> None:
        """Create a zero-filled store with *size* slots."""
        self._size = size
        self._words: list[Word] = [0] * size

    @property
    def size(self) -> int:
        """Return the number of addressable words."""
        return self._size

    def check(self, address: int) -> None:
        """Raise AddressError unless ``0 <= address < size``."""
        if not 0 <= address < self._size:
            msg = f"Address {address} outside virtual space [0, {self._size})"
            raise AddressError(msg)

    def load(self, address: int) -> Word:
        """Return the word stored at *address*.

        Raises:
            AddressError: If the address is out of range.

        """
        self.check(address)
        return self._words[address]

    def store(self, address: int, value: Word) -> None:
        """Overwrite the word at *address*.

        Raises:
            AddressError: If the address is out of range.

        """
        self.check(address)
        self._words[address] = value

    def __len__(self) -> int:
        """Return the number of addressable words."""
        return self._size
