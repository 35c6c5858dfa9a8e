"""Trace runner — drive a simulator from a text trace of accesses.

A trace has one access per line::

    # comment lines and blank lines are ignored
    w 0 10        write integer 10 to address 0
    r 0           read integer from address 0
    wf 3 2.5      write float 2.5 to address 3
    rf 3          read float from address 3

Design choices:
    - **Command dispatch via a dict**, like a shell: adding an access
      kind means writing one handler and one table entry.
    - **Returns strings, not prints.**  Each read yields one output
      line; the caller decides where it goes.
    - **Errors carry the line number** so a bad trace is easy to fix.
"""

from collections.abc import Callable, Iterable
from typing import TypeAlias

from vmsim.engine import TranslationEngine

# Handler: takes the argument tokens, returns output (None for writes).
_Handler: TypeAlias = Callable[[list[str]], str | None]


class TraceError(ValueError):
    """Raised when a trace line cannot be parsed or executed.

    Attributes:
        line_number: 1-based line of the offending entry.

    """

    def __init__(self, message: str, *, line_number: int) -> None:
        """Create an error for *line_number*."""
        super().__init__(f"line {line_number}: {message}")
        self.line_number = line_number


class TraceRunner:
    """Execute trace lines against one translation engine."""

    def __init__(self, *, engine: TranslationEngine) -> None:
        """Create a runner bound to *engine*."""
        self._engine = engine
        self._commands: dict[str, tuple[int, _Handler]] = {
            "r": (1, self._cmd_read),
            "w": (2, self._cmd_write),
            "rf": (1, self._cmd_read_float),
            "wf": (2, self._cmd_write_float),
        }

    @property
    def engine(self) -> TranslationEngine:
        """Return the engine this runner drives."""
        return self._engine

    def execute(self, line: str, *, line_number: int = 1) -> str | None:
        """Run one trace line.

        Returns:
            The value read, formatted as text, or None for writes,
            blank lines, and comments.

        Raises:
            TraceError: On an unknown command, wrong argument count,
                unparsable number, or out-of-range address.

        """
        text = line.split("#", 1)[0].strip()
        if not text:
            return None
        name, *args = text.split()
        command = self._commands.get(name.lower())
        if command is None:
            msg = f"unknown access '{name}'"
            raise TraceError(msg, line_number=line_number)
        arity, handler = command
        if len(args) != arity:
            msg = f"'{name}' takes {arity} argument(s), got {len(args)}"
            raise TraceError(msg, line_number=line_number)
        try:
            return handler(args)
        except IndexError as e:
            raise TraceError(str(e), line_number=line_number) from e
        except ValueError as e:
            msg = f"bad number in '{text}'"
            raise TraceError(msg, line_number=line_number) from e

    def run(self, lines: Iterable[str]) -> list[str]:
        """Run every line and return the outputs of the reads, in order."""
        output: list[str] = []
        for number, line in enumerate(lines, start=1):
            result = self.execute(line, line_number=number)
            if result is not None:
                output.append(result)
        return output

    # -- Handlers -------------------------------------------------------------

    def _cmd_read(self, args: list[str]) -> str:
        return str(self._engine.read_int(_address(args[0])))

    def _cmd_write(self, args: list[str]) -> None:
        self._engine.write_int(_address(args[0]), int(args[1], 0))

    def _cmd_read_float(self, args: list[str]) -> str:
        return str(self._engine.read_float(_address(args[0])))

    def _cmd_write_float(self, args: list[str]) -> None:
        self._engine.write_float(_address(args[0]), float(args[1]))


def _address(token: str) -> int:
    """Parse an address in decimal or ``0x`` hex."""
    return int(token, 0)
