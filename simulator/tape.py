from dataclasses import dataclass
from enum import Enum


class Direction(Enum):
    LEFT = "L"
    RIGHT = "R"

    def to_string(self):
        return self.value

    @staticmethod
    def from_string(direction):
        try:
            return Direction(direction)
        except ValueError:
            raise ValueError(f"invalid direction: {direction!r}") from None


class Stack:
    """Persistent stack of tape symbols, front = the cell nearest the head.

    Cells beyond the end are implicitly blank, so pushing a blank onto an
    empty stack returns the same empty stack. Every operation is O(1) and
    leaves the receiver untouched.
    """

    __slots__ = ("_cell", "_size", "blank")

    def __init__(self, blank, _cell=None, _size=0):
        self.blank = blank
        self._cell = _cell
        self._size = _size

    @classmethod
    def from_iterable(cls, symbols, blank):
        """Build from symbols ordered nearest-to-head-first."""
        stack = cls(blank)
        for symbol in reversed(list(symbols)):
            stack = stack.push(symbol)
        return stack

    def push(self, symbol):
        if self._cell is None and symbol == self.blank:
            return self
        return Stack(self.blank, (symbol, self._cell), self._size + 1)

    def peek(self):
        if self._cell is None:
            return self.blank
        return self._cell[0]

    def pop(self):
        if self._cell is None:
            return self
        return Stack(self.blank, self._cell[1], self._size - 1)

    def __iter__(self):
        cell = self._cell
        while cell is not None:
            yield cell[0]
            cell = cell[1]

    def __len__(self):
        return self._size

    def __bool__(self):
        return self._cell is not None

    def __eq__(self, other):
        if not isinstance(other, Stack):
            return NotImplemented
        if self._size != other._size or self.blank != other.blank:
            return False
        return all(a == b for a, b in zip(self, other))

    def __hash__(self):
        return hash((self.blank, tuple(self)))

    def __repr__(self):
        return "[" + ", ".join(_name(s) for s in self) + "]"


@dataclass(frozen=True)
class Tape:
    """Two-sided tape: left stack, head symbol, right stack.

    Both stacks are ordered nearest-to-head-first. A tape is a value; the
    shift and write operations return new tapes.
    """

    left: Stack
    symbol: object
    right: Stack

    @classmethod
    def of(cls, left=(), head=None, right=(), blank=None):
        if blank is None:
            if head is None:
                raise ValueError("either a head symbol or a blank is required")
            blank = type(head).blank()
        if head is None:
            head = blank
        return cls(
            Stack.from_iterable(left, blank),
            head,
            Stack.from_iterable(right, blank),
        )

    @classmethod
    def blank_tape(cls, blank):
        return cls(Stack(blank), blank, Stack(blank))

    @property
    def blank(self):
        return self.left.blank

    def head(self):
        return self.symbol

    def write(self, symbol):
        return Tape(self.left, symbol, self.right)

    def shift_left(self, write_back):
        """Move the head one cell left, leaving write_back at the old position."""
        return Tape(self.left.pop(), self.left.peek(), self.right.push(write_back))

    def shift_right(self, write_back):
        """Move the head one cell right, leaving write_back at the old position."""
        return Tape(self.left.push(write_back), self.right.peek(), self.right.pop())

    def shift(self, direction, write_back):
        if direction is Direction.LEFT:
            return self.shift_left(write_back)
        return self.shift_right(write_back)

    def cells(self):
        """Return (offset, symbols) for the stored window, left to right.

        offset is the position of the first symbol relative to the head.
        """
        left = list(self.left)
        left.reverse()
        return -len(left), left + [self.symbol] + list(self.right)

    def as_tuple(self):
        return list(self.left), self.symbol, list(self.right)

    def __repr__(self):
        return f"({self.left!r}, {_name(self.symbol)}, {self.right!r})"


def _name(symbol):
    return getattr(symbol, "name", str(symbol))
