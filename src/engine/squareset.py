from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator


MASK64 = 0xFFFFFFFFFFFFFFFF

FILE_A = 0x0101010101010101
FILE_B = FILE_A << 1
FILE_G = FILE_A << 6
FILE_H = FILE_A << 7


@dataclass(frozen=True)
class SquareSet:
    """A subset of the 64 board squares.

    Square on file ``x`` and rank ``y`` is bit ``8 * y + x``: b1 is bit 1 and
    a2 is bit 8. All operators return new sets truncated to 64 bits.
    """

    bits: int = 0

    def __post_init__(self) -> None:
        if self.bits & ~MASK64:
            object.__setattr__(self, "bits", self.bits & MASK64)

    @classmethod
    def empty(cls) -> "SquareSet":
        return cls(0)

    @classmethod
    def full(cls) -> "SquareSet":
        return cls(MASK64)

    @classmethod
    def single(cls, sq: int) -> "SquareSet":
        _check_square(sq)
        return cls(1 << sq)

    @classmethod
    def from_squares(cls, squares: Iterable[int]) -> "SquareSet":
        bits = 0
        for sq in squares:
            _check_square(sq)
            bits |= 1 << sq
        return cls(bits)

    def __and__(self, other: "SquareSet") -> "SquareSet":
        return SquareSet(self.bits & other.bits)

    def __or__(self, other: "SquareSet") -> "SquareSet":
        return SquareSet(self.bits | other.bits)

    def __invert__(self) -> "SquareSet":
        return SquareSet(~self.bits & MASK64)

    def __lshift__(self, n: int) -> "SquareSet":
        return SquareSet((self.bits << n) & MASK64)

    def __rshift__(self, n: int) -> "SquareSet":
        return SquareSet(self.bits >> n)

    def __bool__(self) -> bool:
        return self.bits != 0

    def __len__(self) -> int:
        return bin(self.bits).count("1")

    def __contains__(self, sq: object) -> bool:
        return isinstance(sq, int) and 0 <= sq < 64 and (self.bits >> sq) & 1 == 1

    def __iter__(self) -> Iterator[int]:
        bits = self.bits
        while bits:
            low = bits & -bits
            yield low.bit_length() - 1
            bits ^= low

    def draw(self) -> str:
        """Render the set as a diagram, rank 8 on top.

        Members are drawn as ``*`` and other squares as ``.``.
        """
        lines = []
        for rank in range(7, -1, -1):
            row = "".join("*" if (rank * 8 + f) in self else "." for f in range(8))
            lines.append(f"{rank + 1} {row}")
        lines.append("  abcdefgh")
        return "\n".join(lines) + "\n"


# Squares a set may be shifted from without wrapping around the board edge
NOT_FILE_A = SquareSet(~FILE_A & MASK64)
NOT_FILE_H = SquareSet(~FILE_H & MASK64)
NOT_FILES_AB = SquareSet(~(FILE_A | FILE_B) & MASK64)
NOT_FILES_GH = SquareSet(~(FILE_G | FILE_H) & MASK64)


def _check_square(sq: int) -> None:
    if not isinstance(sq, int) or sq < 0 or sq > 63:
        raise ValueError(f"invalid square index: {sq!r}")


def str_to_square(s: str) -> int:
    """Convert algebraic notation into a 0-based square index.

    Args:
        s (str): Square name such as ``"e4"``.

    Returns:
        int: Zero-based square index.

    Raises:
        ValueError: If ``s`` is not a valid square.
    """
    if len(s) != 2 or s[0] < "a" or s[0] > "h" or s[1] < "1" or s[1] > "8":
        raise ValueError(f"invalid square: {s!r}")
    file = ord(s[0]) - ord("a")
    rank = int(s[1]) - 1
    return rank * 8 + file


def square_to_str(idx: int) -> str:
    """Convert a 0-based square index into algebraic notation.

    Raises:
        ValueError: If ``idx`` is outside the valid square range.
    """
    if idx < 0 or idx > 63:
        raise ValueError(f"invalid square index: {idx}")
    file = idx % 8
    rank = idx // 8
    return chr(ord("a") + file) + str(rank + 1)
