from __future__ import annotations

from enum import Enum
from typing import Callable, Dict

from .squareset import NOT_FILE_A, NOT_FILE_H, NOT_FILES_AB, NOT_FILES_GH, SquareSet


class PieceKind(Enum):
    """The five piece kinds of a capture-chain puzzle.

    Kings and queens share the ``MONARCH`` kind: with unbounded sliding they
    move identically.
    """

    PAWN = "P"
    BISHOP = "B"
    ROOK = "R"
    MONARCH = "Q"
    KNIGHT = "N"

    @property
    def symbol(self) -> str:
        return self.value

    @classmethod
    def from_char(cls, ch: str) -> "PieceKind":
        """Map a piece letter (either case) to its kind.

        Raises:
            ValueError: If ``ch`` is not one of ``PBRNKQ``.
        """
        kind = CHAR_TO_KIND.get(ch.upper()) if len(ch) == 1 else None
        if kind is None:
            raise ValueError(f"invalid piece designator: {ch!r}")
        return kind


CHAR_TO_KIND: Dict[str, PieceKind] = {
    "P": PieceKind.PAWN,
    "B": PieceKind.BISHOP,
    "R": PieceKind.ROOK,
    "N": PieceKind.KNIGHT,
    "K": PieceKind.MONARCH,
    "Q": PieceKind.MONARCH,
}


def rook_steps(s: SquareSet) -> SquareSet:
    return (s << 8) | (s >> 8) | ((s & NOT_FILE_A) >> 1) | ((s & NOT_FILE_H) << 1)


def bishop_steps(s: SquareSet) -> SquareSet:
    left = s & NOT_FILE_A
    right = s & NOT_FILE_H
    return (left << 7) | (right << 9) | (left >> 9) | (right >> 7)


def monarch_steps(s: SquareSet) -> SquareSet:
    return rook_steps(s) | bishop_steps(s)


def knight_steps(s: SquareSet) -> SquareSet:
    one_left = s & NOT_FILE_A
    one_right = s & NOT_FILE_H
    two_left = s & NOT_FILES_AB
    two_right = s & NOT_FILES_GH
    return (
        (one_right << 17)
        | (one_left << 15)
        | (two_right << 10)
        | (two_left << 6)
        | (two_right >> 6)
        | (two_left >> 10)
        | (one_right >> 15)
        | (one_left >> 17)
    )


def pawn_slide(s: SquareSet) -> SquareSet:
    # Pawns only ever move toward rank 8
    return s << 8


def pawn_capture(s: SquareSet) -> SquareSet:
    return ((s & NOT_FILE_A) << 7) | ((s & NOT_FILE_H) << 9)


StepFn = Callable[[SquareSet], SquareSet]

SLIDE_STEPS: Dict[PieceKind, StepFn] = {
    PieceKind.PAWN: pawn_slide,
    PieceKind.BISHOP: bishop_steps,
    PieceKind.ROOK: rook_steps,
    PieceKind.MONARCH: monarch_steps,
    PieceKind.KNIGHT: knight_steps,
}

CAPTURE_STEPS: Dict[PieceKind, StepFn] = {
    **SLIDE_STEPS,
    PieceKind.PAWN: pawn_capture,
}


def slide_step(kind: PieceKind, occupied: SquareSet) -> SquareSet:
    """Squares reachable by one non-capturing step from any square in ``occupied``."""
    return SLIDE_STEPS[kind](occupied)


def capture_step(kind: PieceKind, occupied: SquareSet) -> SquareSet:
    """Squares a piece of ``kind`` could capture on with one step from ``occupied``."""
    return CAPTURE_STEPS[kind](occupied)
