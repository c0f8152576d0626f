from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Tuple, Union

from .pieces import PieceKind
from .squareset import SquareSet, square_to_str, str_to_square


# Progress state layout: bits 0..26 remaining-capture mask, bits 27..31 in-hand index
MAX_PIECES = 27
IN_HAND_BITS = 5
IN_HAND_SHIFT = MAX_PIECES
REMAINING_MASK = (1 << MAX_PIECES) - 1
IN_HAND_MASK = (1 << IN_HAND_BITS) - 1

SquareLike = Union[int, str]


class PuzzleError(ValueError):
    """Raised when a puzzle cannot be built from the given description."""


def encode_state(remaining: int, in_hand: int) -> int:
    if remaining & ~REMAINING_MASK:
        raise ValueError("remaining mask exceeds piece capacity")
    if in_hand < 0 or in_hand >= MAX_PIECES:
        raise ValueError(f"invalid in-hand piece index: {in_hand}")
    if (remaining >> in_hand) & 1:
        raise ValueError("in-hand piece cannot be awaiting capture")
    return remaining | (in_hand << IN_HAND_SHIFT)


def remaining_mask(state: int) -> int:
    return state & REMAINING_MASK


def in_hand(state: int) -> int:
    return (state >> IN_HAND_SHIFT) & IN_HAND_MASK


def is_done(state: int) -> bool:
    return remaining_mask(state) == 0


def _to_square(sq: SquareLike) -> int:
    if isinstance(sq, str):
        return str_to_square(sq)
    if not isinstance(sq, int) or sq < 0 or sq > 63:
        raise ValueError(f"invalid square index: {sq!r}")
    return sq


@dataclass(frozen=True)
class Puzzle:
    """Static description of a capture-chain puzzle.

    Notes:
    - Piece indices follow square order (a1 first, rank-major) with no gaps.
    - ``square_to_piece`` is the exact inverse of ``piece_square``.
    - Instances are never mutated; progress lives in integer states.
    """

    obstacles: SquareSet
    piece_kind: Tuple[Optional[PieceKind], ...]
    piece_square: Tuple[Optional[int], ...]
    square_to_piece: Tuple[Optional[int], ...]
    player_start: int

    @classmethod
    def from_pieces(
        cls,
        obstacles: Union[SquareSet, Iterable[SquareLike]],
        pieces: Mapping[SquareLike, Union[PieceKind, str]],
        player_square: SquareLike,
    ) -> "Puzzle":
        """Build a puzzle from an explicit board description.

        Args:
            obstacles: Blocking squares, as a ``SquareSet`` or square names/indices.
            pieces: Mapping from square to piece kind (or piece letter).
            player_square: Square of the piece the player starts with.

        Returns:
            Puzzle: The constructed puzzle.

        Raises:
            PuzzleError: If a square or piece designator is invalid, a piece
                sits on an obstacle, more than ``MAX_PIECES`` pieces are given,
                or no piece stands on ``player_square``.
        """
        try:
            if isinstance(obstacles, SquareSet):
                blocked = obstacles
            else:
                blocked = SquareSet.from_squares(_to_square(sq) for sq in obstacles)
            kinds: Dict[int, PieceKind] = {}
            for sq, kind in pieces.items():
                idx = _to_square(sq)
                if idx in kinds:
                    raise PuzzleError(f"duplicate piece on {square_to_str(idx)}")
                kinds[idx] = kind if isinstance(kind, PieceKind) else PieceKind.from_char(kind)
            player = _to_square(player_square)
        except PuzzleError:
            raise
        except ValueError as e:
            raise PuzzleError(str(e)) from e

        if len(kinds) > MAX_PIECES:
            raise PuzzleError(f"too many pieces: {len(kinds)} (max {MAX_PIECES})")
        for sq in kinds:
            if sq in blocked:
                raise PuzzleError(f"piece placed on obstacle at {square_to_str(sq)}")
        if player not in kinds:
            raise PuzzleError(f"no player piece on {square_to_str(player)}")

        piece_kind: List[Optional[PieceKind]] = [None] * MAX_PIECES
        piece_square: List[Optional[int]] = [None] * MAX_PIECES
        square_to_piece: List[Optional[int]] = [None] * 64
        order = sorted(kinds)
        for idx, sq in enumerate(order):
            piece_kind[idx] = kinds[sq]
            piece_square[idx] = sq
            square_to_piece[sq] = idx

        start = order.index(player)
        return cls(
            obstacles=blocked,
            piece_kind=tuple(piece_kind),
            piece_square=tuple(piece_square),
            square_to_piece=tuple(square_to_piece),
            player_start=start,
        )

    @classmethod
    def from_notation(cls, text: str, player: Optional[SquareLike] = None) -> "Puzzle":
        """Parse a puzzle from its text notation.

        The placement field reads like a FEN board: rank 8 first, ranks split
        by ``/``, digits for empty runs, ``X`` for obstacles and ``PBRNKQ`` (any
        case) for pieces. The player's square comes from ``player`` or, when
        omitted, from a second whitespace-separated field, e.g.
        ``"4p3/8/8/8/8/8/8/4R3 e1"``.

        Raises:
            PuzzleError: If the notation is malformed or names no player piece.
        """
        if not text or not isinstance(text, str):
            raise PuzzleError("notation must be a non-empty string")
        fields = text.strip().split()
        if not fields:
            raise PuzzleError("notation must be a non-empty string")
        if len(fields) > 2:
            raise PuzzleError("notation has too many fields")
        placement = fields[0]
        if player is None:
            if len(fields) < 2:
                raise PuzzleError("no player square given")
            player = fields[1]

        ranks = placement.split("/")
        if len(ranks) != 8:
            raise PuzzleError("notation must have 8 ranks")
        obstacles: List[int] = []
        pieces: Dict[int, PieceKind] = {}
        for rank_idx, rank in enumerate(ranks[::-1]):  # start from rank 1 (bottom)
            file_idx = 0
            for ch in rank:
                # Only ASCII 1-8 count as empty runs; other digits are rejected below
                if ch in "12345678":
                    file_idx += int(ch)
                    continue
                if file_idx >= 8:
                    raise PuzzleError("too many squares in rank")
                sq = rank_idx * 8 + file_idx
                if ch in ("X", "x"):
                    obstacles.append(sq)
                else:
                    try:
                        pieces[sq] = PieceKind.from_char(ch)
                    except ValueError as e:
                        raise PuzzleError(f"invalid character in notation: {ch!r}") from e
                file_idx += 1
            if file_idx != 8:
                raise PuzzleError("rank does not sum to 8 squares")

        return cls.from_pieces(obstacles, pieces, player)

    def to_notation(self) -> str:
        """Serialize the puzzle back into ``"<placement> <player square>"`` form."""
        ranks_str: List[str] = []
        for rank_idx in range(7, -1, -1):
            run = 0
            row = []
            for file_idx in range(8):
                ch = self._char_at(rank_idx * 8 + file_idx)
                if ch is None:
                    run += 1
                    continue
                if run > 0:
                    row.append(str(run))
                    run = 0
                row.append(ch)
            if run > 0:
                row.append(str(run))
            ranks_str.append("".join(row))
        return "/".join(ranks_str) + " " + square_to_str(self.square_of(self.player_start))

    def _char_at(self, sq: int) -> Optional[str]:
        if sq in self.obstacles:
            return "X"
        idx = self.square_to_piece[sq]
        if idx is None:
            return None
        kind = self.piece_kind[idx]
        return kind.symbol if kind is not None else None

    def draw(self) -> str:
        """Render the board; the player's piece is uppercase, others lowercase."""
        lines = []
        for rank_idx in range(7, -1, -1):
            row = []
            for file_idx in range(8):
                sq = rank_idx * 8 + file_idx
                ch = self._char_at(sq)
                if ch is None:
                    row.append(".")
                elif ch == "X":
                    row.append("#")
                elif self.square_to_piece[sq] == self.player_start:
                    row.append(ch)
                else:
                    row.append(ch.lower())
            lines.append(f"{rank_idx + 1} {''.join(row)}")
        lines.append("  abcdefgh")
        return "\n".join(lines) + "\n"

    @property
    def piece_count(self) -> int:
        return sum(1 for k in self.piece_kind if k is not None)

    def initial_state(self) -> int:
        everyone = (1 << self.piece_count) - 1
        return encode_state(everyone & ~(1 << self.player_start), self.player_start)

    def targets(self, state: int) -> SquareSet:
        """Squares of every piece still awaiting capture in ``state``."""
        bits = 0
        remaining = remaining_mask(state)
        while remaining:
            low = remaining & -remaining
            sq = self.piece_square[low.bit_length() - 1]
            if sq is not None:
                bits |= 1 << sq
            remaining ^= low
        return SquareSet(bits)

    def square_of(self, idx: int) -> int:
        """Square of piece ``idx``.

        Raises:
            ValueError: If the puzzle has no piece with that index.
        """
        sq = self.piece_square[idx] if 0 <= idx < len(self.piece_square) else None
        if sq is None:
            raise ValueError(f"no piece with index {idx}")
        return sq

    def kind_of(self, idx: int) -> PieceKind:
        kind = self.piece_kind[idx] if 0 <= idx < len(self.piece_kind) else None
        if kind is None:
            raise ValueError(f"no piece with index {idx}")
        return kind

    def describe_piece(self, idx: int) -> str:
        """Piece letter plus square, e.g. ``"Nf6"``."""
        return self.kind_of(idx).symbol + square_to_str(self.square_of(idx))
