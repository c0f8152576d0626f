from __future__ import annotations

from typing import Iterator, Tuple

from .capture import capturable
from .puzzle import IN_HAND_SHIFT, Puzzle, in_hand, remaining_mask
from .squareset import SquareSet


class InvariantError(RuntimeError):
    """A progress state references a piece the puzzle does not have."""


def next_states(puzzle: Puzzle, state: int) -> Iterator[Tuple[int, int]]:
    """Yield ``(captured_piece_index, next_state)`` for every legal capture.

    One successor per capturable target square; the captured piece leaves the
    remaining mask and becomes the piece in hand.

    Raises:
        InvariantError: If the in-hand index has no piece kind or square.
    """
    player = in_hand(state)
    kind = puzzle.piece_kind[player] if player < len(puzzle.piece_kind) else None
    sq = puzzle.piece_square[player] if player < len(puzzle.piece_square) else None
    if kind is None or sq is None:
        raise InvariantError(f"in-hand piece {player} does not exist")

    remaining = remaining_mask(state)
    hits = capturable(kind, SquareSet.single(sq), puzzle.obstacles, puzzle.targets(state))
    for target in hits:
        captured = puzzle.square_to_piece[target]
        if captured is None:
            raise InvariantError(f"no piece on captured square {target}")
        yield captured, (remaining & ~(1 << captured)) | (captured << IN_HAND_SHIFT)
