from __future__ import annotations

from .pieces import PieceKind, capture_step, slide_step
from .squareset import SquareSet


def capturable(
    kind: PieceKind, start: SquareSet, obstacles: SquareSet, targets: SquareSet
) -> SquareSet:
    """Targets capturable by a piece of ``kind`` standing on ``start``.

    The piece may slide any number of times across permeable squares (neither
    obstacle nor target), then must finish with exactly one capture step onto a
    target. Knights therefore chain jumps freely and pawns walk forward before
    capturing diagonally.

    Args:
        kind (PieceKind): Kind of the moving piece.
        start (SquareSet): Square(s) the piece starts from.
        obstacles (SquareSet): Blocking, non-capturable squares.
        targets (SquareSet): Squares holding capturable pieces.

    Returns:
        SquareSet: Subset of ``targets`` reachable by slide-then-capture.
    """
    permeable = ~(obstacles | targets)
    reachable = start & permeable
    # Monotone growth over 64 bits: converges in at most 64 rounds
    while True:
        grown = (reachable | slide_step(kind, reachable)) & permeable
        if grown == reachable:
            break
        reachable = grown
    return capture_step(kind, reachable) & targets
