from __future__ import annotations

import pytest

from src.engine.pieces import PieceKind, capture_step, slide_step
from src.engine.squareset import SquareSet


def sq_set(*squares: int) -> SquareSet:
    return SquareSet.from_squares(squares)


def test_rook_steps() -> None:
    # e4
    assert slide_step(PieceKind.ROOK, sq_set(28)) == sq_set(20, 27, 29, 36)
    # corners do not wrap
    assert slide_step(PieceKind.ROOK, sq_set(0)) == sq_set(1, 8)
    assert slide_step(PieceKind.ROOK, sq_set(7)) == sq_set(6, 15)


def test_bishop_steps() -> None:
    assert slide_step(PieceKind.BISHOP, sq_set(28)) == sq_set(19, 21, 35, 37)
    assert slide_step(PieceKind.BISHOP, sq_set(0)) == sq_set(9)
    assert slide_step(PieceKind.BISHOP, sq_set(15)) == sq_set(6, 22)


def test_monarch_is_rook_plus_bishop() -> None:
    s = sq_set(0, 28, 63)
    expected = slide_step(PieceKind.ROOK, s) | slide_step(PieceKind.BISHOP, s)
    assert slide_step(PieceKind.MONARCH, s) == expected
    assert len(slide_step(PieceKind.MONARCH, sq_set(28))) == 8


def test_knight_steps() -> None:
    assert slide_step(PieceKind.KNIGHT, sq_set(0)) == sq_set(10, 17)
    assert slide_step(PieceKind.KNIGHT, sq_set(63)) == sq_set(46, 53)
    assert slide_step(PieceKind.KNIGHT, sq_set(28)) == sq_set(11, 13, 18, 22, 34, 38, 43, 45)


def test_pawn_slide_and_capture_differ() -> None:
    # e4 pawn walks to e5, captures on d5/f5
    assert slide_step(PieceKind.PAWN, sq_set(28)) == sq_set(36)
    assert capture_step(PieceKind.PAWN, sq_set(28)) == sq_set(35, 37)
    # edge files keep a single diagonal
    assert capture_step(PieceKind.PAWN, sq_set(8)) == sq_set(17)
    assert capture_step(PieceKind.PAWN, sq_set(15)) == sq_set(22)
    # last rank moves off the board
    assert slide_step(PieceKind.PAWN, sq_set(60)) == SquareSet.empty()
    assert capture_step(PieceKind.PAWN, sq_set(60)) == SquareSet.empty()


@pytest.mark.parametrize(
    "kind", [PieceKind.BISHOP, PieceKind.ROOK, PieceKind.MONARCH, PieceKind.KNIGHT]
)
def test_slide_and_capture_coincide_except_pawn(kind: PieceKind) -> None:
    for s in (sq_set(0), sq_set(28), sq_set(7, 56), sq_set(*range(0, 64, 3))):
        assert slide_step(kind, s) == capture_step(kind, s)


@pytest.mark.parametrize("kind", list(PieceKind))
def test_steps_never_wrap_files(kind: PieceKind) -> None:
    for sq in range(64):
        for step in (slide_step, capture_step):
            for to in step(kind, SquareSet.single(sq)):
                assert abs(to % 8 - sq % 8) <= 2, (kind, sq, to)


@pytest.mark.parametrize(
    "ch,kind",
    [
        ("P", PieceKind.PAWN),
        ("p", PieceKind.PAWN),
        ("b", PieceKind.BISHOP),
        ("R", PieceKind.ROOK),
        ("n", PieceKind.KNIGHT),
        ("K", PieceKind.MONARCH),
        ("q", PieceKind.MONARCH),
    ],
)
def test_from_char(ch: str, kind: PieceKind) -> None:
    assert PieceKind.from_char(ch) is kind


@pytest.mark.parametrize("bad", ["x", "X", "", "Z", "RR", "1"])
def test_from_char_rejects_unknown(bad: str) -> None:
    with pytest.raises(ValueError):
        PieceKind.from_char(bad)
