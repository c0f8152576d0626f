from __future__ import annotations

import pytest

from src.engine.puzzle import Puzzle
from src.solver.service import SolverService, solve


def test_rook_takes_distant_pawn() -> None:
    p = Puzzle.from_notation("p7/8/8/8/8/8/8/R7 a1")
    assert solve(p) == [1]


def test_walled_off_pawn_has_no_solution() -> None:
    p = Puzzle.from_notation("p7/8/8/8/XXXXXXXX/8/8/R7 a1")
    assert solve(p) is None


def test_single_obstacle_is_bypassed() -> None:
    # Sliding repeats, so the rook walks around a4 via the b-file
    p = Puzzle.from_notation("p7/8/8/8/X7/8/8/R7 a1")
    assert solve(p) == [1]


def test_knight_needs_several_jumps() -> None:
    # Ne4 and a pawn directly ahead on e5
    p = Puzzle.from_notation("8/8/8/4p3/4N3/8/8/8 e4")
    assert solve(p) == [1]


def test_order_matters() -> None:
    # Taking the h8 pawn first strands the player; the knight must go first
    p = Puzzle.from_notation("7p/8/8/8/8/8/8/RN6 a1")
    assert solve(p) == [1, 2]


def test_bishop_cannot_change_colour() -> None:
    p = Puzzle.from_notation("8/8/8/8/8/8/8/2Bp4 c1")
    assert solve(p) is None


def test_lone_player_is_already_solved() -> None:
    p = Puzzle.from_notation("8/8/8/8/8/8/8/R7 a1")
    assert solve(p) == []


@pytest.mark.parametrize(
    "text",
    [
        "7p/8/8/8/8/8/8/RN6 a1",
        "8/8/2p5/8/4b3/8/1N6/8 b2",
        "8/6n1/5p2/8/3r4/8/8/Q1b5 a1",
    ],
)
def test_solution_captures_every_piece_once(text: str) -> None:
    p = Puzzle.from_notation(text)
    captures = solve(p)
    assert captures is not None
    assert len(captures) == p.piece_count - 1
    assert sorted(captures) == sorted(i for i in range(p.piece_count) if i != p.player_start)


def test_solve_is_deterministic() -> None:
    p = Puzzle.from_notation("8/6n1/5p2/8/3r4/8/8/Q1b5 a1")
    assert solve(p) == solve(p)


def test_service_reports_stats_and_moves() -> None:
    p = Puzzle.from_notation("7p/8/8/8/8/8/8/RN6 a1")
    res = SolverService().solve(p)
    assert res.solved
    assert res.captures == [1, 2]
    assert res.moves(p) == ["Ra1xb1", "Nb1xh8"]
    assert res.depth == 2
    assert res.states >= 3
    assert res.time_ms >= 0
    assert not res.truncated


def test_service_unsolvable_is_not_truncated() -> None:
    p = Puzzle.from_notation("p7/8/8/8/XXXXXXXX/8/8/R7 a1")
    res = SolverService().solve(p)
    assert not res.solved
    assert res.captures is None
    assert res.moves(p) == []
    assert not res.truncated


def test_service_state_budget_truncates() -> None:
    p = Puzzle.from_notation("7p/8/8/8/8/8/8/RN6 a1")
    res = SolverService().solve(p, max_states=1)
    assert res.truncated
    assert not res.solved
    # the state that broke the budget is counted too
    assert res.states == 2
    assert res.depth == 1


def test_service_rejects_bad_budget() -> None:
    p = Puzzle.from_notation("p7/8/8/8/8/8/8/R7 a1")
    with pytest.raises(ValueError):
        SolverService().solve(p, max_states=0)
