from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Dict, List, Optional, Set, Tuple

from src.engine.puzzle import Puzzle, is_done
from src.engine.squareset import square_to_str
from src.engine.transitions import next_states


logger = logging.getLogger(__name__)


@dataclass
class SolveResult:
    captures: Optional[List[int]]
    states: int
    depth: int
    time_ms: int
    truncated: bool = False

    @property
    def solved(self) -> bool:
        return self.captures is not None

    def moves(self, puzzle: Puzzle) -> List[str]:
        """Render the capture list as moves like ``"Re1xe8"``.

        The piece in hand travels from its square to the captured piece's
        square and then takes on that piece's kind.
        """
        if self.captures is None:
            return []
        out: List[str] = []
        current = puzzle.player_start
        for idx in self.captures:
            out.append(f"{puzzle.describe_piece(current)}x{square_to_str(puzzle.square_of(idx))}")
            current = idx
        return out


class SearchLimitExceeded(Exception):
    def __init__(self, states: int, depth: int) -> None:
        super().__init__(states, depth)
        self.states = states
        self.depth = depth


def _search(
    puzzle: Puzzle, max_states: Optional[int]
) -> Tuple[Optional[List[int]], int, int]:
    initial = puzzle.initial_state()
    if is_done(initial):
        return [], 1, 0

    # state -> (predecessor, captured piece index); first discovery is shortest
    parents: Dict[int, Tuple[int, int]] = {}
    frontier: Set[int] = {initial}
    depth = 0
    while frontier:
        depth += 1
        logger.debug(
            "expanding level",
            extra={"depth": depth, "frontier": len(frontier), "states": len(parents) + 1},
        )
        next_frontier: Set[int] = set()
        for state in frontier:
            for captured, succ in next_states(puzzle, state):
                if succ in parents:
                    continue
                parents[succ] = (state, captured)
                if is_done(succ):
                    return _reconstruct(parents, initial, succ), len(parents) + 1, depth
                if max_states is not None and len(parents) + 1 > max_states:
                    raise SearchLimitExceeded(len(parents) + 1, depth)
                next_frontier.add(succ)
        frontier = next_frontier
    return None, len(parents) + 1, depth


def _reconstruct(parents: Dict[int, Tuple[int, int]], initial: int, final: int) -> List[int]:
    path: List[int] = []
    state = final
    while state != initial:
        state, captured = parents[state]
        path.append(captured)
    path.reverse()
    return path


def solve(puzzle: Puzzle) -> Optional[List[int]]:
    """Find a capture order clearing the board, or ``None`` if there is none.

    Breadth-first over progress states. Every capture removes exactly one
    piece, so the first route found to any state is a shortest one.
    """
    captures, _, _ = _search(puzzle, None)
    return captures


class SolverService:
    """Runs the breadth-first solver and reports search statistics."""

    def solve(self, puzzle: Puzzle, max_states: Optional[int] = None) -> SolveResult:
        """Solve ``puzzle``, giving up once more than ``max_states`` are discovered.

        A truncated result carries no captures and proves nothing about
        solvability.
        """
        if max_states is not None and max_states < 1:
            raise ValueError("max_states must be >= 1")
        t0 = time.perf_counter()
        truncated = False
        try:
            captures, states, depth = _search(puzzle, max_states)
        except SearchLimitExceeded as e:
            captures, states, depth = None, e.states, e.depth
            truncated = True
        time_ms = int((time.perf_counter() - t0) * 1000)
        logger.info(
            "solve finished",
            extra={
                "solved": captures is not None,
                "truncated": truncated,
                "states": states,
                "depth": depth,
                "time_ms": time_ms,
            },
        )
        return SolveResult(
            captures=captures, states=states, depth=depth, time_ms=time_ms, truncated=truncated
        )
