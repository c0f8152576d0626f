from __future__ import annotations

import logging
from typing import Dict, Optional

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, Field

from .error import (
    exception_handler,
    http_exception_handler,
    puzzle_error_handler,
    request_validation_exception_handler,
)
from .logging_middleware import RequestIDLoggingMiddleware
from .session import InMemoryPuzzleStore
from ...engine.puzzle import Puzzle, PuzzleError
from ...engine.squareset import square_to_str
from ...engine.transitions import next_states
from ...solver.service import SolverService


logger = logging.getLogger(__name__)


class PuzzleRequest(BaseModel):
    notation: str = Field(..., description="Board placement, optionally followed by the player square")
    player: Optional[str] = Field(default=None, description="Player square, e.g. e4")


class SolveOptions(BaseModel):
    max_states: Optional[int] = Field(default=None, ge=1)


class SolveRequest(PuzzleRequest, SolveOptions):
    pass


class PieceInfo(BaseModel):
    index: int
    kind: str
    square: str


class PuzzleState(BaseModel):
    puzzle_id: Optional[str] = None
    notation: str
    player_start: int
    pieces: list[PieceInfo]
    obstacles: list[str]


class CaptureInfo(BaseModel):
    piece: int
    square: str
    move: str


class SolveResponse(BaseModel):
    solved: bool
    captures: Optional[list[int]]
    moves: list[str]
    states: int
    depth: int
    time_ms: int
    truncated: bool


def create_app() -> FastAPI:
    app = FastAPI(title="Capture Chain Solver API", version="0.1.0")

    logging.basicConfig(level=logging.INFO)

    app.add_middleware(RequestIDLoggingMiddleware)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(PuzzleError, puzzle_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(Exception, exception_handler)

    store = InMemoryPuzzleStore()
    service = SolverService()

    @app.get("/healthz")
    async def healthz() -> Dict[str, str]:
        return {"status": "ok"}

    @app.post("/api/puzzles", response_model=PuzzleState)
    async def create_puzzle(req: PuzzleRequest) -> PuzzleState:
        puzzle = Puzzle.from_notation(req.notation, req.player)
        puzzle_id = store.add(puzzle)
        logger.info("puzzle created", extra={"puzzle_id": puzzle_id, "pieces": puzzle.piece_count})
        return _describe(puzzle, puzzle_id)

    @app.get("/api/puzzles/{puzzle_id}", response_model=PuzzleState)
    async def get_puzzle(puzzle_id: str) -> PuzzleState:
        return _describe(_require_puzzle(store, puzzle_id), puzzle_id)

    @app.delete("/api/puzzles/{puzzle_id}")
    async def delete_puzzle(puzzle_id: str) -> Dict[str, bool]:
        if not store.delete(puzzle_id):
            raise HTTPException(status_code=404, detail="puzzle not found")
        return {"deleted": True}

    @app.get("/api/puzzles/{puzzle_id}/captures", response_model=list[CaptureInfo])
    async def first_captures(puzzle_id: str) -> list[CaptureInfo]:
        puzzle = _require_puzzle(store, puzzle_id)
        src = puzzle.describe_piece(puzzle.player_start)
        out = []
        for captured, _ in next_states(puzzle, puzzle.initial_state()):
            name = square_to_str(puzzle.square_of(captured))
            out.append(CaptureInfo(piece=captured, square=name, move=f"{src}x{name}"))
        return out

    @app.post("/api/puzzles/{puzzle_id}/solve", response_model=SolveResponse)
    async def solve_stored(
        puzzle_id: str, req: Optional[SolveOptions] = None
    ) -> SolveResponse:
        puzzle = _require_puzzle(store, puzzle_id)
        return _solve(service, puzzle, req.max_states if req else None)

    @app.post("/api/solve", response_model=SolveResponse)
    async def solve(req: SolveRequest) -> SolveResponse:
        puzzle = Puzzle.from_notation(req.notation, req.player)
        return _solve(service, puzzle, req.max_states)

    return app


def _solve(service: SolverService, puzzle: Puzzle, max_states: Optional[int]) -> SolveResponse:
    res = service.solve(puzzle, max_states=max_states)
    return SolveResponse(
        solved=res.solved,
        captures=res.captures,
        moves=res.moves(puzzle),
        states=res.states,
        depth=res.depth,
        time_ms=res.time_ms,
        truncated=res.truncated,
    )


def _describe(puzzle: Puzzle, puzzle_id: Optional[str]) -> PuzzleState:
    pieces = []
    for idx, (kind, sq) in enumerate(zip(puzzle.piece_kind, puzzle.piece_square)):
        if kind is None or sq is None:
            break
        pieces.append(PieceInfo(index=idx, kind=kind.symbol, square=square_to_str(sq)))
    return PuzzleState(
        puzzle_id=puzzle_id,
        notation=puzzle.to_notation(),
        player_start=puzzle.player_start,
        pieces=pieces,
        obstacles=[square_to_str(sq) for sq in puzzle.obstacles],
    )


def _require_puzzle(store: InMemoryPuzzleStore, puzzle_id: str) -> Puzzle:
    puzzle = store.get(puzzle_id)
    if puzzle is None:
        raise HTTPException(status_code=404, detail="puzzle not found")
    return puzzle


# Default app for non-factory servers
app = create_app()
