from __future__ import annotations

import os

import pytest

# Keep pygame headless for renderer and loop-driver tests
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

from falling_blocks.game import Board, FallingBlockGame, GameConfig, Piece, PieceKind


@pytest.fixture
def board() -> Board:
    return Board(160, 320, 16)


@pytest.fixture
def game() -> FallingBlockGame:
    return FallingBlockGame(GameConfig(random_seed=1234))


def make_piece(kind: PieceKind, x: int, y: int, fall_distance: int = 2) -> Piece:
    return Piece(kind, x, y, cell_size=16, board_width=160, fall_distance=fall_distance)


def lock_piece(board: Board, piece: Piece) -> int:
    piece.land()
    return board.lock(piece)
