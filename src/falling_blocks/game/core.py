from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional, Tuple

import numpy as np

from .grid import Board
from .pieces import Piece, PieceKind
from .rules import ScoringRules


logger = logging.getLogger(__name__)


class Action(IntEnum):
    LEFT = 0
    RIGHT = 1
    ROTATE_CW = 2
    ROTATE_CCW = 3
    SOFT_DROP = 4
    HARD_DROP = 5
    NONE = 6


@dataclass
class GameConfig:
    canvas_width: int = 160
    canvas_height: int = 320
    cell_size: int = 16
    fall_distance: int = 2
    fast_fall_distance: int = 5
    random_seed: Optional[int] = None
    # Display position of the queued piece, above the visible board
    queued_x: int = 10
    queued_y: int = -30

    def __post_init__(self) -> None:
        if self.cell_size < 1:
            raise ValueError(f"cell_size must be positive, got {self.cell_size}")
        if self.canvas_width < self.cell_size or self.canvas_height < self.cell_size:
            raise ValueError(
                f"canvas {self.canvas_width}x{self.canvas_height} is smaller than one cell"
            )
        for name in ("fall_distance", "fast_fall_distance"):
            value = getattr(self, name)
            # A step longer than a cell could skip over a filled row
            if not 1 <= value <= self.cell_size:
                raise ValueError(f"{name} must be in [1, {self.cell_size}], got {value}")

    @property
    def num_cols(self) -> int:
        return self.canvas_width // self.cell_size

    @property
    def num_rows(self) -> int:
        return self.canvas_height // self.cell_size

    # Playfield extent in pixels; any canvas remainder past the last whole
    # cell is not part of the grid
    @property
    def board_width(self) -> int:
        return self.num_cols * self.cell_size

    @property
    def board_height(self) -> int:
        return self.num_rows * self.cell_size


class FallingBlockGame:
    """Simulation engine: one active piece, one queued piece, one board.

    The game advances only through :meth:`tick`. Player commands
    (moves, rotations, drops) mutate the active piece between ticks and
    never touch the board until the next lock. Game over is a board query
    exposed as :attr:`game_over`; ticking past it is allowed.
    """

    def __init__(self, config: Optional[GameConfig] = None, rules: Optional[ScoringRules] = None) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.rng = random.Random(self.config.random_seed)
        self.board = Board(self.config.canvas_width, self.config.canvas_height, self.config.cell_size)
        self.spawn_x = max(0, self.config.num_cols // 2 - 1) * self.config.cell_size
        self.spawn_y = self.config.cell_size
        self.score = 0
        self.lines_cleared_total = 0
        self.soft_drop = False
        self.active: Piece
        self.queued: Piece
        self.reset()

    def reset(self, seed: Optional[int] = None) -> None:
        if seed is not None:
            self.rng.seed(seed)
        self.board.reset()
        self.score = 0
        self.lines_cleared_total = 0
        self.soft_drop = False
        self.active = self._random_piece()
        self.active.move_to(self.spawn_x, self.spawn_y)
        self.queued = self._random_piece()
        self.queued.move_to(self.config.queued_x, self.config.queued_y)
        logger.info("New game: active=%s queued=%s", self.active.kind.name, self.queued.kind.name)

    @property
    def game_over(self) -> bool:
        return self.board.is_top_row_occupied()

    def _current_fall_distance(self) -> int:
        if self.soft_drop:
            return self.config.fast_fall_distance
        return self.config.fall_distance

    def _random_piece(self) -> Piece:
        kind = self.rng.choice(list(PieceKind))
        return Piece(
            kind,
            cell_size=self.config.cell_size,
            board_width=self.config.board_width,
            fall_distance=self._current_fall_distance(),
        )

    # ------------------------------------------------------------------
    # Simulation
    # ------------------------------------------------------------------
    def tick(self) -> int:
        """Advance one step; return the number of rows cleared."""
        active = self.active
        active.tick()
        self.queued.move_to(self.config.queued_x, self.config.queued_y)

        if self.board.piece_collides_down(active) or active.y >= self.config.board_height:
            self._land(active)

        cleared = self._clear_full_rows()

        if active.landed:
            self._next_piece()
        return cleared

    def _land(self, piece: Piece) -> None:
        cell = self.config.cell_size
        if not self.board.piece_collides_down(piece):
            # Fell past the floor between ticks
            piece.move_to(piece.x, self.config.board_height)
        else:
            piece.move_to(piece.x, piece.y - piece.y % cell)
        piece.land()
        placed = self.board.lock(piece)
        logger.debug("Locked %s at (%d, %d), %d/4 blocks placed", piece.kind.name, piece.x, piece.y, placed)

    def _clear_full_rows(self) -> int:
        # Shifting only moves rows above `row`, so one top-down pass finds
        # every full row.
        cleared = 0
        for row in range(self.board.num_rows):
            if self.board.row_is_full(row):
                self.board.clear_row(row)
                self.board.shift_down(row)
                cleared += 1
        if cleared:
            self.score += self.rules.score_for_rows(cleared)
            self.lines_cleared_total += cleared
            logger.info("Cleared %d row(s), score=%d", cleared, self.score)
        return cleared

    def _next_piece(self) -> None:
        self.active = self.queued
        self.active.set_fall_distance(self._current_fall_distance())
        self.active.move_to(self.spawn_x, self.spawn_y)
        self.queued = self._random_piece()
        self.queued.move_to(self.config.queued_x, self.config.queued_y)

    # ------------------------------------------------------------------
    # Player commands
    # ------------------------------------------------------------------
    def move_left(self) -> bool:
        if not self.board.can_move_left(self.active):
            return False
        self.active.left_move()
        return True

    def move_right(self) -> bool:
        if not self.board.can_move_right(self.active):
            return False
        self.active.right_move()
        return True

    def rotate_right(self) -> bool:
        if not self.active.can_rotate():
            return False
        self.active.rotate_right()
        return True

    def rotate_left(self) -> bool:
        if not self.active.can_rotate():
            return False
        self.active.rotate_left()
        return True

    def set_soft_drop(self, held: bool) -> None:
        self.soft_drop = bool(held)
        self.active.set_fall_distance(self._current_fall_distance())

    def hard_drop(self) -> int:
        """Tick until the current piece lands; return the ticks spent."""
        piece = self.active
        ticks = 0
        while not piece.landed:
            self.tick()
            ticks += 1
        return ticks

    # ------------------------------------------------------------------
    # Action interface
    # ------------------------------------------------------------------
    def action_mask(self) -> np.ndarray:
        mask = np.ones(len(Action), dtype=np.bool_)
        mask[Action.LEFT] = self.board.can_move_left(self.active)
        mask[Action.RIGHT] = self.board.can_move_right(self.active)
        can_rotate = self.active.can_rotate()
        mask[Action.ROTATE_CW] = can_rotate
        mask[Action.ROTATE_CCW] = can_rotate
        return mask

    def step(self, action: Action, ticks: int = 1) -> Tuple[np.ndarray, int, bool, dict]:
        if self.game_over:
            return self.get_state(), 0, True, {}

        score_before = self.score
        rows_before = self.lines_cleared_total
        action = Action(action)

        if action == Action.LEFT:
            self.move_left()
        elif action == Action.RIGHT:
            self.move_right()
        elif action == Action.ROTATE_CW:
            self.rotate_right()
        elif action == Action.ROTATE_CCW:
            self.rotate_left()
        elif action == Action.HARD_DROP:
            self.hard_drop()

        soft = action == Action.SOFT_DROP
        if soft:
            self.set_soft_drop(True)
        for _ in range(ticks):
            self.tick()
        if soft:
            self.set_soft_drop(False)

        reward = self.score - score_before
        info = {
            "score": self.score,
            "lines_cleared_total": self.lines_cleared_total,
            "rows_cleared": self.lines_cleared_total - rows_before,
        }
        return self.get_state(), reward, self.game_over, info

    def get_state(self) -> np.ndarray:
        # Locked blocks as 1, falling piece overlaid as -1
        state = self.board.to_array()
        for row, col in self.active.cells():
            if self.board.is_inside(row, col):
                state[row, col] = -1
        return state
