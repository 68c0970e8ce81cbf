from __future__ import annotations

import logging
import numbers
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional, Tuple, Union

import numpy as np

from .pieces import Block, Piece


logger = logging.getLogger(__name__)

Coordinate = Tuple[int, int]


class Direction(str, Enum):
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


_DIRECTIONS = {d.value: d for d in Direction}


@dataclass
class Cell:
    row: int
    col: int
    occupant: Optional[Block] = None

    @property
    def filled(self) -> bool:
        return self.occupant is not None


class Board:
    """Cell matrix for locked blocks.

    The board is sized in pixels and divided into ``cell_width`` by
    ``cell_height`` cells. Row 0 is the top row. Boundary conditions
    (out-of-bounds cells, occupied cells, unknown directions) are reported
    as plain booleans so the tick loop never has to catch anything.
    """

    def __init__(self, width: int, height: int, cell_width: int = 16, cell_height: Optional[int] = None) -> None:
        self.width = int(width)
        self.height = int(height)
        self.cell_width = int(cell_width)
        self.cell_height = int(cell_height if cell_height is not None else cell_width)
        self.num_cols = self.width // self.cell_width
        self.num_rows = self.height // self.cell_height
        self.grid_width = self.num_cols * self.cell_width
        if self.num_rows < 1 or self.num_cols < 1:
            raise ValueError(
                f"board of {self.width}x{self.height} px holds no "
                f"{self.cell_width}x{self.cell_height} cell"
            )
        self.rows: List[List[Cell]] = [
            [Cell(i, j) for j in range(self.num_cols)] for i in range(self.num_rows)
        ]

    def reset(self) -> None:
        for cell in self.iter_cells():
            cell.occupant = None

    def is_inside(self, row: int, col: int) -> bool:
        return 0 <= row < self.num_rows and 0 <= col < self.num_cols

    def cell_of(self, position: Union[Block, Tuple[float, float]]) -> Coordinate:
        """Return the (row, col) holding a pixel position.

        Accepts a block (anything with ``x``/``y``) or an ``(x, y)`` pair.
        The result may lie outside the board; use :meth:`is_inside`.
        """
        if hasattr(position, "x") and hasattr(position, "y"):
            x, y = position.x, position.y  # type: ignore[union-attr]
        elif isinstance(position, (tuple, list)) and len(position) == 2:
            x, y = position
        else:
            raise TypeError(f"not a position: {position!r}")
        for value in (x, y):
            if isinstance(value, bool) or not isinstance(value, numbers.Real):
                raise TypeError(f"not a numeric position: {position!r}")
        return int(y // self.cell_height), int(x // self.cell_width)

    def occupy(self, block: Block) -> bool:
        row, col = self.cell_of(block)
        if not self.is_inside(row, col):
            logger.debug("Block outside board at row=%d col=%d, not placed", row, col)
            return False
        cell = self.rows[row][col]
        if cell.filled:
            logger.debug("Cell[%d][%d] already filled, not placed", row, col)
            return False
        cell.occupant = block
        return True

    def lock(self, piece: Piece) -> int:
        """Occupy the board with every block of `piece`; return how many fit."""
        return sum(1 for block in piece.blocks if self.occupy(block))

    def _filled(self, row: int, col: int) -> bool:
        return self.is_inside(row, col) and self.rows[row][col].filled

    def collides(self, block: Block, direction: Union[Direction, str] = Direction.DOWN) -> bool:
        resolved = _DIRECTIONS.get(direction) if isinstance(direction, str) else None
        if resolved is None:
            logger.debug("Unknown direction %r", direction)
            return False
        direction = resolved

        row, col = self.cell_of(block)
        if not self.is_inside(row, col):
            return False

        if direction is Direction.DOWN:
            return row == self.num_rows - 1 or self.rows[row + 1][col].filled

        step = -1 if direction is Direction.LEFT else 1
        # Diagonal-down catches blocks still sliding into the next row
        return self._filled(row, col + step) or self._filled(row + 1, col + step)

    def piece_collides_down(self, piece: Piece) -> bool:
        return any(self.collides(block, Direction.DOWN) for block in piece.blocks)

    def can_move_left(self, piece: Piece) -> bool:
        if piece.x <= 0:
            return False
        return not any(self.collides(b, Direction.LEFT) for b in piece.edge_blocks("left"))

    def can_move_right(self, piece: Piece) -> bool:
        if piece.x + piece.width >= self.grid_width:
            return False
        return not any(self.collides(b, Direction.RIGHT) for b in piece.edge_blocks("right"))

    def row_is_full(self, row: int) -> bool:
        return all(cell.filled for cell in self.rows[row])

    def clear_row(self, row: int) -> None:
        for cell in self.rows[row]:
            cell.occupant = None

    def shift_down(self, row: int) -> None:
        """Move every row above `row` down one step; row 0 ends up empty."""
        for i in range(row, 0, -1):
            for upper, lower in zip(self.rows[i - 1], self.rows[i]):
                lower.occupant = upper.occupant
                if lower.occupant is not None:
                    lower.occupant.y += self.cell_height
        for cell in self.rows[0]:
            cell.occupant = None

    def is_top_row_occupied(self) -> bool:
        return any(cell.filled for cell in self.rows[0])

    def iter_cells(self) -> Iterator[Cell]:
        for row in self.rows:
            yield from row

    def occupied_blocks(self) -> List[Block]:
        return [cell.occupant for cell in self.iter_cells() if cell.occupant is not None]

    def filled_count(self) -> int:
        return sum(1 for cell in self.iter_cells() if cell.filled)

    def to_array(self) -> np.ndarray:
        grid = np.zeros((self.num_rows, self.num_cols), dtype=np.int8)
        for cell in self.iter_cells():
            if cell.filled:
                grid[cell.row, cell.col] = 1
        return grid

    def __str__(self) -> str:
        return "\n".join(
            "".join("█" if cell.filled else "·" for cell in row) for row in self.rows
        )
