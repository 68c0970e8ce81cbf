from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, List, Tuple


Offset = Tuple[int, int]


class PieceKind(IntEnum):
    SQUARE = 0
    BAR = 1
    S = 2
    Z = 3
    L = 4
    J = 5
    T = 6


@dataclass
class Block:
    """Single 1x1 unit in board pixels; (x, y) is the top-left corner."""

    x: int
    y: int
    landed: bool = False

    def land(self) -> None:
        self.landed = True


@dataclass(frozen=True)
class RotationState:
    """Named block layout. Offsets and width are in cells, y pointing down."""

    name: str
    offsets: Tuple[Offset, Offset, Offset, Offset]
    width: int


def _reversed(state: RotationState, name: str) -> RotationState:
    # 180 degree turn of a symmetric shape: same cells, block order reversed
    return RotationState(name, tuple(reversed(state.offsets)), state.width)  # type: ignore[arg-type]


_BAR_H = RotationState("HORIZONTAL", ((0, -1), (1, -1), (2, -1), (3, -1)), 4)
_BAR_V = RotationState("VERTICAL", ((0, -1), (0, -2), (0, -3), (0, -4)), 1)
_S_H = RotationState("HORIZONTAL", ((0, -1), (1, -1), (1, -2), (2, -2)), 3)
_S_V = RotationState("VERTICAL", ((1, -1), (1, -2), (0, -2), (0, -3)), 2)
_Z_H = RotationState("HORIZONTAL", ((0, -2), (1, -2), (1, -1), (2, -1)), 3)
_Z_V = RotationState("VERTICAL", ((0, -1), (0, -2), (1, -2), (1, -3)), 2)


# Cyclic order is clockwise: rotate_right walks forward through the tuple.
ROTATION_STATES: Dict[PieceKind, Tuple[RotationState, ...]] = {
    PieceKind.SQUARE: (
        RotationState("SQUARE", ((0, -1), (0, -2), (1, -1), (1, -2)), 2),
    ),
    PieceKind.BAR: (
        _BAR_H,
        _BAR_V,
        _reversed(_BAR_H, "HORIZONTAL-REVERSED"),
        _reversed(_BAR_V, "VERTICAL-REVERSED"),
    ),
    PieceKind.S: (
        _S_H,
        _S_V,
        _reversed(_S_H, "HORIZONTAL-REVERSED"),
        _reversed(_S_V, "VERTICAL-REVERSED"),
    ),
    PieceKind.Z: (
        _Z_H,
        _Z_V,
        _reversed(_Z_H, "HORIZONTAL-REVERSED"),
        _reversed(_Z_V, "VERTICAL-REVERSED"),
    ),
    PieceKind.L: (
        RotationState("BOTTOM-RIGHT", ((0, -1), (1, -1), (2, -1), (2, -2)), 3),
        RotationState("BOTTOM-DOWN", ((0, -3), (0, -2), (0, -1), (1, -1)), 2),
        RotationState("BOTTOM-LEFT", ((0, -1), (0, -2), (1, -2), (2, -2)), 3),
        RotationState("BOTTOM-UP", ((0, -3), (1, -3), (1, -2), (1, -1)), 2),
    ),
    PieceKind.J: (
        RotationState("BOTTOM-LEFT", ((0, -1), (0, -2), (1, -1), (2, -1)), 3),
        RotationState("BOTTOM-DOWN", ((0, -3), (1, -3), (0, -2), (0, -1)), 2),
        RotationState("BOTTOM-RIGHT", ((0, -2), (1, -2), (2, -2), (2, -1)), 3),
        RotationState("BOTTOM-UP", ((1, -3), (1, -2), (1, -1), (0, -1)), 2),
    ),
    PieceKind.T: (
        RotationState("BOTTOM-DOWN", ((0, -1), (1, -1), (1, -2), (2, -1)), 3),
        RotationState("BOTTOM-LEFT", ((0, -1), (0, -2), (1, -2), (0, -3)), 2),
        RotationState("BOTTOM-UP", ((0, -2), (1, -2), (1, -1), (2, -2)), 3),
        RotationState("BOTTOM-RIGHT", ((0, -2), (1, -3), (1, -2), (1, -1)), 2),
    ),
}


@dataclass(frozen=True)
class EdgeBlocks:
    left: Tuple[int, ...]
    right: Tuple[int, ...]


def _edge_indices(offsets: Tuple[Offset, ...], side: str) -> Tuple[int, ...]:
    """Index of the outermost block of each occupied row on `side`."""
    pick = min if side == "left" else max
    rows: Dict[int, List[int]] = {}
    for idx, (_, dy) in enumerate(offsets):
        rows.setdefault(dy, []).append(idx)
    edges = [pick(indices, key=lambda i: offsets[i][0]) for indices in rows.values()]
    return tuple(sorted(edges))


EDGE_BLOCKS: Dict[Tuple[PieceKind, str], EdgeBlocks] = {
    (kind, state.name): EdgeBlocks(
        left=_edge_indices(state.offsets, "left"),
        right=_edge_indices(state.offsets, "right"),
    )
    for kind, states in ROTATION_STATES.items()
    for state in states
}


class Piece:
    """A falling piece made of four blocks.

    The anchor (x, y) is the bottom-left corner of the current state's
    bounding box in board pixels. Block positions always follow
    ``anchor + offset * cell_size`` until the piece lands.
    """

    def __init__(
        self,
        kind: PieceKind,
        x: int = -1,
        y: int = -1,
        *,
        cell_size: int = 16,
        board_width: int = 160,
        fall_distance: int = 2,
    ) -> None:
        self.kind = PieceKind(kind)
        self.states = ROTATION_STATES[self.kind]
        self.state_index = 0
        self.cell_size = int(cell_size)
        self.board_width = int(board_width)
        self.fall_distance = int(fall_distance)
        self.landed = False
        self.x = x
        self.y = y
        self.blocks = [Block(0, 0) for _ in range(4)]
        self.move_to(x, y)

    def __repr__(self) -> str:
        return (
            f"Piece({self.kind.name}, x={self.x}, y={self.y}, "
            f"state={self.state.name!r}, landed={self.landed})"
        )

    @property
    def state(self) -> RotationState:
        return self.states[self.state_index]

    @property
    def width(self) -> int:
        """Bounding width of the current state in pixels."""
        return self.state.width * self.cell_size

    def move_to(self, x: int, y: int) -> None:
        self.x = x
        self.y = y
        for block, (dx, dy) in zip(self.blocks, self.state.offsets):
            block.x = x + dx * self.cell_size
            block.y = y + dy * self.cell_size

    def set_fall_distance(self, fall_distance: int) -> None:
        self.fall_distance = int(fall_distance)

    def left_move(self) -> None:
        self.move_to(max(0, self.x - self.cell_size), self.y)

    def right_move(self) -> None:
        self.move_to(min(self.x + self.cell_size, self.board_width - self.width), self.y)

    def can_rotate(self) -> bool:
        # Near the spawn row there is no room to turn
        return len(self.states) > 1 and self.y > 2 * self.cell_size

    def rotate_right(self) -> None:
        self._rotate(1)

    def rotate_left(self) -> None:
        self._rotate(-1)

    def _rotate(self, delta: int) -> None:
        if self.y <= 2 * self.cell_size:
            return
        self.state_index = (self.state_index + delta) % len(self.states)
        x = min(self.x, self.board_width - self.width)
        self.move_to(max(0, x), self.y)

    def tick(self) -> None:
        if not self.landed:
            self.move_to(self.x, self.y + self.fall_distance)

    def land(self) -> None:
        self.landed = True
        for block in self.blocks:
            block.land()

    def edge_blocks(self, side: str) -> List[Block]:
        edges = EDGE_BLOCKS[(self.kind, self.state.name)]
        indices = edges.left if side == "left" else edges.right
        return [self.blocks[i] for i in indices]

    def cells(self) -> List[Tuple[int, int]]:
        """(row, col) of every block, computed with floor division."""
        return [(b.y // self.cell_size, b.x // self.cell_size) for b in self.blocks]
