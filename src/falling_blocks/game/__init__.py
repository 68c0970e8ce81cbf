"""Game module for Falling Blocks.

Exports the simulation engine and supporting classes:
- Board, Cell, Direction: Grid occupancy, collisions and row clearing
- Piece, Block, PieceKind, RotationState: Falling pieces and their rotation tables
- ScoringRules: Fixed per-row reward
- FallingBlockGame, GameConfig, Action: Tick loop, command surface and configuration
"""

from .grid import Board, Cell, Direction
from .pieces import Block, EDGE_BLOCKS, Piece, PieceKind, ROTATION_STATES, RotationState
from .rules import ScoringRules
from .core import Action, FallingBlockGame, GameConfig

__all__ = [
    "Board",
    "Cell",
    "Direction",
    "Block",
    "Piece",
    "PieceKind",
    "RotationState",
    "ROTATION_STATES",
    "EDGE_BLOCKS",
    "ScoringRules",
    "FallingBlockGame",
    "GameConfig",
    "Action",
]
