from __future__ import annotations

import pytest

from falling_blocks.game import EDGE_BLOCKS, ROTATION_STATES, Piece, PieceKind
from falling_blocks.game.pieces import EdgeBlocks

from conftest import make_piece


def _assert_blocks_follow_anchor(piece: Piece) -> None:
    for block, (dx, dy) in zip(piece.blocks, piece.state.offsets):
        assert (block.x, block.y) == (piece.x + dx * 16, piece.y + dy * 16)


@pytest.mark.parametrize("kind", list(PieceKind))
def test_state_count(kind):
    expected = 1 if kind == PieceKind.SQUARE else 4
    assert len(ROTATION_STATES[kind]) == expected
    for state in ROTATION_STATES[kind]:
        assert len(state.offsets) == 4
        assert len(set(state.offsets)) == 4
        assert state.width == max(dx for dx, _ in state.offsets) + 1


@pytest.mark.parametrize("kind", list(PieceKind))
def test_blocks_follow_anchor_through_rotations(kind):
    piece = make_piece(kind, 48, 160)
    _assert_blocks_follow_anchor(piece)
    for _ in range(2 * len(piece.states)):
        piece.rotate_right()
        _assert_blocks_follow_anchor(piece)
    for _ in range(2 * len(piece.states)):
        piece.rotate_left()
        _assert_blocks_follow_anchor(piece)
    piece.tick()
    _assert_blocks_follow_anchor(piece)


@pytest.mark.parametrize("kind", list(PieceKind))
def test_full_turn_restores_state(kind):
    piece = make_piece(kind, 48, 160)
    for _ in range(len(piece.states)):
        piece.rotate_right()
    assert piece.state_index == 0
    for _ in range(len(piece.states)):
        piece.rotate_left()
    assert piece.state_index == 0


def test_rotate_left_wraps_to_last_state():
    piece = make_piece(PieceKind.L, 48, 160)
    piece.rotate_left()
    assert piece.state_index == 3
    assert piece.state.name == "BOTTOM-UP"


def test_rotation_suppressed_near_top():
    piece = make_piece(PieceKind.T, 48, 32)
    assert not piece.can_rotate()
    piece.rotate_right()
    piece.rotate_left()
    assert piece.state_index == 0

    piece.move_to(48, 34)
    assert piece.can_rotate()
    piece.rotate_right()
    assert piece.state_index == 1


def test_square_never_reports_rotatable():
    piece = make_piece(PieceKind.SQUARE, 48, 160)
    assert not piece.can_rotate()
    piece.rotate_right()
    assert piece.state_index == 0


def test_rotation_clamps_to_right_edge():
    piece = make_piece(PieceKind.BAR, 96, 160)
    piece.rotate_right()
    assert piece.state.name == "VERTICAL"
    piece.move_to(144, 160)
    piece.rotate_right()
    assert piece.state.name == "HORIZONTAL-REVERSED"
    assert piece.x == 96
    assert all(0 <= b.x < 160 for b in piece.blocks)
    _assert_blocks_follow_anchor(piece)


def test_left_then_right_restores_x():
    piece = make_piece(PieceKind.T, 48, 160)
    piece.left_move()
    assert piece.x == 32
    piece.right_move()
    assert piece.x == 48
    _assert_blocks_follow_anchor(piece)


def test_left_move_at_edge_is_clamped():
    piece = make_piece(PieceKind.J, 0, 160)
    piece.left_move()
    assert piece.x == 0


def test_right_move_at_edge_is_clamped():
    piece = make_piece(PieceKind.SQUARE, 128, 160)
    piece.right_move()
    assert piece.x == 128
    piece = make_piece(PieceKind.BAR, 80, 160)
    piece.right_move()
    assert piece.x == 96
    piece.right_move()
    assert piece.x == 96


def test_tick_falls_by_fall_distance_until_landed():
    piece = make_piece(PieceKind.Z, 48, 100)
    piece.tick()
    assert piece.y == 102
    piece.set_fall_distance(5)
    piece.tick()
    assert piece.y == 107
    _assert_blocks_follow_anchor(piece)
    piece.land()
    piece.tick()
    assert piece.y == 107


def test_land_is_idempotent():
    piece = make_piece(PieceKind.S, 48, 160)
    piece.land()
    once = (piece.landed, piece.x, piece.y, [(b.x, b.y, b.landed) for b in piece.blocks])
    piece.land()
    twice = (piece.landed, piece.x, piece.y, [(b.x, b.y, b.landed) for b in piece.blocks])
    assert once == twice
    assert all(b.landed for b in piece.blocks)


def test_edge_table_entries():
    assert EDGE_BLOCKS[(PieceKind.SQUARE, "SQUARE")] == EdgeBlocks(left=(0, 1), right=(2, 3))
    assert EDGE_BLOCKS[(PieceKind.T, "BOTTOM-DOWN")] == EdgeBlocks(left=(0, 2), right=(2, 3))
    assert EDGE_BLOCKS[(PieceKind.BAR, "HORIZONTAL")] == EdgeBlocks(left=(0,), right=(3,))
    assert EDGE_BLOCKS[(PieceKind.BAR, "VERTICAL")] == EdgeBlocks(left=(0, 1, 2, 3), right=(0, 1, 2, 3))


@pytest.mark.parametrize("kind", list(PieceKind))
def test_edge_table_has_one_block_per_row(kind):
    for state in ROTATION_STATES[kind]:
        edges = EDGE_BLOCKS[(kind, state.name)]
        rows = {dy for _, dy in state.offsets}
        assert len(edges.left) == len(rows)
        assert len(edges.right) == len(rows)
        for idx in edges.left:
            dx, dy = state.offsets[idx]
            assert dx == min(ox for ox, oy in state.offsets if oy == dy)
        for idx in edges.right:
            dx, dy = state.offsets[idx]
            assert dx == max(ox for ox, oy in state.offsets if oy == dy)


def test_cells_use_floor_division():
    piece = make_piece(PieceKind.SQUARE, 32, 322)
    assert sorted(piece.cells()) == [(18, 2), (18, 3), (19, 2), (19, 3)]
