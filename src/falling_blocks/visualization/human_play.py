from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass
from typing import Optional

import pygame

from falling_blocks.game import FallingBlockGame, GameConfig
from .renderer import Renderer


logger = logging.getLogger(__name__)


@dataclass
class LoopConfig:
    tick_interval_ms: int = 20
    fast_tick_interval_ms: int = 0
    move_interval_ms: int = 60
    fps: int = 60
    scale: int = 2


@dataclass
class InputState:
    moving_left: bool = False
    moving_right: bool = False
    soft_drop: bool = False
    # Rotation and drops fire once per press, not on key repeat
    key_held: bool = False


@dataclass
class LoopTimers:
    last_tick_ms: int = 0
    last_move_ms: int = 0


def handle_key_down(game: FallingBlockGame, inputs: InputState, key: int) -> None:
    if key == pygame.K_LEFT:
        if game.board.can_move_left(game.active):
            inputs.moving_left = True
            inputs.moving_right = False
    elif key == pygame.K_RIGHT:
        if game.board.can_move_right(game.active):
            inputs.moving_right = True
            inputs.moving_left = False

    if not inputs.key_held:
        if key == pygame.K_UP:
            game.rotate_right()
        elif key == pygame.K_z:
            game.rotate_left()
        elif key == pygame.K_DOWN:
            inputs.soft_drop = True
            game.set_soft_drop(True)
        elif key == pygame.K_SPACE:
            game.hard_drop()
    inputs.key_held = True


def handle_key_up(game: FallingBlockGame, inputs: InputState, key: int) -> None:
    if key == pygame.K_DOWN:
        inputs.soft_drop = False
        game.set_soft_drop(False)
    elif key == pygame.K_LEFT:
        inputs.moving_left = False
    elif key == pygame.K_RIGHT:
        inputs.moving_right = False
    inputs.key_held = False


def advance(game: FallingBlockGame, inputs: InputState, timers: LoopTimers, loop: LoopConfig, now_ms: int) -> None:
    """Run the movement step and the simulation tick when their intervals elapse."""
    if now_ms - timers.last_move_ms > loop.move_interval_ms:
        timers.last_move_ms = now_ms
        if inputs.moving_left:
            game.move_left()
        elif inputs.moving_right:
            game.move_right()

    interval = loop.fast_tick_interval_ms if inputs.soft_drop else loop.tick_interval_ms
    if now_ms - timers.last_tick_ms > interval:
        timers.last_tick_ms = now_ms
        game.tick()


def run(config: Optional[GameConfig] = None, loop: Optional[LoopConfig] = None) -> None:
    loop = loop or LoopConfig()
    pygame.init()
    try:
        clock = pygame.time.Clock()
        game = FallingBlockGame(config)
        renderer = Renderer(scale=loop.scale)
        screen = pygame.display.set_mode(renderer.window_size(game))
        pygame.display.set_caption("Falling Blocks")

        inputs = InputState()
        timers = LoopTimers(pygame.time.get_ticks(), pygame.time.get_ticks())

        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    else:
                        handle_key_down(game, inputs, event.key)
                elif event.type == pygame.KEYUP:
                    handle_key_up(game, inputs, event.key)

            advance(game, inputs, timers, loop, pygame.time.get_ticks())
            renderer.draw(screen, game)

            if game.game_over:
                logger.info("Game over, final score %d (%d rows)", game.score, game.lines_cleared_total)
                game.reset()
                inputs = InputState()

            clock.tick(loop.fps)
    finally:
        pygame.quit()


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Play Falling Blocks with the keyboard")
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--scale", type=int, default=2)
    p.add_argument("--tick_ms", type=int, default=20, help="Milliseconds between simulation ticks")
    return p


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="[FALLING_BLOCKS] %(asctime)s - %(message)s")
    args = build_parser().parse_args()
    run(GameConfig(random_seed=args.seed), LoopConfig(tick_interval_ms=args.tick_ms, scale=args.scale))


if __name__ == "__main__":  # pragma: no cover
    main()
