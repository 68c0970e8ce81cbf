from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from falling_blocks.game import Action, FallingBlockGame, GameConfig


class FallingBlocksEnv(gym.Env):
    """Gymnasium view of the falling-block engine.

    Each step applies one :class:`Action` and then ticks the engine until the
    active piece has fallen one cell. Reward is the score gained in the step.

    Observation: ``(rows, cols)`` int8 grid, 1 for locked blocks and -1 for
    the falling piece.
    """

    metadata = {"render_modes": ["human", "rgb_array"], "render_fps": 30}

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        render_mode: Optional[str] = None,
        ticks_per_step: Optional[int] = None,
        max_episode_steps: int = 10000,
        terminal_penalty: float = 0.0,
    ) -> None:
        super().__init__()
        self.game = FallingBlockGame(config)
        self.render_mode = render_mode
        cfg = self.game.config
        self.ticks_per_step = int(ticks_per_step or max(1, cfg.cell_size // cfg.fall_distance))
        self.max_episode_steps = int(max_episode_steps)
        self.terminal_penalty = float(terminal_penalty)

        self.observation_space = spaces.Box(
            low=-1, high=1, shape=(cfg.num_rows, cfg.num_cols), dtype=np.int8
        )
        self.action_space = spaces.Discrete(len(Action))

        self._steps = 0
        self._renderer = None
        self._screen = None

    def _get_info(self) -> Dict[str, Any]:
        return {
            "action_mask": self.game.action_mask(),
            "score": self.game.score,
            "lines_cleared_total": self.game.lines_cleared_total,
            "steps": self._steps,
        }

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[np.ndarray, Dict[str, Any]]:
        super().reset(seed=seed)
        if seed is None:
            seed = int(self.np_random.integers(0, 2**31 - 1))
        self.game.reset(seed)
        self._steps = 0
        return self.game.get_state(), self._get_info()

    def step(self, action: int):
        obs, gained, terminated, step_info = self.game.step(Action(int(action)), ticks=self.ticks_per_step)
        self._steps += 1

        reward = float(gained)
        if terminated:
            reward += self.terminal_penalty
        truncated = not terminated and self._steps >= self.max_episode_steps

        info = self._get_info()
        info["rows_cleared"] = step_info.get("rows_cleared", 0)
        if self.render_mode == "human":
            self.render()
        return obs, reward, terminated, truncated, info

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode == "rgb_array":
            grid = self.game.get_state()
            cell = 12
            h, w = grid.shape
            img = np.zeros((h * cell, w * cell, 3), dtype=np.uint8)
            for y in range(h):
                for x in range(w):
                    if grid[y, x] > 0:
                        color = (0, 0, 255)
                    elif grid[y, x] < 0:
                        color = (255, 0, 0)
                    else:
                        color = (30, 30, 36)
                    img[y * cell : (y + 1) * cell, x * cell : (x + 1) * cell, :] = color
            return img
        if self.render_mode == "human":
            import pygame

            from falling_blocks.visualization.renderer import Renderer

            if self._screen is None:
                pygame.init()
                self._renderer = Renderer()
                self._screen = pygame.display.set_mode(self._renderer.window_size(self.game))
            self._renderer.draw(self._screen, self.game)
        return None

    def close(self) -> None:
        if self._screen is not None:
            import pygame

            pygame.quit()
            self._screen = None
            self._renderer = None
