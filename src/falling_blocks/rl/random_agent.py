from __future__ import annotations

import argparse
import logging
import random

import gymnasium as gym
import numpy as np

# Ensure envs are registered
import falling_blocks.env  # noqa: F401
from falling_blocks.env import ActionMaskWrapper


logger = logging.getLogger(__name__)


def run_random(steps: int = 200, seed: int | None = None) -> float:
    rng = random.Random(seed)
    env = ActionMaskWrapper(gym.make("FallingBlocks-10x20-v0"))
    obs, info = env.reset(seed=seed)
    total_reward = 0.0
    episodes = 0
    for _ in range(steps):
        # Prefer actions that change the piece
        valid = np.flatnonzero(env.get_action_mask()).tolist()
        action = rng.choice(valid) if valid else env.action_space.sample()
        obs, reward, terminated, truncated, info = env.step(action)
        total_reward += float(reward)
        if terminated or truncated:
            episodes += 1
            logger.info("Episode %d finished with score %d", episodes, info["score"])
            obs, info = env.reset()
    env.close()
    return total_reward


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser()
    p.add_argument("--steps", type=int, default=200)
    p.add_argument("--seed", type=int, default=None)
    return p


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="[FALLING_BLOCKS] %(asctime)s - %(message)s")
    args = build_parser().parse_args()
    total_reward = run_random(args.steps, args.seed)
    print(f"Random agent total reward: {total_reward:.2f}")


if __name__ == "__main__":  # pragma: no cover
    main()
