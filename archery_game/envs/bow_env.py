"""
Bow Range - Gymnasium Environment

Wraps a live GameSession. One action is one shot: the agent picks an aim
angle and a draw, the arrow is flown tick by tick until it settles, and the
ring score is the reward. The episode ends when the level is passed or failed.

Observation space (10 floats):
    bow x/y (2) + target x/y (2) + target radius (1) + wind (1) +
    arrows remaining (1) + level index (1) + total score (1) + goal score (1)

Action space (2 floats):
    aim [-1,1] -> [-45deg, 45deg] (screen space, positive = down),
    draw [-1,1] -> hold time [0, MAX_POWER_HOLD] ms
"""

import math

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from archery_physics.ballistics import MAX_POWER_HOLD
from archery_physics.collision import TARGET_DT, target_position
from archery_game.clock import ManualClock
from archery_game.levels import load_levels
from archery_game.session import GameSession, LevelState


OBS_DIM = 10

# Default env config (first level, +-45 degree aim cone)
DEFAULT_ENV_CONFIG = {
    "level_index": 0,
    "max_aim_deg": 45.0,
    "tick_ms": TARGET_DT,
    "max_ticks_per_shot": 2000,
}


class BowRangeEnv(gym.Env):
    """Single-level bow range environment, one shot per step."""

    metadata = {"render_modes": ["human"]}

    def __init__(
        self,
        stage_config: dict = None,
        levels=None,
        render_mode: str = None,
    ):
        super().__init__()

        self.config = {**DEFAULT_ENV_CONFIG, **(stage_config or {})}
        self.levels = tuple(levels) if levels is not None else load_levels()
        self.render_mode = render_mode

        self.observation_space = spaces.Box(
            low=-np.inf, high=np.inf, shape=(OBS_DIM,), dtype=np.float32
        )
        self.action_space = spaces.Box(
            low=-1.0, high=1.0, shape=(2,), dtype=np.float32
        )

        self.clock = ManualClock()
        self.session: GameSession = None

        # Stats tracking
        self.episode_count: int = 0
        self.shot_count: int = 0
        self.hit_count: int = 0
        self.last_reward: float = 0.0

    def _get_observation(self) -> np.ndarray:
        s = self.session
        tx, ty = target_position(s.target)
        obs = np.array([
            s.bow.x, s.bow.y,
            tx, ty,
            s.target.radius,
            s.wind.value,
            s.arrows_remaining,
            s.level_index,
            s.total_score,
            s.level.min_score_to_advance,
        ], dtype=np.float32)
        return np.nan_to_num(obs, nan=0.0, posinf=1e6, neginf=-1e6)

    def _info(self) -> dict:
        s = self.session
        return {
            "level_index": s.level_index,
            "level_name": s.level.name,
            "state": s.state.value,
            "arrows_remaining": s.arrows_remaining,
            "total_score": s.total_score,
            "accuracy": s.accuracy_string,
            "wind": s.wind.value,
        }

    def reset(self, seed=None, options=None):
        """Start a fresh session at the configured level."""
        super().reset(seed=seed)
        options = options or {}

        self.clock = ManualClock()
        self.session = GameSession(levels=self.levels, clock=self.clock, rng=self.np_random)
        self.session.start_level(options.get("level_index", self.config["level_index"]))
        self.episode_count += 1

        return self._get_observation(), self._info()

    def step(self, action: np.ndarray):
        """Fire one arrow and fly it until it settles."""
        action = np.clip(np.asarray(action, dtype=np.float64), -1.0, 1.0)
        angle = action[0] * math.radians(self.config["max_aim_deg"])
        hold_ms = (action[1] + 1.0) * 0.5 * MAX_POWER_HOLD

        s = self.session
        s.begin_charge()
        self.clock.advance(hold_ms)
        arrow = s.resolve_shot(aim_vector=(math.cos(angle), math.sin(angle)))

        for _ in range(self.config["max_ticks_per_shot"]):
            if arrow is None or arrow.stuck or not s.playing:
                break
            s.advance()
            self.clock.advance(self.config["tick_ms"])

        score = arrow.hit_score if arrow is not None else 0
        reward = float(score)
        self.last_reward = reward
        if arrow is not None:
            self.shot_count += 1
            if score > 0:
                self.hit_count += 1

        terminated = s.state != LevelState.PLAYING
        truncated = arrow is not None and not arrow.stuck

        info = self._info()
        info.update({"hit": score > 0, "score": score, "power_ms": hold_ms})
        return self._get_observation(), reward, terminated, truncated, info

    @property
    def success_rate(self) -> float:
        """Share of fired arrows that scored."""
        if self.shot_count == 0:
            return 0.0
        return self.hit_count / self.shot_count


# ---------- Smoke Test ----------
if __name__ == "__main__":
    from rich.console import Console

    console = Console()
    console.print("\n[bold cyan]=== Bow Range Environment Smoke Test ===[/bold cyan]\n")

    env = BowRangeEnv()
    obs, info = env.reset(seed=42)
    console.print(f"  Obs: {obs}")
    console.print(f"  Level: {info['level_name']}")
    assert obs.shape == (OBS_DIM,)

    total = 0.0
    terminated = False
    while not terminated:
        _, r, terminated, _, info = env.step(env.action_space.sample())
        total += r
    console.print(f"  Random agent: score {info['total_score']}, state {info['state']}, accuracy {info['accuracy']}")
    console.print("\n[bold green]Environment ran a full level![/bold green]\n")
