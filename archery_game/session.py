"""
Bow Range - Game Session

Owns all mutable game state and is the only place it changes. Input and
rendering collaborators call the command methods (start_level, aim_at,
begin_charge, resolve_shot, acknowledge_transition, reset_run), drive the
simulation with advance(), and read state through snapshot().

Tick order inside advance():
    1. wind re-roll (wall-clock gated)
    2. bow eases toward the aim point
    3. target motion
    4. every arrow, in firing order, integrates and resolves impact/exit
       against the target position from step 3
    5. one end-of-level evaluation

Level states:
    AWAITING_START --start--> PLAYING
    PLAYING --(arrows spent, all stuck)--> LEVEL_PASSED | LEVEL_FAILED
    LEVEL_PASSED --acknowledge--> PLAYING (next level) | ALL_LEVELS_COMPLETE
    LEVEL_FAILED --acknowledge--> PLAYING (same level, score carried)
    any --reset_run--> AWAITING_START
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple

import numpy as np

from archery_physics.ballistics import (
    Arrow,
    WindModel,
    PHYSICS_DT,
    charge_power,
    compute_launch_velocity,
)
from archery_physics.collision import (
    BOW_X,
    DEFAULT_FIELD,
    PlayField,
    Target,
    TARGET_DT,
    move_target,
    step_arrow,
    target_position,
)
from archery_game.clock import SystemClock
from archery_game.levels import LevelConfig, load_levels

logger = logging.getLogger(__name__)

BOW_FOLLOW_RATE = 0.08


class LevelState(str, Enum):
    AWAITING_START = "awaiting_start"
    PLAYING = "playing"
    LEVEL_PASSED = "level_passed"
    LEVEL_FAILED = "level_failed"
    ALL_LEVELS_COMPLETE = "all_levels_complete"


@dataclass
class Bow:
    """Launch point. Stays at a fixed x and eases vertically toward the aim point."""
    x: float
    y: float
    angle: float = 0.0


@dataclass(frozen=True)
class ArrowView:
    position: Tuple[float, float]
    rotation: float
    stuck: bool
    score: int


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-only view of the session for HUD and rendering."""
    state: LevelState
    level_index: int
    level_count: int
    level_name: str
    goal_score: int
    arrows_remaining: int
    total_score: int
    shots_fired: int
    hits: int
    accuracy: str
    wind: float
    wind_fraction: float
    arrows: Tuple[ArrowView, ...]
    target_position: Optional[Tuple[float, float]]
    target_radius: Optional[float]
    bow_position: Tuple[float, float]
    bow_angle: float
    charge_power: Optional[float]


def format_accuracy(hits: int, shots_fired: int) -> str:
    """Hit rate as a percentage string with one decimal, or '0%' before any shot."""
    if shots_fired == 0:
        return "0%"
    return f"{hits / shots_fired * 100.0:.1f}%"


class GameSession:
    """Single-player run through the level catalog."""

    def __init__(
        self,
        levels: Sequence[LevelConfig] = None,
        clock=None,
        rng: np.random.Generator = None,
        field: PlayField = DEFAULT_FIELD,
    ):
        self.levels: Tuple[LevelConfig, ...] = tuple(levels) if levels is not None else load_levels()
        if not self.levels:
            raise ValueError("A session needs at least one level")
        self.clock = clock or SystemClock()
        self.field = field
        self.wind = WindModel(rng=rng if rng is not None else np.random.default_rng())

        self.state = LevelState.AWAITING_START
        self.level_index = 0
        self.arrows_remaining = 0
        self.total_score = 0
        self.shots_fired = 0
        self.hits = 0

        self.is_charging = False
        self.charge_start_time = 0.0

        self.bow = Bow(x=BOW_X, y=field.center_y)
        self.aim_point: Optional[Tuple[float, float]] = None
        self.target: Optional[Target] = None
        self.arrows: List[Arrow] = []

    # ---------- Derived state ----------
    @property
    def playing(self) -> bool:
        return self.state == LevelState.PLAYING

    @property
    def level(self) -> LevelConfig:
        """Config of the active level (the last one once the run is complete)."""
        return self.levels[min(self.level_index, len(self.levels) - 1)]

    @property
    def level_count(self) -> int:
        return len(self.levels)

    @property
    def accuracy_string(self) -> str:
        return format_accuracy(self.hits, self.shots_fired)

    # ---------- Commands ----------
    def start_level(self, level_index: int = None) -> LevelState:
        """Begin the current level. Only acts while awaiting start.

        `level_index` picks a different starting level before the first start.
        """
        if self.state == LevelState.AWAITING_START:
            if level_index is not None:
                self.level_index = int(np.clip(level_index, 0, len(self.levels) - 1))
            self._setup_level()
        return self.state

    def aim_at(self, x: float, y: float) -> None:
        """Point the bow at a screen position. The bow eases toward it each tick."""
        self.aim_point = (float(x), float(y))

    def begin_charge(self, now: float = None) -> bool:
        """Start drawing the bow. Returns False when the draw is not allowed."""
        if not self.playing or self.is_charging or self.arrows_remaining <= 0:
            return False
        self.is_charging = True
        self.charge_start_time = self._now(now)
        return True

    def charge_power(self, now: float = None) -> Optional[float]:
        """Current draw fraction, or None when not charging."""
        if not self.is_charging:
            return None
        return charge_power(self._now(now) - self.charge_start_time)

    def resolve_shot(self, now: float = None, aim_vector=None) -> Optional[Arrow]:
        """Release the draw and fire an arrow.

        Without an explicit aim vector the arrow flies from the bow toward the
        current aim point, or along the bow's heading when nothing was aimed at.
        Releasing outside of play drops the draw without firing.
        """
        if not self.is_charging:
            return None
        if not self.playing or self.arrows_remaining <= 0:
            self.is_charging = False
            return None

        power = charge_power(self._now(now) - self.charge_start_time)
        angle = self._shot_angle(aim_vector)
        arrow = Arrow(
            position=[self.bow.x, self.bow.y],
            velocity=compute_launch_velocity(angle, power),
        )
        self.arrows.append(arrow)
        self.arrows_remaining -= 1
        self.shots_fired += 1
        self.is_charging = False
        logger.debug(
            "Shot %d fired: power=%.2f angle=%.1fdeg, %d left",
            self.shots_fired, power, math.degrees(angle), self.arrows_remaining,
        )
        return arrow

    def acknowledge_transition(self) -> LevelState:
        """Move on from a passed or failed level."""
        if self.state == LevelState.LEVEL_PASSED:
            if self.level_index + 1 < len(self.levels):
                self.level_index += 1
                self._setup_level()
            else:
                self.state = LevelState.ALL_LEVELS_COMPLETE
                logger.info(
                    "All %d levels complete: score=%d accuracy=%s",
                    len(self.levels), self.total_score, self.accuracy_string,
                )
        elif self.state == LevelState.LEVEL_FAILED:
            self._setup_level()
        return self.state

    def reset_run(self) -> None:
        """Return to the first level with every counter zeroed."""
        self.state = LevelState.AWAITING_START
        self.level_index = 0
        self.arrows_remaining = 0
        self.total_score = 0
        self.shots_fired = 0
        self.hits = 0
        self.is_charging = False
        self.charge_start_time = 0.0
        self.arrows = []
        self.target = None
        self.aim_point = None
        self.bow = Bow(x=BOW_X, y=self.field.center_y)
        self.wind.reset(self._now(None))
        logger.info("Run reset")

    # ---------- Simulation ----------
    def advance(self, dt: float = PHYSICS_DT, target_dt: float = TARGET_DT) -> LevelState:
        """Run one simulation tick. Does nothing outside of play."""
        if not self.playing:
            return self.state

        cfg = self.level
        self.wind.tick(self._now(None), cfg.wind_max)
        self._update_bow()
        move_target(self.target, target_dt)

        for arrow in self.arrows:
            score = step_arrow(arrow, dt, self.wind.value, self.target, self.field)
            if score is not None:
                self.total_score += score
                if score > 0:
                    self.hits += 1

        self._check_level_end()
        return self.state

    def all_settled(self) -> bool:
        return all(arrow.stuck for arrow in self.arrows)

    def snapshot(self, now: float = None) -> SessionSnapshot:
        cfg = self.level
        ceiling = cfg.wind_max or 1.0
        target_pos = radius = None
        if self.target is not None:
            target_pos = tuple(float(v) for v in target_position(self.target))
            radius = self.target.radius

        return SessionSnapshot(
            state=self.state,
            level_index=self.level_index,
            level_count=len(self.levels),
            level_name=cfg.name,
            goal_score=cfg.min_score_to_advance,
            arrows_remaining=self.arrows_remaining,
            total_score=self.total_score,
            shots_fired=self.shots_fired,
            hits=self.hits,
            accuracy=self.accuracy_string,
            wind=self.wind.value,
            wind_fraction=float(np.clip(self.wind.value / ceiling, -1.0, 1.0)),
            arrows=tuple(
                ArrowView(
                    position=(float(a.position[0]), float(a.position[1])),
                    rotation=a.rotation,
                    stuck=a.stuck,
                    score=a.hit_score,
                )
                for a in self.arrows
            ),
            target_position=target_pos,
            target_radius=radius,
            bow_position=(self.bow.x, self.bow.y),
            bow_angle=self.bow.angle,
            charge_power=self.charge_power(now),
        )

    # ---------- Internals ----------
    def _now(self, now: Optional[float]) -> float:
        return self.clock.now() if now is None else float(now)

    def _setup_level(self) -> None:
        cfg = self.level
        self.arrows_remaining = cfg.arrows
        self.arrows = []
        self.target = Target(
            base_x=cfg.target_distance,
            base_y=self.field.center_y,
            radius=cfg.target_radius,
            moving=cfg.moving,
            move_amplitude=cfg.move_amplitude or 0.0,
            move_speed=cfg.move_speed or 0.0,
        )
        self.wind.reset(self._now(None))
        self.is_charging = False
        self.state = LevelState.PLAYING
        logger.info(
            "Level %d/%d '%s' started: %d arrows, goal %d",
            self.level_index + 1, len(self.levels), cfg.name, cfg.arrows, cfg.min_score_to_advance,
        )

    def _update_bow(self) -> None:
        if self.aim_point is None:
            return
        ax, ay = self.aim_point
        self.bow.y += (ay - self.bow.y) * BOW_FOLLOW_RATE
        self.bow.angle = math.atan2(ay - self.bow.y, ax - self.bow.x)

    def _shot_angle(self, aim_vector) -> float:
        if aim_vector is not None:
            dx, dy = aim_vector
            return math.atan2(dy, dx)
        if self.aim_point is not None:
            ax, ay = self.aim_point
            return math.atan2(ay - self.bow.y, ax - self.bow.x)
        return self.bow.angle

    def _check_level_end(self) -> None:
        if self.arrows_remaining > 0 or not self.all_settled():
            return
        cfg = self.level
        if self.total_score >= cfg.min_score_to_advance:
            self.state = LevelState.LEVEL_PASSED
            logger.info("Level '%s' passed: score=%d (goal %d)", cfg.name, self.total_score, cfg.min_score_to_advance)
        else:
            self.state = LevelState.LEVEL_FAILED
            logger.info("Level '%s' failed: score=%d (goal %d)", cfg.name, self.total_score, cfg.min_score_to_advance)
