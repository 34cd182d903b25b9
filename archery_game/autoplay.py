"""
Bow Range - Aim Solver & Autoplay

Picks launch angles by simulating candidate shots against a copy of the live
target (its motion included) under the current wind, then drives a session
through whole levels with a manual clock. Used by the CLI demo and as a
baseline for the agent environment.
"""

import logging
import math
from dataclasses import dataclass, replace
from typing import List, Optional, Tuple

import numpy as np

from archery_physics.ballistics import (
    Arrow,
    MAX_POWER_HOLD,
    PHYSICS_DT,
    compute_launch_velocity,
)
from archery_physics.collision import TARGET_DT, move_target, step_arrow, target_position
from archery_game.clock import ManualClock
from archery_game.session import GameSession, LevelState

logger = logging.getLogger(__name__)


@dataclass
class LevelResult:
    """Outcome of one level across all attempts."""
    level_index: int
    name: str
    attempts: int
    passed: bool
    total_score: int
    accuracy: str


def evaluate_shot(
    session: GameSession,
    angle: float,
    power: float = 1.0,
    max_steps: int = 600,
) -> Tuple[Optional[int], float]:
    """Dry-run one shot from the bow without touching the session.

    Returns:
        (score, distance). On a hit, the ring score and the resting distance
        from the target centre; on a miss, (None, closest approach).
    """
    target = replace(session.target)
    arrow = Arrow(
        position=[session.bow.x, session.bow.y],
        velocity=compute_launch_velocity(angle, power),
    )
    closest = float("inf")
    for _ in range(max_steps):
        move_target(target, TARGET_DT)
        score = step_arrow(arrow, PHYSICS_DT, session.wind.value, target, session.field)
        distance = float(np.linalg.norm(arrow.position - target_position(target)))
        if score is not None:
            return score, distance
        closest = min(closest, distance)
        if arrow.stuck:
            break
    return None, closest


def _rank(result: Tuple[Optional[int], float]) -> Tuple[int, float]:
    score, distance = result
    return (score if score is not None else -1, -distance)


def solve_aim(
    session: GameSession,
    power: float = 1.0,
    span_deg: Tuple[float, float] = (-30.0, 30.0),
    coarse_step_deg: float = 1.0,
    fine_step_deg: float = 0.1,
) -> np.ndarray:
    """Find the aim vector whose dry-run shot scores best.

    A coarse sweep over `span_deg` is refined around the best candidate.
    """
    if session.target is None:
        return np.array([1.0, 0.0])

    def sweep(angles):
        return max(angles, key=lambda a: _rank(evaluate_shot(session, math.radians(a), power)))

    lo, hi = span_deg
    best = sweep(np.arange(lo, hi + 1e-9, coarse_step_deg))
    best = sweep(np.arange(best - coarse_step_deg, best + coarse_step_deg + 1e-9, fine_step_deg))

    angle = math.radians(best)
    return np.array([math.cos(angle), math.sin(angle)])


def play_attempt(
    session: GameSession,
    clock: ManualClock,
    tick_ms: float = TARGET_DT,
    max_ticks: int = 50_000,
) -> LevelState:
    """Shoot out the current level one arrow at a time until it resolves."""
    for _ in range(max_ticks):
        if not session.playing:
            break
        if session.arrows_remaining > 0 and session.all_settled():
            aim = solve_aim(session)
            session.begin_charge()
            clock.advance(MAX_POWER_HOLD)
            session.resolve_shot(aim_vector=aim)
        session.advance()
        clock.advance(tick_ms)
    return session.state


def play_run(
    session: GameSession,
    clock: ManualClock,
    max_attempts: int = 3,
) -> List[LevelResult]:
    """Auto-play from the current level until the run completes or a level runs out of attempts."""
    results: List[LevelResult] = []
    session.start_level()

    while session.state == LevelState.PLAYING:
        attempts = 0
        while True:
            attempts += 1
            outcome = play_attempt(session, clock)
            if outcome != LevelState.LEVEL_FAILED or attempts >= max_attempts:
                break
            logger.info("Retrying level %d (attempt %d)", session.level_index + 1, attempts + 1)
            session.acknowledge_transition()

        passed = outcome == LevelState.LEVEL_PASSED
        results.append(LevelResult(
            level_index=session.level_index,
            name=session.level.name,
            attempts=attempts,
            passed=passed,
            total_score=session.total_score,
            accuracy=session.accuracy_string,
        ))
        if not passed:
            break
        session.acknowledge_transition()

    return results
