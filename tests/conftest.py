"""
Bow Range Test Suite - Shared Fixtures

Provides reusable pytest fixtures for all test stages.
"""

import math
from dataclasses import replace
import sys
from pathlib import Path

import numpy as np
import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from archery_physics.ballistics import GRAVITY, GRAVITY_SCALE, PHYSICS_DT, Arrow, WindModel
from archery_physics.collision import PENETRATION_DEPTH, Target, target_position
from archery_game.clock import ManualClock
from archery_game.envs.bow_env import BowRangeEnv
from archery_game.levels import LevelConfig, load_levels
from archery_game.session import GameSession


class StubRng:
    """Random source that always rolls the same uniform value."""

    def __init__(self, value: float):
        self.value = value
        self.calls = 0

    def uniform(self, low, high):
        self.calls += 1
        return self.value


# ---------- Catalog Fixtures ----------
@pytest.fixture
def levels():
    """The shipped six-level catalog."""
    return load_levels()


@pytest.fixture
def single_level():
    """One short static level, so passing it completes the run."""
    return (
        LevelConfig(
            name="Solo",
            arrows=2,
            target_distance=520,
            target_radius=70,
            min_score_to_advance=60,
        ),
    )


# ---------- Session Fixtures ----------
@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def session(levels, clock):
    """Fresh session on the shipped catalog, awaiting start."""
    return GameSession(levels=levels, clock=clock, rng=np.random.default_rng(seed=42))


@pytest.fixture
def playing_session(session):
    """Session with level 1 started."""
    session.start_level()
    return session


@pytest.fixture
def solo_session(single_level, clock):
    s = GameSession(levels=single_level, clock=clock, rng=np.random.default_rng(seed=7))
    s.start_level()
    return s


# ---------- Physics Fixtures ----------
@pytest.fixture
def static_target():
    """Level 1 style target: x=520 on the centre line, radius 70."""
    return Target(base_x=520.0, base_y=270.0, radius=70.0)


@pytest.fixture
def moving_target():
    """Level 3 style oscillating target."""
    return Target(
        base_x=600.0,
        base_y=270.0,
        radius=60.0,
        moving=True,
        move_amplitude=40.0,
        move_speed=1.2,
    )


@pytest.fixture
def calm_wind():
    return WindModel(rng=StubRng(0.0))


@pytest.fixture
def env():
    """Bow range environment on level 1."""
    e = BowRangeEnv()
    yield e
    e.close()


# ---------- Helpers ----------
@pytest.fixture
def plant_bullseye():
    """Return a function that sets an un-stuck arrow up to come to rest on the target centre.

    The arrow is given a slow flat velocity and placed so that one calm step
    plus the penetration nudge lands it on the centre of `target` as it will
    be after `target_dt` more motion time.
    """
    def _plant(arrow: Arrow, target: Target, target_dt: float = 0.0, dt: float = PHYSICS_DT):
        future = replace(target, time=target.time + target_dt)
        center = target_position(future)
        vx, vy = 1.0, GRAVITY * GRAVITY_SCALE * dt
        heading = math.atan2(vy, vx)
        arrow.velocity = np.array([vx, 0.0])
        arrow.position = center - np.array([
            vx * dt + PENETRATION_DEPTH * math.cos(heading),
            vy * dt + PENETRATION_DEPTH * math.sin(heading),
        ])
        return arrow

    return _plant
