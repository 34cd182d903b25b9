"""
Bow Range Physics
Arrow flight, wind, ring target motion and scoring.
"""

from archery_physics.ballistics import (
    Arrow,
    WindModel,
    BASE_ARROW_SPEED,
    MAX_POWER_HOLD,
    PHYSICS_DT,
    WIND_CHANGE_INTERVAL,
    charge_power,
    launch_speed,
    compute_launch_velocity,
    integrate_arrow,
    simulate_trajectory,
)
from archery_physics.collision import (
    PlayField,
    DEFAULT_FIELD,
    Target,
    RING_SCORES,
    TARGET_DT,
    target_position,
    move_target,
    check_hit,
    ring_index,
    compute_ring_score,
    step_arrow,
)

__all__ = [
    "Arrow",
    "WindModel",
    "BASE_ARROW_SPEED",
    "MAX_POWER_HOLD",
    "PHYSICS_DT",
    "WIND_CHANGE_INTERVAL",
    "charge_power",
    "launch_speed",
    "compute_launch_velocity",
    "integrate_arrow",
    "simulate_trajectory",
    "PlayField",
    "DEFAULT_FIELD",
    "Target",
    "RING_SCORES",
    "TARGET_DT",
    "target_position",
    "move_target",
    "check_hit",
    "ring_index",
    "compute_ring_score",
    "step_arrow",
]
