"""
Bow Range Physics - Collision Detection & Ring Scoring

Point-in-circle hit detection between an arrow tip and the ring target,
discrete ring scoring, and the per-step arrow update that ties flight,
impact and out-of-bounds exit together.
"""

import math
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from archery_physics.ballistics import (
    Arrow,
    BOTTOM_MARGIN,
    FIELD_HEIGHT,
    FIELD_WIDTH,
    RIGHT_MARGIN,
    TOP_MARGIN,
    integrate_arrow,
)

# ---------- Constants ----------
TARGET_RINGS = 5
RING_SCORES = (50, 30, 20, 10, 5)    # ring 0 is the centre
PENETRATION_DEPTH = 10.0             # px an arrow sinks in past the hit point
TARGET_MOTION_SCALE = 0.001          # target time units -> sine phase
TARGET_DT = 16.0                     # target time advanced per tick
DEFAULT_MOVE_AMPLITUDE = 50.0
DEFAULT_MOVE_SPEED = 1.0
BOW_X = 120.0


# ---------- Data Classes ----------
@dataclass(frozen=True)
class PlayField:
    """Screen-space play area. Arrows exit past the right, bottom or top margin."""
    width: float = FIELD_WIDTH
    height: float = FIELD_HEIGHT
    right_margin: float = RIGHT_MARGIN
    bottom_margin: float = BOTTOM_MARGIN
    top_margin: float = TOP_MARGIN

    @property
    def center_y(self) -> float:
        return self.height / 2.0

    @property
    def exit_bounds(self) -> Tuple[float, float, float]:
        """(x_max, y_max, y_min) beyond which an arrow is lost."""
        return (
            self.width + self.right_margin,
            self.height + self.bottom_margin,
            -self.top_margin,
        )

    def is_out_of_bounds(self, position: np.ndarray) -> bool:
        x_max, y_max, y_min = self.exit_bounds
        return position[0] > x_max or position[1] > y_max or position[1] < y_min


DEFAULT_FIELD = PlayField()


@dataclass
class Target:
    """Ring target. Only the vertical position oscillates, and only when moving."""
    base_x: float
    base_y: float
    radius: float
    moving: bool = False
    move_amplitude: float = DEFAULT_MOVE_AMPLITUDE
    move_speed: float = DEFAULT_MOVE_SPEED
    time: float = 0.0


# ---------- Target Motion ----------
def target_position(target: Target) -> np.ndarray:
    """Current [x, y] of the target centre, recomputed from elapsed motion time."""
    y = target.base_y
    if target.moving:
        y += math.sin(target.time * TARGET_MOTION_SCALE * target.move_speed) * target.move_amplitude
    return np.array([target.base_x, y], dtype=np.float64)


def move_target(target: Target, dt: float = TARGET_DT) -> None:
    """Advance the target's motion clock by a simulation step (never wall-clock)."""
    target.time += max(dt, 0.0)


# ---------- Hit Detection & Scoring ----------
def check_hit(position: np.ndarray, target: Target) -> Tuple[bool, float]:
    """Check whether a point lies on the target face.

    Returns:
        (hit, distance_from_center). The rim itself counts as a hit.
    """
    distance = float(np.linalg.norm(np.asarray(position, dtype=np.float64) - target_position(target)))
    return distance <= target.radius, distance


def ring_index(distance: float, radius: float, rings: int = TARGET_RINGS) -> int:
    """Ring band for a distance from centre, clamped to [0, rings - 1]."""
    thickness = radius / rings
    index = int(math.floor(distance / thickness))
    return int(np.clip(index, 0, rings - 1))


def compute_ring_score(distance: float, radius: float) -> int:
    """Points for an impact `distance` px from the centre of a `radius` target."""
    index = ring_index(distance, radius, len(RING_SCORES))
    if 0 <= index < len(RING_SCORES):
        return RING_SCORES[index]
    return 0


def step_arrow(
    arrow: Arrow,
    dt: float,
    wind: float,
    target: Optional[Target],
    field: PlayField = DEFAULT_FIELD,
) -> Optional[int]:
    """Advance one arrow by one step and resolve impact or exit.

    On a hit the arrow sticks, sinks PENETRATION_DEPTH along its heading and
    is scored from where it comes to rest. An arrow leaving the field sticks
    with no score.

    Returns:
        The ring score if this step produced a hit, otherwise None.
    """
    if arrow.stuck:
        return None

    integrate_arrow(arrow, dt, wind)

    if target is not None:
        hit, _ = check_hit(arrow.position, target)
        if hit:
            arrow.stuck = True
            arrow.position = arrow.position + PENETRATION_DEPTH * np.array(
                [math.cos(arrow.rotation), math.sin(arrow.rotation)]
            )
            _, distance = check_hit(arrow.position, target)
            arrow.hit_score = compute_ring_score(distance, target.radius)
            return arrow.hit_score

    if field.is_out_of_bounds(arrow.position):
        arrow.stuck = True

    return None


# ---------- Smoke Test ----------
if __name__ == "__main__":
    from rich.console import Console

    from archery_physics.ballistics import compute_launch_velocity

    console = Console()
    console.print("\n[bold cyan]=== Bow Range Collision Smoke Test ===[/bold cyan]\n")

    console.print("[bold]Test 1:[/bold] Ring table on a radius-70 target")
    for d in (0.0, 13.9, 14.0, 35.0, 69.0, 70.0):
        hit = d <= 70.0
        score = compute_ring_score(d, 70.0) if hit else 0
        console.print(f"  distance {d:>5.1f} -> hit={hit} score={score}")
    assert compute_ring_score(0.0, 70.0) == 50
    assert compute_ring_score(69.0, 70.0) == 5

    console.print("\n[bold]Test 2:[/bold] Flat shot into a close static target")
    target = Target(base_x=400.0, base_y=270.0, radius=70.0)
    arrow = Arrow(position=[BOW_X, 270.0], velocity=compute_launch_velocity(0.0, 1.0))
    score = None
    for _ in range(200):
        result = step_arrow(arrow, 0.9, 0.0, target)
        if result is not None:
            score = result
        if arrow.stuck:
            break
    console.print(f"  stuck={arrow.stuck} score={score} at ({arrow.position[0]:.1f}, {arrow.position[1]:.1f})")
    assert arrow.stuck and score is not None and score > 0

    console.print("\n[bold]Test 3:[/bold] Moving target oscillates vertically only")
    mover = Target(base_x=600.0, base_y=270.0, radius=60.0, moving=True, move_amplitude=40.0, move_speed=1.2)
    ys = []
    for _ in range(200):
        move_target(mover)
        ys.append(target_position(mover)[1])
    assert max(ys) <= 310.0 + 1e-9 and min(ys) >= 230.0 - 1e-9
    console.print(f"  y range: [{min(ys):.1f}, {max(ys):.1f}]")

    console.print("\n[bold green]All collision checks passed![/bold green]\n")
