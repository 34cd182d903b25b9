"""
Bow Range Physics - Arrow Flight Ballistics

Fixed-step arrow flight in screen space: x grows to the right, y grows
downward, so gravity adds to vy. Wind is a signed scalar acting on vx only.

The physics step `dt` is a caller constant (PHYSICS_DT per frame), never
derived from wall-clock time. Wind re-rolls and charge power are the only
timing that uses real elapsed milliseconds.
"""

import math
from dataclasses import dataclass, field
from typing import List, Tuple

import numpy as np

# ---------- Constants ----------
GRAVITY = 0.35                  # px / step²
GRAVITY_SCALE = 0.6
WIND_COEFFICIENT = 0.015        # horizontal acceleration per unit of wind
BASE_ARROW_SPEED = 18.0         # px / step at full draw
MIN_SPEED_FRACTION = 0.4        # share of BASE_ARROW_SPEED with zero charge
MAX_POWER_HOLD = 2000.0         # ms to reach 100% draw
WIND_CHANGE_INTERVAL = 4000.0   # ms between wind re-rolls
PHYSICS_DT = 0.9                # arrow integration step per tick

# Play field (px). Arrows leave play past these margins.
FIELD_WIDTH = 960.0
FIELD_HEIGHT = 540.0
RIGHT_MARGIN = 150.0
BOTTOM_MARGIN = 50.0
TOP_MARGIN = 50.0
DEFAULT_EXIT_BOUNDS = (FIELD_WIDTH + RIGHT_MARGIN, FIELD_HEIGHT + BOTTOM_MARGIN, -TOP_MARGIN)


# ---------- Data Classes ----------
@dataclass
class Arrow:
    """A fired arrow. Frozen in place once `stuck` is set."""
    position: np.ndarray            # [x, y]
    velocity: np.ndarray            # [vx, vy]
    rotation: float = 0.0           # heading (radians), derived from velocity
    stuck: bool = False
    hit_score: int = 0

    def __post_init__(self):
        self.position = np.array(self.position, dtype=np.float64)
        self.velocity = np.array(self.velocity, dtype=np.float64)
        self.rotation = math.atan2(self.velocity[1], self.velocity[0])


@dataclass
class WindModel:
    """Horizontal wind, re-rolled uniformly every WIND_CHANGE_INTERVAL ms."""
    value: float = 0.0
    last_change: float = 0.0
    interval: float = WIND_CHANGE_INTERVAL
    rng: np.random.Generator = field(default_factory=np.random.default_rng)

    def tick(self, now: float, wind_max: float) -> float:
        """Re-roll the wind if the interval has elapsed. Returns the current value."""
        if now - self.last_change > self.interval:
            ceiling = max(wind_max or 0.0, 0.0)
            self.value = float(self.rng.uniform(-1.0, 1.0) * ceiling)
            self.last_change = now
        return self.value

    def reset(self, now: float) -> None:
        """Calm the wind and restart the re-roll interval from `now`."""
        self.value = 0.0
        self.last_change = now


# ---------- Physics Functions ----------
def charge_power(elapsed_ms: float, max_hold: float = MAX_POWER_HOLD) -> float:
    """Map a charge hold duration to a power fraction in [0, 1].

    Holding past `max_hold` saturates at 1.0.
    """
    return float(np.clip(elapsed_ms / max_hold, 0.0, 1.0))


def launch_speed(power: float) -> float:
    """Launch speed for a power fraction. Never below 40% of base speed."""
    power = float(np.clip(power, 0.0, 1.0))
    return BASE_ARROW_SPEED * (MIN_SPEED_FRACTION + (1.0 - MIN_SPEED_FRACTION) * power)


def compute_launch_velocity(angle: float, power: float) -> np.ndarray:
    """Convert an aim angle (radians, screen space) and power fraction into [vx, vy]."""
    speed = launch_speed(power)
    return np.array([math.cos(angle) * speed, math.sin(angle) * speed], dtype=np.float64)


def integrate_arrow(arrow: Arrow, dt: float, wind: float) -> None:
    """Advance an un-stuck arrow by one explicit Euler step.

    Velocity is updated first (wind on x, gravity on y), then position uses
    the new velocity. Stuck arrows are left untouched.
    """
    if arrow.stuck:
        return
    arrow.velocity[0] += wind * WIND_COEFFICIENT * dt
    arrow.velocity[1] += GRAVITY * GRAVITY_SCALE * dt
    arrow.position = arrow.position + arrow.velocity * dt
    arrow.rotation = math.atan2(arrow.velocity[1], arrow.velocity[0])


def simulate_trajectory(
    origin: np.ndarray,
    velocity_vector: np.ndarray,
    wind: float = 0.0,
    dt: float = PHYSICS_DT,
    max_steps: int = 2000,
    bounds: Tuple[float, float, float] = DEFAULT_EXIT_BOUNDS,
) -> List[np.ndarray]:
    """Simulate a free arrow flight with constant wind.

    Args:
        origin: Launch position [x, y].
        velocity_vector: Initial velocity [vx, vy].
        wind: Constant wind value for the whole flight.
        dt: Physics step.
        max_steps: Hard cap on the number of steps.
        bounds: (x_max, y_max, y_min) exit limits.

    Returns:
        List of positions, starting with the origin. Simulation ends on the
        first step that leaves the bounds or after max_steps.
    """
    x_max, y_max, y_min = bounds
    arrow = Arrow(position=origin, velocity=velocity_vector)
    trajectory: List[np.ndarray] = [arrow.position.copy()]

    for _ in range(max_steps):
        integrate_arrow(arrow, dt, wind)
        trajectory.append(arrow.position.copy())
        x, y = arrow.position
        if x > x_max or y > y_max or y < y_min:
            break

    return trajectory


# ---------- Smoke Test ----------
if __name__ == "__main__":
    from rich.console import Console
    from rich.table import Table

    console = Console()
    console.print("\n[bold cyan]=== Bow Range Ballistics Smoke Test ===[/bold cyan]\n")

    console.print("[bold]Test 1:[/bold] Flat shot, full draw, no wind")
    vel = compute_launch_velocity(0.0, 1.0)
    traj = simulate_trajectory(np.array([120.0, 270.0]), vel)

    table = Table(title="Trajectory (every 10 steps)")
    table.add_column("Step", style="cyan")
    table.add_column("Position (x, y)", style="green")
    for i, pos in enumerate(traj):
        if i % 10 == 0 or i == len(traj) - 1:
            table.add_row(str(i), f"({pos[0]:.1f}, {pos[1]:.1f})")
    console.print(table)

    console.print("\n[bold]Test 2:[/bold] Zero charge still launches at 40% speed")
    slow = np.linalg.norm(compute_launch_velocity(0.0, 0.0))
    assert abs(slow - 0.4 * BASE_ARROW_SPEED) < 1e-9
    console.print(f"  Speed at zero draw: {slow:.2f}")

    console.print("\n[bold]Test 3:[/bold] Tailwind carries the arrow further right")
    calm = simulate_trajectory(np.array([120.0, 270.0]), vel, wind=0.0)
    tail = simulate_trajectory(np.array([120.0, 270.0]), vel, wind=5.0)
    assert tail[min(len(calm), len(tail)) - 1][0] > calm[min(len(calm), len(tail)) - 1][0]
    console.print("  Tailwind pushes right")

    console.print("\n[bold green]All ballistics checks passed![/bold green]\n")
