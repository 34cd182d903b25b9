"""
Bow Range Test Suite - Stage 1: EASY

Basic sanity checks on the building blocks. These should ALWAYS pass.

Tests:
    - Level catalog loading and validation
    - Charge power and launch velocity
    - Single-step arrow integration and gravity
    - Ring scoring table and hit radius
    - Target motion
"""

import math

import numpy as np
import pytest

from archery_physics.ballistics import (
    Arrow,
    BASE_ARROW_SPEED,
    charge_power,
    compute_launch_velocity,
    integrate_arrow,
    launch_speed,
    simulate_trajectory,
)
from archery_physics.collision import (
    RING_SCORES,
    Target,
    check_hit,
    compute_ring_score,
    move_target,
    ring_index,
    target_position,
)
from archery_game.levels import LevelConfig, load_levels


# ============================================================
# 1. Level Catalog
# ============================================================

class TestLevelCatalog:
    """The shipped catalog and its validation."""

    def test_six_levels_in_order(self, levels):
        """Catalog should hold the six levels in play order."""
        names = [lvl.name for lvl in levels]
        assert names == [
            "Training Grounds",
            "Light Breeze",
            "Shifting Gusts",
            "Mountain Draft",
            "Storm Front",
            "Final Trial",
        ]

    def test_first_level_values(self, levels):
        first = levels[0]
        assert first.arrows == 10
        assert first.target_distance == 520
        assert first.target_radius == 70
        assert first.min_score_to_advance == 80
        assert first.moving is False
        assert first.wind_max == 0
        assert first.move_amplitude is None
        assert first.move_speed is None

    def test_moving_levels_have_motion(self, levels):
        """Every moving level should carry amplitude and speed."""
        for lvl in levels:
            if lvl.moving:
                assert lvl.move_amplitude > 0
                assert lvl.move_speed > 0

    def test_difficulty_increases(self, levels):
        """Targets get smaller and further away, goals get higher."""
        radii = [lvl.target_radius for lvl in levels]
        distances = [lvl.target_distance for lvl in levels]
        goals = [lvl.min_score_to_advance for lvl in levels]
        assert radii == sorted(radii, reverse=True)
        assert distances == sorted(distances)
        assert goals == sorted(goals)

    def test_levels_are_immutable(self, levels):
        with pytest.raises(AttributeError):
            levels[0].arrows = 99

    def test_zero_arrows_rejected(self):
        with pytest.raises(ValueError):
            LevelConfig(name="bad", arrows=0, target_distance=500,
                        target_radius=50, min_score_to_advance=10)

    def test_zero_radius_rejected(self):
        with pytest.raises(ValueError):
            LevelConfig(name="bad", arrows=5, target_distance=500,
                        target_radius=0, min_score_to_advance=10)

    def test_negative_wind_rejected(self):
        with pytest.raises(ValueError):
            LevelConfig(name="bad", arrows=5, target_distance=500,
                        target_radius=50, min_score_to_advance=10, wind_max=-1)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_levels(tmp_path / "nope.yaml")

    def test_missing_key(self, tmp_path):
        path = tmp_path / "levels.yaml"
        path.write_text("levels:\n  - name: Broken\n    arrows: 3\n")
        with pytest.raises(ValueError, match="missing"):
            load_levels(path)

    def test_empty_catalog(self, tmp_path):
        path = tmp_path / "levels.yaml"
        path.write_text("levels: []\n")
        with pytest.raises(ValueError):
            load_levels(path)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "levels.yaml"
        path.write_text("- just\n- a list\n")
        with pytest.raises(ValueError):
            load_levels(path)

    def test_moving_level_defaults(self, tmp_path):
        """A moving level without motion parameters falls back to 50 / 1.0."""
        path = tmp_path / "levels.yaml"
        path.write_text(
            "levels:\n"
            "  - name: Wobble\n"
            "    arrows: 4\n"
            "    target_distance: 600\n"
            "    target_radius: 40\n"
            "    min_score_to_advance: 20\n"
            "    moving: true\n"
        )
        (lvl,) = load_levels(path)
        assert lvl.moving is True
        assert lvl.move_amplitude == 50.0
        assert lvl.move_speed == 1.0
        assert lvl.wind_max == 0.0


# ============================================================
# 2. Charge & Launch
# ============================================================

class TestLaunchVelocity:
    """Charge power mapping and launch speed."""

    def test_power_fraction(self):
        assert charge_power(0.0) == 0.0
        assert charge_power(1000.0) == pytest.approx(0.5)
        assert charge_power(2000.0) == 1.0

    def test_power_saturates(self):
        """Holding past the max hold gives no extra power."""
        assert charge_power(5000.0) == 1.0
        assert charge_power(2000.0) == charge_power(60000.0)

    def test_negative_hold_clamped(self):
        assert charge_power(-50.0) == 0.0

    def test_min_speed_is_40_percent(self):
        """Zero charge still launches at 40% of base speed."""
        assert launch_speed(0.0) == pytest.approx(0.4 * BASE_ARROW_SPEED)
        assert launch_speed(1.0) == pytest.approx(BASE_ARROW_SPEED)

    def test_flat_velocity(self):
        vel = compute_launch_velocity(0.0, 1.0)
        assert np.allclose(vel, [18.0, 0.0])

    def test_velocity_follows_angle(self):
        """Positive angles point down the screen."""
        vel = compute_launch_velocity(math.pi / 2, 1.0)
        assert abs(vel[0]) < 1e-9
        assert vel[1] == pytest.approx(18.0)


# ============================================================
# 3. Arrow Integration
# ============================================================

class TestArrowIntegration:
    """Single-step arrow physics."""

    def test_one_step_no_wind(self):
        arrow = Arrow(position=[0.0, 0.0], velocity=[10.0, 0.0])
        integrate_arrow(arrow, 0.9, 0.0)
        assert arrow.velocity[0] == pytest.approx(10.0)
        assert arrow.velocity[1] == pytest.approx(0.189)
        assert arrow.position[0] == pytest.approx(9.0)
        assert arrow.position[1] == pytest.approx(0.1701)
        assert arrow.rotation == pytest.approx(math.atan2(0.189, 10.0))

    def test_wind_accelerates_horizontally(self):
        arrow = Arrow(position=[0.0, 0.0], velocity=[10.0, 0.0])
        integrate_arrow(arrow, 0.9, 2.0)
        assert arrow.velocity[0] == pytest.approx(10.0 + 2.0 * 0.015 * 0.9)

    def test_headwind_slows(self):
        arrow = Arrow(position=[0.0, 0.0], velocity=[10.0, 0.0])
        integrate_arrow(arrow, 0.9, -3.0)
        assert arrow.velocity[0] < 10.0

    def test_gravity_strictly_increases_vy(self):
        """With no wind, vertical velocity grows every step."""
        arrow = Arrow(position=[120.0, 270.0], velocity=compute_launch_velocity(-0.3, 0.8))
        previous = arrow.velocity[1]
        for _ in range(50):
            integrate_arrow(arrow, 0.9, 0.0)
            assert arrow.velocity[1] > previous
            previous = arrow.velocity[1]

    def test_stuck_arrow_frozen(self):
        arrow = Arrow(position=[300.0, 200.0], velocity=[5.0, 1.0], stuck=True)
        integrate_arrow(arrow, 0.9, 5.0)
        assert np.allclose(arrow.position, [300.0, 200.0])
        assert np.allclose(arrow.velocity, [5.0, 1.0])

    def test_initial_heading(self):
        arrow = Arrow(position=[0.0, 0.0], velocity=[0.0, 3.0])
        assert arrow.rotation == pytest.approx(math.pi / 2)


class TestTrajectoryBasics:

    def test_trajectory_starts_at_origin(self):
        traj = simulate_trajectory(np.array([120.0, 270.0]), compute_launch_velocity(0.0, 1.0))
        assert np.allclose(traj[0], [120.0, 270.0])
        assert len(traj) > 1

    def test_trajectory_ends_off_field(self):
        """A flat shot with nothing in the way eventually leaves the field."""
        traj = simulate_trajectory(np.array([120.0, 270.0]), compute_launch_velocity(0.0, 1.0))
        x, y = traj[-1]
        assert x > 1110.0 or y > 590.0 or y < -50.0


# ============================================================
# 4. Ring Scoring
# ============================================================

class TestRingScoring:
    """Ring bands on a radius-70 target are 14 px thick."""

    def test_score_table(self):
        assert RING_SCORES == (50, 30, 20, 10, 5)

    def test_dead_center(self):
        assert compute_ring_score(0.0, 70.0) == 50

    def test_outer_edge(self):
        assert compute_ring_score(69.0, 70.0) == 5

    def test_band_boundaries(self):
        assert compute_ring_score(13.9, 70.0) == 50
        assert compute_ring_score(14.0, 70.0) == 30
        assert compute_ring_score(28.0, 70.0) == 20
        assert compute_ring_score(42.0, 70.0) == 10
        assert compute_ring_score(56.0, 70.0) == 5

    def test_ring_index_clamped(self):
        assert ring_index(70.0, 70.0) == 4
        assert ring_index(500.0, 70.0) == 4
        assert ring_index(0.0, 70.0) == 0

    def test_rim_is_a_hit(self, static_target):
        hit, dist = check_hit(np.array([450.0, 270.0]), static_target)
        assert hit is True
        assert dist == pytest.approx(70.0)

    def test_outside_rim_is_a_miss(self, static_target):
        hit, dist = check_hit(np.array([449.9, 270.0]), static_target)
        assert hit is False
        assert dist > 70.0


# ============================================================
# 5. Target Motion
# ============================================================

class TestTargetMotion:

    def test_static_target_never_moves(self, static_target):
        start = target_position(static_target)
        for _ in range(100):
            move_target(static_target)
        assert np.allclose(target_position(static_target), start)

    def test_moving_target_follows_sine(self, moving_target):
        for _ in range(10):
            move_target(moving_target, 16.0)
        expected_y = 270.0 + math.sin(160.0 * 0.001 * 1.2) * 40.0
        assert target_position(moving_target) == pytest.approx([600.0, expected_y])

    def test_moving_target_only_vertical(self, moving_target):
        for _ in range(500):
            move_target(moving_target)
            x, y = target_position(moving_target)
            assert x == 600.0
            assert 230.0 - 1e-9 <= y <= 310.0 + 1e-9

    def test_motion_time_is_monotonic(self, moving_target):
        move_target(moving_target, 32.0)
        move_target(moving_target, -100.0)
        assert moving_target.time == 32.0

    def test_position_recomputed_on_read(self, moving_target):
        """Position is derived from elapsed time, not stored."""
        moving_target.time = 1000.0
        a = target_position(moving_target)
        moving_target.time = 0.0
        b = target_position(moving_target)
        assert b[1] == pytest.approx(270.0)
        assert a[1] != pytest.approx(b[1])

    def test_target_is_dataclass(self):
        t = Target(base_x=1.0, base_y=2.0, radius=3.0)
        assert t.time == 0.0
        assert t.moving is False
