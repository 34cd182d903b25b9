"""
Bow Range - Level Catalog

Ordered level configurations loaded from YAML. Each level fixes the arrow
allotment, target placement and size, target motion, wind ceiling, and the
cumulative score needed to move on.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

import yaml

from archery_physics.collision import DEFAULT_MOVE_AMPLITUDE, DEFAULT_MOVE_SPEED

CONFIGS_DIR = Path(__file__).resolve().parent / "configs"
DEFAULT_LEVELS_PATH = CONFIGS_DIR / "levels.yaml"

REQUIRED_KEYS = ("name", "arrows", "target_distance", "target_radius", "min_score_to_advance")


@dataclass(frozen=True)
class LevelConfig:
    """One entry of the level catalog."""
    name: str
    arrows: int
    target_distance: float
    target_radius: float
    min_score_to_advance: int
    moving: bool = False
    move_amplitude: Optional[float] = None   # only set on moving levels
    move_speed: Optional[float] = None
    wind_max: float = 0.0

    def __post_init__(self):
        if self.arrows <= 0:
            raise ValueError(f"Level '{self.name}': arrows must be positive, got {self.arrows}")
        if self.target_radius <= 0:
            raise ValueError(f"Level '{self.name}': target_radius must be positive, got {self.target_radius}")
        if self.wind_max < 0:
            raise ValueError(f"Level '{self.name}': wind_max must be non-negative, got {self.wind_max}")
        if self.moving:
            if self.move_amplitude is None:
                object.__setattr__(self, "move_amplitude", DEFAULT_MOVE_AMPLITUDE)
            if self.move_speed is None:
                object.__setattr__(self, "move_speed", DEFAULT_MOVE_SPEED)


def _parse_level(index: int, raw: dict) -> LevelConfig:
    if not isinstance(raw, dict):
        raise ValueError(f"Level #{index + 1}: expected a mapping, got {type(raw).__name__}")
    missing = [key for key in REQUIRED_KEYS if key not in raw]
    if missing:
        raise ValueError(f"Level #{index + 1} ({raw.get('name', '?')}): missing {missing}")

    moving = bool(raw.get("moving", False))
    amplitude = speed = None
    if moving:
        if raw.get("move_amplitude"):
            amplitude = float(raw["move_amplitude"])
        if raw.get("move_speed"):
            speed = float(raw["move_speed"])

    return LevelConfig(
        name=str(raw["name"]).strip(),
        arrows=int(raw["arrows"]),
        target_distance=float(raw["target_distance"]),
        target_radius=float(raw["target_radius"]),
        min_score_to_advance=int(raw["min_score_to_advance"]),
        moving=moving,
        move_amplitude=amplitude,
        move_speed=speed,
        wind_max=float(raw.get("wind_max") or 0.0),
    )


def load_levels(config_path: Path = None) -> Tuple[LevelConfig, ...]:
    """Load the level catalog from YAML.

    Raises:
        FileNotFoundError: if the catalog file does not exist.
        ValueError: if the file is malformed or a level is invalid.
    """
    if config_path is None:
        config_path = DEFAULT_LEVELS_PATH
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Level catalog not found: {config_path}")

    with open(config_path, encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if not isinstance(data, dict) or not isinstance(data.get("levels"), list):
        raise ValueError(f"{config_path.name}: expected a top-level 'levels' list")

    levels: List[LevelConfig] = [_parse_level(i, raw) for i, raw in enumerate(data["levels"])]
    if not levels:
        raise ValueError(f"{config_path.name}: no levels defined")
    return tuple(levels)
