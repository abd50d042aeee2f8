"""The ray maze stages: steer a small square through a map of hazards."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from tankgame.world import HEIGHT, WIDTH

START_X = 50
START_Y = 550
RAY_SIZE = 10
RAY_STEP = 3

FAIL_IMAGE = Path("source") / "Screenshot 2025-03-03 110408.png"
SUCCESS_IMAGE = Path("source") / "laoda2.png"

_STEER = {
    "W": (0, -RAY_STEP),
    "S": (0, RAY_STEP),
    "A": (-RAY_STEP, 0),
    "D": (RAY_STEP, 0),
}


@dataclass(frozen=True)
class Area:
    """An inclusive rectangle given by its x range and y range."""

    start_x: float
    end_x: float
    start_y: float
    end_y: float

    def contains(self, x, y) -> bool:
        return self.start_x <= x <= self.end_x and self.start_y <= y <= self.end_y


class Outcome(Enum):
    CONTINUE = "continue"
    FAIL = "fail"
    SUCCESS = "success"


@dataclass(frozen=True)
class Level:
    """A maze map: where the ray starts, what kills it and what ends it."""

    name: str
    background: Path
    start: tuple[int, int]
    fail_areas: tuple[Area, ...]
    success_areas: tuple[Area, ...]

    def check(self, x, y) -> Outcome:
        """Classify a ray position; success wins over failure."""
        if any(area.contains(x, y) for area in self.success_areas):
            return Outcome.SUCCESS
        if any(area.contains(x, y) for area in self.fail_areas):
            return Outcome.FAIL
        return Outcome.CONTINUE


def _areas(*bounds: tuple[float, float, float, float]) -> tuple[Area, ...]:
    return tuple(Area(*b) for b in bounds)


LEVEL_ONE = Level(
    name="level one",
    background=Path("source") / "background3.png",
    start=(START_X + 30, START_Y - 25),
    fail_areas=_areas(
        (0, 271, 0, 409),
        (215, 251, 502, 591),
        (245, 274, 329, 450),
        (275, 555, 330, 380),
        (275, 745, 381, 450),
        (310, 400, 193, 205),
        (331, 658, 205, 273),
        (332, 400, 237, 294),
        (447, 626, 90, 169),
        (596, 657, 273, 324),
        (657, 682, 244, 325),
        (683, 740, 145, 326),
        (738, 935, 243, 328),
        (787, 857, 90, 170),
        (603, 803, 493, 594),
        (801, 923, 330, 494),
        (934, 980, 0, 615),
        (0, 980, 0, 91.2),
        (0, 980, 590, 615),
    ),
    success_areas=_areas((904, 923, 160, 215), (0, 69, 0, 615)),
)

LEVEL_TWO = Level(
    name="level two",
    background=Path("source") / "background4.png",
    start=(66, 188),
    fail_areas=_areas(
        (51, 128, 398, 439),
        (141, 234, 525, 590),
        (91, 171, 293, 352),
        (172, 267, 90, 485),
        (280, 320, 364, 551),
        (266, 624, 80, 150),
        (369, 414, 161, 234),
        (530, 589, 160, 194),
        (447, 626, 90, 169),
        (339, 438, 274, 334),
        (363, 451, 364, 463),
        (466, 500, 195, 290),
        (500, 567, 240, 289),
        (452, 482, 355, 438),
        (564, 624, 325, 435),
        (622, 676, 327, 474),
        (381, 687, 517, 592),
        (483, 555, 486, 512),
        (590, 756, 240, 289),
        (691, 757, 120, 241),
        (742, 802, 244, 590),
        (804, 827, 244, 443),
        (832, 884, 289, 374),
        (831, 858, 239, 373),
    ),
    success_areas=_areas((835, 893, 560, 599), (0, 44, 151, 209)),
)

LEVELS = (LEVEL_ONE, LEVEL_TWO)


@dataclass
class RayRunner:
    """The player's ray on one level: a position and a heading."""

    level: Level
    x: int = field(init=False)
    y: int = field(init=False)
    dx: int = field(init=False, default=0)
    dy: int = field(init=False, default=0)

    def __post_init__(self) -> None:
        self.restart()

    @property
    def position(self) -> tuple[int, int]:
        return (self.x, self.y)

    def steer(self, key) -> bool:
        """Turn towards a WASD key; return False for any other key."""
        step = _STEER.get(str(key).upper())
        if step is None:
            return False
        self.dx, self.dy = step
        return True

    def advance(self) -> Outcome:
        """Move one step, stay inside the window, and classify the spot."""
        self.x = min(max(self.x + self.dx, 0), WIDTH - RAY_SIZE)
        self.y = min(max(self.y + self.dy, 0), HEIGHT - RAY_SIZE)
        return self.level.check(self.x, self.y)

    def restart(self) -> None:
        """Return to the level's start, standing still."""
        self.x, self.y = self.level.start
        self.dx = 0
        self.dy = 0