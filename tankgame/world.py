"""Shared game constants and the state of the tank battle world."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum

TANK_SIZE = 40
BULLET_SIZE = 6
SPEED = 5
MAX_BULLETS = 50
MAX_WAVES = 3
WIDTH = 980
HEIGHT = 615
BAR_HEIGHT = 400
BAR_WIDTH = 30
MAX_PROGRESS = 100
MOVE_UP_RATE = 2
MOVE_DOWN_RATE = 1.5

PLAYER_START = (50, 50)
PLAYER_HEALTH = 30
ENEMY_HEALTH = 3

# Rectangles as (left, top, right, bottom).
HEAT_BAR_RECT = (50, 150, 50 + BAR_WIDTH, 150 + BAR_HEIGHT)
DRILL_BAR_RECT = (WIDTH - 85, 150, WIDTH - 85 + BAR_WIDTH, 150 + BAR_HEIGHT)
ANIM_CENTER = (WIDTH // 2 - 100, HEIGHT // 2 - 80)


class Direction(IntEnum):
    """Facing of a tank; the values match the sprite sheet rows."""

    UP = 0
    RIGHT = 1
    DOWN = 2
    LEFT = 3


def is_colliding_rect(ax, ay, aw, ah, bx, by, bw, bh):
    """Return True when two axis-aligned rectangles overlap."""
    return ax < bx + bw and ax + aw > bx and ay < by + bh and ay + ah > by


@dataclass
class Tank:
    x: int
    y: int
    direction: Direction = Direction.UP
    health: int = ENEMY_HEALTH
    alive: bool = True

    @property
    def rect(self) -> tuple[int, int, int, int]:
        return (self.x, self.y, TANK_SIZE, TANK_SIZE)


@dataclass
class Bullet:
    x: float = 0.0
    y: float = 0.0
    vx: float = 0.0
    vy: float = 0.0
    active: bool = False
    from_player: bool = False

    @property
    def hitbox(self) -> tuple[int, int, int, int]:
        return (
            int(self.x) - BULLET_SIZE,
            int(self.y) - BULLET_SIZE,
            BULLET_SIZE * 2,
            BULLET_SIZE * 2,
        )


@dataclass(frozen=True)
class Wall:
    x: int
    y: int
    w: int
    h: int

    @property
    def rect(self) -> tuple[int, int, int, int]:
        return (self.x, self.y, self.w, self.h)


def default_walls() -> list[Wall]:
    """The fixed obstacle layout of the battle arena."""
    return [
        Wall(150, 100, 20, 200),
        Wall(300, 50, 20, 150),
        Wall(300, 300, 20, 150),
        Wall(100, 350, 100, 20),
        Wall(500, 100, 20, 200),
        Wall(450, 250, 100, 20),
        Wall(50, 200, 100, 20),
    ]


def _new_player() -> Tank:
    x, y = PLAYER_START
    return Tank(x, y, Direction.UP, PLAYER_HEALTH, True)


@dataclass
class World:
    """Everything the battle stage keeps between frames."""

    player: Tank = field(default_factory=_new_player)
    enemies: list[Tank] = field(default_factory=list)
    bullets: list[Bullet] = field(
        default_factory=lambda: [Bullet() for _ in range(MAX_BULLETS)]
    )
    walls: list[Wall] = field(default_factory=default_walls)
    current_wave: int = 1
    enemies_defeated: int = 0
    anim_count: int = 0

    def can_move(self, x, y) -> bool:
        """True when a tank placed at (x, y) touches no wall."""
        return not any(
            is_colliding_rect(x, y, TANK_SIZE, TANK_SIZE, *wall.rect)
            for wall in self.walls
        )

    def free_bullet(self) -> Bullet | None:
        """The first inactive bullet slot, or None when all are in flight."""
        return next((b for b in self.bullets if not b.active), None)

    def alive_enemies(self) -> list[Tank]:
        return [enemy for enemy in self.enemies if enemy.alive]