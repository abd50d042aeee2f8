"""Tank battle stage: player control, enemy waves and bullet flight."""

from __future__ import annotations

import math
import random
from collections.abc import Iterable

from tankgame.world import (
    HEIGHT,
    MAX_WAVES,
    SPEED,
    TANK_SIZE,
    WIDTH,
    Bullet,
    Direction,
    Tank,
    World,
    is_colliding_rect,
)

FIRE_KEY = " "
FIRE_COOLDOWN_MS = 180
VICTORY_KILLS = 6
WAVE_RESET_HEALTH = 3
BULLET_SPEED = SPEED * 2

WIN = "win"
LOSE = "lose"

_KEY_DIRECTIONS = {
    "W": Direction.UP,
    "D": Direction.RIGHT,
    "S": Direction.DOWN,
    "A": Direction.LEFT,
}

_STEPS = {
    Direction.UP: (0, -1),
    Direction.RIGHT: (1, 0),
    Direction.DOWN: (0, 1),
    Direction.LEFT: (-1, 0),
}


def _clamp_position(x: int, y: int) -> tuple[int, int]:
    x = min(max(x, 0), WIDTH - TANK_SIZE)
    y = min(max(y, 0), HEIGHT - TANK_SIZE)
    return x, y


def create_enemy(x, y, direction) -> Tank:
    """A fresh enemy tank at full health."""
    return Tank(x, y, Direction(direction))


def spawn_wave(world) -> None:
    """Add one enemy per wave number; each new enemy goes to the front."""
    for i in range(world.current_wave):
        enemy = create_enemy(400 + i * (TANK_SIZE + 20), 300, Direction.DOWN)
        world.enemies.insert(0, enemy)


def new_world() -> World:
    """A world ready for the first wave."""
    world = World()
    spawn_wave(world)
    return world


def move_player(world, key) -> None:
    """Turn the player towards a WASD key and move if the way is clear."""
    player = world.player
    new_x, new_y = player.x, player.y
    direction = _KEY_DIRECTIONS.get(str(key).upper())
    if direction is not None:
        dx, dy = _STEPS[direction]
        new_x += dx * SPEED
        new_y += dy * SPEED
        player.direction = direction

    new_x, new_y = _clamp_position(new_x, new_y)
    if world.can_move(new_x, new_y):
        player.x, player.y = new_x, new_y


def fire_player_bullet(world) -> Bullet | None:
    """Launch a bullet along the player's facing; None when no slot is free."""
    bullet = world.free_bullet()
    if bullet is None:
        return None
    player = world.player
    dx, dy = _STEPS[Direction(player.direction)]
    bullet.active = True
    bullet.from_player = True
    bullet.x = player.x + TANK_SIZE // 2
    bullet.y = player.y + TANK_SIZE // 2
    bullet.vx = dx * BULLET_SPEED
    bullet.vy = dy * BULLET_SPEED
    return bullet


def enemy_fire_bullet(world, enemy, rng) -> Bullet | None:
    """With a 5% chance, shoot a bullet aimed at the player's centre."""
    if rng.randrange(100) >= 5:
        return None
    bullet = world.free_bullet()
    if bullet is None:
        return None
    bullet.active = True
    bullet.from_player = False
    bullet.x = enemy.x + TANK_SIZE // 2
    bullet.y = enemy.y + TANK_SIZE // 2
    dx = world.player.x + TANK_SIZE // 2 - bullet.x
    dy = world.player.y + TANK_SIZE // 2 - bullet.y
    length = math.hypot(dx, dy) or 1
    bullet.vx = dx / length * BULLET_SPEED
    bullet.vy = dy / length * BULLET_SPEED
    return bullet


def move_enemies(world, rng) -> None:
    """Wander every living enemy one step and give it a chance to fire."""
    speed = SPEED // 2 + (world.current_wave - 1)
    for enemy in world.enemies:
        if not enemy.alive:
            continue
        if rng.randrange(50) == 0:
            enemy.direction = Direction(rng.randrange(4))

        dx, dy = _STEPS[Direction(enemy.direction)]
        new_x, new_y = _clamp_position(enemy.x + dx * speed, enemy.y + dy * speed)
        if world.can_move(new_x, new_y):
            enemy.x, enemy.y = new_x, new_y

        enemy_fire_bullet(world, enemy, rng)


def _hits(bullet: Bullet, tank: Tank) -> bool:
    return is_colliding_rect(*bullet.hitbox, *tank.rect)


def update_bullets(world) -> None:
    """Move bullets and resolve their hits on walls and tanks."""
    for bullet in world.bullets:
        if not bullet.active:
            continue

        bullet.x += bullet.vx
        bullet.y += bullet.vy

        if not (0 <= bullet.x <= WIDTH and 0 <= bullet.y <= HEIGHT):
            bullet.active = False
            continue

        if any(is_colliding_rect(*bullet.hitbox, *wall.rect) for wall in world.walls):
            bullet.active = False
            continue

        if bullet.from_player:
            target = next(
                (e for e in world.enemies if e.alive and _hits(bullet, e)), None
            )
            if target is not None:
                target.health -= 1
                if target.health <= 0:
                    world.enemies_defeated += 1
                    target.alive = False
                bullet.active = False
        else:
            player = world.player
            if player.alive and _hits(bullet, player):
                player.health -= 1
                if player.health <= 0:
                    player.alive = False
                bullet.active = False


def check_wave_progress(world) -> None:
    """Start the next wave once every enemy is down."""
    if any(enemy.alive for enemy in world.enemies):
        return
    world.enemies.clear()
    world.current_wave += 1
    if world.current_wave > MAX_WAVES:
        world.current_wave = 1
        world.player.health = WAVE_RESET_HEALTH
        world.player.alive = True
    spawn_wave(world)


class Battle:
    """A running battle: a world plus input timing and a random source."""

    def __init__(self, world=None, rng=None):
        self.world = world if world is not None else new_world()
        self.rng = rng if rng is not None else random.Random()
        self.last_fire_time: int | None = None

    def process_input(self, keys: Iterable[str], now_ms) -> None:
        """Apply held keys: WASD moves, space fires with a cooldown."""
        held = {str(key).upper() for key in keys}
        for key in ("W", "A", "S", "D"):
            if key in held:
                move_player(self.world, key)

        if FIRE_KEY in held and self.world.player.alive:
            if (
                self.last_fire_time is None
                or now_ms - self.last_fire_time >= FIRE_COOLDOWN_MS
            ):
                fire_player_bullet(self.world)
                self.last_fire_time = now_ms

    def step(self) -> None:
        """Advance enemies, bullets and waves by one frame."""
        self.world.anim_count += 1
        move_enemies(self.world, self.rng)
        update_bullets(self.world)
        check_wave_progress(self.world)

    def outcome(self) -> str | None:
        """WIN after enough kills, LOSE when the player is dead, else None."""
        if self.world.enemies_defeated >= VICTORY_KILLS:
            return WIN
        if not self.world.player.alive:
            return LOSE
        return None