import math

import pytest

from tankgame.battle import (
    BULLET_SPEED,
    LOSE,
    WIN,
    Battle,
    check_wave_progress,
    create_enemy,
    enemy_fire_bullet,
    fire_player_bullet,
    move_enemies,
    move_player,
    new_world,
    spawn_wave,
    update_bullets,
)
from tankgame.world import (
    ENEMY_HEALTH,
    MAX_BULLETS,
    MAX_WAVES,
    PLAYER_HEALTH,
    SPEED,
    TANK_SIZE,
    WIDTH,
    Bullet,
    Direction,
    Tank,
    World,
)


class ScriptedRandom:
    def __init__(self, values):
        self._values = iter(values)

    def randrange(self, n):
        value = next(self._values)
        assert 0 <= value < n
        return value


def empty_world():
    return World()


def test_create_enemy_full_health():
    enemy = create_enemy(10, 20, 2)
    assert (enemy.x, enemy.y) == (10, 20)
    assert enemy.direction == Direction.DOWN
    assert enemy.health == ENEMY_HEALTH
    assert enemy.alive


def test_new_world_has_first_wave():
    world = new_world()
    assert len(world.enemies) == 1
    enemy = world.enemies[0]
    assert (enemy.x, enemy.y) == (400, 300)
    assert enemy.direction == Direction.DOWN
    assert not any(b.active for b in world.bullets)
    assert world.player.health == PLAYER_HEALTH


def test_spawn_wave_inserts_at_front():
    world = empty_world()
    world.current_wave = 3
    spawn_wave(world)
    xs = [e.x for e in world.enemies]
    assert len(xs) == 3
    assert xs == sorted(xs, reverse=True)
    assert xs[0] - xs[1] == xs[1] - xs[2] == TANK_SIZE + 20
    assert all(e.y == 300 for e in world.enemies)


def test_move_player_up():
    world = empty_world()
    move_player(world, "w")
    assert (world.player.x, world.player.y) == (50, 50 - SPEED)
    assert world.player.direction == Direction.UP


def test_move_player_clamped_at_edge():
    world = empty_world()
    world.player.x = 0
    world.player.y = 0
    move_player(world, "A")
    assert (world.player.x, world.player.y) == (0, 0)
    assert world.player.direction == Direction.LEFT


def test_move_player_blocked_by_wall():
    world = empty_world()
    world.player.x, world.player.y = 110, 150
    move_player(world, "D")
    assert world.player.x == 110
    assert world.player.direction == Direction.RIGHT


def test_fire_player_bullet_directions():
    world = empty_world()
    bullet = fire_player_bullet(world)
    assert bullet.active and bullet.from_player
    assert (bullet.x, bullet.y) == (50 + TANK_SIZE // 2, 50 + TANK_SIZE // 2)
    assert (bullet.vx, bullet.vy) == (0, -SPEED * 2)
    world.player.direction = Direction.RIGHT
    second = fire_player_bullet(world)
    assert (second.vx, second.vy) == (SPEED * 2, 0)


def test_fire_player_bullet_runs_out_of_slots():
    world = empty_world()
    for _ in range(MAX_BULLETS):
        assert fire_player_bullet(world) is not None
    assert fire_player_bullet(world) is None
    assert all(b.active for b in world.bullets)


def test_enemy_fire_aims_at_player():
    world = empty_world()
    enemy = create_enemy(400, 300, 2)
    bullet = enemy_fire_bullet(world, enemy, ScriptedRandom([4]))
    assert bullet is not None and not bullet.from_player
    assert math.hypot(bullet.vx, bullet.vy) == pytest.approx(BULLET_SPEED)
    assert bullet.vx < 0 and bullet.vy < 0


def test_enemy_fire_chance_misses():
    world = empty_world()
    enemy = create_enemy(400, 300, 2)
    assert enemy_fire_bullet(world, enemy, ScriptedRandom([5])) is None
    assert not any(b.active for b in world.bullets)


def test_enemy_fire_on_player_centre_has_zero_velocity():
    world = empty_world()
    enemy = create_enemy(world.player.x, world.player.y, 0)
    bullet = enemy_fire_bullet(world, enemy, ScriptedRandom([0]))
    assert (bullet.vx, bullet.vy) == (0, 0)


def test_move_enemies_keeps_direction():
    world = new_world()
    move_enemies(world, ScriptedRandom([1, 99]))
    enemy = world.enemies[0]
    assert (enemy.x, enemy.y) == (400, 300 + SPEED // 2)
    assert not any(b.active for b in world.bullets)


def test_move_enemies_faster_in_later_waves():
    world = empty_world()
    world.current_wave = 2
    world.enemies.append(create_enemy(700, 500, 2))
    move_enemies(world, ScriptedRandom([1, 99]))
    assert world.enemies[0].y == 500 + SPEED // 2 + 1


def test_move_enemies_changes_direction():
    world = new_world()
    move_enemies(world, ScriptedRandom([0, 3, 99]))
    enemy = world.enemies[0]
    assert enemy.direction == Direction.LEFT
    assert enemy.x < 400 and enemy.y == 300


def test_dead_enemies_do_not_move():
    world = new_world()
    world.enemies[0].alive = False
    move_enemies(world, ScriptedRandom([]))
    assert (world.enemies[0].x, world.enemies[0].y) == (400, 300)


def test_bullet_leaving_screen_deactivates():
    world = empty_world()
    world.bullets[0] = Bullet(WIDTH - 1, 300, 5, 0, True, True)
    update_bullets(world)
    assert not world.bullets[0].active


def test_bullet_hitting_wall_deactivates():
    world = empty_world()
    world.bullets[0] = Bullet(160, 150, 0, 0, True, True)
    update_bullets(world)
    assert not world.bullets[0].active


def test_player_bullet_kills_enemy_after_three_hits():
    world = new_world()
    enemy = world.enemies[0]
    for hit in range(1, ENEMY_HEALTH + 1):
        world.bullets[0] = Bullet(420, 320, 0, 0, True, True)
        update_bullets(world)
        assert not world.bullets[0].active
        assert enemy.health == ENEMY_HEALTH - hit
    assert not enemy.alive
    assert world.enemies_defeated == 1


def test_player_bullet_skips_dead_enemy():
    world = empty_world()
    dead = Tank(400, 300, Direction.DOWN, 0, False)
    alive = Tank(400, 300)
    world.enemies.extend([dead, alive])
    world.bullets[0] = Bullet(420, 320, 0, 0, True, True)
    update_bullets(world)
    assert dead.health == 0
    assert alive.health == ENEMY_HEALTH - 1


def test_enemy_bullet_hits_player():
    world = empty_world()
    world.bullets[0] = Bullet(70, 70, 0, 0, True, False)
    update_bullets(world)
    assert world.player.health == PLAYER_HEALTH - 1
    assert not world.bullets[0].active


def test_enemy_bullet_kills_player():
    world = empty_world()
    world.player.health = 1
    world.bullets[0] = Bullet(70, 70, 0, 0, True, False)
    update_bullets(world)
    assert not world.player.alive


def test_wave_advances_when_all_dead():
    world = new_world()
    world.enemies[0].alive = False
    check_wave_progress(world)
    assert world.current_wave == 2
    assert len(world.enemies) == 2
    assert all(e.alive for e in world.enemies)


def test_wave_waits_while_enemies_alive():
    world = new_world()
    check_wave_progress(world)
    assert world.current_wave == 1
    assert len(world.enemies) == 1


def test_wave_wraps_and_restores_player():
    world = empty_world()
    world.current_wave = MAX_WAVES
    world.player.alive = False
    world.player.health = 0
    check_wave_progress(world)
    assert world.current_wave == 1
    assert world.player.alive
    assert world.player.health == 3
    assert len(world.enemies) == 1


def test_process_input_moves_player():
    battle = Battle(empty_world(), ScriptedRandom([]))
    battle.process_input({"w"}, 0)
    assert battle.world.player.y == 50 - SPEED


def test_process_input_fire_cooldown():
    battle = Battle(empty_world(), ScriptedRandom([]))
    battle.process_input({" "}, 1000)
    battle.process_input({" "}, 1100)
    assert sum(b.active for b in battle.world.bullets) == 1
    battle.process_input({" "}, 1180)
    assert sum(b.active for b in battle.world.bullets) == 2


def test_dead_player_cannot_fire():
    battle = Battle(empty_world(), ScriptedRandom([]))
    battle.world.player.alive = False
    battle.process_input({" "}, 1000)
    assert not any(b.active for b in battle.world.bullets)


def test_step_advances_animation_and_enemies():
    battle = Battle(new_world(), ScriptedRandom([1, 99]))
    battle.step()
    assert battle.world.anim_count == 1
    assert battle.world.enemies[0].y == 300 + SPEED // 2


def test_outcome():
    battle = Battle(empty_world(), ScriptedRandom([]))
    assert battle.outcome() is None
    battle.world.player.alive = False
    assert battle.outcome() == LOSE
    battle.world.enemies_defeated = 6
    assert battle.outcome() == WIN