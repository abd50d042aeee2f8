"""The game's screens wired together into one story-driven run."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

import pygame

from tankgame.accounts import DEFAULT_USER_FILE, LoginForm, LoginResult, UserStore
from tankgame.battle import WIN, Battle
from tankgame.drill import DrillState
from tankgame.maze import (
    FAIL_IMAGE,
    LEVEL_ONE,
    LEVEL_TWO,
    RAY_SIZE,
    SUCCESS_IMAGE,
    Outcome,
    RayRunner,
)
from tankgame.render import (
    BUTTON_HOVER,
    MENU_SIZE,
    QUIT,
    TEXT_COLOR,
    button_at,
    draw_bullet,
    draw_game_ui,
    draw_start_interface,
    draw_tank,
    draw_walls,
    play_story,
    story_frame_paths,
)
from tankgame.world import HEIGHT, MAX_PROGRESS, TANK_SIZE, WIDTH, Direction

ASSET_DIR = Path("source")
LOCK_FRAME_COUNT = 60

FRAME_MS = 30
DRILL_FRAME_MS = 33
MENU_FRAME_MS = 10
RESULT_DISPLAY_MS = 2000
LOADING_MS = 2000
INPUT_FPS = 60

BLACK = (0, 0, 0)
WHITE = (255, 255, 255)
GREEN = (0, 170, 0)
RED = (170, 0, 0)
LOGIN_FALLBACK_BG = (70, 130, 180)
FOCUS_COLOR = (100, 200, 100)
BATTLE_BG = (30, 30, 30)

MSG_REGISTERED = "首次用户已注册成功"
MSG_WRITE_FAILED = "无法写入用户信息文件"
MSG_REJECTED = "用户名或密码错误"
SOUND_FAILED = "Failed to play sound."

_BATTLE_KEYS = {
    pygame.K_w: "W",
    pygame.K_a: "A",
    pygame.K_s: "S",
    pygame.K_d: "D",
    pygame.K_SPACE: " ",
}

_TANK_SPRITES = {
    Direction.LEFT: ("m0-0-1.gif", "m0-0-2.gif"),
    Direction.UP: ("m0-1-1.gif", "m0-1-2.gif"),
    Direction.RIGHT: ("m0-2-1.gif", "m0-2-2.gif"),
    Direction.DOWN: ("m0-3-1.gif", "m0-3-2.gif"),
}


class QuitGame(Exception):
    """Raised when the player closes the game window."""


_fonts: dict[int, pygame.font.Font] = {}


def _font(size: int) -> pygame.font.Font:
    if not pygame.font.get_init():
        pygame.font.init()
    if size not in _fonts:
        _fonts[size] = pygame.font.Font(None, size)
    return _fonts[size]


def _text(surface, text, pos, size, color) -> None:
    surface.blit(_font(size).render(text, True, color), pos)


def _flip(screen) -> None:
    if pygame.display.get_surface() is screen:
        pygame.display.flip()


def _load(path) -> pygame.Surface | None:
    try:
        return pygame.image.load(str(path))
    except (FileNotFoundError, pygame.error):
        return None


def _blit_or_fill(screen, image, fill=WHITE) -> None:
    if image is None:
        screen.fill(fill)
    else:
        screen.blit(image, (0, 0))


def _collect_keys(held: set[int]) -> None:
    """Update the set of held keys from pending events."""
    for event in pygame.event.get():
        if event.type == pygame.QUIT:
            raise QuitGame
        if event.type == pygame.KEYDOWN:
            held.add(event.key)
        elif event.type == pygame.KEYUP:
            held.discard(event.key)


def _wait_for_key() -> None:
    while True:
        event = pygame.event.wait()
        if event.type == pygame.QUIT:
            raise QuitGame
        if event.type == pygame.KEYDOWN:
            return


def lock_frame_paths() -> list[Path]:
    """The animation frames of the lock-drilling stage, in order."""
    return [ASSET_DIR / "lock" / f"dock{i:02d}.jpg" for i in range(LOCK_FRAME_COUNT)]


def _draw_login(screen, background, form: LoginForm, status: str) -> None:
    width = MENU_SIZE[0]
    if background is not None:
        screen.blit(pygame.transform.scale(background, MENU_SIZE), (0, 0))
    else:
        screen.fill(LOGIN_FALLBACK_BG)

    title = "用户登录系统"
    title_width = _font(28).size(title)[0]
    _text(screen, title, (width // 2 - title_width // 2, 100), 28, WHITE)

    label_x = width // 2 - 200
    _text(screen, "用户名:", (label_x, 250), 28, WHITE)
    _text(screen, "密  码:", (label_x, 350), 28, WHITE)

    input_x = width // 2 - 100
    input_width = 300
    for top in (245, 345):
        pygame.draw.rect(screen, WHITE, pygame.Rect(input_x, top, input_width, 30))
    _text(screen, form.username, (input_x + 5, 250), 28, BLACK)
    _text(screen, form.masked_password(), (input_x + 5, 350), 28, BLACK)

    focus_top = 240 if form.typing_username else 340
    pygame.draw.rect(
        screen, FOCUS_COLOR, pygame.Rect(input_x - 5, focus_top, input_width + 10, 5)
    )
    if status:
        _text(screen, status, (input_x, 420), 28, WHITE)
    _flip(screen)


def run_login(screen, store) -> bool:
    """Run the login form; True once logged in, False when escaped."""
    form = LoginForm()
    status = ""
    background = _load(ASSET_DIR / "start.png")
    clock = pygame.time.Clock()
    while True:
        _draw_login(screen, background, form, status)
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                raise QuitGame
            if event.type != pygame.KEYDOWN:
                continue
            if event.key in (pygame.K_RETURN, pygame.K_KP_ENTER):
                try:
                    result = store.login(form.username, form.password)
                except OSError:
                    status = MSG_WRITE_FAILED
                    continue
                if result is LoginResult.REJECTED:
                    status = MSG_REJECTED
                    form.clear()
                    continue
                if result is LoginResult.REGISTERED:
                    _draw_login(screen, background, form, MSG_REGISTERED)
                return True
            if event.key == pygame.K_BACKSPACE:
                form.backspace()
            elif event.key == pygame.K_TAB:
                form.toggle_field()
            elif event.key == pygame.K_ESCAPE:
                return False
            else:
                form.type_char(getattr(event, "unicode", ""))
        clock.tick(INPUT_FPS)


def _draw_menu(screen, background, hovered) -> None:
    draw_start_interface(screen, background)
    if hovered is not None:
        pygame.draw.rect(screen, BUTTON_HOVER, hovered.rect)
        _text(screen, hovered.label, hovered.label_pos, 30, TEXT_COLOR)
    _flip(screen)


def run_menu(screen) -> str:
    """Show the title screen until a button is clicked; return its action."""
    background = _load(ASSET_DIR / "start.png")
    _draw_menu(screen, background, None)
    while True:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                raise QuitGame
            if event.type not in (pygame.MOUSEMOTION, pygame.MOUSEBUTTONDOWN):
                continue
            x, y = event.pos
            button = button_at(x, y)
            _draw_menu(screen, background, button)
            if (
                button is not None
                and event.type == pygame.MOUSEBUTTONDOWN
                and event.button == 1
            ):
                return button.action
        pygame.time.wait(MENU_FRAME_MS)


def _show_result(screen, image_path, background) -> None:
    _blit_or_fill(screen, _load(image_path))
    _flip(screen)
    pygame.time.wait(RESULT_DISPLAY_MS)
    _blit_or_fill(screen, background)
    _flip(screen)


def run_maze(screen, level) -> int:
    """Play a maze until the ray reaches a goal; return how often it failed.

    Each frame takes at most one pending event, so one key press steers once.
    """
    runner = RayRunner(level)
    background = _load(level.background)
    failures = 0
    _blit_or_fill(screen, background)
    _flip(screen)
    while True:
        event = pygame.event.poll()
        if event.type == pygame.QUIT:
            raise QuitGame

        pygame.draw.rect(screen, WHITE, pygame.Rect(runner.x, runner.y, RAY_SIZE, RAY_SIZE))
        if event.type == pygame.KEYDOWN:
            runner.steer(pygame.key.name(event.key))

        outcome = runner.advance()
        pygame.draw.rect(screen, GREEN, pygame.Rect(runner.x, runner.y, RAY_SIZE, RAY_SIZE))
        _flip(screen)

        if outcome is Outcome.FAIL:
            failures += 1
            _show_result(screen, FAIL_IMAGE, background)
            runner.restart()
        elif outcome is Outcome.SUCCESS:
            _show_result(screen, SUCCESS_IMAGE, background)
            return failures
        pygame.time.wait(FRAME_MS)


def run_drill(screen) -> bool:
    """Drill through the lock with W; True when done, False when Q quits."""
    frames = [_load(path) for path in lock_frame_paths()]
    state = DrillState()
    held: set[int] = set()
    last = pygame.time.get_ticks()
    while True:
        _collect_keys(held)
        if state.is_anim_playing:
            _blit_or_fill(screen, frames[state.anim_frame], BLACK)
            state.anim_frame = (state.anim_frame + 1) % len(frames)
        else:
            _blit_or_fill(screen, frames[0], BLACK)

        now = pygame.time.get_ticks()
        state.update(pygame.K_w in held, now - last)
        last = now

        draw_game_ui(screen, state)
        _flip(screen)
        pygame.time.wait(DRILL_FRAME_MS)

        if pygame.K_q in held:
            return False
        if state.drill_progress >= MAX_PROGRESS:
            return True


def _tank_images() -> list[list[pygame.Surface]]:
    images: list[list[pygame.Surface]] = [[], [], [], []]
    for direction, names in _TANK_SPRITES.items():
        for index, name in enumerate(names):
            image = _load(name)
            if image is None:
                image = pygame.Surface((TANK_SIZE, TANK_SIZE))
                image.fill((90, 140, 90) if index == 0 else (70, 120, 70))
            images[int(direction)].append(image)
    return images


def run_battle(screen) -> str:
    """Fight the enemy waves until won or lost; return the outcome."""
    battle = Battle()
    images = _tank_images()
    held: set[int] = set()
    while True:
        _collect_keys(held)
        screen.fill(BATTLE_BG)

        keys = [_BATTLE_KEYS[key] for key in held if key in _BATTLE_KEYS]
        battle.process_input(keys, pygame.time.get_ticks())
        battle.step()

        world = battle.world
        draw_walls(screen, world)
        if world.player.alive:
            draw_tank(screen, world.player, images, world.anim_count)
        for enemy in world.enemies:
            draw_tank(screen, enemy, images, world.anim_count)
        for bullet in world.bullets:
            draw_bullet(screen, bullet)

        outcome = battle.outcome()
        if outcome is not None:
            if outcome == WIN:
                _text(screen, "YOU WIN!", (WIDTH // 2 - 150, HEIGHT // 2 - 25), 50, GREEN)
            else:
                _text(screen, "GAME OVER", (WIDTH // 2 - 100, HEIGHT // 2 - 25), 50, RED)
            _flip(screen)
            _wait_for_key()
            return outcome

        _flip(screen)
        pygame.time.wait(FRAME_MS)


def _play_sound(path) -> bool:
    try:
        if not pygame.mixer.get_init():
            pygame.mixer.init()
        pygame.mixer.Sound(str(path)).play()
    except (pygame.error, FileNotFoundError):
        return False
    return True


def _chapter(screen, sound, frames) -> bool:
    if not _play_sound(sound):
        print(SOUND_FAILED, file=sys.stderr)
        return False
    play_story(screen, frames, 0, 0)
    return True


def _run(args) -> int:
    screen = pygame.display.set_mode(MENU_SIZE)
    pygame.display.set_caption("tankgame")
    if run_login(screen, UserStore(args.user_file)):
        if run_menu(screen) == QUIT:
            return 0
        screen.fill(BLACK)
        _text(screen, "游戏加载中...", (MENU_SIZE[0] // 2 - 100, 300), 30, WHITE)
        _flip(screen)
        pygame.time.wait(LOADING_MS)

    screen = pygame.display.set_mode((WIDTH, HEIGHT))
    story_one = story_frame_paths(ASSET_DIR / "1", 10000, 500, 5)
    if not _chapter(screen, ASSET_DIR / "01.wav", story_one):
        return 1

    run_maze(screen, LEVEL_ONE)
    run_maze(screen, LEVEL_TWO)

    story_two = story_frame_paths(ASSET_DIR / "2", 2000, 729, 4)
    if not _chapter(screen, ASSET_DIR / "02.wav", story_two):
        return 1

    run_drill(screen)

    story_four = story_frame_paths(ASSET_DIR / "4", 40000, 500, 5)
    if not _chapter(screen, ASSET_DIR / "03.wav", story_four):
        return 1

    run_battle(screen)
    return 0


def main(argv=None) -> int:
    """Run the whole game: login, menu, story, mazes, drill and battle."""
    parser = argparse.ArgumentParser(prog="tankgame", description="Story-driven tank game.")
    parser.add_argument(
        "--user-file",
        default=DEFAULT_USER_FILE,
        help="file holding registered users (default: %(default)s)",
    )
    args = parser.parse_args(argv)

    pygame.init()
    try:
        return _run(args)
    except QuitGame:
        return 0
    finally:
        pygame.quit()


if __name__ == "__main__":
    sys.exit(main())