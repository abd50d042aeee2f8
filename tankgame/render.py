"""Drawing of the game screens and playback of story frame sequences."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

import pygame

from tankgame.drill import BREAK_TIME_MS, is_at_obstacle
from tankgame.world import (
    BAR_HEIGHT,
    BULLET_SIZE,
    DRILL_BAR_RECT,
    HEAT_BAR_RECT,
    MAX_PROGRESS,
    TANK_SIZE,
    WIDTH,
)

MENU_SIZE = (1210, 615)
FRAME_RATE = 60

BLACK = (0, 0, 0)
WHITE = (255, 255, 255)
WALL_COLOR = (170, 85, 0)
PLAYER_BULLET_COLOR = (255, 255, 85)
ENEMY_BULLET_COLOR = (0, 170, 170)
BAR_FRAME_COLOR = (50, 50, 50)
BAR_TRACK_COLOR = (100, 100, 100)
HEAT_COLOR = (255, 80, 80)
DRILL_COLOR = (80, 200, 80)
WARNING_COLOR = (255, 0, 0)
HINT_COLOR = (255, 255, 0)
BUTTON_COLOR = (100, 150, 250)
BUTTON_HOVER = (80, 120, 220)
TEXT_COLOR = WHITE
BG_BAR_COLOR = (30, 30, 50)

START = "start"
QUIT = "quit"

OVERHEAT_MESSAGE = "OVERHEAT! COOLING..."

_BUTTON_WIDTH = 300
_BUTTON_HEIGHT = 60
_BUTTONS_TOP = 400
_BUTTON_SPACING = 15
_BUTTON_X = MENU_SIZE[0] // 2 - _BUTTON_WIDTH // 2


@lru_cache(maxsize=None)
def _font(size: int) -> pygame.font.Font:
    if not pygame.font.get_init():
        pygame.font.init()
    return pygame.font.Font(None, size)


def _text(surface, text, pos, size, color) -> None:
    surface.blit(_font(size).render(text, True, color), pos)


def story_frame_paths(directory, start, count, digits) -> list[Path]:
    """Numbered frame files story<N>.png, zero padded to the given width."""
    base = Path(directory)
    return [base / f"story{start + i:0{digits}d}.png" for i in range(count)]


@dataclass(frozen=True)
class MenuButton:
    label: str
    action: str
    x: int
    y: int
    width: int
    height: int

    @property
    def rect(self) -> pygame.Rect:
        return pygame.Rect(self.x, self.y, self.width, self.height)

    @property
    def label_pos(self) -> tuple[int, int]:
        return (self.x + 90, self.y + 15)

    def contains(self, x, y) -> bool:
        return (
            self.x <= x <= self.x + self.width
            and self.y <= y <= self.y + self.height
        )


def menu_buttons() -> list[MenuButton]:
    """The start and quit buttons of the title screen, top to bottom."""
    second_y = _BUTTONS_TOP + _BUTTON_HEIGHT + _BUTTON_SPACING
    return [
        MenuButton("开始游戏", START, _BUTTON_X, _BUTTONS_TOP, _BUTTON_WIDTH, _BUTTON_HEIGHT),
        MenuButton("结束游戏", QUIT, _BUTTON_X, second_y, _BUTTON_WIDTH, _BUTTON_HEIGHT),
    ]


def button_at(x, y) -> MenuButton | None:
    """The menu button under a point, or None."""
    return next((b for b in menu_buttons() if b.contains(x, y)), None)


def draw_walls(surface, world) -> None:
    for wall in world.walls:
        pygame.draw.rect(surface, WALL_COLOR, wall.rect)


def draw_tank(surface, tank, images, anim_count) -> None:
    """Draw a living tank's two-frame sprite with its health above it."""
    if not tank.alive:
        return
    _text(surface, str(tank.health), (tank.x + TANK_SIZE // 2 - 5, tank.y - 15), 20, WHITE)
    index = (anim_count // 10) % 2
    surface.blit(images[int(tank.direction)][index], (tank.x, tank.y))


def draw_bullet(surface, bullet) -> None:
    if not bullet.active:
        return
    color = PLAYER_BULLET_COLOR if bullet.from_player else ENEMY_BULLET_COLOR
    pygame.draw.circle(surface, color, (int(bullet.x), int(bullet.y)), BULLET_SIZE)


def draw_modern_bar(surface, progress, rect, color) -> int:
    """Draw a vertical bar with 25/50/75% marks; return the filled height."""
    left, top, right, bottom = rect
    pygame.draw.rect(
        surface,
        BAR_FRAME_COLOR,
        pygame.Rect(left - 5, top - 10, right - left + 10, bottom - top + 20),
    )
    pygame.draw.rect(surface, BAR_TRACK_COLOR, pygame.Rect(left, top, right - left, bottom - top))

    fill_height = int(progress / MAX_PROGRESS * BAR_HEIGHT)
    if fill_height > 0:
        pygame.draw.rect(
            surface, color, pygame.Rect(left, bottom - fill_height, right - left, fill_height)
        )

    for percent in (25, 50, 75):
        line_y = bottom - int(percent / 100 * BAR_HEIGHT)
        pygame.draw.line(surface, WHITE, (left, line_y), (right, line_y), 2)
        _text(surface, f"{percent}%", (right + 5, line_y - 9), 18, WHITE)
    return fill_height


def _status_messages(state) -> list[tuple[str, tuple[int, int], tuple[int, int, int]]]:
    messages = []
    if state.is_overheat:
        messages.append((OVERHEAT_MESSAGE, (WIDTH // 2 - 100, 50), WARNING_COLOR))
    elif is_at_obstacle(state.drill_progress):
        text = (
            f"突破障碍... 累计钻孔 ({state.accumulated_time // 1000}/"
            f"{BREAK_TIME_MS // 1000} 秒)"
        )
        messages.append((text, (WIDTH // 2 - 180, 100), HINT_COLOR))
    return messages


def draw_game_ui(surface, state) -> list[str]:
    """Draw both bars, their labels and any status text; return that text."""
    draw_modern_bar(surface, state.heat_progress, HEAT_BAR_RECT, HEAT_COLOR)
    draw_modern_bar(surface, state.drill_progress, DRILL_BAR_RECT, DRILL_COLOR)
    _text(surface, "HEAT", (HEAT_BAR_RECT[0] - 10, HEAT_BAR_RECT[1] - 40), 25, WHITE)
    _text(surface, "DRILL", (DRILL_BAR_RECT[0] - 10, DRILL_BAR_RECT[1] - 40), 25, WHITE)

    messages = _status_messages(state)
    for text, pos, color in messages:
        _text(surface, text, pos, 30, color)
    return [text for text, _, _ in messages]


def draw_start_interface(surface, background) -> None:
    """Draw the title screen with its two buttons over an optional image."""
    if background is not None:
        surface.blit(pygame.transform.scale(background, MENU_SIZE), (0, 0))
    else:
        surface.fill(BLACK)

    band_top = _BUTTONS_TOP - 20
    band_bottom = _BUTTONS_TOP + _BUTTON_HEIGHT * 2 + _BUTTON_SPACING + 20
    pygame.draw.rect(surface, BG_BAR_COLOR, pygame.Rect(0, band_top, MENU_SIZE[0], band_bottom - band_top))

    for button in menu_buttons():
        pygame.draw.rect(surface, BUTTON_COLOR, button.rect)
        _text(surface, button.label, button.label_pos, 30, TEXT_COLOR)


def _load(path) -> pygame.Surface | None:
    try:
        return pygame.image.load(str(path))
    except (FileNotFoundError, pygame.error):
        return None


def _skip_requested() -> bool:
    for event in pygame.event.get():
        if event.type == pygame.QUIT:
            pygame.event.post(event)
            return True
        if event.type == pygame.KEYDOWN and event.key == pygame.K_SPACE:
            return True
    return False


def play_story(screen, frames, x, y) -> int:
    """Show frames at about 60 per second; space skips. Return frames shown.

    A quit request also stops playback and is left in the event queue.
    """
    clock = pygame.time.Clock()
    shown = 0
    for path in frames:
        screen.fill(BLACK)
        image = _load(path)
        if image is not None:
            screen.blit(image, (x, y))
        if pygame.display.get_surface() is screen:
            pygame.display.flip()
        shown += 1
        if _skip_requested():
            break
        clock.tick(FRAME_RATE)
    return shown