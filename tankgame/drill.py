"""Heat and drill progress logic of the lock-breaking stage."""

from __future__ import annotations

from dataclasses import dataclass

from tankgame.world import MAX_PROGRESS, MOVE_DOWN_RATE, MOVE_UP_RATE

OBSTACLES = (25, 50, 75)
BREAK_TIME_MS = 5000


def is_at_obstacle(progress) -> bool:
    """True when the drill sits on one of the obstacle lines."""
    return progress in OBSTACLES


def can_break_obstacle(state) -> bool:
    return state.accumulated_time >= BREAK_TIME_MS


def _cool(value: int, rate: float) -> int:
    return int(max(value - rate, 0))


@dataclass
class DrillState:
    """State of the drill stage, advanced once per frame."""

    heat_progress: int = 0
    drill_progress: int = 0
    is_overheat: bool = False
    line_hit_time: int = 0
    current_line: int = 0
    accumulated_time: int = 0
    anim_frame: int = 0
    is_anim_playing: bool = False

    def update(self, key_down, delta_ms) -> None:
        """Advance one frame given whether the drill key is held."""
        if self.is_overheat:
            self.heat_progress = _cool(self.heat_progress, MOVE_DOWN_RATE * 2)
            if self.heat_progress == 0:
                self.is_overheat = False
            self.is_anim_playing = False
            return

        if not key_down:
            self.heat_progress = _cool(self.heat_progress, MOVE_DOWN_RATE)
            self.is_anim_playing = False
            return

        self.heat_progress = min(self.heat_progress + MOVE_UP_RATE, MAX_PROGRESS)
        if self.heat_progress >= MAX_PROGRESS:
            self.is_overheat = True
            return

        if not self.is_anim_playing:
            self.is_anim_playing = True
            self.anim_frame = 0

        if is_at_obstacle(self.drill_progress):
            if self.current_line != self.drill_progress:
                self.current_line = self.drill_progress
                self.accumulated_time = 0
            self.accumulated_time += delta_ms
            if can_break_obstacle(self):
                self.drill_progress += 1
                self.accumulated_time = 0
        else:
            self.drill_progress = min(self.drill_progress + 1, MAX_PROGRESS)
            if is_at_obstacle(self.drill_progress):
                self.current_line = self.drill_progress
                self.accumulated_time = 0

    def remaining_seconds(self) -> int:
        """Whole seconds, rounded up, still needed to break the obstacle."""
        remain = max(BREAK_TIME_MS - self.accumulated_time, 0)
        return -(-remain // 1000)


@dataclass
class ProgressBar:
    """A bar that rises while a key is held and falls back otherwise."""

    progress: int = 0
    at_max: bool = False

    def update(self, key_down) -> tuple[int, bool]:
        """Advance one frame; return the progress and the forced-fall flag."""
        if key_down and not self.at_max and self.progress < MAX_PROGRESS:
            self.progress += MOVE_UP_RATE
            if self.progress >= MAX_PROGRESS:
                self.progress = MAX_PROGRESS
                self.at_max = True

        if self.at_max:
            self.progress = int(self.progress - MOVE_DOWN_RATE)
            if self.progress <= 0:
                self.progress = 0
                self.at_max = False
        elif self.progress > 0:
            self.progress = max(int(self.progress - MOVE_DOWN_RATE), 0)
        return self.progress, self.at_max