import pytest

from tankgame.drill import (
    BREAK_TIME_MS,
    DrillState,
    ProgressBar,
    can_break_obstacle,
    is_at_obstacle,
)
from tankgame.world import MAX_PROGRESS, MOVE_UP_RATE


@pytest.mark.parametrize("progress", [25, 50, 75])
def test_obstacle_lines(progress):
    assert is_at_obstacle(progress) is True


@pytest.mark.parametrize("progress", [0, 24, 26, 100])
def test_not_obstacle(progress):
    assert is_at_obstacle(progress) is False


def test_can_break_obstacle_threshold():
    assert can_break_obstacle(DrillState(accumulated_time=BREAK_TIME_MS)) is True
    assert can_break_obstacle(DrillState(accumulated_time=BREAK_TIME_MS - 1)) is False


def test_key_down_heats_and_drills():
    state = DrillState()
    state.update(True, 33)
    assert state.heat_progress == MOVE_UP_RATE
    assert state.drill_progress == 1
    assert state.is_anim_playing is True


def test_key_up_cools_and_stops_animation():
    state = DrillState(heat_progress=10, is_anim_playing=True)
    state.update(False, 33)
    assert 0 <= state.heat_progress < 10
    assert state.is_anim_playing is False


def test_cooling_never_goes_negative():
    state = DrillState(heat_progress=1)
    state.update(False, 33)
    assert state.heat_progress == 0


def test_reaching_max_heat_overheats_without_drilling():
    state = DrillState(heat_progress=MAX_PROGRESS - 1, drill_progress=10)
    state.update(True, 33)
    assert state.is_overheat is True
    assert state.heat_progress == MAX_PROGRESS
    assert state.drill_progress == 10


def test_overheat_blocks_drilling_until_cool():
    state = DrillState(heat_progress=MAX_PROGRESS, is_overheat=True, drill_progress=10)
    for _ in range(200):
        state.update(True, 33)
        if not state.is_overheat:
            break
        assert state.drill_progress == 10
    assert state.is_overheat is False
    assert state.heat_progress == 0


def test_obstacle_needs_accumulated_time():
    state = DrillState(drill_progress=24)
    state.update(True, 10)
    assert state.drill_progress == 25
    assert state.current_line == 25
    assert state.accumulated_time == 0

    state.heat_progress = 0
    state.update(True, BREAK_TIME_MS - 1)
    assert state.drill_progress == 25
    assert state.accumulated_time == BREAK_TIME_MS - 1

    state.heat_progress = 0
    state.update(True, 1)
    assert state.drill_progress == 26
    assert state.accumulated_time == 0


def test_drill_progress_capped_at_max():
    state = DrillState(drill_progress=MAX_PROGRESS)
    state.update(True, 10)
    assert state.drill_progress == MAX_PROGRESS


def test_remaining_seconds_rounds_up():
    assert DrillState(accumulated_time=0).remaining_seconds() == 5
    assert DrillState(accumulated_time=4001).remaining_seconds() == 1
    assert DrillState(accumulated_time=BREAK_TIME_MS).remaining_seconds() == 0


def test_progress_bar_hitting_max_forces_fall():
    bar = ProgressBar(progress=MAX_PROGRESS - 1)
    progress, at_max = bar.update(True)
    assert at_max is True
    assert progress < MAX_PROGRESS


def test_progress_bar_forced_fall_ignores_key_and_resets():
    bar = ProgressBar(progress=3, at_max=True)
    seen = []
    for _ in range(10):
        seen.append(bar.update(True))
    assert all(p >= 0 for p, _ in seen)
    assert seen[-1] == (0, False)


def test_progress_bar_falls_without_key():
    bar = ProgressBar(progress=10)
    progress, at_max = bar.update(False)
    assert progress < 10
    assert at_max is False


def test_progress_bar_stays_at_zero_when_idle():
    bar = ProgressBar()
    assert bar.update(False) == (0, False)