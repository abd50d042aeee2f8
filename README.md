# tankgame

tankgame is a small arcade adventure built on pygame. A run of the game goes through these stages in order:

1. **Login.** Type a user name and a password. Tab switches between the two fields. Backspace deletes a character. Enter submits the form.
   - If the user file is missing or empty, the first account you enter is registered in it.
   - If the file already has accounts, only a listed name and password pair is accepted. A wrong pair clears both fields.
   - Esc skips the login and the start menu, and the game goes straight on to the first cutscene.
2. **Start menu.** Click "开始游戏" to start the game, or "结束游戏" to quit.
3. **Cutscene.** A sequence of story frames plays with its sound. Press Space to skip it.
4. **Two maze levels.** Steer a small square with W, A, S and D. Each key press sets the direction, and the square keeps moving that way. If the square touches a hazard area, a failure picture is shown and the square goes back to the start of the level. Reaching a goal area finishes the level.
5. **Cutscene.** A second story sequence plays.
6. **Lock drilling.**
   - Hold W to drill. Drilling raises the heat gauge.
   - When the heat gauge reaches 100, the drill overheats. It must cool down to zero before you can drill again.
   - At 25%, 50% and 75% the drill has to be held against the obstacle for a total of five seconds before it can move on.
   - The stage ends when the drill reaches 100%. Pressing Q also ends it.
7. **Cutscene.** A third story sequence plays.
8. **Tank battle.** Move with W, A, S and D, and fire with Space.
   - Firing has a 180 ms cooldown.
   - Enemy tanks come in waves of growing size.
   - You win once six enemies are destroyed. If your tank is destroyed, the game is over.
   - After either message, press any key to end the game.

Closing the window ends the game at any stage.

## Installing

```
pip install .
```

## Running

```
tankgame
```

The game keeps its accounts in `user.txt` in the working directory. To use another file, pass `--user-file`:

```
tankgame --user-file accounts.txt
```

## Assets

The package does not ship any images or sounds. The game looks for them under a `source/` directory relative to the working directory:

- `source/start.png`: the login and menu background.
- `source/1/story10000.png` and onwards, `source/2/story2000.png` and onwards, `source/4/story40000.png` and onwards: the story frames.
- `source/01.wav`, `source/02.wav`, `source/03.wav`: the cutscene sounds.
- `source/background3.png`, `source/background4.png`: the maze backgrounds.
- `source/lock/dock00.jpg` to `source/lock/dock59.jpg`: the drilling animation.
- `m0-*-*.gif` in the working directory: the tank sprites.

A missing image is replaced by a plain fill. A missing or unplayable cutscene sound is a different case. The game prints `Failed to play sound.` and stops with exit status 1.

## Using the pieces

The game rules do not depend on drawing, so you can drive them directly:

```python
import random

from tankgame.battle import Battle, new_world
from tankgame.drill import DrillState
from tankgame.maze import LEVEL_ONE, RayRunner

state = DrillState()
state.update(True, 16)          # one frame with the drill key held
print(state.drill_progress, state.heat_progress)

world = new_world()
battle = Battle(world, random.Random(0))
battle.process_input(["D", " "], now_ms=0)
battle.step()
print(battle.outcome())         # "win", "lose" or None

runner = RayRunner(LEVEL_ONE)
runner.steer("D")
print(runner.advance())         # an Outcome
```

Each module covers one part of the game:

- `tankgame.world`: the shared constants, the `Tank`, `Bullet`, `Wall` and `World` types, and `is_colliding_rect`.
- `tankgame.battle`: the tank battle rules, including player movement, enemy waves and bullet hits.
- `tankgame.drill`: `DrillState` and `ProgressBar` for the drilling stage.
- `tankgame.maze`: the two maze levels (`LEVEL_ONE`, `LEVEL_TWO`) and `RayRunner`.
- `tankgame.accounts`: `UserStore` for the account file and `LoginForm` for the form's fields.
- `tankgame.render`: the pygame drawing routines and `play_story`.
- `tankgame.app`: the screens and `main`.

## What it does not do

- There is no saving of progress. Every run starts again from the login.
- Passwords are stored in the user file as plain text.

## Tests

```
pip install .[test]
pytest
```