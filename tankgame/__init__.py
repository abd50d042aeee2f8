"""An arcade adventure: login, cutscenes, maze levels, lock drilling and a tank battle."""

__version__ = "0.1.0"